from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from crossword_sync import models
from crossword_sync.core.database import get_db
from crossword_sync.realtime import GridRelay


def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> models.User:
    """
    Resolve the caller. Authentication happens upstream; the auth layer
    forwards the verified user id in the X-User-Id header.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    user = db.query(models.User).filter(models.User.id == x_user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def get_relay(request: Request) -> GridRelay:
    return request.app.state.relay

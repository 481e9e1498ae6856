# import moduls/libraries
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from typing import List


# import form project
from crossword_sync import models
from crossword_sync.core.database import get_db
from crossword_sync.core.dependencies import get_current_user, get_relay
from crossword_sync.realtime import GridRelay
from crossword_sync.schemas import (
    SessionCreate, SessionRead, SessionDetail, ProgressSave, ProgressRead, ParticipantActivity,
)
from crossword_sync.services import SessionService


router = APIRouter()


# sessions owned or joined by the caller
@router.get("", response_model=List[SessionRead])
def get_sessions(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    services = SessionService(db)
    return services.get_user_sessions(user)


# start solving
@router.post("", response_model=SessionRead)
def create_session(
    session_data: SessionCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    """Create a session with an empty grid"""
    services = SessionService(db)
    return services.create_session(user, session_data)


@router.get("/{session_id}", response_model=SessionDetail)
def get_session(session_id: str, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    """Session with puzzle, progress and participants. Collaborative sessions auto-enroll the caller"""
    services = SessionService(db)
    return services.get_session_detail(session_id, user)


@router.post("/{session_id}/join")
def join_session(session_id: str, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    """Join a collaborative session"""
    services = SessionService(db)
    services.join_session(session_id, user)
    return {"message": "Joined session"}


@router.get("/{session_id}/participants", response_model=List[ParticipantActivity])
def get_participants(
    session_id: str,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    services = SessionService(db)
    return services.get_participants_activity(session_id, user)


# Save progress (autosave) and push it to live participants
@router.post("/{session_id}/progress", response_model=ProgressRead)
async def save_progress(
    session_id: str,
    payload: ProgressSave,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
    relay: GridRelay = Depends(get_relay),
):
    services = SessionService(db)
    progress = await run_in_threadpool(services.save_progress, session_id, user, payload.grid)
    await relay.publish_progress(progress.session_id, progress.grid, progress.updated_by)
    return progress


@router.post("/{session_id}/submit", response_model=ProgressRead)
def submit_session(session_id: str, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    services = SessionService(db)
    return services.submit_session(session_id, user)


# API Delete Request
@router.delete("/{session_id}")
def delete_session(session_id: str, db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    """Delete a session with its progress and participants"""
    services = SessionService(db)
    services.delete_session(session_id, user)
    return {"message": "Session deleted"}

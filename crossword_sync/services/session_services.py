import logging
from datetime import datetime, timezone
from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

from crossword_sync import models
from crossword_sync.schemas import (
    SessionCreate, SessionDetail, SessionRead, PuzzleRead, ProgressRead, ParticipantRead, ParticipantActivity,
)
from crossword_sync.services.puzzle_services import PuzzleServices, empty_grid

logger = logging.getLogger(__name__)


def _now():
    return datetime.now(timezone.utc)


class SessionService:
    """
    Solving sessions, their participants and the persisted grid.

    Access rule shared by every session endpoint: the owner and existing
    participants are let in, anyone else is auto-enrolled on a collaborative
    session and refused on a solo one.
    """

    def __init__(self, db):
        self.db = db

    def get_session(self, session_id: str) -> models.Session:
        session = self.db.query(models.Session).filter(models.Session.id == session_id).first()
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        return session

    def get_user_sessions(self, user: models.User) -> List[models.Session]:
        """Sessions the user owns or participates in, newest first"""
        owned = self.db.query(models.Session).filter(models.Session.owner_id == user.id).all()
        joined = (self.db.query(models.Session)
                  .join(models.Participant, models.Participant.session_id == models.Session.id)
                  .filter(models.Participant.user_id == user.id)
                  .all())
        sessions = {session.id: session for session in owned + joined}
        return sorted(sessions.values(), key=lambda s: s.created_at or _now(), reverse=True)

    def create_session(self, user: models.User, session_data: SessionCreate) -> models.Session:
        """Start solving: session, owner participant and an all-empty grid"""
        puzzle = PuzzleServices(self.db).get_puzzle_by_id(session_data.puzzle_id)

        session = models.Session(
            puzzle_id=puzzle.id,
            owner_id=user.id,
            name=session_data.name or f"{puzzle.title} - {_now():%Y-%m-%d}",
            is_collaborative=session_data.is_collaborative,
            difficulty=session_data.difficulty,
        )
        self.db.add(session)
        self.db.flush()

        self.db.add(models.Participant(session_id=session.id, user_id=user.id))
        self.db.add(models.Progress(
            session_id=session.id,
            grid=empty_grid(puzzle.rows, puzzle.cols),
            updated_by=user.id,
        ))
        self.db.commit()
        self.db.refresh(session)
        logger.info("User %s started session %s on puzzle %s (collaborative=%s)",
                    user.id, session.id, puzzle.id, session.is_collaborative)
        return session

    def is_participant(self, session_id: str, user_id: str) -> bool:
        participant = (self.db.query(models.Participant)
                       .filter(models.Participant.session_id == session_id,
                               models.Participant.user_id == user_id)
                       .first())
        return participant is not None

    def add_participant(self, session_id: str, user_id: str) -> bool:
        """Enroll a user; enrolling twice is a no-op. Returns whether a row was added"""
        if self.is_participant(session_id, user_id):
            return False
        self.db.add(models.Participant(session_id=session_id, user_id=user_id))
        try:
            self.db.commit()
        except IntegrityError:
            # a concurrent request enrolled the same user first
            self.db.rollback()
            return False
        logger.info("User %s enrolled in session %s", user_id, session_id)
        return True

    def ensure_access(self, session: models.Session, user: models.User) -> None:
        if session.owner_id == user.id or self.is_participant(session.id, user.id):
            return
        if not session.is_collaborative:
            logger.warning("User %s denied access to session %s", user.id, session.id)
            raise HTTPException(status_code=403, detail="Access denied")
        self.add_participant(session.id, user.id)

    def get_session_detail(self, session_id: str, user: models.User) -> SessionDetail:
        """Session with its puzzle, current grid and participants"""
        session = self.get_session(session_id)
        self.ensure_access(session, user)

        progress = self.get_progress(session.id)
        participants = (self.db.query(models.Participant)
                        .filter(models.Participant.session_id == session.id)
                        .all())
        return SessionDetail(
            session=SessionRead.model_validate(session),
            puzzle=PuzzleRead.model_validate(session.puzzle),
            progress=ProgressRead.model_validate(progress) if progress else None,
            participants=[ParticipantRead.model_validate(p) for p in participants],
        )

    def join_session(self, session_id: str, user: models.User) -> None:
        """Explicit join of a collaborative session"""
        session = self.get_session(session_id)
        if not session.is_collaborative:
            raise HTTPException(status_code=403, detail="This is not a collaborative session")
        if session.owner_id != user.id:
            self.add_participant(session.id, user.id)

    def get_participants_activity(self, session_id: str, user: models.User) -> List[ParticipantActivity]:
        session = self.get_session(session_id)
        self.ensure_access(session, user)
        rows = (self.db.query(models.Participant, models.User)
                .join(models.User, models.Participant.user_id == models.User.id)
                .filter(models.Participant.session_id == session.id)
                .all())
        return [
            ParticipantActivity(
                id=member.id,
                first_name=member.first_name,
                email=member.email,
                joined_at=participant.joined_at,
                last_activity=participant.last_activity,
            )
            for participant, member in rows
        ]

    def get_progress(self, session_id: str):
        return self.db.query(models.Progress).filter(models.Progress.session_id == session_id).first()

    def save_progress(self, session_id: str, user: models.User, grid: List[List[str]]) -> models.Progress:
        """
        Overwrite the session's grid with the caller's copy. Last write wins: no
        version check, no merge with what is stored.
        """
        session = self.get_session(session_id)
        self.ensure_access(session, user)

        puzzle = session.puzzle
        if len(grid) != puzzle.rows or any(len(row) != puzzle.cols for row in grid):
            raise HTTPException(
                status_code=422,
                detail=f"Grid must be {puzzle.rows}x{puzzle.cols}",
            )

        progress = self.get_progress(session.id)
        if progress is None:
            progress = models.Progress(session_id=session.id)
            self.db.add(progress)
        progress.grid = grid
        progress.updated_by = user.id
        progress.updated_at = _now()

        self.touch_activity(session.id, user.id)
        self.db.commit()
        self.db.refresh(progress)
        logger.debug("Saved progress for session %s by user %s", session.id, user.id)
        return progress

    def touch_activity(self, session_id: str, user_id: str) -> None:
        """Stamp last activity, enrolling the user if the row is missing (legacy owners)"""
        participant = (self.db.query(models.Participant)
                       .filter(models.Participant.session_id == session_id,
                               models.Participant.user_id == user_id)
                       .first())
        if participant is None:
            participant = models.Participant(session_id=session_id, user_id=user_id)
            self.db.add(participant)
        participant.last_activity = _now()

    def submit_session(self, session_id: str, user: models.User) -> models.Progress:
        """Mark the grid as submitted. The first timestamp is kept"""
        session = self.get_session(session_id)
        self.ensure_access(session, user)

        progress = self.get_progress(session.id)
        if progress is None:
            raise HTTPException(status_code=404, detail="Progress not found")
        if progress.submitted_at is None:
            progress.submitted_at = _now()
            self.db.commit()
            self.db.refresh(progress)
            logger.info("Session %s submitted by user %s", session.id, user.id)
        return progress

    def delete_session(self, session_id: str, user: models.User) -> None:
        """Owner or admin only; progress and participants go with it"""
        session = self.get_session(session_id)
        if session.owner_id != user.id and user.role != "admin":
            raise HTTPException(status_code=403, detail="Only the owner or an admin can delete a session")
        self.db.delete(session)
        self.db.commit()
        logger.info("Session %s deleted by user %s", session_id, user.id)

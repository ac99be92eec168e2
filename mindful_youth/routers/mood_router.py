# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from mindful_youth.auth import AuthState, get_auth_state
from mindful_youth.models.database import get_db, SessionLocal
from mindful_youth.schemas.mood_schemas import MoodEntryCreateRequest
from mindful_youth.services.mood_service import (
    add_mood_entry,
    list_mood_entries,
    serialize_mood_entry,
    checkin_streak,
)
from mindful_youth.services.snapshot_feed import feed, mood_topic, to_sse

router = APIRouter(prefix="/mood", tags=["Mood"])


def _mood_snapshot(db: Session, user_id: int) -> dict:
    entries = list_mood_entries(db, user_id)
    return {
        "entries": [serialize_mood_entry(e) for e in entries],
        "streak": checkin_streak(entries),
    }


@router.get("/entries")
def get_entries(db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    return _mood_snapshot(db, auth_state.user_id)


@router.post("/entries", status_code=201)
def create_entry(
    payload: MoodEntryCreateRequest,
    db: Session = Depends(get_db),
    auth_state: AuthState = Depends(get_auth_state),
):
    entry = add_mood_entry(db, auth_state.user_id, payload.mood, payload.journal)
    return {
        "message": "✅ Mood entry saved",
        "entry": serialize_mood_entry(entry),
    }


@router.get("/entries/stream")
def stream_entries(auth_state: AuthState = Depends(get_auth_state)):
    user_id = auth_state.user_id

    def load():
        # The request's session is gone once streaming starts
        db = SessionLocal()
        try:
            return _mood_snapshot(db, user_id)
        finally:
            db.close()

    return StreamingResponse(
        to_sse(feed.stream(mood_topic(user_id), load)),
        media_type="text/event-stream",
    )

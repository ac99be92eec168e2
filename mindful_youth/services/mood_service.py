# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from mindful_youth.models.mood import MoodEntry, MoodLabel
from mindful_youth.services.snapshot_feed import feed, mood_topic

logger = logging.getLogger(__name__)

# Newest check-in must be younger than this for the streak to count every entry
STREAK_WINDOW = timedelta(days=2)


def serialize_mood_entry(entry: MoodEntry) -> dict:
    return {
        "id": entry.id,
        "mood": entry.mood.value,
        "journal": entry.journal or "",
        "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
    }


def add_mood_entry(db: Session, user_id: int, mood: MoodLabel, journal: Optional[str] = "") -> MoodEntry:
    entry = MoodEntry(
        user_id=user_id,
        mood=mood,
        journal=journal or "",
        timestamp=datetime.utcnow(),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    feed.publish(mood_topic(user_id))
    logger.info("🙂 Mood entry saved for user %s (%s)", user_id, mood.value)
    return entry


def list_mood_entries(db: Session, user_id: int) -> List[MoodEntry]:
    return (
        db.query(MoodEntry)
        .filter(MoodEntry.user_id == user_id)
        .order_by(MoodEntry.timestamp.desc(), MoodEntry.id.desc())
        .all()
    )


def checkin_streak(entries: List[MoodEntry], now: Optional[datetime] = None) -> int:
    """Entries are newest first, as returned by ``list_mood_entries``."""
    if not entries:
        return 0
    now = now or datetime.utcnow()
    if now - entries[0].timestamp < STREAK_WINDOW:
        return len(entries)
    return 1

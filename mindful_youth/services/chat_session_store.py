# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Per-user chat state: which session is active and what the chat view shows.

Messages are shown before they are written (``pending``), then resolved in
place to ``confirmed`` once stored. A failed write marks the entry ``failed``
and takes it back off the display; nothing is retried, the user re-sends.
"""

import enum
import logging
import os
import threading
import time
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

GREETING_ID = "initial"
GREETING_TEXT = "Hello! I'm here to listen and support you. How are you feeling today?"
DEFAULT_SESSION_TITLE = "New Conversation"
TITLE_PREVIEW_LENGTH = 35

# Cached per-user chat state; everything evicted reloads from the database
CHAT_STORE_MAX_USERS = int(os.getenv("CHAT_STORE_MAX_USERS", "1000"))
CHAT_STORE_IDLE_SECONDS = float(os.getenv("CHAT_STORE_IDLE_SECONDS", "900"))


class ChatPersistenceError(Exception):
    """A chat write did not reach the database; local state has been rolled back."""


class UnknownSessionError(LookupError):
    pass


class SyncStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    failed = "failed"


@dataclass
class DisplayMessage:
    id: str
    role: str
    content: str
    status: SyncStatus = SyncStatus.confirmed

    @property
    def is_saving(self) -> bool:
        return self.status == SyncStatus.pending

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "status": self.status.value,
            "is_saving": self.is_saving,
        }


@dataclass
class StoredMessage:
    id: int
    role: str
    content: str
    timestamp: Optional[datetime] = None


@dataclass
class StoredSession:
    id: int
    user_id: int
    created_at: Optional[datetime]
    name: Optional[str] = None
    messages: List[StoredMessage] = field(default_factory=list)

    @classmethod
    def from_model(cls, session) -> "StoredSession":
        return cls(
            id=session.id,
            user_id=session.user_id,
            created_at=session.created_at,
            name=session.name,
            messages=[StoredMessage(m.id, m.role, m.content, m.timestamp) for m in session.messages],
        )


def greeting_message() -> DisplayMessage:
    return DisplayMessage(id=GREETING_ID, role="assistant", content=GREETING_TEXT)


def session_title(session: StoredSession) -> str:
    if session.name:
        return session.name
    first_user_message = next((m for m in session.messages if m.role == "user"), None)
    if first_user_message and first_user_message.content:
        return first_user_message.content[:TITLE_PREVIEW_LENGTH]
    return DEFAULT_SESSION_TITLE


class ChatSessionStore:
    def __init__(self, user_id: int, persistence=None):
        self.user_id = user_id
        # Rebound per request to a ChatHistoryService on that request's DB session
        self.persistence = persistence
        self.sessions: List[StoredSession] = []
        self.active_chat_id: Optional[int] = None
        self.messages: List[DisplayMessage] = [greeting_message()]
        self.is_loading = False
        self.loaded = False
        self._lock = threading.RLock()

    # ---------- queries ----------

    def get_session(self, session_id: int) -> StoredSession:
        for session in self.sessions:
            if session.id == session_id:
                return session
        raise UnknownSessionError(session_id)

    @property
    def active_session(self) -> Optional[StoredSession]:
        if self.active_chat_id is None:
            return None
        return self.get_session(self.active_chat_id)

    def showing_greeting(self) -> bool:
        return len(self.messages) == 1 and self.messages[0].id == GREETING_ID

    def history(self) -> List[dict]:
        """Answered turns of the active session, oldest first, strictly user/assistant alternating.

        A user turn whose reply was never stored (the user re-sent it) is left out.
        """
        session = self.active_session
        if session is None:
            return []
        turns: List[dict] = []
        for m in session.messages:
            expected = "user" if not turns or turns[-1]["role"] == "assistant" else "assistant"
            if m.role != expected:
                if m.role == "user":
                    # Earlier user turn went unanswered
                    turns.pop()
                else:
                    continue
            turns.append({"role": m.role, "content": m.content})
        if turns and turns[-1]["role"] == "user":
            turns.pop()
        return turns

    def snapshot(self) -> dict:
        return {
            "active_chat_id": self.active_chat_id,
            "is_loading": self.is_loading,
            "sessions": [
                {
                    "id": s.id,
                    "title": session_title(s),
                    "name": s.name,
                    "created_at": s.created_at.isoformat() if s.created_at else "",
                    "message_count": len(s.messages),
                }
                for s in self.sessions
            ],
            "messages": [m.to_dict() for m in self.messages],
        }

    # ---------- operations ----------

    def load_sessions(self):
        with self._lock:
            self.is_loading = True
            try:
                rows = self.persistence.get_user_chat_sessions(self.user_id)
            finally:
                self.is_loading = False
            self.sessions = [StoredSession.from_model(row) for row in rows]
            self.loaded = True
            if self.sessions:
                self._show_session(self.sessions[0])
            else:
                self.active_chat_id = None
                self.messages = [greeting_message()]

    def create_session(self) -> StoredSession:
        with self._lock:
            self.is_loading = True
            try:
                row = self.persistence.create_chat_session(self.user_id)
            finally:
                self.is_loading = False
            session = StoredSession.from_model(row)
            self.sessions.insert(0, session)
            self.active_chat_id = session.id
            self.messages = [greeting_message()]
            logger.info("💬 Chat session %s created for user %s", session.id, self.user_id)
            return session

    def refresh_sessions(self):
        """Refetch the session list, keeping the active session open if it still exists."""
        with self._lock:
            rows = self.persistence.get_user_chat_sessions(self.user_id)
            self.sessions = [StoredSession.from_model(row) for row in rows]
            if self.active_chat_id is not None and not any(s.id == self.active_chat_id for s in self.sessions):
                if self.sessions:
                    self._show_session(self.sessions[0])
                else:
                    self.active_chat_id = None
                    self.messages = [greeting_message()]

    def select_session(self, session_id: int) -> StoredSession:
        with self._lock:
            session = self._lookup_session(session_id)
            self._show_session(session)
            return session

    def append_message(self, role: str, text: str) -> DisplayMessage:
        with self._lock:
            if self.active_chat_id is None:
                self.create_session()
            session = self.active_session

            entry = DisplayMessage(
                id=f"pending-{uuid.uuid4().hex}",
                role=role,
                content=text,
                status=SyncStatus.pending,
            )
            before = list(self.messages)
            self.messages = [entry] if self.showing_greeting() else before + [entry]

            self.is_loading = True
            try:
                stored = self.persistence.add_message_to_chat(session.id, role, text, self.user_id)
            except Exception as exc:
                logger.exception("❌ Failed to save %s message to chat %s", role, session.id)
                entry.status = SyncStatus.failed
                self.messages = before
                raise ChatPersistenceError("Failed to save message") from exc
            finally:
                self.is_loading = False

            entry.id = str(stored.id)
            entry.status = SyncStatus.confirmed
            session.messages.append(StoredMessage(stored.id, role, text, stored.timestamp))
            return entry

    def delete_session(self, session_id: int):
        with self._lock:
            self._lookup_session(session_id)
            self.persistence.delete_chat_session(session_id)
            self.sessions = [s for s in self.sessions if s.id != session_id]

            if self.active_chat_id == session_id:
                if self.sessions:
                    self._show_session(self.sessions[0])
                else:
                    self.active_chat_id = None
                    self.messages = [greeting_message()]
            logger.info("🗑️ Chat session %s deleted for user %s", session_id, self.user_id)

    def rename_session(self, session_id: int, name: str):
        with self._lock:
            session = self._lookup_session(session_id)
            previous = session.name
            session.name = name
            try:
                self.persistence.rename_chat_session(session_id, name)
            except Exception as exc:
                logger.exception("❌ Failed to rename chat %s", session_id)
                session.name = previous
                raise ChatPersistenceError("Failed to rename chat") from exc

    def _lookup_session(self, session_id: int) -> StoredSession:
        try:
            return self.get_session(session_id)
        except UnknownSessionError:
            if self.persistence is None:
                raise
        # Possibly created through another worker since this store loaded
        self.refresh_sessions()
        return self.get_session(session_id)

    def _show_session(self, session: StoredSession):
        self.active_chat_id = session.id
        shown = [DisplayMessage(id=str(m.id), role=m.role, content=m.content) for m in session.messages]
        self.messages = shown or [greeting_message()]


class ChatStoreRegistry:
    """Per-user stores, bounded by idle time and by count.

    A store idle longer than ``idle_seconds`` is dropped, and past
    ``max_stores`` the least recently used idle store goes first. A dropped
    user simply reloads from the database on their next request. Stores
    checked out by a request are never evicted.
    """

    def __init__(
        self,
        max_stores: int = CHAT_STORE_MAX_USERS,
        idle_seconds: float = CHAT_STORE_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_stores = max(1, max_stores)
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._stores: "OrderedDict[int, ChatSessionStore]" = OrderedDict()
        self._last_used: Dict[int, float] = {}
        self._in_use: Dict[int, int] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)

    def __contains__(self, user_id: int) -> bool:
        with self._lock:
            return user_id in self._stores

    @contextmanager
    def checkout(self, user_id: int, persistence) -> Iterator[ChatSessionStore]:
        """Hold the user's store, bound to ``persistence``, for one request.

        Requests from the same user are serialized so a reply is always
        appended after the message it answers.
        """
        with self._lock:
            store = self._stores.get(user_id)
            if store is None:
                store = ChatSessionStore(user_id)
                self._stores[user_id] = store
            self._stores.move_to_end(user_id)
            self._in_use[user_id] = self._in_use.get(user_id, 0) + 1
            self._evict()
        try:
            with store._lock:
                store.persistence = persistence
                try:
                    if not store.loaded:
                        store.load_sessions()
                    yield store
                finally:
                    store.persistence = None
        finally:
            with self._lock:
                remaining = self._in_use.get(user_id, 1) - 1
                if remaining:
                    self._in_use[user_id] = remaining
                else:
                    self._in_use.pop(user_id, None)
                if self._stores.get(user_id) is store:
                    self._last_used[user_id] = self._clock()

    def evict_idle(self) -> int:
        with self._lock:
            return self._evict()

    def _evict(self) -> int:
        # Caller holds self._lock
        now = self._clock()
        dropped = [
            user_id for user_id in self._stores
            if user_id not in self._in_use
            and now - self._last_used.get(user_id, now) > self.idle_seconds
        ]
        overflow = len(self._stores) - len(dropped) - self.max_stores
        if overflow > 0:
            for user_id in self._stores:
                if overflow <= 0:
                    break
                if user_id in self._in_use or user_id in dropped:
                    continue
                dropped.append(user_id)
                overflow -= 1
        for user_id in dropped:
            self._forget(user_id)
        if dropped:
            logger.info("🧹 Evicted %d cached chat stores", len(dropped))
        return len(dropped)

    def _forget(self, user_id: int):
        self._stores.pop(user_id, None)
        self._last_used.pop(user_id, None)

    def discard(self, user_id: int):
        with self._lock:
            self._forget(user_id)

    def clear(self):
        with self._lock:
            self._stores.clear()
            self._last_used.clear()


chat_stores = ChatStoreRegistry()

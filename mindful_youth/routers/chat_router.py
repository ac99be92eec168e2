# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from mindful_youth.auth import AuthState, get_auth_state
from mindful_youth.models.database import get_db
from mindful_youth.schemas.chat_schemas import SendMessageRequest, RenameSessionRequest, ChatStateOut
from mindful_youth.services.chat_history_service import ChatHistoryService
from mindful_youth.services.chat_session_store import (
    chat_stores,
    ChatPersistenceError,
    UnknownSessionError,
)
from mindful_youth.services.support_chat_flow import ai_anonymized_support_chat
from mindful_youth.utils.prompt_templates import CHAT_APOLOGY_TEXT
from mindful_youth.utils.rate_limit_utils import limiter, CHAT_RATE_LIMIT

router = APIRouter(prefix="/chat", tags=["Chat"])
logger = logging.getLogger(__name__)


def _persistence_failed(store, message: str = "Failed to save message. Please try sending it again."):
    return HTTPException(
        status_code=502,
        detail={"message": message, "state": store.snapshot()},
    )


def _session_not_found():
    return HTTPException(status_code=404, detail="Chat session not found")


@router.get("/sessions", response_model=ChatStateOut)
def list_sessions(db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    with chat_stores.checkout(auth_state.user_id, ChatHistoryService(db)) as store:
        return store.snapshot()


@router.post("/sessions/load", response_model=ChatStateOut)
def reload_sessions(db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    """Refetch sessions from the database and reopen the most recent one."""
    with chat_stores.checkout(auth_state.user_id, ChatHistoryService(db)) as store:
        store.load_sessions()
        return store.snapshot()


@router.post("/sessions", response_model=ChatStateOut, status_code=201)
def create_session(db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    with chat_stores.checkout(auth_state.user_id, ChatHistoryService(db)) as store:
        store.create_session()
        return store.snapshot()


@router.post("/sessions/{session_id}/select", response_model=ChatStateOut)
def select_session(
    session_id: int,
    db: Session = Depends(get_db),
    auth_state: AuthState = Depends(get_auth_state),
):
    with chat_stores.checkout(auth_state.user_id, ChatHistoryService(db)) as store:
        try:
            store.select_session(session_id)
        except UnknownSessionError:
            raise _session_not_found()
        return store.snapshot()


@router.patch("/sessions/{session_id}", response_model=ChatStateOut)
def rename_session(
    session_id: int,
    payload: RenameSessionRequest,
    db: Session = Depends(get_db),
    auth_state: AuthState = Depends(get_auth_state),
):
    with chat_stores.checkout(auth_state.user_id, ChatHistoryService(db)) as store:
        try:
            store.rename_session(session_id, payload.name)
        except UnknownSessionError:
            raise _session_not_found()
        except ChatPersistenceError:
            raise _persistence_failed(store, "Failed to rename chat. Please try again.")
        return store.snapshot()


@router.delete("/sessions/{session_id}", response_model=ChatStateOut)
def delete_session(
    session_id: int,
    db: Session = Depends(get_db),
    auth_state: AuthState = Depends(get_auth_state),
):
    with chat_stores.checkout(auth_state.user_id, ChatHistoryService(db)) as store:
        try:
            store.delete_session(session_id)
        except UnknownSessionError:
            raise _session_not_found()
        return store.snapshot()


@router.get("/messages", response_model=ChatStateOut)
def get_messages(db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    with chat_stores.checkout(auth_state.user_id, ChatHistoryService(db)) as store:
        return store.snapshot()


@router.post("/messages")
@limiter.limit(CHAT_RATE_LIMIT)
def send_message(
    request: Request,
    payload: SendMessageRequest,
    db: Session = Depends(get_db),
    auth_state: AuthState = Depends(get_auth_state),
):
    with chat_stores.checkout(auth_state.user_id, ChatHistoryService(db)) as store:
        history = store.history()

        try:
            store.append_message("user", payload.message)
        except ChatPersistenceError:
            raise _persistence_failed(store)

        try:
            reply = ai_anonymized_support_chat(
                message=payload.message,
                chat_history=history,
                emotional_state=payload.emotional_state,
            )
        except Exception:
            logger.exception("❌ AI chat failed for user %s", auth_state.user_id)
            reply = CHAT_APOLOGY_TEXT

        try:
            store.append_message("assistant", reply)
        except ChatPersistenceError:
            raise _persistence_failed(store, "Reply could not be saved. Please try again.")

        return {"reply": reply, **store.snapshot()}

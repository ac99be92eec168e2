# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from datetime import datetime
from typing import List

from sqlalchemy.orm import Session, selectinload

from mindful_youth.models.chat import ChatSession, ChatMessage


class ChatHistoryService:
    """Durable chat sessions and their append-only message lists."""

    def __init__(self, db: Session):
        self.db = db

    def create_chat_session(self, user_id: int) -> ChatSession:
        session = ChatSession(user_id=user_id, created_at=datetime.utcnow())
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def add_message_to_chat(self, chat_id: int, role: str, content: str, user_id: int) -> ChatMessage:
        message = ChatMessage(
            chat_id=chat_id,
            role=role,
            content=content,
            user_id=user_id,
            timestamp=datetime.utcnow(),
        )
        try:
            self.db.add(message)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(message)
        return message

    def rename_chat_session(self, chat_id: int, new_name: str):
        try:
            self.db.query(ChatSession).filter(ChatSession.id == chat_id).update({ChatSession.name: new_name})
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get_user_chat_sessions(self, user_id: int) -> List[ChatSession]:
        """Sessions newest first, each with its messages oldest first."""
        return (
            self.db.query(ChatSession)
            .options(selectinload(ChatSession.messages))
            .filter(ChatSession.user_id == user_id)
            .order_by(ChatSession.created_at.desc(), ChatSession.id.desc())
            .all()
        )

    def delete_chat_session(self, chat_id: int):
        # Messages and the session go in one commit
        self.db.query(ChatMessage).filter(ChatMessage.chat_id == chat_id).delete(synchronize_session=False)
        self.db.query(ChatSession).filter(ChatSession.id == chat_id).delete(synchronize_session=False)
        self.db.commit()

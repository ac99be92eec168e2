# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from mindful_youth.models.database import Base
from mindful_youth.utils.encryption import EncryptedText  # ✅ Import encryption


class ChatSession(Base):
    __tablename__ = "chats"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    user = relationship("User", back_populates="chat_sessions")
    messages = relationship(
        "ChatMessage",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="ChatMessage.timestamp, ChatMessage.id",
    )


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)
    chat_id = Column(Integer, ForeignKey("chats.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    role = Column(String, nullable=False)  # 'user' or 'assistant'

    content = Column(EncryptedText, nullable=False)  # ✅ Encrypted message

    timestamp = Column(DateTime, default=datetime.utcnow, index=True)

    chat = relationship("ChatSession", back_populates="messages")

    __table_args__ = (
        Index("ix_chat_timestamp", "chat_id", "timestamp"),
    )

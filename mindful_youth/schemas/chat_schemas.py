# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Literal


class SendMessageRequest(BaseModel):
    message: str = Field(..., min_length=1)
    emotional_state: Optional[str] = None

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message cannot be empty")
        return value


class RenameSessionRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)


class DisplayMessageOut(BaseModel):
    id: str
    role: Literal["user", "assistant"]
    content: str
    status: str
    is_saving: bool


class SessionOut(BaseModel):
    id: int
    title: str
    name: Optional[str] = None
    created_at: str
    message_count: int


class ChatStateOut(BaseModel):
    active_chat_id: Optional[int] = None
    is_loading: bool = False
    sessions: List[SessionOut]
    messages: List[DisplayMessageOut]

# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from pydantic import BaseModel, Field, field_validator


class _ContentRequest(BaseModel):
    content: str = Field(..., max_length=5000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content cannot be empty")
        return value


class PostCreateRequest(_ContentRequest):
    pass


class CommentCreateRequest(_ContentRequest):
    pass

# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from mindful_youth.models.user import COUNTRIES
from mindful_youth.utils.auth_utils import MIN_PASSWORD_LENGTH


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    display_name: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdateRequest(BaseModel):
    display_name: Optional[str] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    country: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_blank_or_long_enough(cls, value):
        # Blank means "keep the current password"
        if value and len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        return value

    @field_validator("country")
    @classmethod
    def country_in_list(cls, value):
        if value and value not in COUNTRIES:
            raise ValueError(f"Country must be one of: {', '.join(COUNTRIES)}")
        return value


class ProfileResponse(BaseModel):
    id: int
    email: str
    display_name: str = ""
    photo_url: str = ""
    country: str = ""


class TokenResponse(BaseModel):
    message: str
    token: str
    user: ProfileResponse

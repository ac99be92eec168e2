# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from mindful_youth.models.user import User
from mindful_youth.utils.auth_utils import hash_password, verify_password

logger = logging.getLogger(__name__)


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "display_name": user.display_name or "",
        "photo_url": user.photo_url or "",
        "country": user.country or "",
    }


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == _normalize_email(email)).first()


def sign_up(db: Session, email: str, password: str, display_name: Optional[str] = None) -> User:
    if get_user_by_email(db, email):
        raise HTTPException(status_code=409, detail="An account with this email already exists.")

    # ✅ Profile starts empty apart from what the form gave us
    user = User(
        email=_normalize_email(email),
        password_hash=hash_password(password),
        display_name=display_name or "",
        photo_url="",
        country="",
        token_version=0,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("🆕 User %s signed up", user.id)
    return user


def sign_in(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if not user or not verify_password(user.password_hash, password):
        raise HTTPException(status_code=401, detail="Invalid email or password.")
    return user


def sign_out(db: Session, user: User):
    user.token_version = (user.token_version or 0) + 1
    db.commit()
    logger.info("👋 User %s signed out", user.id)


def update_profile(
    db: Session,
    user: User,
    display_name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
    country: Optional[str] = None,
) -> User:
    if email is not None and _normalize_email(email) != user.email:
        taken = get_user_by_email(db, email)
        if taken and taken.id != user.id:
            raise HTTPException(status_code=409, detail="An account with this email already exists.")
        user.email = _normalize_email(email)

    if display_name is not None:
        user.display_name = display_name
    if country is not None:
        user.country = country
    if password:
        user.password_hash = hash_password(password)

    db.commit()
    db.refresh(user)
    return user


def set_photo_url(db: Session, user: User, photo_url: str) -> User:
    user.photo_url = photo_url
    db.commit()
    db.refresh(user)
    return user

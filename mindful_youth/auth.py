# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from dataclasses import dataclass
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from mindful_youth.utils.jwt_utils import verify_access_token
from mindful_youth.models.database import get_db
from mindful_youth.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")  # login takes JSON; this only feeds the docs UI


@dataclass
class AuthState:
    """Signed-in user plus the claims of the token that authenticated the request.

    Handlers that need the current user take this as an explicit dependency.
    """

    user: User
    claims: dict

    @property
    def user_id(self) -> int:
        return self.user.id


def get_auth_state(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> AuthState:
    payload = verify_access_token(token)
    if payload is None:
        raise HTTPException(status_code=401, detail="❌ Invalid or expired token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="❌ Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="❌ User not found")

    if payload.get("ver") != user.token_version:
        raise HTTPException(status_code=401, detail="❌ Session has been signed out")

    return AuthState(user=user, claims=payload)

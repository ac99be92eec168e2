# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mindful_youth.auth import AuthState, get_auth_state
from mindful_youth.models.database import get_db
from mindful_youth.schemas.user_schemas import SignUpRequest, LoginRequest, TokenResponse, ProfileResponse
from mindful_youth.services import user_service
from mindful_youth.services.chat_session_store import chat_stores
from mindful_youth.utils.jwt_utils import create_user_token  # ✅ JWT added

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=TokenResponse, status_code=201)
def signup(payload: SignUpRequest, db: Session = Depends(get_db)):
    user = user_service.sign_up(db, payload.email, payload.password, payload.display_name)
    return {
        "message": "🆕 Account created",
        "token": create_user_token(user),
        "user": user_service.serialize_user(user),
    }


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = user_service.sign_in(db, payload.email, payload.password)
    return {
        "message": "🔁 Welcome back",
        "token": create_user_token(user),
        "user": user_service.serialize_user(user),
    }


@router.post("/logout")
def logout(db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    user = auth_state.user
    user_service.sign_out(db, user)
    chat_stores.discard(user.id)
    return {"message": "👋 Signed out"}


@router.get("/me", response_model=ProfileResponse)
def me(auth_state: AuthState = Depends(get_auth_state)):
    return user_service.serialize_user(auth_state.user)

# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from mindful_youth.auth import AuthState, get_auth_state
from mindful_youth.models.database import get_db
from mindful_youth.models.user import COUNTRIES
from mindful_youth.schemas.user_schemas import ProfileUpdateRequest, ProfileResponse
from mindful_youth.services import user_service
from mindful_youth.utils.profile_storage import save_profile_picture, ProfilePictureError, MAX_PROFILE_PICTURE_BYTES

router = APIRouter(prefix="/account", tags=["Account"])


@router.get("", response_model=ProfileResponse)
def get_account(auth_state: AuthState = Depends(get_auth_state)):
    return user_service.serialize_user(auth_state.user)


@router.get("/countries")
def list_countries():
    return {"countries": COUNTRIES}


@router.patch("", response_model=ProfileResponse)
def update_account(
    payload: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    auth_state: AuthState = Depends(get_auth_state),
):
    user = user_service.update_profile(
        db,
        auth_state.user,
        display_name=payload.display_name,
        email=payload.email,
        password=payload.password,
        country=payload.country,
    )
    return user_service.serialize_user(user)


@router.post("/picture")
async def upload_picture(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    auth_state: AuthState = Depends(get_auth_state),
):
    # One byte past the limit is enough to reject an oversized upload
    data = await file.read(MAX_PROFILE_PICTURE_BYTES + 1)
    try:
        photo_url = save_profile_picture(auth_state.user_id, data, file.content_type)
    except ProfilePictureError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError:
        raise HTTPException(status_code=502, detail="Upload failed. Please try again.")

    user = user_service.set_photo_url(db, auth_state.user, photo_url)
    return {
        "message": "✅ Profile picture updated",
        "photo_url": user.photo_url,
    }

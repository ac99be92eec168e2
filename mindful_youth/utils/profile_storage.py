# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

PROFILE_PICTURE_DIR = Path(os.getenv("PROFILE_PICTURE_DIR", "./data/profile-pictures"))
PROFILE_PICTURE_URL_PREFIX = os.getenv("PROFILE_PICTURE_URL_PREFIX", "/profile-pictures").rstrip("/")
MAX_PROFILE_PICTURE_BYTES = int(os.getenv("MAX_PROFILE_PICTURE_BYTES", 5 * 1024 * 1024))

ALLOWED_PICTURE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
}


class ProfilePictureError(ValueError):
    pass


def ensure_storage_dir() -> Path:
    PROFILE_PICTURE_DIR.mkdir(parents=True, exist_ok=True)
    return PROFILE_PICTURE_DIR


def save_profile_picture(user_id: int, data: bytes, content_type: str) -> str:
    """Store the picture under the user's id, replacing any earlier one, and return its URL."""
    extension = ALLOWED_PICTURE_TYPES.get(content_type)
    if extension is None:
        raise ProfilePictureError("Only PNG and JPEG images are accepted")
    if not data:
        raise ProfilePictureError("Uploaded file is empty")
    if len(data) > MAX_PROFILE_PICTURE_BYTES:
        raise ProfilePictureError("Uploaded file is too large")

    directory = ensure_storage_dir()
    for old in directory.glob(f"{user_id}.*"):
        old.unlink()

    filename = f"{user_id}.{extension}"
    (directory / filename).write_bytes(data)
    logger.info("🖼️ Stored profile picture for user %s (%d bytes)", user_id, len(data))
    return f"{PROFILE_PICTURE_URL_PREFIX}/{filename}"

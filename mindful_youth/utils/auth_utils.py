# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import HTTPException
from werkzeug.security import generate_password_hash, check_password_hash

MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


# ✅ Ownership guard for user-created documents
def ensure_owner(owner_id: int, user_id: int, detail: str = "Only the author can do this"):
    if owner_id != user_id:
        raise HTTPException(status_code=403, detail=detail)

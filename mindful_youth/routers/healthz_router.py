# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


import os

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mindful_youth.models.database import SessionLocal
from mindful_youth.services.snapshot_feed import feed, posts_topic
from mindful_youth.utils.profile_storage import PROFILE_PICTURE_DIR

router = APIRouter(tags=["Infra"])


@router.get("/healthz")
def health_check():
    db: Session = SessionLocal()
    result = {
        "db_connection": False,
        "picture_storage": False,
        "llm_configured": False,
    }

    try:
        # ✅ Check DB read
        db.execute(text("SELECT 1"))
        result["db_connection"] = True
    except SQLAlchemyError as e:
        return {
            "status": "error",
            "error": str(e),
            "details": result,
        }
    finally:
        db.close()

    # ✅ Picture directory present and writable
    result["picture_storage"] = os.access(PROFILE_PICTURE_DIR, os.W_OK)

    # ✅ Generation key present
    result["llm_configured"] = bool(os.getenv("LLM_API_KEY"))

    return {
        "status": "ok" if all(result.values()) else "partial",
        "details": result,
        "live_post_listeners": feed.subscriber_count(posts_topic()),
    }

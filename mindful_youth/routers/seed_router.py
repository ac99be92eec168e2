# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import os

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from mindful_youth.models.database import get_db
from mindful_youth.services.seed_service import seed_database

router = APIRouter(tags=["Seed"])


def seed_routes_enabled() -> bool:
    default = "false" if os.getenv("ENV") == "production" else "true"
    return os.getenv("ENABLE_SEED_ROUTES", default).lower() in ("1", "true", "yes")


@router.post("/seed")
def seed(db: Session = Depends(get_db)):
    if not seed_routes_enabled():
        raise HTTPException(status_code=403, detail="Seeding is disabled in this environment")

    result = seed_database(db)
    if result["seeded"]:
        result["message"] = "🌱 Database seeded with sample data"
    else:
        result["message"] = "Sample data already present, nothing to do"
    return result

# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from pytz import timezone
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from mindful_youth.models import database
from mindful_youth.models import *  # registers all models

from mindful_youth.routers import (
    auth_router,
    account_router,
    chat_router,
    mood_router,
    forum_router,
    content_router,
    seed_router,
    healthz_router,
)
from mindful_youth.services.chat_session_store import chat_stores
from mindful_youth.utils.profile_storage import ensure_storage_dir, PROFILE_PICTURE_URL_PREFIX
from mindful_youth.utils.rate_limit_utils import limiter
from mindful_youth.utils.schedulers.run_all_cleanups import run_all_cleanups

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SCHEDULER_TIMEZONE = os.getenv("SCHEDULER_TIMEZONE", "UTC")

# Create DB tables in one go
database.Base.metadata.create_all(bind=database.engine)

# Scheduler setup
scheduler = BackgroundScheduler(job_defaults={"misfire_grace_time": 60})


@asynccontextmanager
async def lifespan(app: FastAPI):

    # 🕛 Reconcile forum counters every day at 2 AM
    scheduler.add_job(run_all_cleanups, "cron", hour=2, minute=0, timezone=timezone(SCHEDULER_TIMEZONE))

    # 🧹 Drop idle cached chat state every 5 minutes
    scheduler.add_job(chat_stores.evict_idle, IntervalTrigger(minutes=5, timezone=timezone(SCHEDULER_TIMEZONE)))

    scheduler.start()
    logger.info("⏰ Scheduler started (%s)", SCHEDULER_TIMEZONE)
    yield
    scheduler.shutdown()


# Create FastAPI app with lifespan
app = FastAPI(
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    title="MindfulYouth API",
    description="Anonymous AI support chat, peer forum and mood journal backend",
    version="1.0"
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Serve uploaded profile pictures
app.mount(
    PROFILE_PICTURE_URL_PREFIX,
    StaticFiles(directory=str(ensure_storage_dir())),
    name="profile-pictures",
)

# Include routers
app.include_router(auth_router.router)
app.include_router(account_router.router)
app.include_router(chat_router.router)
app.include_router(mood_router.router)
app.include_router(forum_router.router)
app.include_router(content_router.router)
app.include_router(seed_router.router)
app.include_router(healthz_router.router)


# ---------------------- ADDING EXCEPTION HANDLER ----------------------
@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request, exc):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests. Please slow down."}
    )


@app.get("/")
def read_root():
    return {
        "name": "MindfulYouth",
        "tagline": "A Safe Space for Your Mind",
        "features": [
            {"title": "AI Support Chat", "description": "Talk anonymously with a supportive AI companion, any time."},
            {"title": "Peer Forum", "description": "Share and connect with peers, anonymously and safely."},
            {"title": "Mood Journal", "description": "Track your mood and reflect on your day."},
            {"title": "Knowledge Base", "description": "Read articles on anxiety, stress and self-care."},
            {"title": "Resources", "description": "Find crisis lines and support services."},
        ],
        "license": "Licensed under the MIT License - see the LICENSE file for details.",
    }


@app.get("/health", tags=["Infra"])
def health_check():
    return {"status": "ok"}

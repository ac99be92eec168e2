# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from mindful_youth.auth import AuthState, get_auth_state
from mindful_youth.models.database import get_db, SessionLocal
from mindful_youth.models.forum import Post
from mindful_youth.schemas.forum_schemas import PostCreateRequest, CommentCreateRequest
from mindful_youth.services import forum_service
from mindful_youth.services.snapshot_feed import (
    feed,
    to_sse,
    posts_topic,
    post_topic,
    comments_topic,
)

router = APIRouter(prefix="/forum", tags=["Forum"])


def _event_stream(topic: str, build):
    def load():
        db = SessionLocal()
        try:
            return build(db)
        finally:
            db.close()

    return StreamingResponse(to_sse(feed.stream(topic, load)), media_type="text/event-stream")


def _posts_snapshot(db: Session, viewer_id: int) -> list:
    return [forum_service.serialize_post(p, viewer_id) for p in forum_service.list_posts(db)]


def _post_snapshot(db: Session, post_id: int, viewer_id: int):
    # A deleted post streams as null instead of closing the stream
    post = db.get(Post, post_id)
    return forum_service.serialize_post(post, viewer_id) if post else None


def _comments_snapshot(db: Session, post_id: int, viewer_id: int) -> list:
    return [forum_service.serialize_comment(c, viewer_id) for c in forum_service.list_comments(db, post_id)]


# ---------- posts ----------

@router.get("/posts")
def get_posts(db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    return _posts_snapshot(db, auth_state.user_id)


@router.post("/posts", status_code=201)
def create_post(
    payload: PostCreateRequest,
    db: Session = Depends(get_db),
    auth_state: AuthState = Depends(get_auth_state),
):
    post = forum_service.create_post(db, auth_state.user_id, payload.content)
    return forum_service.serialize_post(post, auth_state.user_id)


@router.get("/posts/stream")
def stream_posts(auth_state: AuthState = Depends(get_auth_state)):
    viewer_id = auth_state.user_id
    return _event_stream(posts_topic(), lambda db: _posts_snapshot(db, viewer_id))


@router.get("/posts/{post_id}")
def get_post(post_id: int, db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    post = forum_service.get_post(db, post_id)
    return forum_service.serialize_post(post, auth_state.user_id)


@router.get("/posts/{post_id}/stream")
def stream_post(post_id: int, db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    forum_service.get_post(db, post_id)
    viewer_id = auth_state.user_id
    return _event_stream(post_topic(post_id), lambda s: _post_snapshot(s, post_id, viewer_id))


@router.post("/posts/{post_id}/like")
def like_post(post_id: int, db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    post = forum_service.toggle_like(db, post_id, auth_state.user_id)
    return forum_service.serialize_post(post, auth_state.user_id)


@router.delete("/posts/{post_id}")
def delete_post(post_id: int, db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    removed = forum_service.delete_post(db, post_id, auth_state.user_id)
    return {
        "message": "🗑️ Post deleted",
        "post_id": post_id,
        "comments_deleted": removed,
    }


# ---------- comments ----------

@router.get("/posts/{post_id}/comments")
def get_comments(post_id: int, db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    forum_service.get_post(db, post_id)
    return _comments_snapshot(db, post_id, auth_state.user_id)


@router.post("/posts/{post_id}/comments", status_code=201)
def create_comment(
    post_id: int,
    payload: CommentCreateRequest,
    db: Session = Depends(get_db),
    auth_state: AuthState = Depends(get_auth_state),
):
    comment = forum_service.add_comment(db, post_id, auth_state.user_id, payload.content)
    return forum_service.serialize_comment(comment, auth_state.user_id)


@router.get("/posts/{post_id}/comments/stream")
def stream_comments(post_id: int, db: Session = Depends(get_db), auth_state: AuthState = Depends(get_auth_state)):
    forum_service.get_post(db, post_id)
    viewer_id = auth_state.user_id
    return _event_stream(comments_topic(post_id), lambda s: _comments_snapshot(s, post_id, viewer_id))

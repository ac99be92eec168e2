# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from more_itertools import chunked
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mindful_youth.models.forum import Post, PostLike, Comment, ANONYMOUS_AUTHOR
from mindful_youth.services.snapshot_feed import feed, posts_topic, post_topic, comments_topic
from mindful_youth.utils.auth_utils import ensure_owner

logger = logging.getLogger(__name__)

# Comment rows removed per DELETE statement when a post goes away
COMMENT_DELETE_BATCH = 500


def serialize_post(post: Post, viewer_id: Optional[int] = None) -> dict:
    liked_by = post.liked_by
    return {
        "id": post.id,
        "author": post.author,
        "content": post.content,
        "timestamp": post.timestamp.isoformat() if post.timestamp else None,
        "likes": post.likes,
        "comments": post.comments,
        "user_id": post.user_id,
        "liked_by": liked_by,
        "liked_by_me": viewer_id in liked_by if viewer_id is not None else False,
        "is_author": viewer_id == post.user_id,
    }


def serialize_comment(comment: Comment, viewer_id: Optional[int] = None) -> dict:
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "author": comment.author,
        "content": comment.content,
        "timestamp": comment.timestamp.isoformat() if comment.timestamp else None,
        "user_id": comment.user_id,
        "is_author": viewer_id == comment.user_id,
    }


def get_post(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


def list_posts(db: Session) -> List[Post]:
    return db.query(Post).order_by(Post.timestamp.desc(), Post.id.desc()).all()


def list_comments(db: Session, post_id: int) -> List[Comment]:
    return (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.timestamp.asc(), Comment.id.asc())
        .all()
    )


def create_post(db: Session, user_id: int, content: str) -> Post:
    post = Post(
        user_id=user_id,
        author=ANONYMOUS_AUTHOR,
        content=content,
        timestamp=datetime.utcnow(),
        likes=0,
        comments=0,
    )
    db.add(post)
    db.commit()
    db.refresh(post)

    feed.publish(posts_topic())
    logger.info("📝 Post %s created", post.id)
    return post


def toggle_like(db: Session, post_id: int, user_id: int) -> Post:
    """Like the post, or unlike it if this user already liked it.

    The membership row and the counter move together in one commit.
    """
    post = get_post(db, post_id)
    existing = (
        db.query(PostLike)
        .filter(PostLike.post_id == post_id, PostLike.user_id == user_id)
        .first()
    )

    try:
        if existing:
            db.delete(existing)
            delta = -1
        else:
            db.add(PostLike(post_id=post_id, user_id=user_id))
            delta = 1
        # Server-side increment, not read-modify-write
        db.query(Post).filter(Post.id == post_id).update(
            {Post.likes: Post.likes + delta}, synchronize_session=False
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("⚠️ Concurrent like on post %s by user %s", post_id, user_id)
        raise HTTPException(status_code=409, detail="Like is already being recorded")

    db.refresh(post)
    feed.publish(posts_topic(), post_topic(post_id))
    return post


def add_comment(db: Session, post_id: int, user_id: int, content: str) -> Comment:
    get_post(db, post_id)

    comment = Comment(
        post_id=post_id,
        user_id=user_id,
        author=ANONYMOUS_AUTHOR,
        content=content,
        timestamp=datetime.utcnow(),
    )
    db.add(comment)
    db.query(Post).filter(Post.id == post_id).update(
        {Post.comments: Post.comments + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(comment)

    feed.publish(posts_topic(), post_topic(post_id), comments_topic(post_id))
    return comment


def delete_post(db: Session, post_id: int, user_id: int) -> int:
    """Delete a post and its comments. Returns the number of comments removed.

    Comments go first in their own commit, then the post. A failure between
    the two leaves the post with a stale comment counter, which the nightly
    counter reconciliation repairs.
    """
    post = get_post(db, post_id)
    ensure_owner(post.user_id, user_id, detail="Only the author can delete this post")

    comment_ids = [row.id for row in db.query(Comment.id).filter(Comment.post_id == post_id)]
    for batch in chunked(comment_ids, COMMENT_DELETE_BATCH):
        db.query(Comment).filter(Comment.id.in_(batch)).delete(synchronize_session=False)
    db.commit()
    feed.publish(comments_topic(post_id))

    db.expire(post)
    db.delete(post)
    db.commit()

    feed.publish(posts_topic(), post_topic(post_id))
    logger.info("🗑️ Post %s deleted with %d comments", post_id, len(comment_ids))
    return len(comment_ids)

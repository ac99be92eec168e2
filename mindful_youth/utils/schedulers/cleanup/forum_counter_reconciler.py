# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import func
from sqlalchemy.orm import Session
from mindful_youth.models.database import SessionLocal
from mindful_youth.models.forum import Post, PostLike, Comment
from mindful_youth.services.snapshot_feed import feed, posts_topic, post_topic
import logging

logger = logging.getLogger("maintenance")


def reconcile_forum_counters(db: Session = None) -> int:
    """Reset every post's likes/comments to the real row counts. Returns how many posts changed."""
    owns_session = db is None
    if owns_session:
        db = SessionLocal()
    try:
        like_counts = dict(
            db.query(PostLike.post_id, func.count(PostLike.id)).group_by(PostLike.post_id).all()
        )
        comment_counts = dict(
            db.query(Comment.post_id, func.count(Comment.id)).group_by(Comment.post_id).all()
        )

        fixed = []
        for post in db.query(Post).all():
            likes = like_counts.get(post.id, 0)
            comments = comment_counts.get(post.id, 0)
            if post.likes != likes or post.comments != comments:
                logger.warning(
                    f"🔧 Post {post.id}: likes {post.likes}->{likes}, comments {post.comments}->{comments}"
                )
                post.likes = likes
                post.comments = comments
                fixed.append(post.id)

        db.commit()
        if fixed:
            feed.publish(posts_topic(), *[post_topic(post_id) for post_id in fixed])
        logger.info(f"✅ Forum counter reconciliation completed. Posts corrected: {len(fixed)}")
        return len(fixed)

    except Exception as e:
        db.rollback()
        logger.error(f"🛑 Forum counter reconciliation failed: {e}", exc_info=True)
        raise
    finally:
        if owns_session:
            db.close()

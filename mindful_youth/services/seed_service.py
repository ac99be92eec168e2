# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
import secrets
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from mindful_youth.models.forum import Post, PostLike, Comment, ANONYMOUS_AUTHOR
from mindful_youth.models.mood import MoodEntry, MoodLabel
from mindful_youth.models.user import User
from mindful_youth.services.snapshot_feed import feed, posts_topic, mood_topic
from mindful_youth.utils.auth_utils import hash_password

logger = logging.getLogger(__name__)

SAMPLE_USER_EMAILS = [
    "sample_user_1@example.com",
    "sample_user_2@example.com",
    "sample_user_3@example.com",
]

# author / likers / commenters are indexes into SAMPLE_USER_EMAILS
SAMPLE_POSTS = [
    {
        "author": 0,
        "content": "Just a reminder to everyone to take a moment for yourself today. Even 5 minutes of deep breathing can make a difference. #SelfCare",
        "liked_by": [1, 2],
        "comments": [
            (1, "Thank you, I really needed this today."),
            (2, "Box breathing helps me a lot before class."),
        ],
    },
    {
        "author": 1,
        "content": "Feeling a bit overwhelmed with school lately. It's tough but trying to stay positive. Any tips for managing stress during exam season?",
        "liked_by": [0],
        "comments": [
            (0, "Short study blocks with real breaks made a big difference for me."),
            (2, "You're not alone, exam season is hard for everyone."),
            (0, "Sleep first, cramming second!"),
        ],
    },
    {
        "author": 2,
        "content": "I'm here if anyone needs to talk. Remember you are not alone in this. We are a community that supports each other.",
        "liked_by": [0, 1],
        "comments": [
            (1, "This community is the best."),
        ],
    },
]

SAMPLE_MOODS = [
    {"mood": MoodLabel.good, "journal": "Felt productive today. Finished my assignments and had a nice chat with a friend.", "days_ago": 1, "user": 0},
    {"mood": MoodLabel.okay, "journal": "A bit stressed about exams, but I managed to study for a few hours.", "days_ago": 2, "user": 0},
    {"mood": MoodLabel.great, "journal": "Had a relaxing day, watched a movie and just chilled.", "days_ago": 3, "user": 1},
    {"mood": MoodLabel.awful, "journal": "Feeling down today. Nothing seems to be going right.", "days_ago": 1, "user": 1},
]


def _get_or_create_sample_users(db: Session):
    users = []
    for index, email in enumerate(SAMPLE_USER_EMAILS, start=1):
        user = db.query(User).filter(User.email == email).first()
        if not user:
            # Nobody signs in as a sample user
            user = User(
                email=email,
                password_hash=hash_password(secrets.token_urlsafe(32)),
                display_name=f"Sample User {index}",
            )
            db.add(user)
            db.flush()
        users.append(user)
    return users


def seed_database(db: Session) -> dict:
    """Populate the forum and mood journal with sample data.

    Counters are derived from the like and comment rows written alongside
    them. Runs once; later calls report the existing data.
    """
    users = _get_or_create_sample_users(db)
    sample_ids = [u.id for u in users]

    already = db.query(Post).filter(Post.user_id.in_(sample_ids)).count()
    if already:
        db.commit()
        logger.info("🌱 Seed skipped, %d sample posts already present", already)
        return {"seeded": False, "posts": 0, "comments": 0, "mood_entries": 0}

    now = datetime.utcnow()
    comment_total = 0
    for offset, sample in enumerate(SAMPLE_POSTS):
        post = Post(
            user_id=users[sample["author"]].id,
            author=ANONYMOUS_AUTHOR,
            content=sample["content"],
            timestamp=now - timedelta(minutes=offset * 30),
            likes=len(sample["liked_by"]),
            comments=len(sample["comments"]),
        )
        db.add(post)
        db.flush()

        for liker in sample["liked_by"]:
            db.add(PostLike(post_id=post.id, user_id=users[liker].id))
        for position, (commenter, text) in enumerate(sample["comments"]):
            db.add(Comment(
                post_id=post.id,
                user_id=users[commenter].id,
                author=ANONYMOUS_AUTHOR,
                content=text,
                timestamp=post.timestamp + timedelta(minutes=position + 1),
            ))
        comment_total += len(sample["comments"])

    for sample in SAMPLE_MOODS:
        db.add(MoodEntry(
            user_id=users[sample["user"]].id,
            mood=sample["mood"],
            journal=sample["journal"],
            timestamp=now - timedelta(days=sample["days_ago"]),
        ))

    db.commit()

    feed.publish(posts_topic(), *[mood_topic(user_id) for user_id in sample_ids])
    logger.info("🌱 Seeded %d posts, %d comments, %d mood entries", len(SAMPLE_POSTS), comment_total, len(SAMPLE_MOODS))
    return {
        "seeded": True,
        "posts": len(SAMPLE_POSTS),
        "comments": comment_total,
        "mood_entries": len(SAMPLE_MOODS),
    }

# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from mindful_youth.models.database import Base

ANONYMOUS_AUTHOR = "Anonymous"


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    author = Column(String, default=ANONYMOUS_AUTHOR, nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)

    # ✅ Cached counters, kept equal to the row counts below
    likes = Column(Integer, default=0, nullable=False)
    comments = Column(Integer, default=0, nullable=False)

    liked_by_rows = relationship("PostLike", back_populates="post", cascade="all, delete-orphan")
    comment_rows = relationship("Comment", back_populates="post", passive_deletes=True)

    @property
    def liked_by(self):
        return [like.user_id for like in self.liked_by_rows]


class PostLike(Base):
    __tablename__ = "post_likes"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    post = relationship("Post", back_populates="liked_by_rows")

    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_post_like_user"),
    )


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    author = Column(String, default=ANONYMOUS_AUTHOR, nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)

    post = relationship("Post", back_populates="comment_rows")

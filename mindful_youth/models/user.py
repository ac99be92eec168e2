# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from mindful_youth.models.database import Base

# Countries offered by the account settings form
COUNTRIES = ["Italy", "the Netherlands", "Sweden", "Lebanon", "Tunisia", "Morocco"]


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    # ✅ Profile fields (editable from account settings)
    display_name = Column(String, default="")
    photo_url = Column(String, default="")
    country = Column(String, default="")

    # ✅ Bumped on sign-out; tokens carrying an older version are rejected
    token_version = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    # ✅ Relationships
    chat_sessions = relationship("ChatSession", back_populates="user", cascade="all, delete-orphan")
    mood_entries = relationship("MoodEntry", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User id={self.id} email={self.email}>"

# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
from mindful_youth.models.database import Base
from mindful_youth.utils.encryption import EncryptedText  # 🔐 Encryption utils
import enum


class MoodLabel(enum.Enum):
    awful = "Awful"
    okay = "Okay"
    good = "Good"
    great = "Great"


class MoodEntry(Base):
    __tablename__ = "mood_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    mood = Column(Enum(MoodLabel), nullable=False)

    journal = Column(EncryptedText, nullable=True)  # 🔐 Encrypted

    timestamp = Column(DateTime, default=datetime.utcnow, index=True)

    user = relationship("User", back_populates="mood_entries")

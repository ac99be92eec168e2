# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from pydantic import BaseModel
from typing import Optional
from mindful_youth.models.mood import MoodLabel


class MoodEntryCreateRequest(BaseModel):
    mood: MoodLabel
    journal: Optional[str] = ""

# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from .user import User
from .chat import ChatSession, ChatMessage
from .forum import Post, PostLike, Comment
from .mood import MoodEntry, MoodLabel

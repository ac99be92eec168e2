# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
from slowapi import Limiter
from slowapi.util import get_remote_address

RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() not in ("0", "false", "no")
CHAT_RATE_LIMIT = os.getenv("CHAT_RATE_LIMIT", "20/minute")

limiter = Limiter(key_func=get_remote_address, enabled=RATELIMIT_ENABLED)

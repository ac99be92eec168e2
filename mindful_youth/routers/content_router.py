# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import Optional

from fastapi import APIRouter

from mindful_youth.services.knowledge_base import search_articles
from mindful_youth.services.resources import RESOURCES, EMERGENCY_NOTICE

router = APIRouter(tags=["Content"])


@router.get("/knowledge-base")
def knowledge_base(search: Optional[str] = None):
    grouped = search_articles(search)
    return {
        "search": search or "",
        "categories": [
            {"category": category, "articles": articles}
            for category, articles in grouped.items()
        ],
    }


@router.get("/resources")
def resources():
    return {
        "emergency_notice": EMERGENCY_NOTICE,
        "resources": RESOURCES,
    }

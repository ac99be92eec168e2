# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import Dict, List, Optional

ARTICLES = [
    {
        "category": "Anxiety",
        "title": "Understanding and Managing Anxiety",
        "content": "Anxiety is a normal human emotion, but it can become overwhelming. This article explores the causes of anxiety and provides practical tips for managing it, such as mindfulness, deep breathing exercises, and cognitive-behavioral techniques.",
    },
    {
        "category": "Anxiety",
        "title": "Coping with Panic Attacks",
        "content": "Panic attacks can be frightening. Learn to recognize the signs of a panic attack and discover effective strategies to cope during and after an episode. Grounding techniques and professional help options are also discussed.",
    },
    {
        "category": "Stress",
        "title": "Effective Stress Management Techniques",
        "content": "Stress is a part of life, but chronic stress can harm your health. This guide covers various stress management techniques, including time management, physical activity, and relaxation practices like yoga and meditation.",
    },
    {
        "category": "Stress",
        "title": "The Link Between Stress and Sleep",
        "content": "Poor sleep and high stress levels often go hand-in-hand. This article explains how stress affects your sleep cycle and offers tips for improving your sleep hygiene to better manage stress.",
    },
    {
        "category": "Self-Care",
        "title": "The Importance of a Self-Care Routine",
        "content": "Self-care is crucial for mental and emotional well-being. Discover why a consistent self-care routine is important and get ideas for creating a personalized plan that fits your lifestyle and needs.",
    },
    {
        "category": "Self-Care",
        "title": "Mindfulness for Beginners",
        "content": "Mindfulness is the practice of being present in the moment. This beginner's guide introduces you to the basics of mindfulness and provides simple exercises to help you incorporate it into your daily life.",
    },
]


def search_articles(term: Optional[str] = None) -> Dict[str, List[dict]]:
    """Articles whose title or content contains ``term`` (any case), grouped by category."""
    needle = (term or "").lower()
    grouped: Dict[str, List[dict]] = {}
    for article in ARTICLES:
        if needle in article["title"].lower() or needle in article["content"].lower():
            grouped.setdefault(article["category"], []).append(article)
    return grouped

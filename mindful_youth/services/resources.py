# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

EMERGENCY_NOTICE = (
    "If you are in immediate danger, please call 911. "
    "Here are some resources that can provide help and support."
)

RESOURCES = [
    {
        "title": "Crisis Text Line",
        "description": "Connect with a crisis counselor for free, 24/7 support. Text HOME to 741741.",
        "type": "Text",
        "link": "https://www.crisistextline.org/",
    },
    {
        "title": "The Trevor Project",
        "description": "Support for LGBTQ young people in crisis, 24/7. Call, text, or chat.",
        "type": "Call/Text",
        "link": "https://www.thetrevorproject.org/",
    },
    {
        "title": "988 Suicide & Crisis Lifeline",
        "description": "Free and confidential support for people in distress. Dial 988.",
        "type": "Call",
        "link": "https://988lifeline.org/",
    },
    {
        "title": "NAMI (National Alliance on Mental Illness)",
        "description": "Find resources, support groups, and educational materials.",
        "type": "Website",
        "link": "https://www.nami.org/",
    },
    {
        "title": "Headspace: Mindful Meditation",
        "description": "Guided meditations, articles, and videos to help with stress and anxiety.",
        "type": "App/Website",
        "link": "https://www.headspace.com/",
    },
    {
        "title": "BetterHelp",
        "description": "Online portal providing direct access to mental health professionals for therapy sessions.",
        "type": "Website",
        "link": "https://www.betterhelp.com/",
    },
]

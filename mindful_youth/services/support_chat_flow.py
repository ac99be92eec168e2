# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import List, Optional

from mindful_youth.utils import ai_engine
from mindful_youth.utils.prompt_templates import (
    SUPPORT_SYSTEM_PROMPT,
    emotional_state_hint,
)

# Role names on the model side
MODEL_ROLES = {"user": "user", "assistant": "model"}


def build_system_prompt(emotional_state: Optional[str] = None) -> str:
    prompt = SUPPORT_SYSTEM_PROMPT
    if emotional_state:
        prompt += emotional_state_hint(emotional_state)
    return prompt


def build_contents(message: str, chat_history: Optional[List[dict]] = None) -> List[dict]:
    contents = [
        {"role": MODEL_ROLES[turn["role"]], "parts": [{"text": turn["content"]}]}
        for turn in chat_history or []
    ]
    contents.append({"role": "user", "parts": [{"text": message}]})
    return contents


def ai_anonymized_support_chat(
    message: str,
    chat_history: Optional[List[dict]] = None,
    emotional_state: Optional[str] = None,
) -> str:
    """
    Produce one supportive reply to ``message``.

    ``chat_history`` holds the earlier turns as ``{"role", "content"}`` dicts.
    The model's text comes back as-is; failures propagate as GenerationError
    for the caller to handle.
    """
    return ai_engine.generate_ai_reply(
        build_system_prompt(emotional_state),
        build_contents(message, chat_history),
    )

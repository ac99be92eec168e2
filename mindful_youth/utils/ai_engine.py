# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.


from mindful_youth.services.gemini_ai_service import get_gemini_reply


def generate_ai_reply(system_instruction: str, contents: list) -> str:
    """
    Wrapper function to generate an AI reply from a system instruction and turn list.
       Keeps the chat flow independent of the hosted model's wire format.
    """
    return get_gemini_reply(system_instruction, contents)

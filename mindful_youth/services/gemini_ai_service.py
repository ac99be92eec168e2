# Copyright (c) 2025 MindfulYouth contributors
# This file is part of the MindfulYouth - A Safe Space for Your Mind project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
import logging
import requests

# ---------------------------
# ✅ Logger Setup
# ---------------------------

logger = logging.getLogger(__name__)

# ---------------------------
# ✅ Environment Variables
# ---------------------------

if os.getenv("ENV") != "production":
    from dotenv import load_dotenv
    load_dotenv()

LLM_API_KEY = os.getenv("LLM_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL", "gemini-2.5-flash")
LLM_API_URL = os.getenv(
    "LLM_API_URL",
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
)
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

HEADERS = {"Content-Type": "application/json"}


class GenerationError(Exception):
    """The hosted model did not produce a reply."""


# ---------------------------
# ✅ Hosted model call
# ---------------------------

def get_gemini_reply(system_instruction: str, contents: list) -> str:
    """
    Send one generateContent request and return the reply text unchanged.
    ``contents`` is the alternating user/model turn list, newest last.
    One attempt only; any failure raises GenerationError.
    """

    if not LLM_API_KEY:
        logger.error("❌ Missing LLM_API_KEY.")
        raise GenerationError("LLM_API_KEY is not configured")

    url = LLM_API_URL.format(model=LLM_MODEL)
    body = {
        "systemInstruction": {"parts": [{"text": system_instruction}]},
        "contents": contents,
    }

    try:
        logger.info("🔁 Sending %d turns to %s", len(contents), LLM_MODEL)
        response = requests.post(
            url,
            headers={**HEADERS, "x-goog-api-key": LLM_API_KEY},
            json=body,
            timeout=LLM_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        result = response.json()
    except requests.exceptions.RequestException as e:
        logger.warning("⚠️ Model request failed: %s", e)
        raise GenerationError("Model request failed") from e
    except ValueError as e:
        raise GenerationError("Model returned invalid JSON") from e

    try:
        parts = result["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as e:
        logger.warning("⚠️ Unexpected model response format: %s", result)
        raise GenerationError("Unexpected model response format") from e

    return "".join(part.get("text", "") for part in parts)

"""
Input normalization for the router hook.

The UserPromptSubmit hook delivers a JSON object on stdin:

    {"prompt": "user message", "session_id": "...", "cwd": "..."}

Older hosts send the text under "message" instead. Anything else (empty
input, invalid JSON, a non-object, a missing or non-string field) yields
no prompt at all, which the hook treats as "do not route".
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

PROMPT_KEYS = ("prompt", "message")


@dataclass(frozen=True)
class PromptContext:
    """Immutable per-invocation view of the prompt being classified."""

    raw_text: str
    normalized_text: str
    length: int
    has_managed_project: bool = False


def extract_prompt(payload: Optional[str]) -> Optional[str]:
    """
    Pull the prompt string out of a raw hook payload.

    Args:
        payload: Raw stdin contents (may be None or empty)

    Returns:
        The prompt text, or None when the payload is unusable
    """
    if not payload or not payload.strip():
        return None

    try:
        data: Any = json.loads(payload)
    except (ValueError, RecursionError):
        logger.debug("Hook payload is not valid JSON, ignoring")
        return None

    if not isinstance(data, dict):
        return None

    for key in PROMPT_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value

    return None


def build_context(text: str, has_managed_project: bool = False) -> PromptContext:
    """Create the PromptContext for a raw prompt string."""
    normalized = text.strip().lower()
    return PromptContext(
        raw_text=text,
        normalized_text=normalized,
        length=len(normalized),
        has_managed_project=has_managed_project,
    )

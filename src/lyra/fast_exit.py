"""
Fast-exit filter.

Cheap structural checks that end classification with "no route" before any
scoring is attempted. Over-routing costs more than missing a route, so any
structural hint that the prompt is not a new task wins over keyword evidence.
"""

import re
from typing import Optional

from lyra.config import Thresholds

# Conversational continuations: acknowledgements, confirmations, stop/continue
# words and one-word operational commands.
AFFIRMATION_PATTERN = re.compile(
    r"^(?:yes|yep|yeah|no|nope|ok|okay|sure|thanks|thank you|done|stop|cancel|"
    r"continue|go ahead|looks good|lgtm|sounds good|perfect|great|"
    r"commit|push|pull|merge|deploy)\b"
)

# Interrogative openers. Short prompts that start this way are questions
# to answer, not tasks to route.
QUESTION_PATTERN = re.compile(
    r"^(?:what|how|why|where|when|who|can|does|is|are|do|did|should|could|"
    r"would|which|explain|show|list|tell|describe|find|get|read)\b"
)

SLASH_PREFIX = "/"
GIT_PREFIX = "git "


def check_fast_exit(
    text: str,
    thresholds: Optional[Thresholds] = None,
    question_exit: bool = True,
) -> Optional[str]:
    """
    Decide whether a prompt can be dismissed without scoring.

    Args:
        text: Normalized (trimmed, lowercased) prompt
        thresholds: Length thresholds (defaults when None)
        question_exit: Apply the short-question check

    Returns:
        Reason code ("too_short", "slash_command", "git_command",
        "affirmation", "short_question"), or None to continue scoring
    """
    thresholds = thresholds or Thresholds()

    if not text or len(text) < thresholds.min_length:
        return "too_short"
    if text.startswith(SLASH_PREFIX):
        return "slash_command"
    if text.startswith(GIT_PREFIX):
        return "git_command"
    if AFFIRMATION_PATTERN.match(text):
        return "affirmation"
    if (
        question_exit
        and len(text) < thresholds.question_length
        and QUESTION_PATTERN.match(text)
    ):
        return "short_question"
    return None

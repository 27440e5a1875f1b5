"""
Negation detection for signal rules.

A cue such as "don't build ..." or "without refactoring ..." cancels the
keyword that follows it. Detection is a pure function of the text, the
keyword's index and the lookback window, so it can be checked with
synthetic offsets independently of any rule.
"""

import re

DEFAULT_NEGATION_WINDOW = 15

NEGATION_CUES = re.compile(
    r"\b(?:don'?t|do not|does not|doesn'?t|not|no|never|stop|cancel|without)\b"
)


def is_negated(text: str, index: int, window: int = DEFAULT_NEGATION_WINDOW) -> bool:
    """
    Check whether a negation cue sits in the window just before ``index``.

    Cues are matched against the full prefix so word boundaries are judged
    on the real text; a cue counts when any part of it falls inside the
    ``window`` characters preceding ``index``.

    Args:
        text: Normalized (lowercased) prompt text
        index: Start offset of the keyword being checked
        window: Number of characters to look back

    Returns:
        True if the keyword is negated
    """
    if index <= 0 or window <= 0:
        return False

    window_start = max(0, index - window)
    for cue in NEGATION_CUES.finditer(text, 0, index):
        if cue.end() > window_start:
            return True
    return False

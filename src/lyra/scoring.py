"""
Signal extraction and category scoring.

Both stages are generic over the rule table: every category is scored the
same way, holistic signals included, because those are just rules with
custom matchers (see rules.py).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from lyra.context import PromptContext
from lyra.negation import DEFAULT_NEGATION_WINDOW, is_negated
from lyra.rules import Category, RuleTable, SignalRule

logger = logging.getLogger(__name__)

ScoreBoard = Dict[str, int]


@dataclass
class ScoringResult:
    """Scores for every category plus the rules behind them."""

    scores: ScoreBoard = field(default_factory=dict)
    matched: Dict[str, List[str]] = field(default_factory=dict)
    negated: Dict[str, List[str]] = field(default_factory=dict)


def rule_matches(
    rule: SignalRule,
    text: str,
    negation_window: int = DEFAULT_NEGATION_WINDOW,
    negation_enabled: bool = True,
) -> bool:
    """Return True when the rule fires on text and is not negated."""
    if rule.min_length is not None and len(text) < rule.min_length:
        return False

    index = rule.matcher.find(text)
    if index is None:
        return False

    if any(companion.find(text) is None for companion in rule.requires):
        return False

    if negation_enabled and rule.negatable and is_negated(text, index, negation_window):
        return False

    return True


def extract_signals(
    category: Category,
    text: str,
    negation_window: int = DEFAULT_NEGATION_WINDOW,
    negation_enabled: bool = True,
) -> List[SignalRule]:
    """
    Evaluate one category's rules against normalized text.

    Each rule is evaluated independently and at most once.

    Returns:
        Rules that matched and were not negated, in table order
    """
    return [
        rule
        for rule in category.rules
        if rule_matches(rule, text, negation_window, negation_enabled)
    ]


def _negated_rules(category: Category, text: str, negation_window: int) -> List[str]:
    """Names of rules that would have fired but for a negation cue."""
    return [
        rule.name
        for rule in category.rules
        if rule.negatable
        and rule_matches(rule, text, negation_window, negation_enabled=False)
        and not rule_matches(rule, text, negation_window)
    ]


def score_categories(
    context: PromptContext,
    table: RuleTable,
    negation_window: int = DEFAULT_NEGATION_WINDOW,
    negation_enabled: bool = True,
) -> ScoringResult:
    """
    Build the ScoreBoard for a prompt.

    Args:
        context: Normalized prompt
        table: Rule table to evaluate
        negation_window: Lookback width for negation cues
        negation_enabled: Disable to score negated cues as plain matches

    Returns:
        ScoringResult with a score for every category (0 when nothing matched)
    """
    text = context.normalized_text
    result = ScoringResult()

    for category in table:
        signals = extract_signals(category, text, negation_window, negation_enabled)
        result.scores[category.id] = sum(rule.weight for rule in signals)
        result.matched[category.id] = [rule.name for rule in signals]
        if negation_enabled:
            negated = _negated_rules(category, text, negation_window)
            if negated:
                result.negated[category.id] = negated

    logger.debug(f"Scores: {result.scores}")
    return result

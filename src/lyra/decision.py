"""
Decision policy: turn a ScoreBoard into a routing Decision.

Ambiguity never routes. A category wins only when it holds the unique
maximum score and that score reaches the confidence floor.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from lyra.rules import RuleTable

logger = logging.getLogger(__name__)

NONE = "NONE"
DEFAULT_CONFIDENCE_FLOOR = 3


@dataclass(frozen=True)
class Decision:
    """Terminal output of the classification pipeline."""

    category: str
    score: int = 0
    redirected_from: Optional[str] = None

    @classmethod
    def none(cls, score: int = 0) -> "Decision":
        return cls(category=NONE, score=score)

    @property
    def is_none(self) -> bool:
        return self.category == NONE


def decide(
    scores: Mapping[str, int],
    table: RuleTable,
    has_managed_project: bool = False,
    confidence_floor: int = DEFAULT_CONFIDENCE_FLOOR,
    redirect_enabled: bool = True,
) -> Decision:
    """
    Pick the routing decision for a set of category scores.

    Args:
        scores: Category id -> accumulated score
        table: Rule table (for redirect targets)
        has_managed_project: Whether the working directory is already managed
        confidence_floor: Minimum score a winner must reach
        redirect_enabled: Apply the managed-project redirect

    Returns:
        Decision for the winning category, or Decision.none()
    """
    if not scores:
        return Decision.none()

    top_score = max(scores.values())
    leaders = [category_id for category_id, score in scores.items() if score == top_score]

    if len(leaders) > 1:
        logger.debug(f"Tie between {leaders} at {top_score}, not routing")
        return Decision.none(top_score)

    if top_score < confidence_floor:
        logger.debug(f"Top score {top_score} below floor {confidence_floor}")
        return Decision.none(top_score)

    winner = leaders[0]
    category = table.get(winner)
    if (
        redirect_enabled
        and has_managed_project
        and category is not None
        and category.redirect_when_managed
    ):
        target = category.redirect_when_managed
        logger.debug(f"Managed project: redirecting {winner} -> {target}")
        return Decision(category=target, score=top_score, redirected_from=winner)

    return Decision(category=winner, score=top_score)

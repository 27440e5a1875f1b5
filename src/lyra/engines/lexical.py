"""
LexicalEngine - rule-table classifier (lexical-1)

Pipeline, one synchronous pass per prompt:

    normalize → fast-exit → extract signals → score → decide

Features (all enabled by default):
- question_exit: Skip routing for short prompts that open with a question word
- negation_detection: Cancel negatable cues preceded by "don't", "without", ...
- project_redirect: Send new-project requests to plan-phase inside a managed project
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from lyra.config import Thresholds
from lyra.context import PromptContext
from lyra.decision import Decision, decide
from lyra.engine import (
    ClassificationEngine,
    FeatureSpec,
    register_engine,
    set_default_engine,
)
from lyra.fast_exit import check_fast_exit
from lyra.rules import RuleTable
from lyra.scoring import ScoringResult, score_categories

logger = logging.getLogger(__name__)

LEXICAL_VERSION = "lexical-1"


@dataclass
class Classification:
    """Full trace of one classification, for diagnostics."""

    decision: Decision
    fast_exit: Optional[str] = None
    scoring: ScoringResult = field(default_factory=ScoringResult)


@register_engine(LEXICAL_VERSION)
class LexicalEngine(ClassificationEngine):
    """
    Rule-table classifier.

    Holds only the compiled table, thresholds and feature flags; nothing
    about previous prompts is kept between calls.
    """

    def __init__(
        self,
        table: RuleTable,
        thresholds: Optional[Thresholds] = None,
        features: Optional[dict] = None,
    ):
        super().__init__(table, thresholds)
        self.features = {**self.get_default_features(), **(features or {})}
        feature_str = ", ".join(f"{k}={v}" for k, v in self.features.items())
        logger.debug(
            f"LexicalEngine initialized (version: {self.version}, "
            f"categories: {len(table)}, features: {feature_str})"
        )

    @property
    def version(self) -> str:
        return LEXICAL_VERSION

    @property
    def description(self) -> str:
        return "Rule-table scoring with negation and co-occurrence cues"

    @classmethod
    def get_available_features(cls) -> list[FeatureSpec]:
        """Return feature flags available for lexical-1."""
        return [
            FeatureSpec(
                name="question_exit",
                description="Skip routing for short prompts that start with a question word",
                default=True,
                category="filter",
            ),
            FeatureSpec(
                name="negation_detection",
                description="Cancel cues preceded by a negation within the lookback window",
                default=True,
                category="scoring",
            ),
            FeatureSpec(
                name="project_redirect",
                description="Redirect new-project requests when a project is already managed",
                default=True,
                category="decision",
            ),
        ]

    def explain(self, context: PromptContext) -> Classification:
        """Classify and keep every intermediate result."""
        reason = check_fast_exit(
            context.normalized_text,
            self.thresholds,
            question_exit=self.features.get("question_exit", True),
        )
        if reason:
            logger.debug(f"Fast exit: {reason}")
            return Classification(decision=Decision.none(), fast_exit=reason)

        scoring = score_categories(
            context,
            self.table,
            negation_window=self.thresholds.negation_window,
            negation_enabled=self.features.get("negation_detection", True),
        )
        decision = decide(
            scoring.scores,
            self.table,
            has_managed_project=context.has_managed_project,
            confidence_floor=self.thresholds.confidence_floor,
            redirect_enabled=self.features.get("project_redirect", True),
        )
        logger.debug(f"Decision: {decision}")
        return Classification(decision=decision, scoring=scoring)

    def classify(self, context: PromptContext) -> Decision:
        return self.explain(context).decision


set_default_engine(LEXICAL_VERSION)

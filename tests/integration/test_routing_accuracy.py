"""Routing accuracy tests using ground truth dataset.

These tests run the full hook pipeline (config defaults, built-in rule
table, lexical engine) over a labelled set of prompts and check precision
and recall of the routes it emits. Prompts labelled NONE guard against
over-routing and must stay silent.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from lyra.default_rules import default_rule_table
from lyra.hooks import route_prompt

# =============================================================================
# Constants
# =============================================================================

PRECISION_THRESHOLD = 0.95
RECALL_THRESHOLD = 0.90

NONE = "NONE"


# =============================================================================
# Data Structures
# =============================================================================


@dataclass
class AggregateScore:
    """Precision and recall over routed decisions."""

    results: list[tuple[str, str]] = field(default_factory=list)  # (expected, actual)
    precision: float = 0.0
    recall: float = 0.0

    def __post_init__(self) -> None:
        emitted = [(e, a) for e, a in self.results if a != NONE]
        expected_routes = [(e, a) for e, a in self.results if e != NONE]
        correct = sum(1 for e, a in emitted if e == a)

        self.precision = correct / len(emitted) if emitted else 0.0
        self.recall = correct / len(expected_routes) if expected_routes else 0.0


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(scope="module")
def ground_truth_path() -> Path:
    """Return path to ground truth dataset."""
    return Path(__file__).parent.parent / "fixtures" / "ground-truth" / "ground_truth.json"


@pytest.fixture(scope="module")
def ground_truth_events(ground_truth_path: Path) -> list[dict[str, Any]]:
    """Load events from the ground truth dataset."""
    with open(ground_truth_path) as f:
        return json.load(f)["events"]


# =============================================================================
# Helper Functions
# =============================================================================


def routed_category(event: dict[str, Any]) -> str:
    """Run one event through the router and map its output back to a category id."""
    output = route_prompt(event["query"], has_managed_project=event["managed"])
    if not output:
        return NONE
    route = output.removeprefix("Lyra -> ")
    for category in default_rule_table():
        if category.route == route:
            return category.id
    raise AssertionError(f"Router emitted unknown route: {output!r}")


# =============================================================================
# Test Classes
# =============================================================================

pytestmark = pytest.mark.integration


class TestRoutingAccuracy:
    """Test routing accuracy against ground truth."""

    def test_aggregate_accuracy(self, ground_truth_events: list[dict[str, Any]]) -> None:
        """Precision and recall meet thresholds."""
        results = [(e["expected"], routed_category(e)) for e in ground_truth_events]
        aggregate = AggregateScore(results=results)

        failed = [
            (event["id"], expected, actual)
            for event, (expected, actual) in zip(ground_truth_events, results)
            if expected != actual
        ]
        assert aggregate.precision >= PRECISION_THRESHOLD, (
            f"Precision {aggregate.precision:.2%} below {PRECISION_THRESHOLD:.0%}: {failed}"
        )
        assert aggregate.recall >= RECALL_THRESHOLD, (
            f"Recall {aggregate.recall:.2%} below {RECALL_THRESHOLD:.0%}: {failed}"
        )

    def test_no_over_routing(self, ground_truth_events: list[dict[str, Any]]) -> None:
        """Every prompt labelled NONE stays silent."""
        over_routed = [
            (e["id"], routed_category(e))
            for e in ground_truth_events
            if e["expected"] == NONE and routed_category(e) != NONE
        ]
        assert not over_routed, f"Over-routed prompts: {over_routed}"


class TestGroundTruthDataset:
    """Tests for ground truth dataset validity."""

    def test_event_ids_unique(self, ground_truth_events: list[dict[str, Any]]) -> None:
        ids = [e["id"] for e in ground_truth_events]
        assert len(ids) == len(set(ids)), "Duplicate event IDs found"

    def test_event_ids_format(self, ground_truth_events: list[dict[str, Any]]) -> None:
        for event in ground_truth_events:
            assert re.match(r"^GT-\d{3}$", event["id"]), f"Invalid event ID format: {event['id']}"

    def test_expected_categories_exist(self, ground_truth_events: list[dict[str, Any]]) -> None:
        known = set(default_rule_table().ids) | {NONE}
        for event in ground_truth_events:
            assert event["expected"] in known, f"{event['id']}: unknown category {event['expected']}"

    def test_all_categories_covered(self, ground_truth_events: list[dict[str, Any]]) -> None:
        covered = {e["expected"] for e in ground_truth_events}
        missing = set(default_rule_table().ids) - covered
        assert not missing, f"Missing categories: {missing}"

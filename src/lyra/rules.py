"""
Rule table model: categories, signal rules and their matchers.

A rule table is plain data (the built-in one lives in default_rules.py,
operators can supply their own in lyra-config.yaml) compiled once into
immutable objects. Scoring code only ever talks to these objects, so adding
or renaming a category never requires touching the scorer.

Rule format (YAML or dict):

    - name: build_with_project_noun
      regex: "\\b(build|create)\\b"     # or phrase: / literal: / terms: / always:
      weight: 3
      negatable: true
      requires: ["\\b(app|dashboard)\\b"]
      min_length: 0

Matcher kinds:
    literal   plain substring
    phrase    whole-word phrase (word boundaries on both ends)
    regex     regular expression
    terms     distinct-term counter, matches when at least min_count of the
              listed regex fragments occur (each wrapped in word boundaries)
    always    matches any text; useful with min_length or requires
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from lyra.exceptions import RuleTableError

MATCHER_KINDS = ("literal", "phrase", "regex", "terms", "always")


# =============================================================================
# MATCHERS
# =============================================================================


@dataclass(frozen=True)
class LiteralMatcher:
    """Plain substring match."""

    text: str
    kind: str = "literal"

    def find(self, text: str) -> Optional[int]:
        index = text.find(self.text)
        return index if index >= 0 else None


@dataclass(frozen=True)
class RegexMatcher:
    """Regular expression match; ``find`` returns the first match offset."""

    pattern: re.Pattern
    kind: str = "regex"

    @classmethod
    def compile(cls, pattern: str, kind: str = "regex") -> "RegexMatcher":
        try:
            return cls(re.compile(pattern, re.IGNORECASE), kind=kind)
        except re.error as e:
            raise RuleTableError(f"Invalid pattern {pattern!r}: {e}") from e

    @classmethod
    def phrase(cls, phrase: str) -> "RegexMatcher":
        """Whole-word phrase; inner whitespace matches any run of spaces."""
        words = [re.escape(word) for word in phrase.split()]
        return cls.compile(r"\b" + r"\s+".join(words) + r"\b", kind="phrase")

    def find(self, text: str) -> Optional[int]:
        match = self.pattern.search(text)
        return match.start() if match else None


@dataclass(frozen=True)
class DistinctTermsMatcher:
    """
    Matches when at least ``min_count`` distinct terms appear in the text.

    Each term is a regex fragment matched on word boundaries. ``find``
    returns the offset of the earliest term found.
    """

    terms: Tuple[RegexMatcher, ...]
    min_count: int = 2
    kind: str = "terms"

    @classmethod
    def from_terms(cls, terms: List[str], min_count: int = 2) -> "DistinctTermsMatcher":
        if not terms:
            raise RuleTableError("terms matcher needs at least one term")
        return cls(
            tuple(RegexMatcher.compile(rf"\b(?:{t})\b", kind="term") for t in terms),
            min_count=min_count,
        )

    def find(self, text: str) -> Optional[int]:
        offsets = [i for i in (term.find(text) for term in self.terms) if i is not None]
        if not offsets or len(offsets) < self.min_count:
            return None
        return min(offsets)


@dataclass(frozen=True)
class AlwaysMatcher:
    """Matches any text at offset 0."""

    kind: str = "always"

    def find(self, text: str) -> Optional[int]:
        return 0


def build_matcher(data: Dict[str, Any]):
    """Build the matcher declared by a rule dict (exactly one kind key)."""
    kinds = [k for k in MATCHER_KINDS if k in data]
    if len(kinds) != 1:
        raise RuleTableError(
            f"Rule {data.get('name', '?')!r} must declare exactly one of "
            f"{', '.join(MATCHER_KINDS)} (found: {kinds or 'none'})"
        )

    kind = kinds[0]
    value = data[kind]
    if kind == "literal":
        return LiteralMatcher(str(value).lower())
    if kind == "phrase":
        return RegexMatcher.phrase(str(value).lower())
    if kind == "regex":
        return RegexMatcher.compile(str(value))
    if kind == "terms":
        if not isinstance(value, list):
            raise RuleTableError(f"Rule {data.get('name', '?')!r}: terms must be a list")
        min_count = data.get("min_count", 2)
        if not isinstance(min_count, int) or isinstance(min_count, bool) or min_count < 1:
            raise RuleTableError(
                f"Rule {data.get('name', '?')!r}: min_count must be a positive integer"
            )
        return DistinctTermsMatcher.from_terms([str(t) for t in value], min_count)
    return AlwaysMatcher()


# =============================================================================
# RULES AND CATEGORIES
# =============================================================================


@dataclass(frozen=True)
class SignalRule:
    """One weighted lexical cue for a category."""

    name: str
    matcher: Any
    weight: int
    negatable: bool = False
    min_length: Optional[int] = None
    requires: Tuple[Any, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignalRule":
        """Create a SignalRule from its YAML dict form."""
        if not isinstance(data, dict):
            raise RuleTableError(f"Rule must be a mapping, got {type(data).__name__}")

        name = data.get("name")
        if not name:
            raise RuleTableError(f"Rule is missing a name: {data}")

        weight = data.get("weight", 1)
        if not isinstance(weight, int) or isinstance(weight, bool) or weight <= 0:
            raise RuleTableError(f"Rule {name!r}: weight must be a positive integer")

        requires = data.get("requires") or []
        if not isinstance(requires, list):
            raise RuleTableError(f"Rule {name!r}: requires must be a list of patterns")

        min_length = data.get("min_length")
        if min_length is not None and (
            not isinstance(min_length, int) or isinstance(min_length, bool) or min_length < 0
        ):
            raise RuleTableError(f"Rule {name!r}: min_length must be a non-negative integer")

        return cls(
            name=name,
            matcher=build_matcher(data),
            weight=weight,
            negatable=bool(data.get("negatable", False)),
            min_length=min_length,
            requires=tuple(RegexMatcher.compile(str(p)) for p in requires),
        )


@dataclass(frozen=True)
class Category:
    """A routing destination and the rules that point at it."""

    id: str
    route: str
    description: str = ""
    examples: Tuple[str, ...] = ()
    rules: Tuple[SignalRule, ...] = ()
    redirect_when_managed: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        """Create a Category from its YAML dict form."""
        if not isinstance(data, dict):
            raise RuleTableError(f"Category must be a mapping, got {type(data).__name__}")

        category_id = data.get("id")
        route = data.get("route")
        if not category_id or not route:
            raise RuleTableError(f"Category needs both 'id' and 'route': {data}")
        if category_id == "NONE":
            raise RuleTableError("'NONE' is reserved and cannot be a category id")

        rules = tuple(SignalRule.from_dict(r) for r in data.get("rules") or [])
        names = [r.name for r in rules]
        if len(names) != len(set(names)):
            raise RuleTableError(f"Category {category_id!r} has duplicate rule names")

        return cls(
            id=category_id,
            route=route,
            description=data.get("description", ""),
            examples=tuple(data.get("examples") or ()),
            rules=rules,
            redirect_when_managed=data.get("redirect_when_managed"),
        )


class RuleTable:
    """
    Registry of categories, built once and evaluated generically.

    Validates that category ids are unique and that every
    redirect_when_managed target names a category in the same table.
    """

    def __init__(self, categories: List[Category]):
        self._categories: Dict[str, Category] = {}
        for category in categories:
            if category.id in self._categories:
                raise RuleTableError(f"Duplicate category id: {category.id!r}")
            self._categories[category.id] = category

        for category in self._categories.values():
            target = category.redirect_when_managed
            if target and target not in self._categories:
                raise RuleTableError(
                    f"Category {category.id!r} redirects to unknown category {target!r}"
                )

    @classmethod
    def from_dicts(cls, data: List[Dict[str, Any]]) -> "RuleTable":
        """Compile a list of category dicts into a RuleTable."""
        if not isinstance(data, list) or not data:
            raise RuleTableError("Rule table must be a non-empty list of categories")
        return cls([Category.from_dict(item) for item in data])

    @property
    def ids(self) -> List[str]:
        return list(self._categories.keys())

    def get(self, category_id: str) -> Optional[Category]:
        return self._categories.get(category_id)

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories.values())

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._categories

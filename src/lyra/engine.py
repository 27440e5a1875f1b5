"""Classification Engine Abstract Interface

Defines the abstract interface for swappable classification engines.

Architecture:
    UserPromptSubmit hook → lyra-route → ClassificationEngine → Decision

    The ClassificationEngine interface lets the scoring approach evolve
    without touching the hook entry points or the output format.

Versions:
    - lexical-1: Rule-table scoring (keywords, phrases, negation, co-occurrence)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from lyra.config import Thresholds
from lyra.context import PromptContext
from lyra.decision import Decision
from lyra.exceptions import ConfigurationError
from lyra.rules import RuleTable


class FeatureSpec:
    """Specification for a feature flag."""

    def __init__(
        self,
        name: str,
        description: str,
        default: bool = True,
        category: str = "general"
    ):
        """
        Define a feature flag specification.

        Args:
            name: Feature identifier (e.g., "negation_detection")
            description: Human-readable description
            default: Default value (True = enabled by default)
            category: Grouping category (e.g., "filter", "scoring")
        """
        self.name = name
        self.description = description
        self.default = default
        self.category = category


class ClassificationEngine(ABC):
    """
    Abstract interface for classification engines.

    Engines are built once per process from a rule table and thresholds.
    They hold no per-prompt state: every call to classify() is reproducible
    from its PromptContext alone.

    Attributes:
        table: RuleTable the engine evaluates
        thresholds: Tunable numeric constants
    """

    def __init__(self, table: RuleTable, thresholds: Optional[Thresholds] = None):
        self.table = table
        self.thresholds = thresholds or Thresholds()

    @abstractmethod
    def classify(self, context: PromptContext) -> Decision:
        """
        Classify a prompt.

        Args:
            context: Normalized prompt plus the managed-project flag

        Returns:
            Decision naming a category, or Decision.none()
        """
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        """Return engine version identifier (e.g. 'lexical-1')."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Return human-readable description of the classification approach."""
        pass

    @classmethod
    def get_available_features(cls) -> List[FeatureSpec]:
        """
        Return list of feature flags available for this engine.

        Default implementation returns empty list (no configurable features).
        """
        return []

    @classmethod
    def get_default_features(cls) -> Dict[str, bool]:
        """Return dict mapping feature name to default value."""
        return {f.name: f.default for f in cls.get_available_features()}


# Engine registry for factory function
_ENGINE_REGISTRY: Dict[str, type] = {}


def register_engine(version: str):
    """
    Decorator to register a classification engine implementation.

    Usage:
        @register_engine("lexical-1")
        class LexicalEngine(ClassificationEngine):
            ...
    """
    def decorator(cls):
        _ENGINE_REGISTRY[version] = cls
        return cls
    return decorator


DEFAULT_ENGINE_VERSION: Optional[str] = None


def set_default_engine(version: str):
    """Set the default engine version for the factory function."""
    global DEFAULT_ENGINE_VERSION
    DEFAULT_ENGINE_VERSION = version


def get_default_engine() -> str:
    """Get the default engine version, falling back to first registered if not set."""
    if DEFAULT_ENGINE_VERSION and DEFAULT_ENGINE_VERSION in _ENGINE_REGISTRY:
        return DEFAULT_ENGINE_VERSION
    if _ENGINE_REGISTRY:
        return next(iter(_ENGINE_REGISTRY.keys()))
    raise ConfigurationError("No classification engines registered")


def create_engine(
    table: RuleTable,
    config: Optional[Dict[str, Any]] = None,
    thresholds: Optional[Thresholds] = None,
) -> ClassificationEngine:
    """
    Factory function to create a classification engine from configuration.

    Args:
        table: RuleTable to evaluate
        config: Optional configuration dictionary with:
            - routing.engine: Engine version (uses default if not specified)
            - routing.features: Feature flags dict
        thresholds: Tunable constants (defaults used when None)

    Returns:
        ClassificationEngine implementation instance

    Raises:
        ConfigurationError: If requested engine version or a feature is unknown

    Examples:
        engine = create_engine(table)
        engine = create_engine(table, {"routing": {
            "engine": "lexical-1",
            "features": {"question_exit": False}
        }})
    """
    default_version = get_default_engine()
    engine_version = default_version
    features = None
    if config:
        routing_config = config.get("routing") or {}
        if not isinstance(routing_config, dict):
            raise ConfigurationError(f"routing must be a mapping, got {routing_config!r}")
        # Use 'or' to handle None values from config (not just missing keys)
        engine_version = routing_config.get("engine") or default_version
        features = routing_config.get("features")
        if features is not None and not isinstance(features, dict):
            raise ConfigurationError(f"routing.features must be a mapping, got {features!r}")

    if engine_version not in _ENGINE_REGISTRY:
        available = list(_ENGINE_REGISTRY.keys())
        raise ConfigurationError(
            f"Unknown classification engine: '{engine_version}'. "
            f"Available engines: {available}"
        )

    if features:
        validate_features(engine_version, features)

    engine_class = _ENGINE_REGISTRY[engine_version]
    return engine_class(table, thresholds=thresholds, features=features)


def get_available_engines() -> List[str]:
    """Return list of registered engine version identifiers."""
    return list(_ENGINE_REGISTRY.keys())


def get_engine_features(version: str) -> List[FeatureSpec]:
    """
    Get available feature flags for a specific engine version.

    Raises:
        ConfigurationError: If engine version is unknown
    """
    if version not in _ENGINE_REGISTRY:
        available = list(_ENGINE_REGISTRY.keys())
        raise ConfigurationError(
            f"Unknown classification engine: '{version}'. "
            f"Available engines: {available}"
        )

    return _ENGINE_REGISTRY[version].get_available_features()


def validate_features(version: str, features: Dict[str, bool]) -> None:
    """
    Validate that provided features are valid for the engine.

    Raises:
        ConfigurationError: If any feature is not available for this engine
    """
    available_names = {f.name for f in get_engine_features(version)}

    for feature_name in features.keys():
        if feature_name not in available_names:
            raise ConfigurationError(
                f"Feature '{feature_name}' is not available for engine '{version}'. "
                f"Available features: {sorted(available_names) if available_names else '(none)'}"
            )

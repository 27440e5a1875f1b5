"""Lyra Configuration

Configuration loading with environment variable support and sensible defaults.
The router must never fail because of configuration, so every loader here
has a path that ends in built-in defaults.

Environment Variables:
    LYRA_CONFIG_PATH: Path to config file (YAML; JSON is accepted as YAML)
    LYRA_LOG_LEVEL: Override logging level (e.g. DEBUG)

Default Locations (first existing wins):
    ~/.claude/hooks/lyra-config.yaml
    ~/.claude/hooks/lyra-config.json

Configuration Schema:
    routing:
        engine: str - Engine version (e.g., "lexical-1")
        features: dict - Feature flags for engine (e.g., {"question_exit": True})
    thresholds:
        min_length: int - Prompts shorter than this are never routed (default: 30)
        question_length: int - Questions shorter than this are never routed (default: 100)
        confidence_floor: int - Minimum winning score (default: 3)
        negation_window: int - Characters inspected before a keyword (default: 15)
    logging:
        level: str - Logging level (default: "WARNING")
    categories: list - Optional rule table replacing the built-in one
"""

import copy
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from lyra.default_rules import default_rule_table
from lyra.exceptions import ConfigurationError, RuleTableError
from lyra.rules import RuleTable

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

CONFIG_FILENAMES = ("lyra-config.yaml", "lyra-config.json")

MAPPING_SECTIONS = ("routing", "thresholds", "logging")


@dataclass(frozen=True)
class Thresholds:
    """Tunable numeric constants for the classifier."""

    min_length: int = 30
    question_length: int = 100
    confidence_floor: int = 3
    negation_window: int = 15


# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "routing": {
        "engine": None,  # Use registered default engine
        "features": {},
    },
    "thresholds": {
        "min_length": Thresholds.min_length,
        "question_length": Thresholds.question_length,
        "confidence_floor": Thresholds.confidence_floor,
        "negation_window": Thresholds.negation_window,
    },
    "logging": {
        "level": "WARNING",
    },
    "categories": None,  # Use built-in rule table
}


def get_hooks_dir() -> Path:
    """Directory the host loads hook scripts and their config from."""
    return Path.home() / ".claude" / "hooks"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Read one config file; raises ConfigurationError when unusable."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}")
    except IOError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    _check_sections(data, path)
    return data


def _check_sections(data: Dict[str, Any], path: Path) -> None:
    """Raise ConfigurationError when a known section has the wrong shape."""
    for section in MAPPING_SECTIONS:
        value = data.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigurationError(f"Config file {path}: '{section}' must be a mapping")

    features = (data.get("routing") or {}).get("features")
    if features is not None and not isinstance(features, dict):
        raise ConfigurationError(f"Config file {path}: 'routing.features' must be a mapping")

    categories = data.get("categories")
    if categories is not None and not isinstance(categories, list):
        raise ConfigurationError(f"Config file {path}: 'categories' must be a list")


def find_config_file(hooks_dir: Optional[Path] = None) -> Optional[Path]:
    """Return the first default config location that exists."""
    hooks_dir = hooks_dir or get_hooks_dir()
    for name in CONFIG_FILENAMES:
        candidate = hooks_dir / name
        if candidate.exists():
            return candidate
    return None


def load_config(
    config_path: Optional[str] = None,
    hooks_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Load configuration from file with defaults.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (config_path, LYRA_CONFIG_PATH, or default location)

    An explicitly named file that is invalid raises ConfigurationError; a
    broken file found in a default location is logged and ignored.

    Args:
        config_path: Explicit config file path (overrides LYRA_CONFIG_PATH)
        hooks_dir: Directory searched for default config files

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If an explicit config file is invalid
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    file_path = config_path or os.environ.get("LYRA_CONFIG_PATH")

    if file_path:
        resolved = Path(file_path).expanduser()
        if resolved.exists():
            config = _deep_merge(config, _read_config_file(resolved))
            logger.info(f"Loaded configuration from: {resolved}")
        else:
            logger.warning(f"Config file not found (using defaults): {file_path}")
    else:
        default_path = find_config_file(hooks_dir)
        if default_path:
            try:
                config = _deep_merge(config, _read_config_file(default_path))
                logger.info(f"Loaded configuration from: {default_path}")
            except ConfigurationError as e:
                logger.warning(f"Ignoring default config: {e}")
        else:
            logger.debug("No config file found, using defaults")

    return config


def get_thresholds(config: Dict[str, Any]) -> Thresholds:
    """
    Build Thresholds from config, keeping defaults for bad values.

    Non-integer or negative values are logged and replaced by the default.
    """
    raw = config.get("thresholds") or {}
    if not isinstance(raw, dict):
        logger.warning(f"Invalid thresholds section {raw!r}, using defaults")
        raw = {}
    values = {}
    for f in fields(Thresholds):
        value = raw.get(f.name, f.default)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning(f"Invalid threshold {f.name}={value!r}, using {f.default}")
            value = f.default
        values[f.name] = value
    return Thresholds(**values)


def get_routing_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract routing configuration for the create_engine() factory.

    Returns:
        Dictionary suitable for passing to create_engine()
    """
    routing = config.get("routing") or {}
    if not isinstance(routing, dict):
        logger.warning(f"Invalid routing section {routing!r}, using defaults")
        routing = {}
    features = routing.get("features") or {}
    if not isinstance(features, dict):
        logger.warning(f"Invalid routing.features {features!r}, using defaults")
        features = {}
    engine = routing.get("engine")
    if engine is not None and not isinstance(engine, str):
        logger.warning(f"Invalid routing.engine {engine!r}, using default engine")
        engine = None
    return {
        "routing": {
            "engine": engine,
            "features": features,
        }
    }


def get_log_level(config: Optional[Dict[str, Any]] = None) -> str:
    """Resolve the logging level: LYRA_LOG_LEVEL, then config, then WARNING."""
    env_level = os.environ.get("LYRA_LOG_LEVEL")
    if env_level:
        return env_level.upper()
    logging_config = (config or {}).get("logging") or {}
    if not isinstance(logging_config, dict):
        return "WARNING"
    level = logging_config.get("level") or "WARNING"
    return str(level).upper()


def configure_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """Send log records to stderr so hook stdout stays clean."""
    level = getattr(logging, get_log_level(config), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def load_rule_table(config: Optional[Dict[str, Any]] = None) -> RuleTable:
    """
    Return the configured rule table, or the built-in table.

    A ``categories`` list in config replaces the built-in table wholesale.
    If it fails to compile the error is logged and defaults are used.
    """
    categories: Optional[List[Dict[str, Any]]] = (config or {}).get("categories")
    if not categories:
        return default_rule_table()

    try:
        table = RuleTable.from_dicts(categories)
        logger.info(f"Loaded {len(table)} categories from config")
        return table
    except (RuleTableError, TypeError, ValueError) as e:
        logger.warning(f"Invalid rule table in config (using built-in): {e}")
        return default_rule_table()

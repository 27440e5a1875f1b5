#!/usr/bin/env python3
"""
Hook entry points for Lyra.

    lyra-context       UserPromptSubmit: inject project state and stack
    lyra-route         UserPromptSubmit: suggest a workflow for the prompt
    lyra-quality-gate  Stop: warn about uncommitted changes and console.log

The host sends JSON on stdin, e.g. for UserPromptSubmit:
    {"prompt": "user message", "session_id": "...", "cwd": "..."}

Every entry point exits 0. Routing is advisory, so a broken config, an
unreadable payload or an internal error ends in silence, never in a
failure the user sees.
"""

import copy
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import lyra.engines  # noqa: F401 - imported for side effect (engine registration)
from lyra.config import (
    DEFAULT_CONFIG,
    configure_logging,
    get_routing_config,
    get_thresholds,
    load_config,
    load_rule_table,
)
from lyra.context import build_context, extract_prompt
from lyra.engine import ClassificationEngine, create_engine
from lyra.exceptions import ConfigurationError
from lyra.formatter import format_context, format_decision
from lyra.project_state import has_managed_project, list_debug_sessions, read_state_snippet
from lyra.quality_gate import run_quality_gate
from lyra.rules import RuleTable
from lyra.stack_detector import detect_languages, detect_package_stack

logger = logging.getLogger(__name__)


def load_config_or_defaults(config_path: Optional[str] = None) -> Dict[str, Any]:
    """load_config(), degrading to DEFAULT_CONFIG on ConfigurationError."""
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        logger.warning(f"Using default configuration: {e}")
        return load_config_defaults()


def load_config_defaults() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


def build_engine(config: Dict[str, Any], table: RuleTable) -> ClassificationEngine:
    """Create the configured engine, or the default one if config names a bad engine."""
    thresholds = get_thresholds(config)
    try:
        return create_engine(table, get_routing_config(config), thresholds)
    except ConfigurationError as e:
        logger.warning(f"Using default engine: {e}")
        return create_engine(table, thresholds=thresholds)


def route_prompt(
    prompt: str,
    has_managed_project: bool = False,
    config: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Classify one prompt and render the router output.

    Args:
        prompt: Raw prompt text
        has_managed_project: Whether the working directory is already managed
        config: Loaded configuration (defaults when None)

    Returns:
        "Lyra -> <route>" or "" when the prompt should not be routed
    """
    config = config or load_config_defaults()
    table = load_rule_table(config)
    engine = build_engine(config, table)
    decision = engine.classify(build_context(prompt, has_managed_project))
    return format_decision(decision, table)


def read_stdin() -> str:
    """Read the hook payload; undecodable bytes become U+FFFD."""
    buffer = getattr(sys.stdin, "buffer", None)
    if buffer is None:
        return sys.stdin.read()
    return buffer.read().decode("utf-8", errors="replace")


def route_cli() -> None:
    """
    CLI entry point for the router hook.

    Reads the prompt from stdin JSON (hook) or from command line args
    (manual use) and prints at most one line.

    Usage:
        echo '{"prompt": "build a dashboard for tracking expenses"}' | lyra-route
        lyra-route "build a dashboard for tracking expenses"
    """
    configure_logging()

    try:
        if len(sys.argv) > 1:
            prompt: Optional[str] = " ".join(sys.argv[1:])
        else:
            prompt = extract_prompt(read_stdin())
        if not prompt:
            return

        config = load_config_or_defaults()
        configure_logging(config)
        output = route_prompt(
            prompt,
            has_managed_project=has_managed_project(Path.cwd()),
            config=config,
        )
    except Exception as e:
        # Log to stderr, never pollute stdout or fail the host
        logger.warning(f"Lyra routing error: {e}")
        return

    if output:
        print(output)


def build_context_report(cwd: Path) -> str:
    """Project state, debug sessions and stack for cwd, formatted."""
    return format_context(
        state_snippet=read_state_snippet(cwd),
        debug_sessions=list_debug_sessions(cwd),
        stack=detect_package_stack(cwd),
        languages=detect_languages(cwd),
    )


def context_cli() -> None:
    """CLI entry point for the context hook. Ignores stdin."""
    configure_logging()
    try:
        output = build_context_report(Path.cwd())
    except Exception as e:
        logger.warning(f"Lyra context error: {e}")
        return

    if output:
        sys.stdout.write(output)


def quality_gate_cli() -> None:
    """CLI entry point for the Stop hook. Ignores stdin."""
    configure_logging()
    try:
        output = run_quality_gate(Path.cwd())
    except Exception as e:
        logger.warning(f"Lyra quality gate error: {e}")
        return

    if output:
        print(output)


if __name__ == "__main__":
    route_cli()

"""
Project-state reader.

A directory is a "managed project" when it carries .planning/STATE.md.
Every reader here treats I/O failure as "nothing there".
"""

import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

PLANNING_DIR = ".planning"
STATE_FILE = "STATE.md"
DEBUG_DIR = "debug"
STATE_SNIPPET_LINES = 25


def get_state_path(cwd: Path) -> Path:
    return cwd / PLANNING_DIR / STATE_FILE


def has_managed_project(cwd: Path) -> bool:
    """True when the project state marker exists; False on any I/O error."""
    try:
        return get_state_path(cwd).is_file()
    except OSError as e:
        logger.debug(f"Cannot check project state in {cwd}: {e}")
        return False


def read_state_snippet(cwd: Path, max_lines: int = STATE_SNIPPET_LINES) -> Optional[str]:
    """Return the first ``max_lines`` lines of STATE.md, or None."""
    path = get_state_path(cwd)
    try:
        if not path.is_file():
            return None
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Cannot read {path}: {e}")
        return None
    return "\n".join(content.split("\n")[:max_lines])


def list_debug_sessions(cwd: Path) -> List[str]:
    """Names of markdown files in .planning/debug, sorted."""
    debug_dir = cwd / PLANNING_DIR / DEBUG_DIR
    try:
        if not debug_dir.is_dir():
            return []
        return sorted(p.name for p in debug_dir.iterdir() if p.suffix == ".md" and p.is_file())
    except OSError as e:
        logger.debug(f"Cannot list {debug_dir}: {e}")
        return []

"""
Session-end quality gate (Stop hook).

Warns about uncommitted changes and stray console.log calls in changed
JavaScript/TypeScript files. Advisory only: any failure (git missing, not
a repository, unreadable file) just means fewer warnings.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 10
SCRIPT_SUFFIXES = {".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"}
DEBUG_CALL = "console.log"


def git_changed_paths(cwd: Path) -> Optional[List[str]]:
    """
    Paths reported by ``git status --porcelain``.

    Returns:
        List of changed paths (empty when clean), or None outside a git
        work tree or when git is unavailable
    """
    try:
        result = subprocess.run(
            ["git", "status", "--porcelain"],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        logger.debug(f"git status unavailable: {e}")
        return None

    if result.returncode != 0:
        return None
    return parse_porcelain(result.stdout)


def parse_porcelain(output: str) -> List[str]:
    """Extract paths from porcelain v1 output; renames keep the new path."""
    paths = []
    for line in output.splitlines():
        if len(line) < 4:
            continue
        path = line[3:]
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        paths.append(path.strip('"'))
    return paths


def find_debug_calls(cwd: Path, paths: List[str]) -> List[str]:
    """Changed script files that still contain console.log."""
    flagged = []
    for rel_path in paths:
        path = cwd / rel_path
        if path.suffix not in SCRIPT_SUFFIXES or not path.is_file():
            continue
        try:
            if DEBUG_CALL in path.read_text(encoding="utf-8", errors="replace"):
                flagged.append(rel_path)
        except OSError as e:
            logger.debug(f"Cannot read {path}: {e}")
    return flagged


def run_quality_gate(cwd: Path) -> str:
    """
    Build the quality gate report for cwd.

    Returns:
        Report text, or "" when there is nothing to warn about
    """
    paths = git_changed_paths(cwd)
    if not paths:
        return ""

    lines = ["[Lyra Quality Gate]"]
    plural = "" if len(paths) == 1 else "s"
    lines.append(f"  - {len(paths)} uncommitted change{plural}")

    flagged = find_debug_calls(cwd, paths)
    if flagged:
        lines.append(f"  - {DEBUG_CALL} found in: {', '.join(flagged)}")

    return "\n".join(lines)

"""
Output formatting for the Lyra hooks.

The router emits a single line or nothing: silence is itself the
"do not route" signal to the host. The context hook emits bracketed
sections the host injects verbatim.
"""

from typing import List, Optional

from lyra.decision import Decision
from lyra.rules import RuleTable

ROUTE_PREFIX = "Lyra -> "


def format_decision(decision: Decision, table: RuleTable) -> str:
    """
    Render a Decision as the router's single output line.

    Returns:
        "Lyra -> <route>" for a routed decision, "" for NONE
    """
    if decision.is_none:
        return ""

    category = table.get(decision.category)
    if category is None:
        return ""
    return f"{ROUTE_PREFIX}{category.route}"


def format_context(
    state_snippet: Optional[str] = None,
    debug_sessions: Optional[List[str]] = None,
    stack: Optional[List[str]] = None,
    languages: Optional[List[str]] = None,
    max_sessions: int = 3,
) -> str:
    """
    Render the project context block.

    Args:
        state_snippet: Head of the project STATE.md, if any
        debug_sessions: Names of active debug session files
        stack: Technology labels detected from package.json
        languages: Language labels detected from other manifests
        max_sessions: How many debug session names to list

    Returns:
        Newline-joined sections, or "" when there is nothing to report
    """
    lines: List[str] = []

    if state_snippet is not None:
        lines.append("[GSD Project State]")
        lines.append(state_snippet)
        lines.append("")

    if debug_sessions:
        lines.append(f"[Active Debug Sessions: {len(debug_sessions)}]")
        lines.extend(f"  - {name}" for name in debug_sessions[:max_sessions])
        lines.append("")

    if stack:
        lines.append(f"[Stack: {', '.join(stack)}]")

    for language in languages or []:
        lines.append(f"[Stack: {language}]")

    return "\n".join(lines)

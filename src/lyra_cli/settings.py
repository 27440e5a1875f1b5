"""Host settings patching for the Lyra hooks.

Installs and removes the Lyra hook entries in ~/.claude/settings.json:

    UserPromptSubmit: lyra-context, lyra-route (prepended, context first)
    Stop:             lyra-quality-gate (prepended)

Patching is idempotent: existing Lyra entries, including the ones the
older Node.js hooks left behind, are removed before the new ones go in.
"""

import json
import shutil
import sys
from pathlib import Path
from typing import Any, Optional

CONTEXT_COMMAND = "lyra-context"
ROUTER_COMMAND = "lyra-route"
QUALITY_GATE_COMMAND = "lyra-quality-gate"

PROMPT_HOOK_TIMEOUT = 5
STOP_HOOK_TIMEOUT = 15

# Substrings identifying Lyra commands, current and legacy (lyra-router.js,
# stop-quality-gate.sh/.ps1)
PROMPT_HOOK_MARKERS = ("lyra-context", "lyra-route")
QUALITY_GATE_MARKER = "quality-gate"

BACKUP_SUFFIX = ".lyra-backup"


def get_claude_dir() -> Path:
    """Get path to the host configuration directory."""
    return Path.home() / ".claude"


def get_settings_path(claude_dir: Optional[Path] = None) -> Path:
    """Get path to the host settings file inside claude_dir (default ~/.claude)."""
    return (claude_dir or get_claude_dir()) / "settings.json"


def resolve_command(name: str) -> str:
    """Absolute path of an installed console script, quoted when needed."""
    path = shutil.which(name)
    if not path:
        return name
    path = path.replace("\\", "/")
    if " " in path or sys.platform == "win32":
        return f'"{path}"'
    return path


def _command_hook(command: str, timeout: int) -> dict:
    return {"hooks": [{"type": "command", "command": command, "timeout": timeout}]}


def build_lyra_hooks() -> dict[str, dict]:
    """Hook entries to install, keyed by role."""
    return {
        "context": _command_hook(resolve_command(CONTEXT_COMMAND), PROMPT_HOOK_TIMEOUT),
        "router": _command_hook(resolve_command(ROUTER_COMMAND), PROMPT_HOOK_TIMEOUT),
        "quality_gate": _command_hook(resolve_command(QUALITY_GATE_COMMAND), STOP_HOOK_TIMEOUT),
    }


def _entry_hooks(entry: Any) -> list:
    if isinstance(entry, dict) and isinstance(entry.get("hooks"), list):
        return [h for h in entry["hooks"] if isinstance(h, dict)]
    return []


def is_lyra_prompt_hook(entry: Any) -> bool:
    """True for a UserPromptSubmit entry installed by any Lyra version."""
    for hook in _entry_hooks(entry):
        command = hook.get("command") or ""
        prompt = hook.get("prompt") or ""
        if any(marker in command for marker in PROMPT_HOOK_MARKERS):
            return True
        if QUALITY_GATE_MARKER in command or "Lyra" in prompt:
            return True
    return False


def is_quality_gate_hook(entry: Any) -> bool:
    """True for a Stop entry running a quality gate."""
    return any(
        QUALITY_GATE_MARKER in (hook.get("command") or "") for hook in _entry_hooks(entry)
    )


def load_settings(path: Path) -> tuple[dict, Optional[str]]:
    """
    Load settings, falling back to {} when the file is missing or corrupt.

    Returns:
        Tuple of (settings, warning message or None)
    """
    if not path.exists():
        return {}, None
    try:
        with open(path) as f:
            settings = json.load(f)
    except json.JSONDecodeError as e:
        return {}, f"{path.name} is corrupted: {e}"
    if not isinstance(settings, dict):
        return {}, f"{path.name} does not contain a JSON object"
    return settings, None


def backup_settings(path: Path) -> Optional[Path]:
    """Copy settings.json to settings.json.lyra-backup; None if no file."""
    if path.exists():
        backup_path = path.with_name(path.name + BACKUP_SUFFIX)
        shutil.copy(path, backup_path)
        return backup_path
    return None


def _event_list(settings: dict, event: str) -> list:
    hooks = settings.setdefault("hooks", {})
    entries = hooks.get(event)
    if not isinstance(entries, list):
        entries = []
        hooks[event] = entries
    return entries


def patch_settings(settings: dict, lyra_hooks: Optional[dict] = None) -> dict:
    """
    Merge Lyra hooks into settings.

    Existing Lyra entries are dropped first, so patching twice gives the
    same result as patching once. Non-Lyra entries keep their order after
    the Lyra ones.
    """
    lyra_hooks = lyra_hooks or build_lyra_hooks()
    if not isinstance(settings.get("hooks"), dict):
        settings["hooks"] = {}

    prompt_entries = [e for e in _event_list(settings, "UserPromptSubmit") if not is_lyra_prompt_hook(e)]
    settings["hooks"]["UserPromptSubmit"] = [lyra_hooks["context"], lyra_hooks["router"]] + prompt_entries

    stop_entries = [e for e in _event_list(settings, "Stop") if not is_quality_gate_hook(e)]
    settings["hooks"]["Stop"] = [lyra_hooks["quality_gate"]] + stop_entries

    return settings


def unpatch_settings(settings: dict) -> dict:
    """Remove every Lyra entry; drops events and 'hooks' left empty."""
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        return settings

    for event, predicate in (
        ("UserPromptSubmit", is_lyra_prompt_hook),
        ("Stop", is_quality_gate_hook),
    ):
        entries = hooks.get(event)
        if not isinstance(entries, list):
            continue
        remaining = [e for e in entries if not predicate(e)]
        if remaining:
            hooks[event] = remaining
        else:
            del hooks[event]

    if not hooks:
        del settings["hooks"]
    return settings


def has_lyra_hooks(settings: dict) -> bool:
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        return False
    prompt_entries = hooks.get("UserPromptSubmit") or []
    stop_entries = hooks.get("Stop") or []
    return any(is_lyra_prompt_hook(e) for e in prompt_entries) or any(
        is_quality_gate_hook(e) for e in stop_entries
    )


def write_settings(path: Path, settings: dict) -> None:
    """Write settings as 2-space indented JSON with a trailing newline."""
    with open(path, "w") as f:
        f.write(json.dumps(settings, indent=2) + "\n")

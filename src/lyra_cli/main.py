"""Lyra CLI entry point."""

import json
from pathlib import Path
from typing import Optional

import typer

import lyra.engines  # noqa: F401 - imported for side effect (engine registration)
from lyra import __version__
from lyra.config import load_config, load_rule_table
from lyra.context import build_context
from lyra.engines.lexical import LexicalEngine
from lyra.exceptions import ConfigurationError
from lyra.formatter import format_decision
from lyra.hooks import build_engine

from .console import (
    console,
    create_table,
    print_error,
    print_info,
    print_panel,
    print_success,
    print_warning,
)
from .settings import (
    BACKUP_SUFFIX,
    backup_settings,
    build_lyra_hooks,
    get_claude_dir,
    get_settings_path,
    has_lyra_hooks,
    load_settings,
    patch_settings,
    unpatch_settings,
    write_settings,
)

app = typer.Typer(
    name="lyra",
    help="Lyra - lexical prompt routing for coding-assistant hooks",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"lyra version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Lyra - lexical prompt routing for coding-assistant hooks."""
    pass


@app.command(name="install")
def install_command(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would be done without making changes",
    ),
    claude_dir: Optional[Path] = typer.Option(
        None,
        "--claude-dir",
        help="Host configuration directory (default: ~/.claude)",
    ),
) -> None:
    """Register the Lyra hooks in the host settings.json.

    Backs up the existing settings, replaces any previous Lyra entries and
    adds the context, router and quality gate hooks.
    """
    claude_dir = claude_dir or get_claude_dir()
    settings_path = get_settings_path(claude_dir)

    if not claude_dir.is_dir():
        print_error(f"Host configuration directory not found at {claude_dir}")
        console.print("Install and start your coding assistant once, then retry.")
        raise typer.Exit(1)

    settings, warning = load_settings(settings_path)
    upgrading = has_lyra_hooks(settings)
    merged = patch_settings(settings, build_lyra_hooks())

    if dry_run:
        console.print("[bold]Dry run - no changes made[/bold]\n")
        console.print(f"Settings path: {settings_path}\n")
        console.print("[bold]Hooks after install:[/bold]")
        console.print_json(json.dumps(merged["hooks"]))
        return

    backup_path = backup_settings(settings_path)
    if backup_path:
        print_success(f"Backup saved to {backup_path}")
    if warning:
        print_warning(warning)
        print_warning("Starting with empty settings. Your backup is safe.")
    if upgrading:
        print_info("Removed existing Lyra hooks (upgrading)")

    write_settings(settings_path, merged)
    print_success("Added Lyra context + router to UserPromptSubmit")
    print_success("Added quality gate to Stop")

    print_panel(
        "Lyra installed",
        "Restart your coding assistant to activate the new hooks.\n\n"
        "When routing applies you will see: Lyra -> /gsd:new-project\n"
        "Most prompts get no routing, simple tasks stay simple.",
        style="green",
    )


@app.command(name="uninstall")
def uninstall_command(
    claude_dir: Optional[Path] = typer.Option(
        None,
        "--claude-dir",
        help="Host configuration directory (default: ~/.claude)",
    ),
) -> None:
    """Remove the Lyra hooks from the host settings.json."""
    settings_path = get_settings_path(claude_dir)

    if not settings_path.exists():
        print_warning("No settings.json found. Nothing to uninstall.")
        return

    settings, warning = load_settings(settings_path)
    if warning:
        print_error(warning)
        raise typer.Exit(1)

    write_settings(settings_path, unpatch_settings(settings))
    print_success("Removed Lyra hooks from UserPromptSubmit and Stop")

    backup_path = settings_path.with_name(settings_path.name + BACKUP_SUFFIX)
    if backup_path.exists():
        print_info(f"Backup available at {backup_path} if you want to restore.")


def _load_config_or_exit(config_path: Optional[str]) -> dict:
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command(name="explain")
def explain_command(
    prompt: str = typer.Argument(..., help="Prompt to classify"),
    managed: bool = typer.Option(
        False,
        "--managed/--no-managed",
        help="Classify as if the project were already managed",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Config file (default: LYRA_CONFIG_PATH or hooks dir)"
    ),
) -> None:
    """Show how a prompt is scored and routed."""
    config = _load_config_or_exit(config_path)
    table = load_rule_table(config)
    engine = build_engine(config, table)
    context = build_context(prompt, managed)

    if not isinstance(engine, LexicalEngine):
        decision = engine.classify(context)
        console.print(format_decision(decision, table) or "[dim]no route[/dim]")
        return

    result = engine.explain(context)
    if result.fast_exit:
        console.print(f"[yellow]Fast exit:[/yellow] {result.fast_exit}")
        console.print("[dim]no route[/dim]")
        return

    table_view = create_table("Category scores")
    table_view.add_column("Category")
    table_view.add_column("Score", justify="right")
    table_view.add_column("Matched rules")
    table_view.add_column("Negated rules")
    for category_id, score in result.scoring.scores.items():
        table_view.add_row(
            category_id,
            str(score),
            ", ".join(result.scoring.matched.get(category_id, [])),
            ", ".join(result.scoring.negated.get(category_id, [])),
        )
    console.print(table_view)

    decision = result.decision
    output = format_decision(decision, table)
    if not output:
        console.print(f"Decision: [dim]NONE[/dim] (top score {decision.score})")
        return
    console.print(f"Decision: [green]{decision.category}[/green] (score {decision.score})")
    if decision.redirected_from:
        console.print(f"[dim]Redirected from {decision.redirected_from} (managed project)[/dim]")
    console.print(output)


@app.command(name="categories")
def categories_command(
    config_path: Optional[str] = typer.Option(
        None, "--config", "-c", help="Config file (default: LYRA_CONFIG_PATH or hooks dir)"
    ),
) -> None:
    """List the active routing categories."""
    table = load_rule_table(_load_config_or_exit(config_path))

    view = create_table("Routing categories")
    view.add_column("Category")
    view.add_column("Route")
    view.add_column("Rules", justify="right")
    view.add_column("Description")
    for category in table:
        view.add_row(category.id, category.route, str(len(category.rules)), category.description)
    console.print(view)


if __name__ == "__main__":
    app()

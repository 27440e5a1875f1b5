"""Unit tests for CLI console helpers."""

from rich.console import Console
from rich.table import Table

from lyra_cli import console as console_mod


class TestConsole:
    def test_console_is_rich_console(self):
        assert isinstance(console_mod.console, Console)

    def test_create_table(self):
        table = console_mod.create_table("Scores")
        assert isinstance(table, Table)
        assert table.title == "Scores"

    def test_create_untitled_table(self):
        assert console_mod.create_table().title is None

    def test_print_helpers(self, capsys):
        console_mod.print_success("saved")
        console_mod.print_warning("careful")
        out = capsys.readouterr().out
        assert "saved" in out
        assert "careful" in out

"""Shared pytest fixtures for Lyra tests."""

from pathlib import Path

import pytest

import lyra.engines  # noqa: F401 - imported for side effect (engine registration)
from lyra.config import Thresholds
from lyra.default_rules import default_rule_table
from lyra.engines.lexical import LexicalEngine
from lyra.rules import RuleTable


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """Create a temporary project directory for tests that write files."""
    project = tmp_path / "test-project"
    project.mkdir()
    return project


@pytest.fixture
def managed_project(temp_project: Path) -> Path:
    """Temporary project carrying a .planning/STATE.md marker."""
    planning = temp_project / ".planning"
    planning.mkdir()
    (planning / "STATE.md").write_text("# State\n\nPhase: 2\n")
    return temp_project


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def default_table() -> RuleTable:
    """The built-in rule table."""
    return default_rule_table()


@pytest.fixture
def engine(default_table: RuleTable) -> LexicalEngine:
    """Lexical engine over the built-in table with default thresholds."""
    return LexicalEngine(default_table, Thresholds())


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from the real ~/.claude and LYRA_* settings."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("LYRA_CONFIG_PATH", raising=False)
    monkeypatch.delenv("LYRA_LOG_LEVEL", raising=False)

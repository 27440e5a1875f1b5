"""Tests for the hook entry points."""

import io
import json
import sys

import pytest

from lyra import hooks
from lyra.config import DEFAULT_CONFIG, load_rule_table
from lyra.engines.lexical import LEXICAL_VERSION, LexicalEngine


@pytest.fixture
def run_hook(monkeypatch, capsys):
    """Run a hook entry point with the given stdin, argv and cwd."""

    def run(entry_point, stdin="", argv=None, cwd=None):
        monkeypatch.setattr(sys, "argv", ["lyra-hook"] + list(argv or []))
        monkeypatch.setattr(sys, "stdin", io.StringIO(stdin))
        if cwd is not None:
            monkeypatch.chdir(cwd)
        entry_point()
        return capsys.readouterr().out

    return run


def payload(prompt):
    return json.dumps({"prompt": prompt, "session_id": "abc", "cwd": "/tmp"})


class TestRoutePrompt:
    """Tests for route_prompt."""

    def test_routes(self):
        assert hooks.route_prompt("build a dashboard for tracking expenses") == (
            "Lyra -> /gsd:new-project"
        )

    def test_managed_redirect(self):
        output = hooks.route_prompt(
            "build a new reporting module for this app", has_managed_project=True
        )
        assert output == "Lyra -> /gsd:plan-phase"

    def test_no_route_is_empty(self):
        assert hooks.route_prompt("thanks, that looks right to me overall") == ""

    def test_thresholds_from_config(self):
        config = {"thresholds": {"confidence_floor": 50}}
        assert hooks.route_prompt("build a dashboard for tracking expenses", config=config) == ""

    def test_features_from_config(self):
        config = {"routing": {"engine": LEXICAL_VERSION, "features": {"project_redirect": False}}}
        output = hooks.route_prompt(
            "build a new reporting module for this app",
            has_managed_project=True,
            config=config,
        )
        assert output == "Lyra -> /gsd:new-project"

    def test_custom_categories(self):
        config = {
            "categories": [
                {
                    "id": "deploy-check",
                    "route": "/deploy-check",
                    "rules": [{"name": "ready", "phrase": "ready to ship", "weight": 3}],
                }
            ]
        }
        assert hooks.route_prompt("i think the billing page is ready to ship", config=config) == (
            "Lyra -> /deploy-check"
        )


class TestBuildEngine:
    """Tests for build_engine."""

    def test_unknown_engine_falls_back(self):
        config = {"routing": {"engine": "does-not-exist", "features": {}}}
        engine = hooks.build_engine(config, load_rule_table(DEFAULT_CONFIG))
        assert isinstance(engine, LexicalEngine)

    def test_invalid_feature_falls_back(self):
        config = {"routing": {"engine": LEXICAL_VERSION, "features": {"telepathy": True}}}
        engine = hooks.build_engine(config, load_rule_table(DEFAULT_CONFIG))
        assert isinstance(engine, LexicalEngine)
        assert "telepathy" not in engine.features


class TestRouteCli:
    """Tests for the lyra-route entry point."""

    def test_stdin_payload(self, run_hook, temp_project):
        out = run_hook(hooks.route_cli, payload("build a dashboard for tracking expenses"), cwd=temp_project)
        assert out == "Lyra -> /gsd:new-project\n"

    def test_message_key(self, run_hook, temp_project):
        stdin = json.dumps({"message": "the app crashes on startup and shows an error"})
        assert run_hook(hooks.route_cli, stdin, cwd=temp_project) == "Lyra -> /gsd:debug\n"

    def test_managed_project_from_cwd(self, run_hook, managed_project):
        out = run_hook(
            hooks.route_cli, payload("build a new reporting module for this app"), cwd=managed_project
        )
        assert out == "Lyra -> /gsd:plan-phase\n"

    def test_argv_prompt(self, run_hook, temp_project):
        out = run_hook(hooks.route_cli, argv=["refactor", "the", "order", "service", "into", "modules"], cwd=temp_project)
        assert out == "Lyra -> refactor-cleaner\n"

    @pytest.mark.parametrize(
        "stdin",
        [
            "",
            "not json at all",
            "[1, 2, 3]",
            json.dumps({"prompt": 42}),
            json.dumps({"prompt": "   "}),
            payload("ok"),
            payload("don't build a new dashboard, just explain how one would work"),
            payload("what does the dashboard component render on the home page?"),
        ],
    )
    def test_silent_when_not_routed(self, run_hook, temp_project, stdin):
        assert run_hook(hooks.route_cli, stdin, cwd=temp_project) == ""

    def test_broken_config_still_routes(self, run_hook, temp_project, tmp_path, monkeypatch):
        bad = tmp_path / "bad.yaml"
        bad.write_text("thresholds: [unclosed\n")
        monkeypatch.setenv("LYRA_CONFIG_PATH", str(bad))
        out = run_hook(hooks.route_cli, payload("build a dashboard for tracking expenses"), cwd=temp_project)
        assert out == "Lyra -> /gsd:new-project\n"

    def test_invalid_utf8_payload_still_routes(self, monkeypatch, capsys, temp_project):
        raw = b'{"prompt": "\xff build a dashboard for tracking expenses"}'
        monkeypatch.setattr(sys, "argv", ["lyra-route"])
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8"))
        monkeypatch.chdir(temp_project)
        hooks.route_cli()
        assert capsys.readouterr().out == "Lyra -> /gsd:new-project\n"

    def test_deeply_nested_payload_is_silent(self, run_hook, temp_project):
        assert run_hook(hooks.route_cli, "[" * 200000, cwd=temp_project) == ""

    def test_malformed_config_section_still_routes(self, run_hook, temp_project, tmp_path, monkeypatch):
        bad = tmp_path / "shape.yaml"
        bad.write_text("thresholds: high\n")
        monkeypatch.setenv("LYRA_CONFIG_PATH", str(bad))
        out = run_hook(hooks.route_cli, payload("build a dashboard for tracking expenses"), cwd=temp_project)
        assert out == "Lyra -> /gsd:new-project\n"

    def test_internal_error_is_silent(self, run_hook, temp_project, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(hooks, "route_prompt", boom)
        out = run_hook(hooks.route_cli, payload("build a dashboard for tracking expenses"), cwd=temp_project)
        assert out == ""


class TestContextCli:
    """Tests for the lyra-context entry point."""

    def test_empty_directory_is_silent(self, run_hook, temp_project):
        assert run_hook(hooks.context_cli, cwd=temp_project) == ""

    def test_reports_state_and_stack(self, run_hook, managed_project):
        debug_dir = managed_project / ".planning" / "debug"
        debug_dir.mkdir()
        (debug_dir / "cart-total.md").write_text("")
        (managed_project / "package.json").write_text(json.dumps({"dependencies": {"vue": "3"}}))
        out = run_hook(hooks.context_cli, stdin=payload("anything"), cwd=managed_project)
        assert out.startswith("[GSD Project State]\n# State\n")
        assert "[Active Debug Sessions: 1]\n  - cart-total.md" in out
        assert out.endswith("[Stack: Vue]")


class TestQualityGateCli:
    """Tests for the lyra-quality-gate entry point."""

    def test_prints_report(self, run_hook, temp_project, monkeypatch):
        monkeypatch.setattr(hooks, "run_quality_gate", lambda cwd: "[Lyra Quality Gate]")
        assert run_hook(hooks.quality_gate_cli, cwd=temp_project) == "[Lyra Quality Gate]\n"

    def test_silent_when_clean(self, run_hook, temp_project, monkeypatch):
        monkeypatch.setattr(hooks, "run_quality_gate", lambda cwd: "")
        assert run_hook(hooks.quality_gate_cli, cwd=temp_project) == ""

    def test_error_is_silent(self, run_hook, temp_project, monkeypatch):
        def boom(cwd):
            raise OSError("no git")

        monkeypatch.setattr(hooks, "run_quality_gate", boom)
        assert run_hook(hooks.quality_gate_cli, cwd=temp_project) == ""

"""Unit tests for the fast-exit filter."""

import pytest

from lyra.config import Thresholds
from lyra.fast_exit import check_fast_exit


class TestFastExit:
    """Each structural check, in precedence order."""

    def test_empty_text(self):
        assert check_fast_exit("") == "too_short"

    def test_below_min_length(self):
        assert check_fast_exit("build a dashboard app") == "too_short"

    def test_min_length_is_configurable(self):
        text = "build a dashboard app"
        assert check_fast_exit(text, Thresholds(min_length=10)) is None

    def test_slash_command(self):
        assert check_fast_exit("/gsd:new-project build a dashboard for expenses") == "slash_command"

    def test_git_command(self):
        assert check_fast_exit("git commit -m 'fix the crash in the parser module'") == "git_command"

    @pytest.mark.parametrize(
        "text",
        [
            "yes, go ahead and build the dashboard for expenses",
            "ok now create the landing page we talked about",
            "thanks, that fixed the crash in the login form",
            "continue with the refactor of the order service",
            "looks good, ship the security review findings",
            "deploy the api to staging once the tests pass",
        ],
    )
    def test_affirmations_and_operational_words(self, text):
        assert check_fast_exit(text) == "affirmation"

    def test_affirmation_requires_whole_word(self):
        # "notify" starts with "no" but is not an affirmation
        assert check_fast_exit("notify the team when the dashboard build finishes") is None

    @pytest.mark.parametrize(
        "text",
        [
            "how do i fix this crash and error in my login page?",
            "what is the best way to build a dashboard app?",
            "explain how the security review workflow works here",
            "can you refactor the order service into modules",
        ],
    )
    def test_short_questions(self, text):
        assert len(text) < 100
        assert check_fast_exit(text) == "short_question"

    def test_long_question_continues_to_scoring(self):
        text = (
            "how should we restructure the payment service so that the checkout "
            "flow stops crashing with a timeout error whenever stripe is slow?"
        )
        assert len(text) >= 100
        assert check_fast_exit(text) is None

    def test_question_exit_can_be_disabled(self):
        text = "can you refactor the order service into modules"
        assert check_fast_exit(text, question_exit=False) is None

    def test_question_opener_requires_whole_word(self):
        # "isolate" starts with "is"
        assert check_fast_exit("isolate the failing payment tests into a module") is None

    def test_task_request_passes(self):
        assert check_fast_exit("build a dashboard for tracking expenses") is None

"""Tests for the dbchat command-line entry point."""

import json
from unittest.mock import AsyncMock, Mock, patch

import pytest

from dbchat.assistant import EXAMPLE_QUESTIONS
from dbchat.cli import main
from dbchat.engines.types import AssistantFailure, AssistantSuccess
from dbchat.utils.error_handler import ErrorType


@pytest.fixture(autouse=True)
def keep_log_sinks():
    """Leave the test run's loguru sinks in place."""
    with patch("dbchat.cli.configure_logging"):
        yield


class TestCli:
    """Test dbchat.cli.main."""

    def test_examples(self, capsys):
        """--examples prints the example questions."""
        assert main(["--examples"]) == 0

        output = capsys.readouterr().out
        for example in EXAMPLE_QUESTIONS:
            assert example in output

    @patch("dbchat.cli.DbChatAssistant.from_settings")
    def test_answer_prints_json(self, mock_from_settings, capsys):
        """A successful answer prints the response and exits 0."""
        assistant = Mock()
        assistant.answer = AsyncMock(
            return_value=AssistantSuccess(
                sql="SELECT 1",
                rows=[{"one": 1}],
                elapsed_seconds=0.01,
                summary="One.",
                original_question="one?",
            )
        )
        mock_from_settings.return_value = assistant

        assert main(["one?", "--max-retries", "2"]) == 0

        body = json.loads(capsys.readouterr().out)
        assert body["summary"] == "One."
        mock_from_settings.assert_called_once_with(config={"max_retries": 2})

    @patch("dbchat.cli.DbChatAssistant.from_settings")
    def test_failure_exit_code(self, mock_from_settings, capsys):
        """A failed answer exits 1."""
        assistant = Mock()
        assistant.answer = AsyncMock(
            return_value=AssistantFailure(
                original_question="",
                reason="No query provided",
                error_type=ErrorType.NO_QUERY,
            )
        )
        mock_from_settings.return_value = assistant

        assert main([]) == 1
        assert json.loads(capsys.readouterr().out)["errorType"] == "no_query"

    def test_invalid_retry_bound_exits_2(self, capsys):
        """A negative retry bound is reported without a traceback."""
        assert main(["How many students?", "--max-retries", "-1"]) == 2

        captured = capsys.readouterr()
        assert "max_retries must be zero or greater" in captured.err
        assert captured.out == ""

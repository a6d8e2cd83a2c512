"""Tests for the Flask routes."""

from unittest.mock import AsyncMock, Mock

import pytest

from dbchat.engines.types import AssistantFailure, AssistantSuccess
from dbchat.utils.error_handler import ErrorType
from dbchat.web.app import create_app


@pytest.fixture
def assistant():
    """Assistant double answering with a fixed success."""
    double = Mock()
    double.answer = AsyncMock(
        return_value=AssistantSuccess(
            sql="SELECT count(*) FROM students",
            rows=[{"count": 12}],
            elapsed_seconds=0.05,
            summary="There are 12 students.",
            original_question="How many students?",
        )
    )
    return double


@pytest.fixture
def client(assistant):
    """Flask test client."""
    app = create_app(assistant=assistant)
    app.config["TESTING"] = True
    return app.test_client()


class TestDbChatRoutes:
    """Test the admin db-chat endpoints."""

    def test_health(self, client):
        """Health endpoint responds."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}

    def test_examples(self, client):
        """GET lists example questions."""
        response = client.get("/admin/db-chat")

        assert response.status_code == 200
        assert len(response.get_json()["examples"]) == 5

    def test_form_post(self, client, assistant):
        """The form field "query" is answered."""
        response = client.post("/admin/db-chat", data={"query": "How many students?"})

        body = response.get_json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["summary"] == "There are 12 students."
        assert body["data"] == [{"count": 12}]
        assistant.answer.assert_awaited_once_with("How many students?")

    def test_json_post(self, client, assistant):
        """A JSON body with "query" is accepted too."""
        client.post("/admin/db-chat", json={"query": "How many students?"})

        assistant.answer.assert_awaited_once_with("How many students?")

    def test_failure_response(self, client, assistant):
        """Failures are returned with their error type."""
        assistant.answer = AsyncMock(
            return_value=AssistantFailure(
                original_question="",
                reason="No query provided",
                error_type=ErrorType.NO_QUERY,
            )
        )

        body = client.post("/admin/db-chat", data={}).get_json()

        assert body["success"] is False
        assert body["errorType"] == "no_query"
        assert body["error"] == "No query provided"

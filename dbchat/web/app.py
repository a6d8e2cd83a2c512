"""Flask application exposing the query assistant to the admin screen."""

import os

from flask import Flask, jsonify, request
from loguru import logger

from dbchat.assistant import EXAMPLE_QUESTIONS, DbChatAssistant
from dbchat.utils.logging_config import configure_logging


def create_app(assistant: DbChatAssistant | None = None) -> Flask:
    """
    Build the Flask application.

    Args:
        assistant: Assistant to serve; built from settings when None

    Returns:
        Configured Flask app

    """
    app = Flask(__name__)
    app.config["ASSISTANT"] = assistant or DbChatAssistant.from_settings()

    @app.route("/health")
    def health():
        """Liveness probe."""
        return jsonify({"status": "ok"})

    @app.route("/admin/db-chat", methods=["GET"])
    def db_chat_examples():
        """List example questions for the admin screen."""
        return jsonify({"examples": list(EXAMPLE_QUESTIONS)})

    @app.route("/admin/db-chat", methods=["POST"])
    async def db_chat():
        """Answer the question submitted in the form field "query"."""
        question = request.form.get("query")
        if question is None and request.is_json:
            question = (request.get_json(silent=True) or {}).get("query")

        logger.info(f"Processing db-chat request: {question!r}")
        outcome = await app.config["ASSISTANT"].answer(question)
        return jsonify(outcome.to_response())

    return app


def main() -> None:
    """Run the development server."""
    configure_logging()
    app = create_app()
    app.run(
        host=os.getenv("DB_CHAT_HOST", "127.0.0.1"),
        port=int(os.getenv("DB_CHAT_PORT", "5007")),
        debug=os.getenv("FLASK_DEBUG", "false").lower() == "true",
    )


if __name__ == "__main__":
    main()

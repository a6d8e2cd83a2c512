"""Command-line entry point: answer one question and print the JSON response."""

import argparse
import asyncio
import json
import sys

from dbchat.assistant import EXAMPLE_QUESTIONS, DbChatAssistant
from dbchat.utils.data_processors import json_default
from dbchat.utils.error_handler import ConfigurationError
from dbchat.utils.logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dbchat",
        description="Ask the admin database a question in plain language.",
    )
    parser.add_argument("question", nargs="?", help="Question to answer")
    parser.add_argument(
        "--examples", action="store_true", help="List example questions and exit"
    )
    parser.add_argument(
        "--max-retries", type=int, default=None, help="Regenerations after the first attempt"
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the CLI.

    Returns:
        Process exit code: 0 on success, 1 when the question was not answered,
        2 on invalid configuration

    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.examples:
        for example in EXAMPLE_QUESTIONS:
            print(example)
        return 0

    overrides = {}
    if args.max_retries is not None:
        overrides["max_retries"] = args.max_retries

    try:
        assistant = DbChatAssistant.from_settings(config=overrides or None)
    except ConfigurationError as e:
        print(f"dbchat: configuration error: {e}", file=sys.stderr)
        return 2

    outcome = asyncio.run(assistant.answer(args.question))
    print(json.dumps(outcome.to_response(), indent=2, default=json_default))
    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())

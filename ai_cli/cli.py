"""Command-line entry point for submitting prompts and browsing history."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI  # type: ignore
from rich.console import Console
from rich.markup import escape

from .config import Config
from .core import (
    AiCliError,
    CompletionSession,
    HistoryStore,
    IdNotFoundError,
    MissingInputError,
    UsageError,
    build_threads,
    resolve_id,
)
from .core.attachments import resolve_inputs
from .core.request import TODO_INSTRUCTIONS, build_request, load_schema, new_schema_template
from .render import render_history, render_response
from .utils import ERROR_LABEL, Ansi, console, err_console, init_logger, log_exception

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


class AiCLI:
    """Runs one invocation: picks the mode from the parsed arguments."""

    def __init__(
        self,
        config: Config,
        store: HistoryStore,
        session: CompletionSession,
        *,
        out: Optional[Console] = None,
    ):
        self.config = config
        self.store = store
        self.session = session
        self.out = out or console

    # ---------------- Modes ----------------

    def list_history(self) -> None:
        render_history(build_threads(self.store.load_responses()), self.store, self.out)

    def print_schema_template(self) -> None:
        self.out.print(json.dumps(new_schema_template(), indent=2), markup=False, highlight=False)

    def remove(self, candidate: str) -> None:
        response_id = resolve_id(candidate, self.store, self.config.full_id_length)
        if response_id not in self.store.list_ids():
            raise IdNotFoundError(candidate)
        self.store.remove(response_id)
        self.out.print(Ansi.style(f"Removed response ID {escape(response_id)} from history.", Ansi.FG_GREEN))

    def last_id(self) -> str:
        last_id = self.store.load_last_id()
        if last_id is None:
            raise UsageError("No last response ID found to resume.")
        return last_id

    def previous_response(self, candidate: str) -> Dict[str, Any]:
        response_id = resolve_id(candidate, self.store, self.config.full_id_length)
        return self.session.retrieve(response_id)

    # ---------------- Dispatch ----------------

    def run(self, args: argparse.Namespace, stdin_text: str = "") -> None:
        if args.list:
            self.list_history()
            return

        if args.new_schema:
            self.print_schema_template()
            return

        if args.rm:
            self.remove(args.rm)
            return

        content = resolve_inputs(args.inputs, stdin_text)
        schema = load_schema(args.schema) if args.schema else None
        instructions = TODO_INSTRUCTIONS if args.todo else args.instructions

        response_id = args.id
        if args.resume:
            response_id = self.last_id()

        previous = self.previous_response(response_id) if response_id else None

        if not content:
            if previous is None:
                raise MissingInputError()
            render_response(previous, self.out)
            return

        request = build_request(
            args.model,
            content,
            instructions=instructions,
            reasoning=args.reasoning,
            verbosity=args.verbosity,
            web_search=args.web,
            apply_patch=args.patch,
            schema=schema,
            previous_response_id=previous["id"] if previous else None,
        )
        response = self.session.submit(request)
        render_response(response, self.out)


# ---------------------------------------------------------------------------
# Entrypoint helpers
# ---------------------------------------------------------------------------


class _ArgumentParser(argparse.ArgumentParser):
    """Reports bad flags as a :class:`UsageError` instead of exiting with 2."""

    def error(self, message):
        raise UsageError(message)


def _build_parser(config: Config) -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="ai",
        description=(
            "Send text, files, URLs, images and PDFs to an OpenAI model as a "
            "background response and print the result. Use '-' to read stdin."
        ),
    )
    parser.add_argument("inputs", nargs="*", help="Text, file paths, URLs or '-' for stdin")
    parser.add_argument("--model", "-m", default=config.default_model, help="Model to use (default: %(default)s)")
    parser.add_argument("--reasoning", "-r", default="0", help="Reasoning effort: 0, 1, 2, 3")
    parser.add_argument("--verbosity", "-v", default="0", help="Verbosity: 0, 1, 2")
    parser.add_argument("--list", "-l", action="store_true", help="List history")
    parser.add_argument("--id", help="Response ID to retrieve or continue")
    parser.add_argument("--todo", action="store_true", help="Complete first TODO from the input")
    parser.add_argument("--resume", action="store_true", help="Resume using last created response")
    parser.add_argument("--rm", metavar="ID", help="Remove response from history")
    parser.add_argument("--web", action="store_true", help="Allow web search tool")
    parser.add_argument("--patch", action="store_true", help="Allow patch tool")
    parser.add_argument("--instructions", "-i", default="", help="Instructions")
    parser.add_argument("--schema", "-s", help="JSON Schema file for structured output")
    parser.add_argument("--new-schema", action="store_true", help="Print a schema template")
    parser.add_argument(
        "--no-keep-failed",
        dest="keep_failed",
        action="store_false",
        default=config.keep_failed,
        help="Do not store failed responses in history",
    )
    return parser


def _read_stdin() -> str:  # pragma: no cover
    if sys.stdin is None or sys.stdin.isatty():
        return ""
    return sys.stdin.read()


def _client_factory(config: Config):
    def factory() -> OpenAI:
        client_kwargs = {"api_key": config.read_api_key()}
        if config.base_url:
            client_kwargs["base_url"] = config.base_url
        return OpenAI(**client_kwargs)  # type: ignore[arg-type]

    return factory


def run_cli(argv: Optional[List[str]] = None, config: Optional[Config] = None, stdin_text: Optional[str] = None) -> int:
    """Run the CLI and return the process exit code."""
    try:
        config = config or Config.from_env()
    except AiCliError as exc:
        err_console.print(f"{ERROR_LABEL} {escape(str(exc))}")
        return EXIT_ERROR

    parser = _build_parser(config)
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        err_console.print(parser.format_usage(), markup=False, highlight=False, end="")
        err_console.print(f"{ERROR_LABEL} {escape(str(exc))}")
        return EXIT_ERROR
    init_logger(config.history_dir, config.log_level)
    logger.debug("Arguments: %s", vars(args))

    store = HistoryStore(config.history_dir)
    session = CompletionSession(
        store,
        client_factory=_client_factory(config),
        poll_interval=config.poll_interval,
        input_rate=config.input_cost_per_1m,
        output_rate=config.output_cost_per_1m,
        keep_failed=args.keep_failed,
    )

    try:
        if stdin_text is None:
            stdin_text = "" if args.list or args.new_schema or args.rm else _read_stdin()
        AiCLI(config, store, session).run(args, stdin_text)
    except MissingInputError as exc:
        err_console.print(f"{ERROR_LABEL} {escape(str(exc))}\n")
        err_console.print(parser.format_help(), markup=False, highlight=False)
        return EXIT_ERROR
    except AiCliError as exc:
        log_exception(exc)
        err_console.print(f"{ERROR_LABEL} {escape(str(exc))}")
        return EXIT_ERROR
    except openai.OpenAIError as exc:
        log_exception(exc, "OpenAI API error")
        err_console.print(f"{ERROR_LABEL} OpenAI API error: {escape(str(exc))}")
        return EXIT_ERROR
    except KeyboardInterrupt:
        err_console.print("\n[interrupted]", markup=False)
        return EXIT_INTERRUPTED

    return EXIT_OK


def main() -> None:  # pragma: no cover
    sys.exit(run_cli())


if __name__ == "__main__":  # pragma: no cover
    main()

"""Terminal rendering of responses, patch operations and history."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.pretty import Pretty
from rich.text import Text

from .core.client import format_timestamp
from .core.history import HistoryStore
from .utils import Ansi, console as stdout_console

SHORT_ID_LENGTH = 8


def output_text(response: Dict[str, Any]) -> str:
    """Return the concatenated ``output_text`` parts of *response*."""
    texts: List[str] = []
    for output in response.get("output") or []:
        if output.get("type") != "message":
            continue
        for content in output.get("content") or []:
            if content.get("type") == "output_text" and isinstance(content.get("text"), str):
                texts.append(content["text"])
    return "".join(texts)


# ----------------------------------------------------------------------
# Patches
# ----------------------------------------------------------------------


def render_diff(diff: str, console: Optional[Console] = None) -> None:
    console = console or stdout_console
    for line in (diff or "").split("\n"):
        if line.startswith("+"):
            style = Ansi.FG_GREEN
        elif line.startswith("-"):
            style = Ansi.FG_RED
        elif line.startswith("@"):
            style = Ansi.FG_CYAN
        else:
            style = Ansi.DIM
        console.print(Text(line, style=style))


def render_patch(operation: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Print one ``apply_patch`` operation.

    Unknown operation types are dumped as-is rather than dropped.
    """
    console = console or stdout_console
    kind = operation.get("type")

    if kind == "update_file":
        console.print(Text(f"\n--- Update: {operation.get('path')} ---", style=Ansi.FG_CYAN))
        render_diff(operation.get("diff", ""), console)
    elif kind == "create_file":
        console.print(Text(f"Create file: {operation.get('path')}", style=Ansi.FG_CYAN))
        render_diff(operation.get("diff", ""), console)
    elif kind == "delete_file":
        name = operation.get("filename") or operation.get("path")
        console.print(Text(f"- Deleted file: {name}", style=Ansi.FG_RED))
    else:
        console.print(Pretty(operation))


def render_response(response: Dict[str, Any], console: Optional[Console] = None) -> None:
    console = console or stdout_console
    for output in response.get("output") or []:
        if output.get("type") == "apply_patch_call":
            render_patch(output.get("operation") or {}, console)

    console.print(output_text(response), markup=False, highlight=False)


# ----------------------------------------------------------------------
# History listing
# ----------------------------------------------------------------------


def summarize_input(request: Optional[Dict[str, Any]]) -> str:
    if request is None:
        return "(request unavailable)"
    parts = []
    for item in request.get("input") or []:
        if item.get("type") == "message":
            content = item.get("content")
            if isinstance(content, str):
                parts.append(content)
                continue
            texts = [c.get("text", "") for c in content or [] if c.get("type") == "input_text"]
            parts.append(" | ".join(texts))
        else:
            parts.append(str(item.get("type")))
    return " || ".join(parts)


def summarize_output(response: Dict[str, Any]) -> str:
    parts = []
    for output in response.get("output") or []:
        if output.get("type") == "message":
            texts = [
                c.get("text", "") for c in output.get("content") or [] if c.get("type") == "output_text"
            ]
            parts.append(" | ".join(texts))
        else:
            parts.append(str(output.get("type")))
    return " || ".join(parts)


def render_history(
    threads: List[List[Dict[str, Any]]],
    store: HistoryStore,
    console: Optional[Console] = None,
) -> None:
    """Print every thread, follow-ups indented under their first message."""
    console = console or stdout_console
    if not threads:
        console.print("No history found.")
        return

    for thread in threads:
        for index, response in enumerate(thread):
            indent = "  " if index > 0 else ""
            short_id = response["id"][-SHORT_ID_LENGTH:]
            created_at = format_timestamp(response.get("created_at"))
            input_summary = summarize_input(store.load_request(response["id"]))
            first_output_line = summarize_output(response).split("\n")[0]

            console.print(
                f"{indent}{Ansi.style(escape(short_id), Ansi.FG_YELLOW)} "
                f"{Ansi.style(created_at, Ansi.FG_GRAY)}"
            )
            console.print(f"{indent}  {Ansi.style(escape(input_summary), Ansi.FG_GREEN)}")
            console.print(Text(f"{indent}  > {first_output_line}"))

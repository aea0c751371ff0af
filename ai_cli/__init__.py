"""Command-line client for background OpenAI responses.

Features
--------
1. Inputs: literal text, stdin (``-``), local files, URLs, images and PDFs.
2. Background responses: each prompt is submitted, polled until it finishes,
   and its token cost is reported.
3. History: requests and responses are stored on disk so a conversation can
   be resumed (``--resume``), fetched by a short id (``--id``), listed as
   threads (``--list``) and removed (``--rm``).
4. Patches: ``apply_patch`` operations are rendered as coloured diffs.

Run ``python -m ai_cli`` or use the ``ai`` console script.
"""
from .core import CompletionSession, HistoryStore, build_threads, resolve_id
from .config import Config
from .cli import AiCLI, run_cli

__all__ = [
    "CompletionSession",
    "HistoryStore",
    "build_threads",
    "resolve_id",
    "Config",
    "AiCLI",
    "run_cli",
]

"""Exception hierarchy shared by the CLI and the core modules."""

from __future__ import annotations

from typing import Any, Dict, Optional


class AiCliError(Exception):
    """Base class for every error the CLI reports and exits on."""


class UsageError(AiCliError, ValueError):
    """Invalid flag value, missing input or unreadable schema."""


class CredentialError(AiCliError):
    """No usable API key could be found."""


class IdNotFoundError(AiCliError, LookupError):
    def __init__(self, response_id: str):
        super().__init__(f"Response ID {response_id} not found in history.")
        self.response_id = response_id


class AmbiguousIdError(AiCliError, LookupError):
    def __init__(self, short_id: str, matches):
        super().__init__(
            f"Ambiguous short ID: {short_id} (matches {', '.join(sorted(matches))})"
        )
        self.short_id = short_id
        self.matches = sorted(matches)


class ResponseFailedError(AiCliError):
    """A response reached a terminal state with an error payload."""

    def __init__(self, record: Dict[str, Any]):
        error: Optional[Dict[str, Any]] = record.get("error") or {}
        message = error.get("message") if isinstance(error, dict) else str(error)
        super().__init__(message or f"Response {record.get('id')} {record.get('status', 'failed')}")
        self.record = record


class MissingInputError(UsageError):
    def __init__(self):
        super().__init__("No input provided.")

from .client import CompletionSession, compute_cost
from .errors import (
    AiCliError,
    AmbiguousIdError,
    CredentialError,
    IdNotFoundError,
    MissingInputError,
    ResponseFailedError,
    UsageError,
)
from .history import HistoryStore
from .ids import resolve_id
from .threads import build_threads

__all__ = [
    "CompletionSession",
    "compute_cost",
    "AiCliError",
    "AmbiguousIdError",
    "CredentialError",
    "IdNotFoundError",
    "MissingInputError",
    "ResponseFailedError",
    "UsageError",
    "HistoryStore",
    "resolve_id",
    "build_threads",
]

"""Expansion of abbreviated response ids."""

from __future__ import annotations

from .errors import AmbiguousIdError, IdNotFoundError
from .history import HistoryStore

FULL_ID_LENGTH = 12


def resolve_id(candidate: str, store: HistoryStore, full_length: int = FULL_ID_LENGTH) -> str:
    """Return the full stored id that *candidate* abbreviates.

    A stored id matches when it ends with *candidate*. More than one match is
    an error rather than a guess. When nothing matches locally, a candidate
    of at least *full_length* characters is assumed to already be complete
    (it may only exist on the service); shorter ones are not found.
    """
    candidate = candidate.strip()
    if not candidate:
        raise IdNotFoundError(candidate)

    ids = store.list_ids()
    if candidate in ids:
        return candidate

    matches = [response_id for response_id in ids if response_id.endswith(candidate)]
    if len(matches) > 1:
        raise AmbiguousIdError(candidate, matches)
    if matches:
        return matches[0]

    if len(candidate) >= full_length:
        return candidate
    raise IdNotFoundError(candidate)

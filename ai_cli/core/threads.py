"""Rebuild conversation threads from a flat set of response records."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Set

Record = Dict[str, Any]


def build_threads(responses: Iterable[Record]) -> List[List[Record]]:
    """Group *responses* into threads linked by ``previous_response_id``.

    Each thread is ordered oldest first. Threads come out in the order of
    their most recent member, newest thread first. A back-link to a record
    that is not present ends the thread there. When two records continue the
    same parent, both threads start with the shared ancestors.
    """
    by_id: Dict[str, Record] = {}
    for response in responses:
        by_id[response["id"]] = response

    ordered = sorted(by_id.values(), key=lambda r: r.get("created_at") or 0, reverse=True)

    threads: List[List[Record]] = []
    visited: Set[str] = set()

    for response in ordered:
        if response["id"] in visited:
            continue

        thread: List[Record] = []
        seen: Set[str] = set()
        current = response
        while current is not None and current["id"] not in seen:
            thread.insert(0, current)
            seen.add(current["id"])
            previous_id = current.get("previous_response_id")
            current = by_id.get(previous_id) if previous_id else None

        visited.update(seen)
        threads.append(thread)

    return threads

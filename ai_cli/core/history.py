"""On-disk history of requests and responses."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

logger = logging.getLogger(__name__)


class HistoryStore:
    """Stores request/response records as JSON files in one directory.

    Layout::

        {root}/{id}.json            terminal response record
        {root}/req_{id}.json        request payload that produced it
        {root}/last_response_id.txt id of the most recently created response

    Reads never raise for missing or damaged files: they return ``None`` so
    callers can fall back to fetching the record from the service.
    """

    FILENAME_SUFFIX = ".json"
    REQUEST_PREFIX = "req_"
    LAST_ID_FILENAME = "last_response_id.txt"

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def response_path(self, response_id: str) -> Path:
        return self.root / f"{response_id}{self.FILENAME_SUFFIX}"

    def request_path(self, response_id: str) -> Path:
        return self.root / f"{self.REQUEST_PREFIX}{response_id}{self.FILENAME_SUFFIX}"

    @property
    def last_id_path(self) -> Path:
        return self.root / self.LAST_ID_FILENAME

    # ------------------------------------------------------------------
    # Low-level I/O
    # ------------------------------------------------------------------

    def _write(self, path: Path, text: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)

    def _write_json(self, path: Path, record: Dict[str, Any]) -> None:
        # Non-serializable values are coerced to strings so persistence never
        # breaks on an unexpected SDK type.
        self._write(path, json.dumps(record, ensure_ascii=False, indent=2, default=str))

    def _read_json(self, path: Path) -> Optional[Dict[str, Any]]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable history record %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed history record %s", path)
            return None
        return data

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def save_request(self, response_id: str, request: Dict[str, Any]) -> None:
        self._write_json(self.request_path(response_id), request)

    def load_request(self, response_id: str) -> Optional[Dict[str, Any]]:
        return self._read_json(self.request_path(response_id))

    def save_response(self, response_id: str, response: Dict[str, Any]) -> None:
        self._write_json(self.response_path(response_id), response)
        logger.info("Saved response %s (%s)", response_id, response.get("status"))

    def load_response(self, response_id: str) -> Optional[Dict[str, Any]]:
        path = self.response_path(response_id)
        record = self._read_json(path)
        if record is not None and not isinstance(record.get("id"), str):
            logger.warning("Ignoring history record without an id %s", path)
            return None
        return record

    def remove(self, response_id: str) -> None:
        """Delete both artifacts of *response_id*; absent files are fine."""
        for path in (self.response_path(response_id), self.request_path(response_id)):
            path.unlink(missing_ok=True)
        logger.info("Removed response %s from history", response_id)

    def list_ids(self) -> Set[str]:
        self.root.mkdir(parents=True, exist_ok=True)
        return {
            path.stem
            for path in self.root.glob(f"*{self.FILENAME_SUFFIX}")
            if not path.name.startswith(self.REQUEST_PREFIX)
        }

    def load_responses(self) -> List[Dict[str, Any]]:
        """Return every loadable response record, skipping damaged ones."""
        responses = []
        for response_id in self.list_ids():
            response = self.load_response(response_id)
            if response is not None:
                responses.append(response)
        return responses

    # ------------------------------------------------------------------
    # Last-response pointer
    # ------------------------------------------------------------------

    def save_last_id(self, response_id: str) -> None:
        self._write(self.last_id_path, response_id)

    def load_last_id(self) -> Optional[str]:
        try:
            value = self.last_id_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Could not read %s: %s", self.last_id_path, exc)
            return None
        return value or None

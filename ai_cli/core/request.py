"""Build the payload for ``client.responses.create``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import UsageError

REASONING_EFFORTS = {"1": "low", "2": "medium", "3": "high"}
VERBOSITY_LEVELS = {"0": "low", "1": "medium", "2": "high"}

TODO_INSTRUCTIONS = (
    "Complete the first TODO in the input text. Only output the text that "
    "replaces the TODO, do not output any other text."
)


def supports_reasoning(model: str) -> bool:
    return model.startswith("gpt-5")


def reasoning_effort(model: str, level: str) -> str:
    """Map the ``--reasoning`` level 0-3 to an effort name."""
    level = str(level)
    if level == "0":
        # gpt-5.1 dropped "minimal" in favour of "none".
        return "none" if model == "gpt-5.1" else "minimal"
    try:
        return REASONING_EFFORTS[level]
    except KeyError:
        raise UsageError("Invalid reasoning effort. Use 0, 1, 2 or 3.") from None


def verbosity_level(level: str) -> str:
    try:
        return VERBOSITY_LEVELS[str(level)]
    except KeyError:
        raise UsageError("Invalid verbosity level. Use 0, 1 or 2.") from None


def load_schema(path: Path) -> Dict[str, Any]:
    """Read a structured-output schema and tag it as ``json_schema``."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise UsageError(f"Failed to read schema file: {exc}") from exc
    try:
        schema = json.loads(content)
    except ValueError as exc:
        raise UsageError(f"Failed to parse JSON schema: {exc}") from exc
    if not isinstance(schema, dict):
        raise UsageError("JSON schema must be an object.")
    schema["type"] = "json_schema"
    return schema


def build_request(
    model: str,
    content: List[Dict[str, Any]],
    *,
    instructions: str = "",
    reasoning: str = "0",
    verbosity: str = "0",
    web_search: bool = False,
    apply_patch: bool = False,
    schema: Optional[Dict[str, Any]] = None,
    previous_response_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the keyword arguments for a background response."""
    request: Dict[str, Any] = {"model": model, "background": True}

    if previous_response_id:
        request["previous_response_id"] = previous_response_id

    request["input"] = []
    if content:
        request["input"].append({"type": "message", "role": "user", "content": content})

    request["instructions"] = instructions
    request["text"] = {}

    if supports_reasoning(model):
        request["reasoning"] = {"effort": reasoning_effort(model, reasoning)}
        if verbosity:
            request["text"]["verbosity"] = verbosity_level(verbosity)

    if schema:
        request["text"]["format"] = schema

    tools = []
    if web_search:
        tools.append({"type": "web_search"})
    if apply_patch:
        tools.append({"type": "apply_patch"})
    request["tools"] = tools

    return request


def new_schema_template() -> Dict[str, Any]:
    """Example schema printed by ``--new-schema``: a titled tree of nodes."""
    return {
        "name": "ExampleSchema",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "The title of the item",
                },
                "tree": {
                    "type": "array",
                    "items": {"$ref": "#/$defs/element"},
                },
            },
            "required": ["title", "tree"],
            "additionalProperties": False,
            "$defs": {
                "element": {
                    "anyOf": [
                        {
                            "type": "object",
                            "properties": {
                                "title": {
                                    "type": "string",
                                    "description": "The title of the node",
                                },
                                "type": {"type": "string", "enum": ["element"]},
                                "children": {
                                    "type": "array",
                                    "items": {"$ref": "#/$defs/element"},
                                    "description": "Child nodes",
                                },
                            },
                            "required": ["title", "type", "children"],
                            "additionalProperties": False,
                        },
                        {
                            "type": "object",
                            "properties": {
                                "content": {
                                    "type": "string",
                                    "description": "The content of the leaf node",
                                },
                                "type": {"type": "string", "enum": ["leaf"]},
                            },
                            "required": ["content", "type"],
                            "additionalProperties": False,
                        },
                    ]
                }
            },
        },
    }

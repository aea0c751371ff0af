"""Runtime configuration, read from the environment."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from .core.client import INPUT_TOKEN_COST_PER_1M, OUTPUT_TOKEN_COST_PER_1M
from .core.errors import CredentialError, UsageError
from .core.ids import FULL_ID_LENGTH

DEFAULT_MODEL = "gpt-5.1"

_FALSE_VALUES = {"0", "false", "no", "off"}


class Config:
    """Settings for one CLI invocation.

    Defaults live on the class; :meth:`from_env` overrides them from
    environment variables so tests can construct a ``Config`` directly.
    """

    history_dir: Path = Path(tempfile.gettempdir()) / "ai-cli"
    token_file: Path = Path.home() / ".config" / "openai-private.token"
    base_url: Optional[str] = None
    default_model: str = DEFAULT_MODEL
    poll_interval: float = 2.0
    keep_failed: bool = True
    log_level: str = "WARNING"
    input_cost_per_1m: float = INPUT_TOKEN_COST_PER_1M
    output_cost_per_1m: float = OUTPUT_TOKEN_COST_PER_1M
    full_id_length: int = FULL_ID_LENGTH

    def __init__(self, **overrides) -> None:
        for key, value in overrides.items():
            if not hasattr(type(self), key):
                raise TypeError(f"Unknown config option: {key}")
            setattr(self, key, value)
        self._environ: Optional[Mapping[str, str]] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        env = os.environ if environ is None else environ
        overrides = {}
        if env.get("AI_CLI_HOME"):
            overrides["history_dir"] = Path(env["AI_CLI_HOME"]).expanduser()
        if env.get("AI_CLI_TOKEN_FILE"):
            overrides["token_file"] = Path(env["AI_CLI_TOKEN_FILE"]).expanduser()
        if env.get("OPENAI_BASE_URL"):
            overrides["base_url"] = env["OPENAI_BASE_URL"]
        if env.get("OPENAI_DEFAULT_MODEL"):
            overrides["default_model"] = env["OPENAI_DEFAULT_MODEL"]
        if env.get("AI_CLI_POLL_INTERVAL"):
            try:
                overrides["poll_interval"] = float(env["AI_CLI_POLL_INTERVAL"])
            except ValueError:
                raise UsageError(
                    f"Invalid AI_CLI_POLL_INTERVAL: {env['AI_CLI_POLL_INTERVAL']!r}"
                ) from None
        if env.get("AI_CLI_KEEP_FAILED"):
            overrides["keep_failed"] = env["AI_CLI_KEEP_FAILED"].strip().lower() not in _FALSE_VALUES
        if env.get("AI_CLI_LOG_LEVEL"):
            overrides["log_level"] = env["AI_CLI_LOG_LEVEL"]
        config = cls(**overrides)
        config._environ = env
        return config

    def read_api_key(self) -> str:
        """Return the API key from the token file, else ``OPENAI_API_KEY``."""
        try:
            api_key = self.token_file.read_text(encoding="utf-8").strip()
        except OSError:
            api_key = ""
        if not api_key:
            env = os.environ if self._environ is None else self._environ
            api_key = env.get("OPENAI_API_KEY", "").strip()
        if not api_key:
            raise CredentialError(
                f"No API key found (tried {self.token_file} and OPENAI_API_KEY)."
            )
        return api_key

import tempfile
import unittest
from pathlib import Path

from ai_cli import Config
from ai_cli.core import CredentialError, UsageError


class TestConfig(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_defaults(self):
        config = Config.from_env({})
        self.assertEqual(config.default_model, "gpt-5.1")
        self.assertEqual(config.history_dir.name, "ai-cli")
        self.assertTrue(config.keep_failed)
        self.assertEqual(config.full_id_length, 12)
        self.assertEqual(config.input_cost_per_1m, 1.25)
        self.assertEqual(config.output_cost_per_1m, 10.0)

    def test_environment_overrides(self):
        config = Config.from_env(
            {
                "AI_CLI_HOME": str(self.dir / "h"),
                "OPENAI_DEFAULT_MODEL": "gpt-5-mini",
                "OPENAI_BASE_URL": "http://localhost:8080/v1",
                "AI_CLI_POLL_INTERVAL": "0.5",
                "AI_CLI_KEEP_FAILED": "no",
            }
        )
        self.assertEqual(config.history_dir, self.dir / "h")
        self.assertEqual(config.default_model, "gpt-5-mini")
        self.assertEqual(config.base_url, "http://localhost:8080/v1")
        self.assertEqual(config.poll_interval, 0.5)
        self.assertFalse(config.keep_failed)

    def test_invalid_poll_interval(self):
        with self.assertRaises(UsageError):
            Config.from_env({"AI_CLI_POLL_INTERVAL": "soon"})

    def test_unknown_option(self):
        with self.assertRaises(TypeError):
            Config(colour="blue")

    def test_api_key_from_token_file(self):
        token_file = self.dir / "token"
        token_file.write_text("sk-file\n", encoding="utf-8")
        config = Config.from_env({"AI_CLI_TOKEN_FILE": str(token_file), "OPENAI_API_KEY": "sk-env"})
        self.assertEqual(config.read_api_key(), "sk-file")

    def test_api_key_from_environment(self):
        config = Config.from_env({"AI_CLI_TOKEN_FILE": str(self.dir / "missing"), "OPENAI_API_KEY": "sk-env"})
        self.assertEqual(config.read_api_key(), "sk-env")

    def test_missing_api_key(self):
        config = Config.from_env({"AI_CLI_TOKEN_FILE": str(self.dir / "missing")})
        with self.assertRaises(CredentialError):
            config.read_api_key()

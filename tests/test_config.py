import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from timesheet_grid.config import load_config
from timesheet_grid.logging_config import setup_logging


class TestLoadConfig(unittest.TestCase):
    def setUp(self) -> None:
        dotenv = patch("timesheet_grid.config.load_dotenv")
        dotenv.start()
        self.addCleanup(dotenv.stop)

    def test_missing_credentials(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(OSError) as caught:
                load_config()

        self.assertEqual(
            str(caught.exception),
            "Missing required environment variables: TIMESHEET_EMAIL, TIMESHEET_PASSWORD",
        )

    def test_defaults(self) -> None:
        env = {"TIMESHEET_EMAIL": "sam@example.com", "TIMESHEET_PASSWORD": "secret"}
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        self.assertEqual(config["TIMESHEET_API_BASE_URL"], "http://localhost:8000/api")
        self.assertEqual(config["TIMESHEET_API_TIMEOUT"], 10.0)
        self.assertEqual(config["HOST"], "127.0.0.1")
        self.assertEqual(config["PORT"], 8080)
        self.assertEqual(config["LOG_DIR"], "/data/logs")

    def test_overrides(self) -> None:
        env = {
            "TIMESHEET_EMAIL": "sam@example.com",
            "TIMESHEET_PASSWORD": "secret",
            "TIMESHEET_API_BASE_URL": "https://timesheets.example.com/api",
            "TIMESHEET_API_TIMEOUT": "2.5",
            "PORT": "9000",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        self.assertEqual(config["TIMESHEET_API_BASE_URL"], "https://timesheets.example.com/api")
        self.assertEqual(config["TIMESHEET_API_TIMEOUT"], 2.5)
        self.assertEqual(config["PORT"], 9000)


class TestSetupLogging(unittest.TestCase):
    def test_writes_regular_and_error_logs(self) -> None:
        root = logging.getLogger()
        handlers_before = list(root.handlers)
        level_before = root.level
        httpx_level_before = logging.getLogger("httpx").level

        with tempfile.TemporaryDirectory() as log_dir:
            setup_logging("grid-test", log_dir=log_dir)
            try:
                logging.getLogger("timesheet_grid.test").error("submit failed")
                for handler in root.handlers:
                    handler.flush()

                self.assertIn("submit failed", (Path(log_dir) / "grid-test.log").read_text(encoding="utf-8"))
                self.assertIn("submit failed", (Path(log_dir) / "grid-test-error.log").read_text(encoding="utf-8"))
                self.assertEqual(logging.getLogger("httpx").level, logging.WARNING)
            finally:
                for handler in root.handlers[len(handlers_before):]:
                    handler.close()
                    root.removeHandler(handler)
                root.setLevel(level_before)
                logging.getLogger("httpx").setLevel(httpx_level_before)


if __name__ == "__main__":
    unittest.main(verbosity=2)

import io
import logging
import os
import unittest
from unittest.mock import patch

from checker import config
from checker.logger import CompanyFormatter, route_console, setup_logger


class TestEnvParsing(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config._env_float("SIMILARITY_THRESHOLD", 0.8), 0.8)
            self.assertEqual(config._env_int("MAX_LOOKAHEAD", 50), 50)

    def test_override(self):
        with patch.dict(os.environ, {"SIMILARITY_THRESHOLD": "0.9", "MAX_LOOKAHEAD": "10"}):
            self.assertEqual(config._env_float("SIMILARITY_THRESHOLD", 0.8), 0.9)
            self.assertEqual(config._env_int("MAX_LOOKAHEAD", 50), 10)

    def test_invalid_falls_back(self):
        with patch.dict(os.environ, {"CONTEXT_CAP": "five", "BIGRAM_WEIGHT": ""}):
            self.assertEqual(config._env_int("CONTEXT_CAP", 5), 5)
            self.assertEqual(config._env_float("BIGRAM_WEIGHT", 0.7), 0.7)

    def test_named_tunables_exist(self):
        for name in ("SIMILARITY_THRESHOLD", "MIN_CONTENT_LENGTH", "LENGTH_RATIO_FLOOR",
                     "BIGRAM_WEIGHT", "LENGTH_WEIGHT", "MAX_LOOKAHEAD", "CONTEXT_CAP",
                     "MIN_BLOCK_SIZE"):
            self.assertTrue(hasattr(config, name), name)


class TestLogger(unittest.TestCase):
    def test_format(self):
        record = logging.LogRecord("checker", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.context = "compare"
        line = CompanyFormatter().format(record)
        self.assertTrue(line.startswith("[ "))
        self.assertTrue(line.endswith(" ] : INFO : compare : hello world"))

    def test_children_share_root_handlers(self):
        root = setup_logger()
        child = setup_logger("checker.detection")
        self.assertTrue(child.propagate)
        self.assertFalse(child.handlers)
        self.assertEqual(len(root.handlers), len(setup_logger().handlers))

    def test_route_console(self):
        """Scenario: --json moves console logs off stdout."""
        root = setup_logger()
        console = [h for h in root.handlers if type(h) is logging.StreamHandler][0]
        original = console.stream
        buf = io.StringIO()
        try:
            route_console(buf)
            setup_logger("checker.session").warning("routed")
        finally:
            console.setStream(original)
        self.assertIn("routed", buf.getvalue())


if __name__ == "__main__":
    unittest.main()

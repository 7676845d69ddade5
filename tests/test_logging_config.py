import unittest
import logging
from voice_gateway.config.logging_config import configure_logging

class TestLoggingConfig(unittest.TestCase):
    def test_configure_logging(self):
        # Test that the function returns a logger
        logger = configure_logging("INFO")
        self.assertIsInstance(logger, logging.Logger)

        # Test that the logger has the correct name
        self.assertEqual(logger.name, "voice_gateway")

        # Test that the logger has the correct level
        self.assertEqual(logger.level, logging.INFO)

        # Test that the logger has the correct handlers and format
        self.assertGreaterEqual(len(logger.handlers), 1)  # At least one handler (console)
        handler = logger.handlers[0]  # Check first handler (should be console handler)
        self.assertIsInstance(handler, logging.StreamHandler)
        formatter = handler.formatter
        self.assertEqual(formatter._fmt, "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        self.assertFalse(logger.propagate)

    def test_configure_logging_level_name(self):
        logger = configure_logging("debug")
        self.assertEqual(logger.level, logging.DEBUG)

    def test_configure_logging_unknown_level_falls_back_to_info(self):
        logger = configure_logging("LOUD")
        self.assertEqual(logger.level, logging.INFO)

    def test_reconfigure_does_not_duplicate_handlers(self):
        first = configure_logging("INFO")
        count = len(first.handlers)
        second = configure_logging("INFO")
        self.assertIs(first, second)
        self.assertEqual(len(second.handlers), count)

if __name__ == "__main__":
    unittest.main()

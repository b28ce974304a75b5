"""Tests for settings and viewport derivation."""

import unittest
from pathlib import Path

from termreader.config import ConfigError, ReaderSettings, load_settings, validate_log_level
from termreader.viewport import Viewport


class TestLoadSettings(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(load_settings({}), ReaderSettings())

    def test_values_from_environment(self):
        settings = load_settings(
            {
                "TERMREADER_MAX_WIDTH": "60",
                "TERMREADER_SIDE_MARGIN": "4",
                "TERMREADER_RESERVED_ROWS": "5",
                "TERMREADER_TAB_SIZE": "8",
                "TERMREADER_LOG_PATH": "logs/reader.log",
                "TERMREADER_LOG_LEVEL": "debug",
                "TERMREADER_LIBRARY_DIR": "books",
            }
        )
        self.assertEqual(settings.max_text_width, 60)
        self.assertEqual(settings.side_margin, 4)
        self.assertEqual(settings.reserved_rows, 5)
        self.assertEqual(settings.tab_size, 8)
        self.assertEqual(settings.log_path, Path("logs/reader.log"))
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.library_dir, Path("books"))

    def test_blank_values_use_defaults(self):
        self.assertEqual(load_settings({"TERMREADER_MAX_WIDTH": "  "}).max_text_width, 80)

    def test_invalid_integer(self):
        with self.assertRaises(ConfigError) as ctx:
            load_settings({"TERMREADER_TAB_SIZE": "four"})
        self.assertIn("TERMREADER_TAB_SIZE", str(ctx.exception))

    def test_width_below_minimum(self):
        with self.assertRaises(ConfigError):
            load_settings({"TERMREADER_MAX_WIDTH": "0"})

    def test_invalid_log_level(self):
        with self.assertRaises(ConfigError) as ctx:
            load_settings({"TERMREADER_LOG_LEVEL": "verbose"})
        self.assertIn("TERMREADER_LOG_LEVEL", str(ctx.exception))

    def test_log_level_names_are_case_insensitive(self):
        self.assertEqual(load_settings({"TERMREADER_LOG_LEVEL": " warning "}).log_level, "WARNING")
        self.assertEqual(validate_log_level("error"), "ERROR")


class TestViewport(unittest.TestCase):

    def test_wide_terminal_caps_text_width(self):
        self.assertEqual(Viewport.for_terminal(120, 40, ReaderSettings()), Viewport(80, 33))

    def test_narrow_terminal_keeps_margin(self):
        self.assertEqual(Viewport.for_terminal(50, 10, ReaderSettings()), Viewport(40, 3))

    def test_tiny_terminal_is_clamped(self):
        self.assertEqual(Viewport.for_terminal(5, 3, ReaderSettings()), Viewport(1, 1))

    def test_clamped(self):
        self.assertEqual(Viewport(0, -2).clamped(), Viewport(1, 1))
        self.assertEqual(Viewport(12, 7).clamped(), Viewport(12, 7))


if __name__ == "__main__":
    unittest.main()

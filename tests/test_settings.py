# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from src.config.settings import Settings
from src.services.view_sync import ActiveView


class TestSettings(unittest.TestCase):
    """Verify Settings constants and the view registry."""

    def test_request_timeout_is_positive_int(self) -> None:
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_max_retries_is_positive(self) -> None:
        self.assertGreaterEqual(Settings.MAX_RETRIES, 1)

    def test_api_base_url_is_http(self) -> None:
        self.assertTrue(Settings.API_BASE_URL.startswith("http"))

    def test_views_match_active_view_enum(self) -> None:
        """Every registered view maps onto an ActiveView member."""
        ids = [v["id"] for v in Settings.VIEWS]
        self.assertEqual(sorted(ids), sorted(v.value for v in ActiveView))

    def test_each_view_has_label(self) -> None:
        for view in Settings.VIEWS:
            with self.subTest(view=view["id"]):
                self.assertTrue(view.get("label"))

    def test_contact_template_has_title_slot(self) -> None:
        self.assertIn("{title}", Settings.CONTACT_MESSAGE_TEMPLATE)

    def test_default_headers_are_json(self) -> None:
        self.assertEqual(
            Settings.DEFAULT_HEADERS["Content-Type"], "application/json"
        )

    def test_path_constants_are_paths(self) -> None:
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_impersonate_browser_is_string(self) -> None:
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(len(Settings.IMPERSONATE_BROWSER) > 0)


if __name__ == "__main__":
    unittest.main()

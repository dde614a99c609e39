"""
Tests for application setup helpers.
"""

import locale
from unittest.mock import patch

from student_roster.main import configure_collation


class TestConfigureCollation:

    def test_applies_environment_locale(self):
        with patch("student_roster.main.locale.setlocale") as mock_setlocale:
            configure_collation()

        mock_setlocale.assert_called_once_with(locale.LC_COLLATE, "")

    def test_unsupported_locale_keeps_running(self, caplog):
        with patch("student_roster.main.locale.setlocale", side_effect=locale.Error("unsupported locale setting")):
            configure_collation()

        assert "Could not apply the environment collation locale" in caplog.text

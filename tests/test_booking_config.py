"""Unit tests for configuration loading."""
import logging

import pytest

from booking_config import (
    DEFAULT_REQUEST_TIMEOUT,
    ROOMS,
    ConfigError,
    configure_logging,
    load_settings,
)
from tests.helpers import WEBAPP_URL


class TestLoadSettings:
    def test_reads_url_from_secrets(self):
        settings = load_settings({"WEBAPP_URL": WEBAPP_URL}, {})

        assert settings.webapp_url == WEBAPP_URL
        assert settings.timezone == "Asia/Ho_Chi_Minh"
        assert settings.request_timeout == DEFAULT_REQUEST_TIMEOUT
        assert settings.business_hours is None
        assert (settings.default_time_from, settings.default_time_to) == ("09:00", "10:00")

    def test_falls_back_to_environment(self):
        settings = load_settings({}, {"WEBAPP_URL": WEBAPP_URL, "REQUEST_TIMEOUT": "2.5"})
        assert settings.webapp_url == WEBAPP_URL
        assert settings.request_timeout == 2.5

    def test_secrets_win_over_environment(self):
        settings = load_settings({"WEBAPP_URL": WEBAPP_URL}, {"WEBAPP_URL": "https://example.com/other"})
        assert settings.webapp_url == WEBAPP_URL

    def test_missing_url(self):
        with pytest.raises(ConfigError, match="WEBAPP_URL"):
            load_settings({}, {})

    def test_blank_url(self):
        with pytest.raises(ConfigError):
            load_settings({"WEBAPP_URL": "   "}, {})

    def test_url_must_be_http(self):
        with pytest.raises(ConfigError):
            load_settings({"WEBAPP_URL": "ftp://example.com"}, {})

    @pytest.mark.parametrize("raw", ["none", "off", "0"])
    def test_timeout_can_be_disabled(self, raw):
        assert load_settings({"WEBAPP_URL": WEBAPP_URL, "REQUEST_TIMEOUT": raw}, {}).request_timeout is None

    @pytest.mark.parametrize("raw", ["soon", "-1"])
    def test_bad_timeout(self, raw):
        with pytest.raises(ConfigError):
            load_settings({"WEBAPP_URL": WEBAPP_URL, "REQUEST_TIMEOUT": raw}, {})

    def test_business_hours(self):
        settings = load_settings({"WEBAPP_URL": WEBAPP_URL, "BUSINESS_HOURS": "08:00 - 17:30"}, {})
        assert settings.business_hours == ("08:00", "17:30")

    @pytest.mark.parametrize("raw", ["08:00", "17:30-08:00", "8am-5pm"])
    def test_bad_business_hours(self, raw):
        with pytest.raises(ConfigError):
            load_settings({"WEBAPP_URL": WEBAPP_URL, "BUSINESS_HOURS": raw}, {})

    def test_timezone(self):
        settings = load_settings({"WEBAPP_URL": WEBAPP_URL, "BOOKING_TIMEZONE": "Asia/Bangkok"}, {})
        assert settings.tzinfo is not None

    def test_unknown_timezone(self):
        with pytest.raises(ConfigError):
            load_settings({"WEBAPP_URL": WEBAPP_URL, "BOOKING_TIMEZONE": "Mars/Olympus"}, {})

    def test_log_level(self):
        assert load_settings({"WEBAPP_URL": WEBAPP_URL, "LOG_LEVEL": "debug"}, {}).log_level == "DEBUG"
        with pytest.raises(ConfigError):
            load_settings({"WEBAPP_URL": WEBAPP_URL, "LOG_LEVEL": "chatty"}, {})


def test_rooms_are_fixed():
    assert len(ROOMS) == 4
    assert len(set(ROOMS)) == 4


def test_configure_logging_sets_level():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("WARNING")
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)

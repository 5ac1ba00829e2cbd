"""Shared test configuration with lightweight fixtures."""

import logging
import os
from pathlib import Path
from typing import Any

import pytest

from bimcall.config.settings import ImportSettings, LoggingSettings, reset_settings


@pytest.fixture
def test_settings(tmp_path: Path) -> Any:
    """Create lightweight test settings without file I/O."""

    class MockSettings:
        def __init__(self) -> None:
            self.app_name = "BIMCall-Test"
            self.api_base_url = "http://bimcall.test"
            self.api_token = None
            self.dev_user_id = None
            self.dev_user_email = None
            self.request_timeout = 5
            self.max_retries = 2
            self.retry_backoff_factor = 1.0
            self.max_ics_size_bytes = 5 * 1024 * 1024

            self.data_dir = tmp_path / "data"
            self.config_dir = tmp_path / "config"

            self.logging = LoggingSettings(console_colors=False)
            self.importer = ImportSettings()

        @property
        def log_dir(self) -> Path:
            return self.data_dir / "logs"

    return MockSettings()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep the global settings and user config out of every test."""
    for key in list(os.environ):
        if key.startswith("BIMCALL_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("BIMCALL_CONFIG_DIR", str(tmp_path / "user-config"))
    monkeypatch.setenv("BIMCALL_DATA_DIR", str(tmp_path / "user-data"))

    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def reset_bimcall_logger():
    """Drop handlers installed by setup_logging so streams are not reused across tests."""
    yield
    logger = logging.getLogger("bimcall")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_ics_content() -> str:
    """Calendar with a one-off meeting and a biweekly series."""
    return (
        "BEGIN:VCALENDAR\r\n"
        "VERSION:2.0\r\n"
        "PRODID:-//Test//Test//EN\r\n"
        "BEGIN:VEVENT\r\n"
        "UID:single-001@example.com\r\n"
        "SUMMARY:Clash detection review\r\n"
        "DESCRIPTION:Walk through clashes\\, level 3.\\nJoin: https://zoom.us/j/123456\r\n"
        "LOCATION:Site office\\, Block B\r\n"
        "DTSTART:20240101T100000Z\r\n"
        "DTEND:20240101T113000Z\r\n"
        "END:VEVENT\r\n"
        "BEGIN:VEVENT\r\n"
        "UID:series-002@example.com\r\n"
        "SUMMARY:Weekly BIM coordination\r\n"
        "DTSTART;TZID=Europe/London:20240108T090000\r\n"
        "DTEND;TZID=Europe/London:20240108T100000\r\n"
        "RRULE:FREQ=WEEKLY;INTERVAL=2;BYDAY=MO\r\n"
        "END:VEVENT\r\n"
        "END:VCALENDAR\r\n"
    )


@pytest.fixture
def ics_file(tmp_path: Path, sample_ics_content: str) -> Path:
    """Write the sample calendar to a .ics file."""
    path = tmp_path / "meetings.ics"
    path.write_text(sample_ics_content, encoding="utf-8", newline="")
    return path

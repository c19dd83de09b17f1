"""Unit tests for structured logging setup."""

import io
import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from ranking_fetch.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    redact_credentials,
)
from ranking_fetch.settings.app import AppSettings
from ranking_fetch.source.redact import REDACTED_VALUE


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    yield
    clear_run_context()
    structlog.reset_defaults()


def read_lines(stream: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestRedactCredentials:
    """Tests for the credential masking processor."""

    def test_masks_top_level_and_nested_keys(self) -> None:
        """Credential keys are masked at the top level and inside mappings."""
        event = {
            "event": "page_fetched",
            "applicationId": "secret",
            "params": {"affiliateId": "aff", "page": 2},
        }

        result = redact_credentials(None, "info", event)

        assert result["applicationId"] == REDACTED_VALUE
        assert result["params"] == {"affiliateId": REDACTED_VALUE, "page": 2}
        assert result["event"] == "page_fetched"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output_with_run_context(self) -> None:
        """JSON lines carry the level, timestamp and bound run id."""
        stream = io.StringIO()
        configure_logging(level=logging.INFO, output=stream)
        bind_run_context("run-42", profile="daily")

        get_logger().info("fetch_all_started", params={"applicationId": "secret"})

        (line,) = read_lines(stream)
        assert line["event"] == "fetch_all_started"
        assert line["level"] == "info"
        assert line["run_id"] == "run-42"
        assert line["profile"] == "daily"
        assert line["params"] == {"applicationId": REDACTED_VALUE}
        assert "timestamp" in line

    def test_level_filtering(self) -> None:
        """Events below the configured level are dropped."""
        stream = io.StringIO()
        configure_logging(level=logging.WARNING, output=stream)

        log = get_logger()
        log.info("batch_started")
        log.warning("batch_aborted")

        assert [line["event"] for line in read_lines(stream)] == ["batch_aborted"]

    def test_quiets_http_library_loggers(self) -> None:
        """httpx request logging is raised to at least WARNING."""
        configure_logging(level=logging.DEBUG, output=io.StringIO())

        assert logging.getLogger("httpx").level == logging.WARNING


class TestConfigureFromSettings:
    """Tests for settings-driven configuration."""

    def test_console_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """RANKING_LOG_JSON=false switches to console rendering."""
        monkeypatch.setenv("RANKING_LOG_LEVEL", "debug")
        monkeypatch.setenv("RANKING_LOG_JSON", "false")
        stream = io.StringIO()

        configure_from_settings(AppSettings(_env_file=None), output=stream)
        get_logger().debug("state_transition", from_state="IDLE")

        output = stream.getvalue()
        assert "state_transition" in output
        assert not output.lstrip().startswith("{")

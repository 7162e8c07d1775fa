"""Tests for logging utilities."""

import logging

import pytest

from caselens_core.utils.logging import get_logger, log_exceptions

logger = get_logger("caselens_core.tests.logging")


@log_exceptions(logger, "Sync export")
def failing_sync() -> None:
    raise ValueError("bad section")


@log_exceptions(logger)
async def failing_async() -> None:
    raise RuntimeError("gateway down")


@log_exceptions(logger)
def passing_sync(value: int) -> int:
    """Return the value doubled."""
    return value * 2


class TestLogExceptions:
    """Tests for the log-and-reraise decorator."""

    def test_sync_exception_logged_and_reraised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with pytest.raises(ValueError, match="bad section"):
            failing_sync()

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "Sync export failed: bad section"
        assert record.exc_info is not None

    @pytest.mark.asyncio
    async def test_async_exception_logged_and_reraised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with pytest.raises(RuntimeError):
            await failing_async()

        assert "failing_async failed: gateway down" in caplog.text

    def test_success_passes_through(self, caplog: pytest.LogCaptureFixture) -> None:
        assert passing_sync(4) == 8
        assert passing_sync.__doc__ == "Return the value doubled."
        assert not caplog.records


def test_get_logger_reuses_handler() -> None:
    """Repeated lookups do not stack handlers."""
    first = get_logger("caselens_core.tests.handlers")
    second = get_logger("caselens_core.tests.handlers")

    assert first is second
    assert len(second.handlers) == 1

"""Tests for retry utilities."""

import pytest

from caselens_core.utils.retry import RateLimitError, format_exception, with_retry


class TestRetry:
    """Tests for retry logic."""

    @pytest.mark.asyncio
    async def test_success_on_first_try(self) -> None:
        """Test that successful calls don't retry."""
        call_count = 0

        async def success() -> str:
            nonlocal call_count
            call_count += 1
            return "success"

        result = await with_retry(success, operation_name="test")

        assert result == "success"
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_single_attempt_by_default(self) -> None:
        """Without max_attempts a failing call is not retried."""
        call_count = 0

        async def always_fail() -> str:
            nonlocal call_count
            call_count += 1
            raise ConnectionError("Network failed")

        with pytest.raises(ConnectionError):
            await with_retry(always_fail, operation_name="test")

        assert call_count == 1

    @pytest.mark.asyncio
    async def test_retry_on_connection_error(self) -> None:
        """Test that ConnectionError triggers retry when enabled."""
        call_count = 0

        async def fail_then_succeed() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise ConnectionError("Network failed")
            return "success"

        result = await with_retry(
            fail_then_succeed,
            max_attempts=3,
            operation_name="test",
        )

        assert result == "success"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_max_retries_exhausted(self) -> None:
        """Test that exception is raised after max retries."""
        call_count = 0

        async def always_fail() -> str:
            nonlocal call_count
            call_count += 1
            raise TimeoutError("Always times out")

        with pytest.raises(TimeoutError):
            await with_retry(
                always_fail,
                max_attempts=2,
                operation_name="test",
            )

        assert call_count == 2

    @pytest.mark.asyncio
    async def test_non_retryable_error_not_retried(self) -> None:
        """Test that non-retryable errors are not retried."""
        call_count = 0

        async def value_error() -> str:
            nonlocal call_count
            call_count += 1
            raise ValueError("Invalid value")

        with pytest.raises(ValueError):
            await with_retry(
                value_error,
                max_attempts=3,
                operation_name="test",
            )

        # Should only be called once since ValueError is not retryable
        assert call_count == 1


class TestFormatException:
    """Tests for error message formatting."""

    def test_plain_message(self) -> None:
        assert format_exception(ValueError("bad input")) == "bad input"

    def test_empty_message_uses_type(self) -> None:
        assert format_exception(RateLimitError("")) == "RateLimitError"

    def test_cause_is_appended(self) -> None:
        """The underlying cause is included once."""
        try:
            try:
                raise ConnectionError("socket closed")
            except ConnectionError as inner:
                raise RuntimeError("request failed") from inner
        except RuntimeError as e:
            message = format_exception(e)

        assert message == "request failed (caused by: socket closed)"

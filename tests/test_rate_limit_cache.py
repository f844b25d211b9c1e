"""
Tests for the rate limited logger used by the event listener.
"""
from unittest.mock import MagicMock, patch

from intentbridge.events._rate_limited_log import RateLimitedLogger


class TestRateLimitedLogger:
    """Tests for the TTLCache-backed rate limiter."""

    def test_repeated_message_suppressed(self):
        mock_logger = MagicMock()
        rate_logger = RateLimitedLogger(mock_logger, interval=60)

        assert rate_logger.warning("RPC down") is True
        assert rate_logger.warning("RPC down") is False
        mock_logger.warning.assert_called_once_with("RPC down")

    def test_levels_and_messages_are_distinct(self):
        mock_logger = MagicMock()
        rate_logger = RateLimitedLogger(mock_logger)

        rate_logger.log("Test message", level="warning")
        rate_logger.log("Test message", level="error")
        rate_logger.log("Different message", level="warning")

        assert mock_logger.warning.call_count == 2
        mock_logger.error.assert_called_once_with("Test message")

    def test_key_groups_messages(self):
        mock_logger = MagicMock()
        rate_logger = RateLimitedLogger(mock_logger)

        rate_logger.warning("Failed to get logs: timeout after 10s", key="get_logs")
        rate_logger.warning("Failed to get logs: timeout after 11s", key="get_logs")

        mock_logger.warning.assert_called_once_with("Failed to get logs: timeout after 10s")

    def test_entries_expire(self):
        mock_logger = MagicMock()
        clock = [1000.0]
        with patch("intentbridge.events._rate_limited_log.TTLCache") as mock_cache_cls:
            from cachetools import TTLCache
            mock_cache_cls.side_effect = lambda maxsize, ttl: TTLCache(
                maxsize=maxsize, ttl=ttl, timer=lambda: clock[0]
            )
            rate_logger = RateLimitedLogger(mock_logger, interval=60)

        rate_logger.warning("flaky")
        clock[0] += 61
        rate_logger.warning("flaky")

        assert mock_logger.warning.call_count == 2

    def test_reset(self):
        mock_logger = MagicMock()
        rate_logger = RateLimitedLogger(mock_logger)

        rate_logger.warning("once")
        rate_logger.reset()
        rate_logger.warning("once")

        assert mock_logger.warning.call_count == 2

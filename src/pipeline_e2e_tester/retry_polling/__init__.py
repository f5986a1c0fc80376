"""Retry polling exports."""

from .retry_poller import DEFAULT_INTERVAL_SECONDS, AttemptCallback, poll_until

__all__ = ["AttemptCallback", "DEFAULT_INTERVAL_SECONDS", "poll_until"]

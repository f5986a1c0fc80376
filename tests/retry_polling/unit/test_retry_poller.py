"""Retry poller tests."""

from __future__ import annotations

from pipeline_e2e_tester.retry_polling import poll_until


def _probe(results: list[bool]):
    calls = iter(results)
    counter = {"calls": 0}

    def probe() -> bool:
        counter["calls"] += 1
        return next(calls)

    return probe, counter


def test_stops_at_first_success_without_trailing_sleep() -> None:
    probe, counter = _probe([False, False, True])
    sleeps: list[float] = []
    attempts: list[tuple[bool, int]] = []

    succeeded = poll_until(
        5,
        probe,
        lambda ok, attempt: attempts.append((ok, attempt)),
        interval_seconds=0.5,
        sleep=sleeps.append,
    )

    assert succeeded is True
    assert counter["calls"] == 3
    assert sleeps == [0.5, 0.5]
    assert attempts == [(False, 0), (False, 1), (True, 2)]


def test_gives_up_after_max_attempts() -> None:
    probe, counter = _probe([False] * 3)
    sleeps: list[float] = []

    assert poll_until(3, probe, sleep=sleeps.append) is False
    assert counter["calls"] == 3
    assert sleeps == [1.0, 1.0]


def test_non_positive_attempts_never_probe() -> None:
    probe, counter = _probe([])

    assert poll_until(0, probe, sleep=lambda _: None) is False
    assert counter["calls"] == 0

"""
Тест политики повторов.
"""

import asyncio

import pytest

from core.errors import NotFoundError, TransportError
from core.retry import NO_RETRY, RetryPolicy


class Flaky:
    def __init__(self, fail_times, error=None):
        self.fail_times = fail_times
        self.error = error or TransportError("reset")
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise self.error
        return "ok"


def test_retries_until_success_and_reports_attempts():
    func = Flaky(fail_times=2)
    attempts = []
    policy = RetryPolicy(3, 0, (TransportError,))
    assert asyncio.run(policy.run(func, on_attempt=attempts.append)) == "ok"
    assert attempts == [1, 2, 3]


def test_gives_up_with_last_error():
    func = Flaky(fail_times=10)
    with pytest.raises(TransportError):
        asyncio.run(RetryPolicy(3, 0, (TransportError,)).run(func))
    assert func.calls == 3


def test_other_errors_not_retried():
    func = Flaky(fail_times=10, error=NotFoundError("1"))
    with pytest.raises(NotFoundError):
        asyncio.run(RetryPolicy(3, 0, (TransportError,)).run(func))
    assert func.calls == 1


def test_no_retry_is_single_attempt():
    func = Flaky(fail_times=1)
    with pytest.raises(TransportError):
        asyncio.run(NO_RETRY.run(func))
    assert func.calls == 1

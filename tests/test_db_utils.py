import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from goal_tracker.core import db_utils
from goal_tracker.core.db_utils import with_db_retry


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(db_utils.asyncio, "sleep", fake_sleep)
    return delays


async def test_transient_error_is_retried(no_sleep):
    calls = []

    @with_db_retry(max_retries=3, retry_delay=0.5)
    async def flaky_read():
        calls.append(1)
        if len(calls) < 3:
            raise OperationalError("SELECT 1", {}, ConnectionError("connection reset"))
        return "ok"

    assert await flaky_read() == "ok"
    assert len(calls) == 3
    assert no_sleep == [0.5, 1.0]


async def test_gives_up_after_max_retries(no_sleep):
    @with_db_retry(max_retries=2, retry_delay=0.1)
    async def always_down():
        raise OperationalError("SELECT 1", {}, ConnectionError("down"))

    with pytest.raises(OperationalError):
        await always_down()
    assert len(no_sleep) == 2


async def test_non_transient_error_is_not_retried(no_sleep):
    calls = []

    @with_db_retry()
    async def bad_write():
        calls.append(1)
        raise IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(IntegrityError):
        await bad_write()
    assert calls == [1]
    assert no_sleep == []

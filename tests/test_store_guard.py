import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from app.core.db_utils import with_store_guard
from app.core.exceptions import NotFoundError, StoreTimeoutError, StoreUnavailableError


class RecordingSession:
    def __init__(self):
        self.rollbacks = 0

    async def rollback(self):
        self.rollbacks += 1


class SlowService:
    def __init__(self, store_timeout=0.05):
        self.db = RecordingSession()
        self.store_timeout = store_timeout

    @with_store_guard
    async def hang(self):
        await asyncio.sleep(5)

    @with_store_guard
    async def lose_connection(self):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))

    @with_store_guard
    async def missing(self):
        raise NotFoundError("Income not found")

    @with_store_guard
    async def answer(self, value, scale=1):
        return value * scale


async def test_timeout_becomes_store_timeout_and_rolls_back():
    service = SlowService()

    with pytest.raises(StoreTimeoutError) as excinfo:
        await service.hang()

    assert excinfo.value.status_code == 504
    assert service.db.rollbacks == 1


async def test_connection_failure_becomes_store_unavailable():
    service = SlowService()

    with pytest.raises(StoreUnavailableError) as excinfo:
        await service.lose_connection()

    assert excinfo.value.status_code == 503
    assert service.db.rollbacks == 1


async def test_domain_errors_pass_through():
    service = SlowService()

    with pytest.raises(NotFoundError):
        await service.missing()
    assert service.db.rollbacks == 1


async def test_success_passes_arguments_and_result():
    service = SlowService(store_timeout=None)

    assert await service.answer(21, scale=2) == 42
    assert service.db.rollbacks == 0

"""
마감 엔진 테스트용 fixture

In-memory 저장소와 고정 시계 사용.
"""

from datetime import date
from decimal import Decimal

import pytest

from adapters.mock.memory_store import MemoryClosingStore, MemoryLedgerStore
from core.closing.service import ClosingService
from core.config.loader import ClosingPolicy

# 고정 "오늘" (허용 기간: 2024-06-01 ~ 2024-06-04)
TODAY = date(2024, 6, 4)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def ledger_store() -> MemoryLedgerStore:
    """계좌 1개 (기초 잔액 1000)"""
    store = MemoryLedgerStore()
    store.add_account("acc-a", Decimal("1000"), name="Itaú 0001")
    return store


@pytest.fixture
def closing_store() -> MemoryClosingStore:
    return MemoryClosingStore()


@pytest.fixture
def policy() -> ClosingPolicy:
    return ClosingPolicy(max_backdays_allowed=3, stop_on_error=False)


@pytest.fixture
def service(
    ledger_store: MemoryLedgerStore,
    closing_store: MemoryClosingStore,
    policy: ClosingPolicy,
) -> ClosingService:
    return ClosingService(ledger_store, closing_store, policy, clock=lambda: TODAY)

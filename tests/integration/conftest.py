"""
통합 테스트 픽스처

실제 SQLite 파일 DB 위에서 저장소/서비스 동작 확인.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.ledger.models import BankAccount
from core.ledger.store import LedgerStore
from core.storage.closing_store import ClosingStore


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncGenerator[SQLiteAdapter, None]:
    """스키마가 초기화된 임시 DB"""
    adapter = SQLiteAdapter(tmp_path / "erp.db")
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture
async def ledger_store(db: SQLiteAdapter) -> LedgerStore:
    """계좌 2개(기초 잔액 1000, 500)가 등록된 LedgerStore"""
    store = LedgerStore(db)
    await store.create_account(
        BankAccount("acc-a", "company-1", "Itaú 0001", Decimal("1000"))
    )
    await store.create_account(
        BankAccount("acc-b", "company-1", "Bradesco 0002", Decimal("500"), "POUPANCA")
    )
    return store


@pytest_asyncio.fixture
async def closing_store(db: SQLiteAdapter) -> ClosingStore:
    return ClosingStore(db)


@pytest.fixture
def today() -> date:
    return date(2024, 6, 4)

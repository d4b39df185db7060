"""ClosingStore 통합 테스트"""

from datetime import date
from decimal import Decimal

import pytest

from core.closing.errors import DataAccessError
from core.closing.models import ClosingRecord
from core.storage.closing_store import ClosingStore


def _record(account_id: str, day: int, final: str = "1000") -> ClosingRecord:
    return ClosingRecord(
        account_id=account_id,
        closing_date=date(2024, 6, day),
        previous_balance=Decimal("1000"),
        total_in=Decimal("0"),
        total_out=Decimal("0"),
        final_balance=Decimal(final),
        closed_by="user-1",
    )


@pytest.mark.asyncio
async def test_batch_and_queries(ledger_store, closing_store: ClosingStore) -> None:
    """일괄 저장 후 조회"""
    await closing_store.insert_closing_batch([_record("acc-a", 1), _record("acc-b", 1)])
    await closing_store.insert_closing_batch([_record("acc-a", 2, "1300.55")])

    latest = await closing_store.find_latest_closed_before("acc-a", date(2024, 6, 3))

    assert latest.closing_date == date(2024, 6, 2)
    assert latest.final_balance == Decimal("1300.55")
    assert latest.closed_by == "user-1"
    assert await closing_store.find_latest_closed_before("acc-a", date(2024, 6, 1)) is None
    assert await closing_store.get_latest_closed_date("acc-b") == date(2024, 6, 1)
    assert await closing_store.get_latest_closing_date() == date(2024, 6, 2)
    assert await closing_store.exists_closed_after(date(2024, 6, 1)) is True
    assert await closing_store.exists_closed_on(date(2024, 6, 3)) is False
    assert await closing_store.list_closed_dates_after(date(2024, 5, 31)) == [
        date(2024, 6, 1),
        date(2024, 6, 2),
    ]


@pytest.mark.asyncio
async def test_batch_rollback_on_duplicate(ledger_store, closing_store: ClosingStore) -> None:
    """중복 마감 포함 시 전체 롤백"""
    await closing_store.insert_closing_batch([_record("acc-a", 1)])

    with pytest.raises(DataAccessError):
        await closing_store.insert_closing_batch([_record("acc-b", 1), _record("acc-a", 1)])

    records = await closing_store.list_closed_records(closing_date=date(2024, 6, 1))
    assert [r.account_id for r in records] == ["acc-a"]


@pytest.mark.asyncio
async def test_reopen_keeps_rows(ledger_store, closing_store: ClosingStore) -> None:
    """재개는 행을 유지하고 플래그만 변경"""
    await closing_store.insert_closing_batch([_record("acc-a", 1), _record("acc-b", 1)])

    assert await closing_store.set_closed_flag(date(2024, 6, 1), False) == 2
    assert await closing_store.set_closed_flag(date(2024, 6, 1), False) == 0
    assert await closing_store.exists_closed_on(date(2024, 6, 1)) is False
    assert await closing_store.exists_reopened_on(date(2024, 6, 1)) is True
    assert await closing_store.get_latest_closed_date("acc-a") is None

    # 재마감 가능 (재개 이력과 공존)
    await closing_store.insert_closing_batch([_record("acc-a", 1)])
    assert await closing_store.exists_closed_on(date(2024, 6, 1)) is True


@pytest.mark.asyncio
async def test_update_closed_record_only(ledger_store, closing_store: ClosingStore) -> None:
    """금액 갱신은 마감된 기록만 대상"""
    await closing_store.insert_closing_batch([_record("acc-a", 1)])

    updated = await closing_store.update_closing_record(
        "acc-a",
        date(2024, 6, 1),
        {"previous_balance": Decimal("900"), "final_balance": Decimal("900")},
    )
    missing = await closing_store.update_closing_record(
        "acc-a", date(2024, 6, 2), {"final_balance": Decimal("1")}
    )
    record = (await closing_store.list_closed_records(account_id="acc-a"))[0]

    assert updated == 1
    assert missing == 0
    assert record.final_balance == Decimal("900")

    with pytest.raises(ValueError):
        await closing_store.update_closing_record(
            "acc-a", date(2024, 6, 1), {"closed": 0}
        )

"""
MovementService 테스트

입출금/이체 등록, 수정, 삭제와 마감 기간 잠금 테스트
"""

from datetime import date
from decimal import Decimal

import pytest

from adapters.mock.memory_store import MemoryClosingStore, MemoryLedgerStore
from core.closing.errors import (
    ClosingValidationError,
    NotFoundError,
    PeriodLockedError,
)
from core.closing.models import ClosingRecord
from core.ledger.service import MovementService
from core.types import ClosingViolation, MovementKind

JUNE_1 = date(2024, 6, 1)
JUNE_2 = date(2024, 6, 2)
JUNE_3 = date(2024, 6, 3)


@pytest.fixture
def ledger_store() -> MemoryLedgerStore:
    store = MemoryLedgerStore()
    store.add_account("acc-a", Decimal("1000"), name="Itaú 0001")
    store.add_account("acc-b", Decimal("500"), name="Bradesco 0002")
    return store


@pytest.fixture
def closing_store() -> MemoryClosingStore:
    return MemoryClosingStore()


@pytest.fixture
def service(
    ledger_store: MemoryLedgerStore,
    closing_store: MemoryClosingStore,
) -> MovementService:
    return MovementService(ledger_store, closing_store)


async def _close(closing_store: MemoryClosingStore, account_id: str, d: date) -> None:
    await closing_store.insert_closing_batch([
        ClosingRecord(
            account_id=account_id,
            closing_date=d,
            previous_balance=Decimal("0"),
            total_in=Decimal("0"),
            total_out=Decimal("0"),
            final_balance=Decimal("0"),
        )
    ])


class TestRecordMovement:
    """record_movement 테스트"""

    @pytest.mark.asyncio
    async def test_record(
        self,
        service: MovementService,
        ledger_store: MemoryLedgerStore,
    ) -> None:
        """입금 등록"""
        movement = await service.record_movement(
            "acc-a", JUNE_1, MovementKind.INFLOW, Decimal("300"), description="Depósito"
        )

        assert movement.kind == MovementKind.INFLOW
        assert movement.transfer_id is None
        assert await ledger_store.get_movement(movement.movement_id) == movement

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
    async def test_non_positive_amount_rejected(
        self,
        service: MovementService,
        amount: Decimal,
    ) -> None:
        """금액 0 이하 거부"""
        with pytest.raises(ClosingValidationError) as exc_info:
            await service.record_movement("acc-a", JUNE_1, MovementKind.OUTFLOW, amount)

        assert exc_info.value.violation == ClosingViolation.INVALID_MOVEMENT

    @pytest.mark.asyncio
    async def test_transfer_kind_rejected(self, service: MovementService) -> None:
        """이체 유형은 단건 등록 불가"""
        with pytest.raises(ClosingValidationError):
            await service.record_movement(
                "acc-a", JUNE_1, MovementKind.TRANSFER_IN, Decimal("10")
            )

    @pytest.mark.asyncio
    async def test_unknown_account(self, service: MovementService) -> None:
        """계좌 없음"""
        with pytest.raises(NotFoundError):
            await service.record_movement("nope", JUNE_1, MovementKind.INFLOW, Decimal("1"))

    @pytest.mark.asyncio
    async def test_locked_on_closed_date(
        self,
        service: MovementService,
        closing_store: MemoryClosingStore,
    ) -> None:
        """마감일 당일 및 이전 날짜 거부"""
        await _close(closing_store, "acc-a", JUNE_2)

        for d in (JUNE_1, JUNE_2):
            with pytest.raises(PeriodLockedError) as exc_info:
                await service.record_movement("acc-a", d, MovementKind.INFLOW, Decimal("1"))
            assert exc_info.value.last_closed == JUNE_2
            assert exc_info.value.violation == ClosingViolation.PERIOD_LOCKED

    @pytest.mark.asyncio
    async def test_after_closed_date_allowed(
        self,
        service: MovementService,
        closing_store: MemoryClosingStore,
    ) -> None:
        """마감일 이후는 허용"""
        await _close(closing_store, "acc-a", JUNE_2)

        movement = await service.record_movement(
            "acc-a", JUNE_3, MovementKind.INFLOW, Decimal("1")
        )

        assert movement.movement_date == JUNE_3

    @pytest.mark.asyncio
    async def test_lock_is_per_account(
        self,
        service: MovementService,
        closing_store: MemoryClosingStore,
    ) -> None:
        """다른 계좌의 마감은 영향 없음"""
        await _close(closing_store, "acc-b", JUNE_2)

        await service.record_movement("acc-a", JUNE_1, MovementKind.INFLOW, Decimal("1"))

    @pytest.mark.asyncio
    async def test_reopened_date_unlocked(
        self,
        service: MovementService,
        closing_store: MemoryClosingStore,
    ) -> None:
        """재개된 날짜는 다시 변경 가능"""
        await _close(closing_store, "acc-a", JUNE_1)
        await closing_store.set_closed_flag(JUNE_1, False)

        await service.record_movement("acc-a", JUNE_1, MovementKind.OUTFLOW, Decimal("100"))


class TestUpdateDeleteMovement:
    """update_movement / delete_movement 테스트"""

    @pytest.mark.asyncio
    async def test_update_fields(self, service: MovementService) -> None:
        """지정한 필드만 변경"""
        movement = await service.record_movement(
            "acc-a", JUNE_3, MovementKind.INFLOW, Decimal("10"), description="old"
        )

        updated = await service.update_movement(movement.movement_id, amount=Decimal("25"))

        assert updated.amount == Decimal("25")
        assert updated.description == "old"
        assert updated.movement_date == JUNE_3

    @pytest.mark.asyncio
    async def test_update_into_locked_period_rejected(
        self,
        service: MovementService,
        closing_store: MemoryClosingStore,
    ) -> None:
        """마감된 날짜로 이동 거부"""
        movement = await service.record_movement(
            "acc-a", JUNE_3, MovementKind.INFLOW, Decimal("10")
        )
        await _close(closing_store, "acc-a", JUNE_2)

        with pytest.raises(PeriodLockedError):
            await service.update_movement(movement.movement_id, movement_date=JUNE_1)

    @pytest.mark.asyncio
    async def test_update_from_locked_period_rejected(
        self,
        service: MovementService,
        ledger_store: MemoryLedgerStore,
        closing_store: MemoryClosingStore,
    ) -> None:
        """마감된 날짜의 입출금 수정 거부"""
        movement = ledger_store.add_movement("acc-a", JUNE_1, MovementKind.INFLOW, Decimal("10"))
        await _close(closing_store, "acc-a", JUNE_1)

        with pytest.raises(PeriodLockedError):
            await service.update_movement(movement.movement_id, movement_date=JUNE_3)

    @pytest.mark.asyncio
    async def test_delete(
        self,
        service: MovementService,
        ledger_store: MemoryLedgerStore,
    ) -> None:
        """삭제"""
        movement = await service.record_movement(
            "acc-a", JUNE_3, MovementKind.OUTFLOW, Decimal("10")
        )

        await service.delete_movement(movement.movement_id)

        assert await ledger_store.get_movement(movement.movement_id) is None

    @pytest.mark.asyncio
    async def test_delete_locked(
        self,
        service: MovementService,
        ledger_store: MemoryLedgerStore,
        closing_store: MemoryClosingStore,
    ) -> None:
        """마감된 날짜의 입출금 삭제 거부"""
        movement = ledger_store.add_movement("acc-a", JUNE_1, MovementKind.OUTFLOW, Decimal("10"))
        await _close(closing_store, "acc-a", JUNE_1)

        with pytest.raises(PeriodLockedError):
            await service.delete_movement(movement.movement_id)

        assert await ledger_store.get_movement(movement.movement_id) is not None

    @pytest.mark.asyncio
    async def test_delete_missing(self, service: MovementService) -> None:
        """없는 입출금"""
        with pytest.raises(NotFoundError):
            await service.delete_movement("missing")

    @pytest.mark.asyncio
    async def test_transfer_leg_not_editable(
        self,
        service: MovementService,
        ledger_store: MemoryLedgerStore,
    ) -> None:
        """이체 구간은 개별 수정/삭제 불가"""
        transfer_id = await service.record_transfer("acc-a", "acc-b", JUNE_3, Decimal("50"))
        leg = (await ledger_store.get_transfer_legs(transfer_id))[0]

        with pytest.raises(ClosingValidationError):
            await service.update_movement(leg.movement_id, amount=Decimal("1"))
        with pytest.raises(ClosingValidationError):
            await service.delete_movement(leg.movement_id)


class TestTransfers:
    """record_transfer / delete_transfer 테스트"""

    @pytest.mark.asyncio
    async def test_record_creates_linked_pair(
        self,
        service: MovementService,
        ledger_store: MemoryLedgerStore,
    ) -> None:
        """출금/입금 구간이 같은 transfer_id로 생성"""
        transfer_id = await service.record_transfer("acc-a", "acc-b", JUNE_3, Decimal("50"))

        legs = await ledger_store.get_transfer_legs(transfer_id)

        assert len(legs) == 2
        by_kind = {leg.kind: leg for leg in legs}
        assert by_kind[MovementKind.TRANSFER_OUT].account_id == "acc-a"
        assert by_kind[MovementKind.TRANSFER_IN].account_id == "acc-b"
        assert all(leg.amount == Decimal("50") for leg in legs)
        assert all(leg.movement_date == JUNE_3 for leg in legs)

    @pytest.mark.asyncio
    async def test_same_account_rejected(self, service: MovementService) -> None:
        """동일 계좌 이체 거부"""
        with pytest.raises(ClosingValidationError):
            await service.record_transfer("acc-a", "acc-a", JUNE_3, Decimal("50"))

    @pytest.mark.asyncio
    async def test_destination_locked(
        self,
        service: MovementService,
        ledger_store: MemoryLedgerStore,
        closing_store: MemoryClosingStore,
    ) -> None:
        """입금 계좌가 마감된 기간이면 거부 (구간 생성 없음)"""
        await _close(closing_store, "acc-b", JUNE_3)

        with pytest.raises(PeriodLockedError):
            await service.record_transfer("acc-a", "acc-b", JUNE_3, Decimal("50"))

        assert ledger_store.state.movements == {}

    @pytest.mark.asyncio
    async def test_delete_removes_both_legs(
        self,
        service: MovementService,
        ledger_store: MemoryLedgerStore,
    ) -> None:
        """이체 삭제 시 두 구간 모두 삭제"""
        transfer_id = await service.record_transfer("acc-a", "acc-b", JUNE_3, Decimal("50"))

        deleted = await service.delete_transfer(transfer_id)

        assert deleted == 2
        assert await ledger_store.get_transfer_legs(transfer_id) == []

    @pytest.mark.asyncio
    async def test_delete_checks_both_accounts(
        self,
        service: MovementService,
        ledger_store: MemoryLedgerStore,
        closing_store: MemoryClosingStore,
    ) -> None:
        """한쪽 계좌라도 마감되면 삭제 거부"""
        transfer_id = await service.record_transfer("acc-a", "acc-b", JUNE_3, Decimal("50"))
        await _close(closing_store, "acc-b", JUNE_3)

        with pytest.raises(PeriodLockedError):
            await service.delete_transfer(transfer_id)

        assert len(await ledger_store.get_transfer_legs(transfer_id)) == 2

    @pytest.mark.asyncio
    async def test_delete_missing(self, service: MovementService) -> None:
        """없는 이체"""
        with pytest.raises(NotFoundError):
            await service.delete_transfer("missing")

"""
In-memory 저장소

테스트용 계좌/입출금, 마감 기록 저장소.
IAccountLedgerStore, IClosingRecordStore Protocol 준수.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any

from core.closing.errors import DataAccessError
from core.closing.models import ClosingRecord
from core.ledger.models import BankAccount, Movement
from core.types import MovementKind


@dataclass
class MemoryLedgerState:
    """계좌/입출금 상태 (메모리 내 저장)"""

    # 계좌 (account_id -> BankAccount)
    accounts: dict[str, BankAccount] = field(default_factory=dict)

    # 입출금 (movement_id -> Movement), 삽입 순서 유지
    movements: dict[str, Movement] = field(default_factory=dict)

    # 실패 시뮬레이션 (작업 이름 집합)
    failing_operations: set[str] = field(default_factory=set)


class MemoryLedgerStore:
    """In-memory 계좌/입출금 저장소

    사용 예시:
    ```python
    store = MemoryLedgerStore()
    store.add_account("acc-1", Decimal("1000"))
    store.add_movement("acc-1", date(2024, 6, 1), MovementKind.INFLOW, Decimal("300"))

    # 조회 실패 시뮬레이션
    store.state.failing_operations.add("find_movements")
    ```
    """

    def __init__(self, state: MemoryLedgerState | None = None):
        self.state = state or MemoryLedgerState()
        self._movement_counter = 0

    def _check(self, operation: str) -> None:
        if operation in self.state.failing_operations:
            raise DataAccessError(operation, RuntimeError("simulated failure"))

    # -------------------------------------------------------------------------
    # 테스트 헬퍼
    # -------------------------------------------------------------------------

    def add_account(
        self,
        account_id: str,
        opening_balance: Decimal = Decimal("0"),
        company_id: str = "company-1",
        name: str | None = None,
        account_type: str = "CORRENTE",
        is_active: bool = True,
    ) -> BankAccount:
        """계좌 추가"""
        account = BankAccount(
            account_id=account_id,
            company_id=company_id,
            name=name or account_id,
            opening_balance=opening_balance,
            account_type=account_type,
            is_active=is_active,
        )
        self.state.accounts[account_id] = account
        return account

    def add_movement(
        self,
        account_id: str,
        movement_date: date,
        kind: MovementKind,
        amount: Decimal,
        transfer_id: str | None = None,
    ) -> Movement:
        """입출금 추가 (마감 기간 검사 없음)"""
        self._movement_counter += 1
        movement = Movement(
            movement_id=f"mov-{self._movement_counter}",
            account_id=account_id,
            movement_date=movement_date,
            kind=kind,
            amount=amount,
            transfer_id=transfer_id,
        )
        self.state.movements[movement.movement_id] = movement
        return movement

    # -------------------------------------------------------------------------
    # IAccountLedgerStore
    # -------------------------------------------------------------------------

    async def create_account(self, account: BankAccount) -> BankAccount:
        self._check("create_account")
        if account.account_id in self.state.accounts:
            raise DataAccessError(
                "create_account", ValueError(f"duplicate: {account.account_id}")
            )
        self.state.accounts[account.account_id] = account
        return account

    async def get_account(self, account_id: str) -> BankAccount | None:
        self._check("get_account")
        return self.state.accounts.get(account_id)

    async def list_accounts(
        self,
        company_id: str | None = None,
        account_type: str | None = None,
        active_only: bool = False,
    ) -> list[BankAccount]:
        self._check("list_accounts")
        accounts = sorted(self.state.accounts.values(), key=lambda a: a.account_id)
        return [
            a
            for a in accounts
            if (not active_only or a.is_active)
            and (company_id is None or a.company_id == company_id)
            and (account_type is None or a.account_type == account_type)
        ]

    async def list_active_accounts(self) -> list[BankAccount]:
        self._check("list_active_accounts")
        return await self.list_accounts(active_only=True)

    async def get_opening_balance(self, account_id: str) -> Decimal:
        self._check("get_opening_balance")
        account = self.state.accounts.get(account_id)
        if account is None:
            raise DataAccessError("get_opening_balance", LookupError(account_id))
        return account.opening_balance

    async def find_movements(
        self,
        account_id: str,
        date_from_exclusive: date,
        date_to_inclusive: date,
    ) -> list[Movement]:
        self._check("find_movements")
        found = [
            m
            for m in self.state.movements.values()
            if m.account_id == account_id
            and date_from_exclusive < m.movement_date <= date_to_inclusive
        ]
        return sorted(found, key=lambda m: m.movement_date)

    async def list_movements(
        self,
        account_id: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        limit: int = 500,
    ) -> list[Movement]:
        self._check("list_movements")
        found = [
            m
            for m in self.state.movements.values()
            if (account_id is None or m.account_id == account_id)
            and (date_from is None or m.movement_date >= date_from)
            and (date_to is None or m.movement_date <= date_to)
        ]
        found.sort(key=lambda m: m.movement_date, reverse=True)
        return found[:limit]

    async def get_movement(self, movement_id: str) -> Movement | None:
        self._check("get_movement")
        return self.state.movements.get(movement_id)

    async def insert_movement(self, movement: Movement) -> Movement:
        self._check("insert_movement")
        self.state.movements[movement.movement_id] = movement
        return movement

    async def update_movement(self, movement: Movement) -> int:
        self._check("update_movement")
        if movement.movement_id not in self.state.movements:
            return 0
        self.state.movements[movement.movement_id] = movement
        return 1

    async def delete_movement(self, movement_id: str) -> int:
        self._check("delete_movement")
        return 1 if self.state.movements.pop(movement_id, None) else 0

    async def insert_transfer(self, outgoing: Movement, incoming: Movement) -> None:
        self._check("insert_transfer")
        self.state.movements[outgoing.movement_id] = outgoing
        self.state.movements[incoming.movement_id] = incoming

    async def get_transfer_legs(self, transfer_id: str) -> list[Movement]:
        self._check("get_transfer_legs")
        legs = [m for m in self.state.movements.values() if m.transfer_id == transfer_id]
        return sorted(legs, key=lambda m: m.kind.value)

    async def delete_transfer(self, transfer_id: str) -> int:
        self._check("delete_transfer")
        ids = [
            m.movement_id
            for m in self.state.movements.values()
            if m.transfer_id == transfer_id
        ]
        for movement_id in ids:
            del self.state.movements[movement_id]
        return len(ids)


@dataclass
class MemoryClosingState:
    """마감 기록 상태 (메모리 내 저장)"""

    records: list[ClosingRecord] = field(default_factory=list)

    # 실패 시뮬레이션
    failing_operations: set[str] = field(default_factory=set)
    failing_update_dates: set[date] = field(default_factory=set)

    closing_counter: int = 0


class MemoryClosingStore:
    """In-memory 마감 기록 저장소

    사용 예시:
    ```python
    store = MemoryClosingStore()

    # 특정 날짜 재계산 갱신 실패 시뮬레이션
    store.state.failing_update_dates.add(date(2024, 6, 3))
    ```
    """

    def __init__(self, state: MemoryClosingState | None = None):
        self.state = state or MemoryClosingState()

    def _check(self, operation: str) -> None:
        if operation in self.state.failing_operations:
            raise DataAccessError(operation, RuntimeError("simulated failure"))

    def _closed(self) -> list[ClosingRecord]:
        return [r for r in self.state.records if r.closed]

    # -------------------------------------------------------------------------
    # 테스트 헬퍼
    # -------------------------------------------------------------------------

    def get_record(self, account_id: str, closing_date: date) -> ClosingRecord | None:
        """마감된 기록 단건 조회"""
        for record in self._closed():
            if record.account_id == account_id and record.closing_date == closing_date:
                return record
        return None

    # -------------------------------------------------------------------------
    # IClosingRecordStore
    # -------------------------------------------------------------------------

    async def find_latest_closed_before(
        self,
        account_id: str,
        closing_date: date,
    ) -> ClosingRecord | None:
        self._check("find_latest_closed_before")
        candidates = [
            r
            for r in self._closed()
            if r.account_id == account_id and r.closing_date < closing_date
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda r: r.closing_date)

    async def get_latest_closed_date(self, account_id: str) -> date | None:
        self._check("get_latest_closed_date")
        dates = [r.closing_date for r in self._closed() if r.account_id == account_id]
        return max(dates) if dates else None

    async def get_latest_closing_date(self) -> date | None:
        self._check("get_latest_closing_date")
        dates = [r.closing_date for r in self._closed()]
        return max(dates) if dates else None

    async def exists_closed_after(self, closing_date: date) -> bool:
        self._check("exists_closed_after")
        return any(r.closing_date > closing_date for r in self._closed())

    async def exists_closed_on(self, closing_date: date) -> bool:
        self._check("exists_closed_on")
        return any(r.closing_date == closing_date for r in self._closed())

    async def exists_reopened_on(self, closing_date: date) -> bool:
        self._check("exists_reopened_on")
        return any(
            r.closing_date == closing_date and not r.closed for r in self.state.records
        )

    async def list_closed_dates_after(self, closing_date: date) -> list[date]:
        self._check("list_closed_dates_after")
        return sorted({r.closing_date for r in self._closed() if r.closing_date > closing_date})

    async def list_closed_records(
        self,
        account_id: str | None = None,
        closing_date: date | None = None,
    ) -> list[ClosingRecord]:
        self._check("list_closed_records")
        found = [
            r
            for r in self._closed()
            if (account_id is None or r.account_id == account_id)
            and (closing_date is None or r.closing_date == closing_date)
        ]
        return sorted(found, key=lambda r: (r.account_id, r.closing_date))

    async def insert_closing_batch(self, records: list[ClosingRecord]) -> int:
        self._check("insert_closing_batch")
        # 전체 검사 후 저장 (원자성)
        existing = {(r.account_id, r.closing_date) for r in self._closed()}
        batch_keys = [(r.account_id, r.closing_date) for r in records if r.closed]
        if existing.intersection(batch_keys) or len(set(batch_keys)) != len(batch_keys):
            raise DataAccessError(
                "insert_closing_batch", ValueError("duplicate closed record")
            )

        for record in records:
            self.state.closing_counter += 1
            record.closing_id = self.state.closing_counter
            self.state.records.append(record)
        return len(records)

    async def update_closing_record(
        self,
        account_id: str,
        closing_date: date,
        fields: dict[str, Any],
    ) -> int:
        self._check("update_closing_record")
        if closing_date in self.state.failing_update_dates:
            raise DataAccessError(
                "update_closing_record", RuntimeError("simulated failure")
            )

        updated = 0
        for i, record in enumerate(self.state.records):
            if (
                record.closed
                and record.account_id == account_id
                and record.closing_date == closing_date
            ):
                self.state.records[i] = replace(record, **fields)
                updated += 1
        return updated

    async def set_closed_flag(self, closing_date: date, closed: bool) -> int:
        self._check("set_closed_flag")
        changed = 0
        for i, record in enumerate(self.state.records):
            if record.closing_date == closing_date and record.closed != closed:
                self.state.records[i] = replace(record, closed=closed)
                changed += 1
        return changed

"""
입출금 서비스

입출금/이체 등록, 수정, 삭제.
마감된 기간(계좌의 최근 마감일 이전 또는 당일)의 변경은 거부.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import uuid4

from core.closing.errors import (
    ClosingValidationError,
    NotFoundError,
    PeriodLockedError,
)
from core.ledger.models import BankAccount, Movement
from core.types import ClosingViolation, MovementKind

if TYPE_CHECKING:
    from adapters.interfaces import IClosingRecordStore
    from core.ledger.store import LedgerStore

logger = logging.getLogger(__name__)


# 단건 입출금으로 등록 가능한 유형 (이체 구간은 record_transfer로만 생성)
DIRECT_KINDS = (MovementKind.INFLOW, MovementKind.OUTFLOW)


class MovementService:
    """입출금 서비스

    Args:
        ledger_store: Ledger 저장소
        closing_store: 마감 기록 저장소 (마감일 조회용)
        lock: 마감 작업과 공유하는 락 (None이면 인스턴스 전용 락)

    사용 예시:
    ```python
    service = MovementService(ledger_store, closing_store)
    movement = await service.record_movement(
        "acc-1", date(2024, 6, 3), MovementKind.INFLOW, Decimal("300")
    )
    transfer_id = await service.record_transfer(
        "acc-1", "acc-2", date(2024, 6, 3), Decimal("100")
    )
    ```
    """

    def __init__(
        self,
        ledger_store: LedgerStore,
        closing_store: IClosingRecordStore,
        lock: asyncio.Lock | None = None,
    ):
        self.ledger_store = ledger_store
        self.closing_store = closing_store
        self._lock = lock or asyncio.Lock()

    # =====================================
    # 입출금
    # =====================================

    async def record_movement(
        self,
        account_id: str,
        movement_date: date,
        kind: MovementKind,
        amount: Decimal,
        description: str | None = None,
        document: str | None = None,
    ) -> Movement:
        """입출금 등록

        Raises:
            ClosingValidationError: 유형/금액 오류
            NotFoundError: 계좌 없음
            PeriodLockedError: 마감된 기간
        """
        self._validate_direct(kind, amount)

        async with self._lock:
            await self._require_account(account_id)
            await self._ensure_unlocked(account_id, movement_date)

            movement = Movement(
                movement_id=str(uuid4()),
                account_id=account_id,
                movement_date=movement_date,
                kind=kind,
                amount=amount,
                description=description,
                document=document,
            )
            await self.ledger_store.insert_movement(movement)

        logger.info(
            f"입출금 등록: {movement.movement_id}",
            extra={
                "account_id": account_id,
                "movement_date": movement_date.isoformat(),
                "kind": kind.value,
                "amount": str(amount),
            },
        )
        return movement

    async def update_movement(
        self,
        movement_id: str,
        movement_date: date | None = None,
        kind: MovementKind | None = None,
        amount: Decimal | None = None,
        description: str | None = None,
        document: str | None = None,
    ) -> Movement:
        """입출금 수정

        기존 날짜와 변경 날짜 모두 마감되지 않은 기간이어야 함.

        Raises:
            ClosingValidationError: 이체 구간 수정 시도, 유형/금액 오류
            NotFoundError: 입출금 없음
            PeriodLockedError: 마감된 기간
        """
        async with self._lock:
            current = await self._require_movement(movement_id)
            if current.transfer_id is not None:
                raise ClosingValidationError(
                    ClosingViolation.INVALID_MOVEMENT,
                    "이체 구간은 개별 수정할 수 없습니다. 이체를 삭제 후 다시 등록하세요.",
                )

            updated = replace(
                current,
                movement_date=movement_date or current.movement_date,
                kind=kind or current.kind,
                amount=amount if amount is not None else current.amount,
                description=description if description is not None else current.description,
                document=document if document is not None else current.document,
            )
            self._validate_direct(updated.kind, updated.amount)

            await self._ensure_unlocked(current.account_id, current.movement_date)
            if updated.movement_date != current.movement_date:
                await self._ensure_unlocked(updated.account_id, updated.movement_date)

            await self.ledger_store.update_movement(updated)

        logger.info(f"입출금 수정: {movement_id}")
        return updated

    async def delete_movement(self, movement_id: str) -> None:
        """입출금 삭제

        Raises:
            ClosingValidationError: 이체 구간 삭제 시도
            NotFoundError: 입출금 없음
            PeriodLockedError: 마감된 기간
        """
        async with self._lock:
            current = await self._require_movement(movement_id)
            if current.transfer_id is not None:
                raise ClosingValidationError(
                    ClosingViolation.INVALID_MOVEMENT,
                    "이체 구간은 이체 삭제로만 제거할 수 있습니다.",
                )

            await self._ensure_unlocked(current.account_id, current.movement_date)
            await self.ledger_store.delete_movement(movement_id)

        logger.info(f"입출금 삭제: {movement_id}")

    # =====================================
    # 이체
    # =====================================

    async def record_transfer(
        self,
        source_account_id: str,
        destination_account_id: str,
        transfer_date: date,
        amount: Decimal,
        description: str | None = None,
    ) -> str:
        """계좌 간 이체 등록

        출금 계좌에 TRANSFERENCIA_ENVIADA, 입금 계좌에 TRANSFERENCIA_RECEBIDA
        구간을 같은 transfer_id로 함께 저장.

        Returns:
            transfer_id

        Raises:
            ClosingValidationError: 동일 계좌, 금액 오류
            NotFoundError: 계좌 없음
            PeriodLockedError: 두 계좌 중 하나라도 마감된 기간
        """
        if source_account_id == destination_account_id:
            raise ClosingValidationError(
                ClosingViolation.INVALID_MOVEMENT,
                "출금 계좌와 입금 계좌가 같을 수 없습니다.",
            )
        self._validate_amount(amount)

        async with self._lock:
            source = await self._require_account(source_account_id)
            destination = await self._require_account(destination_account_id)
            await self._ensure_unlocked(source.account_id, transfer_date)
            await self._ensure_unlocked(destination.account_id, transfer_date)

            transfer_id = str(uuid4())
            outgoing = Movement(
                movement_id=str(uuid4()),
                account_id=source.account_id,
                movement_date=transfer_date,
                kind=MovementKind.TRANSFER_OUT,
                amount=amount,
                description=description or f"Transferência para {destination.name}",
                transfer_id=transfer_id,
            )
            incoming = Movement(
                movement_id=str(uuid4()),
                account_id=destination.account_id,
                movement_date=transfer_date,
                kind=MovementKind.TRANSFER_IN,
                amount=amount,
                description=description or f"Transferência de {source.name}",
                transfer_id=transfer_id,
            )
            await self.ledger_store.insert_transfer(outgoing, incoming)

        logger.info(
            f"이체 등록: {transfer_id}",
            extra={
                "source": source_account_id,
                "destination": destination_account_id,
                "amount": str(amount),
            },
        )
        return transfer_id

    async def delete_transfer(self, transfer_id: str) -> int:
        """이체 삭제 (두 구간 모두)

        Returns:
            삭제된 구간 수

        Raises:
            NotFoundError: 이체 없음
            PeriodLockedError: 두 계좌 중 하나라도 마감된 기간
        """
        async with self._lock:
            legs = await self.ledger_store.get_transfer_legs(transfer_id)
            if not legs:
                raise NotFoundError("transfer", transfer_id)

            for leg in legs:
                await self._ensure_unlocked(leg.account_id, leg.movement_date)

            deleted = await self.ledger_store.delete_transfer(transfer_id)

        logger.info(f"이체 삭제: {transfer_id} ({deleted}건)")
        return deleted

    # =====================================
    # 검증
    # =====================================

    @staticmethod
    def _validate_amount(amount: Decimal) -> None:
        if amount <= 0:
            raise ClosingValidationError(
                ClosingViolation.INVALID_MOVEMENT,
                "금액은 0보다 커야 합니다.",
            )

    def _validate_direct(self, kind: MovementKind, amount: Decimal) -> None:
        if kind not in DIRECT_KINDS:
            raise ClosingValidationError(
                ClosingViolation.INVALID_MOVEMENT,
                "입출금 유형은 ENTRADA 또는 SAIDA만 가능합니다.",
            )
        self._validate_amount(amount)

    async def _require_account(self, account_id: str) -> BankAccount:
        account = await self.ledger_store.get_account(account_id)
        if account is None:
            raise NotFoundError("account", account_id)
        return account

    async def _require_movement(self, movement_id: str) -> Movement:
        movement = await self.ledger_store.get_movement(movement_id)
        if movement is None:
            raise NotFoundError("movement", movement_id)
        return movement

    async def _ensure_unlocked(self, account_id: str, movement_date: date) -> None:
        """계좌의 최근 마감일 이전 또는 당일이면 PeriodLockedError"""
        last_closed = await self.closing_store.get_latest_closed_date(account_id)
        if last_closed is not None and movement_date <= last_closed:
            logger.warning(
                f"마감 기간 변경 거부: {account_id} {movement_date.isoformat()} "
                f"(마감일 {last_closed.isoformat()})"
            )
            raise PeriodLockedError(account_id, movement_date, last_closed)

"""
Ledger 저장소

은행 계좌와 입출금 내역 저장 및 조회.
이체는 출금/입금 두 구간을 하나의 transfer_id로 묶어 함께 저장/삭제.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from adapters.db.sqlite_adapter import translate_errors
from core.closing.errors import DataAccessError
from core.ledger.models import BankAccount, Movement

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


_MOVEMENT_COLUMNS = (
    "movement_id, account_id, movement_date, kind, amount, "
    "description, document, transfer_id"
)


def _movement_params(movement: Movement) -> tuple[Any, ...]:
    return (
        movement.movement_id,
        movement.account_id,
        movement.movement_date.isoformat(),
        movement.kind.value,
        str(movement.amount),
        movement.description,
        movement.document,
        movement.transfer_id,
    )


class LedgerStore:
    """Ledger 저장소

    IAccountLedgerStore 구현체 + 계좌/입출금 쓰기 연산.
    잔액은 저장하지 않고 마감 기록과 입출금으로부터 계산됨.

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =====================================
    # 계좌
    # =====================================

    async def create_account(self, account: BankAccount) -> BankAccount:
        """계좌 생성"""
        async with translate_errors("create_account"):
            async with self.db.transaction():
                await self.db.execute(
                    """
                    INSERT INTO bank_account (
                        account_id, company_id, name, account_type,
                        opening_balance, is_active
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        account.account_id,
                        account.company_id,
                        account.name,
                        account.account_type,
                        str(account.opening_balance),
                        1 if account.is_active else 0,
                    ),
                )

        logger.info(f"계좌 생성: {account.account_id} ({account.name})")
        return account

    async def get_account(self, account_id: str) -> BankAccount | None:
        """계좌 단건 조회

        Args:
            account_id: 계좌 ID

        Returns:
            계좌 (없으면 None)
        """
        async with translate_errors("get_account"):
            row = await self.db.fetchone_dict(
                "SELECT * FROM bank_account WHERE account_id = ?",
                (account_id,),
            )
        return BankAccount.from_row(row) if row else None

    async def list_accounts(
        self,
        company_id: str | None = None,
        account_type: str | None = None,
        active_only: bool = False,
    ) -> list[BankAccount]:
        """계좌 목록 조회

        Args:
            company_id: 필터링할 회사 ID (선택)
            account_type: 필터링할 계좌 유형 (선택)
            active_only: 활성 계좌만 조회

        Returns:
            계좌 목록 (account_id 오름차순)
        """
        sql = "SELECT * FROM bank_account WHERE 1 = 1"
        params: list[Any] = []

        if active_only:
            sql += " AND is_active = 1"

        if company_id:
            sql += " AND company_id = ?"
            params.append(company_id)

        if account_type:
            sql += " AND account_type = ?"
            params.append(account_type)

        sql += " ORDER BY account_id"

        async with translate_errors("list_accounts"):
            rows = await self.db.fetchall_dict(sql, tuple(params))
        return [BankAccount.from_row(row) for row in rows]

    async def list_active_accounts(self) -> list[BankAccount]:
        """활성 계좌 목록 조회"""
        return await self.list_accounts(active_only=True)

    async def get_opening_balance(self, account_id: str) -> Decimal:
        """계좌 기초 잔액 조회

        Raises:
            DataAccessError: 계좌가 없거나 조회 실패
        """
        account = await self.get_account(account_id)
        if account is None:
            raise DataAccessError("get_opening_balance", LookupError(account_id))
        return account.opening_balance

    # =====================================
    # 입출금
    # =====================================

    async def find_movements(
        self,
        account_id: str,
        date_from_exclusive: date,
        date_to_inclusive: date,
    ) -> list[Movement]:
        """기간 내 입출금 조회 (시작일 미포함, 종료일 포함)"""
        async with translate_errors("find_movements"):
            rows = await self.db.fetchall_dict(
                f"""
                SELECT {_MOVEMENT_COLUMNS} FROM movement
                WHERE account_id = ?
                  AND movement_date > ?
                  AND movement_date <= ?
                ORDER BY movement_date ASC, created_at ASC, movement_id ASC
                """,
                (
                    account_id,
                    date_from_exclusive.isoformat(),
                    date_to_inclusive.isoformat(),
                ),
            )
        return [Movement.from_row(row) for row in rows]

    async def list_movements(
        self,
        account_id: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        limit: int = 500,
    ) -> list[Movement]:
        """입출금 목록 조회 (기간 양끝 포함)"""
        sql = f"SELECT {_MOVEMENT_COLUMNS} FROM movement WHERE 1 = 1"
        params: list[Any] = []

        if account_id:
            sql += " AND account_id = ?"
            params.append(account_id)

        if date_from:
            sql += " AND movement_date >= ?"
            params.append(date_from.isoformat())

        if date_to:
            sql += " AND movement_date <= ?"
            params.append(date_to.isoformat())

        sql += " ORDER BY movement_date DESC, created_at DESC LIMIT ?"
        params.append(limit)

        async with translate_errors("list_movements"):
            rows = await self.db.fetchall_dict(sql, tuple(params))
        return [Movement.from_row(row) for row in rows]

    async def get_movement(self, movement_id: str) -> Movement | None:
        """입출금 단건 조회"""
        async with translate_errors("get_movement"):
            row = await self.db.fetchone_dict(
                f"SELECT {_MOVEMENT_COLUMNS} FROM movement WHERE movement_id = ?",
                (movement_id,),
            )
        return Movement.from_row(row) if row else None

    async def insert_movement(self, movement: Movement) -> Movement:
        """입출금 저장"""
        async with translate_errors("insert_movement"):
            async with self.db.transaction():
                await self.db.execute(
                    f"INSERT INTO movement ({_MOVEMENT_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    _movement_params(movement),
                )

        logger.debug(f"입출금 저장: {movement.movement_id}")
        return movement

    async def update_movement(self, movement: Movement) -> int:
        """입출금 수정

        Returns:
            수정된 행 수
        """
        async with translate_errors("update_movement"):
            async with self.db.transaction():
                cursor = await self.db.execute(
                    """
                    UPDATE movement
                    SET account_id = ?, movement_date = ?, kind = ?, amount = ?,
                        description = ?, document = ?,
                        updated_at = datetime('now')
                    WHERE movement_id = ?
                    """,
                    (
                        movement.account_id,
                        movement.movement_date.isoformat(),
                        movement.kind.value,
                        str(movement.amount),
                        movement.description,
                        movement.document,
                        movement.movement_id,
                    ),
                )
        return cursor.rowcount

    async def delete_movement(self, movement_id: str) -> int:
        """입출금 삭제

        Returns:
            삭제된 행 수
        """
        async with translate_errors("delete_movement"):
            async with self.db.transaction():
                cursor = await self.db.execute(
                    "DELETE FROM movement WHERE movement_id = ?",
                    (movement_id,),
                )
        return cursor.rowcount

    # =====================================
    # 이체
    # =====================================

    async def insert_transfer(self, outgoing: Movement, incoming: Movement) -> None:
        """이체 두 구간 저장 (단일 트랜잭션)"""
        async with translate_errors("insert_transfer"):
            async with self.db.transaction():
                await self.db.executemany(
                    f"INSERT INTO movement ({_MOVEMENT_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    [_movement_params(outgoing), _movement_params(incoming)],
                )

        logger.debug(f"이체 저장: {outgoing.transfer_id}")

    async def get_transfer_legs(self, transfer_id: str) -> list[Movement]:
        """이체 구간 조회"""
        async with translate_errors("get_transfer_legs"):
            rows = await self.db.fetchall_dict(
                f"""
                SELECT {_MOVEMENT_COLUMNS} FROM movement
                WHERE transfer_id = ?
                ORDER BY kind ASC
                """,
                (transfer_id,),
            )
        return [Movement.from_row(row) for row in rows]

    async def delete_transfer(self, transfer_id: str) -> int:
        """이체 두 구간 삭제 (단일 트랜잭션)

        Returns:
            삭제된 행 수
        """
        async with translate_errors("delete_transfer"):
            async with self.db.transaction():
                cursor = await self.db.execute(
                    "DELETE FROM movement WHERE transfer_id = ?",
                    (transfer_id,),
                )
        return cursor.rowcount

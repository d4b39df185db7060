"""
마감 조회 서비스

마감 목록(계좌 정보 포함)과 계좌 거래내역(extrato) 조회.
"""

import logging
from datetime import date, timedelta
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter, translate_errors
from core.closing.calculator import BalanceCalculator, summarize_movements
from core.closing.errors import NotFoundError
from core.closing.models import ClosingRecord
from core.ledger.store import LedgerStore
from core.storage.closing_store import ClosingStore

logger = logging.getLogger(__name__)


class ClosingQueryService:
    """마감 조회 서비스

    Args:
        db: SQLite 어댑터 (읽기 전용 가능)
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.ledger_store = LedgerStore(db)
        self.closing_store = ClosingStore(db)
        self.calculator = BalanceCalculator(self.ledger_store, self.closing_store)

    async def list_closings(
        self,
        closing_date: date | None = None,
        company_id: str | None = None,
        account_type: str | None = None,
    ) -> dict[str, Any]:
        """마감 목록 조회

        날짜 미지정 시 가장 최근 마감일 기준.
        마감 잔액이 0인 계좌는 제외.

        Args:
            closing_date: 마감일 (선택)
            company_id: 회사 필터 (선택)
            account_type: 계좌 유형 필터 (선택)

        Returns:
            closing_date, items, total
        """
        if closing_date is None:
            closing_date = await self.closing_store.get_latest_closing_date()
            if closing_date is None:
                return {"closing_date": None, "items": [], "total": 0}

        sql = """
            SELECT c.*, a.name AS account_name,
                   a.company_id AS company_id, a.account_type AS account_type
            FROM closing_record c
            JOIN bank_account a ON a.account_id = c.account_id
            WHERE c.closing_date = ? AND c.closed = 1
        """
        params: list[Any] = [closing_date.isoformat()]

        if company_id:
            sql += " AND a.company_id = ?"
            params.append(company_id)

        if account_type:
            sql += " AND a.account_type = ?"
            params.append(account_type)

        sql += " ORDER BY a.company_id, a.name"

        async with translate_errors("list_closings"):
            rows = await self.db.fetchall_dict(sql, tuple(params))

        items = []
        for row in rows:
            record = ClosingRecord.from_row(row)
            if record.final_balance == 0:
                continue
            item = record.to_dict()
            item["account_name"] = row["account_name"]
            item["company_id"] = row["company_id"]
            item["account_type"] = row["account_type"]
            items.append(item)

        return {
            "closing_date": closing_date.isoformat(),
            "items": items,
            "total": len(items),
        }

    async def get_statement(
        self,
        account_id: str,
        date_from: date,
        date_to: date,
    ) -> dict[str, Any]:
        """계좌 거래내역 조회

        시작일 전일 잔액에서 출발하여 거래별 누적 잔액 계산.

        Raises:
            NotFoundError: 계좌 없음
            ValueError: 시작일 > 종료일, 시작일 전일이 표현 불가
        """
        if date_from > date_to:
            raise ValueError("date_from must not be after date_to")
        if date_from == date.min:
            raise ValueError(f"date_from must be after {date.min.isoformat()}")

        account = await self.ledger_store.get_account(account_id)
        if account is None:
            raise NotFoundError("account", account_id)

        day_before = date_from - timedelta(days=1)
        opening = await self.calculator.balance_as_of(account, day_before)
        movements = await self.ledger_store.find_movements(
            account_id, day_before, date_to
        )

        balance = opening
        entries = []
        for movement in movements:
            balance += movement.signed_amount
            entry = movement.to_dict()
            entry["balance"] = str(balance)
            entries.append(entry)

        total_in, total_out, _ = summarize_movements(movements)

        return {
            "account_id": account.account_id,
            "account_name": account.name,
            "date_from": date_from.isoformat(),
            "date_to": date_to.isoformat(),
            "opening_balance": str(opening),
            "closing_balance": str(balance),
            "total_in": str(total_in),
            "total_out": str(total_out),
            "entries": entries,
        }

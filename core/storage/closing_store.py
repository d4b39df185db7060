"""
ClosingStore - 일일 마감 기록 저장소

closing_record 테이블 읽기/쓰기.
마감된 기록(closed=1)은 (계좌, 마감일) 기준 유일.
재개된 기록(closed=0)은 이력으로 남고 조회/계산 대상에서 제외.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter, translate_errors
from core.closing.models import ClosingRecord

logger = logging.getLogger(__name__)


# 연쇄 재계산으로 갱신 가능한 컬럼
UPDATABLE_FIELDS = frozenset({
    "previous_balance",
    "total_in",
    "total_out",
    "final_balance",
    "notes",
})


class ClosingStore:
    """마감 기록 저장소

    IClosingRecordStore 구현체.
    모든 SQLite 오류는 DataAccessError로 변환되어 전달됨.

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        store = ClosingStore(db)
        last = await store.find_latest_closed_before("acc-1", date(2024, 6, 2))
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def find_latest_closed_before(
        self,
        account_id: str,
        closing_date: date,
    ) -> ClosingRecord | None:
        """해당 날짜 이전(미포함)의 가장 최근 마감 기록"""
        async with translate_errors("find_latest_closed_before"):
            row = await self.db.fetchone_dict(
                """
                SELECT * FROM closing_record
                WHERE account_id = ? AND closing_date < ? AND closed = 1
                ORDER BY closing_date DESC
                LIMIT 1
                """,
                (account_id, closing_date.isoformat()),
            )
        return ClosingRecord.from_row(row) if row else None

    async def get_latest_closed_date(self, account_id: str) -> date | None:
        """계좌의 가장 최근 마감일"""
        async with translate_errors("get_latest_closed_date"):
            row = await self.db.fetchone(
                """
                SELECT MAX(closing_date) FROM closing_record
                WHERE account_id = ? AND closed = 1
                """,
                (account_id,),
            )
        if row is None or row[0] is None:
            return None
        return date.fromisoformat(row[0])

    async def get_latest_closing_date(self) -> date | None:
        """전체 계좌 기준 가장 최근 마감일 (목록 화면 기본값)"""
        async with translate_errors("get_latest_closing_date"):
            row = await self.db.fetchone(
                "SELECT MAX(closing_date) FROM closing_record WHERE closed = 1"
            )
        if row is None or row[0] is None:
            return None
        return date.fromisoformat(row[0])

    async def exists_closed_after(self, closing_date: date) -> bool:
        """해당 날짜 이후(미포함) 마감 기록 존재 여부"""
        async with translate_errors("exists_closed_after"):
            row = await self.db.fetchone(
                """
                SELECT 1 FROM closing_record
                WHERE closing_date > ? AND closed = 1
                LIMIT 1
                """,
                (closing_date.isoformat(),),
            )
        return row is not None

    async def exists_closed_on(self, closing_date: date) -> bool:
        """해당 날짜 마감 기록 존재 여부"""
        async with translate_errors("exists_closed_on"):
            row = await self.db.fetchone(
                """
                SELECT 1 FROM closing_record
                WHERE closing_date = ? AND closed = 1
                LIMIT 1
                """,
                (closing_date.isoformat(),),
            )
        return row is not None

    async def exists_reopened_on(self, closing_date: date) -> bool:
        """해당 날짜에 재개된 기록 존재 여부"""
        async with translate_errors("exists_reopened_on"):
            row = await self.db.fetchone(
                """
                SELECT 1 FROM closing_record
                WHERE closing_date = ? AND closed = 0
                LIMIT 1
                """,
                (closing_date.isoformat(),),
            )
        return row is not None

    async def list_closed_dates_after(self, closing_date: date) -> list[date]:
        """해당 날짜 이후 마감일 목록 (오름차순)"""
        async with translate_errors("list_closed_dates_after"):
            rows = await self.db.fetchall(
                """
                SELECT DISTINCT closing_date FROM closing_record
                WHERE closing_date > ? AND closed = 1
                ORDER BY closing_date ASC
                """,
                (closing_date.isoformat(),),
            )
        return [date.fromisoformat(row[0]) for row in rows]

    async def list_closed_records(
        self,
        account_id: str | None = None,
        closing_date: date | None = None,
    ) -> list[ClosingRecord]:
        """마감 기록 조회 (계좌, 마감일 오름차순)"""
        sql = "SELECT * FROM closing_record WHERE closed = 1"
        params: list[Any] = []

        if account_id is not None:
            sql += " AND account_id = ?"
            params.append(account_id)
        if closing_date is not None:
            sql += " AND closing_date = ?"
            params.append(closing_date.isoformat())

        sql += " ORDER BY account_id ASC, closing_date ASC"

        async with translate_errors("list_closed_records"):
            rows = await self.db.fetchall_dict(sql, tuple(params))
        return [ClosingRecord.from_row(row) for row in rows]

    # -------------------------------------------------------------------------
    # 쓰기
    # -------------------------------------------------------------------------

    async def insert_closing_batch(self, records: list[ClosingRecord]) -> int:
        """마감 기록 일괄 저장

        단일 트랜잭션으로 저장. 1건이라도 실패하면 전체 롤백.

        Returns:
            저장된 기록 수
        """
        if not records:
            return 0

        params = [
            (
                r.account_id,
                r.closing_date.isoformat(),
                str(r.previous_balance),
                str(r.total_in),
                str(r.total_out),
                str(r.final_balance),
                1 if r.closed else 0,
                r.closed_by,
                r.notes,
            )
            for r in records
        ]

        async with translate_errors("insert_closing_batch"):
            async with self.db.transaction():
                await self.db.executemany(
                    """
                    INSERT INTO closing_record (
                        account_id, closing_date, previous_balance,
                        total_in, total_out, final_balance,
                        closed, closed_by, notes
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    params,
                )

        logger.debug(f"마감 기록 {len(records)}건 저장")
        return len(records)

    async def update_closing_record(
        self,
        account_id: str,
        closing_date: date,
        fields: dict[str, Any],
    ) -> int:
        """마감된 기록의 금액 필드 갱신

        Raises:
            ValueError: 갱신 불가 컬럼 포함
            DataAccessError: DB 오류
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not fields:
            return 0

        columns = sorted(fields)
        assignments = ", ".join(f"{col} = ?" for col in columns)
        values = [
            str(fields[col]) if isinstance(fields[col], Decimal) else fields[col]
            for col in columns
        ]

        async with translate_errors("update_closing_record"):
            async with self.db.transaction():
                cursor = await self.db.execute(
                    f"""
                    UPDATE closing_record
                    SET {assignments}, updated_at = datetime('now')
                    WHERE account_id = ? AND closing_date = ? AND closed = 1
                    """,
                    (*values, account_id, closing_date.isoformat()),
                )
        return cursor.rowcount

    async def set_closed_flag(self, closing_date: date, closed: bool) -> int:
        """해당 날짜 전체 계좌의 마감 플래그 변경

        재개(closed=False)는 마감된 기록만 대상.
        """
        current = 0 if closed else 1

        async with translate_errors("set_closed_flag"):
            async with self.db.transaction():
                cursor = await self.db.execute(
                    """
                    UPDATE closing_record
                    SET closed = ?, updated_at = datetime('now')
                    WHERE closing_date = ? AND closed = ?
                    """,
                    (1 if closed else 0, closing_date.isoformat(), current),
                )
        return cursor.rowcount

"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
Web 요청별 연결과 관리 스크립트가 동시에 접근 가능하도록 설정.

금액은 TEXT(str(Decimal)), 날짜는 TEXT(YYYY-MM-DD)로 저장.
ISO 날짜 문자열은 사전순 비교가 날짜순 비교와 동일.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.closing.errors import DataAccessError

logger = logging.getLogger(__name__)


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    if readonly:
        conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
    else:
        conn = await aiosqlite.connect(db_path_str)

    # WAL 모드 설정
    await conn.execute("PRAGMA journal_mode=WAL")

    # 동시 접근 설정
    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    # 외래 키 제약 활성화
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.debug(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


@asynccontextmanager
async def translate_errors(operation: str) -> AsyncIterator[None]:
    """SQLite 오류를 DataAccessError로 변환

    사용 예시:
    ```python
    async with translate_errors("insert_closing_batch"):
        await db.executemany(...)
    ```
    """
    try:
        yield
    except aiosqlite.Error as e:
        logger.error(f"DB 작업 실패 ({operation}): {e}")
        raise DataAccessError(operation, e) from e


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (조회 전용 요청)

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction() as conn:
        await conn.execute("INSERT INTO ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.debug("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def executemany(
        self,
        sql: str,
        parameters: list[tuple[Any, ...]],
    ) -> aiosqlite.Cursor:
        """SQL 다중 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        return await self._conn.executemany(sql, parameters)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def fetchone_dict(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> dict[str, Any] | None:
        """단일 행 조회 (컬럼명 → 값 딕셔너리)"""
        cursor = await self.execute(sql, parameters)
        row = await cursor.fetchone()
        if row is None:
            return None
        columns = [desc[0] for desc in cursor.description]
        return dict(zip(columns, row))

    async def fetchall_dict(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[dict[str, Any]]:
        """전체 행 조회 (컬럼명 → 값 딕셔너리)"""
        cursor = await self.execute(sql, parameters)
        rows = await cursor.fetchall()
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in rows]

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외 시 자동 롤백.
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        try:
            yield self._conn
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    CREATE IF NOT EXISTS 패턴으로 반복 호출해도 안전.

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    # bank_account (은행 계좌)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS bank_account (
            account_id       TEXT PRIMARY KEY,
            company_id       TEXT NOT NULL,
            name             TEXT NOT NULL,
            account_type     TEXT NOT NULL DEFAULT 'CORRENTE',
            opening_balance  TEXT NOT NULL DEFAULT '0',
            is_active        INTEGER NOT NULL DEFAULT 1,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # movement (입출금, 이체 구간 포함)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS movement (
            movement_id      TEXT PRIMARY KEY,
            account_id       TEXT NOT NULL,
            movement_date    TEXT NOT NULL,
            kind             TEXT NOT NULL,
            amount           TEXT NOT NULL,
            description      TEXT,
            document         TEXT,
            transfer_id      TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (account_id) REFERENCES bank_account(account_id)
        )
    """)

    # closing_record (일일 마감)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS closing_record (
            closing_id       INTEGER PRIMARY KEY AUTOINCREMENT,
            account_id       TEXT NOT NULL,
            closing_date     TEXT NOT NULL,
            previous_balance TEXT NOT NULL,
            total_in         TEXT NOT NULL,
            total_out        TEXT NOT NULL,
            final_balance    TEXT NOT NULL,
            closed           INTEGER NOT NULL DEFAULT 1,
            closed_by        TEXT,
            notes            TEXT,
            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now')),
            FOREIGN KEY (account_id) REFERENCES bank_account(account_id)
        )
    """)

    # 인덱스 생성
    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_movement_account_date
        ON movement(account_id, movement_date)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_movement_transfer
        ON movement(transfer_id)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_closing_record_date
        ON closing_record(closing_date, closed)
    """)

    # (계좌, 마감일)은 마감된 기록 중에서만 유일 (재개 이력은 중복 허용)
    await adapter.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS ux_closing_record_closed
        ON closing_record(account_id, closing_date)
        WHERE closed = 1
    """)

    await adapter.commit()

    logger.info("스키마 초기화 완료")

"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

import asyncio
from datetime import date
from typing import AsyncGenerator, Callable

from fastapi import Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.closing.service import ClosingService
from core.config.loader import ClosingPolicy, Settings, get_settings
from core.ledger.service import MovementService
from core.ledger.store import LedgerStore
from core.storage.closing_store import ClosingStore
from core.utils.timezone import today_brt


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)

    목록/거래내역 조회에 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=True) as db:
        yield db


async def get_db_write() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    마감/재개, 입출금/이체, 계좌 생성 시 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=False) as db:
        yield db


# =========================================================================
# 마감 락 (프로세스 공용)
# =========================================================================

# 마감/재개/입출금 쓰기를 직렬화하는 전역 락
# 요청마다 서비스가 생성되므로 락은 프로세스 단위로 공유
_closing_lock: asyncio.Lock | None = None


def get_closing_lock() -> asyncio.Lock:
    """마감 락 반환 (최초 호출 시 생성)"""
    global _closing_lock
    if _closing_lock is None:
        _closing_lock = asyncio.Lock()
    return _closing_lock


def reset_closing_lock() -> None:
    """마감 락 초기화 (테스트용)"""
    global _closing_lock
    _closing_lock = None


def get_closing_policy(
    settings: Settings = Depends(get_app_settings),
) -> ClosingPolicy:
    """마감 정책 반환"""
    return settings.closing_policy


def get_clock() -> Callable[[], date]:
    """오늘 날짜 제공 함수 반환 (테스트에서 override)"""
    return today_brt


def get_closing_service(
    db: SQLiteAdapter = Depends(get_db_write),
    policy: ClosingPolicy = Depends(get_closing_policy),
    clock: Callable[[], date] = Depends(get_clock),
    lock: asyncio.Lock = Depends(get_closing_lock),
) -> ClosingService:
    """마감 서비스 반환"""
    return ClosingService(
        LedgerStore(db),
        ClosingStore(db),
        policy=policy,
        clock=clock,
        lock=lock,
    )


def get_movement_service(
    db: SQLiteAdapter = Depends(get_db_write),
    lock: asyncio.Lock = Depends(get_closing_lock),
) -> MovementService:
    """입출금 서비스 반환"""
    return MovementService(LedgerStore(db), ClosingStore(db), lock=lock)

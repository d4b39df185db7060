#!/usr/bin/env python3
"""DB 상태 확인 스크립트

계좌 수, 최근 마감일, 마감 잔액 연결 검증 결과 출력.

실행 방법:
    python scripts/check_db.py
"""

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.closing.service import ClosingService
from core.config.loader import get_settings
from core.ledger.store import LedgerStore
from core.storage.closing_store import ClosingStore

SCHEMA_TABLES = ("bank_account", "movement", "closing_record")


async def main() -> int:
    settings = get_settings()
    db_path = settings.db_path

    async with SQLiteAdapter(db_path) as db:
        missing = [
            table
            for table in SCHEMA_TABLES
            if not await db.table_exists(table)
        ]
        await init_schema(db)

        ledger_store = LedgerStore(db)
        closing_store = ClosingStore(db)
        service = ClosingService(ledger_store, closing_store, settings.closing_policy)

        accounts = await ledger_store.list_active_accounts()
        latest = await closing_store.get_latest_closing_date()

        print(f"DB Path: {db_path}")
        print(f"Environment: {settings.environment.value}")
        if missing:
            print(f"Schema: created {', '.join(missing)}")
        print(f"Active accounts: {len(accounts)}")
        print(f"Latest closing: {latest.isoformat() if latest else '-'}")

        for account in accounts:
            last_closed = await closing_store.get_latest_closed_date(account.account_id)
            print(
                f"  - {account.account_id} ({account.name}): "
                f"last closed {last_closed.isoformat() if last_closed else '-'}"
            )

        breaks = await service.audit()
        if not breaks:
            print("\nBalance chain: OK")
            return 0

        print(f"\nBalance chain breaks ({len(breaks)}):")
        for b in breaks:
            print(
                f"  - {b.account_id} {b.closing_date.isoformat()} [{b.break_kind}] "
                f"expected={b.expected} actual={b.actual}"
            )
        return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

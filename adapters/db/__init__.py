"""
데이터베이스 어댑터

SQLite WAL 모드 연결 관리, 스키마 초기화, 오류 변환.
"""

from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
    init_schema,
    translate_errors,
)

__all__ = [
    "SQLiteAdapter",
    "create_connection",
    "init_schema",
    "translate_errors",
]

"""
Mock 어댑터

테스트용 In-memory 저장소 제공.
Protocol 준수하여 SQLite 구현체와 교체 가능.
"""

from adapters.mock.memory_store import (
    MemoryClosingState,
    MemoryClosingStore,
    MemoryLedgerState,
    MemoryLedgerStore,
)

__all__ = [
    "MemoryLedgerStore",
    "MemoryLedgerState",
    "MemoryClosingStore",
    "MemoryClosingState",
]

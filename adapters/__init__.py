"""
어댑터 레이어

외부 자원(DB)과의 연동을 담당.
Protocol 기반 저장소 인터페이스로 In-memory 구현체 교체 가능.
"""

from adapters.interfaces import (
    IAccountLedgerStore,
    IClosingRecordStore,
)

__all__ = [
    # Interfaces
    "IAccountLedgerStore",
    "IClosingRecordStore",
]

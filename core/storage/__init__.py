"""
스토리지 모듈

마감 기록 저장소 제공
"""

from core.storage.closing_store import ClosingStore

__all__ = [
    "ClosingStore",
]

"""
일일 은행 마감 엔진

계좌별 잔액 이월, 날짜 순서 마감/재개, 재개 후 연쇄 재계산.

사용 예시:
```python
from core.closing import ClosingService
from core.ledger import LedgerStore
from core.storage import ClosingStore

ledger_store = LedgerStore(db)
closing_store = ClosingStore(db)
service = ClosingService(ledger_store, closing_store, settings.closing_policy)

# 마감
result = await service.perform_closing(date(2024, 6, 1), actor_id="user-1")

# 재개 (이후 마감 자동 재계산)
reopened = await service.reopen(date(2024, 6, 1))
```
"""

from core.closing.audit import ChainBreak, find_chain_breaks
from core.closing.calculator import BalanceCalculator, summarize_movements
from core.closing.errors import (
    CascadeRecalculationError,
    ClosingError,
    ClosingValidationError,
    DataAccessError,
    NotFoundError,
    PeriodLockedError,
)
from core.closing.models import (
    CascadeFailure,
    CascadeResult,
    ClosingBatchResult,
    ClosingComputation,
    ClosingRecord,
    ReopenResult,
)
from core.closing.orchestrator import ClosingOrchestrator
from core.closing.reopening import CascadeRecalculator, ReopeningService
from core.closing.service import ClosingService

__all__ = [
    # 핵심 클래스
    "ClosingService",
    "BalanceCalculator",
    "ClosingOrchestrator",
    "CascadeRecalculator",
    "ReopeningService",
    # 모델
    "ClosingRecord",
    "ClosingComputation",
    "ClosingBatchResult",
    "CascadeResult",
    "CascadeFailure",
    "ReopenResult",
    "ChainBreak",
    # 함수
    "summarize_movements",
    "find_chain_breaks",
    # 예외
    "ClosingError",
    "ClosingValidationError",
    "PeriodLockedError",
    "DataAccessError",
    "NotFoundError",
    "CascadeRecalculationError",
]

"""
계좌/입출금 원장

은행 계좌, 입출금, 계좌 간 이체 관리.
마감된 기간의 입출금은 변경 불가.

사용 예시:
```python
from core.ledger import LedgerStore, MovementService

ledger_store = LedgerStore(db)
service = MovementService(ledger_store, closing_store)

movement = await service.record_movement(
    "acc-1", date(2024, 6, 3), MovementKind.OUTFLOW, Decimal("100")
)
```
"""

from core.ledger.models import BankAccount, Movement
from core.ledger.service import MovementService
from core.ledger.store import LedgerStore

__all__ = [
    "BankAccount",
    "Movement",
    "LedgerStore",
    "MovementService",
]

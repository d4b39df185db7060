"""
마감 서비스

마감/재개 작업을 하나의 애플리케이션 락으로 직렬화하는 진입점.
두 사용자가 동시에 날짜 순서 검증을 통과하는 경합을 방지.
"""

import asyncio
import logging
from datetime import date
from typing import TYPE_CHECKING, Callable

from core.closing.audit import ChainBreak, find_chain_breaks
from core.closing.calculator import BalanceCalculator
from core.closing.models import ClosingBatchResult, ReopenResult
from core.closing.orchestrator import ClosingOrchestrator
from core.closing.reopening import CascadeRecalculator, ReopeningService
from core.config.loader import ClosingPolicy
from core.utils.timezone import today_brt

if TYPE_CHECKING:
    from adapters.interfaces import IAccountLedgerStore, IClosingRecordStore

logger = logging.getLogger(__name__)


class ClosingService:
    """마감 서비스

    Args:
        ledger_store: 계좌/입출금 저장소
        closing_store: 마감 기록 저장소
        policy: 마감 정책
        clock: 오늘 날짜 제공 함수
        lock: 공유 락 (None이면 인스턴스 전용 락 생성).
            Web에서는 요청마다 서비스가 생성되므로 프로세스 공용 락을 전달해야 함.

    사용 예시:
    ```python
    service = ClosingService(ledger_store, closing_store, policy)
    result = await service.perform_closing(date(2024, 6, 1), actor_id="user-1")
    await service.reopen(date(2024, 6, 1))
    ```
    """

    def __init__(
        self,
        ledger_store: "IAccountLedgerStore",
        closing_store: "IClosingRecordStore",
        policy: ClosingPolicy | None = None,
        clock: Callable[[], date] = today_brt,
        lock: asyncio.Lock | None = None,
    ):
        self.ledger_store = ledger_store
        self.closing_store = closing_store
        self.policy = policy or ClosingPolicy()
        self._lock = lock or asyncio.Lock()

        self.calculator = BalanceCalculator(ledger_store, closing_store)
        self.cascade = CascadeRecalculator(
            ledger_store, closing_store, self.calculator, self.policy
        )
        self.orchestrator = ClosingOrchestrator(
            ledger_store,
            closing_store,
            self.calculator,
            self.cascade,
            policy=self.policy,
            clock=clock,
        )
        self.reopening = ReopeningService(closing_store, self.cascade)

    async def perform_closing(
        self,
        target_date: date,
        actor_id: str | None,
    ) -> ClosingBatchResult:
        """일일 마감 수행 ("Realizar Fechamento")"""
        async with self._lock:
            return await self.orchestrator.perform_closing(target_date, actor_id)

    async def reopen(self, target_date: date) -> ReopenResult:
        """마감 재개 ("Reabrir Período")"""
        async with self._lock:
            return await self.reopening.reopen(target_date)

    async def audit(self) -> list[ChainBreak]:
        """전체 활성 계좌 잔액 연결 검증"""
        breaks: list[ChainBreak] = []

        async with self._lock:
            accounts = await self.ledger_store.list_active_accounts()
            for account in accounts:
                records = await self.closing_store.list_closed_records(
                    account_id=account.account_id
                )
                breaks.extend(find_chain_breaks(records, account.opening_balance))

        if breaks:
            logger.warning(f"잔액 연결 불일치 {len(breaks)}건 발견")

        return breaks

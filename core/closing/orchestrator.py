"""
일일 마감 실행기

전체 활성 계좌에 대해 하루 단위 마감을 수행.
검증은 모두 상태 변경 전에 수행 (fail-fast).
"""

import logging
from datetime import date, timedelta
from typing import TYPE_CHECKING, Callable, NoReturn

from core.closing.calculator import BalanceCalculator
from core.closing.errors import ClosingValidationError
from core.closing.models import ClosingBatchResult, ClosingRecord
from core.config.loader import ClosingPolicy
from core.types import ClosingViolation
from core.utils.timezone import today_brt

if TYPE_CHECKING:
    from adapters.interfaces import IAccountLedgerStore, IClosingRecordStore
    from core.closing.reopening import CascadeRecalculator

logger = logging.getLogger(__name__)


class ClosingOrchestrator:
    """일일 마감 실행기

    검증 순서:
    1. 미래 날짜 거부
    2. 허용 기간(오늘 - max_backdays_allowed) 이전 거부 (경계 포함 허용)
    3. 이후 날짜 마감 존재 시 거부 (재개된 날짜의 재마감은 예외)
    4. 같은 날짜 마감 존재 시 거부
    5. 활성 계좌 없음 거부

    Args:
        ledger_store: 계좌/입출금 저장소
        closing_store: 마감 기록 저장소
        calculator: 잔액 계산기
        cascade: 연쇄 재계산기 (재개된 날짜 재마감 시 사용)
        policy: 마감 정책
        clock: 오늘 날짜 제공 함수 (테스트에서 고정 가능)
    """

    def __init__(
        self,
        ledger_store: "IAccountLedgerStore",
        closing_store: "IClosingRecordStore",
        calculator: BalanceCalculator,
        cascade: "CascadeRecalculator",
        policy: ClosingPolicy | None = None,
        clock: Callable[[], date] = today_brt,
    ):
        self.ledger_store = ledger_store
        self.closing_store = closing_store
        self.calculator = calculator
        self.cascade = cascade
        self.policy = policy or ClosingPolicy()
        self.clock = clock

    async def perform_closing(
        self,
        target_date: date,
        actor_id: str | None,
    ) -> ClosingBatchResult:
        """일일 마감 수행

        Args:
            target_date: 마감 대상일
            actor_id: 마감 수행자 ID

        Returns:
            ClosingBatchResult

        Raises:
            ClosingValidationError: 검증 실패 (상태 변경 없음)
            DataAccessError: 저장소 실패 (일괄 저장은 원자적)
            CascadeRecalculationError: 재마감 후 연쇄 재계산 실패
        """
        is_reclose = await self._validate(target_date)

        accounts = await self.ledger_store.list_active_accounts()
        if not accounts:
            self._reject(
                ClosingViolation.NO_ACCOUNTS,
                "마감할 활성 계좌가 없습니다.",
                target_date,
            )

        # 당일 입출금만 집계 (전날을 미포함 시작일로 지정)
        window_start = target_date - timedelta(days=1)

        records: list[ClosingRecord] = []
        for i, account in enumerate(accounts, start=1):
            computation = await self.calculator.compute_closing(
                account, target_date, window_start=window_start
            )
            records.append(ClosingRecord.from_computation(computation, actor_id))
            logger.debug(f"마감 계산 {i}/{len(accounts)}: {account.account_id}")

        await self.closing_store.insert_closing_batch(records)

        logger.info(
            f"일일 마감 완료: {target_date.isoformat()} ({len(records)}개 계좌)",
            extra={"actor_id": actor_id, "reclose": is_reclose},
        )

        result = ClosingBatchResult(
            closing_date=target_date,
            accounts_closed=len(records),
            records=records,
        )

        if is_reclose:
            # 재개 후 다시 마감한 날짜: 이후 마감 잔액 연쇄 보정
            result.recalculation = await self.cascade.recalculate_after(target_date)

        return result

    async def _validate(self, target_date: date) -> bool:
        """마감 요청 검증

        Returns:
            재개된 날짜의 재마감 여부

        Raises:
            ClosingValidationError: 규칙 위반
        """
        today = self.clock()
        earliest = today - timedelta(days=self.policy.max_backdays_allowed)

        if target_date > today:
            self._reject(
                ClosingViolation.FUTURE_DATE,
                "미래 날짜는 마감할 수 없습니다.",
                target_date,
            )

        if target_date < earliest:
            self._reject(
                ClosingViolation.OUTSIDE_WINDOW,
                f"최근 {self.policy.max_backdays_allowed}일 이내의 날짜만 마감할 수 있습니다.",
                target_date,
            )

        is_reclose = False
        if await self.closing_store.exists_closed_after(target_date):
            is_reclose = await self.closing_store.exists_reopened_on(target_date)
            if not is_reclose:
                self._reject(
                    ClosingViolation.OUT_OF_ORDER,
                    "선택한 날짜보다 최근 마감이 이미 존재합니다. 날짜 순서대로 마감하세요.",
                    target_date,
                )

        if await self.closing_store.exists_closed_on(target_date):
            self._reject(
                ClosingViolation.DUPLICATE_DATE,
                "이미 마감된 날짜입니다.",
                target_date,
            )

        return is_reclose

    def _reject(
        self,
        violation: ClosingViolation,
        message: str,
        target_date: date,
    ) -> NoReturn:
        """검증 실패 로그 후 예외 발생"""
        logger.warning(
            f"마감 거부: {target_date.isoformat()} - {violation.value}",
        )
        raise ClosingValidationError(violation, message)

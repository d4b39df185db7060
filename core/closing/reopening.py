"""
마감 재개 및 연쇄 재계산

마감된 날짜를 재개(closed=False)한 뒤,
이후 마감일들의 잔액을 날짜 오름차순으로 다시 계산하여
전일 잔액 = 직전 마감 잔액 불변식을 복구.

재계산은 날짜 단위의 독립 단계로 수행되며 여러 날짜를 묶는 롤백은 없음.
이미 갱신된 날짜는 이후 실패와 무관하게 갱신 상태 유지.
"""

import logging
from datetime import date
from typing import TYPE_CHECKING

from core.closing.calculator import BalanceCalculator
from core.closing.errors import (
    CascadeRecalculationError,
    ClosingValidationError,
    DataAccessError,
)
from core.closing.models import CascadeFailure, CascadeResult, ReopenResult
from core.config.loader import ClosingPolicy
from core.types import ClosingViolation

if TYPE_CHECKING:
    from adapters.interfaces import IAccountLedgerStore, IClosingRecordStore

logger = logging.getLogger(__name__)


class CascadeRecalculator:
    """연쇄 재계산기

    기준일 이후의 모든 마감일을 오름차순으로 재계산.
    각 날짜의 기준 잔액은 직전 마감(방금 재계산된 날짜일 수 있음)의 마감 잔액.

    Args:
        ledger_store: 계좌/입출금 저장소
        closing_store: 마감 기록 저장소
        calculator: 잔액 계산기
        policy: 마감 정책 (stop_on_error 사용)
    """

    def __init__(
        self,
        ledger_store: "IAccountLedgerStore",
        closing_store: "IClosingRecordStore",
        calculator: BalanceCalculator,
        policy: ClosingPolicy | None = None,
    ):
        self.ledger_store = ledger_store
        self.closing_store = closing_store
        self.calculator = calculator
        self.policy = policy or ClosingPolicy()

    async def recalculate_after(self, start_after: date) -> CascadeResult:
        """기준일 이후 마감 연쇄 재계산

        Args:
            start_after: 기준일 (이 날짜 이후 마감이 대상)

        Returns:
            CascadeResult

        Raises:
            CascadeRecalculationError: stop_on_error=True이고 재계산 실패 시
        """
        result = CascadeResult(start_after=start_after)

        try:
            dates = await self.closing_store.list_closed_dates_after(start_after)
            if not dates:
                return result
            accounts = await self.ledger_store.list_active_accounts()
        except DataAccessError as e:
            # 대상 조회 실패는 첫 날짜부터 실패한 것으로 처리
            raise CascadeRecalculationError(
                failed_date=start_after,
                account_id=None,
                recalculated_dates=[],
                cause=e,
            ) from e

        logger.info(
            f"연쇄 재계산 시작: {start_after.isoformat()} 이후 {len(dates)}개 날짜",
        )

        # 날짜 오름차순 필수: 다음 날짜는 직전 날짜의 재계산 결과에 의존
        for closing_date in sorted(dates):
            date_failed = False

            for account in accounts:
                try:
                    computation = await self.calculator.compute_closing(
                        account, closing_date
                    )
                    updated = await self.closing_store.update_closing_record(
                        account.account_id,
                        closing_date,
                        {
                            "previous_balance": computation.previous_balance,
                            "total_in": computation.total_in,
                            "total_out": computation.total_out,
                            "final_balance": computation.final_balance,
                        },
                    )
                    result.records_updated += updated
                except DataAccessError as e:
                    date_failed = True
                    logger.warning(
                        f"연쇄 재계산 실패: {closing_date.isoformat()} / {account.account_id}: {e}",
                    )
                    if self.policy.stop_on_error:
                        raise CascadeRecalculationError(
                            failed_date=closing_date,
                            account_id=account.account_id,
                            recalculated_dates=list(result.recalculated_dates),
                            cause=e,
                        ) from e
                    result.failures.append(
                        CascadeFailure(
                            closing_date=closing_date,
                            account_id=account.account_id,
                            reason=str(e),
                        )
                    )

            if not date_failed:
                result.recalculated_dates.append(closing_date)

        logger.info(
            f"연쇄 재계산 완료: {len(result.recalculated_dates)}/{len(dates)}개 날짜",
            extra={
                "records_updated": result.records_updated,
                "failures": len(result.failures),
            },
        )

        return result


class ReopeningService:
    """마감 재개 서비스

    해당 날짜의 전체 계좌 마감을 재개하고 이후 마감을 연쇄 재계산.

    Args:
        closing_store: 마감 기록 저장소
        cascade: 연쇄 재계산기
    """

    def __init__(
        self,
        closing_store: "IClosingRecordStore",
        cascade: CascadeRecalculator,
    ):
        self.closing_store = closing_store
        self.cascade = cascade

    async def reopen(self, target_date: date) -> ReopenResult:
        """마감 재개

        Args:
            target_date: 재개할 마감일

        Returns:
            ReopenResult

        Raises:
            ClosingValidationError: 해당 날짜 마감이 없는 경우
            DataAccessError: 플래그 변경 실패
            CascadeRecalculationError: stop_on_error=True이고 재계산 실패 시
        """
        if not await self.closing_store.exists_closed_on(target_date):
            logger.warning(f"재개 거부: {target_date.isoformat()} - 마감 없음")
            raise ClosingValidationError(
                ClosingViolation.NOT_CLOSED,
                "해당 날짜에 재개할 마감이 없습니다.",
            )

        reopened = await self.closing_store.set_closed_flag(target_date, False)

        logger.info(f"마감 재개: {target_date.isoformat()} ({reopened}건)")

        recalculation = await self.cascade.recalculate_after(target_date)

        return ReopenResult(
            reopened_date=target_date,
            records_reopened=reopened,
            recalculation=recalculation,
        )

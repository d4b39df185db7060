"""
잔액 계산기

계좌 1건의 특정 날짜 기준 전일 잔액, 입출금 합계, 마감 잔액 계산.
부수효과 없음 (저장소 조회만 수행).
"""

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from core.closing.models import ClosingComputation
from core.constants import BEGINNING_OF_TIME
from core.ledger.models import BankAccount, Movement

if TYPE_CHECKING:
    from adapters.interfaces import IAccountLedgerStore, IClosingRecordStore

logger = logging.getLogger(__name__)


def summarize_movements(movements: Iterable[Movement]) -> tuple[Decimal, Decimal, int]:
    """입출금 합계 계산

    ENTRADA, TRANSFERENCIA_RECEBIDA → 입금
    SAIDA, TRANSFERENCIA_ENVIADA → 출금

    Args:
        movements: 입출금 목록

    Returns:
        (입금 합계, 출금 합계, 건수)
    """
    total_in = Decimal("0")
    total_out = Decimal("0")
    count = 0

    for movement in movements:
        if movement.kind.is_inflow:
            total_in += movement.amount
        else:
            total_out += movement.amount
        count += 1

    return total_in, total_out, count


class BalanceCalculator:
    """잔액 계산기

    가장 최근 마감(anchor)의 마감 잔액에서 출발하여
    이후 입출금을 누적해 대상일 마감 잔액을 계산.
    이전 마감이 없으면 계좌 기초 잔액에서 출발.

    Args:
        ledger_store: 계좌/입출금 저장소
        closing_store: 마감 기록 저장소

    사용 예시:
    ```python
    calculator = BalanceCalculator(ledger_store, closing_store)
    result = await calculator.compute_closing(account, date(2024, 6, 1))
    print(result.final_balance)
    ```
    """

    def __init__(
        self,
        ledger_store: "IAccountLedgerStore",
        closing_store: "IClosingRecordStore",
    ):
        self.ledger_store = ledger_store
        self.closing_store = closing_store

    async def compute_closing(
        self,
        account: BankAccount,
        target_date: date,
        window_start: date | None = None,
    ) -> ClosingComputation:
        """대상일 마감 값 계산

        Args:
            account: 계좌 (기초 잔액 포함)
            target_date: 마감 대상일
            window_start: 입출금 조회 시작일 (미포함).
                None이면 기준 마감일부터 조회 (연쇄 재계산).
                일일 마감은 대상일 전날을 지정하여 당일 입출금만 집계.

        Returns:
            ClosingComputation

        Raises:
            DataAccessError: 저장소 조회 실패
        """
        anchor = await self.closing_store.find_latest_closed_before(
            account.account_id, target_date
        )

        if anchor is not None:
            previous_balance = anchor.final_balance
            anchor_date = anchor.closing_date
        else:
            previous_balance = account.opening_balance
            anchor_date = BEGINNING_OF_TIME

        date_from = window_start if window_start is not None else anchor_date

        movements = await self.ledger_store.find_movements(
            account.account_id, date_from, target_date
        )
        total_in, total_out, count = summarize_movements(movements)

        computation = ClosingComputation(
            account_id=account.account_id,
            closing_date=target_date,
            previous_balance=previous_balance,
            total_in=total_in,
            total_out=total_out,
            final_balance=previous_balance + total_in - total_out,
            anchor_date=anchor.closing_date if anchor is not None else None,
            movement_count=count,
        )

        logger.debug(
            f"Closing computed: {account.account_id} {target_date}",
            extra={
                "previous_balance": str(computation.previous_balance),
                "total_in": str(total_in),
                "total_out": str(total_out),
                "final_balance": str(computation.final_balance),
                "movement_count": count,
            },
        )

        return computation

    async def balance_as_of(self, account: BankAccount, as_of: date) -> Decimal:
        """특정 날짜 종료 시점 잔액 (거래내역 조회용)"""
        computation = await self.compute_closing(account, as_of)
        return computation.final_balance

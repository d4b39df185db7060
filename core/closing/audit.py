"""
마감 잔액 연결 검증

계좌별 마감 기록이 다음 조건을 만족하는지 확인:
- 첫 마감의 전일 잔액 = 계좌 기초 잔액
- 각 마감의 전일 잔액 = 직전 마감의 마감 잔액
- 마감 잔액 = 전일 잔액 + 입금 - 출금
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from core.closing.models import ClosingRecord


@dataclass(frozen=True)
class ChainBreak:
    """잔액 연결 불일치 정보"""

    account_id: str
    closing_date: date
    break_kind: str  # previous_balance, arithmetic
    expected: Decimal
    actual: Decimal

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "account_id": self.account_id,
            "closing_date": self.closing_date.isoformat(),
            "break_kind": self.break_kind,
            "expected": str(self.expected),
            "actual": str(self.actual),
        }


def find_chain_breaks(
    records: Iterable[ClosingRecord],
    opening_balance: Decimal,
) -> list[ChainBreak]:
    """계좌 1건의 마감 기록 연결 검증

    재개된 기록(closed=False)은 검증 대상에서 제외.

    Args:
        records: 한 계좌의 마감 기록
        opening_balance: 계좌 기초 잔액

    Returns:
        불일치 목록 (정상이면 빈 목록)
    """
    breaks: list[ChainBreak] = []
    expected_previous = opening_balance

    closed = sorted(
        (r for r in records if r.closed),
        key=lambda r: r.closing_date,
    )

    for record in closed:
        if record.previous_balance != expected_previous:
            breaks.append(
                ChainBreak(
                    account_id=record.account_id,
                    closing_date=record.closing_date,
                    break_kind="previous_balance",
                    expected=expected_previous,
                    actual=record.previous_balance,
                )
            )

        computed = record.previous_balance + record.total_in - record.total_out
        if record.final_balance != computed:
            breaks.append(
                ChainBreak(
                    account_id=record.account_id,
                    closing_date=record.closing_date,
                    break_kind="arithmetic",
                    expected=computed,
                    actual=record.final_balance,
                )
            )

        expected_previous = record.final_balance

    return breaks

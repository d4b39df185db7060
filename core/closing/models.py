"""
마감 모델

일일 마감 기록, 계산 결과, 배치/재개 결과 데이터 구조.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class ClosingComputation:
    """계좌 1건의 마감 계산 결과

    final_balance = previous_balance + total_in - total_out
    """

    account_id: str
    closing_date: date
    previous_balance: Decimal
    total_in: Decimal
    total_out: Decimal
    final_balance: Decimal
    anchor_date: date | None = None  # 기준 마감일 (없으면 기초 잔액 사용)
    movement_count: int = 0


@dataclass
class ClosingRecord:
    """일일 마감 기록

    Attributes:
        account_id: 계좌 ID
        closing_date: 마감일
        previous_balance: 전일 잔액
        total_in: 입금 합계
        total_out: 출금 합계
        final_balance: 마감 잔액
        closed: 마감 여부 (재개 시 False, 행은 유지)
        closed_by: 마감 수행자
        notes: 비고
        closing_id: 기록 ID (저장 후 할당)
    """

    account_id: str
    closing_date: date
    previous_balance: Decimal
    total_in: Decimal
    total_out: Decimal
    final_balance: Decimal
    closed: bool = True
    closed_by: str | None = None
    notes: str | None = None
    closing_id: int | None = None

    @classmethod
    def from_computation(
        cls,
        computation: ClosingComputation,
        closed_by: str | None,
    ) -> "ClosingRecord":
        """계산 결과에서 마감 기록 생성"""
        return cls(
            account_id=computation.account_id,
            closing_date=computation.closing_date,
            previous_balance=computation.previous_balance,
            total_in=computation.total_in,
            total_out=computation.total_out,
            final_balance=computation.final_balance,
            closed=True,
            closed_by=closed_by,
        )

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ClosingRecord":
        """DB 행에서 생성"""
        return cls(
            closing_id=row.get("closing_id"),
            account_id=row["account_id"],
            closing_date=date.fromisoformat(row["closing_date"]),
            previous_balance=Decimal(str(row["previous_balance"])),
            total_in=Decimal(str(row["total_in"])),
            total_out=Decimal(str(row["total_out"])),
            final_balance=Decimal(str(row["final_balance"])),
            closed=bool(row["closed"]),
            closed_by=row.get("closed_by"),
            notes=row.get("notes"),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "closing_id": self.closing_id,
            "account_id": self.account_id,
            "closing_date": self.closing_date.isoformat(),
            "previous_balance": str(self.previous_balance),
            "total_in": str(self.total_in),
            "total_out": str(self.total_out),
            "final_balance": str(self.final_balance),
            "closed": self.closed,
            "closed_by": self.closed_by,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class CascadeFailure:
    """연쇄 재계산 실패 항목"""

    closing_date: date
    account_id: str | None
    reason: str


@dataclass
class CascadeResult:
    """연쇄 재계산 결과

    Attributes:
        start_after: 재계산 기준일 (이 날짜 이후가 대상)
        recalculated_dates: 재계산 완료된 날짜 (오름차순)
        records_updated: 갱신된 마감 기록 수
        failures: 실패 항목 (stop_on_error=False일 때 누적)
    """

    start_after: date
    recalculated_dates: list[date] = field(default_factory=list)
    records_updated: int = 0
    failures: list[CascadeFailure] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """모든 날짜가 실패 없이 처리되었는지"""
        return not self.failures

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "start_after": self.start_after.isoformat(),
            "recalculated_dates": [d.isoformat() for d in self.recalculated_dates],
            "records_updated": self.records_updated,
            "failures": [
                {
                    "closing_date": f.closing_date.isoformat(),
                    "account_id": f.account_id,
                    "reason": f.reason,
                }
                for f in self.failures
            ],
            "is_complete": self.is_complete,
        }


@dataclass
class ClosingBatchResult:
    """일일 마감 실행 결과"""

    closing_date: date
    accounts_closed: int
    records: list[ClosingRecord] = field(default_factory=list)
    recalculation: CascadeResult | None = None  # 재개된 날짜를 다시 마감한 경우

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "closing_date": self.closing_date.isoformat(),
            "accounts_closed": self.accounts_closed,
            "records": [r.to_dict() for r in self.records],
            "recalculation": self.recalculation.to_dict() if self.recalculation else None,
        }


@dataclass
class ReopenResult:
    """마감 재개 결과"""

    reopened_date: date
    records_reopened: int
    recalculation: CascadeResult

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "reopened_date": self.reopened_date.isoformat(),
            "records_reopened": self.records_reopened,
            "recalculation": self.recalculation.to_dict(),
        }

"""
계좌/입출금 모델

은행 계좌와 입출금 내역 데이터 구조.
금액은 반드시 Decimal 타입 사용.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from core.types import MovementKind


@dataclass(frozen=True)
class BankAccount:
    """은행 계좌

    Attributes:
        account_id: 계좌 ID
        company_id: 소유 회사 ID
        name: 표시 이름 (은행명 + 계좌번호)
        opening_balance: 기초 잔액
        account_type: 계좌 유형 (CORRENTE, POUPANCA, APLICACAO 등)
        is_active: 활성 여부
    """

    account_id: str
    company_id: str
    name: str
    opening_balance: Decimal
    account_type: str = "CORRENTE"
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "BankAccount":
        """DB 행에서 생성"""
        return cls(
            account_id=row["account_id"],
            company_id=row["company_id"],
            name=row["name"],
            opening_balance=Decimal(str(row["opening_balance"])),
            account_type=row.get("account_type") or "CORRENTE",
            is_active=bool(row.get("is_active", 1)),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "account_id": self.account_id,
            "company_id": self.company_id,
            "name": self.name,
            "opening_balance": str(self.opening_balance),
            "account_type": self.account_type,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class Movement:
    """입출금 내역 (이체의 한 쪽 구간 포함)

    Attributes:
        movement_id: 입출금 ID
        account_id: 계좌 ID
        movement_date: 거래일
        kind: 입출금 유형
        amount: 금액 (0 이상)
        description: 적요
        document: 증빙 번호
        transfer_id: 이체 ID (이체 구간만)
    """

    movement_id: str
    account_id: str
    movement_date: date
    kind: MovementKind
    amount: Decimal
    description: str | None = None
    document: str | None = None
    transfer_id: str | None = None

    @property
    def signed_amount(self) -> Decimal:
        """잔액 기준 부호 적용 금액"""
        return self.amount if self.kind.is_inflow else -self.amount

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Movement":
        """DB 행에서 생성"""
        return cls(
            movement_id=row["movement_id"],
            account_id=row["account_id"],
            movement_date=date.fromisoformat(row["movement_date"]),
            kind=MovementKind(row["kind"]),
            amount=Decimal(str(row["amount"])),
            description=row.get("description"),
            document=row.get("document"),
            transfer_id=row.get("transfer_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환"""
        return {
            "movement_id": self.movement_id,
            "account_id": self.account_id,
            "movement_date": self.movement_date.isoformat(),
            "kind": self.kind.value,
            "amount": str(self.amount),
            "description": self.description,
            "document": self.document,
            "transfer_id": self.transfer_id,
        }

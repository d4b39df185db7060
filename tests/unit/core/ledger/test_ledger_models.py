"""
계좌/입출금 모델 테스트
"""

from datetime import date
from decimal import Decimal

import pytest

from core.ledger.models import BankAccount, Movement
from core.types import MovementKind


class TestBankAccount:
    """BankAccount 테스트"""

    def test_from_row(self) -> None:
        """DB 행에서 생성 (금액 TEXT → Decimal)"""
        account = BankAccount.from_row({
            "account_id": "acc-a",
            "company_id": "c1",
            "name": "Itaú 0001",
            "account_type": "POUPANCA",
            "opening_balance": "1000.50",
            "is_active": 0,
        })

        assert account.opening_balance == Decimal("1000.50")
        assert account.account_type == "POUPANCA"
        assert account.is_active is False

    def test_to_dict_keeps_precision(self) -> None:
        """금액은 문자열로 직렬화"""
        account = BankAccount("acc-a", "c1", "A", Decimal("0.10"))

        assert account.to_dict()["opening_balance"] == "0.10"
        assert account.to_dict()["account_type"] == "CORRENTE"

    def test_frozen(self) -> None:
        """불변성 확인"""
        account = BankAccount("acc-a", "c1", "A", Decimal("0"))

        with pytest.raises(AttributeError):
            account.name = "B"  # type: ignore


class TestMovement:
    """Movement 테스트"""

    def test_signed_amount(self) -> None:
        """입금은 +, 출금은 -"""
        d = date(2024, 6, 1)

        assert Movement("m1", "a", d, MovementKind.INFLOW, Decimal("5")).signed_amount == Decimal("5")
        assert Movement("m2", "a", d, MovementKind.TRANSFER_OUT, Decimal("5")).signed_amount == Decimal("-5")

    def test_from_row(self) -> None:
        """DB 행에서 생성"""
        movement = Movement.from_row({
            "movement_id": "m1",
            "account_id": "acc-a",
            "movement_date": "2024-06-01",
            "kind": "TRANSFERENCIA_RECEBIDA",
            "amount": "50",
            "transfer_id": "t1",
        })

        assert movement.movement_date == date(2024, 6, 1)
        assert movement.kind is MovementKind.TRANSFER_IN
        assert movement.transfer_id == "t1"
        assert movement.description is None

    def test_to_dict(self) -> None:
        """딕셔너리 변환"""
        movement = Movement("m1", "acc-a", date(2024, 6, 1), MovementKind.OUTFLOW, Decimal("12.30"))

        data = movement.to_dict()

        assert data["movement_date"] == "2024-06-01"
        assert data["kind"] == "SAIDA"
        assert data["amount"] == "12.30"

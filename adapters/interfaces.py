"""
저장소 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
마감 엔진은 이 Protocol만 의존하며, SQLite/In-memory 구현체가 이를 준수.

모든 메서드는 저장소 오류를 DataAccessError로 전달해야 함.
금액은 반드시 Decimal 타입 사용.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from core.closing.models import ClosingRecord
from core.ledger.models import BankAccount, Movement


@runtime_checkable
class IAccountLedgerStore(Protocol):
    """계좌/입출금 저장소 인터페이스 (읽기 전용 측면)"""

    async def list_active_accounts(self) -> list[BankAccount]:
        """활성 계좌 목록 조회"""
        ...

    async def get_account(self, account_id: str) -> BankAccount | None:
        """계좌 단건 조회"""
        ...

    async def get_opening_balance(self, account_id: str) -> Decimal:
        """계좌 기초 잔액 조회

        Raises:
            DataAccessError: 계좌가 없거나 조회 실패
        """
        ...

    async def find_movements(
        self,
        account_id: str,
        date_from_exclusive: date,
        date_to_inclusive: date,
    ) -> list[Movement]:
        """기간 내 입출금 조회

        Args:
            account_id: 계좌 ID
            date_from_exclusive: 시작일 (미포함)
            date_to_inclusive: 종료일 (포함)

        Returns:
            거래일 오름차순 입출금 목록
        """
        ...


@runtime_checkable
class IClosingRecordStore(Protocol):
    """일일 마감 기록 저장소 인터페이스"""

    async def find_latest_closed_before(
        self,
        account_id: str,
        closing_date: date,
    ) -> ClosingRecord | None:
        """해당 날짜 이전(미포함)의 가장 최근 마감 기록"""
        ...

    async def get_latest_closed_date(self, account_id: str) -> date | None:
        """계좌의 가장 최근 마감일"""
        ...

    async def exists_closed_after(self, closing_date: date) -> bool:
        """해당 날짜 이후(미포함) 마감 기록 존재 여부 (전체 계좌)"""
        ...

    async def exists_closed_on(self, closing_date: date) -> bool:
        """해당 날짜 마감 기록 존재 여부 (전체 계좌)"""
        ...

    async def exists_reopened_on(self, closing_date: date) -> bool:
        """해당 날짜에 재개된(closed=False) 기록 존재 여부"""
        ...

    async def list_closed_dates_after(self, closing_date: date) -> list[date]:
        """해당 날짜 이후 마감일 목록 (중복 제거, 오름차순)"""
        ...

    async def list_closed_records(
        self,
        account_id: str | None = None,
        closing_date: date | None = None,
    ) -> list[ClosingRecord]:
        """마감 기록 조회 (계좌, 마감일 오름차순)"""
        ...

    async def insert_closing_batch(self, records: list[ClosingRecord]) -> int:
        """마감 기록 일괄 저장 (원자적)

        Returns:
            저장된 기록 수
        """
        ...

    async def update_closing_record(
        self,
        account_id: str,
        closing_date: date,
        fields: dict[str, Any],
    ) -> int:
        """마감된 기록의 금액 필드 갱신

        Returns:
            갱신된 행 수 (해당 마감이 없으면 0)
        """
        ...

    async def set_closed_flag(self, closing_date: date, closed: bool) -> int:
        """해당 날짜 전체 계좌의 마감 플래그 변경

        Returns:
            변경된 행 수
        """
        ...

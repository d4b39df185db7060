"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 정밀도 유지를 위해 문자열로 반환.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    environment: str = Field(..., description="실행 환경 (production/development)")
    version: str = Field(..., description="API 버전")


class AccountResponse(BaseModel):
    """계좌 응답"""

    account_id: str = Field(..., description="계좌 ID")
    company_id: str = Field(..., description="회사 ID")
    name: str = Field(..., description="표시 이름")
    account_type: str = Field(..., description="계좌 유형")
    opening_balance: str = Field(..., description="기초 잔액")
    is_active: bool = Field(..., description="활성 여부")


class MovementResponse(BaseModel):
    """입출금 응답"""

    movement_id: str = Field(..., description="입출금 ID")
    account_id: str = Field(..., description="계좌 ID")
    movement_date: str = Field(..., description="거래일")
    kind: str = Field(..., description="입출금 유형")
    amount: str = Field(..., description="금액")
    description: str | None = Field(default=None, description="적요")
    document: str | None = Field(default=None, description="증빙 번호")
    transfer_id: str | None = Field(default=None, description="이체 ID")


class TransferResponse(BaseModel):
    """이체 응답"""

    transfer_id: str = Field(..., description="이체 ID")
    legs: list[MovementResponse] = Field(default_factory=list, description="이체 구간")


class ClosingRecordResponse(BaseModel):
    """마감 기록 응답"""

    closing_id: int | None = Field(default=None, description="기록 ID")
    account_id: str = Field(..., description="계좌 ID")
    closing_date: str = Field(..., description="마감일")
    previous_balance: str = Field(..., description="전일 잔액")
    total_in: str = Field(..., description="입금 합계")
    total_out: str = Field(..., description="출금 합계")
    final_balance: str = Field(..., description="마감 잔액")
    closed_by: str | None = Field(default=None, description="마감 수행자")
    notes: str | None = Field(default=None, description="비고")
    account_name: str | None = Field(default=None, description="계좌 이름")
    company_id: str | None = Field(default=None, description="회사 ID")
    account_type: str | None = Field(default=None, description="계좌 유형")


class ClosingListResponse(BaseModel):
    """마감 목록 응답"""

    closing_date: str | None = Field(default=None, description="조회 마감일")
    items: list[ClosingRecordResponse] = Field(default_factory=list)
    total: int = Field(..., description="항목 수")


class CascadeFailureResponse(BaseModel):
    """연쇄 재계산 실패 항목"""

    closing_date: str
    account_id: str | None = None
    reason: str


class CascadeResponse(BaseModel):
    """연쇄 재계산 결과"""

    start_after: str = Field(..., description="재계산 기준일")
    recalculated_dates: list[str] = Field(default_factory=list, description="재계산된 날짜")
    records_updated: int = Field(..., description="갱신된 기록 수")
    failures: list[CascadeFailureResponse] = Field(default_factory=list)
    is_complete: bool = Field(..., description="실패 없이 완료 여부")


class ClosingBatchResponse(BaseModel):
    """일일 마감 결과"""

    closing_date: str = Field(..., description="마감일")
    accounts_closed: int = Field(..., description="마감된 계좌 수")
    records: list[ClosingRecordResponse] = Field(default_factory=list)
    recalculation: CascadeResponse | None = Field(
        default=None, description="재개된 날짜 재마감 시 연쇄 재계산 결과"
    )


class ReopenResponse(BaseModel):
    """마감 재개 결과"""

    reopened_date: str = Field(..., description="재개된 마감일")
    records_reopened: int = Field(..., description="재개된 기록 수")
    recalculation: CascadeResponse


class ChainBreakResponse(BaseModel):
    """잔액 연결 불일치 항목"""

    account_id: str
    closing_date: str
    break_kind: str
    expected: str
    actual: str


class AuditResponse(BaseModel):
    """잔액 연결 검증 결과"""

    is_consistent: bool = Field(..., description="불일치 없음 여부")
    breaks: list[ChainBreakResponse] = Field(default_factory=list)
    total: int = Field(..., description="불일치 수")


class StatementEntryResponse(MovementResponse):
    """거래내역 항목 (누적 잔액 포함)"""

    balance: str = Field(..., description="거래 후 잔액")


class StatementResponse(BaseModel):
    """계좌 거래내역 (extrato)"""

    account_id: str
    account_name: str
    date_from: str
    date_to: str
    opening_balance: str = Field(..., description="시작일 전일 잔액")
    closing_balance: str = Field(..., description="종료일 잔액")
    total_in: str
    total_out: str
    entries: list[StatementEntryResponse] = Field(default_factory=list)

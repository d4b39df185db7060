"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증
"""

from datetime import date

from pydantic import BaseModel, Field

from core.types import MovementKind


class AccountCreateRequest(BaseModel):
    """계좌 생성 요청"""

    account_id: str = Field(..., min_length=1, description="계좌 ID")
    company_id: str = Field(..., min_length=1, description="회사 ID")
    name: str = Field(..., min_length=1, description="표시 이름 (은행명 + 계좌번호)")
    account_type: str = Field(default="CORRENTE", description="계좌 유형")
    opening_balance: str = Field(default="0", description="기초 잔액")


class MovementCreateRequest(BaseModel):
    """입출금 등록 요청"""

    account_id: str = Field(..., description="계좌 ID")
    movement_date: date = Field(..., description="거래일 (YYYY-MM-DD)")
    kind: MovementKind = Field(..., description="입출금 유형 (ENTRADA/SAIDA)")
    amount: str = Field(..., description="금액")
    description: str | None = Field(default=None, description="적요")
    document: str | None = Field(default=None, description="증빙 번호")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "account_id": "itau-0001",
                    "movement_date": "2024-06-03",
                    "kind": "SAIDA",
                    "amount": "100.00",
                    "description": "Tarifa bancária",
                },
            ]
        }
    }


class MovementUpdateRequest(BaseModel):
    """입출금 수정 요청 (지정한 필드만 변경)"""

    movement_date: date | None = Field(default=None, description="거래일")
    kind: MovementKind | None = Field(default=None, description="입출금 유형")
    amount: str | None = Field(default=None, description="금액")
    description: str | None = Field(default=None, description="적요")
    document: str | None = Field(default=None, description="증빙 번호")


class TransferCreateRequest(BaseModel):
    """계좌 간 이체 요청"""

    source_account_id: str = Field(..., description="출금 계좌 ID")
    destination_account_id: str = Field(..., description="입금 계좌 ID")
    transfer_date: date = Field(..., description="이체일")
    amount: str = Field(..., description="금액")
    description: str | None = Field(default=None, description="적요")


class ClosingCreateRequest(BaseModel):
    """일일 마감 요청"""

    closing_date: date = Field(..., description="마감일")
    actor_id: str | None = Field(default=None, description="마감 수행자 ID")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"closing_date": "2024-06-01", "actor_id": "user-1"},
            ]
        }
    }


class ClosingReopenRequest(BaseModel):
    """마감 재개 요청"""

    closing_date: date = Field(..., description="재개할 마감일")

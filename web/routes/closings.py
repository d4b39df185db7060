"""
마감 라우트

일일 마감 조회/실행/재개, 잔액 연결 검증 API
"""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.closing.errors import ClosingError
from core.closing.service import ClosingService
from web.dependencies import get_closing_service, get_db
from web.errors import to_http_exception
from web.models.requests import ClosingCreateRequest, ClosingReopenRequest
from web.models.responses import (
    AuditResponse,
    ClosingBatchResponse,
    ClosingListResponse,
    ReopenResponse,
)
from web.services.closing_query_service import ClosingQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/closings", tags=["Closings"])


@router.get("", response_model=ClosingListResponse)
async def list_closings(
    closing_date: date | None = Query(default=None, description="마감일 (기본: 최근 마감일)"),
    company_id: str | None = Query(default=None, description="회사 필터"),
    account_type: str | None = Query(default=None, description="계좌 유형 필터"),
    db: SQLiteAdapter = Depends(get_db),
) -> dict[str, Any]:
    """마감 목록 조회

    마감 잔액이 0인 계좌는 제외, 회사/계좌명 순 정렬.
    """
    service = ClosingQueryService(db)

    try:
        return await service.list_closings(
            closing_date=closing_date,
            company_id=company_id,
            account_type=account_type,
        )
    except ClosingError as e:
        raise to_http_exception(e)


@router.post("", response_model=ClosingBatchResponse, status_code=201)
async def perform_closing(
    request: ClosingCreateRequest,
    service: ClosingService = Depends(get_closing_service),
) -> dict[str, Any]:
    """일일 마감 실행

    전체 활성 계좌를 해당 날짜로 마감.
    재개된 날짜를 다시 마감하면 이후 마감이 연쇄 재계산됨.
    """
    try:
        result = await service.perform_closing(request.closing_date, request.actor_id)
    except ClosingError as e:
        raise to_http_exception(e)

    return result.to_dict()


@router.post("/reopen", response_model=ReopenResponse)
async def reopen_closing(
    request: ClosingReopenRequest,
    service: ClosingService = Depends(get_closing_service),
) -> dict[str, Any]:
    """마감 재개

    해당 날짜 마감을 재개하고 이후 마감일을 연쇄 재계산.
    """
    try:
        result = await service.reopen(request.closing_date)
    except ClosingError as e:
        raise to_http_exception(e)

    if not result.recalculation.is_complete:
        logger.warning(
            f"재개 후 연쇄 재계산 일부 실패: {request.closing_date.isoformat()}",
            extra={"failures": len(result.recalculation.failures)},
        )

    return result.to_dict()


@router.get("/audit", response_model=AuditResponse)
async def audit_closings(
    service: ClosingService = Depends(get_closing_service),
) -> dict[str, Any]:
    """잔액 연결 검증

    각 계좌의 전일 잔액 = 직전 마감 잔액, 마감 잔액 = 전일 + 입금 - 출금 확인.
    """
    try:
        breaks = await service.audit()
    except ClosingError as e:
        raise to_http_exception(e)

    return {
        "is_consistent": not breaks,
        "breaks": [b.to_dict() for b in breaks],
        "total": len(breaks),
    }

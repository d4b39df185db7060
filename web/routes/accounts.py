"""
계좌 라우트

계좌 목록/생성, 계좌 거래내역(extrato) API
"""

from datetime import date, timedelta
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.closing.errors import ClosingError
from core.ledger.models import BankAccount
from core.ledger.store import LedgerStore
from core.utils.timezone import today_brt
from web.dependencies import get_db, get_db_write
from web.errors import parse_amount, to_http_exception
from web.models.requests import AccountCreateRequest
from web.models.responses import AccountResponse, StatementResponse
from web.services.closing_query_service import ClosingQueryService

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    company_id: str | None = Query(default=None, description="회사 필터"),
    account_type: str | None = Query(default=None, description="계좌 유형 필터"),
    include_inactive: bool = Query(default=False, description="비활성 계좌 포함"),
    db: SQLiteAdapter = Depends(get_db),
) -> list[dict[str, Any]]:
    """계좌 목록 조회"""
    store = LedgerStore(db)

    try:
        accounts = await store.list_accounts(
            company_id=company_id,
            account_type=account_type,
            active_only=not include_inactive,
        )
    except ClosingError as e:
        raise to_http_exception(e)

    return [a.to_dict() for a in accounts]


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: AccountCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> dict[str, Any]:
    """계좌 생성"""
    store = LedgerStore(db)

    if await store.get_account(request.account_id) is not None:
        raise HTTPException(
            status_code=409,
            detail=f"Account already exists: {request.account_id}",
        )

    account = BankAccount(
        account_id=request.account_id,
        company_id=request.company_id,
        name=request.name,
        account_type=request.account_type,
        opening_balance=parse_amount(request.opening_balance, "opening_balance"),
    )

    try:
        created = await store.create_account(account)
    except ClosingError as e:
        raise to_http_exception(e)

    return created.to_dict()


@router.get("/{account_id}/statement", response_model=StatementResponse)
async def get_statement(
    account_id: str = Path(..., description="계좌 ID"),
    date_from: date | None = Query(default=None, description="시작일 (기본: 종료일 30일 전)"),
    date_to: date | None = Query(default=None, description="종료일 (기본: 오늘)"),
    db: SQLiteAdapter = Depends(get_db),
) -> dict[str, Any]:
    """계좌 거래내역 조회

    시작일 전일 잔액 + 기간 내 입출금 + 거래별 누적 잔액.
    """
    end = date_to or today_brt()
    start = date_from or (end - timedelta(days=30))

    service = ClosingQueryService(db)

    try:
        return await service.get_statement(account_id, start, end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ClosingError as e:
        raise to_http_exception(e)

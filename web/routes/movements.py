"""
입출금 라우트

입출금 조회/등록/수정/삭제 API.
마감된 기간의 변경은 409 반환.
"""

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.closing.errors import ClosingError
from core.ledger.service import MovementService
from core.ledger.store import LedgerStore
from web.dependencies import get_db, get_movement_service
from web.errors import parse_amount, to_http_exception
from web.models.requests import MovementCreateRequest, MovementUpdateRequest
from web.models.responses import MovementResponse

router = APIRouter(prefix="/api/movements", tags=["Movements"])


@router.get("", response_model=list[MovementResponse])
async def list_movements(
    account_id: str | None = Query(default=None, description="계좌 필터"),
    date_from: date | None = Query(default=None, description="시작일 (포함)"),
    date_to: date | None = Query(default=None, description="종료일 (포함)"),
    limit: int = Query(default=500, ge=1, le=5000, description="최대 건수"),
    db: SQLiteAdapter = Depends(get_db),
) -> list[dict[str, Any]]:
    """입출금 목록 조회 (최신순)"""
    store = LedgerStore(db)

    try:
        movements = await store.list_movements(
            account_id=account_id,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
        )
    except ClosingError as e:
        raise to_http_exception(e)

    return [m.to_dict() for m in movements]


@router.get("/{movement_id}", response_model=MovementResponse)
async def get_movement(
    movement_id: str = Path(..., description="입출금 ID"),
    db: SQLiteAdapter = Depends(get_db),
) -> dict[str, Any]:
    """입출금 단건 조회"""
    store = LedgerStore(db)

    movement = await store.get_movement(movement_id)
    if movement is None:
        raise HTTPException(status_code=404, detail=f"Movement not found: {movement_id}")

    return movement.to_dict()


@router.post("", response_model=MovementResponse, status_code=201)
async def create_movement(
    request: MovementCreateRequest,
    service: MovementService = Depends(get_movement_service),
) -> dict[str, Any]:
    """입출금 등록 (ENTRADA/SAIDA)"""
    amount = parse_amount(request.amount)

    try:
        movement = await service.record_movement(
            account_id=request.account_id,
            movement_date=request.movement_date,
            kind=request.kind,
            amount=amount,
            description=request.description,
            document=request.document,
        )
    except ClosingError as e:
        raise to_http_exception(e)

    return movement.to_dict()


@router.put("/{movement_id}", response_model=MovementResponse)
async def update_movement(
    request: MovementUpdateRequest,
    movement_id: str = Path(..., description="입출금 ID"),
    service: MovementService = Depends(get_movement_service),
) -> dict[str, Any]:
    """입출금 수정"""
    amount = parse_amount(request.amount) if request.amount is not None else None

    try:
        movement = await service.update_movement(
            movement_id,
            movement_date=request.movement_date,
            kind=request.kind,
            amount=amount,
            description=request.description,
            document=request.document,
        )
    except ClosingError as e:
        raise to_http_exception(e)

    return movement.to_dict()


@router.delete("/{movement_id}", status_code=204)
async def delete_movement(
    movement_id: str = Path(..., description="입출금 ID"),
    service: MovementService = Depends(get_movement_service),
) -> None:
    """입출금 삭제"""
    try:
        await service.delete_movement(movement_id)
    except ClosingError as e:
        raise to_http_exception(e)

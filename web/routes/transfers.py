"""
이체 라우트

계좌 간 이체 등록/조회/삭제 API
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.closing.errors import ClosingError
from core.ledger.service import MovementService
from core.ledger.store import LedgerStore
from web.dependencies import get_db, get_movement_service
from web.errors import parse_amount, to_http_exception
from web.models.requests import TransferCreateRequest
from web.models.responses import TransferResponse

router = APIRouter(prefix="/api/transfers", tags=["Transfers"])


@router.post("", response_model=TransferResponse, status_code=201)
async def create_transfer(
    request: TransferCreateRequest,
    service: MovementService = Depends(get_movement_service),
) -> dict[str, Any]:
    """이체 등록

    출금 계좌에 TRANSFERENCIA_ENVIADA, 입금 계좌에 TRANSFERENCIA_RECEBIDA 생성.
    """
    amount = parse_amount(request.amount)

    try:
        transfer_id = await service.record_transfer(
            source_account_id=request.source_account_id,
            destination_account_id=request.destination_account_id,
            transfer_date=request.transfer_date,
            amount=amount,
            description=request.description,
        )
        legs = await service.ledger_store.get_transfer_legs(transfer_id)
    except ClosingError as e:
        raise to_http_exception(e)

    return {"transfer_id": transfer_id, "legs": [leg.to_dict() for leg in legs]}


@router.get("/{transfer_id}", response_model=TransferResponse)
async def get_transfer(
    transfer_id: str = Path(..., description="이체 ID"),
    db: SQLiteAdapter = Depends(get_db),
) -> dict[str, Any]:
    """이체 조회"""
    legs = await LedgerStore(db).get_transfer_legs(transfer_id)
    if not legs:
        raise HTTPException(status_code=404, detail=f"Transfer not found: {transfer_id}")

    return {"transfer_id": transfer_id, "legs": [leg.to_dict() for leg in legs]}


@router.delete("/{transfer_id}", status_code=204)
async def delete_transfer(
    transfer_id: str = Path(..., description="이체 ID"),
    service: MovementService = Depends(get_movement_service),
) -> None:
    """이체 삭제 (두 구간 모두)"""
    try:
        await service.delete_transfer(transfer_id)
    except ClosingError as e:
        raise to_http_exception(e)

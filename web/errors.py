"""
예외 → HTTP 응답 변환

- ClosingValidationError → 400 (PeriodLockedError → 409)
- NotFoundError → 404
- DataAccessError → 500
- CascadeRecalculationError → 500 (실패 위치 포함)
"""

import logging
from decimal import Decimal, InvalidOperation

from fastapi import HTTPException

from core.closing.errors import (
    CascadeRecalculationError,
    ClosingError,
    ClosingValidationError,
    DataAccessError,
    NotFoundError,
    PeriodLockedError,
)

logger = logging.getLogger(__name__)


def to_http_exception(exc: ClosingError) -> HTTPException:
    """도메인 예외를 HTTPException으로 변환"""
    if isinstance(exc, PeriodLockedError):
        return HTTPException(
            status_code=409,
            detail={
                "violation": exc.violation.value,
                "message": exc.message,
                "last_closed": exc.last_closed.isoformat(),
            },
        )

    if isinstance(exc, ClosingValidationError):
        return HTTPException(
            status_code=400,
            detail={"violation": exc.violation.value, "message": exc.message},
        )

    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))

    if isinstance(exc, CascadeRecalculationError):
        logger.error(f"Cascade recalculation failed: {exc}")
        return HTTPException(
            status_code=500,
            detail={
                "message": str(exc),
                "failed_date": exc.failed_date.isoformat(),
                "account_id": exc.account_id,
                "recalculated_dates": [d.isoformat() for d in exc.recalculated_dates],
            },
        )

    if isinstance(exc, DataAccessError):
        logger.error(f"Data access failed: {exc}")
        return HTTPException(status_code=500, detail=str(exc))

    logger.error(f"Unexpected closing error: {exc}")
    return HTTPException(status_code=500, detail=str(exc))


def parse_amount(value: str, field_name: str = "amount") -> Decimal:
    """문자열 금액 파싱

    Raises:
        HTTPException: 숫자가 아닌 경우 400
    """
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError):
        raise HTTPException(status_code=400, detail=f"Invalid {field_name}: {value}")
    if not amount.is_finite():
        raise HTTPException(status_code=400, detail=f"Invalid {field_name}: {value}")
    return amount

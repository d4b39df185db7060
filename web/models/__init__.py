"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    ClosingCreateRequest,
    ClosingReopenRequest,
    MovementCreateRequest,
    MovementUpdateRequest,
    TransferCreateRequest,
)
from web.models.responses import (
    AccountResponse,
    AuditResponse,
    CascadeResponse,
    ClosingBatchResponse,
    ClosingListResponse,
    ClosingRecordResponse,
    HealthResponse,
    MovementResponse,
    ReopenResponse,
    StatementResponse,
    TransferResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "MovementCreateRequest",
    "MovementUpdateRequest",
    "TransferCreateRequest",
    "ClosingCreateRequest",
    "ClosingReopenRequest",
    # Responses
    "HealthResponse",
    "AccountResponse",
    "MovementResponse",
    "TransferResponse",
    "ClosingRecordResponse",
    "ClosingListResponse",
    "ClosingBatchResponse",
    "CascadeResponse",
    "ReopenResponse",
    "AuditResponse",
    "StatementResponse",
]

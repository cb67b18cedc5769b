"""
Ledger 예외 → HTTP 상태 코드 변환
"""

from fastapi import HTTPException

from core.ledger.errors import (
    InvalidEntryKind,
    LedgerError,
    NotFoundError,
    TransactionFailure,
    ValidationError,
)

STATUS_BY_ERROR: list[tuple[type[LedgerError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (TransactionFailure, 503),
    (InvalidEntryKind, 500),
]


def to_http_error(error: LedgerError) -> HTTPException:
    """LedgerError를 HTTPException으로 변환 (알 수 없는 하위 타입은 500)"""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))

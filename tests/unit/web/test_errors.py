"""
web/errors.py 테스트

Ledger 예외 → HTTP 상태 코드
"""

import pytest

from core.ledger.errors import (
    InvalidEntryKind,
    LedgerError,
    NotFoundError,
    TransactionFailure,
    ValidationError,
)
from web.errors import to_http_error


class TestToHttpError:
    """to_http_error 테스트"""

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (ValidationError("bad"), 400),
            (NotFoundError("missing"), 404),
            (TransactionFailure("locked"), 503),
            (InvalidEntryKind("broken"), 500),
            (LedgerError("unknown"), 500),
        ],
    )
    def test_status_codes(self, error: LedgerError, status_code: int) -> None:
        http_error = to_http_error(error)

        assert http_error.status_code == status_code
        assert http_error.detail == str(error)

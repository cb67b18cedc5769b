"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    AccountUpdateRequest,
    EntryCreateRequest,
    EntryUpdateRequest,
)
from web.models.responses import (
    AccountDeleteResponse,
    AccountResponse,
    BalanceDriftResponse,
    EntryListResponse,
    EntryResponse,
    HealthResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "AccountUpdateRequest",
    "EntryCreateRequest",
    "EntryUpdateRequest",
    # Responses
    "AccountDeleteResponse",
    "AccountResponse",
    "BalanceDriftResponse",
    "EntryListResponse",
    "EntryResponse",
    "HealthResponse",
]

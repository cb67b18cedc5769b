"""
Entry API 라우트

수입/지출/이체 Entry 생성/조회/수정/삭제.
모든 변경은 계정 잔액 증감과 함께 하나의 트랜잭션으로 처리된다.
"""

from fastapi import APIRouter, Depends, Path, Query, Response

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.errors import LedgerError
from core.ledger.query import EntryQueryService
from core.ledger.service import LedgerService
from web.dependencies import get_app_settings, get_db, get_db_write, get_owner_id
from web.errors import to_http_error
from web.models.requests import EntryCreateRequest, EntryUpdateRequest
from web.models.responses import EntryListResponse, EntryResponse

router = APIRouter(prefix="/api/entries", tags=["Entries"])


@router.post("", response_model=EntryResponse, status_code=201)
async def create_entry(
    request: EntryCreateRequest,
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> EntryResponse:
    """Entry 생성

    **종류별 필수 필드**:
    - income / expense: account_id
    - transfer: from_account_id, to_account_id (서로 달라야 함)
    """
    try:
        entry = await LedgerService(db).create_entry(owner_id, request.to_draft())
    except LedgerError as e:
        raise to_http_error(e) from e
    return EntryResponse.from_entry(entry)


@router.get("", response_model=EntryListResponse)
async def list_entries(
    category: str | None = Query(default=None, description="카테고리 필터"),
    account: str | None = Query(default=None, description="참여 계정 필터"),
    sort_by: str | None = Query(default=None, description="created-desc / due-asc / due-desc"),
    page: int = Query(default=1, description="페이지 번호"),
    limit: int | None = Query(default=None, description="페이지 크기"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> EntryListResponse:
    """Entry 목록 조회

    page/limit은 1 미만이면 1로, limit은 설정된 상한으로 보정된다.
    """
    service = EntryQueryService(db, max_limit=settings.ledger.max_page_limit)
    try:
        result = await service.list_entries(
            owner_id,
            category=category,
            account_id=account,
            sort=sort_by,
            page=page,
            limit=limit if limit is not None else settings.ledger.default_page_limit,
        )
    except LedgerError as e:
        raise to_http_error(e) from e
    return EntryListResponse.from_page(result)


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(
    entry_id: str = Path(..., description="Entry ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
) -> EntryResponse:
    """Entry 단건 조회"""
    try:
        entry = await EntryQueryService(db).get_entry(owner_id, entry_id)
    except LedgerError as e:
        raise to_http_error(e) from e
    return EntryResponse.from_entry(entry)


@router.put("/{entry_id}", response_model=EntryResponse)
async def update_entry(
    request: EntryUpdateRequest,
    entry_id: str = Path(..., description="Entry ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> EntryResponse:
    """Entry 수정

    생략한 필드는 유지. 종류 변경 시 참조 계정 기본값:
    - transfer → income/expense: account_id 생략 시 기존 from_account_id
    - income/expense → transfer: from_account_id 생략 시 기존 account_id
    """
    try:
        entry = await LedgerService(db).update_entry(
            owner_id, entry_id, request.to_changes()
        )
    except LedgerError as e:
        raise to_http_error(e) from e
    return EntryResponse.from_entry(entry)


@router.delete("/{entry_id}", status_code=204)
async def delete_entry(
    entry_id: str = Path(..., description="Entry ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
) -> Response:
    """Entry 삭제 (잔액 되돌림 포함)"""
    try:
        await LedgerService(db).delete_entry(owner_id, entry_id)
    except LedgerError as e:
        raise to_http_error(e) from e
    return Response(status_code=204)

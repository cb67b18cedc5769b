"""
계정 API 라우트

계정 생성/조회/수정/삭제(연쇄) 및 잔액 정합성 검사
"""

from fastapi import APIRouter, Depends, Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.accounts import AccountService
from core.ledger.errors import LedgerError
from core.ledger.reconcile import BalanceReconciler
from web.dependencies import get_app_settings, get_db, get_db_write, get_owner_id
from web.errors import to_http_error
from web.models.requests import AccountCreateRequest, AccountUpdateRequest
from web.models.responses import (
    AccountDeleteResponse,
    AccountResponse,
    BalanceDriftResponse,
)

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


def _service(db: SQLiteAdapter, settings: Settings) -> AccountService:
    return AccountService(
        db,
        reconcile_counterparts=settings.ledger.reconcile_transfer_counterparts,
    )


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: AccountCreateRequest,
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> AccountResponse:
    """계정 생성

    balance를 지정하면 초기 잔액으로 기록된다.
    """
    try:
        account = await _service(db, settings).create_account(
            owner_id,
            name=request.name,
            color=request.color,
            balance=request.balance,
        )
    except LedgerError as e:
        raise to_http_error(e) from e
    return AccountResponse.from_account(account)


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> list[AccountResponse]:
    """계정 목록 (최신순)"""
    accounts = await _service(db, settings).list_accounts(owner_id)
    return [AccountResponse.from_account(a) for a in accounts]


@router.get("/drift", response_model=list[BalanceDriftResponse])
async def get_balance_drift(
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
) -> list[BalanceDriftResponse]:
    """잔액 불일치 계정 목록

    저장된 잔액과 Entry로부터 다시 계산한 잔액이 다른 계정만 반환.
    정상 상태에서는 빈 목록.
    """
    drifts = await BalanceReconciler(db).find_drift(owner_id)
    return [BalanceDriftResponse.from_drift(d) for d in drifts]


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str = Path(..., description="계정 ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> AccountResponse:
    """계정 단건 조회"""
    try:
        account = await _service(db, settings).get_account(owner_id, account_id)
    except LedgerError as e:
        raise to_http_error(e) from e
    return AccountResponse.from_account(account)


@router.put("/{account_id}", response_model=AccountResponse)
async def update_account(
    request: AccountUpdateRequest,
    account_id: str = Path(..., description="계정 ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> AccountResponse:
    """계정 이름/색상 수정"""
    try:
        account = await _service(db, settings).update_account(
            owner_id,
            account_id,
            name=request.name,
            color=request.color,
        )
    except LedgerError as e:
        raise to_http_error(e) from e
    return AccountResponse.from_account(account)


@router.delete("/{account_id}", response_model=AccountDeleteResponse)
async def delete_account(
    account_id: str = Path(..., description="계정 ID"),
    owner_id: str = Depends(get_owner_id),
    db: SQLiteAdapter = Depends(get_db_write),
    settings: Settings = Depends(get_app_settings),
) -> AccountDeleteResponse:
    """계정 삭제

    계정을 참조하는 모든 Entry(account / from / to)를 함께 삭제한다.
    """
    try:
        result = await _service(db, settings).delete_account(owner_id, account_id)
    except LedgerError as e:
        raise to_http_error(e) from e

    return AccountDeleteResponse.from_result(result)

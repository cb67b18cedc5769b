"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 정밀도 보존을 위해 문자열로 직렬화.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from core.ledger.accounts import CascadeResult
from core.ledger.models import Account, Entry, TransferEntry
from core.ledger.query import EntryPage
from core.ledger.reconcile import BalanceDrift


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="애플리케이션 버전")


class AccountResponse(BaseModel):
    """계정 응답"""

    account_id: str = Field(..., description="계정 ID")
    name: str = Field(..., description="계정 이름")
    color: str = Field(..., description="표시용 색상")
    balance: str = Field(..., description="현재 잔액")
    opening_balance: str = Field(..., description="초기 잔액")
    created_at: datetime = Field(..., description="생성 시각 (UTC)")
    updated_at: datetime = Field(..., description="수정 시각 (UTC)")

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            account_id=account.account_id,
            name=account.name,
            color=account.color,
            balance=str(account.balance),
            opening_balance=str(account.opening_balance),
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class AccountDeleteResponse(BaseModel):
    """계정 삭제(연쇄) 결과"""

    account_id: str = Field(..., description="삭제된 계정 ID")
    removed_entries: int = Field(..., description="함께 삭제된 Entry 수")
    reconciled_accounts: dict[str, str] = Field(
        default_factory=dict,
        description="잔액이 복원된 이체 상대 계정 {account_id: delta}",
    )

    @classmethod
    def from_result(cls, result: CascadeResult) -> "AccountDeleteResponse":
        return cls(
            account_id=result.account_id,
            removed_entries=result.removed_entries,
            reconciled_accounts={
                account_id: str(delta)
                for account_id, delta in result.reconciled_accounts.items()
            },
        )


class BalanceDriftResponse(BaseModel):
    """잔액 불일치 응답"""

    account_id: str
    expected: str
    actual: str
    difference: str

    @classmethod
    def from_drift(cls, drift: BalanceDrift) -> "BalanceDriftResponse":
        return cls(
            account_id=drift.account_id,
            expected=str(drift.expected),
            actual=str(drift.actual),
            difference=str(drift.difference),
        )


class EntryResponse(BaseModel):
    """Entry 응답

    income/expense는 account_id, transfer는 from/to만 채워짐.
    """

    entry_id: str = Field(..., description="Entry ID")
    kind: str = Field(..., description="Entry 종류")
    value: str = Field(..., description="금액")
    due_date: datetime = Field(..., description="예정일 (UTC)")
    notes: str = Field(..., description="메모")
    category: str = Field(..., description="카테고리")
    account_id: str | None = Field(default=None, description="대상 계정")
    from_account_id: str | None = Field(default=None, description="이체 출금 계정")
    to_account_id: str | None = Field(default=None, description="이체 입금 계정")
    created_at: datetime = Field(..., description="생성 시각 (UTC)")
    updated_at: datetime = Field(..., description="수정 시각 (UTC)")

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryResponse":
        if isinstance(entry, TransferEntry):
            refs = {
                "from_account_id": entry.from_account_id,
                "to_account_id": entry.to_account_id,
            }
        else:
            refs = {"account_id": entry.account_id}
        return cls(
            entry_id=entry.entry_id,
            kind=entry.kind.value,
            value=str(entry.value),
            due_date=entry.due_date,
            notes=entry.notes,
            category=entry.category,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            **refs,
        )


class EntryListResponse(BaseModel):
    """Entry 목록 응답"""

    entries: list[EntryResponse]
    total: int = Field(..., description="필터 조건에 맞는 전체 수")
    page: int = Field(..., description="현재 페이지")
    total_pages: int = Field(..., description="전체 페이지 수")

    @classmethod
    def from_page(cls, page: EntryPage) -> "EntryListResponse":
        return cls(
            entries=[EntryResponse.from_entry(e) for e in page.entries],
            total=page.total,
            page=page.page,
            total_pages=page.total_pages,
        )

"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액은 Decimal로 받고 최종 검증(음수, 소수점 자릿수)은 Ledger에서 수행.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from core.ledger.models import EntryChanges, EntryDraft


class AccountCreateRequest(BaseModel):
    """계정 생성 요청"""

    name: str = Field(..., description="계정 이름")
    color: str | None = Field(default=None, description="표시용 색상")
    balance: Decimal | None = Field(default=None, description="초기 잔액 (기본 0)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "Wallet", "color": "#2e7d32", "balance": "150.00"},
            ]
        }
    }


class AccountUpdateRequest(BaseModel):
    """계정 수정 요청 (잔액은 수정 불가)"""

    name: str | None = Field(default=None, description="계정 이름")
    color: str | None = Field(default=None, description="표시용 색상")


class EntryCreateRequest(BaseModel):
    """Entry 생성 요청

    income/expense는 account_id, transfer는 from_account_id/to_account_id 지정.
    """

    kind: str = Field(..., description="Entry 종류 (income/expense/transfer)")
    value: Decimal | None = Field(default=None, description="금액 (기본 0)")
    due_date: datetime | None = Field(default=None, description="예정일 (기본 현재)")
    notes: str | None = Field(default=None, description="메모")
    category: str | None = Field(default=None, description="카테고리 (기본 other)")
    account_id: str | None = Field(default=None, description="income/expense 대상 계정")
    from_account_id: str | None = Field(default=None, description="이체 출금 계정")
    to_account_id: str | None = Field(default=None, description="이체 입금 계정")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "kind": "expense",
                    "value": "42.50",
                    "category": "groceries",
                    "account_id": "acc-...",
                },
                {
                    "kind": "transfer",
                    "value": "100.00",
                    "from_account_id": "acc-...",
                    "to_account_id": "acc-...",
                },
            ]
        }
    }

    def to_draft(self) -> EntryDraft:
        """Ledger 생성 입력으로 변환"""
        return EntryDraft(
            kind=self.kind,
            value=self.value,
            due_date=self.due_date,
            notes=self.notes,
            category=self.category,
            account_id=self.account_id,
            from_account_id=self.from_account_id,
            to_account_id=self.to_account_id,
        )


class EntryUpdateRequest(BaseModel):
    """Entry 수정 요청 (생략한 필드는 유지)"""

    kind: str | None = Field(default=None, description="Entry 종류")
    value: Decimal | None = Field(default=None, description="금액")
    due_date: datetime | None = Field(default=None, description="예정일")
    notes: str | None = Field(default=None, description="메모")
    category: str | None = Field(default=None, description="카테고리")
    account_id: str | None = Field(default=None, description="income/expense 대상 계정")
    from_account_id: str | None = Field(default=None, description="이체 출금 계정")
    to_account_id: str | None = Field(default=None, description="이체 입금 계정")

    def to_changes(self) -> EntryChanges:
        """Ledger 수정 입력으로 변환"""
        return EntryChanges(
            kind=self.kind,
            value=self.value,
            due_date=self.due_date,
            notes=self.notes,
            category=self.category,
            account_id=self.account_id,
            from_account_id=self.from_account_id,
            to_account_id=self.to_account_id,
        )

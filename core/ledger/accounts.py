"""
계정 서비스

계정 생성/수정/조회와 계정 삭제 시 연쇄 삭제(cascade) 처리.

계정 삭제는 하나의 트랜잭션에서:
1. 소유자 범위 계정 조회 (없으면 NotFoundError, 아무것도 삭제하지 않음)
2. 계정을 참조하는 Entry 조회 (account / from / to)
3. (설정 시) 이체 상대 계정 잔액 복원
4. Entry 일괄 삭제
5. 계정 삭제
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from core.constants import Defaults
from core.ledger.deltas import compute_deltas, invert_deltas, sum_deltas
from core.ledger.errors import NotFoundError
from core.ledger.models import (
    Account,
    new_account_id,
    validate_account_name,
    validate_amount,
)
from core.ledger.store import LedgerStore
from core.utils.timezone import now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    """계정 삭제 결과

    Attributes:
        account_id: 삭제된 계정 ID
        removed_entries: 함께 삭제된 Entry 수
        reconciled_accounts: 잔액이 복원된 이체 상대 계정 {account_id: 복원 delta}
    """

    account_id: str
    removed_entries: int
    reconciled_accounts: dict[str, Decimal] = field(default_factory=dict)


class AccountService:
    """계정 서비스

    Args:
        db: SQLite 어댑터 (쓰기 가능)
        reconcile_counterparts: 계정 삭제 시 함께 삭제되는 이체의
            상대 계정 잔액을 되돌릴지 여부
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        reconcile_counterparts: bool = Defaults.RECONCILE_TRANSFER_COUNTERPARTS,
    ):
        self.db = db
        self.store = LedgerStore(db)
        self.reconcile_counterparts = reconcile_counterparts

    async def create_account(
        self,
        owner_id: str,
        name: str,
        color: str | None = None,
        balance: Decimal | int | str | None = None,
    ) -> Account:
        """계정 생성

        Args:
            owner_id: 소유자 ID
            name: 계정 이름 (비어 있을 수 없음)
            color: 표시용 색상
            balance: 초기 잔액 (기본 0, 음수 허용)

        Raises:
            ValidationError: 이름이 비었거나 잔액 형식 오류
        """
        opening = validate_amount(balance)
        now = now_utc()
        account = Account(
            account_id=new_account_id(),
            owner_id=owner_id,
            name=validate_account_name(name),
            balance=opening,
            opening_balance=opening,
            color=color or Defaults.COLOR,
            created_at=now,
            updated_at=now,
        )

        async with self.db.transaction():
            await self.store.insert_account(account)

        logger.info(
            f"Account created: {account.account_id}",
            extra={"opening_balance": str(opening)},
        )
        return account

    async def get_account(self, owner_id: str, account_id: str) -> Account:
        """계정 조회

        Raises:
            NotFoundError: 소유자 범위에 계정이 없음
        """
        async with self.db.snapshot():
            account = await self.store.get_account(owner_id, account_id)
        if account is None:
            raise NotFoundError(f"Account not found: {account_id}")
        return account

    async def list_accounts(self, owner_id: str) -> list[Account]:
        """소유자의 계정 목록 (최신순)"""
        async with self.db.snapshot():
            return await self.store.list_accounts(owner_id)

    async def update_account(
        self,
        owner_id: str,
        account_id: str,
        name: str | None = None,
        color: str | None = None,
    ) -> Account:
        """계정 이름/색상 변경 (잔액은 변경 불가)

        Raises:
            NotFoundError: 소유자 범위에 계정이 없음
            ValidationError: 이름이 공백
        """
        async with self.db.transaction():
            current = await self.store.get_account(owner_id, account_id)
            if current is None:
                raise NotFoundError(f"Account not found: {account_id}")

            new_name = validate_account_name(name) if name is not None else current.name
            new_color = color if color is not None else current.color
            if new_name == current.name and new_color == current.color:
                return current

            now = now_utc()
            await self.store.update_account_fields(
                owner_id, account_id, new_name, new_color, now
            )
            updated = await self.store.get_account(owner_id, account_id)

        logger.info(f"Account updated: {account_id}")
        assert updated is not None
        return updated

    async def delete_account(self, owner_id: str, account_id: str) -> CascadeResult:
        """계정 및 참조 Entry 연쇄 삭제

        Raises:
            NotFoundError: 소유자 범위에 계정이 없음 (아무것도 삭제하지 않음)
            TransactionFailure: 저장소 커밋 실패
        """
        reconciled: dict[str, Decimal] = {}

        async with self.db.transaction():
            account = await self.store.get_account(owner_id, account_id)
            if account is None:
                raise NotFoundError(f"Account not found: {account_id}")

            entries = await self.store.list_entries_referencing(owner_id, account_id)

            if self.reconcile_counterparts:
                # 삭제 계정 외 참조 계정(이체 상대편)의 delta만 되돌림
                undo = sum_deltas(invert_deltas(compute_deltas(e)) for e in entries)
                now = now_utc()
                for other_id, delta in undo.items():
                    if other_id == account_id or delta == 0:
                        continue
                    await self.store.increment_balance(owner_id, other_id, delta, now)
                    reconciled[other_id] = delta

            removed = await self.store.delete_entries_referencing(owner_id, account_id)
            await self.store.delete_account(owner_id, account_id)

        logger.info(
            f"Account deleted: {account_id}",
            extra={
                "removed_entries": removed,
                "reconciled_accounts": len(reconciled),
            },
        )
        return CascadeResult(
            account_id=account_id,
            removed_entries=removed,
            reconciled_accounts=reconciled,
        )

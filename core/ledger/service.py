"""
Ledger 트랜잭션 오케스트레이터

Entry 생성/수정/삭제를 하나의 트랜잭션으로 처리.
Entry 레코드 변경과 계정 잔액 증감이 함께 커밋되거나 함께 롤백된다.

수정은 항상 2단계로 처리:
1. 기존 Entry의 delta를 반전하여 적용 (되돌리기)
2. 변경된 Entry의 delta를 적용

kind별 차이 계산을 따로 하지 않고 delta 계산기 결과만 사용하므로
계정 변경, kind 변경(transfer 포함) 모두 같은 경로로 처리된다.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from core.ledger.deltas import compute_deltas, invert_deltas
from core.ledger.errors import NotFoundError
from core.ledger.models import (
    Entry,
    EntryChanges,
    EntryDraft,
    apply_changes,
    build_entry,
)
from core.ledger.store import LedgerStore
from core.utils.timezone import now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class LedgerService:
    """Entry 변경 오케스트레이터

    Args:
        db: SQLite 어댑터 (쓰기 가능)

    사용 예시:
    ```python
    service = LedgerService(db)
    entry = await service.create_entry(
        owner_id,
        EntryDraft(kind="expense", value=Decimal("50"), account_id=account_id),
    )
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def _apply_deltas(
        self,
        owner_id: str,
        deltas: Mapping[str, Decimal],
        ts: datetime,
    ) -> None:
        """계정별 잔액 상대 증감 (트랜잭션 내부에서만 호출)"""
        for account_id, delta in deltas.items():
            await self.store.increment_balance(owner_id, account_id, delta, ts)

    async def create_entry(self, owner_id: str, draft: EntryDraft) -> Entry:
        """Entry 생성

        Args:
            owner_id: 소유자 ID
            draft: 생성 입력

        Returns:
            생성된 Entry

        Raises:
            ValidationError: 입력 검증 실패 (아무것도 기록되지 않음)
            NotFoundError: 참조 계정이 소유자 범위에 없음
            TransactionFailure: 저장소 커밋 실패
        """
        entry = build_entry(owner_id, draft)
        deltas = compute_deltas(entry)

        async with self.db.transaction():
            # 잔액 증감이 계정 존재/소유를 확인하므로 Entry 저장보다 먼저
            await self._apply_deltas(owner_id, deltas, entry.created_at)
            await self.store.insert_entry(entry)

        logger.info(
            f"Entry created: {entry.entry_id}",
            extra={"kind": entry.kind.value, "value": str(entry.value)},
        )
        return entry

    async def update_entry(
        self,
        owner_id: str,
        entry_id: str,
        changes: EntryChanges,
    ) -> Entry:
        """Entry 수정

        기존 delta 되돌리기 → 필드 변경 → 새 delta 적용을
        하나의 트랜잭션에서 수행. 변경 사항이 없으면 아무것도 쓰지 않는다.

        Raises:
            NotFoundError: Entry 또는 새 참조 계정이 없음
            ValidationError: 변경 결과가 불변식 위반 (롤백)
            TransactionFailure: 저장소 커밋 실패
        """
        async with self.db.transaction():
            current = await self.store.get_entry(owner_id, entry_id)
            if current is None:
                raise NotFoundError(f"Entry not found: {entry_id}")

            updated = apply_changes(current, changes)
            if updated is current:
                logger.debug(f"Entry unchanged: {entry_id}")
                return current

            await self._apply_deltas(
                owner_id, invert_deltas(compute_deltas(current)), updated.updated_at
            )
            # 새 참조 계정 확인을 위해 레코드 갱신보다 먼저 적용
            await self._apply_deltas(
                owner_id, compute_deltas(updated), updated.updated_at
            )
            await self.store.replace_entry(updated)

        logger.info(
            f"Entry updated: {entry_id}",
            extra={
                "old_kind": current.kind.value,
                "new_kind": updated.kind.value,
                "old_value": str(current.value),
                "new_value": str(updated.value),
            },
        )
        return updated

    async def delete_entry(self, owner_id: str, entry_id: str) -> None:
        """Entry 삭제

        delta를 반전 적용한 뒤 레코드 삭제 (원자적).

        Raises:
            NotFoundError: Entry가 없음
            TransactionFailure: 저장소 커밋 실패
        """
        async with self.db.transaction():
            entry = await self.store.get_entry(owner_id, entry_id)
            if entry is None:
                raise NotFoundError(f"Entry not found: {entry_id}")

            await self._apply_deltas(
                owner_id, invert_deltas(compute_deltas(entry)), now_utc()
            )
            await self.store.delete_entry(owner_id, entry_id)

        logger.info(
            f"Entry deleted: {entry_id}",
            extra={"kind": entry.kind.value, "value": str(entry.value)},
        )

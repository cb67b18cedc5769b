"""
잔액 정합성 검사

저장된 계정 잔액과 Entry로부터 다시 계산한 잔액을 비교하여 불일치 감지.

기대 잔액 = opening_balance + Σ compute_deltas(entry)[account]

검사만 수행하며 잔액을 고치지 않는다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from core.ledger.deltas import compute_deltas, sum_deltas
from core.ledger.store import LedgerStore

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass
class BalanceDrift:
    """잔액 불일치 정보"""

    account_id: str
    expected: Decimal
    actual: Decimal

    @property
    def difference(self) -> Decimal:
        """실제 - 기대"""
        return self.actual - self.expected


class BalanceReconciler:
    """잔액 정합성 검사기

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def find_drift(self, owner_id: str) -> list[BalanceDrift]:
        """잔액 불일치 계정 목록 (일치하면 빈 목록)

        계정과 Entry는 하나의 읽기 스냅샷에서 읽는다.
        """
        async with self.db.snapshot():
            accounts = await self.store.list_accounts(owner_id)
            entries = await self.store.list_all_entries(owner_id)

        totals = sum_deltas(compute_deltas(e) for e in entries)

        drifts: list[BalanceDrift] = []
        for account in accounts:
            expected = account.opening_balance + totals.get(account.account_id, Decimal("0"))
            if expected != account.balance:
                drifts.append(
                    BalanceDrift(
                        account_id=account.account_id,
                        expected=expected,
                        actual=account.balance,
                    )
                )

        if drifts:
            logger.warning(
                f"잔액 불일치 감지: {len(drifts)}개 계정",
                extra={"owner_id": owner_id},
            )
        return drifts

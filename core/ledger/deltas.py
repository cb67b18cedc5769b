"""
잔액 Delta 계산기

Entry 스냅샷 → 계정별 부호 있는 잔액 조정값.

| kind     | 계정 역할 | 조정   |
|----------|-----------|--------|
| income   | account   | +value |
| expense  | account   | -value |
| transfer | from      | -value |
| transfer | to        | +value |

부수 효과 없음. 수정/삭제 시 되돌리기는 항상 이 함수의 결과를
반전(invert_deltas)하여 계산한다.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal

from core.ledger.errors import InvalidEntryKind
from core.ledger.models import Entry, SingleAccountEntry, TransferEntry
from core.ledger.types import EntryKind

Deltas = dict[str, Decimal]


def compute_deltas(entry: Entry) -> Deltas:
    """Entry의 계정별 잔액 조정값 계산

    Args:
        entry: Entry 스냅샷

    Returns:
        {account_id: delta}. income/expense는 1개, transfer는 2개 (같은 크기, 반대 부호)

    Raises:
        InvalidEntryKind: kind가 variant와 맞지 않거나 알 수 없는 경우
    """
    if isinstance(entry, TransferEntry):
        if entry.kind != EntryKind.TRANSFER:
            raise InvalidEntryKind(
                f"TransferEntry의 kind가 transfer가 아닙니다: {entry.kind!r}"
            )
        return {
            entry.from_account_id: -entry.value,
            entry.to_account_id: entry.value,
        }

    if isinstance(entry, SingleAccountEntry):
        if entry.kind == EntryKind.INCOME:
            return {entry.account_id: entry.value}
        if entry.kind == EntryKind.EXPENSE:
            return {entry.account_id: -entry.value}
        raise InvalidEntryKind(
            f"SingleAccountEntry의 kind가 income/expense가 아닙니다: {entry.kind!r}"
        )

    raise InvalidEntryKind(f"알 수 없는 Entry 타입: {type(entry).__name__}")


def invert_deltas(deltas: Mapping[str, Decimal]) -> Deltas:
    """조정값 반전 (되돌리기용)"""
    return {account_id: -delta for account_id, delta in deltas.items()}


def sum_deltas(all_deltas: Iterable[Mapping[str, Decimal]]) -> Deltas:
    """여러 조정값을 계정별로 합산"""
    totals: Deltas = {}
    for deltas in all_deltas:
        for account_id, delta in deltas.items():
            totals[account_id] = totals.get(account_id, Decimal("0")) + delta
    return totals

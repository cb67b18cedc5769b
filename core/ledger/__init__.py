"""
Ledger 정합성 엔진

Entry(수입/지출/이체) 변경과 계정 잔액 증감을 하나의 트랜잭션으로 처리하여
모든 계정에서 다음 불변식을 유지한다.

    balance == opening_balance + Σ compute_deltas(entry)[account]

사용 예시:
```python
from core.ledger import AccountService, EntryDraft, LedgerService

accounts = AccountService(db)
ledger = LedgerService(db)

account = await accounts.create_account(owner_id, "Wallet")
entry = await ledger.create_entry(
    owner_id,
    EntryDraft(kind="income", value="100.00", account_id=account.account_id),
)
```
"""

from core.ledger.accounts import AccountService, CascadeResult
from core.ledger.deltas import Deltas, compute_deltas, invert_deltas, sum_deltas
from core.ledger.errors import (
    InvalidEntryKind,
    LedgerError,
    NotFoundError,
    TransactionFailure,
    ValidationError,
)
from core.ledger.models import (
    Account,
    Entry,
    EntryChanges,
    EntryDraft,
    SingleAccountEntry,
    TransferEntry,
    apply_changes,
    build_entry,
)
from core.ledger.query import EntryPage, EntryQueryService
from core.ledger.reconcile import BalanceDrift, BalanceReconciler
from core.ledger.schema import init_ledger_schema
from core.ledger.service import LedgerService
from core.ledger.store import LedgerStore
from core.ledger.types import EntryKind, EntrySort

__all__ = [
    # 서비스
    "LedgerService",
    "AccountService",
    "EntryQueryService",
    "BalanceReconciler",
    "LedgerStore",
    "init_ledger_schema",
    # 모델
    "Account",
    "Entry",
    "SingleAccountEntry",
    "TransferEntry",
    "EntryDraft",
    "EntryChanges",
    "EntryPage",
    "CascadeResult",
    "BalanceDrift",
    "build_entry",
    "apply_changes",
    # Delta
    "Deltas",
    "compute_deltas",
    "invert_deltas",
    "sum_deltas",
    # Enum
    "EntryKind",
    "EntrySort",
    # 예외
    "LedgerError",
    "ValidationError",
    "NotFoundError",
    "TransactionFailure",
    "InvalidEntryKind",
]

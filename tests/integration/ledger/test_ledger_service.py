"""
LedgerService 통합 테스트

Entry 생성/수정/삭제와 계정 잔액 증감의 원자성, 불변식 검증
"""

from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.accounts import AccountService
from core.ledger.errors import NotFoundError, TransactionFailure, ValidationError
from core.ledger.models import EntryChanges, EntryDraft, TransferEntry
from core.ledger.reconcile import BalanceReconciler
from core.ledger.service import LedgerService

OWNER = "owner-alice"
OTHER_OWNER = "owner-bob"


async def _balance(accounts: AccountService, account_id: str, owner_id: str = OWNER) -> Decimal:
    account = await accounts.get_account(owner_id, account_id)
    return account.balance


async def _entry_count(db: SQLiteAdapter) -> int:
    row = await db.fetchone("SELECT COUNT(*) FROM entry")
    return row[0]


class TestCreateEntry:
    """Entry 생성 테스트"""

    @pytest.mark.asyncio
    async def test_income_and_expense(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """수입 +, 지출 -"""
        a = await accounts.create_account(OWNER, "Wallet", balance="100")

        await ledger.create_entry(
            OWNER, EntryDraft(kind="income", value="20.50", account_id=a.account_id)
        )
        await ledger.create_entry(
            OWNER, EntryDraft(kind="expense", value="70", account_id=a.account_id)
        )

        assert await _balance(accounts, a.account_id) == Decimal("50.50")

    @pytest.mark.asyncio
    async def test_transfer_moves_between_accounts(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """이체: 두 계정이 같은 크기, 반대 방향으로 변경"""
        a = await accounts.create_account(OWNER, "Checking", balance="100")
        b = await accounts.create_account(OWNER, "Savings")

        entry = await ledger.create_entry(
            OWNER,
            EntryDraft(
                kind="transfer",
                value="40",
                from_account_id=a.account_id,
                to_account_id=b.account_id,
            ),
        )

        assert isinstance(entry, TransferEntry)
        assert await _balance(accounts, a.account_id) == Decimal("60.00")
        assert await _balance(accounts, b.account_id) == Decimal("40.00")

    @pytest.mark.asyncio
    async def test_missing_value_is_zero(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        a = await accounts.create_account(OWNER, "Wallet", balance="5")

        entry = await ledger.create_entry(
            OWNER, EntryDraft(kind="expense", account_id=a.account_id)
        )

        assert entry.value == Decimal("0.00")
        assert await _balance(accounts, a.account_id) == Decimal("5.00")

    @pytest.mark.asyncio
    async def test_same_account_transfer_rejected(
        self, db: SQLiteAdapter, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """동일 계정 이체 거부 (아무것도 기록되지 않음)"""
        a = await accounts.create_account(OWNER, "Wallet", balance="10")

        with pytest.raises(ValidationError):
            await ledger.create_entry(
                OWNER,
                EntryDraft(
                    kind="transfer",
                    value="5",
                    from_account_id=a.account_id,
                    to_account_id=a.account_id,
                ),
            )

        assert await _entry_count(db) == 0
        assert await _balance(accounts, a.account_id) == Decimal("10.00")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", ["income", "expense"])
    async def test_single_without_account_rejected(
        self, db: SQLiteAdapter, ledger: LedgerService, kind: str
    ) -> None:
        with pytest.raises(ValidationError):
            await ledger.create_entry(OWNER, EntryDraft(kind=kind, value="5"))

        assert await _entry_count(db) == 0

    @pytest.mark.asyncio
    async def test_value_beyond_storage_range_rejected(
        self, db: SQLiteAdapter, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """SQLite INTEGER 범위를 넘는 금액은 ValidationError"""
        a = await accounts.create_account(OWNER, "Wallet", balance="10")

        with pytest.raises(ValidationError):
            await ledger.create_entry(
                OWNER,
                EntryDraft(
                    kind="income",
                    value="100000000000000000000",
                    account_id=a.account_id,
                ),
            )

        assert await _entry_count(db) == 0
        assert await _balance(accounts, a.account_id) == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_unknown_account_rolls_back(
        self, db: SQLiteAdapter, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """존재하지 않는 to 계정 → 이미 적용한 from 증감도 롤백"""
        a = await accounts.create_account(OWNER, "Wallet", balance="10")

        with pytest.raises(NotFoundError):
            await ledger.create_entry(
                OWNER,
                EntryDraft(
                    kind="transfer",
                    value="5",
                    from_account_id=a.account_id,
                    to_account_id="acc-missing",
                ),
            )

        assert await _entry_count(db) == 0
        assert await _balance(accounts, a.account_id) == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_other_owners_account_is_not_found(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """다른 소유자의 계정은 참조 불가"""
        foreign = await accounts.create_account(OTHER_OWNER, "Theirs")

        with pytest.raises(NotFoundError):
            await ledger.create_entry(
                OWNER, EntryDraft(kind="income", value="5", account_id=foreign.account_id)
            )

        assert await _balance(accounts, foreign.account_id, OTHER_OWNER) == Decimal("0.00")


class TestUpdateEntry:
    """Entry 수정 테스트"""

    @pytest.mark.asyncio
    async def test_value_change(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        a = await accounts.create_account(OWNER, "Wallet", balance="100")
        entry = await ledger.create_entry(
            OWNER, EntryDraft(kind="expense", value="30", account_id=a.account_id)
        )

        updated = await ledger.update_entry(OWNER, entry.entry_id, EntryChanges(value="45"))

        assert updated.value == Decimal("45.00")
        assert await _balance(accounts, a.account_id) == Decimal("55.00")

    @pytest.mark.asyncio
    async def test_kind_and_account_change(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """expense 50 on A → income 30 on B: A +50, B +30"""
        a = await accounts.create_account(OWNER, "A", balance="100")
        b = await accounts.create_account(OWNER, "B", balance="100")
        entry = await ledger.create_entry(
            OWNER, EntryDraft(kind="expense", value="50", account_id=a.account_id)
        )
        assert await _balance(accounts, a.account_id) == Decimal("50.00")

        await ledger.update_entry(
            OWNER,
            entry.entry_id,
            EntryChanges(kind="income", value="30", account_id=b.account_id),
        )

        assert await _balance(accounts, a.account_id) == Decimal("100.00")
        assert await _balance(accounts, b.account_id) == Decimal("130.00")

    @pytest.mark.asyncio
    async def test_transfer_to_expense(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """transfer → expense: to 계정 증감이 되돌려지고 from 계정만 남음"""
        a = await accounts.create_account(OWNER, "A", balance="100")
        b = await accounts.create_account(OWNER, "B")
        entry = await ledger.create_entry(
            OWNER,
            EntryDraft(
                kind="transfer",
                value="25",
                from_account_id=a.account_id,
                to_account_id=b.account_id,
            ),
        )

        updated = await ledger.update_entry(
            OWNER, entry.entry_id, EntryChanges(kind="expense")
        )

        assert updated.account_ids == (a.account_id,)
        assert await _balance(accounts, a.account_id) == Decimal("75.00")
        assert await _balance(accounts, b.account_id) == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_noop_update_writes_nothing(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """변경 없는 수정은 잔액과 updated_at을 바꾸지 않음"""
        a = await accounts.create_account(OWNER, "Wallet", balance="10")
        entry = await ledger.create_entry(
            OWNER, EntryDraft(kind="income", value="5", account_id=a.account_id)
        )
        before = await accounts.get_account(OWNER, a.account_id)

        updated = await ledger.update_entry(
            OWNER, entry.entry_id, EntryChanges(value="5.00")
        )

        after = await accounts.get_account(OWNER, a.account_id)
        assert updated == entry
        assert after == before

    @pytest.mark.asyncio
    async def test_invalid_change_rolls_back(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """새 참조 계정이 없으면 되돌리기 포함 전체 롤백"""
        a = await accounts.create_account(OWNER, "Wallet", balance="10")
        entry = await ledger.create_entry(
            OWNER, EntryDraft(kind="expense", value="4", account_id=a.account_id)
        )

        with pytest.raises(NotFoundError):
            await ledger.update_entry(
                OWNER, entry.entry_id, EntryChanges(account_id="acc-missing")
            )

        assert await _balance(accounts, a.account_id) == Decimal("6.00")
        stored = await ledger.store.get_entry(OWNER, entry.entry_id)
        assert stored == entry

    @pytest.mark.asyncio
    async def test_unknown_entry(self, ledger: LedgerService) -> None:
        with pytest.raises(NotFoundError):
            await ledger.update_entry(OWNER, "ent-missing", EntryChanges(value="1"))

    @pytest.mark.asyncio
    async def test_other_owner_cannot_update(
        self, ledger: LedgerService, accounts: AccountService
    ) -> None:
        a = await accounts.create_account(OWNER, "Wallet")
        entry = await ledger.create_entry(
            OWNER, EntryDraft(kind="income", value="5", account_id=a.account_id)
        )

        with pytest.raises(NotFoundError):
            await ledger.update_entry(OTHER_OWNER, entry.entry_id, EntryChanges(value="1"))


class TestDeleteEntry:
    """Entry 삭제 테스트"""

    @pytest.mark.asyncio
    async def test_create_then_delete_restores_balances(
        self, db: SQLiteAdapter, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """생성 → 삭제 후 잔액 원상 복구"""
        a = await accounts.create_account(OWNER, "A", balance="12.34")
        b = await accounts.create_account(OWNER, "B", balance="-3")
        entry = await ledger.create_entry(
            OWNER,
            EntryDraft(
                kind="transfer",
                value="99.99",
                from_account_id=a.account_id,
                to_account_id=b.account_id,
            ),
        )

        await ledger.delete_entry(OWNER, entry.entry_id)

        assert await _balance(accounts, a.account_id) == Decimal("12.34")
        assert await _balance(accounts, b.account_id) == Decimal("-3.00")
        assert await _entry_count(db) == 0

    @pytest.mark.asyncio
    async def test_unknown_entry(self, ledger: LedgerService) -> None:
        with pytest.raises(NotFoundError):
            await ledger.delete_entry(OWNER, "ent-missing")


class TestInvariant:
    """임의 연산 순서 후 잔액 불변식"""

    @pytest.mark.asyncio
    async def test_balances_match_entries(
        self, db: SQLiteAdapter, ledger: LedgerService, accounts: AccountService
    ) -> None:
        a = await accounts.create_account(OWNER, "A", balance="500")
        b = await accounts.create_account(OWNER, "B")
        c = await accounts.create_account(OWNER, "C", balance="-20")

        e1 = await ledger.create_entry(
            OWNER, EntryDraft(kind="income", value="1000", account_id=a.account_id)
        )
        e2 = await ledger.create_entry(
            OWNER,
            EntryDraft(
                kind="transfer",
                value="300",
                from_account_id=a.account_id,
                to_account_id=b.account_id,
            ),
        )
        e3 = await ledger.create_entry(
            OWNER, EntryDraft(kind="expense", value="45.67", account_id=c.account_id)
        )
        await ledger.update_entry(
            OWNER, e2.entry_id, EntryChanges(to_account_id=c.account_id, value="150")
        )
        await ledger.update_entry(OWNER, e3.entry_id, EntryChanges(kind="income"))
        await ledger.delete_entry(OWNER, e1.entry_id)
        with pytest.raises(ValidationError):
            await ledger.update_entry(
                OWNER, e2.entry_id, EntryChanges(to_account_id=a.account_id)
            )

        assert await BalanceReconciler(db).find_drift(OWNER) == []
        assert await _balance(accounts, a.account_id) == Decimal("350.00")
        assert await _balance(accounts, b.account_id) == Decimal("0.00")
        assert await _balance(accounts, c.account_id) == Decimal("175.67")


class TestStorageFailure:
    """저장소 오류 시 TransactionFailure"""

    @pytest.mark.asyncio
    async def test_constraint_violation_rolls_back(
        self,
        db: SQLiteAdapter,
        ledger: LedgerService,
        accounts: AccountService,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Entry 저장 실패 시 이미 적용한 잔액 증감도 롤백"""
        a = await accounts.create_account(OWNER, "Wallet", balance="10")
        entry = await ledger.create_entry(
            OWNER, EntryDraft(kind="income", value="5", account_id=a.account_id)
        )

        original = ledger.store.insert_entry

        # 같은 entry_id로 다시 저장 → PRIMARY KEY 위반
        async def _insert_duplicate(_entry):
            await original(entry)

        monkeypatch.setattr(ledger.store, "insert_entry", _insert_duplicate)

        with pytest.raises(TransactionFailure):
            await ledger.create_entry(
                OWNER, EntryDraft(kind="income", value="7", account_id=a.account_id)
            )

        assert await _balance(accounts, a.account_id) == Decimal("15.00")
        assert await _entry_count(db) == 1

    @pytest.mark.asyncio
    async def test_balance_overflow_rolls_back(
        self, db: SQLiteAdapter, ledger: LedgerService, accounts: AccountService
    ) -> None:
        """64bit 범위를 넘는 잔액 증감은 REAL로 저장되지 않고 롤백"""
        a = await accounts.create_account(OWNER, "Wallet")
        await db.execute(
            "UPDATE account SET balance_minor = ? WHERE account_id = ?",
            (9223372036854775800, a.account_id),
        )
        await db.commit()

        with pytest.raises(TransactionFailure):
            await ledger.create_entry(
                OWNER, EntryDraft(kind="income", value="1.00", account_id=a.account_id)
            )

        row = await db.fetchone(
            "SELECT balance_minor, typeof(balance_minor) FROM account WHERE account_id = ?",
            (a.account_id,),
        )
        assert row == (9223372036854775800, "integer")
        assert await _entry_count(db) == 0

"""
Ledger 저장소

account / entry 테이블 접근 계층.

모든 조회/변경 조건에 owner_id를 포함하여 소유자 범위를 강제한다.
트랜잭션은 호출자(LedgerService, AccountService)가 관리하며
이 클래스의 메서드는 커밋하지 않는다.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.ledger.errors import NotFoundError
from core.ledger.models import (
    Account,
    Entry,
    TransferEntry,
    entry_from_row,
)
from core.ledger.types import EntrySort, to_minor_units

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


ENTRY_COLUMNS = (
    "entry_id, owner_id, kind, value_minor, due_date, notes, category, "
    "account_id, from_account_id, to_account_id, created_at, updated_at"
)

ACCOUNT_COLUMNS = (
    "account_id, owner_id, name, color, balance_minor, opening_balance_minor, "
    "created_at, updated_at"
)

# 정렬 키 → ORDER BY 절 (동률은 삽입 순서 역순)
SORT_CLAUSES: dict[EntrySort, str] = {
    EntrySort.CREATED_DESC: "created_at DESC, rowid DESC",
    EntrySort.DUE_ASC: "due_date ASC, rowid DESC",
    EntrySort.DUE_DESC: "due_date DESC, rowid DESC",
}


def _entry_refs(entry: Entry) -> tuple[str | None, str | None, str | None]:
    """(account_id, from_account_id, to_account_id)"""
    if isinstance(entry, TransferEntry):
        return None, entry.from_account_id, entry.to_account_id
    return entry.account_id, None, None


class LedgerStore:
    """Ledger 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # Account
    # -------------------------------------------------------------------------

    async def insert_account(self, account: Account) -> None:
        """계정 저장"""
        await self.db.execute(
            f"""
            INSERT INTO account ({ACCOUNT_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                account.account_id,
                account.owner_id,
                account.name,
                account.color,
                to_minor_units(account.balance),
                to_minor_units(account.opening_balance),
                account.created_at.isoformat(),
                account.updated_at.isoformat(),
            ),
        )

    async def get_account(self, owner_id: str, account_id: str) -> Account | None:
        """소유자 범위 계정 조회"""
        row = await self.db.fetchone_dict(
            f"SELECT {ACCOUNT_COLUMNS} FROM account WHERE account_id = ? AND owner_id = ?",
            (account_id, owner_id),
        )
        return Account.from_row(row) if row else None

    async def list_accounts(self, owner_id: str) -> list[Account]:
        """소유자의 계정 목록 (생성 시각 내림차순)"""
        rows = await self.db.fetchall_dict(
            f"""
            SELECT {ACCOUNT_COLUMNS} FROM account
            WHERE owner_id = ?
            ORDER BY created_at DESC, rowid DESC
            """,
            (owner_id,),
        )
        return [Account.from_row(row) for row in rows]

    async def update_account_fields(
        self,
        owner_id: str,
        account_id: str,
        name: str,
        color: str,
        updated_at: datetime,
    ) -> bool:
        """이름/색상 변경 (잔액은 변경하지 않음)

        Returns:
            변경된 행이 있으면 True
        """
        cursor = await self.db.execute(
            """
            UPDATE account SET name = ?, color = ?, updated_at = ?
            WHERE account_id = ? AND owner_id = ?
            """,
            (name, color, updated_at.isoformat(), account_id, owner_id),
        )
        return cursor.rowcount == 1

    async def delete_account(self, owner_id: str, account_id: str) -> bool:
        """계정 삭제

        Returns:
            삭제된 행이 있으면 True
        """
        cursor = await self.db.execute(
            "DELETE FROM account WHERE account_id = ? AND owner_id = ?",
            (account_id, owner_id),
        )
        return cursor.rowcount == 1

    async def increment_balance(
        self,
        owner_id: str,
        account_id: str,
        delta: Decimal,
        updated_at: datetime,
    ) -> None:
        """잔액 상대 증감

        읽은 값을 다시 쓰지 않고 balance_minor = balance_minor + ? 로
        갱신하여 동시 변경 시 증감이 유실되지 않도록 한다.

        Raises:
            NotFoundError: 소유자 범위에 계정이 없는 경우
        """
        cursor = await self.db.execute(
            """
            UPDATE account
            SET balance_minor = balance_minor + ?, updated_at = ?
            WHERE account_id = ? AND owner_id = ?
            """,
            (to_minor_units(delta), updated_at.isoformat(), account_id, owner_id),
        )
        if cursor.rowcount != 1:
            raise NotFoundError(f"Account not found: {account_id}")

    # -------------------------------------------------------------------------
    # Entry
    # -------------------------------------------------------------------------

    def _entry_params(self, entry: Entry) -> tuple[Any, ...]:
        account_id, from_account_id, to_account_id = _entry_refs(entry)
        return (
            entry.entry_id,
            entry.owner_id,
            entry.kind.value,
            to_minor_units(entry.value),
            entry.due_date.isoformat(),
            entry.notes,
            entry.category,
            account_id,
            from_account_id,
            to_account_id,
            entry.created_at.isoformat(),
            entry.updated_at.isoformat(),
        )

    async def insert_entry(self, entry: Entry) -> None:
        """Entry 저장"""
        await self.db.execute(
            f"""
            INSERT INTO entry ({ENTRY_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            self._entry_params(entry),
        )

    async def replace_entry(self, entry: Entry) -> bool:
        """Entry 전체 필드 갱신 (variant 변경 포함)

        Returns:
            갱신된 행이 있으면 True
        """
        account_id, from_account_id, to_account_id = _entry_refs(entry)
        cursor = await self.db.execute(
            """
            UPDATE entry SET
                kind = ?, value_minor = ?, due_date = ?, notes = ?, category = ?,
                account_id = ?, from_account_id = ?, to_account_id = ?,
                updated_at = ?
            WHERE entry_id = ? AND owner_id = ?
            """,
            (
                entry.kind.value,
                to_minor_units(entry.value),
                entry.due_date.isoformat(),
                entry.notes,
                entry.category,
                account_id,
                from_account_id,
                to_account_id,
                entry.updated_at.isoformat(),
                entry.entry_id,
                entry.owner_id,
            ),
        )
        return cursor.rowcount == 1

    async def get_entry(self, owner_id: str, entry_id: str) -> Entry | None:
        """소유자 범위 Entry 조회"""
        row = await self.db.fetchone_dict(
            f"SELECT {ENTRY_COLUMNS} FROM entry WHERE entry_id = ? AND owner_id = ?",
            (entry_id, owner_id),
        )
        return entry_from_row(row) if row else None

    async def delete_entry(self, owner_id: str, entry_id: str) -> bool:
        """Entry 삭제

        Returns:
            삭제된 행이 있으면 True
        """
        cursor = await self.db.execute(
            "DELETE FROM entry WHERE entry_id = ? AND owner_id = ?",
            (entry_id, owner_id),
        )
        return cursor.rowcount == 1

    async def list_entries_referencing(
        self,
        owner_id: str,
        account_id: str,
    ) -> list[Entry]:
        """계정을 참조하는 Entry 목록 (account / from / to 중 하나)"""
        rows = await self.db.fetchall_dict(
            f"""
            SELECT {ENTRY_COLUMNS} FROM entry
            WHERE owner_id = ?
              AND (account_id = ? OR from_account_id = ? OR to_account_id = ?)
            ORDER BY created_at, rowid
            """,
            (owner_id, account_id, account_id, account_id),
        )
        return [entry_from_row(row) for row in rows]

    async def delete_entries_referencing(self, owner_id: str, account_id: str) -> int:
        """계정을 참조하는 Entry 일괄 삭제

        Returns:
            삭제된 Entry 수
        """
        cursor = await self.db.execute(
            """
            DELETE FROM entry
            WHERE owner_id = ?
              AND (account_id = ? OR from_account_id = ? OR to_account_id = ?)
            """,
            (owner_id, account_id, account_id, account_id),
        )
        return cursor.rowcount

    async def list_all_entries(self, owner_id: str) -> list[Entry]:
        """소유자의 전체 Entry (정합성 검사용)"""
        rows = await self.db.fetchall_dict(
            f"SELECT {ENTRY_COLUMNS} FROM entry WHERE owner_id = ? ORDER BY rowid",
            (owner_id,),
        )
        return [entry_from_row(row) for row in rows]

    # -------------------------------------------------------------------------
    # 목록 조회 (필터 / 정렬 / 페이지)
    # -------------------------------------------------------------------------

    def _filter_clause(
        self,
        owner_id: str,
        category: str | None,
        account_id: str | None,
    ) -> tuple[str, list[Any]]:
        where = "owner_id = ?"
        params: list[Any] = [owner_id]
        if category:
            where += " AND category = ?"
            params.append(category)
        if account_id:
            where += " AND (account_id = ? OR from_account_id = ? OR to_account_id = ?)"
            params.extend([account_id, account_id, account_id])
        return where, params

    async def count_entries(
        self,
        owner_id: str,
        category: str | None = None,
        account_id: str | None = None,
    ) -> int:
        """필터 조건에 맞는 Entry 수"""
        where, params = self._filter_clause(owner_id, category, account_id)
        row = await self.db.fetchone(
            f"SELECT COUNT(*) FROM entry WHERE {where}",
            tuple(params),
        )
        return row[0] if row else 0

    async def query_entries(
        self,
        owner_id: str,
        category: str | None = None,
        account_id: str | None = None,
        sort: EntrySort = EntrySort.CREATED_DESC,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Entry]:
        """필터 / 정렬 / 페이지 적용 Entry 목록"""
        where, params = self._filter_clause(owner_id, category, account_id)
        params.extend([limit, offset])
        rows = await self.db.fetchall_dict(
            f"""
            SELECT {ENTRY_COLUMNS} FROM entry
            WHERE {where}
            ORDER BY {SORT_CLAUSES[sort]}
            LIMIT ? OFFSET ?
            """,
            tuple(params),
        )
        return [entry_from_row(row) for row in rows]

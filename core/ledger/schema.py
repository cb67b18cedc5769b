"""
Ledger 스키마 초기화

Web 시작 시 자동으로 Ledger 테이블과 인덱스 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.

금액은 정수 최소 단위(소수점 2자리 → x100)로 저장하여
balance_minor = balance_minor + ? 형태의 상대 증감이 정확하도록 한다.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """Ledger 스키마 초기화 (테이블 + 인덱스)

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: SQLiteAdapter 인스턴스
    """
    await _create_ledger_tables(db)
    await _create_ledger_indexes(db)
    await db.commit()
    logger.info("Ledger 스키마 초기화 완료")


async def _create_ledger_tables(db: "SQLiteAdapter") -> None:
    """Ledger 테이블 생성"""

    # account 테이블
    # 64bit 범위를 넘은 증감 결과는 REAL로 저장되므로 typeof CHECK로 거부
    await db.execute("""
        CREATE TABLE IF NOT EXISTS account (
            account_id            TEXT PRIMARY KEY,
            owner_id              TEXT NOT NULL,
            name                  TEXT NOT NULL CHECK (length(trim(name)) > 0),
            color                 TEXT NOT NULL DEFAULT '',
            balance_minor         INTEGER NOT NULL DEFAULT 0
                                  CHECK (typeof(balance_minor) = 'integer'),
            opening_balance_minor INTEGER NOT NULL DEFAULT 0
                                  CHECK (typeof(opening_balance_minor) = 'integer'),
            created_at            TEXT NOT NULL,
            updated_at            TEXT NOT NULL
        )
    """)

    # entry 테이블
    # kind에 따라 account_id 또는 (from_account_id, to_account_id) 중 하나만 채워짐
    await db.execute("""
        CREATE TABLE IF NOT EXISTS entry (
            entry_id         TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            kind             TEXT NOT NULL
                             CHECK (kind IN ('income', 'expense', 'transfer')),
            value_minor      INTEGER NOT NULL DEFAULT 0 CHECK (value_minor >= 0),
            due_date         TEXT NOT NULL,
            notes            TEXT NOT NULL DEFAULT '',
            category         TEXT NOT NULL DEFAULT 'other',

            account_id       TEXT REFERENCES account(account_id),
            from_account_id  TEXT REFERENCES account(account_id),
            to_account_id    TEXT REFERENCES account(account_id),

            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL,

            CHECK (
                (kind IN ('income', 'expense')
                    AND account_id IS NOT NULL
                    AND from_account_id IS NULL
                    AND to_account_id IS NULL)
                OR
                (kind = 'transfer'
                    AND account_id IS NULL
                    AND from_account_id IS NOT NULL
                    AND to_account_id IS NOT NULL
                    AND from_account_id <> to_account_id)
            )
        )
    """)


async def _create_ledger_indexes(db: "SQLiteAdapter") -> None:
    """Ledger 인덱스 생성"""

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_account_owner
        ON account(owner_id, created_at)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_entry_owner_created
        ON entry(owner_id, created_at)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_entry_owner_due
        ON entry(owner_id, due_date)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_entry_account
        ON entry(account_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_entry_from_account
        ON entry(from_account_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_entry_to_account
        ON entry(to_account_id)
    """)

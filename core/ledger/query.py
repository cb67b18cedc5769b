"""
Entry 조회 서비스

소유자 범위의 필터 / 정렬 / 페이지 조회. 잔액 로직 없음.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.constants import Defaults
from core.ledger.errors import NotFoundError, ValidationError
from core.ledger.models import Entry
from core.ledger.store import LedgerStore
from core.ledger.types import EntrySort

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter


@dataclass
class EntryPage:
    """Entry 목록 페이지"""

    entries: list[Entry]
    total: int
    page: int
    total_pages: int


def parse_sort(raw: str | EntrySort | None) -> EntrySort:
    """정렬 키 파싱 (None/빈 값은 생성 시각 내림차순)

    Raises:
        ValidationError: 알 수 없는 정렬 키
    """
    if raw is None or raw == "":
        return EntrySort.CREATED_DESC
    if isinstance(raw, EntrySort):
        return raw
    try:
        return EntrySort(raw)
    except ValueError as e:
        valid = [s.value for s in EntrySort]
        raise ValidationError(f"유효하지 않은 정렬 키입니다: '{raw}'. 유효한 값: {valid}") from e


class EntryQueryService:
    """Entry 조회 서비스

    Args:
        db: SQLite 어댑터
        max_limit: 페이지 크기 상한
    """

    def __init__(self, db: SQLiteAdapter, max_limit: int = Defaults.MAX_PAGE_LIMIT):
        self.db = db
        self.store = LedgerStore(db)
        self.max_limit = max_limit

    async def get_entry(self, owner_id: str, entry_id: str) -> Entry:
        """Entry 단건 조회

        Raises:
            NotFoundError: 소유자 범위에 Entry가 없음
        """
        async with self.db.snapshot():
            entry = await self.store.get_entry(owner_id, entry_id)
        if entry is None:
            raise NotFoundError(f"Entry not found: {entry_id}")
        return entry

    async def list_entries(
        self,
        owner_id: str,
        category: str | None = None,
        account_id: str | None = None,
        sort: str | EntrySort | None = None,
        page: int = 1,
        limit: int = Defaults.PAGE_LIMIT,
    ) -> EntryPage:
        """Entry 목록 조회

        Args:
            owner_id: 소유자 ID
            category: 카테고리 필터
            account_id: 계정 참여 필터 (account / from / to)
            sort: created-desc (기본), due-asc, due-desc
            page: 페이지 번호 (1 미만은 1)
            limit: 페이지 크기 (1 미만은 1, 상한 max_limit)

        Returns:
            EntryPage
        """
        sort_key = parse_sort(sort)
        page = max(1, page)
        limit = min(max(1, limit), self.max_limit)
        offset = (page - 1) * limit

        # 개수와 페이지가 같은 시점을 보도록 함께 조회
        async with self.db.snapshot():
            total = await self.store.count_entries(owner_id, category, account_id)
            entries = await self.store.query_entries(
                owner_id,
                category=category,
                account_id=account_id,
                sort=sort_key,
                limit=limit,
                offset=offset,
            )

        return EntryPage(
            entries=entries,
            total=total,
            page=page,
            total_pages=math.ceil(total / limit),
        )

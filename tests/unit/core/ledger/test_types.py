"""
core/ledger/types.py 테스트

Entry 종류, 정렬 키, 금액 최소 단위 변환 테스트
"""

from decimal import Decimal

import pytest

from core.ledger.types import (
    SINGLE_ACCOUNT_KINDS,
    EntryKind,
    EntrySort,
    from_minor_units,
    to_minor_units,
)


class TestEntryKind:
    """EntryKind Enum 테스트"""

    def test_values(self) -> None:
        """값 확인"""
        assert EntryKind.INCOME.value == "income"
        assert EntryKind.EXPENSE.value == "expense"
        assert EntryKind.TRANSFER.value == "transfer"

    def test_is_str(self) -> None:
        """str 상속 확인 (JSON 직렬화)"""
        assert isinstance(EntryKind.INCOME, str)
        assert EntryKind("expense") == EntryKind.EXPENSE

    def test_single_account_kinds(self) -> None:
        """단일 계정 종류"""
        assert SINGLE_ACCOUNT_KINDS == {EntryKind.INCOME, EntryKind.EXPENSE}
        assert EntryKind.TRANSFER not in SINGLE_ACCOUNT_KINDS

    def test_invalid_value(self) -> None:
        """알 수 없는 값"""
        with pytest.raises(ValueError):
            EntryKind("refund")


class TestEntrySort:
    """EntrySort Enum 테스트"""

    def test_values(self) -> None:
        assert EntrySort("created-desc") == EntrySort.CREATED_DESC
        assert EntrySort("due-asc") == EntrySort.DUE_ASC
        assert EntrySort("due-desc") == EntrySort.DUE_DESC


class TestMinorUnits:
    """금액 ↔ 정수 최소 단위 변환 테스트"""

    def test_to_minor_units(self) -> None:
        assert to_minor_units(Decimal("12.34")) == 1234
        assert to_minor_units(Decimal("0")) == 0
        assert to_minor_units(Decimal("-5.5")) == -550
        assert to_minor_units(Decimal("100")) == 10000

    def test_to_minor_units_rejects_extra_precision(self) -> None:
        """소수점 2자리 초과"""
        with pytest.raises(ValueError):
            to_minor_units(Decimal("1.005"))

    def test_trailing_zeros_allowed(self) -> None:
        """유효 자릿수가 2자리 이하면 허용"""
        assert to_minor_units(Decimal("1.2000")) == 120

    def test_from_minor_units(self) -> None:
        assert from_minor_units(1234) == Decimal("12.34")
        assert from_minor_units(-550) == Decimal("-5.50")
        assert str(from_minor_units(0)) == "0.00"

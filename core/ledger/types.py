"""
Ledger 타입 정의

Entry 종류, 정렬 키 등 Ledger 시스템에서 사용하는 Enum 정의
"""

from decimal import Decimal
from enum import Enum


class EntryKind(str, Enum):
    """Entry 종류

    str을 상속하여 JSON 직렬화 가능.
    """

    INCOME = "income"  # 수입 (단일 계정 +)
    EXPENSE = "expense"  # 지출 (단일 계정 -)
    TRANSFER = "transfer"  # 이체 (from -, to +)


# 단일 계정 Entry 종류
SINGLE_ACCOUNT_KINDS: frozenset[EntryKind] = frozenset(
    {EntryKind.INCOME, EntryKind.EXPENSE}
)


class EntrySort(str, Enum):
    """Entry 목록 정렬 키"""

    CREATED_DESC = "created-desc"  # 생성 시각 내림차순 (기본)
    DUE_ASC = "due-asc"  # 예정일 오름차순
    DUE_DESC = "due-desc"  # 예정일 내림차순


# 금액 스케일 (소수점 2자리, DB에는 정수 최소 단위로 저장)
MONEY_DECIMAL_PLACES: int = 2
MONEY_QUANTUM: Decimal = Decimal("0.01")
MINOR_UNITS_PER_MAJOR: int = 100

# 금액 절댓값 상한 (최소 단위). SQLite INTEGER(64bit) 범위 안에서 누적 여유를 둠
MAX_ABS_MINOR_UNITS: int = 2**53
MAX_ABS_AMOUNT: Decimal = Decimal(MAX_ABS_MINOR_UNITS) / MINOR_UNITS_PER_MAJOR


def to_minor_units(amount: Decimal) -> int:
    """Decimal 금액을 정수 최소 단위로 변환

    Args:
        amount: 소수점 2자리 이하 금액

    Returns:
        최소 단위 정수 (예: Decimal("12.34") → 1234)

    Raises:
        ValueError: 소수점 2자리를 초과하는 경우
    """
    scaled = amount * MINOR_UNITS_PER_MAJOR
    if scaled != scaled.to_integral_value():
        raise ValueError(f"금액은 소수점 {MONEY_DECIMAL_PLACES}자리까지만 허용됩니다: {amount}")
    return int(scaled)


def from_minor_units(minor: int) -> Decimal:
    """정수 최소 단위를 Decimal 금액으로 변환"""
    return (Decimal(minor) / MINOR_UNITS_PER_MAJOR).quantize(MONEY_QUANTUM)

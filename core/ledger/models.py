"""
Ledger 데이터 모델

Account와 Entry 정의 및 입력 검증.

Entry는 종류에 따라 참조 필드가 다르므로 태그드 variant로 표현:
- SingleAccountEntry: income / expense → account_id 하나
- TransferEntry: transfer → from_account_id, to_account_id (서로 달라야 함)

"kind에 따라 필드가 필수" 같은 런타임 조건 검사 대신
variant 타입 자체가 불변식을 담는다.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Union

from core.constants import Defaults
from core.ledger.errors import ValidationError
from core.ledger.types import (
    SINGLE_ACCOUNT_KINDS,
    EntryKind,
    MAX_ABS_AMOUNT,
    MONEY_QUANTUM,
    from_minor_units,
    to_minor_units,
)
from core.utils.timezone import ensure_utc, now_utc, parse_utc


def new_account_id() -> str:
    """Account ID 생성 (acc-{hex})"""
    return f"acc-{uuid.uuid4().hex}"


def new_entry_id() -> str:
    """Entry ID 생성 (ent-{hex})"""
    return f"ent-{uuid.uuid4().hex}"


# =========================================================================
# Account
# =========================================================================


@dataclass(frozen=True)
class Account:
    """계정

    Attributes:
        account_id: 계정 ID
        owner_id: 소유자 ID
        name: 계정 이름 (비어 있을 수 없음)
        balance: 현재 잔액 (부호 있음)
        opening_balance: 생성 시 초기 잔액
        color: 표시용 색상 태그
        created_at: 생성 시각 (UTC)
        updated_at: 수정 시각 (UTC)
    """

    account_id: str
    owner_id: str
    name: str
    balance: Decimal
    opening_balance: Decimal
    color: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Account":
        """DB 행에서 생성"""
        return cls(
            account_id=row["account_id"],
            owner_id=row["owner_id"],
            name=row["name"],
            balance=from_minor_units(row["balance_minor"]),
            opening_balance=from_minor_units(row["opening_balance_minor"]),
            color=row["color"] or "",
            created_at=parse_utc(row["created_at"]),
            updated_at=parse_utc(row["updated_at"]),
        )


# =========================================================================
# Entry variants
# =========================================================================


@dataclass(frozen=True)
class SingleAccountEntry:
    """단일 계정 Entry (income / expense)"""

    entry_id: str
    owner_id: str
    kind: EntryKind
    value: Decimal
    due_date: datetime
    notes: str
    category: str
    created_at: datetime
    updated_at: datetime
    account_id: str

    @property
    def account_ids(self) -> tuple[str, ...]:
        """참조하는 계정 ID 목록"""
        return (self.account_id,)


@dataclass(frozen=True)
class TransferEntry:
    """이체 Entry (transfer)"""

    entry_id: str
    owner_id: str
    kind: EntryKind
    value: Decimal
    due_date: datetime
    notes: str
    category: str
    created_at: datetime
    updated_at: datetime
    from_account_id: str
    to_account_id: str

    @property
    def account_ids(self) -> tuple[str, ...]:
        """참조하는 계정 ID 목록"""
        return (self.from_account_id, self.to_account_id)


Entry = Union[SingleAccountEntry, TransferEntry]


def entry_from_row(row: dict[str, Any]) -> Entry:
    """DB 행에서 Entry variant 생성"""
    kind = EntryKind(row["kind"])
    common = dict(
        entry_id=row["entry_id"],
        owner_id=row["owner_id"],
        kind=kind,
        value=from_minor_units(row["value_minor"]),
        due_date=parse_utc(row["due_date"]),
        notes=row["notes"] or "",
        category=row["category"],
        created_at=parse_utc(row["created_at"]),
        updated_at=parse_utc(row["updated_at"]),
    )
    if kind == EntryKind.TRANSFER:
        return TransferEntry(
            **common,
            from_account_id=row["from_account_id"],
            to_account_id=row["to_account_id"],
        )
    return SingleAccountEntry(**common, account_id=row["account_id"])


# =========================================================================
# 입력 (생성 초안 / 수정 변경분)
# =========================================================================


@dataclass
class EntryDraft:
    """Entry 생성 입력

    value가 없으면 0으로 간주. income/expense는 account_id,
    transfer는 from_account_id/to_account_id 필요.
    """

    kind: str
    value: Decimal | int | str | None = None
    due_date: datetime | None = None
    notes: str | None = None
    category: str | None = None
    account_id: str | None = None
    from_account_id: str | None = None
    to_account_id: str | None = None


@dataclass
class EntryChanges:
    """Entry 수정 입력

    None인 필드는 이전 값을 유지.
    """

    kind: str | None = None
    value: Decimal | int | str | None = None
    due_date: datetime | None = None
    notes: str | None = None
    category: str | None = None
    account_id: str | None = None
    from_account_id: str | None = None
    to_account_id: str | None = None


# =========================================================================
# 검증
# =========================================================================


def parse_kind(raw: str | EntryKind) -> EntryKind:
    """Entry 종류 파싱

    Raises:
        ValidationError: income/expense/transfer가 아닌 경우
    """
    if isinstance(raw, EntryKind):
        return raw
    try:
        return EntryKind(str(raw).strip().lower())
    except ValueError as e:
        valid = [k.value for k in EntryKind]
        raise ValidationError(
            f"유효하지 않은 Entry 종류입니다: '{raw}'. 유효한 값: {valid}"
        ) from e


def validate_value(raw: Decimal | int | str | None) -> Decimal:
    """Entry 금액 검증

    None은 0으로 간주 (에러 아님).

    Raises:
        ValidationError: 숫자가 아니거나 음수이거나 소수점 2자리 초과
    """
    value = validate_amount(raw)
    if value < 0:
        raise ValidationError(f"금액은 음수일 수 없습니다: {value}")
    return value


def validate_amount(raw: Decimal | int | str | None) -> Decimal:
    """부호 있는 금액 검증 (계정 잔액용)

    None은 0. 숫자가 아니거나 소수점 2자리를 넘거나
    절댓값이 저장 가능한 상한을 넘으면 ValidationError.
    """
    if raw is None:
        return Decimal("0").quantize(MONEY_QUANTUM)
    try:
        value = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except InvalidOperation as e:
        raise ValidationError(f"금액이 숫자가 아닙니다: {raw!r}") from e
    if not value.is_finite():
        raise ValidationError(f"금액이 유한한 숫자가 아닙니다: {raw!r}")
    if abs(value) > MAX_ABS_AMOUNT:
        raise ValidationError(f"금액이 허용 범위를 벗어났습니다: {raw!r}")
    try:
        to_minor_units(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return value.quantize(MONEY_QUANTUM)


def validate_account_name(name: str | None) -> str:
    """계정 이름 검증 (공백 제거 후 비어 있으면 에러)"""
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("계정 이름은 비어 있을 수 없습니다")
    return cleaned


def _clean_ref(ref: str | None) -> str | None:
    if ref is None:
        return None
    cleaned = str(ref).strip()
    return cleaned or None


def _clean_category(category: str | None) -> str:
    cleaned = (category or "").strip()
    return cleaned or Defaults.CATEGORY


def _make_variant(
    kind: EntryKind,
    account_id: str | None,
    from_account_id: str | None,
    to_account_id: str | None,
    **common: Any,
) -> Entry:
    """종류에 맞는 variant 생성 및 참조 검증"""
    if kind == EntryKind.TRANSFER:
        if not from_account_id or not to_account_id:
            raise ValidationError("이체에는 from_account_id와 to_account_id가 모두 필요합니다")
        if from_account_id == to_account_id:
            raise ValidationError("같은 계정으로 이체할 수 없습니다")
        return TransferEntry(
            kind=kind,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            **common,
        )

    if not account_id:
        raise ValidationError(f"{kind.value} Entry에는 account_id가 필요합니다")
    return SingleAccountEntry(kind=kind, account_id=account_id, **common)


def build_entry(
    owner_id: str,
    draft: EntryDraft,
    now: datetime | None = None,
) -> Entry:
    """생성 입력을 검증하여 새 Entry 생성

    Args:
        owner_id: 소유자 ID
        draft: 생성 입력
        now: 생성 시각 (None이면 현재 UTC)

    Returns:
        새 Entry (ID, 타임스탬프 포함)

    Raises:
        ValidationError: 입력이 불변식을 위반하는 경우
    """
    now = now or now_utc()
    kind = parse_kind(draft.kind)
    account_id = _clean_ref(draft.account_id)
    from_account_id = _clean_ref(draft.from_account_id)
    to_account_id = _clean_ref(draft.to_account_id)

    if kind == EntryKind.TRANSFER and account_id:
        raise ValidationError("이체에는 account_id를 지정할 수 없습니다")
    if kind in SINGLE_ACCOUNT_KINDS and (from_account_id or to_account_id):
        raise ValidationError(
            f"{kind.value} Entry에는 from_account_id/to_account_id를 지정할 수 없습니다"
        )

    return _make_variant(
        kind,
        account_id,
        from_account_id,
        to_account_id,
        entry_id=new_entry_id(),
        owner_id=owner_id,
        value=validate_value(draft.value),
        due_date=ensure_utc(draft.due_date) if draft.due_date else now,
        notes=draft.notes if draft.notes is not None else Defaults.NOTES,
        category=_clean_category(draft.category),
        created_at=now,
        updated_at=now,
    )


def apply_changes(
    entry: Entry,
    changes: EntryChanges,
    now: datetime | None = None,
) -> Entry:
    """기존 Entry에 변경분 적용

    생략된 필드는 이전 값 유지. kind가 바뀌면 variant를 다시 만들고
    사용하지 않게 된 참조는 제거한다.

    참조 기본값:
    - transfer → income/expense: account_id 생략 시 기존 from_account_id
    - income/expense → transfer: from_account_id 생략 시 기존 account_id,
      to_account_id는 필수

    변경 사항이 없으면 원본을 그대로 반환 (updated_at 유지).

    Raises:
        ValidationError: 결과가 불변식을 위반하는 경우
    """
    kind = parse_kind(changes.kind) if changes.kind is not None else entry.kind
    account_id = _clean_ref(changes.account_id)
    from_account_id = _clean_ref(changes.from_account_id)
    to_account_id = _clean_ref(changes.to_account_id)

    if kind == EntryKind.TRANSFER:
        if account_id:
            raise ValidationError("이체에는 account_id를 지정할 수 없습니다")
        if isinstance(entry, TransferEntry):
            from_account_id = from_account_id or entry.from_account_id
            to_account_id = to_account_id or entry.to_account_id
        else:
            from_account_id = from_account_id or entry.account_id
    else:
        if from_account_id or to_account_id:
            raise ValidationError(
                f"{kind.value} Entry에는 from_account_id/to_account_id를 지정할 수 없습니다"
            )
        if isinstance(entry, TransferEntry):
            account_id = account_id or entry.from_account_id
        else:
            account_id = account_id or entry.account_id

    candidate = _make_variant(
        kind,
        account_id,
        from_account_id,
        to_account_id,
        entry_id=entry.entry_id,
        owner_id=entry.owner_id,
        value=(
            validate_value(changes.value)
            if changes.value is not None
            else entry.value
        ),
        due_date=ensure_utc(changes.due_date) if changes.due_date else entry.due_date,
        notes=changes.notes if changes.notes is not None else entry.notes,
        category=(
            _clean_category(changes.category)
            if changes.category is not None
            else entry.category
        ),
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )

    if candidate == entry:
        return entry
    return replace(candidate, updated_at=now or now_utc())

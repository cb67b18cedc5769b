"""
타임존 유틸리티

내부 저장은 UTC ISO 8601 문자열.
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC로 정규화

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        UTC 타임존의 datetime

    Example:
        >>> kst = timezone(timedelta(hours=9))
        >>> ensure_utc(datetime(2026, 2, 21, 1, 0, tzinfo=kst)).hour
        16
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_utc(value: str) -> datetime:
    """ISO 8601 문자열을 UTC datetime으로 파싱 (오프셋 없으면 UTC)"""
    return ensure_utc(datetime.fromisoformat(value))

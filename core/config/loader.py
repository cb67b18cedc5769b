"""
설정 로더

settings.yaml 로드 및 애플리케이션 설정 생성.
파일이 없으면 기본값으로 동작.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths


@dataclass(frozen=True)
class DatabaseConfig:
    """DB 설정"""

    path: Path


@dataclass(frozen=True)
class WebConfig:
    """Web 서버 설정"""

    host: str
    port: int


@dataclass(frozen=True)
class LedgerConfig:
    """Ledger 동작 설정

    불변 데이터 구조로 설정 변경 방지
    """

    reconcile_transfer_counterparts: bool
    default_page_limit: int
    max_page_limit: int


@dataclass(frozen=True)
class AppConfig:
    """전체 설정 (settings.yaml에서 로드)"""

    database: DatabaseConfig
    web: WebConfig
    ledger: LedgerConfig


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise SettingsLoadError(f"settings.yaml의 '{name}' 섹션은 매핑이어야 합니다")
    return section


def _typed(section: dict[str, Any], key: str, expected: type, default: Any, where: str) -> Any:
    value = section.get(key, default)
    # bool은 int의 하위 타입이므로 별도 확인
    if expected is int and isinstance(value, bool):
        raise SettingsLoadError(f"settings.yaml의 {where}.{key}는 정수여야 합니다: {value!r}")
    if not isinstance(value, expected):
        raise SettingsLoadError(
            f"settings.yaml의 {where}.{key} 타입이 잘못되었습니다: "
            f"{type(value).__name__} (기대: {expected.__name__})"
        )
    return value


def parse_config(data: dict[str, Any]) -> AppConfig:
    """YAML 매핑에서 AppConfig 생성

    Raises:
        SettingsLoadError: 타입이 잘못되었거나 값 범위 오류
    """
    db = _section(data, "database")
    web = _section(data, "web")
    ledger = _section(data, "ledger")

    db_path = Path(_typed(db, "path", str, str(Paths.DB_FILE), "database"))
    if not db_path.is_absolute() and str(db_path) != ":memory:":
        db_path = PROJECT_ROOT / db_path

    default_limit = _typed(ledger, "default_page_limit", int, Defaults.PAGE_LIMIT, "ledger")
    max_limit = _typed(ledger, "max_page_limit", int, Defaults.MAX_PAGE_LIMIT, "ledger")
    if default_limit < 1 or max_limit < 1:
        raise SettingsLoadError("settings.yaml의 페이지 크기는 1 이상이어야 합니다")
    if default_limit > max_limit:
        raise SettingsLoadError(
            f"default_page_limit({default_limit})가 max_page_limit({max_limit})보다 큽니다"
        )

    return AppConfig(
        database=DatabaseConfig(path=db_path),
        web=WebConfig(
            host=_typed(web, "host", str, Defaults.WEB_HOST, "web"),
            port=_typed(web, "port", int, Defaults.WEB_PORT, "web"),
        ),
        ledger=LedgerConfig(
            reconcile_transfer_counterparts=_typed(
                ledger,
                "reconcile_transfer_counterparts",
                bool,
                Defaults.RECONCILE_TRANSFER_COUNTERPARTS,
                "ledger",
            ),
            default_page_limit=default_limit,
            max_page_limit=max_limit,
        ),
    )


def load_config(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스 (파일이 없으면 기본값)

    Raises:
        SettingsLoadError: 파싱 실패 또는 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        return parse_config({})

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    return parse_config(data)


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_config(settings_path)

    @property
    def config(self) -> AppConfig:
        """전체 설정"""
        assert self._config is not None
        return self._config

    @property
    def db_path(self) -> Path:
        """DB 파일 경로"""
        return self.config.database.path

    @property
    def web_host(self) -> str:
        """Web 바인드 주소"""
        return self.config.web.host

    @property
    def web_port(self) -> int:
        """Web 포트"""
        return self.config.web.port

    @property
    def ledger(self) -> LedgerConfig:
        """Ledger 동작 설정"""
        return self.config.ledger

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)

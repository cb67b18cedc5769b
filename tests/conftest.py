"""
pytest 공통 fixture 정의

임시 설정 파일, Ledger 스키마가 초기화된 임시 DB, 서비스 인스턴스
"""

import tempfile
from pathlib import Path
from typing import AsyncIterator, Iterator

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings
from core.ledger.accounts import AccountService
from core.ledger.query import EntryQueryService
from core.ledger.schema import init_ledger_schema
from core.ledger.service import LedgerService

OWNER = "owner-alice"
OTHER_OWNER = "owner-bob"


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = f"""# 테스트용 settings.yaml
database:
  path: {(temp_dir / "moneybook_test.db").as_posix()}

web:
  host: 0.0.0.0
  port: 18080

ledger:
  reconcile_transfer_counterparts: false
  default_page_limit: 5
  max_page_limit: 20
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture(autouse=True)
def reset_settings() -> Iterator[None]:
    """테스트 간 Settings 싱글턴 격리"""
    Settings.reset()
    yield
    Settings.reset()


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncIterator[SQLiteAdapter]:
    """Ledger 스키마가 초기화된 임시 DB"""
    adapter = SQLiteAdapter(tmp_path / "ledger.db")
    await adapter.connect()
    await init_ledger_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def ledger(db: SQLiteAdapter) -> LedgerService:
    return LedgerService(db)


@pytest.fixture
def accounts(db: SQLiteAdapter) -> AccountService:
    return AccountService(db)


@pytest.fixture
def query(db: SQLiteAdapter) -> EntryQueryService:
    return EntryQueryService(db)

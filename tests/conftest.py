"""
pytest 공통 fixture 정의

임시 디렉토리, settings.yaml, 설정 싱글턴 초기화
"""

import tempfile
from pathlib import Path

import pytest

from core.config.loader import Settings


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = f"""# 테스트용 settings.yaml
environment: development

database:
  path: {(temp_dir / "test.db").as_posix()}

closing:
  max_backdays_allowed: 3
  stop_on_error: false

web:
  host: 0.0.0.0
  port: 9000
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_production(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성 (production 환경)"""
    settings_content = """environment: production

closing:
  max_backdays_allowed: 5
  stop_on_error: true
"""
    settings_path = temp_dir / "settings_prod.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_environment(temp_dir: Path) -> Path:
    """잘못된 environment의 settings.yaml 파일 생성"""
    settings_content = """environment: staging
"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """테스트 간 Settings 싱글턴 격리"""
    Settings.reset()
    yield
    Settings.reset()

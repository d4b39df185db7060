"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from datetime import date
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → erp-financeiro/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


# 이전 마감이 없을 때 사용하는 기준일 (모든 입출금보다 이전)
BEGINNING_OF_TIME: date = date(1900, 1, 1)


class Defaults:
    """기본값 상수"""

    # 마감 허용 기간 (오늘 기준 며칠 전까지 마감 가능)
    MAX_BACKDAYS_ALLOWED: int = 3

    # 재계산 중 실패 시 중단 여부 (False: 계속 진행)
    STOP_ON_ERROR: bool = False

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "erp_financeiro.db"
    DEV_DB: Path = DATA_DIR / "erp_financeiro_dev.db"

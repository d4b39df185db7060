"""
core/constants.py 테스트

모든 경로가 pathlib.Path 타입이고, 상수가 정상적으로 접근 가능한지 확인
"""

from datetime import date
from pathlib import Path

from core.constants import BEGINNING_OF_TIME, PROJECT_ROOT, Defaults, Paths


class TestProjectRoot:
    """PROJECT_ROOT 테스트"""

    def test_project_root_is_path(self) -> None:
        """PROJECT_ROOT가 Path 타입인지 확인"""
        assert isinstance(PROJECT_ROOT, Path)

    def test_project_root_is_absolute(self) -> None:
        """PROJECT_ROOT가 절대 경로인지 확인"""
        assert PROJECT_ROOT.is_absolute()

    def test_project_root_contains_core_directory(self) -> None:
        """PROJECT_ROOT에 core 디렉토리가 있는지 확인"""
        assert (PROJECT_ROOT / "core").exists()


class TestDefaults:
    """Defaults 테스트"""

    def test_closing_defaults(self) -> None:
        """마감 기본값"""
        assert Defaults.MAX_BACKDAYS_ALLOWED == 3
        assert Defaults.STOP_ON_ERROR is False

    def test_beginning_of_time(self) -> None:
        """기준일은 모든 업무 날짜보다 이전"""
        assert BEGINNING_OF_TIME == date(1900, 1, 1)


class TestPaths:
    """Paths 테스트"""

    def test_all_paths_are_path_type(self) -> None:
        """모든 경로가 Path 타입"""
        for name in ("CONFIG_DIR", "DATA_DIR", "LOGS_DIR", "WEB_LOGS_DIR",
                     "SETTINGS_FILE", "PROD_DB", "DEV_DB"):
            assert isinstance(getattr(Paths, name), Path), name

    def test_paths_under_project_root(self) -> None:
        """프로젝트 루트 하위"""
        assert Paths.DATA_DIR.parent == PROJECT_ROOT
        assert Paths.PROD_DB.parent == Paths.DATA_DIR
        assert Paths.SETTINGS_FILE.name == "settings.yaml"

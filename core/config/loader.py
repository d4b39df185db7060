"""
설정 로더

settings.yaml 로드 및 마감 정책/웹 설정 생성
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths
from core.types import Environment


@dataclass(frozen=True)
class ClosingPolicy:
    """마감 업무 정책

    불변 데이터 구조로 실행 중 정책 변경 방지

    Attributes:
        max_backdays_allowed: 오늘 기준 마감 가능한 최대 과거 일수 (경계 포함)
        stop_on_error: 연쇄 재계산 중 실패 시 이후 날짜 처리 중단 여부
    """

    max_backdays_allowed: int = Defaults.MAX_BACKDAYS_ALLOWED
    stop_on_error: bool = Defaults.STOP_ON_ERROR


@dataclass(frozen=True)
class WebConfig:
    """웹 서버 설정"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)"""

    environment: Environment = Environment.DEVELOPMENT
    db_path: Path | None = None
    closing: ClosingPolicy = field(default_factory=ClosingPolicy)
    web: WebConfig = field(default_factory=WebConfig)


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _parse_closing_policy(data: dict[str, Any]) -> ClosingPolicy:
    """closing 섹션 파싱"""
    max_backdays = data.get("max_backdays_allowed", Defaults.MAX_BACKDAYS_ALLOWED)
    stop_on_error = data.get("stop_on_error", Defaults.STOP_ON_ERROR)

    # bool은 int의 하위 타입이므로 별도 제외
    if not isinstance(max_backdays, int) or isinstance(max_backdays, bool):
        raise ConfigLoadError(
            f"closing.max_backdays_allowed는 정수여야 합니다: {max_backdays!r}"
        )
    if max_backdays < 0:
        raise ConfigLoadError(
            f"closing.max_backdays_allowed는 0 이상이어야 합니다: {max_backdays}"
        )
    if not isinstance(stop_on_error, bool):
        raise ConfigLoadError(
            f"closing.stop_on_error는 true/false여야 합니다: {stop_on_error!r}"
        )

    return ClosingPolicy(
        max_backdays_allowed=max_backdays,
        stop_on_error=stop_on_error,
    )


def load_config(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    파일이 없으면 기본값으로 동작.

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        ConfigLoadError: 형식이 잘못되었거나 값이 유효하지 않은 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        return AppConfig()

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        return AppConfig()

    if not isinstance(data, dict):
        raise ConfigLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    env_str = data.get("environment", Environment.DEVELOPMENT.value)
    try:
        environment = Environment(env_str)
    except ValueError as e:
        valid = [env.value for env in Environment]
        raise ConfigLoadError(
            f"유효하지 않은 environment입니다: '{env_str}'. 유효한 값: {valid}"
        ) from e

    database = data.get("database") or {}
    db_path_str = database.get("path")

    web = data.get("web") or {}

    return AppConfig(
        environment=environment,
        db_path=Path(db_path_str) if db_path_str else None,
        closing=_parse_closing_policy(data.get("closing") or {}),
        web=WebConfig(
            host=web.get("host", Defaults.WEB_HOST),
            port=int(web.get("port", Defaults.WEB_PORT)),
        ),
    )


def get_db_path(config: AppConfig) -> Path:
    """환경에 따른 DB 경로 반환

    database.path가 지정되어 있으면 우선 사용.

    Args:
        config: AppConfig 인스턴스

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if config.db_path is not None:
        return config.db_path
    if config.environment == Environment.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEV_DB


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
    def environment(self) -> Environment:
        """현재 실행 환경"""
        assert self._config is not None
        return self._config.environment

    @property
    def closing_policy(self) -> ClosingPolicy:
        """마감 정책"""
        assert self._config is not None
        return self._config.closing

    @property
    def web(self) -> WebConfig:
        """웹 서버 설정"""
        assert self._config is not None
        return self._config.web

    @property
    def db_path(self) -> Path:
        """현재 환경의 DB 경로"""
        assert self._config is not None
        return get_db_path(self._config)

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

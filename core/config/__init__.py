"""
설정 패키지

settings.yaml 로드 및 마감 정책 제공
"""

from core.config.loader import (
    AppConfig,
    ClosingPolicy,
    ConfigLoadError,
    Settings,
    WebConfig,
    get_settings,
    load_config,
)

__all__ = [
    "AppConfig",
    "ClosingPolicy",
    "ConfigLoadError",
    "Settings",
    "WebConfig",
    "get_settings",
    "load_config",
]

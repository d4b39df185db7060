"""
공통 유틸리티
"""

from core.utils.timezone import BRT, now_brt, today_brt

__all__ = [
    "BRT",
    "now_brt",
    "today_brt",
]

"""
업무 기준일 (브라질리아 시간)

마감 허용 기간은 서버 시간대와 무관하게 BRT 날짜로 판단.
"""

from datetime import date, datetime, timedelta, timezone

# UTC-3 고정 (2019년 이후 서머타임 없음)
BRT = timezone(timedelta(hours=-3))


def now_brt() -> datetime:
    return datetime.now(BRT)


def today_brt() -> date:
    """BRT 기준 오늘 날짜 (오케스트레이터 기본 시계)"""
    return now_brt().date()

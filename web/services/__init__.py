"""
Web 서비스 패키지

조회 로직 처리
"""

from web.services.closing_query_service import ClosingQueryService

__all__ = [
    "ClosingQueryService",
]

"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class Environment(str, Enum):
    """실행 환경 (운영 / 개발)"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class MovementKind(str, Enum):
    """은행 입출금 유형

    DB에 저장되는 값은 기존 데이터와 호환되도록 포르투갈어 코드 사용.
    """

    INFLOW = "ENTRADA"  # 입금
    OUTFLOW = "SAIDA"  # 출금
    TRANSFER_OUT = "TRANSFERENCIA_ENVIADA"  # 이체 송금
    TRANSFER_IN = "TRANSFERENCIA_RECEBIDA"  # 이체 수취

    @property
    def is_inflow(self) -> bool:
        """잔액 증가 유형 여부"""
        return self in (MovementKind.INFLOW, MovementKind.TRANSFER_IN)

    @property
    def is_transfer(self) -> bool:
        """이체 구간 여부"""
        return self in (MovementKind.TRANSFER_OUT, MovementKind.TRANSFER_IN)


class ClosingViolation(str, Enum):
    """마감/재개 검증 실패 사유"""

    FUTURE_DATE = "FUTURE_DATE"  # 미래 날짜
    OUTSIDE_WINDOW = "OUTSIDE_WINDOW"  # 허용 기간 초과
    OUT_OF_ORDER = "OUT_OF_ORDER"  # 이후 날짜가 이미 마감됨
    DUPLICATE_DATE = "DUPLICATE_DATE"  # 이미 마감된 날짜
    NO_ACCOUNTS = "NO_ACCOUNTS"  # 활성 계좌 없음
    NOT_CLOSED = "NOT_CLOSED"  # 재개할 마감 없음
    PERIOD_LOCKED = "PERIOD_LOCKED"  # 마감된 기간에 입출금 변경
    INVALID_MOVEMENT = "INVALID_MOVEMENT"  # 잘못된 입출금 요청

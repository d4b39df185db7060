"""
마감 엔진 예외

- ClosingValidationError: 검증 실패 (상태 변경 없음)
- DataAccessError: 저장소 읽기/쓰기 실패
- CascadeRecalculationError: 연쇄 재계산 도중 실패
- NotFoundError: 대상 계좌/입출금/이체 없음
"""

from datetime import date

from core.types import ClosingViolation


class ClosingError(Exception):
    """마감 엔진 예외 기본 클래스"""

    pass


class ClosingValidationError(ClosingError):
    """마감/재개/입출금 요청 검증 실패

    사용자에게 그대로 안내 가능한 메시지를 포함.
    이 예외가 발생하면 어떤 상태도 변경되지 않음.

    Args:
        violation: 위반한 규칙 코드
        message: 사용자 안내 메시지
    """

    def __init__(self, violation: ClosingViolation, message: str):
        super().__init__(message)
        self.violation = violation
        self.message = message


class PeriodLockedError(ClosingValidationError):
    """마감된 기간의 입출금 변경 시도"""

    def __init__(self, account_id: str, movement_date: date, last_closed: date):
        super().__init__(
            ClosingViolation.PERIOD_LOCKED,
            f"마감일({last_closed.isoformat()}) 이전 또는 당일의 입출금은 "
            f"변경할 수 없습니다: account={account_id}, date={movement_date.isoformat()}",
        )
        self.account_id = account_id
        self.movement_date = movement_date
        self.last_closed = last_closed


class NotFoundError(ClosingError):
    """조회 대상 없음

    Args:
        entity: 대상 종류 (account, movement, transfer)
        key: 대상 ID
    """

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class DataAccessError(ClosingError):
    """저장소 접근 실패

    Args:
        operation: 실패한 저장소 작업 이름
        cause: 원인 예외
    """

    def __init__(self, operation: str, cause: BaseException | None = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"데이터 접근 실패 ({operation}){detail}")
        self.operation = operation
        self.cause = cause


class CascadeRecalculationError(ClosingError):
    """연쇄 재계산 실패

    실패 이전에 처리된 날짜는 갱신된 상태로 유지됨.
    실패한 날짜부터 수동으로 재시도할 수 있도록 위치 정보를 포함.

    Args:
        failed_date: 실패한 마감일
        account_id: 실패한 계좌 (날짜 단위 실패면 None)
        recalculated_dates: 실패 전까지 재계산 완료된 날짜
        cause: 원인 예외
    """

    def __init__(
        self,
        failed_date: date,
        account_id: str | None,
        recalculated_dates: list[date],
        cause: BaseException | None = None,
    ):
        where = f"{failed_date.isoformat()}"
        if account_id:
            where += f" / account={account_id}"
        super().__init__(f"연쇄 재계산 실패 ({where}): {cause}")
        self.failed_date = failed_date
        self.account_id = account_id
        self.recalculated_dates = recalculated_dates
        self.cause = cause

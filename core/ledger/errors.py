"""
Ledger 예외 정의

모든 Ledger 연산은 실패 시 트랜잭션 전체를 롤백한 뒤 아래 예외를 전파한다.
"""


class LedgerError(Exception):
    """Ledger 예외 기본 클래스"""

    pass


class ValidationError(LedgerError):
    """입력 검증 실패 (참조 누락, 동일 계정 이체, 알 수 없는 종류 등)"""

    pass


class NotFoundError(LedgerError):
    """엔티티가 없거나 호출자 소유가 아님"""

    pass


class TransactionFailure(LedgerError):
    """저장소 트랜잭션 실패 (충돌, I/O 오류)

    발생 시점에 트랜잭션은 이미 롤백된 상태.
    """

    pass


class InvalidEntryKind(LedgerError):
    """Delta 계산기 내부 불변식 위반

    검증을 통과한 Entry에서는 발생하지 않아야 함.
    """

    pass

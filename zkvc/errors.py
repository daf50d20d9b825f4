"""
zkvc 예외 계층
==============

대수적 전제조건 위반은 모두 즉시 예외로 보고한다 (fail fast).
검증 실패는 예외가 아니다: verify* 함수는 단순히 False를 반환한다.

  ZkvcError (ValueError)
  ├── DivisionByZeroError   : 영 다항식으로 나눔, 보간 점 중복
  ├── LengthMismatchError   : 점/값 개수 불일치, 벡터 길이 ≠ degree
  ├── DegreeExceededError   : 다항식/도메인이 SRS가 지원하는 크기를 초과
  ├── InexactDivisionError  : 열기 증명의 나머지가 0이 아님
  ├── InvalidIndexError     : 빈/중복/범위 밖 인덱스
  ├── SerializationError    : 잘못된 바이트 인코딩
  └── UnknownCurveError     : 등록되지 않은 곡선 이름

  NotReadyError (RuntimeError) : setup/key_gen 이전에 호출
  SetupError (RuntimeError)    : setup/key_gen 중복 호출
"""


class ZkvcError(ValueError):
    """모든 입력/전제조건 오류의 기반 클래스."""


class DivisionByZeroError(ZkvcError, ZeroDivisionError):
    pass


class LengthMismatchError(ZkvcError):
    pass


class DegreeExceededError(ZkvcError):
    pass


class InexactDivisionError(ZkvcError):
    pass


class InvalidIndexError(ZkvcError):
    pass


class SerializationError(ZkvcError):
    pass


class UnknownCurveError(ZkvcError):
    pass


class NotReadyError(RuntimeError):
    """Uninitialized 상태의 스킴에서 commit/open/verify를 호출했다."""


class SetupError(RuntimeError):
    """이미 Ready 상태인 스킴에 setup/key_gen을 다시 호출했다."""

"""
zkvc 설정
=========

환경 변수에서 기본값을 읽는다. 명시적 인자가 주어지지 않으면
KZG, ASVC, key_gen, KeyStore가 이 값을 사용한다.

  ZKVC_CURVE          사용할 곡선 (bn128 | bn128_optimized | bls12_381)
  ZKVC_WORKERS        키 생성 병렬 프로세스 수 (1이면 직렬)
  ZKVC_KEYSTORE_PATH  TinyDB 파일 경로 (비어 있으면 메모리 저장소)
  ZKVC_LOG_LEVEL      로그 레벨 (DEBUG, INFO, WARNING, ...)
"""

import logging
import os

DEFAULT_CURVE = os.getenv("ZKVC_CURVE", "bn128")
DEFAULT_WORKERS = int(os.getenv("ZKVC_WORKERS", 1))
DEFAULT_KEYSTORE_PATH = os.getenv("ZKVC_KEYSTORE_PATH", "")
DEFAULT_LOG_LEVEL = os.getenv("ZKVC_LOG_LEVEL", "WARNING")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Config:
    """설정 클래스"""

    def __init__(self):
        self.curve = DEFAULT_CURVE
        self.workers = DEFAULT_WORKERS
        self.keystore_path = DEFAULT_KEYSTORE_PATH or None
        self.log_level = DEFAULT_LOG_LEVEL

    def __repr__(self):
        return (
            f"Config(curve={self.curve!r}, workers={self.workers}, "
            f"keystore_path={self.keystore_path!r}, log_level={self.log_level!r})"
        )


def configure_logging(level=None):
    """zkvc 로거에 기본 핸들러를 설치한다.

    Args:
        level: 로그 레벨 이름 또는 숫자. None이면 config.log_level.
    """
    if level is None:
        level = config.log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("zkvc").setLevel(level)


# 전역 설정 인스턴스
config = Config()

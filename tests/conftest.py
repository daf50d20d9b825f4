import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkvc.field import FR, get_curve
from zkvc.kzg import KZG
from zkvc.asvc import ASVC


# ── 테스트 상수 ──
# 대부분의 테스트는 사영 좌표 백엔드로 돌린다 (페어링이 훨씬 빠름)
FAST_CURVE = "bn128_optimized"

TOXIC_TAU = 8723598237
KZG_DEGREE = 8


@pytest.fixture(scope="session")
def fast_curve():
    return get_curve(FAST_CURVE)


@pytest.fixture(scope="session")
def kzg_small():
    """KZG(degree=8), setup 완료."""
    kzg = KZG(degree=KZG_DEGREE, curve=FAST_CURVE)
    kzg.setup(FR(TOXIC_TAU))
    return kzg


@pytest.fixture(scope="session")
def asvc4():
    """ASVC(degree=4), key_gen 완료."""
    asvc = ASVC(degree=4, curve=FAST_CURVE)
    asvc.key_gen(FR(TOXIC_TAU))
    return asvc


@pytest.fixture(scope="session")
def asvc8():
    """ASVC(degree=8), key_gen 완료."""
    asvc = ASVC(degree=8, curve=FAST_CURVE)
    asvc.key_gen(FR(TOXIC_TAU + 1))
    return asvc

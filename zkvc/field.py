"""
zkvc 기반 모듈: 스칼라 필드, 타원곡선 그룹, 페어링
=====================================================

커밋먼트 스킴이 필요로 하는 대수적 능력(capability)을 한 곳에 모은다.
KZG와 ASVC는 특정 곡선 연산을 직접 호출하지 않고 Curve 객체를 통해서만
필드/그룹/페어링을 사용하므로, 같은 코드가 여러 곡선에서 동작한다.

**Curve 객체가 제공하는 것**:
  - FR: 스칼라 필드 (소수 위수 r): +, -, *, /, ** 지원
  - G1, G2: 그룹 생성자, Z1, Z2: 항등원
  - ec_add / ec_neg / ec_sub / ec_mul / ec_eq / lincomb
  - ec_pairing(Q ∈ G2, P ∈ G1) → GT
  - two_adicity s, two_adic_root: r - 1 = 2^s · t 에서 위수 2^s의 원시 단위근

**등록된 곡선** (py_ecc 백엔드):
  - "bn128":            py_ecc.bn128 (아핀 좌표, 항등원 None)
  - "bn128_optimized":  py_ecc.optimized_bn128 (사영 좌표)
  - "bls12_381":        py_ecc.optimized_bls12_381 (사영 좌표)

사용 예시:
    >>> from zkvc.field import get_curve, get_root_of_unity
    >>> curve = get_curve("bn128")
    >>> P = curve.ec_mul(curve.G1, curve.FR(5))  # 5·G1
    >>> omega = get_root_of_unity(8, curve)
    >>> omega ** 8 == curve.FR(1)  # True
"""

from py_ecc import bn128, optimized_bn128, optimized_bls12_381
from py_ecc.fields import bn128_FQ as FQ
from py_ecc.fields import (
    bls12_381_FQ,
    bn128_FQ2,
    optimized_bls12_381_FQ,
    optimized_bls12_381_FQ2,
    optimized_bn128_FQ,
    optimized_bn128_FQ2,
)

from zkvc.config import config
from zkvc.errors import DegreeExceededError, UnknownCurveError, ZkvcError
from zkvc.polynomial import next_power_of_2


# ─────────────────────────────────────────────────────────────────────
# 스칼라 필드
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    bn128.curve_order (≈ 2^254) 위의 모듈러 산술.

    예시:
        >>> FR(3) * FR(3)   # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


class BLS12381FR(bls12_381_FQ):
    """BLS12-381 스칼라 필드 위의 유한체 원소 (r ≈ 2^255)."""
    field_modulus = optimized_bls12_381.curve_order


CURVE_ORDER = bn128.curve_order

G1 = bn128.G1
G2 = bn128.G2
Z1 = None


# ─────────────────────────────────────────────────────────────────────
# Curve: 대수적 능력 집합
# ─────────────────────────────────────────────────────────────────────

class Curve:
    """하나의 페어링 친화 곡선에 대한 필드/그룹/페어링 연산 묶음.

    속성:
        name: 레지스트리 이름
        FR: 스칼라 필드 클래스
        G1, G2: 생성자
        Z1, Z2: 항등원 (bn128은 None, 최적화 백엔드는 z=0인 사영 좌표)
        curve_order: 스칼라 필드 위수 r
        two_adicity: r - 1을 나누는 2의 최대 지수 s
        two_adic_root: 위수가 정확히 2^s인 원시 단위근
    """

    def __init__(self, name, backend, scalar_field, base_field, base_field2,
                 multiplicative_generator, projective):
        self.name = name
        self._backend = backend
        self.FR = scalar_field
        self.FQ = base_field
        self.FQ2 = base_field2
        self.projective = projective

        self.G1 = backend.G1
        self.G2 = backend.G2
        self.Z1 = backend.Z1
        self.Z2 = backend.Z2
        self.curve_order = backend.curve_order

        # r - 1 = 2^s · t (t 홀수)
        r_minus_1 = self.curve_order - 1
        self.two_adicity = (r_minus_1 & -r_minus_1).bit_length() - 1
        # g가 이차 비잉여이면 g^t의 위수는 정확히 2^s
        self.two_adic_root = (
            self.FR(multiplicative_generator) ** (r_minus_1 >> self.two_adicity)
        )

        self.scalar_bytes = (self.curve_order.bit_length() + 7) // 8
        self.base_bytes = (base_field.field_modulus.bit_length() + 7) // 8

    def __repr__(self):
        return f"Curve({self.name!r})"

    def __reduce__(self):
        # 프로세스 풀로 넘길 때는 이름만 보내고 레지스트리에서 복원한다
        return (get_curve, (self.name,))

    # ── 그룹 연산 ──

    def is_identity(self, point):
        if point is None:
            return True
        return self.projective and point[-1] == point[-1].zero()

    def ec_mul(self, point, scalar):
        """scalar · point. scalar는 int 또는 FR 원소."""
        if self.is_identity(point):
            return point
        return self._backend.multiply(point, int(scalar) % self.curve_order)

    def ec_add(self, p1, p2):
        return self._backend.add(p1, p2)

    def ec_neg(self, point):
        return self._backend.neg(point)

    def ec_sub(self, p1, p2):
        return self._backend.add(p1, self._backend.neg(p2))

    def ec_eq(self, p1, p2):
        if self.is_identity(p1) or self.is_identity(p2):
            return self.is_identity(p1) and self.is_identity(p2)
        return self._backend.eq(p1, p2)

    def lincomb(self, points, scalars, identity):
        """Σᵢ scalars[i] · points[i].

        0인 스칼라는 건너뛴다. zip 의미론: 짧은 쪽 길이까지만 합산한다.
        """
        result = identity
        for point, scalar in zip(points, scalars):
            if int(scalar) % self.curve_order == 0:
                continue
            result = self._backend.add(result, self.ec_mul(point, scalar))
        return result

    def ec_pairing(self, g2_point, g1_point):
        """쌍선형 페어링 e(P, Q) → GT.

        주의:
            py_ecc의 pairing 인자 순서는 (G2, G1)이다.
        """
        return self._backend.pairing(g2_point, g1_point)

    # ── 좌표 변환 (직렬화용) ──

    def to_affine(self, point):
        """아핀 좌표 (x, y)를 반환한다. 항등원이면 None."""
        if self.is_identity(point):
            return None
        if self.projective:
            return self._backend.normalize(point)
        return point

    def from_affine(self, x, y):
        if self.projective:
            return (x, y, type(x).one())
        return (x, y)

    def is_on_g1(self, point):
        return self._backend.is_on_curve(point, self._backend.b)

    def is_on_g2(self, point):
        return self._backend.is_on_curve(point, self._backend.b2)


BN128 = Curve(
    "bn128", bn128, FR, FQ, bn128_FQ2,
    multiplicative_generator=5, projective=False,
)
BN128_OPTIMIZED = Curve(
    "bn128_optimized", optimized_bn128, FR, optimized_bn128_FQ, optimized_bn128_FQ2,
    multiplicative_generator=5, projective=True,
)
BLS12_381 = Curve(
    "bls12_381", optimized_bls12_381, BLS12381FR,
    optimized_bls12_381_FQ, optimized_bls12_381_FQ2,
    multiplicative_generator=7, projective=True,
)

CURVES = {c.name: c for c in (BN128, BN128_OPTIMIZED, BLS12_381)}


def get_curve(curve=None):
    """이름 또는 Curve 객체를 Curve로 해석한다.

    Args:
        curve: Curve 객체, 곡선 이름, 또는 None (config.curve 사용)

    Raises:
        UnknownCurveError: 등록되지 않은 이름
    """
    if isinstance(curve, Curve):
        return curve
    if curve is None:
        curve = config.curve
    try:
        return CURVES[curve]
    except KeyError:
        raise UnknownCurveError(
            f"알 수 없는 곡선: {curve!r} (지원: {', '.join(sorted(CURVES))})"
        ) from None


# ─────────────────────────────────────────────────────────────────────
# 단위근 (Roots of Unity)
# ─────────────────────────────────────────────────────────────────────

def get_root_of_unity(size, curve=None):
    """위수가 정확히 n인 원시 단위근 ω를 반환한다 (n = size 이상의 2의 거듭제곱).

    two_adic_root (위수 2^s)를 s - log2(n)번 제곱한다.
    제곱 횟수가 하나라도 어긋나면 위수가 2배/절반인 근이 나오고,
    그 위에서 만든 소거 다항식과 Lagrange 기저가 모두 틀어진다.

    Args:
        size: 목표 부분군 크기 (2의 거듭제곱이 아니면 올림)
        curve: Curve 또는 곡선 이름

    Returns:
        FR: ω (ω^n = 1, ω^(n/2) ≠ 1)

    Raises:
        ZkvcError: size < 1
        DegreeExceededError: n > 2^s

    예시:
        >>> omega = get_root_of_unity(4)
        >>> omega ** 4 == FR(1)  # True
        >>> omega ** 2 != FR(1)  # True
    """
    curve = get_curve(curve)
    if size < 1:
        raise ZkvcError(f"단위근 크기는 1 이상이어야 합니다: {size}")
    log_n = next_power_of_2(size).bit_length() - 1
    if log_n > curve.two_adicity:
        raise DegreeExceededError(
            f"크기 {size}는 2^{curve.two_adicity}를 초과합니다 ({curve.name})"
        )
    omega = curve.two_adic_root
    for _ in range(curve.two_adicity - log_n):
        omega = omega * omega
    return omega


def get_roots_of_unity(n, curve=None):
    """평가 도메인 [1, ω, ω², ..., ω^(n-1)]을 반환한다.

    예시:
        >>> roots = get_roots_of_unity(4)
        >>> roots[0] == FR(1)  # True
    """
    curve = get_curve(curve)
    omega = get_root_of_unity(n, curve)
    roots = []
    current = curve.FR(1)
    for _ in range(n):
        roots.append(current)
        current = current * omega
    return roots

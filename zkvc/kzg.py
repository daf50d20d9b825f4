"""
KZG 다항식 커밋먼트 스킴
=========================

Kate-Zaverucha-Goldberg (KZG) 커밋먼트.

**상태**:
  Uninitialized --setup(τ)--> Ready
  Ready 상태에서만 commit / open / verify / multi_open / verify_multi 가능.
  KZG.from_srs(srs)는 곧바로 Ready 인스턴스를 만든다.

**단일 점 열기 (Opening Proof)**:
  "p(z) = y" 증명:
  1. 몫 q(x) = (p(x) - y) / (x - z)   (p(z) = y 이므로 나누어떨어짐)
  2. 증명 π = [q(τ)]₁
  3. 검증: e(π, [τ]₂ - z·g2) == e(C - y·g1, g2)

**배치 열기 (Multi-point Opening)**:
  점 집합 S에 대해
  1. Z(x) = ∏_{z∈S} (x - z),  I(x) = S 위에서 p와 일치하는 보간 다항식
  2. 증명 π = [(p(x) - I(x)) / Z(x)]₁
  3. 검증: e(π, [Z(τ)]₂) == e(C - [I(τ)]₁, g2)

사용 예시:
    >>> kzg = KZG(degree=8)
    >>> kzg.setup(secret)
    >>> C = kzg.commit(poly)
    >>> proof = kzg.open(poly, FR(7))
    >>> kzg.verify(FR(7), poly_eval(poly, FR(7)), C, proof)  # True
"""

import logging

from zkvc.errors import InexactDivisionError, NotReadyError, SetupError
from zkvc.field import get_curve
from zkvc.polynomial import (
    lagrange_interpolate,
    poly_divmod,
    poly_eval,
    poly_sub,
    vanishing_poly,
)
from zkvc.srs import SRS

logger = logging.getLogger(__name__)


class KZG:
    """단일 다항식 커밋먼트 스킴.

    속성:
        degree: 지원하는 최대 다항식 차수
        curve: Curve 객체
        srs: SRS (setup 이전에는 None)
    """

    def __init__(self, degree, curve=None, g1=None, g2=None):
        self.degree = degree
        self.curve = get_curve(curve)
        self.g1 = self.curve.G1 if g1 is None else g1
        self.g2 = self.curve.G2 if g2 is None else g2
        self.srs = None

    @classmethod
    def from_srs(cls, srs):
        """이미 만들어진 (예: 세레모니에서 로드한) SRS로 Ready 인스턴스를 만든다."""
        kzg = cls(srs.max_degree, srs.curve, srs.g1, srs.g2)
        kzg.srs = srs
        return kzg

    @property
    def ready(self):
        return self.srs is not None

    def setup(self, secret):
        """신뢰 설정: 길이 degree+1의 G1/G2 SRS와 g2_tau를 만든다.

        한 번만 호출할 수 있다. secret은 저장하지 않는다.

        Raises:
            SetupError: 이미 Ready 상태
        """
        if self.srs is not None:
            raise SetupError("SRS가 이미 생성되었습니다")
        self.srs = SRS.from_secret(secret, self.degree, self.curve, self.g1, self.g2)
        logger.info("KZG setup 완료: curve=%s degree=%d", self.curve.name, self.degree)

    def _require_ready(self):
        if self.srs is None:
            raise NotReadyError("KZG.setup()을 먼저 호출해야 합니다")

    def _to_field(self, value):
        return value if isinstance(value, self.curve.FR) else self.curve.FR(value)

    def commit(self, poly):
        """C = Σᵢ crs_g1[i] · cᵢ = [p(τ)]₁.

        Raises:
            DegreeExceededError: 다항식 차수 > degree
        """
        self._require_ready()
        return self.srs.commit_g1([self._to_field(c) for c in poly])

    def open(self, poly, point):
        """p(point)에 대한 열기 증명 π = [(p(x) - p(z)) / (x - z)]₁.

        p(x) - y 에서는 상수항만 바뀐다.

        Raises:
            InexactDivisionError: 나머지가 0이 아님 (필드 연산 오류를 의미)
        """
        self._require_ready()
        FR = self.curve.FR
        point = self._to_field(point)
        coeffs = [self._to_field(c) for c in poly] or [FR(0)]

        value = poly_eval(coeffs, point)
        numerator = list(coeffs)
        numerator[0] = numerator[0] - value

        quotient, remainder = poly_divmod(numerator, [-point, FR(1)])
        if any(c != 0 for c in remainder):
            raise InexactDivisionError("열기 증명 생성 실패: 나머지가 0이 아닙니다")
        return self.srs.commit_g1(quotient)

    def verify(self, point, value, commitment, proof):
        """e(π, [τ]₂ - z·g2) == e(C - y·g1, g2) 를 확인한다.

        잘못된 증명은 예외 없이 False.
        """
        self._require_ready()
        curve = self.curve
        srs = self.srs
        point = self._to_field(point)
        value = self._to_field(value)

        tau_minus_z = curve.ec_sub(srs.g2_tau, curve.ec_mul(srs.g2, point))
        c_minus_y = curve.ec_sub(commitment, curve.ec_mul(srs.g1, value))

        lhs = curve.ec_pairing(tau_minus_z, proof)
        rhs = curve.ec_pairing(srs.g2, c_minus_y)
        result = lhs == rhs
        logger.debug("KZG verify: %s", result)
        return result

    def multi_open(self, poly, points):
        """점 집합에 대한 단일 배치 증명 π = [(p(x) - I(x)) / Z(x)]₁.

        Args:
            poly: 커밋된 다항식
            points: 서로 다른 평가 점 리스트 (|points| ≤ degree)
        """
        self._require_ready()
        points = [self._to_field(z) for z in points]
        coeffs = [self._to_field(c) for c in poly] or [self.curve.FR(0)]

        z_poly = vanishing_poly(points, self.curve.FR)
        values = [poly_eval(coeffs, z) for z in points]
        i_poly = lagrange_interpolate(points, values)

        quotient, remainder = poly_divmod(poly_sub(coeffs, i_poly), z_poly)
        if any(c != 0 for c in remainder):
            raise InexactDivisionError("배치 열기 증명 생성 실패: 나머지가 0이 아닙니다")
        return self.srs.commit_g1(quotient)

    def verify_multi(self, points, values, commitment, proof):
        """e(π, [Z(τ)]₂) == e(C - [I(τ)]₁, g2) 를 확인한다.

        Z와 I는 공개된 points/values에서 다시 계산한다.

        Raises:
            LengthMismatchError: len(points) != len(values)
        """
        self._require_ready()
        curve = self.curve
        points = [self._to_field(z) for z in points]
        values = [self._to_field(v) for v in values]

        i_poly = lagrange_interpolate(points, values)
        z_commitment = self.srs.commit_g2(vanishing_poly(points, curve.FR))
        i_commitment = self.srs.commit_g1(i_poly)

        lhs = curve.ec_pairing(z_commitment, proof)
        rhs = curve.ec_pairing(self.srs.g2, curve.ec_sub(commitment, i_commitment))
        result = lhs == rhs
        logger.debug("KZG verify_multi (%d points): %s", len(points), result)
        return result

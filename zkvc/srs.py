"""
Structured Reference String (SRS / CRS)
=======================================

KZG와 ASVC가 공유하는 공개 파라미터를 생성한다.

  SRS = {
      G1 powers: [g1, τ·g1, τ²·g1, ..., τ^d·g1]     (길이 d+1)
      G2 powers: [g2, τ·g2, τ²·g2, ..., τ^d·g2]     (길이 d+1)
      g2_tau:    τ·g2                               (단일 점 검증용)
  }

G2 쪽도 d+1개를 만드는 이유는 ASVC/배치 검증이 소거 다항식 Z(x)를
G2에서 커밋해야 하기 때문이다.

**보안**:
  τ ("toxic waste")를 아는 사람은 임의의 커밋먼트와 증명을 위조할 수 있다.
  SRS 객체는 τ를 저장하지 않으며, 로그에도 남기지 않는다.
  실제 시스템에서는 MPC 세레모니 결과를 from_secret 대신 직접 로드해야 한다.

사용 예시:
    >>> srs = SRS.generate(max_degree=16, seed=42)
    >>> len(srs.g1_powers)  # 17
"""

import hashlib
import logging
import secrets

from zkvc.errors import DegreeExceededError
from zkvc.field import get_curve
from zkvc.polynomial import poly_trim

logger = logging.getLogger(__name__)


class SRS:
    """Structured Reference String.

    생성 후에는 읽기 전용으로 다룬다. 여러 호출자가 동시에 공유해도 된다.

    속성:
        g1_powers: [g1, τ·g1, ..., τ^d·g1]
        g2_powers: [g2, τ·g2, ..., τ^d·g2]
        g2_tau: τ·g2
        max_degree: 지원하는 최대 다항식 차수 d
        curve: Curve 객체
    """

    def __init__(self, g1_powers, g2_powers, g2_tau, max_degree, curve=None):
        self.g1_powers = g1_powers
        self.g2_powers = g2_powers
        self.g2_tau = g2_tau
        self.max_degree = max_degree
        self.curve = get_curve(curve)

    def __repr__(self):
        return f"SRS(max_degree={self.max_degree}, curve={self.curve.name!r})"

    @property
    def g1(self):
        """G1 생성자 (τ^0·g1)."""
        return self.g1_powers[0]

    @property
    def g2(self):
        """G2 생성자 (τ^0·g2)."""
        return self.g2_powers[0]

    @classmethod
    def from_secret(cls, secret, max_degree, curve=None, g1=None, g2=None):
        """비밀 스칼라 τ로 SRS를 만든다.

        τ는 이 함수 밖으로 나가지 않는다. 호출자도 반환 후 τ를 폐기해야 한다.

        Args:
            secret: τ (FR 원소 또는 정수)
            max_degree: 최대 다항식 차수 d (≥ 0)
            curve: Curve 또는 곡선 이름
            g1, g2: 생성자 (기본값: 곡선의 표준 생성자)

        Returns:
            SRS
        """
        curve = get_curve(curve)
        if max_degree < 0:
            raise ValueError(f"max_degree는 0 이상이어야 합니다: {max_degree}")
        g1 = curve.G1 if g1 is None else g1
        g2 = curve.G2 if g2 is None else g2
        tau = curve.FR(secret)

        g1_powers = []
        g2_powers = []
        tau_power = curve.FR(1)
        for _ in range(max_degree + 1):
            g1_powers.append(curve.ec_mul(g1, tau_power))
            g2_powers.append(curve.ec_mul(g2, tau_power))
            tau_power = tau_power * tau

        if max_degree >= 1:
            g2_tau = g2_powers[1]
        else:
            g2_tau = curve.ec_mul(g2, tau)
        del tau, tau_power

        logger.info("SRS 생성 완료: curve=%s max_degree=%d", curve.name, max_degree)
        return cls(g1_powers, g2_powers, g2_tau, max_degree, curve)

    @classmethod
    def generate(cls, max_degree, seed=None, curve=None):
        """시드에서 τ를 유도하여 SRS를 만든다 (테스트/교육용).

        seed가 주어지면 sha256(seed) mod r 를 τ로 쓰므로 결정론적이다.
        seed가 None이면 secrets 모듈로 무작위 τ를 뽑는다.

        예시:
            >>> srs1 = SRS.generate(max_degree=4, seed=99)
            >>> srs2 = SRS.generate(max_degree=4, seed=99)
            >>> srs1.g1_powers == srs2.g1_powers  # True
        """
        curve = get_curve(curve)
        if seed is not None:
            h = hashlib.sha256(str(seed).encode()).digest()
            tau_int = int.from_bytes(h, "big") % curve.curve_order
        else:
            tau_int = secrets.randbelow(curve.curve_order - 1) + 1
        return cls.from_secret(tau_int, max_degree, curve)

    # ── 커밋 ──

    def commit_g1(self, poly):
        """[p(τ)]₁ = Σᵢ cᵢ · g1_powers[i].

        Raises:
            DegreeExceededError: 다항식 차수 > max_degree
        """
        coeffs = self._check_degree(poly)
        return self.curve.lincomb(self.g1_powers, coeffs, self.curve.Z1)

    def commit_g2(self, poly):
        """[p(τ)]₂ = Σᵢ cᵢ · g2_powers[i]."""
        coeffs = self._check_degree(poly)
        return self.curve.lincomb(self.g2_powers, coeffs, self.curve.Z2)

    def _check_degree(self, poly):
        coeffs = poly_trim(poly)
        if len(coeffs) > self.max_degree + 1:
            raise DegreeExceededError(
                f"다항식 차수 {len(coeffs) - 1}가 SRS 최대 차수 {self.max_degree}를 초과합니다"
            )
        return coeffs

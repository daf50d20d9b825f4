"""
Aggregatable Subvector Commitment (ASVC)
========================================

KZG 위에 세운 벡터 커밋먼트 (Tomescu et al., https://eprint.iacr.org/2020/527).
변수 이름은 논문 표기를 따른다.

**도메인**:
  벡터 길이 n은 2의 거듭제곱이고, i번째 원소는 n차 단위근 ωⁱ에 대응한다.
  벡터 v는 L(ωⁱ) = vᵢ 인 다항식 L(x)로 인코딩된다.

**키 생성** (인덱스 i마다 독립):
  A(x)   = x^n - 1                        (도메인 전체의 소거 다항식)
  aᵢ(x)  = A(x) / (x - ωⁱ)
  lᵢ(x)  = aᵢ(x) · ωⁱ / n                 (A'(ωⁱ) = n·ω^(-i) 이므로 lᵢ(ωⁱ) = 1)
  uᵢ(x)  = (lᵢ(x) - 1) / (x - ωⁱ)         (lᵢ의 자기 점 열기 몫)
  → [aᵢ]₁, [lᵢ]₁, [uᵢ]₁ 와 [A]₁ = crs_g1[n] - crs_g1[0]

**커밋 / 증명 / 검증**:
  C = Σᵢ vᵢ · [lᵢ]₁
  인덱스 집합 I에 대해 D(x) = ∏_{i∈I} (x - ωⁱ), r(x) = I 위에서 L과 일치하는 보간
  π = [L(x) div D(x)]₁       (L = q·D + r 이므로 몫 q가 곧 증명)
  검증: e(π, [D]₂) == e(C - [r]₁, g2)

**집계**:
  1/D(x) = Σ_k c_k / (x - ω^{i_k}),  c_k = 1 / D'(ω^{i_k})
  π_I = Σ_k c_k · π_{i_k}

인덱스는 항상 ω^{index}로 매핑한다. 루프 위치를 쓰면 정렬되지 않은 인덱스
집합(예: [3, 0, 2])에서 조용히 검증이 실패한다.

업데이트 키 (aᵢ, uᵢ 커밋먼트)는 생성만 하고, 갱신 프로토콜은 구현하지 않는다.

사용 예시:
    >>> asvc = ASVC(degree=4)
    >>> asvc.key_gen(secret)
    >>> C = asvc.vector_commit([3, 1, 4, 1])
    >>> pi = asvc.prove_position([0, 2], [3, 1, 4, 1])
    >>> asvc.verify_position(C, [0, 2], [3, 4], pi)  # True
"""

import logging
from concurrent.futures import ProcessPoolExecutor

from zkvc.config import config
from zkvc.errors import (
    InvalidIndexError,
    LengthMismatchError,
    NotReadyError,
    SetupError,
    ZkvcError,
)
from zkvc.field import get_curve, get_root_of_unity
from zkvc.polynomial import (
    ifft,
    is_power_of_2,
    lagrange_interpolate,
    poly_derivative,
    poly_div,
    poly_eval,
    poly_scale,
    vanishing_poly,
)
from zkvc.srs import SRS

logger = logging.getLogger(__name__)


class UpdateKey:
    """벡터 원소 갱신용 키 (현재 갱신 프로토콜은 미구현).

    속성:
        ai_commitments: [aᵢ(τ)]₁, i = 0..n-1
        ui_commitments: [uᵢ(τ)]₁, i = 0..n-1
    """

    def __init__(self, ai_commitments, ui_commitments):
        self.ai_commitments = ai_commitments
        self.ui_commitments = ui_commitments


class ProvingKey:
    """증명자 키: SRS, 업데이트 키, Lagrange 기저 커밋먼트 [lᵢ(τ)]₁."""

    def __init__(self, srs, update_key, li_commitments):
        self.srs = srs
        self.update_key = update_key
        self.li_commitments = li_commitments

    @property
    def degree(self):
        return len(self.li_commitments)


class VerificationKey:
    """검증자 키: SRS와 [A(τ)]₁ = [τ^n - 1]₁."""

    def __init__(self, srs, a_commitment):
        self.srs = srs
        self.a_commitment = a_commitment

    @property
    def degree(self):
        return self.srs.max_degree


def _index_key_material(task):
    """인덱스 i 하나의 ([aᵢ]₁, [lᵢ]₁, [uᵢ]₁).

    (i, CRS)만의 순수 함수이므로 프로세스 풀에서 그대로 map 할 수 있다.
    """
    curve, degree, i, g1_powers = task
    FR = curve.FR
    omega_i = get_root_of_unity(degree, curve) ** i

    a_poly = [FR(0)] * (degree + 1)
    a_poly[0] = FR(-1)
    a_poly[degree] = FR(1)
    denominator = [-omega_i, FR(1)]

    ai_poly = poly_div(a_poly, denominator)
    li_poly = poly_scale(ai_poly, omega_i / FR(degree))
    ui_numerator = list(li_poly)
    ui_numerator[0] = ui_numerator[0] - FR(1)
    ui_poly = poly_div(ui_numerator, denominator)

    return (
        curve.lincomb(g1_powers, ai_poly, curve.Z1),
        curve.lincomb(g1_powers, li_poly, curve.Z1),
        curve.lincomb(g1_powers, ui_poly, curve.Z1),
    )


def _check_degree(degree):
    if not is_power_of_2(degree):
        raise ZkvcError(f"ASVC degree는 2의 거듭제곱이어야 합니다: {degree}")


def key_gen(degree, secret, curve=None, g1=None, g2=None, workers=None):
    """ASVC 키 생성.

    Args:
        degree: 벡터 길이 n (2의 거듭제곱)
        secret: τ. 반환 후 호출자가 폐기해야 한다.
        curve: Curve 또는 곡선 이름 (기본값: config.curve)
        g1, g2: 생성자 (기본값: 곡선의 표준 생성자)
        workers: 인덱스별 계산에 쓸 프로세스 수 (기본값: config.workers).
                 1 이하이면 직렬로 계산한다.

    Returns:
        tuple: (ProvingKey, VerificationKey, UpdateKey)
    """
    curve = get_curve(curve)
    _check_degree(degree)
    get_root_of_unity(degree, curve)
    if workers is None:
        workers = config.workers

    srs = SRS.from_secret(secret, degree, curve, g1, g2)
    del secret

    a_commitment = curve.ec_sub(srs.g1_powers[degree], srs.g1_powers[0])

    tasks = [(curve, degree, i, srs.g1_powers) for i in range(degree)]
    if workers > 1 and degree > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            material = list(executor.map(_index_key_material, tasks))
    else:
        material = [_index_key_material(task) for task in tasks]

    ai_commitments = [m[0] for m in material]
    li_commitments = [m[1] for m in material]
    ui_commitments = [m[2] for m in material]

    update_key = UpdateKey(ai_commitments, ui_commitments)
    proving_key = ProvingKey(srs, update_key, li_commitments)
    verification_key = VerificationKey(srs, a_commitment)

    logger.info(
        "ASVC key_gen 완료: curve=%s degree=%d workers=%d", curve.name, degree, workers
    )
    return proving_key, verification_key, update_key


class ASVC:
    """집계 가능한 부분벡터 커밋먼트 스킴.

    상태:
        Uninitialized --key_gen(τ)--> Ready
        ASVC.from_keys(...)는 로드한 키로 곧바로 Ready 인스턴스를 만든다.
        검증 키만 가진 인스턴스는 verify_position / aggregate_proofs만 가능하다.
    """

    def __init__(self, degree, curve=None, g1=None, g2=None):
        _check_degree(degree)
        self.degree = degree
        self.curve = get_curve(curve)
        self.g1 = self.curve.G1 if g1 is None else g1
        self.g2 = self.curve.G2 if g2 is None else g2
        self.omega = get_root_of_unity(degree, self.curve)
        self.proving_key = None
        self.verification_key = None
        self.update_key = None

    @classmethod
    def from_keys(cls, proving_key=None, verification_key=None, update_key=None):
        key = proving_key if proving_key is not None else verification_key
        if key is None:
            raise ValueError("proving_key 또는 verification_key가 필요합니다")
        asvc = cls(key.degree, key.srs.curve, key.srs.g1, key.srs.g2)
        asvc.proving_key = proving_key
        asvc.verification_key = verification_key
        if update_key is None and proving_key is not None:
            update_key = proving_key.update_key
        asvc.update_key = update_key
        return asvc

    @property
    def ready(self):
        return self.proving_key is not None or self.verification_key is not None

    def key_gen(self, secret, workers=None):
        """키를 생성하고 Ready 상태로 전이한다. 한 번만 호출할 수 있다.

        Returns:
            tuple: (ProvingKey, VerificationKey, UpdateKey)
        """
        if self.ready:
            raise SetupError("ASVC 키가 이미 생성되었습니다")
        keys = key_gen(self.degree, secret, self.curve, self.g1, self.g2, workers)
        self.proving_key, self.verification_key, self.update_key = keys
        return keys

    # ── 내부 검사 ──

    def _require_proving_key(self):
        if self.proving_key is None:
            raise NotReadyError("proving key가 없습니다: key_gen()을 먼저 호출해야 합니다")
        return self.proving_key

    def _require_verification_key(self):
        if self.verification_key is None:
            raise NotReadyError("verification key가 없습니다: key_gen()을 먼저 호출해야 합니다")
        return self.verification_key

    def _to_field(self, values):
        FR = self.curve.FR
        return [v if isinstance(v, FR) else FR(v) for v in values]

    def _check_vector(self, vector):
        if len(vector) != self.degree:
            raise LengthMismatchError(
                f"벡터 길이 {len(vector)}가 degree {self.degree}와 다릅니다"
            )
        return self._to_field(vector)

    def _check_indices(self, indices):
        indices = list(indices)
        if not indices:
            raise InvalidIndexError("인덱스 집합이 비어 있습니다")
        for i in indices:
            if not 0 <= i < self.degree:
                raise InvalidIndexError(f"인덱스 {i}가 범위 [0, {self.degree})를 벗어났습니다")
        if len(set(indices)) != len(indices):
            raise InvalidIndexError(f"인덱스가 중복되었습니다: {indices}")
        return indices

    def _points(self, indices):
        return [self.omega ** i for i in indices]

    # ── 스킴 연산 ──

    def vector_commit(self, vector):
        """C = Σᵢ vᵢ · [lᵢ(τ)]₁. O(n) 그룹 연산.

        Raises:
            LengthMismatchError: len(vector) != degree
        """
        pk = self._require_proving_key()
        values = self._check_vector(vector)
        return self.curve.lincomb(pk.li_commitments, values, self.curve.Z1)

    def prove_position(self, indices, vector):
        """인덱스 집합 I에 대한 부분벡터 증명 π = [L(x) div D(x)]₁.

        L(x)는 도메인 위의 IFFT로 얻는다. D(x) = ∏_{i∈I} (x - ωⁱ).
        나머지 r(x)는 I 위에서 L과 일치하므로 몫만 커밋하면 된다.
        """
        pk = self._require_proving_key()
        values = self._check_vector(vector)
        indices = self._check_indices(indices)

        numerator = ifft(values, self.omega)
        denominator = vanishing_poly(self._points(indices), self.curve.FR)
        quotient = poly_div(numerator, denominator)
        return pk.srs.commit_g1(quotient)

    def prove_single(self, index, vector):
        """단일 인덱스 증명. aggregate_proofs의 입력 형태."""
        return self.prove_position([index], vector)

    def verify_position(self, commitment, indices, subvector, proof):
        """e(π, [D]₂) == e(C - [r]₁, g2) 를 확인한다.

        Args:
            commitment: 벡터 커밋먼트 C
            indices: 인덱스 리스트 (순서는 subvector와 대응)
            subvector: 주장하는 값 [v_{i} for i in indices]
            proof: 부분벡터 증명 π

        Returns:
            bool: 잘못된 값/증명이면 False

        Raises:
            LengthMismatchError: len(indices) != len(subvector)
        """
        vk = self._require_verification_key()
        indices = self._check_indices(indices)
        if len(subvector) != len(indices):
            raise LengthMismatchError(
                f"인덱스 개수({len(indices)})와 값 개수({len(subvector)})가 다릅니다"
            )
        curve = self.curve
        points = self._points(indices)

        d_commitment = vk.srs.commit_g2(vanishing_poly(points, curve.FR))
        r_commitment = vk.srs.commit_g1(
            lagrange_interpolate(points, self._to_field(subvector))
        )

        lhs = curve.ec_pairing(d_commitment, proof)
        rhs = curve.ec_pairing(vk.srs.g2, curve.ec_sub(commitment, r_commitment))
        result = lhs == rhs
        logger.debug("ASVC verify_position %s: %s", indices, result)
        return result

    def aggregate_proofs(self, indices, proofs):
        """단일 인덱스 증명들을 인덱스 집합 전체의 증명 하나로 집계한다.

        A(x) = ∏ (x - ω^{i_k}),  π = Σ_k π_k / A'(ω^{i_k})

        몫 다항식이 유일하므로 결과는 prove_position(indices, v)와 같은 점이다.

        Raises:
            LengthMismatchError: len(indices) != len(proofs)
        """
        if not self.ready:
            raise NotReadyError("key_gen()을 먼저 호출해야 합니다")
        indices = self._check_indices(indices)
        proofs = list(proofs)
        if len(proofs) != len(indices):
            raise LengthMismatchError(
                f"인덱스 개수({len(indices)})와 증명 개수({len(proofs)})가 다릅니다"
            )
        FR = self.curve.FR
        points = self._points(indices)
        a_derivative = poly_derivative(vanishing_poly(points, FR))
        weights = [FR(1) / poly_eval(a_derivative, p) for p in points]
        return self.curve.lincomb(proofs, weights, self.curve.Z1)

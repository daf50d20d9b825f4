"""
zkvc 기반 모듈: 계수 표현 다항식 연산 및 FFT
=============================================

다항식은 스칼라 필드 원소의 리스트로 표현한다.
coeffs = [c₀, c₁, c₂, ...] → c₀ + c₁·x + c₂·x² + ...

최고차의 0 계수는 차수를 줄일 뿐 물리적으로 제거하지 않는다 (poly_trim 참고).
모든 함수는 순수 함수이며 입력 리스트를 변경하지 않는다. 필드는 원소의
타입에서 추론하므로 같은 코드가 bn128 / BLS12-381 스칼라 필드에서 동작한다.

**사용처**:
  - KZG 열기: (p(x) - y) / (x - z)
  - KZG 배치 열기: (p(x) - I(x)) / Z(x)
  - ASVC 키 생성: (x^n - 1) / (x - ωⁱ), Lagrange 기저
  - ASVC 증명 집계: A'(x) (형식 미분)

사용 예시:
    >>> from zkvc.field import FR
    >>> p = [FR(1), FR(2), FR(3)]   # 1 + 2x + 3x²
    >>> poly_eval(p, FR(2))         # FR(17)
    >>> poly_div(poly_mul(p, [FR(-1), FR(1)]), [FR(-1), FR(1)]) == p   # True
"""

from zkvc.errors import DivisionByZeroError, LengthMismatchError


def _field_of(*polys):
    for poly in polys:
        if poly:
            return type(poly[0])
    raise ValueError("필드를 추론할 수 없습니다: 모든 다항식이 비어 있습니다")


def poly_trim(poly):
    """최고차 0 계수를 제거한다. 영 다항식은 [0]으로 정규화.

    예: [1, 2, 0, 0] → [1, 2]
    """
    result = list(poly)
    while len(result) > 1 and result[-1] == 0:
        result.pop()
    return result


def poly_add(a, b):
    """다항식 덧셈: a(x) + b(x)."""
    zero = _field_of(a, b).zero()
    result = [zero] * max(len(a), len(b))
    for i, c in enumerate(a):
        result[i] = result[i] + c
    for i, c in enumerate(b):
        result[i] = result[i] + c
    return result


def poly_sub(a, b):
    """다항식 뺄셈: a(x) - b(x)."""
    zero = _field_of(a, b).zero()
    result = [zero] * max(len(a), len(b))
    for i, c in enumerate(a):
        result[i] = result[i] + c
    for i, c in enumerate(b):
        result[i] = result[i] - c
    return result


def poly_scale(poly, scalar):
    """스칼라곱: scalar · p(x)."""
    return [c * scalar for c in poly]


def poly_mul(a, b):
    """다항식 곱셈 (convolution).

    결과 길이는 len(a) + len(b) - 1. O(n·m) 나이브 곱셈.

    예시:
        >>> poly_mul([FR(1), FR(1)], [FR(1), FR(1)])  # 1 + 2x + x²
    """
    if not a or not b:
        return []
    zero = _field_of(a, b).zero()
    result = [zero] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        for j, y in enumerate(b):
            result[i + j] = result[i + j] + x * y
    return result


def poly_divmod(a, b):
    """다항식 나눗셈: a(x) = b(x) · q(x) + r(x).

    최고차 항부터 내려가는 긴 나눗셈(synthetic long division).

    Args:
        a: 피제수 계수 리스트
        b: 제수 계수 리스트

    Returns:
        tuple: (몫, 나머지). 나머지 길이는 deg(b) (deg(b) = 0이면 [0]).
        deg(a) < deg(b)이면 몫은 [0], 나머지는 a.

    Raises:
        DivisionByZeroError: 제수가 비었거나 모든 계수가 0

    예시:
        >>> a = [FR(-1), FR(0), FR(1)]  # x² - 1
        >>> b = [FR(-1), FR(1)]          # x - 1
        >>> poly_divmod(a, b)            # ([1, 1], [0])
    """
    divisor = poly_trim(b)
    if not divisor or divisor[-1] == 0:
        raise DivisionByZeroError("영 다항식으로 나눌 수 없습니다")

    field = _field_of(divisor)
    remainder = list(a)
    deg_b = len(divisor) - 1
    deg_a = len(remainder) - 1

    if deg_a < deg_b:
        return [field.zero()], remainder or [field.zero()]

    quotient = [field.zero()] * (deg_a - deg_b + 1)
    lead_inv = field.one() / divisor[-1]

    for i in range(deg_a - deg_b, -1, -1):
        coeff = remainder[i + deg_b] * lead_inv
        quotient[i] = coeff
        if coeff == 0:
            continue
        for j in range(deg_b + 1):
            remainder[i + j] = remainder[i + j] - coeff * divisor[j]

    return quotient, remainder[:deg_b] or [field.zero()]


def poly_div(a, b):
    """몫만 반환하는 다항식 나눗셈.

    b가 a를 나누어떨어뜨리면 poly_mul(poly_div(a, b), b) == a.
    나머지는 버려진다: 정확한 나눗셈이 필요한 호출자는 poly_divmod를 쓴다.
    """
    return poly_divmod(a, b)[0]


def poly_eval(poly, point):
    """Horner's method로 p(point)를 평가한다. O(deg)."""
    result = type(point).zero()
    for coeff in reversed(poly):
        result = result * point + coeff
    return result


def poly_derivative(poly):
    """형식 미분 p'(x) = Σ i·cᵢ·x^(i-1).

    상수 다항식의 미분은 [0].
    """
    if len(poly) <= 1:
        return [c * 0 for c in poly[:1]]
    return [poly[i] * i for i in range(1, len(poly))]


def vanishing_poly(points, field=None):
    """소거 다항식 Z(x) = ∏ (x - pᵢ).

    Args:
        points: 근이 될 필드 원소 리스트
        field: points가 비었을 때 사용할 필드 클래스 (Z(x) = 1)
    """
    if field is None:
        field = _field_of(points)
    result = [field.one()]
    for p in points:
        result = poly_mul(result, [-p, field.one()])
    return result


def lagrange_interpolate(points, values):
    """Lagrange 보간: I(pᵢ) = vᵢ 인 차수 < k 다항식을 반환한다.

    I(x) = Σᵢ vᵢ · Zᵢ(x) / Zᵢ(pᵢ),  Zᵢ(x) = Z(x) / (x - pᵢ)

    Z(x)는 한 번만 만들고 각 i에 대해 (x - pᵢ)로 합성 나눗셈하므로 O(k²).

    Args:
        points: 서로 다른 보간 점 [p₀, ..., p_{k-1}]
        values: 값 [v₀, ..., v_{k-1}]

    Returns:
        list: 길이 k의 계수 리스트 (k = 0이면 [])

    Raises:
        LengthMismatchError: len(points) != len(values)
        DivisionByZeroError: 보간 점이 중복될 때
    """
    if len(points) != len(values):
        raise LengthMismatchError(
            f"점 개수({len(points)})와 값 개수({len(values)})가 다릅니다"
        )
    if not points:
        return []

    field = _field_of(points)
    z = vanishing_poly(points, field)
    result = [field.zero()] * len(points)
    for p_i, v_i in zip(points, values):
        basis = poly_div(z, [-p_i, field.one()])
        denominator = poly_eval(basis, p_i)
        if denominator == 0:
            raise DivisionByZeroError(f"보간 점이 중복되었습니다: {int(p_i)}")
        factor = v_i / denominator
        for j, c in enumerate(basis):
            result[j] = result[j] + c * factor
    return result


# ─────────────────────────────────────────────────────────────────────
# FFT / IFFT (Number Theoretic Transform)
# ─────────────────────────────────────────────────────────────────────

def fft(coeffs, omega):
    """계수 → 단위근 도메인 {1, ω, ..., ω^(n-1)} 위의 평가값.

    재귀적 Cooley-Tukey radix-2. len(coeffs)는 2의 거듭제곱.
    """
    n = len(coeffs)
    if n == 1:
        return [coeffs[0]]

    even_vals = fft(coeffs[0::2], omega * omega)
    odd_vals = fft(coeffs[1::2], omega * omega)

    result = [None] * n
    omega_k = type(omega).one()
    half = n // 2
    for k in range(half):
        t = omega_k * odd_vals[k]
        result[k] = even_vals[k] + t
        result[k + half] = even_vals[k] - t
        omega_k = omega_k * omega
    return result


def ifft(evals, omega):
    """평가값 → 계수. ω^{-1}로 FFT 후 n으로 나눈다.

    예시:
        >>> omega = get_root_of_unity(4)
        >>> ifft(fft(coeffs, omega), omega) == coeffs  # True
    """
    field = type(omega)
    coeffs = fft(evals, field.one() / omega)
    n_inv = field.one() / field(len(evals))
    return [c * n_inv for c in coeffs]


def next_power_of_2(n):
    """n 이상의 가장 작은 2의 거듭제곱.

    예시:
        >>> next_power_of_2(3)  # 4
        >>> next_power_of_2(4)  # 4
    """
    if n <= 1:
        return 1
    p = 1
    while p < n:
        p <<= 1
    return p


def is_power_of_2(n):
    return n >= 1 and (n & (n - 1)) == 0

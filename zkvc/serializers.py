"""
zkvc 데이터 직렬화/역직렬화 헬퍼
==================================

**정규(canonical) 바이트 인코딩**: 원소마다 고정 길이, big-endian:

  스칼라 (FR):  L_r 바이트                      (bn128 32, bls12_381 32)
  G1 점:        x ‖ y                           (bn128 64, bls12_381 96)
  G2 점:        x.c0 ‖ x.c1 ‖ y.c0 ‖ y.c1       (bn128 128, bls12_381 192)
  항등원:       같은 길이의 0 바이트 (두 곡선 모두 (0, 0)은 곡선 위의 점이 아님)

역직렬화는 길이, 좌표 범위, 곡선 소속을 검사하고 실패 시 SerializationError.

**dict 형태**: TinyDB/JSON에 저장 가능한 형태. 점은 위 바이트의 hex 문자열.
SRS, ProvingKey, VerificationKey, UpdateKey를 지원한다.
"""

from zkvc.asvc import ProvingKey, UpdateKey, VerificationKey
from zkvc.errors import SerializationError
from zkvc.field import get_curve
from zkvc.srs import SRS


# ─── FR ───

def encode_scalar(value, curve=None):
    """FR → L_r 바이트"""
    curve = get_curve(curve)
    return (int(value) % curve.curve_order).to_bytes(curve.scalar_bytes, "big")


def decode_scalar(data, curve=None):
    """L_r 바이트 → FR"""
    curve = get_curve(curve)
    if len(data) != curve.scalar_bytes:
        raise SerializationError(
            f"스칼라 길이 {len(data)} != {curve.scalar_bytes}"
        )
    n = int.from_bytes(data, "big")
    if n >= curve.curve_order:
        raise SerializationError("스칼라가 필드 위수 이상입니다")
    return curve.FR(n)


# ─── G1 / G2 point ───

def _encode_ints(ints, size):
    return b"".join(int(i).to_bytes(size, "big") for i in ints)


def _decode_ints(data, count, size, modulus):
    if len(data) != count * size:
        raise SerializationError(f"점 길이 {len(data)} != {count * size}")
    ints = [int.from_bytes(data[k * size:(k + 1) * size], "big") for k in range(count)]
    if any(i >= modulus for i in ints):
        raise SerializationError("좌표가 base field 위수 이상입니다")
    return ints


def encode_g1(point, curve=None):
    """G1 점 → 2·L_q 바이트"""
    curve = get_curve(curve)
    affine = curve.to_affine(point)
    if affine is None:
        return bytes(2 * curve.base_bytes)
    x, y = affine
    return _encode_ints([x, y], curve.base_bytes)


def decode_g1(data, curve=None):
    """2·L_q 바이트 → G1 점"""
    curve = get_curve(curve)
    x, y = _decode_ints(data, 2, curve.base_bytes, curve.FQ.field_modulus)
    if x == 0 and y == 0:
        return curve.Z1
    point = curve.from_affine(curve.FQ(x), curve.FQ(y))
    if not curve.is_on_g1(point):
        raise SerializationError("G1 곡선 위의 점이 아닙니다")
    return point


def encode_g2(point, curve=None):
    """G2 점 → 4·L_q 바이트"""
    curve = get_curve(curve)
    affine = curve.to_affine(point)
    if affine is None:
        return bytes(4 * curve.base_bytes)
    x, y = affine
    return _encode_ints(list(x.coeffs) + list(y.coeffs), curve.base_bytes)


def decode_g2(data, curve=None):
    """4·L_q 바이트 → G2 점"""
    curve = get_curve(curve)
    x0, x1, y0, y1 = _decode_ints(data, 4, curve.base_bytes, curve.FQ.field_modulus)
    if not any((x0, x1, y0, y1)):
        return curve.Z2
    point = curve.from_affine(curve.FQ2([x0, x1]), curve.FQ2([y0, y1]))
    if not curve.is_on_g2(point):
        raise SerializationError("G2 곡선 위의 점이 아닙니다")
    return point


def serialize_g1(point, curve=None):
    """G1 점 → hex 문자열"""
    return encode_g1(point, curve).hex()


def deserialize_g1(data, curve=None):
    """hex 문자열 → G1 점"""
    return decode_g1(bytes.fromhex(data), curve)


def serialize_g2(point, curve=None):
    """G2 점 → hex 문자열"""
    return encode_g2(point, curve).hex()


def deserialize_g2(data, curve=None):
    """hex 문자열 → G2 점"""
    return decode_g2(bytes.fromhex(data), curve)


# ─── SRS ───

def serialize_srs(srs):
    """SRS → dict"""
    curve = srs.curve
    return {
        "curve": curve.name,
        "max_degree": srs.max_degree,
        "g1_powers": [serialize_g1(p, curve) for p in srs.g1_powers],
        "g2_powers": [serialize_g2(p, curve) for p in srs.g2_powers],
        "g2_tau": serialize_g2(srs.g2_tau, curve),
    }


def deserialize_srs(data):
    """dict → SRS"""
    curve = get_curve(data["curve"])
    g1_powers = [deserialize_g1(p, curve) for p in data["g1_powers"]]
    g2_powers = [deserialize_g2(p, curve) for p in data["g2_powers"]]
    if len(g1_powers) != data["max_degree"] + 1 or len(g2_powers) != len(g1_powers):
        raise SerializationError("SRS 길이가 max_degree + 1과 다릅니다")
    g2_tau = deserialize_g2(data["g2_tau"], curve)
    return SRS(g1_powers, g2_powers, g2_tau, data["max_degree"], curve)


# ─── ASVC keys ───

def serialize_update_key(update_key, curve=None):
    """UpdateKey → dict"""
    curve = get_curve(curve)
    return {
        "ai_commitments": [serialize_g1(p, curve) for p in update_key.ai_commitments],
        "ui_commitments": [serialize_g1(p, curve) for p in update_key.ui_commitments],
    }


def deserialize_update_key(data, curve=None):
    """dict → UpdateKey"""
    curve = get_curve(curve)
    return UpdateKey(
        [deserialize_g1(p, curve) for p in data["ai_commitments"]],
        [deserialize_g1(p, curve) for p in data["ui_commitments"]],
    )


def serialize_proving_key(proving_key):
    """ProvingKey → dict"""
    curve = proving_key.srs.curve
    return {
        "srs": serialize_srs(proving_key.srs),
        "update_key": serialize_update_key(proving_key.update_key, curve),
        "li_commitments": [serialize_g1(p, curve) for p in proving_key.li_commitments],
    }


def deserialize_proving_key(data):
    """dict → ProvingKey"""
    srs = deserialize_srs(data["srs"])
    return ProvingKey(
        srs,
        deserialize_update_key(data["update_key"], srs.curve),
        [deserialize_g1(p, srs.curve) for p in data["li_commitments"]],
    )


def serialize_verification_key(verification_key):
    """VerificationKey → dict"""
    curve = verification_key.srs.curve
    return {
        "srs": serialize_srs(verification_key.srs),
        "a_commitment": serialize_g1(verification_key.a_commitment, curve),
    }


def deserialize_verification_key(data):
    """dict → VerificationKey"""
    srs = deserialize_srs(data["srs"])
    return VerificationKey(srs, deserialize_g1(data["a_commitment"], srs.curve))

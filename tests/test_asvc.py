"""
ASVC tests: asvc.py

Covers:
- key_gen key material ([lᵢ]₁ basis, [A]₁, aᵢ/lᵢ relation, uᵢ openings)
- vector_commit / prove_position / verify_position
- every index subset at degree 4, unsorted index sets at degree 8
- aggregate_proofs == prove_position
- degree-1 boundary, full index set
- verifier-only / prover-only instances (from_keys)
- index and length validation
- parallel key generation
"""
import random
from itertools import combinations

import pytest

from conftest import FAST_CURVE, TOXIC_TAU
from zkvc.asvc import ASVC, key_gen
from zkvc.errors import (
    InvalidIndexError, LengthMismatchError, NotReadyError, SetupError, ZkvcError,
)
from zkvc.field import FR, get_curve, get_root_of_unity
from zkvc.kzg import KZG
from zkvc.polynomial import ifft, poly_eval


VECTOR4 = [3, 1, 4, 1]
VECTOR8 = [27, 18, 28, 18, 28, 45, 90, 45]


# =====================================================================
# Key generation
# =====================================================================

class TestKeyMaterial:
    """key_gen 결과 검증."""

    def test_shapes(self, asvc4):
        pk, vk, uk = asvc4.proving_key, asvc4.verification_key, asvc4.update_key
        assert pk.degree == 4
        assert vk.degree == 4
        assert len(pk.li_commitments) == 4
        assert len(uk.ai_commitments) == 4
        assert len(uk.ui_commitments) == 4
        assert pk.update_key is uk

    def test_srs_length(self, asvc4):
        assert len(asvc4.proving_key.srs.g1_powers) == 5
        assert len(asvc4.proving_key.srs.g2_powers) == 5

    def test_lagrange_basis_sums_to_generator(self, asvc4, fast_curve):
        """Σ lᵢ(x) = 1 이므로 Σ [lᵢ]₁ = g1."""
        li = asvc4.proving_key.li_commitments
        total = fast_curve.lincomb(li, [FR(1)] * len(li), fast_curve.Z1)
        assert fast_curve.ec_eq(total, fast_curve.G1)

    def test_a_commitment(self, asvc4, fast_curve):
        """[A]₁ = [τ^n - 1]₁."""
        tau = FR(TOXIC_TAU)
        expected = fast_curve.ec_mul(fast_curve.G1, tau ** 4 - FR(1))
        assert fast_curve.ec_eq(asvc4.verification_key.a_commitment, expected)

    def test_ai_commitments(self, asvc4, fast_curve):
        """[aᵢ]₁ = [(τ^n - 1) / (τ - ωⁱ)]₁."""
        tau = FR(TOXIC_TAU)
        for i, point in enumerate(asvc4.update_key.ai_commitments):
            omega_i = asvc4.omega ** i
            expected = (tau ** 4 - FR(1)) / (tau - omega_i)
            assert fast_curve.ec_eq(point, fast_curve.ec_mul(fast_curve.G1, expected))

    def test_li_is_scaled_ai(self, asvc4, fast_curve):
        """lᵢ = aᵢ · ωⁱ / n."""
        uk, pk = asvc4.update_key, asvc4.proving_key
        for i in range(4):
            scale = asvc4.omega ** i / FR(4)
            expected = fast_curve.ec_mul(uk.ai_commitments[i], scale)
            assert fast_curve.ec_eq(pk.li_commitments[i], expected)

    def test_ui_opens_li_at_own_point(self, asvc4):
        """uᵢ는 lᵢ를 ωⁱ에서 값 1로 여는 KZG 증명이다."""
        kzg = KZG.from_srs(asvc4.proving_key.srs)
        for i in range(4):
            assert kzg.verify(
                asvc4.omega ** i, FR(1),
                asvc4.proving_key.li_commitments[i],
                asvc4.update_key.ui_commitments[i],
            )

    def test_function_returns_triple(self):
        pk, vk, uk = key_gen(2, FR(5), curve=FAST_CURVE)
        assert pk.degree == 2
        assert vk.degree == 2
        assert len(uk.ui_commitments) == 2

    def test_parallel_matches_serial(self, fast_curve):
        """workers > 1 이어도 같은 키가 나온다."""
        serial, _, serial_uk = key_gen(4, FR(TOXIC_TAU), curve=FAST_CURVE, workers=1)
        parallel, _, parallel_uk = key_gen(4, FR(TOXIC_TAU), curve=FAST_CURVE, workers=2)
        for a, b in zip(serial.li_commitments, parallel.li_commitments):
            assert fast_curve.ec_eq(a, b)
        for a, b in zip(serial_uk.ui_commitments, parallel_uk.ui_commitments):
            assert fast_curve.ec_eq(a, b)

    def test_non_power_of_two_degree(self):
        with pytest.raises(ZkvcError):
            ASVC(degree=3, curve=FAST_CURVE)
        with pytest.raises(ZkvcError):
            key_gen(6, FR(1), curve=FAST_CURVE)


# =====================================================================
# Lifecycle
# =====================================================================

class TestLifecycle:
    """상태 전이 테스트."""

    def test_not_ready(self, fast_curve):
        asvc = ASVC(degree=4, curve=FAST_CURVE)
        assert not asvc.ready
        with pytest.raises(NotReadyError):
            asvc.vector_commit(VECTOR4)
        with pytest.raises(NotReadyError):
            asvc.prove_position([0], VECTOR4)
        with pytest.raises(NotReadyError):
            asvc.verify_position(fast_curve.G1, [0], [3], fast_curve.G1)
        with pytest.raises(NotReadyError):
            asvc.aggregate_proofs([0], [fast_curve.G1])

    def test_key_gen_twice(self):
        asvc = ASVC(degree=2, curve=FAST_CURVE)
        asvc.key_gen(FR(TOXIC_TAU))
        assert asvc.ready
        with pytest.raises(SetupError):
            asvc.key_gen(FR(TOXIC_TAU))

    def test_omega(self, asvc8):
        assert asvc8.omega == get_root_of_unity(8, asvc8.curve)

    def test_verifier_only_instance(self, asvc4):
        commitment = asvc4.vector_commit(VECTOR4)
        proof = asvc4.prove_position([0, 2], VECTOR4)

        verifier = ASVC.from_keys(verification_key=asvc4.verification_key)
        assert verifier.ready
        assert verifier.degree == 4
        assert verifier.verify_position(commitment, [0, 2], [3, 4], proof)
        with pytest.raises(NotReadyError):
            verifier.vector_commit(VECTOR4)
        with pytest.raises(NotReadyError):
            verifier.prove_position([0], VECTOR4)

    def test_verifier_only_can_aggregate(self, asvc4, fast_curve):
        proofs = [asvc4.prove_single(i, VECTOR4) for i in (1, 3)]
        verifier = ASVC.from_keys(verification_key=asvc4.verification_key)
        aggregated = verifier.aggregate_proofs([1, 3], proofs)
        assert fast_curve.ec_eq(aggregated, asvc4.prove_position([1, 3], VECTOR4))

    def test_prover_only_instance(self, asvc4, fast_curve):
        prover = ASVC.from_keys(proving_key=asvc4.proving_key)
        assert prover.update_key is asvc4.update_key
        commitment = prover.vector_commit(VECTOR4)
        assert fast_curve.ec_eq(commitment, asvc4.vector_commit(VECTOR4))
        with pytest.raises(NotReadyError):
            prover.verify_position(commitment, [0], [3], prover.prove_single(0, VECTOR4))

    def test_from_keys_requires_a_key(self):
        with pytest.raises(ValueError):
            ASVC.from_keys()


# =====================================================================
# Commit / Prove / Verify
# =====================================================================

class TestVectorCommitment:
    def test_commit_value(self, asvc4, fast_curve):
        """C = [L(τ)]₁, L는 도메인 위 보간 다항식."""
        values = [FR(v) for v in VECTOR4]
        coeffs = ifft(values, asvc4.omega)
        expected = fast_curve.ec_mul(fast_curve.G1, poly_eval(coeffs, FR(TOXIC_TAU)))
        assert fast_curve.ec_eq(asvc4.vector_commit(VECTOR4), expected)

    def test_commit_accepts_field_elements(self, asvc4, fast_curve):
        values = [FR(v) for v in VECTOR4]
        assert fast_curve.ec_eq(asvc4.vector_commit(values), asvc4.vector_commit(VECTOR4))

    def test_commit_wrong_length(self, asvc4):
        with pytest.raises(LengthMismatchError):
            asvc4.vector_commit([1, 2, 3])
        with pytest.raises(LengthMismatchError):
            asvc4.vector_commit([1, 2, 3, 4, 5])

    def test_binding_differs(self, asvc4, fast_curve):
        c1 = asvc4.vector_commit([3, 1, 4, 1])
        c2 = asvc4.vector_commit([3, 1, 4, 2])
        assert not fast_curve.ec_eq(c1, c2)


class TestProveVerify:
    def test_subvector_scenario(self, asvc4):
        """v = [3, 1, 4, 1], I = {0, 2}."""
        commitment = asvc4.vector_commit(VECTOR4)
        proof = asvc4.prove_position([0, 2], VECTOR4)
        assert asvc4.verify_position(commitment, [0, 2], [3, 4], proof)
        assert not asvc4.verify_position(commitment, [0, 2], [3, 5], proof)

    def test_every_subset(self, asvc4):
        """degree 4의 모든 공집합이 아닌 인덱스 부분집합."""
        commitment = asvc4.vector_commit(VECTOR4)
        for size in range(1, 5):
            for indices in combinations(range(4), size):
                indices = list(indices)
                proof = asvc4.prove_position(indices, VECTOR4)
                subvector = [VECTOR4[i] for i in indices]
                assert asvc4.verify_position(commitment, indices, subvector, proof), indices

    def test_degree8_subsets(self, asvc8):
        """degree 8: 크기별 인덱스 부분집합 표본 (섞인 순서)."""
        rng = random.Random(8)
        commitment = asvc8.vector_commit(VECTOR8)
        for size in range(1, 9):
            indices = rng.sample(range(8), size)
            proof = asvc8.prove_position(indices, VECTOR8)
            subvector = [VECTOR8[i] for i in indices]
            assert asvc8.verify_position(commitment, indices, subvector, proof), indices

    def test_unsorted_indices(self, asvc8):
        """인덱스 [3, 0, 2]는 ω³, ω⁰, ω²로 매핑된다."""
        indices = [3, 0, 2]
        commitment = asvc8.vector_commit(VECTOR8)
        proof = asvc8.prove_position(indices, VECTOR8)
        subvector = [VECTOR8[i] for i in indices]
        assert asvc8.verify_position(commitment, indices, subvector, proof)

    def test_unsorted_indices_wrong_order_values(self, asvc8):
        indices = [3, 0, 2]
        commitment = asvc8.vector_commit(VECTOR8)
        proof = asvc8.prove_position(indices, VECTOR8)
        swapped = [VECTOR8[0], VECTOR8[3], VECTOR8[2]]
        assert not asvc8.verify_position(commitment, indices, swapped, proof)

    def test_index_order_does_not_change_proof(self, asvc8, fast_curve):
        p1 = asvc8.prove_position([3, 0, 2], VECTOR8)
        p2 = asvc8.prove_position([0, 2, 3], VECTOR8)
        assert fast_curve.ec_eq(p1, p2)

    def test_full_index_set(self, asvc4, fast_curve):
        """I = 전체 도메인이면 D = x^n - 1, 몫은 0."""
        indices = [0, 1, 2, 3]
        commitment = asvc4.vector_commit(VECTOR4)
        proof = asvc4.prove_position(indices, VECTOR4)
        assert fast_curve.is_identity(proof)
        assert asvc4.verify_position(commitment, indices, VECTOR4, proof)
        assert not asvc4.verify_position(commitment, indices, [3, 1, 4, 2], proof)

    def test_tampered_proof(self, asvc4, fast_curve):
        commitment = asvc4.vector_commit(VECTOR4)
        proof = fast_curve.ec_add(asvc4.prove_position([1], VECTOR4), fast_curve.G1)
        assert not asvc4.verify_position(commitment, [1], [1], proof)

    def test_wrong_commitment(self, asvc4):
        other = asvc4.vector_commit([3, 1, 4, 2])
        proof = asvc4.prove_position([1], VECTOR4)
        assert not asvc4.verify_position(other, [1], [1], proof)

    def test_proof_for_other_index(self, asvc4):
        commitment = asvc4.vector_commit(VECTOR4)
        proof = asvc4.prove_position([1], VECTOR4)
        # v[1] == v[3] 이지만 증명은 인덱스에 묶인다
        assert not asvc4.verify_position(commitment, [3], [1], proof)

    def test_prove_single(self, asvc4, fast_curve):
        assert fast_curve.ec_eq(
            asvc4.prove_single(2, VECTOR4), asvc4.prove_position([2], VECTOR4)
        )


# =====================================================================
# Aggregation
# =====================================================================

class TestAggregation:
    """aggregate_proofs 테스트."""

    @pytest.mark.parametrize("indices", [[0], [1, 3], [0, 1, 2], [0, 1, 2, 3]])
    def test_equals_prove_position(self, asvc4, fast_curve, indices):
        proofs = [asvc4.prove_single(i, VECTOR4) for i in indices]
        aggregated = asvc4.aggregate_proofs(indices, proofs)
        assert fast_curve.ec_eq(aggregated, asvc4.prove_position(indices, VECTOR4))

    def test_aggregated_proof_verifies(self, asvc8):
        indices = [3, 0, 2]
        commitment = asvc8.vector_commit(VECTOR8)
        proofs = [asvc8.prove_single(i, VECTOR8) for i in indices]
        aggregated = asvc8.aggregate_proofs(indices, proofs)
        subvector = [VECTOR8[i] for i in indices]
        assert asvc8.verify_position(commitment, indices, subvector, aggregated)

    def test_aggregated_unsorted_equals_prove_position(self, asvc8, fast_curve):
        indices = [6, 1, 4, 7]
        proofs = [asvc8.prove_single(i, VECTOR8) for i in indices]
        aggregated = asvc8.aggregate_proofs(indices, proofs)
        assert fast_curve.ec_eq(aggregated, asvc8.prove_position(indices, VECTOR8))

    def test_mismatched_proof_order_fails(self, asvc8):
        indices = [1, 5]
        commitment = asvc8.vector_commit(VECTOR8)
        proofs = [asvc8.prove_single(i, VECTOR8) for i in reversed(indices)]
        aggregated = asvc8.aggregate_proofs(indices, proofs)
        subvector = [VECTOR8[i] for i in indices]
        assert not asvc8.verify_position(commitment, indices, subvector, aggregated)

    def test_length_mismatch(self, asvc4, fast_curve):
        with pytest.raises(LengthMismatchError):
            asvc4.aggregate_proofs([0, 1], [fast_curve.G1])


# =====================================================================
# Boundaries and validation
# =====================================================================

class TestDegreeOne:
    def test_degree_one(self, fast_curve):
        asvc = ASVC(degree=1, curve=FAST_CURVE)
        asvc.key_gen(FR(TOXIC_TAU))
        assert asvc.omega == FR(1)

        commitment = asvc.vector_commit([7])
        assert fast_curve.ec_eq(commitment, fast_curve.ec_mul(fast_curve.G1, 7))

        proof = asvc.prove_position([0], [7])
        assert fast_curve.is_identity(proof)
        assert asvc.verify_position(commitment, [0], [7], proof)
        assert not asvc.verify_position(commitment, [0], [8], proof)
        assert fast_curve.is_identity(asvc.update_key.ui_commitments[0])


class TestValidation:
    @pytest.mark.parametrize("indices", [[], [0, 0], [4], [-1], [1, 2, 1]])
    def test_invalid_indices_prove(self, asvc4, indices):
        with pytest.raises(InvalidIndexError):
            asvc4.prove_position(indices, VECTOR4)

    def test_invalid_indices_verify(self, asvc4, fast_curve):
        with pytest.raises(InvalidIndexError):
            asvc4.verify_position(fast_curve.G1, [5], [1], fast_curve.G1)

    def test_invalid_indices_aggregate(self, asvc4, fast_curve):
        with pytest.raises(InvalidIndexError):
            asvc4.aggregate_proofs([2, 2], [fast_curve.G1, fast_curve.G1])

    def test_invalid_index_is_value_error(self, asvc4):
        with pytest.raises(ValueError):
            asvc4.prove_position([9], VECTOR4)

    def test_subvector_length_mismatch(self, asvc4, fast_curve):
        with pytest.raises(LengthMismatchError):
            asvc4.verify_position(fast_curve.G1, [0, 1], [3], fast_curve.G1)

    def test_prove_wrong_vector_length(self, asvc4):
        with pytest.raises(LengthMismatchError):
            asvc4.prove_position([0], [1, 2])


# =====================================================================
# BLS12-381
# =====================================================================

class TestBLS12381:
    def test_prove_verify(self):
        curve = get_curve("bls12_381")
        asvc = ASVC(degree=2, curve=curve)
        asvc.key_gen(curve.FR(TOXIC_TAU))
        commitment = asvc.vector_commit([10, 20])
        proof = asvc.prove_position([1], [10, 20])
        assert asvc.verify_position(commitment, [1], [20], proof)
        assert not asvc.verify_position(commitment, [1], [10], proof)

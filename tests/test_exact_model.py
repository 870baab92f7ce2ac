#    Copyright 2026 Two Sigma Open Source, LLC
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

"""Tests for the exact IEEE 754 binary32 model (no DAZ/FTZ applied)."""

import pytest

from fp32_golden.config import GoldenConfig, NanPropagation
from fp32_golden.models.exact_model import ExactArithmeticModel, round_pack
from fp32_golden.models.fp_model import (
    FP_CANONICAL_NAN,
    FP_NEG_INF,
    FP_POS_INF,
    FP_X86_DEFAULT_NAN,
    FpFlags,
)

NX = FpFlags.INEXACT
UF = FpFlags.UNDERFLOW
OF = FpFlags.OVERFLOW
NV = FpFlags.INVALID
NONE = FpFlags.NONE


@pytest.fixture
def model() -> ExactArithmeticModel:
    return ExactArithmeticModel()


# ============================================================================
# Add
# ============================================================================


@pytest.mark.parametrize(
    "a,b,expected",
    [
        # Zeros and exact cancellation
        (0x00000000, 0x00000000, (0x00000000, NONE)),
        (0x80000000, 0x80000000, (0x80000000, NONE)),
        (0x00000000, 0x80000000, (0x00000000, NONE)),
        (0x3F800000, 0xBF800000, (0x00000000, NONE)),
        (0x3F800000, 0x00000000, (0x3F800000, NONE)),
        # 1.5 - 1.0 = 0.5
        (0x3FC00000, 0xBF800000, (0x3F000000, NONE)),
        # 1.0000001 - 1.0 = 2^-23
        (0x3F800001, 0xBF800000, (0x34000000, NONE)),
        # 1.0 + 2^-24: tie, stays on even 1.0
        (0x3F800000, 0x33800000, (0x3F800000, NX)),
        # (1.0 + 2^-23) + 2^-24: tie, rounds up to even
        (0x3F800001, 0x33800000, (0x3F800002, NX)),
        # 1.0 + 2^-30: well below half an ulp
        (0x3F800000, 0x30800000, (0x3F800000, NX)),
        # Overflow
        (0x7F7FFFFF, 0x7F7FFFFF, (FP_POS_INF, OF | NX)),
        (0xFF7FFFFF, 0xFF7FFFFF, (FP_NEG_INF, OF | NX)),
        # Max normal + half an ulp: tie onto an odd mantissa, rounds to Inf
        (0x7F7FFFFF, 0x73000000, (FP_POS_INF, OF | NX)),
        # Infinities
        (0x7F800000, 0x3F800000, (FP_POS_INF, NONE)),
        (0x3F800000, 0xFF800000, (FP_NEG_INF, NONE)),
        (0x7F800000, 0x7F800000, (FP_POS_INF, NONE)),
        (0x7F800000, 0xFF800000, (FP_X86_DEFAULT_NAN, NV)),
        # NaNs
        (0x7FC00000, 0x3F800000, (0x7FC00000, NONE)),
        (0x7F800001, 0x3F800000, (0x7FC00001, NV)),
        # NaN beats the invalid inf - inf
        (0x7F800000, 0xFFC00000, (0xFFC00000, NONE)),
        # Exact subnormal result: tiny but exact, no underflow
        (0x00C00000, 0x80800000, (0x00400000, NONE)),
        # Subnormal operands are honored by the exact model
        (0x00000001, 0x00000001, (0x00000002, NONE)),
    ],
)
def test_add(model: ExactArithmeticModel, a: int, b: int, expected: tuple) -> None:
    assert model.add(a, b) == expected


def test_add_is_commutative_on_finite_values(model: ExactArithmeticModel) -> None:
    pairs = [(0x3F800001, 0x33800000), (0x00C00000, 0x80800000), (0x4B000001, 0xC0000000)]
    for a, b in pairs:
        assert model.add(a, b) == model.add(b, a)


# ============================================================================
# Multiply
# ============================================================================


@pytest.mark.parametrize(
    "a,b,expected",
    [
        (0x00000000, 0x3F800000, (0x00000000, NONE)),
        (0x80000000, 0x3F800000, (0x80000000, NONE)),
        (0x00000000, 0xBF800000, (0x80000000, NONE)),
        # 2.0 * 3.0 = 6.0
        (0x40000000, 0x40400000, (0x40C00000, NONE)),
        # (1 + 2^-23)^2 = 1 + 2^-22 + 2^-46
        (0x3F800001, 0x3F800001, (0x3F800002, NX)),
        # Overflow
        (0x7F7FFFFF, 0x7F7FFFFF, (FP_POS_INF, OF | NX)),
        (0x7F7FFFFF, 0xFF7FFFFF, (FP_NEG_INF, OF | NX)),
        # Min normal squared underflows to zero
        (0x00800000, 0x00800000, (0x00000000, UF | NX)),
        # 2^-100 * 2^-30 = 2^-130, exact subnormal
        (0x0D800000, 0x30800000, (0x00080000, NONE)),
        # (1 - 2^-24) * 2^-126 rounds up to min normal, still tiny before rounding
        (0x3F7FFFFF, 0x00800000, (0x00800000, UF | NX)),
        # Infinities
        (0x7F800000, 0x3F800000, (FP_POS_INF, NONE)),
        (0x7F800000, 0xBF800000, (FP_NEG_INF, NONE)),
        (0x7F800000, 0x00000000, (FP_X86_DEFAULT_NAN, NV)),
        (0x80000000, 0xFF800000, (FP_X86_DEFAULT_NAN, NV)),
        # NaNs
        (0x7FC00000, 0x3F800000, (0x7FC00000, NONE)),
        (0x7F800000, 0xFFC00000, (0xFFC00000, NONE)),
        (0x7F800001, 0x00000000, (0x7FC00001, NV)),
    ],
)
def test_multiply(model: ExactArithmeticModel, a: int, b: int, expected: tuple) -> None:
    assert model.multiply(a, b) == expected


def test_riscv_nan_style() -> None:
    model = ExactArithmeticModel(
        GoldenConfig(nan_propagation=NanPropagation.RISCV_CANONICAL)
    )
    assert model.add(0x7F800000, 0xFF800000) == (FP_CANONICAL_NAN, NV)
    assert model.multiply(0xFFC12345, 0x3F800000) == (FP_CANONICAL_NAN, NONE)


# ============================================================================
# Rounding helper
# ============================================================================


class TestRoundPack:
    """Direct checks of the single rounding step."""

    def test_exact_normal(self) -> None:
        # 3 * 2^-1 = 1.5
        assert round_pack(0, 3, -1) == (0x3FC00000, NONE)

    def test_mantissa_carry_bumps_exponent(self) -> None:
        # 2^25 - 1 rounds up to 2^25
        assert round_pack(0, (1 << 25) - 1, 0) == (0x4C000000, NX)

    def test_sign_is_kept(self) -> None:
        assert round_pack(1, 1, 0) == (0xBF800000, NONE)

    def test_tiny_rounds_to_zero(self) -> None:
        # 2^-151 is below half the smallest subnormal
        assert round_pack(1, 1, -151) == (0x80000000, UF | NX)

    def test_tiny_tie_to_even_subnormal(self) -> None:
        # 3 * 2^-150 = 1.5 * 2^-149, ties to 2 * 2^-149
        assert round_pack(0, 3, -150) == (0x00000002, UF | NX)

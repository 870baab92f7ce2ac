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

"""Exact IEEE 754 binary32 add and multiply with exception flags.

Exact Model
===========

Finite operands are unpacked to an integer significand and a power-of-two
exponent (value = sig * 2^exp2). The sum or product is formed exactly
with Python integers and rounded once to single precision, so there is
no double rounding and the flags are derived from the exact value:

    - inexact:   the rounded result differs from the exact one
    - underflow: the exact result is tiny (|x| < 2^-126, i.e. tininess
                 detected before rounding) and inexact
    - overflow:  the rounded exponent exceeds 127 (result is ±Inf)
    - invalid:   inf - inf, 0 * inf, or a signaling NaN operand

Only round-to-nearest-even is implemented.
"""

from __future__ import annotations

from .fp_model import (
    FP_EMAX,
    FP_EMIN,
    FP_EXP_BIAS,
    FP_EXP_MASK,
    FP_HIDDEN_BIT,
    FP_MANT_BITS,
    FP_MANT_MASK,
    ArithmeticModel,
    FpFlags,
    signed_inf,
)

# value = sig * 2^exp2; subnormals and zero share the fixed exponent -149
FP_SUBNORMAL_EXP2 = FP_EMIN - FP_MANT_BITS
_SIG_BITS = FP_MANT_BITS + 1  # 24 including the implicit 1


def _unpack(bits: int) -> tuple[int, int, int]:
    """Return (sign, exp2, sig) where value = (-1)^sign * sig * 2^exp2."""
    sign = (bits >> 31) & 1
    exp = (bits & FP_EXP_MASK) >> 23
    mant = bits & FP_MANT_MASK
    if exp == 0:
        # Subnormal or zero: value = mant * 2^-149
        return sign, FP_SUBNORMAL_EXP2, mant
    # Normal: value = (1.mant) * 2^(exp-127)
    return sign, exp - FP_EXP_BIAS - FP_MANT_BITS, FP_HIDDEN_BIT | mant


def _shift_right_rne(sig: int, shift: int) -> tuple[int, bool]:
    """Shift sig right by shift bits, rounding to nearest even.

    Returns (rounded, inexact).
    """
    if shift <= 0:
        return sig << -shift, False
    rounded = sig >> shift
    rem = sig & ((1 << shift) - 1)
    half = 1 << (shift - 1)
    if rem > half or (rem == half and rounded & 1):
        rounded += 1
    return rounded, rem != 0


def round_pack(sign: int, sig: int, exp2: int) -> tuple[int, FpFlags]:
    """Round the exact value (-1)^sign * sig * 2^exp2 to float32 (RNE).

    sig must be non-zero; exact zeros carry operation-specific sign rules
    and are handled by the callers.
    """
    flags = FpFlags.NONE
    exp_unbiased = exp2 + sig.bit_length() - 1

    if exp_unbiased < FP_EMIN:
        # Tiny before rounding: round to a multiple of 2^-149
        mant, inexact = _shift_right_rne(sig, FP_SUBNORMAL_EXP2 - exp2)
        if inexact:
            flags |= FpFlags.UNDERFLOW | FpFlags.INEXACT
        # A carry out of the mantissa lands on the smallest normal
        return (sign << 31) | mant, flags

    sig_24, inexact = _shift_right_rne(sig, sig.bit_length() - _SIG_BITS)
    if sig_24 >> _SIG_BITS:
        # Mantissa overflow (1.111...1 + 1 = 10.000...0)
        sig_24 >>= 1
        exp_unbiased += 1
    if exp_unbiased > FP_EMAX:
        return signed_inf(sign), FpFlags.OVERFLOW | FpFlags.INEXACT
    if inexact:
        flags |= FpFlags.INEXACT
    biased = exp_unbiased + FP_EXP_BIAS
    return (sign << 31) | (biased << 23) | (sig_24 & FP_MANT_MASK), flags


class ExactArithmeticModel(ArithmeticModel):
    """Correctly rounded binary32 add/multiply with IEEE exception flags."""

    def add(self, a_bits: int, b_bits: int) -> tuple[int, FpFlags]:
        """Single-precision add: a + b."""
        special = self._special_add(a_bits, b_bits)
        if special is not None:
            return special

        sign_a, exp_a, sig_a = _unpack(a_bits)
        sign_b, exp_b, sig_b = _unpack(b_bits)

        # Align to the smaller exponent for an exact sum
        exp_min = min(exp_a, exp_b)
        val_a = sig_a << (exp_a - exp_min)
        val_b = sig_b << (exp_b - exp_min)
        total = (-val_a if sign_a else val_a) + (-val_b if sign_b else val_b)

        if total == 0:
            # Exact zero: same-signed operands keep their sign, else +0 (RNE)
            if sign_a == sign_b:
                return sign_a << 31, FpFlags.NONE
            return 0, FpFlags.NONE

        sign = 1 if total < 0 else 0
        return round_pack(sign, abs(total), exp_min)

    def multiply(self, a_bits: int, b_bits: int) -> tuple[int, FpFlags]:
        """Single-precision multiply: a * b."""
        special = self._special_multiply(a_bits, b_bits)
        if special is not None:
            return special

        sign_a, exp_a, sig_a = _unpack(a_bits)
        sign_b, exp_b, sig_b = _unpack(b_bits)
        return round_pack(sign_a ^ sign_b, sig_a * sig_b, exp_a + exp_b)

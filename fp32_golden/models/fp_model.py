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

"""IEEE 754 single-precision building blocks and the fast native model.

FP Model
========

This module holds everything the arithmetic models share:
    - Bit-pattern constants and masks
    - Exception flags (SoftFloat bit assignment)
    - Special value classification (NaN, Inf, zero, subnormal)
    - NaN propagation for the supported styles
    - The ArithmeticModel base class dispatching add/multiply

It also implements NativeFloatModel, the FAST_APPROXIMATE backend. It
uses Python's struct module to narrow host double arithmetic to single
precision and reconstructs the exception flags from the result.

Special Value Handling:
    - NaN: Propagated per NanPropagation (see config)
    - Infinity: ±Inf handled per IEEE 754
    - Zero: Both +0 and -0 supported

Note: A float32 product is exact in float64, so the native multiply is
correctly rounded. The native add can double-round when the operand
exponents are far apart; use the exact model where that matters.
"""

from __future__ import annotations

import enum
import math
import struct
from abc import ABC, abstractmethod

from ..config import DEFAULT_CONFIG, MASK32, GoldenConfig, NanPropagation

# IEEE 754 single-precision constants
FP_POS_ZERO = 0x00000000
FP_NEG_ZERO = 0x80000000
FP_POS_INF = 0x7F800000
FP_NEG_INF = 0xFF800000
FP_CANONICAL_NAN = 0x7FC00000  # RISC-V canonical quiet NaN
FP_X86_DEFAULT_NAN = 0xFFC00000  # x86 SSE "real indefinite"
FP_MIN_NORMAL = 0x00800000
FP_MAX_NORMAL = 0x7F7FFFFF
FP_ONE = 0x3F800000

# Masks for IEEE 754 single-precision
FP_SIGN_MASK = 0x80000000
FP_EXP_MASK = 0x7F800000
FP_MANT_MASK = 0x007FFFFF
FP_QUIET_BIT = 0x00400000
FP_HIDDEN_BIT = 0x00800000

FP_EXP_BIAS = 127
FP_EMIN = -126  # Smallest normal exponent
FP_EMAX = 127
FP_MANT_BITS = 23

# Smallest normal magnitude as a host float, used for tininess checks.
FP_MIN_NORMAL_VALUE = 2.0**FP_EMIN


class FpFlags(enum.IntFlag):
    """IEEE 754 exception flags, bit-compatible with SoftFloat."""

    NONE = 0
    INEXACT = 0x01
    UNDERFLOW = 0x02
    OVERFLOW = 0x04
    INFINITE = 0x08  # Divide by zero, never raised by add/multiply
    INVALID = 0x10


class FpOp(enum.Enum):
    """Arithmetic operations implemented by the hardware units."""

    ADD = "add"
    MULTIPLY = "multiply"


def bits_to_float(bits: int) -> float:
    """Convert 32-bit integer to IEEE 754 single-precision float."""
    packed = struct.pack(">I", bits & MASK32)
    return struct.unpack(">f", packed)[0]


def float_to_bits(f: float) -> int:
    """Convert IEEE 754 single-precision float to 32-bit integer."""
    if math.isnan(f):
        return FP_CANONICAL_NAN
    if math.isinf(f):
        return FP_NEG_INF if f < 0.0 else FP_POS_INF
    try:
        packed = struct.pack(">f", f)
    except OverflowError:
        # Value too large for float32: saturate to signed infinity.
        return FP_NEG_INF if f < 0.0 else FP_POS_INF
    return struct.unpack(">I", packed)[0]


def is_nan(bits: int) -> bool:
    """Check if bits represent a NaN value."""
    exp = (bits & FP_EXP_MASK) >> 23
    mant = bits & FP_MANT_MASK
    return exp == 0xFF and mant != 0


def is_signaling_nan(bits: int) -> bool:
    """Check if bits represent a signaling NaN (quiet bit clear)."""
    return is_nan(bits) and not bits & FP_QUIET_BIT


def is_inf(bits: int) -> bool:
    """Check if bits represent an infinity value."""
    exp = (bits & FP_EXP_MASK) >> 23
    mant = bits & FP_MANT_MASK
    return exp == 0xFF and mant == 0


def is_zero(bits: int) -> bool:
    """Check if bits represent a zero value (+0 or -0)."""
    return (bits & 0x7FFFFFFF) == 0


def is_subnormal(bits: int) -> bool:
    """Check if bits represent a subnormal (denormalized) number."""
    exp = (bits & FP_EXP_MASK) >> 23
    mant = bits & FP_MANT_MASK
    return exp == 0 and mant != 0


def signed_zero(bits: int) -> int:
    """Return the zero carrying the sign of bits."""
    return bits & FP_SIGN_MASK


def signed_inf(sign: int) -> int:
    """Return infinity with the given sign bit (0 or 1)."""
    return FP_NEG_INF if sign else FP_POS_INF


def default_nan(style: NanPropagation) -> int:
    """NaN produced by an invalid operation with no NaN operand."""
    if style is NanPropagation.X86_SSE:
        return FP_X86_DEFAULT_NAN
    return FP_CANONICAL_NAN


def propagate_nan(a_bits: int, b_bits: int, style: NanPropagation) -> tuple[int, FpFlags]:
    """Form the result of an operation with at least one NaN operand.

    A signaling NaN operand raises invalid in every style.
    """
    flags = FpFlags.NONE
    a_signaling = is_signaling_nan(a_bits)
    if a_signaling or is_signaling_nan(b_bits):
        flags |= FpFlags.INVALID
    if style is NanPropagation.RISCV_CANONICAL:
        return FP_CANONICAL_NAN, flags
    if a_signaling:
        return a_bits | FP_QUIET_BIT, flags
    chosen = a_bits if is_nan(a_bits) else b_bits
    return chosen | FP_QUIET_BIT, flags


# ============================================================================
# Model base class
# ============================================================================


class ArithmeticModel(ABC):
    """Abstract base class of the arithmetic backends.

    Subclasses implement add() and multiply(); both take raw 32-bit
    patterns and return (result_bits, flags). Flags are built fresh for
    every call.
    """

    def __init__(self, config: GoldenConfig = DEFAULT_CONFIG) -> None:
        """Bind the model to an immutable configuration."""
        self.config = config

    @abstractmethod
    def add(self, a_bits: int, b_bits: int) -> tuple[int, FpFlags]:
        """Single-precision add of two raw patterns."""
        ...

    @abstractmethod
    def multiply(self, a_bits: int, b_bits: int) -> tuple[int, FpFlags]:
        """Single-precision multiply of two raw patterns."""
        ...

    def compute(self, op: FpOp, a_bits: int, b_bits: int) -> tuple[int, FpFlags]:
        """Evaluate op on two patterns, masking them to 32 bits first."""
        a_bits &= MASK32
        b_bits &= MASK32
        if op is FpOp.ADD:
            return self.add(a_bits, b_bits)
        if op is FpOp.MULTIPLY:
            return self.multiply(a_bits, b_bits)
        raise ValueError(f"Unsupported operation: {op!r}")

    def _special_add(self, a_bits: int, b_bits: int) -> tuple[int, FpFlags] | None:
        """Resolve NaN and infinity operands of an add, or return None."""
        if is_nan(a_bits) or is_nan(b_bits):
            return propagate_nan(a_bits, b_bits, self.config.nan_propagation)
        if is_inf(a_bits):
            if is_inf(b_bits) and (a_bits ^ b_bits) & FP_SIGN_MASK:
                # inf + (-inf) = NaN
                return default_nan(self.config.nan_propagation), FpFlags.INVALID
            return a_bits, FpFlags.NONE
        if is_inf(b_bits):
            return b_bits, FpFlags.NONE
        return None

    def _special_multiply(
        self, a_bits: int, b_bits: int
    ) -> tuple[int, FpFlags] | None:
        """Resolve NaN, infinity and zero operands of a multiply, or return None."""
        if is_nan(a_bits) or is_nan(b_bits):
            return propagate_nan(a_bits, b_bits, self.config.nan_propagation)
        sign = ((a_bits ^ b_bits) >> 31) & 1
        if is_inf(a_bits) or is_inf(b_bits):
            # inf * 0 = NaN
            if is_zero(a_bits) or is_zero(b_bits):
                return default_nan(self.config.nan_propagation), FpFlags.INVALID
            return signed_inf(sign), FpFlags.NONE
        if is_zero(a_bits) or is_zero(b_bits):
            return (FP_NEG_ZERO if sign else FP_POS_ZERO), FpFlags.NONE
        return None


# ============================================================================
# Native (host float) model
# ============================================================================


class NativeFloatModel(ArithmeticModel):
    """Fast approximate backend built on host double arithmetic.

    Special operands are resolved exactly; finite operands are combined
    in float64 and narrowed with struct, which rounds to nearest even.
    Flags are recovered by comparing the narrowed result with the wide
    one.
    """

    def add(self, a_bits: int, b_bits: int) -> tuple[int, FpFlags]:
        special = self._special_add(a_bits, b_bits)
        if special is not None:
            return special
        wide = bits_to_float(a_bits) + bits_to_float(b_bits)
        return self._narrow(wide)

    def multiply(self, a_bits: int, b_bits: int) -> tuple[int, FpFlags]:
        special = self._special_multiply(a_bits, b_bits)
        if special is not None:
            return special
        wide = bits_to_float(a_bits) * bits_to_float(b_bits)
        return self._narrow(wide)

    @staticmethod
    def _narrow(wide: float) -> tuple[int, FpFlags]:
        """Round a finite host double to float32 and derive the flags."""
        result_bits = float_to_bits(wide)
        if is_inf(result_bits):
            return result_bits, FpFlags.OVERFLOW | FpFlags.INEXACT
        flags = FpFlags.NONE
        if bits_to_float(result_bits) != wide:
            flags |= FpFlags.INEXACT
            if abs(wide) < FP_MIN_NORMAL_VALUE:
                flags |= FpFlags.UNDERFLOW
        return result_bits, flags

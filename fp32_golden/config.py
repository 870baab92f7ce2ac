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

"""Central configuration for the FP32 golden model.

Configuration
=============

This module contains the configuration constants and the arithmetic
configuration used throughout the golden model, the vector generator and
the cocotb testbench.

Organization:
    - Data Type Masks
    - Arithmetic Configuration (rounding, tininess, NaN propagation)
    - Vector Corpus Defaults
    - Vector File Format
    - Testbench Environment Variables

Usage:
    Import specific constants as needed:
    >>> from fp32_golden.config import MASK32, DEFAULT_CORPUS_SIZE
    >>> pattern = value & MASK32

    Or build an arithmetic configuration for an evaluator:
    >>> from fp32_golden.config import GoldenConfig, NanPropagation
    >>> cfg = GoldenConfig(nan_propagation=NanPropagation.RISCV_CANONICAL)

Customization:
    To model a different FPU flavor:
    1. Pick the NaN propagation style the RTL implements
    2. Decide whether the output flush raises underflow/inexact
    3. Change corpus defaults (size, seed, file name) for the generator
"""

import enum
from dataclasses import dataclass
from typing import Final

# ============================================================================
# Data Type Masks
# ============================================================================

MASK32: Final[int] = (1 << 32) - 1
"""32-bit mask (0xFFFF_FFFF)."""

MASK8: Final[int] = (1 << 8) - 1
"""8-bit mask, width of the flags field in a vector record."""

# ============================================================================
# Arithmetic Configuration
# ============================================================================


class RoundingMode(enum.Enum):
    """IEEE 754 rounding-direction attribute."""

    NEAREST_EVEN = "near_even"


class TininessDetection(enum.Enum):
    """When an underflowing result is judged tiny."""

    BEFORE_ROUNDING = "before_rounding"


class NanPropagation(enum.Enum):
    """How a NaN result is chosen.

    X86_SSE matches the SoftFloat 8086-SSE specialization: the first NaN
    operand is quieted and returned, and invalid operations produce the
    default NaN 0xFFC00000. RISCV_CANONICAL always returns 0x7FC00000.
    """

    X86_SSE = "x86"
    RISCV_CANONICAL = "riscv"


@dataclass(frozen=True)
class GoldenConfig:
    """Immutable arithmetic configuration for an evaluator.

    The configuration is fixed when an evaluator is built and is read-only
    afterwards, so no evaluation can observe a half-initialized state.

    Attributes:
        rounding: Rounding-direction attribute (only nearest-even)
        tininess: Tininess detection point (only before rounding)
        nan_propagation: How NaN results are formed
        ftz_sets_flags: Force underflow and inexact when the output flush
            changes a subnormal result to zero. Applied to both add and
            multiply.
    """

    rounding: RoundingMode = RoundingMode.NEAREST_EVEN
    tininess: TininessDetection = TininessDetection.BEFORE_ROUNDING
    nan_propagation: NanPropagation = NanPropagation.X86_SSE
    ftz_sets_flags: bool = True

    def __post_init__(self) -> None:
        """Reject values outside the modeled hardware."""
        if not isinstance(self.rounding, RoundingMode):
            raise ValueError(f"Unsupported rounding mode: {self.rounding!r}")
        if not isinstance(self.tininess, TininessDetection):
            raise ValueError(f"Unsupported tininess detection: {self.tininess!r}")
        if not isinstance(self.nan_propagation, NanPropagation):
            raise ValueError(
                f"Unsupported NaN propagation style: {self.nan_propagation!r}"
            )


DEFAULT_CONFIG: Final[GoldenConfig] = GoldenConfig()
"""Round-to-nearest-even, tininess before rounding, x86 NaNs, FTZ flags on."""

# ============================================================================
# Vector Corpus Defaults
# ============================================================================

DEFAULT_CORPUS_SIZE: Final[int] = 10000
"""Number of vectors written per corpus (corner cases included)."""

DEFAULT_SEED: Final[int] = 42
"""PRNG seed used for checked-in vector files."""

DEFAULT_VECTOR_FILE: Final[str] = "vectors.mem"
"""Default corpus file name, loaded by the RTL testbench with $readmemh."""

# ============================================================================
# Vector File Format
# ============================================================================

OPERAND_HEX_DIGITS: Final[int] = 8
"""Hex digits per operand or result field."""

FLAGS_HEX_DIGITS: Final[int] = 2
"""Hex digits for the flags field."""

RECORD_HEX_DIGITS: Final[int] = 3 * OPERAND_HEX_DIGITS + FLAGS_HEX_DIGITS
"""Hex digits per record line, excluding the newline (26)."""

# ============================================================================
# Testbench Environment Variables
# ============================================================================

ENV_OP: Final[str] = "FP32_OP"
"""Operation implemented by the DUT ("add" or "multiply")."""

ENV_DUT_LATENCY: Final[str] = "FP32_DUT_LATENCY"
"""Clock cycles from operands to result; 0 means purely combinational."""

ENV_NUM_RANDOM: Final[str] = "FP32_NUM_RANDOM"
"""Number of random operand pairs the random cocotb test drives."""

ENV_SEED: Final[str] = "FP32_SEED"
"""Seed for the random cocotb test."""

ENV_VECTOR_FILE: Final[str] = "FP32_VECTOR_FILE"
"""Corpus file replayed by the cocotb replay test."""

ENV_RTL_DIR: Final[str] = "FP32_RTL_DIR"
"""Directory holding the DUT RTL sources for the cocotb runner."""

DEFAULT_DUT_LATENCY: Final[int] = 0
"""Default DUT latency (combinational)."""

DEFAULT_NUM_RANDOM: Final[int] = 2000
"""Default number of random operand pairs driven in simulation."""

DEFAULT_CLOCK_PERIOD_NS: Final[int] = 10
"""Clock period used when the DUT is registered."""

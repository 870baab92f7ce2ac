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

"""Directed corner-case operand tables.

Corner Cases
============

Each operation has a table of named operand pairs that lead every vector
corpus, ahead of the random stream. The tables exercise zero, infinity,
NaN propagation, invalid operations, cancellation, overflow, underflow
and the DAZ input path.

Table Structure:
    CORNER_CASES maps: FpOp -> tuple of CornerCase(description, a, b)

Adding New Corner Cases:
    1. Append a CornerCase to the operation's table
    2. That's it! Every corpus and the cocotb corner test pick it up.
"""

from dataclasses import dataclass

from ..models.fp_model import (
    FP_CANONICAL_NAN,
    FP_MAX_NORMAL,
    FP_MIN_NORMAL,
    FP_NEG_INF,
    FP_ONE,
    FP_POS_INF,
    FP_POS_ZERO,
    FpOp,
)

# Subnormal operand exercising the DAZ input path
_DENORMAL = 0x00400000


@dataclass(frozen=True)
class CornerCase:
    """A named operand pair."""

    description: str
    a: int
    b: int


ADD_CORNER_CASES: tuple[CornerCase, ...] = (
    CornerCase("0 + 0", FP_POS_ZERO, FP_POS_ZERO),
    CornerCase("1.0 + 0", FP_ONE, FP_POS_ZERO),
    CornerCase("Inf + 1.0", FP_POS_INF, FP_ONE),
    CornerCase("+Inf + -Inf (invalid)", FP_POS_INF, FP_NEG_INF),
    CornerCase("NaN + 1.0", FP_CANONICAL_NAN, FP_ONE),
    CornerCase("Cancellation: 1.5 - 1.0 = 0.5", 0x3FC00000, 0xBF800000),
    CornerCase("Massive cancellation: 1.0000001 - 1.0", 0x3F800001, 0xBF800000),
    CornerCase("Denormal + 1.0 (DAZ)", _DENORMAL, FP_ONE),
)

MULTIPLY_CORNER_CASES: tuple[CornerCase, ...] = (
    CornerCase("0 * 1.0", FP_POS_ZERO, FP_ONE),
    CornerCase("Inf * 1.0", FP_POS_INF, FP_ONE),
    CornerCase("NaN * 1.0", FP_CANONICAL_NAN, FP_ONE),
    CornerCase("Max normal * max normal (overflow)", FP_MAX_NORMAL, FP_MAX_NORMAL),
    CornerCase("Min normal * min normal (underflow)", FP_MIN_NORMAL, FP_MIN_NORMAL),
    CornerCase("Denormal * 1.0 (DAZ)", _DENORMAL, FP_ONE),
)

CORNER_CASES: dict[FpOp, tuple[CornerCase, ...]] = {
    FpOp.ADD: ADD_CORNER_CASES,
    FpOp.MULTIPLY: MULTIPLY_CORNER_CASES,
}

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

"""Golden evaluator for the DAZ/FTZ single-precision adder and multiplier.

Golden Model
============

The evaluator composes the hardware compatibility shim with an
arithmetic backend:

    evaluate(op, a, b) = ftz(model(op, daz(a), daz(b)))

Backends (Fidelity):
    - EXACT:            correctly rounded integer model (default)
    - FAST_APPROXIMATE: host float arithmetic, see NativeFloatModel

Usage:
    >>> from fp32_golden import init
    >>> golden = init()
    >>> golden.evaluate_add(0x3FC00000, 0xBF800000)
    (1056964608, 0)
"""

import enum

from ..config import DEFAULT_CONFIG, GoldenConfig
from .exact_model import ExactArithmeticModel
from .fp_model import ArithmeticModel, FpOp, NativeFloatModel
from .hw_compat import apply_daz, apply_ftz


class Fidelity(enum.Enum):
    """Arithmetic backend selection."""

    EXACT = "exact"
    FAST_APPROXIMATE = "fast"


MODEL_REGISTRY: dict[Fidelity, type[ArithmeticModel]] = {
    Fidelity.EXACT: ExactArithmeticModel,
    Fidelity.FAST_APPROXIMATE: NativeFloatModel,
}


def make_model(
    fidelity: Fidelity = Fidelity.EXACT, config: GoldenConfig = DEFAULT_CONFIG
) -> ArithmeticModel:
    """Build the arithmetic backend for a fidelity level."""
    return MODEL_REGISTRY[fidelity](config)


class GoldenEvaluator:
    """Expected (result, flags) of the hardware unit for raw operands.

    Operands are raw 32-bit patterns as the DUT sees them; signed values
    (as handed over by a simulator) are reinterpreted modulo 2^32. The
    returned flags are a plain int holding the SoftFloat flag bits.
    """

    def __init__(
        self,
        config: GoldenConfig = DEFAULT_CONFIG,
        fidelity: Fidelity = Fidelity.EXACT,
    ) -> None:
        self.config = config
        self.fidelity = fidelity
        self.model = make_model(fidelity, config)

    def evaluate(self, op: FpOp, a_bits: int, b_bits: int) -> tuple[int, int]:
        """Evaluate op the way the hardware does: DAZ, exact op, FTZ."""
        raw_result, flags = self.model.compute(op, apply_daz(a_bits), apply_daz(b_bits))
        result, flags = apply_ftz(raw_result, flags, self.config.ftz_sets_flags)
        return result, int(flags)

    def evaluate_add(self, a_bits: int, b_bits: int) -> tuple[int, int]:
        """Expected output of the adder."""
        return self.evaluate(FpOp.ADD, a_bits, b_bits)

    def evaluate_multiply(self, a_bits: int, b_bits: int) -> tuple[int, int]:
        """Expected output of the multiplier."""
        return self.evaluate(FpOp.MULTIPLY, a_bits, b_bits)


def init(
    config: GoldenConfig | None = None, fidelity: Fidelity = Fidelity.EXACT
) -> GoldenEvaluator:
    """Create an evaluator with round-to-nearest-even, tininess before rounding.

    This replaces the process-wide initialization call of the simulator
    bridge; the returned evaluator carries its own configuration.
    """
    return GoldenEvaluator(config if config is not None else DEFAULT_CONFIG, fidelity)

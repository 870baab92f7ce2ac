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

"""Hardware compatibility shim: denormals-are-zero and flush-to-zero.

The FPU under test has no subnormal datapath. Subnormal operands are
read as signed zero (DAZ) and subnormal results are written as signed
zero (FTZ). Wrapping an exact IEEE model in these two steps, DAZ before
and FTZ after, reproduces what the hardware computes.
"""

from ..config import MASK32
from .fp_model import FpFlags, is_subnormal, signed_zero

FTZ_FLAGS = FpFlags.UNDERFLOW | FpFlags.INEXACT


def flush_denormal_to_zero(bits: int) -> int:
    """Replace a subnormal pattern with zero of the same sign."""
    bits &= MASK32
    if is_subnormal(bits):
        return signed_zero(bits)
    return bits


def apply_daz(bits: int) -> int:
    """Input policy: operands that are subnormal are treated as zero."""
    return flush_denormal_to_zero(bits)


def apply_ftz(
    result_bits: int, flags: FpFlags, set_flags: bool = True
) -> tuple[int, FpFlags]:
    """Output policy: flush a subnormal result to signed zero.

    When the flush changes the pattern and set_flags is true, underflow
    and inexact are raised on top of whatever the model reported.
    """
    flushed = flush_denormal_to_zero(result_bits)
    if flushed != (result_bits & MASK32) and set_flags:
        flags |= FTZ_FLAGS
    return flushed, flags

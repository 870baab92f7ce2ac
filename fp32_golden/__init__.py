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

"""FP32 golden model package.

This package contains a bit-accurate reference model for IEEE 754
single-precision adders and multipliers that treat subnormal inputs as
zero (DAZ) and flush subnormal results to zero (FTZ), along with a test
vector generator and a cocotb testbench that checks an RTL unit against
the model.

Note: Only round-to-nearest-even with tininess detected before rounding
is modeled, matching the hardware the vectors are generated for.
"""

from ._version import __version__
from .models.golden_model import GoldenEvaluator, init

__all__ = [
    "GoldenEvaluator",
    "__version__",
    "init",
]

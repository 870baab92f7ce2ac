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

"""Seeded sources of random 32-bit operand patterns.

Operand Streams
===============

Two interchangeable streams are provided:

    - glibc:  bit-exact glibc srand()/rand(); each pattern is
              rand() ^ (rand() << 16) truncated to 32 bits. This is the
              stream of the C++ vector generator, so a corpus built
              here with the same seed is byte-identical to its output.
    - python: random.Random(seed).getrandbits(32)

Both reach every 32-bit pattern, including NaNs, infinities and
subnormals.
"""

import enum
import random
from collections import deque

from ..config import MASK32

# glibc TYPE_3 additive feedback generator parameters
_GLIBC_DEGREE = 31
_GLIBC_SEP = 3
_GLIBC_DISCARD = 10 * _GLIBC_DEGREE
_PARK_MILLER_MODULUS = 2147483647


class GlibcRandom:
    """Reimplementation of glibc's default random()/rand() generator.

    Seeding follows __srandom_r: the state is filled with a Park-Miller
    sequence and the first 310 outputs are discarded. Each output is the
    top 31 bits of r[i] = r[i-31] + r[i-3] (mod 2^32).
    """

    def __init__(self, seed: int = 1) -> None:
        self.seed(seed)

    def seed(self, seed: int) -> None:
        """Reset the state exactly like srand(seed)."""
        seed &= MASK32
        if seed == 0:
            seed = 1
        # glibc keeps the seed in an int32_t
        word = seed - (1 << 32) if seed & 0x80000000 else seed
        state = [word & MASK32]
        for _ in range(1, _GLIBC_DEGREE):
            # Schrage's method with C (truncating) division
            hi, lo = divmod(abs(word), 127773)
            if word < 0:
                hi, lo = -hi, -lo
            word = 16807 * lo - 2836 * hi
            if word < 0:
                word += _PARK_MILLER_MODULUS
            state.append(word)
        for i in range(_GLIBC_DEGREE, _GLIBC_DEGREE + _GLIBC_SEP):
            state.append(state[i - _GLIBC_DEGREE])
        self._history: deque[int] = deque(state, maxlen=_GLIBC_DEGREE + _GLIBC_SEP)
        for _ in range(_GLIBC_DISCARD):
            self._next_word()

    def _next_word(self) -> int:
        word = (
            self._history[-_GLIBC_DEGREE] + self._history[-_GLIBC_SEP]
        ) & MASK32
        self._history.append(word)
        return word

    def rand(self) -> int:
        """Next value in [0, 2^31), same as the C library rand()."""
        return self._next_word() >> 1


class OperandStream(enum.Enum):
    """Available random operand streams."""

    GLIBC = "glibc"
    PYTHON = "python"


class GlibcPatternSource:
    """32-bit patterns built as rand() ^ (rand() << 16)."""

    def __init__(self, seed: int) -> None:
        self._rng = GlibcRandom(seed)

    def next_pattern(self) -> int:
        # Left operand of the XOR is drawn first
        low = self._rng.rand()
        high = self._rng.rand()
        return (low ^ (high << 16)) & MASK32


class PythonPatternSource:
    """32-bit patterns from Python's Mersenne Twister."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(seed)

    def next_pattern(self) -> int:
        return self._rng.getrandbits(32)


def make_pattern_source(
    stream: OperandStream, seed: int
) -> GlibcPatternSource | PythonPatternSource:
    """Build a seeded pattern source for the given stream kind."""
    if stream is OperandStream.GLIBC:
        return GlibcPatternSource(seed)
    return PythonPatternSource(seed)

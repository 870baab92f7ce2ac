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

"""Fixed-width text format of a vector corpus.

One record per line, lowercase hex, no separators:

    AAAAAAAA BBBBBBBB RRRRRRRR FF   (written without the spaces)

    A, B: raw operands as driven into the DUT (subnormals kept)
    R:    expected result after DAZ/FTZ
    F:    expected flags (SoftFloat bit assignment)

The RTL testbench loads the file with $readmemh into a 104-bit wide
memory, so the layout must stay exactly 26 hex digits per line.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ..config import (
    FLAGS_HEX_DIGITS,
    MASK8,
    MASK32,
    OPERAND_HEX_DIGITS,
    RECORD_HEX_DIGITS,
)

_RECORD_RE = re.compile(rf"[0-9a-fA-F]{{{RECORD_HEX_DIGITS}}}")


class VectorFormatError(ValueError):
    """A corpus line does not match the record layout."""

    def __init__(self, message: str, lineno: int | None = None) -> None:
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class VectorRecord:
    """One (inputs, expected outputs) tuple of the corpus."""

    a: int
    b: int
    result: int
    flags: int


def format_record(record: VectorRecord) -> str:
    """Render a record as a 26-digit lowercase hex line (no newline)."""
    return (
        f"{record.a & MASK32:0{OPERAND_HEX_DIGITS}x}"
        f"{record.b & MASK32:0{OPERAND_HEX_DIGITS}x}"
        f"{record.result & MASK32:0{OPERAND_HEX_DIGITS}x}"
        f"{record.flags & MASK8:0{FLAGS_HEX_DIGITS}x}"
    )


def parse_record(line: str, lineno: int | None = None) -> VectorRecord:
    """Parse one corpus line (trailing newline allowed)."""
    text = line.rstrip("\r\n")
    if not _RECORD_RE.fullmatch(text):
        raise VectorFormatError(
            f"expected {RECORD_HEX_DIGITS} hex digits, got {text!r}", lineno
        )
    w = OPERAND_HEX_DIGITS
    return VectorRecord(
        a=int(text[0:w], 16),
        b=int(text[w : 2 * w], 16),
        result=int(text[2 * w : 3 * w], 16),
        flags=int(text[3 * w :], 16),
    )


def read_vectors(path: str | Path) -> Iterator[VectorRecord]:
    """Yield every record of a corpus file, in order."""
    with open(path, encoding="ascii") as vector_file:
        for lineno, line in enumerate(vector_file, start=1):
            yield parse_record(line, lineno)

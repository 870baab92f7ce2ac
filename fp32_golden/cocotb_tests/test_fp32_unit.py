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

"""Cocotb tests for an FP32 adder or multiplier with DAZ/FTZ.

Every DUT output is compared with the golden evaluator, which is called
once per transaction. The operation is selected with FP32_OP.

Tests:
    - Directed corner cases from the operation's table
    - Seeded random operand pairs
    - Replay of a vector corpus (FP32_VECTOR_FILE, or one built in memory)
"""

import os
from typing import Any

import cocotb

from ..config import (
    DEFAULT_DUT_LATENCY,
    DEFAULT_NUM_RANDOM,
    DEFAULT_SEED,
    ENV_DUT_LATENCY,
    ENV_NUM_RANDOM,
    ENV_OP,
    ENV_SEED,
    ENV_VECTOR_FILE,
)
from ..encoders.corner_cases import CORNER_CASES
from ..encoders.vector_format import VectorRecord, read_vectors
from ..generators.generate_vectors import VectorCorpusGenerator
from ..generators.operand_streams import GlibcPatternSource
from ..models.fp_model import FpOp
from ..models.golden_model import GoldenEvaluator, init
from .fp32_unit_interface import Fp32UnitInterface

# Corpus size for the replay test when no vector file is given
IN_MEMORY_CORPUS_SIZE = 500

# Stop reporting after this many mismatches
MAX_REPORTED_MISMATCHES = 10


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def selected_op() -> FpOp:
    """Operation under test from the environment (default: add)."""
    return FpOp(os.environ.get(ENV_OP, FpOp.ADD.value))


async def setup(dut: Any) -> tuple[Fp32UnitInterface, GoldenEvaluator]:
    """Start the DUT and create the golden evaluator."""
    latency = int(os.environ.get(ENV_DUT_LATENCY, DEFAULT_DUT_LATENCY))
    iface = Fp32UnitInterface(dut, latency=latency)
    await iface.start()
    return iface, init()


async def check_pair(
    iface: Fp32UnitInterface,
    golden: GoldenEvaluator,
    op: FpOp,
    a_bits: int,
    b_bits: int,
    label: str,
) -> str | None:
    """Drive one pair and compare; return an error message on mismatch."""
    expected = golden.evaluate(op, a_bits, b_bits)
    actual = await iface.transact(a_bits, b_bits)
    if actual == expected:
        return None
    return (
        f"{label}: a=0x{a_bits:08X} b=0x{b_bits:08X} "
        f"expected 0x{expected[0]:08X}/flags 0x{expected[1]:02X}, "
        f"got 0x{actual[0]:08X}/flags 0x{actual[1]:02X}"
    )


def report(errors: list[str], total: int) -> None:
    """Log mismatches and fail the test if there were any."""
    for message in errors[:MAX_REPORTED_MISMATCHES]:
        cocotb.log.error(message)
    if len(errors) > MAX_REPORTED_MISMATCHES:
        cocotb.log.error(f"... {len(errors) - MAX_REPORTED_MISMATCHES} more")
    cocotb.log.info(f"{total - len(errors)}/{total} vectors matched")
    assert not errors, f"{len(errors)} of {total} vectors mismatched"


# ============================================================================
# Test 1: Directed corner cases
# ============================================================================
@cocotb.test()
async def test_corner_cases(dut: Any) -> None:
    """Every corner case of the selected operation matches the golden model."""
    iface, golden = await setup(dut)
    op = selected_op()

    errors = []
    cases = CORNER_CASES[op]
    for case in cases:
        error = await check_pair(iface, golden, op, case.a, case.b, case.description)
        if error:
            errors.append(error)
    report(errors, len(cases))


# ============================================================================
# Test 2: Random operand pairs
# ============================================================================
@cocotb.test()
async def test_random_operands(dut: Any) -> None:
    """Seeded random 32-bit operand pairs match the golden model."""
    iface, golden = await setup(dut)
    op = selected_op()
    num_random = int(os.environ.get(ENV_NUM_RANDOM, DEFAULT_NUM_RANDOM))
    seed = int(os.environ.get(ENV_SEED, DEFAULT_SEED))
    source = GlibcPatternSource(seed)

    cocotb.log.info(f"=== {num_random} random {op.value} pairs, seed {seed} ===")
    errors = []
    for i in range(num_random):
        a_bits = source.next_pattern()
        b_bits = source.next_pattern()
        error = await check_pair(iface, golden, op, a_bits, b_bits, f"random[{i}]")
        if error:
            errors.append(error)
    report(errors, num_random)


# ============================================================================
# Test 3: Corpus replay
# ============================================================================
@cocotb.test()
async def test_vector_replay(dut: Any) -> None:
    """DUT outputs equal the expected fields of a vector corpus.

    The corpus records are also re-derived with the golden model so a
    stale vector file is reported separately from a DUT bug.
    """
    iface, golden = await setup(dut)
    op = selected_op()

    vector_file = os.environ.get(ENV_VECTOR_FILE)
    records: list[VectorRecord]
    if vector_file:
        cocotb.log.info(f"Replaying {vector_file}")
        records = list(read_vectors(vector_file))
    else:
        records = list(VectorCorpusGenerator(op, golden).records(IN_MEMORY_CORPUS_SIZE))

    errors = []
    for lineno, record in enumerate(records, start=1):
        if golden.evaluate(op, record.a, record.b) != (record.result, record.flags):
            errors.append(f"line {lineno}: vector file disagrees with golden model")
            continue
        actual = await iface.transact(record.a, record.b)
        if actual != (record.result, record.flags):
            errors.append(
                f"line {lineno}: a=0x{record.a:08X} b=0x{record.b:08X} "
                f"expected 0x{record.result:08X}/flags 0x{record.flags:02X}, "
                f"got 0x{actual[0]:08X}/flags 0x{actual[1]:02X}"
            )
    report(errors, len(records))

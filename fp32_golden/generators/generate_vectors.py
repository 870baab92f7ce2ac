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

"""Generate golden test vectors for the FP32 adder and multiplier.

Each corpus starts with the operation's directed corner cases and is
filled up with seeded random operand pairs. Every record holds the raw
operands (the DUT must apply DAZ itself) and the expected result and
flags after DAZ/FTZ.

Usage:
    fp32-gen-vectors --op add -o vectors.mem
    fp32-gen-vectors --op multiply -n 50000 --seed 7
    fp32-gen-vectors --op add --check vectors.mem
"""

import argparse
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ..config import (
    DEFAULT_CORPUS_SIZE,
    DEFAULT_SEED,
    DEFAULT_VECTOR_FILE,
    GoldenConfig,
    NanPropagation,
)
from ..encoders.corner_cases import CORNER_CASES
from ..encoders.vector_format import (
    VectorFormatError,
    VectorRecord,
    format_record,
    read_vectors,
)
from ..models.fp_model import FpOp
from ..models.golden_model import Fidelity, GoldenEvaluator
from .operand_streams import OperandStream, make_pattern_source

UNIT_NAMES = {FpOp.ADD: "ADDER", FpOp.MULTIPLY: "MULTIPLIER"}


class VectorCorpusGenerator:
    """Produce the (inputs, expected outputs) records of a corpus.

    Index i < len(corner table) takes the i-th corner case; every later
    index draws A then B from the seeded pattern source.
    """

    def __init__(
        self,
        op: FpOp,
        evaluator: GoldenEvaluator | None = None,
        seed: int = DEFAULT_SEED,
        stream: OperandStream = OperandStream.GLIBC,
    ) -> None:
        self.op = op
        self.evaluator = evaluator if evaluator is not None else GoldenEvaluator()
        self.seed = seed
        self.stream = stream

    def operand_pairs(self, count: int) -> Iterator[tuple[int, int]]:
        """Yield count raw operand pairs: corner cases, then random."""
        corner_cases = CORNER_CASES[self.op]
        source = make_pattern_source(self.stream, self.seed)
        for i in range(count):
            if i < len(corner_cases):
                case = corner_cases[i]
                yield case.a, case.b
            else:
                a_raw = source.next_pattern()
                b_raw = source.next_pattern()
                yield a_raw, b_raw

    def records(self, count: int = DEFAULT_CORPUS_SIZE) -> Iterator[VectorRecord]:
        """Yield count records with DAZ/FTZ expected outputs."""
        for a_raw, b_raw in self.operand_pairs(count):
            result, flags = self.evaluator.evaluate(self.op, a_raw, b_raw)
            yield VectorRecord(a_raw, b_raw, result, flags)

    def write(self, path: str | Path, count: int = DEFAULT_CORPUS_SIZE) -> int:
        """Write count records to path, one line each.

        The destination is opened before any vector is computed; an
        OSError from open propagates to the caller. If generation fails
        after that, the partly written file is removed before the error
        is re-raised.

        Returns:
            Number of records written
        """
        path = Path(path)
        written = 0
        with open(path, "w", encoding="ascii", newline="\n") as vector_file:
            try:
                for record in self.records(count):
                    vector_file.write(format_record(record) + "\n")
                    written += 1
            except BaseException:
                vector_file.close()
                path.unlink(missing_ok=True)
                raise
        return written


@dataclass(frozen=True)
class VectorMismatch:
    """A corpus record whose expected outputs disagree with the model."""

    lineno: int
    record: VectorRecord
    expected_result: int
    expected_flags: int


def check_vectors(
    path: str | Path, op: FpOp, evaluator: GoldenEvaluator | None = None
) -> tuple[int, list[VectorMismatch]]:
    """Re-evaluate every record of a corpus file.

    Returns:
        (number of records checked, list of mismatches)

    Raises:
        VectorFormatError: If a line is malformed
        OSError: If the file cannot be read
    """
    golden = evaluator if evaluator is not None else GoldenEvaluator()
    mismatches: list[VectorMismatch] = []
    checked = 0
    for lineno, record in enumerate(read_vectors(path), start=1):
        checked += 1
        result, flags = golden.evaluate(op, record.a, record.b)
        if result != record.result or flags != record.flags:
            mismatches.append(VectorMismatch(lineno, record, result, flags))
    return checked, mismatches


# =============================================================================
# Command-line Interface
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the generator."""
    parser = argparse.ArgumentParser(
        description="Generate DAZ/FTZ golden vectors for an FP32 adder or multiplier",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --op add                      # 10,000 adder vectors into vectors.mem
  %(prog)s --op multiply -o mul.mem -n 500
  %(prog)s --op add --nan riscv          # canonical NaNs instead of x86 NaNs
  %(prog)s --op add --check vectors.mem  # validate an existing corpus
""",
    )
    parser.add_argument(
        "--op",
        required=True,
        choices=[op.value for op in FpOp],
        help="Operation implemented by the unit under test",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_VECTOR_FILE,
        help=f"Destination vector file (default: {DEFAULT_VECTOR_FILE})",
    )
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        default=DEFAULT_CORPUS_SIZE,
        help=f"Number of vectors to generate (default: {DEFAULT_CORPUS_SIZE})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SEED,
        help=f"Random seed for reproducibility (default: {DEFAULT_SEED})",
    )
    parser.add_argument(
        "--fidelity",
        default=Fidelity.EXACT.value,
        choices=[f.value for f in Fidelity],
        help="Arithmetic backend (default: exact)",
    )
    parser.add_argument(
        "--prng",
        default=OperandStream.GLIBC.value,
        choices=[s.value for s in OperandStream],
        help="Random operand stream (default: glibc, matches C rand())",
    )
    parser.add_argument(
        "--nan",
        default=NanPropagation.X86_SSE.value,
        choices=[n.value for n in NanPropagation],
        help="NaN propagation style (default: x86)",
    )
    parser.add_argument(
        "--no-ftz-flags",
        action="store_true",
        help="Do not raise underflow/inexact when a result is flushed to zero",
    )
    parser.add_argument(
        "--check",
        metavar="FILE",
        default=None,
        help="Check an existing vector file against the model instead of generating",
    )
    return parser


def _run_check(path: str, op: FpOp, evaluator: GoldenEvaluator) -> int:
    """Check a corpus file and print a report. Returns the exit status."""
    try:
        checked, mismatches = check_vectors(path, op, evaluator)
    except (OSError, VectorFormatError) as e:
        print(f"Error: Could not check {path}: {e}", file=sys.stderr)
        return 1

    for mismatch in mismatches[:20]:
        rec = mismatch.record
        print(
            f"  line {mismatch.lineno}: a=0x{rec.a:08x} b=0x{rec.b:08x} "
            f"file=0x{rec.result:08x}/{rec.flags:02x} "
            f"model=0x{mismatch.expected_result:08x}/{mismatch.expected_flags:02x}"
        )
    if len(mismatches) > 20:
        print(f"  ... {len(mismatches) - 20} more")
    print(f"Checked {checked} vectors: {len(mismatches)} mismatches")
    return 1 if mismatches else 0


def main(argv: list[str] | None = None) -> None:
    """Generate or check a vector corpus from the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.count < 0:
        parser.error("--count must not be negative")

    op = FpOp(args.op)
    config = GoldenConfig(
        nan_propagation=NanPropagation(args.nan),
        ftz_sets_flags=not args.no_ftz_flags,
    )
    evaluator = GoldenEvaluator(config, Fidelity(args.fidelity))

    if args.check:
        sys.exit(_run_check(args.check, op, evaluator))

    generator = VectorCorpusGenerator(
        op, evaluator, seed=args.seed, stream=OperandStream(args.prng)
    )
    print(
        f"Generating {args.count:,} {UNIT_NAMES[op]} vectors with DAZ/FTZ logic..."
    )
    try:
        written = generator.write(args.output, args.count)
    except OSError as e:
        print(f"Error: Could not create {args.output}: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Done! '{args.output}' created with {written} vectors.")


if __name__ == "__main__":
    main()

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

"""DUT interface for FP32 adder/multiplier verification.

Expected top-level ports:
    i_a[31:0], i_b[31:0]   operands (raw, subnormals included)
    o_result[31:0]         result after the unit's DAZ/FTZ
    o_flags[4:0]           {invalid, infinite, overflow, underflow, inexact}
    i_clk, i_rst_n         only used when the unit is registered (latency > 0)
"""

from typing import Any

import cocotb
from cocotb.clock import Clock
from cocotb.triggers import FallingEdge, RisingEdge, Timer

from ..config import DEFAULT_CLOCK_PERIOD_NS, MASK32

# Settling time for a purely combinational unit
COMBINATIONAL_SETTLE_NS = 1

# o_flags width (SoftFloat order, divide-by-zero included)
FP_FLAGS_WIDTH = 5
MASK_FLAGS = (1 << FP_FLAGS_WIDTH) - 1


class Fp32UnitInterface:
    """Interface to an FP32 arithmetic unit DUT.

    Drives one operand pair at a time and reads the result back either
    after a short settle (combinational unit) or after `latency` rising
    clock edges (registered unit).
    """

    def __init__(self, dut: Any, latency: int = 0) -> None:
        """Initialize interface with DUT handle and result latency in cycles."""
        self.dut = dut
        self.latency = latency

    @property
    def clock(self) -> Any:
        """Return clock signal."""
        return self.dut.i_clk

    @property
    def is_clocked(self) -> bool:
        """True when results are registered."""
        return self.latency > 0

    async def start(self, reset_cycles: int = 3) -> None:
        """Drive inputs to zero; for a clocked unit start the clock and reset it."""
        self.drive_operands(0, 0)
        if not self.is_clocked:
            await Timer(COMBINATIONAL_SETTLE_NS, unit="ns")
            return

        cocotb.start_soon(Clock(self.clock, DEFAULT_CLOCK_PERIOD_NS, unit="ns").start())
        self.dut.i_rst_n.value = 0
        for _ in range(reset_cycles):
            await RisingEdge(self.clock)
        self.dut.i_rst_n.value = 1
        await RisingEdge(self.clock)
        await FallingEdge(self.clock)

    def drive_operands(self, a_bits: int, b_bits: int) -> None:
        """Drive both operand ports."""
        self.dut.i_a.value = a_bits & MASK32
        self.dut.i_b.value = b_bits & MASK32

    def read_result(self) -> tuple[int, int]:
        """Read (result, flags) from the output ports."""
        result = int(self.dut.o_result.value) & MASK32
        flags = int(self.dut.o_flags.value) & MASK_FLAGS
        return result, flags

    async def transact(self, a_bits: int, b_bits: int) -> tuple[int, int]:
        """Apply one operand pair and return the unit's (result, flags)."""
        self.drive_operands(a_bits, b_bits)
        if not self.is_clocked:
            await Timer(COMBINATIONAL_SETTLE_NS, unit="ns")
            return self.read_result()
        for _ in range(self.latency):
            await RisingEdge(self.clock)
        await FallingEdge(self.clock)
        return self.read_result()

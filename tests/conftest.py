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

"""Pytest configuration for tests."""

import os
from typing import Any

import pytest

from fp32_golden.models.golden_model import GoldenEvaluator, init


def pytest_configure(config: Any) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "cocotb: mark test as a cocotb simulation test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_addoption(parser: Any) -> None:
    """Add custom command line options for tests."""
    parser.addoption(
        "--sim",
        action="store",
        default=None,
        help="Simulator to use (verilator or icarus). "
        "When set, only parametrized tests for this simulator are run.",
    )


@pytest.fixture(scope="session", autouse=True)
def setup_cocotb_env(request: Any) -> None:
    """Set up environment variables for cocotb from command line options."""
    sim = request.config.getoption("--sim")
    if sim:
        os.environ["SIM"] = sim


@pytest.fixture
def golden() -> GoldenEvaluator:
    """Default evaluator: exact model, RNE, tininess before rounding."""
    return init()


def pytest_collection_modifyitems(config: Any, items: Any) -> None:
    """Filter parametrized cocotb tests by the --sim option."""
    # Tests parametrized with "simulator" (e.g., test_fp32_unit[fp32_adder-icarus])
    # are deselected if they don't match the requested --sim value.
    sim = config.getoption("--sim")
    if not sim:
        return
    selected = []
    deselected = []
    for item in items:
        callspec = getattr(item, "callspec", None)
        if callspec and "simulator" in callspec.params:
            if callspec.params["simulator"] != sim:
                deselected.append(item)
                continue
        selected.append(item)
    if deselected:
        config.hook.pytest_deselected(items=deselected)
        items[:] = selected

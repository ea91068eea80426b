"""
Shared test fixtures for the netlist synthesis test suite.

All fixtures build pure-Python model objects.
"""

import sys
from pathlib import Path

# Ensure app/ is on sys.path so bare imports (models, netlist, controllers)
# work when running individual test files (e.g., python -m pytest app/tests/unit/test_foo.py).
_app_dir = str(Path(__file__).resolve().parent.parent)
if _app_dir not in sys.path:
    sys.path.insert(0, _app_dir)

import pytest
from models.component import ComponentData
from models.wire import WireData


def make_component(component_type, component_id, position=(0, 0), rotation=0, **fields):
    """Helper to create a ComponentData with minimal boilerplate."""
    return ComponentData.create(component_id, component_type, position=position, rotation=rotation, **fields)


def make_wire(start_ref, end_ref, wire_id=None):
    """Helper to create a WireData from two dotted references."""
    return WireData.between(start_ref, end_ref, wire_id=wire_id)


@pytest.fixture
def series_rv_circuit():
    """
    R1 across V1, V1- grounded.

    R1.1 -- V1.+    (N1)
    R1.2 -- V1.-    (0)
    V1.- -- GND1
    """
    components = [
        make_component("resistor", "R1", (0, 0), value="10k"),
        make_component("vsource", "V1", (200, 0), dc="5"),
        make_component("ground", "GND1", (300, 200)),
    ]
    wires = [
        make_wire("R1.1", "V1.+"),
        make_wire("R1.2", "V1.-"),
        make_wire("V1.-", "GND1.GND"),
    ]
    return components, wires


@pytest.fixture
def voltage_divider_circuit():
    """
    V1+ -- R1 -- R2 -- GND, V1- grounded.

    Nodes: N1 (V1+, R1.1), N2 (R1.2, R2.1), 0 (R2.2, V1-, GND1)
    """
    components = [
        make_component("vsource", "V1", (0, 0), dc="10"),
        make_component("resistor", "R1", (100, 0), value="1k"),
        make_component("resistor", "R2", (100, 100), value="2k"),
        make_component("ground", "GND1", (0, 200)),
    ]
    wires = [
        make_wire("V1.+", "R1.1"),
        make_wire("R1.2", "R2.1"),
        make_wire("R2.2", "GND1.GND"),
        make_wire("V1.-", "GND1.GND"),
    ]
    return components, wires


@pytest.fixture
def npn_circuit():
    """
    Common-emitter stage, no explicit transistor model.

    V1+ feeds Q1.C and (through R1) Q1.B; Q1.E and V1- go to node 0.
    """
    components = [
        make_component("vsource", "V1", (200, 0), dc="5"),
        make_component("resistor", "R1", (0, 200), value="100k"),
        make_component("npn", "Q1", (400, 0)),
    ]
    wires = [
        make_wire("V1.+", "Q1.C"),
        make_wire("R1.2", "V1.+"),
        make_wire("R1.1", "Q1.B"),
        make_wire("Q1.E", "0"),
        make_wire("V1.-", "0"),
    ]
    return components, wires

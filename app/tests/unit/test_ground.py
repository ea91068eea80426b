"""Tests for netlist/ground.py - ground binding."""

import pytest
from tests.conftest import make_component, make_wire
from models.symbol import STANDARD_SYMBOLS, PortDefinition, SymbolDefinition
from netlist.connectivity import resolve_connectivity
from netlist.ground import GROUND_ANCHOR, GroundBinder, ground_port_id
from netlist.issues import IssueKind


def _bind(components, wires=(), symbols=STANDARD_SYMBOLS):
    conn = resolve_connectivity(components, list(wires), symbols)
    binder = GroundBinder(conn)
    issues = binder.bind(list(wires))
    return conn, binder, issues


class TestGroundPortId:
    def test_standard_ground(self):
        assert ground_port_id(STANDARD_SYMBOLS["ground"]) == "GND"

    def test_single_port_symbol(self):
        sym = SymbolDefinition(20, 20, (PortDefinition("0", 10, 0),))
        assert ground_port_id(sym) == "0"

    def test_ambiguous_symbol(self):
        sym = SymbolDefinition(20, 20, (PortDefinition("a", 0, 0), PortDefinition("b", 20, 0)))
        assert ground_port_id(sym) is None


class TestGroundBinder:
    def test_query_before_bind_raises(self):
        conn = resolve_connectivity([], [], STANDARD_SYMBOLS)
        binder = GroundBinder(conn)
        with pytest.raises(RuntimeError):
            binder.is_ground_class(conn.find(GROUND_ANCHOR))

    def test_wired_terminal_is_grounded(self):
        _, binder, issues = _bind(
            [make_component("resistor", "R1", (0, 0)), make_component("ground", "GND1", (200, 200))],
            [make_wire("R1.2", "GND1.GND")],
        )
        assert issues == []
        assert binder.is_grounded("R1.2")
        assert not binder.is_grounded("R1.1")

    def test_coincident_terminal_is_grounded(self):
        # GND1's terminal sits at (10, 0), exactly on R1's port "1"
        _, binder, _ = _bind([make_component("resistor", "R1", (10, -10)), make_component("ground", "GND1", (0, 0))])
        assert binder.is_grounded("R1.1")
        assert not binder.is_grounded("R1.2")

    def test_literal_zero_reference(self):
        _, binder, _ = _bind([make_component("resistor", "R1", (0, 0))], [make_wire("R1.1", "0")])
        assert binder.is_grounded("R1.1")

    def test_several_grounds_share_one_class(self):
        conn, binder, _ = _bind(
            [
                make_component("ground", "GND1", (0, 0)),
                make_component("ground", "GND2", (300, 300)),
                make_component("resistor", "R1", (100, 100)),
            ],
            [make_wire("R1.1", "GND1.GND"), make_wire("R1.2", "GND2.GND")],
        )
        assert conn.find("GND1.GND") == conn.find("GND2.GND") == binder.ground_representative

    def test_transitive_absorption(self):
        _, binder, _ = _bind(
            [
                make_component("resistor", "R1", (0, 0)),
                make_component("resistor", "R2", (200, 0)),
                make_component("ground", "GND1", (400, 400)),
            ],
            [make_wire("R1.2", "R2.1"), make_wire("R2.1", "GND1.GND")],
        )
        assert binder.is_grounded("R1.2")
        assert not binder.is_grounded("R2.2")

    def test_membership_survives_later_unions(self):
        # The anchor's representative changes once a wire joins two grounded classes
        conn, binder, _ = _bind(
            [make_component("resistor", "R1", (0, 0)), make_component("resistor", "R2", (200, 0))],
            [make_wire("R1.1", "0"), make_wire("R2.1", "0")],
        )
        assert binder.is_grounded("R1.1")
        assert binder.is_grounded("R2.1")
        assert conn.find("R1.1") == conn.find("R2.1")

    def test_zero_reference_to_unknown_terminal(self):
        _, _, issues = _bind([make_component("resistor", "R1", (0, 0))], [make_wire("R9.1", "0")])
        assert [i.kind for i in issues] == [IssueKind.INVALID_WIRE]

    def test_ground_symbol_without_single_terminal(self):
        symbols = STANDARD_SYMBOLS.merged(
            {"ground": SymbolDefinition(20, 20, (PortDefinition("a", 0, 0), PortDefinition("b", 20, 0)))}
        )
        _, _, issues = _bind([make_component("ground", "GND1", (0, 0))], symbols=symbols)
        assert [i.kind for i in issues] == [IssueKind.MISSING_PORT]

    def test_no_ground_means_no_grounded_terminals(self):
        _, binder, _ = _bind([make_component("resistor", "R1", (0, 0))])
        assert not binder.is_grounded("R1.1")
        assert not binder.is_grounded("R1.2")

"""Tests for netlist/connectivity.py - port placement and geometry resolution."""

import pytest
from tests.conftest import make_component, make_wire
from models.symbol import STANDARD_SYMBOLS, PortDefinition
from netlist.connectivity import Orientation, port_position, quantize, resolve_connectivity
from netlist.issues import IssueKind


def _resolve(components, wires=()):
    return resolve_connectivity(components, list(wires), STANDARD_SYMBOLS)


class TestQuantize:
    @pytest.mark.parametrize(
        "value, expected",
        [(0, 0), (14, 10), (15, 20), (-14, -10), (-15, -10), (-16, -20), (104.9, 100)],
    )
    def test_rounds_to_nearest_grid_point(self, value, expected):
        assert quantize(value) == expected

    def test_custom_grid(self):
        assert quantize(12, grid=5) == 10
        assert quantize(13, grid=5) == 15


class TestOrientation:
    def test_from_degrees_normalizes(self):
        assert Orientation.from_degrees(450) is Orientation.R90
        assert Orientation.from_degrees(-90) is Orientation.R270
        assert Orientation.from_degrees("180") is Orientation.R180

    def test_from_degrees_rejects_odd_angles(self):
        assert Orientation.from_degrees(45) is None
        assert Orientation.from_degrees(90.5) is None
        assert Orientation.from_degrees("sideways") is None
        assert Orientation.from_degrees(None) is None

    def test_transform_four_cases(self):
        # 60x20 box, port at the right-hand end
        assert Orientation.R0.transform(60, 10, 60, 20) == (60, 10)
        assert Orientation.R90.transform(60, 10, 60, 20) == (10, 0)
        assert Orientation.R180.transform(60, 10, 60, 20) == (0, 10)
        assert Orientation.R270.transform(60, 10, 60, 20) == (10, 60)

    def test_vertical_axis(self):
        assert Orientation.R0.is_vertical_axis
        assert Orientation.R180.is_vertical_axis
        assert not Orientation.R90.is_vertical_axis
        assert not Orientation.R270.is_vertical_axis


class TestPortPosition:
    def test_translate_then_snap(self):
        comp = make_component("resistor", "R1", (103, 48))
        sym = STANDARD_SYMBOLS["resistor"]
        assert port_position(comp, sym, sym.port("1")) == (100, 60)
        assert port_position(comp, sym, sym.port("2")) == (160, 60)

    def test_rotated_source(self):
        comp = make_component("vsource", "V1", (0, 0), rotation=90)
        sym = STANDARD_SYMBOLS["vsource"]
        assert port_position(comp, sym, sym.port("+"), Orientation.R90) == (0, 20)
        assert port_position(comp, sym, sym.port("-"), Orientation.R90) == (60, 20)

    def test_port_at_box_origin(self):
        comp = make_component("transformer", "T1", (40, 40))
        sym = STANDARD_SYMBOLS["transformer"]
        assert port_position(comp, sym, PortDefinition("P_A", 0, 0)) == (40, 40)


class TestResolveConnectivity:
    def test_coincident_ports_join_without_wire(self):
        conn = _resolve([make_component("resistor", "R1", (0, 0)), make_component("resistor", "R2", (60, 0))])
        assert conn.find("R1.2") == conn.find("R2.1")
        assert conn.find("R1.1") != conn.find("R2.2")

    def test_near_miss_snaps_together(self):
        conn = _resolve([make_component("resistor", "R1", (0, 0)), make_component("resistor", "R2", (64, 3))])
        assert conn.find("R1.2") == conn.find("R2.1")

    def test_wire_joins_distant_terminals(self):
        conn = _resolve(
            [make_component("resistor", "R1", (0, 0)), make_component("resistor", "R2", (500, 500))],
            [make_wire("R1.1", "R2.2")],
        )
        assert conn.find("R1.1") == conn.find("R2.2")

    def test_rotated_component_meets_neighbour(self):
        # R2 turned 90 degrees at (50, 10): port "2" lands on (60, 10), R1's port "2"
        conn = _resolve([make_component("resistor", "R1", (0, 0)), make_component("resistor", "R2", (50, 10), 90)])
        assert conn.positions["R2.2"] == (60, 10)
        assert conn.find("R1.2") == conn.find("R2.2")

    def test_every_port_is_tracked(self):
        conn = _resolve([make_component("npn", "Q1", (0, 0))])
        assert conn.terminal_keys(conn.components[0]) == ["Q1.C", "Q1.B", "Q1.E"]
        assert set(conn.positions) == {"Q1.C", "Q1.B", "Q1.E"}

    def test_unknown_type_dropped(self):
        conn = _resolve([make_component("flux_capacitor", "F1"), make_component("resistor", "R1", (200, 0))])
        assert [c.component_id for c in conn.components] == ["R1"]
        assert [i.kind for i in conn.issues] == [IssueKind.UNKNOWN_TYPE]

    def test_wire_to_dropped_component_is_invalid(self):
        conn = _resolve(
            [make_component("flux_capacitor", "F1"), make_component("resistor", "R1", (200, 0))],
            [make_wire("F1.1", "R1.1")],
        )
        kinds = [i.kind for i in conn.issues]
        assert kinds == [IssueKind.UNKNOWN_TYPE, IssueKind.INVALID_WIRE]

    def test_wire_to_missing_port_is_skipped(self):
        conn = _resolve(
            [make_component("npn", "Q1", (0, 0)), make_component("resistor", "R1", (200, 200))],
            [make_wire("Q1.Z", "R1.1")],
        )
        assert conn.issues[0].kind == IssueKind.INVALID_WIRE
        assert conn.issues[0].subject
        assert conn.find("R1.1") == "R1.1"

    def test_duplicate_id_keeps_first(self):
        conn = _resolve([make_component("resistor", "R1", (0, 0)), make_component("capacitor", "R1", (200, 0))])
        assert len(conn.components) == 1
        assert conn.components[0].component_type == "resistor"
        assert conn.issues[0].kind == IssueKind.DUPLICATE_ID

    def test_bad_rotation_treated_as_zero(self):
        conn = _resolve([make_component("resistor", "R1", (0, 0), rotation=45)])
        assert conn.orientations["R1"] is Orientation.R0
        assert conn.positions["R1.2"] == (60, 10)
        assert conn.issues[0].kind == IssueKind.BAD_ROTATION

    def test_ground_reference_wires_left_alone(self):
        conn = _resolve([make_component("resistor", "R1", (0, 0))], [make_wire("R1.1", "0")])
        assert conn.issues == []
        assert conn.find("R1.1") == "R1.1"

"""Tests for models/circuit.py - CircuitModel."""

from models.analysis import OperatingPoint, Transient
from models.circuit import CircuitModel
from models.component import ComponentData
from models.wire import Endpoint, WireData


class TestCircuitModel:
    def test_empty(self):
        model = CircuitModel()
        assert model.components == []
        assert model.wires == []
        assert model.analyses == []

    def test_add_component_and_wire(self):
        model = CircuitModel()
        model.add_component(ComponentData.create("R1", "resistor"))
        model.add_wire(WireData.between("R1.1", "0"))
        assert len(model.components) == 1
        assert model.wires[0].touches_ground_reference()


class TestFromDict:
    def test_components_keep_order(self):
        model = CircuitModel.from_dict(
            {
                "components": [
                    {"id": "V1", "type": "vsource", "x": 0, "y": 0},
                    {"id": "R1", "type": "resistor", "x": 100, "y": 0},
                    {"id": "C1", "type": "capacitor", "x": 200, "y": 0},
                ]
            }
        )
        assert [c.component_id for c in model.components] == ["V1", "R1", "C1"]

    def test_connections_become_wires(self):
        model = CircuitModel.from_dict(
            {
                "components": [{"id": "R1", "type": "resistor"}],
                "connections": [{"from": "R1.1", "to": "R1.2"}],
            }
        )
        assert model.wires[0].start == Endpoint("R1", "1")
        assert model.wires[0].wire_id == "W1"

    def test_bad_connection_rejected(self):
        model = CircuitModel.from_dict(
            {
                "components": [{"id": "R1", "type": "resistor"}],
                "connections": [{"from": "R1", "to": "R1.2"}, {"from": "R1.1", "to": "0"}],
            }
        )
        assert len(model.wires) == 1
        assert model.rejected_connections[0][0] == 0

    def test_single_analysis(self):
        model = CircuitModel.from_dict({"components": [], "analysis": {"type": "op"}})
        assert model.analyses == [OperatingPoint()]

    def test_analysis_list(self):
        model = CircuitModel.from_dict({"components": [], "analyses": ["op", {"type": "tran", "stop": "2m"}]})
        assert model.analyses == [OperatingPoint(), Transient(stop="2m")]

    def test_title(self):
        assert CircuitModel.from_dict({"components": [], "title": "amp"}).title == "amp"

    def test_null_position_defaults_to_origin(self):
        model = CircuitModel.from_dict({"components": [{"id": "R1", "type": "resistor", "x": None, "y": 40}]})
        assert model.components[0].position == (0, 40)

    def test_unknown_analysis_ignored(self):
        model = CircuitModel.from_dict({"components": [], "analysis": [{"type": "noise"}, {"type": "op"}]})
        assert model.analyses == [OperatingPoint()]

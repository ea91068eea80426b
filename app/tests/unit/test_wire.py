"""Tests for models/wire.py - endpoints and wires."""

import pytest
from models.wire import GROUND_REFERENCE, Endpoint, WireData


class TestEndpoint:
    def test_parse_splits_on_first_dot(self):
        ep = Endpoint.parse("U1.IN+")
        assert ep == Endpoint("U1", "IN+")
        assert ep.key == "U1.IN+"

    def test_parse_keeps_dots_in_port(self):
        assert Endpoint.parse("X1.a.b").port_id == "a.b"

    def test_bare_zero_is_ground_reference(self):
        ep = Endpoint.parse("0")
        assert ep.is_ground_reference
        assert str(ep) == GROUND_REFERENCE

    def test_zero_component_is_ground_reference(self):
        assert Endpoint.parse("0.GND").is_ground_reference

    def test_missing_port_rejected(self):
        with pytest.raises(ValueError, match="component.port"):
            Endpoint.parse("R1")

    def test_empty_rejected(self):
        with pytest.raises(ValueError, match="empty"):
            Endpoint.parse("  ")


class TestWireData:
    def test_from_connection_default_id(self):
        wire = WireData.from_connection({"from": "R1.1", "to": "V1.+"}, index=2)
        assert wire.wire_id == "W3"
        assert wire.start == Endpoint("R1", "1")
        assert wire.end == Endpoint("V1", "+")

    def test_from_connection_keeps_id(self):
        assert WireData.from_connection({"id": "net_a", "from": "R1.1", "to": "R2.1"}).wire_id == "net_a"

    def test_from_connection_rejects_bad_reference(self):
        with pytest.raises(ValueError):
            WireData.from_connection({"from": "R1", "to": "R2.1"})

    def test_touches_ground_reference(self):
        assert WireData.between("R1.2", "0").touches_ground_reference()
        assert not WireData.between("R1.2", "GND1.GND").touches_ground_reference()

    def test_to_dict(self):
        wire = WireData.between("R1.2", "0", wire_id="W1")
        assert wire.to_dict() == {"id": "W1", "from": "R1.2", "to": "0"}

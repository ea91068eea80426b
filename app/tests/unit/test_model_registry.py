"""Tests for netlist/model_registry.py - .model records."""

import pytest
from netlist.model_registry import DEFAULT_MODELS, ModelKind, ModelRecord, ModelRegistry, model_for


class TestModelRecord:
    def test_to_spice(self):
        rec = ModelRecord(ModelKind.NPN, "NPN_DEFAULT", (("IS", "1e-14"), ("BF", "100")))
        assert rec.to_spice() == ".model NPN_DEFAULT NPN(IS=1e-14 BF=100)"

    def test_empty_parameters(self):
        assert ModelRecord(ModelKind.DIODE, "DX").to_spice() == ".model DX D()"


class TestModelFor:
    def test_defaults_per_type(self):
        assert model_for("diode").name == "DDEFAULT"
        assert model_for("led").name == "LED"
        assert model_for("zener").name == "DZEN"
        assert model_for("pnp").kind is ModelKind.PNP
        assert model_for("pmos").name == "PMOS_DEFAULT"

    def test_type_lookup_ignores_case(self):
        assert model_for("NPN") == DEFAULT_MODELS["npn"]
        assert model_for("Zener").name == "DZEN"

    def test_zener_has_breakdown(self):
        params = dict(model_for("zener").parameters)
        assert params["BV"] == "5.1"

    def test_name_without_params_reuses_default_params(self):
        rec = model_for("npn", "2N3904")
        assert rec.name == "2N3904"
        assert rec.parameters == DEFAULT_MODELS["npn"].parameters

    def test_explicit_params(self):
        rec = model_for("diode", "1N4148", (("IS", "2.52n"),))
        assert rec.to_spice() == ".model 1N4148 D(IS=2.52n)"

    def test_unknown_type(self):
        with pytest.raises(KeyError):
            model_for("resistor")


class TestModelRegistry:
    def test_deduplicates_by_kind_and_name(self):
        reg = ModelRegistry()
        reg.register(model_for("diode"))
        reg.register(model_for("diode"))
        assert len(reg) == 1

    def test_first_registration_wins(self):
        reg = ModelRegistry()
        reg.register(model_for("diode", "DX", (("IS", "1n"),)))
        reg.register(model_for("diode", "DX", (("IS", "9n"),)))
        assert reg.lines() == [".model DX D(IS=1n)"]

    def test_insertion_order(self):
        reg = ModelRegistry()
        reg.register(model_for("npn"))
        reg.register(model_for("diode"))
        assert [r.name for r in reg.records()] == ["NPN_DEFAULT", "DDEFAULT"]

    def test_register_returns_name(self):
        assert ModelRegistry().register(model_for("led")) == "LED"

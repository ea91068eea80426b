"""
netlist/model_registry.py

.model records for nonlinear devices, de-duplicated by (kind, name).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ModelKind(Enum):
    DIODE = "D"
    NPN = "NPN"
    PNP = "PNP"
    NMOS = "NMOS"
    PMOS = "PMOS"


@dataclass(frozen=True)
class ModelRecord:
    kind: ModelKind
    name: str
    parameters: tuple[tuple[str, str], ...] = ()

    def to_spice(self) -> str:
        pairs = " ".join(f"{k}={v}" for k, v in self.parameters)
        return f".model {self.name} {self.kind.value}({pairs})"


# Built-in defaults keyed by component type
DEFAULT_MODELS = {
    "diode": ModelRecord(ModelKind.DIODE, "DDEFAULT", (("IS", "1e-14"), ("N", "1"))),
    "led": ModelRecord(ModelKind.DIODE, "LED", (("IS", "1e-14"), ("N", "2"))),
    "zener": ModelRecord(ModelKind.DIODE, "DZEN", (("IS", "5e-12"), ("N", "1.5"), ("BV", "5.1"), ("IBV", "5m"))),
    "npn": ModelRecord(ModelKind.NPN, "NPN_DEFAULT", (("IS", "1e-14"), ("BF", "100"))),
    "pnp": ModelRecord(ModelKind.PNP, "PNP_DEFAULT", (("IS", "1e-14"), ("BF", "100"))),
    "nmos": ModelRecord(
        ModelKind.NMOS, "NMOS_DEFAULT", (("LEVEL", "1"), ("VTO", "1"), ("KP", "1e-3"), ("LAMBDA", "0.02"))
    ),
    "pmos": ModelRecord(
        ModelKind.PMOS, "PMOS_DEFAULT", (("LEVEL", "1"), ("VTO", "-1"), ("KP", "1e-3"), ("LAMBDA", "0.02"))
    ),
}


def model_for(
    component_type: str,
    name: Optional[str] = None,
    parameters: Optional[tuple[tuple[str, str], ...]] = None,
) -> ModelRecord:
    """
    Model record for a device, falling back to the type's built-in default.

    A supplied name without parameters reuses the default parameter set
    under that name.

    Raises:
        KeyError: If ``component_type`` has no built-in model.
    """
    default = DEFAULT_MODELS[str(component_type).lower()]
    return ModelRecord(
        kind=default.kind,
        name=name or default.name,
        parameters=parameters if parameters else default.parameters,
    )


class ModelRegistry:
    """Insertion-ordered set of model records; the first (kind, name) registered wins."""

    def __init__(self):
        self._records: dict[tuple[ModelKind, str], ModelRecord] = {}

    def register(self, record: ModelRecord) -> str:
        """Add ``record`` unless its (kind, name) is already present; return its name."""
        self._records.setdefault((record.kind, record.name), record)
        return record.name

    def records(self) -> list[ModelRecord]:
        return list(self._records.values())

    def lines(self) -> list[str]:
        return [r.to_spice() for r in self._records.values()]

    def __len__(self) -> int:
        return len(self._records)

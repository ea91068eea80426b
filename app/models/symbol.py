"""
SymbolDefinition - Port geometry per device type.

This module contains no Qt dependencies. A symbol describes the fixed set of
named ports of one device type, at offsets relative to the top-left corner
of the symbol's width x height box. Symbol tables are immutable values that
are passed into netlist synthesis explicitly.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortDefinition:
    """A named connection point at a fixed offset inside a symbol box."""

    id: str
    x: float
    y: float


@dataclass(frozen=True)
class SymbolDefinition:
    """
    Immutable description of one device type's drawing box and ports.

    Ports keep their declaration order; that order drives node numbering
    during netlist synthesis.
    """

    width: float
    height: float
    ports: tuple[PortDefinition, ...] = field(default_factory=tuple)
    prefix: Optional[str] = None

    @property
    def port_ids(self) -> list[str]:
        return [p.id for p in self.ports]

    def port(self, port_id: str) -> Optional[PortDefinition]:
        """Return the port with the given id, or None if the symbol lacks it."""
        for p in self.ports:
            if p.id == port_id:
                return p
        return None

    def has_port(self, port_id: str) -> bool:
        return self.port(port_id) is not None

    @classmethod
    def from_dict(cls, data: dict) -> "SymbolDefinition":
        """
        Build a symbol from its JSON form.

        Accepts ``width``/``height`` or the short ``w``/``h`` keys used by
        symbol packages.

        Raises:
            ValueError: If the box size or a port entry is malformed.
        """
        if not isinstance(data, dict):
            raise ValueError("symbol definition must be an object")
        width = data.get("width", data.get("w"))
        height = data.get("height", data.get("h"))
        if not isinstance(width, (int, float)) or not isinstance(height, (int, float)):
            raise ValueError("symbol definition needs numeric width and height")

        ports = []
        for raw in data.get("ports", []):
            if not isinstance(raw, dict) or "id" not in raw:
                raise ValueError(f"invalid port entry: {raw!r}")
            x, y = raw.get("x", 0), raw.get("y", 0)
            if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
                raise ValueError(f"port {raw['id']!r} has non-numeric offset")
            ports.append(PortDefinition(id=str(raw["id"]), x=x, y=y))

        prefix = data.get("prefix")
        return cls(width=width, height=height, ports=tuple(ports), prefix=prefix or None)


class SymbolTable(Mapping[str, SymbolDefinition]):
    """
    Read-only lookup from device type to SymbolDefinition.

    Device types are lowercase by contract; lookups lower-case the key so a
    stray ``"Resistor"`` still resolves.
    """

    def __init__(self, symbols: Optional[Mapping[str, SymbolDefinition]] = None):
        self._symbols = MappingProxyType({k.lower(): v for k, v in (symbols or {}).items()})

    def __getitem__(self, device_type: str) -> SymbolDefinition:
        return self._symbols[str(device_type).lower()]

    def __contains__(self, device_type) -> bool:
        return isinstance(device_type, str) and device_type.lower() in self._symbols

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def lookup(self, device_type: str) -> Optional[SymbolDefinition]:
        if device_type not in self:
            return None
        return self[device_type]

    def merged(self, other: Mapping[str, SymbolDefinition]) -> "SymbolTable":
        """Return a new table where entries from ``other`` override this one."""
        combined = dict(self._symbols)
        combined.update({k.lower(): v for k, v in other.items()})
        return SymbolTable(combined)

    @classmethod
    def from_dict(cls, data: dict) -> "SymbolTable":
        """Build a table from ``{type: symbol_json}``; malformed entries are skipped."""
        symbols = {}
        for name, raw in data.items():
            try:
                symbols[name] = SymbolDefinition.from_dict(raw)
            except ValueError as e:
                logger.warning("Skipping symbol %r: %s", name, e)
        return cls(symbols)

    def __repr__(self) -> str:
        return f"SymbolTable({len(self)} symbols)"


def load_symbol_table(path) -> SymbolTable:
    """
    Load symbols from a JSON file or a symbol-package directory.

    A file holds one ``{type: definition}`` mapping. A directory holds an
    ``index.json`` listing per-symbol files; each file's ``name`` field (or
    its stem) is the device type.

    Raises:
        OSError: If the path cannot be read.
        json.JSONDecodeError: If a file is not valid JSON.
        ValueError: If the top-level JSON shape is wrong.
    """
    path = Path(path)
    if path.is_dir():
        index = json.loads((path / "index.json").read_text())
        if not isinstance(index, list):
            raise ValueError(f"{path / 'index.json'} must list symbol files")
        data = {}
        for filename in index:
            raw = json.loads((path / filename).read_text())
            name = raw.get("name") if isinstance(raw, dict) else None
            data[name or Path(filename).stem] = raw
        return SymbolTable.from_dict(data)

    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain an object mapping types to symbols")
    return SymbolTable.from_dict(data)


def _two_port(first: str, second: str, width=60, height=20) -> SymbolDefinition:
    return SymbolDefinition(
        width=width,
        height=height,
        ports=(PortDefinition(first, 0, height / 2), PortDefinition(second, width, height / 2)),
    )


def _vertical_source(top: str, bottom: str) -> SymbolDefinition:
    return SymbolDefinition(width=40, height=60, ports=(PortDefinition(top, 20, 0), PortDefinition(bottom, 20, 60)))


def _three_terminal(top: str, side: str, bottom: str) -> SymbolDefinition:
    return SymbolDefinition(
        width=40,
        height=60,
        ports=(PortDefinition(top, 40, 0), PortDefinition(side, 0, 30), PortDefinition(bottom, 40, 60)),
    )


# Built-in geometry for the canonical device types, on a 10-unit grid.
STANDARD_SYMBOLS = SymbolTable(
    {
        "resistor": _two_port("1", "2"),
        "capacitor": _two_port("1", "2"),
        "capacitor_polarized": _two_port("1", "2"),
        "inductor": _two_port("1", "2"),
        "crystal": _two_port("1", "2", width=40),
        "vsource": _vertical_source("+", "-"),
        "isource": _vertical_source("p", "n"),
        "ground": SymbolDefinition(width=20, height=20, ports=(PortDefinition("GND", 10, 0),)),
        "diode": _two_port("A", "K"),
        "led": _two_port("A", "K"),
        "zener": _two_port("A", "K"),
        "npn": _three_terminal("C", "B", "E"),
        "pnp": _three_terminal("C", "B", "E"),
        "nmos": _three_terminal("D", "G", "S"),
        "pmos": _three_terminal("D", "G", "S"),
        "opamp": SymbolDefinition(
            width=60,
            height=40,
            ports=(PortDefinition("IN-", 0, 10), PortDefinition("IN+", 0, 30), PortDefinition("OUT", 60, 20)),
        ),
        "transformer": SymbolDefinition(
            width=60,
            height=60,
            ports=(
                PortDefinition("P_A", 0, 0),
                PortDefinition("P_B", 0, 60),
                PortDefinition("S_A", 60, 0),
                PortDefinition("S_B", 60, 60),
            ),
        ),
    }
)

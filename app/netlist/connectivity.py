"""
netlist/connectivity.py

Geometry resolution: which component terminals are the same electrical point.

Every port is placed on the canvas (rotation about the symbol box, then
translation by the component position) and snapped to the grid. Terminals
that land on the same grid point are joined even without a wire, and every
valid wire joins its two terminals directly.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from models.component import ComponentData
from models.symbol import PortDefinition, SymbolDefinition, SymbolTable
from models.wire import Endpoint, WireData

from .issues import IssueKind, SynthesisIssue
from .union_find import DisjointSet

logger = logging.getLogger(__name__)

DEFAULT_GRID = 10


class Orientation(Enum):
    """The four axis-aligned placements of a symbol (clockwise, y axis down)."""

    R0 = 0
    R90 = 90
    R180 = 180
    R270 = 270

    @classmethod
    def from_degrees(cls, degrees) -> Optional["Orientation"]:
        """Normalize modulo 360; return None for non-axis-aligned angles."""
        try:
            value = float(degrees)
        except (TypeError, ValueError):
            return None
        if not value.is_integer():
            return None
        try:
            return cls(int(value) % 360)
        except ValueError:
            return None

    def transform(self, x: float, y: float, width: float, height: float) -> tuple[float, float]:
        """Map a port offset inside a width x height box to its rotated offset."""
        if self is Orientation.R90:
            return y, width - x
        if self is Orientation.R180:
            return width - x, height - y
        if self is Orientation.R270:
            return height - y, x
        return x, y

    @property
    def is_vertical_axis(self) -> bool:
        """True when the symbol's own up/down axis is still vertical on the canvas."""
        return self in (Orientation.R0, Orientation.R180)


def quantize(value: float, grid: float = DEFAULT_GRID):
    """Snap ``value`` to the nearest grid multiple, rounding halves up."""
    return math.floor(value / grid + 0.5) * grid


def terminal_key(component_id: str, port_id: str) -> str:
    return f"{component_id}.{port_id}"


def port_position(
    component: ComponentData,
    symbol: SymbolDefinition,
    port: PortDefinition,
    orientation: Orientation = Orientation.R0,
    grid: float = DEFAULT_GRID,
) -> tuple[float, float]:
    """Absolute, grid-snapped canvas position of one port of a placed component."""
    dx, dy = orientation.transform(port.x, port.y, symbol.width, symbol.height)
    x = quantize(component.position[0] + dx, grid)
    y = quantize(component.position[1] + dy, grid)
    return x, y


@dataclass
class Connectivity:
    """
    Result of geometry resolution for one synthesis pass.

    ``components`` holds only the instances that survived (known type,
    first occurrence of their id), in input order.
    """

    components: list[ComponentData] = field(default_factory=list)
    symbols: dict[str, SymbolDefinition] = field(default_factory=dict)
    orientations: dict[str, Orientation] = field(default_factory=dict)
    positions: dict[str, tuple[float, float]] = field(default_factory=dict)
    issues: list[SynthesisIssue] = field(default_factory=list)
    dsu: DisjointSet = field(default_factory=DisjointSet)

    def find(self, key: str) -> str:
        """Class representative of a terminal key (or of the ground anchor)."""
        return self.dsu.find(key)

    def union(self, a: str, b: str) -> str:
        return self.dsu.union(a, b)

    def has_terminal(self, endpoint: Endpoint) -> bool:
        return endpoint.key in self.positions

    def terminal_keys(self, component: ComponentData) -> list[str]:
        """Terminal keys of a component in symbol declaration order."""
        symbol = self.symbols.get(component.component_id)
        if symbol is None:
            return []
        return [terminal_key(component.component_id, pid) for pid in symbol.port_ids]

    def _report(self, kind: IssueKind, subject: str, message: str) -> None:
        logger.warning("%s: %s", subject, message)
        self.issues.append(SynthesisIssue(kind, subject, message))


def resolve_connectivity(
    components: list[ComponentData],
    wires: list[WireData],
    symbols: SymbolTable,
    grid: float = DEFAULT_GRID,
) -> Connectivity:
    """
    Place every terminal and union coincident or wired terminals.

    Components whose type has no symbol are dropped (UNKNOWN_TYPE); repeated
    ids keep the first instance (DUPLICATE_ID). Wires whose endpoints do not
    name an existing port of a surviving component are skipped
    (INVALID_WIRE). Wires that touch the literal ground reference are left
    for the ground binder.
    """
    conn = Connectivity()
    seen_ids: set[str] = set()
    at_point: dict[tuple[float, float], list[str]] = {}

    for comp in components:
        cid = comp.component_id
        if cid in seen_ids:
            conn._report(IssueKind.DUPLICATE_ID, cid, "duplicate component id, instance ignored")
            continue
        symbol = symbols.lookup(comp.component_type)
        if symbol is None:
            conn._report(IssueKind.UNKNOWN_TYPE, cid, f"no symbol for type {comp.component_type!r}, dropped")
            continue
        seen_ids.add(cid)

        orientation = Orientation.from_degrees(comp.rotation)
        if orientation is None:
            conn._report(IssueKind.BAD_ROTATION, cid, f"rotation {comp.rotation!r} treated as 0")
            orientation = Orientation.R0

        conn.components.append(comp)
        conn.symbols[cid] = symbol
        conn.orientations[cid] = orientation
        for port in symbol.ports:
            key = terminal_key(cid, port.id)
            point = port_position(comp, symbol, port, orientation, grid)
            conn.positions[key] = point
            conn.dsu.add(key)
            at_point.setdefault(point, []).append(key)

    for keys in at_point.values():
        for other in keys[1:]:
            conn.union(keys[0], other)

    for wire in wires:
        if wire.touches_ground_reference():
            continue
        bad = [str(ep) for ep in wire.get_endpoints() if not conn.has_terminal(ep)]
        if bad:
            conn._report(IssueKind.INVALID_WIRE, wire.wire_id, f"unknown terminal(s) {', '.join(bad)}, wire skipped")
            continue
        conn.union(wire.start.key, wire.end.key)

    logger.debug(
        "Resolved %d terminals on %d components (%d wires)",
        len(conn.positions),
        len(conn.components),
        len(wires),
    )
    return conn

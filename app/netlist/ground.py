"""
netlist/ground.py

Ground binding: collapse every ground device and every literal "0"
reference onto one equivalence class.
"""

import logging

from models.symbol import SymbolDefinition
from models.wire import WireData

from .connectivity import Connectivity, terminal_key
from .issues import IssueKind, SynthesisIssue

logger = logging.getLogger(__name__)

# Synthetic union-find key; terminal keys always contain a '.', this never does
GROUND_ANCHOR = "<ground>"
GROUND_PORT = "GND"


def ground_port_id(symbol: SymbolDefinition):
    """The terminal of a ground symbol that ties to node 0."""
    if symbol.has_port(GROUND_PORT):
        return GROUND_PORT
    if len(symbol.ports) == 1:
        return symbol.ports[0].id
    return None


class GroundBinder:
    """
    Unions ground terminals with a synthetic anchor.

    Membership is answered by comparing representatives after every union
    has been made, because later unions can change which key represents the
    anchor's class.
    """

    def __init__(self, connectivity: Connectivity):
        self.connectivity = connectivity
        self.connectivity.dsu.add(GROUND_ANCHOR)
        self._bound = False

    def bind(self, wires: list[WireData]) -> list[SynthesisIssue]:
        """Union ground-device terminals and "0"-referenced terminals with the anchor."""
        issues = []
        conn = self.connectivity

        for comp in conn.components:
            if not comp.is_ground:
                continue
            port_id = ground_port_id(conn.symbols[comp.component_id])
            if port_id is None:
                issue = SynthesisIssue(
                    IssueKind.MISSING_PORT, comp.component_id, "ground symbol has no single ground terminal"
                )
                logger.warning("%s", issue)
                issues.append(issue)
                continue
            conn.union(terminal_key(comp.component_id, port_id), GROUND_ANCHOR)

        for wire in wires:
            if not wire.touches_ground_reference():
                continue
            others = [ep for ep in wire.get_endpoints() if not ep.is_ground_reference]
            for ep in others:
                if not conn.has_terminal(ep):
                    issue = SynthesisIssue(
                        IssueKind.INVALID_WIRE, wire.wire_id, f"unknown terminal {ep}, ground reference skipped"
                    )
                    logger.warning("%s", issue)
                    issues.append(issue)
                    continue
                conn.union(ep.key, GROUND_ANCHOR)

        self._bound = True
        return issues

    @property
    def ground_representative(self) -> str:
        return self.connectivity.find(GROUND_ANCHOR)

    def is_ground_class(self, representative: str) -> bool:
        """True if ``representative`` names the class that reaches the ground anchor."""
        if not self._bound:
            raise RuntimeError("is_ground_class() called before bind()")
        return representative == self.ground_representative

    def is_grounded(self, key: str) -> bool:
        return self.is_ground_class(self.connectivity.find(key))

"""
CircuitModel - Parsed circuit input for one synthesis pass.

This module contains no Qt dependencies. It holds the ordered component
list, the wire list and the requested analyses, built from the
editor/generation JSON shape::

    {
      "components": [{"id": "R1", "type": "resistor", "x": 0, "y": 0, ...}],
      "connections": [{"from": "R1.1", "to": "V1.+"}],
      "analysis": {"type": "tran", "step": "1u", "stop": "1m"}
    }
"""

import logging
from dataclasses import dataclass, field

from .analysis import AnalysisConfig, parse_analyses
from .component import ComponentData
from .wire import WireData

logger = logging.getLogger(__name__)


@dataclass
class CircuitModel:
    """
    Central data store holding one circuit's components and wires.

    Component order is significant: node numbers and reference designators
    are assigned in this order.
    """

    components: list[ComponentData] = field(default_factory=list)
    wires: list[WireData] = field(default_factory=list)
    analyses: list[AnalysisConfig] = field(default_factory=list)
    title: str = ""

    # Connection entries that could not be parsed: (index, message)
    rejected_connections: list[tuple[int, str]] = field(default_factory=list)

    def add_component(self, component: ComponentData) -> None:
        self.components.append(component)

    def add_wire(self, wire: WireData) -> None:
        self.wires.append(wire)

    @classmethod
    def from_dict(cls, data: dict) -> "CircuitModel":
        """
        Build a model from validated circuit JSON.

        Connections that cannot be parsed are kept out of ``wires`` and
        listed in ``rejected_connections``.
        """
        model = cls(title=str(data.get("title") or ""))
        for comp in data.get("components", []):
            model.add_component(ComponentData.from_dict(comp))

        for i, conn in enumerate(data.get("connections", [])):
            try:
                model.add_wire(WireData.from_connection(conn, index=i))
            except (ValueError, AttributeError) as e:
                logger.warning("Skipping connection #%d: %s", i + 1, e)
                model.rejected_connections.append((i, str(e)))

        model.analyses = parse_analyses(data.get("analysis", data.get("analyses")))
        return model


"""
WireData - Pure Python data model for circuit wires.

This module contains no Qt dependencies. A wire is a user-intended direct
connection between two named terminals, written as dotted references
(``"R1.2"``) in the editor's connection list.
"""

from dataclasses import dataclass
from typing import Optional

# Literal node name that always refers to ground
GROUND_REFERENCE = "0"


@dataclass(frozen=True)
class Endpoint:
    """One end of a wire: a component terminal or the literal ground reference."""

    component_id: str
    port_id: str = ""

    @property
    def is_ground_reference(self) -> bool:
        return self.component_id == GROUND_REFERENCE

    @property
    def key(self) -> str:
        """Terminal key ``componentId.portId`` used for connectivity."""
        return f"{self.component_id}.{self.port_id}"

    @classmethod
    def parse(cls, ref) -> "Endpoint":
        """
        Parse a dotted ``"componentId.portId"`` reference.

        The component id is everything before the first dot, so port ids
        such as ``IN+`` or ``1`` survive intact. A bare ``"0"`` (or a
        reference on component ``0``) is the ground reference.

        Raises:
            ValueError: If the reference is empty or has no port part.
        """
        text = str(ref if ref is not None else "").strip()
        if not text:
            raise ValueError("empty terminal reference")
        component_id, sep, port_id = text.partition(".")
        component_id = component_id.strip()
        port_id = port_id.strip()
        if component_id == GROUND_REFERENCE:
            return cls(GROUND_REFERENCE)
        if not sep or not component_id or not port_id:
            raise ValueError(f"terminal reference {text!r} is not of the form 'component.port'")
        return cls(component_id, port_id)

    def __str__(self) -> str:
        if self.is_ground_reference:
            return GROUND_REFERENCE
        return self.key


@dataclass(frozen=True)
class WireData:
    """
    Pure Python data class representing a wire between two terminals.

    Wires carry no geometry; connectivity comes from the referenced
    terminals alone.
    """

    wire_id: str
    start: Endpoint
    end: Endpoint

    @classmethod
    def between(cls, start_ref: str, end_ref: str, wire_id: Optional[str] = None) -> "WireData":
        """Create a wire from two dotted references."""
        start = Endpoint.parse(start_ref)
        end = Endpoint.parse(end_ref)
        return cls(wire_id=wire_id or f"{start}__{end}", start=start, end=end)

    @classmethod
    def from_connection(cls, data: dict, index: int = 0) -> "WireData":
        """
        Deserialize a ``{"from": ..., "to": ...}`` connection.

        Raises:
            ValueError: If either reference cannot be parsed.
        """
        wire_id = data.get("id") or f"W{index + 1}"
        return cls.between(data.get("from"), data.get("to"), wire_id=str(wire_id))

    def get_endpoints(self) -> list[Endpoint]:
        return [self.start, self.end]

    def touches_ground_reference(self) -> bool:
        return self.start.is_ground_reference or self.end.is_ground_reference

    def to_dict(self) -> dict:
        return {"id": self.wire_id, "from": str(self.start), "to": str(self.end)}

    def __repr__(self) -> str:
        return f"WireData({self.start} -> {self.end})"

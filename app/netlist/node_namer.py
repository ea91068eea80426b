"""
netlist/node_namer.py

Display names for equivalence classes: "0" for ground, N1, N2, ... for the
rest in first-lookup order.
"""

from .connectivity import Connectivity
from .ground import GroundBinder

GROUND_NODE = "0"
NODE_PREFIX = "N"


class NodeNamer:
    """
    Lazily numbers classes as they are first requested.

    Numbering follows request order only, so callers must walk components
    in a fixed order for reproducible names.
    """

    def __init__(self, connectivity: Connectivity, ground: GroundBinder, prefix: str = NODE_PREFIX):
        self._connectivity = connectivity
        self._ground = ground
        self._prefix = prefix
        self._names: dict[str, str] = {}
        self._next_index = 1

    def node_for(self, key: str) -> str:
        """Node name of the class containing terminal key ``key``."""
        rep = self._connectivity.find(key)
        if self._ground.is_ground_class(rep):
            return GROUND_NODE
        name = self._names.get(rep)
        if name is None:
            name = f"{self._prefix}{self._next_index}"
            self._next_index += 1
            self._names[rep] = name
        return name

    @property
    def named_count(self) -> int:
        """Number of non-ground nodes named so far."""
        return len(self._names)

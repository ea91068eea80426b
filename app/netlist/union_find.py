"""
netlist/union_find.py

Disjoint-set forest over interned string keys.

Keys are mapped to dense integer slots on first use, so find/union work on
plain lists instead of repeatedly hashing terminal-key strings.
"""


class DisjointSet:
    """Union-find with path halving; union attaches the first root under the second."""

    def __init__(self):
        self._index: dict[str, int] = {}
        self._keys: list[str] = []
        self._parent: list[int] = []

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key) -> bool:
        return key in self._index

    def add(self, key: str) -> int:
        """Intern ``key`` as its own singleton class and return its slot."""
        slot = self._index.get(key)
        if slot is None:
            slot = len(self._keys)
            self._index[key] = slot
            self._keys.append(key)
            self._parent.append(slot)
        return slot

    def _find_slot(self, slot: int) -> int:
        parent = self._parent
        while parent[slot] != slot:
            parent[slot] = parent[parent[slot]]
            slot = parent[slot]
        return slot

    def find(self, key: str) -> str:
        """Return the representative key of ``key``'s class, adding it if unseen."""
        return self._keys[self._find_slot(self.add(key))]

    def union(self, a: str, b: str) -> str:
        """Merge the classes of ``a`` and ``b``; return the surviving representative."""
        ra = self._find_slot(self.add(a))
        rb = self._find_slot(self.add(b))
        if ra != rb:
            self._parent[ra] = rb
        return self._keys[rb]

    def connected(self, a: str, b: str) -> bool:
        return self.find(a) == self.find(b)

    def classes(self) -> dict[str, list[str]]:
        """Group every key by representative, in first-interned order."""
        groups: dict[str, list[str]] = {}
        for slot, key in enumerate(self._keys):
            groups.setdefault(self._keys[self._find_slot(slot)], []).append(key)
        return groups

"""
netlist/designators.py

Reference designators (R1, C2, Q1, ...) allocated per prefix letter in
first-seen order.
"""

from typing import Optional

from models.component import SPICE_PREFIXES, DeviceFamily


class DesignatorAllocator:
    """
    One counter per family; the first request for a key fixes its designator.

    Keys are usually component ids. Devices that need several designators
    (a transformer's two windings) use derived keys such as ``"T1:primary"``.
    """

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._assigned: dict[str, str] = {}

    def designator(self, key: str, family: DeviceFamily, prefix: Optional[str] = None) -> str:
        """
        Return the designator for ``key``, allocating ``prefix + n`` on first use.

        ``prefix`` overrides the family prefix (used for generic symbols that
        declare their own). Counters are keyed by the prefix letter, so an
        override such as "R" continues the resistor sequence instead of
        reusing R1.
        """
        existing = self._assigned.get(key)
        if existing is not None:
            return existing

        letter = prefix or SPICE_PREFIXES[family]
        count = self._counters.get(letter, 0) + 1
        self._counters[letter] = count

        name = f"{letter}{count}"
        self._assigned[key] = name
        return name

    def assigned(self) -> dict[str, str]:
        """Copy of every key -> designator assigned so far, in allocation order."""
        return dict(self._assigned)

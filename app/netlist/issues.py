"""
netlist/issues.py

Recoverable problems found during netlist synthesis.

Synthesis never raises for structurally valid input; anything it has to
drop, substitute or merely notice is reported as a SynthesisIssue.
"""

from dataclasses import dataclass
from enum import Enum


class IssueKind(Enum):
    UNKNOWN_TYPE = "unknown-type"
    INVALID_WIRE = "invalid-wire"
    MISSING_PORT = "missing-port"
    FLOATING_NODE = "floating-node"
    DUPLICATE_ID = "duplicate-id"
    BAD_ROTATION = "bad-rotation"


@dataclass(frozen=True)
class SynthesisIssue:
    kind: IssueKind
    subject: str
    message: str

    @property
    def is_error(self) -> bool:
        """Floating nodes are left to the simulator; everything else lost input."""
        return self.kind != IssueKind.FLOATING_NODE

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.subject}: {self.message}"

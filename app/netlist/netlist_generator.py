"""
netlist/netlist_generator.py

Handles SPICE netlist generation from placed components and wires.

One synthesis pass runs geometry resolution, ground binding, node naming,
designator allocation, device stamping and assembly, in that order. All
scratch state lives inside the pass, so the same input always produces the
same text.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from models.analysis import AnalysisConfig
from models.circuit import CircuitModel
from models.component import ComponentData, DeviceFamily
from models.symbol import STANDARD_SYMBOLS, SymbolTable
from models.wire import WireData

from .assembler import DEFAULT_TITLE, NetlistAssembler
from .connectivity import DEFAULT_GRID, resolve_connectivity
from .designators import DesignatorAllocator
from .ground import GroundBinder
from .issues import IssueKind, SynthesisIssue
from .model_registry import ModelRegistry
from .node_namer import GROUND_NODE, NodeNamer
from .stamper import DeviceStamper
from .union_find import DisjointSet

logger = logging.getLogger(__name__)


@dataclass
class SynthesisOptions:
    title: str = DEFAULT_TITLE
    grid: float = DEFAULT_GRID
    analyses: list[AnalysisConfig] = field(default_factory=list)


@dataclass
class NetlistResult:
    """Everything one synthesis pass produces."""

    text: str
    terminal_nodes: dict[str, str] = field(default_factory=dict)
    designators: dict[str, str] = field(default_factory=dict)
    issues: list[SynthesisIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[SynthesisIssue]:
        return [i for i in self.issues if i.is_error]

    def node_of(self, component_id: str, port_id: str) -> Optional[str]:
        return self.terminal_nodes.get(f"{component_id}.{port_id}")


def find_floating_nodes(device_nodes: list[tuple[str, ...]]) -> list[str]:
    """
    Nodes with no path to ground through any stamped device.

    Each device is treated as joining all of its nodes. Result order is
    first-appearance order.
    """
    dsu = DisjointSet()
    dsu.add(GROUND_NODE)
    ordered = []
    for nodes in device_nodes:
        for node in nodes:
            if node not in dsu:
                ordered.append(node)
            dsu.add(node)
        for node in nodes[1:]:
            dsu.union(nodes[0], node)
    return [n for n in ordered if n != GROUND_NODE and not dsu.connected(n, GROUND_NODE)]


class NetlistGenerator:
    """Generates SPICE netlists from circuit components and wires."""

    def __init__(
        self,
        components: list[ComponentData],
        wires: list[WireData],
        symbols: Optional[SymbolTable] = None,
        options: Optional[SynthesisOptions] = None,
    ):
        self.components = list(components)
        self.wires = list(wires)
        self.symbols = symbols if symbols is not None else STANDARD_SYMBOLS
        self.options = options or SynthesisOptions()
        # Problems found while the input was parsed, reported with this pass
        self.input_issues: list[SynthesisIssue] = []

    @classmethod
    def from_model(cls, model: CircuitModel, symbols: Optional[SymbolTable] = None, **overrides):
        """Build a generator from a CircuitModel, taking its title and analyses."""
        options = SynthesisOptions(
            title=model.title or DEFAULT_TITLE,
            analyses=list(model.analyses),
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(options, key, value)
        generator = cls(model.components, model.wires, symbols=symbols, options=options)
        for index, message in model.rejected_connections:
            generator.input_issues.append(SynthesisIssue(IssueKind.INVALID_WIRE, f"W{index + 1}", message))
        return generator

    def generate(self) -> str:
        """Generate complete SPICE netlist text."""
        return self.synthesize().text

    def synthesize(self) -> NetlistResult:
        """Run one full synthesis pass."""
        conn = resolve_connectivity(self.components, self.wires, self.symbols, grid=self.options.grid)
        ground = GroundBinder(conn)
        issues = list(self.input_issues)
        issues.extend(conn.issues)
        issues.extend(ground.bind(self.wires))

        namer = NodeNamer(conn, ground)
        designators = DesignatorAllocator()
        models = ModelRegistry()
        stamper = DeviceStamper(conn, namer, designators, models)

        devices: list[str] = []
        extras: list[str] = []
        device_nodes: list[tuple[str, ...]] = []
        for comp in conn.components:
            stamp = stamper.stamp(comp)
            devices.extend(stamp.lines)
            extras.extend(stamp.extras)
            if not stamp.is_empty:
                nodes = tuple(namer.node_for(k) for k in conn.terminal_keys(comp))
                if comp.family == DeviceFamily.OPAMP:
                    nodes += (GROUND_NODE,)
                device_nodes.append(nodes)
        issues.extend(stamper.issues)

        terminal_nodes = {}
        for comp in conn.components:
            for key in conn.terminal_keys(comp):
                terminal_nodes[key] = namer.node_for(key)

        for node in find_floating_nodes(device_nodes):
            issue = SynthesisIssue(IssueKind.FLOATING_NODE, node, "no path to ground")
            logger.info("%s", issue)
            issues.append(issue)

        assembler = NetlistAssembler(
            title=self.options.title,
            models=models.lines(),
            devices=devices,
            extras=extras,
            analyses=self.options.analyses,
        )
        logger.debug(
            "Synthesized %d device lines, %d extras, %d models, %d nodes",
            len(devices),
            len(extras),
            len(models),
            namer.named_count,
        )
        return NetlistResult(
            text=assembler.assemble(),
            terminal_nodes=terminal_nodes,
            designators=designators.assigned(),
            issues=issues,
        )


def generate_netlist(
    components: list[ComponentData],
    wires: list[WireData],
    symbols: Optional[SymbolTable] = None,
    options: Optional[SynthesisOptions] = None,
) -> NetlistResult:
    """Synthesize a netlist in one call; see NetlistGenerator.synthesize()."""
    return NetlistGenerator(components, wires, symbols=symbols, options=options).synthesize()

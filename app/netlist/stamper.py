"""
netlist/stamper.py

Device stamping: turn one placed component plus its resolved node names
into netlist text.

Each device family has one stamping method. Lines for single-element
devices go to the device block; transformers and op-amps write to the
extras block that the assembler places after all device lines.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from models.component import (
    DEFAULT_VALUES,
    BjtParams,
    ComponentData,
    DeviceFamily,
    DiodeParams,
    GenericParams,
    MosfetParams,
    OpAmpParams,
    PassiveParams,
    SourceParams,
    TransformerParams,
)

from .connectivity import Connectivity, terminal_key
from .designators import DesignatorAllocator
from .issues import IssueKind, SynthesisIssue
from .model_registry import ModelRegistry, model_for
from .node_namer import GROUND_NODE, NodeNamer

logger = logging.getLogger(__name__)


@dataclass
class Stamp:
    """Netlist text produced by one component."""

    lines: list[str] = field(default_factory=list)
    extras: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.lines and not self.extras


class DeviceStamper:
    """
    Stateless per component; shares the namer, designator counters and
    model registry across the whole component walk.
    """

    def __init__(
        self,
        connectivity: Connectivity,
        namer: NodeNamer,
        designators: DesignatorAllocator,
        models: ModelRegistry,
    ):
        self.connectivity = connectivity
        self.namer = namer
        self.designators = designators
        self.models = models
        self.issues: list[SynthesisIssue] = []

        self._dispatch = {
            DeviceFamily.RESISTOR: self._stamp_passive,
            DeviceFamily.CAPACITOR: self._stamp_passive,
            DeviceFamily.INDUCTOR: self._stamp_passive,
            DeviceFamily.VOLTAGE_SOURCE: self._stamp_voltage_source,
            DeviceFamily.CURRENT_SOURCE: self._stamp_current_source,
            DeviceFamily.DIODE: self._stamp_diode,
            DeviceFamily.BJT: self._stamp_bjt,
            DeviceFamily.MOSFET: self._stamp_mosfet,
            DeviceFamily.TRANSFORMER: self._stamp_transformer,
            DeviceFamily.OPAMP: self._stamp_opamp,
            DeviceFamily.GROUND: self._stamp_ground,
            DeviceFamily.GENERIC: self._stamp_generic,
        }

    def stamp(self, comp: ComponentData) -> Stamp:
        """
        Stamp one component.

        Every port is resolved to a node name first, in symbol declaration
        order, so node numbering depends only on component order.
        """
        if comp.is_ground:
            return Stamp()
        ports = {
            pid: self.namer.node_for(terminal_key(comp.component_id, pid))
            for pid in self.connectivity.symbols[comp.component_id].port_ids
        }
        return self._dispatch[comp.family](comp, ports)

    # --- Helpers ---

    def _report(self, kind: IssueKind, subject: str, message: str) -> None:
        logger.warning("%s: %s", subject, message)
        self.issues.append(SynthesisIssue(kind, subject, message))

    def _node(self, comp: ComponentData, ports: dict[str, str], port_id: str) -> str:
        """Node on ``port_id``, or ground as a placeholder when the symbol lacks it."""
        node = ports.get(port_id)
        if node is None:
            self._report(IssueKind.MISSING_PORT, comp.component_id, f"missing port {port_id!r}, tied to node 0")
            return GROUND_NODE
        return node

    def _pair(self, comp: ComponentData, ports: dict[str, str], first: str, second: str) -> tuple[str, str]:
        """Nodes on two named ports, falling back to the first two declared ports."""
        if first not in ports or second not in ports:
            declared = list(ports)
            if len(declared) >= 2 and first not in declared and second not in declared:
                return ports[declared[0]], ports[declared[1]]
        return self._node(comp, ports, first), self._node(comp, ports, second)

    def _designator(self, comp: ComponentData, family: Optional[DeviceFamily] = None) -> str:
        return self.designators.designator(comp.component_id, family or comp.family)

    # --- Per-family rules ---

    def _stamp_ground(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        return Stamp()

    def _stamp_passive(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        device = comp.device if isinstance(comp.device, PassiveParams) else PassiveParams()
        a, b = self._pair(comp, ports, "1", "2")
        value = device.value or DEFAULT_VALUES[comp.family]
        return Stamp(lines=[f"{self._designator(comp)} {a} {b} {value}"])

    def source_polarity(self, comp: ComponentData, plus_id: str, minus_id: str) -> tuple[str, str]:
        """
        Order a source's two ports by where they sit on the canvas.

        Upright or inverted (0/180), the port higher on screen comes first;
        turned sideways (90/270), the port further right comes first. Ties
        keep the logical order.
        """
        conn = self.connectivity
        plus = conn.positions.get(terminal_key(comp.component_id, plus_id))
        minus = conn.positions.get(terminal_key(comp.component_id, minus_id))
        if plus is None or minus is None:
            return plus_id, minus_id

        if conn.orientations[comp.component_id].is_vertical_axis:
            plus_first = plus[1] <= minus[1]
        else:
            plus_first = plus[0] >= minus[0]
        return (plus_id, minus_id) if plus_first else (minus_id, plus_id)

    def _stamp_voltage_source(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        device = comp.device if isinstance(comp.device, SourceParams) else SourceParams()
        first, second = self.source_polarity(comp, "+", "-")
        n1 = self._node(comp, ports, first)
        n2 = self._node(comp, ports, second)
        return Stamp(lines=[f"{self._designator(comp)} {n1} {n2} {device.waveform.to_spice()}"])

    def _stamp_current_source(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        device = comp.device if isinstance(comp.device, SourceParams) else SourceParams()
        p = self._node(comp, ports, "p")
        n = self._node(comp, ports, "n")
        return Stamp(lines=[f"{self._designator(comp)} {p} {n} {device.waveform.to_spice()}"])

    def _register_model(self, comp: ComponentData, device) -> str:
        record = model_for(comp.component_type, device.model, device.params)
        return self.models.register(record)

    def _stamp_diode(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        device = comp.device if isinstance(comp.device, DiodeParams) else DiodeParams()
        a = self._node(comp, ports, "A")
        k = self._node(comp, ports, "K")
        model = self._register_model(comp, device)
        return Stamp(lines=[f"{self._designator(comp)} {a} {k} {model}"])

    def _stamp_bjt(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        device = comp.device if isinstance(comp.device, BjtParams) else BjtParams()
        c = self._node(comp, ports, "C")
        b = self._node(comp, ports, "B")
        e = self._node(comp, ports, "E")
        model = self._register_model(comp, device)
        return Stamp(lines=[f"{self._designator(comp)} {c} {b} {e} {model}"])

    def _stamp_mosfet(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        device = comp.device if isinstance(comp.device, MosfetParams) else MosfetParams()
        d = self._node(comp, ports, "D")
        g = self._node(comp, ports, "G")
        s = self._node(comp, ports, "S")

        if device.body:
            if device.body in ports:
                body = ports[device.body]
            else:
                self._report(
                    IssueKind.MISSING_PORT, comp.component_id, f"body port {device.body!r} missing, using source"
                )
                body = s
        else:
            body = ports.get("B", s)

        model = self._register_model(comp, device)
        return Stamp(lines=[f"{self._designator(comp)} {d} {g} {s} {body} {model}"])

    def _stamp_transformer(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        device = comp.device if isinstance(comp.device, TransformerParams) else TransformerParams()
        cid = comp.component_id
        primary = self.designators.designator(f"{cid}:primary", DeviceFamily.INDUCTOR)
        secondary = self.designators.designator(f"{cid}:secondary", DeviceFamily.INDUCTOR)
        coupling = self._designator(comp, DeviceFamily.TRANSFORMER)

        pa, pb = self._node(comp, ports, "P_A"), self._node(comp, ports, "P_B")
        sa, sb = self._node(comp, ports, "S_A"), self._node(comp, ports, "S_B")
        return Stamp(
            extras=[
                f"{primary} {pa} {pb} {device.primary}",
                f"{secondary} {sa} {sb} {device.secondary}",
                f"{coupling} {primary} {secondary} {device.coupling}",
            ]
        )

    def _stamp_opamp(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        device = comp.device if isinstance(comp.device, OpAmpParams) else OpAmpParams()
        vp = self._node(comp, ports, "IN+")
        vn = self._node(comp, ports, "IN-")
        out = self._node(comp, ports, "OUT")
        # Ideal VCVS: output referenced to ground
        return Stamp(extras=[f"{self._designator(comp)} {out} {GROUND_NODE} {vp} {vn} {device.gain}"])

    def _stamp_generic(self, comp: ComponentData, ports: dict[str, str]) -> Stamp:
        declared = list(ports)
        if len(declared) < 2:
            self._report(
                IssueKind.MISSING_PORT,
                comp.component_id,
                f"type {comp.component_type!r} has fewer than two ports, not stamped",
            )
            return Stamp()
        symbol = self.connectivity.symbols[comp.component_id]
        name = self.designators.designator(comp.component_id, DeviceFamily.GENERIC, prefix=symbol.prefix)
        value = comp.device.value if isinstance(comp.device, GenericParams) else ""
        return Stamp(lines=[f"{name} {ports[declared[0]]} {ports[declared[1]]} {value or comp.component_type}"])

"""
ComponentData - Pure Python data model for placed circuit components.

This module contains no Qt dependencies. All positions are represented as
tuples (x, y) rather than QPointF.

Component types are lowercase strings matching the symbol table
('resistor', 'vsource', 'npn', ...). Each type belongs to one device family,
and each family carries its own parameter record (see DeviceParams).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)


class DeviceFamily(Enum):
    RESISTOR = "resistor"
    CAPACITOR = "capacitor"
    INDUCTOR = "inductor"
    VOLTAGE_SOURCE = "voltage-source"
    CURRENT_SOURCE = "current-source"
    DIODE = "diode"
    BJT = "bjt"
    MOSFET = "mosfet"
    TRANSFORMER = "transformer"
    OPAMP = "opamp"
    GROUND = "ground"
    GENERIC = "generic"


# Raw component type -> device family. Unlisted types are GENERIC.
TYPE_FAMILIES = {
    "resistor": DeviceFamily.RESISTOR,
    "capacitor": DeviceFamily.CAPACITOR,
    "capacitor_polarized": DeviceFamily.CAPACITOR,
    "inductor": DeviceFamily.INDUCTOR,
    "vsource": DeviceFamily.VOLTAGE_SOURCE,
    "isource": DeviceFamily.CURRENT_SOURCE,
    "diode": DeviceFamily.DIODE,
    "led": DeviceFamily.DIODE,
    "zener": DeviceFamily.DIODE,
    "npn": DeviceFamily.BJT,
    "pnp": DeviceFamily.BJT,
    "nmos": DeviceFamily.MOSFET,
    "pmos": DeviceFamily.MOSFET,
    "transformer": DeviceFamily.TRANSFORMER,
    "opamp": DeviceFamily.OPAMP,
    "ground": DeviceFamily.GROUND,
}

# Reference-designator prefix per family
SPICE_PREFIXES = {
    DeviceFamily.RESISTOR: "R",
    DeviceFamily.CAPACITOR: "C",
    DeviceFamily.INDUCTOR: "L",
    DeviceFamily.VOLTAGE_SOURCE: "V",
    DeviceFamily.CURRENT_SOURCE: "I",
    DeviceFamily.DIODE: "D",
    DeviceFamily.BJT: "Q",
    DeviceFamily.MOSFET: "M",
    DeviceFamily.TRANSFORMER: "K",
    DeviceFamily.OPAMP: "E",
    DeviceFamily.GROUND: "GND",
    DeviceFamily.GENERIC: "X",
}

# Default values per family
DEFAULT_VALUES = {
    DeviceFamily.RESISTOR: "1k",
    DeviceFamily.CAPACITOR: "1u",
    DeviceFamily.INDUCTOR: "1m",
}

DEFAULT_TRANSFORMER = {"lp": "10m", "ls": "10m", "k": "0.99"}
DEFAULT_OPAMP_GAIN = "1e6"


class WaveformKind(Enum):
    DC = "DC"
    AC = "AC"
    SIN = "SIN"
    PULSE = "PULSE"
    EXP = "EXP"
    PWL = "PWL"


# Ordered parameter names per waveform, as they appear inside the parentheses
WAVEFORM_FIELDS = {
    WaveformKind.SIN: ("offset", "amplitude", "frequency", "delay", "theta", "phase"),
    WaveformKind.PULSE: ("v1", "v2", "td", "tr", "tf", "pw", "per"),
    WaveformKind.EXP: ("v1", "v2", "td1", "tau1", "td2", "tau2"),
}

# Field aliases accepted from generated circuits (sin.vo, sin.va, ...)
_WAVEFORM_ALIASES = {
    "vo": "offset",
    "io": "offset",
    "va": "amplitude",
    "ia": "amplitude",
    "freq": "frequency",
    "td": "delay",
    "phi": "phase",
    "delay": "td",
    "rise": "tr",
    "fall": "tf",
    "width": "pw",
    "period": "per",
}


def default_waveform_params(family: DeviceFamily) -> dict:
    """Return default waveform parameters for every waveform kind of a source family."""
    level = "1m" if family == DeviceFamily.CURRENT_SOURCE else "5"
    return {
        "dc": level,
        "ac": "1",
        "ac_phase": "0",
        WaveformKind.SIN: {
            "offset": "0",
            "amplitude": level,
            "frequency": "1k",
            "delay": "0",
            "theta": "0",
            "phase": "0",
        },
        WaveformKind.PULSE: {
            "v1": "0",
            "v2": level,
            "td": "0",
            "tr": "1n",
            "tf": "1n",
            "pw": "500u",
            "per": "1m",
        },
        WaveformKind.EXP: {
            "v1": "0",
            "v2": level,
            "td1": "0",
            "tau1": "1u",
            "td2": "2u",
            "tau2": "2u",
        },
        WaveformKind.PWL: "0 0",
    }


def fmt_value(value) -> str:
    """Render a numeric or string parameter for netlist text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Waveform:
    """
    A source waveform clause.

    ``kind`` is None when the waveform kind was missing or unrecognized;
    such a source is stamped as ``DC 0``.
    """

    kind: Optional[WaveformKind]
    dc: str = ""
    ac_magnitude: str = ""
    ac_phase: str = "0"
    params: tuple[str, ...] = ()
    points: str = ""

    def to_spice(self) -> str:
        if self.kind == WaveformKind.DC:
            return f"DC {self.dc}"
        if self.kind == WaveformKind.AC:
            return f"AC {self.ac_magnitude} {self.ac_phase}"
        if self.kind == WaveformKind.PWL:
            return f"PWL({self.points})"
        if self.kind in WAVEFORM_FIELDS:
            return f"{self.kind.value}({' '.join(self.params)})"
        return "DC 0"


def _normalize_waveform_record(raw: dict, kind: WaveformKind) -> dict:
    names = set(WAVEFORM_FIELDS[kind])
    record = {}
    for key, value in raw.items():
        key = str(key).lower()
        if key not in names:
            key = _WAVEFORM_ALIASES.get(key, key)
        record[key] = value
    return record


def _pwl_points(raw) -> str:
    if isinstance(raw, str):
        return raw.strip()
    parts = []
    for point in raw or []:
        if isinstance(point, dict):
            parts.extend([fmt_value(point.get("t", 0)), fmt_value(point.get("v", 0))])
        elif isinstance(point, (list, tuple)):
            parts.extend(fmt_value(v) for v in point)
        else:
            parts.append(fmt_value(point))
    return " ".join(parts)


def parse_waveform(fields: dict, family: DeviceFamily) -> Waveform:
    """
    Build a Waveform from flat source fields.

    Recognized fields: ``waveType`` (DC/AC/SIN/PULSE/EXP/PWL, default DC),
    ``dc``, ``ac``, ``acPhase``, and per-kind records ``sin``, ``pulse``,
    ``exp``, ``pwl``. Missing entries in a record are filled from
    default_waveform_params().
    """
    defaults = default_waveform_params(family)
    raw_kind = fields.get("waveType", fields.get("waveform", "DC"))
    try:
        kind = WaveformKind(str(raw_kind or "DC").upper())
    except ValueError:
        logger.warning("Unknown waveform kind %r, using DC 0", raw_kind)
        return Waveform(kind=None)

    if kind == WaveformKind.DC:
        return Waveform(kind=kind, dc=fmt_value(_first_set(fields.get("dc"), fields.get("value"), defaults["dc"])))
    if kind == WaveformKind.AC:
        return Waveform(
            kind=kind,
            ac_magnitude=fmt_value(_first_set(fields.get("ac"), defaults["ac"])),
            ac_phase=fmt_value(_first_set(fields.get("acPhase"), fields.get("ac_phase"), defaults["ac_phase"])),
        )
    if kind == WaveformKind.PWL:
        points = _pwl_points(fields.get("pwl")) or defaults[WaveformKind.PWL]
        return Waveform(kind=kind, points=points)

    raw = fields.get(kind.value.lower())
    record = _normalize_waveform_record(raw if isinstance(raw, dict) else {}, kind)
    merged = dict(defaults[kind])
    merged.update({k: v for k, v in record.items() if k in merged and v is not None and v != ""})
    return Waveform(kind=kind, params=tuple(fmt_value(merged[name]) for name in WAVEFORM_FIELDS[kind]))


def _first_set(*values):
    for v in values:
        if v is not None and v != "":
            return v
    return ""


# --- Per-family device parameters ---


@dataclass(frozen=True)
class PassiveParams:
    value: str = ""


@dataclass(frozen=True)
class SourceParams:
    waveform: Waveform = field(default_factory=lambda: Waveform(kind=None))


@dataclass(frozen=True)
class DiodeParams:
    model: Optional[str] = None
    params: Optional[tuple[tuple[str, str], ...]] = None


@dataclass(frozen=True)
class BjtParams:
    model: Optional[str] = None
    params: Optional[tuple[tuple[str, str], ...]] = None


@dataclass(frozen=True)
class MosfetParams:
    model: Optional[str] = None
    params: Optional[tuple[tuple[str, str], ...]] = None
    body: Optional[str] = None


@dataclass(frozen=True)
class TransformerParams:
    primary: str = DEFAULT_TRANSFORMER["lp"]
    secondary: str = DEFAULT_TRANSFORMER["ls"]
    coupling: str = DEFAULT_TRANSFORMER["k"]


@dataclass(frozen=True)
class OpAmpParams:
    gain: str = DEFAULT_OPAMP_GAIN


@dataclass(frozen=True)
class GroundParams:
    pass


@dataclass(frozen=True)
class GenericParams:
    value: str = ""


DeviceParams = Union[
    PassiveParams,
    SourceParams,
    DiodeParams,
    BjtParams,
    MosfetParams,
    TransformerParams,
    OpAmpParams,
    GroundParams,
    GenericParams,
]


def family_of(component_type: str) -> DeviceFamily:
    return TYPE_FAMILIES.get(str(component_type).lower(), DeviceFamily.GENERIC)


def _model_params(raw) -> Optional[tuple[tuple[str, str], ...]]:
    if not raw or not isinstance(raw, dict):
        return None
    return tuple((str(k), fmt_value(v)) for k, v in raw.items())


def parse_device_params(component_type: str, fields: dict) -> DeviceParams:
    """Build the parameter record for ``component_type`` from flat input fields."""
    family = family_of(component_type)
    value = fmt_value(fields.get("value")).strip()

    if family in (DeviceFamily.RESISTOR, DeviceFamily.CAPACITOR, DeviceFamily.INDUCTOR):
        return PassiveParams(value=value or DEFAULT_VALUES[family])
    if family in (DeviceFamily.VOLTAGE_SOURCE, DeviceFamily.CURRENT_SOURCE):
        return SourceParams(waveform=parse_waveform(fields, family))
    if family == DeviceFamily.DIODE:
        return DiodeParams(model=fields.get("model") or None, params=_model_params(fields.get("params")))
    if family == DeviceFamily.BJT:
        return BjtParams(model=fields.get("model") or None, params=_model_params(fields.get("params")))
    if family == DeviceFamily.MOSFET:
        return MosfetParams(
            model=fields.get("model") or None,
            params=_model_params(fields.get("params")),
            body=fields.get("body") or None,
        )
    if family == DeviceFamily.TRANSFORMER:
        return TransformerParams(
            primary=fmt_value(fields.get("lp") or DEFAULT_TRANSFORMER["lp"]),
            secondary=fmt_value(fields.get("ls") or DEFAULT_TRANSFORMER["ls"]),
            coupling=fmt_value(fields.get("k") or DEFAULT_TRANSFORMER["k"]),
        )
    if family == DeviceFamily.OPAMP:
        return OpAmpParams(gain=fmt_value(fields.get("gain") or DEFAULT_OPAMP_GAIN))
    if family == DeviceFamily.GROUND:
        return GroundParams()
    return GenericParams(value=value)


@dataclass(frozen=True)
class ComponentData:
    """
    Pure Python data class representing a placed circuit component.

    Instances are treated as immutable for the duration of a synthesis pass.
    """

    component_id: str
    component_type: str
    position: tuple[float, float] = (0.0, 0.0)
    rotation: int = 0  # degrees: 0, 90, 180, 270
    device: DeviceParams = field(default_factory=GenericParams)

    @property
    def family(self) -> DeviceFamily:
        return family_of(self.component_type)

    @property
    def is_ground(self) -> bool:
        return self.family == DeviceFamily.GROUND

    @classmethod
    def create(cls, component_id: str, component_type: str, position=(0.0, 0.0), rotation=0, **fields):
        """Convenience constructor that parses type-specific fields."""
        component_type = component_type.lower()
        return cls(
            component_id=component_id,
            component_type=component_type,
            position=(position[0], position[1]),
            rotation=rotation,
            device=parse_device_params(component_type, fields),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "ComponentData":
        """
        Deserialize a component from the editor/generation JSON shape.

        Format: ``{id, type, x, y, rotation|rot, value?, ...}``. Type-specific
        fields may sit at the top level or inside ``typeSpecificFields``.
        """
        fields = dict(data)
        nested = data.get("typeSpecificFields")
        if isinstance(nested, dict):
            fields.update(nested)

        rotation = data.get("rotation", data.get("rot", 0))
        return cls.create(
            str(data["id"]),
            str(data["type"]),
            position=(data.get("x") or 0, data.get("y") or 0),
            rotation=rotation if rotation is not None else 0,
            **{k: v for k, v in fields.items() if k not in ("id", "type", "x", "y", "rotation", "rot")},
        )

    def __repr__(self) -> str:
        return (
            f"ComponentData(id={self.component_id!r}, type={self.component_type!r}, "
            f"pos={self.position}, rot={self.rotation})"
        )

"""
CircuitLoader - Reads circuit JSON, validates its shape and tidies up
loosely-written circuits before synthesis.

Circuits arrive from two places: files saved by the editor, which are
already clean, and text generated by an assistant, which may use short
type names (``"r"``, ``"vs"``), informal port names (``"anode"``,
``"pos"``), a bare ``"0"`` for ground and repeated connections.
``normalize_circuit`` rewrites the second kind into the first.
"""

import json
import logging
import math
from pathlib import Path
from typing import Optional

from models.circuit import CircuitModel
from models.symbol import STANDARD_SYMBOLS, SymbolTable
from models.wire import GROUND_REFERENCE
from netlist.connectivity import DEFAULT_GRID, quantize
from netlist.ground import GROUND_PORT

logger = logging.getLogger(__name__)

DEFAULT_PLACEMENT = (200, 200)
AUTO_GROUND_PLACEMENT = (120, 120)
AUTO_GROUND_ID = "GND1"

TYPE_ALIASES = {
    "resistor": "resistor",
    "r": "resistor",
    "capacitor": "capacitor",
    "c": "capacitor",
    "cap": "capacitor",
    "capacitor_polarized": "capacitor_polarized",
    "electrolytic": "capacitor_polarized",
    "inductor": "inductor",
    "l": "inductor",
    "diode": "diode",
    "d": "diode",
    "led": "led",
    "zener": "zener",
    "zenerdiode": "zener",
    "vsource": "vsource",
    "vs": "vsource",
    "voltage": "vsource",
    "v": "vsource",
    "isource": "isource",
    "is": "isource",
    "current": "isource",
    "ground": "ground",
    "gnd": "ground",
    "0": "ground",
    "npn": "npn",
    "pnp": "pnp",
    "nmos": "nmos",
    "pmos": "pmos",
    "opamp": "opamp",
    "opa": "opamp",
    "ua741": "opamp",
    "transformer": "transformer",
    "xfmr": "transformer",
    "crystal": "crystal",
    "xtal": "crystal",
}

_TWO_TERMINAL = {"1": "1", "2": "2", "a": "1", "b": "2", "p": "1", "n": "2", "+": "1", "-": "2"}
_DIODE = {"a": "A", "anode": "A", "k": "K", "cathode": "K", "1": "A", "2": "K", "+": "A", "-": "K"}
_BJT = {"b": "B", "base": "B", "c": "C", "collector": "C", "e": "E", "emitter": "E"}
_MOS = {"g": "G", "gate": "G", "d": "D", "drain": "D", "s": "S", "source": "S"}

PORT_ALIASES = {
    "resistor": _TWO_TERMINAL,
    "capacitor": _TWO_TERMINAL,
    "capacitor_polarized": _TWO_TERMINAL,
    "inductor": _TWO_TERMINAL,
    "crystal": {"1": "1", "2": "2", "a": "1", "b": "2"},
    "diode": _DIODE,
    "led": _DIODE,
    "zener": _DIODE,
    "vsource": {"+": "+", "-": "-", "p": "+", "n": "-", "pos": "+", "neg": "-"},
    "isource": {"p": "p", "n": "n", "+": "p", "-": "n", "pos": "p", "neg": "n"},
    "npn": _BJT,
    "pnp": _BJT,
    "nmos": _MOS,
    "pmos": _MOS,
    "opamp": {
        "in+": "IN+",
        "vin+": "IN+",
        "noninv": "IN+",
        "in-": "IN-",
        "vin-": "IN-",
        "inv": "IN-",
        "out": "OUT",
        "o": "OUT",
    },
    "transformer": {
        "p_a": "P_A",
        "p_b": "P_B",
        "s_a": "S_A",
        "s_b": "S_B",
        "pa": "P_A",
        "pb": "P_B",
        "sa": "S_A",
        "sb": "S_B",
    },
    "ground": {"0": "GND", "gnd": "GND", "g": "GND", "ground": "GND"},
}


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_circuit_data(data) -> None:
    """
    Validate JSON structure before loading.

    Raises ValueError with a descriptive message if anything is wrong.
    Only the shape is checked here; unknown types, bad rotations and
    dangling connections are reported during synthesis instead.
    """
    if not isinstance(data, dict):
        raise ValueError("File does not contain a valid circuit object.")

    if "components" not in data or not isinstance(data["components"], list):
        raise ValueError("Missing or invalid 'components' list.")
    if not isinstance(data.get("connections", []), list):
        raise ValueError("Invalid 'connections' list.")

    for i, comp in enumerate(data["components"]):
        if not isinstance(comp, dict):
            raise ValueError(f"Component #{i + 1} is not an object.")
        for key in ("id", "type"):
            if comp.get(key) in (None, ""):
                raise ValueError(f"Component #{i + 1} is missing required field '{key}'.")
        if str(comp["id"]).strip() == GROUND_REFERENCE:
            raise ValueError(f"Component #{i + 1} uses the reserved ground id '{GROUND_REFERENCE}'.")
        for key in ("x", "y"):
            if key in comp and comp[key] is not None and not _is_number(comp[key]):
                raise ValueError(f"Component '{comp['id']}' position values must be finite numbers.")

    for i, conn in enumerate(data.get("connections", [])):
        if not isinstance(conn, dict):
            raise ValueError(f"Connection #{i + 1} is not an object.")


def normalize_type(component_type) -> Optional[str]:
    if component_type is None:
        return None
    return TYPE_ALIASES.get(str(component_type).strip().lower())


def normalize_port(component_type: str, raw_port, symbols: SymbolTable) -> Optional[str]:
    """Canonical port id for ``raw_port`` on ``component_type``, or None if the symbol has no such port."""
    raw = str(raw_port if raw_port is not None else "").strip()
    port_id = PORT_ALIASES.get(component_type, {}).get(raw.lower(), raw)
    symbol = symbols.lookup(component_type)
    if symbol is None or not symbol.has_port(port_id):
        return None
    return port_id


def _split_ref(ref) -> tuple[str, str]:
    component_id, _, port_id = str(ref).strip().partition(".")
    return component_id.strip(), port_id.strip()


def _is_ground_ref(component_id: str, port_id: str) -> bool:
    return port_id == GROUND_REFERENCE or component_id == GROUND_REFERENCE


def normalize_circuit(data: dict, symbols: Optional[SymbolTable] = None) -> dict:
    """
    Rewrite a loosely-written circuit into the canonical editor shape.

    - Type names are mapped through TYPE_ALIASES; components whose type is
      unknown or has no symbol are dropped, as is any component using the
      reserved ground id ``"0"``, and repeated ids keep the first.
    - Placements are snapped to the grid (missing coordinates default to
      200,200); ``rot`` becomes ``rotation``.
    - A ``GND1`` ground is added when a connection uses ``"0"`` and the
      circuit has no ground; every ``"0"`` endpoint is moved onto a ground.
    - Port names are mapped through PORT_ALIASES and checked against the
      symbol; connections that still miss are dropped.
    - Connections are de-duplicated regardless of direction, and a terminal
      wired to itself is dropped.

    Top-level keys other than ``components``/``connections`` pass through.
    """
    symbols = symbols if symbols is not None else STANDARD_SYMBOLS
    out = {k: v for k, v in data.items() if k not in ("components", "connections")}
    components = []
    seen_ids = set()

    for raw in data.get("components", []):
        comp_type = normalize_type(raw.get("type"))
        comp_id = str(raw.get("id") or "").strip()
        if not comp_type or not comp_id:
            logger.warning("Dropping component %r: unknown type %r", raw.get("id"), raw.get("type"))
            continue
        if symbols.lookup(comp_type) is None:
            logger.warning("Dropping component %s: no symbol for %s", comp_id, comp_type)
            continue
        if comp_id == GROUND_REFERENCE:
            logger.warning("Dropping component %s: id is reserved for ground", comp_id)
            continue
        if comp_id in seen_ids:
            logger.warning("Dropping duplicate component id %s", comp_id)
            continue
        seen_ids.add(comp_id)

        x = raw.get("x")
        y = raw.get("y")
        rotation = raw.get("rotation", raw.get("rot"))
        comp = {k: v for k, v in raw.items() if k not in ("id", "type", "x", "y", "rot", "rotation")}
        comp.update(
            id=comp_id,
            type=comp_type,
            x=quantize(x if _is_number(x) else DEFAULT_PLACEMENT[0], DEFAULT_GRID),
            y=quantize(y if _is_number(y) else DEFAULT_PLACEMENT[1], DEFAULT_GRID),
            rotation=rotation if _is_number(rotation) else 0,
        )
        components.append(comp)

    by_id = {c["id"]: c for c in components}
    connections = [c for c in data.get("connections", []) if c.get("from") and c.get("to")]

    ground_id = next((c["id"] for c in components if c["type"] == "ground"), None)
    uses_zero = any(_is_ground_ref(*_split_ref(c[end])) for c in connections for end in ("from", "to"))
    if ground_id is None and uses_zero:
        ground_id = AUTO_GROUND_ID
        n = 1
        while ground_id in by_id:
            n += 1
            ground_id = f"GND{n}"
        ground = {
            "id": ground_id,
            "type": "ground",
            "x": quantize(AUTO_GROUND_PLACEMENT[0], DEFAULT_GRID),
            "y": quantize(AUTO_GROUND_PLACEMENT[1], DEFAULT_GRID),
            "rotation": 0,
        }
        components.insert(0, ground)
        by_id[ground_id] = ground
        logger.info("Added %s for connections that use node 0", ground_id)

    seen_pairs = set()
    out_connections = []
    for i, conn in enumerate(connections):
        ends = []
        for ref in (conn["from"], conn["to"]):
            comp_id, port = _split_ref(ref)
            if _is_ground_ref(comp_id, port):
                owner = by_id.get(comp_id)
                if owner is None or owner["type"] != "ground":
                    comp_id = ground_id
                ends.append((comp_id, GROUND_PORT))
                continue
            comp = by_id.get(comp_id)
            port_id = normalize_port(comp["type"], port, symbols) if comp else None
            if port_id is None:
                break
            ends.append((comp_id, port_id))

        if len(ends) != 2:
            logger.warning("Dropping connection #%d %s -> %s", i + 1, conn["from"], conn["to"])
            continue
        a, b = (f"{c}.{p}" for c, p in ends)
        if a == b:
            continue
        pair = (a, b) if a < b else (b, a)
        if pair in seen_pairs:
            continue
        seen_pairs.add(pair)
        out_connections.append({"from": a, "to": b})

    out["components"] = components
    out["connections"] = out_connections
    return out


def try_load_circuit(
    filepath,
    normalize: bool = False,
    symbols: Optional[SymbolTable] = None,
) -> tuple[Optional[CircuitModel], str]:
    """Load and validate a circuit JSON file without exiting.

    Args:
        filepath: Path to the circuit JSON file.
        normalize: Run normalize_circuit() before building the model.
        symbols: Symbol table used for normalisation.

    Returns:
        (model, "") on success, or (None, error_message) on failure.
    """
    path = Path(filepath)
    if not path.exists():
        return None, f"file not found: {filepath}"

    try:
        with open(path, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        return None, f"invalid JSON in {filepath}: {e}"
    except OSError as e:
        return None, f"cannot read {filepath}: {e}"

    try:
        validate_circuit_data(data)
        if normalize:
            data = normalize_circuit(data, symbols)
        return CircuitModel.from_dict(data), ""
    except ValueError as e:
        return None, f"invalid circuit file: {e}"


def load_circuit(filepath, normalize: bool = False, symbols: Optional[SymbolTable] = None) -> CircuitModel:
    """Load and validate a circuit JSON file.

    Raises:
        ValueError: On file read or validation errors.
    """
    model, error = try_load_circuit(filepath, normalize=normalize, symbols=symbols)
    if model is None:
        raise ValueError(error)
    return model

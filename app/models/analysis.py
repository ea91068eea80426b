"""
Analysis configuration - which simulations the netlist's control block requests.

No Qt dependencies. Each analysis is a small frozen dataclass that renders
its own ngspice control-block command.
"""

import logging
from dataclasses import dataclass
from typing import Union

from .component import fmt_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperatingPoint:
    def to_command(self) -> str:
        return "op"


@dataclass(frozen=True)
class Transient:
    step: str = "1m"
    stop: str = "1s"
    start: str = ""

    def to_command(self) -> str:
        cmd = f"tran {self.step} {self.stop}"
        if self.start and self.start != "0":
            cmd += f" {self.start}"
        return cmd


@dataclass(frozen=True)
class AcSweep:
    sweep: str = "dec"
    points: str = "10"
    f_start: str = "1"
    f_stop: str = "1meg"

    def to_command(self) -> str:
        return f"ac {self.sweep} {self.points} {self.f_start} {self.f_stop}"


AnalysisConfig = Union[OperatingPoint, Transient, AcSweep]

# Accepted spellings for each analysis type
_ANALYSIS_ALIASES = {
    "op": "op",
    "operating point": "op",
    "dc operating point": "op",
    "tran": "tran",
    "transient": "tran",
    "ac": "ac",
    "ac sweep": "ac",
}


def _param(params: dict, *names, default: str) -> str:
    for name in names:
        value = params.get(name)
        if value is not None and value != "":
            return fmt_value(value)
    return default


def parse_analysis(data) -> AnalysisConfig:
    """
    Parse one analysis entry.

    Accepts a bare type string (``"tran"``) or a dict such as
    ``{"type": "tran", "step": "1u", "stop": "1m"}``; parameters may also be
    nested under ``params``.

    Raises:
        ValueError: If the analysis type is unknown.
    """
    if isinstance(data, str):
        data = {"type": data}
    if not isinstance(data, dict):
        raise ValueError(f"invalid analysis entry: {data!r}")

    raw_type = str(data.get("type", data.get("analysis_type", ""))).strip().lower()
    kind = _ANALYSIS_ALIASES.get(raw_type)
    if kind is None:
        raise ValueError(f"unknown analysis type {raw_type!r}")

    params = dict(data)
    if isinstance(data.get("params"), dict):
        params.update(data["params"])

    if kind == "op":
        return OperatingPoint()
    if kind == "tran":
        return Transient(
            step=_param(params, "step", default="1m"),
            stop=_param(params, "stop", "duration", default="1s"),
            start=_param(params, "start", "startTime", default=""),
        )
    return AcSweep(
        sweep=_param(params, "sweep", "sweepType", "sweep_type", default="dec"),
        points=_param(params, "points", default="10"),
        f_start=_param(params, "fStart", "f_start", default="1"),
        f_stop=_param(params, "fStop", "f_stop", default="1meg"),
    )


def parse_analyses(data) -> list[AnalysisConfig]:
    """
    Parse a single analysis entry or a list of them.

    Entries that cannot be parsed are logged and skipped; an empty result
    leaves the netlist on its default transient.
    """
    if data is None:
        return []
    entries = data if isinstance(data, list) else [data]
    analyses = []
    for entry in entries:
        try:
            analyses.append(parse_analysis(entry))
        except ValueError as e:
            logger.warning("Skipping analysis %r: %s", entry, e)
    return analyses

"""
netlist/assembler.py

Final netlist text: header, models, device lines, extras, control block.

Nothing is sorted or rewritten here; the output order is exactly the order
in which lines were produced.
"""

from dataclasses import dataclass, field

from models.analysis import AnalysisConfig, Transient

DEFAULT_TITLE = "CIRCUIT"


@dataclass
class NetlistAssembler:
    title: str = DEFAULT_TITLE
    models: list[str] = field(default_factory=list)
    devices: list[str] = field(default_factory=list)
    extras: list[str] = field(default_factory=list)
    analyses: list[AnalysisConfig] = field(default_factory=list)

    def header_lines(self) -> list[str]:
        return [f"* {self.title} netlist (auto-generated)", f".title {self.title}"]

    def control_lines(self) -> list[str]:
        """The .control block; a default transient run when nothing was requested."""
        analyses = self.analyses or [Transient()]
        lines = ["", ".control", "  set noaskquit"]
        for analysis in analyses:
            lines.append(f"  {analysis.to_command()}")
            lines.append("  print all")
        lines.append(".endc")
        lines.append(".end")
        return lines

    def assemble(self) -> str:
        lines = []
        lines.extend(self.header_lines())
        lines.extend(self.models)
        lines.extend(self.devices)
        lines.extend(self.extras)
        lines.extend(self.control_lines())
        return "\n".join(lines) + "\n"

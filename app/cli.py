"""
Command-line interface for netlist synthesis.

Export SPICE netlists, inspect node assignments, and check circuits for
problems without the editor.

Usage::

    python -m cli export circuit.json
    python -m cli export circuit.json --analysis ac --output circuit.cir
    python -m cli export generated.json --normalize --preset "Quick Transient"
    python -m cli nodes circuit.json
    python -m cli validate circuit.json --symbols symbols/
    python -m cli presets
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from controllers.circuit_loader import try_load_circuit
from models.analysis import parse_analysis
from models.circuit import CircuitModel
from models.symbol import STANDARD_SYMBOLS, SymbolTable, load_symbol_table
from netlist.netlist_generator import NetlistGenerator, NetlistResult
from netlist.presets import PresetManager

logger = logging.getLogger(__name__)


class CliError(Exception):
    """Raised for problems that end a command with exit status 1."""


def load_symbols(path: Optional[str]) -> SymbolTable:
    """Standard symbols, overridden by a symbol file or package when given."""
    if not path:
        return STANDARD_SYMBOLS
    try:
        return STANDARD_SYMBOLS.merged(load_symbol_table(path))
    except (OSError, json.JSONDecodeError, ValueError) as e:
        raise CliError(f"cannot load symbols from {path}: {e}") from e


def load_circuit(filepath: str, normalize: bool, symbols: SymbolTable) -> CircuitModel:
    model, error = try_load_circuit(filepath, normalize=normalize, symbols=symbols)
    if model is None:
        raise CliError(error)
    return model


def _preset_manager(args: argparse.Namespace) -> PresetManager:
    path = getattr(args, "preset_file", None)
    return PresetManager(Path(path) if path else PresetManager.default_preset_path())


def _synthesize(args: argparse.Namespace) -> NetlistResult:
    symbols = load_symbols(args.symbols)
    model = load_circuit(args.circuit, getattr(args, "normalize", False), symbols)

    analyses = None
    if getattr(args, "preset", None):
        try:
            analyses = [_preset_manager(args).analysis_for(args.preset)]
        except KeyError as e:
            raise CliError(f"unknown preset {args.preset!r}") from e
    elif getattr(args, "analysis", None):
        analyses = [parse_analysis(args.analysis)]

    generator = NetlistGenerator.from_model(
        model,
        symbols=symbols,
        title=getattr(args, "title", None),
        analyses=analyses,
    )
    return generator.synthesize()


def _write_output(text: str, output: Optional[str], label: str) -> None:
    if output:
        Path(output).write_text(text)
        print(f"{label} written to {output}", file=sys.stderr)
    else:
        sys.stdout.write(text)


def cmd_export(args: argparse.Namespace) -> int:
    """Write the SPICE netlist for a circuit."""
    result = _synthesize(args)
    for issue in result.issues:
        print(f"Warning: {issue}", file=sys.stderr)
    _write_output(result.text, args.output, "Netlist")
    return 0


def cmd_nodes(args: argparse.Namespace) -> int:
    """Print the node every terminal resolved to."""
    result = _synthesize(args)
    rows = [f"{terminal}\t{node}\n" for terminal, node in result.terminal_nodes.items()]
    sys.stdout.write("".join(rows))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Report synthesis issues without writing a netlist."""
    result = _synthesize(args)
    if not result.issues:
        print(f"Circuit is valid: {args.circuit}")
        return 0

    errors = result.errors
    if errors:
        print(f"Circuit has errors: {args.circuit}", file=sys.stderr)
    else:
        print(f"Circuit is valid: {args.circuit}")
    for issue in result.issues:
        prefix = "  - " if issue.is_error else "  Warning: "
        print(f"{prefix}{issue}", file=sys.stderr if issue.is_error else sys.stdout)
    return 1 if errors else 0


def cmd_presets(args: argparse.Namespace) -> int:
    """List the available analysis presets."""
    for preset in _preset_manager(args).get_presets():
        marker = " (built-in)" if preset.get("builtin") else ""
        print(f"{preset['name']}\t{preset['analysis_type']}{marker}")
    return 0


def _add_circuit_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("circuit", help="Path to circuit JSON file")
    parser.add_argument("--symbols", help="Symbol JSON file or symbol-package directory")
    parser.add_argument(
        "--normalize", action="store_true", help="Accept short type and port names and bare '0' ground references"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="netlist-synth",
        description="Resolve schematic connectivity and export SPICE netlists from circuit JSON.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log synthesis details to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # export
    exp_parser = subparsers.add_parser("export", help="Write the SPICE netlist for a circuit")
    _add_circuit_args(exp_parser)
    exp_parser.add_argument(
        "--analysis",
        choices=["op", "tran", "ac"],
        help="Override the analysis configured in the circuit file (default parameters)",
    )
    exp_parser.add_argument("--preset", help="Use a named analysis preset")
    exp_parser.add_argument("--preset-file", help="User presets JSON file (default under ~/.netlist-synth)")
    exp_parser.add_argument("--title", help="Netlist title (default: circuit file title or CIRCUIT)")
    exp_parser.add_argument("--output", "-o", help="Write netlist to file instead of stdout")

    # nodes
    nodes_parser = subparsers.add_parser("nodes", help="Print terminal to node assignments")
    _add_circuit_args(nodes_parser)

    # validate
    val_parser = subparsers.add_parser("validate", help="Check a circuit for synthesis problems")
    _add_circuit_args(val_parser)

    # presets
    presets_parser = subparsers.add_parser("presets", help="List analysis presets")
    presets_parser.add_argument("--preset-file", help="User presets JSON file (default under ~/.netlist-synth)")

    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "export": cmd_export,
        "nodes": cmd_nodes,
        "validate": cmd_validate,
        "presets": cmd_presets,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except (CliError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

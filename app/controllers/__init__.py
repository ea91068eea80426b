"""
Controllers for netlist synthesis.

This package contains the code that sits between circuit files and the
synthesis core: loading, validating and normalising circuit JSON.
"""

from .circuit_loader import load_circuit, normalize_circuit, try_load_circuit, validate_circuit_data

__all__ = [
    "load_circuit",
    "normalize_circuit",
    "try_load_circuit",
    "validate_circuit_data",
]

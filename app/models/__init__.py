"""
Pure Python data models for netlist synthesis.

This package contains Qt-free data classes that represent circuit elements.
All models use only Python standard library types.
"""

from .analysis import AcSweep, OperatingPoint, Transient, parse_analyses
from .circuit import CircuitModel
from .component import (
    DEFAULT_VALUES,
    SPICE_PREFIXES,
    TYPE_FAMILIES,
    ComponentData,
    DeviceFamily,
    Waveform,
    WaveformKind,
)
from .symbol import STANDARD_SYMBOLS, PortDefinition, SymbolDefinition, SymbolTable, load_symbol_table
from .wire import GROUND_REFERENCE, Endpoint, WireData

__all__ = [
    "CircuitModel",
    "ComponentData",
    "DeviceFamily",
    "TYPE_FAMILIES",
    "SPICE_PREFIXES",
    "DEFAULT_VALUES",
    "Waveform",
    "WaveformKind",
    "OperatingPoint",
    "Transient",
    "AcSweep",
    "parse_analyses",
    "PortDefinition",
    "SymbolDefinition",
    "SymbolTable",
    "STANDARD_SYMBOLS",
    "load_symbol_table",
    "Endpoint",
    "WireData",
    "GROUND_REFERENCE",
]

from .netlist_generator import NetlistGenerator, NetlistResult, SynthesisOptions, generate_netlist

__all__ = ['NetlistGenerator', 'NetlistResult', 'SynthesisOptions', 'generate_netlist']

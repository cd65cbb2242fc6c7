"""Modular synthesizer modules, ports and DSP primitives, processed sample by sample."""

__version__ = "0.1.0"
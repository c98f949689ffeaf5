"""Audio spectra as smooth frequency bar values and tempo estimates for visualizers."""

__version__ = "0.0.1"
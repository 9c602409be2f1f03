"""
Core wave function collapse functionality.
"""

from .alea_prng import AleaPRNG
from .pixel import Location, Pixel, PixelChangeResult, WeightedPixel, unique
from .journal import UndoJournal
from .grid import Grid, GridView, SizeError, WeightedGrid
from .propagation import Propagator
from .driver import WaveFunctionCollapse, WFCOptions, WFCResult
from .generator import ContradictionError, generate

__all__ = ['AleaPRNG', 'Location', 'Pixel', 'PixelChangeResult', 'WeightedPixel', 'unique',
           'UndoJournal', 'Grid', 'GridView', 'SizeError', 'WeightedGrid', 'Propagator',
           'WaveFunctionCollapse', 'WFCOptions', 'WFCResult', 'ContradictionError', 'generate']

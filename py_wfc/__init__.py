"""
py-wfc: wave function collapse over N-dimensional grids.
"""

from .core import (
    AleaPRNG, ContradictionError, Grid, GridView, Pixel, PixelChangeResult, SizeError,
    WaveFunctionCollapse, WeightedGrid, WeightedPixel, WFCOptions, WFCResult, generate,
)
from .utils.random import NumpyRandomSource, RandomSource, get_prng, set_random_seed

__version__ = "0.1.0"

__all__ = ['AleaPRNG', 'ContradictionError', 'Grid', 'GridView', 'Pixel', 'PixelChangeResult',
           'SizeError', 'WaveFunctionCollapse', 'WeightedGrid', 'WeightedPixel', 'WFCOptions',
           'WFCResult', 'generate', 'NumpyRandomSource', 'RandomSource', 'get_prng',
           'set_random_seed']

"""
Grid readers for heatmap3d.
"""

from .base import GridReader, RawGrid
from .delimited import DelimitedGridReader

__all__ = ['GridReader', 'RawGrid', 'DelimitedGridReader']

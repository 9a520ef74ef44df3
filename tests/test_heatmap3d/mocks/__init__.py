"""Test doubles and factories for heatmap3d tests."""

from .mock_grid_reader import MockGridReader, make_variable

__all__ = ['MockGridReader', 'make_variable']

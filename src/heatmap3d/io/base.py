"""
Base reader interface for heatmap3d.

This module defines the abstract base class for grid readers and the raw
grid container they hand back.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np


@dataclass
class RawGrid:
    """Raw result of reading one tabular source.

    Rows are kept as separate arrays so that a ragged source survives the
    import and can be rejected later by GridVariable.validate().

    Attributes:
        rows: One float64 array per data row (NaN = no data)
        row_count: Number of data rows the source declared
        col_count: Number of data columns the source declared
        row_headers: Row header strings, or None if the source had none
        column_headers: Column header strings, or None if the source had none
    """
    rows: List[np.ndarray]
    row_count: int
    col_count: int
    row_headers: Optional[List[str]] = None
    column_headers: Optional[List[str]] = None

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[float]],
        row_headers: Optional[Sequence[str]] = None,
        column_headers: Optional[Sequence[str]] = None,
        row_count: Optional[int] = None,
        col_count: Optional[int] = None
    ) -> 'RawGrid':
        """Build a RawGrid from nested sequences.

        Declared counts default to the number of rows and the length of the
        first row, which is how a row-major tabular reader declares them.
        """
        arrays = [np.asarray(row, dtype=np.float64) for row in rows]
        if row_count is None:
            row_count = len(arrays)
        if col_count is None:
            col_count = len(arrays[0]) if arrays else 0
        return cls(
            rows=arrays,
            row_count=row_count,
            col_count=col_count,
            row_headers=list(row_headers) if row_headers is not None else None,
            column_headers=list(column_headers) if column_headers is not None else None,
        )


class GridReader(ABC):
    """Abstract base class for grid readers.

    A reader turns a source path into a RawGrid. It owns the file format;
    the rest of heatmap3d never inspects it.

    Example:
        >>> class CustomReader(GridReader):
        ...     def read(self, path, has_row_headers, has_column_headers):
        ...         return RawGrid.from_rows([[1.0, 2.0], [3.0, 4.0]])
    """

    @abstractmethod
    def read(self, path: str, has_row_headers: bool, has_column_headers: bool) -> RawGrid:
        """Read a source and return its raw grid.

        Args:
            path: Source path
            has_row_headers: True if the first column holds row headers
            has_column_headers: True if the first row holds column headers

        Returns:
            RawGrid with declared dimensions and optional headers

        Raises:
            GridImportError: If the source is unreadable or malformed
        """
        pass

"""
GridVariable - One imported 2D numeric dataset

A GridVariable holds the cell values imported from a single source, its
optional row/column headers, a user-facing label, and lazily computed
min/max/range statistics. NaN cells mean "no data" and are skipped by the
statistics.
"""

from dataclasses import dataclass
import logging
import math
import threading
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from .config_manager import DEFAULT_MIN_RANGE
from .errors import ValidationError
from .types import ValidationReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridStatistics:
    """Cached min/max/range of a variable's non-NaN cells.

    Attributes:
        min_value: Smallest non-NaN cell (+inf if there is none)
        max_value: Largest non-NaN cell (-inf if there is none)
        range: max_value - min_value, floored at the configured epsilon
        has_values: False when the grid holds no non-NaN cell at all
    """
    min_value: float
    max_value: float
    range: float
    has_values: bool = True


class GridVariable:
    """A single data variable: 2D values for one experiment or condition.

    Cells are stored as one float64 array per row. Rows are not forced into
    a rectangle on import, so a ragged source stays detectable through
    validate() instead of being silently padded.

    Cell access through value() is not bounds-checked; callers
    (PointSampler, renderers) range-check against the declared shape first.

    Attributes:
        _data: List of row arrays
        _row_count, _col_count: Declared dimensions
        _row_headers, _column_headers: Header strings or None
        _stats: None until statistics() computes them
    """

    DEFAULT_LABEL = 'DefaultLabel'
    DEFAULT_SOURCE = 'None'

    def __init__(self, label: str = DEFAULT_LABEL, min_range: float = DEFAULT_MIN_RANGE):
        """Create an empty variable.

        Args:
            label: User-facing display name
            min_range: Epsilon that the statistics range is floored at
        """
        if min_range <= 0:
            raise ValueError(f"min_range must be positive, got {min_range}")

        self._data: List[np.ndarray] = []
        self._row_count = 0
        self._col_count = 0
        self._row_headers: Optional[List[str]] = None
        self._column_headers: Optional[List[str]] = None
        self._label = label
        self._source_path = self.DEFAULT_SOURCE
        self._min_range = min_range
        self._populated = False

        self._stats: Optional[GridStatistics] = None
        self._stats_lock = threading.Lock()

    @classmethod
    def load(
        cls,
        reader,
        path: str,
        has_row_headers: bool = True,
        has_column_headers: bool = True,
        min_range: float = DEFAULT_MIN_RANGE
    ) -> 'GridVariable':
        """Read a source with a GridReader and build a populated variable.

        The label is left at its default; callers decide how to name it.

        Raises:
            GridImportError: Propagated unchanged from the reader
        """
        raw = reader.read(path, has_row_headers, has_column_headers)
        variable = cls(min_range=min_range)
        variable.import_from(raw, source_path=path)
        return variable

    def import_from(self, raw_grid, source_path: Optional[str] = None):
        """Populate this variable from a RawGrid (once).

        Args:
            raw_grid: RawGrid produced by a GridReader
            source_path: Informational origin identifier

        Raises:
            RuntimeError: If the variable was already populated
        """
        if self._populated:
            raise RuntimeError(f"GridVariable '{self._label}' is already populated")

        self._row_count = int(raw_grid.row_count)
        self._col_count = int(raw_grid.col_count)
        self._row_headers = list(raw_grid.row_headers) if raw_grid.row_headers is not None else None
        self._column_headers = (
            list(raw_grid.column_headers) if raw_grid.column_headers is not None else None
        )
        if source_path is not None:
            self._source_path = str(source_path)
        self._set_data([np.asarray(row, dtype=np.float64) for row in raw_grid.rows])
        self._populated = True

    def _set_data(self, rows: List[np.ndarray]):
        """Replace the cell data and drop cached statistics."""
        self._data = rows
        self._stats = None

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def label(self) -> str:
        """User-facing display name (not unique across a registry)."""
        return self._label

    @label.setter
    def label(self, value: str):
        if not isinstance(value, str):
            raise TypeError(f"label must be a string, got {type(value)}")
        self._label = value

    @property
    def source_path(self) -> str:
        return self._source_path

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def col_count(self) -> int:
        return self._col_count

    @property
    def shape(self) -> Tuple[int, int]:
        """Declared (row_count, col_count)."""
        return (self._row_count, self._col_count)

    @property
    def has_row_headers(self) -> bool:
        return self._row_headers is not None

    @property
    def has_column_headers(self) -> bool:
        return self._column_headers is not None

    @property
    def row_headers(self) -> Optional[List[str]]:
        return list(self._row_headers) if self._row_headers is not None else None

    @property
    def column_headers(self) -> Optional[List[str]]:
        return list(self._column_headers) if self._column_headers is not None else None

    def row_header(self, row: int) -> str:
        """Header of a row, or '' if the variable has no row headers."""
        return self._row_headers[row] if self._row_headers is not None else ''

    def column_header(self, col: int) -> str:
        """Header of a column, or '' if the variable has no column headers."""
        return self._column_headers[col] if self._column_headers is not None else ''

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self):
        """Check the structure of this variable.

        Checks run in a fixed order and the first failure is raised:
            1. Data is non-empty
            2. Declared column count is positive
            3. Declared row count is positive
            4. Number of data rows equals the declared row count
            5. Column headers (if any) match the declared column count
            6. Row headers (if any) match the declared row count
            7. Every data row has the declared number of columns

        Raises:
            ValidationError: With the reason of the first failed check
        """
        if len(self._data) == 0:
            raise ValidationError(ValidationReason.EMPTY_DATA, "No data loaded")
        if self._col_count <= 0:
            raise ValidationError(
                ValidationReason.NON_POSITIVE_COLS,
                f"Declared column count must be positive, got {self._col_count}"
            )
        if self._row_count <= 0:
            raise ValidationError(
                ValidationReason.NON_POSITIVE_ROWS,
                f"Declared row count must be positive, got {self._row_count}"
            )
        if len(self._data) != self._row_count:
            raise ValidationError(
                ValidationReason.ROW_COUNT_MISMATCH,
                f"Number of rows in data ({len(self._data)}) != "
                f"declared row count ({self._row_count})"
            )
        if self._column_headers is not None and len(self._column_headers) != self._col_count:
            raise ValidationError(
                ValidationReason.COLUMN_HEADER_COUNT_MISMATCH,
                f"Number of column headers ({len(self._column_headers)}) != "
                f"declared column count ({self._col_count})"
            )
        if self._row_headers is not None and len(self._row_headers) != self._row_count:
            raise ValidationError(
                ValidationReason.ROW_HEADER_COUNT_MISMATCH,
                f"Number of row headers ({len(self._row_headers)}) != "
                f"declared row count ({self._row_count})"
            )
        for r, row in enumerate(self._data):
            if len(row) != self._col_count:
                raise ValidationError(
                    ValidationReason.ROW_LENGTH_MISMATCH,
                    f"Data row {r} has {len(row)} columns, expected {self._col_count}",
                    row=r
                )

    def is_valid(self) -> bool:
        """Return True if validate() passes."""
        try:
            self.validate()
        except ValidationError:
            return False
        return True

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def statistics(self) -> GridStatistics:
        """Return min/max/range, computing them on first use.

        A computed value is returned without locking; only the computation
        itself is serialized.
        """
        stats = self._stats
        if stats is not None:
            return stats

        with self._stats_lock:
            if self._stats is None:
                self._stats = self._compute_statistics()
            return self._stats

    def _compute_statistics(self) -> GridStatistics:
        """Scan all cells, skipping NaN."""
        if self._data:
            values = np.concatenate(self._data)
        else:
            values = np.empty(0, dtype=np.float64)
        values = values[~np.isnan(values)]

        if values.size == 0:
            logger.warning(
                f"Variable '{self._label}' has no non-NaN values; "
                f"min/max left at +inf/-inf"
            )
            return GridStatistics(
                min_value=math.inf,
                max_value=-math.inf,
                range=self._min_range,
                has_values=False
            )

        min_value = float(values.min())
        max_value = float(values.max())
        spread = max_value - min_value
        if spread < self._min_range:
            logger.warning(f"Variable '{self._label}' range is tiny: {spread}")

        # inf - inf is NaN; fmax floors it at the epsilon like any tiny spread
        return GridStatistics(
            min_value=min_value,
            max_value=max_value,
            range=float(np.fmax(spread, self._min_range))
        )

    @property
    def min_value(self) -> float:
        return self.statistics().min_value

    @property
    def max_value(self) -> float:
        return self.statistics().max_value

    @property
    def range(self) -> float:
        return self.statistics().range

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def value(self, row: int, col: int) -> float:
        """Return one cell (may be NaN). Not bounds-checked."""
        return float(self._data[row][col])

    def is_nan(self, row: int, col: int) -> bool:
        """Return True if the cell holds no data. Not bounds-checked."""
        return math.isnan(self._data[row][col])

    def to_numpy(self) -> np.ndarray:
        """Return the cells as a (rows, cols) array.

        Raises:
            ValidationError: If the variable is not structurally valid
        """
        self.validate()
        return np.vstack(self._data)

    def to_frame(self) -> pd.DataFrame:
        """Return the cells as a DataFrame indexed by the headers, if any.

        Raises:
            ValidationError: If the variable is not structurally valid
        """
        return pd.DataFrame(
            self.to_numpy(),
            index=self.row_headers,
            columns=self.column_headers
        )

    def describe(self) -> Dict[str, Any]:
        """Return metadata used by debug dumps."""
        stats = self.statistics()
        return {
            'label': self._label,
            'source_path': self._source_path,
            'rows': self._row_count,
            'cols': self._col_count,
            'has_row_headers': self.has_row_headers,
            'has_column_headers': self.has_column_headers,
            'min': stats.min_value,
            'max': stats.max_value,
            'range': stats.range,
        }

    def __len__(self) -> int:
        """Return the number of data rows actually held."""
        return len(self._data)

    def __repr__(self) -> str:
        """Return string representation."""
        if not self._data:
            return f"GridVariable(label={self._label!r}, empty)"
        return (
            f"GridVariable("
            f"label={self._label!r}, "
            f"shape={self._row_count}x{self._col_count}, "
            f"source={self._source_path!r})"
        )

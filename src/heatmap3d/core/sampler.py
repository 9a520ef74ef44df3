"""PointSampler - Values, labels and headers for one grid cell.

For a (row, col) position, gathers the value of each of the three mapped
variables together with their labels and headers. Sampling always runs
the consistency check first.
"""

from dataclasses import dataclass
import logging
import math

from .errors import ConsistencyError, NotReadyError, OutOfRangeError
from .role_map import RoleMap
from .types import Role
from .validator import ConsistencyValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridSample:
    """Immutable snapshot of one cell across the three roles.

    row_header / col_header hold the first non-empty header found in the
    order height, top color, side color.

    bin is always 0; it is kept for renderers that expect a bin number.
    """
    is_valid: bool = False
    row: int = -1
    col: int = -1
    row_header: str = ''
    col_header: str = ''
    bin: int = 0

    height_value: float = math.nan
    height_label: str = ''
    height_row_header: str = ''
    height_col_header: str = ''

    top_value: float = math.nan
    top_label: str = ''
    top_row_header: str = ''
    top_col_header: str = ''

    side_value: float = math.nan
    side_label: str = ''
    side_row_header: str = ''
    side_col_header: str = ''

    def value(self, role: str) -> float:
        """Return the sampled value for a role."""
        return getattr(self, f"{_PREFIX[role]}_value")

    def label(self, role: str) -> str:
        """Return the label of the variable mapped to a role."""
        return getattr(self, f"{_PREFIX[role]}_label")

    def __str__(self) -> str:
        return (
            f"GridSample(valid={self.is_valid}, r,c={self.row},{self.col})\n"
            f"  {self.height_value:.4f} {self.height_label}\n"
            f"  {self.top_value:.4f} {self.top_label}\n"
            f"  {self.side_value:.4f} {self.side_label}"
        )


_PREFIX = {
    Role.HEIGHT: 'height',
    Role.TOP_COLOR: 'top',
    Role.SIDE_COLOR: 'side',
}


def _first_non_empty(*values: str) -> str:
    for value in values:
        if value != '':
            return value
    return ''


class PointSampler:
    """Builds GridSamples from validated role assignments.

    Example:
        >>> sampler = PointSampler(role_map, validator)
        >>> sample = sampler.sample_at(0, 0)
        >>> sample.height_value, sample.row_header
        (1.5, 'R0')
    """

    def __init__(self, role_map: RoleMap, validator: ConsistencyValidator):
        """
        Args:
            role_map: Role assignments to read from
            validator: Readiness check run before every sample
        """
        self._role_map = role_map
        self._validator = validator

    def _ensure_ready(self):
        try:
            self._validator.check_ready()
        except ConsistencyError as e:
            raise NotReadyError(e) from e

    def _check_range(self, row: int, col: int):
        height = self._role_map.get(Role.HEIGHT)
        rows, cols = height.row_count, height.col_count
        if row < 0 or row >= rows or col < 0 or col >= cols:
            raise OutOfRangeError(row, col, rows, cols)

    def sample_at(self, row: int, col: int) -> GridSample:
        """Sample one cell of the mapped grid.

        Raises:
            NotReadyError: If the role assignment is not ready
            OutOfRangeError: If (row, col) is outside the Height grid
        """
        self._ensure_ready()
        self._check_range(row, col)

        fields = {}
        for role in Role.all_roles():
            variable = self._role_map.get(role)
            prefix = _PREFIX[role]
            fields[f"{prefix}_value"] = variable.value(row, col)
            fields[f"{prefix}_label"] = variable.label
            fields[f"{prefix}_row_header"] = variable.row_header(row)
            fields[f"{prefix}_col_header"] = variable.column_header(col)

        return GridSample(
            is_valid=True,
            row=row,
            col=col,
            row_header=_first_non_empty(
                fields['height_row_header'], fields['top_row_header'], fields['side_row_header']
            ),
            col_header=_first_non_empty(
                fields['height_col_header'], fields['top_col_header'], fields['side_col_header']
            ),
            **fields
        )

    def try_sample_at(self, row: int, col: int) -> GridSample:
        """Like sample_at(), but returns an invalid GridSample on failure."""
        try:
            return self.sample_at(row, col)
        except (NotReadyError, OutOfRangeError) as e:
            logger.debug(f"Sample at ({row}, {col}) failed: {e}")
            return GridSample()

    def value_by_role(self, role: str, row: int, col: int, zero_for_nan: bool = False) -> float:
        """Return one cell of the variable mapped to a role.

        Raises:
            NotReadyError: If the role assignment is not ready
            OutOfRangeError: If (row, col) is outside the Height grid
        """
        self._ensure_ready()
        self._check_range(row, col)
        value = self._role_map.get(role).value(row, col)
        if zero_for_nan and math.isnan(value):
            return 0.0
        return value

    def is_nan_by_role(self, role: str, row: int, col: int) -> bool:
        """Return True if the cell of the variable mapped to a role is NaN."""
        return math.isnan(self.value_by_role(role, row, col))

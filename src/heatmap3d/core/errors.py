"""
Exception hierarchy for heatmap3d

Hard failures abort the call and are raised to the immediate caller.
Soft contract violations (assigning a non-member variable to a role,
removing a variable twice) are never raised; they are logged as warnings
by the component that detects them.
"""

from typing import Dict, Optional, Tuple


class HeatmapError(Exception):
    """Base class for all heatmap3d errors."""


class GridImportError(HeatmapError):
    """Source unreadable or malformed.

    Raised by GridReader implementations and propagated unchanged through
    GridVariable.import_from() and HeatmapSession.load_file().

    Attributes:
        path: Source path that failed to import (may be None)
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ValidationError(HeatmapError):
    """A single GridVariable's structure is internally inconsistent.

    Attributes:
        reason: One of the ValidationReason constants
        row: Offending row index for row-length failures, else None
    """

    def __init__(self, reason: str, message: str, row: Optional[int] = None):
        super().__init__(message)
        self.reason = reason
        self.row = row


class ConsistencyError(HeatmapError):
    """Role assignment is incomplete or the mapped variables disagree.

    Attributes:
        reason: One of the ConsistencyReason constants
        shapes: For dimension mismatches, role -> (label, rows, cols)
        mismatched_roles: Roles whose shape differs from the Height role
    """

    def __init__(
        self,
        reason: str,
        message: str,
        shapes: Optional[Dict[str, Tuple[str, int, int]]] = None,
        mismatched_roles: Optional[list] = None
    ):
        super().__init__(message)
        self.reason = reason
        self.shapes = shapes if shapes is not None else {}
        self.mismatched_roles = mismatched_roles if mismatched_roles is not None else []


class SampleError(HeatmapError):
    """Base class for point sampling failures."""


class NotReadyError(SampleError):
    """Sampling requested while the role assignment is not ready.

    Attributes:
        consistency_error: The underlying ConsistencyError
        reason: Shortcut to consistency_error.reason
    """

    def __init__(self, consistency_error: ConsistencyError):
        super().__init__(f"Data not ready for sampling: {consistency_error}")
        self.consistency_error = consistency_error
        self.reason = consistency_error.reason


class OutOfRangeError(SampleError):
    """Requested (row, col) lies outside the mapped grid."""

    def __init__(self, row: int, col: int, rows: int, cols: int):
        super().__init__(
            f"Row or col out of range: ({row}, {col}) "
            f"for grid of shape {rows}x{cols}"
        )
        self.row = row
        self.col = col
        self.rows = rows
        self.cols = cols

"""ConsistencyValidator - Readiness check for the mapped variables.

Run before every read-heavy operation (sampling, rendering). The result is
never cached because role assignments can change between calls.
"""

import logging
from typing import Optional, Sequence

from .errors import ConsistencyError
from .role_map import RoleMap
from .types import ConsistencyReason, Role

logger = logging.getLogger(__name__)


class ConsistencyValidator:
    """Stateless check that the role assignment is render-ready.

    Checks, first failure wins:
        1. Height assigned and valid
        2. Top color assigned and valid
        3. Side color assigned and valid
        4. Color-table ids (when supplied) have one entry per role
        5. All three variables share (row_count, col_count)

    Example:
        >>> validator = ConsistencyValidator(role_map)
        >>> validator.check_ready()  # raises ConsistencyError if not ready
        >>> validator.is_ready()
        True
    """

    def __init__(self, role_map: RoleMap):
        """
        Args:
            role_map: Role assignments to check
        """
        self._role_map = role_map

    def check_ready(self, color_table_ids: Optional[Sequence[int]] = None):
        """Raise ConsistencyError if the mapped data cannot be rendered.

        Args:
            color_table_ids: Optional color-table id per role; only its
                length is checked

        Raises:
            ConsistencyError: With the reason of the first failed check
        """
        for role in Role.all_roles():
            if not self._role_map.is_assigned(role):
                raise ConsistencyError(
                    ConsistencyReason.unassigned_reason(role),
                    f"{Role.display_name(role)} variable unassigned or invalid"
                )

        if color_table_ids is not None and len(color_table_ids) != len(Role.all_roles()):
            raise ConsistencyError(
                ConsistencyReason.COLOR_TABLE_LENGTH,
                f"Error with color tables: expected {len(Role.all_roles())} ids, "
                f"got {len(color_table_ids)}"
            )

        shapes = {}
        for role in Role.all_roles():
            variable = self._role_map.get(role)
            shapes[role] = (variable.label, variable.row_count, variable.col_count)

        height_shape = shapes[Role.HEIGHT][1:]
        mismatched = [role for role in Role.all_roles() if shapes[role][1:] != height_shape]
        if mismatched:
            details = "\n".join(
                f" {Role.display_name(role)} '{label}': {rows}x{cols}"
                for role, (label, rows, cols) in shapes.items()
            )
            raise ConsistencyError(
                ConsistencyReason.DIMENSION_MISMATCH,
                f"Data variables do not have same dimensions "
                f"(mismatched: {', '.join(mismatched)}):\n{details}",
                shapes=shapes,
                mismatched_roles=mismatched
            )

    def is_ready(self, color_table_ids: Optional[Sequence[int]] = None) -> bool:
        """Non-raising form of check_ready()."""
        try:
            self.check_ready(color_table_ids)
        except ConsistencyError as e:
            logger.debug(f"Not ready: {e}")
            return False
        return True

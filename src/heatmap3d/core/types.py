"""
Role and reason constants for heatmap3d

Defines the visualization roles a variable can be mapped to, and the
machine-readable reason codes carried by validation and consistency errors.
"""


class Role:
    """Visualization role constants.

    Closed set of three roles, in the fixed order used everywhere a
    role-by-role scan is made (readiness checks, header resolution):

    - HEIGHT: Drives ridge height
    - TOP_COLOR: Drives the color of the top face
    - SIDE_COLOR: Drives the color of the side faces
    """

    HEIGHT = 'height'
    TOP_COLOR = 'top_color'
    SIDE_COLOR = 'side_color'

    @classmethod
    def all_roles(cls):
        """Return all roles in their fixed order."""
        return [
            cls.HEIGHT,
            cls.TOP_COLOR,
            cls.SIDE_COLOR,
        ]

    @classmethod
    def is_valid(cls, role: str) -> bool:
        """Check if a role is valid."""
        return role in cls.all_roles()

    @classmethod
    def index(cls, role: str) -> int:
        """Return the ordinal position of a role.

        Raises:
            ValueError: If role is not one of the three roles
        """
        if not cls.is_valid(role):
            raise ValueError(
                f"Invalid role: '{role}'. Valid roles: {cls.all_roles()}"
            )
        return cls.all_roles().index(role)

    @classmethod
    def display_name(cls, role: str) -> str:
        """Return a human-readable name, e.g. 'Top Color'."""
        return role.replace('_', ' ').title()


class ValidationReason:
    """Reason codes for a structurally invalid GridVariable.

    Listed in the order the checks run; only the first failure is reported.
    """

    EMPTY_DATA = 'empty_data'
    NON_POSITIVE_COLS = 'non_positive_cols'
    NON_POSITIVE_ROWS = 'non_positive_rows'
    ROW_COUNT_MISMATCH = 'row_count_mismatch'
    COLUMN_HEADER_COUNT_MISMATCH = 'column_header_count_mismatch'
    ROW_HEADER_COUNT_MISMATCH = 'row_header_count_mismatch'
    ROW_LENGTH_MISMATCH = 'row_length_mismatch'


class ConsistencyReason:
    """Reason codes for a role assignment that is not ready to render."""

    HEIGHT_UNASSIGNED_OR_INVALID = 'height_unassigned_or_invalid'
    TOP_COLOR_UNASSIGNED_OR_INVALID = 'top_color_unassigned_or_invalid'
    SIDE_COLOR_UNASSIGNED_OR_INVALID = 'side_color_unassigned_or_invalid'
    COLOR_TABLE_LENGTH = 'color_table_length'
    DIMENSION_MISMATCH = 'dimension_mismatch'

    @classmethod
    def unassigned_reason(cls, role: str) -> str:
        """Map a role to its 'unassigned or invalid' reason code."""
        return {
            Role.HEIGHT: cls.HEIGHT_UNASSIGNED_OR_INVALID,
            Role.TOP_COLOR: cls.TOP_COLOR_UNASSIGNED_OR_INVALID,
            Role.SIDE_COLOR: cls.SIDE_COLOR_UNASSIGNED_OR_INVALID,
        }[role]

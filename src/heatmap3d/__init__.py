"""
heatmap3d - Data management for 3D heatmap visualization

Loads independent 2D numeric grids ("variables"), maps up to three of them
onto the Height / Top Color / Side Color roles, and checks that the mapped
variables are consistent before anything is drawn:
- VariableRegistry owns loaded variables, RoleMap references them by handle
- Lazy min/max/range statistics with NaN (no data) handling
- ConsistencyValidator gates sampling and rendering
- Config-driven import defaults and demo data
"""

from .core import (
    Role,
    GridVariable,
    GridStatistics,
    VariableRegistry,
    RoleMap,
    ConsistencyValidator,
    PointSampler,
    GridSample,
    HeatmapSession,
    SessionListener,
)

__version__ = "1.0.0"

__all__ = [
    'Role',
    'GridVariable',
    'GridStatistics',
    'VariableRegistry',
    'RoleMap',
    'ConsistencyValidator',
    'PointSampler',
    'GridSample',
    'HeatmapSession',
    'SessionListener',
]

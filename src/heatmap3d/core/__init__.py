"""Core components for heatmap3d"""

from .types import Role, ValidationReason, ConsistencyReason
from .errors import (
    HeatmapError,
    GridImportError,
    ValidationError,
    ConsistencyError,
    SampleError,
    NotReadyError,
    OutOfRangeError,
)
from .config_manager import ConfigManager
from .grid_variable import GridVariable, GridStatistics
from .registry import VariableRegistry, VariableHandle
from .role_map import RoleMap
from .validator import ConsistencyValidator
from .sampler import PointSampler, GridSample
# Session last: it pulls in heatmap3d.io, which imports core.errors
from .session import HeatmapSession, SessionListener

__all__ = [
    'Role',
    'ValidationReason',
    'ConsistencyReason',
    'HeatmapError',
    'GridImportError',
    'ValidationError',
    'ConsistencyError',
    'SampleError',
    'NotReadyError',
    'OutOfRangeError',
    'ConfigManager',
    'GridVariable',
    'GridStatistics',
    'VariableRegistry',
    'VariableHandle',
    'RoleMap',
    'ConsistencyValidator',
    'PointSampler',
    'GridSample',
    'HeatmapSession',
    'SessionListener',
]

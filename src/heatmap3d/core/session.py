"""HeatmapSession Facade - Main entry point for heatmap3d.

The session is a dependency coordinator that wires components together and
is passed explicitly to whatever needs it (UI, renderer). There is no
process-wide instance.

Design Principles:
- Dependency Coordinator: Creates components and injects explicit dependencies
- Correct Initialization Order: ConfigManager first, then others that depend on it
- Notifications: refresh() after every registry/role mutation, redraw()
  after a successful bulk load-and-map
"""

from concurrent.futures import Future, ThreadPoolExecutor
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import numpy as np
import xarray as xr

from .config_manager import ConfigManager
from .errors import GridImportError
from .grid_variable import GridVariable
from .registry import VariableHandle, VariableRegistry
from .role_map import RoleMap
from .sampler import PointSampler
from .types import Role
from .validator import ConsistencyValidator
from ..io.base import GridReader
from ..io.delimited import DelimitedGridReader

logger = logging.getLogger(__name__)


class SessionListener:
    """Receiver of one-way UI/render notifications.

    Subclasses override the hooks they care about; return values are
    ignored.
    """

    def refresh(self):
        """Registry or role assignments changed."""

    def redraw(self):
        """A bulk load-and-map finished and the scene should be rebuilt."""


class HeatmapSession:
    """Main facade for heatmap3d.

    Components receive only what they need:
    - RoleMap: registry
    - ConsistencyValidator: role_map
    - PointSampler: role_map, validator

    Example:
        >>> with HeatmapSession(config_path='config') as session:
        ...     elevation = session.load_add_file('data/elevation.csv')
        ...     session.assign(Role.HEIGHT, elevation)
        ...     session.assign(Role.TOP_COLOR, elevation)
        ...     session.assign(Role.SIDE_COLOR, elevation)
        ...     session.prepare_and_verify()
        ...     sample = session.sampler.sample_at(0, 0)
    """

    def __init__(
        self,
        config_path: str = 'config',
        reader: Optional[GridReader] = None,
        listener: Optional[SessionListener] = None,
        color_table_provider: Optional[Callable[[], Sequence[int]]] = None
    ):
        """Initialize the session and its components.

        Args:
            config_path: Path to config directory (default: 'config')
            reader: Import collaborator (default: DelimitedGridReader)
            listener: Receiver of refresh/redraw notifications
            color_table_provider: Callable returning one color-table id per
                role, pulled by prepare_and_verify()
        """
        # 1. ConfigManager (FIRST - others depend on it)
        self._config_manager = ConfigManager(config_path)
        self._min_range = self._config_manager.get_min_range()

        # 2. Import collaborator
        self._reader = reader if reader is not None else DelimitedGridReader()

        # 3. Registry, then the components that reference it
        self._registry = VariableRegistry()
        self._role_map = RoleMap(self._registry)
        self._validator = ConsistencyValidator(self._role_map)
        self._sampler = PointSampler(self._role_map, self._validator)

        # 4. External collaborators
        self._listener = listener if listener is not None else SessionListener()
        self._color_table_provider = color_table_provider
        self._color_table_ids: List[int] = [0] * len(Role.all_roles())

        self._executor: Optional[ThreadPoolExecutor] = None

    # ------------------------------------------------------------------
    # Property accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> ConfigManager:
        return self._config_manager

    @property
    def registry(self) -> VariableRegistry:
        return self._registry

    @property
    def role_map(self) -> RoleMap:
        return self._role_map

    @property
    def validator(self) -> ConsistencyValidator:
        return self._validator

    @property
    def sampler(self) -> PointSampler:
        return self._sampler

    @property
    def data_is_loaded(self) -> bool:
        """True if one or more variables are loaded. Does not validate."""
        return len(self._registry) > 0

    @property
    def rows(self) -> int:
        """Row count of the Height variable, or 0 if it is not assigned."""
        if not self._role_map.is_assigned(Role.HEIGHT):
            return 0
        return self._role_map.get(Role.HEIGHT).row_count

    @property
    def cols(self) -> int:
        """Column count of the Height variable, or 0 if it is not assigned."""
        if not self._role_map.is_assigned(Role.HEIGHT):
            return 0
        return self._role_map.get(Role.HEIGHT).col_count

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _header_flags(self, has_row_headers, has_column_headers):
        if has_row_headers is None:
            has_row_headers = self._config_manager.get_flag('import.has_row_headers', True)
        if has_column_headers is None:
            has_column_headers = self._config_manager.get_flag('import.has_column_headers', True)
        return has_row_headers, has_column_headers

    def load_file(
        self,
        path: str,
        has_row_headers: Optional[bool] = None,
        has_column_headers: Optional[bool] = None
    ) -> GridVariable:
        """Load a file into a new GridVariable. Does NOT add it to the registry.

        Header flags default to the import settings in settings.yaml.

        Raises:
            GridImportError: If the reader fails (propagated unchanged)
            ValueError: If an import header setting is not a boolean
        """
        has_row_headers, has_column_headers = self._header_flags(has_row_headers, has_column_headers)
        try:
            return GridVariable.load(
                self._reader,
                str(path),
                has_row_headers=has_row_headers,
                has_column_headers=has_column_headers,
                min_range=self._min_range
            )
        except GridImportError as e:
            logger.error(f"Error reading file {path}: {e}")
            raise

    def load_file_async(
        self,
        path: str,
        has_row_headers: Optional[bool] = None,
        has_column_headers: Optional[bool] = None
    ) -> Future:
        """Run load_file() off the calling thread.

        The returned future resolves to a fully populated GridVariable or
        raises GridImportError. Nothing is added to the registry; the caller
        does that once the future has resolved. In-flight loads cannot be
        cancelled.
        """
        if self._executor is None:
            max_workers = int(self._config_manager.get_setting('import.max_workers', 1))
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers,
                thread_name_prefix='heatmap3d-import'
            )
        return self._executor.submit(self.load_file, path, has_row_headers, has_column_headers)

    def load_add_file(
        self,
        path: str,
        has_row_headers: Optional[bool] = None,
        has_column_headers: Optional[bool] = None
    ) -> GridVariable:
        """Load a file, label it with the file name stem and register it.

        Raises:
            GridImportError: If the reader fails; the registry is unchanged
        """
        variable = self.load_file(path, has_row_headers, has_column_headers)
        variable.label = Path(path).stem
        self.add(variable)
        logger.info(f"Loaded '{variable.label}' ({variable.row_count}x{variable.col_count}) from {path}")
        return variable

    # ------------------------------------------------------------------
    # Mutations (each one notifies the listener)
    # ------------------------------------------------------------------

    def add(self, variable: GridVariable) -> VariableHandle:
        handle = self._registry.add(variable)
        self._listener.refresh()
        return handle

    def remove(self, variable: Optional[GridVariable]) -> bool:
        """Remove a variable; any role pointing at it becomes unassigned."""
        removed = self._registry.remove(variable)
        self._listener.refresh()
        return removed

    def assign(self, role: str, variable: Optional[GridVariable]):
        self._role_map.assign(role, variable)
        self._listener.refresh()

    def assign_by_label(self, role: str, label: str) -> bool:
        assigned = self._role_map.assign_by_label(role, label)
        self._listener.refresh()
        return assigned

    def clear(self):
        """Drop all variables, role assignments and color tables."""
        self._registry.clear()
        self._role_map.clear()
        self._color_table_ids = [0] * len(Role.all_roles())
        self._listener.refresh()

    # ------------------------------------------------------------------
    # Color tables
    # ------------------------------------------------------------------

    @property
    def color_table_ids(self) -> List[int]:
        return list(self._color_table_ids)

    def set_color_table(self, role: str, table_id: int):
        """Record the color table for a role (ignored for Height by renderers)."""
        self._color_table_ids[Role.index(role)] = int(table_id)

    def color_table_id(self, role: str) -> int:
        return self._color_table_ids[Role.index(role)]

    # ------------------------------------------------------------------
    # Readiness
    # ------------------------------------------------------------------

    def prepare_and_verify(self):
        """Call before drawing.

        Pulls color-table ids from the provider (if any), then runs the
        consistency check.

        Raises:
            ConsistencyError: If the mapped data is not render-ready
        """
        if self._color_table_provider is not None:
            self._color_table_ids = list(self._color_table_provider())
        self._validator.check_ready(self._color_table_ids)

    def to_dataset(self) -> xr.Dataset:
        """Return the three mapped variables as one xarray Dataset.

        Data variables are named after the roles, on dims ('row', 'col').
        Coordinates use the first available headers in role order, falling
        back to integer positions.

        Raises:
            ConsistencyError: If the mapped data is not render-ready
        """
        self.prepare_and_verify()

        variables = [self._role_map.get(role) for role in Role.all_roles()]
        rows, cols = variables[0].shape

        row_coords = next(
            (v.row_headers for v in variables if v.has_row_headers), list(np.arange(rows))
        )
        col_coords = next(
            (v.column_headers for v in variables if v.has_column_headers), list(np.arange(cols))
        )

        data_vars = {}
        for role, variable in zip(Role.all_roles(), variables):
            stats = variable.statistics()
            data_vars[role] = xr.DataArray(
                variable.to_numpy(),
                dims=('row', 'col'),
                attrs={
                    'label': variable.label,
                    'source_path': variable.source_path,
                    'min': stats.min_value,
                    'max': stats.max_value,
                    'range': stats.range,
                    'color_table': self.color_table_id(role),
                }
            )

        return xr.Dataset(data_vars, coords={'row': row_coords, 'col': col_coords})

    # ------------------------------------------------------------------
    # Demo data
    # ------------------------------------------------------------------

    def load_and_map_sample_data(self) -> List[GridVariable]:
        """Load the files listed in sample_data.yaml and map them to roles.

        Clears the session first. On success, refreshes and then redraws.

        Returns:
            Loaded variables, in file order

        Raises:
            GridImportError: If a sample file fails to load (no redraw)
            ValueError: If an entry names an invalid role
        """
        sample_config = self._config_manager.get_sample_data_config()
        self.clear()

        loaded = []
        for entry in sample_config['files']:
            role = entry['role']
            if not Role.is_valid(role):
                raise ValueError(f"Invalid role '{role}' for sample file {entry['file']}")

            path = Path(sample_config['directory']) / entry['file']
            variable = self.load_add_file(
                str(path),
                has_row_headers=sample_config['has_row_headers'],
                has_column_headers=sample_config['has_column_headers']
            )
            self.assign(role, variable)
            if entry.get('color_table') is not None:
                self.set_color_table(role, entry['color_table'])
            loaded.append(variable)

        self._listener.refresh()
        self._listener.redraw()
        logger.info(f"Loaded and mapped {len(loaded)} sample files")
        return loaded

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def debug_dump(self, verbose: bool = False):
        """Log the role mappings and loaded variables."""
        logger.info("============= Variable Mappings:")
        for role, label in self._role_map.assignments().items():
            logger.info(f"{Role.display_name(role)}: {label if label is not None else 'unassigned'}")
        logger.info("------------------------------")
        logger.info("Data variables:")
        for variable in self._registry:
            if verbose:
                for key, value in variable.describe().items():
                    logger.info(f"  {key}: {value}")
                logger.info("------------------------------")
            else:
                logger.info(f"Label: {variable.label}")
        logger.info("=============================== end")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self):
        """Shut down the import executor, waiting for in-flight loads."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> 'HeatmapSession':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        return (
            f"HeatmapSession("
            f"variables={len(self._registry)}, "
            f"roles={self._role_map.assignments()})"
        )

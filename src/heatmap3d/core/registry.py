"""VariableRegistry - Ownership of all loaded GridVariables.

The registry keeps variables in insertion order and hands out handles that
other components (RoleMap) store instead of the variables themselves.
"""

from dataclasses import dataclass
import logging
from typing import Callable, Dict, Iterator, List, Optional

from .grid_variable import GridVariable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariableHandle:
    """Non-owning reference to a registered variable.

    Keys are never reused, so a handle to a removed variable resolves to
    None instead of to whatever was added afterwards.
    """
    key: int


class VariableRegistry:
    """Insertion-ordered set of GridVariables, unique by identity.

    Labels are not unique: by_label() returns the first match and duplicate
    labels are reported verbatim by labels().

    Example:
        >>> registry = VariableRegistry()
        >>> handle = registry.add(variable)
        >>> registry.by_label('temperature') is variable
        True
        >>> registry.remove(variable)
        True
        >>> registry.resolve(handle) is None
        True

    Attributes:
        _variables: Variables in insertion order
        _handles: id(variable) -> VariableHandle for current members
        _members: VariableHandle -> variable for current members
        _removal_listeners: Callbacks invoked as (handle, variable) on removal
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._variables: List[GridVariable] = []
        self._handles: Dict[int, VariableHandle] = {}
        self._members: Dict[VariableHandle, GridVariable] = {}
        self._next_key = 0
        self._removal_listeners: List[Callable[[VariableHandle, GridVariable], None]] = []

    def add_removal_listener(self, callback: Callable[[VariableHandle, GridVariable], None]):
        """Register a callback run after a variable is removed."""
        self._removal_listeners.append(callback)

    def add(self, variable: GridVariable) -> VariableHandle:
        """Append a variable and return its handle.

        Adding a variable that is already a member leaves the order
        unchanged and returns its existing handle.

        Raises:
            TypeError: If variable is not a GridVariable
        """
        if not isinstance(variable, GridVariable):
            raise TypeError(f"variable must be a GridVariable, got {type(variable)}")

        existing = self._handles.get(id(variable))
        if existing is not None:
            logger.warning(f"Variable '{variable.label}' is already registered")
            return existing

        handle = VariableHandle(self._next_key)
        self._next_key += 1

        self._variables.append(variable)
        self._handles[id(variable)] = handle
        self._members[handle] = variable
        logger.debug(f"Registered variable '{variable.label}' as {handle}")
        return handle

    def remove(self, variable: Optional[GridVariable]) -> bool:
        """Remove a variable by identity.

        Removal listeners run after the variable leaves the registry, so a
        RoleMap listening here never keeps pointing at it.

        Returns:
            True if removed, False if variable was None or not a member
            (the latter is logged as a warning, not raised)
        """
        if variable is None:
            return False

        handle = self._handles.pop(id(variable), None)
        if handle is None:
            logger.warning(
                f"Tried removing variable '{variable.label}' that is not in the registry"
            )
            return False

        del self._members[handle]
        self._variables = [v for v in self._variables if v is not variable]

        for callback in self._removal_listeners:
            callback(handle, variable)

        logger.debug(f"Removed variable '{variable.label}'")
        return True

    def clear(self):
        """Remove every variable, notifying listeners for each."""
        for variable in list(self._variables):
            self.remove(variable)

    def contains(self, variable: Optional[GridVariable]) -> bool:
        """Return True if this exact variable object is a member."""
        return variable is not None and id(variable) in self._handles

    def handle_of(self, variable: Optional[GridVariable]) -> Optional[VariableHandle]:
        """Return the handle of a member, or None for non-members."""
        if variable is None:
            return None
        return self._handles.get(id(variable))

    def resolve(self, handle: Optional[VariableHandle]) -> Optional[GridVariable]:
        """Return the variable behind a handle, or None if it was removed."""
        if handle is None:
            return None
        return self._members.get(handle)

    def by_label(self, label: str) -> Optional[GridVariable]:
        """Return the first variable with this label, in insertion order."""
        for variable in self._variables:
            if variable.label == label:
                return variable
        return None

    def by_index(self, index: int) -> Optional[GridVariable]:
        """Return the variable at an ordinal position, or None if out of range."""
        if index < 0 or index >= len(self._variables):
            return None
        return self._variables[index]

    def labels(self) -> List[str]:
        """Return one label per variable, in insertion order."""
        return [variable.label for variable in self._variables]

    def __len__(self) -> int:
        return len(self._variables)

    def __iter__(self) -> Iterator[GridVariable]:
        return iter(list(self._variables))

    def __repr__(self) -> str:
        return f"VariableRegistry(variables={self.labels()})"

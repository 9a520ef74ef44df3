"""RoleMap - Assignment of variables to the three visualization roles."""

from dataclasses import dataclass
import logging
from typing import Dict, List, Optional

from .grid_variable import GridVariable
from .registry import VariableHandle, VariableRegistry
from .types import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Slot:
    """Contents of one role slot.

    A registered variable is held through its handle. A variable assigned
    in breach of the membership contract is kept as a detached reference.
    """
    handle: Optional[VariableHandle] = None
    detached: Optional[GridVariable] = None


class RoleMap:
    """Fixed table of role -> variable references.

    The map never owns variables. It subscribes to its registry so that a
    removed variable disappears from every slot pointing at it.

    Example:
        >>> roles = RoleMap(registry)
        >>> roles.assign(Role.HEIGHT, elevation)
        >>> roles.is_assigned(Role.HEIGHT)
        True
        >>> registry.remove(elevation)
        >>> roles.get(Role.HEIGHT) is None
        True
    """

    def __init__(self, registry: VariableRegistry):
        """Initialize with all roles unassigned.

        Args:
            registry: Registry whose members may be assigned
        """
        self._registry = registry
        self._slots: Dict[str, Optional[_Slot]] = {role: None for role in Role.all_roles()}
        registry.add_removal_listener(self._on_variable_removed)

    @staticmethod
    def _check_role(role: str):
        if not Role.is_valid(role):
            raise ValueError(f"Invalid role: '{role}'. Valid roles: {Role.all_roles()}")

    def _on_variable_removed(self, handle: VariableHandle, variable: GridVariable):
        for role, slot in self._slots.items():
            if slot is None:
                continue
            if slot.handle == handle or slot.detached is variable:
                self._slots[role] = None
                logger.debug(f"Cleared role '{role}' after removal of '{variable.label}'")

    def assign(self, role: str, variable: Optional[GridVariable]):
        """Set a role slot. None clears it.

        Assigning a variable that is not a registry member is a contract
        violation: it is logged as a warning and the assignment proceeds.

        Raises:
            ValueError: If role is not a valid Role
        """
        self._check_role(role)

        if variable is None:
            self._slots[role] = None
            return

        handle = self._registry.handle_of(variable)
        if handle is None:
            logger.warning(
                f"Assigning role '{role}' to variable '{variable.label}' "
                f"that is not in the registry"
            )
            self._slots[role] = _Slot(detached=variable)
        else:
            self._slots[role] = _Slot(handle=handle)

    def assign_by_label(self, role: str, label: str) -> bool:
        """Assign the first registered variable with this label.

        Returns:
            True if a variable was found and assigned; False leaves the
            slot untouched
        """
        variable = self._registry.by_label(label)
        if variable is None:
            logger.debug(f"No variable labelled '{label}' to assign to role '{role}'")
            return False
        self.assign(role, variable)
        return True

    def get(self, role: str) -> Optional[GridVariable]:
        """Return the variable in a role slot, or None."""
        self._check_role(role)
        slot = self._slots[role]
        if slot is None:
            return None
        if slot.handle is not None:
            return self._registry.resolve(slot.handle)
        return slot.detached

    def is_assigned(self, role: str) -> bool:
        """True only if the slot holds a variable that passes validation."""
        variable = self.get(role)
        return variable is not None and variable.is_valid()

    def clear(self, role: Optional[str] = None):
        """Clear one role, or all roles if role is None."""
        if role is None:
            for r in Role.all_roles():
                self._slots[r] = None
            return
        self._check_role(role)
        self._slots[role] = None

    def roles_of(self, variable: GridVariable) -> List[str]:
        """Return the roles currently pointing at this variable."""
        return [role for role in Role.all_roles() if self.get(role) is variable]

    def assignments(self) -> Dict[str, Optional[str]]:
        """Return role -> assigned label (None when unassigned)."""
        result = {}
        for role in Role.all_roles():
            variable = self.get(role)
            result[role] = variable.label if variable is not None else None
        return result

    def __repr__(self) -> str:
        return f"RoleMap({self.assignments()})"

"""
Component base class for battle-state models.

Components are pydantic models holding combat state. Systems (the
resolver, ticker, planner and allocator modules) read and mutate them
in place; mutation of a component is the commit point for a combat step.

Usage:
    class Health(Component):
        current: int = 0
        max_hp: int = 1

    preview = health.clone()
    preview.current -= 10
    health.commit(preview)
"""

from __future__ import annotations

import copy
from typing import ClassVar, Iterable

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all battle-state components.

    Pydantic provides:
    - Validation (and sanitising validators) on construction and assignment
    - Deep copies for simulation views
    - JSON round-tripping for the host's persistence layer
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra='forbid',
    )

    # Class variable: component type name (used for serialization)
    _type_name: ClassVar[str] = ""

    @classmethod
    def get_type_name(cls) -> str:
        """Get the component type name for serialization."""
        return cls._type_name or cls.__name__

    def clone(self) -> Component:
        """Create a deep copy of this component (a simulation view)."""
        return self.model_copy(deep=True)

    def commit(self, source: Component, fields: Iterable[str] | None = None) -> None:
        """
        Copy state from a simulated clone back onto this component.

        Args:
            source: Component of the same type, usually produced by clone()
            fields: Field names to copy. None copies every field.
        """
        if type(source) is not type(self):
            raise TypeError(
                f"Cannot commit {type(source).__name__} onto {type(self).__name__}"
            )
        names = list(fields) if fields is not None else list(type(self).model_fields)
        for name in names:
            setattr(self, name, copy.deepcopy(getattr(source, name)))


# Registry of component types for deserialization
_component_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """
    Decorator to register a component type.

    Usage:
        @register_component
        class Health(Component):
            current: int
            max_hp: int
    """
    type_name = cls.get_type_name()
    _component_registry[type_name] = cls
    return cls


def get_component_type(type_name: str) -> type[Component] | None:
    """Get component class by type name."""
    return _component_registry.get(type_name)


def get_all_component_types() -> dict[str, type[Component]]:
    """Get all registered component types."""
    return _component_registry.copy()

"""
Core engine module.

Exports:
- Component, register_component: pydantic state base with clone()/commit()
- EventBus, Event: Tagged events and publish/subscribe
- RNG: Injectable random source
- finite_or, non_negative, clamp: Numeric sanitising helpers
"""

from engine.core.component import Component, register_component, get_component_type
from engine.core.events import EventBus, Event, EventHandler
from engine.core.rng import RNG
from engine.core.numeric import finite_or, non_negative, clamp, round_half_up

__all__ = [
    # Components
    "Component",
    "register_component",
    "get_component_type",
    # Events
    "EventBus",
    "Event",
    "EventHandler",
    # Randomness
    "RNG",
    # Numeric
    "finite_or",
    "non_negative",
    "clamp",
    "round_half_up",
]

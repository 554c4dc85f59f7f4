"""
Reel Combat Engine

Game-agnostic infrastructure shared by the combat core: validated state
components, tagged events, an injectable random source and a content
database.

Quick Start:
    from engine import RNG, EventBus

    rng = RNG(seed=7)
    bus = EventBus()
"""

__version__ = "0.3.0"
__author__ = "Developer"

from engine.core import (
    Component,
    register_component,
    EventBus,
    Event,
    RNG,
)
from engine.resources import Database

__all__ = [
    "Component",
    "register_component",
    "EventBus",
    "Event",
    "RNG",
    "Database",
]

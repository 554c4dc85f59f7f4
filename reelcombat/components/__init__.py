"""
Battle-state components.
"""

from reelcombat.components.status import (
    StatusKind,
    StatusEntry,
    StatusBook,
    ConfusionState,
    ENEMY_CONDITIONS,
)
from reelcombat.components.combatant import (
    Combatant,
    Side,
    ActionRange,
    create_enemy,
    alive_members,
    alive_indices,
    first_alive_index,
)

__all__ = [
    "StatusKind",
    "StatusEntry",
    "StatusBook",
    "ConfusionState",
    "ENEMY_CONDITIONS",
    "Combatant",
    "Side",
    "ActionRange",
    "create_enemy",
    "alive_members",
    "alive_indices",
    "first_alive_index",
]

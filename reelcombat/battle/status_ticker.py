"""
Status ticker - counts timed statuses down at turn boundaries.

Temp shield is not timed and is never touched here. Confusion is
open-ended and only the enemy turn planner clears it.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from engine.core.events import Event
from reelcombat.battle.events import status_expired
from reelcombat.components.combatant import Combatant, Side
from reelcombat.components.status import StatusKind

logger = logging.getLogger(__name__)

PARTY_TIMED = (
    StatusKind.ATK_BUFF,
    StatusKind.ATK_DEBUFF,
    StatusKind.DEF_BUFF,
    StatusKind.DEF_DEBUFF,
    StatusKind.CRIT_CHANCE_BUFF,
    StatusKind.CRIT_DAMAGE_BUFF,
    StatusKind.DAMAGE_REDUCTION,
)

ENEMY_TIMED = (
    StatusKind.ATK_BUFF,
    StatusKind.ATK_DEBUFF,
    StatusKind.DEF_BUFF,
    StatusKind.DEF_DEBUFF,
    StatusKind.NEXT_HIT_VULN,
)

# Deleted outright on expiry
ENEMY_CONDITIONS_TIMED = (
    StatusKind.STUN,
    StatusKind.DAZED,
    StatusKind.ACTION_LIMIT,
)


def _tick(combatant: Combatant, kind: StatusKind, remove_on_expiry: bool) -> bool:
    """Decrement one status. Returns True if it expired on this tick."""
    entry = combatant.statuses.get(kind)
    if entry is None or entry.turns is None or entry.turns <= 0:
        return False

    entry.turns -= 1
    if entry.turns > 0:
        return False

    if remove_on_expiry:
        combatant.statuses.remove(kind)
    else:
        combatant.statuses.clear(kind)
    return True


def tick_actor_statuses(actor: Combatant, actor_index: Optional[int] = None) -> list[Event]:
    """
    Tick a party actor's timed statuses once.

    Args:
        actor: Party actor
        actor_index: Party slot, carried on expiry events

    Returns:
        One statusExpired event per status that ran out
    """
    events = []
    for kind in PARTY_TIMED:
        if _tick(actor, kind, remove_on_expiry=False):
            events.append(status_expired(Side.PARTY.value, kind.value, actor_index, actor.name))
    if events:
        logger.debug(f"{actor.name}: {len(events)} status(es) expired")
    return events


def tick_enemy_statuses(enemy: Combatant) -> list[Event]:
    """
    Tick an enemy's timed statuses once.

    Stun, dazed and the action limiter are deleted when they run out.
    """
    events = []
    for kind in ENEMY_TIMED:
        if _tick(enemy, kind, remove_on_expiry=False):
            events.append(status_expired(Side.ENEMY.value, kind.value, None, enemy.name))
    for kind in ENEMY_CONDITIONS_TIMED:
        if _tick(enemy, kind, remove_on_expiry=True):
            events.append(status_expired(Side.ENEMY.value, kind.value, None, enemy.name))
    if events:
        logger.debug(f"{enemy.name}: {len(events)} status(es) expired")
    return events


def tick_party_statuses(party: Sequence[Combatant]) -> list[Event]:
    """Tick every party member in slot order."""
    events = []
    for index, actor in enumerate(party):
        if actor is None:
            continue
        events.extend(tick_actor_statuses(actor, index))
    return events

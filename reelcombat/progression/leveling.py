"""
Leveling - XP requirements and level-up stat growth.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from engine.core.numeric import finite_or, round_half_up
from reelcombat.components.combatant import Combatant
from reelcombat.config import XpTuning, DEFAULT_XP_TUNING

logger = logging.getLogger(__name__)


class PartySlot(Enum):
    """Party position, for slot-specific growth."""
    FRONT = auto()
    MIDDLE = auto()
    BACK = auto()


def party_slot(index: int, party_size: int) -> PartySlot:
    """Slot for a party index: first is FRONT, last (of 2+) is BACK."""
    if index == 0:
        return PartySlot.FRONT
    if party_size > 1 and index == party_size - 1:
        return PartySlot.BACK
    return PartySlot.MIDDLE


def xp_to_next_level(level: int, tuning: Optional[XpTuning] = None) -> int:
    """XP needed to go from level to level + 1."""
    tuning = tuning or DEFAULT_XP_TUNING
    lvl = max(1, int(finite_or(level, 1)))
    return tuning.level_xp_base + tuning.level_xp_linear * lvl + tuning.level_xp_quadratic * lvl * lvl


@dataclass
class LevelUpReport:
    """What one grant_xp call did."""
    xp_granted: int = 0
    levels_gained: int = 0
    level_before: int = 1
    level_after: int = 1
    hit_loop_guard: bool = False


def _grow(actor: Combatant, slot: PartySlot, tuning: XpTuning) -> None:
    """Apply one level of stat growth."""
    was_downed = actor.is_downed

    actor.max_hp = max(actor.max_hp, round_half_up(actor.max_hp * (1 + tuning.hp_growth)))
    actor.atk = max(actor.atk + 1, round_half_up(actor.atk * (1 + tuning.atk_growth)))
    actor.defense = max(actor.defense + 1, round_half_up(actor.defense * (1 + tuning.def_growth)))

    if slot is PartySlot.FRONT:
        actor.crit_chance = actor.crit_chance + tuning.front_slot_crit_chance
        actor.crit_damage_bonus = actor.crit_damage_bonus + tuning.front_slot_crit_damage
    elif slot is PartySlot.BACK:
        actor.evasion = actor.evasion + tuning.back_slot_evasion

    # Downed actors don't revive on level-up
    actor.set_hp(0 if was_downed else actor.max_hp)


def grant_xp(
    actor: Combatant,
    xp: float,
    slot: PartySlot = PartySlot.MIDDLE,
    tuning: Optional[XpTuning] = None,
) -> LevelUpReport:
    """
    Add XP to an actor, handling level-ups.

    Args:
        actor: Party actor (level, xp and stats mutated)
        xp: XP to add; negative or non-finite amounts add nothing
        slot: Party position for slot growth bonuses
        tuning: Balance constants

    Returns:
        LevelUpReport
    """
    tuning = tuning or DEFAULT_XP_TUNING
    amount = int(max(0.0, finite_or(xp)))
    report = LevelUpReport(xp_granted=amount, level_before=actor.level, level_after=actor.level)

    actor.xp = actor.xp + amount

    for _ in range(tuning.max_level_ups):
        needed = xp_to_next_level(actor.level, tuning)
        if actor.xp < needed:
            break
        actor.xp = actor.xp - needed
        actor.level = actor.level + 1
        report.levels_gained += 1
        _grow(actor, slot, tuning)
        logger.debug(f"{actor.name} reached level {actor.level}")
    else:
        if actor.xp >= xp_to_next_level(actor.level, tuning):
            report.hit_loop_guard = True
            logger.debug(f"{actor.name}: level-up guard hit at level {actor.level}")

    report.level_after = actor.level
    return report

"""
Stat modifiers - effective stats from base stats plus active statuses.

Read-only projections; nothing here mutates a combatant. Effective stats
are never stored, always recomputed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from engine.core.numeric import clamp, round_half_up
from reelcombat.components.combatant import Combatant
from reelcombat.components.status import StatusKind
from reelcombat.config import CombatTuning, DEFAULT_COMBAT_TUNING


@dataclass(frozen=True)
class EffectiveStats:
    """Snapshot of a combatant's effective stats."""
    attack: int
    defense: int
    crit_chance: float
    crit_damage_bonus: float
    damage_reduction: float


def _layered(base: float, buff: float, debuff: float, tuning: CombatTuning) -> int:
    up = clamp(buff, 0.0, tuning.max_buff_pct)
    down = clamp(debuff, 0.0, tuning.max_debuff_pct)
    return max(0, round_half_up(base * (1 + up) * (1 - down)))


def effective_attack(combatant: Combatant, tuning: Optional[CombatTuning] = None) -> int:
    """Attack after buff/debuff layers: base * (1 + buff) * (1 - debuff)."""
    tuning = tuning or DEFAULT_COMBAT_TUNING
    statuses = combatant.statuses
    return _layered(
        combatant.atk,
        statuses.magnitude(StatusKind.ATK_BUFF),
        statuses.magnitude(StatusKind.ATK_DEBUFF),
        tuning,
    )


def effective_defense(combatant: Combatant, tuning: Optional[CombatTuning] = None) -> int:
    """Defense after buff/debuff layers, same pattern as attack."""
    tuning = tuning or DEFAULT_COMBAT_TUNING
    statuses = combatant.statuses
    return _layered(
        combatant.defense,
        statuses.magnitude(StatusKind.DEF_BUFF),
        statuses.magnitude(StatusKind.DEF_DEBUFF),
        tuning,
    )


def effective_crit_chance(combatant: Combatant, tuning: Optional[CombatTuning] = None) -> float:
    tuning = tuning or DEFAULT_COMBAT_TUNING
    bonus = combatant.statuses.magnitude(StatusKind.CRIT_CHANCE_BUFF)
    return clamp(combatant.crit_chance + bonus, 0.0, tuning.max_crit_chance)


def effective_crit_damage_bonus(combatant: Combatant) -> float:
    bonus = combatant.statuses.magnitude(StatusKind.CRIT_DAMAGE_BUFF)
    return max(0.0, combatant.crit_damage_bonus + bonus)


def damage_reduction(combatant: Combatant, tuning: Optional[CombatTuning] = None) -> float:
    """Active incoming damage reduction fraction."""
    tuning = tuning or DEFAULT_COMBAT_TUNING
    return clamp(combatant.statuses.magnitude(StatusKind.DAMAGE_REDUCTION), 0.0, tuning.max_damage_reduction)


def resolve_effective_stats(combatant: Combatant, tuning: Optional[CombatTuning] = None) -> EffectiveStats:
    """All effective stats at once."""
    return EffectiveStats(
        attack=effective_attack(combatant, tuning),
        defense=effective_defense(combatant, tuning),
        crit_chance=effective_crit_chance(combatant, tuning),
        crit_damage_bonus=effective_crit_damage_bonus(combatant),
        damage_reduction=damage_reduction(combatant, tuning),
    )

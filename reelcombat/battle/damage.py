"""
Damage resolver - one attack in either direction.

Both entry points mutate the defender in place (HP, and shield for
enemy hits) and return an AttackOutcome describing what happened.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from engine.core.numeric import clamp, finite_or, round_half_up
from engine.core.rng import RNG
from reelcombat.battle.modifiers import (
    damage_reduction,
    effective_attack,
    effective_crit_chance,
    effective_crit_damage_bonus,
    effective_defense,
)
from reelcombat.components.combatant import Combatant
from reelcombat.components.status import StatusKind
from reelcombat.config import CombatTuning, DEFAULT_COMBAT_TUNING

logger = logging.getLogger(__name__)


@dataclass
class AttackOutcome:
    """
    Result of one resolved attack.

    Attributes:
        damage: HP actually lost by the defender
        is_crit: Whether the crit roll succeeded
        killed: Defender is at 0 HP afterwards
        new_hp: Defender HP afterwards
        absorbed_shield: Damage soaked by temp shield (enemy hits only)
        raw_damage: Damage after reduction, before shield absorption
        new_shield: Defender shield afterwards
        guarded: Defender was defending when hit
    """
    damage: int = 0
    is_crit: bool = False
    killed: bool = False
    new_hp: int = 0
    absorbed_shield: int = 0
    raw_damage: int = 0
    new_shield: int = 0
    guarded: bool = False


def enemy_damage_floor(enemy_atk: float, tuning: Optional[CombatTuning] = None) -> int:
    """Minimum enemy damage before daze, reduction and shield."""
    tuning = tuning or DEFAULT_COMBAT_TUNING
    return max(1, math.ceil(enemy_atk * tuning.enemy_min_damage_ratio))


def consume_next_hit_vuln(enemy: Combatant, damage: int) -> int:
    """
    Amplify damage by the one-shot vulnerability marker and clear it.

    An expired marker is removed without effect.
    """
    entry = enemy.statuses.get(StatusKind.NEXT_HIT_VULN)
    if entry is None:
        return damage
    if entry.is_active:
        damage = max(1, round_half_up(damage * (1 + entry.magnitude)))
    enemy.statuses.remove(StatusKind.NEXT_HIT_VULN)
    return damage


def compute_player_attack(
    attacker: Combatant,
    enemy: Combatant,
    rng: Optional[RNG] = None,
    tuning: Optional[CombatTuning] = None,
) -> AttackOutcome:
    """
    Player -> enemy basic attack.

    Args:
        attacker: Party actor
        enemy: Enemy being hit (HP mutated)
        rng: Random source for the crit roll
        tuning: Balance constants

    Returns:
        AttackOutcome (absorbed_shield is always 0)
    """
    rng = rng or RNG()
    tuning = tuning or DEFAULT_COMBAT_TUNING

    power = round_half_up(effective_attack(attacker, tuning) * tuning.player_attack_mult)
    is_crit = rng.chance(effective_crit_chance(attacker, tuning))
    if is_crit:
        power = round_half_up(power * (tuning.base_crit_mult + effective_crit_damage_bonus(attacker)))

    damage = max(1, power - effective_defense(enemy, tuning))
    damage = consume_next_hit_vuln(enemy, damage)

    enemy.set_hp(enemy.hp - damage)
    logger.debug(f"{attacker.name} hits {enemy.name} for {damage} (crit={is_crit})")

    return AttackOutcome(
        damage=damage,
        is_crit=is_crit,
        killed=enemy.is_downed,
        new_hp=enemy.hp,
        raw_damage=damage,
        new_shield=enemy.temp_shield,
    )


def compute_enemy_attack(
    enemy: Combatant,
    target: Combatant,
    rng: Optional[RNG] = None,
    tuning: Optional[CombatTuning] = None,
    *,
    attack_power: Optional[float] = None,
) -> AttackOutcome:
    """
    Enemy -> party attack.

    Order: attack minus defense, defend multiplier, crit, minimum floor,
    daze penalty, damage reduction, shield, HP.

    Args:
        enemy: Attacking enemy
        target: Party actor being hit (HP and shield mutated)
        rng: Random source for the crit roll
        tuning: Balance constants
        attack_power: Attack before the enemy multiplier (e.g. effective
            attack times a move multiplier). Defaults to effective attack.

    Returns:
        AttackOutcome; damage is HP loss only, shield soak is separate
    """
    rng = rng or RNG()
    tuning = tuning or DEFAULT_COMBAT_TUNING

    if attack_power is None:
        power = effective_attack(enemy, tuning)
    else:
        power = max(0.0, finite_or(attack_power, enemy.atk))
    enemy_atk = round_half_up(power * tuning.enemy_attack_mult)

    base = enemy_atk - effective_defense(target, tuning)

    guarded = target.is_defending
    if guarded:
        defend_mult = clamp(target.defend_damage_mult, tuning.defend_mult_min, tuning.defend_mult_max)
        base = math.floor(base * defend_mult)

    is_crit = rng.chance(effective_crit_chance(enemy, tuning))
    if is_crit:
        base = round_half_up(base * tuning.enemy_crit_mult)

    damage = max(enemy_damage_floor(enemy_atk, tuning), base)

    if enemy.statuses.is_active(StatusKind.DAZED):
        damage = max(1, round_half_up(damage * tuning.dazed_damage_mult))

    reduction = damage_reduction(target, tuning)
    if reduction > 0:
        damage = max(0, round_half_up(damage * (1 - reduction)))

    absorbed = min(target.temp_shield, damage)
    target.temp_shield -= absorbed

    hp_before = target.hp
    target.set_hp(hp_before - (damage - absorbed))

    return AttackOutcome(
        damage=hp_before - target.hp,
        is_crit=is_crit,
        killed=target.is_downed,
        new_hp=target.hp,
        absorbed_shield=absorbed,
        raw_damage=damage,
        new_shield=target.temp_shield,
        guarded=guarded,
    )


def apply_damage(target: Combatant, amount: float) -> int:
    """Raw clamped HP loss (no shield or reduction). Returns HP lost."""
    return target.apply_damage(amount)


def apply_heal(target: Combatant, amount: float) -> int:
    """Clamped heal. Returns HP restored."""
    return target.apply_heal(amount)

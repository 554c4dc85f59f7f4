"""
End-of-battle XP award.

Turns a BattleXpTracker into an XP pool, splits it across the party by
a flat base share plus weighted contribution, and applies leveling.

Pool:
    threat   = level * 6 + attack * 1.5 + max_hp * 0.2
    pool     = round(threat * pacing * survival) + round(action budget)
    survival = 1 + adversity/endurance bonus - stall penalty
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from engine.core.numeric import clamp, round_half_up
from reelcombat.components.combatant import Combatant
from reelcombat.config import XpTuning, DEFAULT_XP_TUNING
from reelcombat.progression.leveling import grant_xp, party_slot
from reelcombat.progression.tracker import BattleXpTracker, CONTRIBUTION_CATEGORIES, EnemySnapshot

logger = logging.getLogger(__name__)


@dataclass
class XpBreakdown:
    """Every intermediate of the pool formula, for presentation and tests."""
    threat: float = 0.0
    target_turns: int = 0
    enemy_phases: int = 0
    pacing_ratio: float = 1.0
    pacing_bonus: float = 1.0
    adversity_bonus: float = 0.0
    endurance_bonus: float = 0.0
    survival_bonus: float = 0.0
    stall_penalty: float = 0.0
    survival_multiplier: float = 1.0
    threat_xp: int = 0
    action_xp_budget: int = 0
    base_pool: float = 0.0
    contribution_pool: float = 0.0


@dataclass
class ActorAward:
    """
    One actor's award with before/after values for presentation.

    full_award is the pre-penalty total (base + contribution + ledger);
    xp_gained is what was actually granted.
    """
    index: int
    name: str
    downed: bool
    base_share: float = 0.0
    contribution_share: float = 0.0
    action_xp: float = 0.0
    full_award: float = 0.0
    xp_gained: int = 0
    levels_gained: int = 0

    hp_before: int = 0
    hp_after: int = 0
    max_hp_before: int = 0
    max_hp_after: int = 0
    level_before: int = 1
    level_after: int = 1
    xp_before: int = 0
    xp_after: int = 0
    atk_before: int = 0
    atk_after: int = 0
    def_before: int = 0
    def_after: int = 0
    crit_chance_before: float = 0.0
    crit_chance_after: float = 0.0
    evasion_before: float = 0.0
    evasion_after: float = 0.0


@dataclass
class XpAwardResult:
    pool: int = 0
    awards: list[ActorAward] = field(default_factory=list)
    breakdown: XpBreakdown = field(default_factory=XpBreakdown)


# ----------------------------------------------------------------------
# Pool
# ----------------------------------------------------------------------

def compute_threat(enemy: EnemySnapshot, tuning: Optional[XpTuning] = None) -> float:
    tuning = tuning or DEFAULT_XP_TUNING
    return (
        enemy.level * tuning.threat_level_weight
        + enemy.attack * tuning.threat_attack_weight
        + enemy.max_hp * tuning.threat_hp_weight
    )


def target_turns(threat: float, tuning: Optional[XpTuning] = None) -> int:
    """Expected enemy turns for a fight of this threat."""
    tuning = tuning or DEFAULT_XP_TUNING
    turns = round_half_up(tuning.target_turns_base + threat * tuning.target_turns_per_threat)
    return int(clamp(turns, tuning.target_turns_min, tuning.target_turns_max))


def pacing_bonus(enemy_phases: int, target: int, tuning: Optional[XpTuning] = None) -> tuple[float, float]:
    """
    Pacing multiplier from actual vs. expected enemy turns.

    Returns:
        (ratio, bonus); close to the expected pace is neutral, faster
        nudges up and slower nudges down, within a fixed band
    """
    tuning = tuning or DEFAULT_XP_TUNING
    ratio = enemy_phases / max(1, target)
    if abs(ratio - 1) <= tuning.pacing_neutral_band:
        return ratio, 1.0
    bonus = 1 - (ratio - 1) * tuning.pacing_slope
    return ratio, clamp(bonus, tuning.pacing_min, tuning.pacing_max)


def compute_pool(
    tracker: BattleXpTracker,
    party: Sequence[Combatant],
    tuning: Optional[XpTuning] = None,
) -> tuple[int, XpBreakdown]:
    """Total XP pool and its breakdown."""
    tuning = tuning or tracker.tuning
    b = XpBreakdown()

    b.threat = compute_threat(tracker.enemy, tuning)
    b.target_turns = target_turns(b.threat, tuning)
    b.enemy_phases = tracker.enemy_phases
    b.pacing_ratio, b.pacing_bonus = pacing_bonus(tracker.enemy_phases, b.target_turns, tuning)

    party_max_hp = max(1, sum(member.max_hp for member in party))
    b.adversity_bonus = (
        tuning.adversity_damage_weight * tracker.incoming_damage / party_max_hp
        + tuning.adversity_low_hp_weight * tracker.low_hp_moments
        + tuning.adversity_ally_down_weight * tracker.ally_down_moments
    )
    b.endurance_bonus = tuning.endurance_weight * max(0.0, b.pacing_ratio - 1)
    b.survival_bonus = clamp(b.adversity_bonus + b.endurance_bonus, 0.0, tuning.survival_bonus_max)

    low_high = tracker.low_impact_total / max(1, tracker.high_impact_total)
    b.stall_penalty = clamp(
        tuning.stall_unit_weight * tracker.stall_penalty_units + tuning.stall_ratio_weight * low_high,
        0.0,
        tuning.stall_penalty_max,
    )
    b.survival_multiplier = 1 + b.survival_bonus - b.stall_penalty

    b.threat_xp = round_half_up(b.threat * b.pacing_bonus * b.survival_multiplier)
    b.action_xp_budget = round_half_up(tracker.action_xp_budget)
    pool = max(1, b.threat_xp + b.action_xp_budget)

    b.base_pool = pool * tuning.base_share
    b.contribution_pool = pool - b.base_pool
    return pool, b


# ----------------------------------------------------------------------
# Split
# ----------------------------------------------------------------------

def contribution_shares(tracker: BattleXpTracker, size: int, tuning: Optional[XpTuning] = None) -> list[float]:
    """
    Each actor's fraction of the contribution pool (sums to 1).

    Categories nobody contributed to hand their weight to the rest; if
    nobody contributed anything the split is equal.
    """
    tuning = tuning or tracker.tuning
    if size <= 0:
        return []

    totals = {name: tracker.category_total(name) for name in CONTRIBUTION_CATEGORIES}
    weights = {
        name: tuning.contribution_weights.get(name, 0.0)
        for name in CONTRIBUTION_CATEGORIES
        if totals[name] > 0
    }
    weight_sum = sum(w for w in weights.values() if w > 0)
    if weight_sum <= 0:
        return [1.0 / size] * size

    shares = []
    for index in range(size):
        metrics = tracker.metrics[index] if index < len(tracker.metrics) else None
        share = 0.0
        if metrics is not None:
            for name, weight in weights.items():
                if weight > 0:
                    share += (weight / weight_sum) * (metrics.category(name) / totals[name])
        shares.append(share)
    return shares


def award_battle_xp(
    tracker: BattleXpTracker,
    party: Sequence[Combatant],
    tuning: Optional[XpTuning] = None,
) -> XpAwardResult:
    """
    Compute and grant the end-of-battle XP award.

    Args:
        tracker: The battle's tracker (consumed; a second award is refused)
        party: Party in slot order (xp, level and stats mutated)
        tuning: Balance constants, default the tracker's

    Returns:
        XpAwardResult with the pool, per-actor awards and the breakdown
    """
    tuning = tuning or tracker.tuning
    if tracker.awarded:
        logger.warning("Battle XP already awarded for this tracker; ignoring")
        return XpAwardResult()
    tracker.awarded = True

    pool, breakdown = compute_pool(tracker, party, tuning)
    result = XpAwardResult(pool=pool, breakdown=breakdown)

    size = len(party)
    if size == 0:
        return result

    living = [i for i, member in enumerate(party) if member.is_alive]
    recipients = living or list(range(size))
    base_each = breakdown.base_pool / len(recipients)
    shares = contribution_shares(tracker, size, tuning)
    share_floor = (pool / size) * tuning.min_share_of_equal

    for index, actor in enumerate(party):
        award = ActorAward(
            index=index,
            name=actor.name,
            downed=actor.is_downed,
            base_share=base_each if index in recipients else 0.0,
            contribution_share=breakdown.contribution_pool * shares[index],
            action_xp=tracker.action_xp_by_actor[index] if index < len(tracker.action_xp_by_actor) else 0.0,
            hp_before=actor.hp,
            max_hp_before=actor.max_hp,
            level_before=actor.level,
            xp_before=actor.xp,
            atk_before=actor.atk,
            def_before=actor.defense,
            crit_chance_before=actor.crit_chance,
            evasion_before=actor.evasion,
        )

        pool_part = max(award.base_share + award.contribution_share, share_floor)
        award.full_award = pool_part + award.action_xp
        if award.downed:
            award.xp_gained = math.floor(award.full_award * tuning.downed_multiplier)
        else:
            award.xp_gained = round_half_up(award.full_award)

        report = grant_xp(actor, award.xp_gained, party_slot(index, size), tuning)
        award.levels_gained = report.levels_gained

        award.hp_after = actor.hp
        award.max_hp_after = actor.max_hp
        award.level_after = actor.level
        award.xp_after = actor.xp
        award.atk_after = actor.atk
        award.def_after = actor.defense
        award.crit_chance_after = actor.crit_chance
        award.evasion_after = actor.evasion
        result.awards.append(award)

    logger.info(
        f"Battle XP pool {pool} (threat {breakdown.threat:.1f}, "
        f"pacing {breakdown.pacing_bonus:.2f}, survival {breakdown.survival_multiplier:.2f}) "
        f"split across {size} actor(s)"
    )
    return result

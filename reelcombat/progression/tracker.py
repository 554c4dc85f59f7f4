"""
Battle XP tracker - accrues performance metrics during one battle.

Created at battle start, fed by the orchestrator after every notable
player or enemy action, and consumed once by award_battle_xp().

Usage:
    tracker = BattleXpTracker.start(enemy, party_size=len(party))
    tracker.record(XpEventKind.ATTACK, actor_index=0, damage=42)
    tracker.record_enemy_turn(turn_result, party)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, TYPE_CHECKING

from engine.core.numeric import non_negative
from reelcombat.battle.events import BattleEventType
from reelcombat.components.combatant import Combatant
from reelcombat.config import XpTuning, DEFAULT_XP_TUNING

if TYPE_CHECKING:
    from reelcombat.battle.enemy_turn import EnemyTurnResult

logger = logging.getLogger(__name__)


class XpEventKind(Enum):
    """Accrual hooks. Values are the wire names."""
    ATTACK = "attack"
    DEFEND = "defend"
    ITEM = "item"
    SPECIAL = "special"
    ENEMY_HIT = "enemyHit"
    ENEMY_PHASE_START = "enemyPhaseStart"


CONTRIBUTION_CATEGORIES = ("damage", "heal", "mitigation", "utility")


@dataclass
class ActorMetrics:
    """Per-actor contribution buckets."""
    damage: float = 0.0
    heal: float = 0.0
    mitigation: float = 0.0
    utility: float = 0.0
    actions: int = 0
    low_impact_actions: int = 0
    high_impact_actions: int = 0

    def category(self, name: str) -> float:
        return getattr(self, name)


@dataclass(frozen=True)
class EnemySnapshot:
    """Enemy stats frozen at battle start, for the threat score."""
    max_hp: int = 1
    attack: int = 1
    level: int = 1

    @classmethod
    def from_combatant(cls, enemy: Combatant) -> EnemySnapshot:
        return cls(max_hp=enemy.max_hp, attack=enemy.atk, level=enemy.level)


class BattleXpTracker:
    """
    Running accumulator for one battle.

    Attributes:
        enemy: Enemy snapshot
        metrics: ActorMetrics per party slot
        action_xp_by_actor: Private per-actor action XP ledger
        action_xp_budget: Pool-wide XP accrued from actions
        enemy_phases: Enemy turns started
        incoming_damage / absorbed_shield: Damage the party took / soaked
        low_hp_moments / ally_down_moments: Adversity counters
        stall_chain / stall_penalty_units: Anti-spam state
    """

    def __init__(self, enemy: EnemySnapshot, party_size: int, tuning: Optional[XpTuning] = None):
        self.tuning = tuning or DEFAULT_XP_TUNING
        self.enemy = enemy
        size = max(0, int(party_size))
        self.metrics: list[ActorMetrics] = [ActorMetrics() for _ in range(size)]
        self.action_xp_by_actor: list[float] = [0.0] * size
        self.action_xp_budget = 0.0

        self.enemy_phases = 0
        self.incoming_damage = 0.0
        self.absorbed_shield = 0.0
        self.low_hp_moments = 0
        self.ally_down_moments = 0

        self.stall_chain = 0
        self.stall_pattern: Optional[str] = None
        self.stall_penalty_units = 0.0

        self.awarded = False

    @classmethod
    def start(cls, enemy: Combatant, party_size: int, tuning: Optional[XpTuning] = None) -> BattleXpTracker:
        """Create a tracker at battle start."""
        return cls(EnemySnapshot.from_combatant(enemy), party_size, tuning)

    @property
    def party_size(self) -> int:
        return len(self.metrics)

    def _slot(self, actor_index: Optional[int]) -> Optional[int]:
        if actor_index is None or not 0 <= actor_index < len(self.metrics):
            logger.warning(f"XP accrual without a valid actor index: {actor_index}")
            return None
        return actor_index

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def record(self, kind: XpEventKind | str, actor_index: Optional[int] = None, **payload: Any) -> float:
        """
        Record one accrual event.

        Args:
            kind: XpEventKind or its wire name
            actor_index: Acting party slot (target slot for enemyHit)
            **payload: Keyword arguments for the matching record_* method

        Returns:
            The action value credited (0 for enemy-side events)
        """
        try:
            kind = XpEventKind(kind)
        except ValueError:
            logger.warning(f"Unknown XP event kind: {kind}")
            return 0.0

        if kind is XpEventKind.ENEMY_PHASE_START:
            self.record_enemy_phase_start()
            return 0.0
        if kind is XpEventKind.ENEMY_HIT:
            self.record_enemy_hit(actor_index, **payload)
            return 0.0

        handlers = {
            XpEventKind.ATTACK: self.record_attack,
            XpEventKind.DEFEND: self.record_defend,
            XpEventKind.ITEM: self.record_item,
            XpEventKind.SPECIAL: self.record_special,
        }
        return handlers[kind](actor_index, **payload)

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def record_attack(self, actor_index: int, damage: float = 0, *, input_held: bool = False) -> float:
        """Basic attack: weighted damage plus a flat bonus for big hits."""
        t = self.tuning
        dealt = non_negative(damage)
        value = dealt * t.attack_damage_weight
        if dealt >= t.big_hit_threshold:
            value += t.big_hit_bonus
        return self._record_action(actor_index, "attack", {"damage": value}, input_held)

    def record_defend(self, actor_index: int, *, input_held: bool = False) -> float:
        """Defend: flat mitigation value."""
        return self._record_action(
            actor_index, "defend", {"mitigation": self.tuning.defend_value}, input_held
        )

    def record_item(
        self,
        actor_index: int,
        item_id: str = "item",
        heal: float = 0,
        shield: float = 0,
        *,
        team: bool = False,
        heal_power: float = 1.0,
        input_held: bool = False,
    ) -> float:
        """Item use: weighted heal and shield, plus a team-heal bonus."""
        t = self.tuning
        healed = non_negative(heal)
        heal_value = healed * t.item_heal_weight * non_negative(heal_power, 1.0)
        if team and healed >= t.team_heal_threshold:
            heal_value += t.team_heal_bonus
        buckets = {
            "heal": heal_value,
            "mitigation": non_negative(shield) * t.item_shield_weight,
        }
        return self._record_action(actor_index, f"item:{item_id}", buckets, input_held)

    def record_special(
        self,
        actor_index: int,
        special_id: str = "special",
        damage: float = 0,
        heal: float = 0,
        shield: float = 0,
        flags: Sequence[str] = (),
        *,
        heal_power: float = 1.0,
        utility_power: float = 1.0,
        input_held: bool = False,
    ) -> float:
        """
        Special: composite of damage, heal, shield and utility flags.

        Each known flag (revive, cleanse, buff, debuff, control) adds a
        fixed utility amount. The whole composite scales with the actor's
        utility power.
        """
        t = self.tuning
        utility = 0.0
        for flag in flags or ():
            amount = t.utility_flag_values.get(flag)
            if amount is None:
                logger.debug(f"Ignoring unknown special flag: {flag}")
                continue
            utility += amount

        power = non_negative(utility_power, 1.0)
        buckets = {
            "damage": non_negative(damage) * t.special_damage_weight * power,
            "heal": non_negative(heal) * t.special_heal_weight * non_negative(heal_power, 1.0) * power,
            "mitigation": non_negative(shield) * t.special_shield_weight * power,
            "utility": utility * power,
        }
        return self._record_action(actor_index, f"special:{special_id}", buckets, input_held)

    def _record_action(
        self,
        actor_index: Optional[int],
        pattern: str,
        buckets: dict[str, float],
        input_held: bool,
    ) -> float:
        slot = self._slot(actor_index)
        if slot is None:
            return 0.0

        t = self.tuning
        metrics = self.metrics[slot]
        value = 0.0
        for category, amount in buckets.items():
            setattr(metrics, category, metrics.category(category) + amount)
            value += amount
        metrics.actions += 1

        held = t.input_held_mult if input_held else 1.0
        self.action_xp_by_actor[slot] += value * t.action_xp_multiplier * held
        self.action_xp_budget += value * t.budget_share * held

        if value < t.low_impact_value:
            metrics.low_impact_actions += 1
            self._advance_stall(pattern)
        else:
            if value >= t.high_impact_value:
                metrics.high_impact_actions += 1
            self.stall_chain = 0
            self.stall_pattern = None

        return value

    def _advance_stall(self, pattern: str) -> None:
        """Low-impact repeats of one pattern escalate a pool-wide penalty."""
        if pattern != self.stall_pattern:
            self.stall_chain = 0
            self.stall_pattern = pattern
            return

        self.stall_chain += 1
        self.stall_penalty_units += self.stall_chain
        self.action_xp_budget = max(0.0, self.action_xp_budget - self.tuning.stall_step * self.stall_chain)
        logger.debug(f"Stall chain {self.stall_chain} on {pattern}")

    # ------------------------------------------------------------------
    # Enemy side
    # ------------------------------------------------------------------

    def record_enemy_phase_start(self) -> None:
        self.enemy_phases += 1

    def record_enemy_hit(
        self,
        target_index: Optional[int],
        damage: float = 0,
        absorbed_shield: float = 0,
        *,
        hp_after: Optional[int] = None,
        max_hp: Optional[int] = None,
        killed: bool = False,
        guarded: bool = False,
    ) -> None:
        """An enemy hit landed on a party member."""
        absorbed = non_negative(absorbed_shield)
        self.incoming_damage += non_negative(damage)
        self.absorbed_shield += absorbed

        if killed:
            self.ally_down_moments += 1
        elif hp_after is not None and max_hp and 0 < hp_after <= max_hp * self.tuning.low_hp_ratio:
            self.low_hp_moments += 1

        slot = self._slot(target_index) if target_index is not None else None
        if slot is not None:
            credit = absorbed + (self.tuning.defend_mitigation_credit if guarded else 0.0)
            self.metrics[slot].mitigation += credit

    def record_enemy_turn(self, result: EnemyTurnResult, party: Sequence[Combatant]) -> None:
        """Accrue every enemyAttackHit of a planned enemy turn."""
        for event in result.events:
            if event.type is not BattleEventType.ENEMY_ATTACK_HIT:
                continue
            index = event.get("target_index")
            max_hp = party[index].max_hp if index is not None and 0 <= index < len(party) else None
            self.record_enemy_hit(
                index,
                event.get("damage", 0),
                event.get("absorbed_shield", 0),
                hp_after=event.get("new_hp"),
                max_hp=max_hp,
                killed=event.get("killed", False),
                guarded=event.get("guarded", False),
            )

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    @property
    def low_impact_total(self) -> int:
        return sum(m.low_impact_actions for m in self.metrics)

    @property
    def high_impact_total(self) -> int:
        return sum(m.high_impact_actions for m in self.metrics)

    def category_total(self, name: str) -> float:
        return sum(m.category(name) for m in self.metrics)

"""
Battle session - thin orchestration over the combat core.

Wires player actions, enemy turns and status ticks to the XP tracker
and forwards every event to an optional EventBus. Screen flow, input
and narration stay with the host.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Optional, Sequence

from engine.core.events import Event, EventBus
from engine.core.rng import RNG
from reelcombat.battle.damage import AttackOutcome, compute_player_attack
from reelcombat.battle.enemy_turn import EnemyTurnResult, apply_enemy_event, run_enemy_turn
from reelcombat.battle.moves import MoveRegistry
from reelcombat.battle.status_ticker import tick_enemy_statuses, tick_party_statuses
from reelcombat.components.combatant import Combatant, alive_indices
from reelcombat.config import CombatTuning, XpTuning, DEFAULT_COMBAT_TUNING
from reelcombat.progression.allocator import XpAwardResult, award_battle_xp
from reelcombat.progression.tracker import BattleXpTracker

logger = logging.getLogger(__name__)


class BattleState(Enum):
    """State of the battle."""
    ACTIVE = auto()
    VICTORY = auto()
    DEFEAT = auto()
    ENDED = auto()


class BattleSession:
    """
    One battle between a party and a single enemy.

    Usage:
        session = BattleSession(party, enemy, rng=RNG(seed=3), event_bus=bus)
        session.player_attack(0)
        session.end_party_turn()
        session.enemy_turn()
        ...
        rewards = session.finish()
    """

    def __init__(
        self,
        party: Sequence[Combatant],
        enemy: Combatant,
        rng: Optional[RNG] = None,
        event_bus: Optional[EventBus] = None,
        moves: Optional[MoveRegistry] = None,
        combat_tuning: Optional[CombatTuning] = None,
        xp_tuning: Optional[XpTuning] = None,
    ):
        self.party = list(party)
        self.enemy = enemy
        self.rng = rng or RNG()
        self.events = event_bus
        self.moves = moves
        self.combat_tuning = combat_tuning or DEFAULT_COMBAT_TUNING
        self.tracker = BattleXpTracker.start(enemy, len(self.party), xp_tuning)

        self.state = BattleState.ACTIVE
        self._rewards: Optional[XpAwardResult] = None
        self._on_battle_end: Optional[Callable[[XpAwardResult], None]] = None

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def _actor(self, actor_index: int) -> Optional[Combatant]:
        if not 0 <= actor_index < len(self.party):
            logger.warning(f"No party member in slot {actor_index}")
            return None
        actor = self.party[actor_index]
        if actor.is_downed:
            logger.warning(f"{actor.name} is down and can't act")
            return None
        return actor

    def player_attack(self, actor_index: int, input_held: bool = False) -> Optional[AttackOutcome]:
        """Basic attack on the enemy. Returns None if the actor can't act."""
        actor = self._actor(actor_index)
        if actor is None or self.state is not BattleState.ACTIVE:
            return None

        outcome = compute_player_attack(actor, self.enemy, self.rng, self.combat_tuning)
        self.tracker.record_attack(actor_index, outcome.damage, input_held=input_held)
        self._check_battle_end()
        return outcome

    def player_defend(self, actor_index: int, input_held: bool = False) -> bool:
        """Raise the actor's guard until the next enemy hit lands on them."""
        actor = self._actor(actor_index)
        if actor is None or self.state is not BattleState.ACTIVE:
            return False

        actor.is_defending = True
        self.tracker.record_defend(actor_index, input_held=input_held)
        return True

    def record_item(
        self,
        actor_index: int,
        item_id: str,
        heal: float = 0,
        shield: float = 0,
        team: bool = False,
        input_held: bool = False,
    ) -> float:
        """Accrue an item whose effects the host already applied."""
        actor = self._actor(actor_index)
        if actor is None:
            return 0.0
        return self.tracker.record_item(
            actor_index, item_id, heal, shield,
            team=team, heal_power=actor.heal_power, input_held=input_held,
        )

    def record_special(
        self,
        actor_index: int,
        special_id: str,
        damage: float = 0,
        heal: float = 0,
        shield: float = 0,
        flags: Sequence[str] = (),
        input_held: bool = False,
    ) -> float:
        """Accrue a special whose effects the host already applied."""
        actor = self._actor(actor_index)
        if actor is None:
            return 0.0
        value = self.tracker.record_special(
            actor_index, special_id, damage, heal, shield, flags,
            heal_power=actor.heal_power, utility_power=actor.utility_power, input_held=input_held,
        )
        self._check_battle_end()
        return value

    def end_party_turn(self) -> list[Event]:
        """Tick every party member's statuses."""
        events = tick_party_statuses(self.party)
        self._publish(events)
        return events

    # ------------------------------------------------------------------
    # Enemy phase
    # ------------------------------------------------------------------

    def enemy_turn(self, funny_disrupt: bool = False, defer_apply: bool = False) -> EnemyTurnResult:
        """
        Run the enemy phase: plan the turn, accrue hits, tick enemy statuses.

        With defer_apply the hits are published but not committed; call
        apply_event() for each one as it is shown.
        """
        if self.state is not BattleState.ACTIVE:
            return EnemyTurnResult(party_defeated=self.state is BattleState.DEFEAT)

        self.tracker.record_enemy_phase_start()
        result = run_enemy_turn(
            self.enemy,
            self.party,
            self.rng,
            funny_disrupt=funny_disrupt,
            defer_apply=defer_apply,
            moves=self.moves,
            tuning=self.combat_tuning,
        )
        self.tracker.record_enemy_turn(result, self.party)
        result.events.extend(tick_enemy_statuses(self.enemy))

        self._publish(result.events)
        if not defer_apply:
            self._check_battle_end()
        return result

    def apply_event(self, event: Event) -> bool:
        """Commit one deferred enemy hit."""
        applied = apply_enemy_event(event, self.party)
        if applied:
            self._check_battle_end()
        return applied

    # ------------------------------------------------------------------
    # Ending
    # ------------------------------------------------------------------

    def _check_battle_end(self) -> bool:
        """Check if battle should end."""
        if self.state is not BattleState.ACTIVE:
            return True
        if self.enemy.is_downed:
            self.state = BattleState.VICTORY
            return True
        if not alive_indices(self.party):
            self.state = BattleState.DEFEAT
            return True
        return False

    def finish(self) -> XpAwardResult:
        """Award battle XP. Only the first call grants anything."""
        if self._rewards is not None:
            return self._rewards

        self._rewards = award_battle_xp(self.tracker, self.party)
        if self.state is BattleState.ACTIVE:
            self._check_battle_end()
        logger.info(f"Battle ended ({self.state.name}); pool {self._rewards.pool}")
        self.state = BattleState.ENDED

        if self._on_battle_end:
            self._on_battle_end(self._rewards)
        return self._rewards

    def on_battle_end(self, callback: Callable[[XpAwardResult], None]) -> None:
        """Set callback for battle end."""
        self._on_battle_end = callback

    @property
    def is_over(self) -> bool:
        return self.state is not BattleState.ACTIVE

    def _publish(self, events: list[Event]) -> None:
        if self.events is not None:
            self.events.publish_all(events)

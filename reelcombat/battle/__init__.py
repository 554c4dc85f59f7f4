"""
Battle - stat modifiers, damage, status ticking and the enemy turn.

BattleSession lives in reelcombat.battle.session and is exported from
the reelcombat package, since it also depends on progression.
"""

from reelcombat.battle.events import BattleEventType, battle_event
from reelcombat.battle.moves import Move, MoveRegistry, DEFAULT_MOVES, FALLBACK_MOVE
from reelcombat.battle.modifiers import (
    EffectiveStats,
    effective_attack,
    effective_defense,
    effective_crit_chance,
    effective_crit_damage_bonus,
    damage_reduction,
    resolve_effective_stats,
)
from reelcombat.battle.damage import (
    AttackOutcome,
    compute_player_attack,
    compute_enemy_attack,
    apply_damage,
    apply_heal,
)
from reelcombat.battle.status_ticker import (
    tick_actor_statuses,
    tick_enemy_statuses,
    tick_party_statuses,
)
from reelcombat.battle.enemy_turn import (
    EnemyTurnResult,
    run_enemy_turn,
    apply_enemy_event,
    pick_target_index,
    roll_action_count,
)

__all__ = [
    # Events
    "BattleEventType",
    "battle_event",
    # Moves
    "Move",
    "MoveRegistry",
    "DEFAULT_MOVES",
    "FALLBACK_MOVE",
    # Modifiers
    "EffectiveStats",
    "effective_attack",
    "effective_defense",
    "effective_crit_chance",
    "effective_crit_damage_bonus",
    "damage_reduction",
    "resolve_effective_stats",
    # Damage
    "AttackOutcome",
    "compute_player_attack",
    "compute_enemy_attack",
    "apply_damage",
    "apply_heal",
    # Status ticker
    "tick_actor_statuses",
    "tick_enemy_statuses",
    "tick_party_statuses",
    # Enemy turn
    "EnemyTurnResult",
    "run_enemy_turn",
    "apply_enemy_event",
    "pick_target_index",
    "roll_action_count",
]

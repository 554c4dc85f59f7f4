"""
Reel Combat - turn-based combat and progression core.

Provides:
- Components (Combatant, statuses, confusion state)
- Battle (stat modifiers, damage, status ticking, enemy turns)
- Progression (XP tracking, award, leveling)
- BattleSession (orchestration glue for a host game loop)

Quick Start:
    from engine import RNG
    from reelcombat import BattleSession, Combatant, create_enemy

    party = [Combatant(name="Hero", hp=120, max_hp=120, atk=14, defense=8)]
    session = BattleSession(party, create_enemy({"name": "Film Bro"}), rng=RNG(seed=1))
"""

from reelcombat.config import CombatTuning, XpTuning, load_tuning
from reelcombat.components import (
    Combatant,
    Side,
    ActionRange,
    StatusKind,
    StatusEntry,
    StatusBook,
    ConfusionState,
    create_enemy,
    alive_members,
    first_alive_index,
)
from reelcombat.battle import (
    BattleEventType,
    AttackOutcome,
    EnemyTurnResult,
    Move,
    MoveRegistry,
    compute_player_attack,
    compute_enemy_attack,
    apply_damage,
    apply_heal,
    tick_actor_statuses,
    tick_enemy_statuses,
    tick_party_statuses,
    run_enemy_turn,
    apply_enemy_event,
)
from reelcombat.progression import (
    BattleXpTracker,
    XpEventKind,
    XpAwardResult,
    award_battle_xp,
    grant_xp,
    xp_to_next_level,
)
from reelcombat.battle.session import BattleSession, BattleState
from reelcombat.content import load_content

__all__ = [
    # Config
    "CombatTuning",
    "XpTuning",
    "load_tuning",
    # Components
    "Combatant",
    "Side",
    "ActionRange",
    "StatusKind",
    "StatusEntry",
    "StatusBook",
    "ConfusionState",
    "create_enemy",
    "alive_members",
    "first_alive_index",
    # Battle
    "BattleEventType",
    "AttackOutcome",
    "EnemyTurnResult",
    "Move",
    "MoveRegistry",
    "compute_player_attack",
    "compute_enemy_attack",
    "apply_damage",
    "apply_heal",
    "tick_actor_statuses",
    "tick_enemy_statuses",
    "tick_party_statuses",
    "run_enemy_turn",
    "apply_enemy_event",
    # Progression
    "BattleXpTracker",
    "XpEventKind",
    "XpAwardResult",
    "award_battle_xp",
    "grant_xp",
    "xp_to_next_level",
    # Session
    "BattleSession",
    "BattleState",
    # Content
    "load_content",
]

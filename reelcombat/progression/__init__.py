"""
Progression - battle XP accrual, award and leveling.
"""

from reelcombat.progression.tracker import (
    BattleXpTracker,
    XpEventKind,
    ActorMetrics,
    EnemySnapshot,
)
from reelcombat.progression.leveling import (
    PartySlot,
    party_slot,
    xp_to_next_level,
    grant_xp,
    LevelUpReport,
)
from reelcombat.progression.allocator import (
    award_battle_xp,
    compute_pool,
    compute_threat,
    XpAwardResult,
    ActorAward,
    XpBreakdown,
)

__all__ = [
    # Tracker
    "BattleXpTracker",
    "XpEventKind",
    "ActorMetrics",
    "EnemySnapshot",
    # Leveling
    "PartySlot",
    "party_slot",
    "xp_to_next_level",
    "grant_xp",
    "LevelUpReport",
    # Award
    "award_battle_xp",
    "compute_pool",
    "compute_threat",
    "XpAwardResult",
    "ActorAward",
    "XpBreakdown",
]

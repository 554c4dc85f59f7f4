"""
Battle event types and builders.

Every atomic outcome of a combat step is reported as an Event whose type
is a BattleEventType. Narration subscribes to these; the combat core
never formats text.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from engine.core.events import Event


class BattleEventType(Enum):
    """Event kinds. Values are the wire names used by narration."""
    ENEMY_ATTACK_HIT = "enemyAttackHit"
    ENEMY_MISS_DAZED = "enemyMissDazed"
    ENEMY_STUNNED_SKIP = "enemyStunnedSkip"
    ENEMY_MOVE_UNKNOWN = "enemyMoveUnknown"
    ENEMY_CONFUSED_MISFIRE = "enemyConfusedMisfire"
    ENEMY_CONFUSED_SELF_HEAL = "enemyConfusedSelfHeal"
    ENEMY_CONFUSED_WILD_MISS = "enemyConfusedWildMiss"
    ENEMY_CONFUSED_LOW_ACCURACY_HIT = "enemyConfusedLowAccuracyHit"
    ENEMY_CONFUSION_CLEARED = "enemyConfusionCleared"
    TURN_DISRUPTED_FUNNY = "turnDisruptedFunny"
    TARGET_KNOCKED_OUT = "targetKnockedOut"
    STATUS_EXPIRED = "statusExpired"


def battle_event(event_type: BattleEventType, **data: Any) -> Event:
    """Build one battle event."""
    return Event(type=event_type, data=data)


def enemy_attack_hit(
    *,
    enemy_name: str,
    move_id: str,
    move_name: str,
    target_index: int,
    target_name: str,
    damage: int,
    absorbed_shield: int,
    is_crit: bool,
    is_mortal: bool,
    guarded: bool,
    killed: bool,
    new_hp: int,
    new_shield: int,
    consume_defend: bool,
    low_accuracy: bool = False,
) -> Event:
    """
    Build an enemyAttackHit event.

    Carries everything apply_enemy_event needs to commit the hit later
    (target_index, new_hp, new_shield, consume_defend).
    """
    return battle_event(
        BattleEventType.ENEMY_ATTACK_HIT,
        enemy_name=enemy_name,
        move_id=move_id,
        move_name=move_name,
        target_index=target_index,
        target_name=target_name,
        damage=damage,
        absorbed_shield=absorbed_shield,
        is_crit=is_crit,
        is_mortal=is_mortal,
        guarded=guarded,
        killed=killed,
        new_hp=new_hp,
        new_shield=new_shield,
        consume_defend=consume_defend,
        low_accuracy=low_accuracy,
    )


def status_expired(side: str, status: str, actor_index: Optional[int] = None, name: str = "") -> Event:
    return battle_event(
        BattleEventType.STATUS_EXPIRED,
        side=side,
        status=status,
        actor_index=actor_index,
        name=name,
    )

"""
Combatant component - a party actor or an enemy instance in battle.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional, Sequence, Union

from pydantic import Field, field_validator, model_validator

from engine.core.component import Component, register_component
from engine.core.numeric import clamp, finite_or, non_negative
from reelcombat.components.status import ConfusionState, StatusBook, StatusKind
from reelcombat.config import DEFAULT_COMBAT_TUNING

logger = logging.getLogger(__name__)


class Side(Enum):
    """Which side of the battle a combatant fights on."""
    PARTY = "party"
    ENEMY = "enemy"


@register_component
class ActionRange(Component):
    """An inclusive {min, max} actions-per-turn range, sampled once per turn."""
    min: int = 1
    max: int = 1

    @field_validator("min", "max", mode="before")
    @classmethod
    def _sanitize_bound(cls, value):
        return max(1, int(finite_or(value, 1)))


@register_component
class Combatant(Component):
    """
    A participant in battle.

    Constructed once per battle from static content plus persisted
    progress, mutated in place during the battle, and read back by the
    host at the end.

    Attributes:
        hp / max_hp: Current and maximum HP (0 means downed/defeated)
        atk / defense: Base attack and defense before status layers
        crit_chance: 0..0.95
        evasion: 0..0.6
        temp_shield: Damage buffer consumed before HP, not time-limited
        is_defending: Reduces the next enemy hit, consumed by that hit
        crit_damage_bonus: Added to the 1.5x crit multiplier
        defend_damage_mult: Incoming damage multiplier while defending
        heal_power / utility_power: Per-actor XP accrual traits
        statuses: Timed effects
        confusion: Confusion odds while confused (enemy only)
        move_ids: Enemy move pool
        action_count: Explicit actions per turn (enemy only, wins over
            actions_per_turn)
        actions_per_turn: Number or {min, max} range (enemy only)
    """
    name: str = ""
    side: Side = Side.PARTY

    hp: int = 1
    max_hp: int = 1
    atk: int = 1
    defense: int = 0
    crit_chance: float = 0.05
    evasion: float = 0.0
    temp_shield: int = 0
    is_defending: bool = False

    level: int = 1
    xp: int = 0

    crit_damage_bonus: float = 0.0
    defend_damage_mult: float = 0.5
    heal_power: float = 1.0
    utility_power: float = 1.0

    statuses: StatusBook = Field(default_factory=StatusBook)
    confusion: Optional[ConfusionState] = None

    move_ids: list[str] = Field(default_factory=list)
    action_count: Optional[int] = None
    actions_per_turn: Optional[Union[int, ActionRange]] = None

    @field_validator("hp", "temp_shield", "defense", "xp", mode="before")
    @classmethod
    def _sanitize_non_negative_int(cls, value):
        return int(non_negative(value))

    @field_validator("max_hp", "atk", "level", mode="before")
    @classmethod
    def _sanitize_positive_int(cls, value):
        return max(1, int(finite_or(value, 1)))

    @field_validator("crit_chance", mode="before")
    @classmethod
    def _clamp_crit(cls, value):
        return clamp(finite_or(value), 0.0, DEFAULT_COMBAT_TUNING.max_crit_chance)

    @field_validator("evasion", mode="before")
    @classmethod
    def _clamp_evasion(cls, value):
        return clamp(finite_or(value), 0.0, DEFAULT_COMBAT_TUNING.max_evasion)

    @field_validator("crit_damage_bonus", mode="before")
    @classmethod
    def _sanitize_crit_damage(cls, value):
        return non_negative(value)

    @field_validator("defend_damage_mult", mode="before")
    @classmethod
    def _sanitize_defend_mult(cls, value):
        return finite_or(value, 0.5)

    @field_validator("heal_power", "utility_power", mode="before")
    @classmethod
    def _sanitize_power(cls, value):
        return non_negative(value, 1.0)

    @field_validator("action_count", mode="before")
    @classmethod
    def _sanitize_action_count(cls, value):
        if value is None:
            return None
        number = finite_or(value, 0)
        return int(number) if number >= 1 else None

    @field_validator("actions_per_turn", mode="before")
    @classmethod
    def _sanitize_actions_per_turn(cls, value):
        if value is None or isinstance(value, (ActionRange, dict)):
            return value
        number = finite_or(value, 0)
        return int(number) if number >= 1 else None

    @model_validator(mode="after")
    def _clamp_hp_to_max(self) -> Combatant:
        """Keep hp within max_hp on construction and on every assignment."""
        if self.hp > self.max_hp:
            # Written through __dict__; a plain assignment would re-enter this validator
            self.__dict__["hp"] = self.max_hp
        return self

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def is_downed(self) -> bool:
        return self.hp <= 0

    @property
    def is_confused(self) -> bool:
        return self.statuses.is_active(StatusKind.CONFUSED)

    # ------------------------------------------------------------------
    # Clamped setters
    # ------------------------------------------------------------------

    def set_hp(self, value: float) -> int:
        """Set HP clamped to [0, max_hp]. Returns the new HP."""
        self.hp = int(clamp(finite_or(value, self.hp), 0, self.max_hp))
        return self.hp

    def apply_damage(self, amount: float) -> int:
        """Lose HP (no shield or reduction). Returns actual HP lost."""
        before = self.hp
        self.set_hp(before - non_negative(amount))
        return before - self.hp

    def apply_heal(self, amount: float) -> int:
        """Gain HP up to max. Returns actual HP restored."""
        before = self.hp
        self.set_hp(before + non_negative(amount))
        return self.hp - before

    # ------------------------------------------------------------------
    # Confusion
    # ------------------------------------------------------------------

    def confuse(self, proc_chance: float = 0.35, clear_chance: float = 0.15) -> None:
        """Apply open-ended confusion (cleared only by in-combat rolls)."""
        self.statuses.apply(StatusKind.CONFUSED, magnitude=1.0, turns=None)
        if self.confusion is None:
            self.confusion = ConfusionState(proc_chance=proc_chance, clear_chance=clear_chance)

    def clear_confusion(self) -> None:
        self.statuses.remove(StatusKind.CONFUSED)
        self.confusion = None


def alive_members(party: Sequence[Combatant]) -> list[Combatant]:
    """Return all living party members."""
    return [member for member in party if member is not None and member.is_alive]


def alive_indices(party: Sequence[Combatant]) -> list[int]:
    """Indices of living party members, in party order."""
    return [i for i, member in enumerate(party) if member is not None and member.is_alive]


def first_alive_index(party: Sequence[Combatant]) -> int:
    """Index of the first living member, or -1 if everyone is down."""
    living = alive_indices(party)
    return living[0] if living else -1


# Enemy spawning

MISSING_ENEMY_TEMPLATE: dict[str, Any] = {
    "id": "missing_enemy",
    "name": "Missing Enemy",
    "maxHP": 30,
    "attack": 6,
    "defense": 4,
}

ENEMY_LEVEL_SCALING = 0.35
DEFAULT_ENEMY_CRIT_CHANCE = 0.06
DEFAULT_ENEMY_ACTIONS = 2


def enemy_level_multiplier(level: int = 1) -> float:
    """Stat multiplier for an enemy spawned at a given level."""
    lvl = max(1, int(finite_or(level, 1)))
    return 1 + (lvl - 1) * ENEMY_LEVEL_SCALING


def create_enemy(template: Optional[dict[str, Any]], level: int = 1) -> Combatant:
    """
    Create an enemy Combatant from a content template.

    Args:
        template: Enemy record (maxHP/maxHp/hp, attack, defense, moves,
            actionsPerTurn, actionCount, critChance, name). None spawns
            the "Missing Enemy" fallback.
        level: Spawn level; scales HP/attack/defense

    Returns:
        A full-HP enemy combatant
    """
    if not template:
        logger.warning("No enemy template given; spawning fallback enemy")
        template = MISSING_ENEMY_TEMPLATE

    base_hp = finite_or(template.get("maxHP", template.get("maxHp", template.get("hp"))), 30) or 30
    base_atk = finite_or(template.get("attack"), 6) or 6
    base_def = finite_or(template.get("defense"), 4) or 4

    mult = enemy_level_multiplier(level)
    max_hp = max(1, round(base_hp * mult))

    apt = template.get("actionsPerTurn", DEFAULT_ENEMY_ACTIONS)
    if isinstance(apt, dict):
        apt = ActionRange(min=apt.get("min", 1), max=apt.get("max", apt.get("min", 1)))

    # Older templates store a move count here instead of a move pool
    moves = template.get("moves")
    if isinstance(moves, (list, tuple)) and moves:
        move_ids = [str(move_id) for move_id in moves]
    else:
        move_ids = ["basic_attack"]

    return Combatant(
        name=str(template.get("name") or template.get("id") or "Enemy"),
        side=Side.ENEMY,
        hp=max_hp,
        max_hp=max_hp,
        atk=max(1, round(base_atk * mult)),
        defense=max(1, round(base_def * mult)),
        crit_chance=template.get("critChance", DEFAULT_ENEMY_CRIT_CHANCE),
        evasion=template.get("evasion", 0.0),
        level=max(1, int(finite_or(level, 1))),
        move_ids=move_ids,
        action_count=template.get("actionCount"),
        actions_per_turn=apt,
    )

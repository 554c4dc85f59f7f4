"""
Status components - timed buffs, debuffs and enemy conditions.

Each status is one StatusEntry (magnitude + turns remaining) keyed by a
closed StatusKind, so a magnitude can never drift away from its duration.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from engine.core.component import Component, register_component
from engine.core.numeric import finite_or, non_negative


class StatusKind(Enum):
    """Status families. Values are the wire keys used in events."""
    # Paired magnitude/turns families
    ATK_BUFF = "atkBuff"
    ATK_DEBUFF = "atkDebuff"
    DEF_BUFF = "defBuff"
    DEF_DEBUFF = "defDebuff"
    CRIT_CHANCE_BUFF = "critChanceBuff"
    CRIT_DAMAGE_BUFF = "critDamageBuff"
    DAMAGE_REDUCTION = "damageReduction"
    NEXT_HIT_VULN = "nextHitVuln"
    # Enemy-only conditions
    STUN = "stun"
    DAZED = "dazed"
    CONFUSED = "confused"
    ACTION_LIMIT = "actionLimit"

    @property
    def is_enemy_condition(self) -> bool:
        return self in ENEMY_CONDITIONS


ENEMY_CONDITIONS = frozenset({
    StatusKind.STUN,
    StatusKind.DAZED,
    StatusKind.CONFUSED,
    StatusKind.ACTION_LIMIT,
})


@register_component
class StatusEntry(Component):
    """
    One timed effect.

    Attributes:
        magnitude: Fraction (0.25 = 25%), or the action cap for ACTION_LIMIT
        turns: Turns remaining. None marks an always-on effect with no
            duration; 0 or less means expired.
    """
    magnitude: float = 0.0
    turns: Optional[int] = None

    @field_validator("magnitude", mode="before")
    @classmethod
    def _sanitize_magnitude(cls, value):
        return non_negative(value)

    @field_validator("turns", mode="before")
    @classmethod
    def _sanitize_turns(cls, value):
        if value is None:
            return None
        return max(0, int(finite_or(value, 0)))

    @property
    def is_active(self) -> bool:
        """Active while turns are absent (always-on) or positive."""
        return self.turns is None or self.turns > 0

    @property
    def active_magnitude(self) -> float:
        """Magnitude if active, else 0."""
        return self.magnitude if self.is_active else 0.0


@register_component
class StatusBook(Component):
    """All statuses currently recorded on a combatant."""
    entries: dict[StatusKind, StatusEntry] = Field(default_factory=dict)

    def get(self, kind: StatusKind) -> StatusEntry | None:
        return self.entries.get(kind)

    def is_active(self, kind: StatusKind) -> bool:
        entry = self.entries.get(kind)
        return entry is not None and entry.is_active

    def magnitude(self, kind: StatusKind) -> float:
        """Active magnitude for a kind, 0 when missing or expired."""
        entry = self.entries.get(kind)
        return entry.active_magnitude if entry else 0.0

    def turns(self, kind: StatusKind) -> int:
        """Turns remaining, 0 when missing, expired or always-on."""
        entry = self.entries.get(kind)
        if entry is None or entry.turns is None:
            return 0
        return entry.turns

    def apply(self, kind: StatusKind, magnitude: float = 0.0, turns: Optional[int] = 1) -> StatusEntry:
        """
        Apply or refresh a status.

        A refresh keeps the stronger magnitude and the longer duration;
        an always-on entry stays always-on.
        """
        incoming = StatusEntry(magnitude=magnitude, turns=turns)
        existing = self.entries.get(kind)
        if existing is None or not existing.is_active:
            self.entries[kind] = incoming
            return incoming

        existing.magnitude = max(existing.magnitude, incoming.magnitude)
        if existing.turns is not None:
            existing.turns = None if incoming.turns is None else max(existing.turns, incoming.turns)
        return existing

    def clear(self, kind: StatusKind) -> None:
        """Zero a status but keep its entry."""
        entry = self.entries.get(kind)
        if entry is not None:
            entry.magnitude = 0.0
            entry.turns = 0

    def remove(self, kind: StatusKind) -> None:
        """Delete a status entirely."""
        self.entries.pop(kind, None)


@register_component
class ConfusionState(Component):
    """
    Escalating odds for the confusion sub-machine.

    Attributes:
        proc_chance: Chance per action that confusion alters behavior
        clear_chance: Chance, after a triggered action, that confusion ends
        has_triggered: Whether confusion has visibly altered behavior yet
    """
    proc_chance: float = 0.35
    clear_chance: float = 0.15
    has_triggered: bool = False

    @field_validator("proc_chance", "clear_chance", mode="before")
    @classmethod
    def _sanitize_chance(cls, value):
        return min(1.0, non_negative(value))

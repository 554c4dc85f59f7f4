"""
Balance tuning.

Every numeric constant the combat core uses lives here so designers can
swap values without touching mechanisms. Two groups:

- CombatTuning: damage, status and enemy-turn constants
- XpTuning: accrual, XP pool, allocation and leveling constants

Both load from a JSON file shaped {"combat": {...}, "xp": {...}}.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

from engine.core.numeric import finite_or

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombatTuning:
    """Damage, status and enemy-turn constants."""
    # Damage resolver
    player_attack_mult: float = 2.2
    enemy_attack_mult: float = 1.2
    base_crit_mult: float = 1.5
    enemy_crit_mult: float = 1.5
    enemy_min_damage_ratio: float = 0.15
    defend_mult_min: float = 0.2
    defend_mult_max: float = 0.9

    # Stat modifier clamps
    max_buff_pct: float = 5.0
    max_debuff_pct: float = 0.95
    max_crit_chance: float = 0.95
    max_evasion: float = 0.6
    max_damage_reduction: float = 0.95

    # Enemy turn
    min_actions: int = 1
    max_actions: int = 12
    dazed_miss_chance: float = 0.25
    dazed_damage_mult: float = 0.75
    mortal_hp_ratio: float = 0.25

    # Confusion sub-machine
    confusion_proc_chance: float = 0.35
    confusion_clear_chance: float = 0.15
    confusion_proc_ramp: float = 0.15
    confusion_clear_ramp: float = 0.15
    confusion_chance_cap: float = 0.95
    confusion_self_heal_ratio: float = 0.10
    confusion_extra_miss_chance: float = 0.5

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CombatTuning:
        return _from_dict(cls, data)


@dataclass(frozen=True)
class XpTuning:
    """XP accrual, pool and leveling constants."""
    # Accrual: per-action values
    attack_damage_weight: float = 0.30
    big_hit_threshold: float = 50.0
    big_hit_bonus: float = 4.0
    defend_value: float = 1.5
    defend_mitigation_credit: float = 10.0
    item_heal_weight: float = 0.25
    item_shield_weight: float = 0.20
    team_heal_threshold: float = 40.0
    team_heal_bonus: float = 5.0
    special_damage_weight: float = 0.30
    special_heal_weight: float = 0.25
    special_shield_weight: float = 0.20
    utility_flag_values: dict[str, float] = field(default_factory=lambda: {
        "revive": 12.0,
        "cleanse": 6.0,
        "buff": 5.0,
        "debuff": 5.0,
        "control": 8.0,
    })

    # Accrual: ledgers
    action_xp_multiplier: float = 0.35
    input_held_mult: float = 0.5
    budget_share: float = 0.5

    # Stall chain
    low_impact_value: float = 2.0
    high_impact_value: float = 12.0
    stall_step: float = 1.0

    # Enemy-side accrual
    low_hp_ratio: float = 0.25

    # Pool
    threat_level_weight: float = 6.0
    threat_attack_weight: float = 1.5
    threat_hp_weight: float = 0.2
    target_turns_base: float = 2.0
    target_turns_per_threat: float = 1 / 20
    target_turns_min: int = 3
    target_turns_max: int = 12
    pacing_neutral_band: float = 0.25
    pacing_slope: float = 0.2
    pacing_min: float = 0.85
    pacing_max: float = 1.15
    adversity_damage_weight: float = 0.10
    adversity_low_hp_weight: float = 0.02
    adversity_ally_down_weight: float = 0.04
    endurance_weight: float = 0.05
    survival_bonus_max: float = 0.25
    stall_unit_weight: float = 0.01
    stall_ratio_weight: float = 0.02
    stall_penalty_max: float = 0.20

    # Allocation
    base_share: float = 0.40
    contribution_weights: dict[str, float] = field(default_factory=lambda: {
        "damage": 0.30,
        "heal": 0.20,
        "mitigation": 0.20,
        "utility": 0.30,
    })
    min_share_of_equal: float = 0.15
    downed_multiplier: float = 0.5

    # Leveling
    level_xp_base: int = 50
    level_xp_linear: int = 25
    level_xp_quadratic: int = 10
    hp_growth: float = 0.08
    atk_growth: float = 0.06
    def_growth: float = 0.05
    front_slot_crit_chance: float = 0.005
    front_slot_crit_damage: float = 0.02
    back_slot_evasion: float = 0.005
    max_level_ups: int = 50

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> XpTuning:
        return _from_dict(cls, data)


DEFAULT_COMBAT_TUNING = CombatTuning()
DEFAULT_XP_TUNING = XpTuning()


def _from_dict(cls: type, data: dict[str, Any]) -> Any:
    """Build a tuning object, ignoring unknown keys and bad values."""
    defaults = cls()
    known = {f.name: f for f in fields(cls)}
    overrides: dict[str, Any] = {}

    for key, value in (data or {}).items():
        if key not in known:
            logger.warning(f"Unknown {cls.__name__} key ignored: {key}")
            continue
        current = getattr(defaults, key)
        if isinstance(current, dict):
            if isinstance(value, dict):
                merged = dict(current)
                for sub_key, sub_value in value.items():
                    merged[sub_key] = finite_or(sub_value, current.get(sub_key, 0.0))
                overrides[key] = merged
            else:
                logger.warning(f"{cls.__name__}.{key} expects an object; keeping default")
        elif isinstance(current, int) and not isinstance(current, bool):
            overrides[key] = int(finite_or(value, current))
        else:
            overrides[key] = finite_or(value, current)

    return replace(defaults, **overrides)


def load_tuning(path: Optional[Path | str]) -> tuple[CombatTuning, XpTuning]:
    """
    Load tuning from a JSON file.

    Args:
        path: File path; None or a missing file yields the defaults

    Returns:
        (CombatTuning, XpTuning)
    """
    if path is None:
        return DEFAULT_COMBAT_TUNING, DEFAULT_XP_TUNING

    file_path = Path(path)
    if not file_path.exists():
        logger.warning(f"Tuning file not found: {file_path}; using defaults")
        return DEFAULT_COMBAT_TUNING, DEFAULT_XP_TUNING

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load tuning {file_path}: {e}; using defaults")
        return DEFAULT_COMBAT_TUNING, DEFAULT_XP_TUNING

    return (
        CombatTuning.from_dict(data.get("combat", {})),
        XpTuning.from_dict(data.get("xp", {})),
    )

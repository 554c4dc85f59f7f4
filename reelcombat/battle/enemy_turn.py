"""
Enemy turn planner.

Plans and simulates an enemy's whole turn (1..N actions) against cloned
copies of the enemy and party, so every decision is made against one
consistent snapshot. Party hits are committed per action, or left for
the caller to commit one event at a time with apply_enemy_event().

Turn order:
    party check -> funny disruption -> stun -> action count ->
    per action: target, move, confusion, daze, resolve
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Sequence

from engine.core.events import Event
from engine.core.numeric import clamp, round_half_up
from engine.core.rng import RNG
from reelcombat.battle.damage import compute_enemy_attack
from reelcombat.battle.events import BattleEventType, battle_event, enemy_attack_hit
from reelcombat.battle.modifiers import effective_attack
from reelcombat.battle.moves import DEFAULT_MOVE_REGISTRY, Move, MoveRegistry
from reelcombat.components.combatant import ActionRange, Combatant, alive_indices
from reelcombat.components.status import ConfusionState, StatusKind
from reelcombat.config import CombatTuning, DEFAULT_COMBAT_TUNING

logger = logging.getLogger(__name__)

# Fields written back from the simulated enemy at the end of a turn
ENEMY_COMMIT_FIELDS = ("hp", "atk", "statuses", "confusion")
# Fields written back onto a party member for each hit
TARGET_COMMIT_FIELDS = ("hp", "temp_shield", "is_defending")


@dataclass
class EnemyTurnResult:
    """Ordered events for the turn, and whether the party fell."""
    events: list[Event] = field(default_factory=list)
    party_defeated: bool = False


class ConfusionOutcome(Enum):
    """What the confusion sub-machine left of an action."""
    PROCEED = auto()
    LOW_ACCURACY = auto()
    LOST = auto()


def pick_target_index(party: Sequence[Combatant], rng: RNG) -> int:
    """Uniformly pick a living party slot. Returns -1 if none are alive."""
    living = alive_indices(party)
    if not living:
        return -1
    return rng.choice(living)


def roll_action_count(enemy: Combatant, rng: RNG, tuning: Optional[CombatTuning] = None) -> int:
    """
    Actions the enemy takes this turn.

    An explicit action_count wins; otherwise actions_per_turn as a number
    or an inclusive range sampled once. Clamped to the tuning bounds, then
    capped by an active action limiter.
    """
    tuning = tuning or DEFAULT_COMBAT_TUNING

    spec = enemy.actions_per_turn
    if enemy.action_count is not None:
        count = enemy.action_count
    elif isinstance(spec, ActionRange):
        count = rng.randint(min(spec.min, spec.max), max(spec.min, spec.max))
    elif isinstance(spec, int):
        count = spec
    else:
        count = 1

    count = int(clamp(count, tuning.min_actions, tuning.max_actions))

    if enemy.statuses.is_active(StatusKind.ACTION_LIMIT):
        limit = max(1, int(enemy.statuses.magnitude(StatusKind.ACTION_LIMIT)))
        count = min(count, limit)
    return count


def _ramp(current: float, step: float, cap: float) -> float:
    # Never decreases, even if current already sits above the cap
    return max(current, min(cap, current + step))


def run_confusion(enemy: Combatant, rng: RNG, events: list[Event], tuning: CombatTuning) -> ConfusionOutcome:
    """
    One step of the confusion sub-machine for a confused enemy.

    A proc miss is invisible. On a proc the action branches three ways
    (misfire, self-heal, low-accuracy), both odds ramp up, then a clear
    roll may end the confusion.
    """
    state = enemy.confusion
    if state is None:
        state = ConfusionState(
            proc_chance=tuning.confusion_proc_chance,
            clear_chance=tuning.confusion_clear_chance,
        )
        enemy.confusion = state

    if not rng.chance(state.proc_chance):
        return ConfusionOutcome.PROCEED

    first_trigger = not state.has_triggered
    state.has_triggered = True

    branch = rng.randint(0, 2)
    if branch == 0:
        outcome = ConfusionOutcome.LOST
        events.append(battle_event(
            BattleEventType.ENEMY_CONFUSED_MISFIRE,
            enemy_name=enemy.name,
            first_trigger=first_trigger,
        ))
    elif branch == 1:
        outcome = ConfusionOutcome.LOST
        amount = max(1, round_half_up(enemy.max_hp * tuning.confusion_self_heal_ratio))
        healed = enemy.apply_heal(amount)
        events.append(battle_event(
            BattleEventType.ENEMY_CONFUSED_SELF_HEAL,
            enemy_name=enemy.name,
            healed=healed,
            new_hp=enemy.hp,
            first_trigger=first_trigger,
        ))
    elif rng.chance(tuning.confusion_extra_miss_chance):
        outcome = ConfusionOutcome.LOST
        events.append(battle_event(
            BattleEventType.ENEMY_CONFUSED_WILD_MISS,
            enemy_name=enemy.name,
            first_trigger=first_trigger,
        ))
    else:
        outcome = ConfusionOutcome.LOW_ACCURACY
        events.append(battle_event(
            BattleEventType.ENEMY_CONFUSED_LOW_ACCURACY_HIT,
            enemy_name=enemy.name,
            first_trigger=first_trigger,
        ))

    state.proc_chance = _ramp(state.proc_chance, tuning.confusion_proc_ramp, tuning.confusion_chance_cap)
    state.clear_chance = _ramp(state.clear_chance, tuning.confusion_clear_ramp, tuning.confusion_chance_cap)
    logger.debug(
        f"{enemy.name} confusion {outcome.name} "
        f"(proc={state.proc_chance:.2f}, clear={state.clear_chance:.2f})"
    )

    if rng.chance(state.clear_chance):
        enemy.clear_confusion()
        events.append(battle_event(BattleEventType.ENEMY_CONFUSION_CLEARED, enemy_name=enemy.name))

    return outcome


def _resolve_attack(
    enemy: Combatant,
    party: list[Combatant],
    target_index: int,
    move: Move,
    low_accuracy: bool,
    rng: RNG,
    tuning: CombatTuning,
) -> list[Event]:
    target = party[target_index]
    # Re-derived from base stats every action so debuffs never compound
    power = effective_attack(enemy, tuning) * move.power_multiplier
    hit = compute_enemy_attack(enemy, target, rng, tuning, attack_power=power)
    target.is_defending = False

    is_mortal = (
        hit.damage > 0
        and not hit.killed
        and target.hp <= target.max_hp * tuning.mortal_hp_ratio
    )

    events = [enemy_attack_hit(
        enemy_name=enemy.name,
        move_id=move.id,
        move_name=move.name,
        target_index=target_index,
        target_name=target.name,
        damage=hit.damage,
        absorbed_shield=hit.absorbed_shield,
        is_crit=hit.is_crit,
        is_mortal=is_mortal,
        guarded=hit.guarded,
        killed=hit.killed,
        new_hp=hit.new_hp,
        new_shield=hit.new_shield,
        consume_defend=hit.guarded,
        low_accuracy=low_accuracy,
    )]
    if hit.killed:
        events.append(battle_event(
            BattleEventType.TARGET_KNOCKED_OUT,
            target_index=target_index,
            target_name=target.name,
        ))
    return events


def run_enemy_turn(
    enemy: Combatant,
    party: Sequence[Combatant],
    rng: Optional[RNG] = None,
    *,
    funny_disrupt: bool = False,
    defer_apply: bool = False,
    moves: Optional[MoveRegistry] = None,
    tuning: Optional[CombatTuning] = None,
) -> EnemyTurnResult:
    """
    Plan and simulate one enemy turn.

    Args:
        enemy: The acting enemy (hp, statuses and confusion written back)
        party: Party in slot order
        rng: Random source for every decision this turn
        funny_disrupt: Replace the whole turn with a disruption event
        defer_apply: Leave party hits uncommitted; the caller applies each
            enemyAttackHit with apply_enemy_event()
        moves: Move registry for the enemy's move pool
        tuning: Balance constants

    Returns:
        EnemyTurnResult with events in the order they happened
    """
    rng = rng or RNG()
    tuning = tuning or DEFAULT_COMBAT_TUNING
    if moves is None:
        moves = DEFAULT_MOVE_REGISTRY
    result = EnemyTurnResult()

    if not alive_indices(party):
        result.party_defeated = True
        return result

    if funny_disrupt:
        result.events.append(battle_event(BattleEventType.TURN_DISRUPTED_FUNNY, enemy_name=enemy.name))
        return result

    stun_turns = enemy.statuses.turns(StatusKind.STUN)
    if stun_turns > 0:
        result.events.append(battle_event(
            BattleEventType.ENEMY_STUNNED_SKIP,
            enemy_name=enemy.name,
            turns_left=stun_turns,
        ))
        return result

    action_count = roll_action_count(enemy, rng, tuning)
    logger.debug(f"{enemy.name} takes {action_count} action(s)")

    sim_enemy = enemy.clone()
    sim_party = [member.clone() for member in party]

    for _ in range(action_count):
        target_index = pick_target_index(sim_party, rng)
        if target_index < 0:
            result.party_defeated = True
            break

        move = moves.pick(sim_enemy.move_ids, rng)
        if not move.is_attack:
            result.events.append(battle_event(
                BattleEventType.ENEMY_MOVE_UNKNOWN,
                enemy_name=sim_enemy.name,
                move_id=move.id,
                move_kind=move.kind,
            ))
            continue

        low_accuracy = False
        if sim_enemy.is_confused:
            outcome = run_confusion(sim_enemy, rng, result.events, tuning)
            if outcome is ConfusionOutcome.LOST:
                continue
            low_accuracy = outcome is ConfusionOutcome.LOW_ACCURACY

        if sim_enemy.statuses.is_active(StatusKind.DAZED) and rng.chance(tuning.dazed_miss_chance):
            result.events.append(battle_event(
                BattleEventType.ENEMY_MISS_DAZED,
                enemy_name=sim_enemy.name,
                move_id=move.id,
                target_index=target_index,
            ))
            continue

        hit_events = _resolve_attack(sim_enemy, sim_party, target_index, move, low_accuracy, rng, tuning)
        result.events.extend(hit_events)

        if not defer_apply:
            party[target_index].commit(sim_party[target_index], TARGET_COMMIT_FIELDS)

    enemy.commit(sim_enemy, ENEMY_COMMIT_FIELDS)

    if not alive_indices(sim_party):
        result.party_defeated = True
    return result


def apply_enemy_event(event: Event, party: Sequence[Combatant]) -> bool:
    """
    Commit one deferred enemyAttackHit onto the real party.

    Returns:
        True if the event changed a party member
    """
    if event.type is not BattleEventType.ENEMY_ATTACK_HIT:
        return False

    index = event.get("target_index", -1)
    if not 0 <= index < len(party):
        logger.warning(f"enemyAttackHit for missing party slot {index}")
        return False

    target = party[index]
    target.set_hp(event.get("new_hp", target.hp))
    target.temp_shield = event.get("new_shield", target.temp_shield)
    if event.get("consume_defend"):
        target.is_defending = False
    return True

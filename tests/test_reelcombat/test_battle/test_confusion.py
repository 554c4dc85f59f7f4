import pytest
from reelcombat.components import StatusKind
from reelcombat.config import DEFAULT_COMBAT_TUNING
from reelcombat.battle.events import BattleEventType
from reelcombat.battle.enemy_turn import ConfusionOutcome, run_confusion, run_enemy_turn

# Draw order for one confused action against a single hero:
#   target, move, proc, branch, [extra miss], clear

@pytest.fixture
def confused_enemy(make_enemy):
    def _make(**overrides):
        enemy = make_enemy(**overrides)
        enemy.confuse()
        return enemy
    return _make

def types_of(result):
    return [event.type for event in result.events]

def test_misfire_loses_action_and_ramps(confused_enemy, make_hero, scripted_rng):
    enemy = confused_enemy()
    party = [make_hero()]

    result = run_enemy_turn(enemy, party, scripted_rng([0.0, 0.0, 0.0, 0.0, 0.99]))

    assert types_of(result) == [BattleEventType.ENEMY_CONFUSED_MISFIRE]
    assert result.events[0]["first_trigger"]
    assert party[0].hp == 100
    assert enemy.is_confused
    assert enemy.confusion.proc_chance == pytest.approx(0.5)
    assert enemy.confusion.clear_chance == pytest.approx(0.30)
    assert enemy.confusion.has_triggered

def test_self_heal(confused_enemy, make_hero, scripted_rng):
    enemy = confused_enemy(hp=100, max_hp=200)
    party = [make_hero()]

    result = run_enemy_turn(enemy, party, scripted_rng([0.0, 0.0, 0.0, 0.5, 0.99]))

    assert types_of(result) == [BattleEventType.ENEMY_CONFUSED_SELF_HEAL]
    assert result.events[0]["healed"] == 20
    assert result.events[0]["new_hp"] == 120
    assert enemy.hp == 120
    assert party[0].hp == 100

def test_self_heal_capped_at_max(confused_enemy, make_hero, scripted_rng):
    enemy = confused_enemy(hp=195, max_hp=200)

    result = run_enemy_turn(enemy, [make_hero()], scripted_rng([0.0, 0.0, 0.0, 0.5, 0.99]))

    assert result.events[0]["healed"] == 5
    assert enemy.hp == 200

def test_wild_miss(confused_enemy, make_hero, scripted_rng):
    enemy = confused_enemy()
    party = [make_hero()]

    result = run_enemy_turn(enemy, party, scripted_rng([0.0, 0.0, 0.0, 0.9, 0.1, 0.99]))

    assert types_of(result) == [BattleEventType.ENEMY_CONFUSED_WILD_MISS]
    assert party[0].hp == 100

def test_low_accuracy_hit_still_lands(confused_enemy, make_hero, scripted_rng):
    enemy = confused_enemy()
    party = [make_hero(defense=10)]

    result = run_enemy_turn(enemy, party, scripted_rng([0.0, 0.0, 0.0, 0.9, 0.9, 0.99]))

    assert types_of(result) == [
        BattleEventType.ENEMY_CONFUSED_LOW_ACCURACY_HIT,
        BattleEventType.ENEMY_ATTACK_HIT,
    ]
    hit = result.events[1]
    assert hit["low_accuracy"]
    assert hit["damage"] == 14
    assert party[0].hp == 86

def test_proc_miss_is_invisible(confused_enemy, make_hero, scripted_rng):
    enemy = confused_enemy()

    result = run_enemy_turn(enemy, [make_hero()], scripted_rng([0.0, 0.0, 0.99]))

    assert types_of(result) == [BattleEventType.ENEMY_ATTACK_HIT]
    assert not result.events[0]["low_accuracy"]
    assert not enemy.confusion.has_triggered
    assert enemy.confusion.proc_chance == pytest.approx(0.35)

def test_confusion_clears(confused_enemy, make_hero, scripted_rng):
    enemy = confused_enemy()

    result = run_enemy_turn(enemy, [make_hero()], scripted_rng([0.0, 0.0, 0.0, 0.0, 0.0]))

    assert types_of(result) == [
        BattleEventType.ENEMY_CONFUSED_MISFIRE,
        BattleEventType.ENEMY_CONFUSION_CLEARED,
    ]
    assert not enemy.is_confused
    assert enemy.confusion is None
    assert enemy.statuses.get(StatusKind.CONFUSED) is None

def test_first_trigger_only_once(confused_enemy, make_hero, scripted_rng):
    enemy = confused_enemy(actions_per_turn=2)
    draws = [0.0, 0.0, 0.0, 0.0, 0.99] * 2

    result = run_enemy_turn(enemy, [make_hero()], scripted_rng(draws))

    assert [e["first_trigger"] for e in result.events] == [True, False]

def test_odds_never_decrease(make_enemy, scripted_rng):
    enemy = make_enemy()
    enemy.confuse(proc_chance=1.0, clear_chance=0.0)
    rng = scripted_rng([0.0, 0.99])
    events = []

    outcome = run_confusion(enemy, rng, events, DEFAULT_COMBAT_TUNING)

    assert outcome is ConfusionOutcome.LOST
    # A certain proc draws nothing, so only branch and clear were rolled
    assert rng.calls == 2
    assert enemy.confusion.proc_chance == 1.0
    assert enemy.confusion.clear_chance == pytest.approx(0.15)

def test_missing_state_created_from_tuning(make_enemy, scripted_rng):
    enemy = make_enemy()
    enemy.statuses.apply(StatusKind.CONFUSED, 1.0, None)
    assert enemy.confusion is None

    outcome = run_confusion(enemy, scripted_rng([0.99]), [], DEFAULT_COMBAT_TUNING)

    assert outcome is ConfusionOutcome.PROCEED
    assert enemy.confusion.proc_chance == pytest.approx(0.35)
    assert enemy.confusion.clear_chance == pytest.approx(0.15)

import pytest
from engine.core.rng import RNG
from reelcombat.battle.enemy_turn import run_enemy_turn
from reelcombat.progression.tracker import BattleXpTracker, EnemySnapshot, XpEventKind

@pytest.fixture
def tracker():
    return BattleXpTracker(EnemySnapshot(max_hp=200, attack=20, level=1), party_size=2)

def test_start_snapshots_enemy(make_enemy):
    tracker = BattleXpTracker.start(make_enemy(level=3), party_size=4)

    assert tracker.enemy == EnemySnapshot(max_hp=200, attack=20, level=3)
    assert tracker.party_size == 4
    assert tracker.action_xp_by_actor == [0.0] * 4

def test_attack_accrual(tracker):
    value = tracker.record_attack(0, 60)

    # 60 * 0.3 + big hit bonus
    assert value == pytest.approx(22)
    assert tracker.metrics[0].damage == pytest.approx(22)
    assert tracker.action_xp_by_actor[0] == pytest.approx(7.7)
    assert tracker.action_xp_budget == pytest.approx(11)
    assert tracker.metrics[0].high_impact_actions == 1

def test_input_held_halves_ledgers(tracker):
    tracker.record_attack(1, 60, input_held=True)

    assert tracker.metrics[1].damage == pytest.approx(22)
    assert tracker.action_xp_by_actor[1] == pytest.approx(3.85)
    assert tracker.action_xp_budget == pytest.approx(5.5)

def test_repeated_defend_escalates_stall(tracker):
    tracker.record_defend(0)
    assert tracker.stall_chain == 0
    assert tracker.action_xp_budget == pytest.approx(0.75)

    tracker.record_defend(0)
    assert tracker.stall_chain == 1
    assert tracker.stall_penalty_units == 1
    assert tracker.action_xp_budget == pytest.approx(0.5)

    tracker.record_defend(0)
    assert tracker.stall_chain == 2
    assert tracker.stall_penalty_units == 3
    assert tracker.action_xp_budget == 0.0
    assert tracker.metrics[0].low_impact_actions == 3

def test_pattern_change_resets_chain(tracker):
    tracker.record_defend(0)
    tracker.record_defend(0)
    tracker.record_item(0, "popcorn")

    assert tracker.stall_chain == 0
    assert tracker.stall_pattern == "item:popcorn"
    assert tracker.stall_penalty_units == 1

def test_impactful_action_resets_chain(tracker):
    tracker.record_defend(1)
    tracker.record_defend(1)
    tracker.record_attack(1, 20)

    assert tracker.stall_chain == 0
    assert tracker.stall_pattern is None

def test_team_item(tracker):
    value = tracker.record_item(0, "soda", heal=40, shield=10, team=True)

    # 40 * 0.25 + 5 team bonus, 10 * 0.2 shield
    assert value == pytest.approx(17)
    assert tracker.metrics[0].heal == pytest.approx(15)
    assert tracker.metrics[0].mitigation == pytest.approx(2)

def test_heal_power_scales_item(tracker):
    assert tracker.record_item(0, "soda", heal=20, heal_power=2.0) == pytest.approx(10)

def test_special_composite(tracker):
    value = tracker.record_special(
        1, "director_cut", damage=10, flags=["revive", "buff", "bogus"], utility_power=2.0
    )

    # (10 * 0.3 + 12 + 5) * 2
    assert value == pytest.approx(40)
    assert tracker.metrics[1].damage == pytest.approx(6)
    assert tracker.metrics[1].utility == pytest.approx(34)

def test_record_dispatch_by_name(tracker):
    assert tracker.record("attack", actor_index=0, damage=10) == pytest.approx(3)
    assert tracker.record(XpEventKind.DEFEND, actor_index=1) == pytest.approx(1.5)

    tracker.record("enemyPhaseStart")
    assert tracker.enemy_phases == 1

def test_unknown_kind_ignored(tracker):
    assert tracker.record("dance", actor_index=0) == 0.0
    assert tracker.metrics[0].actions == 0

def test_missing_actor_index(tracker):
    assert tracker.record_attack(None, 50) == 0.0
    assert tracker.action_xp_budget == 0.0

def test_out_of_range_slot_ignored(tracker):
    assert tracker.record_defend(4) == 0.0
    assert tracker.record_attack(-1, 50) == 0.0

    assert tracker.party_size == 2
    assert len(tracker.action_xp_by_actor) == 2
    assert tracker.action_xp_budget == 0.0

def test_enemy_hit_counters(tracker):
    tracker.record_enemy_hit(0, 14, 5, hp_after=20, max_hp=100, guarded=True)
    tracker.record_enemy_hit(1, 30, hp_after=0, max_hp=100, killed=True)
    tracker.record_enemy_hit(1, 10, hp_after=90, max_hp=100)

    assert tracker.incoming_damage == 54
    assert tracker.absorbed_shield == 5
    assert tracker.low_hp_moments == 1
    assert tracker.ally_down_moments == 1
    # absorbed shield plus defend credit
    assert tracker.metrics[0].mitigation == pytest.approx(15)

def test_record_enemy_turn(make_enemy, party):
    tracker = BattleXpTracker.start(make_enemy(), len(party))
    result = run_enemy_turn(make_enemy(actions_per_turn=3), party, RNG(seed=5))

    tracker.record_enemy_turn(result, party)

    assert tracker.incoming_damage == sum(100 - member.hp for member in party)

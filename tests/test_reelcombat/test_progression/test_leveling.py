import pytest
from reelcombat.config import XpTuning
from reelcombat.progression.leveling import PartySlot, grant_xp, party_slot, xp_to_next_level

def test_xp_curve():
    assert xp_to_next_level(1) == 85
    assert xp_to_next_level(2) == 140
    assert xp_to_next_level(0) == 85

def test_level_up_growth(make_hero):
    hero = make_hero(hp=40, max_hp=100, atk=10, defense=10)

    report = grant_xp(hero, 85, PartySlot.FRONT)

    assert report.levels_gained == 1
    assert (report.level_before, report.level_after) == (1, 2)
    assert hero.xp == 0
    assert hero.max_hp == 108
    assert hero.hp == 108
    assert hero.atk == 11
    assert hero.defense == 11
    assert hero.crit_chance == pytest.approx(0.005)
    assert hero.crit_damage_bonus == pytest.approx(0.02)
    assert hero.evasion == 0.0

def test_back_slot_gains_evasion(make_hero):
    hero = make_hero()
    grant_xp(hero, 85, PartySlot.BACK)

    assert hero.evasion == pytest.approx(0.005)
    assert hero.crit_chance == 0.0

def test_downed_actor_stays_down(make_hero):
    hero = make_hero(hp=0)

    grant_xp(hero, 85)

    assert hero.level == 2
    assert hero.max_hp == 108
    assert hero.hp == 0

def test_multiple_levels(make_hero):
    hero = make_hero()
    report = grant_xp(hero, 85 + 140 + 7)

    assert report.levels_gained == 2
    assert hero.level == 3
    assert hero.xp == 7

def test_partial_xp(make_hero):
    hero = make_hero(xp=80)
    report = grant_xp(hero, 4)

    assert report.levels_gained == 0
    assert hero.xp == 84

@pytest.mark.parametrize("amount", [-10, float("nan"), None])
def test_bad_amounts_add_nothing(make_hero, amount):
    hero = make_hero(xp=5)
    report = grant_xp(hero, amount)

    assert report.xp_granted == 0
    assert hero.xp == 5

def test_loop_guard(make_hero):
    tuning = XpTuning(level_xp_base=0, level_xp_linear=0, level_xp_quadratic=0, max_level_ups=3)
    hero = make_hero()

    report = grant_xp(hero, 0, tuning=tuning)

    assert report.levels_gained == 3
    assert report.hit_loop_guard
    assert hero.level == 4

def test_party_slot():
    assert party_slot(0, 4) is PartySlot.FRONT
    assert party_slot(1, 4) is PartySlot.MIDDLE
    assert party_slot(3, 4) is PartySlot.BACK
    assert party_slot(0, 1) is PartySlot.FRONT

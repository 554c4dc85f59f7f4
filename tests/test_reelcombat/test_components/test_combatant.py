import pytest
from reelcombat.components import (
    Combatant,
    Side,
    ActionRange,
    StatusKind,
    create_enemy,
    alive_members,
    first_alive_index,
)

def test_combatant_clamps_on_construction():
    c = Combatant(name="Hero", hp=500, max_hp=100, crit_chance=2.0, evasion=0.9)

    assert c.hp == 100
    assert c.crit_chance == 0.95
    assert c.evasion == 0.6

def test_combatant_sanitizes_bad_numbers():
    c = Combatant(hp=float("nan"), max_hp=100, atk=None, defense=-4, crit_chance=-1, evasion="x")

    assert c.hp == 0
    assert c.atk == 1
    assert c.defense == 0
    assert c.crit_chance == 0.0
    assert c.evasion == 0.0

def test_combatant_clamps_on_assignment(make_hero):
    hero = make_hero()
    hero.crit_chance = 5
    hero.evasion = 3

    assert hero.crit_chance == 0.95
    assert hero.evasion == 0.6

def test_hp_clamped_on_assignment(make_hero):
    hero = make_hero()

    hero.hp = 500
    assert hero.hp == 100

    hero.max_hp = 40
    assert hero.hp == 40
    assert hero.max_hp == 40

def test_hp_helpers(make_hero):
    hero = make_hero(hp=50)

    assert hero.apply_heal(80) == 50
    assert hero.hp == 100
    assert hero.apply_damage(150) == 100
    assert hero.hp == 0
    assert hero.is_downed
    assert not hero.is_alive
    assert hero.set_hp(40) == 40

def test_clone_and_commit(make_hero):
    hero = make_hero()
    hero.statuses.apply(StatusKind.ATK_BUFF, 0.2, 2)
    sim = hero.clone()
    sim.apply_damage(30)
    sim.statuses.apply(StatusKind.DEF_BUFF, 0.5, 1)

    assert hero.hp == 100
    assert not hero.statuses.is_active(StatusKind.DEF_BUFF)

    hero.commit(sim, ["hp"])
    assert hero.hp == 70
    assert not hero.statuses.is_active(StatusKind.DEF_BUFF)

def test_confuse_and_clear(make_enemy):
    enemy = make_enemy()
    enemy.confuse()

    assert enemy.is_confused
    assert enemy.confusion.proc_chance == pytest.approx(0.35)
    assert enemy.statuses.turns(StatusKind.CONFUSED) == 0

    enemy.clear_confusion()
    assert not enemy.is_confused
    assert enemy.confusion is None

def test_actions_per_turn_accepts_range():
    c = Combatant(side=Side.ENEMY, actions_per_turn={"min": 2, "max": 4})

    assert isinstance(c.actions_per_turn, ActionRange)
    assert c.actions_per_turn.max == 4

def test_action_count_sanitized():
    assert Combatant(action_count=0).action_count is None
    assert Combatant(action_count=3.7).action_count == 3

def test_create_enemy_scales_with_level():
    enemy = create_enemy({"name": "Film Bro", "maxHP": 100, "attack": 10, "defense": 4}, level=3)

    # 1 + (3 - 1) * 0.35 = 1.7
    assert enemy.max_hp == 170
    assert enemy.hp == 170
    assert enemy.atk == 17
    assert enemy.defense == 7
    assert enemy.level == 3
    assert enemy.side is Side.ENEMY
    assert enemy.crit_chance == pytest.approx(0.06)
    assert enemy.move_ids == ["basic_attack"]
    assert enemy.actions_per_turn == 2

def test_create_enemy_accepts_hp_spellings():
    assert create_enemy({"name": "A", "maxHp": 80}).max_hp == 80
    assert create_enemy({"name": "B", "hp": 60}).max_hp == 60

def test_create_enemy_fallback():
    enemy = create_enemy(None)

    assert enemy.name == "Missing Enemy"
    assert (enemy.max_hp, enemy.atk, enemy.defense) == (30, 6, 4)

def test_create_enemy_with_move_count_and_range():
    enemy = create_enemy({"name": "Brain Rot", "moves": 3, "actionsPerTurn": {"min": 1, "max": 3}})

    assert enemy.move_ids == ["basic_attack"]
    assert enemy.actions_per_turn.min == 1
    assert enemy.actions_per_turn.max == 3

def test_alive_helpers(make_hero):
    party = [make_hero(hp=0), make_hero(), make_hero()]

    assert len(alive_members(party)) == 2
    assert first_alive_index(party) == 1
    assert first_alive_index([make_hero(hp=0)]) == -1

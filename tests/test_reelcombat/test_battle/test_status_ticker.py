import pytest
from reelcombat.components import StatusKind
from reelcombat.battle.events import BattleEventType
from reelcombat.battle.status_ticker import (
    tick_actor_statuses,
    tick_enemy_statuses,
    tick_party_statuses,
)

def test_status_expires_after_last_turn(make_hero):
    hero = make_hero(name="Rocky")
    hero.statuses.apply(StatusKind.ATK_BUFF, 0.3, 1)

    events = tick_actor_statuses(hero, actor_index=2)

    assert hero.statuses.turns(StatusKind.ATK_BUFF) == 0
    assert hero.statuses.get(StatusKind.ATK_BUFF).magnitude == 0.0
    assert len(events) == 1
    assert events[0].type is BattleEventType.STATUS_EXPIRED
    assert events[0].to_dict() == {
        "type": "statusExpired",
        "side": "party",
        "status": "atkBuff",
        "actor_index": 2,
        "name": "Rocky",
    }

def test_ticking_expired_status_is_noop(make_hero):
    hero = make_hero()
    hero.statuses.apply(StatusKind.DEF_BUFF, 0.3, 1)
    tick_actor_statuses(hero)

    assert tick_actor_statuses(hero) == []
    assert hero.statuses.turns(StatusKind.DEF_BUFF) == 0

def test_status_counts_down(make_hero):
    hero = make_hero()
    hero.statuses.apply(StatusKind.DAMAGE_REDUCTION, 0.4, 3)

    assert tick_actor_statuses(hero) == []
    assert hero.statuses.turns(StatusKind.DAMAGE_REDUCTION) == 2
    assert hero.statuses.magnitude(StatusKind.DAMAGE_REDUCTION) == pytest.approx(0.4)

def test_always_on_status_not_ticked(make_hero):
    hero = make_hero()
    hero.statuses.apply(StatusKind.CRIT_CHANCE_BUFF, 0.1, None)

    assert tick_actor_statuses(hero) == []
    assert hero.statuses.is_active(StatusKind.CRIT_CHANCE_BUFF)

def test_shield_not_time_limited(make_hero):
    hero = make_hero(temp_shield=25)
    for _ in range(5):
        tick_actor_statuses(hero)

    assert hero.temp_shield == 25

def test_stun_countdown_deletes_entry(make_enemy):
    enemy = make_enemy()
    enemy.statuses.apply(StatusKind.STUN, 1.0, 2)

    assert tick_enemy_statuses(enemy) == []
    assert enemy.statuses.turns(StatusKind.STUN) == 1

    events = tick_enemy_statuses(enemy)
    assert enemy.statuses.get(StatusKind.STUN) is None
    assert [e.get("status") for e in events] == ["stun"]
    assert events[0].get("side") == "enemy"

def test_enemy_paired_statuses(make_enemy):
    enemy = make_enemy()
    enemy.statuses.apply(StatusKind.ATK_DEBUFF, 0.3, 1)
    enemy.statuses.apply(StatusKind.NEXT_HIT_VULN, 0.5, 1)
    enemy.statuses.apply(StatusKind.DAZED, 1.0, 1)

    events = tick_enemy_statuses(enemy)

    assert {e.get("status") for e in events} == {"atkDebuff", "nextHitVuln", "dazed"}
    assert enemy.statuses.get(StatusKind.ATK_DEBUFF) is not None
    assert enemy.statuses.get(StatusKind.DAZED) is None

def test_confusion_never_ticked(make_enemy):
    enemy = make_enemy()
    enemy.confuse()
    for _ in range(10):
        assert tick_enemy_statuses(enemy) == []

    assert enemy.is_confused

def test_tick_party(party):
    party[1].statuses.apply(StatusKind.ATK_BUFF, 0.2, 1)
    party[3].statuses.apply(StatusKind.DEF_DEBUFF, 0.2, 1)

    events = tick_party_statuses(party)

    assert [e.get("actor_index") for e in events] == [1, 3]

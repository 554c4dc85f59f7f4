import pytest
from reelcombat.components import StatusKind, StatusEntry, StatusBook, ConfusionState

def test_entry_activity():
    assert StatusEntry(magnitude=0.2, turns=2).is_active
    assert not StatusEntry(magnitude=0.2, turns=0).is_active
    # No duration means always on
    assert StatusEntry(magnitude=0.2, turns=None).is_active

def test_inactive_magnitude_reads_zero():
    book = StatusBook()
    book.apply(StatusKind.ATK_BUFF, 0.5, 0)

    assert book.magnitude(StatusKind.ATK_BUFF) == 0.0
    assert book.magnitude(StatusKind.DEF_BUFF) == 0.0

def test_entry_sanitizes_values():
    entry = StatusEntry(magnitude=float("nan"), turns=-3)
    assert entry.magnitude == 0.0
    assert entry.turns == 0

    assert StatusEntry(magnitude=-1, turns=2).magnitude == 0.0

def test_refresh_keeps_stronger_and_longer():
    book = StatusBook()
    book.apply(StatusKind.ATK_BUFF, 0.2, 2)
    book.apply(StatusKind.ATK_BUFF, 0.1, 5)

    assert book.magnitude(StatusKind.ATK_BUFF) == pytest.approx(0.2)
    assert book.turns(StatusKind.ATK_BUFF) == 5

def test_apply_over_expired_replaces():
    book = StatusBook()
    book.apply(StatusKind.DEF_DEBUFF, 0.5, 0)
    book.apply(StatusKind.DEF_DEBUFF, 0.1, 2)

    assert book.magnitude(StatusKind.DEF_DEBUFF) == pytest.approx(0.1)

def test_clear_and_remove():
    book = StatusBook()
    book.apply(StatusKind.STUN, 1.0, 2)
    book.clear(StatusKind.STUN)

    assert book.get(StatusKind.STUN) is not None
    assert not book.is_active(StatusKind.STUN)

    book.remove(StatusKind.STUN)
    assert book.get(StatusKind.STUN) is None

def test_enemy_condition_kinds():
    assert StatusKind.STUN.is_enemy_condition
    assert StatusKind.CONFUSED.is_enemy_condition
    assert not StatusKind.ATK_BUFF.is_enemy_condition

def test_confusion_chances_clamped():
    state = ConfusionState(proc_chance=3, clear_chance=-1)
    assert state.proc_chance == 1.0
    assert state.clear_chance == 0.0

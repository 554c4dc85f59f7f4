import os
import sys
import pytest

# Ensure engine modules can be imported
sys.path.append(os.getcwd())

from engine.core.rng import RNG


class ScriptedRNG(RNG):
    """
    RNG that replays a fixed list of random() values.

    Every derived draw (chance, randint, choice, weighted_index) goes
    through random(), so the list scripts crits, targets and confusion.
    Once the list runs out, `default` is returned (0.99: no crits, no
    procs, last target).
    """

    def __init__(self, values=(), default=0.99):
        super().__init__(seed=0)
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture
def rng():
    """Seeded RNG for replayable tests."""
    return RNG(seed=1234)


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRNG instances."""
    return ScriptedRNG


@pytest.fixture
def make_hero():
    """Factory for party combatants (no crits unless asked)."""
    from reelcombat.components import Combatant

    def _make(**overrides):
        fields = dict(name="Hero", hp=100, max_hp=100, atk=10, defense=10, crit_chance=0.0)
        fields.update(overrides)
        return Combatant(**fields)

    return _make


@pytest.fixture
def make_enemy():
    """Factory for enemy combatants: one basic attack per turn, no crits."""
    from reelcombat.components import Combatant, Side

    def _make(**overrides):
        fields = dict(
            name="Critic",
            side=Side.ENEMY,
            hp=200,
            max_hp=200,
            atk=20,
            defense=5,
            crit_chance=0.0,
            move_ids=["basic_attack"],
            actions_per_turn=1,
        )
        fields.update(overrides)
        return Combatant(**fields)

    return _make


@pytest.fixture
def party(make_hero):
    """Four full-HP heroes."""
    return [make_hero(name=f"Hero {i + 1}") for i in range(4)]


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()

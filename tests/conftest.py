"""Shared fixtures: a fixed clock, seeded and fixed-value RNGs, ready-made states."""

import random
from dataclasses import replace

import pytest

from digital_matrix.state import initial_state, replace_server, find_server
from digital_matrix.store import GameStore
from digital_matrix.types import AttackDefense, NetworkAttack, ResourceDrain

NOW = 1_000_000.0


class FixedRandom(random.Random):
    """``random()`` always returns ``value``; integer draws stay seeded."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


class Clock:
    def __init__(self, t=NOW):
        self.t = t

    def __call__(self):
        return self.t

    def advance(self, ms):
        self.t += ms


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def fresh_state():
    return initial_state(NOW)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def no_luck():
    """Every roll fails: no crits, no discoveries, no spawns."""
    return FixedRandom(0.99)


@pytest.fixture
def lucky():
    """Every roll succeeds."""
    return FixedRandom(0.0)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store(clock, no_luck):
    return GameStore(initial_state(NOW), clock=clock, rng=no_luck)


@pytest.fixture
def on_university(fresh_state):
    """Connected to an unlocked university server."""
    university = find_server(fresh_state, "university")
    state = replace(fresh_state, servers=replace_server(fresh_state, replace(university, is_unlocked=True)))
    return replace(state, current_server_id="university")


@pytest.fixture
def make_attack():
    def factory(attack_id="attack-1", server_id="university", started=NOW, duration=120000.0,
                drain=(0.0, 0.0, 0.0), security_impact=0.0, defense=(100.0, 2.0, 0.0)):
        return NetworkAttack(
            id=attack_id,
            name="DDoS Flood",
            description="test attack",
            server_id=server_id,
            severity="low",
            security_impact=security_impact,
            resource_drain=ResourceDrain(*drain),
            defense=AttackDefense(*defense),
            time_started=started,
            duration=duration,
        )
    return factory

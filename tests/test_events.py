"""Tests for dynamic events."""

from dataclasses import replace

from conftest import FixedRandom
from digital_matrix.actions import ResolveDynamicEvent, TriggerDynamicEvent
from digital_matrix.events import generate_event, pending_events
from digital_matrix.reducer import reduce


def test_insider_info(fresh_state, now):
    event = generate_event(replace(fresh_state, data_per_second=2.5), now, FixedRandom(0.1))
    assert event.name == "Insider Info"
    assert event.reward.type == "data"
    assert event.reward.amount == 1250


def test_insider_info_minimum_reward(fresh_state, now):
    event = generate_event(fresh_state, now, FixedRandom(0.1))
    assert event.reward.amount == 1


def test_security_breach(fresh_state, now):
    event = generate_event(fresh_state, now, FixedRandom(0.9))
    assert event.name == "Security Breach"
    assert event.reward.type == "hacking_skill"


def test_trigger_ignores_duplicate_ids(fresh_state, now, rng):
    event = generate_event(fresh_state, now, rng)
    state = reduce(fresh_state, TriggerDynamicEvent(event), now, rng)
    assert pending_events(state) == [event]
    assert reduce(state, TriggerDynamicEvent(event), now, rng) is state


def test_resolve_grants_reward_once(fresh_state, now, rng):
    event = generate_event(fresh_state, now, FixedRandom(0.9))
    state = reduce(fresh_state, TriggerDynamicEvent(event), now, rng)
    state = reduce(state, ResolveDynamicEvent(event.id), now, rng)
    assert state.hacking_skill == 1
    assert pending_events(state) == []
    assert reduce(state, ResolveDynamicEvent(event.id), now, rng) is state


def test_resolve_unknown_event_is_noop(fresh_state, now, rng):
    assert reduce(fresh_state, ResolveDynamicEvent("nope"), now, rng) is fresh_state

"""Tests for GameStore dispatch and subscriptions."""

from dataclasses import replace

from digital_matrix.actions import BuyUpgrade, Click
from digital_matrix.state import initial_state


def test_dispatch_applies_action(store, now):
    assert store.dispatch(Click())
    assert store.get_state().data == 1
    assert store.get_state().last_timestamp == now


def test_rejected_action_returns_false(store):
    before = store.get_state()
    assert not store.dispatch(BuyUpgrade("basic_script"))
    assert store.get_state() is before


def test_subscribers_see_changes_only(store):
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.dispatch(BuyUpgrade("basic_script"))
    assert seen == []
    store.dispatch(Click())
    assert seen == [store.get_state()]

    unsubscribe()
    store.dispatch(Click())
    assert len(seen) == 1


def test_replace_state_notifies(store, now):
    seen = []
    store.subscribe(seen.append)
    loaded = replace(initial_state(now), data=42)
    store.replace_state(loaded)
    assert store.get_state() is loaded
    assert seen == [loaded]


def test_store_uses_injected_clock(store, clock):
    clock.advance(5000)
    store.dispatch(Click())
    assert store.get_state().last_timestamp == clock()

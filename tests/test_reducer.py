"""Tests for the action reducer: clicks, upgrades, hacks, claims, prestige."""

from dataclasses import replace
from typing import get_args

import pytest

from digital_matrix.achievements import find_achievement
from digital_matrix.actions import (
    Action,
    ActivateBonus,
    BuyUpgrade,
    ClaimAchievement,
    Click,
    ClickBonus,
    DiscoverServer,
    ManualHack,
    ManualMine,
    Prestige,
    ResetGame,
    SwitchServer,
)
from digital_matrix.reducer import _HANDLERS, BONUS_DURATION_MS, reduce
from digital_matrix.state import initial_state
from digital_matrix.upgrades import find_upgrade, get_cost


def _unlock(state, achievement_id):
    return replace(state, achievements=[
        replace(a, unlocked=True) if a.id == achievement_id else a for a in state.achievements
    ])


def test_click_adds_data_per_click(fresh_state, now, no_luck):
    state = reduce(fresh_state, Click(), now, no_luck)
    assert state.data == 1
    assert state.total_clicks == 1
    assert state.last_timestamp == now


def test_critical_click_doubles_gain(fresh_state, now, lucky):
    state = reduce(fresh_state, Click(), now, lucky)
    assert state.data == 2


def test_click_does_not_mutate_previous_state(fresh_state, now, no_luck):
    reduce(fresh_state, Click(), now, no_luck)
    assert fresh_state.data == 0
    assert fresh_state.total_clicks == 0


def test_first_clicks_unlocks_after_ten_clicks(fresh_state, now, no_luck):
    state = fresh_state
    for _ in range(9):
        state = reduce(state, Click(), now, no_luck)
    assert not find_achievement(state, "first_clicks").unlocked

    state = reduce(state, Click(), now, no_luck)
    assert find_achievement(state, "first_clicks").unlocked

    state = reduce(state, Click(), now, no_luck)
    assert find_achievement(state, "first_clicks").unlocked
    assert state.total_clicks == 11


def test_active_bonus_multiplies_clicks(fresh_state, now, no_luck):
    state = replace(fresh_state, bonus_multiplier=3.0, bonus_until=now + 5000)
    assert reduce(state, Click(), now, no_luck).data == 3


def test_expired_bonus_is_ignored(fresh_state, now, no_luck):
    state = replace(fresh_state, bonus_multiplier=5.0, bonus_until=now - 1)
    assert reduce(state, Click(), now, no_luck).data == 1


def test_click_bonus(fresh_state, now, no_luck):
    state = reduce(fresh_state, ClickBonus(4), now, no_luck)
    assert state.data == 4
    assert state.bonus_multiplier == 2
    assert state.bonus_until == now + BONUS_DURATION_MS
    assert state.total_clicks == 1


def test_click_bonus_keeps_stronger_active_bonus(fresh_state, now, no_luck):
    state = replace(fresh_state, bonus_multiplier=5.0, bonus_until=now + 1000)
    assert reduce(state, ClickBonus(4), now, no_luck).bonus_multiplier == 5


def test_activate_bonus(fresh_state, now, no_luck):
    state = reduce(fresh_state, ActivateBonus(30000, 5), now, no_luck)
    assert state.bonus_multiplier == 5
    assert state.bonus_until == now + 30000


def test_buy_unaffordable_upgrade_is_noop(fresh_state, now, no_luck):
    assert reduce(fresh_state, BuyUpgrade("basic_script"), now, no_luck) is fresh_state


def test_buy_unknown_upgrade_is_noop(fresh_state, now, no_luck):
    state = replace(fresh_state, data=1e9)
    assert reduce(state, BuyUpgrade("quantum_core"), now, no_luck) is state


def test_buy_hidden_upgrade_is_noop(fresh_state, now, no_luck):
    """optimization_tools only shows up at 150 data."""
    state = replace(fresh_state, data=100)
    assert reduce(state, BuyUpgrade("optimization_tools"), now, no_luck) is state


def test_buy_maxed_upgrade_is_noop(fresh_state, now, no_luck):
    state = replace(fresh_state, data=1e9, upgrades=[
        replace(u, level=u.max_level) if u.id == "cpu_upgrade" else u for u in fresh_state.upgrades
    ])
    assert reduce(state, BuyUpgrade("cpu_upgrade"), now, no_luck) is state


def test_cost_curve(fresh_state, now, no_luck):
    upgrade = find_upgrade(fresh_state, "basic_script")
    assert get_cost(upgrade, 0) == pytest.approx(10)
    assert get_cost(upgrade, 1) == pytest.approx(11.5)
    assert get_cost(upgrade, 2) == pytest.approx(13.225)

    state = replace(fresh_state, data=100)
    for _ in range(3):
        state = reduce(state, BuyUpgrade("basic_script"), now, no_luck)
    assert state.data == pytest.approx(100 - 10 - 11.5 - 13.225)
    assert find_upgrade(state, "basic_script").level == 3
    assert state.data_per_second == pytest.approx(0.3)


def test_buy_data_per_click(fresh_state, now, no_luck):
    state = reduce(replace(fresh_state, data=30), BuyUpgrade("cpu_upgrade"), now, no_luck)
    assert state.data_per_click == 2
    assert state.falling_bits_per_click == 4
    assert state.data == 0


def test_buy_unlocks_upgrades_visible_at_purchase_balance(fresh_state, now, no_luck):
    state = reduce(replace(fresh_state, data=80), BuyUpgrade("basic_script"), now, no_luck)
    assert find_upgrade(state, "advanced_script").is_unlocked
    assert find_upgrade(state, "mining_software").is_unlocked
    assert not find_upgrade(state, "optimization_tools").is_unlocked


def test_processing_multiplier_compounds_rates(fresh_state, now, no_luck):
    state = replace(fresh_state, data=200, data_per_second=10, crypto_per_second=1)
    state = reduce(state, BuyUpgrade("optimization_tools"), now, no_luck)
    assert state.processing_power == pytest.approx(0.1)
    assert state.data_per_second == pytest.approx(11)
    assert state.crypto_per_second == pytest.approx(1.1)


def test_critical_chance_is_capped(fresh_state, now, no_luck):
    state = replace(fresh_state, data=1e9, critical_chance=0.93)
    state = reduce(state, BuyUpgrade("critical_chance"), now, no_luck)
    assert state.critical_chance == pytest.approx(0.95)


def test_manual_hack(fresh_state, now, no_luck):
    state = reduce(fresh_state, ManualHack("network"), now, no_luck)
    assert state.data == pytest.approx(10)
    assert state.last_hack_time == now


def test_manual_hack_scales_with_skill_and_processing(fresh_state, now, no_luck):
    state = replace(fresh_state, hacking_skill=2, processing_power=10)
    state = reduce(state, ManualHack("database"), now, no_luck)
    assert state.data == pytest.approx(50 * (1 + 0.2 + 0.5))


def test_manual_hack_on_cooldown_is_noop(fresh_state, now, no_luck):
    state = replace(fresh_state, last_hack_time=now - 1000)
    assert reduce(state, ManualHack("network"), now, no_luck) is state


def test_manual_mine(fresh_state, now, no_luck):
    assert reduce(fresh_state, ManualMine(), now, no_luck) is fresh_state
    state = reduce(replace(fresh_state, crypto_per_second=0.5), ManualMine(), now, no_luck)
    assert state.crypto == pytest.approx(5)


def test_claim_achievement_once(fresh_state, now, no_luck):
    state = _unlock(replace(fresh_state, data_per_second=10), "first_clicks")
    state = reduce(state, ClaimAchievement("first_clicks"), now, no_luck)
    assert state.data_per_click == pytest.approx(1.1)
    assert state.data_per_second == pytest.approx(11)
    assert find_achievement(state, "first_clicks").claimed

    assert reduce(state, ClaimAchievement("first_clicks"), now, no_luck) is state


def test_claim_achievement_repeat(fresh_state, now, no_luck):
    state = _unlock(fresh_state, "first_clicks")
    state = reduce(state, ClaimAchievement("first_clicks"), now, no_luck)
    state = reduce(state, ClaimAchievement("first_clicks", allow_repeat=True), now, no_luck)
    assert state.data_per_click == pytest.approx(1.21)


def test_claim_locked_achievement_is_noop(fresh_state, now, no_luck):
    assert reduce(fresh_state, ClaimAchievement("first_clicks"), now, no_luck) is fresh_state


def test_switch_to_locked_server_is_noop(fresh_state, now, no_luck):
    assert reduce(fresh_state, SwitchServer("government"), now, no_luck) is fresh_state
    assert reduce(fresh_state, SwitchServer("nowhere"), now, no_luck) is fresh_state
    assert reduce(fresh_state, SwitchServer("home"), now, no_luck) is fresh_state


def test_discover_and_switch_server(fresh_state, now, no_luck):
    state = reduce(fresh_state, DiscoverServer("corporate"), now, no_luck)
    assert reduce(state, DiscoverServer("corporate"), now, no_luck) is state
    state = reduce(state, SwitchServer("corporate"), now, no_luck)
    assert state.current_server_id == "corporate"


def test_prestige(fresh_state, now, no_luck):
    state = _unlock(replace(fresh_state, data=999, data_per_click=5, total_clicks=50), "first_clicks")
    state = reduce(state, Prestige(), now, no_luck)
    assert state.prestige_level == 1
    assert state.prestige_multiplier == pytest.approx(1.3)
    assert state.data == 0
    assert state.data_per_click == 1
    assert state.total_clicks == 0
    assert find_achievement(state, "first_clicks").unlocked


def test_prestige_multiplier_applies_to_clicks(fresh_state, now, no_luck):
    state = reduce(replace(fresh_state, data=999), Prestige(), now, no_luck)
    state = reduce(state, Click(), now, no_luck)
    assert state.data == pytest.approx(1.3)


def test_reset_game(fresh_state, now, no_luck):
    state = replace(fresh_state, data=5000, prestige_level=3)
    assert reduce(state, ResetGame(), now + 10, no_luck) == initial_state(now + 10)


def test_unknown_action_raises(fresh_state, now, no_luck):
    with pytest.raises(TypeError):
        reduce(fresh_state, object(), now, no_luck)


def test_prestige_keeps_claimed_rewards(fresh_state, now, no_luck):
    state = fresh_state
    for _ in range(10):
        state = reduce(state, Click(), now, no_luck)
    state = reduce(state, ClaimAchievement("first_clicks"), now, no_luck)
    assert state.data_per_click == pytest.approx(1.1)

    state = reduce(state, Prestige(), now, no_luck)
    assert find_achievement(state, "first_clicks").claimed
    assert state.data_per_click == pytest.approx(1.1)
    assert reduce(state, ClaimAchievement("first_clicks"), now, no_luck) is state


def test_every_action_has_handler():
    assert set(_HANDLERS) == set(get_args(Action))

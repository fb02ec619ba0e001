"""Tests for server security, discovery and hardening."""

from dataclasses import replace

import pytest

from digital_matrix.actions import Click, ScanNetwork, SecureServer, UpdateServerSecurity
from digital_matrix.catalog import initial_servers
from digital_matrix.reducer import reduce
from digital_matrix.servers import scan_chances, secure_cost, security_penalty
from digital_matrix.state import find_server, initial_state, replace_server


def _security(state, server_id, level):
    server = find_server(state, server_id)
    return replace(state, servers=replace_server(state, replace(server, security_level=level)))


def test_security_is_clamped(on_university, now, no_luck):
    state = reduce(on_university, UpdateServerSecurity("university", 500), now, no_luck)
    assert find_server(state, "university").security_level == 100
    state = reduce(state, UpdateServerSecurity("university", -500), now, no_luck)
    assert find_server(state, "university").security_level == 0


def test_home_security_stays_zero(fresh_state, now, no_luck):
    assert reduce(fresh_state, UpdateServerSecurity("home", 10), now, no_luck) is fresh_state


def test_security_penalty():
    university = initial_servers()[1]
    assert security_penalty(university) == 1.0
    assert security_penalty(replace(university, security_level=50)) == pytest.approx(0.75)
    assert security_penalty(replace(university, security_level=100)) == pytest.approx(0.5)


def test_click_raises_security_on_remote_server(on_university, now, no_luck):
    state = reduce(on_university, Click(), now, no_luck)
    assert find_server(state, "university").security_level == pytest.approx(0.02)


def test_click_leaves_home_security_alone(fresh_state, now, no_luck):
    state = reduce(fresh_state, Click(), now, no_luck)
    assert find_server(state, "home").security_level == 0


def test_click_can_discover_eligible_server(fresh_state, now, lucky):
    state = replace(fresh_state, hacking_skill=1, data=500)
    state = reduce(state, Click(), now, lucky)
    assert find_server(state, "university").is_unlocked


def test_scan_chances():
    state = replace(initial_state(), hacking_skill=1, data=500)
    [(server, chance)] = scan_chances(state)
    assert server.id == "university"
    assert chance == pytest.approx(40 * (1 + 6 / 20))


def test_scan_chance_is_capped():
    state = replace(initial_state(), hacking_skill=100, data=500)
    assert all(chance <= 80 for _, chance in scan_chances(state))


def test_scan_discovers_server(fresh_state, now, lucky):
    state = replace(fresh_state, hacking_skill=1, data=500)
    state = reduce(state, ScanNetwork(), now, lucky)
    assert find_server(state, "university").is_unlocked
    assert state.last_hack_time == now


def test_failed_scan_still_uses_cooldown(fresh_state, now, no_luck):
    state = replace(fresh_state, hacking_skill=1, data=500)
    state = reduce(state, ScanNetwork(), now, no_luck)
    assert not find_server(state, "university").is_unlocked
    assert state.last_hack_time == now


def test_scan_on_cooldown_is_noop(fresh_state, now, lucky):
    state = replace(fresh_state, hacking_skill=1, data=500, last_hack_time=now - 1000)
    assert reduce(state, ScanNetwork(), now, lucky) is state


def test_secure_server(on_university, now, no_luck):
    state = replace(_security(on_university, "university", 3.5), data=10000, processing_power=100)
    assert secure_cost(find_server(state, "university")) == (800, 20)
    state = reduce(state, SecureServer("university"), now, no_luck)
    assert state.data == 9200
    assert state.processing_power == 80
    assert find_server(state, "university").security_level == pytest.approx(2.5)


def test_secure_reduction_scales_with_skill(on_university, now, no_luck):
    state = replace(_security(on_university, "university", 5), data=10000, processing_power=100,
                    hacking_skill=20)
    state = reduce(state, SecureServer("university"), now, no_luck)
    assert find_server(state, "university").security_level == pytest.approx(3)


def test_secure_never_goes_below_zero(on_university, now, no_luck):
    state = replace(_security(on_university, "university", 0.5), data=10000, processing_power=100,
                    hacking_skill=40)
    state = reduce(state, SecureServer("university"), now, no_luck)
    assert find_server(state, "university").security_level == 0


def test_secure_preconditions(on_university, now, no_luck):
    broke = _security(on_university, "university", 3)
    assert reduce(broke, SecureServer("university"), now, no_luck) is broke
    clean = replace(on_university, data=10000, processing_power=100)
    assert reduce(clean, SecureServer("university"), now, no_luck) is clean
    assert reduce(clean, SecureServer("government"), now, no_luck) is clean

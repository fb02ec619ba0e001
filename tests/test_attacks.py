"""Tests for network attack generation and the attack lifecycle."""

import random
from dataclasses import replace

import pytest

from digital_matrix.actions import ExpireAttack, ResolveAttack, TriggerAttack
from digital_matrix.attacks import SEVERITY_DURATION_MS, generate_attack, impact_score, severity_for
from digital_matrix.catalog import ATTACK_TEMPLATES
from digital_matrix.reducer import reduce


@pytest.mark.parametrize("score, severity", [
    (0, "low"), (5, "low"), (5.1, "medium"), (10, "medium"), (10.5, "high"), (20, "high"), (21, "critical"),
])
def test_severity_buckets(score, severity):
    assert severity_for(score) == severity


def test_generated_attack_scales_with_difficulty(on_university, now):
    attack = generate_attack("university", on_university, now, random.Random(7))
    template = next(t for t in ATTACK_TEMPLATES if t.name == attack.name)
    assert attack.server_id == "university"
    assert attack.resource_drain.data == pytest.approx(template.drain[0] * 2)
    assert attack.security_impact == pytest.approx(template.security_impact * 2)
    assert attack.defense.required_data == pytest.approx(template.defense[0] * 2)
    assert attack.defense.required_hacking_skill == pytest.approx(template.defense[2] * 2)
    assert attack.impact_score == pytest.approx(impact_score(attack.security_impact, attack.resource_drain))
    assert attack.severity == severity_for(attack.impact_score)
    assert attack.duration == SEVERITY_DURATION_MS[attack.severity]
    assert attack.time_started == now
    assert not attack.resolved


def test_defense_scales_with_prestige(on_university, now):
    base = generate_attack("university", on_university, now, random.Random(3))
    veteran = generate_attack("university", replace(on_university, prestige_level=2), now, random.Random(3))
    assert veteran.name == base.name
    assert veteran.defense.required_data == pytest.approx(base.defense.required_data * 2)
    assert veteran.defense.required_processing_power == pytest.approx(base.defense.required_processing_power * 1.5)
    assert veteran.defense.required_hacking_skill == pytest.approx(base.defense.required_hacking_skill + 2)


def test_unknown_server_yields_difficulty_one_attack(fresh_state, now):
    attack = generate_attack("nowhere", fresh_state, now, random.Random(1))
    template = next(t for t in ATTACK_TEMPLATES if t.name == attack.name)
    assert attack.resource_drain.data == pytest.approx(template.drain[0])


def test_trigger_attack(on_university, now, rng):
    state = reduce(on_university, TriggerAttack("university"), now, rng)
    assert len(state.active_attacks) == 1
    assert state.last_attack_time == now


def test_trigger_attack_on_locked_server_is_noop(fresh_state, now, rng):
    assert reduce(fresh_state, TriggerAttack("government"), now, rng) is fresh_state


def test_resolve_attack_pays_defense(on_university, now, rng, make_attack):
    attack = make_attack(defense=(100.0, 2.0, 1.0))
    state = replace(on_university, data=150, processing_power=5, hacking_skill=1, active_attacks=[attack])
    state = reduce(state, ResolveAttack("attack-1"), now, rng)
    assert state.data == pytest.approx(50)
    assert state.processing_power == pytest.approx(3)
    assert state.hacking_skill == 1
    assert state.active_attacks[0].resolved


def test_resolve_attack_needs_resources(on_university, now, rng, make_attack):
    attack = make_attack(defense=(100.0, 2.0, 1.0))
    state = replace(on_university, data=150, processing_power=5, hacking_skill=0, active_attacks=[attack])
    assert reduce(state, ResolveAttack("attack-1"), now, rng) is state


def test_resolved_attack_cannot_be_resolved_again(on_university, now, rng, make_attack):
    attack = replace(make_attack(), resolved=True)
    state = replace(on_university, data=1000, processing_power=100, active_attacks=[attack])
    assert reduce(state, ResolveAttack("attack-1"), now, rng) is state
    assert reduce(state, ExpireAttack("attack-1"), now, rng) is state


def test_expire_attack_has_no_cost(on_university, now, rng, make_attack):
    state = replace(on_university, data=1000, active_attacks=[make_attack()])
    state = reduce(state, ExpireAttack("attack-1"), now, rng)
    assert state.active_attacks[0].resolved
    assert state.data == 1000

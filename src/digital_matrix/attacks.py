"""Network attack generation, spawning and player defense."""
from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Optional

from digital_matrix.catalog import ATTACK_TEMPLATES, HOME_SERVER_ID
from digital_matrix.state import GameState, find_server, unresolved_attacks
from digital_matrix.types import AttackDefense, NetworkAttack, ResourceDrain

log = logging.getLogger(__name__)

MAX_UNRESOLVED_ATTACKS = 3
SPAWN_BASE_CHANCE = 0.2
SPAWN_RAMP_SECONDS = 5.0

# Defense thresholds grow with prestige: (1 + prestige_level * k).
PRESTIGE_DATA_SCALING = 0.5
PRESTIGE_PROCESSING_SCALING = 0.25

# impact_score weights: security points/min, then per-second drains.
IMPACT_WEIGHT_DATA = 0.5
IMPACT_WEIGHT_CRYPTO = 20.0
IMPACT_WEIGHT_PROCESSING = 2.0

SEVERITY_DURATION_MS = {
    "low": 2 * 60 * 1000,
    "medium": 4 * 60 * 1000,
    "high": 7 * 60 * 1000,
    "critical": 10 * 60 * 1000,
}


def severity_for(impact_score: float) -> str:
    if impact_score > 20:
        return "critical"
    if impact_score > 10:
        return "high"
    if impact_score > 5:
        return "medium"
    return "low"


def impact_score(security_impact: float, drain: ResourceDrain) -> float:
    return (
        security_impact
        + drain.data * IMPACT_WEIGHT_DATA
        + drain.crypto * IMPACT_WEIGHT_CRYPTO
        + drain.processing_power * IMPACT_WEIGHT_PROCESSING
    )


def generate_attack(server_id: str, state: GameState, now: float, rng: random.Random) -> NetworkAttack:
    """Roll an attack archetype against ``server_id``, scaled by its difficulty.

    An unknown server id still yields a valid attack at difficulty 1.
    """
    template = rng.choice(ATTACK_TEMPLATES)
    server = find_server(state, server_id)
    difficulty = server.difficulty if server is not None else 1
    prestige = state.prestige_level

    drain = ResourceDrain(
        data=template.drain[0] * difficulty,
        crypto=template.drain[1] * difficulty,
        processing_power=template.drain[2] * difficulty,
    )
    security_impact = template.security_impact * difficulty
    defense = AttackDefense(
        required_data=template.defense[0] * difficulty * (1 + prestige * PRESTIGE_DATA_SCALING),
        required_processing_power=template.defense[1] * difficulty * (1 + prestige * PRESTIGE_PROCESSING_SCALING),
        required_hacking_skill=template.defense[2] * difficulty + prestige,
    )
    score = impact_score(security_impact, drain)
    severity = severity_for(score)
    return NetworkAttack(
        id=f"attack-{int(now)}-{rng.getrandbits(24):06x}",
        name=template.name,
        description=template.description,
        server_id=server_id,
        severity=severity,
        security_impact=security_impact,
        resource_drain=drain,
        defense=defense,
        time_started=now,
        duration=SEVERITY_DURATION_MS[severity],
        impact_score=score,
    )


def trigger(state: GameState, server_id: str, now: float, rng: random.Random) -> GameState:
    server = find_server(state, server_id)
    if server is None or not server.is_unlocked:
        return state
    attack = generate_attack(server_id, state, now, rng)
    log.debug("attack %s (%s) started on %s", attack.name, attack.severity, server_id)
    return replace(state, active_attacks=state.active_attacks + [attack], last_attack_time=now)


def maybe_spawn(state: GameState, now: float, elapsed_seconds: float, rng: random.Random) -> GameState:
    """Spawn roll run by the idle tick."""
    if now <= state.last_attack_time + state.attack_cooldown:
        return state
    if len(unresolved_attacks(state)) >= MAX_UNRESOLVED_ATTACKS:
        return state
    chance = SPAWN_BASE_CHANCE * min(1.0, elapsed_seconds / SPAWN_RAMP_SECONDS)
    if rng.random() >= chance:
        return state
    targets = [s for s in state.servers if s.is_unlocked and s.id != HOME_SERVER_ID]
    if not targets:
        return state
    return trigger(state, rng.choice(targets).id, now, rng)


def find_attack(state: GameState, attack_id: str) -> Optional[NetworkAttack]:
    for attack in state.active_attacks:
        if attack.id == attack_id:
            return attack
    return None


def can_defend(state: GameState, attack: NetworkAttack) -> bool:
    defense = attack.defense
    return (
        state.data >= defense.required_data
        and state.processing_power >= defense.required_processing_power
        and state.hacking_skill >= defense.required_hacking_skill
    )


def _mark_resolved(state: GameState, attack_id: str) -> list:
    return [replace(a, resolved=True) if a.id == attack_id else a for a in state.active_attacks]


def resolve(state: GameState, attack_id: str) -> GameState:
    """Player defense: pay the data and processing thresholds, end the attack."""
    attack = find_attack(state, attack_id)
    if attack is None or attack.resolved or not can_defend(state, attack):
        return state
    return replace(
        state,
        data=state.data - attack.defense.required_data,
        processing_power=state.processing_power - attack.defense.required_processing_power,
        active_attacks=_mark_resolved(state, attack_id),
    )


def expire(state: GameState, attack_id: str) -> GameState:
    attack = find_attack(state, attack_id)
    if attack is None or attack.resolved:
        return state
    return replace(state, active_attacks=_mark_resolved(state, attack_id))

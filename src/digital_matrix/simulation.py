"""Idle-progress tick.

Tick pipeline, in order:
1. Resolve the current server's multipliers and its security penalty
   (efficiency falls linearly with security, floored at 50%).
2. Passive generation: data (bonus, prestige and server multipliers),
   crypto (server multiplier only) and processing power (sum of
   processingMultiplier upgrades).
3. Passive security decay on unlocked non-home servers.
4. Walk unresolved attacks: expire the ones past their window, accumulate
   drains and security pressure for the rest.
5. Apply accumulated security pressure (clamped).
6. Apply accumulated drains (floored at 0).
7. Attack spawn roll.
8. Advance the ``last_timestamp`` watermark.
9. Fail timed-out missions, then re-evaluate achievements.

Correct for any elapsed duration, including hours of offline time in one call.
"""
from __future__ import annotations

import random
from dataclasses import replace
from typing import Dict

from digital_matrix import attacks, missions, servers
from digital_matrix.achievements import check_achievements
from digital_matrix.state import GameState, clamp_resources, current_server, effective_bonus
from digital_matrix.upgrades import processing_rate


def advance(state: GameState, elapsed_ms: float, now: float, rng: random.Random) -> GameState:
    elapsed = max(0.0, elapsed_ms) / 1000.0

    # Step 1
    server = current_server(state)
    mults = server.resource_multipliers
    penalty = servers.security_penalty(server)
    bonus = effective_bonus(state, now)

    # Step 2
    data = state.data + (state.data_per_second * elapsed * bonus * state.prestige_multiplier
                         * mults.data * penalty)
    crypto = state.crypto + state.crypto_per_second * elapsed * mults.crypto * penalty
    processing = state.processing_power + processing_rate(state) * elapsed * mults.processing_power * penalty

    # Step 3
    roster = servers.decay_security(state.servers, elapsed)

    # Step 4
    lost_data = lost_crypto = lost_processing = 0.0
    pressure: Dict[str, float] = {}
    attack_list = []
    for attack in state.active_attacks:
        if not attack.resolved:
            if now > attack.expires_at():
                attack = replace(attack, resolved=True)
            else:
                drain = attack.resource_drain
                lost_data += drain.data * elapsed
                lost_crypto += drain.crypto * elapsed
                lost_processing += drain.processing_power * elapsed
                pressure[attack.server_id] = (pressure.get(attack.server_id, 0.0)
                                              + attack.security_impact * (elapsed / 60))
        attack_list.append(attack)

    # Step 5
    if pressure:
        roster = [
            servers.with_security(s, s.security_level + pressure[s.id]) if s.id in pressure else s
            for s in roster
        ]

    # Step 6
    new_state = clamp_resources(replace(
        state,
        data=data - lost_data,
        crypto=crypto - lost_crypto,
        processing_power=processing - lost_processing,
        bonus_multiplier=bonus,
        servers=roster,
        active_attacks=attack_list,
    ))

    # Step 7
    new_state = attacks.maybe_spawn(new_state, now, elapsed, rng)

    # Step 8
    new_state = replace(new_state, last_timestamp=now)

    # Step 9
    new_state = missions.fail_expired(new_state, now)
    return check_achievements(new_state)

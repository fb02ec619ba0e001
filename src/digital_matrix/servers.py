"""Server roster: security pressure, discovery and hardening.

The home server is never under pressure; its security level stays at 0.
"""
from __future__ import annotations

import math
import random
from dataclasses import replace
from typing import Iterable, List, Tuple

from digital_matrix.catalog import HOME_SERVER_ID
from digital_matrix.state import GameState, find_server, replace_server
from digital_matrix.types import Server

SECURITY_DECAY_PER_SECOND = 0.005
CLICK_SECURITY_CREEP = 0.01  # per click, times server difficulty
PASSIVE_DISCOVERY_FACTOR = 0.01
SCAN_BASE_POWER = 5
SCAN_CHANCE_CAP = 80.0  # percent
MIN_SECURITY_PENALTY = 0.5


def clamp_security(server: Server, level: float) -> float:
    if server.id == HOME_SERVER_ID:
        return 0.0
    return min(server.max_security_level, max(0.0, level))


def security_penalty(server: Server) -> float:
    """Generation efficiency: 1.0 when clean, down to 0.5 at max security."""
    if server.max_security_level <= 0:
        return 1.0
    return max(MIN_SECURITY_PENALTY, 1 - (server.security_level / server.max_security_level) * 0.5)


def with_security(server: Server, level: float) -> Server:
    level = clamp_security(server, level)
    if level == server.security_level:
        return server
    return replace(server, security_level=level)


def adjust_security(state: GameState, server_id: str, delta: float) -> GameState:
    server = find_server(state, server_id)
    if server is None:
        return state
    updated = with_security(server, server.security_level + delta)
    if updated is server:
        return state
    return replace(state, servers=replace_server(state, updated))


def decay_security(servers: Iterable[Server], elapsed_seconds: float) -> List[Server]:
    decay = SECURITY_DECAY_PER_SECOND * elapsed_seconds
    result = []
    for server in servers:
        if server.id == HOME_SERVER_ID:
            server = with_security(server, 0.0)
        elif server.is_unlocked and server.security_level > 0:
            server = with_security(server, server.security_level - decay)
        result.append(server)
    return result


def apply_click_creep(state: GameState) -> GameState:
    server = find_server(state, state.current_server_id)
    if server is None or server.id == HOME_SERVER_ID:
        return state
    return adjust_security(state, server.id, CLICK_SECURITY_CREEP * server.difficulty)


def is_discoverable(server: Server, state: GameState) -> bool:
    if server.is_unlocked:
        return False
    req = server.unlocks_at
    if req.hacking_skill and state.hacking_skill < req.hacking_skill:
        return False
    if req.data and state.data < req.data:
        return False
    if req.crypto and state.crypto < req.crypto:
        return False
    return True


def discoverable_servers(state: GameState) -> List[Server]:
    return [s for s in state.servers if is_discoverable(s, state)]


def scan_chances(state: GameState) -> List[Tuple[Server, float]]:
    scan_power = state.hacking_skill + SCAN_BASE_POWER
    return [
        (s, min(s.discovery_chance * (1 + scan_power / 20), SCAN_CHANCE_CAP))
        for s in discoverable_servers(state)
    ]


def discover(state: GameState, server_id: str) -> GameState:
    server = find_server(state, server_id)
    if server is None or server.is_unlocked:
        return state
    return replace(state, servers=replace_server(state, replace(server, is_unlocked=True)))


def roll_passive_discovery(state: GameState, rng: random.Random) -> GameState:
    """A click can stumble on an eligible server."""
    for server in discoverable_servers(state):
        if rng.random() < server.discovery_chance / 100 * PASSIVE_DISCOVERY_FACTOR:
            return discover(state, server.id)
    return state


def scan(state: GameState, now: float, rng: random.Random) -> GameState:
    if now - state.last_hack_time < state.hack_cooldown:
        return state
    scanned = replace(state, last_hack_time=now)
    for server, chance in scan_chances(state):
        if rng.random() * 100 < chance:
            return discover(scanned, server.id)
    return scanned


def switch(state: GameState, server_id: str) -> GameState:
    server = find_server(state, server_id)
    if server is None or not server.is_unlocked or server_id == state.current_server_id:
        return state
    return replace(state, current_server_id=server_id)


def secure_cost(server: Server) -> Tuple[float, float]:
    """(data, processing power) needed to harden ``server`` once."""
    return 100 * server.difficulty * math.ceil(server.security_level), 10 * server.difficulty


def security_reduction(state: GameState) -> float:
    return 1 + state.hacking_skill / 20


def secure(state: GameState, server_id: str) -> GameState:
    server = find_server(state, server_id)
    if server is None or not server.is_unlocked or server.security_level <= 0:
        return state
    data_cost, processing_cost = secure_cost(server)
    if state.data < data_cost or state.processing_power < processing_cost:
        return state
    hardened = with_security(server, server.security_level - security_reduction(state))
    return replace(
        state,
        data=state.data - data_cost,
        processing_power=state.processing_power - processing_cost,
        servers=replace_server(state, hardened),
    )

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

from digital_matrix.catalog import (
    HOME_SERVER_ID,
    initial_achievements,
    initial_missions,
    initial_servers,
    initial_upgrades,
)
from digital_matrix.types import (
    Achievement,
    DynamicEvent,
    Mission,
    NetworkAttack,
    Server,
    Upgrade,
)

MAX_CRITICAL_CHANCE = 0.95
DEFAULT_HACK_COOLDOWN = 30000.0  # ms
DEFAULT_ATTACK_COOLDOWN = 60000.0  # ms


@dataclass
class GameState:
    """Root aggregate of a play session.

    Transitions never mutate an existing GameState; the reducer builds a new
    one with ``dataclasses.replace`` and copies any collection it touches.
    """
    data: float = 0.0
    data_per_click: float = 1.0
    data_per_second: float = 0.0
    crypto: float = 0.0
    crypto_per_second: float = 0.0
    processing_power: float = 0.0
    network_nodes: float = 0.0
    reputation: float = 0.0
    last_timestamp: float = 0.0

    bonus_multiplier: float = 1.0
    bonus_until: float = 0.0

    total_clicks: int = 0
    falling_bits_per_click: float = 3.0  # cosmetic, consumed by renderers

    prestige_level: int = 0
    prestige_multiplier: float = 1.0

    critical_chance: float = 0.01
    critical_multiplier: float = 2.0

    hacking_skill: float = 0.0
    last_hack_time: float = 0.0
    hack_cooldown: float = DEFAULT_HACK_COOLDOWN

    upgrades: List[Upgrade] = field(default_factory=initial_upgrades)
    achievements: List[Achievement] = field(default_factory=initial_achievements)

    servers: List[Server] = field(default_factory=initial_servers)
    current_server_id: str = HOME_SERVER_ID
    active_attacks: List[NetworkAttack] = field(default_factory=list)
    last_attack_time: float = 0.0
    attack_cooldown: float = DEFAULT_ATTACK_COOLDOWN

    missions: List[Mission] = field(default_factory=initial_missions)
    dynamic_events: List[DynamicEvent] = field(default_factory=list)


def initial_state(now: float = 0.0) -> GameState:
    return GameState(last_timestamp=now)


def is_bonus_active(state: GameState, now: float) -> bool:
    return now < state.bonus_until


def effective_bonus(state: GameState, now: float) -> float:
    """Bonus multiplier in force at ``now``; an expired bonus counts as 1."""
    return state.bonus_multiplier if is_bonus_active(state, now) else 1.0


def find_server(state: GameState, server_id: str) -> Optional[Server]:
    for server in state.servers:
        if server.id == server_id:
            return server
    return None


def current_server(state: GameState) -> Server:
    server = find_server(state, state.current_server_id)
    if server is None:
        # Restored snapshots may reference a server that no longer exists.
        return state.servers[0]
    return server


def replace_server(state: GameState, updated: Server) -> List[Server]:
    return [updated if s.id == updated.id else s for s in state.servers]


def unresolved_attacks(state: GameState) -> List[NetworkAttack]:
    return [a for a in state.active_attacks if not a.resolved]


def clamp_resources(state: GameState) -> GameState:
    """Floor drainable resources at zero."""
    if state.data >= 0.0 and state.crypto >= 0.0 and state.processing_power >= 0.0:
        return state
    return replace(
        state,
        data=max(0.0, state.data),
        crypto=max(0.0, state.crypto),
        processing_power=max(0.0, state.processing_power),
    )


def upgrades_purchased(state: GameState) -> int:
    return sum(1 for u in state.upgrades if u.level > 0)

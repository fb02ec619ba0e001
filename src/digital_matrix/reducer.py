"""Action reducer: the only way a GameState changes.

``reduce(state, action, now, rng)`` returns a new state, or the very same
object when the action's preconditions are not met. Callers can rely on
``new is old`` to detect that nothing happened.
"""
from __future__ import annotations

import math
import random
from dataclasses import replace
from typing import Any, Callable, Dict, Type

from digital_matrix import achievements, attacks, events, missions, servers, upgrades
from digital_matrix.actions import (
    Action,
    ActivateBonus,
    BuyUpgrade,
    ClaimAchievement,
    ClaimMissionRewards,
    Click,
    ClickBonus,
    CompleteMission,
    DiscoverServer,
    ExpireAttack,
    FailMission,
    GenerateMission,
    ManualHack,
    ManualMine,
    Prestige,
    ResetGame,
    ResolveAttack,
    ResolveDynamicEvent,
    ScanNetwork,
    SecureServer,
    StartMission,
    SwitchServer,
    TriggerAttack,
    TriggerDynamicEvent,
    UpdateIdleProgress,
    UpdateMissionProgress,
    UpdateServerSecurity,
)
from digital_matrix.catalog import DEFAULT_HACK_REWARD, HACK_REWARDS
from digital_matrix.simulation import advance
from digital_matrix.state import GameState, current_server, effective_bonus, initial_state

BONUS_DURATION_MS = 10000
MANUAL_MINE_SECONDS = 10
PRESTIGE_SCALE = 0.1

Handler = Callable[[GameState, Any, float, random.Random], GameState]


def _unless_same(before: GameState, after: GameState) -> GameState:
    """Re-run achievement checks only when something actually changed."""
    if after is before:
        return before
    return achievements.check_achievements(after)


def _click(state: GameState, action: Click, now: float, rng: random.Random) -> GameState:
    server = current_server(state)
    multiplier = effective_bonus(state, now) * state.prestige_multiplier * server.resource_multipliers.data
    if rng.random() < state.critical_chance:
        multiplier *= state.critical_multiplier
    new_state = replace(
        state,
        data=state.data + state.data_per_click * multiplier,
        total_clicks=state.total_clicks + 1,
        last_timestamp=now,
    )
    new_state = servers.apply_click_creep(new_state)
    new_state = servers.roll_passive_discovery(new_state, rng)
    return achievements.check_achievements(new_state)


def _click_bonus(state: GameState, action: ClickBonus, now: float, rng: random.Random) -> GameState:
    bonus_data = state.data_per_click * action.multiplier * state.prestige_multiplier
    return achievements.check_achievements(replace(
        state,
        data=state.data + bonus_data,
        bonus_multiplier=max(effective_bonus(state, now), action.multiplier / 2),
        bonus_until=now + BONUS_DURATION_MS,
        total_clicks=state.total_clicks + 1,
        last_timestamp=now,
    ))


def _activate_bonus(state: GameState, action: ActivateBonus, now: float, rng: random.Random) -> GameState:
    return replace(
        state,
        bonus_multiplier=max(effective_bonus(state, now), action.multiplier),
        bonus_until=now + action.duration,
    )


def _buy_upgrade(state: GameState, action: BuyUpgrade, now: float, rng: random.Random) -> GameState:
    bought = upgrades.purchase(state, action.upgrade_id)
    if bought is state:
        return state
    return achievements.check_achievements(replace(bought, last_timestamp=now))


def _idle(state: GameState, action: UpdateIdleProgress, now: float, rng: random.Random) -> GameState:
    return advance(state, action.elapsed_ms, now, rng)


def _manual_hack(state: GameState, action: ManualHack, now: float, rng: random.Random) -> GameState:
    if now - state.last_hack_time < state.hack_cooldown:
        return state
    reward = HACK_REWARDS.get(action.target, DEFAULT_HACK_REWARD)
    hack_multiplier = 1 + state.hacking_skill * 0.1 + state.processing_power * 0.05
    return achievements.check_achievements(replace(
        state,
        data=state.data + reward * state.data_per_click * hack_multiplier,
        last_hack_time=now,
    ))


def _manual_mine(state: GameState, action: ManualMine, now: float, rng: random.Random) -> GameState:
    if state.crypto_per_second <= 0:
        return state
    return achievements.check_achievements(replace(
        state, crypto=state.crypto + state.crypto_per_second * MANUAL_MINE_SECONDS,
    ))


def _claim_achievement(state: GameState, action: ClaimAchievement, now: float, rng: random.Random) -> GameState:
    return achievements.claim(state, action.achievement_id, action.allow_repeat)


def prestige_bonus(state: GameState) -> float:
    return math.log10(state.data + 1) * PRESTIGE_SCALE


def _prestige(state: GameState, action: Prestige, now: float, rng: random.Random) -> GameState:
    new_state = replace(
        initial_state(now),
        prestige_level=state.prestige_level + 1,
        prestige_multiplier=state.prestige_multiplier + prestige_bonus(state),
        achievements=state.achievements,
    )
    # claimed rewards carry over onto the reset rates
    for achievement in state.achievements:
        if achievement.claimed:
            new_state = achievements.apply_reward(new_state, achievement)
    return new_state


def _reset(state: GameState, action: ResetGame, now: float, rng: random.Random) -> GameState:
    return initial_state(now)


def _switch_server(state: GameState, action: SwitchServer, now: float, rng: random.Random) -> GameState:
    return servers.switch(state, action.server_id)


def _discover_server(state: GameState, action: DiscoverServer, now: float, rng: random.Random) -> GameState:
    return servers.discover(state, action.server_id)


def _scan(state: GameState, action: ScanNetwork, now: float, rng: random.Random) -> GameState:
    return servers.scan(state, now, rng)


def _secure(state: GameState, action: SecureServer, now: float, rng: random.Random) -> GameState:
    return servers.secure(state, action.server_id)


def _server_security(state: GameState, action: UpdateServerSecurity, now: float, rng: random.Random) -> GameState:
    return servers.adjust_security(state, action.server_id, action.delta)


def _trigger_attack(state: GameState, action: TriggerAttack, now: float, rng: random.Random) -> GameState:
    return attacks.trigger(state, action.server_id, now, rng)


def _resolve_attack(state: GameState, action: ResolveAttack, now: float, rng: random.Random) -> GameState:
    return _unless_same(state, attacks.resolve(state, action.attack_id))


def _expire_attack(state: GameState, action: ExpireAttack, now: float, rng: random.Random) -> GameState:
    return attacks.expire(state, action.attack_id)


def _start_mission(state: GameState, action: StartMission, now: float, rng: random.Random) -> GameState:
    return missions.start(state, action.mission_id, now)


def _mission_progress(state: GameState, action: UpdateMissionProgress, now: float, rng: random.Random) -> GameState:
    return missions.update_progress(state, action.mission_id, action.objective_id, action.progress)


def _complete_mission(state: GameState, action: CompleteMission, now: float, rng: random.Random) -> GameState:
    return missions.complete(state, action.mission_id)


def _fail_mission(state: GameState, action: FailMission, now: float, rng: random.Random) -> GameState:
    return missions.fail(state, action.mission_id)


def _claim_mission(state: GameState, action: ClaimMissionRewards, now: float, rng: random.Random) -> GameState:
    return _unless_same(state, missions.claim_rewards(state, action.mission_id))


def _generate_mission(state: GameState, action: GenerateMission, now: float, rng: random.Random) -> GameState:
    mission = missions.generate_mission(state, now, rng, action.mission_type)
    return replace(state, missions=state.missions + [mission])


def _trigger_event(state: GameState, action: TriggerDynamicEvent, now: float, rng: random.Random) -> GameState:
    return events.add(state, action.event)


def _resolve_event(state: GameState, action: ResolveDynamicEvent, now: float, rng: random.Random) -> GameState:
    return _unless_same(state, events.resolve(state, action.event_id))


_HANDLERS: Dict[Type, Handler] = {
    Click: _click,
    ClickBonus: _click_bonus,
    ActivateBonus: _activate_bonus,
    BuyUpgrade: _buy_upgrade,
    UpdateIdleProgress: _idle,
    ManualHack: _manual_hack,
    ManualMine: _manual_mine,
    ClaimAchievement: _claim_achievement,
    Prestige: _prestige,
    ResetGame: _reset,
    SwitchServer: _switch_server,
    DiscoverServer: _discover_server,
    ScanNetwork: _scan,
    SecureServer: _secure,
    UpdateServerSecurity: _server_security,
    TriggerAttack: _trigger_attack,
    ResolveAttack: _resolve_attack,
    ExpireAttack: _expire_attack,
    StartMission: _start_mission,
    UpdateMissionProgress: _mission_progress,
    CompleteMission: _complete_mission,
    FailMission: _fail_mission,
    ClaimMissionRewards: _claim_mission,
    GenerateMission: _generate_mission,
    TriggerDynamicEvent: _trigger_event,
    ResolveDynamicEvent: _resolve_event,
}


def reduce(state: GameState, action: Action, now: float, rng: random.Random) -> GameState:
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"unknown action: {action!r}")
    return handler(state, action, now, rng)

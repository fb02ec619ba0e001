from __future__ import annotations

from dataclasses import replace
from typing import Optional

from digital_matrix.state import MAX_CRITICAL_CHANCE, GameState, upgrades_purchased
from digital_matrix.types import Achievement


def find_achievement(state: GameState, achievement_id: str) -> Optional[Achievement]:
    for achievement in state.achievements:
        if achievement.id == achievement_id:
            return achievement
    return None


def condition_value(state: GameState, condition: str) -> float:
    if condition == "clicks":
        return state.total_clicks
    if condition == "data":
        return state.data
    if condition == "crypto":
        return state.crypto
    if condition == "processingPower":
        return state.processing_power
    if condition == "upgrades":
        return upgrades_purchased(state)
    return 0.0


def check_achievements(state: GameState) -> GameState:
    """Unlock every locked achievement whose condition is now met. Never re-locks."""
    changed = False
    achievements = []
    for achievement in state.achievements:
        if not achievement.unlocked and condition_value(state, achievement.condition) >= achievement.threshold:
            achievement = replace(achievement, unlocked=True)
            changed = True
        achievements.append(achievement)
    if not changed:
        return state
    return replace(state, achievements=achievements)


def apply_reward(state: GameState, achievement: Achievement) -> GameState:
    reward = achievement.reward
    if reward.type == "dataMultiplier":
        return replace(
            state,
            data_per_click=state.data_per_click * reward.value,
            data_per_second=state.data_per_second * reward.value,
        )
    if reward.type == "cryptoMultiplier":
        return replace(state, crypto_per_second=state.crypto_per_second * reward.value)
    if reward.type == "processingMultiplier":
        return replace(state, processing_power=state.processing_power * reward.value)
    if reward.type == "criticalChance":
        return replace(state, critical_chance=min(MAX_CRITICAL_CHANCE, state.critical_chance + reward.value))
    return state


def claim(state: GameState, achievement_id: str, allow_repeat: bool = False) -> GameState:
    """Apply the reward of an unlocked achievement.

    Rewards are granted once and the achievement is marked ``claimed``;
    ``allow_repeat`` re-applies the reward on every claim.
    """
    achievement = find_achievement(state, achievement_id)
    if achievement is None or not achievement.unlocked:
        return state
    if achievement.claimed and not allow_repeat:
        return state
    new_state = apply_reward(state, achievement)
    achievements = [
        replace(a, claimed=True) if a.id == achievement_id else a for a in state.achievements
    ]
    return replace(new_state, achievements=achievements)

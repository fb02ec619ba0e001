"""Upgrade economics: cost curve, visibility, purchase and effect application.

Cost of the next level: base_cost * cost_multiplier ** level.
max_level == 0 means the upgrade never caps.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from digital_matrix.state import MAX_CRITICAL_CHANCE, GameState
from digital_matrix.types import Upgrade


def find_upgrade(state: GameState, upgrade_id: str) -> Optional[Upgrade]:
    for upgrade in state.upgrades:
        if upgrade.id == upgrade_id:
            return upgrade
    return None


def get_cost(upgrade: Upgrade, level: Optional[int] = None) -> float:
    lvl = upgrade.level if level is None else level
    return upgrade.base_cost * (upgrade.cost_multiplier ** lvl)


def is_maxed(upgrade: Upgrade) -> bool:
    return upgrade.max_level > 0 and upgrade.level >= upgrade.max_level


def is_visible(upgrade: Upgrade, state: GameState) -> bool:
    """Unlocked, or any of its resource thresholds is currently met."""
    if upgrade.is_unlocked:
        return True
    if upgrade.visible_at_data is not None and state.data >= upgrade.visible_at_data:
        return True
    if upgrade.visible_at_crypto is not None and state.crypto >= upgrade.visible_at_crypto:
        return True
    if (upgrade.visible_at_processing_power is not None
            and state.processing_power >= upgrade.visible_at_processing_power):
        return True
    return False


def can_purchase(state: GameState, upgrade: Upgrade) -> bool:
    if not is_visible(upgrade, state):
        return False
    if is_maxed(upgrade):
        return False
    return state.data >= get_cost(upgrade)


def unlock_visible(upgrades: List[Upgrade], state: GameState) -> List[Upgrade]:
    """Permanently unlock every upgrade whose threshold ``state`` meets."""
    return [
        replace(u, is_unlocked=True) if not u.is_unlocked and is_visible(u, state) else u
        for u in upgrades
    ]


def apply_effect(state: GameState, upgrade: Upgrade) -> GameState:
    """Apply one level of ``upgrade`` to the rates it drives."""
    value = upgrade.effect_value
    effect = upgrade.effect
    if effect == "dataPerClick":
        return replace(
            state,
            data_per_click=state.data_per_click + value,
            falling_bits_per_click=state.falling_bits_per_click + 1,
        )
    if effect == "dataPerSecond":
        return replace(state, data_per_second=state.data_per_second + value)
    if effect == "cryptoPerSecond":
        return replace(state, crypto_per_second=state.crypto_per_second + value)
    if effect == "processingMultiplier":
        # Additive to processing power, but compounds the passive rates.
        return replace(
            state,
            processing_power=state.processing_power + value,
            falling_bits_per_click=state.falling_bits_per_click + value * 2,
            data_per_second=state.data_per_second * (1 + value),
            crypto_per_second=state.crypto_per_second * (1 + value),
        )
    if effect == "criticalChance":
        return replace(state, critical_chance=min(MAX_CRITICAL_CHANCE, state.critical_chance + value))
    if effect == "criticalMultiplier":
        return replace(state, critical_multiplier=state.critical_multiplier + value)
    if effect == "hackingSkill":
        return replace(state, hacking_skill=state.hacking_skill + value)
    return state


def purchase(state: GameState, upgrade_id: str) -> GameState:
    """Buy one level of ``upgrade_id``. Returns ``state`` itself if the purchase is not possible."""
    upgrade = find_upgrade(state, upgrade_id)
    if upgrade is None or not can_purchase(state, upgrade):
        return state
    cost = get_cost(upgrade)
    bought = replace(upgrade, level=upgrade.level + 1, is_unlocked=True)
    upgrades = [bought if u.id == upgrade_id else u for u in state.upgrades]
    # Visibility is judged on the balance the player held when buying.
    upgrades = unlock_visible(upgrades, state)
    new_state = replace(state, data=state.data - cost, upgrades=upgrades)
    return apply_effect(new_state, upgrade)


def processing_rate(state: GameState) -> float:
    """Processing power generated per second by processingMultiplier upgrades."""
    return sum(u.effect_value * u.level for u in state.upgrades if u.effect == "processingMultiplier")

from __future__ import annotations

import math
import random
from dataclasses import replace
from typing import Optional

from digital_matrix.state import GameState
from digital_matrix.types import DynamicEvent, EventReward

REWARD_FIELDS = {
    "data": "data",
    "crypto": "crypto",
    "processing_power": "processing_power",
    "hacking_skill": "hacking_skill",
}


def generate_event(state: GameState, now: float, rng: random.Random) -> DynamicEvent:
    suffix = f"{int(now)}_{rng.randrange(1000)}"
    if rng.random() < 0.5:
        return DynamicEvent(
            id=f"insider-{suffix}",
            name="Insider Info",
            description=("An insider leaks confidential data. Resolve this event to gain a "
                         "temporary boost in resource generation."),
            reward=EventReward("data", max(1, math.floor(state.data_per_second * 500)), "Insider Bonus Data"),
        )
    return DynamicEvent(
        id=f"security-{suffix}",
        name="Security Breach",
        description=("A security breach is detected in your system. Quickly resolve the threat to "
                     "prevent major losses and gain a hacking skill boost."),
        reward=EventReward("hacking_skill", 1, "Hacking Skill Boost from Security Breach"),
    )


def find_event(state: GameState, event_id: str) -> Optional[DynamicEvent]:
    for event in state.dynamic_events:
        if event.id == event_id:
            return event
    return None


def pending_events(state: GameState) -> list:
    return [e for e in state.dynamic_events if not e.resolved]


def add(state: GameState, event: DynamicEvent) -> GameState:
    if find_event(state, event.id) is not None:
        return state
    return replace(state, dynamic_events=state.dynamic_events + [event])


def resolve(state: GameState, event_id: str) -> GameState:
    event = find_event(state, event_id)
    if event is None or event.resolved:
        return state
    resolved = replace(
        state,
        dynamic_events=[replace(e, resolved=True) if e.id == event_id else e for e in state.dynamic_events],
    )
    reward = event.reward
    if reward is None or reward.type not in REWARD_FIELDS:
        return resolved
    field_name = REWARD_FIELDS[reward.type]
    return replace(resolved, **{field_name: getattr(resolved, field_name) + reward.amount})

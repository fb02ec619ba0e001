"""Missions: procedural generation and the available -> active -> completed/failed lifecycle."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple

from digital_matrix.state import GameState
from digital_matrix.types import Mission, MissionObjective, MissionRequirement, MissionReward

REWARD_SCALING: Dict[str, float] = {
    "tutorial": 1,
    "easy": 1.5,
    "medium": 2.5,
    "hard": 4,
    "expert": 6,
    "legendary": 10,
}

RARITY_CHANCES: Dict[str, List[Tuple[str, float]]] = {
    "tutorial": [("common", 1.0)],
    "easy": [("common", 0.8), ("uncommon", 0.2)],
    "medium": [("common", 0.6), ("uncommon", 0.3), ("rare", 0.1)],
    "hard": [("uncommon", 0.5), ("rare", 0.4), ("epic", 0.1)],
    "expert": [("rare", 0.6), ("epic", 0.3), ("legendary", 0.1)],
    "legendary": [("epic", 0.7), ("legendary", 0.3)],
}

# Reward kinds that map onto a GameState field; the rest are cosmetic.
REWARD_FIELDS: Dict[str, str] = {
    "data": "data",
    "crypto": "crypto",
    "processing_power": "processing_power",
    "hacking_skill": "hacking_skill",
    "network_influence": "network_nodes",
    "experience": "reputation",
}


@dataclass(frozen=True)
class MissionTemplate:
    difficulty: str
    objective_count: Tuple[int, int]
    reward_count: Tuple[int, int]
    time_limit: Optional[Tuple[int, int]] = None  # seconds


MISSION_TEMPLATES: Dict[str, MissionTemplate] = {
    "story": MissionTemplate("medium", (2, 4), (2, 3)),
    "challenge": MissionTemplate("hard", (3, 5), (2, 4), (300, 900)),
    "daily": MissionTemplate("easy", (1, 2), (1, 2), (43200, 86400)),
    "side": MissionTemplate("easy", (1, 3), (1, 2)),
    "event": MissionTemplate("medium", (1, 2), (1, 2)),
    "chain": MissionTemplate("hard", (2, 4), (2, 3), (300, 900)),
    "special": MissionTemplate("legendary", (3, 5), (3, 5), (600, 1200)),
}

ObjectiveFactory = Callable[[GameState, random.Random], Tuple[float, str]]

OBJECTIVE_TEMPLATES: Dict[str, ObjectiveFactory] = {
    "collect_data": lambda s, r: (math.floor(s.data_per_second * 3600 * (1 + r.random())),
                                  "Collect {target} bytes of data"),
    "mine_crypto": lambda s, r: (math.floor(s.crypto_per_second * 1800 * (1 + r.random())),
                                 "Mine {target} cryptocurrency"),
    "hack_server": lambda s, r: (1, "Successfully hack a server with minimum security level {target}"),
    "secure_network": lambda s, r: (1, "Secure the network with encryption level {target}"),
    "decrypt_file": lambda s, r: (1, "Decrypt secured file of level {target}"),
    "run_command": lambda s, r: (1, "Execute command with parameter {target}"),
    "resolve_attack": lambda s, r: (1, "Resolve the network attack with threshold {target}"),
    "upgrade_purchase": lambda s, r: (1, "Purchase an upgrade when condition {target} is met"),
    "achieve_processing": lambda s, r: (1, "Achieve processing power milestone of {target}"),
    "defend_network": lambda s, r: (1, "Defend the network against threats requiring {target} defense"),
    "decrypt_data": lambda s, r: (1, "Decrypt secured data of level {target}"),
    "solve_puzzle": lambda s, r: (1, "Solve a challenging puzzle with difficulty {target}"),
    "complete_minigame": lambda s, r: (1, "Complete the minigame challenge with target score {target}"),
    "maintain_uptime": lambda s, r: (1, "Maintain system uptime above {target}%"),
    "chain_attacks": lambda s, r: (1, "Chain multiple attacks successfully with target count {target}"),
    "analyze_code": lambda s, r: (1, "Analyze code segments to find vulnerabilities with threshold {target}"),
    "hack": lambda s, r: (1, "Hack into a system with difficulty level {target}"),
    "collect": lambda s, r: (math.floor(s.data_per_second * 1800 * (1 + r.random())),
                             "Collect {target} resources"),
    "defend": lambda s, r: (1, "Defend against {target} security threats"),
    "analyze": lambda s, r: (1, "Analyze {target} data samples"),
}

GENERATED_REWARD_TYPES = (
    "data",
    "crypto",
    "processing_power",
    "hacking_skill",
    "special_upgrade",
    "skill_tree_point",
)

NAME_PREFIXES: Dict[str, List[str]] = {
    "story": ["Operation", "Mission", "Project"],
    "challenge": ["Critical", "Urgent", "High-Priority", "Classified"],
    "daily": ["Daily", "Routine", "Standard"],
    "side": ["Side", "Optional", "Supplementary"],
    "event": ["Event", "Special", "Occasion"],
    "chain": ["Chain", "Sequence", "Series"],
    "special": ["Special", "Exclusive", "Unique"],
}

NAME_SUFFIXES: Dict[str, List[str]] = {
    "collect_data": ["Data Harvest", "Information Gathering", "Data Mining"],
    "hack_server": ["Server Breach", "System Infiltration", "Network Penetration"],
    "mine_crypto": ["Crypto Operation", "Blockchain Initiative", "Mining Operation"],
}


def _rand_between(rng: random.Random, bounds: Tuple[int, int]) -> int:
    return rng.randint(bounds[0], bounds[1])


def _unique_suffix(now: float, rng: random.Random) -> str:
    return f"{int(now)}_{rng.randrange(1000)}"


def calculate_rarity(difficulty: str, rng: random.Random) -> str:
    roll = rng.random()
    cumulative = 0.0
    for rarity, chance in RARITY_CHANCES.get(difficulty, [("common", 1.0)]):
        cumulative += chance
        if roll <= cumulative:
            return rarity
    return "common"


def generate_objectives(state: GameState, count: int, difficulty: str, now: float,
                        rng: random.Random) -> List[MissionObjective]:
    objectives = []
    kinds = list(OBJECTIVE_TEMPLATES)
    scale = REWARD_SCALING[difficulty]
    for i in range(count):
        kind = rng.choice(kinds)
        target, description = OBJECTIVE_TEMPLATES[kind](state, rng)
        # Zero production rates must not yield an objective that is already met.
        target = max(1, math.floor(target * scale))
        objectives.append(MissionObjective(
            id=f"obj_{i}_{_unique_suffix(now, rng)}",
            description=description.replace("{target}", str(target)),
            type=kind,
            target=target,
            optional=rng.random() > 0.8,
        ))
    return objectives


def generate_rewards(state: GameState, count: int, difficulty: str,
                     rng: random.Random) -> List[MissionReward]:
    rewards = []
    scale = REWARD_SCALING[difficulty]
    for _ in range(count):
        kind = rng.choice(GENERATED_REWARD_TYPES)
        if kind == "data":
            amount = math.floor(state.data_per_second * 7200 * scale)
            description = "Bonus Data"
        elif kind == "crypto":
            amount = math.floor(state.crypto_per_second * 3600 * scale)
            description = "Cryptocurrency Reward"
        elif kind == "processing_power":
            amount = math.floor(1 + rng.random() * 2 * scale)
            description = "Processing Power Boost"
        elif kind == "hacking_skill":
            amount = math.floor(1 + rng.random() * scale)
            description = "Hacking Skill Increase"
        else:
            amount = 1
            description = "Special Reward"
        rewards.append(MissionReward(
            type=kind,
            amount=max(1, amount),
            description=description,
            rarity=calculate_rarity(difficulty, rng),
        ))
    return rewards


def mission_name(mission_type: str, difficulty: str, objectives: List[MissionObjective],
                 rng: random.Random) -> Tuple[str, str]:
    prefix = rng.choice(NAME_PREFIXES.get(mission_type, ["Mission"]))
    main = objectives[0]
    suffix = rng.choice(NAME_SUFFIXES.get(main.type, ["Operation"]))
    more = " and more." if len(objectives) > 1 else "."
    description = (
        f"A {difficulty} difficulty mission requiring {len(objectives)} objectives. "
        f"{main.description}{more}"
    )
    return f"{prefix} {suffix}", description


def generate_mission(state: GameState, now: float, rng: random.Random,
                     mission_type: str = "challenge", difficulty: Optional[str] = None) -> Mission:
    template = MISSION_TEMPLATES.get(mission_type)
    if template is None:
        mission_type = "challenge"
        template = MISSION_TEMPLATES[mission_type]
    difficulty = difficulty if difficulty in REWARD_SCALING else template.difficulty

    objectives = generate_objectives(state, _rand_between(rng, template.objective_count), difficulty, now, rng)
    rewards = generate_rewards(state, _rand_between(rng, template.reward_count), difficulty, rng)
    name, description = mission_name(mission_type, difficulty, objectives, rng)
    scale = REWARD_SCALING[difficulty]
    return Mission(
        id=f"generated_{mission_type}_{_unique_suffix(now, rng)}",
        name=name,
        description=description,
        type=mission_type,
        difficulty=difficulty,
        objectives=objectives,
        rewards=rewards,
        requirements=MissionRequirement(
            player_level=max(1, math.floor(scale / 2)),
            hacking_skill=max(5, scale * 5),
        ),
        time_limit=_rand_between(rng, template.time_limit) if template.time_limit else None,
    )


def find_mission(state: GameState, mission_id: str) -> Optional[Mission]:
    for mission in state.missions:
        if mission.id == mission_id:
            return mission
    return None


def active_mission(state: GameState) -> Optional[Mission]:
    for mission in state.missions:
        if mission.status == "active":
            return mission
    return None


def _with_mission(state: GameState, updated: Mission) -> GameState:
    return replace(state, missions=[updated if m.id == updated.id else m for m in state.missions])


def requirements_met(state: GameState, mission: Mission) -> bool:
    req = mission.requirements
    return state.prestige_level >= req.player_level and state.hacking_skill >= req.hacking_skill


def start(state: GameState, mission_id: str, now: float) -> GameState:
    mission = find_mission(state, mission_id)
    if mission is None or mission.status != "available":
        return state
    if active_mission(state) is not None or not requirements_met(state, mission):
        return state
    return _with_mission(state, replace(mission, status="active", started_at=now))


def update_progress(state: GameState, mission_id: str, objective_id: str, progress: float) -> GameState:
    mission = find_mission(state, mission_id)
    if mission is None or mission.status != "active":
        return state
    objectives = []
    found = False
    for objective in mission.objectives:
        if objective.id == objective_id:
            objective = replace(objective, progress=progress, completed=objective.is_met(progress))
            found = True
        objectives.append(objective)
    if not found:
        return state
    return _with_mission(state, replace(mission, objectives=objectives))


def all_required_done(mission: Mission) -> bool:
    return all(o.completed for o in mission.objectives if not o.optional)


def complete(state: GameState, mission_id: str) -> GameState:
    mission = find_mission(state, mission_id)
    if mission is None or mission.status != "active" or not all_required_done(mission):
        return state
    return _with_mission(state, replace(mission, status="completed"))


def fail(state: GameState, mission_id: str) -> GameState:
    mission = find_mission(state, mission_id)
    if mission is None or mission.status != "active":
        return state
    return _with_mission(state, replace(mission, status="failed"))


def apply_rewards(state: GameState, rewards: List[MissionReward]) -> GameState:
    changes: Dict[str, float] = {}
    for reward in rewards:
        field_name = REWARD_FIELDS.get(reward.type)
        if field_name is None:
            continue
        changes[field_name] = changes.get(field_name, getattr(state, field_name)) + reward.amount
    if not changes:
        return state
    return replace(state, **changes)


def claim_rewards(state: GameState, mission_id: str) -> GameState:
    mission = find_mission(state, mission_id)
    if mission is None or mission.status != "completed" or mission.rewards_claimed:
        return state
    rewards = list(mission.rewards)
    rewards.extend(o.bonus_reward for o in mission.objectives if o.completed and o.bonus_reward)
    claimed = _with_mission(state, replace(mission, rewards_claimed=True))
    return apply_rewards(claimed, rewards)


def fail_expired(state: GameState, now: float) -> GameState:
    """Fail the active mission once its time limit has run out."""
    mission = active_mission(state)
    if mission is None or mission.time_limit is None or mission.started_at is None:
        return state
    if now <= mission.started_at + mission.time_limit * 1000:
        return state
    return _with_mission(state, replace(mission, status="failed"))

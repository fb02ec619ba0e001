from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class Upgrade:
    id: str
    name: str
    description: str
    base_cost: float
    cost_multiplier: float
    effect: str  # dataPerClick, dataPerSecond, cryptoPerSecond, processingMultiplier, criticalChance, criticalMultiplier, hackingSkill
    effect_value: float
    level: int = 0
    max_level: int = 0  # 0 = uncapped
    is_unlocked: bool = False
    visible_at_data: Optional[float] = None
    visible_at_crypto: Optional[float] = None
    visible_at_processing_power: Optional[float] = None


@dataclass
class AchievementReward:
    type: str  # dataMultiplier, cryptoMultiplier, processingMultiplier, criticalChance
    value: float


@dataclass
class Achievement:
    id: str
    name: str
    description: str
    condition: str  # clicks, data, crypto, processingPower, upgrades
    threshold: float
    reward: AchievementReward
    unlocked: bool = False
    claimed: bool = False


@dataclass
class ResourceMultipliers:
    data: float = 1.0
    crypto: float = 1.0
    processing_power: float = 1.0


@dataclass
class ServerUnlock:
    """Thresholds a locked server needs before scans can find it. None = no requirement."""
    hacking_skill: Optional[float] = None
    data: Optional[float] = None
    crypto: Optional[float] = None


@dataclass
class Server:
    id: str
    name: str
    description: str
    icon: str
    difficulty: int
    security_level: float = 0.0
    max_security_level: float = 100.0
    resource_multipliers: ResourceMultipliers = field(default_factory=ResourceMultipliers)
    is_unlocked: bool = False
    discovery_chance: float = 0.0  # percent
    unlocks_at: ServerUnlock = field(default_factory=ServerUnlock)


@dataclass
class ResourceDrain:
    """Per-second losses while an attack is live."""
    data: float = 0.0
    crypto: float = 0.0
    processing_power: float = 0.0


@dataclass
class AttackDefense:
    required_data: float = 0.0
    required_processing_power: float = 0.0
    required_hacking_skill: float = 0.0


@dataclass
class NetworkAttack:
    id: str
    name: str
    description: str
    server_id: str
    severity: str  # low, medium, high, critical
    security_impact: float  # security points per minute
    resource_drain: ResourceDrain
    defense: AttackDefense
    time_started: float
    duration: float  # ms
    impact_score: float = 0.0
    resolved: bool = False

    def expires_at(self) -> float:
        return self.time_started + self.duration

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkAttack":
        drain = data.get("resource_drain", {})
        defense = data.get("defense", {})
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description", ""),
            server_id=str(data["server_id"]),
            severity=data.get("severity", "low"),
            security_impact=float(data.get("security_impact", 0.0)),
            resource_drain=ResourceDrain(
                data=float(drain.get("data", 0.0)),
                crypto=float(drain.get("crypto", 0.0)),
                processing_power=float(drain.get("processing_power", 0.0)),
            ),
            defense=AttackDefense(
                required_data=float(defense.get("required_data", 0.0)),
                required_processing_power=float(defense.get("required_processing_power", 0.0)),
                required_hacking_skill=float(defense.get("required_hacking_skill", 0.0)),
            ),
            time_started=float(data["time_started"]),
            duration=float(data["duration"]),
            impact_score=float(data.get("impact_score", 0.0)),
            resolved=bool(data.get("resolved", False)),
        )


@dataclass
class MissionReward:
    type: str
    amount: float
    description: str = ""
    rarity: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MissionReward":
        return cls(
            type=data["type"],
            amount=float(data.get("amount", 0.0)),
            description=data.get("description", ""),
            rarity=data.get("rarity"),
        )


@dataclass
class MissionObjective:
    id: str
    description: str
    type: str
    target: Union[float, str]  # numeric goal or an opaque token
    progress: float = 0.0
    completed: bool = False
    optional: bool = False
    bonus_reward: Optional[MissionReward] = None

    def is_met(self, progress: float) -> bool:
        if isinstance(self.target, str):
            return progress >= 1
        return progress >= self.target

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MissionObjective":
        target = data["target"]
        if not isinstance(target, str):
            target = float(target)
        bonus = data.get("bonus_reward")
        return cls(
            id=str(data["id"]),
            description=data.get("description", ""),
            type=data.get("type", ""),
            target=target,
            progress=float(data.get("progress", 0.0)),
            completed=bool(data.get("completed", False)),
            optional=bool(data.get("optional", False)),
            bonus_reward=MissionReward.from_dict(bonus) if bonus else None,
        )


@dataclass
class MissionRequirement:
    player_level: int = 0
    hacking_skill: float = 0.0


@dataclass
class Mission:
    id: str
    name: str
    description: str
    type: str
    difficulty: str
    objectives: List[MissionObjective]
    rewards: List[MissionReward]
    requirements: MissionRequirement = field(default_factory=MissionRequirement)
    status: str = "available"  # available -> active -> completed | failed
    time_limit: Optional[float] = None  # seconds
    started_at: Optional[float] = None
    rewards_claimed: bool = False
    story: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Mission":
        req = data.get("requirements", {})
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description", ""),
            type=data.get("type", "side"),
            difficulty=data.get("difficulty", "easy"),
            objectives=[MissionObjective.from_dict(o) for o in data.get("objectives", [])],
            rewards=[MissionReward.from_dict(r) for r in data.get("rewards", [])],
            requirements=MissionRequirement(
                player_level=int(req.get("player_level", 0)),
                hacking_skill=float(req.get("hacking_skill", 0.0)),
            ),
            status=data.get("status", "available"),
            time_limit=data.get("time_limit"),
            started_at=data.get("started_at"),
            rewards_claimed=bool(data.get("rewards_claimed", False)),
            story=list(data.get("story", [])),
        )


@dataclass
class EventReward:
    type: str  # data, crypto, processing_power, hacking_skill
    amount: float
    description: str = ""


@dataclass
class DynamicEvent:
    id: str
    name: str
    description: str
    reward: Optional[EventReward] = None
    resolved: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DynamicEvent":
        reward = data.get("reward")
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description", ""),
            reward=EventReward(
                type=reward["type"],
                amount=float(reward.get("amount", 0.0)),
                description=reward.get("description", ""),
            ) if reward else None,
            resolved=bool(data.get("resolved", False)),
        )

"""The closed set of actions the reducer accepts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from digital_matrix.types import DynamicEvent


@dataclass(frozen=True)
class Click:
    pass


@dataclass(frozen=True)
class ClickBonus:
    multiplier: float


@dataclass(frozen=True)
class ActivateBonus:
    duration: float  # ms
    multiplier: float


@dataclass(frozen=True)
class BuyUpgrade:
    upgrade_id: str


@dataclass(frozen=True)
class UpdateIdleProgress:
    elapsed_ms: float


@dataclass(frozen=True)
class ManualHack:
    target: str


@dataclass(frozen=True)
class ManualMine:
    pass


@dataclass(frozen=True)
class ClaimAchievement:
    achievement_id: str
    allow_repeat: bool = False


@dataclass(frozen=True)
class Prestige:
    pass


@dataclass(frozen=True)
class ResetGame:
    pass


@dataclass(frozen=True)
class SwitchServer:
    server_id: str


@dataclass(frozen=True)
class DiscoverServer:
    server_id: str


@dataclass(frozen=True)
class ScanNetwork:
    pass


@dataclass(frozen=True)
class SecureServer:
    server_id: str


@dataclass(frozen=True)
class UpdateServerSecurity:
    server_id: str
    delta: float


@dataclass(frozen=True)
class TriggerAttack:
    server_id: str


@dataclass(frozen=True)
class ResolveAttack:
    attack_id: str


@dataclass(frozen=True)
class ExpireAttack:
    attack_id: str


@dataclass(frozen=True)
class StartMission:
    mission_id: str


@dataclass(frozen=True)
class UpdateMissionProgress:
    mission_id: str
    objective_id: str
    progress: float


@dataclass(frozen=True)
class CompleteMission:
    mission_id: str


@dataclass(frozen=True)
class FailMission:
    mission_id: str


@dataclass(frozen=True)
class ClaimMissionRewards:
    mission_id: str


@dataclass(frozen=True)
class GenerateMission:
    mission_type: str = "challenge"


@dataclass(frozen=True)
class TriggerDynamicEvent:
    event: DynamicEvent


@dataclass(frozen=True)
class ResolveDynamicEvent:
    event_id: str


Action = Union[
    Click, ClickBonus, ActivateBonus, BuyUpgrade, UpdateIdleProgress, ManualHack, ManualMine,
    ClaimAchievement, Prestige, ResetGame, SwitchServer, DiscoverServer, ScanNetwork, SecureServer,
    UpdateServerSecurity, TriggerAttack, ResolveAttack, ExpireAttack, StartMission,
    UpdateMissionProgress, CompleteMission, FailMission, ClaimMissionRewards, GenerateMission,
    TriggerDynamicEvent, ResolveDynamicEvent,
]

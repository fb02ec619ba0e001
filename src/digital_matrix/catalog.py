"""Static content tables: upgrades, achievements, servers, attack archetypes, missions.

Every accessor returns freshly built records so callers may hold on to them
without sharing instances with the templates.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from digital_matrix.types import (
    Achievement,
    AchievementReward,
    Mission,
    MissionObjective,
    MissionRequirement,
    MissionReward,
    ResourceMultipliers,
    Server,
    ServerUnlock,
    Upgrade,
)


HOME_SERVER_ID = "home"

# Base data reward per hack target; also the terminal's processing-power gate.
HACK_REWARDS: Dict[str, float] = {
    "network": 10,
    "database": 50,
    "server": 200,
    "mainframe": 1000,
}
DEFAULT_HACK_REWARD = 10.0


def initial_upgrades() -> List[Upgrade]:
    return [
        Upgrade("basic_script", "Basic Data Scraper",
                "Automatically collects data from public sources.",
                base_cost=10, cost_multiplier=1.15, effect="dataPerSecond", effect_value=0.1,
                max_level=0, is_unlocked=True, visible_at_data=0),
        Upgrade("advanced_script", "Advanced Algorithm",
                "An improved script that collects data more efficiently.",
                base_cost=50, cost_multiplier=1.15, effect="dataPerSecond", effect_value=0.5,
                max_level=0, visible_at_data=30),
        Upgrade("cpu_upgrade", "CPU Upgrade",
                "Increases the amount of data collected per click.",
                base_cost=30, cost_multiplier=1.2, effect="dataPerClick", effect_value=1,
                max_level=10, is_unlocked=True, visible_at_data=0),
        Upgrade("mining_software", "Crypto Mining Software",
                "Begin mining cryptocurrency on your system.",
                base_cost=100, cost_multiplier=1.3, effect="cryptoPerSecond", effect_value=0.01,
                max_level=0, visible_at_data=75),
        Upgrade("optimization_tools", "System Optimization",
                "Optimize your system to process data more efficiently.",
                base_cost=200, cost_multiplier=1.5, effect="processingMultiplier", effect_value=0.1,
                max_level=5, visible_at_data=150),
        Upgrade("critical_chance", "Critical Analysis",
                "Increases chance for critical clicks that give 2x data.",
                base_cost=500, cost_multiplier=2.0, effect="criticalChance", effect_value=0.05,
                max_level=5, visible_at_data=300),
        Upgrade("critical_power", "Critical Power",
                "Increases the multiplier for critical clicks.",
                base_cost=1000, cost_multiplier=2.5, effect="criticalMultiplier", effect_value=0.5,
                max_level=5, visible_at_data=800),
        Upgrade("hacking_skills", "Hacking Skills",
                "Improves your ability to hack systems for bonus data.",
                base_cost=2000, cost_multiplier=2.0, effect="hackingSkill", effect_value=1,
                max_level=10, visible_at_data=1500),
    ]


def initial_achievements() -> List[Achievement]:
    return [
        Achievement("first_clicks", "First Steps", "Click 10 times",
                    "clicks", 10, AchievementReward("dataMultiplier", 1.1)),
        Achievement("click_master", "Click Master", "Click 100 times",
                    "clicks", 100, AchievementReward("dataMultiplier", 1.2)),
        Achievement("click_grandmaster", "Click Grandmaster", "Click 1,000 times",
                    "clicks", 1000, AchievementReward("dataMultiplier", 1.5)),
        Achievement("data_collector", "Data Collector", "Collect 1,000 bytes of data",
                    "data", 1000, AchievementReward("processingMultiplier", 1.1)),
        Achievement("data_hoarder", "Data Hoarder", "Collect 1,000,000 bytes of data",
                    "data", 1000000, AchievementReward("processingMultiplier", 1.5)),
        Achievement("crypto_miner", "Crypto Miner", "Mine 1 crypto",
                    "crypto", 1, AchievementReward("cryptoMultiplier", 1.1)),
        Achievement("upgrade_enthusiast", "Upgrade Enthusiast", "Purchase 5 upgrades",
                    "upgrades", 5, AchievementReward("criticalChance", 0.05)),
    ]


def initial_servers() -> List[Server]:
    return [
        Server(HOME_SERVER_ID, "Home Terminal", "Your own rig. Nobody watches it but you.",
               icon="[~]", difficulty=1, is_unlocked=True, discovery_chance=100),
        Server("university", "University Network",
               "Underfunded campus infrastructure with plenty of idle compute.",
               icon="[U]", difficulty=2,
               resource_multipliers=ResourceMultipliers(data=1.5, crypto=1.0, processing_power=1.2),
               discovery_chance=40, unlocks_at=ServerUnlock(hacking_skill=1, data=500)),
        Server("corporate", "Corporate Intranet",
               "A mid-size company network stuffed with customer records.",
               icon="[C]", difficulty=3,
               resource_multipliers=ResourceMultipliers(data=2.0, crypto=1.5, processing_power=1.5),
               discovery_chance=25, unlocks_at=ServerUnlock(hacking_skill=3, data=5000)),
        Server("crypto_exchange", "Crypto Exchange",
               "Hot wallets and order books. Watched closely.",
               icon="[$]", difficulty=4,
               resource_multipliers=ResourceMultipliers(data=1.2, crypto=3.0, processing_power=1.0),
               discovery_chance=15, unlocks_at=ServerUnlock(hacking_skill=5, crypto=10)),
        Server("government", "Government Mainframe",
               "Classified archives behind layered defenses.",
               icon="[G]", difficulty=5,
               resource_multipliers=ResourceMultipliers(data=3.0, crypto=2.0, processing_power=2.5),
               discovery_chance=8, unlocks_at=ServerUnlock(hacking_skill=8, data=100000)),
    ]


@dataclass(frozen=True)
class AttackTemplate:
    name: str
    description: str
    security_impact: float
    drain: Tuple[float, float, float]  # data, crypto, processing power per second
    defense: Tuple[float, float, float]  # data, processing power, hacking skill


ATTACK_TEMPLATES: Tuple[AttackTemplate, ...] = (
    AttackTemplate("DDoS Flood",
                   "A botnet is saturating the uplink with junk traffic.",
                   3.0, (0.5, 0.0, 0.2), (100.0, 2.0, 0.0)),
    AttackTemplate("Packet Sniffer",
                   "Someone is siphoning traffic off the wire.",
                   2.0, (1.0, 0.001, 0.0), (150.0, 1.0, 1.0)),
    AttackTemplate("Ransomware",
                   "Files are being encrypted one directory at a time.",
                   6.0, (2.0, 0.01, 0.5), (500.0, 5.0, 2.0)),
    AttackTemplate("Rootkit Infiltration",
                   "A kernel-level implant is hiding in the process table.",
                   8.0, (1.5, 0.005, 1.0), (800.0, 8.0, 3.0)),
    AttackTemplate("Zero-Day Exploit",
                   "An unknown vulnerability is being actively exploited.",
                   12.0, (3.0, 0.02, 1.5), (1500.0, 12.0, 5.0)),
)


def initial_missions() -> List[Mission]:
    return [
        Mission(
            "M001", "Digital Footprints",
            "Trace and collect scattered data packets from a compromised server.",
            type="story", difficulty="easy", time_limit=300,
            objectives=[
                MissionObjective("OBJ1", "Collect 1000 data packets", "collect", 1000),
                MissionObjective("OBJ2", "Hack into 2 security nodes", "hack", 2),
            ],
            rewards=[
                MissionReward("data", 2000, "Data packets from the compromised server"),
                MissionReward("experience", 1000, "Experience points from the mission"),
            ],
            requirements=MissionRequirement(player_level=1, hacking_skill=5),
            story=[
                "ALERT: Unauthorized data breach detected in sector 7G",
                "Initial scan reveals scattered data packets of unknown origin",
                "Mission objective: Recover data before system purge",
                "WARNING: Security protocols active. Proceed with caution",
            ],
        ),
        Mission(
            "M002", "Firewall Breach",
            "Infiltrate a corporate network by bypassing their advanced firewall system.",
            type="story", difficulty="medium", time_limit=600,
            objectives=[
                MissionObjective("OBJ1", "Disable 3 firewall nodes", "hack", 3),
                MissionObjective("OBJ2", "Defend against counter-measures", "defend", 5),
                MissionObjective("OBJ3", "Analyze security patterns", "analyze", 1),
            ],
            rewards=[
                MissionReward("credits", 10000, "Credits from the mission"),
                MissionReward("data", 5000, "Data from the mission"),
                MissionReward("experience", 2500, "Experience points from the mission"),
                MissionReward("special_upgrade", 1, "Advanced Encryption Bypass", rarity="epic"),
            ],
            requirements=MissionRequirement(player_level=5, hacking_skill=15),
            story=[
                "TARGET IDENTIFIED: MegaCorp Firewall System v7.1",
                "Intelligence suggests critical vulnerability in node configuration",
                "Caution: Advanced counter-measure systems detected",
                "Objective: Extract network access protocols",
                "Note: System will alert security after detection",
            ],
        ),
        Mission(
            "M003", "Corporate Mainframe Breach",
            "Infiltrate the heavily guarded corporate mainframe while avoiding detection.",
            type="story", difficulty="hard", time_limit=1800,
            objectives=[
                MissionObjective("OBJ1", "Bypass the advanced firewall system", "hack", "corporate_firewall"),
                MissionObjective("OBJ2", "Extract confidential data packages", "collect", 50000),
                MissionObjective("OBJ3", "Defend against security systems", "defend", 10),
                MissionObjective("OBJ4", "Solve the quantum encryption puzzle", "solve_puzzle",
                                 "quantum_puzzle", optional=True,
                                 bonus_reward=MissionReward("rare_resource", 1, "Quantum Decryption Key",
                                                            rarity="epic")),
            ],
            rewards=[
                MissionReward("credits", 20000, "Credits from the mission"),
                MissionReward("data", 10000, "Data from the mission"),
                MissionReward("experience", 5000, "Experience points from the mission"),
                MissionReward("special_upgrade", 1, "Corporate Mainframe Access", rarity="legendary"),
            ],
            requirements=MissionRequirement(player_level=10, hacking_skill=20),
            story=[
                "TARGET IDENTIFIED: MegaCorp Mainframe System v9.2",
                "Intelligence suggests critical vulnerability in node configuration",
                "Caution: Advanced counter-measure systems detected",
                "Objective: Extract confidential data packages",
                "Note: System will alert security after detection",
            ],
        ),
    ]

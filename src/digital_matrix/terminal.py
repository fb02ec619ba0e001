"""Text command surface.

Each command reads the store's snapshot, decides what to say, and dispatches at
most the actions it names. All game rules stay in the reducer; the checks here
only pick the message shown to the player.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, List

from digital_matrix import achievements, attacks, events, missions, servers, upgrades
from digital_matrix.actions import (
    ActivateBonus,
    BuyUpgrade,
    ClaimAchievement,
    ClaimMissionRewards,
    CompleteMission,
    FailMission,
    ManualHack,
    ManualMine,
    Prestige,
    ResolveAttack,
    ResolveDynamicEvent,
    ScanNetwork,
    SecureServer,
    StartMission,
    SwitchServer,
)
from digital_matrix.catalog import HACK_REWARDS
from digital_matrix.formatters import format_compact_number, format_data_size, format_duration
from digital_matrix.reducer import prestige_bonus
from digital_matrix.save import export_save, import_save, save_game
from digital_matrix.state import current_server, find_server, is_bonus_active, unresolved_attacks, upgrades_purchased
from digital_matrix.store import GameStore
from digital_matrix.types import AchievementReward

HISTORY_LIMIT = 20
BONUS_MIN_PROCESSING = 50
BONUS_DURATION_MS = 30000
BONUS_MULTIPLIER_RANGE = (3, 7)
PROMPT = "> "

HELP_LINES = [
    "Available commands:",
    "- help: Shows this help message",
    "- status: Shows overall game status",
    "- clear: Clears the terminal",
    "- resources: Shows detailed resource information",
    "- upgrades: Lists available upgrades",
    "- buy [id]: Purchase an upgrade by ID",
    "- hack [target]: Attempt to hack a target",
    "- bonus: Activates a temporary bonus (if available)",
    "- mine: Manually mine some crypto",
    "- system: Display system information",
    "- stats: Display player statistics",
    "- achievements: List your achievements",
    "- claim [id]: Claim an achievement reward",
    "- prestige: Reset for permanent bonuses",
    "- critical: Show critical hit stats",
    "- server: Manage servers",
    "- attacks / defend [id]: Review and repel network attacks",
    "- missions / mission [start|fail|complete|claim] [id]: Mission control",
    "- events / resolve [id]: Dynamic events",
    "- save / export / import [code]: Persistence",
    "",
    "Type 'help [command]' for more information on a specific command.",
]

COMMAND_HELP: Dict[str, List[str]] = {
    "buy": [
        "Usage: buy [upgrade_id]",
        "Purchase an upgrade with the specified ID.",
        "Example: buy basic_script",
        "",
        "Use 'upgrades' command to see available upgrade IDs.",
    ],
    "hack": [
        "Usage: hack [target]",
        "Attempt to hack a specified target to gain resources.",
        "Targets: " + ", ".join(HACK_REWARDS),
        "",
        "Success depends on your processing power and hacking skill.",
    ],
    "claim": [
        "Usage: claim [achievement_id]",
        "Claims the reward for an unlocked achievement.",
        "Example: claim first_clicks",
    ],
    "prestige": [
        "Usage: prestige [confirm]",
        "Resets your progress but gives a permanent multiplier to all resource gains.",
        "",
        "WARNING: This will reset most of your progress!",
    ],
    "server": [
        "Server Management Commands:",
        "servers list - Show available servers",
        "servers status - Show current server status",
        "servers connect [server_id] - Connect to server",
        "servers scan - Scan for new servers",
        "servers secure - Reduce security level of current server",
    ],
}


def format_reward(reward: AchievementReward) -> str:
    if reward.type == "dataMultiplier":
        return f"{reward.value}x data production"
    if reward.type == "cryptoMultiplier":
        return f"{reward.value}x crypto production"
    if reward.type == "processingMultiplier":
        return f"{reward.value}x processing power"
    if reward.type == "criticalChance":
        return f"+{reward.value * 100:g}% critical chance"
    return f"{reward.value}x bonus"


class Terminal:
    def __init__(self, store: GameStore, save_path=None) -> None:
        self.store = store
        self.save_path = save_path
        self.history: List[str] = []
        self.lines: List[str] = []
        self._commands: Dict[str, Callable[[List[str]], List[str]]] = {
            "help": self._help,
            "status": self._status,
            "upgrades": self._upgrades,
            "resources": self._resources,
            "buy": self._buy,
            "hack": self._hack,
            "bonus": self._bonus,
            "mine": self._mine,
            "system": self._system,
            "stats": self._stats,
            "achievements": self._achievements,
            "claim": self._claim,
            "prestige": self._prestige,
            "critical": self._critical,
            "server": self._servers,
            "servers": self._servers,
            "attacks": self._attacks,
            "defend": self._defend,
            "missions": self._missions,
            "mission": self._mission,
            "events": self._events,
            "resolve": self._resolve,
            "save": self._save,
            "export": self._export,
            "import": self._import,
        }

    @property
    def state(self):
        return self.store.get_state()

    def execute(self, line: str) -> List[str]:
        """Run one command line and return the lines it printed."""
        raw = line.strip()
        if not raw:
            return []
        self.history = [raw] + self.history[:HISTORY_LIMIT - 1]
        parts = raw.split()
        name = parts[0].lower()
        # import codes are case sensitive
        args = parts[1:] if name == "import" else [p.lower() for p in parts[1:]]
        if name == "clear":
            self.lines = []
            return []
        handler = self._commands.get(name)
        if handler is None:
            output = ["Command not recognized. Type 'help' for available commands."]
        else:
            output = handler(args)
        self.lines.extend([PROMPT + raw] + output)
        return output

    def _help(self, args: List[str]) -> List[str]:
        if not args:
            return list(HELP_LINES)
        topic = "server" if args[0] == "servers" else args[0]
        return list(COMMAND_HELP.get(topic, [f"No detailed help available for '{args[0]}'."]))

    def _status(self, args: List[str]) -> List[str]:
        s = self.state
        now = self.store.clock()
        if is_bonus_active(s, now):
            bonus = f"Active Bonus: {s.bonus_multiplier:g}x (expires in {round((s.bonus_until - now) / 1000)}s)"
        else:
            bonus = "No active bonuses"
        return [
            "=== SYSTEM STATUS ===",
            f"Data: {format_data_size(s.data)} ({format_data_size(s.data_per_second)}/s)",
            f"Crypto: ₿{format_compact_number(s.crypto)} ({format_compact_number(s.crypto_per_second)}/s)",
            f"Processing Power: {format_compact_number(s.processing_power)} GHz",
            f"Total Clicks: {format_compact_number(s.total_clicks)}",
            bonus,
            "====================",
        ]

    def _upgrades(self, args: List[str]) -> List[str]:
        s = self.state
        visible = [u for u in s.upgrades if upgrades.is_visible(u, s)]
        if not visible:
            return ["No upgrades available yet. Keep collecting data!"]
        out = ["=== AVAILABLE UPGRADES ==="]
        for u in visible:
            cap = str(u.max_level) if u.max_level else "∞"
            cost = "MAXED" if upgrades.is_maxed(u) else format_data_size(upgrades.get_cost(u))
            out.append(f"[{u.id}] {u.name} (Lvl {u.level}/{cap}) - {u.description} - Cost: {cost}")
        out += ["", "Use 'buy [id]' to purchase an upgrade."]
        return out

    def _resources(self, args: List[str]) -> List[str]:
        s = self.state
        out = [
            "=== RESOURCES ===",
            f"Data: {format_data_size(s.data)}",
            f"Data per Click: {format_data_size(s.data_per_click)}",
            f"Data per Second: {format_data_size(s.data_per_second)}",
            "",
            f"Crypto: ₿{format_compact_number(s.crypto)}",
            f"Crypto per Second: ₿{format_compact_number(s.crypto_per_second)}",
            "",
            f"Processing Power: {format_compact_number(s.processing_power)} GHz",
        ]
        if s.network_nodes > 0:
            out.append(f"Network Nodes: {s.network_nodes:g}")
        if s.reputation != 0:
            out.append(f"Reputation: {s.reputation:+g}")
        out.append("=================")
        return out

    def _buy(self, args: List[str]) -> List[str]:
        if not args:
            return ["Usage: buy [upgrade_id]"]
        s = self.state
        upgrade = upgrades.find_upgrade(s, args[0])
        if upgrade is None or not upgrades.is_visible(upgrade, s):
            return [f"Upgrade '{args[0]}' not found or not unlocked yet."]
        if upgrades.is_maxed(upgrade):
            return [f"Upgrade '{upgrade.name}' is already at max level."]
        cost = upgrades.get_cost(upgrade)
        if s.data < cost:
            return [f"Not enough data to purchase this upgrade. Need {format_data_size(cost)}."]
        self.store.dispatch(BuyUpgrade(upgrade.id))
        return [f"Upgrade '{upgrade.name}' purchased successfully!"]

    def _hack(self, args: List[str]) -> List[str]:
        target = args[0] if args else None
        if target not in HACK_REWARDS:
            return ["Invalid target. Available targets:"] + [f"- {t}" for t in HACK_REWARDS]
        s = self.state
        remaining = s.last_hack_time + s.hack_cooldown - self.store.clock()
        if remaining > 0:
            return [f"Hack is on cooldown. Please wait {math.ceil(remaining / 1000)} seconds."]
        required = HACK_REWARDS[target]
        if s.processing_power < required:
            return [
                "Hack failed! Insufficient processing power.",
                f"Target '{target}' requires at least {required:g} GHz.",
                f"Current processing power: {format_compact_number(s.processing_power)} GHz.",
            ]
        before = s.data
        self.store.dispatch(ManualHack(target))
        gained = self.state.data - before
        return [
            f"Initiating hack against {target}...",
            "Bypassing security protocols...",
            f"Hack successful! Extracted {format_data_size(gained)} of data.",
        ]

    def _bonus(self, args: List[str]) -> List[str]:
        s = self.state
        now = self.store.clock()
        if is_bonus_active(s, now):
            return [f"A bonus is already active for {round((s.bonus_until - now) / 1000)} more seconds."]
        if s.processing_power < BONUS_MIN_PROCESSING:
            return [f"Insufficient processing power. Need at least {BONUS_MIN_PROCESSING} GHz."]
        multiplier = self.store.rng.randint(*BONUS_MULTIPLIER_RANGE)
        self.store.dispatch(ActivateBonus(BONUS_DURATION_MS, multiplier))
        return [f"Bonus activated! {multiplier}x multiplier for {BONUS_DURATION_MS // 1000} seconds."]

    def _mine(self, args: List[str]) -> List[str]:
        before = self.state.crypto
        if not self.store.dispatch(ManualMine()):
            return ["No crypto mining capability yet. Buy mining upgrades first."]
        return [f"Manual mining complete! Gained ₿{format_compact_number(self.state.crypto - before)}."]

    def _system(self, args: List[str]) -> List[str]:
        s = self.state
        if s.processing_power > 500:
            level = "Maximum"
        elif s.processing_power > 100:
            level = "Enhanced"
        else:
            level = "Basic"
        return [
            "=== SYSTEM INFORMATION ===",
            "OS: Matrix OS v3.14.15",
            "Kernel: cybr-1337",
            f"Uptime: {format_duration(self.store.clock() - s.last_timestamp)}",
            f"Connection: Secured through {max(1, int(s.network_nodes))} nodes",
            f"Security Level: {level}",
            "===========================",
        ]

    def _stats(self, args: List[str]) -> List[str]:
        s = self.state
        efficiency = min(100, math.floor(s.data_per_second / max(1, s.data_per_click) * 100))
        return [
            "=== PLAYER STATISTICS ===",
            f"Total Clicks: {format_compact_number(s.total_clicks)}",
            f"Upgrade Level: {upgrades_purchased(s)}",
            f"Hacking Skill: {s.hacking_skill:g}",
            f"Prestige Level: {s.prestige_level} ({s.prestige_multiplier:.2f}x)",
            f"Efficiency Rating: {efficiency}%",
            "==========================",
        ]

    def _achievements(self, args: List[str]) -> List[str]:
        items = self.state.achievements
        unlocked = [a for a in items if a.unlocked]
        out = ["=== ACHIEVEMENTS ===", f"Progress: {len(unlocked)}/{len(items)} unlocked", "", "UNLOCKED:"]
        for a in unlocked:
            mark = " (claimed)" if a.claimed else ""
            out.append(f"[{a.id}] {a.name}: {a.description} - Reward: {format_reward(a.reward)}{mark}")
        out += ["", "LOCKED:"]
        out += [f"{a.name}: {a.description} ({a.threshold:g} {a.condition} needed)" for a in items if not a.unlocked]
        out += ["", "Use 'claim [id]' to claim rewards from unlocked achievements."]
        return out

    def _claim(self, args: List[str]) -> List[str]:
        if not args:
            return ["Usage: claim [achievement_id]"]
        achievement = achievements.find_achievement(self.state, args[0])
        if achievement is None:
            return [f"Achievement '{args[0]}' not found."]
        if not achievement.unlocked:
            return [f"Achievement '{achievement.name}' is not unlocked yet."]
        if not self.store.dispatch(ClaimAchievement(achievement.id)):
            return [f"Achievement '{achievement.name}' was already claimed."]
        return [f"Achievement '{achievement.name}' claimed!", f"Reward: {format_reward(achievement.reward)}"]

    def _prestige(self, args: List[str]) -> List[str]:
        s = self.state
        if args and args[0] == "confirm":
            self.store.dispatch(Prestige())
            s = self.state
            return [
                "Prestige complete. Systems rebooted.",
                f"Prestige level: {s.prestige_level}",
                f"Multiplier: {s.prestige_multiplier:.2f}x",
            ]
        bonus = prestige_bonus(s)
        return [
            "=== PRESTIGE CONFIRMATION ===",
            "WARNING: This will reset most of your progress!",
            "",
            f"Current prestige level: {s.prestige_level}",
            f"Current multiplier: {s.prestige_multiplier:.2f}x",
            f"New multiplier: {s.prestige_multiplier + bonus:.2f}x ({bonus * 100:.1f}% increase)",
            "",
            "Type 'prestige confirm' to proceed.",
        ]

    def _critical(self, args: List[str]) -> List[str]:
        s = self.state
        return [
            "=== CRITICAL HIT STATS ===",
            f"Critical Chance: {s.critical_chance * 100:.1f}%",
            f"Critical Multiplier: {s.critical_multiplier:g}x",
            f"Critical Click Value: {format_data_size(s.data_per_click * s.critical_multiplier)}",
        ]

    def _servers(self, args: List[str]) -> List[str]:
        if not args:
            return list(COMMAND_HELP["server"])
        sub = args[0]
        s = self.state
        if sub == "list":
            out = ["Available Servers:", "----------------"]
            for server in s.servers:
                if server.is_unlocked:
                    mark = ">" if server.id == s.current_server_id else " "
                    out.append(f"{mark} [{server.id}] {server.name} ({server.icon}) - Security: "
                               f"{math.floor(server.security_level)}/{server.max_security_level:g}")
            hidden = sum(1 for server in s.servers if not server.is_unlocked)
            out.append(f"{hidden} undiscovered servers remaining" if hidden else "All servers discovered")
            return out
        if sub == "status":
            server = current_server(s)
            m = server.resource_multipliers
            return [
                f"Current Server: {server.name} ({server.icon})",
                f"Description: {server.description}",
                f"Security Level: {math.floor(server.security_level)}/{server.max_security_level:g}",
                f"Efficiency: {round(servers.security_penalty(server) * 100)}%",
                "Resource Multipliers:",
                f" - Data: x{m.data:.1f}",
                f" - Crypto: x{m.crypto:.1f}",
                f" - Processing: x{m.processing_power:.1f}",
            ]
        if sub == "connect":
            return self._connect(args[1:])
        if sub == "scan":
            return self._scan()
        if sub == "secure":
            return self._secure()
        return [f"Unknown server command: {sub}"]

    def _connect(self, args: List[str]) -> List[str]:
        if not args:
            return ["Please specify a server ID"]
        s = self.state
        target = find_server(s, args[0])
        if target is None:
            return [f"Server '{args[0]}' not found"]
        if not target.is_unlocked:
            return [f"Server '{target.name}' not accessible. Discover it first."]
        if target.id == s.current_server_id:
            return [f"Already connected to {target.name}"]
        self.store.dispatch(SwitchServer(target.id))
        return [
            f"Connected to {target.name}",
            f"Security Level: {math.floor(target.security_level)}/{target.max_security_level:g}",
        ]

    def _scan(self) -> List[str]:
        s = self.state
        remaining = s.last_hack_time + s.hack_cooldown - self.store.clock()
        if remaining > 0:
            return [f"Scanner cooling down. Try again in {math.ceil(remaining / 1000)} seconds."]
        candidates = servers.discoverable_servers(s)
        if not candidates:
            return ["No new servers detected with current capabilities."]
        self.store.dispatch(ScanNetwork())
        for server in candidates:
            found = find_server(self.state, server.id)
            if found is not None and found.is_unlocked:
                return [
                    f"New server discovered: {found.name} ({found.icon})",
                    f"Description: {found.description}",
                    f"Use 'servers connect {found.id}' to connect.",
                ]
        return [
            "Scan completed. No new servers found.",
            f"Detected {len(candidates)} potential servers.",
            "Try increasing your hacking skill or resources.",
        ]

    def _secure(self) -> List[str]:
        s = self.state
        server = current_server(s)
        if server.security_level <= 0:
            return [f"{server.name} is already fully secured."]
        data_cost, processing_cost = servers.secure_cost(server)
        if s.data < data_cost or s.processing_power < processing_cost:
            return [
                "Not enough resources to secure this server.",
                f"Required: {data_cost:g} data and {processing_cost:g} processing power.",
            ]
        self.store.dispatch(SecureServer(server.id))
        after = current_server(self.state)
        return [
            f"Security measures implemented on {server.name}.",
            f"New security level: {after.security_level:.1f}/{after.max_security_level:g}",
            f"Resources used: {data_cost:g} data, {processing_cost:g} processing power.",
        ]

    def _attacks(self, args: List[str]) -> List[str]:
        active = unresolved_attacks(self.state)
        if not active:
            return ["No active network attacks."]
        now = self.store.clock()
        out = ["=== ACTIVE ATTACKS ==="]
        for a in active:
            d = a.defense
            out.append(f"[{a.id}] {a.name} on {a.server_id} ({a.severity}) - "
                       f"{format_duration(max(0.0, a.expires_at() - now))} left")
            out.append(f"    defend with {format_data_size(d.required_data)}, "
                       f"{d.required_processing_power:g} GHz, skill {d.required_hacking_skill:g}")
        return out

    def _defend(self, args: List[str]) -> List[str]:
        if not args:
            return ["Usage: defend [attack_id]"]
        attack = attacks.find_attack(self.state, args[0])
        if attack is None or attack.resolved:
            return [f"No active attack '{args[0]}'."]
        if not self.store.dispatch(ResolveAttack(attack.id)):
            return ["Insufficient resources to repel this attack."]
        return [f"{attack.name} repelled."]

    def _missions(self, args: List[str]) -> List[str]:
        items = self.state.missions
        if not items:
            return ["No missions available."]
        out = ["=== MISSIONS ==="]
        for m in items:
            claimed = ", rewards claimed" if m.rewards_claimed else ""
            out.append(f"[{m.id}] {m.name} ({m.difficulty}, {m.status}{claimed})")
            for o in m.objectives:
                check = "x" if o.completed else " "
                extra = " (optional)" if o.optional else ""
                out.append(f"    [{check}] {o.description}{extra}")
        return out

    def _mission(self, args: List[str]) -> List[str]:
        actions = {
            "start": StartMission,
            "fail": FailMission,
            "complete": CompleteMission,
            "claim": ClaimMissionRewards,
        }
        if len(args) < 2 or args[0] not in actions:
            return ["Usage: mission [start|fail|complete|claim] [mission_id]"]
        mission = next((m for m in self.state.missions if m.id.lower() == args[1]), None)
        if mission is None:
            return [f"Mission '{args[1]}' not found."]
        if not self.store.dispatch(actions[args[0]](mission.id)):
            return [f"Cannot {args[0]} mission '{mission.name}' right now."]
        return [f"Mission '{mission.name}': {missions.find_mission(self.state, mission.id).status}."]

    def _events(self, args: List[str]) -> List[str]:
        pending = events.pending_events(self.state)
        if not pending:
            return ["No pending events."]
        return ["=== EVENTS ==="] + [f"[{e.id}] {e.name}: {e.description}" for e in pending]

    def _resolve(self, args: List[str]) -> List[str]:
        if not args:
            return ["Usage: resolve [event_id]"]
        event = events.find_event(self.state, args[0])
        if event is None or not self.store.dispatch(ResolveDynamicEvent(event.id)):
            return [f"No pending event '{args[0]}'."]
        reward = event.reward
        if reward is None:
            return [f"{event.name} resolved."]
        return [f"{event.name} resolved. +{format_compact_number(reward.amount)} {reward.type}."]

    def _save(self, args: List[str]) -> List[str]:
        if self.save_path is None:
            return ["No save location configured."]
        save_game(self.state, self.save_path)
        return [f"Game saved to {self.save_path}."]

    def _export(self, args: List[str]) -> List[str]:
        return ["Export code:", export_save(self.state)]

    def _import(self, args: List[str]) -> List[str]:
        if not args:
            return ["Usage: import [code]"]
        state = import_save(args[0])
        if state is None:
            return ["Import failed: invalid save code."]
        self.store.replace_state(state)
        return ["Save imported."]

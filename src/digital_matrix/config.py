from __future__ import annotations

from dataclasses import asdict, dataclass
import json
from pathlib import Path


def _data_dir() -> Path:
    return Path.home() / ".digital_matrix"


def default_config_path() -> Path:
    return _data_dir() / "config.json"


@dataclass
class GameConfig:
    # Driver cadence, seconds
    tick_interval: float = 0.1
    event_interval: float = 1.0
    autosave_interval: float = 60.0

    # Per event-interval probabilities
    event_chance: float = 0.05
    mission_chance: float = 0.01
    max_pending_events: int = 3

    save_path: str = str(_data_dir() / "save.json")

    def save_file(self) -> Path:
        return Path(self.save_path).expanduser()


def load_config(path: Path | None = None) -> GameConfig:
    if path is None:
        path = default_config_path()
    if not path.exists():
        return GameConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return GameConfig()
    try:
        return GameConfig(**data)
    except TypeError:
        return GameConfig()


def save_config(config: GameConfig, path: Path | None = None) -> None:
    if path is None:
        path = default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(config), indent=2), encoding="utf-8")

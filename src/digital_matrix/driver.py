"""Real-time driver around a GameStore.

Three independent asyncio tasks, each resolving to single dispatches:
  tick     every ``tick_interval``: UpdateIdleProgress(now - last_timestamp)
  events   every ``event_interval``: maybe a dynamic event, maybe a mission
  autosave every ``autosave_interval``: write the snapshot

Offline time since the last save is replayed as one idle tick, exactly once,
before the tick task starts.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from digital_matrix.actions import GenerateMission, TriggerDynamicEvent, UpdateIdleProgress
from digital_matrix.config import GameConfig
from digital_matrix.events import generate_event, pending_events
from digital_matrix.save import load_game, save_game
from digital_matrix.store import GameStore

log = logging.getLogger(__name__)


class GameDriver:
    def __init__(self, store: GameStore, config: Optional[GameConfig] = None,
                 save_path: Optional[Path] = None) -> None:
        self.store = store
        self.config = config if config is not None else GameConfig()
        self.save_path = save_path if save_path is not None else self.config.save_file()
        self._tasks: List[asyncio.Task] = []
        self._replayed = False

    @property
    def running(self) -> bool:
        return bool(self._tasks)

    def load(self) -> bool:
        """Swap in the saved snapshot if one exists. Returns True when a save was loaded."""
        state = load_game(self.save_path)
        if state is None:
            return False
        self.store.replace_state(state)
        return True

    def replay_offline(self) -> float:
        """Advance the store by the time elapsed since its watermark. Runs once per driver."""
        if self._replayed:
            return 0.0
        self._replayed = True
        elapsed = max(0.0, self.store.clock() - self.store.get_state().last_timestamp)
        if elapsed > 0:
            log.info("replaying %.1fs of offline progress", elapsed / 1000)
            self.store.dispatch(UpdateIdleProgress(elapsed))
        return elapsed

    def tick(self) -> None:
        elapsed = self.store.clock() - self.store.get_state().last_timestamp
        self.store.dispatch(UpdateIdleProgress(max(0.0, elapsed)))

    def roll_events(self) -> None:
        rng = self.store.rng
        state = self.store.get_state()
        if (len(pending_events(state)) < self.config.max_pending_events
                and rng.random() < self.config.event_chance):
            event = generate_event(state, self.store.clock(), rng)
            log.debug("dynamic event %s", event.id)
            self.store.dispatch(TriggerDynamicEvent(event))
        if rng.random() < self.config.mission_chance:
            self.store.dispatch(GenerateMission())

    def save(self) -> None:
        save_game(self.store.get_state(), self.save_path)

    async def _every(self, interval: float, step) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                step()
            except Exception:
                log.exception("%s failed", step.__name__)

    def start(self) -> None:
        if self._tasks:
            return
        self.replay_offline()
        self._tasks = [
            asyncio.create_task(self._every(self.config.tick_interval, self.tick)),
            asyncio.create_task(self._every(self.config.event_interval, self.roll_events)),
            asyncio.create_task(self._every(self.config.autosave_interval, self._autosave)),
        ]

    def _autosave(self) -> None:
        self.save()
        log.info("autosaved to %s", self.save_path)

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self.save()

from __future__ import annotations

import random
import time
from typing import Callable, List, Optional

from digital_matrix.actions import Action
from digital_matrix.reducer import reduce
from digital_matrix.state import GameState, initial_state

Listener = Callable[[GameState], None]


def wall_clock_ms() -> float:
    return time.time() * 1000.0


class GameStore:
    """Owns the current GameState; ``dispatch`` is the only mutation entry point.

    Time and randomness are read here, once per dispatch, and handed to the
    reducer. Tests pass a fixed clock and a seeded ``random.Random``.
    """

    def __init__(
        self,
        state: Optional[GameState] = None,
        clock: Callable[[], float] = wall_clock_ms,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.clock = clock
        self.rng = rng if rng is not None else random.Random()
        self._state = state if state is not None else initial_state(clock())
        self._listeners: List[Listener] = []

    def get_state(self) -> GameState:
        return self._state

    def replace_state(self, state: GameState) -> None:
        """Swap in a loaded snapshot wholesale."""
        self._state = state
        self._notify()

    def dispatch(self, action: Action) -> bool:
        """Apply ``action``. Returns False when the reducer rejected it."""
        new_state = reduce(self._state, action, self.clock(), self.rng)
        if new_state is self._state:
            return False
        self._state = new_state
        self._notify()
        return True

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)

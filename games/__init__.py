from __future__ import annotations
import random
from typing import Any, Callable, Dict, Type
from progress import ProgressRecord
from systems.intents import Intent
from systems.snapshot import Snapshot

class BaseGame:
    """One live engine: owns a single state value, its random source and the save policy.

    The host calls ``update`` once per tick, ``handle_intent`` between ticks and
    ``snapshot`` to draw. Progress is written on pause, on ``autosave`` and
    once when the run first turns terminal.
    """
    name: str = "base"
    title: str = ""

    def __init__(self, store, term_cols: int = 80, term_rows: int = 36, rng: random.Random | None = None):
        self.store = store
        self.term_cols = term_cols
        self.term_rows = term_rows
        self.rng = rng or random.Random()
        self.active = False
        self.state: Any = None
        self.terminal_saved = False

    def start(self) -> None:
        self.active = True
        self.reset()

    def stop(self) -> None:
        if self.in_progress:
            self.save_progress()
        self.active = False

    def reset(self) -> None:
        self.state = self.new_state(self.store.load())
        self.terminal_saved = False

    def new_state(self, record: ProgressRecord) -> Any:
        raise NotImplementedError

    @property
    def is_terminal(self) -> bool:
        return self.state.game_over

    @property
    def in_progress(self) -> bool:
        return self.state is not None and not self.state.paused and not self.is_terminal

    def handle_intent(self, intent: Intent) -> bool:
        """Apply an intent; returns False when the intent means nothing right now."""
        if self.state is None:
            return False
        if intent is Intent.TOGGLE_PAUSE:
            return self.toggle_pause()
        return self.on_intent(intent)

    def on_intent(self, intent: Intent) -> bool:
        return False

    def toggle_pause(self) -> bool:
        if self.is_terminal:
            return False
        self.state.paused = not self.state.paused
        if self.state.paused:
            self.save_progress()
        return True

    def update(self) -> None:
        if self.state is None:
            return
        self.step()
        self.check_terminal()

    def step(self) -> None:
        ...

    def check_terminal(self) -> None:
        if self.is_terminal and not self.terminal_saved:
            self.save_progress()
            self.terminal_saved = True

    def autosave(self) -> None:
        if self.active and self.in_progress:
            self.save_progress()

    def save_progress(self) -> None:
        self.store.save_aux(self.name, self.state.high_score)

    def snapshot(self) -> Snapshot:
        raise NotImplementedError

GAME_REGISTRY: Dict[str, Type[BaseGame]] = {}

def register_game(key: str) -> Callable[[Type[BaseGame]], Type[BaseGame]]:
    def wrapper(cls: Type[BaseGame]) -> Type[BaseGame]:
        GAME_REGISTRY[key] = cls
        cls.name = key
        return cls
    return wrapper

# Auto-import game modules to populate the registry on package import.
from . import space_invaders  # noqa: F401,E402
from . import snake  # noqa: F401,E402
from . import flappy  # noqa: F401,E402
from . import twenty_forty_eight  # noqa: F401,E402

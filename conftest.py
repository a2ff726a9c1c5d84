"""Shared fixtures: a manual timer and scripted opponents."""

from typing import Callable, List, Optional

import pytest

from game.config import GameConfig
from game.controller import GameController
from logic.ai_player import AIPlayer
from logic.game_state import Cell


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.fired = True
        self.callback()


class FakeScheduler:
    """Stands in for `loop.call_later`; timers only fire when told to."""

    def __init__(self):
        self.timers: List[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> List[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def run_pending(self):
        for timer in self.pending:
            timer.fire()


class ScriptedAI(AIPlayer):
    """Plays a fixed list of moves, then reports no move."""

    def __init__(self, moves: List[Optional[int]]):
        super().__init__(Cell.O)
        self.moves = list(moves)
        self.boards_seen = []

    def get_move(self, board, difficulty=None):
        self.boards_seen.append(board)
        if not self.moves:
            return None
        return self.moves.pop(0)


class ScriptedRandom:
    """Returns queued values from random(); choice() takes the last item."""

    def __init__(self, values=()):
        self.values = list(values)
        self.choices = []

    def random(self) -> float:
        return self.values.pop(0)

    def choice(self, seq):
        self.choices.append(list(seq))
        return seq[-1]


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def config() -> GameConfig:
    config = GameConfig()
    config.THINK_DELAY_MIN = 0.0
    config.THINK_DELAY_MAX = 0.0
    config.SEED = 1234
    return config


@pytest.fixture
def make_controller(scheduler, config):
    def _make(moves=None) -> GameController:
        ai = ScriptedAI(moves) if moves is not None else None
        return GameController(scheduler, config, ai=ai)
    return _make

"""
Session and score values for TicTacToe.

Both are frozen: the controller replaces them wholesale on every transition.
"""

from enum import Enum
from dataclasses import dataclass, field

from logic.ai_player import Difficulty
from logic.game_state import Board, Cell, new_board
from logic.win_checker import GameOutcome, GameStatus, IN_PROGRESS


class Turn(Enum):
    HUMAN = "human"
    OPPONENT = "opponent"


class Phase(Enum):
    """Where the game is in its turn cycle."""
    AWAITING_HUMAN = "awaiting_human"
    AWAITING_OPPONENT = "awaiting_opponent"
    FINISHED = "finished"


@dataclass(frozen=True)
class Score:
    """Games won by each side, and ties."""
    human_wins: int = 0
    opponent_wins: int = 0
    ties: int = 0

    def record(self, outcome: GameOutcome, human_mark: Cell) -> "Score":
        """
        Count a finished game.

        Returns:
            A new Score with exactly one counter incremented, or self if the
            outcome is not terminal.
        """
        if outcome.status == GameStatus.TIED:
            return Score(self.human_wins, self.opponent_wins, self.ties + 1)
        if outcome.status == GameStatus.WON:
            if outcome.winner == human_mark:
                return Score(self.human_wins + 1, self.opponent_wins, self.ties)
            return Score(self.human_wins, self.opponent_wins + 1, self.ties)
        return self

    @property
    def games_played(self) -> int:
        return self.human_wins + self.opponent_wins + self.ties

    @property
    def win_rate(self) -> int:
        """Human wins as a whole percentage of games played, rounded half up."""
        if self.games_played == 0:
            return 0
        return int(self.human_wins * 100 / self.games_played + 0.5)

    @property
    def performance_message(self) -> str:
        """A line of encouragement for the score board."""
        if self.games_played == 0:
            return "Start playing to see your statistics!"

        rate = self.win_rate
        if rate >= 70:
            return "🌟 Excellent performance!"
        if rate >= 50:
            return "👍 Good job!"
        if rate >= 30:
            return "💪 Keep practicing!"
        if self.games_played >= 3:
            return "🎯 Try different strategies!"
        return "🚀 Just getting started!"


@dataclass(frozen=True)
class Session:
    """
    The state of one game.

    `game_id` tags opponent requests: a result carrying an older id belongs
    to a game that has since been replaced.
    """
    board: Board = field(default_factory=new_board)
    turn: Turn = Turn.HUMAN
    outcome: GameOutcome = IN_PROGRESS
    difficulty: Difficulty = Difficulty.HARD
    opponent_thinking: bool = False
    game_started: bool = False
    game_id: int = 0

    @property
    def phase(self) -> Phase:
        if self.outcome.is_over:
            return Phase.FINISHED
        if self.turn == Turn.HUMAN:
            return Phase.AWAITING_HUMAN
        return Phase.AWAITING_OPPONENT

    @property
    def can_change_difficulty(self) -> bool:
        """Difficulty is locked from the first move until a new game."""
        return not self.game_started

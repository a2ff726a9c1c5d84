"""
AI player for TicTacToe.
Chooses moves with a layered heuristic: win, block, position, random.
"""

import asyncio
import logging
import random
from enum import Enum
from typing import Any, Callable, List, Optional

from .game_state import Board, Cell, apply_move, empty_cells
from .win_checker import blocking_moves_for, fork_moves_for, winning_moves_for

logger = logging.getLogger(__name__)


class Difficulty(Enum):
    """AI difficulty levels."""
    EASY = "easy"        # Mostly random moves
    MEDIUM = "medium"    # Wins, usually blocks
    HARD = "hard"        # Wins, always blocks, guards against forks


# Center first, then corners, then edges
PREFERRED_CELLS = (4, 0, 2, 6, 8, 1, 3, 5, 7)


class AIPlayer:
    """
    A computer opponent driven by fixed heuristics.

    No game-tree search is done. All randomness comes from `rng`, so a
    seeded `random.Random` makes every choice reproducible.
    """

    EASY_RANDOM_CHANCE = 0.7
    MEDIUM_BLOCK_CHANCE = 0.8

    def __init__(
        self,
        player: Cell = Cell.O,
        rng: Optional[random.Random] = None,
        easy_random_chance: Optional[float] = None,
        medium_block_chance: Optional[float] = None,
    ):
        """
        Initialize the AI player.

        Args:
            player: Which mark the AI plays (default: O)
            rng: Source of randomness.
            easy_random_chance: Chance that EASY plays a random cell.
            medium_block_chance: Chance that MEDIUM blocks a threat.
        """
        self.player = player
        self.rng = rng if rng is not None else random.Random()
        self.easy_random_chance = (
            self.EASY_RANDOM_CHANCE if easy_random_chance is None else easy_random_chance
        )
        self.medium_block_chance = (
            self.MEDIUM_BLOCK_CHANCE if medium_block_chance is None else medium_block_chance
        )

    @property
    def opponent(self) -> Cell:
        return self.player.opposite()

    def get_move(self, board: Board, difficulty: Difficulty = Difficulty.HARD) -> Optional[int]:
        """
        Get the AI's move for the current position.

        Args:
            board: Board snapshot. Never modified.
            difficulty: How well to play.

        Returns:
            Cell index, or None if no moves are available.
        """
        empties = empty_cells(board)
        if not empties:
            return None

        if difficulty == Difficulty.EASY:
            move = self._easy_move(board, empties)
        elif difficulty == Difficulty.MEDIUM:
            move = self._medium_move(board, empties)
        else:
            move = self._hard_move(board, empties)

        logger.debug("AI (%s, %s) chose cell %d", self.player.value, difficulty.value, move)
        return move

    def _random_move(self, empties: List[int]) -> int:
        return self.rng.choice(empties)

    def _strategic_move(self, board: Board) -> Optional[int]:
        for index in PREFERRED_CELLS:
            if board[index] == Cell.EMPTY:
                return index
        return None

    def _positional_move(self, board: Board, empties: List[int]) -> int:
        move = self._strategic_move(board)
        if move is None:
            return self._random_move(empties)
        return move

    def _easy_move(self, board: Board, empties: List[int]) -> int:
        if self.rng.random() < self.easy_random_chance:
            return self._random_move(empties)
        return self._positional_move(board, empties)

    def _medium_move(self, board: Board, empties: List[int]) -> int:
        wins = winning_moves_for(board, self.player)
        if wins:
            return wins[0]

        if self.rng.random() < self.medium_block_chance:
            blocks = blocking_moves_for(board, self.player)
            if blocks:
                return blocks[0]

        return self._positional_move(board, empties)

    def _hard_move(self, board: Board, empties: List[int]) -> int:
        wins = winning_moves_for(board, self.player)
        if wins:
            return wins[0]

        blocks = blocking_moves_for(board, self.player)
        if blocks:
            return blocks[0]

        forks = fork_moves_for(board, self.player)
        if forks:
            return forks[0]

        for index in PREFERRED_CELLS:
            if board[index] == Cell.EMPTY and self._leaves_no_fork(board, index):
                return index

        return self._positional_move(board, empties)

    def _leaves_no_fork(self, board: Board, index: int) -> bool:
        """
        Whether playing `index` keeps the opponent from forking next move.

        If the move threatens a win, the opponent's reply is forced, so only
        that reply is checked.
        """
        trial = apply_move(board, index, self.player)
        threats = winning_moves_for(trial, self.player)

        if len(threats) >= 2:
            return True

        if threats:
            reply = apply_move(trial, threats[0], self.opponent)
            return len(winning_moves_for(reply, self.opponent)) < 2

        return not fork_moves_for(trial, self.opponent)

    def schedule_move(
        self,
        board: Board,
        difficulty: Difficulty,
        delay: float,
        call_later: Callable[[float, Callable[[], None]], Any],
        on_move: Callable[[Optional[int]], None],
    ) -> Any:
        """
        Choose a move after `delay` seconds without blocking.

        Args:
            board: Board snapshot to decide on.
            difficulty: How well to play.
            delay: Seconds to "think".
            call_later: Timer function, e.g. `loop.call_later`.
            on_move: Receives the chosen index (or None).

        Returns:
            Whatever `call_later` returns, usually a handle with `cancel()`.
        """
        snapshot = tuple(board)

        def _resolve():
            on_move(self.get_move(snapshot, difficulty))

        return call_later(delay, _resolve)

    async def get_move_delayed(
        self,
        board: Board,
        difficulty: Difficulty = Difficulty.HARD,
        delay: float = 0.5
    ) -> Optional[int]:
        """
        Coroutine version of `get_move` that thinks for `delay` seconds.

        For asyncio code that drives the AI directly. GameController goes
        through `schedule_move` instead, so the same controller also runs
        on Tkinter's `root.after`.
        """
        snapshot = tuple(board)
        await asyncio.sleep(delay)
        return self.get_move(snapshot, difficulty)


# Quick test
if __name__ == "__main__":
    from .game_state import board_from_string, format_board, new_board

    print("Testing AIPlayer...")

    ai = AIPlayer(Cell.O)

    # Test 1: AI should block a winning move
    board = board_from_string("XX_O_____")
    print(format_board(board))
    print("\nAI is O. X is about to win with 2!")

    move = ai.get_move(board, Difficulty.HARD)
    print(f"AI's move: {move}")
    assert move == 2, f"Expected 2, got {move}"

    # Test 2: AI should take a winning move over blocking
    board = board_from_string("XX_OO____")
    print(format_board(board))
    print("\nAI is O. Can win with 5!")

    move = ai.get_move(board, Difficulty.HARD)
    print(f"AI's move: {move}")
    assert move == 5, f"Expected 5, got {move}"

    # Test 3: thinking on an event loop
    print("\nAI thinks for 0.5s on an empty board...")
    move = asyncio.run(ai.get_move_delayed(new_board(), Difficulty.HARD))
    print(f"AI's move: {move}")
    assert move == 4, f"Expected 4, got {move}"

    print("\nAIPlayer test done!")

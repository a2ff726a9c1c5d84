"""
Win checker for TicTacToe.
Evaluates a board to a game outcome and finds winning, blocking and fork moves.
"""

from enum import Enum
from typing import Optional, List, NamedTuple, Tuple
from dataclasses import dataclass

from .game_state import Board, Cell, apply_move, empty_cells, is_board_full


class WinPattern(NamedTuple):
    """A named line of three cells."""
    name: str
    cells: Tuple[int, int, int]


# Checked in this order; the first complete line is the one reported.
WINNING_PATTERNS: Tuple[WinPattern, ...] = (
    # Rows
    WinPattern("top-row", (0, 1, 2)),
    WinPattern("middle-row", (3, 4, 5)),
    WinPattern("bottom-row", (6, 7, 8)),
    # Columns
    WinPattern("left-column", (0, 3, 6)),
    WinPattern("middle-column", (1, 4, 7)),
    WinPattern("right-column", (2, 5, 8)),
    # Diagonals
    WinPattern("diagonal-1", (0, 4, 8)),
    WinPattern("diagonal-2", (2, 4, 6)),
)

CENTER = 4
CORNERS = (0, 2, 6, 8)


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    TIED = "tied"


@dataclass(frozen=True)
class GameOutcome:
    """
    The result of evaluating a board.

    `winner` and `winning_line` are only set when status is WON.
    """
    status: GameStatus
    winner: Optional[Cell] = None
    winning_line: Optional[WinPattern] = None

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS

    @property
    def winning_cells(self) -> Tuple[int, ...]:
        """Indices to highlight, empty unless the game was won."""
        if self.winning_line is None:
            return ()
        return self.winning_line.cells


IN_PROGRESS = GameOutcome(GameStatus.IN_PROGRESS)
TIED = GameOutcome(GameStatus.TIED)


def _line_winner(board: Board, pattern: WinPattern) -> Optional[Cell]:
    a, b, c = pattern.cells
    if board[a] != Cell.EMPTY and board[a] == board[b] == board[c]:
        return board[a]
    return None


def evaluate(board: Board) -> GameOutcome:
    """
    Evaluate the board.

    Args:
        board: Board snapshot.

    Returns:
        WON with the first complete line in table order, TIED when the board
        is full without a line, IN_PROGRESS otherwise.
    """
    for pattern in WINNING_PATTERNS:
        winner = _line_winner(board, pattern)
        if winner is not None:
            return GameOutcome(GameStatus.WON, winner, pattern)

    if is_board_full(board):
        return TIED

    return IN_PROGRESS


def is_winning_move(board: Board, index: int, player: Optional[Cell]) -> bool:
    """Whether placing `player` at `index` wins the game for `player`."""
    trial = apply_move(board, index, player)
    if trial is board:
        return False
    return evaluate(trial).winner == player


def winning_moves_for(board: Board, player: Optional[Cell]) -> List[int]:
    """
    Get every empty cell that wins immediately for `player`.

    Each candidate is tried on a copy of the board and evaluated, so the
    result always agrees with `evaluate`.
    """
    if player is None or player == Cell.EMPTY:
        return []
    return [index for index in empty_cells(board) if is_winning_move(board, index, player)]


def blocking_moves_for(board: Board, player: Optional[Cell]) -> List[int]:
    """Cells `player` must take to stop the other side winning next move."""
    if player is None or player == Cell.EMPTY:
        return []
    return winning_moves_for(board, player.opposite())


def fork_moves_for(board: Board, player: Cell) -> List[int]:
    """Empty cells after which `player` threatens to win in two places."""
    forks = []
    for index in empty_cells(board):
        trial = apply_move(board, index, player)
        if len(winning_moves_for(trial, player)) >= 2:
            forks.append(index)
    return forks


def evaluate_position(board: Board, player: Optional[Cell]) -> int:
    """
    Rough score of the position from `player`'s point of view.

    +10 if `player` can win next move, -10 if the opponent can, otherwise
    +/-3 for the center and +/-2 for each corner.
    """
    if player is None or player == Cell.EMPTY:
        return 0

    opponent = player.opposite()

    if winning_moves_for(board, player):
        return 10
    if winning_moves_for(board, opponent):
        return -10

    score = 0
    if board[CENTER] == player:
        score += 3
    elif board[CENTER] == opponent:
        score -= 3

    for corner in CORNERS:
        if board[corner] == player:
            score += 2
        elif board[corner] == opponent:
            score -= 2

    return score


# Quick test
if __name__ == "__main__":
    from .game_state import board_from_string, format_board

    print("Testing win checker...")

    # Horizontal win
    board = board_from_string("XXXO_O___")
    outcome = evaluate(board)
    print(format_board(board))
    print(f"Outcome: {outcome.status.value}, line = {outcome.winning_line.name}")
    assert outcome.winner == Cell.X

    # Draw (full board, no winner)
    board = board_from_string("XOXXOOOXX")
    print(format_board(board))
    assert evaluate(board) == TIED

    # O can win at 5, and must block X at 2
    board = board_from_string("XX_OO____")
    print(f"O wins at: {winning_moves_for(board, Cell.O)}")
    print(f"O blocks at: {blocking_moves_for(board, Cell.O)}")

    print("\nWin checker test done!")

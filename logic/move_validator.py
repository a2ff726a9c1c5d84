"""
Move validator for TicTacToe.
Explains why a move is rejected, for logging and for the UI.
"""

from typing import Optional
from dataclasses import dataclass

from .game_state import Board, Cell, CELL_COUNT
from .win_checker import evaluate


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates TicTacToe moves.

    Rules:
    1. Game must not be over
    2. Index must be on the board
    3. Can only place on empty cells
    """

    def validate_move(
        self,
        board: Board,
        index: int,
        player: Optional[Cell]
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            board: Current board.
            index: Cell to place the mark (0-8).
            player: Mark being placed.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if player is None or player == Cell.EMPTY:
            return ValidationResult(
                is_valid=False,
                error_message="No player given for the move"
            )

        if evaluate(board).is_over:
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over!"
            )

        if not 0 <= index < CELL_COUNT:
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid position {index}. Must be 0-{CELL_COUNT - 1}."
            )

        if board[index] != Cell.EMPTY:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {index} is already occupied by {board[index].value}"
            )

        return ValidationResult(is_valid=True)

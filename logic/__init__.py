"""
Logic module for TicTacToe.
Handles the board, rules, and the computer opponent.
"""

from .game_state import Board, Cell, apply_move, empty_cells, new_board
from .move_validator import MoveValidator, ValidationResult
from .win_checker import (
    GameOutcome,
    GameStatus,
    WinPattern,
    WINNING_PATTERNS,
    blocking_moves_for,
    evaluate,
    winning_moves_for,
)
from .ai_player import AIPlayer, Difficulty

"""
Game configuration for TicTacToe.
Players, opponent behaviour, timing and UI colours.
"""

from logic.ai_player import AIPlayer, Difficulty
from logic.game_state import Cell


class GameConfig:
    """
    Configuration class for game settings.
    Override on an instance to change a single game (see main.py).
    """

    # ==================== PLAYERS ====================
    # The human always moves first
    HUMAN_MARK = Cell.X
    OPPONENT_MARK = Cell.O

    # ==================== OPPONENT ====================
    DEFAULT_DIFFICULTY = Difficulty.HARD

    # EASY plays a random cell this often, otherwise a strategic one
    EASY_RANDOM_CHANCE = AIPlayer.EASY_RANDOM_CHANCE
    # MEDIUM blocks a threat this often
    MEDIUM_BLOCK_CHANCE = AIPlayer.MEDIUM_BLOCK_CHANCE

    # "Thinking" time in seconds, drawn uniformly from this range
    THINK_DELAY_MIN = 0.5
    THINK_DELAY_MAX = 1.0

    # Random seed for the opponent (None = unseeded)
    SEED = None

    # ==================== UI ====================
    WINDOW_TITLE = "Tic-Tac-Toe"
    BG_COLOR = '#1a1a2e'
    CELL_COLOR = '#16213e'
    HUMAN_COLOR = '#00ff88'
    OPPONENT_COLOR = '#ff6b6b'
    HIGHLIGHT_COLOR = '#ffd700'
    TITLE_COLOR = '#00d4ff'

    DIFFICULTY_COLORS = {
        Difficulty.EASY: "#4ade80",
        Difficulty.MEDIUM: "#fbbf24",
        Difficulty.HARD: "#f87171",
    }

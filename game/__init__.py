"""
Game module for TicTacToe.
Session state, score keeping and turn sequencing against the computer.
"""

__version__ = "1.0.0"

from .config import GameConfig
from .session import Phase, Score, Session, Turn
from .controller import GameController

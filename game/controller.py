"""
Game controller for TicTacToe.

Owns the session and the score and sequences turns: human clicks come in
through `submit_human_move`, the opponent answers on a timer, and every
transition replaces the session as a whole.

The controller does not run a loop of its own. It is given a `call_later`
function, `(delay_seconds, callback) -> handle`, that defers the callback on
the caller's event loop: `asyncio`'s `loop.call_later`, or the Tkinter
adapter in ui.py. Callbacks must never run before `call_later` returns.
"""

import logging
import random
from dataclasses import replace
from typing import Any, Callable, List, Optional

from logic.ai_player import AIPlayer, Difficulty
from logic.game_state import Board, apply_move, format_board
from logic.move_validator import MoveValidator
from logic.win_checker import GameOutcome, GameStatus, evaluate

from .config import GameConfig
from .session import Phase, Score, Session, Turn

logger = logging.getLogger(__name__)

CallLater = Callable[[float, Callable[[], None]], Any]
Listener = Callable[["GameController"], None]


class GameController:
    """
    Main controller for a game against the computer.

    Game flow:
    1. Human (X) clicks a cell
    2. Controller validates and applies the move
    3. Computer (O) "thinks" for a moment, then answers
    4. Repeat until someone wins or the board is full
    """

    def __init__(
        self,
        call_later: CallLater,
        config: Optional[GameConfig] = None,
        ai: Optional[AIPlayer] = None
    ):
        """
        Initialize the controller.

        Args:
            call_later: Timer function used for the opponent's move.
            config: Game settings.
            ai: Opponent to use instead of one built from `config`.
        """
        self.config = config if config is not None else GameConfig()
        self.call_later = call_later
        self.rng = random.Random(self.config.SEED)

        if ai is None:
            ai = AIPlayer(
                self.config.OPPONENT_MARK,
                rng=self.rng,
                easy_random_chance=self.config.EASY_RANDOM_CHANCE,
                medium_block_chance=self.config.MEDIUM_BLOCK_CHANCE,
            )
        self.ai = ai
        self.validator = MoveValidator()

        self.session = Session(difficulty=self.config.DEFAULT_DIFFICULTY)
        self.score = Score()

        self._pending: Any = None
        self._listeners: List[Listener] = []

    # ==================== STATE FOR RENDERING ====================

    @property
    def board(self) -> Board:
        return self.session.board

    @property
    def turn(self) -> Turn:
        return self.session.turn

    @property
    def outcome(self) -> GameOutcome:
        return self.session.outcome

    @property
    def phase(self) -> Phase:
        return self.session.phase

    @property
    def difficulty(self) -> Difficulty:
        return self.session.difficulty

    @property
    def opponent_thinking(self) -> bool:
        return self.session.opponent_thinking

    @property
    def can_change_difficulty(self) -> bool:
        return self.session.can_change_difficulty

    def add_listener(self, listener: Listener):
        """Call `listener(controller)` after every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener):
        self._listeners.remove(listener)

    def _commit(self, session: Session, score: Optional[Score] = None):
        self.session = session
        if score is not None:
            self.score = score
        for listener in list(self._listeners):
            listener(self)

    # ==================== INBOUND ACTIONS ====================

    def submit_human_move(self, index: int) -> bool:
        """
        Play the human's mark at `index`.

        Moves out of turn or onto an occupied cell are ignored.

        Returns:
            True if the move was played.
        """
        session = self.session

        if session.phase != Phase.AWAITING_HUMAN or session.opponent_thinking:
            logger.debug("Ignoring move %s: not the human's turn (%s)", index, session.phase.value)
            return False

        result = self.validator.validate_move(session.board, index, self.config.HUMAN_MARK)
        if not result.is_valid:
            logger.debug("Ignoring move %s: %s", index, result.error_message)
            return False

        board = apply_move(session.board, index, self.config.HUMAN_MARK)
        logger.debug("Human played %d", index)
        self._finish_turn(replace(session, board=board, game_started=True), Turn.OPPONENT)
        return True

    def start_new_game(self):
        """Clear the board and give the first move to the human."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

        # Difficulty carries over; the score is kept separately
        session = Session(
            difficulty=self.session.difficulty,
            game_id=self.session.game_id + 1
        )
        logger.debug("Starting game %d", session.game_id)
        self._commit(session)

    def reset_score(self):
        """Zero all score counters. The current game is untouched."""
        logger.debug("Resetting score")
        self._commit(self.session, Score())

    def set_difficulty(self, difficulty: Difficulty) -> bool:
        """
        Change the opponent's difficulty.

        Only allowed before the first move of a game.

        Returns:
            True if the difficulty was changed.
        """
        if not self.session.can_change_difficulty:
            logger.debug("Ignoring difficulty change to %s: game in progress", difficulty.value)
            return False

        logger.debug("Difficulty set to %s", difficulty.value)
        self._commit(replace(self.session, difficulty=difficulty))
        return True

    def ensure_opponent_move(self):
        """
        Make sure an opponent move is pending if it is the opponent's turn.

        Safe to call repeatedly; at most one request is ever outstanding.
        """
        session = self.session
        if session.phase != Phase.AWAITING_OPPONENT:
            return

        updated = self._request_opponent_move(session)
        if updated is not session:
            self._commit(updated)

    # ==================== TURN SEQUENCING ====================

    def _finish_turn(self, session: Session, next_turn: Turn):
        """Evaluate the board after a move and hand over the turn."""
        outcome = evaluate(session.board)

        if outcome.is_over:
            session = replace(session, outcome=outcome, opponent_thinking=False)
            score = self.score.record(outcome, self.config.HUMAN_MARK)
            self._log_result(outcome)
            self._commit(session, score)
            return

        session = replace(session, outcome=outcome, turn=next_turn)
        if next_turn == Turn.OPPONENT:
            session = self._request_opponent_move(session)
        self._commit(session)

    def _request_opponent_move(self, session: Session) -> Session:
        if session.opponent_thinking:
            logger.debug("Opponent is already thinking, not asking again")
            return session

        game_id = session.game_id
        delay = self.rng.uniform(self.config.THINK_DELAY_MIN, self.config.THINK_DELAY_MAX)

        def _on_move(move: Optional[int]):
            self._on_opponent_move(game_id, move)

        self._pending = self.ai.schedule_move(
            session.board,
            session.difficulty,
            delay,
            self.call_later,
            _on_move
        )
        logger.debug("Opponent thinking for %.2fs (game %d)", delay, game_id)
        return replace(session, opponent_thinking=True)

    def _on_opponent_move(self, game_id: int, move: Optional[int]):
        session = self.session

        if game_id != session.game_id or not session.opponent_thinking:
            logger.debug("Discarding opponent move %s from game %d", move, game_id)
            return

        self._pending = None

        if move is None:
            logger.warning(
                "Opponent found no move on an unfinished board, returning turn to human:\n%s",
                format_board(session.board)
            )
            self._commit(replace(session, turn=Turn.HUMAN, opponent_thinking=False))
            return

        board = apply_move(session.board, move, self.config.OPPONENT_MARK)
        if board is session.board:
            logger.warning("Opponent chose illegal cell %s, returning turn to human", move)
            self._commit(replace(session, turn=Turn.HUMAN, opponent_thinking=False))
            return

        logger.debug("Opponent played %d", move)
        self._finish_turn(replace(session, board=board, opponent_thinking=False), Turn.HUMAN)

    def _log_result(self, outcome: GameOutcome):
        if outcome.status == GameStatus.TIED:
            logger.info("Game %d ended in a tie", self.session.game_id)
        else:
            winner = "Human" if outcome.winner == self.config.HUMAN_MARK else "Computer"
            logger.info(
                "Game %d won by %s on %s",
                self.session.game_id,
                winner,
                outcome.winning_line.name
            )

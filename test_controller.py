import asyncio
import logging

from game.config import GameConfig
from game.controller import GameController
from game.session import Phase, Score, Turn
from logic.ai_player import AIPlayer, Difficulty
from logic.game_state import Cell, new_board
from logic.win_checker import GameStatus


def _play(controller, scheduler, human_moves):
    """Alternate human moves with pending opponent replies."""
    for index in human_moves:
        assert controller.submit_human_move(index)
        scheduler.run_pending()


def test_initial_state(make_controller):
    controller = make_controller()
    assert controller.board == new_board()
    assert controller.turn == Turn.HUMAN
    assert controller.phase == Phase.AWAITING_HUMAN
    assert controller.outcome.status == GameStatus.IN_PROGRESS
    assert controller.score == Score()
    assert controller.difficulty == GameConfig.DEFAULT_DIFFICULTY
    assert controller.can_change_difficulty
    assert not controller.opponent_thinking


def test_human_move_hands_turn_to_opponent(make_controller, scheduler):
    controller = make_controller([4])

    assert controller.submit_human_move(0)

    assert controller.board[0] == Cell.X
    assert controller.phase == Phase.AWAITING_OPPONENT
    assert controller.opponent_thinking
    assert not controller.can_change_difficulty
    assert len(scheduler.pending) == 1

    scheduler.run_pending()

    assert controller.board[4] == Cell.O
    assert controller.phase == Phase.AWAITING_HUMAN
    assert not controller.opponent_thinking


def test_opponent_sees_board_after_human_move(make_controller, scheduler):
    controller = make_controller([4])
    controller.submit_human_move(0)
    scheduler.run_pending()
    assert controller.ai.boards_seen[0][0] == Cell.X


def test_ignored_moves(make_controller, scheduler):
    controller = make_controller([4])

    assert not controller.submit_human_move(9)
    assert not controller.submit_human_move(-1)
    assert controller.board == new_board()

    controller.submit_human_move(0)
    board = controller.board

    # Opponent's turn
    assert not controller.submit_human_move(1)
    assert controller.board == board

    scheduler.run_pending()

    # Occupied cells
    assert not controller.submit_human_move(0)
    assert not controller.submit_human_move(4)
    assert controller.phase == Phase.AWAITING_HUMAN


def test_only_one_opponent_request(make_controller, scheduler):
    controller = make_controller([4])
    controller.submit_human_move(0)

    controller.ensure_opponent_move()
    controller.ensure_opponent_move()

    assert len(scheduler.timers) == 1


def test_ensure_opponent_move_noop_on_human_turn(make_controller, scheduler):
    controller = make_controller()
    controller.ensure_opponent_move()
    assert scheduler.timers == []


def test_tie_counted_once(make_controller, scheduler):
    controller = make_controller([4, 1, 6, 5])

    _play(controller, scheduler, [0, 8, 7, 2])
    assert controller.submit_human_move(3)

    assert controller.phase == Phase.FINISHED
    assert controller.outcome.status == GameStatus.TIED
    assert controller.score == Score(human_wins=0, opponent_wins=0, ties=1)
    assert scheduler.pending == []

    # Nothing more happens in a finished game
    scheduler.run_pending()
    assert not controller.submit_human_move(0)
    assert controller.score == Score(0, 0, 1)


def test_human_win(make_controller, scheduler):
    controller = make_controller([3, 4])

    _play(controller, scheduler, [0, 1])
    controller.submit_human_move(2)

    assert controller.outcome.winner == Cell.X
    assert controller.outcome.winning_cells == (0, 1, 2)
    assert controller.score == Score(1, 0, 0)
    assert not controller.opponent_thinking


def test_opponent_win(make_controller, scheduler):
    controller = make_controller([3, 4, 5])

    _play(controller, scheduler, [0, 1, 8])

    assert controller.phase == Phase.FINISHED
    assert controller.outcome.winner == Cell.O
    assert controller.outcome.winning_line.name == "middle-row"
    assert controller.score == Score(0, 1, 0)


def test_score_persists_across_games_until_reset(make_controller, scheduler):
    controller = make_controller([3, 4, 6, 7])

    _play(controller, scheduler, [0, 1])
    controller.submit_human_move(2)
    controller.start_new_game()

    assert controller.board == new_board()
    assert controller.score == Score(1, 0, 0)

    _play(controller, scheduler, [0, 1])
    controller.submit_human_move(2)
    assert controller.score == Score(2, 0, 0)

    controller.reset_score()
    assert controller.score == Score()
    # Board is not touched by a score reset
    assert controller.outcome.winner == Cell.X


def test_difficulty_locked_after_first_move(make_controller, scheduler):
    controller = make_controller([3, 4])

    assert controller.set_difficulty(Difficulty.EASY)
    assert controller.difficulty == Difficulty.EASY

    controller.submit_human_move(0)
    assert not controller.set_difficulty(Difficulty.MEDIUM)
    scheduler.run_pending()
    assert not controller.set_difficulty(Difficulty.MEDIUM)
    assert controller.difficulty == Difficulty.EASY

    # Still locked once the game is over
    controller.submit_human_move(1)
    scheduler.run_pending()
    controller.submit_human_move(2)
    assert controller.phase == Phase.FINISHED
    assert not controller.set_difficulty(Difficulty.MEDIUM)

    controller.start_new_game()
    assert controller.difficulty == Difficulty.EASY
    assert controller.set_difficulty(Difficulty.MEDIUM)
    assert controller.difficulty == Difficulty.MEDIUM


def test_new_game_cancels_pending_move(make_controller, scheduler):
    controller = make_controller([4])
    controller.submit_human_move(0)
    timer = scheduler.timers[0]

    controller.start_new_game()

    assert timer.cancelled
    assert controller.board == new_board()
    assert controller.phase == Phase.AWAITING_HUMAN
    assert not controller.opponent_thinking
    assert not controller.session.game_started


def test_late_result_after_new_game_is_discarded(make_controller, scheduler):
    # Each stale firing still asks the AI, so it consumes 4 and 5
    controller = make_controller([4, 5, 8])
    controller.submit_human_move(0)
    stale = scheduler.timers[0]

    controller.start_new_game()
    # The timer fires anyway, e.g. it was already queued when cancelled
    stale.fire()

    assert controller.board == new_board()
    assert controller.phase == Phase.AWAITING_HUMAN

    # Also while the new game is waiting on its own request
    controller.submit_human_move(2)
    board = controller.board
    stale.callback()

    assert controller.board == board
    assert controller.opponent_thinking

    scheduler.run_pending()
    assert controller.board[8] == Cell.O
    assert controller.board[4] == Cell.EMPTY
    assert controller.board[5] == Cell.EMPTY


def test_no_move_available_returns_turn_with_warning(make_controller, scheduler, caplog):
    controller = make_controller([])
    controller.submit_human_move(0)

    with caplog.at_level(logging.WARNING, logger="game.controller"):
        scheduler.run_pending()

    assert "no move" in caplog.text
    assert controller.phase == Phase.AWAITING_HUMAN
    assert not controller.opponent_thinking
    assert controller.board[0] == Cell.X


def test_illegal_opponent_move_returns_turn(make_controller, scheduler, caplog):
    controller = make_controller([0])
    controller.submit_human_move(0)

    with caplog.at_level(logging.WARNING, logger="game.controller"):
        scheduler.run_pending()

    assert "illegal" in caplog.text
    assert controller.phase == Phase.AWAITING_HUMAN


def test_listeners_notified(make_controller, scheduler):
    controller = make_controller([4])
    phases = []
    listener = lambda c: phases.append(c.phase)
    controller.add_listener(listener)

    controller.submit_human_move(0)
    scheduler.run_pending()
    controller.reset_score()

    assert phases == [Phase.AWAITING_OPPONENT, Phase.AWAITING_HUMAN, Phase.AWAITING_HUMAN]

    controller.remove_listener(listener)
    controller.start_new_game()
    assert len(phases) == 3


def test_think_delay_within_config_range(scheduler):
    config = GameConfig()
    config.THINK_DELAY_MIN = 0.5
    config.THINK_DELAY_MAX = 1.0
    controller = GameController(scheduler, config)

    controller.submit_human_move(0)

    assert 0.5 <= scheduler.timers[0].delay <= 1.0


def test_full_games_against_hard_score_once_each(make_controller, scheduler):
    controller = make_controller()

    for game in range(5):
        for index in range(9):
            if controller.phase == Phase.FINISHED:
                break
            if controller.submit_human_move(index):
                scheduler.run_pending()

        assert controller.phase == Phase.FINISHED
        assert controller.score.games_played == game + 1
        assert controller.score.human_wins == 0
        controller.start_new_game()


def test_real_event_loop():
    config = GameConfig()
    config.THINK_DELAY_MIN = 0.01
    config.THINK_DELAY_MAX = 0.02

    async def scenario():
        loop = asyncio.get_running_loop()
        controller = GameController(loop.call_later, config)
        controller.submit_human_move(0)
        assert controller.opponent_thinking

        for _ in range(100):
            if controller.phase == Phase.AWAITING_HUMAN:
                break
            await asyncio.sleep(0.01)
        return controller

    controller = asyncio.run(scenario())
    assert controller.phase == Phase.AWAITING_HUMAN
    assert controller.board[4] == Cell.O


def test_tier_chances_come_from_config(scheduler):
    assert GameConfig.EASY_RANDOM_CHANCE == AIPlayer.EASY_RANDOM_CHANCE == 0.7
    assert GameConfig.MEDIUM_BLOCK_CHANCE == AIPlayer.MEDIUM_BLOCK_CHANCE == 0.8

    config = GameConfig()
    config.EASY_RANDOM_CHANCE = 0.0
    config.MEDIUM_BLOCK_CHANCE = 1.0
    controller = GameController(scheduler, config)

    assert controller.ai.easy_random_chance == 0.0
    assert controller.ai.medium_block_chance == 1.0

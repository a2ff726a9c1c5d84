"""
Main entry point for TicTacToe against the computer.

Opens the Tkinter UI by default. With --no-ui the game runs in the
console on an asyncio event loop, so the computer can "think" without
blocking input handling.

Run this script to play TicTacToe against the computer!
"""

import argparse
import asyncio
import logging
import os
import sys
import threading
from typing import Optional

from game.config import GameConfig
from game.controller import GameController
from game.session import Phase
from logic.ai_player import Difficulty
from logic.game_state import format_board
from logic.win_checker import GameStatus, evaluate_position

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  1-9          place your X on that cell
  n            new game
  r            reset score
  d <level>    set difficulty (easy, medium, hard), before your first move
  q            quit"""


def _read_lines(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue):
    """
    Feed stdin lines into `queue` from a daemon thread; None marks EOF.

    Reads the raw file descriptor so a thread still blocked here at exit
    holds no interpreter-level lock on sys.stdin.
    """
    fd = sys.stdin.fileno()
    pending = b""
    while True:
        data = os.read(fd, 1024)
        if not data:
            lines = [pending.decode(errors="replace")] if pending else []
            lines.append(None)
        else:
            pending += data
            *complete, pending = pending.split(b"\n")
            lines = [line.decode(errors="replace") for line in complete]

        try:
            for line in lines:
                loop.call_soon_threadsafe(queue.put_nowait, line)
        except RuntimeError:
            # Loop already closed
            return
        if not data:
            return


class ConsoleGame:
    """
    Plays TicTacToe in the terminal.

    Game flow:
    1. Board is printed with numbered empty cells
    2. Human types a cell number (or a command)
    3. Computer thinks, then answers
    4. Result and score are printed when the game ends
    """

    def __init__(self, config: GameConfig):
        self.config = config
        self.controller: Optional[GameController] = None
        self._changed: Optional[asyncio.Event] = None

    def _on_state_change(self, controller: GameController):
        self._changed.set()

    async def run(self):
        """Main game loop."""
        loop = asyncio.get_running_loop()
        self._changed = asyncio.Event()
        self.controller = GameController(loop.call_later, self.config)
        self.controller.add_listener(self._on_state_change)

        print("\n" + "=" * 40)
        print("   Tic-Tac-Toe vs. Computer")
        print("=" * 40)
        print(HELP_TEXT)

        # Not the default executor: asyncio.run joins its threads on exit
        lines: asyncio.Queue = asyncio.Queue()
        threading.Thread(target=_read_lines, args=(loop, lines), daemon=True).start()

        while True:
            phase = self.controller.phase

            if phase == Phase.AWAITING_OPPONENT:
                print("\nComputer is thinking...")
                await self._wait_for_change()
                continue

            self._print_state()

            if phase == Phase.FINISHED:
                self._print_result()

            print("\n> ", end="", flush=True)
            line = await lines.get()
            if line is None:
                raise EOFError
            if not self._handle_command(line.strip().lower()):
                break

        self.controller.start_new_game()
        self._print_score()

    async def _wait_for_change(self):
        self._changed.clear()
        await self._changed.wait()

    def _handle_command(self, command: str) -> bool:
        """
        Apply one line of input.

        Returns:
            False when the player wants to quit.
        """
        controller = self.controller

        if command in ("q", "quit", "exit"):
            return False

        if command == "n":
            controller.start_new_game()
        elif command == "r":
            controller.reset_score()
            self._print_score()
        elif command.startswith("d"):
            self._change_difficulty(command[1:].strip())
        elif command.isdigit() and 1 <= int(command) <= 9:
            if controller.phase == Phase.FINISHED:
                print("Game over! Type 'n' for a new game.")
            elif not controller.submit_human_move(int(command) - 1):
                print("That cell is taken, try another.")
        elif command in ("h", "help", "?"):
            print(HELP_TEXT)
        else:
            print("Unknown command. Type 'h' for help.")

        return True

    def _change_difficulty(self, name: str):
        try:
            difficulty = Difficulty(name)
        except ValueError:
            print("Difficulty must be one of: easy, medium, hard")
            return

        if self.controller.set_difficulty(difficulty):
            print(f"Difficulty set to: {difficulty.value}")
        else:
            print("Difficulty can only be changed before your first move.")

    def _print_state(self):
        controller = self.controller
        print()
        print(format_board(controller.board, numbered=True))
        print(f"Difficulty: {controller.difficulty.value}   "
              f"Position: {evaluate_position(controller.board, self.config.HUMAN_MARK):+d}")

    def _print_result(self):
        outcome = self.controller.outcome
        if outcome.status == GameStatus.WON:
            if outcome.winner == self.config.HUMAN_MARK:
                print(f"\n🎉 You won! ({outcome.winning_line.name})")
            else:
                print(f"\n🤖 Computer wins! ({outcome.winning_line.name})")
        else:
            print("\n🤝 It's a tie! Good game!")
        self._print_score()
        print("Type 'n' for a new game or 'q' to quit.")

    def _print_score(self):
        score = self.controller.score
        print(f"Score - You: {score.human_wins}  Computer: {score.opponent_wins}  Ties: {score.ties}")
        if score.games_played:
            print(f"Games: {score.games_played}  Win rate: {score.win_rate}%")
        print(score.performance_message)


def build_config(args: argparse.Namespace) -> GameConfig:
    """Apply command-line overrides to a fresh config."""
    config = GameConfig()
    config.DEFAULT_DIFFICULTY = Difficulty(args.difficulty)
    if args.think_delay is not None:
        config.THINK_DELAY_MIN = args.think_delay
        config.THINK_DELAY_MAX = args.think_delay
    if args.seed is not None:
        config.SEED = args.seed
    return config


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play TicTacToe against the computer")
    parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Run without UI (console mode)"
    )
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=GameConfig.DEFAULT_DIFFICULTY.value,
        help="Starting difficulty"
    )
    parser.add_argument(
        "--think-delay",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Fixed thinking time for the computer"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the computer"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args(argv)
    if args.think_delay is not None and args.think_delay < 0:
        parser.error("--think-delay must not be negative")
    return args


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = build_config(args)

    # Launch UI by default
    if not args.no_ui:
        from ui import TicTacToeUI
        ui = TicTacToeUI(config)
        ui.run()
        return 0

    try:
        asyncio.run(ConsoleGame(config).run())
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
    finally:
        print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

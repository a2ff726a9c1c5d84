"""
TicTacToe UI
A graphical interface for playing against the computer using Tkinter.

Shows:
- The 3x3 board (X for the human, O for the computer)
- Game status and whose turn it is
- Score board with win rate, and a position hint
- Difficulty level selection
"""

import logging
import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional

from game.config import GameConfig
from game.controller import GameController
from game.session import Phase, Turn
from logic.ai_player import Difficulty
from logic.game_state import BOARD_SIZE, Cell
from logic.win_checker import GameStatus, evaluate_position

logger = logging.getLogger(__name__)


class TkTimer:
    """A cancellable `root.after` callback."""

    def __init__(self, root: tk.Misc, delay: float, callback: Callable[[], None]):
        self._root = root
        self._after_id: Optional[str] = root.after(int(delay * 1000), callback)

    def cancel(self):
        if self._after_id is not None:
            self._root.after_cancel(self._after_id)
            self._after_id = None


class TicTacToeUI:
    """
    Main UI class for TicTacToe.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """Initialize the UI."""
        self.config = config if config is not None else GameConfig()

        # Create UI first, the controller schedules on its root
        self._create_ui()

        self.controller = GameController(self._call_later, self.config)
        self.controller.add_listener(self._on_state_change)
        self._refresh()

    def _call_later(self, delay: float, callback: Callable[[], None]) -> TkTimer:
        return TkTimer(self.root, delay, callback)

    def _create_ui(self):
        """Create the Tkinter UI."""
        config = self.config

        self.root = tk.Tk()
        self.root.title(config.WINDOW_TITLE)
        self.root.configure(bg=config.BG_COLOR)
        self.root.minsize(640, 420)

        # Main container
        main_frame = ttk.Frame(self.root)
        main_frame.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)

        # Configure style
        style = ttk.Style()
        style.theme_use('clam')
        style.configure('TFrame', background=config.BG_COLOR)
        style.configure('TLabel', background=config.BG_COLOR, foreground='white', font=('Segoe UI', 11))
        style.configure('Title.TLabel', font=('Segoe UI', 16, 'bold'), foreground=config.TITLE_COLOR)
        style.configure('Status.TLabel', font=('Segoe UI', 12), foreground=config.HIGHLIGHT_COLOR)
        style.configure('Score.TLabel', font=('Segoe UI', 12, 'bold'))

        # Left panel - board
        left_frame = ttk.Frame(main_frame)
        left_frame.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(0, 10))

        ttk.Label(left_frame, text="🎮 Tic-Tac-Toe", style='Title.TLabel').pack(pady=(0, 10))

        self.status_label = ttk.Label(left_frame, text="", style='Status.TLabel')
        self.status_label.pack(pady=5)

        board_frame = ttk.Frame(left_frame)
        board_frame.pack(pady=10)

        self.board_cells = []
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                index = row * BOARD_SIZE + col
                cell = tk.Button(
                    board_frame,
                    text="",
                    font=('Segoe UI', 24, 'bold'),
                    width=4,
                    height=2,
                    bg=config.CELL_COLOR,
                    fg='white',
                    activebackground=config.CELL_COLOR,
                    relief='ridge',
                    borderwidth=2,
                    command=lambda i=index: self._on_cell_click(i)
                )
                cell.grid(row=row, column=col, padx=2, pady=2)
                self.board_cells.append(cell)

        # Legend
        legend_frame = ttk.Frame(left_frame)
        legend_frame.pack(pady=5)
        ttk.Label(legend_frame, text="X = You  ", foreground=config.HUMAN_COLOR).pack(side=tk.LEFT)
        ttk.Label(legend_frame, text="O = Computer", foreground=config.OPPONENT_COLOR).pack(side=tk.LEFT)

        self.position_label = ttk.Label(left_frame, text="")
        self.position_label.pack()

        # Right panel
        right_frame = ttk.Frame(main_frame, width=280)
        right_frame.pack(side=tk.RIGHT, fill=tk.Y, padx=(10, 0))
        right_frame.pack_propagate(False)

        # Score section
        ttk.Label(right_frame, text="📊 Score", style='Title.TLabel').pack()

        self.human_score_label = ttk.Label(right_frame, text="", style='Score.TLabel',
                                           foreground=config.HUMAN_COLOR)
        self.human_score_label.pack()
        self.opponent_score_label = ttk.Label(right_frame, text="", style='Score.TLabel',
                                              foreground=config.OPPONENT_COLOR)
        self.opponent_score_label.pack()
        self.ties_label = ttk.Label(right_frame, text="", style='Score.TLabel')
        self.ties_label.pack()
        self.games_label = ttk.Label(right_frame, text="")
        self.games_label.pack(pady=(8, 0))
        self.performance_label = ttk.Label(right_frame, text="", wraplength=260)
        self.performance_label.pack()

        # Difficulty section
        ttk.Separator(right_frame, orient='horizontal').pack(fill=tk.X, pady=15)
        ttk.Label(right_frame, text="⚙️ Difficulty", style='Title.TLabel').pack()

        diff_frame = ttk.Frame(right_frame)
        diff_frame.pack(pady=10)

        self.difficulty_buttons = {}
        for difficulty in Difficulty:
            btn = tk.Button(
                diff_frame,
                text=difficulty.value.capitalize(),
                font=('Segoe UI', 10, 'bold'),
                width=7,
                activebackground=config.DIFFICULTY_COLORS[difficulty],
                command=lambda d=difficulty: self._on_difficulty_click(d)
            )
            btn.pack(side=tk.LEFT, padx=3)
            self.difficulty_buttons[difficulty] = btn

        # Control buttons
        ttk.Separator(right_frame, orient='horizontal').pack(fill=tk.X, pady=15)

        control_frame = ttk.Frame(right_frame)
        control_frame.pack(pady=10)

        tk.Button(
            control_frame,
            text="▶ New Game",
            font=('Segoe UI', 11, 'bold'),
            bg='#10b981',
            fg='white',
            width=10,
            command=self._on_new_game
        ).pack(side=tk.LEFT, padx=5)

        tk.Button(
            control_frame,
            text="🔄 Reset Score",
            font=('Segoe UI', 11, 'bold'),
            bg='#6366f1',
            fg='white',
            width=10,
            command=self._on_reset_score
        ).pack(side=tk.LEFT, padx=5)

        # Quit button
        tk.Button(
            right_frame,
            text="✕ Quit",
            font=('Segoe UI', 10),
            bg='#ef4444',
            fg='white',
            width=24,
            command=self._quit
        ).pack(pady=10)

        # Bind close event
        self.root.protocol("WM_DELETE_WINDOW", self._quit)

    # ==================== CALLBACKS ====================

    def _on_cell_click(self, index: int):
        self.controller.submit_human_move(index)

    def _on_difficulty_click(self, difficulty: Difficulty):
        self.controller.set_difficulty(difficulty)

    def _on_new_game(self):
        self.controller.start_new_game()

    def _on_reset_score(self):
        self.controller.reset_score()

    def _on_state_change(self, controller: GameController):
        self._refresh()

    # ==================== RENDERING ====================

    def _refresh(self):
        """Redraw everything from the controller's state."""
        self._update_board_display()
        self._update_status()
        self._update_score()
        self._update_difficulty()

    def _update_board_display(self):
        """Update the board grid display."""
        controller = self.controller
        config = self.config
        highlight = set(controller.outcome.winning_cells)
        board_enabled = controller.phase == Phase.AWAITING_HUMAN and not controller.opponent_thinking

        for index, cell in enumerate(controller.board):
            button = self.board_cells[index]

            if cell == Cell.EMPTY:
                text, fg_color = "", 'white'
            elif cell == config.HUMAN_MARK:
                text, fg_color = cell.value, config.HUMAN_COLOR
            else:
                text, fg_color = cell.value, config.OPPONENT_COLOR

            bg_color = config.HIGHLIGHT_COLOR if index in highlight else config.CELL_COLOR
            state = 'normal' if board_enabled and cell == Cell.EMPTY else 'disabled'

            button.configure(text=text, fg=fg_color, disabledforeground=fg_color,
                             bg=bg_color, state=state)

    def _update_status(self):
        """Update the status line."""
        controller = self.controller
        outcome = controller.outcome

        if outcome.status == GameStatus.WON:
            if outcome.winner == self.config.HUMAN_MARK:
                text = "🏆 You win!"
            else:
                text = "🤖 Computer wins!"
        elif outcome.status == GameStatus.TIED:
            text = "🤝 It's a tie!"
        elif controller.opponent_thinking:
            text = "Computer is thinking..."
        elif controller.turn == Turn.HUMAN:
            text = "Your turn (X)"
        else:
            text = "Computer's turn (O)"

        self.status_label.configure(text=text)

        # Positive favours the human
        position = evaluate_position(controller.board, self.config.HUMAN_MARK)
        self.position_label.configure(text=f"Position: {position:+d}")

    def _update_score(self):
        score = self.controller.score
        self.human_score_label.configure(text=f"You: {score.human_wins}")
        self.opponent_score_label.configure(text=f"Computer: {score.opponent_wins}")
        self.ties_label.configure(text=f"Ties: {score.ties}")
        if score.games_played:
            self.games_label.configure(text=f"Games: {score.games_played}   Win rate: {score.win_rate}%")
        else:
            self.games_label.configure(text="")
        self.performance_label.configure(text=score.performance_message)

    def _update_difficulty(self):
        """Highlight the selected difficulty; lock the buttons mid-game."""
        controller = self.controller
        state = 'normal' if controller.can_change_difficulty else 'disabled'

        for difficulty, btn in self.difficulty_buttons.items():
            if difficulty == controller.difficulty:
                btn.configure(bg=self.config.DIFFICULTY_COLORS[difficulty], fg='black', state=state)
            else:
                btn.configure(bg='#2d3748', fg='white', state=state)

    def _quit(self):
        """Quit the application."""
        logger.debug("Quitting")
        # Also cancels a pending opponent move
        self.controller.start_new_game()
        self.root.quit()
        self.root.destroy()

    def run(self):
        """Run the UI main loop."""
        self.root.mainloop()

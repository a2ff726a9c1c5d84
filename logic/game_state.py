"""
Board model for TicTacToe.
A board is an immutable snapshot of the 3x3 grid; moves produce new boards.
"""

from enum import Enum
from typing import Optional, List, Tuple


class Cell(Enum):
    """The contents of one square."""
    EMPTY = " "
    X = "X"
    O = "O"

    def opposite(self) -> "Cell":
        """Get the opposite mark."""
        if self == Cell.X:
            return Cell.O
        if self == Cell.O:
            return Cell.X
        return Cell.EMPTY


# Board cells are indexed row-major:
#   0 | 1 | 2
#   3 | 4 | 5
#   6 | 7 | 8
BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE

Board = Tuple[Cell, ...]


def new_board() -> Board:
    """Return an empty board."""
    return (Cell.EMPTY,) * CELL_COUNT


def empty_cells(board: Board) -> List[int]:
    """
    Get all empty cells on the board.

    Args:
        board: Board snapshot.

    Returns:
        Indices of empty cells, ascending.
    """
    return [index for index, cell in enumerate(board) if cell == Cell.EMPTY]


def is_board_full(board: Board) -> bool:
    """True when no empty cell remains."""
    return all(cell != Cell.EMPTY for cell in board)


def is_legal(board: Board, index: int, player: Optional[Cell]) -> bool:
    """Whether `player` may place a mark at `index`."""
    if player is None or player == Cell.EMPTY:
        return False
    if not 0 <= index < CELL_COUNT:
        return False
    return board[index] == Cell.EMPTY


def apply_move(board: Board, index: int, player: Optional[Cell]) -> Board:
    """
    Place a mark on the board.

    Invalid moves (index out of range, occupied cell, no player) are not
    errors: the original board is returned unchanged.

    Args:
        board: Board snapshot.
        index: Cell index (0-8).
        player: Mark to place.

    Returns:
        A new board with the mark placed, or `board` itself.
    """
    if not is_legal(board, index, player):
        return board

    return board[:index] + (player,) + board[index + 1:]


def board_from_string(text: str) -> Board:
    """
    Build a board from a 9-character string such as "XX_OO____".

    '_', '.', ' ' and '-' mark empty cells.
    """
    if len(text) != CELL_COUNT:
        raise ValueError(f"Board string must have {CELL_COUNT} characters, got {len(text)}")

    cells = []
    for char in text.upper():
        if char == "X":
            cells.append(Cell.X)
        elif char == "O":
            cells.append(Cell.O)
        elif char in "_. -":
            cells.append(Cell.EMPTY)
        else:
            raise ValueError(f"Invalid board character: {char!r}")
    return tuple(cells)


def format_board(board: Board, numbered: bool = False) -> str:
    """
    Render the board as a text grid.

    Args:
        board: Board snapshot.
        numbered: Show 1-9 in empty cells (console prompt hints).
    """
    lines = ["┌───┬───┬───┐"]

    for row in range(BOARD_SIZE):
        row_str = "│"
        for col in range(BOARD_SIZE):
            index = row * BOARD_SIZE + col
            cell = board[index]
            if cell == Cell.EMPTY and numbered:
                row_str += f" {index + 1} │"
            else:
                row_str += f" {cell.value} │"
        lines.append(row_str)

        if row < BOARD_SIZE - 1:
            lines.append("├───┼───┼───┤")

    lines.append("└───┴───┴───┘")
    return "\n".join(lines)


# Quick test
if __name__ == "__main__":
    print("Testing board model...")

    board = new_board()

    for index, player in [(4, Cell.X), (0, Cell.O), (8, Cell.X)]:
        print(f"\n{player.value} moves to {index}")
        board = apply_move(board, index, player)
        print(format_board(board))

    # Occupied cell returns the same board
    assert apply_move(board, 4, Cell.O) is board
    print(f"\nEmpty cells: {empty_cells(board)}")

    print("\nBoard model test done!")

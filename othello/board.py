from __future__ import annotations

from typing import Dict, Iterator, List, Sequence

from othello.types import (
    Board, Grid, Coord, Player, Score,
    EMPTY, BLACK, WHITE, BOARD_SIZE,
)

SIZE: int = BOARD_SIZE

CORNERS = frozenset({(0, 0), (0, SIZE - 1), (SIZE - 1, 0), (SIZE - 1, SIZE - 1)})
CENTER = frozenset({(3, 3), (3, 4), (4, 3), (4, 4)})


# ============================
# Board setup and utilities
# ============================
def empty_board() -> Board:
    return tuple((EMPTY,) * SIZE for _ in range(SIZE))


def initial_board() -> Board:
    """Standard opening: white on the (3,3)-(4,4) diagonal, black on the other."""
    return with_cells(empty_board(), {
        (3, 3): WHITE,
        (3, 4): BLACK,
        (4, 3): BLACK,
        (4, 4): WHITE,
    })


def board_from_rows(rows: Sequence[Sequence[int]]) -> Board:
    """Build a board from any 8x8 nested sequence of cell values."""
    board = tuple(tuple(int(v) for v in row) for row in rows)
    if len(board) != SIZE or any(len(row) != SIZE for row in board):
        raise ValueError("Board must be 8 rows of 8 cells")
    if any(v not in (EMPTY, BLACK, WHITE) for row in board for v in row):
        raise ValueError("Cells must be 0 (empty), 1 (black) or -1 (white)")
    return board


def with_cells(board: Board, updates: Dict[Coord, int]) -> Board:
    """Return a structural copy of `board` with `updates` applied."""
    if not updates:
        return board
    rows: List[List[int]] = [list(row) for row in board]
    for (r, c), value in updates.items():
        rows[r][c] = value
    return tuple(tuple(row) for row in rows)


def empty_grid() -> Grid:
    return tuple((False,) * SIZE for _ in range(SIZE))


def with_flag(grid: Grid, row: int, col: int, value: bool) -> Grid:
    """Return a copy of `grid` with one cell set to `value`."""
    if grid[row][col] == value:
        return grid
    rows = [list(r) for r in grid]
    rows[row][col] = value
    return tuple(tuple(r) for r in rows)


def opponent(player: Player) -> Player:
    return -player


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < SIZE and 0 <= col < SIZE


def is_corner(row: int, col: int) -> bool:
    return (row, col) in CORNERS


def is_edge(row: int, col: int) -> bool:
    """Outer ring cell that is not a corner."""
    on_ring = row in (0, SIZE - 1) or col in (0, SIZE - 1)
    return on_ring and not is_corner(row, col)


def is_corner_adjacent(row: int, col: int) -> bool:
    """Non-corner cell touching a corner (the X and C squares)."""
    if is_corner(row, col):
        return False
    return any(abs(row - cr) <= 1 and abs(col - cc) <= 1 for cr, cc in CORNERS)


def all_cells() -> Iterator[Coord]:
    """Yield every coordinate in row-major order."""
    for r in range(SIZE):
        for c in range(SIZE):
            yield (r, c)


def neighbors(row: int, col: int) -> List[Coord]:
    """The 3x3 neighbourhood of (row, col) minus the centre, clipped to the board."""
    out: List[Coord] = []
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            r, c = row + dr, col + dc
            if in_bounds(r, c):
                out.append((r, c))
    return out


def count_discs(board: Board) -> Score:
    """Count discs per player.

    Returns:
        Score(black, white)
    """
    black = sum(row.count(BLACK) for row in board)
    white = sum(row.count(WHITE) for row in board)
    return Score(black, white)


def player_name(player: Player) -> str:
    return "BLACK" if player == BLACK else "WHITE"


def format_pos(row: int, col: int) -> str:
    """1-based display form used in log entries."""
    return f"({row + 1},{col + 1})"

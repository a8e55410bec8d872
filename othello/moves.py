"""
Capture rule engine: ray-casting flip computation with flip protection.

Protection is checked per candidate cell, not per ray. A protected disc is left
out of the flip list but still counts as part of the bracketed run, so a ray
stays valid as long as it ends on the mover's own disc and at least one of its
cells is unprotected.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from othello.board import all_cells, in_bounds, opponent, with_cells
from othello.types import Board, Coord, FlipProtection, GameState, Player, EMPTY

DIRECTIONS: Tuple[Coord, ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)

NO_PROTECTION = FlipProtection()


def _ray_flips(board: Board, player: Player, row: int, col: int, dr: int, dc: int,
               protection: FlipProtection) -> List[Coord]:
    opp = opponent(player)
    flips: List[Coord] = []
    passed_opponent = False
    r, c = row + dr, col + dc
    while in_bounds(r, c) and board[r][c] == opp:
        passed_opponent = True
        if not protection.is_protected(r, c, player):
            flips.append((r, c))
        r += dr
        c += dc
    if passed_opponent and in_bounds(r, c) and board[r][c] == player:
        return flips
    return []


def compute_flips(board: Board, player: Player, row: int, col: int,
                  protection: Optional[FlipProtection] = None) -> List[Coord]:
    """All discs flipped if `player` places at (row, col); [] when illegal."""
    if not in_bounds(row, col) or board[row][col] != EMPTY:
        return []
    prot = protection or NO_PROTECTION
    flips: List[Coord] = []
    for dr, dc in DIRECTIONS:
        flips.extend(_ray_flips(board, player, row, col, dr, dc, prot))
    return flips


def is_valid_move(board: Board, player: Player, row: int, col: int,
                  protection: Optional[FlipProtection] = None) -> bool:
    return len(compute_flips(board, player, row, col, protection)) > 0


def legal_moves(board: Board, player: Player,
                protection: Optional[FlipProtection] = None) -> List[Coord]:
    """Every legal placement for `player`, in row-major order."""
    return [(r, c) for r, c in all_cells() if is_valid_move(board, player, r, c, protection)]


def has_any_legal_move(board: Board, player: Player,
                       protection: Optional[FlipProtection] = None) -> bool:
    for r, c in all_cells():
        if is_valid_move(board, player, r, c, protection):
            return True
    return False


def mobility(board: Board, player: Player,
             protection: Optional[FlipProtection] = None) -> int:
    return len(legal_moves(board, player, protection))


def apply_move(board: Board, player: Player, row: int, col: int,
               protection: Optional[FlipProtection] = None) -> Board:
    """Place a disc and flip the captured cells.

    Callers are expected to check legality first; an illegal move returns the
    board unchanged.
    """
    flips = compute_flips(board, player, row, col, protection)
    if not flips:
        return board
    updates = {(row, col): player}
    for cell in flips:
        updates[cell] = player
    return with_cells(board, updates)


def protection_for(state: GameState, player: Player,
                   turn_index: Optional[int] = None) -> FlipProtection:
    """Protection seen by `player` at `turn_index` (defaults to the state's own)."""
    turn = state.turn_index if turn_index is None else turn_index
    barrier = state.barrier
    if (barrier is not None and barrier.active and barrier.applies_to == player
            and barrier.expires_on_turn == turn):
        return FlipProtection(state.shield, barrier.cells, player)
    return FlipProtection(state.shield)


__all__ = [
    "DIRECTIONS",
    "compute_flips",
    "is_valid_move",
    "legal_moves",
    "has_any_legal_move",
    "mobility",
    "apply_move",
    "protection_for",
]

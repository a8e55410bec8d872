"""
Evaluation interfaces and the heuristic board evaluator.

All weights below are tuning knobs, not rule constants; change them freely.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Union

import numpy as np

from othello.board import SIZE, is_corner, is_edge
from othello.moves import compute_flips, mobility
from othello.types import Board, FlipProtection, Player

# Move scoring (greedy play and skill arbitration)
MOVE_FLIP_WEIGHT = 10.0
MOVE_CORNER_BONUS = 50.0
MOVE_EDGE_BONUS = 8.0

# Board evaluation (one-ply lookahead)
DISC_WEIGHT = 1.0
CORNER_WEIGHT = 25.0
EDGE_WEIGHT = 3.0
MOBILITY_WEIGHT = 2.0

CORNER_MASK = np.zeros((SIZE, SIZE), dtype=bool)
EDGE_MASK = np.zeros((SIZE, SIZE), dtype=bool)
for _r in range(SIZE):
    for _c in range(SIZE):
        CORNER_MASK[_r, _c] = is_corner(_r, _c)
        EDGE_MASK[_r, _c] = is_edge(_r, _c)


def score_move(board: Board, player: Player, row: int, col: int,
               protection: Optional[FlipProtection] = None) -> float:
    """flips x weight + corner bonus + edge bonus; 0 for an illegal move."""
    flips = compute_flips(board, player, row, col, protection)
    if not flips:
        return 0.0
    score = len(flips) * MOVE_FLIP_WEIGHT
    if is_corner(row, col):
        score += MOVE_CORNER_BONUS
    elif is_edge(row, col):
        score += MOVE_EDGE_BONUS
    return score


class Evaluator(ABC):
    """Abstract evaluator interface for position scoring."""

    @abstractmethod
    def evaluate_position(self, board: Board, player: Player,
                          protection: Optional[FlipProtection] = None) -> float:  # pragma: no cover
        """Evaluate a single board position for the given player."""
        raise NotImplementedError

    def batch_predict(
        self,
        boards: List[Board],
        players: Union[List[Player], np.ndarray],
        protection: Optional[FlipProtection] = None,
    ) -> np.ndarray:
        """Evaluate several positions; the default loops over single calls."""
        out = np.zeros(len(boards), dtype=np.float32)
        for i, board in enumerate(boards):
            out[i] = float(self.evaluate_position(board, int(players[i]), protection))
        return out


class HeuristicEvaluator(Evaluator):
    """Disc differential + corner and edge ownership + mobility differential."""

    def __init__(self, disc_weight: float = DISC_WEIGHT, corner_weight: float = CORNER_WEIGHT,
                 edge_weight: float = EDGE_WEIGHT, mobility_weight: float = MOBILITY_WEIGHT) -> None:
        self.disc_weight = disc_weight
        self.corner_weight = corner_weight
        self.edge_weight = edge_weight
        self.mobility_weight = mobility_weight

    def evaluate_position(self, board: Board, player: Player,
                          protection: Optional[FlipProtection] = None) -> float:
        arr = np.asarray(board, dtype=np.int8)
        mine = arr == player
        theirs = arr == -player

        disc_diff = int(mine.sum()) - int(theirs.sum())
        corner_diff = int((mine & CORNER_MASK).sum()) - int((theirs & CORNER_MASK).sum())
        edge_diff = int((mine & EDGE_MASK).sum()) - int((theirs & EDGE_MASK).sum())
        mobility_diff = mobility(board, player, protection) - mobility(board, -player, protection)

        return float(
            disc_diff * self.disc_weight
            + corner_diff * self.corner_weight
            + edge_diff * self.edge_weight
            + mobility_diff * self.mobility_weight
        )


def get_evaluator() -> Evaluator:
    return HeuristicEvaluator()


__all__ = [
    "Evaluator",
    "HeuristicEvaluator",
    "get_evaluator",
    "score_move",
    "CORNER_MASK",
    "EDGE_MASK",
]

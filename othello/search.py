"""
Move search strategies, one per difficulty level.
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Optional, Union

from othello.eval import Evaluator, get_evaluator, score_move
from othello.moves import apply_move, legal_moves
from othello.types import Board, Difficulty, FlipProtection, GameResult, Player

# Added to the immediate evaluation when the opponent would have no reply
STALL_BONUS = 30.0


class SearchStrategy(ABC):
    """Abstract interface for move search strategies."""

    @abstractmethod
    def search(self, board: Board, player: Player,
               protection: Optional[FlipProtection] = None) -> GameResult:  # pragma: no cover
        raise NotImplementedError


class RandomStrategy(SearchStrategy):
    """Uniformly random legal move (easy)."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def search(self, board: Board, player: Player,
               protection: Optional[FlipProtection] = None) -> GameResult:
        moves = legal_moves(board, player, protection)
        if not moves:
            return (0.0, None)
        move = self.rng.choice(moves)
        return (score_move(board, player, move[0], move[1], protection), move)


class GreedyStrategy(SearchStrategy):
    """Highest `score_move`; ties keep the first row-major candidate (normal)."""

    def search(self, board: Board, player: Player,
               protection: Optional[FlipProtection] = None) -> GameResult:
        best_score = float("-inf")
        best_move = None
        for r, c in legal_moves(board, player, protection):
            sc = score_move(board, player, r, c, protection)
            if sc > best_score:
                best_score = sc
                best_move = (r, c)
        if best_move is None:
            return (0.0, None)
        return (best_score, best_move)


class LookaheadStrategy(SearchStrategy):
    """One ply of adversarial lookahead over the heuristic evaluator (hard).

    Each candidate scores the average of its immediate evaluation and the worst
    position the opponent can reply into. With no reply available the
    candidate gets the immediate evaluation plus STALL_BONUS.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None,
                 stall_bonus: float = STALL_BONUS) -> None:
        self.evaluator = evaluator or get_evaluator()
        self.stall_bonus = stall_bonus

    def score_candidate(self, board: Board, player: Player, row: int, col: int,
                        protection: Optional[FlipProtection] = None) -> float:
        child = apply_move(board, player, row, col, protection)
        immediate = self.evaluator.evaluate_position(child, player, protection)
        replies = legal_moves(child, -player, protection)
        if not replies:
            return immediate + self.stall_bonus
        worst = min(
            self.evaluator.evaluate_position(apply_move(child, -player, r, c, protection), player, protection)
            for r, c in replies
        )
        return (immediate + worst) / 2.0

    def search(self, board: Board, player: Player,
               protection: Optional[FlipProtection] = None) -> GameResult:
        best_score = float("-inf")
        best_move = None
        for r, c in legal_moves(board, player, protection):
            sc = self.score_candidate(board, player, r, c, protection)
            if sc > best_score:
                best_score = sc
                best_move = (r, c)
        if best_move is None:
            return (0.0, None)
        return (best_score, best_move)


def get_search_strategy(difficulty: Union[Difficulty, str] = Difficulty.NORMAL,
                        rng: Optional[random.Random] = None,
                        evaluator: Optional[Evaluator] = None) -> SearchStrategy:
    """Factory mapping a difficulty level to its move search."""
    level = Difficulty(difficulty)
    if level == Difficulty.EASY:
        return RandomStrategy(rng)
    if level == Difficulty.HARD:
        return LookaheadStrategy(evaluator)
    return GreedyStrategy()


__all__ = [
    "SearchStrategy",
    "RandomStrategy",
    "GreedyStrategy",
    "LookaheadStrategy",
    "get_search_strategy",
    "STALL_BONUS",
]

"""
Computer opponent: skill-vs-move arbitration and per-skill target heuristics.

The AI only reads a `GameState` and returns an intent; it never mutates state.
Every weight in this module is a tuning knob for play style, not a rule.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Union

from othello.board import is_corner, is_corner_adjacent, is_edge, neighbors
from othello.eval import Evaluator, score_move
from othello.moves import compute_flips, legal_moves, protection_for
from othello.search import SearchStrategy, get_search_strategy
from othello.skills import HAND_CAPACITY, build_barrier_cells, can_use_skill, remove_skill_once, valid_skill_targets
from othello.types import (
    ActivateSkill, Coord, Difficulty, FlipProtection, GameState, Intent, PassTurn,
    PlaceDisc, Player, SkillType,
)

logger = logging.getLogger(__name__)

# Arbitration
EASY_SKILL_CHANCE = 0.3
NORMAL_SKILL_BONUS = 10.0
HARD_SKILL_MARGIN = 15.0

# Skill target heuristics
CONVERT_BASE = 12.0
CONVERT_EDGE_BONUS = 15.0
CONVERT_CORNER_ADJ_BONUS = 10.0
REMOVE_BASE = 8.0
REMOVE_EDGE_BONUS = 12.0
REMOVE_CORNER_ADJ_BONUS = 8.0
REMOVE_OWN_DISC = -20.0
SHIELD_PER_ADJACENT_OPPONENT = 6.0
SHIELD_EDGE_BONUS = 6.0
BARRIER_PER_THREATENED_CELL = 8.0
WARP_CORNER = 100.0
WARP_EDGE = 25.0
WARP_CORNER_ADJ_PENALTY = 10.0
WARP_TILE_BONUS = 15.0
DOUBLE_DISCOUNT = 0.6


@dataclass(frozen=True)
class SkillChoice:
    skill: SkillType
    target: Optional[Coord]
    score: float


def _convert_score(state: GameState, row: int, col: int) -> float:
    score = CONVERT_BASE
    if is_edge(row, col):
        score += CONVERT_EDGE_BONUS
    if is_corner_adjacent(row, col):
        score += CONVERT_CORNER_ADJ_BONUS
    return score


def _remove_score(state: GameState, row: int, col: int) -> float:
    if state.board[row][col] == state.current_player:
        return REMOVE_OWN_DISC
    score = REMOVE_BASE
    if is_edge(row, col):
        score += REMOVE_EDGE_BONUS
    if is_corner_adjacent(row, col):
        score += REMOVE_CORNER_ADJ_BONUS
    return score


def _shield_score(state: GameState, row: int, col: int) -> float:
    opp = -state.current_player
    exposed = sum(1 for r, c in neighbors(row, col) if state.board[r][c] == opp)
    if exposed == 0:
        return 0.0
    score = exposed * SHIELD_PER_ADJACENT_OPPONENT
    if is_edge(row, col):
        score += SHIELD_EDGE_BONUS
    return score


def _opponent_threats(state: GameState) -> Set[Coord]:
    """Own cells the opponent could flip on its next turn, ignoring any barrier."""
    opp = -state.current_player
    protection = FlipProtection(state.shield)
    threatened: Set[Coord] = set()
    for r, c in legal_moves(state.board, opp, protection):
        threatened.update(compute_flips(state.board, opp, r, c, protection))
    return threatened


def _warp_score(state: GameState, row: int, col: int) -> float:
    if is_corner(row, col):
        score = WARP_CORNER
    elif is_edge(row, col):
        score = WARP_EDGE
    else:
        score = 0.0
    if is_corner_adjacent(row, col):
        score -= WARP_CORNER_ADJ_PENALTY
    if (row, col) in state.skill_tiles:
        hand_after = remove_skill_once(state.hand(), SkillType.WARP)
        if len(hand_after) < HAND_CAPACITY:
            score += WARP_TILE_BONUS
    return score


_TARGET_SCORERS: Dict[SkillType, Callable[[GameState, int, int], float]] = {
    SkillType.CONVERT: _convert_score,
    SkillType.REMOVE: _remove_score,
    SkillType.SHIELD: _shield_score,
    SkillType.WARP: _warp_score,
}


class AIPlayer:
    """Produces one intent per call for the player to move."""

    def __init__(self, difficulty: Union[Difficulty, str] = Difficulty.NORMAL,
                 rng: Optional[random.Random] = None,
                 evaluator: Optional[Evaluator] = None,
                 strategy: Optional[SearchStrategy] = None) -> None:
        self.difficulty = Difficulty(difficulty)
        self.rng = rng or random.Random()
        self.strategy = strategy or get_search_strategy(self.difficulty, self.rng, evaluator)

    def decide(self, state: GameState) -> Optional[Intent]:
        """Pick a skill activation, a placement or a pass; None once the game is over."""
        if state.game_over:
            return None
        me = state.current_player
        protection = protection_for(state, me)
        moves = legal_moves(state.board, me, protection)
        best_move_score: Optional[float] = None
        if moves:
            best_move_score = max(score_move(state.board, me, r, c, protection) for r, c in moves)

        if state.hand(me) and not state.turn_skill_used and state.double_move_remaining == 0:
            choice = self.best_skill_action(state)
            if choice is not None and self._prefers_skill(choice.score, best_move_score):
                logger.debug("AI (%s) chose %s at %s, score %.1f vs move %s",
                             self.difficulty.value, choice.skill.value, choice.target,
                             choice.score, best_move_score)
                return ActivateSkill(choice.skill, choice.target)

        if not moves:
            return PassTurn()
        _, move = self.strategy.search(state.board, me, protection)
        if move is None:
            return PassTurn()
        return PlaceDisc(move[0], move[1])

    def _prefers_skill(self, skill_score: float, best_move_score: Optional[float]) -> bool:
        if best_move_score is None:
            return True
        if self.difficulty == Difficulty.EASY:
            return self.rng.random() < EASY_SKILL_CHANCE
        if self.difficulty == Difficulty.NORMAL:
            return skill_score >= best_move_score + NORMAL_SKILL_BONUS
        return skill_score >= best_move_score - HARD_SKILL_MARGIN

    def best_skill_action(self, state: GameState) -> Optional[SkillChoice]:
        """Best positive-scoring usable skill in hand; None when nothing is worth it."""
        best: Optional[SkillChoice] = None
        seen: Set[SkillType] = set()
        for skill in state.hand():
            if skill in seen:
                continue
            seen.add(skill)
            if not can_use_skill(state, skill):
                continue
            choice = self.score_skill(state, skill)
            if choice is None or choice.score <= 0:
                continue
            if best is None or choice.score > best.score:
                best = choice
        return best

    def score_skill(self, state: GameState, skill: SkillType) -> Optional[SkillChoice]:
        """Best target for `skill` with its heuristic score."""
        if skill == SkillType.DOUBLE:
            return self._score_double(state)
        if skill == SkillType.BARRIER:
            return self._score_barrier(state)
        scorer = _TARGET_SCORERS[skill]
        return self._best_target(skill, valid_skill_targets(state, skill),
                                 lambda r, c: scorer(state, r, c))

    def _best_target(self, skill: SkillType, targets: List[Coord],
                     scorer: Callable[[int, int], float]) -> Optional[SkillChoice]:
        best: Optional[SkillChoice] = None
        for r, c in targets:
            sc = scorer(r, c)
            if best is None or sc > best.score:
                best = SkillChoice(skill, (r, c), sc)
        return best

    def _score_barrier(self, state: GameState) -> Optional[SkillChoice]:
        threatened = _opponent_threats(state)
        return self._best_target(
            SkillType.BARRIER,
            valid_skill_targets(state, SkillType.BARRIER),
            lambda r, c: len(build_barrier_cells(r, c) & threatened) * BARRIER_PER_THREATENED_CELL,
        )

    def _score_double(self, state: GameState) -> Optional[SkillChoice]:
        me: Player = state.current_player
        protection = protection_for(state, me)
        scores = sorted(
            (score_move(state.board, me, r, c, protection)
             for r, c in legal_moves(state.board, me, protection)),
            reverse=True,
        )
        if not scores:
            return None
        return SkillChoice(SkillType.DOUBLE, None, DOUBLE_DISCOUNT * sum(scores[:2]))


def choose_intent(state: GameState, difficulty: Union[Difficulty, str] = Difficulty.NORMAL,
                  rng: Optional[random.Random] = None) -> Optional[Intent]:
    """Functional shortcut for a one-off decision."""
    return AIPlayer(difficulty, rng).decide(state)

"""Skill Othello package: rules engine, session state machine and AI opponent.

Usage examples:
    from othello import new_game, place_disc, compute_flips
    from othello import GameSession, GameController
    from othello import AIPlayer
"""
from __future__ import annotations

# Rules
from .board import initial_board, count_discs, is_corner, is_edge
from .moves import (
    compute_flips,
    is_valid_move,
    legal_moves,
    has_any_legal_move,
    apply_move,
    protection_for,
)
from .skills import SKILL_CATALOG, SKILL_POOL, HAND_CAPACITY, is_valid_skill_target, can_use_skill
from .types import (
    GameState,
    MoveDescriptor,
    FlipProtection,
    BarrierState,
    SkillType,
    Difficulty,
    GameMode,
    PlaceDisc,
    ActivateSkill,
    PassTurn,
    BLACK,
    WHITE,
    EMPTY,
    DRAW,
)

# Session
from .session import (
    new_game,
    place_disc,
    activate_skill,
    pass_turn,
    advance_turn,
    apply_intent,
    GameSession,
)

# AI
from .eval import HeuristicEvaluator, get_evaluator, score_move
from .search import get_search_strategy
from .ai import AIPlayer, choose_intent
from .scheduler import AIScheduler
from .controller import GameController

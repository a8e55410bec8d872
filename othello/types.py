"""
Type definitions and value objects for the Skill Othello engine.

This module provides:
- Type aliases for boards, overlays and coordinates
- Enums for skills, difficulty levels and game modes
- Frozen dataclasses for the game state snapshot and the move descriptor
- Intent objects issued by humans and by the AI
- Protocols for evaluators and search strategies
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Protocol, Tuple, Dict, Any, Optional, Union, Mapping, FrozenSet, NamedTuple

# Basic type aliases
Player = int  # 1 for black, -1 for white
Coord = Tuple[int, int]  # (row, col), 0-indexed
Board = Tuple[Tuple[int, ...], ...]  # 8 rows of 8 cell states
Grid = Tuple[Tuple[bool, ...], ...]  # 8x8 boolean overlay
GameResult = Tuple[float, Optional[Coord]]  # (score, best_move)

# Cell and player constants
EMPTY = 0
BLACK = 1
WHITE = -1
DRAW = 0  # winner value when the final counts are equal
VALID_PLAYERS = (BLACK, WHITE)
BOARD_SIZE = 8


class SkillType(str, Enum):
    """The fixed skill catalog."""

    CONVERT = "convert"
    WARP = "warp"
    DOUBLE = "double"
    SHIELD = "shield"
    BARRIER = "barrier"
    REMOVE = "remove"


class Difficulty(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class GameMode(str, Enum):
    HUMAN_VS_HUMAN = "hvh"
    HUMAN_VS_AI = "hva"


class Score(NamedTuple):
    black: int
    white: int


@dataclass(frozen=True)
class FlipProtection:
    """Cells that the capture rule may not flip.

    Shielded cells are protected against everybody; barrier cells only against
    `barrier_applies_to`.
    """
    shield: Optional[Grid] = None
    barrier_cells: FrozenSet[Coord] = frozenset()
    barrier_applies_to: Optional[Player] = None

    def is_protected(self, row: int, col: int, player: Player) -> bool:
        if self.shield is not None and self.shield[row][col]:
            return True
        if self.barrier_applies_to == player and (row, col) in self.barrier_cells:
            return True
        return False


@dataclass(frozen=True)
class BarrierState:
    """A time-boxed region protecting `owner`'s discs from `applies_to`."""
    active: bool
    owner: Player
    applies_to: Player
    expires_on_turn: int
    cells: FrozenSet[Coord]


@dataclass(frozen=True)
class MoveDescriptor:
    """Emitted on every accepted placement or skill with a board effect."""
    player: Player
    row: int
    col: int
    flipped: Tuple[Coord, ...] = ()
    kind: str = "place"


@dataclass(frozen=True)
class GameState:
    """
    Immutable snapshot of a Skill Othello session.

    Every accepted intent produces a new instance; nothing in here is ever
    edited in place, so snapshots can be retained for diffing and lookahead.
    """
    board: Board
    current_player: Player = BLACK
    game_over: bool = False
    winner: Optional[int] = None
    turn_index: int = 0
    skill_tiles: Mapping[Coord, SkillType] = field(default_factory=dict)
    hands: Mapping[Player, Tuple[SkillType, ...]] = field(
        default_factory=lambda: {BLACK: (), WHITE: ()})
    shield: Optional[Grid] = None
    barrier: Optional[BarrierState] = None
    log: Tuple[str, ...] = ()
    turn_skill_used: bool = False
    double_move_remaining: int = 0
    last_move: Optional[MoveDescriptor] = None

    def __post_init__(self) -> None:
        """Validate the game state after initialization."""
        if len(self.board) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in self.board):
            raise ValueError("Board must be 8 rows of 8 cells")
        if not is_valid_player(self.current_player):
            raise ValueError("Current player must be 1 (black) or -1 (white)")
        if self.turn_index < 0:
            raise ValueError("Turn index must be non-negative")
        if not 0 <= self.double_move_remaining <= 2:
            raise ValueError("double_move_remaining must be between 0 and 2")
        if self.shield is None:
            object.__setattr__(self, "shield", tuple((False,) * BOARD_SIZE for _ in range(BOARD_SIZE)))
        # read-only copies, never shared with the caller or another snapshot
        object.__setattr__(self, "skill_tiles", MappingProxyType(dict(self.skill_tiles)))
        object.__setattr__(self, "hands", MappingProxyType(
            {p: tuple(h) for p, h in self.hands.items()}))

    def __hash__(self) -> int:
        return hash((self.board, self.current_player, self.turn_index, self.game_over))

    @property
    def score(self) -> Score:
        black = sum(row.count(BLACK) for row in self.board)
        white = sum(row.count(WHITE) for row in self.board)
        return Score(black, white)

    @property
    def phase(self) -> str:
        if self.game_over:
            return "game_over"
        if self.double_move_remaining > 0:
            return "extra_moves_pending"
        return "awaiting_move"

    def hand(self, player: Optional[Player] = None) -> Tuple[SkillType, ...]:
        return tuple(self.hands.get(self.current_player if player is None else player, ()))

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view of the snapshot for renderers."""
        return {
            "board": [list(row) for row in self.board],
            "current_player": self.current_player,
            "score": {"black": self.score.black, "white": self.score.white},
            "game_over": self.game_over,
            "winner": self.winner,
            "turn_index": self.turn_index,
            "skill_tiles": {f"{r},{c}": s.value for (r, c), s in self.skill_tiles.items()},
            "hands": {p: [s.value for s in h] for p, h in self.hands.items()},
            "shield": [list(row) for row in self.shield],
            "barrier": None if self.barrier is None else {
                "active": self.barrier.active,
                "owner": self.barrier.owner,
                "applies_to": self.barrier.applies_to,
                "expires_on_turn": self.barrier.expires_on_turn,
                "cells": sorted(self.barrier.cells),
            },
            "log": list(self.log),
            "turn_skill_used": self.turn_skill_used,
            "double_move_remaining": self.double_move_remaining,
            "last_move": None if self.last_move is None else {
                "player": self.last_move.player,
                "row": self.last_move.row,
                "col": self.last_move.col,
                "flipped": list(self.last_move.flipped),
                "kind": self.last_move.kind,
            },
        }


# Intents
@dataclass(frozen=True)
class PlaceDisc:
    row: int
    col: int


@dataclass(frozen=True)
class ActivateSkill:
    skill: SkillType
    target: Optional[Coord] = None


@dataclass(frozen=True)
class PassTurn:
    pass


Intent = Union[PlaceDisc, ActivateSkill, PassTurn]


class PositionEvaluatorProtocol(Protocol):
    """Protocol for position evaluation functions."""

    def evaluate_position(self, board: Board, player: Player,
                          protection: Optional[FlipProtection] = None) -> float:
        """Evaluate a position and return a score."""
        ...


class SearchStrategyProtocol(Protocol):
    """Protocol for move search implementations."""

    def search(self, board: Board, player: Player,
               protection: Optional[FlipProtection] = None) -> GameResult:
        """Search for the best move given a board state."""
        ...


# Utility functions for type checking
def is_valid_player(player: Any) -> bool:
    """Check if a value is a valid player identifier."""
    return player in VALID_PLAYERS


def is_valid_coord(coord: Any) -> bool:
    """Check if an object is an in-range (row, col) pair."""
    return (isinstance(coord, tuple) and len(coord) == 2 and
            all(isinstance(x, int) and 0 <= x < BOARD_SIZE for x in coord))


def coerce_skill(value: Union[str, SkillType]) -> Optional[SkillType]:
    """Map a skill name (or enum) to SkillType; None when unknown."""
    if isinstance(value, SkillType):
        return value
    try:
        return SkillType(str(value).lower())
    except ValueError:
        return None

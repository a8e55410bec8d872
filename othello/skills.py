"""
Skill catalog, targeting rules and board effects.

Effects here only touch the board and overlays. Hand consumption, log entries,
tile pickup and turn advancement belong to the session state machine.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from othello.board import all_cells, in_bounds, is_corner, neighbors, with_cells, with_flag
from othello.moves import has_any_legal_move, protection_for
from othello.types import (
    BarrierState, Coord, GameState, MoveDescriptor, SkillType,
    EMPTY,
)

HAND_CAPACITY: int = 2

# Tiles dealt onto the board at session start, one per shuffled position
SKILL_POOL: Tuple[SkillType, ...] = (
    SkillType.CONVERT,
    SkillType.CONVERT,
    SkillType.WARP,
    SkillType.DOUBLE,
    SkillType.SHIELD,
    SkillType.BARRIER,
    SkillType.REMOVE,
    SkillType.REMOVE,
)


@dataclass(frozen=True)
class SkillSpec:
    kind: SkillType
    name: str
    short: str
    requires_target: bool
    description: str


SKILL_CATALOG: Dict[SkillType, SkillSpec] = {
    SkillType.CONVERT: SkillSpec(SkillType.CONVERT, "Convert", "CV", True,
                                 "Turn one opponent disc (not a corner) to your colour."),
    SkillType.WARP: SkillSpec(SkillType.WARP, "Warp", "WP", True,
                              "Place a disc on any empty cell without flipping."),
    SkillType.DOUBLE: SkillSpec(SkillType.DOUBLE, "Double", "2X", False,
                                "Place two discs this turn."),
    SkillType.SHIELD: SkillSpec(SkillType.SHIELD, "Shield", "SH", True,
                                "Make one of your discs (not a corner) unflippable."),
    SkillType.BARRIER: SkillSpec(SkillType.BARRIER, "Barrier", "BR", True,
                                 "Block opponent captures around an empty cell for their next turn."),
    SkillType.REMOVE: SkillSpec(SkillType.REMOVE, "Remove", "RM", True,
                                "Take any disc (not a corner) off the board."),
}


def skill_name(skill: SkillType) -> str:
    return SKILL_CATALOG[skill].name


def requires_target(skill: SkillType) -> bool:
    return SKILL_CATALOG[skill].requires_target


def remove_skill_once(hand: Tuple[SkillType, ...], skill: SkillType) -> Tuple[SkillType, ...]:
    """Drop the first occurrence of `skill`; unchanged when absent."""
    if skill not in hand:
        return hand
    i = hand.index(skill)
    return hand[:i] + hand[i + 1:]


def build_barrier_cells(row: int, col: int) -> FrozenSet[Coord]:
    return frozenset(neighbors(row, col))


def _is_blocked(state: GameState, row: int, col: int) -> bool:
    barrier = state.barrier
    return barrier is not None and barrier.active and (row, col) in barrier.cells


# ============================
# Legality
# ============================
def is_valid_skill_target(state: GameState, skill: SkillType, row: int, col: int) -> bool:
    """Whether (row, col) is a legal target of `skill` for the player to move."""
    if not in_bounds(row, col):
        return False
    cell = state.board[row][col]
    me = state.current_player
    if skill == SkillType.CONVERT:
        return cell != EMPTY and cell != me and not is_corner(row, col)
    if skill == SkillType.REMOVE:
        return cell != EMPTY and not is_corner(row, col)
    if skill == SkillType.SHIELD:
        return cell == me and not is_corner(row, col) and not state.shield[row][col]
    if skill == SkillType.BARRIER:
        return cell == EMPTY and not is_corner(row, col) and not _is_blocked(state, row, col)
    if skill == SkillType.WARP:
        return cell == EMPTY
    # double takes no target
    return False


def valid_skill_targets(state: GameState, skill: SkillType) -> List[Coord]:
    return [(r, c) for r, c in all_cells() if is_valid_skill_target(state, skill, r, c)]


def has_target_for_skill(state: GameState, skill: SkillType) -> bool:
    if skill == SkillType.DOUBLE:
        me = state.current_player
        return has_any_legal_move(state.board, me, protection_for(state, me))
    return any(is_valid_skill_target(state, skill, r, c) for r, c in all_cells())


def can_use_skill(state: GameState, skill: SkillType) -> bool:
    """Full activation check: turn flags, hand contents and target availability."""
    if state.game_over:
        return False
    if state.double_move_remaining > 0 or state.turn_skill_used:
        return False
    if skill not in state.hand():
        return False
    return has_target_for_skill(state, skill)


# ============================
# Effects
# ============================
def _convert(state: GameState, row: int, col: int) -> GameState:
    me = state.current_player
    return dataclasses.replace(
        state,
        board=with_cells(state.board, {(row, col): me}),
        shield=with_flag(state.shield, row, col, False),
        last_move=MoveDescriptor(me, row, col, (), SkillType.CONVERT.value),
    )


def _remove(state: GameState, row: int, col: int) -> GameState:
    return dataclasses.replace(
        state,
        board=with_cells(state.board, {(row, col): EMPTY}),
        shield=with_flag(state.shield, row, col, False),
        last_move=MoveDescriptor(state.current_player, row, col, (), SkillType.REMOVE.value),
    )


def _shield(state: GameState, row: int, col: int) -> GameState:
    return dataclasses.replace(state, shield=with_flag(state.shield, row, col, True), last_move=None)


def _barrier(state: GameState, row: int, col: int) -> GameState:
    me = state.current_player
    barrier = BarrierState(
        active=True,
        owner=me,
        applies_to=-me,
        expires_on_turn=state.turn_index + 1,
        cells=build_barrier_cells(row, col),
    )
    return dataclasses.replace(state, barrier=barrier, last_move=None)


def _warp(state: GameState, row: int, col: int) -> GameState:
    me = state.current_player
    return dataclasses.replace(
        state,
        board=with_cells(state.board, {(row, col): me}),
        last_move=MoveDescriptor(me, row, col, (), SkillType.WARP.value),
    )


_EFFECTS = {
    SkillType.CONVERT: _convert,
    SkillType.REMOVE: _remove,
    SkillType.SHIELD: _shield,
    SkillType.BARRIER: _barrier,
    SkillType.WARP: _warp,
}


def apply_skill_effect(state: GameState, skill: SkillType, target: Optional[Coord]) -> GameState:
    """Apply a targeted skill's board/overlay effect. The target must already be valid."""
    if target is None or skill not in _EFFECTS:
        return state
    row, col = target
    return _EFFECTS[skill](state, row, col)

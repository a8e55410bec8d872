"""
Turn/session state machine.

The module-level functions are pure transitions `GameState -> GameState`. A
rejected intent returns the very same object it was given, which is how
callers (and `GameSession`) tell acceptance from rejection.
"""
from __future__ import annotations

import dataclasses
import logging
import random
import threading
from typing import Callable, Dict, List, Optional, Sequence

from config import SessionSettings
from othello.board import (
    CENTER, all_cells, count_discs, empty_grid, format_pos,
    initial_board, is_corner, opponent, player_name,
)
from othello.moves import apply_move, compute_flips, has_any_legal_move, protection_for
from othello.skills import (
    HAND_CAPACITY, SKILL_POOL, apply_skill_effect, has_target_for_skill,
    is_valid_skill_target, remove_skill_once, requires_target, skill_name,
)
from othello.types import (
    ActivateSkill, Coord, GameState, Intent, MoveDescriptor, PassTurn, PlaceDisc,
    Player, SkillType, BLACK, DRAW, WHITE, coerce_skill, is_valid_coord,
)

logger = logging.getLogger(__name__)

MoveListener = Callable[[GameState, MoveDescriptor], None]


# ============================
# Session setup
# ============================
def create_skill_tiles(rng: Optional[random.Random] = None,
                       pool: Sequence[SkillType] = SKILL_POOL) -> Dict[Coord, SkillType]:
    """Deal one tile per pool entry onto shuffled non-corner, non-centre cells."""
    rng = rng or random.Random()
    positions: List[Coord] = [
        (r, c) for r, c in all_cells() if not is_corner(r, c) and (r, c) not in CENTER
    ]
    rng.shuffle(positions)
    return {positions[i]: skill for i, skill in enumerate(pool)}


def new_game(rng: Optional[random.Random] = None, skills_enabled: bool = True) -> GameState:
    """Fresh session state: standard opening, black to move, empty hands and overlays."""
    tiles = create_skill_tiles(rng) if skills_enabled else {}
    return GameState(
        board=initial_board(),
        current_player=BLACK,
        skill_tiles=tiles,
        hands={BLACK: (), WHITE: ()},
        shield=empty_grid(),
    )


# ============================
# Transitions
# ============================
def pick_up_skill_tile(state: GameState, row: int, col: int, player: Player) -> GameState:
    """Consume the tile at (row, col), if any, into `player`'s hand.

    A full hand discards the tile and leaves a log entry.
    """
    skill = state.skill_tiles.get((row, col))
    if skill is None:
        return state

    tiles = {k: v for k, v in state.skill_tiles.items() if k != (row, col)}
    hand = tuple(state.hands.get(player, ()))
    if len(hand) >= HAND_CAPACITY:
        entry = f"{player_name(player)} could not pick up {skill_name(skill)} {format_pos(row, col)}: hand is full"
        logger.debug(entry)
        return dataclasses.replace(state, skill_tiles=tiles, log=state.log + (entry,))

    hands = dict(state.hands)
    hands[player] = hand + (skill,)
    entry = f"{player_name(player)} picked up {skill_name(skill)} {format_pos(row, col)}"
    return dataclasses.replace(state, skill_tiles=tiles, hands=hands, log=state.log + (entry,))


def _winner(state: GameState) -> int:
    black, white = count_discs(state.board)
    if black > white:
        return BLACK
    if white > black:
        return WHITE
    return DRAW


def advance_turn(state: GameState) -> GameState:
    """Close the current turn.

    The opponent moves next if it has a legal move; otherwise the current
    player goes again if it can; otherwise the game is over.
    """
    next_turn = state.turn_index + 1
    me = state.current_player
    opp = opponent(me)
    next_player = opp
    game_over = False
    winner: Optional[int] = None

    if not has_any_legal_move(state.board, opp, protection_for(state, opp, next_turn)):
        if has_any_legal_move(state.board, me, protection_for(state, me, next_turn)):
            next_player = me
        else:
            game_over = True
            winner = _winner(state)

    barrier = state.barrier
    if barrier is not None and barrier.active and next_turn > barrier.expires_on_turn:
        barrier = dataclasses.replace(barrier, active=False)

    log = state.log
    if game_over:
        black, white = count_discs(state.board)
        result = "draw" if winner == DRAW else f"{player_name(winner)} wins"
        log = log + (f"Game over: {result} ({black}-{white})",)
        logger.info("Game over after %d turns: %s (%d-%d)", next_turn, result, black, white)
    elif next_player == me:
        log = log + (f"{player_name(opp)} has no legal move and passes",)

    return dataclasses.replace(
        state,
        current_player=next_player,
        turn_index=next_turn,
        game_over=game_over,
        winner=winner,
        barrier=barrier,
        log=log,
        turn_skill_used=False,
        double_move_remaining=0,
    )


def place_disc(state: GameState, row: int, col: int) -> GameState:
    """Place a disc for the player to move; unchanged state when illegal."""
    if state.game_over or not is_valid_coord((row, col)):
        return state
    me = state.current_player
    protection = protection_for(state, me)
    flips = compute_flips(state.board, me, row, col, protection)
    if not flips:
        logger.debug("Rejected placement %s for %s", format_pos(row, col), player_name(me))
        return state

    board = apply_move(state.board, me, row, col, protection)
    placed = dataclasses.replace(
        state,
        board=board,
        last_move=MoveDescriptor(me, row, col, tuple(flips)),
    )
    placed = pick_up_skill_tile(placed, row, col, me)

    if state.double_move_remaining > 0:
        remaining = state.double_move_remaining - 1
        if remaining > 0 and has_any_legal_move(board, me, protection_for(placed, me)):
            return dataclasses.replace(placed, double_move_remaining=remaining, turn_skill_used=True)
        return advance_turn(dataclasses.replace(placed, double_move_remaining=0, turn_skill_used=True))

    return advance_turn(placed)


def activate_skill(state: GameState, skill: SkillType, target: Optional[Coord] = None) -> GameState:
    """Activate a held skill for the player to move; unchanged state when illegal."""
    skill = coerce_skill(skill)
    if skill is None or state.game_over:
        return state
    if state.turn_skill_used or state.double_move_remaining > 0:
        return state
    me = state.current_player
    hand = state.hand(me)
    if skill not in hand:
        return state

    hands = dict(state.hands)
    hands[me] = remove_skill_once(hand, skill)

    if skill == SkillType.DOUBLE:
        if not has_target_for_skill(state, skill):
            return state
        entry = f"{player_name(me)} used {skill_name(skill)}"
        logger.info(entry)
        return dataclasses.replace(
            state,
            hands=hands,
            log=state.log + (entry,),
            turn_skill_used=True,
            double_move_remaining=2,
            last_move=None,
        )

    if not is_valid_coord(target) or not is_valid_skill_target(state, skill, *target):
        logger.debug("Rejected %s on %s for %s", skill.value, target, player_name(me))
        return state

    row, col = target
    entry = f"{player_name(me)} used {skill_name(skill)} {format_pos(row, col)}"
    logger.info(entry)
    nxt = dataclasses.replace(state, hands=hands, log=state.log + (entry,), turn_skill_used=True)
    nxt = apply_skill_effect(nxt, skill, target)
    if skill == SkillType.WARP:
        nxt = pick_up_skill_tile(nxt, row, col, me)
    return advance_turn(nxt)


def pass_turn(state: GameState) -> GameState:
    """Pass; only accepted when the player to move has no legal placement."""
    if state.game_over:
        return state
    me = state.current_player
    if has_any_legal_move(state.board, me, protection_for(state, me)):
        return state
    entry = f"{player_name(me)} passes"
    return advance_turn(dataclasses.replace(state, log=state.log + (entry,)))


def apply_intent(state: GameState, intent: Intent) -> GameState:
    if isinstance(intent, PlaceDisc):
        return place_disc(state, intent.row, intent.col)
    if isinstance(intent, ActivateSkill):
        return activate_skill(state, intent.skill, intent.target)
    if isinstance(intent, PassTurn):
        return pass_turn(state)
    return state


# ============================
# Live session
# ============================
class GameSession:
    """Owns the single live `GameState` and publishes every accepted transition."""

    def __init__(self, settings: Optional[SessionSettings] = None,
                 rng: Optional[random.Random] = None) -> None:
        self.settings: SessionSettings = settings or SessionSettings()
        self._rng_override = rng
        self._lock = threading.RLock()
        self._listeners: List[MoveListener] = []
        self.version: int = 0
        self._state: GameState = new_game(self._make_rng(), self.settings.skills_enabled)

    def _make_rng(self) -> random.Random:
        if self._rng_override is not None:
            return self._rng_override
        return random.Random(self.settings.seed)

    @property
    def state(self) -> GameState:
        return self._state

    def add_listener(self, listener: MoveListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: MoveListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _publish(self, new_state: GameState) -> GameState:
        old = self._state
        if new_state is old:
            return old
        self._state = new_state
        self.version += 1
        descriptor = new_state.last_move
        if descriptor is not None and descriptor is not old.last_move:
            for listener in list(self._listeners):
                listener(new_state, descriptor)
        return new_state

    def apply(self, intent: Intent, expected_version: Optional[int] = None) -> GameState:
        """Apply one intent atomically; a stale `expected_version` is rejected."""
        with self._lock:
            if expected_version is not None and expected_version != self.version:
                logger.debug("Dropped stale intent %r (version %d != %d)",
                             intent, expected_version, self.version)
                return self._state
            return self._publish(apply_intent(self._state, intent))

    # Intents
    def place_disc(self, row: int, col: int) -> GameState:
        return self.apply(PlaceDisc(row, col))

    def activate_skill(self, skill: SkillType, target: Optional[Coord] = None) -> GameState:
        return self.apply(ActivateSkill(skill, target))

    def pass_turn(self) -> GameState:
        return self.apply(PassTurn())

    def reset(self, settings: Optional[SessionSettings] = None) -> GameState:
        """Discard the current game and start a fresh one."""
        with self._lock:
            if settings is not None:
                self.settings = settings
                self._rng_override = None
            self._state = new_game(self._make_rng(), self.settings.skills_enabled)
            self.version += 1
            return self._state

    # Legality queries
    def is_valid_move(self, row: int, col: int) -> bool:
        state = self._state
        if state.game_over or not is_valid_coord((row, col)):
            return False
        me = state.current_player
        return len(compute_flips(state.board, me, row, col, protection_for(state, me))) > 0

    def is_valid_skill_target(self, skill: SkillType, row: int, col: int) -> bool:
        state = self._state
        skill = coerce_skill(skill)
        if skill is None or state.game_over or not requires_target(skill):
            return False
        if not is_valid_coord((row, col)):
            return False
        return is_valid_skill_target(state, skill, row, col)

    def has_any_legal_move(self, player: Optional[Player] = None) -> bool:
        state = self._state
        p = state.current_player if player is None else player
        return has_any_legal_move(state.board, p, protection_for(state, p))

    def valid_moves(self) -> List[Coord]:
        return [(r, c) for r, c in all_cells() if self.is_valid_move(r, c)]


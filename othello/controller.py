"""
Game controller: the surface that renderers and input handlers talk to.
"""
from __future__ import annotations

from typing import List, Optional
import logging
import random

from config import AISettings, SessionSettings
from othello.ai import AIPlayer
from othello.scheduler import AIScheduler
from othello.session import GameSession, MoveListener
from othello.skills import can_use_skill
from othello.types import (
    ActivateSkill, Coord, GameState, Intent, PassTurn, PlaceDisc, Player, SkillType,
    BLACK, WHITE, GameMode,
)

logger = logging.getLogger(__name__)


class GameController:
    """Routes human intents to the session and drives the AI opponent."""

    def __init__(self, settings: Optional[SessionSettings] = None,
                 ai_settings: Optional[AISettings] = None,
                 rng: Optional[random.Random] = None,
                 scheduler: Optional[AIScheduler] = None):
        self.settings: SessionSettings = settings or SessionSettings()
        self.ai_settings: AISettings = ai_settings or AISettings()
        self.session = GameSession(self.settings, rng)
        self.scheduler = scheduler or AIScheduler(self.ai_settings.think_delay)
        self.ai: Optional[AIPlayer] = self._make_ai()
        self._maybe_schedule_ai()

    def _make_ai(self) -> Optional[AIPlayer]:
        if GameMode(self.settings.mode) != GameMode.HUMAN_VS_AI:
            return None
        seed = self.settings.seed
        return AIPlayer(self.settings.difficulty, random.Random(seed) if seed is not None else None)

    @property
    def state(self) -> GameState:
        return self.session.state

    @property
    def ai_player(self) -> Optional[Player]:
        if self.ai is None:
            return None
        return BLACK if self.settings.ai_side == "black" else WHITE

    def is_ai_turn(self) -> bool:
        state = self.session.state
        return self.ai is not None and not state.game_over and state.current_player == self.ai_player

    def add_listener(self, listener: MoveListener) -> None:
        self.session.add_listener(listener)

    # Human intents
    def place_disc(self, row: int, col: int) -> GameState:
        return self._human(PlaceDisc(row, col))

    def activate_skill(self, skill: SkillType, target: Optional[Coord] = None) -> GameState:
        return self._human(ActivateSkill(skill, target))

    def pass_turn(self) -> GameState:
        return self._human(PassTurn())

    def reset(self, settings: Optional[SessionSettings] = None) -> GameState:
        """Start a new game; any pending AI move is cancelled first."""
        self.scheduler.cancel()
        if settings is not None:
            self.settings = settings
        self.session.reset(settings)
        self.ai = self._make_ai()
        self._maybe_schedule_ai()
        return self.session.state

    # Legality queries
    def is_valid_move(self, row: int, col: int) -> bool:
        return self.session.is_valid_move(row, col)

    def is_valid_skill_target(self, skill: SkillType, row: int, col: int) -> bool:
        return self.session.is_valid_skill_target(skill, row, col)

    def has_any_legal_move(self, player: Optional[Player] = None) -> bool:
        return self.session.has_any_legal_move(player)

    def valid_moves(self) -> List[Coord]:
        return self.session.valid_moves()

    def usable_skills(self) -> List[SkillType]:
        state = self.session.state
        return [s for s in dict.fromkeys(state.hand()) if can_use_skill(state, s)]

    # Internals
    def _human(self, intent: Intent) -> GameState:
        if self.is_ai_turn():
            logger.debug("Rejected %r: it is the AI's turn", intent)
            return self.session.state
        return self._submit(intent)

    def _submit(self, intent: Intent, expected_version: Optional[int] = None) -> GameState:
        before = self.session.version
        state = self.session.apply(intent, expected_version)
        if self.session.version != before:
            self.scheduler.cancel()
            self._maybe_schedule_ai()
        return state

    def _maybe_schedule_ai(self) -> None:
        if self.is_ai_turn():
            self.scheduler.schedule(self.session.version, self._run_ai)

    def _run_ai(self, token: int) -> None:
        if token != self.session.version or not self.is_ai_turn():
            return
        intent = self.ai.decide(self.session.state)
        if intent is None:
            return
        self._submit(intent, expected_version=token)
        if self.session.version != token:
            return
        logger.warning("AI intent %r was not accepted, falling back", intent)
        moves = self.session.valid_moves()
        fallback: Intent = PlaceDisc(*moves[0]) if moves else PassTurn()
        self._submit(fallback, expected_version=token)
        if self.session.version == token:
            logger.error("AI fallback %r was not accepted either", fallback)

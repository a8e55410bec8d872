"""
Text rendering of a game snapshot for the console front end.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from config import UISettings
from othello.board import SIZE, player_name
from othello.skills import SKILL_CATALOG
from othello.types import Coord, GameState, BLACK, WHITE, DRAW

UNICODE_GLYPHS = {BLACK: "●", WHITE: "○"}
ASCII_GLYPHS = {BLACK: "X", WHITE: "O"}
ANSI_HIGHLIGHT = "\033[33m"
ANSI_RESET = "\033[0m"


def render_board(state: GameState, settings: Optional[UISettings] = None,
                 valid_moves: Iterable[Coord] = ()) -> str:
    """Board grid with discs, skill tiles, shields, the barrier and move hints.

    Empty cells show a tile's short code in lower case, `*` for a legal move,
    `#` for an active barrier cell and `.` otherwise. A shielded disc is
    wrapped in brackets.
    """
    settings = settings or UISettings()
    glyphs = UNICODE_GLYPHS if settings.use_unicode else ASCII_GLYPHS
    hints = set(valid_moves) if settings.highlight_moves else set()
    barrier_cells = state.barrier.cells if state.barrier is not None and state.barrier.active else frozenset()

    lines: List[str] = []
    if settings.show_indices:
        lines.append("    " + "".join(f"{c + 1:^4}" for c in range(SIZE)))
    for r in range(SIZE):
        cells: List[str] = []
        for c in range(SIZE):
            value = state.board[r][c]
            if value != 0:
                text = glyphs[value]
                text = f"[{text}]" if state.shield[r][c] else f" {text} "
            elif (r, c) in hints:
                text = " * "
                if settings.use_color:
                    text = f"{ANSI_HIGHLIGHT}{text}{ANSI_RESET}"
            elif (r, c) in state.skill_tiles:
                text = f"{SKILL_CATALOG[state.skill_tiles[(r, c)]].short.lower():^3}"
            elif (r, c) in barrier_cells:
                text = " # "
            else:
                text = " . "
            cells.append(text)
        prefix = f"{r + 1:>3} " if settings.show_indices else ""
        lines.append(prefix + " ".join(cells))
    return "\n".join(lines)


def render_status(state: GameState, settings: Optional[UISettings] = None) -> str:
    settings = settings or UISettings()
    score = state.score
    lines = [f"Turn {state.turn_index + 1} | BLACK {score.black} - WHITE {score.white}"]
    if state.game_over:
        result = "Draw" if state.winner == DRAW else f"{player_name(state.winner)} wins"
        lines.append(f"Game over: {result}")
    else:
        line = f"{player_name(state.current_player)} to move"
        if state.double_move_remaining > 0:
            line += f" (double: {state.double_move_remaining} placements left)"
        lines.append(line)
    for player in (BLACK, WHITE):
        hand = ", ".join(SKILL_CATALOG[s].name for s in state.hand(player)) or "-"
        lines.append(f"{player_name(player)} hand: {hand}")
    if settings.show_log_lines:
        lines.extend(f"  {entry}" for entry in state.log[-settings.show_log_lines:])
    return "\n".join(lines)

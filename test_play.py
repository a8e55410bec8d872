import dataclasses

from config import UISettings
from othello.board import initial_board, with_flag
from othello.render import render_board, render_status
from othello.session import activate_skill
from othello.types import (
    ActivateSkill, GameState, PassTurn, PlaceDisc, SkillType, BLACK, WHITE, DRAW,
)
from play import parse_command, skill_help

PLAIN = UISettings(use_color=False, use_unicode=False, show_indices=False)


def test_parse_placements():
    assert parse_command("3 4") == PlaceDisc(2, 3)
    assert parse_command("3,4") == PlaceDisc(2, 3)
    assert parse_command("d3") == PlaceDisc(2, 3)
    assert parse_command("D3") == PlaceDisc(2, 3)


def test_parse_skills_and_controls():
    assert parse_command("skill convert 4 4") == ActivateSkill(SkillType.CONVERT, (3, 3))
    assert parse_command("skill Double") == ActivateSkill(SkillType.DOUBLE, None)
    assert parse_command("skill warp a1") == ActivateSkill(SkillType.WARP, (0, 0))
    assert parse_command("pass") == PassTurn()
    assert parse_command("quit") == "quit"
    assert parse_command("new") == "reset"
    assert parse_command("?") == "help"


def test_parse_garbage():
    for line in ("", "   ", "skill", "skill teleport 1 1", "x y", "z9", "1 2 3"):
        assert parse_command(line) is None


def test_render_initial_board():
    state = GameState(board=initial_board())
    text = render_board(state, PLAIN, [(2, 3)])
    rows = text.splitlines()
    assert len(rows) == 8
    assert rows[3] == " .   .   .   O   X   .   .   . "
    assert rows[2].split()[3] == "*"


def test_render_overlays():
    state = GameState(board=initial_board(), skill_tiles={(0, 1): SkillType.WARP},
                      hands={BLACK: (SkillType.BARRIER,), WHITE: ()})
    state = dataclasses.replace(state, shield=with_flag(state.shield, 3, 4, True))
    text = render_board(state, PLAIN)
    assert "wp" in text.splitlines()[0]
    assert "[X]" in text.splitlines()[3]

    barred = activate_skill(state, SkillType.BARRIER, (2, 4))
    assert "#" in render_board(barred, PLAIN).splitlines()[1]


def test_render_with_indices_and_unicode():
    text = render_board(GameState(board=initial_board()), UISettings(use_color=False))
    lines = text.splitlines()
    assert len(lines) == 9
    assert "●" in text and "○" in text
    assert lines[1].startswith("  1 ")


def test_render_status():
    state = GameState(board=initial_board(), hands={BLACK: (SkillType.DOUBLE,), WHITE: ()},
                      log=("BLACK picked up Double (1,2)",))
    status = render_status(state, PLAIN)
    assert "Turn 1 | BLACK 2 - WHITE 2" in status
    assert "BLACK to move" in status
    assert "BLACK hand: Double" in status
    assert "WHITE hand: -" in status
    assert "picked up Double" in status

    over = dataclasses.replace(state, game_over=True, winner=DRAW)
    assert "Game over: Draw" in render_status(over, PLAIN)


def test_skill_help_lists_every_skill():
    text = skill_help()
    for skill in SkillType:
        assert skill.value in text
    assert "Place two discs this turn. (no target)" in text
    assert "Take any disc (not a corner) off the board." in text

from __future__ import annotations

import argparse
import time
from typing import Optional, Union

from config import get_config, setup_logging, SessionSettings
from othello.controller import GameController
from othello.render import render_board, render_status
from othello.skills import SKILL_CATALOG
from othello.types import ActivateSkill, Intent, PassTurn, PlaceDisc, coerce_skill

HELP = """Commands:
  3 4 | d3               place a disc at row 3, column 4 (1-based) / column d, row 3
  skill <name> [r c]     use a skill: convert, warp, double, shield, barrier, remove
  pass                   pass (only when you have no legal move)
  reset                  start a new game
  quit                   leave"""

Command = Union[Intent, str]


def skill_help() -> str:
    lines = ["Skills:"]
    for spec in SKILL_CATALOG.values():
        target = "" if spec.requires_target else " (no target)"
        lines.append(f"  {spec.kind.value:<9}{spec.description}{target}")
    return "\n".join(lines)


def _parse_coord(tokens) -> Optional[tuple]:
    if len(tokens) == 1:
        tok = tokens[0].lower()
        if len(tok) == 2 and tok[0] in "abcdefgh" and tok[1] in "12345678":
            return int(tok[1]) - 1, ord(tok[0]) - ord("a")
        return None
    if len(tokens) == 2:
        try:
            r, c = int(tokens[0]) - 1, int(tokens[1]) - 1
        except ValueError:
            return None
        return r, c
    return None


def parse_command(line: str) -> Optional[Command]:
    """Turn a line of user input into an intent or a control word; None if unreadable."""
    tokens = line.strip().replace(",", " ").split()
    if not tokens:
        return None
    head = tokens[0].lower()
    if head in ("quit", "exit", "q"):
        return "quit"
    if head in ("reset", "new"):
        return "reset"
    if head in ("help", "?"):
        return "help"
    if head == "pass":
        return PassTurn()
    if head == "skill":
        if len(tokens) < 2:
            return None
        skill = coerce_skill(tokens[1])
        if skill is None:
            return None
        target = _parse_coord(tokens[2:]) if len(tokens) > 2 else None
        return ActivateSkill(skill, target)
    coord = _parse_coord(tokens)
    if coord is None:
        return None
    return PlaceDisc(*coord)


def parse_args() -> argparse.Namespace:
    cfg = get_config()
    ap = argparse.ArgumentParser(description="Play Skill Othello in the terminal")
    ap.add_argument("--mode", choices=["hvh", "hva"], default=cfg.session.mode, help="Human vs human or human vs AI")
    ap.add_argument("--ai-side", choices=["black", "white"], default=cfg.session.ai_side, help="Side the AI plays")
    ap.add_argument("--difficulty", choices=["easy", "normal", "hard"], default=cfg.session.difficulty, help="AI difficulty")
    ap.add_argument("--seed", type=int, default=cfg.session.seed, help="Seed for the skill tile layout")
    ap.add_argument("--no-skills", action="store_true", help="Play plain Othello without skill tiles")
    return ap.parse_args()


def _wait_for_ai(controller: GameController, timeout: float = 10.0) -> None:
    deadline = time.monotonic() + controller.scheduler.delay + timeout
    while controller.is_ai_turn() and time.monotonic() < deadline:
        time.sleep(0.05)


def main() -> None:
    cfg = get_config()
    setup_logging(cfg.logging)
    args = parse_args()
    settings = SessionSettings(
        mode=args.mode,
        ai_side=args.ai_side,
        difficulty=args.difficulty,
        seed=args.seed,
        skills_enabled=not args.no_skills and cfg.session.skills_enabled,
    )
    controller = GameController(settings, cfg.ai)
    print(HELP)
    print(skill_help())

    while True:
        _wait_for_ai(controller)
        state = controller.state
        print()
        print(render_board(state, cfg.ui, controller.valid_moves()))
        print(render_status(state, cfg.ui))
        usable = controller.usable_skills()
        if usable:
            print("Usable skills: " + ", ".join(s.value for s in usable))

        try:
            line = input("> ")
        except EOFError:
            break
        cmd = parse_command(line)
        if cmd is None:
            print("Could not read that. Type 'help' for commands.")
            continue
        if cmd == "quit":
            break
        if cmd == "help":
            print(HELP)
            print(skill_help())
            continue
        if cmd == "reset":
            controller.reset()
            continue

        before = controller.state
        if isinstance(cmd, PlaceDisc):
            after = controller.place_disc(cmd.row, cmd.col)
        elif isinstance(cmd, ActivateSkill):
            after = controller.activate_skill(cmd.skill, cmd.target)
        else:
            after = controller.pass_turn()
        if after is before:
            print("That is not allowed right now.")

    controller.scheduler.cancel()


if __name__ == "__main__":
    main()

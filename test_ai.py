import random

import numpy as np
import pytest

from othello.ai import AIPlayer, choose_intent
from othello.board import initial_board, empty_board, with_cells
from othello.moves import apply_move, legal_moves
from othello.eval import HeuristicEvaluator, get_evaluator, score_move
from othello.search import (
    GreedyStrategy, LookaheadStrategy, RandomStrategy, get_search_strategy, STALL_BONUS,
)
from othello.session import apply_intent, new_game
from othello.types import (
    ActivateSkill, Difficulty, GameState, PassTurn, PlaceDisc, SkillType,
    BLACK, WHITE,
)

# Helpers

def make_board(cells):
    return with_cells(empty_board(), cells)


def holding(*skills, board=None, player=BLACK):
    hands = {BLACK: (), WHITE: ()}
    hands[player] = tuple(skills)
    return GameState(board=board or initial_board(), current_player=player, hands=hands)


def test_score_move_weights():
    assert score_move(initial_board(), BLACK, 2, 3) == 10.0
    assert score_move(initial_board(), BLACK, 0, 0) == 0.0
    corner = make_board({(0, 1): WHITE, (0, 2): BLACK})
    assert score_move(corner, BLACK, 0, 0) == 60.0
    edge = make_board({(0, 0): BLACK, (0, 1): WHITE})
    assert score_move(edge, BLACK, 0, 2) == 18.0


def test_heuristic_evaluator():
    ev = get_evaluator()
    assert isinstance(ev, HeuristicEvaluator)
    assert ev.evaluate_position(initial_board(), BLACK) == 0.0
    lone_corner = make_board({(0, 0): BLACK})
    assert ev.evaluate_position(lone_corner, BLACK) == 26.0
    assert ev.evaluate_position(lone_corner, WHITE) == -26.0


def test_batch_predict_matches_single_calls():
    ev = HeuristicEvaluator()
    boards = [initial_board(), make_board({(0, 0): BLACK})]
    out = ev.batch_predict(boards, np.array([BLACK, WHITE]))
    assert out.shape == (2,)
    assert out.dtype == np.float32
    assert out[0] == pytest.approx(0.0)
    assert out[1] == pytest.approx(-26.0)


def test_greedy_prefers_corner():
    board = make_board({
        (0, 1): WHITE, (0, 2): BLACK,
        (4, 0): BLACK, (4, 1): WHITE, (4, 2): WHITE,
    })
    assert score_move(board, BLACK, 4, 3) == 20.0
    assert GreedyStrategy().search(board, BLACK) == (60.0, (0, 0))


def test_greedy_ties_keep_first_row_major_move():
    assert GreedyStrategy().search(initial_board(), BLACK) == (10.0, (2, 3))


def test_strategies_without_moves():
    board = make_board({(0, 0): BLACK})
    for strategy in (GreedyStrategy(), RandomStrategy(random.Random(1)), LookaheadStrategy()):
        assert strategy.search(board, BLACK) == (0.0, None)


def test_random_strategy_returns_legal_move():
    rng = random.Random(9)
    strategy = RandomStrategy(rng)
    for _ in range(10):
        _, move = strategy.search(initial_board(), BLACK)
        assert move in [(2, 3), (3, 2), (4, 5), (5, 4)]


def test_lookahead_stall_bonus():
    board = make_board({(0, 0): BLACK, (0, 1): WHITE})
    # BBB on the top edge: 3 discs + 1 corner + 2 edges, and white has no reply
    assert LookaheadStrategy().score_candidate(board, BLACK, 0, 2) == 34.0 + STALL_BONUS
    assert LookaheadStrategy().search(board, BLACK) == (64.0, (0, 2))


def test_search_strategy_factory():
    assert isinstance(get_search_strategy("easy"), RandomStrategy)
    assert isinstance(get_search_strategy(Difficulty.NORMAL), GreedyStrategy)
    assert isinstance(get_search_strategy("hard"), LookaheadStrategy)
    with pytest.raises(ValueError):
        get_search_strategy("impossible")


def test_decide_plain_move():
    ai = AIPlayer("normal", random.Random(0))
    assert ai.decide(GameState(board=initial_board())) == PlaceDisc(2, 3)


def test_decide_game_over_and_pass():
    ai = AIPlayer("normal", random.Random(0))
    over = GameState(board=initial_board(), game_over=True, winner=BLACK)
    assert ai.decide(over) is None
    stuck = GameState(board=make_board({(0, 0): BLACK, (0, 1): WHITE}), current_player=WHITE)
    assert ai.decide(stuck) == PassTurn()


def test_decide_warps_into_corner():
    ai = AIPlayer("normal", random.Random(0))
    assert ai.decide(holding(SkillType.WARP)) == ActivateSkill(SkillType.WARP, (0, 0))


def test_difficulty_changes_skill_appetite():
    state = holding(SkillType.CONVERT)
    # convert scores 12 against a best move of 10
    assert AIPlayer("normal", random.Random(0)).decide(state) == PlaceDisc(2, 3)
    assert AIPlayer("hard", random.Random(0)).decide(state) == ActivateSkill(SkillType.CONVERT, (3, 3))


def test_easy_uses_skill_by_chance():
    state = holding(SkillType.CONVERT)
    decisions = {type(AIPlayer("easy", random.Random(seed)).decide(state)) for seed in range(40)}
    assert decisions == {PlaceDisc, ActivateSkill}


def test_shield_without_exposure_is_not_worth_it():
    state = holding(SkillType.SHIELD, board=make_board({(2, 2): BLACK, (5, 5): WHITE}))
    ai = AIPlayer("hard", random.Random(0))
    assert ai.score_skill(state, SkillType.SHIELD).score == 0.0
    assert ai.best_skill_action(state) is None


def test_barrier_covers_threatened_discs():
    ai = AIPlayer("normal", random.Random(0))
    choice = ai.score_skill(holding(SkillType.BARRIER), SkillType.BARRIER)
    assert choice.target == (2, 3)
    assert choice.score == 8.0


def test_double_score_uses_two_best_moves():
    ai = AIPlayer("normal", random.Random(0))
    choice = ai.score_skill(holding(SkillType.DOUBLE), SkillType.DOUBLE)
    assert choice.target is None
    assert choice.score == pytest.approx(12.0)


def test_remove_prefers_opponent_discs():
    ai = AIPlayer("normal", random.Random(0))
    choice = ai.score_skill(holding(SkillType.REMOVE), SkillType.REMOVE)
    assert choice.target == (3, 3)
    assert choice.score == 8.0


def test_decide_does_not_mutate_state():
    state = holding(SkillType.CONVERT, SkillType.BARRIER)
    snapshot = state.to_dict()
    AIPlayer("hard", random.Random(0)).decide(state)
    assert state.to_dict() == snapshot


@pytest.mark.parametrize("difficulty", ["easy", "normal", "hard"])
def test_ai_self_play_always_legal(difficulty):
    rng = random.Random(2024)
    state = new_game(rng)
    players = {BLACK: AIPlayer(difficulty, random.Random(1)), WHITE: AIPlayer(difficulty, random.Random(2))}
    for _ in range(300):
        if state.game_over:
            break
        intent = players[state.current_player].decide(state)
        nxt = apply_intent(state, intent)
        assert nxt is not state, f"rejected {intent!r}"
        state = nxt
    assert state.game_over
    assert state.winner in (BLACK, WHITE, 0)


def test_choose_intent_shortcut():
    assert choose_intent(GameState(board=initial_board()), "normal") == PlaceDisc(2, 3)


def test_lookahead_averages_immediate_and_worst_reply():
    ev = HeuristicEvaluator()
    strategy = LookaheadStrategy(ev)
    board = apply_move(initial_board(), BLACK, 2, 3)
    player = WHITE
    for r, c in legal_moves(board, player):
        child = apply_move(board, player, r, c)
        replies = legal_moves(child, BLACK)
        assert replies
        immediate = ev.evaluate_position(child, player)
        worst = min(ev.evaluate_position(apply_move(child, BLACK, rr, rc), player) for rr, rc in replies)
        assert strategy.score_candidate(board, player, r, c) == pytest.approx((immediate + worst) / 2.0)


def test_lookahead_worst_reply_by_hand():
    board = make_board({(3, 1): WHITE, (3, 2): BLACK, (3, 3): WHITE})
    strategy = LookaheadStrategy()
    # (3,4): immediate 2 discs up, mobility 1-1; white answers (3,5) and takes the row: -5
    assert strategy.score_candidate(board, BLACK, 3, 4) == (2.0 + -5.0) / 2.0
    # (3,0): 2 discs + 1 edge + mobility 1-0, and white has no reply
    assert strategy.score_candidate(board, BLACK, 3, 0) == 7.0 + STALL_BONUS
    assert strategy.search(board, BLACK) == (37.0, (3, 0))


def test_lookahead_ties_keep_first_row_major_move():
    # the four opening moves are symmetric, so they all score the same
    strategy = LookaheadStrategy()
    scores = {m: strategy.score_candidate(initial_board(), BLACK, *m) for m in legal_moves(initial_board(), BLACK)}
    assert len(set(scores.values())) == 1
    assert strategy.search(initial_board(), BLACK) == (scores[(2, 3)], (2, 3))

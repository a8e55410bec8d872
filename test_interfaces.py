import random

from othello.ai import AIPlayer
from othello.board import initial_board
from othello.eval import Evaluator, HeuristicEvaluator, get_evaluator
from othello.search import SearchStrategy, GreedyStrategy, LookaheadStrategy, get_search_strategy
from othello.types import (
    BLACK, PositionEvaluatorProtocol, SearchStrategyProtocol, PlaceDisc, GameState,
)


class CentreLover(Evaluator):
    """Prefers whatever position has the most discs in the middle rows."""

    def evaluate_position(self, board, player, protection=None):
        return float(sum(row.count(player) for row in board[2:6]))


class FirstMove(SearchStrategy):
    def search(self, board, player, protection=None):
        return (1.0, (4, 5))


def test_factories_return_abstract_types():
    assert isinstance(get_evaluator(), Evaluator)
    assert isinstance(get_search_strategy(), SearchStrategy)


def test_builtin_implementations_satisfy_protocols():
    evaluator: PositionEvaluatorProtocol = HeuristicEvaluator()
    strategy: SearchStrategyProtocol = GreedyStrategy()
    board = initial_board()
    assert isinstance(evaluator.evaluate_position(board, BLACK), float)
    score, move = strategy.search(board, BLACK)
    assert isinstance(score, float)
    assert move == (2, 3)


def test_custom_evaluator_plugs_into_lookahead():
    strategy = LookaheadStrategy(CentreLover())
    score, move = strategy.search(initial_board(), BLACK)
    assert move is not None
    assert isinstance(score, float)


def test_custom_strategy_plugs_into_ai():
    ai = AIPlayer("normal", random.Random(0), strategy=FirstMove())
    assert ai.decide(GameState(board=initial_board())) == PlaceDisc(4, 5)

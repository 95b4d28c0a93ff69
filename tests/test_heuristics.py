import unittest

from quorum.ai.heuristic_weights import (
    BASE_V1_BALANCED_WEIGHTS,
    HEURISTIC_WEIGHT_KEYS,
    HEURISTIC_WEIGHT_PROFILES,
    _with_deltas,
    build_heuristic,
    get_weights,
)
from quorum.ai.heuristics import (
    CentroidDistanceHeuristic,
    ConnectedComponentsHeuristic,
    HeuristicAI,
    LinearCombinationHeuristic,
    MaterialHeuristic,
    MobilityHeuristic,
    NthLargestGroupHeuristic,
    NthSmallestStringHeuristic,
    greedy_order,
)
from quorum.board import Board
from quorum.errors import ConfigurationError
from quorum.models import Color, Coord


def _board(white, black, whose_move=Color.WHITE) -> Board:
    return Board.from_position(
        9,
        whose_move,
        [Coord(x, y) for x, y in white],
        [Coord(x, y) for x, y in black],
    )


class TestSimpleHeuristics(unittest.TestCase):
    def setUp(self):
        # White: a pair plus a single, Black: one piece.
        self.board = _board(white=[(0, 0), (0, 1), (5, 5)], black=[(8, 8)])

    def test_material(self):
        self.assertEqual(MaterialHeuristic().evaluate(self.board), 2)

    def test_material_is_symmetric_at_start(self):
        self.assertEqual(MaterialHeuristic().evaluate(Board.start_position(9)), 0)

    def test_mobility_at_start(self):
        """Both colors have 34 leaps in the opening."""
        self.assertEqual(MobilityHeuristic().evaluate(Board.start_position(9)), 0)

    def test_connected_components(self):
        """Black has one group, White two: Black - White = -1."""
        self.assertEqual(ConnectedComponentsHeuristic().evaluate(self.board), -1)

    def test_call_delegates_to_evaluate(self):
        heuristic = MaterialHeuristic()
        self.assertEqual(heuristic(self.board), heuristic.evaluate(self.board))


class TestCentroidDistanceHeuristic(unittest.TestCase):
    def test_white_spread_only(self):
        """Two White pieces one step either side of their centroid."""
        board = _board(white=[(0, 0), (2, 0)], black=[])
        self.assertEqual(CentroidDistanceHeuristic(2.0).evaluate(board), -2000)

    def test_both_colors(self):
        board = _board(white=[(0, 0), (2, 0)], black=[(5, 5), (5, 8)])
        # White: 1^2 + 1^2 = 2; Black: 1.5^2 + 1.5^2 = 4.5
        self.assertEqual(CentroidDistanceHeuristic(2.0).evaluate(board), 2500)
        # Power 1: White 2, Black 3
        self.assertEqual(CentroidDistanceHeuristic(1.0).evaluate(board), 1000)

    def test_truncates_toward_zero(self):
        """-3333.33 becomes -3333, not -3334."""
        board = _board(white=[(0, 0), (1, 0), (3, 0)], black=[])
        self.assertEqual(CentroidDistanceHeuristic(1.0).evaluate(board), -3333)

    def test_empty_board(self):
        board = _board(white=[], black=[])
        self.assertEqual(CentroidDistanceHeuristic().evaluate(board), 0)


class TestNthLargestGroupHeuristic(unittest.TestCase):
    def setUp(self):
        # White groups of size 2 and 1, Black a single group of size 1.
        self.board = _board(white=[(0, 0), (0, 1), (5, 5)], black=[(8, 8)])

    def test_largest(self):
        self.assertEqual(NthLargestGroupHeuristic(1).evaluate(self.board), 1 - 2)

    def test_second_largest(self):
        """Black has no second group and contributes 0."""
        self.assertEqual(NthLargestGroupHeuristic(2).evaluate(self.board), 0 - 1)

    def test_missing_groups(self):
        self.assertEqual(NthLargestGroupHeuristic(3).evaluate(self.board), 0)

    def test_legacy_name_is_same_evaluator(self):
        self.assertIs(NthSmallestStringHeuristic, NthLargestGroupHeuristic)
        self.assertEqual(
            NthSmallestStringHeuristic(1).evaluate(self.board),
            NthLargestGroupHeuristic(1).evaluate(self.board),
        )

    def test_n_must_be_positive(self):
        with self.assertRaises(ValueError):
            NthLargestGroupHeuristic(0)


class TestLinearCombinationHeuristic(unittest.TestCase):
    def setUp(self):
        self.board = _board(white=[(0, 0), (0, 1), (5, 5)], black=[(8, 8)])

    def test_weighted_sum(self):
        heuristic = LinearCombinationHeuristic([
            (3, MaterialHeuristic()),
            (5, ConnectedComponentsHeuristic()),
        ])
        self.assertEqual(heuristic.evaluate(self.board), 3 * 2 + 5 * -1)

    def test_nested(self):
        inner = LinearCombinationHeuristic([(3, ConnectedComponentsHeuristic())])
        outer = LinearCombinationHeuristic([(2, MaterialHeuristic()), (1, inner)])
        self.assertEqual(outer.evaluate(self.board), 2 * 2 + 3 * -1)

    def test_empty_is_zero(self):
        self.assertEqual(LinearCombinationHeuristic([]).evaluate(self.board), 0)


class TestHeuristicWeights(unittest.TestCase):
    def test_balanced_profile_terms(self):
        """Default profile: 1x centroid(2.0), 1x material, 5x components."""
        heuristic = build_heuristic("quorum_v1_balanced")
        weights = [w for w, _ in heuristic.terms]
        kinds = [type(h) for _, h in heuristic.terms]
        self.assertEqual(weights, [1, 1, 5])
        self.assertEqual(
            kinds,
            [CentroidDistanceHeuristic, MaterialHeuristic, ConnectedComponentsHeuristic],
        )
        self.assertEqual(heuristic.terms[0][1].power, 2.0)

    def test_every_profile_builds(self):
        board = Board.start_position(9)
        for profile_id in HEURISTIC_WEIGHT_PROFILES:
            if HEURISTIC_WEIGHT_PROFILES[profile_id]["WEIGHT_MOBILITY"]:
                continue
            with self.subTest(profile=profile_id):
                self.assertIsInstance(build_heuristic(profile_id).evaluate(board), int)

    def test_every_profile_has_every_key(self):
        for profile_id, weights in HEURISTIC_WEIGHT_PROFILES.items():
            with self.subTest(profile=profile_id):
                self.assertEqual(set(weights), set(BASE_V1_BALANCED_WEIGHTS))

    def test_unknown_profile_raises(self):
        with self.assertRaises(ConfigurationError):
            build_heuristic("no_such_profile")

    def test_get_weights_returns_copy(self):
        weights = get_weights("quorum_v1_balanced")
        weights["WEIGHT_MATERIAL"] = 99
        self.assertEqual(HEURISTIC_WEIGHT_PROFILES["quorum_v1_balanced"]["WEIGHT_MATERIAL"], 1)

    def test_with_deltas_rounds_weights(self):
        out = _with_deltas(BASE_V1_BALANCED_WEIGHTS, scale={"WEIGHT_COMPONENTS": 0.5})
        self.assertEqual(out["WEIGHT_COMPONENTS"], 2)
        self.assertIsInstance(out["WEIGHT_COMPONENTS"], int)
        self.assertEqual(out["CENTROID_POWER"], 2.0)

    def test_keys_are_weight_keys(self):
        for key in HEURISTIC_WEIGHT_KEYS:
            self.assertTrue(key.startswith("WEIGHT_"))


class TestHeuristicAI(unittest.TestCase):
    def setUp(self):
        # Leaping (0,0) over (0,1), or (2,2) over (1,2), joins White into one group.
        self.board = _board(
            white=[(0, 0), (0, 1), (1, 2), (2, 2)],
            black=[(6, 6), (8, 8), (6, 8)],
        )
        self.heuristic = ConnectedComponentsHeuristic()

    def test_select_move_prefers_connecting(self):
        ai = HeuristicAI(Color.WHITE, self.heuristic)
        move = ai.select_move(self.board)
        self.assertIsNotNone(move)
        self.assertIs(self.board.apply(move).winner(), Color.WHITE)
        self.assertEqual(ai.move_count, 1)

    def test_select_move_none_without_moves(self):
        board = _board(white=[(0, 0)], black=[(5, 5)])
        ai = HeuristicAI(Color.WHITE, self.heuristic)
        self.assertIsNone(ai.select_move(board))

    def test_evaluate_position_is_from_own_side(self):
        white_ai = HeuristicAI(Color.WHITE, MaterialHeuristic())
        black_ai = HeuristicAI(Color.BLACK, MaterialHeuristic())
        self.assertEqual(white_ai.evaluate_position(self.board), 1)
        self.assertEqual(black_ai.evaluate_position(self.board), -1)
        self.assertEqual(white_ai.get_evaluation_breakdown(self.board), {"total": 1})

    def test_greedy_order_is_stable(self):
        """Equal scores keep enumeration order."""
        moves = self.board.moves()
        ordered = greedy_order(self.board, moves, LinearCombinationHeuristic([]))
        self.assertEqual(ordered, moves)


if __name__ == "__main__":
    unittest.main()

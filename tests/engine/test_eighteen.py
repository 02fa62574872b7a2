"""
Gala Showdown - Eighteen Engine Tests
"""

import itertools
import random
from unittest.mock import patch

import pytest

from src.engine.eighteen import EighteenEngine
from src.engine.errors import DiceExhaustedError


class TestEvaluate:
    @pytest.mark.parametrize("face", [1, 2, 3, 4, 5, 6])
    def test_quad(self, face):
        hand = EighteenEngine.evaluate([face] * 4)
        assert hand.rank == 100
        assert hand.points == face * 4
        assert hand.label == "quad"

    @pytest.mark.parametrize("dice", [[6, 6, 1, 1], [3, 6, 3, 6], [6, 5, 5, 6]])
    def test_eighteen(self, dice):
        hand = EighteenEngine.evaluate(dice)
        assert hand.rank == 99
        assert hand.points == 18
        assert hand.label == "eighteen"

    def test_two_pairs_without_sixes_invalid(self):
        assert not EighteenEngine.evaluate([3, 3, 5, 5]).valid

    @pytest.mark.parametrize("dice", [[4, 4, 4, 2], [1, 2, 3, 4], [6, 5, 3, 1]])
    def test_triple_or_no_pair_invalid(self, dice):
        hand = EighteenEngine.evaluate(dice)
        assert not hand.valid
        assert hand.rank == -1

    def test_low_combo(self):
        hand = EighteenEngine.evaluate([2, 5, 5, 1])
        assert hand.rank == 0
        assert hand.points == 3
        assert hand.label == "low combo"

    def test_single_pair_scores_other_two(self):
        hand = EighteenEngine.evaluate([6, 6, 1, 2])
        # the {1, 2} leftover is the low combo, even with a pair of sixes
        assert hand.rank == 0

        hand = EighteenEngine.evaluate([2, 2, 5, 6])
        assert hand.rank == 11
        assert hand.points == 11
        assert hand.label == "11 points"

    def test_order_independent(self):
        assert EighteenEngine.evaluate([5, 1, 3, 3]) == EighteenEngine.evaluate([3, 3, 1, 5])

    @pytest.mark.parametrize("dice", [[1, 2, 3], [0, 1, 1, 2], [7, 1, 1, 2]])
    def test_bad_input(self, dice):
        with pytest.raises(ValueError):
            EighteenEngine.evaluate(dice)


class TestRollUntilDecided:
    def test_result_is_decisive(self):
        rng = random.Random(11)
        for _ in range(50):
            showdown = EighteenEngine.roll_until_decided(rng)
            assert showdown.p1_hand.valid and showdown.p2_hand.valid
            assert showdown.p1_hand.rank != showdown.p2_hand.rank

    def test_winner_has_higher_rank(self):
        showdown = EighteenEngine.roll_until_decided(random.Random(2))
        winner_hand = showdown.p1_hand if showdown.winner == 1 else showdown.p2_hand
        loser_hand = showdown.p2_hand if showdown.winner == 1 else showdown.p1_hand
        assert winner_hand.rank > loser_hand.rank

    def test_invalid_rolls_are_rerolled(self):
        rolls = iter([(6, 6, 1, 2), (3, 3, 5, 5), (6, 6, 1, 2), (4, 4, 2, 3)])
        with patch.object(EighteenEngine, "roll", side_effect=lambda rng=None: next(rolls)):
            showdown = EighteenEngine.roll_until_decided()
        assert showdown.attempts == 2
        assert showdown.p2_dice == (4, 4, 2, 3)
        assert showdown.winner == 2

    def test_exhaustion_raises(self):
        with patch.object(EighteenEngine, "roll", return_value=(1, 2, 3, 4)):
            with pytest.raises(DiceExhaustedError) as exc_info:
                EighteenEngine.roll_until_decided(max_attempts=5)
        assert exc_info.value.attempts == 5


class TestHandOrdering:
    ALL_ROLLS = list(itertools.product(range(1, 7), repeat=4))

    def test_quad_beats_eighteen_beats_single_pair(self):
        hands = [EighteenEngine.evaluate(d) for d in self.ALL_ROLLS]
        quads = {h.rank for h in hands if h.label == "quad"}
        eighteens = {h.rank for h in hands if h.label == "eighteen"}
        singles = {h.rank for h in hands if h.valid and h.label not in ("quad", "eighteen")}
        assert min(quads) > max(eighteens) > max(singles)

    def test_depends_only_on_multiset(self):
        for dice in self.ALL_ROLLS[::37]:
            assert EighteenEngine.evaluate(dice) == EighteenEngine.evaluate(sorted(dice))

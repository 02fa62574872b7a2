"""
Gala Showdown - Deck and Card Tests
"""

import random
from collections import Counter

import pytest

from src.engine.base import Card, GameMode, Suit
from src.engine.deck import build_deck, roll_four_dice, shuffle, shuffled_deck


class TestCard:
    def test_ace_is_high_rank_low_points(self):
        card = Card.of("A", Suit.SPADES)
        assert card.rank == 14
        assert card.points == 1

    @pytest.mark.parametrize("face,rank", [("J", 11), ("Q", 12), ("K", 13)])
    def test_court_cards_count_half(self, face, rank):
        card = Card.of(face, Suit.HEARTS)
        assert card.rank == rank
        assert card.points == 0.5

    def test_numeral_points_equal_face(self):
        card = Card.of("7", Suit.CLUBS)
        assert card.rank == 7
        assert card.points == 7

    def test_suit_weights(self):
        assert [s.weight for s in (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)] == [4, 3, 2, 1]

    def test_parse(self):
        card = Card.parse("10♦")
        assert card.face == "10"
        assert card.suit == "♦"
        assert card.suit_value == 2

    def test_parse_unknown_suit(self):
        with pytest.raises(ValueError):
            Card.parse("10X")

    def test_invalid_rank_rejected(self):
        with pytest.raises(ValueError):
            Card(suit="♠", suit_value=4, face="A", rank=15, points=1)

    def test_str(self):
        assert str(Card.parse("K♥")) == "K♥"


class TestDeck:
    def test_52_unique_cards(self):
        deck = build_deck()
        assert len(deck) == 52
        assert len({(c.face, c.suit) for c in deck}) == 52

    def test_13_per_suit(self):
        counts = Counter(c.suit for c in build_deck())
        assert set(counts.values()) == {13}

    def test_shuffled_deck_is_permutation(self):
        deck = shuffled_deck(random.Random(7))
        assert sorted(deck, key=str) == sorted(build_deck(), key=str)

    def test_seeded_shuffle_is_deterministic(self):
        assert shuffled_deck(random.Random(3)) == shuffled_deck(random.Random(3))

    def test_shuffle_does_not_mutate_input(self):
        items = [1, 2, 3, 4]
        shuffle(items, random.Random(1))
        assert items == [1, 2, 3, 4]

    def test_shuffle_reaches_every_position(self):
        """Every element lands in the first slot over enough shuffles."""
        rng = random.Random(99)
        firsts = {shuffle("abcd", rng)[0] for _ in range(200)}
        assert firsts == set("abcd")


class TestDice:
    def test_four_dice_in_range(self):
        rng = random.Random(5)
        for _ in range(200):
            dice = roll_four_dice(rng)
            assert len(dice) == 4
            assert all(1 <= d <= 6 for d in dice)


class TestGameMode:
    @pytest.mark.parametrize("round_number,mode", [
        (1, GameMode.EIGHTEEN),
        (2, GameMode.TEN_HALF),
        (3, GameMode.POKER),
        (7, GameMode.POKER),
    ])
    def test_for_round(self, round_number, mode):
        assert GameMode.for_round(round_number) == mode

    def test_round_zero_rejected(self):
        with pytest.raises(ValueError):
            GameMode.for_round(0)

"""
Gala Showdown - Poker Showdown Match Tests
"""

from unittest.mock import patch

import pytest

from conftest import stacked_deck
from src.database.models import MatchStatus
from src.engine.base import HandCategory
from src.engine.errors import MatchStalledError
from src.match.poker import PokerMatch
from src.match.screen import MatchScreen

ROYAL_FLUSH = ("10♠", "J♠", "Q♠", "K♠", "A♠")
FULL_HOUSE = ("K♥", "K♦", "K♣", "2♣", "2♠")
ACE_HIGH = ("A♥", "J♥", "8♦", "4♣", "2♦")
SEVEN_HIGH = ("7♠", "5♥", "4♦", "3♣", "9♥")


def dealt(p1_hand, p2_hand):
    """Stacked deck dealing ``p1_hand`` and ``p2_hand`` alternately."""
    order = [card for pair in zip(p1_hand, p2_hand) for card in pair]
    return stacked_deck(*order)


class TestPokerMatch:
    @pytest.mark.asyncio
    async def test_royal_flush_beats_full_house(self, duel, screen, pacer):
        with patch("src.match.poker.shuffled_deck", return_value=dealt(ROYAL_FLUSH, FULL_HOUSE)):
            winner = await PokerMatch(duel, screen, pacer).play()

        assert winner == duel.p1
        assert screen.view.status == MatchStatus.RESULT
        assert screen.view.p1_score == HandCategory.STRAIGHT_FLUSH
        assert screen.view.p2_score == HandCategory.FULL_HOUSE
        assert [str(c) for c in screen.view.p1_hand] == list(ROYAL_FLUSH)

    @pytest.mark.asyncio
    async def test_second_player_can_win(self, duel, screen, pacer):
        with patch("src.match.poker.shuffled_deck", return_value=dealt(FULL_HOUSE, ROYAL_FLUSH)):
            winner = await PokerMatch(duel, screen, pacer).play()
        assert winner == duel.p2

    @pytest.mark.asyncio
    async def test_high_card_tie_redeals(self, duel, screen, pacer):
        decks = iter([dealt(ACE_HIGH, SEVEN_HIGH), dealt(FULL_HOUSE, ROYAL_FLUSH)])
        match = PokerMatch(duel, screen, pacer)
        with patch("src.match.poker.shuffled_deck", side_effect=lambda rng=None: next(decks)):
            winner = await match.play()

        assert winner == duel.p2
        assert match.replays == 1

    @pytest.mark.asyncio
    async def test_dealing_frames(self, duel, pacer):
        screen = MatchScreen(show_frames=True)
        with patch("src.match.poker.shuffled_deck", return_value=dealt(ROYAL_FLUSH, FULL_HOUSE)):
            await PokerMatch(duel, screen, pacer).play()
        assert screen.frames == 10

    @pytest.mark.asyncio
    async def test_replay_bound(self, duel, screen, pacer):
        match = PokerMatch(duel, screen, pacer, max_replays=2)
        with patch("src.match.poker.shuffled_deck", side_effect=lambda rng=None: dealt(ACE_HIGH, SEVEN_HIGH)):
            with pytest.raises(MatchStalledError):
                await match.play()
        assert match.replays == 3

    @pytest.mark.asyncio
    async def test_random_deal_finishes(self, duel, screen, pacer, rng):
        winner = await PokerMatch(duel, screen, pacer, rng=rng).play()
        assert winner in (duel.p1, duel.p2)
        assert screen.view.status == MatchStatus.RESULT

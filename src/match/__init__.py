"""
Gala Showdown Match Resolvers.

One async state machine per game mode, all writing to a shared match view.
"""

from src.engine.base import GameMode
from src.match.base import Announcer, MatchPhase, MatchResolver
from src.match.dice import DiceMatch
from src.match.pacing import Pacer
from src.match.poker import PokerMatch
from src.match.screen import MatchScreen
from src.match.ten_half import TenHalfMatch, TenHalfStrategy, ThresholdStrategy

RESOLVERS: dict[GameMode, type[MatchResolver]] = {
    GameMode.EIGHTEEN: DiceMatch,
    GameMode.TEN_HALF: TenHalfMatch,
    GameMode.POKER: PokerMatch,
}


def resolver_for(mode: GameMode) -> type[MatchResolver]:
    """Resolver class that plays ``mode``."""
    return RESOLVERS[mode]


__all__ = [
    "Announcer",
    "DiceMatch",
    "MatchPhase",
    "MatchResolver",
    "MatchScreen",
    "Pacer",
    "PokerMatch",
    "RESOLVERS",
    "TenHalfMatch",
    "TenHalfStrategy",
    "ThresholdStrategy",
    "resolver_for",
]

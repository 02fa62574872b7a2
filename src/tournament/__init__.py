"""
Gala Showdown Tournament.

Bracket state machine and the host session that publishes it.
"""

from src.tournament.bracket import pair_round, roster_from_names
from src.tournament.controller import TournamentController, TournamentStateError
from src.tournament.host import HostSession, build_store, run_unattended

__all__ = [
    "HostSession",
    "TournamentController",
    "TournamentStateError",
    "build_store",
    "pair_round",
    "roster_from_names",
    "run_unattended",
]

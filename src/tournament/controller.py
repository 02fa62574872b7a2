"""
Gala Showdown - Tournament Controller

Owns the authoritative GameState and walks it through the bracket:

    SETUP -> ROUND_PREPARING -> SIMULATING_MATCHES -> ... -> WINNER -> SETUP

Each round is paired at random; round 1 plays eighteen, round 2 ten and a
half, every later round the poker showdown. Only the host constructs a
controller; every change is published through the injected publisher.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Protocol, Sequence

from src.config.settings import Settings, get_settings
from src.database.models import GameStage, GameState, Match, MatchView, Participant
from src.engine.base import Card, GameMode
from src.engine.errors import IllegalActionError
from src.engine.validators import validate_participant_name
from src.match import (
    DiceMatch,
    MatchResolver,
    MatchScreen,
    Pacer,
    TenHalfMatch,
    TenHalfStrategy,
    ThresholdStrategy,
    resolver_for,
)
from src.tournament.bracket import new_participant_id, pair_round, roster_from_names

logger = logging.getLogger(__name__)

WELCOME_COMMENTARY = (
    "Welcome to the gala arena! Add the players and get ready for the showdown!"
)


class TournamentStateError(ValueError):
    """The requested operation is not allowed in the current stage."""


class StatePublisher(Protocol):
    async def publish_game_state(self, state: GameState) -> Any: ...

    async def publish_match_view(self, view: MatchView) -> Any: ...


class Commentator(Protocol):
    async def generate(self, context: str) -> str: ...


class TournamentController:
    """
    Single authoritative mutator of a tournament.

    Attributes:
        state: The live GameState; resolvers and publishers read it through
            this handle rather than through copies
        screen: Handle on the live MatchView
        active_match: Resolver of the match in flight, if any
    """

    def __init__(
        self,
        publisher: StatePublisher | None = None,
        *,
        commentator: Commentator | None = None,
        settings: Settings | None = None,
        pacer: Pacer | None = None,
        rng: random.Random | None = None,
        strategy: TenHalfStrategy | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.publisher = publisher
        self.commentator = commentator
        self.rng = rng or random.Random()
        self.pacer = pacer or Pacer(self.settings.pace_scale)
        self.strategy = strategy
        self.screen = MatchScreen(
            publisher.publish_match_view if publisher is not None else None,
            show_frames=self.settings.show_frames,
        )
        self.state = self.initial_state()
        self.active_match: MatchResolver | None = None

    def initial_state(self) -> GameState:
        return GameState(
            all_participants=roster_from_names(self.settings.default_roster),
            commentary=WELCOME_COMMENTARY,
        )

    @property
    def mode(self) -> GameMode | None:
        if self.state.round_number < 1:
            return None
        return GameMode.for_round(self.state.round_number)

    # -- Registration ------------------------------------------------------

    async def add_participant(self, name: str) -> Participant:
        """Register a player. SETUP only."""
        self._require_stage(GameStage.SETUP, "Players can only be added during setup.")
        participant = Participant(id=new_participant_id(), name=validate_participant_name(name))
        self.state.all_participants.append(participant)
        await self.publish_state()
        return participant

    async def remove_participant(self, participant_id: str) -> Participant:
        """Unregister a player. SETUP only."""
        self._require_stage(GameStage.SETUP, "Players can only be removed during setup.")
        for i, participant in enumerate(self.state.all_participants):
            if participant.id == participant_id:
                del self.state.all_participants[i]
                await self.publish_state()
                return participant
        raise TournamentStateError(f"No participant with id {participant_id!r}.")

    # -- Rounds ------------------------------------------------------------

    async def start_tournament(self) -> None:
        self._require_stage(GameStage.SETUP, "The tournament has already started.")
        if len(self.state.all_participants) < 2:
            raise TournamentStateError("At least 2 players are needed to start.")
        logger.info("Tournament starting with %d players", len(self.state.all_participants))
        await self.prepare_round(self.state.all_participants, 1)

    async def prepare_round(self, pool: Sequence[Participant], round_number: int) -> list[Match]:
        """Pair ``pool`` for ``round_number`` and reset the round bookkeeping."""
        matches = pair_round(pool, self.rng)
        state = self.state
        state.stage = GameStage.ROUND_PREPARING
        state.round_number = round_number
        state.current_pool = list(pool)
        state.matches = matches
        state.current_match_index = 0
        state.winners_of_round = []
        state.is_simulating = False
        logger.info(
            "Round %d prepared: %d players, %d matches", round_number, len(pool), len(matches)
        )
        await self.screen.reset()
        await self.publish_state()
        await self.comment(f"{GameMode.for_round(round_number).title} begins! Players, get ready!")
        return matches

    async def advance_round(self) -> list[Match]:
        """Start the next round with this round's winners."""
        if self.state.stage != GameStage.ROUND_PREPARING or not self.state.round_complete:
            raise TournamentStateError("The current round is not finished.")
        return await self.prepare_round(self.state.winners_of_round, self.state.round_number + 1)

    async def play_next_match(self) -> Participant:
        """
        Resolve the match at ``current_match_index``.

        Byes are recorded directly; other matches run the round's resolver.

        Raises:
            TournamentStateError: If no match is pending or one is in flight
        """
        state = self.state
        if state.is_simulating:
            raise TournamentStateError("A match is already in progress.")
        if state.stage not in (GameStage.ROUND_PREPARING, GameStage.SIMULATING_MATCHES):
            raise TournamentStateError(f"No match to play during {state.stage.value}.")
        match = state.current_match
        if match is None:
            raise TournamentStateError("The round is complete; advance to the next round.")

        if match.is_bye:
            state.is_simulating = True
            match.game_log.append(f"{match.p1.name} advances on a bye")
            try:
                await self.comment(f"{match.p1.name} drew the bye and advances straight through!")
            except Exception:
                state.is_simulating = False
                raise
            return await self._record_winner(match.p1)

        state.is_simulating = True
        state.stage = GameStage.SIMULATING_MATCHES
        await self.screen.reset(round_message="Let the battle begin!")
        await self.publish_state()

        resolver = self._build_resolver(match)
        self.active_match = resolver
        try:
            winner = await resolver.play()
        except Exception:
            logger.exception(
                "Match %d of round %d aborted", state.current_match_index + 1, state.round_number
            )
            state.is_simulating = False
            await self.publish_state()
            raise
        finally:
            self.active_match = None
        return await self._record_winner(winner)

    async def run_tournament(self) -> Participant:
        """Play every remaining match unattended and return the champion."""
        if self.strategy is None:
            self.strategy = ThresholdStrategy()
        if self.state.stage == GameStage.SETUP:
            await self.start_tournament()
        while self.state.stage != GameStage.WINNER:
            if self.state.round_complete:
                await self.advance_round()
            else:
                await self.play_next_match()
        return self.state.final_winner  # type: ignore[return-value]

    async def reset(self) -> None:
        """Return to setup with the default roster. WINNER only."""
        self._require_stage(GameStage.WINNER, "Only a finished tournament can be reset.")
        self.state = self.initial_state()
        await self.screen.reset()
        await self.publish_state()

    # -- Ten and a half host actions ---------------------------------------

    async def hit(self) -> Card:
        return await self._ten_half().hit()

    async def stand(self) -> None:
        await self._ten_half().stand()

    # -- Internals ---------------------------------------------------------

    async def comment(self, context: str) -> None:
        """Ask the commentator for a line and publish it."""
        text = context
        if self.commentator is not None:
            text = await self.commentator.generate(context)
        self.state.commentary = text
        await self.publish_state()

    async def publish_state(self) -> None:
        if self.publisher is not None:
            await self.publisher.publish_game_state(self.state)

    async def _record_winner(self, winner: Participant) -> Participant:
        state = self.state
        match = state.matches[state.current_match_index]
        match.winner = winner
        state.winners_of_round.append(winner)
        state.current_match_index += 1
        state.is_simulating = False
        logger.info("Round %d match %d won by %s", state.round_number, state.current_match_index, winner.name)

        if state.round_complete:
            if len(state.winners_of_round) == 1:
                state.final_winner = winner
                state.stage = GameStage.WINNER
                logger.info("Champion: %s", winner.name)
                await self.publish_state()
                await self.comment(f"{winner.name} is the champion of the gala!")
                return winner
            state.stage = GameStage.ROUND_PREPARING
        await self.publish_state()
        return winner

    def _build_resolver(self, match: Match) -> MatchResolver:
        mode = GameMode.for_round(self.state.round_number)
        cls = resolver_for(mode)
        options: dict[str, Any] = {
            "rng": self.rng,
            "announce": self.comment,
            "max_replays": self.settings.max_replays,
        }
        if cls is DiceMatch:
            options["max_attempts"] = self.settings.dice_max_attempts
        elif cls is TenHalfMatch:
            options["strategy"] = self.strategy
        return cls(match, self.screen, self.pacer, **options)

    def _ten_half(self) -> TenHalfMatch:
        if not isinstance(self.active_match, TenHalfMatch):
            raise IllegalActionError("There is no ten and a half match waiting for a move.")
        return self.active_match

    def _require_stage(self, stage: GameStage, message: str) -> None:
        if self.state.stage != stage:
            raise TournamentStateError(message)

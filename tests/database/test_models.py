"""
Gala Showdown - Replicated Model Tests
"""

import pytest
from pydantic import ValidationError

from src.database.models import GameStage, GameState, Match, MatchStatus, MatchView, Participant, Room
from src.engine.base import Card


class TestTolerantParsing:
    def test_missing_lists_default_empty(self):
        state = GameState.model_validate({"stage": "SETUP"})
        assert state.all_participants == []
        assert state.matches == []
        assert state.winners_of_round == []

    def test_null_lists_and_flags(self):
        state = GameState.model_validate({
            "stage": "ROUND_PREPARING",
            "matches": None,
            "current_pool": None,
            "is_simulating": None,
        })
        assert state.matches == []
        assert state.is_simulating is False

    def test_match_without_log(self):
        match = Match.model_validate({"p1": {"id": "a", "name": "A"}})
        assert match.game_log == []
        assert match.is_bye

    def test_match_view_nulls(self):
        view = MatchView.model_validate({
            "p1_hand": None,
            "p1_dice": None,
            "p2_passed": None,
            "round_message": None,
        })
        assert view.p1_hand == []
        assert view.p1_dice == []
        assert view.p2_passed is False
        assert view.round_message == ""

    def test_cards_round_trip_through_json(self):
        view = MatchView(p1_hand=[Card.parse("A♠"), Card.parse("J♦")])
        restored = MatchView.model_validate(view.model_dump(mode="json"))
        assert restored.p1_hand == view.p1_hand

    def test_room_with_null_parts(self):
        room = Room.model_validate({"code": "ABC234", "game_state": None, "match_view": None})
        assert room.game_state.stage == GameStage.SETUP
        assert room.match_view.status == MatchStatus.IDLE
        assert room.host_connected is False


class TestValidation:
    def test_participant_is_frozen(self):
        person = Participant(id="x", name="X")
        with pytest.raises(ValidationError):
            person.name = "Y"

    def test_negative_round_rejected(self):
        with pytest.raises(ValidationError):
            GameState(round_number=-1)

    def test_bad_room_code_length(self):
        with pytest.raises(ValidationError):
            Room(code="ABC")

    def test_current_player_is_one_or_two(self):
        with pytest.raises(ValidationError):
            MatchView(current_player=3)


class TestGameStateProperties:
    def test_round_complete(self):
        a, b = Participant(id="a", name="A"), Participant(id="b", name="B")
        state = GameState(matches=[Match(p1=a, p2=b)])
        assert not state.round_complete
        assert state.current_match.p1 == a

        state.current_match_index = 1
        assert state.round_complete
        assert state.current_match is None

    def test_no_matches_is_not_complete(self):
        assert not GameState().round_complete

"""Tests for GameSession orchestration."""

import random

import pytest

from lycan.engine import NO_EXPULSION, GameSession, GameState
from lycan.events.game_events import Phase, VictoryCondition
from lycan.models.action import ActionType, HealAction, KillAction, SilenceAction
from lycan.models.config import GameConfig
from lycan.models.player import Character, Player, Team
from lycan.validation import GameRuleError, ValidationError


def make_session(config: GameConfig | None = None, strict: bool = True) -> GameSession:
    """Seven players.

    p1 WEREWOLF, p2 SEER, p3 VILLAGER, p4 VILLAGER, p5 SILVER_BULLET,
    p6 JESTER, p7 WITCH.
    """
    characters = [
        Character.WEREWOLF,
        Character.SEER,
        Character.VILLAGER,
        Character.VILLAGER,
        Character.SILVER_BULLET,
        Character.JESTER,
        Character.WITCH,
    ]
    players = [
        Player(id=f"p{i}", name=f"Player{i}", character=character)
        for i, character in enumerate(characters, start=1)
    ]
    state = GameState(players=players, config=config or GameConfig(number_of_players=7))
    return GameSession(state, rng=random.Random(0), strict=strict)


def start_day(session: GameSession) -> None:
    """Run a quiet night to reach the first day."""
    session.run_night([])


class TestNew:
    def test_new_deals_characters(self) -> None:
        session = GameSession.new([f"Player {i}" for i in range(8)], seed=42)
        state = session.state

        assert len(state.players) == 8
        assert state.phase == Phase.SETUP
        assert session.history == []

    def test_state_is_a_copy(self) -> None:
        session = make_session()

        session.state.players[0].is_alive = False

        assert session.state.players[0].is_alive


class TestNight:
    """Tests for run_night."""

    def test_night_applies_deaths_and_starts_day(self) -> None:
        session = make_session()

        report = session.run_night([KillAction(player_id="p1", target_id="p3")])
        state = session.state

        assert report.result.dead_players == ["p3"]
        assert not report.victory.has_winner
        assert not state.is_alive("p3")
        assert state.phase == Phase.DAY
        assert state.day == 1
        assert state.dead_order == ["p3"]

    def test_night_during_day_is_rejected(self) -> None:
        session = make_session()
        start_day(session)

        with pytest.raises(GameRuleError):
            session.run_night([])

    def test_potion_use_is_recorded(self) -> None:
        session = make_session()

        session.run_night([
            KillAction(player_id="p1", target_id="p3"),
            HealAction(player_id="p7", target_id="p3"),
        ])

        assert session.state.is_alive("p3")
        assert session.state.witch_potions.healing_potion is False
        assert session.available_actions("p7") == [ActionType.POISON]

    def test_silence_lasts_one_day(self) -> None:
        session = make_session()

        session.run_night([SilenceAction(player_id="p1", target_id="p3")])
        assert session.state.get_player("p3").is_silenced

        session.expel(None)
        session.run_night([])
        assert not session.state.get_player("p3").is_silenced

    def test_night_can_end_the_game(self) -> None:
        session = make_session()
        for target in ("p2", "p3", "p4", "p7"):
            if session.state.phase == Phase.DAY:
                session.expel(None)
            session.run_night([KillAction(player_id="p1", target_id=target)])

        session.expel(None)
        report = session.run_night([KillAction(player_id="p1", target_id="p6")])

        assert report.victory.has_winner
        assert report.victory.condition == VictoryCondition.WEREWOLF_MAJORITY
        assert session.state.phase == Phase.GAME_OVER
        with pytest.raises(GameRuleError):
            session.run_night([])


class TestUndo:
    def test_undo_restores_previous_state(self) -> None:
        session = make_session()
        session.run_night([KillAction(player_id="p1", target_id="p3")])

        description = session.undo()

        assert description == "Night 1"
        assert session.state.is_alive("p3")
        assert session.state.phase == Phase.SETUP
        assert session.history == []

    def test_undo_without_history(self) -> None:
        with pytest.raises(GameRuleError):
            make_session().undo()

    def test_history_is_append_only(self) -> None:
        session = make_session()
        start_day(session)
        session.expel(None)

        assert [s.description for s in session.history] == ["Night 1", "Day 1 expulsion"]


class TestSetup:
    def test_pair_lovers_then_cascade_on_expulsion(self) -> None:
        session = make_session()
        session.pair_lovers("p3", "p4")
        start_day(session)

        report = session.expel("p3")

        assert report.dead_players == ["p3", "p4"]
        assert not session.state.is_alive("p4")

    def test_setup_actions_only_during_setup(self) -> None:
        session = make_session()
        start_day(session)

        with pytest.raises(GameRuleError):
            session.pair_lovers("p3", "p4")

    def test_copy_requires_occult(self) -> None:
        with pytest.raises(GameRuleError):
            make_session().copy_character("p3", "p1")

    def test_unknown_player(self) -> None:
        with pytest.raises(GameRuleError):
            make_session().pair_lovers("p3", "ghost")


class TestExpulsion:
    """Tests for votes and expulsions."""

    def test_expelling_last_wolf_ends_game(self) -> None:
        session = make_session()
        start_day(session)

        report = session.expel("p1")

        assert report.victory.winning_team == Team.GOOD
        assert report.victory.winners == ["p2", "p3", "p4", "p5", "p7"]
        assert session.state.is_game_ended
        assert session.state.winners == report.victory.winners

    def test_expelled_jester_wins(self) -> None:
        session = make_session()
        start_day(session)

        report = session.expel("p6")

        assert report.victory.condition == VictoryCondition.JESTER_EXPELLED
        assert session.state.phase == Phase.GAME_OVER

    def test_no_expulsion_ends_day(self) -> None:
        session = make_session()
        start_day(session)

        session.expel(None)

        assert session.state.phase == Phase.NIGHT
        assert session.state.night == 2

    def test_expel_outside_day(self) -> None:
        with pytest.raises(GameRuleError):
            make_session().expel("p3")

    def test_expel_dead_player(self) -> None:
        session = make_session()
        session.run_night([KillAction(player_id="p1", target_id="p3")])

        with pytest.raises(GameRuleError):
            session.expel("p3")

    def test_dead_voters_are_ignored(self) -> None:
        session = make_session()
        session.run_night([KillAction(player_id="p1", target_id="p3")])

        result = session.vote({"p3": "p1", "p4": "p2"})

        assert result.counts == {"p2": 1}

    def test_ballots_against_dead_or_unknown_players_are_ignored(self) -> None:
        session = make_session()
        session.run_night([KillAction(player_id="p1", target_id="p3")])

        result = session.vote({"p2": "p3", "p4": "ghost", "p5": "p1"})

        assert result.counts == {"p1": 1}
        assert result.winner == "p1"
        assert not result.tied

    def test_no_expulsion_ballot_dropped_when_disallowed(self) -> None:
        session = make_session(GameConfig(number_of_players=7, allow_no_expulsion_vote=False))
        start_day(session)

        result = session.vote({"p2": NO_EXPULSION, "p3": "p1"})

        assert result.winner == "p1"

    def test_tie_expels_nobody_when_allowed(self) -> None:
        session = make_session()
        start_day(session)

        vote, report = session.run_expulsion_vote({"p2": "p3", "p3": "p4"})

        assert vote.tied
        assert report.expelled is None
        assert session.state.is_alive("p3") and session.state.is_alive("p4")

    def test_tie_expels_drawn_player_otherwise(self) -> None:
        session = make_session(GameConfig(number_of_players=7, allow_no_expulsion_vote=False))
        start_day(session)

        vote, report = session.run_expulsion_vote({"p2": "p3", "p3": "p4"})

        assert vote.tied
        assert report.expelled == vote.winner
        assert report.expelled in {"p3", "p4"}


class TestMayor:
    """Tests for the mayor election and the mayor's tie-break."""

    def test_dead_mayor_needs_reelection(self) -> None:
        session = make_session()
        result = session.elect_mayor({"p2": "p3", "p4": "p3"})
        assert result.winner == "p3"
        assert not session.needs_mayor_reelection()

        session.run_night([KillAction(player_id="p1", target_id="p3")])

        assert session.needs_mayor_reelection()

    def test_election_ignores_dead_candidates(self) -> None:
        session = make_session()
        session.run_night([KillAction(player_id="p1", target_id="p3")])

        result = session.elect_mayor({"p2": "p3", "p4": "p3", "p5": "p2"})

        assert result.winner == "p2"
        assert session.state.mayor_id == "p2"

    def test_mayor_breaks_tie(self) -> None:
        session = make_session()
        session.elect_mayor({"p2": "p3"})
        start_day(session)
        offered: list[list[str]] = []

        def pick_p4(tied: list[str]) -> str:
            offered.append(tied)
            return "p4"

        vote, report = session.run_expulsion_vote({"p2": "p4", "p4": "p7"}, mayor_tie_break=pick_p4)

        assert offered == [["p4", "p7"]]
        assert vote.tied and vote.mayor_decided
        assert vote.winner == "p4"
        assert report.expelled == "p4"
        assert not session.state.is_alive("p4")

    def test_dead_mayor_cannot_break_tie(self) -> None:
        session = make_session()
        session.elect_mayor({"p2": "p3"})
        session.run_night([KillAction(player_id="p1", target_id="p3")])
        offered: list[list[str]] = []

        def pick_first(tied: list[str]) -> str:
            offered.append(tied)
            return tied[0]

        vote, report = session.run_expulsion_vote({"p2": "p4", "p4": "p2"}, mayor_tie_break=pick_first)

        assert offered == []
        assert vote.tied and not vote.mayor_decided
        assert report.expelled is None

    def test_resolve_tie_accepts_tied_player(self) -> None:
        session = make_session()
        session.elect_mayor({"p2": "p3"})
        start_day(session)
        vote = session.vote({"p2": "p4", "p4": "p7"})

        decided = session.resolve_tie(vote, "p7")

        assert decided.winner == "p7"
        assert decided.mayor_decided
        assert decided.counts == vote.counts

    def test_resolve_tie_rejects_untied_player(self) -> None:
        session = make_session()
        session.elect_mayor({"p2": "p3"})
        start_day(session)
        vote = session.vote({"p2": "p4", "p4": "p7"})

        with pytest.raises(GameRuleError):
            session.resolve_tie(vote, "p1")

    def test_resolve_tie_needs_a_tie(self) -> None:
        session = make_session()
        session.elect_mayor({"p2": "p3"})
        start_day(session)
        vote = session.vote({"p2": "p4", "p7": "p4"})

        with pytest.raises(GameRuleError):
            session.resolve_tie(vote, "p4")

    def test_resolve_tie_needs_a_mayor(self) -> None:
        session = make_session()
        start_day(session)
        vote = session.vote({"p2": "p4", "p4": "p7"})

        with pytest.raises(GameRuleError):
            session.resolve_tie(vote, "p4")


class TestSilverBullet:
    """Tests for the silver bullet's last shot."""

    def test_expelled_silver_bullet_shoots(self) -> None:
        session = make_session()
        start_day(session)

        session.expel("p5")
        assert session.state.phase == Phase.SILVER_BULLET
        assert session.state.pending_silver_bullet_id == "p5"

        result = session.silver_bullet_shot("p3")

        assert result.dead_players == ["p3"]
        assert session.state.phase == Phase.NIGHT
        assert session.state.pending_silver_bullet_id is None

    def test_shot_can_end_the_game(self) -> None:
        session = make_session()
        start_day(session)
        session.expel("p5")

        session.silver_bullet_shot("p1")

        assert session.state.is_game_ended
        assert session.state.winning_team == Team.GOOD

    def test_killed_silver_bullet_shoots_next_day(self) -> None:
        session = make_session()
        session.run_night([KillAction(player_id="p1", target_id="p5")])
        assert session.state.pending_silver_bullet_id == "p5"

        session.silver_bullet_shot(None)

        assert session.state.pending_silver_bullet_id is None
        assert session.state.phase == Phase.DAY

    def test_disabled_by_config(self) -> None:
        session = make_session(GameConfig(number_of_players=7, silver_bullet_kills_when_dead=False))

        session.run_night([KillAction(player_id="p1", target_id="p5")])

        assert session.state.pending_silver_bullet_id is None

    def test_no_pending_shot(self) -> None:
        with pytest.raises(GameRuleError):
            make_session().silver_bullet_shot("p1")


class TestStrictMode:
    def test_broken_roster_is_rejected(self) -> None:
        """Test that strict mode refuses to commit an inconsistent roster."""
        session = make_session()
        session._state.players[1].is_in_love = True
        session._state.players[1].love_partner_id = "p3"

        with pytest.raises(ValidationError) as exc_info:
            session.run_night([])

        assert any(v.rule_id == "S.3" for v in exc_info.value.violations)

    def test_lenient_mode_commits_anyway(self) -> None:
        session = make_session(strict=False)
        session._state.players[1].is_in_love = True
        session._state.players[1].love_partner_id = "p3"

        session.run_night([])

        assert session.state.phase == Phase.DAY

"""Tests for victory evaluation."""

from lycan.engine import GameState, check_jester_victory, evaluate_victory
from lycan.events.game_events import VictoryCondition
from lycan.models.player import Character, Player, Team, find_player


def make_state(characters: list[Character], dead: list[int] | None = None) -> GameState:
    """Create a state with players p1..pn; indexes in ``dead`` are 1-based."""
    dead_set = set(dead or [])
    players = [
        Player(
            id=f"p{i}",
            name=f"Player{i}",
            character=character,
            is_alive=i not in dead_set,
            is_infected=character == Character.ZOMBIE,
        )
        for i, character in enumerate(characters, start=1)
    ]
    return GameState(players=players)


def make_lovers(state: GameState, first: str, second: str) -> None:
    a = find_player(state.players, first)
    b = find_player(state.players, second)
    a.is_in_love, a.love_partner_id = True, second
    b.is_in_love, b.love_partner_id = True, first


class TestWerewolfMajority:
    """Tests for the wolf-pack win."""

    def test_three_wolves_against_two(self) -> None:
        state = make_state([
            Character.WEREWOLF,
            Character.VOODOO_WEREWOLF,
            Character.GAG_WEREWOLF,
            Character.VILLAGER,
            Character.SEER,
        ])

        result = evaluate_victory(state)

        assert result.has_winner
        assert result.winning_team == Team.EVIL
        assert set(result.winners) == {"p1", "p2", "p3"}
        assert result.condition == VictoryCondition.WEREWOLF_MAJORITY

    def test_traitor_sides_with_wolves(self) -> None:
        """Test that a living traitor is not opposition and shares the win."""
        state = make_state([
            Character.WEREWOLF,
            Character.WEREWOLF,
            Character.TRAITOR,
            Character.VILLAGER,
            Character.SEER,
        ])

        result = evaluate_victory(state)

        assert result.has_winner
        assert set(result.winners) == {"p1", "p2", "p3"}

    def test_wolves_outnumbered(self) -> None:
        state = make_state([Character.WEREWOLF, Character.VILLAGER, Character.SEER])

        result = evaluate_victory(state)

        assert not result.has_winner
        assert result.winners == []
        assert result.reason == "Game continues"

    def test_dead_players_do_not_count(self) -> None:
        state = make_state(
            [Character.WEREWOLF, Character.VILLAGER, Character.SEER, Character.WITCH],
            dead=[3, 4],
        )

        result = evaluate_victory(state)

        assert result.condition == VictoryCondition.WEREWOLF_MAJORITY
        assert result.winners == ["p1"]


class TestSoloWins:
    """Tests for the vampire and zombie wins."""

    def test_lone_vampire(self) -> None:
        state = make_state(
            [Character.VAMPIRE, Character.VILLAGER, Character.SEER, Character.WITCH],
            dead=[3, 4],
        )

        result = evaluate_victory(state)

        assert result.has_winner
        assert result.winners == ["p1"]
        assert result.condition == VictoryCondition.LONE_VAMPIRE

    def test_lone_vampire_beats_wolf_majority(self) -> None:
        """Test that the vampire check runs before the wolf check."""
        state = make_state([Character.VAMPIRE, Character.WEREWOLF, Character.SEER], dead=[3])

        result = evaluate_victory(state)

        assert result.winners == ["p1"]
        assert result.condition == VictoryCondition.LONE_VAMPIRE

    def test_vampire_with_three_alive_continues(self) -> None:
        state = make_state([Character.VAMPIRE, Character.VILLAGER, Character.SEER])

        assert not evaluate_victory(state).has_winner

    def test_zombie_wins_when_all_infected(self) -> None:
        state = make_state([Character.ZOMBIE, Character.VILLAGER, Character.SEER])
        for player in state.players:
            player.is_infected = True

        result = evaluate_victory(state)

        assert result.winners == ["p1"]
        assert result.condition == VictoryCondition.ALL_INFECTED

    def test_zombie_waits_for_last_infection(self) -> None:
        state = make_state([Character.ZOMBIE, Character.VILLAGER, Character.SEER])
        find_player(state.players, "p2").is_infected = True

        assert not evaluate_victory(state).has_winner


class TestThreatsEliminated:
    """Tests for the village win."""

    def test_village_wins_when_threats_are_dead(self) -> None:
        state = make_state(
            [Character.WEREWOLF, Character.VAMPIRE, Character.VILLAGER, Character.SEER],
            dead=[1, 2],
        )

        result = evaluate_victory(state)

        assert result.has_winner
        assert result.winning_team == Team.GOOD
        assert result.winners == ["p3", "p4"]

    def test_jester_and_traitor_do_not_block_village(self) -> None:
        """Test that non-killing evil roles neither block nor share the win."""
        state = make_state([Character.JESTER, Character.TRAITOR, Character.VILLAGER, Character.SEER, Character.WITCH])

        result = evaluate_victory(state)

        assert result.condition == VictoryCondition.THREATS_ELIMINATED
        assert result.winners == ["p3", "p4", "p5"]

    def test_evaluation_does_not_mutate_state(self) -> None:
        state = make_state([Character.WEREWOLF, Character.VILLAGER], dead=[1])
        before = state.model_dump()

        evaluate_victory(state)

        assert state.model_dump() == before


class TestLovers:
    """Tests pinning the second pass for the cupid and the lovers."""

    def test_lovers_join_village_win(self) -> None:
        """Test that living lovers and the (dead) cupid join an ended game."""
        state = make_state(
            [Character.WEREWOLF, Character.CUPID, Character.VILLAGER, Character.SEER],
            dead=[1, 2],
        )
        make_lovers(state, "p3", "p4")

        result = evaluate_victory(state)

        assert result.condition == VictoryCondition.THREATS_ELIMINATED
        assert result.winning_team == Team.GOOD
        assert result.winners == ["p3", "p4", "p2"]

    def test_mixed_lovers_join_wolf_win(self) -> None:
        """Test that a wolf's lover shares the wolves' win."""
        state = make_state(
            [Character.WEREWOLF, Character.WEREWOLF, Character.VILLAGER, Character.SEER, Character.CUPID],
            dead=[5],
        )
        make_lovers(state, "p1", "p3")

        result = evaluate_victory(state)

        assert result.winning_team == Team.EVIL
        assert result.winners == ["p1", "p2", "p3", "p5"]
        assert "lovers" in result.reason

    def test_lovers_off_the_winning_side_do_not_share(self) -> None:
        state = make_state([Character.JESTER, Character.TRAITOR, Character.VILLAGER, Character.CUPID])
        make_lovers(state, "p1", "p2")

        result = evaluate_victory(state)

        assert result.winning_team == Team.GOOD
        assert result.winners == ["p3", "p4"]

    def test_lovers_need_a_cupid(self) -> None:
        state = make_state([Character.WEREWOLF, Character.VILLAGER, Character.SEER], dead=[1])
        make_lovers(state, "p2", "p3")

        result = evaluate_victory(state)

        assert result.winners == ["p2", "p3"]

    def test_lovers_win_an_ended_game_without_primary_winner(self) -> None:
        """Test that an ended game with no other winner goes to the lovers."""
        state = make_state([
            Character.WEREWOLF,
            Character.VILLAGER,
            Character.SEER,
            Character.CUPID,
        ])
        make_lovers(state, "p2", "p3")
        state.is_game_ended = True

        result = evaluate_victory(state)

        assert result.condition == VictoryCondition.LOVERS_SURVIVED
        assert result.winning_team == Team.GOOD
        assert result.winners == ["p2", "p3", "p4"]

    def test_lovers_alone_do_not_end_a_running_game(self) -> None:
        state = make_state([
            Character.WEREWOLF,
            Character.VILLAGER,
            Character.SEER,
            Character.CUPID,
        ])
        make_lovers(state, "p2", "p3")

        assert not evaluate_victory(state).has_winner

    def test_zombie_win_is_never_shared(self) -> None:
        state = make_state(
            [Character.ZOMBIE, Character.VILLAGER, Character.SEER, Character.CUPID],
            dead=[4],
        )
        make_lovers(state, "p1", "p2")
        for player in state.players:
            player.is_infected = True

        result = evaluate_victory(state)

        assert result.condition == VictoryCondition.ALL_INFECTED
        assert result.winners == ["p1"]


class TestJester:
    def test_expelled_jester_wins(self) -> None:
        jester = Player(id="p1", name="Jo", character=Character.JESTER)

        result = check_jester_victory(jester)

        assert result is not None
        assert result.winners == ["p1"]
        assert result.condition == VictoryCondition.JESTER_EXPELLED

    def test_other_characters_do_not(self) -> None:
        assert check_jester_victory(Player(id="p1", name="Vi", character=Character.VILLAGER)) is None

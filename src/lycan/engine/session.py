"""GameSession - drives a game through setup, nights and days.

The session owns the GameState and an append-only history of snapshots.
Every state-changing call records a snapshot first, so ``undo()`` can
restore the state as it was before that call.

Usage:
    session = GameSession.new(["Ana", "Bia", ...], seed=42)
    report = session.run_night(actions)
    if not report.victory.has_winner:
        vote = session.vote(ballots)
        session.expel(vote.winner)
"""

import logging
import random
from typing import Callable, Optional, Sequence
from pydantic import BaseModel, ConfigDict

from lycan.engine.abilities import ability_key, available_actions
from lycan.engine.game_state import GameState
from lycan.engine.night_resolver import NightResolver, resolve_silver_bullet_shot
from lycan.engine.secondary_deaths import propagate_all
from lycan.engine.victory import check_jester_victory, evaluate_victory
from lycan.engine.votes import NO_EXPULSION, tally_votes
from lycan.events.game_events import ActionResult, Phase, VictoryResult, VoteResult
from lycan.models.action import ActionType, BaseAction
from lycan.models.config import GameConfig, default_config
from lycan.models.player import Character, Player
from lycan.models.setup import copy_character, distribute_characters, pair_lovers
from lycan.validation import (
    GameRuleError,
    ValidationError,
    validate_state_consistency,
    validate_transition,
)

logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    """Immutable copy of the state taken before a step."""

    model_config = ConfigDict(frozen=True)

    description: str
    state: GameState


class NightReport(BaseModel):
    """What a night produced, for the day announcement."""

    result: ActionResult
    victory: VictoryResult


class ExpulsionReport(BaseModel):
    """Outcome of applying a day's vote."""

    expelled: Optional[str] = None
    dead_players: list[str] = []
    victory: VictoryResult = VictoryResult()


class GameSession:
    """Orchestrates one game around the pure rules engine.

    Args:
        state: Initial game state.
        rng: Random source for tie-breaking (seed it for reproducible games).
        strict: Validate roster invariants after every step and raise
            ValidationError on violation.
    """

    def __init__(
        self,
        state: GameState,
        rng: Optional[random.Random] = None,
        strict: bool = False,
    ):
        self._state = state
        self._rng = rng or random.Random()
        self._strict = strict
        self._history: list[Snapshot] = []
        self._resolver = NightResolver()

    @classmethod
    def new(
        cls,
        player_names: Sequence[str],
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        strict: bool = False,
    ) -> "GameSession":
        """Deal characters and create a session in the SETUP phase."""
        config = config or default_config()
        rng = random.Random(seed)
        players = distribute_characters(list(player_names), config, rng)
        return cls(GameState(players=players, config=config), rng=rng, strict=strict)

    # =========================================================================
    # State and history
    # =========================================================================

    @property
    def state(self) -> GameState:
        """Read-only view; mutate through session methods."""
        return self._state.model_copy(deep=True)

    @property
    def history(self) -> list[Snapshot]:
        return list(self._history)

    def undo(self) -> str:
        """Restore the state from before the last step.

        Returns:
            Description of the undone step.

        Raises:
            GameRuleError: If there is nothing to undo.
        """
        if not self._history:
            raise GameRuleError("Nothing to undo")
        snapshot = self._history.pop()
        self._state = snapshot.state.model_copy(deep=True)
        logger.info("Undid step: %s", snapshot.description)
        return snapshot.description

    def _checkpoint(self, description: str) -> None:
        self._history.append(Snapshot(description=description, state=self._state.model_copy(deep=True)))

    def _commit(self, state: GameState) -> None:
        if self._strict:
            violations = validate_state_consistency(state.players)
            violations += validate_transition(self._state.players, state.players)
            if violations:
                raise ValidationError(violations)
        self._state = state

    def _require_player(self, player_id: str) -> Player:
        player = self._state.get_player(player_id)
        if player is None:
            raise GameRuleError(f"Unknown player: {player_id}")
        return player

    def _require_running(self) -> None:
        if self._state.is_game_ended:
            raise GameRuleError("The game has already ended")

    def _finish(self, state: GameState, victory: VictoryResult) -> None:
        state.is_game_ended = True
        state.winners = list(victory.winners)
        state.winning_team = victory.winning_team
        state.phase = Phase.GAME_OVER
        logger.info("Game over: %s (winners=%s)", victory.reason, victory.winners)

    # =========================================================================
    # Setup
    # =========================================================================

    def copy_character(self, occult_id: str, target_id: str) -> None:
        """Occult copies a target's character at the start of the game."""
        self._require_phase(Phase.SETUP)
        occult = self._require_player(occult_id)
        self._require_player(target_id)
        if occult.character != Character.OCCULT:
            raise GameRuleError(f"{occult.name} is not the occult")

        self._checkpoint("Occult action")
        state = self._state.model_copy(deep=True)
        state.players = copy_character(state.players, occult_id, target_id)
        self._commit(state)

    def pair_lovers(self, first_id: str, second_id: str) -> None:
        """Cupid makes two players fall in love at the start of the game."""
        self._require_phase(Phase.SETUP)
        self._require_player(first_id)
        self._require_player(second_id)
        if first_id == second_id:
            raise GameRuleError("Lovers must be two different players")

        self._checkpoint("Cupid action")
        state = self._state.model_copy(deep=True)
        state.players = pair_lovers(state.players, first_id, second_id)
        self._commit(state)

    def _require_phase(self, phase: Phase) -> None:
        if self._state.phase != phase:
            raise GameRuleError(f"Expected phase {phase.value}, game is in {self._state.phase.value}")

    # =========================================================================
    # Night
    # =========================================================================

    def available_actions(self, player_id: str) -> list[ActionType]:
        """Action types the player may submit tonight."""
        return available_actions(self._state, self._require_player(player_id))

    def run_night(self, actions: Sequence[BaseAction]) -> NightReport:
        """Resolve the night's actions and check for a winner.

        Silences from the previous night expire before the new ones apply.
        """
        self._require_running()
        if self._state.phase not in (Phase.SETUP, Phase.NIGHT):
            raise GameRuleError(f"Cannot run a night during {self._state.phase.value}")

        self._checkpoint(f"Night {self._state.night}")
        state = self._state.model_copy(deep=True)
        for player in state.players:
            player.is_silenced = False

        result = self._resolver.resolve(state.players, actions)
        self._record_ability_use(state, actions)

        state.players = result.updated_players
        state.dead_order.extend(pid for pid in result.dead_players if pid not in state.dead_order)
        state.day = state.night
        state.phase = Phase.DAY

        if state.config.silver_bullet_kills_when_dead:
            for dead_id in result.dead_players:
                dead = state.get_player(dead_id)
                if dead is not None and dead.character == Character.SILVER_BULLET:
                    state.pending_silver_bullet_id = dead_id
                    break

        victory = evaluate_victory(state)
        if victory.has_winner:
            self._finish(state, victory)

        self._commit(state)
        logger.info("Night %d resolved: dead=%s", state.night, result.dead_players)
        return NightReport(result=result, victory=victory)

    def _record_ability_use(self, state: GameState, actions: Sequence[BaseAction]) -> None:
        for action in actions:
            player = state.get_player(action.player_id)
            if player is None:
                continue
            if action.type == ActionType.HEAL:
                state.witch_potions.healing_potion = False
            elif action.type == ActionType.POISON:
                state.witch_potions.poison_potion = False
            key = ability_key(player, action)
            if key is not None:
                state.used_abilities.setdefault(player.id, {}).setdefault(key, []).append(state.night)

    # =========================================================================
    # Day
    # =========================================================================

    def _valid_ballots(self, votes: dict[str, str], allow_abstain: bool) -> dict[str, str]:
        """Keep ballots cast by living players for living players.

        NO_EXPULSION ballots are kept only when ``allow_abstain`` is set.
        """
        return {
            voter: target
            for voter, target in votes.items()
            if self._state.is_alive(voter)
            and (self._state.is_alive(target) or (allow_abstain and target == NO_EXPULSION))
        }

    def elect_mayor(self, votes: dict[str, str]) -> VoteResult:
        """Elect a mayor; a tie is settled by the random draw."""
        self._require_running()
        result = tally_votes(self._valid_ballots(votes, allow_abstain=False), self._rng)
        if result.winner is not None:
            self._checkpoint("Mayor election")
            state = self._state.model_copy(deep=True)
            state.mayor_id = result.winner
            self._commit(state)
        return result

    def needs_mayor_reelection(self) -> bool:
        """A dead mayor must be replaced at the next day."""
        mayor_id = self._state.mayor_id
        return mayor_id is not None and not self._state.is_alive(mayor_id)

    def has_living_mayor(self) -> bool:
        mayor_id = self._state.mayor_id
        return mayor_id is not None and self._state.is_alive(mayor_id)

    def vote(self, votes: dict[str, str]) -> VoteResult:
        """Tally an expulsion vote without applying it.

        Ballots from dead or unknown voters, and ballots against dead or
        unknown players, are dropped. NO_EXPULSION ballots are dropped too
        when the config disallows them.
        """
        self._require_running()
        valid = self._valid_ballots(votes, allow_abstain=self._state.config.allow_no_expulsion_vote)
        return tally_votes(valid, self._rng)

    def resolve_tie(self, result: VoteResult, player_id: str) -> VoteResult:
        """Let the living mayor pick who is expelled from a tied vote.

        Returns:
            The vote result with the mayor's pick as winner.

        Raises:
            GameRuleError: If the vote was not tied, there is no living
                mayor, or the pick is not one of the tied players.
        """
        if not result.tied:
            raise GameRuleError("Only a tied vote goes to the mayor")
        if not self.has_living_mayor():
            raise GameRuleError("There is no living mayor to break the tie")
        if player_id not in result.tied_players:
            raise GameRuleError(f"{player_id} is not one of the tied players")
        logger.info("Mayor %s broke the tie: %s", self._state.mayor_id, player_id)
        return result.model_copy(update={"winner": player_id, "mayor_decided": True})

    def run_expulsion_vote(
        self,
        votes: dict[str, str],
        mayor_tie_break: Optional[Callable[[list[str]], str]] = None,
    ) -> tuple[VoteResult, ExpulsionReport]:
        """Tally the vote and expel its winner.

        A tie goes to the living mayor through ``mayor_tie_break``, called
        with the tied player ids. Without a mayor (or a callback), a tie
        expels nobody under ``allow_no_expulsion_vote``; otherwise the
        randomly drawn tied player is expelled.
        """
        result = self.vote(votes)
        expelled = result.winner
        if result.tied:
            if mayor_tie_break is not None and self.has_living_mayor():
                result = self.resolve_tie(result, mayor_tie_break(list(result.tied_players)))
                expelled = result.winner
            elif self._state.config.allow_no_expulsion_vote:
                expelled = None
        return result, self.expel(expelled)

    def expel(self, player_id: Optional[str]) -> ExpulsionReport:
        """Apply the day's expulsion (None = nobody expelled) and end the day."""
        self._require_running()
        if self._state.phase != Phase.DAY:
            raise GameRuleError(f"Cannot expel during {self._state.phase.value}")

        self._checkpoint(f"Day {self._state.day} expulsion")
        state = self._state.model_copy(deep=True)
        report = ExpulsionReport(expelled=player_id)

        if player_id is not None:
            expelled = state.get_player(player_id)
            if expelled is None:
                raise GameRuleError(f"Unknown player: {player_id}")
            if not expelled.is_alive:
                raise GameRuleError(f"{expelled.name} is already dead")

            expelled.is_alive = False
            report.dead_players = [player_id] + propagate_all(state.players, player_id)
            state.dead_order.extend(report.dead_players)

            jester = check_jester_victory(expelled)
            if jester is not None:
                report.victory = jester
                self._finish(state, jester)
                self._commit(state)
                return report

            if expelled.character == Character.SILVER_BULLET and state.config.silver_bullet_kills_when_expelled:
                state.pending_silver_bullet_id = player_id

        report.victory = evaluate_victory(state)
        if report.victory.has_winner:
            self._finish(state, report.victory)
        elif state.pending_silver_bullet_id is not None:
            state.phase = Phase.SILVER_BULLET
        else:
            self._end_day(state)

        self._commit(state)
        return report

    def _end_day(self, state: GameState) -> None:
        state.night += 1
        state.phase = Phase.NIGHT

    # =========================================================================
    # Silver bullet
    # =========================================================================

    def silver_bullet_shot(self, target_id: Optional[str]) -> ActionResult:
        """Fire the pending silver bullet (None = decline to shoot).

        Raises:
            GameRuleError: If no silver bullet shot is pending.
        """
        self._require_running()
        shooter_id = self._state.pending_silver_bullet_id
        if shooter_id is None:
            raise GameRuleError("No silver bullet shot is pending")

        self._checkpoint("Silver bullet shot")
        state = self._state.model_copy(deep=True)
        state.pending_silver_bullet_id = None

        if target_id is None:
            result = ActionResult(updated_players=state.players)
        else:
            result = resolve_silver_bullet_shot(
                state.players,
                shooter_id,
                target_id,
                ignores_talisman=state.config.silver_bullet_ignores_talisman,
            )
            state.players = result.updated_players
            state.dead_order.extend(pid for pid in result.dead_players if pid not in state.dead_order)

        victory = evaluate_victory(state)
        if victory.has_winner:
            self._finish(state, victory)
        elif state.phase == Phase.SILVER_BULLET:
            # Shot after an expulsion closes the day
            self._end_day(state)

        self._commit(state)
        return result

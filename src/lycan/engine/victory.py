"""Victory evaluation.

Checks run in strict precedence, first match wins:

1. Lone vampire: the vampire wins alone when exactly two players are alive.
2. Werewolf majority: living wolves >= living non-wolves (traitors are on
   the wolves' side and are not counted against them). Wolves and traitors win.
3. All infected: the zombie wins when every other living player is infected.
4. Lovers: second pass once the game has ended. If a cupid is in the game,
   exactly two lovers are alive and one of them is on the winning side, both
   lovers and the cupid share the win. An all-infected ending is never shared.
5. Threats eliminated: no wolf, vampire or zombie alive; living good
   players win.
"""

import logging
from typing import Optional

from lycan.engine.game_state import GameState
from lycan.events.game_events import VictoryCondition, VictoryResult
from lycan.models.player import Character, Player, Team, is_werewolf

logger = logging.getLogger(__name__)


def check_lone_vampire(alive: list[Player]) -> Optional[VictoryResult]:
    vampire = next((p for p in alive if p.character == Character.VAMPIRE), None)
    if vampire is None or len(alive) != 2:
        return None
    return VictoryResult(
        has_winner=True,
        winners=[vampire.id],
        winning_team=Team.EVIL,
        reason="The vampire won - only two players remain",
        condition=VictoryCondition.LONE_VAMPIRE,
    )


def check_werewolf_majority(alive: list[Player]) -> Optional[VictoryResult]:
    werewolves = [p for p in alive if is_werewolf(p.character)]
    traitors = [p for p in alive if p.character == Character.TRAITOR]
    others = len(alive) - len(werewolves) - len(traitors)

    if not (werewolves or traitors) or len(werewolves) < others:
        return None
    return VictoryResult(
        has_winner=True,
        winners=[p.id for p in werewolves] + [p.id for p in traitors],
        winning_team=Team.EVIL,
        reason="The werewolves won - they equal or outnumber everyone else",
        condition=VictoryCondition.WEREWOLF_MAJORITY,
    )


def check_all_infected(alive: list[Player]) -> Optional[VictoryResult]:
    zombie = next((p for p in alive if p.character == Character.ZOMBIE), None)
    if zombie is None:
        return None
    if not all(p.is_infected for p in alive if p.id != zombie.id):
        return None
    return VictoryResult(
        has_winner=True,
        winners=[zombie.id],
        winning_team=Team.EVIL,
        reason="The zombie won - every living player is infected",
        condition=VictoryCondition.ALL_INFECTED,
    )


def check_threats_eliminated(alive: list[Player]) -> Optional[VictoryResult]:
    threats = {Character.VAMPIRE, Character.ZOMBIE}
    if any(is_werewolf(p.character) or p.character in threats for p in alive):
        return None
    return VictoryResult(
        has_winner=True,
        winners=[p.id for p in alive if p.team == Team.GOOD],
        winning_team=Team.GOOD,
        reason="The village won - every threat was eliminated",
        condition=VictoryCondition.THREATS_ELIMINATED,
    )


def apply_lovers_victory(
    state: GameState,
    primary: Optional[VictoryResult],
) -> Optional[VictoryResult]:
    """Second pass: let the cupid and the lovers join an ended game.

    Args:
        state: Current game state.
        primary: Result of the primary checks, None if none matched.

    Returns:
        The (possibly extended) result, or None if the game goes on.
    """
    ended = primary is not None or state.is_game_ended
    if not ended:
        return primary
    if primary is not None and primary.condition == VictoryCondition.ALL_INFECTED:
        return primary

    cupid = next((p for p in state.players if p.character == Character.CUPID), None)
    lovers = [p for p in state.players if p.is_alive and p.is_in_love]
    if cupid is None or len(lovers) != 2:
        return primary

    lover_ids = [p.id for p in lovers]
    if primary is None:
        return VictoryResult(
            has_winner=True,
            winners=lover_ids + [cupid.id] if cupid.id not in lover_ids else lover_ids,
            winning_team=Team.GOOD,
            reason="The lovers won - both survived to the end",
            condition=VictoryCondition.LOVERS_SURVIVED,
        )

    # Only shared when a lover is on the winning side
    if not any(p.team == primary.winning_team for p in lovers):
        return primary

    winners = list(primary.winners)
    for player_id in lover_ids + [cupid.id]:
        if player_id not in winners:
            winners.append(player_id)
    return primary.model_copy(update={
        "winners": winners,
        "reason": f"{primary.reason}; the lovers and the cupid also won",
    })


def evaluate_victory(state: GameState) -> VictoryResult:
    """Decide whether the game has ended and who won.

    Pure: the state is not modified.

    Args:
        state: Current game state.

    Returns:
        VictoryResult; ``has_winner`` is False while the game goes on.
    """
    alive = state.alive_players

    primary: Optional[VictoryResult] = None
    for check in (check_lone_vampire, check_werewolf_majority, check_all_infected, check_threats_eliminated):
        primary = check(alive)
        if primary is not None:
            break

    result = apply_lovers_victory(state, primary)

    logger.debug(
        "Victory check: %d alive, %d werewolves -> %s",
        len(alive),
        state.get_werewolf_count(),
        result.condition.value if result else "continue",
    )

    if result is None:
        return VictoryResult()
    return result


def check_jester_victory(expelled: Player) -> Optional[VictoryResult]:
    """An expelled jester wins alone, ending the game at once."""
    if expelled.character != Character.JESTER:
        return None
    return VictoryResult(
        has_winner=True,
        winners=[expelled.id],
        winning_team=Team.EVIL,
        reason="The jester won - they were expelled by the village",
        condition=VictoryCondition.JESTER_EXPELLED,
    )

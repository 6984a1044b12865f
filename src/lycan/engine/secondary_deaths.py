"""Secondary deaths caused by love and blood bonds."""

import logging

from lycan.models.player import Player, find_player

logger = logging.getLogger(__name__)


def propagate_secondary_deaths(players: list[Player], deceased_id: str) -> list[str]:
    """Kill the living partners bonded to a player who just died.

    Single hop: the partners' own bonds are not followed. Callers that need
    the full chain call this again for every returned id, or use
    ``propagate_all``.

    The roster is mutated in place.

    Args:
        players: Roster holding the deceased and their partners.
        deceased_id: Id of the player who just became not-alive.

    Returns:
        Ids of partners who died because of this death (love partner first).
    """
    deceased = find_player(players, deceased_id)
    if deceased is None:
        return []

    new_deaths: list[str] = []

    if deceased.is_in_love and deceased.love_partner_id:
        lover = find_player(players, deceased.love_partner_id)
        if lover is not None and lover.is_alive:
            lover.is_alive = False
            new_deaths.append(lover.id)

    if deceased.blood_bond_partner_id:
        bonded = find_player(players, deceased.blood_bond_partner_id)
        if bonded is not None and bonded.is_alive:
            bonded.is_alive = False
            new_deaths.append(bonded.id)

    if new_deaths:
        logger.debug("Death of %s took %s with it", deceased_id, new_deaths)
    return new_deaths


def propagate_all(players: list[Player], deceased_id: str) -> list[str]:
    """Follow bonds until no new death appears.

    Returns:
        Ids of every player who died as a consequence, in the order they died.
    """
    chain: list[str] = []
    pending = [deceased_id]
    while pending:
        current = pending.pop(0)
        for dead_id in propagate_secondary_deaths(players, current):
            chain.append(dead_id)
            pending.append(dead_id)
    return chain

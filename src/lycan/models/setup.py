"""Game setup: character distribution and start-of-game abilities."""

import random

from lycan.models.config import GameConfig
from lycan.models.player import (
    ALTERNATIVE_EVIL_CHARACTERS,
    Character,
    Player,
    Team,
    find_player,
    is_werewolf,
    team_for,
)


def _pick_unused(
    rng: random.Random,
    candidates: list[Character],
    selected: list[Character],
    fallback: Character,
) -> Character:
    """Pick a random candidate not yet selected, or the fallback."""
    unused = [c for c in candidates if c not in selected]
    if unused:
        return rng.choice(unused)
    return fallback


def select_characters(config: GameConfig, rng: random.Random) -> list[Character]:
    """Choose the characters for a game, shuffled.

    Each enabled character appears at most once, except the plain WEREWOLF,
    TRAITOR and VILLAGER used as fallbacks when the enabled pool runs out.

    Args:
        config: Game configuration with counts and allowed characters.
        rng: random.Random instance for reproducible selection.

    Returns:
        List of ``config.number_of_players`` characters in seat order.
    """
    allowed = list(dict.fromkeys(config.allowed_characters))
    werewolf_pool = [c for c in allowed if is_werewolf(c)]
    alternative_pool = [c for c in allowed if c in ALTERNATIVE_EVIL_CHARACTERS]
    # Occult is dealt from the good pool and picks its side later
    good_pool = [c for c in allowed if team_for(c) == Team.GOOD or c == Character.OCCULT]

    selected: list[Character] = []

    for _ in range(config.number_of_werewolves):
        selected.append(_pick_unused(rng, werewolf_pool, selected, Character.WEREWOLF))

    for _ in range(config.number_of_alternative_evil):
        selected.append(_pick_unused(rng, alternative_pool, selected, Character.TRAITOR))

    while len(selected) < config.number_of_players:
        selected.append(_pick_unused(rng, good_pool, selected, Character.VILLAGER))

    selected = selected[:config.number_of_players]
    rng.shuffle(selected)
    return selected


def new_player(player_id: str, name: str, character: Character) -> Player:
    """Create a player with the starting state of its character."""
    return Player(
        id=player_id,
        name=name,
        character=character,
        is_infected=character == Character.ZOMBIE,  # Zombie starts infected
        has_protection=character == Character.TALISMAN,
    )


def distribute_characters(
    player_names: list[str],
    config: GameConfig,
    rng: random.Random,
) -> list[Player]:
    """Create the roster with randomly dealt characters.

    Ids are ``player_1`` .. ``player_n`` in the order of ``player_names``.
    """
    characters = select_characters(
        config.model_copy(update={"number_of_players": len(player_names)}),
        rng,
    )
    return [
        new_player(f"player_{i + 1}", name, character)
        for i, (name, character) in enumerate(zip(player_names, characters))
    ]


def copy_character(players: list[Player], occult_id: str, target_id: str) -> list[Player]:
    """Occult assumes the character of a target for the rest of the game.

    The occult keeps OCCULT as its original character and takes over the
    starting state of the copied character (talisman, infection).

    Returns:
        New roster; unchanged if either player is missing or the actor
        is not an un-copied occult.
    """
    occult = find_player(players, occult_id)
    target = find_player(players, target_id)
    if occult is None or target is None or occult.id == target.id:
        return list(players)
    if occult.character != Character.OCCULT or occult.original_character is not None:
        return list(players)

    copied = occult.with_character(target.character).model_copy(update={
        "original_character": Character.OCCULT,
        "has_protection": target.character == Character.TALISMAN,
        "is_infected": target.character == Character.ZOMBIE,
    })
    return [copied if p.id == occult.id else p for p in players]


def pair_lovers(players: list[Player], first_id: str, second_id: str) -> list[Player]:
    """Cupid makes two players fall in love with each other.

    Returns:
        New roster; unchanged if the ids are equal, unknown, or either
        player is already in love.
    """
    first = find_player(players, first_id)
    second = find_player(players, second_id)
    if first is None or second is None or first.id == second.id:
        return list(players)
    if first.is_in_love or second.is_in_love:
        return list(players)

    partners = {first.id: second.id, second.id: first.id}
    return [
        p.model_copy(update={"is_in_love": True, "love_partner_id": partners[p.id]})
        if p.id in partners else p
        for p in players
    ]

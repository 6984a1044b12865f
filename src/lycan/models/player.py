"""Player and Character models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, model_validator


class Character(str, Enum):
    """Characters (roles) a player can hold."""

    # Good
    VILLAGER = "VILLAGER"
    MEDIUM = "MEDIUM"
    SEER = "SEER"
    CUPID = "CUPID"
    TALISMAN = "TALISMAN"
    WITCH = "WITCH"
    SILVER_BULLET = "SILVER_BULLET"
    GUARDIAN = "GUARDIAN"
    BLOOD_MAGE = "BLOOD_MAGE"
    HERO = "HERO"

    # Evil
    JESTER = "JESTER"
    TRAITOR = "TRAITOR"
    ZOMBIE = "ZOMBIE"
    VAMPIRE = "VAMPIRE"
    WEREWOLF = "WEREWOLF"
    VOODOO_WEREWOLF = "VOODOO_WEREWOLF"
    GAG_WEREWOLF = "GAG_WEREWOLF"

    # Neutral until it copies someone
    OCCULT = "OCCULT"


class Team(str, Enum):
    """Alignment used by investigations and victory conditions."""

    GOOD = "GOOD"
    EVIL = "EVIL"
    NEUTRAL = "NEUTRAL"


GOOD_CHARACTERS: frozenset[Character] = frozenset({
    Character.VILLAGER,
    Character.MEDIUM,
    Character.SEER,
    Character.CUPID,
    Character.TALISMAN,
    Character.WITCH,
    Character.SILVER_BULLET,
    Character.GUARDIAN,
    Character.BLOOD_MAGE,
    Character.HERO,
})

EVIL_CHARACTERS: frozenset[Character] = frozenset({
    Character.JESTER,
    Character.TRAITOR,
    Character.ZOMBIE,
    Character.VAMPIRE,
    Character.WEREWOLF,
    Character.VOODOO_WEREWOLF,
    Character.GAG_WEREWOLF,
})

WEREWOLF_CHARACTERS: frozenset[Character] = frozenset({
    Character.WEREWOLF,
    Character.VOODOO_WEREWOLF,
    Character.GAG_WEREWOLF,
})

# Evil roles that are not part of the pack; at most one of each per game
ALTERNATIVE_EVIL_CHARACTERS: tuple[Character, ...] = (
    Character.VAMPIRE,
    Character.TRAITOR,
    Character.ZOMBIE,
    Character.JESTER,
)

CHARACTER_NAMES: dict[Character, str] = {
    Character.VILLAGER: "Villager",
    Character.MEDIUM: "Medium",
    Character.SEER: "Seer",
    Character.CUPID: "Cupid",
    Character.TALISMAN: "Talisman",
    Character.WITCH: "Witch",
    Character.SILVER_BULLET: "Silver Bullet",
    Character.GUARDIAN: "Guardian",
    Character.BLOOD_MAGE: "Blood Mage",
    Character.HERO: "Hero",
    Character.JESTER: "Jester",
    Character.TRAITOR: "Traitor",
    Character.ZOMBIE: "Zombie",
    Character.VAMPIRE: "Vampire",
    Character.WEREWOLF: "Werewolf",
    Character.VOODOO_WEREWOLF: "Voodoo Werewolf",
    Character.GAG_WEREWOLF: "Gag Werewolf",
    Character.OCCULT: "Occult",
}


def team_for(character: Character) -> Team:
    """Get the team a character belongs to."""
    if character in GOOD_CHARACTERS:
        return Team.GOOD
    if character in EVIL_CHARACTERS:
        return Team.EVIL
    return Team.NEUTRAL


def is_werewolf(character: Character) -> bool:
    """Check if a character is one of the wolf variants."""
    return character in WEREWOLF_CHARACTERS


class Player(BaseModel):
    """Represents a player in the game.

    Uses id (str) as primary identifier. Name is stored for display purposes.
    The team is derived from the character; when it is not supplied it is
    filled in on construction.
    """

    id: str
    name: str
    character: Character
    original_character: Optional[Character] = None  # Set when OCCULT copies
    team: Optional[Team] = None
    is_alive: bool = True
    is_silenced: bool = False
    is_infected: bool = False
    has_protection: bool = False  # Talisman item, consumed once
    is_in_love: bool = False
    love_partner_id: Optional[str] = None
    blood_bond_partner_id: Optional[str] = None

    @model_validator(mode="after")
    def _derive_team(self) -> "Player":
        if self.team is None:
            self.team = team_for(self.character)
        return self

    @property
    def effective_character(self) -> Character:
        """Character whose abilities this player uses at night.

        A copying player keeps OCCULT as its original character and acts as
        the copied character.
        """
        if self.original_character is not None and self.original_character != Character.OCCULT:
            return self.original_character
        return self.character

    @property
    def display_name(self) -> str:
        return CHARACTER_NAMES[self.character]

    def with_character(self, character: Character) -> "Player":
        """Return a copy holding a new character, with its team recomputed."""
        return self.model_copy(update={
            "character": character,
            "team": team_for(character),
        })

    def has_talisman(self) -> bool:
        """Check if the un-consumed talisman still protects this player."""
        return self.has_protection and self.character == Character.TALISMAN


def find_player(players: list[Player], player_id: Optional[str]) -> Optional[Player]:
    """Find a player by id in a roster.

    Returns:
        Player if found, None otherwise (including when player_id is None)
    """
    if player_id is None:
        return None
    for player in players:
        if player.id == player_id:
            return player
    return None

"""Result types produced by the rules engine."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from lycan.models.player import Character, Player, Team


class Phase(str, Enum):
    """Macro phases of the game."""

    SETUP = "SETUP"
    NIGHT = "NIGHT"
    DAY = "DAY"
    SILVER_BULLET = "SILVER_BULLET"
    GAME_OVER = "GAME_OVER"


class DeathCause(str, Enum):
    """Cause of death."""

    WEREWOLF_KILL = "WEREWOLF_KILL"
    VAMPIRE_KILL = "VAMPIRE_KILL"
    HERO_KILL = "HERO_KILL"
    HERO_GUILT = "HERO_GUILT"  # Hero killed an innocent
    POISON = "POISON"
    SILVER_BULLET = "SILVER_BULLET"
    VOODOO = "VOODOO"
    VOODOO_BACKFIRE = "VOODOO_BACKFIRE"
    LOVE = "LOVE"
    BLOOD_BOND = "BLOOD_BOND"
    EXPULSION = "EXPULSION"


class DeathReason(BaseModel):
    """Why a player died, for narration."""

    cause: DeathCause
    description: str


class InvestigationKind(str, Enum):
    """What an investigation reveals."""

    ALIGNMENT = "ALIGNMENT"  # Seer: good or evil
    CHARACTER = "CHARACTER"  # Medium: literal character of a dead player


class InvestigationResult(BaseModel):
    """Private result delivered to a single investigator."""

    kind: InvestigationKind
    target_id: str
    target_name: str
    alignment: Optional[Team] = None
    character: Optional[Character] = None

    @property
    def result(self) -> str:
        if self.kind == InvestigationKind.ALIGNMENT:
            return "Good" if self.alignment == Team.GOOD else "Evil"
        return self.character.value if self.character else ""


class ActionResult(BaseModel):
    """Output of one resolution pass."""

    dead_players: list[str] = Field(default_factory=list)
    updated_players: list[Player] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)
    investigations: dict[str, InvestigationResult] = Field(default_factory=dict)
    death_reasons: dict[str, DeathReason] = Field(default_factory=dict)


class VictoryCondition(str, Enum):
    """How the game was won."""

    LONE_VAMPIRE = "LONE_VAMPIRE"
    WEREWOLF_MAJORITY = "WEREWOLF_MAJORITY"
    ALL_INFECTED = "ALL_INFECTED"
    LOVERS_SURVIVED = "LOVERS_SURVIVED"
    THREATS_ELIMINATED = "THREATS_ELIMINATED"
    JESTER_EXPELLED = "JESTER_EXPELLED"


class VictoryResult(BaseModel):
    """Outcome of a victory check."""

    has_winner: bool = False
    winners: list[str] = Field(default_factory=list)
    winning_team: Optional[Team] = None
    reason: str = "Game continues"
    condition: Optional[VictoryCondition] = None


class VoteResult(BaseModel):
    """Outcome of one round of ballots.

    ``winner`` is None only when no countable ballot was cast.
    """

    winner: Optional[str] = None
    tied: bool = False
    tied_players: list[str] = Field(default_factory=list)
    counts: dict[str, int] = Field(default_factory=dict)
    # Set when the mayor picked the winner out of a tie
    mayor_decided: bool = False

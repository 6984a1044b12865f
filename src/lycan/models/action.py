"""Night action models.

Each ability use is its own model, discriminated by the ``type`` field, so
fields that only make sense for one ability (the voodoo guess, the silver
bullet talisman override) only exist on that variant.
"""

import uuid
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from lycan.models.player import Character


class ActionType(str, Enum):
    """Types of actions submitted during a night."""

    KILL = "KILL"
    VOODOO_KILL = "VOODOO_KILL"
    PROTECT = "PROTECT"
    INVESTIGATE = "INVESTIGATE"
    HEAL = "HEAL"
    POISON = "POISON"
    INFECT = "INFECT"
    SILENCE = "SILENCE"
    BLOOD_BOND = "BLOOD_BOND"
    SHOOT = "SHOOT"


class BaseAction(BaseModel):
    """Common fields of every action. Actions are immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    player_id: str  # actor
    target_id: Optional[str] = None
    night: int = 1

    def __str__(self) -> str:
        target_str = f", target={self.target_id}" if self.target_id is not None else ""
        return f"{self.__class__.__name__}(actor={self.player_id}, night={self.night}{target_str})"


class KillAction(BaseAction):
    """Werewolf pack, vampire or hero kill attempt."""

    type: Literal["KILL"] = "KILL"


class VoodooKillAction(BaseAction):
    """Voodoo werewolf guesses the target's character.

    Right guess kills the target through any protection, wrong guess
    kills the voodoo werewolf.
    """

    type: Literal["VOODOO_KILL"] = "VOODOO_KILL"
    guessed_character: Character

    def __str__(self) -> str:
        return (
            f"VoodooKillAction(actor={self.player_id}, target={self.target_id}, "
            f"guess={self.guessed_character.value})"
        )


class ProtectAction(BaseAction):
    """Guardian protects a target for the night."""

    type: Literal["PROTECT"] = "PROTECT"


class InvestigateAction(BaseAction):
    """Seer alignment check or medium death audit."""

    type: Literal["INVESTIGATE"] = "INVESTIGATE"


class HealAction(BaseAction):
    """Witch healing potion."""

    type: Literal["HEAL"] = "HEAL"


class PoisonAction(BaseAction):
    """Witch poison potion."""

    type: Literal["POISON"] = "POISON"


class InfectAction(BaseAction):
    type: Literal["INFECT"] = "INFECT"


class SilenceAction(BaseAction):
    type: Literal["SILENCE"] = "SILENCE"


class BloodBondAction(BaseAction):
    type: Literal["BLOOD_BOND"] = "BLOOD_BOND"


class ShootAction(BaseAction):
    """Silver bullet last-stand shot."""

    type: Literal["SHOOT"] = "SHOOT"
    ignores_talisman: bool = False


Action = Annotated[
    Union[
        KillAction,
        VoodooKillAction,
        ProtectAction,
        InvestigateAction,
        HealAction,
        PoisonAction,
        InfectAction,
        SilenceAction,
        BloodBondAction,
        ShootAction,
    ],
    Field(discriminator="type"),
]

_ACTION_ADAPTER: TypeAdapter = TypeAdapter(Action)


def parse_action(data: dict) -> BaseAction:
    """Build the matching action variant from a plain dict.

    Raises:
        pydantic.ValidationError: If the dict does not describe a known action.
    """
    return _ACTION_ADAPTER.validate_python(data)

"""Game configuration and its YAML persistence."""

from enum import Enum
from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

from lycan.models.player import Character


class GagMode(str, Enum):
    """How often the gag werewolf may silence someone."""

    PER_GAME = "PER_GAME"  # werewolf_gag_value uses per game
    COOLDOWN = "COOLDOWN"  # werewolf_gag_value nights between uses


DEFAULT_ALLOWED_CHARACTERS: list[Character] = [
    Character.VILLAGER,
    Character.SEER,
    Character.CUPID,
    Character.GUARDIAN,
    Character.WITCH,
    Character.WEREWOLF,
    Character.VAMPIRE,
]


class GameConfig(BaseModel):
    """Ruleset toggles for one game.

    Read-only for the engine; a new game gets a new config.
    """

    model_config = ConfigDict(frozen=True)

    number_of_players: int = Field(default=8, ge=3)
    number_of_werewolves: int = Field(default=2, ge=1)
    number_of_alternative_evil: int = Field(default=1, ge=0)
    allowed_characters: list[Character] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_CHARACTERS)
    )

    # When True a tied vote expels nobody; otherwise one tied player is drawn
    allow_no_expulsion_vote: bool = True

    silver_bullet_kills_when_expelled: bool = True
    silver_bullet_kills_when_dead: bool = True
    silver_bullet_ignores_talisman: bool = False

    werewolf_gag_mode: GagMode = GagMode.PER_GAME
    werewolf_gag_value: int = Field(default=1, ge=1)


def default_config() -> GameConfig:
    """Create the default 8-player configuration."""
    return GameConfig()


def config_to_yaml(config: GameConfig) -> str:
    """Serialize a config to YAML text."""
    data = config.model_dump(mode="json")
    return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)


def save_config(config: GameConfig, filepath: Union[str, Path]) -> None:
    """Serialize the config to a YAML file."""
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(config_to_yaml(config))


def load_config(filepath: Union[str, Path]) -> GameConfig:
    """Load a config from a YAML file.

    Keys missing from the file fall back to the defaults and unknown keys
    are dropped, so configs saved by older versions still load.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If a present value is invalid.
    """
    with open(filepath, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {filepath} must contain a mapping")

    merged = default_config().model_dump()
    merged.update({k: v for k, v in data.items() if k in GameConfig.model_fields})
    if not isinstance(merged.get("allowed_characters"), list):
        merged["allowed_characters"] = list(DEFAULT_ALLOWED_CHARACTERS)

    return GameConfig.model_validate(merged)

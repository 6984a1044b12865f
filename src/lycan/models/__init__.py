"""Models package."""

from lycan.models.player import (
    Character,
    Team,
    Player,
    GOOD_CHARACTERS,
    EVIL_CHARACTERS,
    WEREWOLF_CHARACTERS,
    ALTERNATIVE_EVIL_CHARACTERS,
    CHARACTER_NAMES,
    team_for,
    is_werewolf,
    find_player,
)
from lycan.models.action import (
    ActionType,
    Action,
    BaseAction,
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
    parse_action,
)
from lycan.models.config import (
    GagMode,
    GameConfig,
    default_config,
    load_config,
    save_config,
)
from lycan.models.setup import (
    select_characters,
    distribute_characters,
    new_player,
    copy_character,
    pair_lovers,
)

__all__ = [
    "Character",
    "Team",
    "Player",
    "GOOD_CHARACTERS",
    "EVIL_CHARACTERS",
    "WEREWOLF_CHARACTERS",
    "ALTERNATIVE_EVIL_CHARACTERS",
    "CHARACTER_NAMES",
    "team_for",
    "is_werewolf",
    "find_player",
    "ActionType",
    "Action",
    "BaseAction",
    "KillAction",
    "VoodooKillAction",
    "ProtectAction",
    "InvestigateAction",
    "HealAction",
    "PoisonAction",
    "InfectAction",
    "SilenceAction",
    "BloodBondAction",
    "ShootAction",
    "parse_action",
    "GagMode",
    "GameConfig",
    "default_config",
    "load_config",
    "save_config",
    "select_characters",
    "distribute_characters",
    "new_player",
    "copy_character",
    "pair_lovers",
]

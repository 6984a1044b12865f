"""Engine package - rules engine and game orchestration."""

from .game_state import GameState, WitchPotions
from .secondary_deaths import propagate_secondary_deaths, propagate_all
from .night_resolver import NightResolver, resolve_night, resolve_silver_bullet_shot
from .victory import evaluate_victory, check_jester_victory
from .votes import NO_EXPULSION, count_votes, tally_votes
from .abilities import available_actions
from .session import GameSession, Snapshot, NightReport, ExpulsionReport

__all__ = [
    "GameState",
    "WitchPotions",
    "propagate_secondary_deaths",
    "propagate_all",
    "NightResolver",
    "resolve_night",
    "resolve_silver_bullet_shot",
    "evaluate_victory",
    "check_jester_victory",
    "NO_EXPULSION",
    "count_votes",
    "tally_votes",
    "available_actions",
    "GameSession",
    "Snapshot",
    "NightReport",
    "ExpulsionReport",
]

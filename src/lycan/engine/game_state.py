"""Game state for a lycan game."""

from typing import Optional
from pydantic import BaseModel, Field

from lycan.events.game_events import Phase
from lycan.models.config import GameConfig
from lycan.models.player import Player, Team, find_player, is_werewolf


class WitchPotions(BaseModel):
    """Which of the witch's one-shot potions are still available."""

    healing_potion: bool = True
    poison_potion: bool = True


class GameState(BaseModel):
    """Represents the current state of the game.

    The roster is the single source of truth for who is alive; the
    helpers below only read it.
    """

    players: list[Player]
    config: GameConfig = Field(default_factory=GameConfig)
    phase: Phase = Phase.SETUP
    night: int = 1
    day: int = 0
    mayor_id: Optional[str] = None
    is_game_ended: bool = False
    winners: list[str] = Field(default_factory=list)
    winning_team: Optional[Team] = None
    witch_potions: WitchPotions = Field(default_factory=WitchPotions)
    # player id -> ability key -> nights the ability was used
    used_abilities: dict[str, dict[str, list[int]]] = Field(default_factory=dict)
    pending_silver_bullet_id: Optional[str] = None
    dead_order: list[str] = Field(default_factory=list)

    def get_player(self, player_id: str) -> Optional[Player]:
        """Get player by id.

        Returns:
            Player if found, None otherwise
        """
        return find_player(self.players, player_id)

    def is_alive(self, player_id: str) -> bool:
        player = self.get_player(player_id)
        return player is not None and player.is_alive

    @property
    def alive_players(self) -> list[Player]:
        return [p for p in self.players if p.is_alive]

    def get_werewolf_count(self) -> int:
        """Get count of living wolf-variant players."""
        return sum(1 for p in self.players if p.is_alive and is_werewolf(p.character))

    def ability_uses(self, player_id: str, ability: str) -> list[int]:
        """Nights on which a player used an ability."""
        return self.used_abilities.get(player_id, {}).get(ability, [])

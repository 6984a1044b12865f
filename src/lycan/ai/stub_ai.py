"""Stub players that submit random legal actions.

Useful for:
- Integration tests (full game flow without a human at the table)
- The CLI simulation and stress test
"""

import random
from typing import Optional

from lycan.engine.session import GameSession
from lycan.engine.votes import NO_EXPULSION
from lycan.models.action import (
    ActionType,
    BaseAction,
    BloodBondAction,
    HealAction,
    InfectAction,
    InvestigateAction,
    KillAction,
    PoisonAction,
    ProtectAction,
    SilenceAction,
    VoodooKillAction,
)
from lycan.models.player import Character, Player, is_werewolf

# Chance that an optional ability is used on a given night
OPTIONAL_USE_CHANCE: float = 0.3


class StubPlayer:
    """Chooses random legal actions for every seat of a session."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def _pick(self, candidates: list[Player]) -> Optional[Player]:
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def setup(self, session: GameSession) -> None:
        """Use the start-of-game abilities (occult copy, cupid pairing)."""
        players = session.state.players
        for player in players:
            if player.character == Character.OCCULT:
                target = self._pick([p for p in players if p.id != player.id])
                if target is not None:
                    session.copy_character(player.id, target.id)

        if any(p.character == Character.CUPID for p in players) and len(players) >= 2:
            first, second = self.rng.sample(players, 2)
            session.pair_lovers(first.id, second.id)

    def night_actions(self, session: GameSession) -> list[BaseAction]:
        """Build one night's batch of actions."""
        state = session.state
        alive = state.alive_players
        night = state.night
        actions: list[BaseAction] = []

        # Pack kill, submitted once by the first living wolf
        wolves = [p for p in alive if is_werewolf(p.character)]
        pack_target = self._pick([p for p in alive if not is_werewolf(p.character)])
        if wolves and pack_target is not None:
            actions.append(KillAction(player_id=wolves[0].id, target_id=pack_target.id, night=night))

        for player in alive:
            others = [p for p in alive if p.id != player.id]
            for action_type in session.available_actions(player.id):
                action = self._choose(player, action_type, others, state.players, pack_target, night)
                if action is not None:
                    actions.append(action)
        return actions

    def _choose(
        self,
        player: Player,
        action_type: ActionType,
        others: list[Player],
        everyone: list[Player],
        pack_target: Optional[Player],
        night: int,
    ) -> Optional[BaseAction]:
        optional = self.rng.random() < OPTIONAL_USE_CHANCE
        target = self._pick(others)
        if target is None:
            return None

        if action_type == ActionType.KILL:
            if is_werewolf(player.effective_character):
                return None  # Covered by the pack kill
            if player.effective_character == Character.HERO and not optional:
                return None
            return KillAction(player_id=player.id, target_id=target.id, night=night)
        if action_type == ActionType.PROTECT:
            return ProtectAction(player_id=player.id, target_id=target.id, night=night)
        if action_type == ActionType.INVESTIGATE:
            if player.effective_character == Character.MEDIUM:
                dead = self._pick([p for p in everyone if not p.is_alive])
                if dead is None or not optional:
                    return None
                return InvestigateAction(player_id=player.id, target_id=dead.id, night=night)
            return InvestigateAction(player_id=player.id, target_id=target.id, night=night)
        if action_type == ActionType.HEAL:
            if pack_target is None or not optional:
                return None
            return HealAction(player_id=player.id, target_id=pack_target.id, night=night)
        if action_type == ActionType.POISON and optional:
            return PoisonAction(player_id=player.id, target_id=target.id, night=night)
        if action_type == ActionType.INFECT:
            return InfectAction(player_id=player.id, target_id=target.id, night=night)
        if action_type == ActionType.SILENCE and optional:
            return SilenceAction(player_id=player.id, target_id=target.id, night=night)
        if action_type == ActionType.BLOOD_BOND and optional:
            return BloodBondAction(player_id=player.id, target_id=target.id, night=night)
        if action_type == ActionType.VOODOO_KILL and optional:
            return VoodooKillAction(
                player_id=player.id,
                target_id=target.id,
                guessed_character=self.rng.choice(list(Character)),
                night=night,
            )
        return None

    def ballots(self, session: GameSession) -> dict[str, str]:
        """One ballot per living player."""
        alive = session.state.alive_players
        votes: dict[str, str] = {}
        for voter in alive:
            if self.rng.random() < 0.1:
                votes[voter.id] = NO_EXPULSION
                continue
            target = self._pick([p for p in alive if p.id != voter.id])
            if target is not None:
                votes[voter.id] = target.id
        return votes

    def mayor_tie_break(self, tied_players: list[str]) -> str:
        return self.rng.choice(tied_players)

    def silver_bullet_target(self, session: GameSession) -> Optional[str]:
        target = self._pick(session.state.alive_players)
        return target.id if target else None


def create_stub_player(seed: Optional[int] = None) -> StubPlayer:
    """Factory function to create a stub player."""
    return StubPlayer(seed=seed)

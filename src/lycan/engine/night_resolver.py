"""Night action resolution - applies one night's actions to the roster."""

import logging
from collections import Counter
from typing import Optional, Sequence

from lycan.engine.secondary_deaths import propagate_secondary_deaths
from lycan.events.game_events import (
    ActionResult,
    DeathCause,
    DeathReason,
    InvestigationKind,
    InvestigationResult,
)
from lycan.models.action import (
    ActionType,
    BaseAction,
    ShootAction,
    VoodooKillAction,
)
from lycan.models.player import Character, Player, Team, find_player

logger = logging.getLogger(__name__)


class _NightOutcome:
    """Mutable working set for a single resolution pass."""

    def __init__(self, players: Sequence[Player]):
        # Deep copies: the caller's roster is never touched
        self.players: list[Player] = [p.model_copy(deep=True) for p in players]
        self.dead: list[str] = []
        self.messages: list[str] = []
        self.investigations: dict[str, InvestigationResult] = {}
        self.death_reasons: dict[str, DeathReason] = {}

    def get(self, player_id: Optional[str]) -> Optional[Player]:
        return find_player(self.players, player_id)

    def kill(self, player: Player, cause: DeathCause, description: str) -> None:
        """Mark a player dead and cascade through love and blood bonds."""
        player.is_alive = False
        self._record(player.id, cause, description)

        pending = [player]
        while pending:
            source = pending.pop(0)
            for partner_id in propagate_secondary_deaths(self.players, source.id):
                partner = self.get(partner_id)
                if partner_id == source.love_partner_id:
                    self._record(partner_id, DeathCause.LOVE, f"died of love for {source.name}")
                else:
                    self._record(
                        partner_id,
                        DeathCause.BLOOD_BOND,
                        f"died through the blood bond with {source.name}",
                    )
                if partner is not None:
                    pending.append(partner)

    def _record(self, player_id: str, cause: DeathCause, description: str) -> None:
        if player_id not in self.dead:
            self.dead.append(player_id)
        # First recorded cause wins
        self.death_reasons.setdefault(player_id, DeathReason(cause=cause, description=description))

    def to_result(self) -> ActionResult:
        return ActionResult(
            dead_players=list(self.dead),
            updated_players=self.players,
            messages=self.messages,
            investigations=self.investigations,
            death_reasons=self.death_reasons,
        )


class NightResolver:
    """Applies a night's actions in a fixed precedence order.

    Resolution order:
    1. Protections (guardian)
    2. Blood bonds
    3. Kill aggregation (kills and poisons share one pending set)
    4. Cures (only on players under attack)
    5. Deaths: healed > protected > talisman > dies; then the hero's guilt
    6. Silver bullet shots
    7. Infections (covert)
    8. Silences
    9. Investigations
    10. Voodoo guesses, against targets still alive (the guesser may
       already be dead)

    Malformed actions (missing or unknown target, unknown actor) are
    ignored. Never raises for data shape.
    """

    def resolve(
        self,
        players: Sequence[Player],
        actions: Sequence[BaseAction],
    ) -> ActionResult:
        """Resolve one night.

        Args:
            players: Roster at the start of the night. Not mutated.
            actions: Actions submitted for this night. Not mutated.

        Returns:
            ActionResult with the updated roster, deduplicated deaths,
            narration messages, investigation results and death reasons.
        """
        outcome = _NightOutcome(players)
        by_type = self._group(actions)

        logger.debug(
            "Resolving night: %d players (%d alive), actions=%s",
            len(outcome.players),
            sum(1 for p in outcome.players if p.is_alive),
            dict(Counter(a.type for a in actions)),
        )

        protected = self._apply_protections(outcome, by_type[ActionType.PROTECT])
        self._apply_blood_bonds(outcome, by_type[ActionType.BLOOD_BOND])

        kill_actions = by_type[ActionType.KILL] + by_type[ActionType.POISON]
        pending = self._collect_kill_targets(outcome, kill_actions)
        healed = self._apply_heals(outcome, by_type[ActionType.HEAL], pending)
        self._resolve_deaths(outcome, pending, protected, healed)
        self._apply_hero_guilt(outcome, by_type[ActionType.KILL])

        for action in by_type[ActionType.SHOOT]:
            _resolve_shot(outcome, action, action.ignores_talisman)

        self._apply_infections(outcome, by_type[ActionType.INFECT])
        self._apply_silences(outcome, by_type[ActionType.SILENCE])
        self._apply_investigations(outcome, by_type[ActionType.INVESTIGATE])

        for action in by_type[ActionType.VOODOO_KILL]:
            self._resolve_voodoo(outcome, action)

        logger.debug(
            "Night resolved: dead=%s, %d messages, %d investigations",
            outcome.dead,
            len(outcome.messages),
            len(outcome.investigations),
        )
        return outcome.to_result()

    # =========================================================================
    # Steps
    # =========================================================================

    def _group(self, actions: Sequence[BaseAction]) -> dict[ActionType, list]:
        grouped: dict[ActionType, list] = {action_type: [] for action_type in ActionType}
        for action in actions:
            grouped[ActionType(action.type)].append(action)
        return grouped

    def _apply_protections(self, outcome: _NightOutcome, actions: list) -> set[str]:
        protected: set[str] = set()
        for action in actions:
            target = outcome.get(action.target_id)
            if target is None:
                continue
            protected.add(target.id)
            protector = outcome.get(action.player_id)
            if protector is not None:
                outcome.messages.append(f"{protector.name} protected {target.name} tonight.")
        return protected

    def _apply_blood_bonds(self, outcome: _NightOutcome, actions: list) -> None:
        for action in actions:
            caster = outcome.get(action.player_id)
            target = outcome.get(action.target_id)
            if caster is None or target is None or caster.id == target.id:
                continue
            # A bond is permanent
            if caster.blood_bond_partner_id or target.blood_bond_partner_id:
                continue
            caster.blood_bond_partner_id = target.id
            target.blood_bond_partner_id = caster.id
            outcome.messages.append(f"{caster.name} created a blood bond with {target.name}.")

    def _collect_kill_targets(self, outcome: _NightOutcome, actions: list) -> dict[str, BaseAction]:
        """Map each attacked player to the (last) action attacking them."""
        pending: dict[str, BaseAction] = {}
        for action in actions:
            if outcome.get(action.target_id) is None:
                continue
            pending[action.target_id] = action
        return pending

    def _apply_heals(
        self,
        outcome: _NightOutcome,
        actions: list,
        pending: dict[str, BaseAction],
    ) -> set[str]:
        healed: set[str] = set()
        for action in actions:
            if action.target_id not in pending:
                continue
            healed.add(action.target_id)
            healer = outcome.get(action.player_id)
            target = outcome.get(action.target_id)
            if healer is not None and target is not None:
                outcome.messages.append(f"{healer.name} saved {target.name} from an attack.")
        return healed

    def _resolve_deaths(
        self,
        outcome: _NightOutcome,
        pending: dict[str, BaseAction],
        protected: set[str],
        healed: set[str],
    ) -> None:
        for target_id, action in pending.items():
            target = outcome.get(target_id)
            if target is None or not target.is_alive:
                continue

            if target_id in healed:
                continue

            if target_id in protected:
                if target.has_talisman():
                    outcome.messages.append(
                        f"{target.name} was protected by the Guardian and kept the talisman."
                    )
                continue

            if target.has_talisman():
                target.has_protection = False
                outcome.messages.append(
                    f"{target.name} was protected by the talisman, but lost it."
                )
                continue

            cause, description = self._kill_cause(outcome, action)
            outcome.kill(target, cause, description)

    def _kill_cause(self, outcome: _NightOutcome, action: BaseAction) -> tuple[DeathCause, str]:
        if action.type == ActionType.POISON:
            return DeathCause.POISON, "poisoned by the witch"
        killer = outcome.get(action.player_id)
        killer_character = killer.effective_character if killer else None
        if killer_character == Character.VAMPIRE:
            return DeathCause.VAMPIRE_KILL, "killed by the vampire"
        if killer_character == Character.HERO:
            return DeathCause.HERO_KILL, "killed by the hero"
        return DeathCause.WEREWOLF_KILL, "killed by the werewolves"

    def _apply_hero_guilt(self, outcome: _NightOutcome, kill_actions: list) -> None:
        """A hero who killed a good player tonight dies too."""
        for action in kill_actions:
            hero = outcome.get(action.player_id)
            target = outcome.get(action.target_id)
            if hero is None or target is None:
                continue
            if hero.effective_character != Character.HERO or not hero.is_alive:
                continue
            if target.id not in outcome.dead or target.team != Team.GOOD:
                continue
            outcome.messages.append(
                f"{hero.name} killed {target.name}, who was innocent, and died!"
            )
            outcome.kill(hero, DeathCause.HERO_GUILT, "died for killing an innocent")

    def _apply_infections(self, outcome: _NightOutcome, actions: list) -> None:
        for action in actions:
            target = outcome.get(action.target_id)
            if target is not None and target.is_alive:
                target.is_infected = True

    def _apply_silences(self, outcome: _NightOutcome, actions: list) -> None:
        for action in actions:
            target = outcome.get(action.target_id)
            if target is not None and target.is_alive:
                target.is_silenced = True
                outcome.messages.append(
                    f"{target.name} was silenced and cannot speak during the next day."
                )

    def _apply_investigations(self, outcome: _NightOutcome, actions: list) -> None:
        for action in actions:
            investigator = outcome.get(action.player_id)
            target = outcome.get(action.target_id)
            if investigator is None or target is None:
                continue

            role = investigator.effective_character
            if role == Character.SEER:
                outcome.investigations[investigator.id] = InvestigationResult(
                    kind=InvestigationKind.ALIGNMENT,
                    target_id=target.id,
                    target_name=target.name,
                    alignment=Team.GOOD if target.team == Team.GOOD else Team.EVIL,
                )
            elif role == Character.MEDIUM and not target.is_alive:
                outcome.investigations[investigator.id] = InvestigationResult(
                    kind=InvestigationKind.CHARACTER,
                    target_id=target.id,
                    target_name=target.name,
                    character=target.character,
                )

    def _resolve_voodoo(self, outcome: _NightOutcome, action: VoodooKillAction) -> None:
        voodoo = outcome.get(action.player_id)
        target = outcome.get(action.target_id)
        if voodoo is None or target is None:
            return
        # Resolved even if the guesser died earlier tonight
        if voodoo.effective_character != Character.VOODOO_WEREWOLF:
            return

        if target.character == action.guessed_character:
            # Ignores guardian and talisman
            if target.is_alive:
                outcome.messages.append(
                    f"{voodoo.name} guessed the character of {target.name} and eliminated them!"
                )
                outcome.kill(target, DeathCause.VOODOO, "bewitched by the voodoo werewolf")
        elif voodoo.is_alive:
            outcome.messages.append(
                f"{voodoo.name} guessed the character of {target.name} wrong and died!"
            )
            outcome.kill(voodoo, DeathCause.VOODOO_BACKFIRE, "died from a failed voodoo spell")


def _resolve_shot(outcome: _NightOutcome, action: ShootAction, ignores_talisman: bool) -> None:
    """Resolve one silver bullet shot against its own target."""
    shooter = outcome.get(action.player_id)
    target = outcome.get(action.target_id)
    if shooter is None or target is None or not target.is_alive:
        return

    if target.has_talisman() and not ignores_talisman:
        target.has_protection = False
        outcome.messages.append(
            f"{target.name} was protected from the silver bullet by the talisman, but lost it."
        )
        return

    outcome.messages.append(f"{shooter.name} shot {target.name} with the silver bullet!")
    outcome.kill(target, DeathCause.SILVER_BULLET, "shot by the silver bullet")


def resolve_night(
    players: Sequence[Player],
    actions: Sequence[BaseAction],
) -> ActionResult:
    """Resolve one night's actions. See NightResolver."""
    return NightResolver().resolve(players, actions)


def resolve_silver_bullet_shot(
    players: Sequence[Player],
    shooter_id: str,
    target_id: str,
    ignores_talisman: bool = False,
) -> ActionResult:
    """Resolve a silver bullet shot fired outside the night batch.

    Used when the silver bullet is expelled or dies at night and fires on
    the following day. ``ignores_talisman`` comes from the game config.
    """
    outcome = _NightOutcome(players)
    action = ShootAction(player_id=shooter_id, target_id=target_id, ignores_talisman=ignores_talisman)
    _resolve_shot(outcome, action, ignores_talisman)
    return outcome.to_result()

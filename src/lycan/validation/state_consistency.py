"""Roster Consistency Validators (S.1-S.5, T.1-T.3).

Rules:
- S.1: Player ids are unique
- S.2: Team matches character (a copied occult takes the copied team)
- S.3: Love pairing is symmetric (both reference each other or neither)
- S.4: Blood-bond pairing is symmetric
- S.5: Talisman protection is only held by a talisman
- T.1: Dead players never come back to life
- T.2: Infection is never cleared
- T.3: Players are never removed from the roster
"""

from collections import Counter

from lycan.models.player import Character, Player, find_player, team_for
from .types import ValidationViolation, ValidationSeverity


def validate_state_consistency(players: list[Player]) -> list[ValidationViolation]:
    """Validate roster invariants S.1-S.5.

    Args:
        players: Roster to check

    Returns:
        List of validation violations (empty if valid)
    """
    violations: list[ValidationViolation] = []

    # S.1: unique ids
    duplicates = [pid for pid, count in Counter(p.id for p in players).items() if count > 1]
    if duplicates:
        violations.append(ValidationViolation(
            rule_id="S.1",
            category="Roster Consistency",
            message="Player ids must be unique",
            context={"duplicates": duplicates},
        ))

    for player in players:
        # S.2: team derived from character
        if player.team != team_for(player.character):
            violations.append(ValidationViolation(
                rule_id="S.2",
                category="Roster Consistency",
                message=f"Player {player.id}: team={player.team} does not match character={player.character.value}",
                context={"player_id": player.id},
            ))

        # S.3: symmetric love
        if player.is_in_love:
            partner = find_player(players, player.love_partner_id)
            if partner is None or partner.love_partner_id != player.id or not partner.is_in_love:
                violations.append(ValidationViolation(
                    rule_id="S.3",
                    category="Roster Consistency",
                    message=f"Player {player.id}: love partner {player.love_partner_id} does not love them back",
                    context={"player_id": player.id, "partner_id": player.love_partner_id},
                ))
        elif player.love_partner_id is not None:
            violations.append(ValidationViolation(
                rule_id="S.3",
                category="Roster Consistency",
                message=f"Player {player.id}: has a love partner but is not in love",
                context={"player_id": player.id},
            ))

        # S.4: symmetric blood bond
        if player.blood_bond_partner_id is not None:
            partner = find_player(players, player.blood_bond_partner_id)
            if partner is None or partner.blood_bond_partner_id != player.id:
                violations.append(ValidationViolation(
                    rule_id="S.4",
                    category="Roster Consistency",
                    message=f"Player {player.id}: blood bond with {player.blood_bond_partner_id} is one-sided",
                    context={"player_id": player.id, "partner_id": player.blood_bond_partner_id},
                ))

        # S.5: talisman protection
        if player.has_protection and player.character != Character.TALISMAN:
            violations.append(ValidationViolation(
                rule_id="S.5",
                category="Roster Consistency",
                message=f"Player {player.id}: holds talisman protection as {player.character.value}",
                severity=ValidationSeverity.WARNING,
                context={"player_id": player.id},
            ))

    return violations


def validate_transition(before: list[Player], after: list[Player]) -> list[ValidationViolation]:
    """Validate monotonic rules T.1-T.3 between two rosters.

    Args:
        before: Roster before a resolution step
        after: Roster after it

    Returns:
        List of validation violations (empty if valid)
    """
    violations: list[ValidationViolation] = []

    for old in before:
        new = find_player(after, old.id)

        # T.3: never removed
        if new is None:
            violations.append(ValidationViolation(
                rule_id="T.3",
                category="Roster Transition",
                message=f"Player {old.id} disappeared from the roster",
                context={"player_id": old.id},
            ))
            continue

        # T.1: no resurrection
        if not old.is_alive and new.is_alive:
            violations.append(ValidationViolation(
                rule_id="T.1",
                category="Roster Transition",
                message=f"Player {old.id} came back to life",
                context={"player_id": old.id},
            ))

        # T.2: infection is permanent
        if old.is_infected and not new.is_infected:
            violations.append(ValidationViolation(
                rule_id="T.2",
                category="Roster Transition",
                message=f"Player {old.id} lost their infection",
                context={"player_id": old.id},
            ))

    return violations


__all__ = ['validate_state_consistency', 'validate_transition']

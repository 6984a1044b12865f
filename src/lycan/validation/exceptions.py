"""Errors raised by the game session."""

from typing import List
from .types import ValidationSeverity, ValidationViolation


class ValidationError(Exception):
    """A strict session refused to commit a roster that breaks its rules.

    The message names the broken roster (S.*) and transition (T.*) rule
    ids, errors first; the full violations stay on ``violations``.
    """

    def __init__(self, violations: List[ValidationViolation]):
        self.violations = violations
        super().__init__(self._summary())

    def _summary(self) -> str:
        errors = [v.rule_id for v in self.violations if v.severity == ValidationSeverity.ERROR]
        warnings = [v.rule_id for v in self.violations if v.severity != ValidationSeverity.ERROR]
        parts = []
        if errors:
            parts.append("rules broken: " + ", ".join(errors))
        if warnings:
            parts.append("warnings: " + ", ".join(warnings))
        if not parts:
            return "Roster rejected"
        return "Roster rejected; " + "; ".join(parts)

    def __str__(self) -> str:
        details = [f"  {v.rule_id} {v.message}" for v in self.violations]
        return "\n".join([self._summary(), *details])


class GameRuleError(ValueError):
    """Raised when the session is driven out of order.

    Examples: acting after the game ended, an unknown player id in a
    session call, undo with no history. The pure engine functions never
    raise this; they ignore bad references.
    """

"""Lycan validation module.

Files:
- types.py: Shared ValidationViolation, ValidationSeverity
- exceptions.py: ValidationError and GameRuleError exceptions
- state_consistency.py: S.1-S.5 roster checks, T.1-T.3 transition checks
"""

from .types import ValidationViolation, ValidationSeverity
from .exceptions import ValidationError, GameRuleError
from .state_consistency import validate_state_consistency, validate_transition

__all__ = [
    "ValidationViolation",
    "ValidationSeverity",
    "ValidationError",
    "GameRuleError",
    "validate_state_consistency",
    "validate_transition",
]

"""Lycan - rules engine for a werewolf social-deduction party game."""

__version__ = "0.1.0"

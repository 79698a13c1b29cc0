"""Utility functions for the Conqueror rule engine."""

from conqueror.utils.rng import (
    generate_seed,
    random_choice,
    roll_dice,
    roll_die,
    shuffled,
)

__all__ = [
    "generate_seed",
    "random_choice",
    "roll_dice",
    "roll_die",
    "shuffled",
]

"""Deterministic Random Number Generator (RNG) system for Conqueror.

Every random outcome of a match is derived from the game seed fixed at
creation plus a public context (battle id, duel index, die index). This
ensures:
- Reproducibility: the same seed and action log always produce the same match
- Fairness: no hidden entropy is consumed after creation
- Auditability: battle records carry the seed context and the values rolled

Examples:
    >>> seed = generate_seed("a1b2", battle_id=3, context="duel:0:attacker:1")
    >>> seed
    'a1b2:3:duel:0:attacker:1'
    >>> result = roll_dice(seed, "1d6")
    >>> 1 <= result["total"] <= 6
    True
"""

from __future__ import annotations

import hashlib
import random
import re
from collections.abc import Sequence
from typing import Any, TypeVar

T = TypeVar("T")


def generate_seed(game_seed: str, battle_id: int, context: str) -> str:
    """Generate a deterministic seed string from match state.

    Format: "game_seed:battle_id:context"

    Args:
        game_seed: Seed fixed when the match was created
        battle_id: Battle counter (0 for non-combat draws such as the opening deal)
        context: What the roll is for (e.g., 'duel:2:defender:0', 'card')

    Returns:
        Seed string for RNG

    Raises:
        ValueError: If game_seed is empty or battle_id is negative
    """
    if not game_seed:
        raise ValueError("game_seed must not be empty")
    if battle_id < 0:
        raise ValueError(f"battle_id must be non-negative, got {battle_id}")

    return f"{game_seed}:{battle_id}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random().

    Args:
        seed: Seed string

    Returns:
        64-bit integer derived from SHA-256(seed)
    """
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    # Use first 8 bytes for a 64-bit integer
    return int.from_bytes(digest[:8], "big", signed=False)


def _parse_dice_notation(notation: str) -> tuple[int, int]:
    """Parse dice notation like '2d6' into (num_dice, num_sides).

    Raises:
        ValueError: If notation is invalid or values are non-positive
    """
    match = re.match(r"^(\d+)d(\d+)$", notation.lower())
    if not match:
        raise ValueError(
            f"Invalid dice notation: '{notation}'. Expected format: NdM (e.g., '2d6', '1d20')"
        )

    num_dice = int(match.group(1))
    num_sides = int(match.group(2))

    if num_dice <= 0:
        raise ValueError(f"Number of dice must be positive, got {num_dice}")
    if num_sides <= 0:
        raise ValueError(f"Number of sides must be positive, got {num_sides}")

    return num_dice, num_sides


def roll_dice(seed: str, notation: str = "1d6") -> dict[str, Any]:
    """Roll dice with deterministic seed.

    Args:
        seed: Deterministic seed string (from generate_seed)
        notation: Dice notation (e.g., "1d6", "3d6")

    Returns:
        Dictionary containing:
            - notation: The dice notation used
            - rolls: List of individual die rolls
            - total: Sum of all rolls
            - seed: The seed used

    Raises:
        ValueError: If dice notation is invalid
    """
    num_dice, num_sides = _parse_dice_notation(notation)

    rng = random.Random(_seed_to_int(seed))
    rolls = [rng.randint(1, num_sides) for _ in range(num_dice)]

    return {
        "notation": notation,
        "rolls": rolls,
        "total": sum(rolls),
        "seed": seed,
    }


def roll_die(
    game_seed: str,
    battle_id: int,
    duel_index: int,
    side: str,
    die_index: int,
    sides: int = 6,
) -> int:
    """Roll a single combat die.

    The value is a pure function of ``(game_seed, battle_id, duel_index, side,
    die_index)`` so any battle can be replayed from the public action log.
    """
    seed = generate_seed(game_seed, battle_id, f"duel:{duel_index}:{side}:{die_index}")
    return roll_dice(seed, f"1d{sides}")["total"]


def random_choice(seed: str, options: Sequence[T]) -> dict[str, Any]:
    """Choose randomly from options with deterministic seed.

    Returns:
        Dictionary containing:
            - choice: The selected option
            - index: Index of the selected option
            - seed: The seed used

    Raises:
        ValueError: If options is empty
    """
    if not options:
        raise ValueError("options list cannot be empty")

    rng = random.Random(_seed_to_int(seed))
    index = rng.randint(0, len(options) - 1)

    return {
        "choice": options[index],
        "index": index,
        "seed": seed,
    }


def shuffled(seed: str, items: Sequence[T]) -> list[T]:
    """Return a deterministically shuffled copy of ``items``."""

    result = list(items)
    random.Random(_seed_to_int(seed)).shuffle(result)
    return result

"""Deterministic random rolls for daily rewards.

Every roll is seeded from who rolls, on which UTC day and for what. The same
player rolling the same thing on the same day always gets the same result,
so a reward can be reproduced and audited after the fact, and a retried
request cannot reroll it.

Examples:
    >>> from datetime import date
    >>> seed = generate_seed("player-1", date(2025, 3, 1), "vote_gold")
    >>> seed
    'player-1:2025-03-01:vote_gold'
    >>> 500 <= random_int(seed, 500, 1000)["value"] <= 1000
    True
"""

import hashlib
import random
from datetime import date
from typing import Any


def generate_seed(player_id: str, day: date, context: str) -> str:
    """Generate a deterministic seed.

    Format: "player_id:YYYY-MM-DD:context"

    Args:
        player_id: Player the roll is for
        day: UTC day of the roll
        context: What the roll is for (e.g., 'vote_gold', 'vote_mana_reload')

    Raises:
        ValueError: If player_id or context is empty
    """
    if not player_id:
        raise ValueError("player_id must not be empty")
    if not context:
        raise ValueError("context must not be empty")

    return f"{player_id}:{day.isoformat()}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random()."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def random_int(seed: str, min_val: int, max_val: int) -> dict[str, Any]:
    """Random integer between min_val and max_val (inclusive).

    Returns:
        Dictionary containing:
            - value: The random integer
            - min: The minimum value
            - max: The maximum value
            - seed: The seed used

    Raises:
        ValueError: If min_val > max_val
    """
    if min_val > max_val:
        raise ValueError(f"min_val ({min_val}) cannot be greater than max_val ({max_val})")

    rng = random.Random(_seed_to_int(seed))
    value = rng.randint(min_val, max_val)

    return {
        "value": value,
        "min": min_val,
        "max": max_val,
        "seed": seed,
    }


def check_chance(seed: str, probability: float) -> dict[str, Any]:
    """Succeed with the given probability.

    Returns:
        Dictionary containing:
            - success: Whether the check succeeded
            - roll: Uniform roll in [0.0, 1.0)
            - probability: The requested probability
            - seed: The seed used

    Raises:
        ValueError: If probability not in [0.0, 1.0]
    """
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"probability must be between 0.0 and 1.0, got {probability}")

    roll = random.Random(_seed_to_int(seed)).random()

    return {
        "success": roll < probability,
        "roll": roll,
        "probability": probability,
        "seed": seed,
    }

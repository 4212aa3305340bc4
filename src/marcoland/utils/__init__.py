"""Utility functions for the MarcoLand economy."""

from marcoland.utils.rng import check_chance, generate_seed, random_int

__all__ = [
    "check_chance",
    "generate_seed",
    "random_int",
]

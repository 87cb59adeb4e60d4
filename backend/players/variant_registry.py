"""
Registry for autopilot players.

Maps variant keys ('random', 'greedy') to player classes so command-line
tools can pick one by name.
"""

from typing import Dict, Type, Optional

from .base import Player
from .greedy_player import GreedyPlayer
from .random_player import RandomPlayer


PLAYER_VARIANTS: Dict[str, Type[Player]] = {
    "greedy": GreedyPlayer,
    "random": RandomPlayer,
}

DEFAULT_VARIANT = "greedy"

# Canonical list of available variant keys
AVAILABLE_VARIANTS = list(PLAYER_VARIANTS.keys())


def get_player_class(variant_key: Optional[str] = None) -> Type[Player]:
    """
    Get the player class for a given variant key.

    Args:
        variant_key: One of AVAILABLE_VARIANTS. If None or empty, returns the default.

    Raises:
        ValueError: If variant_key is not recognized.
    """
    if not variant_key or variant_key.strip() == "":
        variant_key = DEFAULT_VARIANT

    variant_key = variant_key.strip()

    if variant_key not in PLAYER_VARIANTS:
        available = ", ".join(AVAILABLE_VARIANTS)
        raise ValueError(
            f"Unknown player variant '{variant_key}'. Available variants: {available}"
        )

    return PLAYER_VARIANTS[variant_key]


def list_variants() -> list:
    """
    Return metadata about all available player variants.
    """
    return [
        {"key": "greedy", "description": "Heads straight for the food, avoiding walls and its own body"},
        {"key": "random", "description": "Random safe moves"},
    ]

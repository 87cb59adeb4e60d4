#!/usr/bin/env python3
"""
Reset the persisted high score.

Usage:
    python backend/cli/reset_high_score.py [--confirm]
"""

import os
import sys
import argparse

# Add parent directory to path to import backend modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from database import get_database_path  # noqa: E402
from data_access import HighScoreStore  # noqa: E402


def reset_high_score(confirm: bool = False, store=None) -> bool:
    """
    Remove the stored high score.

    Args:
        confirm: If True, skip confirmation prompt

    Returns:
        True if the score was cleared, False if the reset was cancelled
    """
    store = store or HighScoreStore()
    current = store.load()

    if not confirm:
        print("=" * 70)
        print(f"Database path: {get_database_path()}")
        print(f"Current high score: {current}")
        print("=" * 70)

        response = input("\nType 'RESET' to confirm: ")

        if response != 'RESET':
            print("Reset cancelled")
            return False

    removed = store.clear()
    if removed:
        print(f"High score {current} cleared")
    else:
        print("No high score stored")
    return True


def main():
    parser = argparse.ArgumentParser(
        description="Reset the stored snake high score"
    )
    parser.add_argument(
        '--confirm',
        action='store_true',
        help="Skip confirmation prompt"
    )

    args = parser.parse_args()

    success = reset_high_score(confirm=args.confirm)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()

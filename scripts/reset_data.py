"""
Reset all article stats and delete all comments.

Usage:
    python scripts/reset_data.py [--purge] [--yes]
"""

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from stemforum.services.database import DatabaseUnavailableError, db_manager
from stemforum.services.maintenance import reset_all_data


async def run_reset(purge: bool) -> int:
    print("Starting data reset...")
    try:
        db = await db_manager.ensure_connected()
    except DatabaseUnavailableError as e:
        print(f"MongoDB connection error: {e}")
        return 1

    try:
        result = await asyncio.to_thread(reset_all_data, db, purge)
    finally:
        db_manager.close()

    action = "Deleted" if purge else "Reset"
    print(f"{action} {result['articles']} article records")
    print(f"Deleted {result['comments']} comment records")
    print("✅ All data reset successfully!")
    print("- All article views reset to 0")
    print("- All article likes reset to 0")
    print("- All comments deleted")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Reset STEM Forum article stats and delete all comments"
    )
    parser.add_argument(
        "--purge",
        action="store_true",
        help="Delete article documents instead of zeroing their counters",
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )
    args = parser.parse_args()

    if not args.yes:
        answer = input(f"Reset all data in '{db_manager.database_name}'? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            print("Aborted.")
            return 1

    return asyncio.run(run_reset(args.purge))


if __name__ == "__main__":
    sys.exit(main())

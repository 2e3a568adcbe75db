# scripts/smoke.py
"""
Smoke Test Script for the snakedraft engine.

Drafts a whole session with "best available" picks, exercising the clock,
undo/redo and the roster export along the way. No keyboard, no server.

Usage
-----
1. Test with a generated catalog:
    $ python scripts/smoke.py

2. Test with a real ranked CSV (RK, PLAYER NAME, TEAM, POS, BYE):
    $ python scripts/smoke.py --file samples/rankings.csv --teams 12 --rounds 15
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from snakedraft.core.contracts.session import DraftConfig
from snakedraft.core.draft.engine import DraftEngine
from snakedraft.io.catalog import read_catalog
from snakedraft.io.export import roster_csv

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

# --------------------------------------------------------------------------- #
# Test Data
# --------------------------------------------------------------------------- #
POSITIONS = ("QB", "RB", "RB", "WR", "WR", "TE", "K", "DST")
TEAMS = ("KC", "SF", "BUF", "PHI", "DAL", "MIA")


def generated_catalog(size: int) -> list[dict[str, object]]:
    """Return `size` synthetic rows; every tenth one is unranked."""
    return [
        {
            "name": f"Player {n:03d}",
            "category": POSITIONS[n % len(POSITIONS)],
            "grouping": TEAMS[n % len(TEAMS)],
            "week": 5 + n % 10,
            "rank": "NR" if n % 10 == 0 else n,
        }
        for n in range(1, size + 1)
    ]


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run snakedraft Smoke Test")
    parser.add_argument("--file", "-f", type=str, help="Ranked catalog CSV")
    parser.add_argument("--teams", type=int, default=4)
    parser.add_argument("--rounds", type=int, default=3)
    args = parser.parse_args()

    config = DraftConfig(participant_count=args.teams, total_rounds=args.rounds)

    # 1. Prepare Input Data
    if args.file:
        input_path = Path(args.file)
        if not input_path.exists():
            print(f"❌ File not found: {input_path}")
            return
        print(f"\n📂 Using catalog file: {input_path}")
        records: list[dict[str, object]] = list(read_catalog(input_path))
    else:
        print("\n📝 Using a generated catalog (No --file provided)")
        records = generated_catalog(args.teams * args.rounds + 10)

    # 2. Execution Phase
    engine = DraftEngine(config)
    try:
        engine.start(records)
        for _ in range(5):
            engine.tick()
        engine.pick_top()
        engine.undo_last()
        engine.redo_last()
        while engine.current_turn() is not None:
            engine.pick_top()
    except Exception as exc:
        print(f"\n❌ Draft Crashed: {exc}")
        traceback.print_exc()
        return

    # 3. Inspection Phase
    print("\n" + "=" * 60)
    print(f"✅ Draft Finished: {engine.pointer} picks, status={engine.status.value}")
    print("=" * 60)

    print("\n📌 Last picks:")
    for row in engine.recent_picks(6):
        print(f"  #{row.overall:<3} R{row.round} {row.participant:<8} {row.name} ({row.category})")

    print("\n📄 Roster CSV (head):")
    for line in roster_csv(engine.export_results()).splitlines()[:6]:
        print(f"  {line}")


if __name__ == "__main__":
    main()

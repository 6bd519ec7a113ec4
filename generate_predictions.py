"""
Generate the 13 number groups from the stored history and save the record.

Usage:
    python generate_predictions.py
    python generate_predictions.py --confirm
    python generate_predictions.py --seed 42
    python generate_predictions.py --confirm --seed 42
"""
import sys
import random
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from dlt_ai.core.db import init_db
from dlt_ai.core.tracker import DrawTracker, GenerationTracker
from dlt_ai.core.scoring import ScoreManager
from dlt_ai.pipelines.predict_and_track import generate_and_record, get_next_draw_date
from dlt_ai.config import TOTAL_GROUPS, logger


def parse_seed(argv):
    """Value after --seed anywhere on the command line, or None"""
    if '--seed' not in argv:
        return None
    position = argv.index('--seed')
    if position + 1 >= len(argv):
        raise ValueError("--seed needs a number")
    try:
        return int(argv[position + 1])
    except ValueError:
        raise ValueError(f"Invalid seed: {argv[position + 1]}")


def main():
    init_db()

    print("=" * 70)
    print("🎰 DLT AI - SUPER LOTTO 5+2 GENERATOR")
    print("=" * 70)

    draws = DrawTracker()
    generations = GenerationTracker()
    scores = ScoreManager()

    history = draws.list_draws()
    usable = [d for d in history if not d.blocked]
    print(f"\n📊 Stored draws: {len(history)} ({len(usable)} unblocked)")

    blocked = sorted(scores.get_blocked())
    if blocked:
        print(f"🚫 Blocked groups: {blocked}")

    confirmed = generations.get_confirmed()
    if confirmed:
        print("\n✅ Numbers already confirmed for the next draw:\n")
        print(confirmed)
        print("   Add the draw with update_draws.py to score them.")
        return

    try:
        seed = parse_seed(sys.argv)
    except ValueError as e:
        print(f"\n❌ {e}")
        return

    rng = None
    if seed is not None:
        rng = random.Random(seed)
        logger.info(f"Using seed {seed}")

    result = generate_and_record(rng=rng, draws=draws, generations=generations, scores=scores)
    if result is None:
        return
    if result.insufficient_data:
        print(f"\n⚠️  {result.display_text}")
        return

    print("\n" + "=" * 70)
    print(f"🎟️  {TOTAL_GROUPS} GROUPS FOR {get_next_draw_date()}")
    print("=" * 70)
    print(result.display_text)

    if '--confirm' in sys.argv:
        generations.confirm_numbers(result.display_text)
        print("✅ Numbers confirmed. They will be scored against the next draw.")

    print("⚠️  No group predicts the draw. Scores are points, not money.")
    print("=" * 70)


if __name__ == "__main__":
    main()

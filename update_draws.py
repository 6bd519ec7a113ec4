"""
Add draw results or import/export the history.
Adding a draw scores the confirmed numbers, if any.

Usage:
    python update_draws.py
    python update_draws.py --manual 2026-10-17 "01 19 22 25 27" "03 11"
    python update_draws.py --manual 2026-10-17 "01 19 22 25 27" "03 11" --issue 26118
    python update_draws.py --csv history.csv
    python update_draws.py --export history.csv
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from dlt_ai.core.db import init_db
from dlt_ai.core.tracker import DrawTracker, GenerationTracker, parse_front, parse_back
from dlt_ai.core.scoring import ScoreManager
from dlt_ai.features.features import import_history_csv, export_history_csv
from dlt_ai.pipelines.predict_and_track import record_draw_and_score
from dlt_ai.config import logger


def show_latest(draws):
    """Show latest draws in database"""
    history = draws.list_draws()
    print(f"\n📊 Total draws: {len(history)}")
    print(f"📅 Latest 5:")
    for d in reversed(history[-5:]):
        flag = " [blocked]" if d.blocked else ""
        print(f"   {d.issue_number} {d.draw_date}: {d.front_string()} + {d.back_string()}{flag}")


def add_draw(draws, issue, date_str, front_text, back_text):
    try:
        front = parse_front(front_text)
        back = parse_back(back_text)
        draw_id, result = record_draw_and_score(issue, date_str, front, back,
                                                draws, GenerationTracker(), ScoreManager())
    except ValueError as e:
        print(f"   ❌ {e}")
        return False

    if draw_id is None:
        print("   ❌ Could not save the draw")
        return False

    print(f"   ✅ Added: {issue} {date_str} {front} + {back}")
    if result is not None:
        print()
        print(result.message)
    return True


def manual_input(draws):
    """Interactive manual input"""
    print("\n✏️  Manual input mode")
    print("   (Type 'done' to finish)\n")

    added = 0
    while True:
        date_str = input("   Date (YYYY-MM-DD) or 'done': ").strip()
        if date_str.lower() == 'done':
            break

        suggested = draws.next_issue_number()
        issue = input(f"   Issue [{suggested}]: ").strip() or suggested
        front_text = input("   Front numbers (5, space separated): ").strip()
        back_text = input("   Back numbers (2, space separated): ").strip()

        if add_draw(draws, issue, date_str, front_text, back_text):
            added += 1

    return added


def import_csv(draws, path):
    records, errors = import_history_csv(path)
    for error in errors:
        print(f"   ⚠️  {error}")
    if not records:
        print("   ❌ No valid draws in file, history unchanged")
        return 0
    n = draws.replace_all(records)
    print(f"   ✅ Imported {n} draws ({len(errors)} rejected)")
    return n


def main():
    init_db()
    draws = DrawTracker()

    print("=" * 60)
    print("🎰 DLT AI - UPDATE DRAWS")
    print("=" * 60)

    if len(sys.argv) >= 5 and sys.argv[1] == '--manual':
        date_str, front_text, back_text = sys.argv[2], sys.argv[3], sys.argv[4]
        issue = draws.next_issue_number()
        if len(sys.argv) >= 7 and sys.argv[5] == '--issue':
            issue = sys.argv[6]
        add_draw(draws, issue, date_str, front_text, back_text)
        show_latest(draws)
        return

    if len(sys.argv) >= 3 and sys.argv[1] == '--csv':
        import_csv(draws, sys.argv[2])
        show_latest(draws)
        return

    if len(sys.argv) >= 3 and sys.argv[1] == '--export':
        n = export_history_csv(draws.list_draws(), sys.argv[2])
        print(f"   ✅ Exported {n} draws to {sys.argv[2]}")
        return

    # Interactive mode
    show_latest(draws)
    added = manual_input(draws)
    logger.info(f"Interactive session added {added} draws")
    show_latest(draws)

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()

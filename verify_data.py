"""
Verify stored draw data - range, duplicate and frequency checks
"""
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent))

from dlt_ai.core.db import init_db, get_session, Draw
from dlt_ai.core.math_engine import uniformity_check
from dlt_ai.core.tracker import DrawTracker
from dlt_ai.config import FRONT_RANGE, BACK_RANGE, FRONT_PICK, BACK_PICK
from collections import Counter

init_db()

# Raw rows, so invalid values written by other tools show up too
session = get_session()
rows = session.query(Draw).order_by(Draw.id).all()
session.close()

print("=" * 70)
print("📊 DATA QUALITY REPORT")
print("=" * 70)

print(f"\n📈 Total Draws: {len(rows)}")

if rows:
    blocked = sum(1 for r in rows if r.blocked)
    print(f"🚫 Blocked draws: {blocked}/{len(rows)}")

    issues = []
    for row in rows:
        label = f"{row.issue_number or '?'} ({row.draw_date or 'no date'})"
        for zone, nums, (lo, hi), pick in (("front", row.get_front(), FRONT_RANGE, FRONT_PICK),
                                           ("back", row.get_back(), BACK_RANGE, BACK_PICK)):
            for n in nums:
                if n is None or n < lo or n > hi:
                    issues.append(f"  ❌ {label}: {zone} number {n} out of range")
            if len(set(nums)) != pick:
                issues.append(f"  ❌ {label}: duplicate {zone} numbers {nums}")

    if issues:
        print(f"\n⚠️  DATA ISSUES ({len(issues)}):")
        for issue in issues[:20]:
            print(issue)
    else:
        print(f"   ✅ All numbers valid (front {FRONT_RANGE} x{FRONT_PICK}, "
              f"back {BACK_RANGE} x{BACK_PICK})")

    issue_counts = Counter(r.issue_number for r in rows if r.issue_number)
    duplicates = {i: c for i, c in issue_counts.items() if c > 1}
    if duplicates:
        print(f"\n⚠️  Duplicate issue numbers found:")
        for issue, count in duplicates.items():
            print(f"   {issue}: {count} entries")
    else:
        print(f"\n✅ No duplicate issue numbers")

    if not issues:
        history = [d for d in DrawTracker().list_draws() if not d.blocked]
        for zone in ("front", "back"):
            check = uniformity_check(history, zone)
            if check:
                print(f"\n📐 Chi-Square ({zone}):")
                print(f"   Chi²: {check['statistic']:.2f} (df={check['degrees_of_freedom']})")
                print(f"   P-value: {check['p_value']:.4f}")
                print(f"   Verdict: {'✅ uniform' if check['is_uniform'] else '⚠️ POSSIBLE DEVIATION'}")

else:
    print("❌ No draws found in database!")

print("=" * 70)

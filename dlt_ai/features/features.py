"""
History tables, CSV import/export and number statistics
"""
import pandas as pd
from dlt_ai.config import FRONT_MIN, FRONT_MAX, BACK_MIN, BACK_MAX, RECENT_WINDOW, logger
from dlt_ai.core.records import DrawRecord
from dlt_ai.core.stats import window_slice
from dlt_ai.core.tracker import normalize_date

FRONT_COLUMNS = [f"front{i}" for i in range(1, 6)]
BACK_COLUMNS = ["back1", "back2"]
CSV_COLUMNS = ["issue", "date"] + FRONT_COLUMNS + BACK_COLUMNS


def draws_to_dataframe(records):
    """One row per draw, oldest first, numbers in stored order"""
    rows = []
    for record in records:
        row = {"issue": record.issue_number, "date": record.draw_date}
        row.update(zip(FRONT_COLUMNS, record.front))
        row.update(zip(BACK_COLUMNS, record.back))
        row["blocked"] = record.blocked
        rows.append(row)
    return pd.DataFrame(rows, columns=CSV_COLUMNS + ["blocked"])


def export_history_csv(records, path):
    """Write the history with the standard header; blocked flags are not exported"""
    df = draws_to_dataframe(records)[CSV_COLUMNS]
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info(f"Exported {len(df)} draws to {path}")
    return len(df)


def import_history_csv(path):
    """
    Read draws from a CSV with the standard 9-column header.

    Returns (records, errors). Invalid rows are skipped and reported as
    "Line N: reason" using the file's line numbers (header is line 1).
    """
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        logger.error(f"Cannot read {path}: {e}")
        return [], [f"Cannot read file: {e}"]

    df.columns = [str(c).strip().lower() for c in df.columns]
    if list(df.columns) != CSV_COLUMNS:
        msg = f"Expected columns {','.join(CSV_COLUMNS)}, got {','.join(df.columns)}"
        logger.error(msg)
        return [], [msg]

    records, errors = [], []
    for offset, row in enumerate(df.itertuples(index=False)):
        line = offset + 2
        values = row._asdict()
        try:
            front = [int(values[c]) for c in FRONT_COLUMNS]
            back = [int(values[c]) for c in BACK_COLUMNS]
            record = DrawRecord.validated(values["issue"].strip(),
                                          normalize_date(values["date"]), front, back)
        except ValueError as e:
            errors.append(f"Line {line}: {e}")
            continue
        records.append(record)

    logger.info(f"Imported {len(records)} draws from {path} ({len(errors)} rejected)")
    return records, errors


def window_frequency_table(records, window=RECENT_WINDOW):
    """
    Appearance counts over the last `window` unblocked draws, most
    frequent first. Columns: number, zone, count.
    """
    recent = window_slice([r for r in records if not r.blocked], window)
    rows = []
    for zone, lo, hi in (("front", FRONT_MIN, FRONT_MAX), ("back", BACK_MIN, BACK_MAX)):
        counts = pd.Series(
            [n for r in recent for n in (r.front if zone == "front" else r.back)],
            dtype="int64"
        ).value_counts()
        for number in range(lo, hi + 1):
            rows.append({"number": number, "zone": zone, "count": int(counts.get(number, 0))})

    df = pd.DataFrame(rows, columns=["number", "zone", "count"])
    return df.sort_values(["zone", "count", "number"], ascending=[False, False, True]) \
             .reset_index(drop=True)


def number_summary(records, window=RECENT_WINDOW):
    """
    Per-number behaviour over the unblocked history.
    Useful for display purposes - NOT for prediction.

    Columns: number, zone, total, recent, gap (draws since last seen,
    the history length when never seen).
    """
    history = [r for r in records if not r.blocked]
    start = max(0, len(history) - window)
    rows = []
    for zone, lo, hi in (("front", FRONT_MIN, FRONT_MAX), ("back", BACK_MIN, BACK_MAX)):
        for number in range(lo, hi + 1):
            hits = [i for i, r in enumerate(history)
                    if number in (r.front if zone == "front" else r.back)]
            rows.append({
                "number": number,
                "zone": zone,
                "total": len(hits),
                "recent": sum(1 for i in hits if i >= start),
                "gap": len(history) - 1 - hits[-1] if hits else len(history),
            })
    return pd.DataFrame(rows, columns=["number", "zone", "total", "recent", "gap"])

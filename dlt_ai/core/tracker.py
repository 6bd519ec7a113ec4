"""
Draw history and generation record tracking
"""
from datetime import datetime
from dateutil import parser as date_parser
from dlt_ai.core.db import get_session, Draw, GenerationRecord, ConfirmedNumbers
from dlt_ai.core.records import DrawRecord, validate_numbers
from dlt_ai.config import (
    FRONT_MIN, FRONT_MAX, FRONT_PICK, BACK_MIN, BACK_MAX, BACK_PICK,
    MAX_GENERATION_RECORDS, logger
)


def normalize_date(value):
    """Any reasonable date string -> YYYY-MM-DD ('' stays '')"""
    if value is None:
        return ""
    value = str(value).strip()
    if not value:
        return ""
    try:
        return date_parser.parse(value).strftime("%Y-%m-%d")
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date {value!r}: {e}")


def parse_number_text(text, count, lo, hi, zone="front"):
    """
    "01 19 22 25 27" -> [1, 19, 22, 25, 27]

    Numbers are whitespace separated; raises ValueError on a wrong count,
    non-numeric input, duplicates or numbers out of range.
    """
    parts = (text or "").split()
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        raise ValueError(f"{zone} must contain only numbers: {text!r}")
    return sorted(validate_numbers(numbers, count, lo, hi, zone))


def _to_record(row):
    return DrawRecord(row.issue_number, row.draw_date, row.get_front(), row.get_back(),
                      blocked=row.blocked, draw_id=row.id)


def _fill_row(row, record):
    row.issue_number = record.issue_number
    row.draw_date = record.draw_date
    row.f1, row.f2, row.f3, row.f4, row.f5 = record.front
    row.b1, row.b2 = record.back
    row.blocked = record.blocked


class DrawTracker:
    """Stored draw history, oldest first"""

    def add_draw(self, issue_number, draw_date, front, back, blocked=False):
        """Validate and store a draw. Returns the new draw id, None on a db error."""
        record = DrawRecord.validated(issue_number, normalize_date(draw_date),
                                      front, back, blocked)
        session = get_session()
        try:
            row = Draw()
            _fill_row(row, record)
            session.add(row)
            session.commit()
            logger.info(f"Saved draw {record.issue_number}: "
                        f"{record.front_string()} + {record.back_string()}")
            return row.id
        except Exception as e:
            session.rollback()
            logger.error(f"Error saving draw {issue_number}: {e}")
            return None
        finally:
            session.close()

    def list_draws(self):
        session = get_session()
        try:
            return [_to_record(row) for row in session.query(Draw).order_by(Draw.id).all()]
        except Exception as e:
            logger.error(f"Error loading draws: {e}")
            return []
        finally:
            session.close()

    def recent_draws(self, n=10):
        draws = self.list_draws()
        return draws[-n:] if n else draws

    def get_draw(self, draw_id):
        session = get_session()
        try:
            row = session.query(Draw).filter_by(id=draw_id).first()
            return _to_record(row) if row else None
        finally:
            session.close()

    def set_blocked(self, draw_id, blocked):
        session = get_session()
        try:
            row = session.query(Draw).filter_by(id=draw_id).first()
            if not row:
                logger.error(f"Draw {draw_id} not found")
                return False
            row.blocked = bool(blocked)
            session.commit()
            logger.info(f"Draw {row.issue_number} {'blocked' if blocked else 'unblocked'}")
            return True
        except Exception as e:
            session.rollback()
            logger.error(f"Error updating draw {draw_id}: {e}")
            return False
        finally:
            session.close()

    def toggle_blocked(self, draw_id):
        record = self.get_draw(draw_id)
        if record is None:
            logger.error(f"Draw {draw_id} not found")
            return None
        if not self.set_blocked(draw_id, not record.blocked):
            return None
        return not record.blocked

    def update_draw(self, draw_id, issue_number, draw_date, front, back):
        """Replace a draw's numbers, keeping its position and blocked flag"""
        session = get_session()
        try:
            row = session.query(Draw).filter_by(id=draw_id).first()
            if not row:
                logger.error(f"Draw {draw_id} not found")
                return False
            record = DrawRecord.validated(issue_number, normalize_date(draw_date),
                                          front, back, row.blocked)
            _fill_row(row, record)
            session.commit()
            logger.info(f"Updated draw {draw_id} ({record.issue_number})")
            return True
        except ValueError:
            session.rollback()
            raise
        except Exception as e:
            session.rollback()
            logger.error(f"Error updating draw {draw_id}: {e}")
            return False
        finally:
            session.close()

    def delete_draw(self, draw_id):
        session = get_session()
        try:
            deleted = session.query(Draw).filter_by(id=draw_id).delete()
            session.commit()
            if deleted:
                logger.info(f"Deleted draw {draw_id}")
            return bool(deleted)
        except Exception as e:
            session.rollback()
            logger.error(f"Error deleting draw {draw_id}: {e}")
            return False
        finally:
            session.close()

    def replace_all(self, records):
        """Swap the whole history for `records` (CSV import)"""
        session = get_session()
        try:
            session.query(Draw).delete()
            for record in records:
                row = Draw()
                _fill_row(row, record)
                session.add(row)
            session.commit()
            logger.info(f"Replaced history with {len(records)} draws")
            return len(records)
        except Exception as e:
            session.rollback()
            logger.error(f"Error replacing history: {e}")
            return 0
        finally:
            session.close()

    def next_issue_number(self, today=None):
        """
        Next issue in the current year: two-digit year plus a 3-digit
        sequence, one past the highest sequence stored for that year.
        """
        year = (today or datetime.now()).strftime("%y")
        highest = 0
        for record in self.list_draws():
            issue = record.issue_number
            if len(issue) >= 5 and issue.startswith(year) and issue[2:].isdigit():
                highest = max(highest, int(issue[2:]))
        return f"{year}{highest + 1:03d}"


class GenerationTracker:
    """Saved generation texts and the single confirmed selection"""

    def save_generation(self, display_text):
        session = get_session()
        try:
            record = GenerationRecord(
                created_at=datetime.now().isoformat(timespec="seconds"),
                display_text=display_text
            )
            session.add(record)
            session.flush()

            stale = (session.query(GenerationRecord)
                     .order_by(GenerationRecord.id.desc())
                     .offset(MAX_GENERATION_RECORDS).all())
            for old in stale:
                session.delete(old)

            session.commit()
            logger.info(f"Saved generation record {record.id}"
                        + (f", dropped {len(stale)} old" if stale else ""))
            return record.id
        except Exception as e:
            session.rollback()
            logger.error(f"Error saving generation record: {e}")
            return None
        finally:
            session.close()

    def list_generations(self):
        """(created_at, display_text) pairs, oldest first"""
        session = get_session()
        try:
            rows = session.query(GenerationRecord).order_by(GenerationRecord.id).all()
            return [(r.created_at, r.display_text) for r in rows]
        except Exception as e:
            logger.error(f"Error loading generation records: {e}")
            return []
        finally:
            session.close()

    def confirm_numbers(self, display_text):
        session = get_session()
        try:
            session.query(ConfirmedNumbers).delete()
            session.add(ConfirmedNumbers(
                id=1,
                confirmed_at=datetime.now().isoformat(timespec="seconds"),
                display_text=display_text
            ))
            session.commit()
            logger.info("Numbers confirmed")
            return True
        except Exception as e:
            session.rollback()
            logger.error(f"Error confirming numbers: {e}")
            return False
        finally:
            session.close()

    def cancel_confirmation(self):
        session = get_session()
        try:
            deleted = session.query(ConfirmedNumbers).delete()
            session.commit()
            if deleted:
                logger.info("Confirmation cancelled")
            return bool(deleted)
        except Exception as e:
            session.rollback()
            logger.error(f"Error cancelling confirmation: {e}")
            return False
        finally:
            session.close()

    def get_confirmed(self):
        """Confirmed display text, or None"""
        session = get_session()
        try:
            row = session.query(ConfirmedNumbers).first()
            return row.display_text if row else None
        finally:
            session.close()

    def has_confirmed(self):
        return self.get_confirmed() is not None


def parse_front(text):
    return parse_number_text(text, FRONT_PICK, FRONT_MIN, FRONT_MAX, "front")


def parse_back(text):
    return parse_number_text(text, BACK_PICK, BACK_MIN, BACK_MAX, "back")

"""
Per-group score keeping - matches confirmed groups against a new draw
"""
from datetime import datetime
from dlt_ai.core.db import get_session, GroupScore, PrizeRecord, BlockedGroup
from dlt_ai.core.formatter import parse_generation
from dlt_ai.core.math_engine import (
    count_matches, determine_prize_level, score_change, prize_text
)
from dlt_ai.config import TOTAL_GROUPS, logger


class WinningResult:
    """Outcome of scoring one confirmed selection"""

    def __init__(self, success, message, total_change, outcomes=None):
        self.success = success
        self.message = message
        self.total_change = total_change
        self.outcomes = outcomes or []

    def __repr__(self):
        return (f"WinningResult(success={self.success}, total_change={self.total_change}, "
                f"{len(self.outcomes)} groups)")


def _signed(value):
    return f"+{value}" if value > 0 else str(value)


class ScoreManager:
    """Group scores, best tiers and prize history stored in the database"""

    def __init__(self, total_groups=TOTAL_GROUPS):
        self.total_groups = total_groups

    def _ensure_rows(self, session):
        existing = {row.group_num for row in session.query(GroupScore).all()}
        for group_num in range(1, self.total_groups + 1):
            if group_num not in existing:
                session.add(GroupScore(group_num=group_num, score=0, max_prize_count=0))
        session.flush()

    # ============================================
    # SCORES
    # ============================================
    def get_scores(self):
        """{group: score} for every group"""
        session = get_session()
        try:
            scores = {i: 0 for i in range(1, self.total_groups + 1)}
            for row in session.query(GroupScore).all():
                scores[row.group_num] = row.score
            return scores
        finally:
            session.close()

    def get_score(self, group_num):
        return self.get_scores().get(group_num, 0)

    def get_total_score(self):
        return sum(self.get_scores().values())

    def get_best_prize(self, group_num):
        """(best tier, times hit) or (None, 0) when the group never won"""
        session = get_session()
        try:
            row = session.query(GroupScore).filter_by(group_num=group_num).first()
            if not row or not row.max_prize:
                return None, 0
            return row.max_prize, row.max_prize_count
        finally:
            session.close()

    def get_prize_history(self, group_num):
        """[(issue, tier), ...] oldest first"""
        session = get_session()
        try:
            rows = (session.query(PrizeRecord)
                    .filter_by(group_num=group_num)
                    .order_by(PrizeRecord.id).all())
            return [(r.issue_number, r.prize_level) for r in rows]
        finally:
            session.close()

    def clear_all_scores(self):
        """Reset scores, best tiers and histories, and unblock every group"""
        session = get_session()
        try:
            session.query(PrizeRecord).delete()
            session.query(GroupScore).delete()
            session.query(BlockedGroup).delete()
            self._ensure_rows(session)
            session.commit()
            logger.info("All group scores cleared")
            return True
        except Exception as e:
            session.rollback()
            logger.error(f"Error clearing scores: {e}")
            return False
        finally:
            session.close()

    # ============================================
    # BLOCKED GROUPS
    # ============================================
    def get_blocked(self):
        session = get_session()
        try:
            return {row.group_num for row in session.query(BlockedGroup).all()}
        finally:
            session.close()

    def is_blocked(self, group_num):
        return group_num in self.get_blocked()

    def block(self, group_num):
        return self._set_blocked(group_num, True)

    def unblock(self, group_num):
        return self._set_blocked(group_num, False)

    def _set_blocked(self, group_num, blocked):
        if not 1 <= group_num <= self.total_groups:
            raise ValueError(f"Group must be 1-{self.total_groups}, got {group_num}")
        session = get_session()
        try:
            row = session.query(BlockedGroup).filter_by(group_num=group_num).first()
            if blocked and not row:
                session.add(BlockedGroup(group_num=group_num))
            elif not blocked and row:
                session.delete(row)
            session.commit()
            logger.info(f"Group {group_num} {'blocked' if blocked else 'unblocked'}")
            return True
        except Exception as e:
            session.rollback()
            logger.error(f"Error updating blocked group {group_num}: {e}")
            return False
        finally:
            session.close()

    # ============================================
    # WINNING CALCULATION
    # ============================================
    def calculate_winning_scores(self, confirmed_text, new_draw):
        """
        Score every unblocked group of the confirmed text against new_draw.

        Returns None for an empty text, a failed WinningResult when the
        text does not hold all groups.
        """
        if not confirmed_text:
            return None

        groups = parse_generation(confirmed_text, self.total_groups)
        if len(groups) != self.total_groups:
            msg = (f"Confirmed numbers are malformed: parsed {len(groups)} groups, "
                   f"expected {self.total_groups}")
            logger.error(msg)
            return WinningResult(False, msg, 0)

        blocked = self.get_blocked()
        outcomes = []
        lines = ["Winning results:", ""]
        total_change = 0

        session = get_session()
        try:
            self._ensure_rows(session)
            now = datetime.now().isoformat(timespec="seconds")

            for group in groups:
                if group.index in blocked or group.blocked or group.is_empty():
                    continue

                front_hits, back_hits = count_matches(group.front, group.back,
                                                      new_draw.front, new_draw.back)
                level = determine_prize_level(front_hits, back_hits)
                change = score_change(level)

                row = session.query(GroupScore).filter_by(group_num=group.index).first()
                row.score += change
                total_change += change

                if level > 0:
                    if row.max_prize is None or level < row.max_prize:
                        row.max_prize = level
                        row.max_prize_count = 1
                    elif level == row.max_prize:
                        row.max_prize_count += 1
                    session.add(PrizeRecord(group_num=group.index,
                                            issue_number=new_draw.issue_number,
                                            prize_level=level, recorded_at=now))

                outcomes.append({
                    'group': group.index,
                    'front_hits': front_hits,
                    'back_hits': back_hits,
                    'prize_level': level,
                    'score_change': change,
                })
                lines.append(f"Group {group.index}: {prize_text(level)} ({_signed(change)} pts)")

            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Error saving scores: {e}")
            return WinningResult(False, f"Could not save scores: {e}", 0)
        finally:
            session.close()

        lines.append("")
        lines.append(f"Total this draw: {'+' if total_change >= 0 else ''}{total_change} pts")
        logger.info(f"Scored draw {new_draw.issue_number}: {_signed(total_change)} pts "
                    f"over {len(outcomes)} groups")
        return WinningResult(True, "\n".join(lines), total_change, outcomes)

    def get_all_scores_info(self):
        scores = self.get_scores()
        lines = [f"Total score: {sum(scores.values())}", "", "Group scores:", ""]
        for group_num in range(1, self.total_groups + 1):
            best, count = self.get_best_prize(group_num)
            best_text = prize_text(best) if best else "none"
            count_text = f"({count} times)" if count > 0 else ""
            lines.append(f"Group {group_num}: {scores[group_num]} pts | best: {best_text}{count_text}")
        return "\n".join(lines) + "\n"

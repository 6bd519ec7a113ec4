"""
Plain data records shared by the engine, scoring and persistence layers
"""
from dlt_ai.config import (
    FRONT_MIN, FRONT_MAX, FRONT_PICK, BACK_MIN, BACK_MAX, BACK_PICK
)


def validate_numbers(numbers, count, lo, hi, zone="front"):
    """
    Check a zone's numbers: exact count, distinct, inside [lo, hi].
    Returns the numbers as a tuple in the given order.
    """
    numbers = tuple(int(n) for n in numbers)
    if len(numbers) != count:
        raise ValueError(f"{zone} needs {count} numbers, got {len(numbers)}")
    if len(set(numbers)) != count:
        raise ValueError(f"{zone} numbers must be distinct: {list(numbers)}")
    for n in numbers:
        if n < lo or n > hi:
            raise ValueError(f"{zone} number {n} outside {lo}-{hi}")
    return numbers


class DrawRecord:
    """
    One historical draw.

    `front` and `back` keep the order the numbers were stored in; the
    positional model depends on it. Only `blocked` may change after creation.
    """

    __slots__ = ("issue_number", "draw_date", "front", "back", "blocked", "draw_id")

    def __init__(self, issue_number, draw_date, front, back, blocked=False, draw_id=None):
        self.issue_number = issue_number or ""
        self.draw_date = draw_date or ""
        self.front = tuple(front)
        self.back = tuple(back)
        self.blocked = bool(blocked)
        self.draw_id = draw_id

    @classmethod
    def validated(cls, issue_number, draw_date, front, back, blocked=False):
        front = validate_numbers(front, FRONT_PICK, FRONT_MIN, FRONT_MAX, "front")
        back = validate_numbers(back, BACK_PICK, BACK_MIN, BACK_MAX, "back")
        return cls(issue_number, draw_date, front, back, blocked)

    def front_string(self):
        return " ".join(f"{n:02d}" for n in self.front)

    def back_string(self):
        return " ".join(f"{n:02d}" for n in self.back)

    def __eq__(self, other):
        if not isinstance(other, DrawRecord):
            return NotImplemented
        return (self.issue_number, self.draw_date, self.front, self.back, self.blocked) == \
            (other.issue_number, other.draw_date, other.front, other.back, other.blocked)

    def __repr__(self):
        flag = " blocked" if self.blocked else ""
        return (f"DrawRecord({self.issue_number!r}, {self.draw_date!r}, "
                f"front={list(self.front)}, back={list(self.back)}{flag})")


class GroupResult:
    """Front/back numbers produced by one group; both empty when blocked"""

    __slots__ = ("index", "front", "back", "blocked")

    def __init__(self, index, front=None, back=None, blocked=False):
        self.index = index
        self.front = sorted(front) if front else []
        self.back = sorted(back) if back else []
        self.blocked = blocked

    @classmethod
    def blocked_group(cls, index):
        return cls(index, blocked=True)

    def is_empty(self):
        return not self.front and not self.back

    def __eq__(self, other):
        if not isinstance(other, GroupResult):
            return NotImplemented
        return (self.index, self.front, self.back, self.blocked) == \
            (other.index, other.front, other.back, other.blocked)

    def __repr__(self):
        if self.blocked:
            return f"GroupResult({self.index}, blocked)"
        return f"GroupResult({self.index}, front={self.front}, back={self.back})"


class GenerationResult:
    """
    Output of one engine call: display text plus the index-aligned groups.
    `insufficient_data` marks the sentinel result returned for empty history.
    """

    def __init__(self, display_text, groups, insufficient_data=False):
        self.display_text = display_text
        self.groups = list(groups)
        self.insufficient_data = insufficient_data

    @property
    def front_numbers(self):
        return [g.front for g in self.groups]

    @property
    def back_numbers(self):
        return [g.back for g in self.groups]

    def group(self, index):
        """Group by its 1-based index"""
        return self.groups[index - 1]

    def __repr__(self):
        return f"GenerationResult({len(self.groups)} groups, insufficient_data={self.insufficient_data})"

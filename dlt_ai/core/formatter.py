"""
Display text for a generation run.

The same text is stored when numbers are confirmed and parsed back at
scoring time, so the line grammar below is a stable contract (version 1):

    Group {i}: front[a, b, c, d, e] back[f, g]
    Group {i}: [blocked] no numbers generated

One line per group, newline terminated, groups in index order.
"""
import re

from dlt_ai.config import (
    TOTAL_GROUPS, FRONT_MIN, FRONT_MAX, FRONT_PICK, BACK_MIN, BACK_MAX, BACK_PICK, logger
)
from dlt_ai.core.records import GroupResult, validate_numbers

FORMAT_VERSION = 1

BLOCKED_MARKER = "[blocked]"

_GROUP_LINE = re.compile(r"^Group\s+(\d+):\s*front\[([^\]]*)\]\s*back\[([^\]]*)\]")
_BLOCKED_LINE = re.compile(r"^Group\s+(\d+):\s*\[blocked\]")


def render_line(group):
    if group.blocked:
        return f"Group {group.index}: {BLOCKED_MARKER} no numbers generated"
    return f"Group {group.index}: front{sorted(group.front)} back{sorted(group.back)}"


def render_generation(groups):
    return "".join(render_line(g) + "\n" for g in groups)


def _parse_numbers(text):
    text = text.strip()
    if not text:
        return []
    return [int(part) for part in text.split(",")]


def parse_generation(text, total_groups=TOTAL_GROUPS):
    """
    Recover GroupResults from display text.

    Lines that match neither form are skipped, and so are group lines
    without exactly 5 distinct front (1-35) and 2 distinct back (1-12)
    numbers. The result is ordered by group index; blocked lines come back
    as blocked (empty) groups.
    """
    groups = {}
    for line in (text or "").splitlines():
        line = line.strip()
        if not line:
            continue

        match = _GROUP_LINE.match(line)
        if match:
            try:
                index = int(match.group(1))
                front = validate_numbers(_parse_numbers(match.group(2)),
                                         FRONT_PICK, FRONT_MIN, FRONT_MAX, "front")
                back = validate_numbers(_parse_numbers(match.group(3)),
                                        BACK_PICK, BACK_MIN, BACK_MAX, "back")
            except ValueError as e:
                logger.debug(f"Skipping unparsable line {line!r}: {e}")
                continue
            groups[index] = GroupResult(index, front, back)
            continue

        match = _BLOCKED_LINE.match(line)
        if match:
            index = int(match.group(1))
            groups[index] = GroupResult.blocked_group(index)
            continue

        logger.debug(f"Skipping line {line!r}")

    return [groups[i] for i in sorted(groups) if 1 <= i <= total_groups]

"""Checklist hints: typed metadata with per-kind parsing and comparison.

Each hint kind is its own frozen dataclass carrying a natively typed value.
Comparators take the stored hint and an operand of the type the kind
expects; an operand of any other type never compares equal, less or
greater.

The ``due`` comparators are relative: the stored value is a point in time,
the operand a number of whole days from now, measured when the comparison
runs.
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo
from enum import StrEnum
from typing import Any, ClassVar, TypeGuard, assert_never

from rat_graph.exceptions import ChecklistSyntaxError, HintValueError, UnknownHintError

_DATE_RE = re.compile(r"(\d{1,2})\.(\d{1,2})(?:\.(\d{4}))?\.?")
_DURATION_RE = re.compile(r"(?:(?:\d+(?:\.\d*)?|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+")
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_SECONDS_PER_DAY = 24 * 60 * 60


class HintKind(StrEnum):
    DUE = "due"
    SIZE = "size"
    PRIORITY = "priority"
    TAGS = "tags"
    SRC = "src"


def _is_int(value: object) -> TypeGuard[int]:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_date(raw: str, tz: tzinfo = UTC) -> datetime:
    """Parse day.month.year, day.month.year. or day.month (current year).

    Args:
        raw: The date literal.
        tz: Time zone the date is written in.

    Returns:
        Midnight of that day in tz.
    """
    m = _DATE_RE.fullmatch(raw.strip())
    if m is None:
        msg = f"failed to parse {raw!r} as time in any format"
        raise HintValueError(msg)

    day, month, year = m.groups()
    year_value = int(year) if year else datetime.now(tz).year
    try:
        return datetime(year_value, int(month), int(day), tzinfo=tz)
    except ValueError as e:
        msg = f"failed to parse {raw!r} as time: {e}"
        raise HintValueError(msg) from e


def parse_duration(raw: str) -> timedelta:
    """Parse a duration literal such as 1h30m, 45m, 1.5h or 250ms."""
    text = raw.strip()
    sign = 1
    if text and text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not _DURATION_RE.fullmatch(text):
        msg = f"failed to parse {raw!r} as duration"
        raise HintValueError(msg)

    seconds = sum(float(num) * _UNIT_SECONDS[unit] for num, unit in _DURATION_PART_RE.findall(text))
    try:
        return timedelta(seconds=sign * seconds)
    except OverflowError as e:
        msg = f"failed to parse {raw!r} as duration: out of range"
        raise HintValueError(msg) from e


def format_duration(value: timedelta) -> str:
    total = int(value.total_seconds())
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)

    out = ""
    if hours:
        out += f"{hours}h"
    if minutes:
        out += f"{minutes}m"
    if seconds:
        out += f"{seconds}s"
    return sign + out if out else "0s"


def _parse_int(raw: str, what: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as e:
        msg = f"failed to parse {what} {raw!r} as integer"
        raise HintValueError(msg) from e


@dataclass(frozen=True)
class DueHint:
    """Due date. Compared against a whole-day offset from now."""

    value: datetime
    kind: ClassVar[HintKind] = HintKind.DUE

    def days_until(self, now: datetime | None = None) -> int:
        """Whole days from now until the due date, truncated toward zero."""
        now = now or datetime.now(self.value.tzinfo or UTC)
        return int((self.value - now).total_seconds() / _SECONDS_PER_DAY)

    def format(self) -> str:
        return self.value.strftime("%d.%m.%Y")

    def json_value(self) -> Any:
        return self.format()

    def equal(self, operand: object) -> bool:
        return _is_int(operand) and self.days_until() == operand

    def less(self, operand: object) -> bool:
        return _is_int(operand) and self.days_until() < operand

    def greater(self, operand: object) -> bool:
        return _is_int(operand) and self.days_until() > operand


@dataclass(frozen=True)
class SizeHint:
    """Estimated effort as a duration."""

    value: timedelta
    kind: ClassVar[HintKind] = HintKind.SIZE

    def format(self) -> str:
        return format_duration(self.value)

    def json_value(self) -> Any:
        return self.format()

    def equal(self, operand: object) -> bool:
        return isinstance(operand, timedelta) and self.value == operand

    def less(self, operand: object) -> bool:
        return isinstance(operand, timedelta) and self.value < operand

    def greater(self, operand: object) -> bool:
        return isinstance(operand, timedelta) and self.value > operand


@dataclass(frozen=True)
class PriorityHint:
    value: int
    kind: ClassVar[HintKind] = HintKind.PRIORITY

    def format(self) -> str:
        return str(self.value)

    def json_value(self) -> Any:
        return self.value

    def equal(self, operand: object) -> bool:
        return _is_int(operand) and self.value == operand

    def less(self, operand: object) -> bool:
        return _is_int(operand) and self.value < operand

    def greater(self, operand: object) -> bool:
        return _is_int(operand) and self.value > operand


@dataclass(frozen=True)
class TagsHint:
    """Raw comma separated tags. Equal when the operand is one of them."""

    value: str
    kind: ClassVar[HintKind] = HintKind.TAGS

    @property
    def tags(self) -> list[str]:
        return [tag.strip() for tag in self.value.split(",") if tag.strip()]

    def format(self) -> str:
        return self.value

    def json_value(self) -> Any:
        return self.value

    def equal(self, operand: object) -> bool:
        return isinstance(operand, str) and operand in self.tags

    def less(self, operand: object) -> bool:
        return False

    def greater(self, operand: object) -> bool:
        return False


@dataclass(frozen=True)
class SrcHint:
    """Path of the node a checklist was collected from."""

    value: str
    kind: ClassVar[HintKind] = HintKind.SRC

    def format(self) -> str:
        return self.value

    def json_value(self) -> Any:
        return self.value

    def equal(self, operand: object) -> bool:
        return False

    def less(self, operand: object) -> bool:
        return False

    def greater(self, operand: object) -> bool:
        return False


Hint = DueHint | SizeHint | PriorityHint | TagsHint | SrcHint


def parse_hint_kind(raw: str) -> HintKind:
    """Return the hint kind named by raw, raise UnknownHintError otherwise."""
    key = raw.strip()
    try:
        return HintKind(key)
    except ValueError as e:
        raise UnknownHintError(key) from e


def parse_hint_value(kind: HintKind, raw: str, *, tz: tzinfo = UTC) -> Hint:
    """Parse the value of a hint of the given kind."""
    if kind is HintKind.DUE:
        return DueHint(parse_date(raw, tz))
    if kind is HintKind.SIZE:
        return SizeHint(parse_duration(raw))
    if kind is HintKind.PRIORITY:
        return PriorityHint(_parse_int(raw, "priority"))
    if kind is HintKind.TAGS:
        return TagsHint(raw.strip())
    if kind is HintKind.SRC:
        return SrcHint(raw.strip())
    assert_never(kind)


def parse_hint(line: str, *, tz: tzinfo = UTC) -> Hint:
    """Parse a key=value hint line.

    Raises:
        ChecklistSyntaxError: The line is not a single key=value pair.
        UnknownHintError: The key is not a hint kind.
        HintValueError: The value does not parse for the kind.
    """
    parts = line.split("=")
    if len(parts) != 2:
        msg = f"invalid hint - {line!r}"
        raise ChecklistSyntaxError(msg)

    kind = parse_hint_kind(parts[0])
    try:
        return parse_hint_value(kind, parts[1], tz=tz)
    except HintValueError as e:
        msg = f"failed to parse hint value {parts[1].strip()!r}: {e}"
        raise HintValueError(msg) from e


def parse_operand(kind: HintKind, raw: str) -> object:
    """Parse a filter operand for the given kind.

    ``due`` operands are a whole-day offset from now, everything else has
    the same type as the stored hint value.
    """
    if kind is HintKind.DUE:
        return _parse_int(raw, "due offset")
    if kind is HintKind.SIZE:
        return parse_duration(raw)
    if kind is HintKind.PRIORITY:
        return _parse_int(raw, "priority")
    if kind is HintKind.TAGS or kind is HintKind.SRC:
        return raw.strip()
    assert_never(kind)


def hint_to_dict(hint: Hint) -> dict[str, Any]:
    return {"type": str(hint.kind), "value": hint.json_value()}

"""Tests for hint parsing, formatting and comparison."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from rat_graph.core.todo.hint import (
    DueHint,
    HintKind,
    PriorityHint,
    SizeHint,
    SrcHint,
    TagsHint,
    format_duration,
    hint_to_dict,
    parse_date,
    parse_duration,
    parse_hint,
    parse_hint_kind,
    parse_operand,
)
from rat_graph.exceptions import ChecklistSyntaxError, HintValueError, UnknownHintError


@pytest.mark.parametrize("raw", ["24.12.2024", "24.12.2024.", "4.1.2024", "04.01.2024."])
def test_parse_date_accepts_full_forms(raw: str) -> None:
    parsed = parse_date(raw)
    assert parsed.year == 2024
    assert (parsed.hour, parsed.minute) == (0, 0)
    assert parsed.tzinfo is UTC


def test_parse_date_short_form_uses_current_year() -> None:
    tz = ZoneInfo("Europe/Vilnius")
    parsed = parse_date("3.7", tz)

    assert (parsed.day, parsed.month, parsed.year) == (3, 7, datetime.now(tz).year)
    assert parsed.tzinfo is tz


@pytest.mark.parametrize("raw", ["tomorrow", "2024-12-24", "32.1.2024", "1.13.2024", ""])
def test_parse_date_rejects_other_forms(raw: str) -> None:
    with pytest.raises(HintValueError):
        parse_date(raw)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("45m", timedelta(minutes=45)),
        ("90s", timedelta(seconds=90)),
        ("1.5h", timedelta(hours=1, minutes=30)),
        ("250ms", timedelta(milliseconds=250)),
        ("0", timedelta(0)),
        ("-15m", timedelta(minutes=-15)),
    ],
)
def test_parse_duration(raw: str, expected: timedelta) -> None:
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "10", "1x", "h", "1h 30m"])
def test_parse_duration_rejects_malformed(raw: str) -> None:
    with pytest.raises(HintValueError):
        parse_duration(raw)


def test_parse_duration_out_of_range() -> None:
    with pytest.raises(HintValueError, match="out of range"):
        parse_duration("99999999999h")


def test_format_duration_omits_zero_components() -> None:
    assert format_duration(timedelta(hours=1, minutes=30)) == "1h30m"
    assert format_duration(timedelta(hours=2, seconds=5)) == "2h5s"
    assert format_duration(timedelta(0)) == "0s"


def test_parse_hint_priority() -> None:
    assert parse_hint("priority=2") == PriorityHint(2)


def test_parse_hint_strips_whitespace() -> None:
    assert parse_hint(" tags = home, work ") == TagsHint("home, work")


def test_parse_hint_unknown_key() -> None:
    with pytest.raises(UnknownHintError) as exc_info:
        parse_hint("color=red")
    assert exc_info.value.key == "color"


def test_parse_hint_needs_exactly_one_equals_sign() -> None:
    with pytest.raises(ChecklistSyntaxError):
        parse_hint("tags=a=b")


def test_parse_hint_bad_value() -> None:
    with pytest.raises(HintValueError):
        parse_hint("priority=high")


def test_parse_hint_kind_is_strict() -> None:
    assert parse_hint_kind("due") is HintKind.DUE
    with pytest.raises(UnknownHintError):
        parse_hint_kind("Due")


def test_due_compares_against_day_offset_from_now() -> None:
    hint = DueHint(datetime.now(UTC) + timedelta(days=10, hours=12))

    assert hint.equal(10)
    assert hint.less(11)
    assert hint.greater(9)
    assert not hint.less(10)


def test_due_in_the_past_has_negative_offset() -> None:
    hint = DueHint(datetime.now(UTC) - timedelta(days=3, hours=12))

    assert hint.equal(-3)
    assert hint.less(0)


def test_mismatched_operand_types_never_compare() -> None:
    due = DueHint(datetime.now(UTC))
    priority = PriorityHint(1)

    for hint in (due, priority):
        for operand in ("1", 1.0, True, timedelta(days=1), None):
            assert not hint.equal(operand)
            assert not hint.less(operand)
            assert not hint.greater(operand)


def test_size_compares_durations() -> None:
    hint = SizeHint(timedelta(minutes=45))

    assert hint.less(timedelta(hours=1))
    assert hint.greater(timedelta(minutes=30))
    assert hint.equal(timedelta(minutes=45))
    assert not hint.equal(45)


def test_tags_equal_matches_any_tag() -> None:
    hint = TagsHint("home, work")

    assert hint.equal("work")
    assert not hint.equal("wor")
    assert not hint.less("zzz")
    assert not hint.greater("")


def test_src_never_compares() -> None:
    hint = SrcHint("projects/rat")

    assert not hint.equal("projects/rat")
    assert not hint.less("z")
    assert not hint.greater("")


def test_parse_operand_by_kind() -> None:
    assert parse_operand(HintKind.DUE, "7") == 7
    assert parse_operand(HintKind.SIZE, "1h") == timedelta(hours=1)
    assert parse_operand(HintKind.PRIORITY, " 2 ") == 2
    assert parse_operand(HintKind.TAGS, "work") == "work"
    with pytest.raises(HintValueError):
        parse_operand(HintKind.DUE, "soon")


def test_hint_to_dict() -> None:
    assert hint_to_dict(DueHint(datetime(2024, 12, 24, tzinfo=UTC))) == {"type": "due", "value": "24.12.2024"}
    assert hint_to_dict(SizeHint(timedelta(minutes=90))) == {"type": "size", "value": "1h30m"}
    assert hint_to_dict(PriorityHint(3)) == {"type": "priority", "value": 3}
    assert hint_to_dict(SrcHint("a/b")) == {"type": "src", "value": "a/b"}

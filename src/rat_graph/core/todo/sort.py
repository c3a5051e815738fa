"""Checklist sort rules, applied as one stable comparator chain."""

import functools
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

from rat_graph.core.todo.checklist import Checklist
from rat_graph.core.todo.hint import DueHint, HintKind, PriorityHint
from rat_graph.exceptions import DirectiveSyntaxError

_EARLIEST = datetime.min.replace(tzinfo=UTC)


class SortKey(StrEnum):
    DONE = "done"
    DUE = "due"
    PRIORITY = "priority"


@dataclass(frozen=True)
class SortRule:
    key: SortKey
    reverse: bool = False


def parse_sort_rule(raw: str) -> SortRule:
    """Parse "key" or "-key" (reversed)."""
    text = raw.strip()
    reverse = text.startswith("-")
    if reverse:
        text = text[1:]
    try:
        return SortRule(SortKey(text), reverse=reverse)
    except ValueError as e:
        msg = f"unknown sort key {text!r}"
        raise DirectiveSyntaxError(msg) from e


def parse_sort_rules(raw: str) -> list[SortRule]:
    return [parse_sort_rule(part) for part in raw.split(",") if part.strip()]


def _due(checklist: Checklist) -> datetime:
    hint = checklist.get_hint(HintKind.DUE)
    if isinstance(hint, DueHint):
        return hint.value
    return _EARLIEST


def _priority(checklist: Checklist) -> int:
    hint = checklist.get_hint(HintKind.PRIORITY)
    if isinstance(hint, PriorityHint):
        return hint.value
    return 0


def _equal(key: SortKey, a: Checklist, b: Checklist) -> bool:
    if key is SortKey.DONE:
        return a.done == b.done
    if key is SortKey.DUE:
        return _due(a) == _due(b)
    return _priority(a) == _priority(b)


def _less(key: SortKey, a: Checklist, b: Checklist) -> bool:
    if key is SortKey.DONE:
        # Done checklists come first.
        return a.done and not b.done
    if key is SortKey.DUE:
        return _due(a) < _due(b)
    return _priority(a) < _priority(b)


def _compare(rules: list[SortRule], a: Checklist, b: Checklist) -> int:
    for rule in rules:
        if _equal(rule.key, a, b):
            continue
        less = _less(rule.key, a, b)
        if rule.reverse:
            less = not less
        return -1 if less else 1
    return 0


def sort_checklists(checklists: Iterable[Checklist], rules: Iterable[SortRule]) -> list[Checklist]:
    """Sort checklists by the rule chain. Ties keep their original order."""
    rules = list(rules)
    if not rules:
        return list(checklists)
    return sorted(checklists, key=functools.cmp_to_key(lambda a, b: _compare(rules, a, b)))

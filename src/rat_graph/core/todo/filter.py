"""Checklist filter rules: hint presence and hint value comparison."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from rat_graph.core.todo.checklist import Checklist
from rat_graph.core.todo.hint import Hint, HintKind, parse_hint_kind, parse_operand
from rat_graph.exceptions import HintValueError


class Operator(StrEnum):
    EQUAL = "="
    LESS = "<"
    GREATER = ">"


@dataclass(frozen=True)
class FilterRule:
    """Keep checklists that have (or, with has=False, lack) a hint kind."""

    kind: HintKind
    has: bool = True


@dataclass(frozen=True)
class FilterValueRule:
    """Keep checklists whose hint of kind compares true against operand."""

    kind: HintKind
    operator: Operator
    operand: object

    def matches(self, hint: Hint) -> bool:
        if self.operator is Operator.EQUAL:
            return hint.equal(self.operand)
        if self.operator is Operator.LESS:
            return hint.less(self.operand)
        return hint.greater(self.operand)


def parse_filter_rule(raw: str) -> FilterRule:
    """Parse "kind" or "!kind"."""
    text = raw.strip()
    if text.startswith("!"):
        return FilterRule(parse_hint_kind(text[1:]), has=False)
    return FilterRule(parse_hint_kind(text), has=True)


def parse_filter_value_rule(raw: str) -> FilterValueRule:
    """Parse "kind<op>operand", splitting on the first of =, < or >.

    Raises:
        HintValueError: No operator is present or the operand is malformed.
        UnknownHintError: The kind is not a hint kind.
    """
    text = raw.strip()
    idx = next((i for i, ch in enumerate(text) if ch in "=<>"), -1)
    if idx <= 0:
        msg = f"invalid filter value rule {raw!r}"
        raise HintValueError(msg)

    kind = parse_hint_kind(text[:idx])
    return FilterValueRule(kind, Operator(text[idx]), parse_operand(kind, text[idx + 1 :]))


def _split_rules(raw: str) -> list[str]:
    return [part for part in (p.strip() for p in raw.split(",")) if part]


def parse_filter_rules(raw: str) -> list[FilterRule]:
    return [parse_filter_rule(part) for part in _split_rules(raw)]


def parse_filter_value_rules(raw: str) -> list[FilterValueRule]:
    return [parse_filter_value_rule(part) for part in _split_rules(raw)]


def filter_has(checklists: Iterable[Checklist], rules: Iterable[FilterRule]) -> list[Checklist]:
    """Keep checklists whose hint presence agrees with every rule."""
    rules = list(rules)
    return [c for c in checklists if all((c.get_hint(r.kind) is not None) == r.has for r in rules)]


def filter_value(checklists: Iterable[Checklist], rules: Iterable[FilterValueRule]) -> list[Checklist]:
    """Keep checklists passing every value rule.

    A checklist without a hint of the rule's kind is dropped.
    """
    rules = list(rules)
    kept: list[Checklist] = []
    for checklist in checklists:
        for rule in rules:
            hint = checklist.get_hint(rule.kind)
            if hint is None or not rule.matches(hint):
                break
        else:
            kept.append(checklist)
    return kept

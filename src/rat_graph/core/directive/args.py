"""Typed, validated arguments for each directive type.

Raw ``key=value`` pairs are turned into one frozen struct per directive type
right after tokenizing. Every problem found in the arguments is reported
together in a single error.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any
from uuid import UUID

from rat_graph.core.todo.filter import FilterRule, FilterValueRule, parse_filter_rules, parse_filter_value_rules
from rat_graph.core.todo.sort import SortRule, parse_sort_rules
from rat_graph.exceptions import DirectiveSyntaxError, MissingArgumentError, RatError


class DirectiveType(StrEnum):
    GRAPH = "graph"
    TODO = "todo"
    KANBAN = "kanban"
    EMBED = "embed"
    VERSION = "version"


@dataclass(frozen=True)
class GraphArgs:
    """Subtree listing. depth None means unlimited."""

    depth: int | None = None


@dataclass(frozen=True)
class TodoArgs:
    """Checklist aggregation over the subtrees of include_sources."""

    include_sources: tuple[UUID, ...]
    exclude_sources: tuple[UUID, ...] = ()
    filter_has: tuple[FilterRule, ...] = ()
    filter_value: tuple[FilterValueRule, ...] = ()
    include_done: bool = False
    include_done_entries: bool = False
    sort: tuple[SortRule, ...] = ()


@dataclass(frozen=True)
class KanbanArgs:
    columns: tuple[UUID, ...]


@dataclass(frozen=True)
class EmbedArgs:
    url: str


@dataclass(frozen=True)
class VersionArgs:
    pass


DirectiveArgs = GraphArgs | TodoArgs | KanbanArgs | EmbedArgs | VersionArgs

REQUIRED_KEYS: dict[DirectiveType, tuple[str, ...]] = {
    DirectiveType.GRAPH: (),
    DirectiveType.TODO: ("sources",),
    DirectiveType.KANBAN: ("columns",),
    DirectiveType.EMBED: ("url",),
    DirectiveType.VERSION: (),
}


def _split(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _parse_uuid(raw: str) -> UUID:
    try:
        return UUID(raw)
    except ValueError as e:
        msg = f"failed to parse id {raw!r}"
        raise DirectiveSyntaxError(msg) from e


def _collect(problems: list[str], key: str, parse: Callable[[str], Any], raw: str | None, default: Any) -> Any:
    """Run parse on raw, recording any failure under key instead of raising."""
    if raw is None:
        return default
    try:
        return parse(raw)
    except RatError as e:
        problems.append(f"{key}: {e}")
        return default


def _parse_depth(raw: str) -> int:
    try:
        depth = int(raw.strip())
    except ValueError as e:
        msg = f"failed to parse depth {raw!r}"
        raise DirectiveSyntaxError(msg) from e
    if depth < 1:
        msg = f"invalid depth - {depth}, depth must be positive"
        raise DirectiveSyntaxError(msg)
    return depth


def _parse_sources(raw: str) -> tuple[tuple[UUID, ...], tuple[UUID, ...]]:
    include: list[UUID] = []
    exclude: list[UUID] = []
    for part in _split(raw):
        if part.startswith("-"):
            exclude.append(_parse_uuid(part[1:]))
        else:
            include.append(_parse_uuid(part))

    if not include:
        msg = "sources must contain at least one include ID"
        raise DirectiveSyntaxError(msg)
    return tuple(include), tuple(exclude)


def _parse_include(raw: str) -> tuple[bool, bool]:
    done = done_entries = False
    for part in _split(raw):
        if part == "done":
            done = True
        elif part == "done_entries":
            done_entries = True
        else:
            msg = f"unknown include - {part}"
            raise DirectiveSyntaxError(msg)
    return done, done_entries


def _parse_columns(raw: str) -> tuple[UUID, ...]:
    columns = tuple(_parse_uuid(part) for part in _split(raw))
    if not columns:
        msg = "need to specify at least one column ID"
        raise DirectiveSyntaxError(msg)
    return columns


def _graph_args(args: dict[str, str], problems: list[str]) -> GraphArgs:
    return GraphArgs(depth=_collect(problems, "depth", _parse_depth, args.get("depth"), None))


def _todo_args(args: dict[str, str], problems: list[str]) -> TodoArgs:
    include, exclude = _collect(problems, "sources", _parse_sources, args.get("sources"), ((), ()))
    done, done_entries = _collect(problems, "include", _parse_include, args.get("include"), (False, False))
    return TodoArgs(
        include_sources=include,
        exclude_sources=exclude,
        filter_has=tuple(_collect(problems, "filter_has", parse_filter_rules, args.get("filter_has"), [])),
        filter_value=tuple(
            _collect(problems, "filter_value", parse_filter_value_rules, args.get("filter_value"), [])
        ),
        include_done=done,
        include_done_entries=done_entries,
        sort=tuple(_collect(problems, "sort", parse_sort_rules, args.get("sort"), [])),
    )


def _kanban_args(args: dict[str, str], problems: list[str]) -> KanbanArgs:
    return KanbanArgs(columns=_collect(problems, "columns", _parse_columns, args.get("columns"), ()))


def _embed_args(args: dict[str, str], problems: list[str]) -> EmbedArgs:
    return EmbedArgs(url=args["url"].strip())


def _version_args(args: dict[str, str], problems: list[str]) -> VersionArgs:
    return VersionArgs()


_PARSERS: dict[DirectiveType, Callable[[dict[str, str], list[str]], DirectiveArgs]] = {
    DirectiveType.GRAPH: _graph_args,
    DirectiveType.TODO: _todo_args,
    DirectiveType.KANBAN: _kanban_args,
    DirectiveType.EMBED: _embed_args,
    DirectiveType.VERSION: _version_args,
}


def parse_args(directive_type: DirectiveType, args: dict[str, str]) -> DirectiveArgs:
    """Validate raw arguments and convert them to the type's argument struct.

    Keys a directive type does not know are ignored.

    Raises:
        MissingArgumentError: Required keys are absent or blank.
        DirectiveSyntaxError: One or more values are malformed.
    """
    missing = [key for key in REQUIRED_KEYS[directive_type] if not args.get(key, "").strip()]
    if missing:
        raise MissingArgumentError(str(directive_type), missing)

    problems: list[str] = []
    parsed = _PARSERS[directive_type](args, problems)
    if problems:
        msg = f"invalid {directive_type} arguments: " + "; ".join(problems)
        raise DirectiveSyntaxError(msg)
    return parsed

"""Tests for directive tokenizing, argument parsing and matching."""

from uuid import UUID

import pytest

from rat_graph.core.directive.args import (
    DirectiveType,
    EmbedArgs,
    GraphArgs,
    KanbanArgs,
    TodoArgs,
    VersionArgs,
    parse_args,
)
from rat_graph.core.directive.token import Directive, match_directive, parse_directive, tokenize
from rat_graph.core.todo.filter import FilterRule, FilterValueRule, Operator
from rat_graph.core.todo.hint import HintKind
from rat_graph.core.todo.sort import SortKey, SortRule
from rat_graph.exceptions import DirectiveSyntaxError, MissingArgumentError, UnknownDirectiveError

ID_A = UUID("6f1d8a3e-2c1b-4f6e-9a55-0c2b3f4d5e61")
ID_B = UUID("0b7e7c1a-93a4-4a2f-8d1e-5b6c7d8e9f00")


def test_tokenize_splits_words_quotes_and_equals() -> None:
    assert tokenize('todo  sources="a b" x=1') == [
        ("todo", False),
        ("sources", False),
        ("=", False),
        ("a b", True),
        ("x", False),
        ("=", False),
        ("1", False),
    ]


def test_tokenize_unterminated_quote() -> None:
    with pytest.raises(DirectiveSyntaxError):
        tokenize('embed url="oops')


def test_parse_graph_directive() -> None:
    directive = parse_directive("graph depth=2")

    assert directive.type is DirectiveType.GRAPH
    assert directive.args == {"depth": "2"}
    assert directive.options == GraphArgs(depth=2)


def test_parse_graph_without_depth_is_unlimited() -> None:
    assert parse_directive("graph").options == GraphArgs(depth=None)


@pytest.mark.parametrize("raw", ["Graph", "time", "nope depth=1", '"graph"'])
def test_unknown_directive_type(raw: str) -> None:
    with pytest.raises(UnknownDirectiveError):
        parse_directive(raw)


@pytest.mark.parametrize("raw", ["graph depth", "graph depth=", "graph =2", "graph depth 2", 'graph "depth"=2'])
def test_malformed_arguments(raw: str) -> None:
    with pytest.raises(DirectiveSyntaxError, match="malformed argument"):
        parse_directive(raw)


def test_empty_body() -> None:
    with pytest.raises(DirectiveSyntaxError):
        parse_directive("   ")


def test_last_duplicate_key_wins() -> None:
    assert parse_directive("graph depth=1 depth=3").options == GraphArgs(depth=3)


def test_unknown_keys_are_ignored() -> None:
    directive = parse_directive("version colour=red")

    assert directive.options == VersionArgs()
    assert directive.args == {"colour": "red"}


@pytest.mark.parametrize("raw", ["graph depth=0", "graph depth=-1", "graph depth=deep"])
def test_invalid_depth(raw: str) -> None:
    with pytest.raises(DirectiveSyntaxError, match="depth"):
        parse_directive(raw)


def test_missing_required_argument_names_key() -> None:
    with pytest.raises(MissingArgumentError) as exc_info:
        parse_directive("embed")

    assert exc_info.value.keys == ["url"]
    assert "url" in str(exc_info.value)


def test_blank_required_argument_is_missing() -> None:
    with pytest.raises(MissingArgumentError):
        parse_directive('kanban columns=""')


def test_parse_embed() -> None:
    assert parse_directive('embed url="https://example.com/a?b=c"').options == EmbedArgs(
        url="https://example.com/a?b=c"
    )


def test_parse_kanban_columns() -> None:
    directive = parse_directive(f"kanban columns={ID_A},{ID_B}")
    assert directive.options == KanbanArgs(columns=(ID_A, ID_B))


def test_parse_kanban_bad_column_id() -> None:
    with pytest.raises(DirectiveSyntaxError, match="columns"):
        parse_directive("kanban columns=not-an-id")


def test_parse_todo_full() -> None:
    directive = parse_directive(
        f'todo sources={ID_A},-{ID_B} filter_has="due,!tags" filter_value="priority=1" '
        f"include=done,done_entries sort=-priority,due"
    )

    assert directive.options == TodoArgs(
        include_sources=(ID_A,),
        exclude_sources=(ID_B,),
        filter_has=(FilterRule(HintKind.DUE), FilterRule(HintKind.TAGS, has=False)),
        filter_value=(FilterValueRule(HintKind.PRIORITY, Operator.EQUAL, 1),),
        include_done=True,
        include_done_entries=True,
        sort=(SortRule(SortKey.PRIORITY, reverse=True), SortRule(SortKey.DUE)),
    )


def test_todo_defaults() -> None:
    options = parse_directive(f"todo sources={ID_A}").options

    assert options == TodoArgs(include_sources=(ID_A,))
    assert isinstance(options, TodoArgs)
    assert not options.include_done


def test_todo_needs_an_included_source() -> None:
    with pytest.raises(DirectiveSyntaxError, match="at least one include"):
        parse_directive(f"todo sources=-{ID_A}")


def test_todo_reports_all_problems_together() -> None:
    with pytest.raises(DirectiveSyntaxError) as exc_info:
        parse_directive(f"todo sources={ID_A} include=everything sort=size filter_has=colour")

    message = str(exc_info.value)
    assert "include" in message
    assert "sort" in message
    assert "filter_has" in message


def test_parse_args_directly() -> None:
    assert parse_args(DirectiveType.VERSION, {}) == VersionArgs()


def test_match_directive_at_position() -> None:
    src = "see <rat version/> here"
    match = match_directive(src, 4)

    assert match is not None
    assert match.raw == "version"
    assert match.end == len("see <rat version/>")
    assert match.error is None
    assert match.directive is not None
    assert match.directive.type is DirectiveType.VERSION


def test_match_directive_declines() -> None:
    assert match_directive("<rat version", 0) is None
    assert match_directive("<ratversion/>", 0) is None
    assert match_directive("x <rat version/>", 0) is None


def test_match_directive_with_bad_body_still_matches() -> None:
    match = match_directive("<rat nope/> rest", 0)

    assert match is not None
    assert match.directive is None
    assert match.end == len("<rat nope/>")
    assert match.error is not None
    assert match.error.startswith('failed to parse "<rat nope/>" as rat token')


def test_typed_options() -> None:
    directive = Directive(type=DirectiveType.EMBED, options=EmbedArgs(url="a.pdf"))

    assert directive.typed_options(EmbedArgs) == EmbedArgs(url="a.pdf")
    with pytest.raises(DirectiveSyntaxError, match="expected KanbanArgs"):
        directive.typed_options(KanbanArgs)

"""Markdown parsing with directive support.

Directives are spliced into markdown-it's token stream by two extra rules:
a block rule for directives standing on their own lines and an inline rule
for directives inside flowing text. Both produce a single ``rat_token``
token (``rat_error`` when the body does not parse) and consume exactly the
directive's characters. Everything else is left to the base grammar.
"""

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from rat_graph.core.directive.token import START_MARKER, DirectiveMatch, match_directive

RAT_TOKEN = "rat_token"
RAT_ERROR = "rat_error"


def _push_match(state: StateBlock | StateInline, match: DirectiveMatch) -> Token:
    if match.directive is not None:
        token = state.push(RAT_TOKEN, "", 0)
        token.meta = {"directive": match.directive}
    else:
        token = state.push(RAT_ERROR, "", 0)
        token.meta = {"error": match.error}
    token.content = match.raw
    return token


def rat_block_rule(state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
    """Recognize a directive that starts a block and ends its last line."""
    # Indented code.
    if state.sCount[start_line] - state.blkIndent >= 4:
        return False

    pos = state.bMarks[start_line] + state.tShift[start_line]
    if not state.src.startswith(START_MARKER, pos):
        return False

    match = match_directive(state.src, pos)
    if match is None:
        return False

    line = start_line
    while line < end_line and state.eMarks[line] < match.end:
        line += 1
    if line >= end_line:
        return False

    # Text after the end marker makes this inline content.
    if state.src[match.end : state.eMarks[line]].strip():
        return False

    if silent:
        return True

    token = _push_match(state, match)
    token.map = [start_line, line + 1]
    state.line = line + 1
    return True


def rat_inline_rule(state: StateInline, silent: bool) -> bool:
    """Recognize a directive inside inline content.

    Declines when there is no complete directive at the current position, so
    html_inline, autolink and text see the "<" as before.
    """
    if state.src[state.pos] != "<":
        return False

    match = match_directive(state.src, state.pos)
    if match is None or match.end > state.posMax:
        return False

    if not silent:
        _push_match(state, match)
    state.pos = match.end
    return True


def rat_plugin(md: MarkdownIt) -> None:
    """markdown-it plugin installing both directive rules."""
    md.block.ruler.before("html_block", RAT_TOKEN, rat_block_rule, {"alt": ["paragraph"]})
    md.inline.ruler.before("autolink", RAT_TOKEN, rat_inline_rule)


def create_parser() -> MarkdownIt:
    """CommonMark with raw HTML, tables, strikethrough and directives."""
    return MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"]).use(rat_plugin)


_md = create_parser()


def parse(content: str) -> list[Token]:
    """Parse content into markdown-it's flat block token stream."""
    return _md.parse(content)

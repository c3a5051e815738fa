"""Directive syntax: locating ``<rat TYPE key=value .../>`` and parsing its body."""

from dataclasses import dataclass, field
from typing import NamedTuple, TypeVar

from rat_graph.core.directive.args import DirectiveArgs, DirectiveType, parse_args
from rat_graph.exceptions import DirectiveSyntaxError, RatError, UnknownDirectiveError

START_MARKER = "<rat "
END_MARKER = "/>"

ArgsT = TypeVar("ArgsT", bound=DirectiveArgs)


@dataclass(frozen=True)
class Directive:
    """One parsed directive. args keeps the raw values, options the typed ones."""

    type: DirectiveType
    options: DirectiveArgs
    args: dict[str, str] = field(default_factory=dict)

    def typed_options(self, expected: type[ArgsT]) -> ArgsT:
        """Return options if they are of the expected argument type."""
        if not isinstance(self.options, expected):
            msg = f"{self.type} directive has {type(self.options).__name__} options, expected {expected.__name__}"
            raise DirectiveSyntaxError(msg)
        return self.options


class DirectiveMatch(NamedTuple):
    """Result of scanning for a directive at some offset of a source string.

    end is the offset just past the end marker. Exactly one of directive and
    error is set.
    """

    raw: str
    end: int
    directive: Directive | None
    error: str | None


def tokenize(raw: str) -> list[tuple[str, bool]]:
    """Split a directive body into (word, quoted) pairs.

    Whitespace separates words, "=" is always a word of its own and double
    quotes group a substring into one word without the quotes.
    """
    words: list[tuple[str, bool]] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch.isspace():
            i += 1
        elif ch == '"':
            end = raw.find('"', i + 1)
            if end == -1:
                msg = f"unterminated quote at offset {i}"
                raise DirectiveSyntaxError(msg)
            words.append((raw[i + 1 : end], True))
            i = end + 1
        elif ch == "=":
            words.append(("=", False))
            i += 1
        else:
            end = i
            while end < len(raw) and not raw[end].isspace() and raw[end] not in '"=':
                end += 1
            words.append((raw[i:end], False))
            i = end
    return words


def parse_directive(raw: str) -> Directive:
    """Parse the text between the start and end markers.

    The first word names the directive type; the rest must be key=value
    triples. When a key repeats, the last value wins.

    Raises:
        UnknownDirectiveError: The type is not one of the directive types.
        MissingArgumentError: A required argument is absent.
        DirectiveSyntaxError: The arguments are malformed.
    """
    words = tokenize(raw)
    if not words:
        msg = "missing directive type"
        raise DirectiveSyntaxError(msg)

    type_word, quoted = words[0]
    try:
        directive_type = DirectiveType(type_word)
    except ValueError as e:
        raise UnknownDirectiveError(type_word) from e
    if quoted:
        raise UnknownDirectiveError(type_word)

    args: dict[str, str] = {}
    rest = words[1:]
    for i in range(0, len(rest), 3):
        triple = rest[i : i + 3]
        if len(triple) != 3 or triple[1] != ("=", False) or triple[0][1] or triple[0][0] == "=":
            found = " ".join(word for word, _ in triple)
            msg = f"malformed argument near {found!r}"
            raise DirectiveSyntaxError(msg)
        key, value = triple[0][0], triple[2]
        if value == ("=", False):
            msg = f"malformed argument {key!r}: missing value"
            raise DirectiveSyntaxError(msg)
        args[key] = value[0]

    return Directive(type=directive_type, args=args, options=parse_args(directive_type, args))


def match_directive(src: str, pos: int) -> DirectiveMatch | None:
    """Scan for a directive starting exactly at src[pos].

    Returns None when src[pos:] does not start with the start marker or no
    end marker follows it. A body that fails to parse is still a match,
    carrying the error message instead of a directive.
    """
    if not src.startswith(START_MARKER, pos):
        return None

    body_start = pos + len(START_MARKER)
    body_end = src.find(END_MARKER, body_start)
    if body_end == -1:
        return None

    raw = src[body_start:body_end]
    end = body_end + len(END_MARKER)
    try:
        return DirectiveMatch(raw, end, parse_directive(raw), None)
    except RatError as e:
        return DirectiveMatch(raw, end, None, f'failed to parse "<rat {raw}/>" as rat token: {e}')

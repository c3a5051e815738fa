"""Checklist blocks: parsing, discovery in node content, rendering."""

import re
from dataclasses import dataclass, field, replace
from datetime import UTC, tzinfo

from loguru import logger

from rat_graph.core.render.part import Part, PartType
from rat_graph.core.todo.hint import Hint, HintKind, SrcHint, hint_to_dict, parse_hint
from rat_graph.exceptions import ChecklistSyntaxError, RatError, UnknownHintError
from rat_graph.models.node import Node
from rat_graph.protocols import ContentRenderer

NOT_DONE_MARKER = "- "
DONE_MARKER = "x "
_CONTINUATION_INDENT = "  "

CHECKLIST_BLOCK_RE = re.compile(r"```todo\n((?:.*\n)*?)```")

# Display order of hints on a rendered checklist.
_HINT_ORDER = {
    HintKind.SRC: 0,
    HintKind.DUE: 1,
    HintKind.SIZE: 2,
    HintKind.PRIORITY: 3,
    HintKind.TAGS: 4,
}


@dataclass(frozen=True)
class Entry:
    done: bool
    text: str


@dataclass(frozen=True)
class Checklist:
    """Entries in source order plus every hint, in source order."""

    entries: tuple[Entry, ...] = ()
    hints: tuple[Hint, ...] = field(default=())

    @property
    def done(self) -> bool:
        """True when every entry is done; an empty checklist counts as done."""
        return all(entry.done for entry in self.entries)

    def get_hint(self, kind: HintKind) -> Hint | None:
        """Return the first hint of the given kind, or None."""
        for hint in self.hints:
            if hint.kind is kind:
                return hint
        return None

    def without_done_entries(self) -> "Checklist":
        return replace(self, entries=tuple(e for e in self.entries if not e.done))

    def with_hint(self, hint: Hint) -> "Checklist":
        return replace(self, hints=(*self.hints, hint))

    def ordered_hints(self) -> list[Hint]:
        return sorted(self.hints, key=lambda h: _HINT_ORDER[h.kind])


def _is_entry_start(line: str) -> bool:
    return line.startswith((NOT_DONE_MARKER, DONE_MARKER))


def _dedent(line: str) -> str:
    for prefix in (NOT_DONE_MARKER, DONE_MARKER, _CONTINUATION_INDENT):
        if line.startswith(prefix):
            return line[len(prefix) :]
    return line


def _parse_entry(lines: list[str]) -> Entry:
    done = lines[0].startswith(DONE_MARKER)
    text = "\n".join(_dedent(line) for line in lines)
    if not text.strip():
        msg = f"empty checklist entry - {lines[0]!r}"
        raise ChecklistSyntaxError(msg)
    return Entry(done=done, text=text)


def parse_checklist(raw: str, *, tz: tzinfo = UTC) -> Checklist:
    """Parse the body of a checklist block.

    Lines starting with "- " (open) or "x " (done) begin an entry; the lines
    after it, up to the next entry start, continue that entry. Other lines
    containing "=" are hints. Hints with an unknown key are dropped.

    Args:
        raw: Block body without the fence lines.
        tz: Time zone due dates are written in.

    Returns:
        The parsed checklist. Empty input gives an empty checklist.

    Raises:
        ChecklistSyntaxError: A line is neither an entry nor a hint, or an
            entry is empty.
        HintValueError: A known hint has a malformed value.
    """
    lines = [line for line in raw.split("\n") if line.strip() or _is_entry_start(line)]
    entries: list[Entry] = []
    hints: list[Hint] = []

    i = 0
    while i < len(lines):
        line = lines[i]

        if _is_entry_start(line):
            end = i + 1
            while end < len(lines) and not _is_entry_start(lines[end]):
                end += 1
            entries.append(_parse_entry(lines[i:end]))
            i = end
            continue

        if "=" in line:
            try:
                hints.append(parse_hint(line, tz=tz))
            except UnknownHintError as e:
                logger.debug("Skipping hint line {!r}: {}", line, e)
            i += 1
            continue

        msg = f"invalid todo line - {line!r}"
        raise ChecklistSyntaxError(msg)

    return Checklist(entries=tuple(entries), hints=tuple(hints))


def find_checklists(node: Node, *, tz: tzinfo = UTC) -> list[Checklist]:
    """Parse every checklist block in a node's content.

    Each checklist gets a src hint holding the node's path.

    Raises:
        ChecklistSyntaxError: A block in the node failed to parse.
    """
    checklists: list[Checklist] = []
    for match in CHECKLIST_BLOCK_RE.finditer(node.content):
        try:
            checklist = parse_checklist(match.group(1), tz=tz)
        except RatError as e:
            msg = f"failed to parse todo in node {node.path!r}: {e}"
            raise ChecklistSyntaxError(msg) from e
        checklists.append(checklist.with_hint(SrcHint(node.path)))
    return checklists


def render_checklist(part: Part, checklist: Checklist, node: Node, renderer: ContentRenderer) -> Part:
    """Append a todo part for checklist under part and return it.

    Entry text is markdown and is rendered through renderer on behalf of node.
    """
    todo = part.add(
        Part(
            PartType.TODO,
            {"hints": [hint_to_dict(hint) for hint in checklist.ordered_hints()]},
        )
    )
    for entry in checklist.entries:
        entry_part = todo.add(Part(PartType.TODO_ENTRY, {"done": entry.done}))
        renderer.render(entry_part, node, entry.text)
    return todo

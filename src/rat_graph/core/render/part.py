"""The typed output tree that rendered node content is delivered as."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class PartType(StrEnum):
    """Closed vocabulary of part types."""

    DOCUMENT = "document"
    TEXT = "text"
    HORIZONTAL_RULE = "horizontal_rule"
    LINK = "link"
    GRAPH_LINK = "graph_link"
    LIST = "list"
    LIST_ITEM = "list_item"
    HEADING = "heading"
    SPAN = "span"
    HTML_BLOCK = "html_block"
    PARAGRAPH = "paragraph"
    CODE = "code"
    CODE_BLOCK = "code_block"
    GRAPHVIZ = "graphviz"
    TABLE = "table"
    TABLE_HEADER = "table_header"
    TABLE_BODY = "table_body"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    STRONG = "strong"
    IMAGE = "image"
    TODO = "todo"
    TODO_ENTRY = "todo_entry"
    KANBAN = "kanban"
    KANBAN_COLUMN = "kanban_column"
    KANBAN_CARD = "kanban_card"
    EMBED = "embed"
    RAT_ERROR = "rat_error"
    UNKNOWN = "unknown"


@dataclass
class Part:
    """One node of the output tree. Children are owned by their parent."""

    type: PartType
    attributes: dict[str, Any] = field(default_factory=dict)
    children: list["Part"] = field(default_factory=list)

    def add(self, child: "Part") -> "Part":
        """Append child and return it."""
        self.children.append(child)
        return child

    def find_all(self, part_type: PartType) -> list["Part"]:
        """Return all descendants (and self) of the given type, depth first."""
        found = [self] if self.type == part_type else []
        for child in self.children:
            found.extend(child.find_all(part_type))
        return found

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form: {type, attributes?, children?}."""
        data: dict[str, Any] = {"type": str(self.type)}
        if self.attributes:
            data["attributes"] = self.attributes
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def error_part(message: str) -> Part:
    return Part(PartType.RAT_ERROR, {"err": message})


class PartCursor:
    """Tracks the currently open container while building a part tree.

    Open containers are kept on an explicit stack instead of parent
    pointers. The root is never popped, so unbalanced exits stay at the root.
    Containers that are transparent in the output (e.g. paragraphs inside
    list items) are pushed with the current part, so the matching exit
    leaves the cursor where it was.
    """

    def __init__(self, root: Part) -> None:
        self._stack: list[tuple[str, Part]] = [("root", root)]

    @property
    def current(self) -> Part:
        return self._stack[-1][1]

    @property
    def current_kind(self) -> str:
        """Source kind of the innermost open container."""
        return self._stack[-1][0]

    def leaf(self, part: Part) -> Part:
        """Attach part under the open container without entering it."""
        return self.current.add(part)

    def enter(self, kind: str, part: Part | None) -> None:
        """Open a container; None opens a transparent one."""
        if part is None:
            self._stack.append((kind, self.current))
            return
        self.current.add(part)
        self._stack.append((kind, part))

    def exit(self) -> None:
        if len(self._stack) > 1:
            self._stack.pop()

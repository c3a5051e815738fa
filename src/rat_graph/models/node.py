"""Domain models for the node graph."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote
from uuid import UUID

from rat_graph.config import VIEW_ENDPOINT

ROOT_NODE_ID = UUID(int=0)
ROOT_NODE_PATH = ""


def path_parts(path: str) -> list[str]:
    """Split a node path into its non-empty segments."""
    return [part for part in path.split("/") if part]


def path_name(path: str) -> str:
    """Return the last segment of a node path, empty for the root."""
    parts = path_parts(path)
    return parts[-1] if parts else ""


def join_path(path: str, name: str) -> str:
    if not path:
        return name
    return f"{path}/{name}"


def view_url(path: str) -> str:
    """Return the URL under which a node is viewed."""
    return VIEW_ENDPOINT + "/".join(quote(part) for part in path_parts(path))


@dataclass(frozen=True)
class NodeHeader:
    """Metadata stored in a node's front matter."""

    id: UUID
    name: str = ""
    weight: int = 0
    template: dict[str, Any] | None = None


@dataclass(frozen=True)
class Node:
    """A single node: a markdown document placed in the graph by its path."""

    path: str
    header: NodeHeader
    content: str = ""

    @property
    def id(self) -> UUID:
        return self.header.id

    @property
    def name(self) -> str:
        """Header name when set, otherwise the last path segment."""
        return self.header.name or path_name(self.path)

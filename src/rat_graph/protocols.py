"""Protocols for the collaborators the renderer depends on."""

from datetime import tzinfo
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from uuid import UUID

from rat_graph.models.node import Node

if TYPE_CHECKING:
    from rat_graph.core.render.part import Part


@runtime_checkable
class GraphProvider(Protocol):
    """Protocol for node storage backends.

    Implementations own the nodes they return. The child relation must be
    acyclic: subtree walks have no cycle detection.
    """

    def get_by_id(self, node_id: UUID) -> Node:
        """Return the node with the given ID or raise NodeNotFoundError."""
        ...

    def get_by_path(self, path: str) -> Node:
        """Return the node at the given path or raise NodeNotFoundError."""
        ...

    def get_leafs(self, path: str) -> list[Node]:
        """Return the direct children of the node at path, in any order."""
        ...

    def timezone(self) -> tzinfo:
        """Return the time zone the graph's dates are written in."""
        ...


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for rendering markdown content into an existing part."""

    def render(self, root: "Part", node: Node, content: str) -> None:
        """Render content of (or on behalf of) node under root."""
        ...


@runtime_checkable
class UrlPrefixer(Protocol):
    """Protocol for turning relative file URLs into proxy endpoint URLs."""

    def prefix_resolver_endpoint(self, url: str) -> str:
        """Return url unchanged if absolute, else rooted at the file endpoint."""
        ...

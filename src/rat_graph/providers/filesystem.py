"""Read-only graph provider over a directory of markdown files.

Node ``a/b`` is stored in ``<graph_dir>/a/b.md`` and its children in
``<graph_dir>/a/b/*.md``. Files may start with YAML front matter::

    ---
    id: 5b0bd1b5-9e1c-4a38-a8a6-0c4e2e4b4a5d
    name: Display name
    weight: 2
    ---
    content

The root node is not stored; it is built from settings.
"""

from pathlib import Path
from typing import Any
from uuid import NAMESPACE_URL, UUID, uuid5
from zoneinfo import ZoneInfo

import frontmatter
import yaml
from loguru import logger

from rat_graph.config import Settings, resolve_graph_directory
from rat_graph.core.tree.navigation import walk
from rat_graph.exceptions import NodeNotFoundError
from rat_graph.models.node import ROOT_NODE_ID, ROOT_NODE_PATH, Node, NodeHeader, join_path, path_parts

NODE_SUFFIX = ".md"


def split_front_matter(raw: str) -> tuple[dict[str, Any], str]:
    """Split a file into its parsed front matter and the content after it.

    Leading and trailing whitespace of the content is stripped.

    Raises:
        yaml.YAMLError: The front matter is not valid YAML.
        ValueError: The front matter is not a mapping.
    """
    post = frontmatter.loads(raw)
    if not isinstance(post.metadata, dict):
        msg = f"front matter must be a mapping, got {type(post.metadata).__name__}"
        raise ValueError(msg)
    return dict(post.metadata), post.content


def _header(path: str, data: dict[str, Any]) -> NodeHeader:
    raw_id = data.get("id")
    node_id = UUID(str(raw_id)) if raw_id else uuid5(NAMESPACE_URL, path)
    template = data.get("template")
    return NodeHeader(
        id=node_id,
        name=str(data.get("name") or ""),
        weight=int(data.get("weight") or 0),
        template=template if isinstance(template, dict) else None,
    )


class FilesystemProvider:
    """GraphProvider reading nodes from markdown files. Never writes."""

    def __init__(
        self,
        graph_dir: Path,
        *,
        timezone: str = "UTC",
        root_name: str = "root",
        root_content: str = "",
    ) -> None:
        self.graph_dir = Path(graph_dir)
        self._tz = ZoneInfo(timezone)
        self._root = Node(
            path=ROOT_NODE_PATH,
            header=NodeHeader(id=ROOT_NODE_ID, name=root_name),
            content=root_content,
        )
        logger.debug("Filesystem provider ready, graph dir {!r}", str(self.graph_dir))

    @classmethod
    def from_settings(cls, settings: Settings) -> "FilesystemProvider":
        return cls(
            resolve_graph_directory(settings),
            timezone=settings.timezone,
            root_name=settings.root_name,
            root_content=settings.root_content,
        )

    def timezone(self) -> ZoneInfo:
        return self._tz

    def _location(self, path: str) -> tuple[str, list[str]]:
        parts = path_parts(path)
        if any(part in (".", "..") for part in parts):
            msg = f"invalid node path {path!r}"
            raise NodeNotFoundError(msg)
        return "/".join(parts), parts

    def get_by_path(self, path: str) -> Node:
        norm, parts = self._location(path)
        if not parts:
            return self._root

        file = self.graph_dir.joinpath(*parts[:-1], parts[-1] + NODE_SUFFIX)
        if not file.is_file():
            msg = f"node {norm!r} not found"
            raise NodeNotFoundError(msg)
        return self._read(norm, file)

    def get_leafs(self, path: str) -> list[Node]:
        norm, parts = self._location(path)
        directory = self.graph_dir.joinpath(*parts)
        if not directory.is_dir():
            return []

        return [
            self._read(join_path(norm, file.name.removesuffix(NODE_SUFFIX)), file)
            for file in sorted(directory.glob("*" + NODE_SUFFIX))
            if file.is_file()
        ]

    def get_by_id(self, node_id: UUID) -> Node:
        """Find a node by ID, searching the whole graph from the root."""
        if node_id == ROOT_NODE_ID:
            return self._root

        found: list[Node] = []

        def visit(_depth: int, node: Node) -> bool:
            if found:
                return False
            if node.id == node_id:
                found.append(node)
                return False
            return True

        walk(self, self._root, visit)
        if not found:
            msg = f"node with id {node_id} not found"
            raise NodeNotFoundError(msg)
        return found[0]

    def _read(self, path: str, file: Path) -> Node:
        try:
            raw = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            msg = f"failed to read node {path!r}"
            raise NodeNotFoundError(msg) from e

        try:
            data, content = split_front_matter(raw)
            header = _header(path, data)
        except (yaml.YAMLError, ValueError, TypeError) as e:
            msg = f"invalid front matter in node {path!r}: {e}"
            raise NodeNotFoundError(msg) from e

        return Node(path=path, header=header, content=content)

"""Tree navigation: ordered children, subtree walks."""

from collections.abc import Callable, Iterable
from uuid import UUID

from rat_graph.exceptions import RatError, TraversalError
from rat_graph.models.node import Node
from rat_graph.protocols import GraphProvider

WalkCallback = Callable[[int, Node], bool]


def _leaf_order(node: Node) -> tuple[int, int, str]:
    # Weighted siblings first, ascending by weight; unweighted ones by name.
    if node.header.weight != 0:
        return (0, node.header.weight, "")
    return (1, 0, node.name)


def sort_leafs(leafs: Iterable[Node]) -> list[Node]:
    """Order sibling nodes by weight, then by name."""
    return sorted(leafs, key=_leaf_order)


def get_leafs(provider: GraphProvider, node: Node) -> list[Node]:
    """Get direct children of a node, in display order."""
    return sort_leafs(provider.get_leafs(node.path))


def walk(provider: GraphProvider, node: Node, callback: WalkCallback) -> None:
    """Visit node and its descendants depth first.

    The callback receives (depth, node), starting with node itself at depth 0.
    Returning False from the callback skips the children of that node.

    Raises:
        TraversalError: Listing the children of a visited node failed.
    """
    if not callback(0, node):
        return
    _walk(provider, node, 1, callback)


def _walk(provider: GraphProvider, node: Node, depth: int, callback: WalkCallback) -> None:
    try:
        leafs = get_leafs(provider, node)
    except RatError:
        raise
    except Exception as e:
        msg = f"failed to list children of {node.path!r}: {e}"
        raise TraversalError(msg) from e

    for leaf in leafs:
        if not callback(depth, leaf):
            continue
        _walk(provider, leaf, depth + 1, callback)


def collect_ids(provider: GraphProvider, node: Node) -> set[UUID]:
    """Return the IDs of node and all of its descendants."""
    ids: set[UUID] = set()

    def visit(_depth: int, visited: Node) -> bool:
        ids.add(visited.id)
        return True

    walk(provider, node, visit)
    return ids

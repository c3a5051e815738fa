"""Tests for child ordering and subtree walks."""

from uuid import NAMESPACE_URL, uuid5

import pytest

from rat_graph.core.tree.navigation import collect_ids, get_leafs, sort_leafs, walk
from rat_graph.exceptions import TraversalError
from rat_graph.models.node import Node
from tests.unit.fakes import FakeProvider


def test_sort_leafs_weighted_first_then_by_name() -> None:
    p = FakeProvider()
    nodes = [
        p.add("b"),
        p.add("heavy", weight=5),
        p.add("a"),
        p.add("light", weight=1),
        p.add("c", name="0-first-by-name"),
    ]

    assert [n.path for n in sort_leafs(nodes)] == ["light", "heavy", "c", "a", "b"]


def test_sort_leafs_is_stable_on_equal_weight() -> None:
    p = FakeProvider()
    nodes = [p.add("y", weight=2), p.add("x", weight=2)]

    assert [n.path for n in sort_leafs(nodes)] == ["y", "x"]


def test_get_leafs_orders_provider_listing(provider: FakeProvider) -> None:
    projects = provider.get_by_path("projects")

    assert [n.path for n in get_leafs(provider, projects)] == ["projects/web", "projects/rat", "projects/zeta"]


def test_walk_visits_depth_first_with_depths(provider: FakeProvider) -> None:
    visited: list[tuple[int, str]] = []

    def visit(depth: int, node: Node) -> bool:
        visited.append((depth, node.path))
        return True

    walk(provider, provider.get_by_path("projects"), visit)

    assert visited == [
        (0, "projects"),
        (1, "projects/web"),
        (1, "projects/rat"),
        (2, "projects/rat/parser"),
        (1, "projects/zeta"),
    ]


def test_walk_false_skips_children(provider: FakeProvider) -> None:
    visited: list[str] = []

    def visit(_depth: int, node: Node) -> bool:
        visited.append(node.path)
        return node.path != "projects/rat"

    walk(provider, provider.get_by_path("projects"), visit)

    assert "projects/rat" in visited
    assert "projects/rat/parser" not in visited


def test_walk_wraps_listing_failure(provider: FakeProvider) -> None:
    provider.failing_paths.add("projects/rat")

    with pytest.raises(TraversalError, match="projects/rat"):
        walk(provider, provider.get_by_path("projects"), lambda _d, _n: True)


def test_walk_propagates_callback_errors(provider: FakeProvider) -> None:
    def visit(_depth: int, node: Node) -> bool:
        raise KeyError(node.path)

    with pytest.raises(KeyError):
        walk(provider, provider.get_by_path("projects"), visit)


def test_collect_ids_includes_start_node(provider: FakeProvider) -> None:
    ids = collect_ids(provider, provider.get_by_path("projects/rat"))

    assert ids == {uuid5(NAMESPACE_URL, "projects/rat"), uuid5(NAMESPACE_URL, "projects/rat/parser")}

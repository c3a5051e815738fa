"""Tests for node models and path helpers."""

from uuid import uuid4

from rat_graph.models.node import Node, NodeHeader, join_path, path_name, path_parts, view_url


def test_path_parts_drops_empty_segments() -> None:
    assert path_parts("/a//b/") == ["a", "b"]
    assert path_parts("") == []


def test_path_name_is_last_segment() -> None:
    assert path_name("projects/rat") == "rat"
    assert path_name("") == ""


def test_join_path_from_root() -> None:
    assert join_path("", "projects") == "projects"
    assert join_path("projects", "rat") == "projects/rat"


def test_view_url_quotes_segments() -> None:
    assert view_url("my notes/rat") == "/view/my%20notes/rat"


def test_node_name_falls_back_to_path() -> None:
    named = Node("projects/rat", NodeHeader(id=uuid4(), name="Rat"))
    unnamed = Node("projects/rat", NodeHeader(id=uuid4()))

    assert named.name == "Rat"
    assert unnamed.name == "rat"

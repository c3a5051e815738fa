"""Render markdown node content with rat directives into part trees."""

from rat_graph.core.render.part import Part, PartType
from rat_graph.core.render.renderer import DocumentRenderer
from rat_graph.models.node import Node, NodeHeader
from rat_graph.providers.filesystem import FilesystemProvider
from rat_graph.urlresolve import UrlResolver

__all__ = ["DocumentRenderer", "FilesystemProvider", "Node", "NodeHeader", "Part", "PartType", "UrlResolver"]

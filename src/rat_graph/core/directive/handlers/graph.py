"""Subtree listing: nested lists of links to the invoking node's descendants."""

from typing import TYPE_CHECKING

from rat_graph.core.directive.args import GraphArgs
from rat_graph.core.directive.token import Directive
from rat_graph.core.render.part import Part, PartType
from rat_graph.core.tree.navigation import get_leafs
from rat_graph.models.node import Node, view_url
from rat_graph.protocols import GraphProvider

if TYPE_CHECKING:
    from rat_graph.core.directive.render import DirectiveContext


def render(part: Part, directive: Directive, ctx: "DirectiveContext") -> None:
    options = directive.typed_options(GraphArgs)
    _render_level(part, ctx.node, ctx.provider, options.depth, 0)


def _render_level(part: Part, node: Node, provider: GraphProvider, limit: int | None, level: int) -> None:
    if limit is not None and level >= limit:
        return

    children = get_leafs(provider, node)
    if not children:
        return

    list_part = part.add(Part(PartType.LIST, {"ordered": False}))
    for child in children:
        item = list_part.add(Part(PartType.LIST_ITEM))
        item.add(
            Part(
                PartType.GRAPH_LINK,
                {"title": child.name, "destination": view_url(child.path)},
            )
        )
        _render_level(item, child, provider, limit, level + 1)

"""Kanban board: one column per listed node, one card per child."""

from typing import TYPE_CHECKING

from rat_graph.core.directive.args import KanbanArgs
from rat_graph.core.directive.token import Directive
from rat_graph.core.render.part import Part, PartType
from rat_graph.core.tree.navigation import get_leafs
from rat_graph.models.node import path_name

if TYPE_CHECKING:
    from rat_graph.core.directive.render import DirectiveContext


def render(part: Part, directive: Directive, ctx: "DirectiveContext") -> None:
    options = directive.typed_options(KanbanArgs)

    board = Part(PartType.KANBAN)
    for column_id in options.columns:
        column_node = ctx.provider.get_by_id(column_id)
        column = board.add(
            Part(
                PartType.KANBAN_COLUMN,
                {"id": str(column_node.id), "name": column_node.name, "path": column_node.path},
            )
        )

        for child in get_leafs(ctx.provider, column_node):
            card = column.add(
                Part(
                    PartType.KANBAN_CARD,
                    {"id": str(child.id), "nameFromPath": path_name(child.path), "path": child.path},
                )
            )
            ctx.renderer.render(card, child, child.content)

    part.add(board)

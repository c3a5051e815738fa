"""Dispatch of parsed directives to their handlers."""

from collections.abc import Callable
from dataclasses import dataclass

from rat_graph.core.directive.args import DirectiveType
from rat_graph.core.directive.handlers import embed, graph, kanban, todo, version
from rat_graph.core.directive.token import Directive
from rat_graph.core.render.part import Part
from rat_graph.models.node import Node
from rat_graph.protocols import ContentRenderer, GraphProvider, UrlPrefixer


@dataclass(frozen=True)
class DirectiveContext:
    """Everything a handler may use besides its own arguments."""

    node: Node
    provider: GraphProvider
    renderer: ContentRenderer
    url_prefixer: UrlPrefixer
    version: str


Handler = Callable[[Part, Directive, DirectiveContext], None]

HANDLERS: dict[DirectiveType, Handler] = {
    DirectiveType.GRAPH: graph.render,
    DirectiveType.TODO: todo.render,
    DirectiveType.KANBAN: kanban.render,
    DirectiveType.EMBED: embed.render,
    DirectiveType.VERSION: version.render,
}


def render_directive(part: Part, directive: Directive, ctx: DirectiveContext) -> None:
    """Render directive under part.

    Handlers raise on failure and may leave partial output in part; callers
    wanting all-or-nothing output render into a scratch part.
    """
    HANDLERS[directive.type](part, directive, ctx)

"""Version stamp: the running server version as inline code."""

from typing import TYPE_CHECKING

from rat_graph.core.directive.token import Directive
from rat_graph.core.render.part import Part, PartType

if TYPE_CHECKING:
    from rat_graph.core.directive.render import DirectiveContext


def render(part: Part, directive: Directive, ctx: "DirectiveContext") -> None:
    part.add(Part(PartType.CODE, {"text": ctx.version}))

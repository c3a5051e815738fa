from typing import TYPE_CHECKING

from rat_graph.core.directive.args import EmbedArgs
from rat_graph.core.directive.token import Directive
from rat_graph.core.render.part import Part, PartType

if TYPE_CHECKING:
    from rat_graph.core.directive.render import DirectiveContext


def render(part: Part, directive: Directive, ctx: "DirectiveContext") -> None:
    """Emit an embed leaf with the url rooted at the file endpoint when relative."""
    options = directive.typed_options(EmbedArgs)
    part.add(Part(PartType.EMBED, {"url": ctx.url_prefixer.prefix_resolver_endpoint(options.url)}))

"""Checklist aggregation over one or more subtrees."""

from typing import TYPE_CHECKING
from uuid import UUID

from loguru import logger

from rat_graph.core.directive.args import TodoArgs
from rat_graph.core.directive.token import Directive
from rat_graph.core.render.part import Part
from rat_graph.core.todo.checklist import Checklist, find_checklists, render_checklist
from rat_graph.core.todo.filter import filter_has, filter_value
from rat_graph.core.todo.sort import sort_checklists
from rat_graph.core.tree.navigation import collect_ids, walk
from rat_graph.models.node import Node
from rat_graph.protocols import GraphProvider

if TYPE_CHECKING:
    from rat_graph.core.directive.render import DirectiveContext


def render(part: Part, directive: Directive, ctx: "DirectiveContext") -> None:
    options = directive.typed_options(TodoArgs)

    checklists = collect_checklists(ctx.provider, options.include_sources, options.exclude_sources)
    checklists = select_checklists(checklists, options)

    for checklist in checklists:
        render_checklist(part, checklist, ctx.node, ctx.renderer)


def collect_checklists(
    provider: GraphProvider,
    include: tuple[UUID, ...],
    exclude: tuple[UUID, ...] = (),
) -> list[Checklist]:
    """Gather checklists from the subtrees of include, minus the subtrees of exclude.

    Raises:
        NodeNotFoundError: A source ID does not resolve.
        TraversalError: Walking a subtree failed.
        ChecklistSyntaxError: A visited node holds an invalid checklist.
    """
    excluded: set[UUID] = set()
    for node_id in exclude:
        excluded |= collect_ids(provider, provider.get_by_id(node_id))

    tz = provider.timezone()
    checklists: list[Checklist] = []

    def visit(_depth: int, node: Node) -> bool:
        if node.id in excluded:
            return False
        checklists.extend(find_checklists(node, tz=tz))
        return True

    for node_id in include:
        if node_id in excluded:
            continue
        walk(provider, provider.get_by_id(node_id), visit)

    logger.debug("Collected {} checklist(s) from {} source(s)", len(checklists), len(include))
    return checklists


def select_checklists(checklists: list[Checklist], options: TodoArgs) -> list[Checklist]:
    """Apply done handling, presence filters, value filters and sorting, in that order."""
    kept: list[Checklist] = []
    for checklist in checklists:
        if not options.include_done_entries:
            checklist = checklist.without_done_entries()
        if not checklist.entries:
            continue
        if checklist.done and not options.include_done:
            continue
        kept.append(checklist)

    kept = filter_has(kept, options.filter_has)
    kept = filter_value(kept, options.filter_value)
    return sort_checklists(kept, options.sort)

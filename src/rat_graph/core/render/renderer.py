"""Render node content into a Part tree.

The markdown-it token stream is walked once, top to bottom. Opening tokens
enter a container part, closing tokens leave it and everything else becomes
a leaf under the open container. Directives and checklist blocks are handed
to their own renderers; when one of those fails, an error part takes its
place and the walk goes on.
"""

import re
from uuid import UUID

from loguru import logger
from markdown_it.token import Token

from rat_graph.config import server_version
from rat_graph.core.directive.render import DirectiveContext, render_directive
from rat_graph.core.directive.token import Directive
from rat_graph.core.render.parse import RAT_ERROR, RAT_TOKEN, parse
from rat_graph.core.render.part import Part, PartCursor, PartType, error_part
from rat_graph.core.todo.checklist import parse_checklist, render_checklist
from rat_graph.exceptions import RatError
from rat_graph.models.node import Node, view_url
from rat_graph.protocols import GraphProvider, UrlPrefixer

_ALIGN_RE = re.compile(r"text-align:\s*(\w+)")

# Containers that map onto a part type without attributes.
_SIMPLE_CONTAINERS: dict[str, PartType] = {
    "paragraph": PartType.PARAGRAPH,
    "list_item": PartType.LIST_ITEM,
    "table": PartType.TABLE,
    "thead": PartType.TABLE_HEADER,
    "tbody": PartType.TABLE_BODY,
    "tr": PartType.TABLE_ROW,
    "strong": PartType.STRONG,
}

GRAPHVIZ_LANGUAGE = "graphviz"
CHECKLIST_LANGUAGE = "todo"


class DocumentRenderer:
    """Turns markdown with directives into Part trees.

    One instance can render any number of documents. The same instance is
    handed to directive handlers for re-entrant rendering (kanban cards,
    checklist entries).
    """

    def __init__(
        self,
        provider: GraphProvider,
        *,
        url_resolver: UrlPrefixer,
        version: str | None = None,
    ) -> None:
        self.provider = provider
        self.url_resolver = url_resolver
        self.version = version if version is not None else server_version()

    def render_node(self, node: Node) -> Part:
        """Render a node's content into a new document part."""
        root = Part(PartType.DOCUMENT)
        self.render(root, node, node.content)
        return root

    def render(self, root: Part, node: Node, content: str) -> None:
        """Render content under root on behalf of node.

        Failures of single directives or checklist blocks are rendered as
        rat_error parts; this method itself does not raise for them.
        """
        cursor = PartCursor(root)
        self._walk(cursor, parse(content), node)

    def _walk(self, cursor: PartCursor, tokens: list[Token], node: Node) -> None:
        for token in tokens:
            if token.nesting == -1:
                cursor.exit()
            elif token.nesting == 1:
                kind = token.type.removesuffix("_open")
                cursor.enter(kind, self._container(kind, token, cursor))
            elif token.type == "inline":
                self._walk(cursor, token.children or [], node)
            elif token.type == "image":
                src = self.url_resolver.prefix_resolver_endpoint(str(token.attrGet("src") or ""))
                image = Part(PartType.IMAGE, {"src": src})
                cursor.enter("image", image)
                self._walk(cursor, token.children or [], node)
                cursor.exit()
            else:
                self._leaf(token, cursor, node)

    def _container(self, kind: str, token: Token, cursor: PartCursor) -> Part | None:
        """Return the part for an opening token; None keeps it out of the output."""
        # Paragraphs inside list items are not part of the output.
        if kind == "paragraph" and cursor.current_kind == "list_item":
            return None

        if kind in _SIMPLE_CONTAINERS:
            return Part(_SIMPLE_CONTAINERS[kind])
        if kind == "heading":
            return Part(PartType.HEADING, {"level": int(token.tag[1:])})
        if kind == "bullet_list":
            return Part(PartType.LIST, {"ordered": False})
        if kind == "ordered_list":
            attributes: dict[str, object] = {"ordered": True}
            start = token.attrGet("start")
            if start is not None:
                attributes["start"] = int(start)
            return Part(PartType.LIST, attributes)
        if kind in ("th", "td"):
            return self._table_cell(kind, token)
        if kind == "link":
            return self._link(token)
        return Part(PartType.UNKNOWN, {"text": kind})

    @staticmethod
    def _table_cell(kind: str, token: Token) -> Part:
        attributes: dict[str, object] = {"header": kind == "th"}
        style = token.attrGet("style")
        if isinstance(style, str):
            m = _ALIGN_RE.search(style)
            if m:
                attributes["align"] = m.group(1)
        return Part(PartType.TABLE_CELL, attributes)

    def _link(self, token: Token) -> Part:
        """Links to a node ID become graph links; everything else stays a link."""
        href = str(token.attrGet("href") or "")
        title = str(token.attrGet("title") or "")
        try:
            target = self.provider.get_by_id(UUID(href))
        except ValueError:
            return Part(PartType.LINK, {"title": title, "destination": href})
        except RatError as e:
            logger.debug("Link target {} not resolved: {}", href, e)
            return Part(PartType.LINK, {"title": title, "destination": href})
        return Part(PartType.GRAPH_LINK, {"title": title or target.name, "destination": view_url(target.path)})

    def _leaf(self, token: Token, cursor: PartCursor, node: Node) -> None:
        kind = token.type
        if kind == "text":
            cursor.leaf(Part(PartType.TEXT, {"text": token.content}))
        elif kind == "softbreak":
            cursor.leaf(Part(PartType.TEXT, {"text": "\n"}))
        elif kind == "code_inline":
            cursor.leaf(Part(PartType.CODE, {"text": token.content}))
        elif kind == "html_inline":
            cursor.leaf(Part(PartType.SPAN, {"text": token.content}))
        elif kind == "html_block":
            cursor.leaf(Part(PartType.HTML_BLOCK, {"text": token.content}))
        elif kind == "hr":
            cursor.leaf(Part(PartType.HORIZONTAL_RULE))
        elif kind == "code_block":
            cursor.leaf(Part(PartType.CODE_BLOCK, {"text": token.content.strip(), "language": ""}))
        elif kind == "fence":
            self._fence(token, cursor, node)
        elif kind == RAT_TOKEN:
            self._directive(cursor.current, token.meta["directive"], node)
        elif kind == RAT_ERROR:
            cursor.leaf(error_part(token.meta["error"]))
        else:
            cursor.leaf(Part(PartType.UNKNOWN, {"text": kind}))

    def _fence(self, token: Token, cursor: PartCursor, node: Node) -> None:
        language = (token.info.split() or [""])[0]
        if language == GRAPHVIZ_LANGUAGE:
            cursor.leaf(Part(PartType.GRAPHVIZ, {"text": token.content}))
            return

        if language == CHECKLIST_LANGUAGE:
            try:
                checklist = parse_checklist(token.content, tz=self.provider.timezone())
            except RatError as e:
                logger.debug("Invalid checklist in {!r}: {}", node.path, e)
                cursor.leaf(error_part(f"failed to parse todo: {e}"))
                return
            render_checklist(cursor.current, checklist, node, self)
            return

        cursor.leaf(Part(PartType.CODE_BLOCK, {"text": token.content.strip(), "language": language}))

    def _directive(self, part: Part, directive: Directive, node: Node) -> None:
        """Render directive under part, or an error part in its place.

        Output goes to a scratch part first so a handler failing midway
        leaves nothing half-rendered behind.
        """
        scratch = Part(PartType.DOCUMENT)
        ctx = DirectiveContext(
            node=node,
            provider=self.provider,
            renderer=self,
            url_prefixer=self.url_resolver,
            version=self.version,
        )
        try:
            render_directive(scratch, directive, ctx)
        except RatError as e:
            logger.debug("Failed to render {} directive in {!r}: {}", directive.type, node.path, e)
            part.add(error_part(f"failed to render {directive.type} directive: {e}"))
            return
        except Exception as e:
            logger.exception("Unexpected error rendering {} directive in {!r}", directive.type, node.path)
            part.add(error_part(f"failed to render {directive.type} directive: {e}"))
            return

        part.children.extend(scratch.children)

"""Rendering decisions for the MDX node kinds.

Prose stays HTML so the linter checks it. Everything else MDX adds (ESM,
expressions, JSX) becomes escaped code, except prose components of the detected
framework, whose children are unwrapped into a marked container.
"""

from loguru import logger
from markdown_it.tree import SyntaxTreeNode

from mdx2vast.exceptions import ParserContractError
from mdx2vast.markdown.mdx import NODE_KINDS, NodeKind
from mdx2vast.markdown.models import Comment, Document, Element, Position, RenderNode, Text
from mdx2vast.markdown.transformer import Handler, HtmlTransformer


def source_slice(document: Document, node: SyntaxTreeNode) -> str:
    """Return the exact source text a node was parsed from."""
    start, end = node.meta.get("start"), node.meta.get("end")
    if start is None or end is None:
        raise ParserContractError(node.type)
    return document.slice(Position(start=start, end=end))


def escape_as_code(source: str, kind: NodeKind) -> list[RenderNode]:
    """Render source as opaque code: a block when it spans lines, inline otherwise."""
    code = Element(tag="code", attributes={"class": f"mdxNode {kind}"}, children=[Text(value=source)])
    if "\n" in source:
        return [Element(tag="pre", children=[code])]
    return [code]


def _is_comment(source: str) -> bool:
    return source.startswith("{/*") and source.endswith("*/}")


def create_expression_handler(document: Document) -> Handler:
    """Handler for ESM statements and expressions, which never unwrap."""

    def handle(node: SyntaxTreeNode, transformer: HtmlTransformer) -> list[RenderNode]:
        source = source_slice(document, node)
        kind = NODE_KINDS[node.type]
        if kind is NodeKind.FLOW_EXPRESSION and _is_comment(source):
            return [Comment(value=source[3:-3])]
        return escape_as_code(source, kind)

    return handle


def create_jsx_handler(document: Document, prose_components: frozenset[str] | None) -> Handler:
    """Handler for JSX elements.

    An element is unwrapped when its name is one of the prose components and it
    has children; its children then go through the transformer like any other
    markdown. Everything else (including fragments) is escaped whole.
    """

    def handle(node: SyntaxTreeNode, transformer: HtmlTransformer) -> list[RenderNode]:
        source = source_slice(document, node)
        kind = NODE_KINDS[node.type]
        name = node.meta.get("name")

        if prose_components is not None and node.children and name in prose_components:
            logger.debug(f"Unwrapping <{name}> ({kind})")
            return [
                Element(
                    tag="div",
                    attributes={"class": f"mdxNode {kind}", "data-component": name},
                    children=transformer.render_children(node),
                )
            ]

        logger.debug(f"Escaping <{name or ''}> ({kind})")
        return escape_as_code(source, kind)

    return handle


def create_handlers(document: Document, prose_components: frozenset[str] | None) -> dict[str, Handler]:
    """Handlers for exactly the five MDX node types."""
    expression_handler = create_expression_handler(document)
    jsx_handler = create_jsx_handler(document, prose_components)
    return {
        "mdxjs_esm": expression_handler,
        "mdx_flow_expression": expression_handler,
        "mdx_text_expression": expression_handler,
        "mdx_jsx_flow_element": jsx_handler,
        "mdx_jsx_text_element": jsx_handler,
    }

"""Serialize a render tree to an HTML string."""

from markdown_it.common.utils import escapeHtml

from mdx2vast.markdown.models import Comment, Element, RenderNode, Root, Text

VOID_ELEMENTS = frozenset({"br", "hr", "img"})


def _render_attributes(attributes: dict[str, str]) -> str:
    return "".join(f' {name}="{escapeHtml(value)}"' for name, value in attributes.items())


def render_html(node: Root | RenderNode) -> str:
    """Render a node and its descendants to HTML."""
    if isinstance(node, Text):
        return escapeHtml(node.value)
    if isinstance(node, Comment):
        return f"<!--{node.value}-->"
    if isinstance(node, Root):
        return "".join(render_html(child) for child in node.children)

    opening = f"<{node.tag}{_render_attributes(node.attributes)}>"
    if node.tag in VOID_ELEMENTS:
        return opening
    return f"{opening}{''.join(render_html(child) for child in node.children)}</{node.tag}>"

"""MDX parsing and transformation to an HTML render tree."""

from mdx2vast.markdown.mdx import NodeKind, mdx_plugin
from mdx2vast.markdown.models import Comment, Document, Element, Position, RenderNode, Root, Text
from mdx2vast.markdown.parser import parse_markdown
from mdx2vast.markdown.serializer import render_html
from mdx2vast.markdown.transformer import (
    HtmlTransformer,
    transform_to_html_tree,
)

__all__ = [
    # Parser
    "parse_markdown",
    "mdx_plugin",
    "NodeKind",
    # Transformer
    "HtmlTransformer",
    "transform_to_html_tree",
    # Serializer
    "render_html",
    # Models
    "Document",
    "Position",
    "Root",
    "RenderNode",
    "Element",
    "Text",
    "Comment",
]

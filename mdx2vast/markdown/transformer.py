"""Transform markdown AST to an HTML render tree.

Walks the markdown-it-py SyntaxTreeNode and produces the same element structure
mdast-util-to-hast gives for markdown. Node types can be taken over by handlers,
which receive the transformer so they can render their children through it.
"""

from collections.abc import Callable, Mapping

from markdown_it.tree import SyntaxTreeNode

from mdx2vast.markdown.models import Comment, Element, RenderNode, Root, Text

Handler = Callable[[SyntaxTreeNode, "HtmlTransformer"], list[RenderNode]]


def _newline() -> Text:
    return Text(value="\n")


def wrap(nodes: list[RenderNode], loose: bool = False) -> list[RenderNode]:
    """Join nodes with line breaks; loose also adds one at each end."""
    result: list[RenderNode] = [_newline()] if loose else []
    for index, node in enumerate(nodes):
        if index:
            result.append(_newline())
        result.append(node)
    if loose and nodes:
        result.append(_newline())
    return result


def plain_text(node: SyntaxTreeNode) -> str:
    """Flatten inline nodes to text, as used for image alt attributes."""
    if node.type in ("softbreak", "hardbreak"):
        return "\n"
    if node.children:
        return "".join(plain_text(child) for child in node.children)
    return node.content or ""


class HtmlTransformer:
    """Transforms markdown AST to a render tree.

    Handlers registered for a node type replace the default rendering of that type.
    """

    def __init__(self, handlers: Mapping[str, Handler] | None = None):
        self.handlers = dict(handlers or {})
        self._defaults: dict[str, Callable[[SyntaxTreeNode], list[RenderNode]]] = {
            "paragraph": self._transform_paragraph,
            "heading": self._transform_heading,
            "blockquote": self._transform_blockquote,
            "bullet_list": self._transform_list,
            "ordered_list": self._transform_list,
            "list_item": self._transform_list_item,
            "fence": self._transform_code,
            "hr": self._transform_hr,
            "math_block": self._transform_math_block,
            "math_block_label": self._transform_math_block,
            "front_matter": self._transform_front_matter,
            "text": self._transform_text,
            "softbreak": self._transform_softbreak,
            "hardbreak": self._transform_hardbreak,
            "em": self._transform_emphasis,
            "strong": self._transform_emphasis,
            "code_inline": self._transform_code_inline,
            "link": self._transform_link,
            "image": self._transform_image,
            "math_inline": self._transform_math_inline,
        }

    def transform(self, ast: SyntaxTreeNode) -> Root:
        """Transform AST root to a render tree root."""
        return Root(children=wrap(self.render_children(ast)))

    def render(self, node: SyntaxTreeNode) -> list[RenderNode]:
        """Render a single node. Returns a list because a node may render to several (or none)."""
        handler = self.handlers.get(node.type)
        if handler is not None:
            return handler(node, self)
        default = self._defaults.get(node.type)
        if default is not None:
            return default(node)
        # Unknown nodes (including "inline" containers) render their children
        return self.render_children(node)

    def render_children(self, node: SyntaxTreeNode) -> list[RenderNode]:
        """Render all children of a node, in order."""
        nodes: list[RenderNode] = []
        for child in node.children:
            nodes.extend(self.render(child))
        return nodes

    # === BLOCKS ===

    def _transform_paragraph(self, node: SyntaxTreeNode) -> list[RenderNode]:
        # Tight list items hide their paragraphs
        if node.hidden:
            return self.render_children(node)
        return [Element(tag="p", children=self.render_children(node))]

    def _transform_heading(self, node: SyntaxTreeNode) -> list[RenderNode]:
        return [Element(tag=node.tag, children=self.render_children(node))]

    def _transform_blockquote(self, node: SyntaxTreeNode) -> list[RenderNode]:
        return [Element(tag="blockquote", children=wrap(self.render_children(node), loose=True))]

    def _transform_list(self, node: SyntaxTreeNode) -> list[RenderNode]:
        attributes = {}
        start = node.attrs.get("start")
        if node.type == "ordered_list" and start is not None and int(start) != 1:
            attributes["start"] = str(start)
        tag = "ol" if node.type == "ordered_list" else "ul"
        return [Element(tag=tag, attributes=attributes, children=wrap(self.render_children(node), loose=True))]

    def _transform_list_item(self, node: SyntaxTreeNode) -> list[RenderNode]:
        loose = any(child.type == "paragraph" and not child.hidden for child in node.children)
        children: list[RenderNode] = []
        for index, child in enumerate(node.children):
            if loose or index != 0 or child.type != "paragraph":
                children.append(_newline())
            children.extend(self.render(child))
        if node.children and (loose or node.children[-1].type != "paragraph"):
            children.append(_newline())
        return [Element(tag="li", children=children)]

    def _transform_code(self, node: SyntaxTreeNode) -> list[RenderNode]:
        info = node.info.strip() if node.info else ""
        attributes = {"class": f"language-{info.split()[0]}"} if info else {}
        code = Element(tag="code", attributes=attributes, children=[Text(value=node.content)])
        return [Element(tag="pre", children=[code])]

    def _transform_hr(self, node: SyntaxTreeNode) -> list[RenderNode]:
        return [Element(tag="hr")]

    def _transform_math_block(self, node: SyntaxTreeNode) -> list[RenderNode]:
        code = Element(
            tag="code",
            attributes={"class": "language-math math-display"},
            children=[Text(value=node.content.strip("\n"))],
        )
        return [Element(tag="pre", children=[code])]

    def _transform_front_matter(self, node: SyntaxTreeNode) -> list[RenderNode]:
        fence = node.markup or "---"
        return [Comment(value=f"{fence}\n{node.content}\n{fence}")]

    # === INLINE ===

    def _transform_text(self, node: SyntaxTreeNode) -> list[RenderNode]:
        return [Text(value=node.content)]

    def _transform_softbreak(self, node: SyntaxTreeNode) -> list[RenderNode]:
        return [_newline()]

    def _transform_hardbreak(self, node: SyntaxTreeNode) -> list[RenderNode]:
        return [Element(tag="br"), _newline()]

    def _transform_emphasis(self, node: SyntaxTreeNode) -> list[RenderNode]:
        return [Element(tag=node.tag, children=self.render_children(node))]

    def _transform_code_inline(self, node: SyntaxTreeNode) -> list[RenderNode]:
        return [Element(tag="code", children=[Text(value=node.content)])]

    def _transform_link(self, node: SyntaxTreeNode) -> list[RenderNode]:
        attributes = {"href": str(node.attrs.get("href", ""))}
        if node.attrs.get("title"):
            attributes["title"] = str(node.attrs["title"])
        return [Element(tag="a", attributes=attributes, children=self.render_children(node))]

    def _transform_image(self, node: SyntaxTreeNode) -> list[RenderNode]:
        attributes = {"src": str(node.attrs.get("src", "")), "alt": plain_text(node)}
        if node.attrs.get("title"):
            attributes["title"] = str(node.attrs["title"])
        return [Element(tag="img", attributes=attributes)]

    def _transform_math_inline(self, node: SyntaxTreeNode) -> list[RenderNode]:
        return [
            Element(
                tag="code",
                attributes={"class": "language-math math-inline"},
                children=[Text(value=node.content)],
            )
        ]


def transform_to_html_tree(ast: SyntaxTreeNode, handlers: Mapping[str, Handler] | None = None) -> Root:
    """Transform markdown AST to a render tree."""
    return HtmlTransformer(handlers).transform(ast)

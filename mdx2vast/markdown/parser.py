"""MDX parsing using markdown-it-py.

Configures markdown-it the way MDX configures micromark:
- CommonMark base, without indented code, raw HTML or autolinks
- YAML front matter
- Dollar math ($inline$ and $$display$$)
- MDX ESM, expressions and JSX (see mdx.py)
"""

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.front_matter import front_matter_plugin

from mdx2vast.markdown.mdx import mdx_plugin


def create_parser() -> MarkdownIt:
    """Create configured markdown-it parser."""
    md = MarkdownIt("commonmark")
    md.disable(["code", "html_block", "html_inline", "autolink"])
    front_matter_plugin(md)
    dollarmath_plugin(md)
    mdx_plugin(md)
    return md


# Singleton parser instance
_parser: MarkdownIt | None = None


def get_parser() -> MarkdownIt:
    """Get or create the singleton parser instance."""
    global _parser
    if _parser is None:
        _parser = create_parser()
    return _parser


def parse_markdown(text: str) -> SyntaxTreeNode:
    """Parse MDX text into AST.

    Args:
        text: MDX text to parse

    Returns:
        Root SyntaxTreeNode of the AST

    Raises:
        MdxSyntaxError: If JSX tags or expressions are malformed
    """
    parser = get_parser()
    tokens = parser.parse(text)
    return SyntaxTreeNode(tokens)

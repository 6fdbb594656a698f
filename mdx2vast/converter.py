"""MDX to Vale-ready HTML conversion."""

from loguru import logger

from mdx2vast.config import get_settings
from mdx2vast.frameworks import resolve_prose_components
from mdx2vast.handlers import create_handlers
from mdx2vast.markdown.models import Document
from mdx2vast.markdown.parser import parse_markdown
from mdx2vast.markdown.serializer import render_html
from mdx2vast.markdown.transformer import HtmlTransformer


def to_vale_ast(text: str, framework: str | None = None) -> str:
    """Convert MDX source to HTML the Vale linter can check.

    Args:
        text: MDX document
        framework: Framework id overriding auto-detection. When None, the
            MDX2VAST_FRAMEWORK environment variable is used instead.

    Returns:
        HTML string

    Raises:
        MdxSyntaxError: If the document is not valid MDX
    """
    document = Document.from_text(text)

    # Sampled once, so the whole document is rendered against one profile
    override = framework if framework is not None else get_settings().framework
    prose_components = resolve_prose_components(document.text, override)

    ast = parse_markdown(document.text)
    transformer = HtmlTransformer(create_handlers(document, prose_components))
    html = render_html(transformer.transform(ast))

    logger.debug(f"Converted {len(document.text)} chars of MDX to {len(html)} chars of HTML")
    return html

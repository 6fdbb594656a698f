"""Convert MDX documents to HTML for the Vale prose linter."""

from loguru import logger

from mdx2vast.converter import to_vale_ast
from mdx2vast.exceptions import Mdx2VastError, MdxSyntaxError, ParserContractError

__version__ = "0.4.0"

# Library code stays quiet unless an application opts in
logger.disable("mdx2vast")

__all__ = [
    "to_vale_ast",
    "Mdx2VastError",
    "MdxSyntaxError",
    "ParserContractError",
    "__version__",
]

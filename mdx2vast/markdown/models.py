"""Data models for the source document and the HTML render tree.

The render tree mirrors hast: elements with ordered attributes, text and
comments, under a single root. It is built by HtmlTransformer and turned into a
string by render_html.
"""

from typing import Literal

from markdown_it.rules_core.normalize import NEWLINES_RE, NULL_RE
from pydantic import BaseModel, ConfigDict, Field, model_validator

# === SOURCE ===


class Document(BaseModel):
    """The full source text of one MDX file."""

    model_config = ConfigDict(frozen=True)

    text: str

    @classmethod
    def from_text(cls, text: str) -> "Document":
        """Normalize line endings the same way markdown-it does, so offsets line up."""
        normalized = NEWLINES_RE.sub("\n", text)
        normalized = NULL_RE.sub("\uFFFD", normalized)
        return cls(text=normalized)

    def slice(self, position: "Position") -> str:
        return self.text[position.start : position.end]


class Position(BaseModel):
    """Character span of a node in the Document."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int

    @model_validator(mode="after")
    def _check_order(self) -> "Position":
        if self.end < self.start:
            raise ValueError(f"position end {self.end} precedes start {self.start}")
        return self


# === RENDER TREE ===


class Text(BaseModel):
    type: Literal["text"] = "text"
    value: str


class Comment(BaseModel):
    type: Literal["comment"] = "comment"
    value: str


class Element(BaseModel):
    type: Literal["element"] = "element"
    tag: str
    attributes: dict[str, str] = Field(default_factory=dict)
    children: list["RenderNode"] = Field(default_factory=list)


RenderNode = Element | Text | Comment

# Update forward references
Element.model_rebuild()


class Root(BaseModel):
    type: Literal["root"] = "root"
    children: list[RenderNode] = Field(default_factory=list)

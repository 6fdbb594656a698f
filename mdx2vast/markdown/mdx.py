"""MDX syntax for markdown-it: ESM statements, expressions and JSX elements.

Adds five token kinds on top of CommonMark:

- mdxjs_esm: `import`/`export` statements at document level
- mdx_flow_expression: a `{...}` expression standing alone on its lines
- mdx_text_expression: a `{...}` expression inside a paragraph
- mdx_jsx_flow_element: JSX tags standing alone on their lines; an opening tag
  owns every line up to its closing tag, which are parsed as markdown blocks
- mdx_jsx_text_element: JSX inside a paragraph; children are inline markdown

Every MDX token carries meta["start"] and meta["end"], the exact character span
of the construct in the (normalized) source. JSX tokens also carry meta["name"],
which is None for fragments.
"""

import re
from bisect import bisect_right
from dataclasses import dataclass
from enum import StrEnum

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from mdx2vast.exceptions import MdxSyntaxError


class NodeKind(StrEnum):
    """mdast names of the MDX node kinds, used as CSS class markers."""

    ESM = "mdxjsEsm"
    FLOW_EXPRESSION = "mdxFlowExpression"
    TEXT_EXPRESSION = "mdxTextExpression"
    JSX_FLOW_ELEMENT = "mdxJsxFlowElement"
    JSX_TEXT_ELEMENT = "mdxJsxTextElement"


NODE_KINDS: dict[str, NodeKind] = {
    "mdxjs_esm": NodeKind.ESM,
    "mdx_flow_expression": NodeKind.FLOW_EXPRESSION,
    "mdx_text_expression": NodeKind.TEXT_EXPRESSION,
    "mdx_jsx_flow_element": NodeKind.JSX_FLOW_ELEMENT,
    "mdx_jsx_text_element": NodeKind.JSX_TEXT_ELEMENT,
}

# Names may use member (a.b) or namespace (a:b) parts; hyphens allowed as in custom elements
_NAME_RE = re.compile(r"[A-Za-z_$][\w$-]*(?:[.:][A-Za-z_$][\w$-]*)*")
_ATTR_NAME_RE = re.compile(r"[A-Za-z_$][\w$-]*(?::[A-Za-z_$][\w$-]*)?")
_ESM_RE = re.compile(r"(?:import|export)(?=[\s{*])")
_FENCE_RE = re.compile(r"`{3,}|~{3,}")
_NEWLINE_RE = re.compile(r"\n")

_INLINE_MDX_TYPES = frozenset({"mdx_text_expression", "mdx_jsx_text_element_open"})


# === SCANNERS ===


@dataclass(frozen=True, slots=True)
class JsxTag:
    name: str | None  # None for fragments (<> and </>)
    start: int
    end: int
    closing: bool = False
    self_closing: bool = False

    @property
    def opening(self) -> bool:
        return not self.closing and not self.self_closing


def _skip_whitespace(src: str, pos: int, limit: int) -> int:
    while pos < limit and src[pos] in " \t\n":
        pos += 1
    return pos


def _skip_string(src: str, pos: int, limit: int) -> int | None:
    """Skip a JS string literal starting at pos. Only template literals may span lines."""
    quote = src[pos]
    pos += 1
    while pos < limit:
        char = src[pos]
        if char == "\\":
            pos += 2
            continue
        if char == quote:
            return pos + 1
        if char == "\n" and quote != "`":
            return None
        pos += 1
    return None


def find_expression_end(src: str, pos: int, limit: int) -> int | None:
    """Return the offset just past the `}` balancing the `{` at pos, or None.

    Braces inside string literals and comments do not count.
    """
    depth = 0
    while pos < limit:
        char = src[pos]
        if char in "\"'`":
            end = _skip_string(src, pos, limit)
            if end is None:
                return None
            pos = end
            continue
        if src.startswith("/*", pos):
            close = src.find("*/", pos + 2, limit)
            if close == -1:
                return None
            pos = close + 2
            continue
        if src.startswith("//", pos):
            newline = src.find("\n", pos, limit)
            if newline == -1:
                return None
            pos = newline
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1
    return None


def _scan_attribute_value(src: str, pos: int, limit: int) -> int | None:
    if pos >= limit:
        return None
    if src[pos] in "\"'":
        close = src.find(src[pos], pos + 1, limit)
        return close + 1 if close != -1 else None
    if src[pos] == "{":
        return find_expression_end(src, pos, limit)
    return None


def scan_jsx_tag(src: str, pos: int, limit: int) -> JsxTag | None:
    """Scan one JSX tag starting at pos (which must be `<`), or return None."""
    if pos >= limit or src[pos] != "<":
        return None

    index = pos + 1
    closing = index < limit and src[index] == "/"
    if closing:
        index += 1

    name = None
    match = _NAME_RE.match(src, index, limit)
    if match:
        name = match.group()
        index = match.end()
    elif index >= limit or src[index] != ">":
        # `<` not followed by a name or a fragment end: plain text
        return None

    while True:
        index = _skip_whitespace(src, index, limit)
        if index >= limit:
            return None
        char = src[index]
        if char == ">":
            return JsxTag(name=name, start=pos, end=index + 1, closing=closing)
        if char == "/":
            if closing:
                return None
            index = _skip_whitespace(src, index + 1, limit)
            if index < limit and src[index] == ">":
                return JsxTag(name=name, start=pos, end=index + 1, self_closing=True)
            return None
        # Closing tags and fragments take no attributes
        if closing or name is None:
            return None
        if char == "{":
            end = find_expression_end(src, index, limit)
            if end is None:
                return None
            index = end
            continue
        match = _ATTR_NAME_RE.match(src, index, limit)
        if match is None:
            return None
        index = _skip_whitespace(src, match.end(), limit)
        if index < limit and src[index] == "=":
            value_end = _scan_attribute_value(src, _skip_whitespace(src, index + 1, limit), limit)
            if value_end is None:
                return None
            index = value_end


def _scan_tag_line(src: str, pos: int, limit: int) -> tuple[list[JsxTag], int] | None:
    """Scan a run of tags that is the only thing up to the end of its line.

    Returns the tags and the offset of the line end, or None if anything else is on the line.
    """
    tags: list[JsxTag] = []
    while True:
        tag = scan_jsx_tag(src, pos, limit)
        if tag is None:
            return None
        tags.append(tag)
        pos = tag.end
        while pos < limit and src[pos] in " \t":
            pos += 1
        if pos >= limit or src[pos] == "\n":
            return tags, pos
        if src[pos] != "<":
            return None


def _tags_balance(tags: list[JsxTag]) -> bool:
    stack: list[str | None] = []
    for tag in tags:
        if tag.opening:
            stack.append(tag.name)
        elif tag.closing and (not stack or stack.pop() != tag.name):
            return False
    return not stack


def _closes_inner(tags: list[JsxTag]) -> bool:
    """True when tags leave nothing open. Closers without an opener among them close earlier elements."""
    stack: list[str | None] = []
    for tag in tags:
        if tag.opening:
            stack.append(tag.name)
        elif tag.closing and stack and stack.pop() != tag.name:
            return False
    return not stack


def _skip_code_span(src: str, pos: int, limit: int) -> int:
    """Skip a backtick code span; an unmatched run of backticks is skipped as literal text."""
    run_end = pos
    while run_end < limit and src[run_end] == "`":
        run_end += 1
    marker = src[pos:run_end]
    search = run_end
    while True:
        found = src.find(marker, search, limit)
        if found == -1:
            return run_end
        end = found + len(marker)
        if end < limit and src[end] == "`":
            # A longer run of backticks does not close this span
            while end < limit and src[end] == "`":
                end += 1
            search = end
            continue
        return end


def _find_closing_tag(src: str, opener: JsxTag, limit: int) -> JsxTag | None:
    """Find the tag closing opener within src[opener.end:limit], honouring nesting."""
    depth = 1
    pos = opener.end
    while pos < limit:
        char = src[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "`":
            pos = _skip_code_span(src, pos, limit)
            continue
        if char == "{":
            end = find_expression_end(src, pos, limit)
            pos = end if end is not None else pos + 1
            continue
        if char == "<":
            tag = scan_jsx_tag(src, pos, limit)
            if tag is not None:
                if tag.name == opener.name:
                    if tag.opening:
                        depth += 1
                    elif tag.closing:
                        depth -= 1
                        if depth == 0:
                            return tag
                pos = tag.end
                continue
        pos += 1
    return None


# === BLOCK RULES ===


def _line_at(state: StateBlock, offset: int, line: int) -> int:
    """Index of the first line, from `line` on, that contains offset."""
    while state.eMarks[line] < offset:
        line += 1
    return line


def _esm(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    # ESM only exists at document level, unindented
    if state.level != 0 or state.sCount[startLine] != 0:
        return False
    pos = state.bMarks[startLine] + state.tShift[startLine]
    if not _ESM_RE.match(state.src, pos, state.eMarks[startLine]):
        return False
    if silent:
        return True

    # The statement runs until the next blank line
    nextLine = startLine + 1
    while nextLine < endLine and not state.isEmpty(nextLine):
        nextLine += 1

    end = state.eMarks[nextLine - 1]
    token = state.push("mdxjs_esm", "", 0)
    token.map = [startLine, nextLine]
    token.content = state.src[pos:end]
    token.meta = {"start": pos, "end": end}
    state.line = nextLine
    return True


def _flow_expression(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    pos = state.bMarks[startLine] + state.tShift[startLine]
    if pos >= state.eMarks[startLine] or state.src[pos] != "{":
        return False

    limit = state.eMarks[endLine - 1]
    end = find_expression_end(state.src, pos, limit)
    if end is None:
        # Let the inline rule report the unterminated expression
        return False

    # Only whitespace may follow on the closing line, otherwise it's a paragraph
    after = end
    while after < limit and state.src[after] in " \t":
        after += 1
    if after < limit and state.src[after] != "\n":
        return False
    if silent:
        return True

    lastLine = _line_at(state, end, startLine)
    token = state.push("mdx_flow_expression", "", 0)
    token.map = [startLine, lastLine + 1]
    token.content = state.src[pos:end]
    token.meta = {"start": pos, "end": end}
    state.line = lastLine + 1
    return True


@dataclass(frozen=True, slots=True)
class _ClosingRun:
    """The run of tags, starting on line, that holds a region's closing tag."""

    line: int
    tags: list[JsxTag]
    index: int
    end: int

    @property
    def closer(self) -> JsxTag:
        return self.tags[self.index]


def _find_closing_line(state: StateBlock, opener: JsxTag, line: int, endLine: int) -> _ClosingRun | None:
    """Find the tag run holding the tag that closes opener.

    Only tag lines count, so text-level uses of the same component inside
    paragraphs do not disturb the nesting depth. Fenced code is skipped.
    """
    depth = 1
    fence: str | None = None
    limit = state.eMarks[endLine - 1]

    while line < endLine:
        if state.isEmpty(line):
            line += 1
            continue

        pos = state.bMarks[line] + state.tShift[line]
        text = state.src[pos : state.eMarks[line]]

        fence_match = _FENCE_RE.match(text)
        if fence is not None:
            marker = fence_match.group() if fence_match else ""
            if marker[:1] == fence[0] and len(marker) >= len(fence) and not text[len(marker) :].strip():
                fence = None
            line += 1
            continue
        if fence_match:
            fence = fence_match.group()
            line += 1
            continue

        scanned = _scan_tag_line(state.src, pos, limit) if text.startswith("<") else None
        if scanned is None:
            line += 1
            continue

        tags, lineEnd = scanned
        for index, tag in enumerate(tags):
            if tag.name != opener.name:
                continue
            if tag.opening:
                depth += 1
            elif tag.closing:
                depth -= 1
                if depth == 0:
                    # Tags before the closer may only close elements inside the
                    # region; tags after it must balance on their own
                    if _closes_inner(tags[:index]) and _tags_balance(tags[index + 1 :]):
                        return _ClosingRun(line=line, tags=tags, index=index, end=lineEnd)
                    return None
        line = _line_at(state, lineEnd, line) + 1

    return None


def _push_region(state: StateBlock, opener: JsxTag, startLine: int, contentStart: int, run: _ClosingRun) -> None:
    closer = run.closer
    closerLine = _line_at(state, closer.start, run.line)
    lastLine = _line_at(state, run.end, closerLine)

    token = state.push("mdx_jsx_flow_element_open", "", 1)
    token.map = [startLine, lastLine + 1]
    token.meta = {"name": opener.name, "start": opener.start, "end": closer.end}

    # Tags ahead of the closer on its line close elements inside the region,
    # so that line is parsed too, cut off where the closer starts
    contentEnd = closerLine + 1 if run.index else run.line

    # Parse the region relative to its least indented line, so indentation
    # inside components never changes the meaning of the markdown
    indents = [state.sCount[line] for line in range(contentStart, contentEnd) if not state.isEmpty(line)]
    if indents:
        oldLineMax, oldBlkIndent, oldLineEnd = state.lineMax, state.blkIndent, state.eMarks[closerLine]
        state.lineMax = contentEnd
        state.blkIndent = min(indents)
        if run.index:
            state.eMarks[closerLine] = closer.start
        state.md.block.tokenize(state, contentStart, contentEnd)
        state.lineMax, state.blkIndent = oldLineMax, oldBlkIndent
        state.eMarks[closerLine] = oldLineEnd

    token = state.push("mdx_jsx_flow_element_close", "", -1)
    token.meta = {"name": opener.name}

    trailing = run.tags[run.index + 1 :]
    if trailing:
        _push_tag_run(state, trailing, closerLine, lastLine)
    state.line = lastLine + 1


def _push_tag_run(state: StateBlock, tags: list[JsxTag], startLine: int, lastLine: int) -> None:
    """Emit a balanced run of tags found on a single line."""
    openers: list[Token] = []
    for tag in tags:
        if tag.closing:
            openers.pop().meta["end"] = tag.end
            token = state.push("mdx_jsx_flow_element_close", "", -1)
            token.meta = {"name": tag.name}
            continue

        token = state.push("mdx_jsx_flow_element_open", "", 1)
        token.map = [startLine, lastLine + 1]
        token.meta = {"name": tag.name, "start": tag.start, "end": tag.end}
        if tag.self_closing:
            closer = state.push("mdx_jsx_flow_element_close", "", -1)
            closer.meta = {"name": tag.name}
        else:
            openers.append(token)


def _jsx_flow(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    pos = state.bMarks[startLine] + state.tShift[startLine]
    if pos >= state.eMarks[startLine] or state.src[pos] != "<":
        return False

    scanned = _scan_tag_line(state.src, pos, state.eMarks[endLine - 1])
    if scanned is None:
        return False
    tags, lineEnd = scanned
    first = tags[0]

    if len(tags) == 1 and first.closing:
        if silent:
            return True
        raise MdxSyntaxError(f"Unexpected closing tag `{state.src[first.start : first.end]}`", line=startLine + 1)

    if len(tags) == 1 and first.opening:
        if silent:
            return True
        lastLine = _line_at(state, lineEnd, startLine)
        found = _find_closing_line(state, first, lastLine + 1, endLine)
        if found is None:
            raise MdxSyntaxError(
                f"Expected a closing tag for `{state.src[first.start : first.end]}`", line=startLine + 1
            )
        _push_region(state, first, startLine, lastLine + 1, found)
        return True

    # A self-closing tag, or several tags that must balance on this line
    if not _tags_balance(tags):
        return False
    if silent:
        return True
    lastLine = _line_at(state, lineEnd, startLine)
    _push_tag_run(state, tags, startLine, lastLine)
    state.line = lastLine + 1
    return True


# === INLINE RULES ===


def _jsx_text(state: StateInline, silent: bool) -> bool:
    start = state.pos
    if state.src[start] != "<":
        return False
    tag = scan_jsx_tag(state.src, start, state.posMax)
    if tag is None:
        return False

    if tag.closing:
        if silent:
            return False
        raise MdxSyntaxError(f"Unexpected closing tag `{state.src[tag.start : tag.end]}`")

    if tag.self_closing:
        if not silent:
            token = state.push("mdx_jsx_text_element_open", "", 1)
            token.meta = {"name": tag.name, "start": tag.start, "end": tag.end}
            state.push("mdx_jsx_text_element_close", "", -1).meta = {"name": tag.name}
        state.pos = tag.end
        return True

    closer = _find_closing_tag(state.src, tag, state.posMax)
    if closer is None:
        if silent:
            return False
        raise MdxSyntaxError(f"Expected a closing tag for `{state.src[tag.start : tag.end]}`")

    if not silent:
        token = state.push("mdx_jsx_text_element_open", "", 1)
        token.meta = {"name": tag.name, "start": tag.start, "end": closer.end}

        oldMax = state.posMax
        state.pos = tag.end
        state.posMax = closer.start
        state.md.inline.tokenize(state)
        state.posMax = oldMax

        state.push("mdx_jsx_text_element_close", "", -1).meta = {"name": tag.name}

    state.pos = closer.end
    return True


def _text_expression(state: StateInline, silent: bool) -> bool:
    start = state.pos
    if state.src[start] != "{":
        return False
    end = find_expression_end(state.src, start, state.posMax)
    if end is None:
        if silent:
            return False
        raise MdxSyntaxError("Could not find the end of the `{` expression")

    if not silent:
        token = state.push("mdx_text_expression", "", 0)
        token.content = state.src[start:end]
        token.meta = {"start": start, "end": end}
    state.pos = end
    return True


# === POSITIONS ===


def _inline_anchors(src: str, line_starts: list[int], content: str, first_line: int) -> tuple[list[int], list[int]]:
    """Map each line of an inline token's content to its offset in the document.

    Block rules hand inline content over as a suffix of each source line (container
    markers and indentation removed), with the whole content stripped at both ends.
    Returns parallel lists: content offset of each line, document offset of each line.
    """
    content_starts: list[int] = []
    doc_starts: list[int] = []
    parts = content.split("\n")
    offset = 0
    for index, part in enumerate(parts):
        line_no = first_line + index
        if line_no >= len(line_starts):
            break
        line_start = line_starts[line_no]
        line_end = line_starts[line_no + 1] - 1 if line_no + 1 < len(line_starts) else len(src)
        line = src[line_start:line_end]
        if index == len(parts) - 1:
            line = line.rstrip()
        column = len(line) - len(part) if line.endswith(part) else max(line.find(part), 0)
        content_starts.append(offset)
        doc_starts.append(line_start + column)
        offset += len(part) + 1
    return content_starts, doc_starts


def _anchor_positions(state: StateCore) -> None:
    """Rebase inline MDX offsets from inline-content coordinates onto the document."""
    line_starts = [0, *(match.end() for match in _NEWLINE_RE.finditer(state.src))]

    for token in state.tokens:
        if token.type != "inline" or not token.children or token.map is None:
            continue
        children = [child for child in token.children if child.type in _INLINE_MDX_TYPES]
        if not children:
            continue

        content_starts, doc_starts = _inline_anchors(state.src, line_starts, token.content, token.map[0])

        def locate(offset: int) -> int:
            index = bisect_right(content_starts, offset) - 1
            return doc_starts[index] + offset - content_starts[index]

        for child in children:
            child.meta["start"] = locate(child.meta["start"])
            child.meta["end"] = locate(child.meta["end"] - 1) + 1


def mdx_plugin(md: MarkdownIt) -> None:
    """Register MDX block, inline and core rules on a markdown-it instance."""
    interrupts = {"alt": ["paragraph", "reference", "blockquote"]}
    md.block.ruler.before("fence", "mdxjs_esm", _esm)
    md.block.ruler.before("fence", "mdx_flow_expression", _flow_expression, interrupts)
    md.block.ruler.before("fence", "mdx_jsx_flow", _jsx_flow, interrupts)
    md.inline.ruler.before("html_inline", "mdx_jsx_text", _jsx_text)
    md.inline.ruler.before("html_inline", "mdx_text_expression", _text_expression)
    md.core.ruler.after("inline", "mdx_positions", _anchor_positions)

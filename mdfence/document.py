"""
Markdown Document Adapter - Positioned node tree over markdown-it-py

Parses Markdown with markdown-it-py and converts its syntax tree into a small,
positioned node tree: every node carries a type discriminator and a
line/column/offset range in the ORIGINAL text, fenced code nodes carry their
language tag, meta string and literal body.

markdown-it-py normalises line endings before parsing, so its token line maps
are resolved against a line index built over the raw text. Offsets are Python
string indices (Unicode code points).

Author: mdfence maintainers | 2026-10-19
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode


class NodeType(str, Enum):
    """Markdown node types exposed to the extractor."""
    ROOT = "root"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE = "code"
    INDENTED_CODE = "indented_code"
    HTML = "html"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    THEMATIC_BREAK = "thematic_break"
    INLINE = "inline"
    TEXT = "text"
    OTHER = "other"


# markdown-it-py token type -> NodeType
_TYPE_MAP: Dict[str, NodeType] = {
    "root": NodeType.ROOT,
    "heading": NodeType.HEADING,
    "paragraph": NodeType.PARAGRAPH,
    "fence": NodeType.CODE,
    "code_block": NodeType.INDENTED_CODE,
    "html_block": NodeType.HTML,
    "html_inline": NodeType.HTML,
    "blockquote": NodeType.BLOCKQUOTE,
    "bullet_list": NodeType.LIST,
    "ordered_list": NodeType.LIST,
    "list_item": NodeType.LIST_ITEM,
    "table": NodeType.TABLE,
    "hr": NodeType.THEMATIC_BREAK,
    "inline": NodeType.INLINE,
    "text": NodeType.TEXT,
}

# Before a code fence, blockquote markers count as indentation too.
LEADING_INDENT_RE = re.compile(r"^[>\s]*")


@dataclass(frozen=True)
class Point:
    """A location in the document: 1-based line/column, 0-based offset."""
    line: int
    column: int
    offset: int

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass(frozen=True)
class Position:
    """Start (inclusive) and end (exclusive) points of a node."""
    start: Point
    end: Point

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass
class Node:
    """Markdown node with a source position."""
    type: NodeType
    position: Optional[Position] = None
    value: str = ""
    lang: Optional[str] = None
    meta: Optional[str] = None
    markup: str = ""
    raw_type: str = ""
    children: List["Node"] = field(default_factory=list)

    def walk(self) -> Iterator["Node"]:
        """Yield this node and its descendants, depth-first, in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result: Dict[str, Any] = {"type": self.type.value}
        if self.raw_type and self.type == NodeType.OTHER:
            result["raw_type"] = self.raw_type
        if self.position is not None:
            result["position"] = self.position.to_dict()
        if self.lang:
            result["lang"] = self.lang
        if self.meta:
            result["meta"] = self.meta
        if self.value:
            result["value"] = self.value
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result


class LineIndex:
    """Line start offsets of a text, split on ``\\n`` only."""

    def __init__(self, text: str):
        self.text = text
        self.lines = text.split("\n")
        self.starts: List[int] = []
        offset = 0
        for line in self.lines:
            self.starts.append(offset)
            offset += len(line) + 1

    def __len__(self) -> int:
        return len(self.lines)

    def line_text(self, line: int) -> str:
        """Text of a 1-based line, without its newline."""
        return self.lines[line - 1]

    def line_start(self, line: int) -> int:
        """Offset of the first character of a 1-based line."""
        return self.starts[line - 1]

    def point(self, line: int, column: int) -> Point:
        return Point(line=line, column=column, offset=self.starts[line - 1] + column - 1)


def split_info(info: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a fence info string into language tag and meta string.

    Args:
        info: Raw text following the opening fence marker

    Returns:
        (lang, meta); either may be None
    """
    info = info.strip()
    if not info:
        return None, None
    parts = info.split(None, 1)
    lang = parts[0]
    meta = parts[1].strip() if len(parts) > 1 else None
    return lang, meta or None


def _block_position(index: LineIndex, line_map: List[int], markup: str = "") -> Optional[Position]:
    """Position covering the lines ``[map[0], map[1])`` of a block token."""
    first, last = line_map[0] + 1, max(line_map[1], line_map[0] + 1)
    if first > len(index):
        return None
    last = min(last, len(index))

    first_text = index.line_text(first)
    marker_at = first_text.find(markup) if markup else -1
    if marker_at < 0:
        marker_at = len(LEADING_INDENT_RE.match(first_text).group())

    start = index.point(first, marker_at + 1)
    end = index.point(last, len(index.line_text(last)) + 1)
    return Position(start=start, end=end)


def _convert(tree_node: SyntaxTreeNode, index: LineIndex, inherited: Optional[Position]) -> Node:
    raw_type = tree_node.type
    node_type = _TYPE_MAP.get(raw_type, NodeType.OTHER)

    position = inherited
    markup = ""
    if not tree_node.is_root:
        markup = tree_node.markup or ""
        if tree_node.map:
            fence_markup = markup if node_type == NodeType.CODE else ""
            position = _block_position(index, tree_node.map, fence_markup) or inherited

    node = Node(type=node_type, position=position, markup=markup, raw_type=raw_type)

    if node_type == NodeType.CODE:
        node.lang, node.meta = split_info(tree_node.info or "")
        node.value = tree_node.content
    elif node_type == NodeType.HTML:
        node.value = tree_node.content.rstrip("\n")
    elif node_type in (NodeType.INDENTED_CODE, NodeType.TEXT, NodeType.INLINE):
        node.value = tree_node.content

    node.children = [_convert(child, index, position) for child in tree_node.children]
    return node


def create_parser() -> MarkdownIt:
    """CommonMark parser with GFM tables and strikethrough."""
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


def parse_document(text: str, parser: Optional[MarkdownIt] = None) -> Node:
    """
    Parse Markdown text into a positioned node tree.

    Args:
        text: Markdown source (BOM already removed)
        parser: Optional preconfigured MarkdownIt instance

    Returns:
        Root node; positions refer to ``text``
    """
    md = parser or create_parser()
    tree = SyntaxTreeNode(md.parse(text))
    index = LineIndex(text)
    root_position = Position(
        start=Point(line=1, column=1, offset=0),
        end=index.point(len(index), len(index.lines[-1]) + 1),
    )
    root = _convert(tree, index, root_position)
    return root

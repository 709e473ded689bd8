"""
Block Extractor - Tagged fenced code blocks of a Markdown document

One depth-first pass over the document tree feeds the directive collector
and produces one Block per fenced code block with a language tag, in
document order. That order is the index used to pair analyzer results with
blocks during translation.

Author: mdfence maintainers | 2026-10-19
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from mdfence.directives import DEFAULT_LEXICON, DirectiveCollector, DirectiveLexicon
from mdfence.document import Node, NodeType, Position, parse_document
from mdfence.range_map import RangeMap, build_range_map, trim_length

logger = logging.getLogger(__name__)

# List markers and other non-indent characters before a fence become spaces
# when the indentation is replayed into multi-line fixes.
_NON_INDENT_RE = re.compile(r"[^>\s]")


@dataclass(frozen=True)
class Block:
    """A fenced code block extracted from a document."""
    index: int
    position: Position
    lang: str
    meta: Optional[str]
    base_indent_text: str
    directives: Tuple[str, ...]
    body: str
    range_map: RangeMap

    @property
    def base_indent(self) -> int:
        return len(self.base_indent_text)

    @property
    def start_line(self) -> int:
        """Document line of the opening fence."""
        return self.position.start.line

    @property
    def start_column(self) -> int:
        """Document column of the opening fence marker."""
        return self.position.start.column

    @property
    def directive_length(self) -> int:
        """Characters occupied by the injected directive lines, newlines included."""
        return sum(len(d) + 1 for d in self.directives)

    @property
    def leading_lines(self) -> int:
        """Physical fragment lines occupied by the injected directives."""
        return sum(d.count("\n") + 1 for d in self.directives)

    @property
    def line_count(self) -> int:
        return self.range_map.line_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "position": self.position.to_dict(),
            "lang": self.lang,
            "meta": self.meta,
            "base_indent_text": self.base_indent_text,
            "directives": list(self.directives),
            "body": self.body,
            "range_map": self.range_map.to_list(),
        }


def indent_text(opening_line: str, column: int) -> str:
    """Indentation preceding the opening fence marker (1-based ``column``)."""
    return _NON_INDENT_RE.sub(" ", opening_line[:column - 1])


def is_closing_fence(line: str, markup: str, base_indent_text: str = "") -> bool:
    """
    True if ``line`` closes a fence opened with ``markup`` after ``base_indent_text``.

    Blockquote markers count as indentation only when the fence itself sits
    in a blockquote. Past the base indentation, at most three spaces may
    precede the closing marker run.
    """
    if not markup:
        return False
    base_indent = len(base_indent_text)
    if ">" in base_indent_text:
        line = line[trim_length(line, base_indent):]
    else:
        line = line[min(base_indent, len(line) - len(line.lstrip(" "))):]
    rest = line.lstrip(" ")
    if len(line) - len(rest) > 3:
        return False
    rest = rest.rstrip()
    char = markup[0]
    return len(rest) >= len(markup) and rest == char * len(rest)


def trim_lines(lines: List[str], base_indent: int) -> List[str]:
    """Remove up to ``base_indent`` leading indent characters from each line."""
    return [line[trim_length(line, base_indent):] for line in lines]


def build_block(text: str, node: Node, index: int, directives: List[str]) -> Block:
    """
    Build a Block from a fenced code node.

    Args:
        text: Document text the node positions refer to
        node: Fenced code node with a language tag
        index: Position of the block among extracted blocks
        directives: Comment-wrapped directive lines to inject

    Returns:
        Immutable Block
    """
    start = node.position.start
    line_start = start.offset - start.column + 1
    region = text[line_start:node.position.end.offset].split("\n")

    opening, following = region[0], region[1:]
    base_indent_text = indent_text(opening, start.column)
    base_indent = len(base_indent_text)

    body_lines = following
    if following and is_closing_fence(following[-1], node.markup, base_indent_text):
        body_lines = following[:-1]
    body_lines = trim_lines(body_lines, base_indent)
    if body_lines and body_lines[-1].endswith("\r"):
        body_lines[-1] = body_lines[-1][:-1]

    directive_length = sum(len(d) + 1 for d in directives)
    range_map = build_range_map(
        following,
        base_indent,
        document_offset=line_start + len(opening) + 1,
        directive_length=directive_length,
    )

    return Block(
        index=index,
        position=node.position,
        lang=node.lang,
        meta=node.meta,
        base_indent_text=base_indent_text,
        directives=tuple(directives),
        body="\n".join(body_lines),
        range_map=range_map,
    )


def extract_blocks(
    text: str,
    tree: Optional[Node] = None,
    lexicon: DirectiveLexicon = DEFAULT_LEXICON,
) -> List[Block]:
    """
    Extract every tagged fenced code block of a document.

    Args:
        text: Markdown text (BOM already removed)
        tree: Parsed tree of ``text``; parsed here if omitted
        lexicon: Directive lexicon

    Returns:
        Blocks in document order
    """
    if tree is None:
        tree = parse_document(text)

    collector = DirectiveCollector(lexicon)
    blocks: List[Block] = []

    for node in tree.walk():
        if node.type == NodeType.HTML:
            collector.visit_html(node.value)
        elif node.type == NodeType.CODE and node.lang:
            directives = collector.take()
            if directives is None:
                logger.debug(f"Skipping code block at line {node.position.start.line}")
                continue
            blocks.append(build_block(text, node, len(blocks), directives))
        else:
            collector.reset()

    logger.debug(f"Extracted {len(blocks)} code block(s)")
    return blocks

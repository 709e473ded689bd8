"""
Result Translator - Map analyzer results back onto the Markdown document

For every block, diagnostics reported against the fragment are moved to
document coordinates:

- lines are shifted past the injected directive lines and onto the block;
  diagnostics that land on directive lines or after the block are dropped
- columns get back the indentation trimmed from their line
- fix and suggestion ranges are translated offset by offset through the
  block's range map, and newlines in replacement text are re-indented
- diagnostics without a location are attached to the opening fence

Diagnostics of rules that can never hold for an excerpt (a fragment has no
BOM and no final newline of its own) are removed afterwards.

Author: mdfence maintainers | 2026-10-19
"""

import logging
from dataclasses import replace
from typing import AbstractSet, Any, Iterable, List, Optional, Sequence

from mdfence.blocks import Block
from mdfence.diagnostics import Diagnostic, Fix, Suggestion, as_diagnostic, is_int

logger = logging.getLogger(__name__)


UNSATISFIABLE_RULES = frozenset({
    "eol-last",     # The fence strips the final newline of the code
    "unicode-bom",  # Code blocks begin in the middle of the document
})


class BlockCountMismatchError(Exception):
    """Raised when the number of result lists differs from the number of blocks."""
    pass


def adjust_fix(block: Block, fix: Fix) -> Fix:
    """Translate a fix's range endpoints and re-indent its replacement text."""
    start, end = fix.range
    return Fix(
        range=(block.range_map.to_document(start), block.range_map.to_document(end)),
        text=fix.text.replace("\n", "\n" + block.base_indent_text),
    )


class BlockTranslator:
    """Translates the diagnostics of one block."""

    def __init__(self, block: Block):
        self.block = block
        self.leading_lines = block.leading_lines

    def body_line(self, fragment_line: int) -> Optional[int]:
        """1-based body line of a fragment line, or None outside the block."""
        line = fragment_line - self.leading_lines
        if line < 1 or line > self.block.line_count:
            return None
        return line

    def __call__(self, diagnostic: Diagnostic) -> Optional[Diagnostic]:
        block = self.block

        if not diagnostic.has_location:
            return replace(diagnostic, line=block.start_line, column=block.start_column)

        body_line = self.body_line(diagnostic.line)
        if body_line is None:
            logger.debug(
                f"Dropping diagnostic at fragment line {diagnostic.line} "
                f"of block {block.index} ({diagnostic.rule_id})"
            )
            return None

        changes: dict = {"line": body_line + block.start_line}

        if is_int(diagnostic.column):
            changes["column"] = diagnostic.column + block.range_map.line(body_line).indent

        if is_int(diagnostic.end_line):
            end_body_line = diagnostic.end_line - self.leading_lines
            changes["end_line"] = end_body_line + block.start_line
            if is_int(diagnostic.end_column) and 1 <= end_body_line <= block.line_count:
                changes["end_column"] = (
                    diagnostic.end_column + block.range_map.line(end_body_line).indent
                )

        if diagnostic.fix is not None:
            changes["fix"] = adjust_fix(block, diagnostic.fix)

        if diagnostic.suggestions is not None:
            changes["suggestions"] = [
                replace(suggestion, fix=adjust_fix(block, suggestion.fix))
                for suggestion in diagnostic.suggestions
            ]

        return replace(diagnostic, **changes)


def is_satisfiable(diagnostic: Diagnostic, unsatisfiable: AbstractSet[str] = UNSATISFIABLE_RULES) -> bool:
    return diagnostic.rule_id not in unsatisfiable


def translate_block(
    block: Block,
    diagnostics: Iterable[Any],
    unsatisfiable: AbstractSet[str] = UNSATISFIABLE_RULES,
) -> List[Diagnostic]:
    """
    Translate the diagnostics reported for one block.

    Args:
        block: The block the fragment was built from
        diagnostics: Diagnostics (or dicts) in fragment coordinates
        unsatisfiable: Rule ids removed after translation

    Returns:
        Diagnostics in document coordinates, same order
    """
    translator = BlockTranslator(block)
    result = []
    for item in diagnostics:
        adjusted = translator(as_diagnostic(item))
        if adjusted is not None and is_satisfiable(adjusted, unsatisfiable):
            result.append(adjusted)
    return result


def translate_results(
    blocks: Sequence[Block],
    results: Sequence[Iterable[Any]],
    unsatisfiable: AbstractSet[str] = UNSATISFIABLE_RULES,
) -> List[Diagnostic]:
    """
    Translate one result list per block and flatten them in block order.

    Raises:
        BlockCountMismatchError: If ``results`` and ``blocks`` differ in length
    """
    if len(results) != len(blocks):
        raise BlockCountMismatchError(
            f"Got {len(results)} result list(s) for {len(blocks)} code block(s)"
        )

    flattened: List[Diagnostic] = []
    for block, diagnostics in zip(blocks, results):
        flattened.extend(translate_block(block, diagnostics, unsatisfiable))
    return flattened

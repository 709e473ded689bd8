"""
mdfence - Lint fenced code blocks of Markdown documents

Author: mdfence maintainers | 2026-10-19
"""

from .version import __version__

from .document import NodeType, Point, Position, Node, LineIndex, parse_document
from .directives import DirectiveLexicon, DirectiveCollector, DEFAULT_LEXICON, extract_directive
from .range_map import Breakpoint, RangeMap, build_range_map
from .blocks import Block, extract_blocks
from .fragments import Fragment, LANGUAGE_EXTENSIONS, assemble_fragments
from .diagnostics import Diagnostic, Fix, Suggestion
from .translate import (
    UNSATISFIABLE_RULES,
    BlockCountMismatchError,
    translate_block,
    translate_results,
)
from .cache import BlockCache, BlockCacheMissError
from .config import MDFenceConfig, ProcessorOptionsError, get_config, load_config
from .processor import MarkdownProcessor

__all__ = [
    "__version__",
    "NodeType",
    "Point",
    "Position",
    "Node",
    "LineIndex",
    "parse_document",
    "DirectiveLexicon",
    "DirectiveCollector",
    "DEFAULT_LEXICON",
    "extract_directive",
    "Breakpoint",
    "RangeMap",
    "build_range_map",
    "Block",
    "extract_blocks",
    "Fragment",
    "LANGUAGE_EXTENSIONS",
    "assemble_fragments",
    "Diagnostic",
    "Fix",
    "Suggestion",
    "UNSATISFIABLE_RULES",
    "BlockCountMismatchError",
    "translate_block",
    "translate_results",
    "BlockCache",
    "BlockCacheMissError",
    "MDFenceConfig",
    "ProcessorOptionsError",
    "get_config",
    "load_config",
    "MarkdownProcessor",
]

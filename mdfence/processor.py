"""
Markdown Processor - Lint fenced code blocks as standalone files

Two-phase protocol per document:

    fragments = processor.preprocess(text, "README.md")
    results = [analyze(f.filename, f.text) for f in fragments]
    diagnostics = processor.postprocess(results, "README.md")

``preprocess`` extracts the blocks and caches them under the filename;
``postprocess`` consumes that cache entry and maps the analyzer's results
back onto the Markdown document. Each processor owns its cache.

Author: mdfence maintainers | 2026-10-19
"""

import copy
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from mdfence.blocks import Block, extract_blocks
from mdfence.cache import BlockCache, document_id
from mdfence.config import MDFenceConfig, validate_options
from mdfence.diagnostics import Diagnostic
from mdfence.document import parse_document
from mdfence.fragments import Fragment, assemble_fragments
from mdfence.materialize import materialize_fragment
from mdfence.translate import translate_results
from mdfence.version import __version__

logger = logging.getLogger(__name__)


BOM = "\uFEFF"
SUPPORTS_AUTOFIX = True

Analyzer = Callable[[List[Fragment]], Sequence[Iterable[Any]]]


def strip_bom(text: str) -> str:
    return text[1:] if text.startswith(BOM) else text


class MarkdownProcessor:
    """
    Extracts code blocks for an analyzer and translates its results back.

    Args:
        config: Lexicons and processor options (defaults if None). The
            processor works on its own copy, so ``set_options`` never
            changes the caller's config
        cache: Block cache shared between preprocess and postprocess
    """

    meta: Dict[str, str] = {"name": "mdfence/markdown", "version": __version__}
    supports_autofix: bool = SUPPORTS_AUTOFIX

    def __init__(self, config: Optional[MDFenceConfig] = None, cache: Optional[BlockCache] = None):
        self.config = copy.deepcopy(config) if config is not None else MDFenceConfig()
        self.meta = dict(type(self).meta)
        self.cache = cache if cache is not None else BlockCache()
        self._lexicon = self.config.directives.lexicon()
        self._extensions = self.config.extension_table()
        self._unsatisfiable = frozenset(self.config.unsatisfiable_rules)

    @property
    def options(self) -> Dict[str, Any]:
        return {
            "materialize_code_blocks": self.config.processor.materialize_code_blocks,
            "temp_dir": self.config.processor.temp_dir,
        }

    def set_options(self, **options: Any) -> None:
        """
        Update runtime options. Only the options given are changed.

        Args:
            materialize_code_blocks: Also write fragments to disk (bool)
            temp_dir: Base directory for materialized fragments (str or None)

        Raises:
            ProcessorOptionsError: On a wrongly typed option
        """
        validate_options(**options)
        unknown = set(options) - {"materialize_code_blocks", "temp_dir"}
        if unknown:
            logger.warning(f"Ignoring unknown processor option(s): {', '.join(sorted(unknown))}")

        if isinstance(options.get("materialize_code_blocks"), bool):
            self.config.processor.materialize_code_blocks = options["materialize_code_blocks"]
        if "temp_dir" in options:
            temp_dir = options["temp_dir"]
            self.config.processor.temp_dir = os.fspath(temp_dir) if temp_dir is not None else None

    def extract(self, text: str) -> List[Block]:
        """Blocks of a document, without touching the cache."""
        text = strip_bom(text)
        return extract_blocks(text, parse_document(text), self._lexicon)

    def preprocess(self, text: str, filename: Optional[str] = None) -> List[Fragment]:
        """
        Extract the code blocks of a document as fragments.

        Args:
            text: Markdown text
            filename: Document identity, reused by ``postprocess``

        Returns:
            Fragments in document order
        """
        blocks = self.extract(text)
        self.cache.put(document_id(filename), blocks)

        fragments = assemble_fragments(blocks, self._extensions)
        if self.config.processor.materialize_code_blocks:
            fragments = [self._materialize(filename, fragment) for fragment in fragments]

        logger.debug(f"Preprocessed {document_id(filename)}: {len(fragments)} fragment(s)")
        return fragments

    def _materialize(self, filename: Optional[str], fragment: Fragment) -> Fragment:
        path = materialize_fragment(
            filename,
            fragment.index,
            fragment.filename,
            fragment.text,
            temp_dir=self.config.processor.temp_dir,
        )
        return Fragment(
            index=fragment.index,
            filename=fragment.filename,
            text=fragment.text,
            physical_filename=str(path),
        )

    def postprocess(
        self,
        results: Sequence[Iterable[Any]],
        filename: Optional[str] = None,
    ) -> List[Diagnostic]:
        """
        Translate analyzer results back to document coordinates.

        Args:
            results: One list of diagnostics (or dicts) per fragment, in
                fragment order
            filename: Document identity given to ``preprocess``

        Returns:
            Flattened diagnostics in document coordinates

        Raises:
            BlockCacheMissError: If ``preprocess`` was not called for ``filename``
            BlockCountMismatchError: If ``results`` does not match the fragments
        """
        blocks = self.cache.pop(document_id(filename))
        return translate_results(blocks, results, self._unsatisfiable)

    def process(
        self,
        text: str,
        analyze: Analyzer,
        filename: Optional[str] = None,
    ) -> List[Diagnostic]:
        """Run preprocess, the analyzer and postprocess for one document."""
        fragments = self.preprocess(text, filename)
        try:
            results = analyze(fragments)
        except Exception:
            self.cache.delete(document_id(filename))
            raise
        return self.postprocess(results, filename)

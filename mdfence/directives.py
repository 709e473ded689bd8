"""
Directive Collector - Host-tool directives written as HTML comments

A run of HTML comments such as ``<!-- eslint-disable no-console -->``
immediately before a fenced code block is injected at the top of the
extracted fragment, wrapped in the host language's comment syntax. The
``<!-- eslint-skip -->`` sentinel suppresses extraction of the next block.

Transitions, applied to nodes in document order:
    directive comment   -> appended to the pending run
    any other HTML      -> run cleared
    any other node      -> run cleared
    tagged code block   -> run taken (and cleared) by the block

Directive bodies are not validated; they are forwarded verbatim.

Author: mdfence maintainers | 2026-10-19
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)


COMMENT_START = "<!--"
COMMENT_END = "-->"

DEFAULT_DIRECTIVE_PATTERNS: Tuple[str, ...] = (r"eslint\b", r"global\s")
DEFAULT_SKIP_DIRECTIVE = "eslint-skip"
DEFAULT_COMMENT_TEMPLATE = "/*{}*/"


@lru_cache(maxsize=32)
def _compile_patterns(patterns: Tuple[str, ...]) -> Pattern[str]:
    return re.compile("^(?:" + "|".join(patterns) + ")")


@dataclass(frozen=True)
class DirectiveLexicon:
    """Recognized directive prefixes, the skip sentinel and the comment wrapper."""
    patterns: Tuple[str, ...] = DEFAULT_DIRECTIVE_PATTERNS
    skip: str = DEFAULT_SKIP_DIRECTIVE
    comment_template: str = DEFAULT_COMMENT_TEMPLATE

    def matches(self, text: str) -> bool:
        """True if the trimmed comment text starts with a known directive."""
        if not self.patterns:
            return False
        return _compile_patterns(tuple(self.patterns)).match(text.strip()) is not None

    def is_skip(self, text: str) -> bool:
        return text.strip() == self.skip

    def wrap(self, text: str) -> str:
        """Wrap a directive in the fragment language's comment syntax."""
        return self.comment_template.format(text)


DEFAULT_LEXICON = DirectiveLexicon()


def extract_directive(html: str, lexicon: DirectiveLexicon = DEFAULT_LEXICON) -> str:
    """
    Get the directive text of an HTML comment.

    Args:
        html: Text of an HTML node
        lexicon: Directive lexicon

    Returns:
        The comment body without ``<!--``/``-->`` (untrimmed), or an empty
        string if the node is not a directive comment
    """
    html = html.strip()
    if not (html.startswith(COMMENT_START) and html.endswith(COMMENT_END)):
        return ""
    if len(html) < len(COMMENT_START) + len(COMMENT_END):
        return ""

    comment = html[len(COMMENT_START):-len(COMMENT_END)]
    if not lexicon.matches(comment):
        return ""
    return comment


class DirectiveCollector:
    """Tracks the run of directive comments preceding the next code block."""

    def __init__(self, lexicon: DirectiveLexicon = DEFAULT_LEXICON):
        self.lexicon = lexicon
        self._pending: List[str] = []

    @property
    def pending(self) -> List[str]:
        return list(self._pending)

    def visit_html(self, html: str) -> None:
        directive = extract_directive(html, self.lexicon)
        if directive:
            self._pending.append(directive)
        else:
            self._pending = []

    def reset(self) -> None:
        self._pending = []

    def take(self) -> Optional[List[str]]:
        """
        Take the pending run for a code block, clearing it.

        Returns:
            Comment-wrapped directive lines, or None if the run contains
            the skip sentinel and the block must not be extracted
        """
        pending, self._pending = self._pending, []
        if any(self.lexicon.is_skip(d) for d in pending):
            logger.debug(f"Skip directive found in {len(pending)} pending directive(s)")
            return None
        return [self.lexicon.wrap(d) for d in pending]

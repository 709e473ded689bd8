"""
Fragment Assembler - Standalone source files for the external analyzer

Each block becomes a ``Fragment``: its injected directive lines, its trimmed
body and a trailing newline, under a deterministic synthetic filename.

Author: mdfence maintainers | 2026-10-19
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from mdfence.blocks import Block

# Language tag -> file extension; any other tag is used as the extension.
LANGUAGE_EXTENSIONS: Dict[str, str] = {
    "javascript": "js",
    "ecmascript": "js",
    "typescript": "ts",
    "markdown": "md",
    "python": "py",
    "python3": "py",
}

_FILENAME_META_RE = re.compile(r"""filename=(?P<quote>["'])(?P<filename>.*?)(?P=quote)""")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Fragment:
    """A code block handed to the analyzer as a virtual file."""
    index: int
    filename: str
    text: str
    physical_filename: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "index": self.index,
            "filename": self.filename,
            "text": self.text,
        }
        if self.physical_filename:
            result["physical_filename"] = self.physical_filename
        return result


def filename_from_meta(meta: Optional[str]) -> Optional[str]:
    """Explicit ``filename="..."`` of a fence meta string, whitespace replaced by ``_``."""
    if not meta:
        return None
    match = _FILENAME_META_RE.search(meta)
    if not match:
        return None
    return _WHITESPACE_RE.sub("_", match.group("filename"))


def file_extension(lang: str, extensions: Optional[Mapping[str, str]] = None) -> str:
    """File extension for a language tag (first word of the tag)."""
    table = LANGUAGE_EXTENSIONS if extensions is None else extensions
    language = lang.strip().split(" ")[0]
    return table.get(language, language)


def fragment_filename(block: Block, extensions: Optional[Mapping[str, str]] = None) -> str:
    explicit = filename_from_meta(block.meta)
    if explicit is not None:
        return explicit
    return f"{block.index}.{file_extension(block.lang, extensions)}"


def fragment_text(block: Block) -> str:
    """Directive lines, trimmed body, trailing newline."""
    return "\n".join([*block.directives, block.body, ""])


def assemble_fragments(
    blocks: Sequence[Block],
    extensions: Optional[Mapping[str, str]] = None,
) -> List[Fragment]:
    """
    Assemble the fragments of a document's blocks.

    Args:
        blocks: Blocks in extraction order
        extensions: Language tag -> extension table (defaults to LANGUAGE_EXTENSIONS)

    Returns:
        One Fragment per block, same order
    """
    return [
        Fragment(
            index=block.index,
            filename=fragment_filename(block, extensions),
            text=fragment_text(block),
        )
        for block in blocks
    ]

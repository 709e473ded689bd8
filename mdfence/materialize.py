"""
Materialization - Write fragments to real files

Some analyzers only work on files that exist on disk (type checkers that
resolve imports relative to the file, for instance). When enabled, every
fragment is also written under a deterministic path:

    <base_dir>/<sanitized document path>/<index>_<sanitized fragment name>

I/O errors are not caught: a misconfigured temp directory should fail loudly.

Author: mdfence maintainers | 2026-10-19
"""

import logging
import re
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


DEFAULT_TEMP_DIR_NAME = "mdfence"
ANONYMOUS_DOCUMENT = "__anonymous__"

_DRIVE_RE = re.compile(r"^[a-zA-Z]:[\\/]")
_LEADING_SEPARATOR_RE = re.compile(r"^[\\/]")
_SEPARATOR_RE = re.compile(r"[\\/]")


def base_dir(temp_dir: Optional[str] = None) -> Path:
    """Absolute base directory for materialized fragments."""
    if temp_dir:
        return Path(temp_dir).resolve()
    return (Path(tempfile.gettempdir()) / DEFAULT_TEMP_DIR_NAME).resolve()


def relative_document_path(document: Optional[str]) -> str:
    """Document path made relative and free of drive letters and colons."""
    path = document or ANONYMOUS_DOCUMENT
    path = _DRIVE_RE.sub("", path)
    path = _LEADING_SEPARATOR_RE.sub("", path)
    path = path.replace(":", "_")
    return path or ANONYMOUS_DOCUMENT


def materialized_path(
    document: Optional[str],
    index: int,
    virtual_filename: str,
    temp_dir: Optional[str] = None,
) -> Path:
    """
    Compute the on-disk path of a fragment.

    Args:
        document: Filename of the Markdown document
        index: Zero-based fragment index within the document
        virtual_filename: Synthetic fragment name (may contain separators)
        temp_dir: Base directory; defaults to ``<system tmp>/mdfence``

    Returns:
        Absolute path of the materialized file
    """
    safe_name = _SEPARATOR_RE.sub("_", virtual_filename)
    return base_dir(temp_dir) / relative_document_path(document) / f"{index}_{safe_name}"


def materialize_fragment(
    document: Optional[str],
    index: int,
    virtual_filename: str,
    text: str,
    temp_dir: Optional[str] = None,
) -> Path:
    """Write a fragment to its materialized path and return that path."""
    path = materialized_path(document, index, virtual_filename, temp_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info(f"Materialized fragment {index} of {document or ANONYMOUS_DOCUMENT}: {path}")
    return path

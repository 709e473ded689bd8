"""
Block Cache - Blocks kept between extraction and translation

Extraction and translation of a document are two separate calls; the blocks
built by the first are needed by the second. The cache holds them under the
document identity (its filename):

- ``put`` at extraction, overwriting any stale entry for the same identity
- ``pop`` at translation, which consumes the entry

Overlapping extract/translate pairs for one identity are not reconciled;
callers serialize them. Mutations are guarded by a lock so one cache can be
shared by threads working on different documents.

Author: mdfence maintainers | 2026-10-19
"""

import logging
import threading
from typing import Dict, List, Optional

from mdfence.blocks import Block

logger = logging.getLogger(__name__)


DEFAULT_DOCUMENT_ID = "<input>"


class BlockCacheMissError(Exception):
    """Raised when translation finds no blocks for a document identity."""
    pass


def document_id(filename: Optional[str]) -> str:
    """Cache key of a document."""
    return filename if filename else DEFAULT_DOCUMENT_ID


class BlockCache:
    """In-memory, consume-once store of extracted blocks."""

    def __init__(self):
        self._entries: Dict[str, List[Block]] = {}
        self._lock = threading.RLock()

    def put(self, key: str, blocks: List[Block]) -> None:
        """Store the blocks of a document, replacing a stale entry."""
        with self._lock:
            if key in self._entries:
                logger.debug(f"Overwriting unconsumed blocks for {key}")
            self._entries[key] = list(blocks)

    def pop(self, key: str) -> List[Block]:
        """
        Remove and return the blocks of a document.

        Raises:
            BlockCacheMissError: If no extraction is pending for ``key``
        """
        with self._lock:
            if key not in self._entries:
                raise BlockCacheMissError(f"No extracted code blocks for {key}")
            return self._entries.pop(key)

    def get(self, key: str) -> Optional[List[Block]]:
        """Blocks of a document without consuming them."""
        with self._lock:
            blocks = self._entries.get(key)
            return list(blocks) if blocks is not None else None

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

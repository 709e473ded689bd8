"""
Pytest Configuration and Fixtures

Author: mdfence maintainers | 2026-10-19
"""

import sys
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mdfence.cache import BlockCache
from mdfence.config import MDFenceConfig
from mdfence.processor import MarkdownProcessor


BOM = "\uFEFF"

# Three blocks: top level, inside a list item, indented by two spaces.
LINT_DOCUMENT_LINES: List[str] = [
    "Hello, world!",
    "",
    "```js",
    "var answer = 6 * 7;",
    "if (answer === 42) {",
    "    console.log(answer);",
    "}",
    "```",
    "",
    "Let's make a list.",
    "",
    "1. First item",
    "",
    "   ```JavaScript",
    "   var arr = [",
    "       1,",
    "       2",
    "   ];",
    "   ```",
    "",
    "1. Second item",
    "",
    "  ```JS",
    "  function boolean(arg) {",
    "  \treturn",
    "  \t!!arg;",
    "  };",
    "  ```",
]

# Analyzer results for LINT_DOCUMENT, one list per block.
LINT_RESULTS = [
    [
        {
            "line": 1,
            "endLine": 1,
            "column": 1,
            "message": 'Use the global form of "use strict".',
            "ruleId": "strict",
        },
        {
            "line": 3,
            "endLine": 3,
            "column": 5,
            "message": "Unexpected console statement.",
            "ruleId": "no-console",
        },
    ],
    [
        {
            "line": 3,
            "endLine": 3,
            "column": 6,
            "message": "Missing trailing comma.",
            "ruleId": "comma-dangle",
            "fix": {"range": [24, 24], "text": ","},
        },
    ],
    [
        {
            "line": 3,
            "endLine": 6,
            "column": 2,
            "message": "Unreachable code after return.",
            "ruleId": "no-unreachable",
        },
        {
            "line": 4,
            "endLine": 4,
            "column": 2,
            "message": "Unnecessary semicolon.",
            "ruleId": "no-extra-semi",
            "fix": {"range": [41, 42], "text": ""},
        },
    ],
]


def md(*lines: str) -> str:
    """Join document lines with LF."""
    return "\n".join(lines)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def processor() -> MarkdownProcessor:
    """Processor with default configuration and its own cache."""
    return MarkdownProcessor(config=MDFenceConfig(), cache=BlockCache())


@pytest.fixture(params=["", BOM], ids=["without-bom", "with-bom"])
def prefix(request) -> str:
    """Document prefix: nothing, or a byte order mark."""
    return request.param


@pytest.fixture
def lint_document(prefix: str) -> str:
    return prefix + "\n".join(LINT_DOCUMENT_LINES)


@pytest.fixture
def lint_results() -> list:
    return [list(group) for group in LINT_RESULTS]

"""
Tests for block extraction

Author: mdfence maintainers | 2026-10-19
"""

import pytest

from mdfence.blocks import extract_blocks, indent_text, is_closing_fence
from mdfence.directives import DirectiveLexicon

from conftest import md


def bodies(text):
    return [b.body for b in extract_blocks(text)]


class TestHelpers:
    """Tests for fence helpers."""

    def test_indent_text_replaces_list_markers(self):
        """Test list markers become spaces and blockquote markers stay."""
        assert indent_text("- ```js", 3) == "  "
        assert indent_text("1. ```js", 4) == "   "
        assert indent_text("> ```js", 3) == "> "
        assert indent_text("```js", 1) == ""

    @pytest.mark.parametrize("line,markup,expected", [
        ("```", "```", True),
        ("````", "```", True),
        ("  ```  ", "```", True),
        ("```", "````", False),
        ("``` end", "```", False),
        ("~~~", "```", False),
        ("    ```", "```", False),
        ("", "```", False),
    ])
    def test_is_closing_fence(self, line, markup, expected):
        """Test closing fence recognition at column zero."""
        assert is_closing_fence(line, markup) is expected

    def test_closing_fence_relative_to_base_indent(self):
        """Test up to three spaces are allowed past the base indent."""
        assert is_closing_fence("     ```", "```", "  ")
        assert not is_closing_fence("      ```", "```", "  ")

    def test_blockquote_marker_only_trimmed_inside_blockquote(self):
        """Test a blockquote marker is only indentation inside a blockquote."""
        assert is_closing_fence("> ```", "```", "> ")
        assert not is_closing_fence("> ```", "```")
        assert not is_closing_fence("> ```", "```", "  ")
        assert is_closing_fence(">```", "```", ">")


class TestExtraction:
    """Tests for which blocks are extracted."""

    def test_no_blocks(self):
        """Test documents without fences yield nothing."""
        assert extract_blocks("Hello, world!") == []
        assert extract_blocks("") == []

    def test_ignores_inline_code(self):
        """Test inline code is not a block."""
        assert extract_blocks("Hello, `{{name}}!") == []

    @pytest.mark.parametrize("text", [
        md("Hello, world!", "    ", "    var answer = 6 * 7;", "    ", "Goodbye"),
        md("Hello, world!", "    ```js", "    var answer = 6 * 7;", "    ```", "Goodbye"),
        md("Hello, world!", "\t", "\tvar answer = 6 * 7;", "\t", "Goodbye"),
    ])
    def test_ignores_indented_code(self, text):
        """Test indented code blocks are not extracted."""
        assert extract_blocks(text) == []

    def test_ignores_untagged_fences(self):
        """Test fences without a language are not extracted."""
        assert extract_blocks(md("```", "var answer = 6 * 7;", "```")) == []

    def test_blocks_are_indexed_in_document_order(self):
        """Test indexes follow document order."""
        text = md("```js", "a", "```", "", "```", "untagged", "```", "", "~~~py", "b", "~~~")
        blocks = extract_blocks(text)
        assert [(b.index, b.lang, b.body) for b in blocks] == [(0, "js", "a"), (1, "py", "b")]

    def test_block_metadata(self):
        """Test position, meta and line count of a block."""
        blocks = extract_blocks(md("Intro", "", '```js filename="x.js"', "a", "```"))
        (block,) = blocks
        assert block.start_line == 3
        assert block.start_column == 1
        assert block.meta == 'filename="x.js"'
        assert block.base_indent_text == ""
        assert block.line_count == 2


class TestBodies:
    """Tests for block body text."""

    def test_four_space_indented_fence_end_does_not_close(self):
        """Test a fence indented four spaces does not close."""
        text = md("Hello, world!", "```js", "var answer = 6 * 7;", "    ```", "Goodbye")
        assert bodies(text) == ["var answer = 6 * 7;\n    ```\nGoodbye"]

    def test_terminates_at_eof(self):
        """Test an unclosed fence runs to the end of the document."""
        assert bodies(md("Hello, world!", "```js", "var answer = 6 * 7;")) == ["var answer = 6 * 7;"]

    def test_backticks_and_tildes(self):
        """Test both fence characters are supported."""
        text = md("```js", "backticks", "```", "~~~js", "tildes", "~~~")
        assert bodies(text) == ["backticks", "tildes"]

    def test_end_fence_at_least_as_long(self):
        """Test the closing fence must be at least as long as the opening one."""
        text = md(
            "````js", "four", "```", "````",
            "`````js", "five", "`````",
            "``````js", "six", "```````",
        )
        assert bodies(text) == ["four\n```", "five", "six"]

    def test_no_content_on_closing_line(self):
        """Test a closing fence cannot carry text."""
        assert bodies(md("```js", "test();", "``` end", "```")) == ["test();\n``` end"]

    def test_empty_block(self):
        """Test a block with one empty line has an empty body."""
        blocks = extract_blocks(md("```js", "", "````"))
        assert [b.body for b in blocks] == [""]

    def test_empty_block_without_lines(self):
        """Test a block without lines has an empty body."""
        (block,) = extract_blocks(md("```javascript", "```"))
        assert block.body == ""
        assert block.line_count == 1

    def test_whitespace_only_block(self):
        """Test whitespace-only lines are trimmed but kept."""
        text = md("  ```js", "", " ", "  ", "   ", "    ", "```")
        assert bodies(text) == ["\n\n\n \n  "]

    def test_preserves_leading_and_trailing_empty_lines(self):
        """Test blank lines around code are kept."""
        assert bodies(md("```js", "", "console.log(42);", "", "```")) == ["\nconsole.log(42);\n"]

    def test_preserves_crlf_inside_body(self):
        """Test CRLF line endings survive inside the body."""
        text = "\r\n".join(["```js", "var answer = 6 * 7;", "console.log(answer);", "```"])
        assert bodies(text) == ["var answer = 6 * 7;\r\nconsole.log(answer);"]

    def test_unindents_space_indented_fence(self):
        """Test body lines lose up to the fence indentation."""
        text = md("  ```js", "  var answer = 6 * 7;", "    console.log(answer);", " // Fin.", "```")
        assert bodies(text) == ["var answer = 6 * 7;\n  console.log(answer);\n// Fin."]

    def test_list_item_fence(self):
        """Test a fence inside a list item."""
        (block,) = extract_blocks(md("- ```js", "  foo();", "  ```"))
        assert block.base_indent_text == "  "
        assert block.start_column == 3
        assert block.body == "foo();"

    def test_blockquote_fence(self):
        """Test a fence inside a blockquote."""
        (block,) = extract_blocks(md("> ```js", "> foo();", "> ```"))
        assert block.base_indent_text == "> "
        assert block.body == "foo();"

    def test_blockquote_closing_line_outside_blockquote(self):
        """Test a quoted fence line does not close a top-level fence."""
        assert bodies(md("```js", "foo();", "> ```")) == ["foo();\n> ```"]

    def test_fences_not_surrounded_by_blank_lines(self):
        """Test fences directly next to other content."""
        text = md(
            "<!-- eslint-disable -->", "```js", "var answer = 6 * 7;", "```",
            "Paragraph text", "```js", "var answer = 6 * 7;", "```",
        )
        blocks = extract_blocks(text)
        assert len(blocks) == 2
        assert blocks[0].directives == ("/* eslint-disable */",)
        assert blocks[1].directives == ()


class TestDirectives:
    """Tests for directive comments attached to blocks."""

    def test_leading_configuration_comments(self):
        """Test multi-line directive comments are wrapped."""
        text = md(
            "<!-- eslint-env browser -->",
            "<!--",
            "    eslint quotes: [",
            '        "error",',
            '        "single"',
            "    ]",
            "-->",
            "",
            "```js",
            "alert('Hello, world!');",
            "```",
        )
        (block,) = extract_blocks(text)
        assert block.directives == (
            "/* eslint-env browser */",
            '/*\n    eslint quotes: [\n        "error",\n        "single"\n    ]\n*/',
        )
        assert block.leading_lines == 7

    def test_global_comments(self):
        """Test global directives are collected."""
        text = md(
            "<!-- global foo -->",
            "<!-- global bar:false, baz:true -->",
            "",
            "```js",
            "alert(foo, bar, baz);",
            "```",
        )
        (block,) = extract_blocks(text)
        assert block.directives == ("/* global foo */", "/* global bar:false, baz:true */")

    def test_comments_inside_list_items(self):
        """Test directives inside list items."""
        text = md(
            "* List item followed by a blank line",
            "",
            "<!-- eslint-disable no-console -->",
            "```js",
            'console.log("Blank line");',
            "```",
            "",
            "* List item without a blank line",
            "<!-- eslint-disable no-console -->",
            "```js",
            'console.log("No blank line");',
            "```",
        )
        blocks = extract_blocks(text)
        assert [b.directives for b in blocks] == [
            ("/* eslint-disable no-console */",),
            ("/* eslint-disable no-console */",),
        ]

    def test_non_eslint_comment_clears_run(self):
        """Test an unrelated comment clears the directives."""
        text = md(
            "<!-- eslint-env browser -->",
            "<!-- not an eslint comment -->",
            "",
            "```js",
            "alert('Hello, world!');",
            "```",
        )
        (block,) = extract_blocks(text)
        assert block.directives == ()

    def test_non_comment_html_clears_run(self):
        """Test non-comment HTML clears the directives."""
        text = md(
            "<!-- eslint-env browser -->",
            "<p>For example:</p>",
            "",
            "```js",
            "alert('Hello, world!');",
            "```",
        )
        (block,) = extract_blocks(text)
        assert block.directives == ()

    def test_paragraph_clears_run(self):
        """Test a paragraph clears the directives."""
        text = md("<!-- eslint-env browser -->", "", "Some text.", "", "```js", "x", "```")
        (block,) = extract_blocks(text)
        assert block.directives == ()

    def test_untagged_fence_clears_run(self):
        """Test an untagged fence clears the directives."""
        text = md("<!-- eslint-env browser -->", "", "```", "x", "```", "", "```js", "y", "```")
        (block,) = extract_blocks(text)
        assert block.directives == ()

    def test_directives_not_reused_by_next_block(self):
        """Test directives attach to one block only."""
        text = md("<!-- eslint-env browser -->", "```js", "a", "```", "```js", "b", "```")
        blocks = extract_blocks(text)
        assert [b.directives for b in blocks] == [("/* eslint-env browser */",), ()]

    def test_custom_lexicon(self):
        """Test a custom lexicon changes patterns and wrapping."""
        lexicon = DirectiveLexicon(patterns=(r"pylint:",), skip="mdfence-skip", comment_template="#{}")
        text = md("<!-- pylint: disable=C0114 -->", "```py", "x = 1", "```")
        (block,) = extract_blocks(text, lexicon=lexicon)
        assert block.directives == ("# pylint: disable=C0114 ",)


class TestSkip:
    """Tests for the skip sentinel."""

    def test_skips_next_block(self):
        """Test the skip sentinel drops the next block."""
        text = md("<!-- eslint-skip -->", "", "```js", "alert('Hello, world!');", "```")
        assert extract_blocks(text) == []

    def test_skips_only_one_block(self):
        """Test the skip sentinel drops a single block."""
        text = md(
            "<!-- eslint-skip -->", "", "```js", "alert('Hello, world!');", "```",
            "", "```js", "var answer = 6 * 7;", "```",
        )
        (block,) = extract_blocks(text)
        assert block.index == 0
        assert block.body == "var answer = 6 * 7;"

    def test_skip_surrounded_by_other_comments(self):
        """Test the skip sentinel among other directives."""
        text = md(
            "<!-- eslint-disable no-console -->",
            "<!-- eslint-skip -->",
            "<!-- eslint-disable quotes -->",
            "",
            "```js",
            "alert('Hello, world!');",
            "```",
            "",
            "```js",
            "var answer = 6 * 7;",
            "```",
        )
        (block,) = extract_blocks(text)
        assert block.body == "var answer = 6 * 7;"
        assert block.directives == ()

    def test_skipped_block_is_not_counted(self):
        """Test skipped blocks do not take an index."""
        text = md(
            "```js", "first", "```",
            "<!-- eslint-skip -->", "```js", "skipped", "```",
            "```ts", "third", "```",
        )
        blocks = extract_blocks(text)
        assert [(b.index, b.body) for b in blocks] == [(0, "first"), (1, "third")]

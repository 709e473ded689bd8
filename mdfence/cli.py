"""
mdfence CLI - Inspect and translate Markdown code blocks

    mdfence extract README.md [--json] [--materialize] [--temp-dir DIR]
    mdfence translate README.md --diagnostics results.json [--json]
    mdfence tree README.md

``translate`` expects a JSON array holding one array of diagnostics per
fragment, in the order ``extract`` lists them.

Author: mdfence maintainers | 2026-10-19
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from mdfence.cache import BlockCacheMissError, document_id
from mdfence.config import MDFenceConfig, ProcessorOptionsError, load_config
from mdfence.document import parse_document
from mdfence.processor import MarkdownProcessor, strip_bom
from mdfence.translate import BlockCountMismatchError
from mdfence.version import __version__, get_short_banner

logger = logging.getLogger(__name__)


def _read_document(path: str) -> Optional[str]:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {path}: {e}", file=sys.stderr)
        return None


def _setup_logging(config: MDFenceConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.logging.level, logging.WARNING)
    logging.basicConfig(level=level, format=config.logging.format)


def _build_processor(args: argparse.Namespace) -> MarkdownProcessor:
    return MarkdownProcessor(config=args.config_obj)


def cmd_extract(args: argparse.Namespace) -> int:
    """List the fragments of a document."""
    text = _read_document(args.file)
    if text is None:
        return 1

    processor = _build_processor(args)
    options = {}
    if args.materialize:
        options["materialize_code_blocks"] = True
    if args.temp_dir:
        options["temp_dir"] = args.temp_dir
    try:
        processor.set_options(**options)
    except ProcessorOptionsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    fragments = processor.preprocess(text, args.file)
    blocks = processor.cache.pop(document_id(args.file))

    if args.json:
        output = {
            "document": args.file,
            "fragments": [
                {**fragment.to_dict(), "line": block.start_line, "lang": block.lang}
                for fragment, block in zip(fragments, blocks)
            ],
            "count": len(fragments),
        }
        print(json.dumps(output, indent=2))
        return 0

    print(f"{args.file}: {len(fragments)} code block(s)")
    for fragment, block in zip(fragments, blocks):
        location = f" -> {fragment.physical_filename}" if fragment.physical_filename else ""
        print()
        print(f"[{fragment.index}] {fragment.filename} (line {block.start_line}){location}")
        for line in fragment.text.splitlines():
            print(f"    {line}")
    return 0


def _load_results(path: str) -> Optional[List[List[Any]]]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error loading diagnostics: {e}", file=sys.stderr)
        return None
    if not isinstance(data, list) or not all(isinstance(group, list) for group in data):
        print("Error: diagnostics file must hold one array per fragment", file=sys.stderr)
        return None
    return data


def cmd_translate(args: argparse.Namespace) -> int:
    """Translate analyzer diagnostics back onto the document."""
    text = _read_document(args.file)
    if text is None:
        return 1
    results = _load_results(args.diagnostics)
    if results is None:
        return 1

    processor = _build_processor(args)
    processor.preprocess(text, args.file)
    try:
        diagnostics = processor.postprocess(results, args.file)
    except (BlockCountMismatchError, BlockCacheMissError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([d.to_dict() for d in diagnostics], indent=2))
        return 0

    for d in diagnostics:
        rule = f" [{d.rule_id}]" if d.rule_id else ""
        print(f"{args.file}:{d.line}:{d.column}: {d.message}{rule}")
    print(f"Total: {len(diagnostics)} diagnostic(s)")
    return 0


def cmd_tree(args: argparse.Namespace) -> int:
    """Print the parsed node tree of a document."""
    text = _read_document(args.file)
    if text is None:
        return 1
    print(json.dumps(parse_document(strip_bom(text)).to_dict(), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the mdfence CLI."""
    parser = argparse.ArgumentParser(
        prog="mdfence",
        description="Lint fenced code blocks of Markdown documents as standalone files",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", help="Path to mdfence.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser("extract", help="List the code block fragments")
    extract_parser.add_argument("file", help="Markdown file")
    extract_parser.add_argument("--json", action="store_true", help="Output as JSON")
    extract_parser.add_argument("--materialize", action="store_true",
                                help="Also write fragments to disk")
    extract_parser.add_argument("--temp-dir", help="Base directory for materialized fragments")
    extract_parser.set_defaults(func=cmd_extract)

    translate_parser = subparsers.add_parser("translate", help="Translate fragment diagnostics")
    translate_parser.add_argument("file", help="Markdown file")
    translate_parser.add_argument("-d", "--diagnostics", required=True,
                                  help="JSON file with one diagnostic array per fragment")
    translate_parser.add_argument("--json", action="store_true", help="Output as JSON")
    translate_parser.set_defaults(func=cmd_translate)

    tree_parser = subparsers.add_parser("tree", help="Print the parsed node tree")
    tree_parser.add_argument("file", help="Markdown file")
    tree_parser.set_defaults(func=cmd_tree)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    args.config_obj = load_config(Path(args.config) if args.config else None)
    _setup_logging(args.config_obj, args.verbose)
    logger.debug(get_short_banner())

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

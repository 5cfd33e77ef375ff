#!/usr/bin/env python3
"""
SC Require Processor CLI

Scans a SproutCore app for namespace definitions and usages and rewrites
every source file to start with the sc_require() directives it needs.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from scanner.builder import build_symbol_table, inject_all
from scanner.config import load_config
from scanner.discovery import ConfigurationError, check_root
from scanner.patterns import SourcePatterns
from exporters import to_mermaid, to_ascii, to_json


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="screquire",
        description="Inject sc_require() directives into the files of a SproutCore app.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  screquire ~/sc/apps/dark_horse DarkHorse          # Rewrite files in place
  screquire ~/sc/apps/dark_horse DarkHorse -v       # Show usages and requires
  screquire ~/sc/apps/dark_horse DarkHorse --check  # Fail if any file is stale
  screquire ~/sc/apps/dark_horse DarkHorse --dry-run --report mermaid
        """,
    )

    # Positional arguments
    parser.add_argument(
        "root",
        help="App directory (its parent must be named 'apps')",
    )

    parser.add_argument(
        "namespace",
        help="Application namespace, e.g. DarkHorse",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every usage, require and definition",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML or JSON settings file (default: screquire.yaml/.yml/.json in the app root)",
    )

    # Write options
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute the requires without writing any file",
    )

    mode.add_argument(
        "--check",
        action="store_true",
        help="Like --dry-run, but exit with status 1 if any file would change",
    )

    # Scanning options
    parser.add_argument(
        "--suffix",
        type=str,
        default=None,
        help="Source file suffix (default: .js)",
    )

    parser.add_argument(
        "--bootstrap",
        type=str,
        default=None,
        help="Module that is always loaded first and never scanned (default: core)",
    )

    parser.add_argument(
        "--exclude-dir",
        nargs="+",
        default=None,
        help="Directory names to exclude",
    )

    # Report options
    parser.add_argument(
        "--report",
        choices=["ascii", "mermaid", "json"],
        default=None,
        help="Print the require graph in this format",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Report output file (default: stdout)",
    )

    parser.add_argument(
        "--show-unresolved",
        action="store_true",
        help="Include usages with no known definition in the report",
    )

    return parser.parse_args(args)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
    )


def render_report(graph, report: str, include_unresolved: bool) -> str:
    if report == "mermaid":
        return to_mermaid(graph, include_unresolved=include_unresolved)
    if report == "json":
        return to_json(graph, include_unresolved=include_unresolved)
    return to_ascii(graph, include_unresolved=include_unresolved)


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)
    setup_logging(parsed.verbose)

    try:
        root = check_root(Path(parsed.root).expanduser())
        config = load_config(
            parsed.namespace,
            root=root,
            config_path=Path(parsed.config) if parsed.config else None,
            suffix=parsed.suffix,
            bootstrap=parsed.bootstrap,
            exclude_dirs=parsed.exclude_dir,
        )
        patterns = SourcePatterns(config.namespace)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write = not (parsed.dry_run or parsed.check)

    print("Scanning for definitions")
    started = time.perf_counter()
    symbols = build_symbol_table(root, config, patterns)
    print(f"Found {len(symbols)} definitions in {time.perf_counter() - started:.2f}s")
    print("Done.")

    print("Scanning for usage")
    started = time.perf_counter()
    graph = inject_all(root, config, symbols, patterns, write=write)
    verb = "rewritten" if write else "to rewrite"
    print(f"{len(graph.rewritten)} of {len(graph)} files {verb} in {time.perf_counter() - started:.2f}s")
    print("Done.")

    if parsed.report:
        output = render_report(graph, parsed.report, parsed.show_unresolved)
        if parsed.output:
            try:
                output_path = Path(parsed.output)
                output_path.write_text(output, encoding="utf-8")
                print(f"Report written to: {output_path}", file=sys.stderr)
            except OSError as e:
                print(f"Error writing report: {e}", file=sys.stderr)
                return 1
        else:
            print(output)

    if graph.has_failures():
        print(f"Error: {len(graph.failed)} files could not be processed", file=sys.stderr)
        return 1

    if parsed.check and graph.rewritten:
        for module in sorted(graph.rewritten):
            print(f"Would rewrite: {module}{config.suffix}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

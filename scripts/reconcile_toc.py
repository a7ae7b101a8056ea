#!/usr/bin/env python3
"""Reconcile an issue's table of contents (and optionally its fragments).

Reads a TOC JSON payload, reconciles page ranges against the issue PDF
(or an explicit page count), and writes the reconciled TOC. With
--fragments (keyed by title) or --page-fragments (a page-tagged list
assigned to articles by page), also cleans up and interleaves
per-article fragments.

Usage:
    python scripts/reconcile_toc.py toc.json --pdf issue.pdf -o reconciled.json
    python scripts/reconcile_toc.py toc.json --total-pages 80 --fragments blocks.json
    python scripts/reconcile_toc.py toc.json --pdf issue.pdf --page-fragments stream.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from issue_toolkit.core.schemas import ValidationError
from issue_toolkit.core.utils import (
    fragments_from_list,
    fragments_to_list,
    load_toc_json,
    page_fragments_from_list,
    save_toc_json,
)
from issue_toolkit.fragments import assign_fragments_to_articles, process_issue_fragments
from issue_toolkit.sources import PdfPageSource
from issue_toolkit.toc import ParentTieBreak, ReconcileConfig, WarningCollector, reconcile_issue

logger = logging.getLogger("reconcile_toc")


def _load_fragments(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return {title: fragments_from_list(items) for title, items in raw.items()}


def _assign_page_fragments(path: Path, articles) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    assignment = assign_fragments_to_articles(page_fragments_from_list(raw), articles)
    if assignment.discarded:
        print(f"  WARNING {assignment.discarded} fragment(s) on unclaimed pages discarded")
    return assignment.articles


def _process_fragments(articles: dict, issue_month: int, output: Path, workers: int) -> None:
    processed = process_issue_fragments(articles, issue_month=issue_month, max_workers=workers)
    payload = {
        title: fragments_to_list(result.fragments)
        for title, result in processed.articles.items()
    }
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.info(f"Wrote fragments for {len(payload)} article(s) to {output}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reconcile a magazine issue's table of contents")
    parser.add_argument("toc", type=Path, help="TOC JSON payload")
    parser.add_argument("--pdf", type=Path, help="Issue PDF (page count and page text)")
    parser.add_argument("--total-pages", type=int, help="Page count when no PDF is given")
    parser.add_argument("-o", "--output", type=Path, help="Output path (default: <toc>.reconciled.json)")
    parser.add_argument("--strict", action="store_true", help="Full JSON Schema validation of the input")
    parser.add_argument(
        "--tie-break",
        choices=[p.value for p in ParentTieBreak],
        default=ParentTieBreak.FIRST_FOUND.value,
        help="Parent selection when several articles overlap a feature",
    )
    parser.add_argument("--strip-authors", action="store_true", help="Strip 'conducted by ...' from titles")
    parser.add_argument("--dedupe", action="store_true", help="Merge near-duplicate TOC entries")
    fragment_input = parser.add_mutually_exclusive_group()
    fragment_input.add_argument("--fragments", type=Path, help="Fragments JSON keyed by article title")
    fragment_input.add_argument(
        "--page-fragments",
        type=Path,
        help="Fragments JSON list, each with a 'page'; assigned to reconciled articles by page",
    )
    parser.add_argument("--workers", type=int, default=4, help="Threads for fragment processing")
    parser.add_argument("--report", type=Path, help="Write warnings to this JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.pdf is None and args.total_pages is None:
        parser.error("one of --pdf or --total-pages is required")

    config = ReconcileConfig(
        parent_tie_break=ParentTieBreak(args.tie_break),
        strip_author_titles=args.strip_authors,
        deduplicate=args.dedupe,
    )
    collector = WarningCollector()
    output = args.output or args.toc.with_suffix(".reconciled.json")

    source = PdfPageSource(args.pdf) if args.pdf else None
    try:
        total_pages = source.page_count if source else args.total_pages
        try:
            issue, articles = load_toc_json(
                args.toc, strict=args.strict, total_pages=total_pages, collector=collector,
            )
        except ValidationError as e:
            logger.error(f"Invalid TOC payload ({e.path or 'root'}): {e}")
            return 1

        result = reconcile_issue(
            articles,
            issue,
            total_pages=total_pages,
            page_source=source,
            config=config,
            collector=collector,
        )
    finally:
        if source is not None:
            source.close()

    save_toc_json(output, issue, result.articles, total_pages=total_pages)
    logger.info(f"Wrote {result.article_count} reconciled article(s) to {output}")

    for warning in result.warnings:
        print(f"  WARNING {warning}")
    if args.report:
        collector.write_report(args.report)

    if args.fragments or args.page_fragments:
        if args.fragments:
            fragments = _load_fragments(args.fragments)
        else:
            fragments = _assign_page_fragments(args.page_fragments, result.articles)
        _process_fragments(
            fragments,
            issue.month,
            output.with_name(output.stem + ".fragments.json"),
            args.workers,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Command-line entry point.

    python -m src.main reviews.csv --workers 4 --export-dir data/enriched --persist
    python -m src.main --serve --port 3001
"""
import argparse
import json
import sys
from dataclasses import replace
from typing import List, Optional
from . import ingest, persist, pipeline
from .config import CFG
from .errors import ReviewInputError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-insights",
        description="Extract per-product features and sentiment from a CSV of reviews.",
    )
    parser.add_argument("csv_path", nargs="?", help="CSV with review_text and product_id/product_title columns")
    parser.add_argument("--workers", type=int, default=None,
                        help="concurrent model requests (default: MAX_WORKERS or 1)")
    parser.add_argument("--export-dir", default=None, help="write CSV/JSON exports to this directory")
    parser.add_argument("--persist", action="store_true", help="write results to the DuckDB warehouse")
    parser.add_argument("--serve", action="store_true", help="run the HTTP API instead of a batch")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=3001)
    return parser


def main(argv: Optional[List[str]] = None, client=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.serve:
        import uvicorn
        uvicorn.run("src.api:app", host=args.host, port=args.port)
        return 0

    if not args.csv_path:
        parser.error("csv_path is required unless --serve is given")

    settings = CFG
    if args.workers is not None:
        settings = replace(CFG, max_workers=max(1, args.workers))

    try:
        rows = ingest.run(args.csv_path)
    except (FileNotFoundError, ReviewInputError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2

    records = pipeline.run(rows, client=client, settings=settings)

    if args.persist:
        persist.save_analyses(records)
    if args.export_dir:
        paths = persist.export_analyses(records, args.export_dir)
        print(f"[info] exported: {', '.join(paths.values())}")

    print(json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

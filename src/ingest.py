from pathlib import Path
from typing import List, Sequence
from .csv_parser import RowRecord, parse_line, parse_table
from .errors import EmptyCsvError, MissingProductColumnError, MissingReviewTextColumnError

REVIEW_COL = "review_text"
PRODUCT_COLS = ("product_id", "product_title")


def validate_headers(headers: Sequence[str]) -> None:
    """Headers must already be lower-cased."""
    if REVIEW_COL not in headers:
        raise MissingReviewTextColumnError()
    if not any(c in headers for c in PRODUCT_COLS):
        raise MissingProductColumnError()


def split_lines(text: str) -> List[str]:
    return [line for line in text.splitlines() if line.strip()]


def parse_headers(line: str) -> List[str]:
    return [h.strip().lower() for h in parse_line(line)]


def load_reviews(text: str) -> List[RowRecord]:
    lines = split_lines(text.lstrip("\ufeff"))
    if len(lines) < 2:
        raise EmptyCsvError()

    headers = parse_headers(lines[0])
    validate_headers(headers)
    print(f"[info] CSV headers detected: {headers}")

    rows = parse_table(lines, headers)
    print(f"[info] parsed {len(rows)} review rows")
    return rows


def run(csv_path: str) -> List[RowRecord]:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")
    return load_reviews(path.read_text(encoding="utf-8-sig"))

"""
Minimal CSV reader for review uploads.

Fields are comma separated; a double quote toggles "inside quotes" so commas
inside quoted text do not split. Doubled quotes ("") are not treated as an
escaped quote, so this is a simple dialect rather than full RFC 4180.
"""
from __future__ import annotations
from typing import Dict, List, Sequence

RowRecord = Dict[str, str]


def parse_line(line: str) -> List[str]:
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    fields.append("".join(current).strip())
    return fields


def parse_table(lines: Sequence[str], headers: Sequence[str]) -> List[RowRecord]:
    """
    Parse every line after the header line into a header-keyed row.
    Short rows are padded with "", values beyond the header count are dropped.
    Blank lines must already be filtered out.
    """
    rows: List[RowRecord] = []
    for line in lines[1:]:
        values = parse_line(line)
        rows.append({h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)})
    return rows

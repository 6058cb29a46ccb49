from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping

UNKNOWN_PRODUCT = "Unknown Product"


@dataclass(frozen=True)
class ProductGroup:
    key: str
    product_name: str
    rows: List[Dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def product_key(row: Mapping[str, str]) -> str:
    return row.get("product_id") or row.get("product_title") or UNKNOWN_PRODUCT


def product_name(row: Mapping[str, str]) -> str:
    return row.get("product_title") or row.get("product_id") or UNKNOWN_PRODUCT


def group_by_product(rows: Iterable[Mapping[str, str]]) -> Dict[str, ProductGroup]:
    """
    Partition rows by product key in one pass. Groups keep first-seen order and
    rows keep input order; each row is copied with its resolved productName.
    The group name comes from the first row of the group.
    """
    groups: Dict[str, ProductGroup] = {}
    for row in rows:
        key = product_key(row)
        name = product_name(row)
        if key not in groups:
            groups[key] = ProductGroup(key=key, product_name=name)
        groups[key].rows.append({**row, "productName": name})
    return groups

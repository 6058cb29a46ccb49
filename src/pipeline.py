"""
Per-product analysis over a batch of review rows.

Each product group is sent to the model once; any failure (transport,
malformed output, anything else) falls back to the heuristic analyzer for
that product only, so the batch always yields one record per product in
first-seen order.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Mapping, Optional, Sequence
from tqdm import tqdm
from .config import CFG, Settings
from .errors import AnalysisError
from .grouping import ProductGroup, group_by_product
from .heuristics import fallback_analysis
from .llm_client import LLMClient
from .normalizer import normalize
from .requester import request_analysis
from .schemas import AnalysisRecord


def analyze_product(client, group: ProductGroup, max_reviews: Optional[int] = None) -> AnalysisRecord:
    name = group.product_name
    try:
        raw = request_analysis(client, name, group.rows, max_reviews)
        return normalize(raw, group.rows, name)
    except AnalysisError as e:
        print(f"[warn] analysis failed for product={name!r}; using fallback: {e}")
    except Exception as e:
        print(f"[warn] unexpected error for product={name!r}; using fallback: {type(e).__name__}: {e}")
    return fallback_analysis(group.rows, name)


def run(rows: Sequence[Mapping[str, str]], client=None,
        settings: Optional[Settings] = None,
        max_workers: Optional[int] = None) -> List[AnalysisRecord]:
    """
    Returns one AnalysisRecord per product group, in group order.
    max_workers > 1 sends that many requests concurrently; results are
    reassembled by group index so ordering is unchanged.
    """
    settings = settings or getattr(client, "settings", None) or CFG
    workers = max(1, max_workers if max_workers is not None else settings.max_workers)

    try:
        groups = list(group_by_product(rows).values())
    except Exception as e:
        print(f"[error] could not group reviews: {e}")
        return []
    if not groups:
        print("[info] no review rows to analyze")
        return []

    own_client = client is None
    if own_client:
        client = LLMClient(settings)
    max_reviews = settings.max_reviews_per_prompt

    try:
        if workers == 1:
            results = [
                analyze_product(client, g, max_reviews)
                for g in tqdm(groups, total=len(groups), leave=False)
            ]
        else:
            results = [None] * len(groups)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = {
                    pool.submit(analyze_product, client, g, max_reviews): i
                    for i, g in enumerate(groups)
                }
                for fut in tqdm(as_completed(futures), total=len(futures), leave=False):
                    results[futures[fut]] = fut.result()
    finally:
        if own_client:
            client.close()

    fallbacks = sum(1 for r in results if r.source == "heuristic")
    print(f"[info] analyzed {len(results)} products ({fallbacks} via heuristic fallback)")
    return results

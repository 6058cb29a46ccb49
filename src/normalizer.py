from __future__ import annotations
import json
import re
from typing import Any, Dict, Mapping, Sequence
from .errors import MalformedResponseError
from .heuristics import (
    calculate_overall_sentiment,
    extract_basic_features,
    generate_least_appreciated,
    generate_most_appreciated,
    infer_category,
)
from .schemas import AnalysisRecord, PartialAnalysis, Summary

_JSON_FENCE_RE = re.compile(r"```json\s*(.*?)\s*```", flags=re.DOTALL)


def extract_json_text(text: str) -> str:
    """
    Take the interior of a ```json fenced block if there is one,
    otherwise drop any stray ``` markers.
    """
    t = (text or "").strip()
    m = _JSON_FENCE_RE.search(t)
    if m:
        return m.group(1).strip()
    return t.replace("```", "").strip()


def load_json_object(text: str) -> Dict[str, Any]:
    """Parse model text into a JSON object; arrays, scalars and junk are rejected."""
    cleaned = extract_json_text(text)
    try:
        parsed = json.loads(cleaned)
    except ValueError as e:
        raise MalformedResponseError(f"Invalid JSON from model: {e}", raw_text=text) from e
    if not isinstance(parsed, dict):
        raise MalformedResponseError(
            f"Model response is a JSON {type(parsed).__name__}, expected an object", raw_text=text
        )
    return parsed


def parse_analysis(text: str) -> PartialAnalysis:
    return PartialAnalysis.from_payload(load_json_object(text))


def normalize(text: str, reviews: Sequence[Mapping[str, str]], product_name: str) -> AnalysisRecord:
    """
    Build the canonical record from raw model text. Fields the model left out
    (or returned with the wrong type) come from the heuristic analyzer;
    reviewCount is always the real number of reviews.
    """
    partial = parse_analysis(text)

    category = partial.category if partial.category is not None else infer_category(product_name, reviews)
    features = partial.features if partial.features is not None else extract_basic_features(reviews)
    most = partial.most_appreciated
    if most is None:
        most = generate_most_appreciated(reviews, category)
    least = partial.least_appreciated
    if least is None:
        least = generate_least_appreciated(reviews, category)
    sentiment = partial.overall_sentiment or calculate_overall_sentiment(reviews)

    return AnalysisRecord(
        product_name=product_name,
        category=category,
        features=features,
        summary=Summary(most_appreciated=most, least_appreciated=least, overall_sentiment=sentiment),
        review_count=len(reviews),
        source="model",
    )

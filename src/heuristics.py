"""
Deterministic, model-free product analysis.

Used as the full fallback when the model path fails and to fill any field
the model left out. Every function is pure and works on an empty review list.
"""
from __future__ import annotations
import math
from typing import Dict, List, Mapping, Sequence
import pandas as pd
from .schemas import SENTIMENTS, AnalysisRecord, FeatureEntry, Summary

Reviews = Sequence[Mapping[str, str]]

# (name keyword, review text keyword, category); first match wins
_CATEGORY_RULES = [
    ("phone", "battery", "Electronics - Phone"),
    ("laptop", "screen", "Electronics - Laptop"),
    ("shirt", "fabric", "Clothing"),
    ("chair", "assembly", "Furniture"),
    ("book", "story", "Books"),
]
DEFAULT_CATEGORY = "General Product"

# feature -> (positive phrase, negative phrase, share of reviews)
_BASIC_FEATURES = {
    "Quality": ("Good quality", "Poor quality", 0.4),
    "Value": ("Great value", "Overpriced", 0.3),
    "Performance": ("Performs well", "Issues encountered", 0.3),
}

_MOST_APPRECIATED = {
    "electronics": ["Great performance", "Good battery life", "Excellent display"],
    "clothing": ["Nice fabric", "Good fit", "Stylish design"],
    "book": ["Great story", "Well-written", "Engaging read"],
    "general": ["Reliable", "Good quality", "Value for money"],
}
_LEAST_APPRECIATED = {
    "electronics": ["Battery drains fast", "Heating issues", "Customer service"],
    "clothing": ["Size mismatch", "Color fades", "Low quality stitching"],
    "book": ["Boring story", "Poor editing", "Weak plot"],
    "general": ["Late delivery", "Packaging issues", "Not worth the price"],
}


def infer_category(product_name: str, reviews: Reviews) -> str:
    name = (product_name or "").lower()
    text = " ".join(r.get("review_text") or "" for r in reviews).lower()
    for name_kw, text_kw, category in _CATEGORY_RULES:
        if name_kw in name or text_kw in text:
            return category
    return DEFAULT_CATEGORY


def extract_basic_features(reviews: Reviews) -> Dict[str, FeatureEntry]:
    """Fixed three-feature table; mentions is a share of the review count, not text analysis."""
    n = len(reviews)
    return {
        name: FeatureEntry(positive=[pos], negative=[neg], mentions=math.floor(n * weight))
        for name, (pos, neg, weight) in _BASIC_FEATURES.items()
    }


def calculate_overall_sentiment(reviews: Reviews) -> str:
    if not reviews:
        return "neutral"

    sentiments = [(r.get("sentiment") or "").strip().lower() for r in reviews]
    sentiments = [s for s in sentiments if s in SENTIMENTS]
    if sentiments:
        pos = sentiments.count("positive")
        neg = sentiments.count("negative")
        if pos > neg:
            return "positive"
        if neg > pos:
            return "negative"
        return "neutral"

    ratings = pd.to_numeric(
        pd.Series([(r.get("rating") or "").strip() for r in reviews], dtype="object"),
        errors="coerce",
    ).dropna()
    # "inf" / "1e400" parse as numbers but are not ratings
    ratings = ratings[ratings.abs() < math.inf]
    if not ratings.empty:
        avg = float(ratings.mean())
        # positive side compares the nearest whole star, halves round up
        if math.floor(avg + 0.5) >= 4:
            return "positive"
        if avg <= 2:
            return "negative"
    return "neutral"


def _bucket(category: str) -> str:
    cat = (category or "").lower()
    if "phone" in cat or "laptop" in cat:
        return "electronics"
    if "clothing" in cat:
        return "clothing"
    if "book" in cat:
        return "book"
    return "general"


def generate_most_appreciated(reviews: Reviews, category: str) -> List[str]:
    return list(_MOST_APPRECIATED[_bucket(category)])


def generate_least_appreciated(reviews: Reviews, category: str) -> List[str]:
    return list(_LEAST_APPRECIATED[_bucket(category)])


def fallback_analysis(reviews: Reviews, product_name: str) -> AnalysisRecord:
    category = infer_category(product_name, reviews)
    return AnalysisRecord(
        product_name=product_name,
        category=category,
        features=extract_basic_features(reviews),
        summary=Summary(
            most_appreciated=generate_most_appreciated(reviews, category),
            least_appreciated=generate_least_appreciated(reviews, category),
            overall_sentiment=calculate_overall_sentiment(reviews),
        ),
        review_count=len(reviews),
        source="heuristic",
    )

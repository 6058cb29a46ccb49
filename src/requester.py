from typing import Mapping, Optional, Sequence
from .prompts import PRODUCT_ANALYSIS_PROMPT

MAX_REVIEWS = 20


def build_prompt(product_name: str, reviews: Sequence[Mapping[str, str]], max_reviews: Optional[int] = None) -> str:
    # cap prompt size/cost; the rest of the group still counts toward reviewCount
    limit = MAX_REVIEWS if max_reviews is None else max_reviews
    lines = [f"{i}. {r.get('review_text') or ''}" for i, r in enumerate(reviews[:limit], start=1)]
    return PRODUCT_ANALYSIS_PROMPT.format(product_name=product_name, reviews="\n".join(lines))


def request_analysis(client, product_name: str, reviews: Sequence[Mapping[str, str]], max_reviews: int = MAX_REVIEWS) -> str:
    """
    Ask the model for a structured analysis of one product and return its raw text.
    `client` is anything with complete_text(prompt) -> str (normally LLMClient).
    Callers pass settings.max_reviews_per_prompt as max_reviews.
    Transport failures propagate as UpstreamRequestError; no retry here.
    """
    prompt = build_prompt(product_name, reviews, max_reviews)
    return client.complete_text(prompt)

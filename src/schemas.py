from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

Sentiment = Literal["positive", "neutral", "negative"]
SENTIMENTS = ("positive", "neutral", "negative")


class _Record(BaseModel):
    # serialized with camelCase keys (productName, reviewCount, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class FeatureEntry(_Record):
    positive: List[str] = Field(default_factory=list)
    negative: List[str] = Field(default_factory=list)
    mentions: int = Field(default=0, ge=0)


class Summary(_Record):
    most_appreciated: List[str]
    least_appreciated: List[str]
    overall_sentiment: Sentiment


class AnalysisRecord(_Record):
    product_name: str
    category: str
    features: Dict[str, FeatureEntry]
    summary: Summary
    review_count: int = Field(ge=0)
    source: Literal["model", "heuristic"]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


_ADAPTERS = {
    "category": TypeAdapter(str),
    "features": TypeAdapter(Dict[str, FeatureEntry]),
    "most_appreciated": TypeAdapter(List[str]),
    "least_appreciated": TypeAdapter(List[str]),
    "overall_sentiment": TypeAdapter(Sentiment),
}


class PartialAnalysis(BaseModel):
    """
    What the model actually returned. A field is None when it was absent,
    null or of the wrong type; empty lists and maps are kept as given.
    """
    category: Optional[str] = None
    features: Optional[Dict[str, FeatureEntry]] = None
    most_appreciated: Optional[List[str]] = None
    least_appreciated: Optional[List[str]] = None
    overall_sentiment: Optional[Sentiment] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PartialAnalysis":
        # the prompt asks for a flat object, but some answers nest under "summary"
        nested = payload.get("summary")
        nested = nested if isinstance(nested, dict) else {}

        def pick(key: str):
            value = payload.get(key)
            return nested.get(key) if value is None else value

        raw = {
            "category": payload.get("category"),
            "features": payload.get("features"),
            "most_appreciated": pick("mostAppreciated"),
            "least_appreciated": pick("leastAppreciated"),
            "overall_sentiment": pick("overallSentiment"),
        }
        if isinstance(raw["category"], str):
            raw["category"] = raw["category"].strip() or None
        if isinstance(raw["overall_sentiment"], str):
            raw["overall_sentiment"] = raw["overall_sentiment"].strip().lower()

        fields = {}
        for name, value in raw.items():
            if value is None:
                continue
            try:
                fields[name] = _ADAPTERS[name].validate_python(value)
            except ValidationError:
                continue
        return cls(**fields)

    def present(self) -> List[str]:
        return [name for name, value in self if value is not None]

"""
Error taxonomy for the review analysis pipeline.

Input errors (ReviewInputError) reject the whole batch before grouping.
Analysis errors (AnalysisError) are per product and are recovered by the
pipeline with the heuristic fallback.
"""
from __future__ import annotations


class ReviewInputError(ValueError):
    """The uploaded CSV cannot be processed at all."""


class MissingColumnError(ReviewInputError):
    def __init__(self, column: str, message: str):
        super().__init__(message)
        self.column = column


class MissingReviewTextColumnError(MissingColumnError):
    def __init__(self):
        super().__init__("review_text", "CSV must contain 'review_text' column.")


class MissingProductColumnError(MissingColumnError):
    def __init__(self):
        super().__init__(
            "product_id|product_title",
            "CSV must contain either 'product_id' or 'product_title' column.",
        )


class EmptyCsvError(ReviewInputError):
    def __init__(self):
        super().__init__("CSV file must contain headers and at least one row of data.")


class AnalysisError(RuntimeError):
    """A single product's model-backed analysis could not be produced."""


class UpstreamRequestError(AnalysisError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(AnalysisError):
    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text

from __future__ import annotations
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from . import pipeline
from .config import CFG, Settings
from .errors import MalformedResponseError, ReviewInputError, UpstreamRequestError
from .ingest import load_reviews
from .llm_client import LLMClient
from .normalizer import load_json_object
from .requester import request_analysis


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


def _as_review(item: Any) -> Dict[str, Any]:
    return item if isinstance(item, dict) else {"review_text": str(item)}


def create_app(settings: Optional[Settings] = None, client=None) -> FastAPI:
    """
    HTTP front for the pipeline. `client` is injected in tests; otherwise an
    LLMClient is built from `settings` on first use.
    """
    settings = settings or CFG
    app = FastAPI(title="Review Feature Insights", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.client = client

    def get_client():
        if app.state.client is None:
            app.state.client = LLMClient(settings)
        return app.state.client

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            allowed = (exc.headers or {}).get("Allow", "POST")
            return _error(405, f"Method not allowed. Use {allowed}.")
        return _error(exc.status_code, str(exc.detail))

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/api/analyze-reviews")
    async def analyze_reviews(request: Request):
        try:
            body = await request.json()
        except ValueError:
            return _error(400, "Request body must be JSON")
        if not isinstance(body, dict):
            return _error(400, "Missing productName or reviews array")

        product_name = body.get("productName")
        reviews = body.get("reviews")
        if not product_name or not isinstance(reviews, list):
            return _error(400, "Missing productName or reviews array")

        limit = settings.max_reviews_per_prompt
        limited: List[Dict[str, Any]] = [_as_review(r) for r in reviews[:limit]]
        try:
            raw = await run_in_threadpool(request_analysis, get_client(), str(product_name), limited, limit)
            analysis = load_json_object(raw)
        except UpstreamRequestError as e:
            print(f"[error] model request failed for product={product_name!r}: {e}")
            return _error(500, "Failed to generate analysis")
        except MalformedResponseError as e:
            print(f"[error] could not parse model output for product={product_name!r}: {e}")
            return _error(500, "Invalid JSON from model")
        except Exception as e:
            print(f"[error] analysis failed for product={product_name!r}: {type(e).__name__}: {e}")
            return _error(500, "Failed to generate analysis")
        return {"analysis": analysis}

    @app.post("/api/process-csv")
    async def process_csv(request: Request):
        text = (await request.body()).decode("utf-8-sig", errors="replace")
        try:
            rows = load_reviews(text)
        except ReviewInputError as e:
            return _error(400, str(e))
        try:
            records = await run_in_threadpool(pipeline.run, rows, get_client(), settings)
        except Exception as e:
            print(f"[error] could not process CSV: {type(e).__name__}: {e}")
            return _error(500, "Failed to generate analysis")
        return {"products": [r.to_dict() for r in records]}

    return app


app = create_app()

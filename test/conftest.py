import json
import pytest
from src.config import Settings
from src.errors import UpstreamRequestError


class FailingClient:
    """Stands in for LLMClient when the upstream is down."""

    def __init__(self):
        self.prompts = []

    def complete_text(self, prompt):
        self.prompts.append(prompt)
        raise UpstreamRequestError("API call failed: 503", status_code=503)

    def close(self):
        pass


class ScriptedClient:
    """Returns a canned reply per product, picked by the product name in the prompt."""

    def __init__(self, replies, default="not json at all"):
        self.replies = replies
        self.default = default
        self.prompts = []

    def complete_text(self, prompt):
        self.prompts.append(prompt)
        for name, reply in self.replies.items():
            if f'"{name}"' in prompt:
                if isinstance(reply, Exception):
                    raise reply
                return reply
        return self.default

    def close(self):
        pass


@pytest.fixture
def settings(tmp_path):
    return Settings(
        llm_provider="gemini",
        gemini_api_key="test-key",
        llm_max_attempts=1,
        max_reviews_per_prompt=20,
        max_workers=1,
        cache_dir=str(tmp_path / "cache"),
        cache_enabled=False,
    )


@pytest.fixture
def failing_client():
    return FailingClient()


@pytest.fixture
def scripted_client():
    return ScriptedClient


@pytest.fixture
def model_payload():
    return {
        "category": "Kitchen",
        "features": {
            "Blade": {"positive": ["Sharp"], "negative": ["Rusts"], "mentions": 4},
            "Handle": {"positive": ["Comfortable grip"], "negative": [], "mentions": 2},
        },
        "mostAppreciated": ["Sharp blade", "Grip", "Balance"],
        "leastAppreciated": ["Rust", "Price", "Sheath"],
        "overallSentiment": "positive",
    }


@pytest.fixture
def fenced_reply(model_payload):
    return "Here you go:\n```json\n" + json.dumps(model_payload, indent=2) + "\n```\nThanks!"

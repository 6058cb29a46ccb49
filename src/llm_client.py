import hashlib
import json
from pathlib import Path
from typing import Any, Dict, Optional
import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from .config import CFG, Settings
from .errors import UpstreamRequestError

PROVIDERS = {"gemini", "openai"}
OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def _gemini_text(data: Dict[str, Any]) -> str:
    try:
        return data["candidates"][0]["content"]["parts"][0].get("text") or ""
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""


def _openai_text(data: Dict[str, Any]) -> str:
    try:
        return data["choices"][0]["message"].get("content") or ""
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""


class LLMClient:
    """
    Handles remote providers (Gemini, OpenAI) with:
      - complete_text(prompt) -> str
    Each call is bounded by settings.request_timeout. Non-2xx responses,
    timeouts and transport failures raise UpstreamRequestError. Transport
    failures are retried only when settings.llm_max_attempts > 1.
    Optional file caching keyed by prompt to reduce calls.
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[httpx.Client] = None):
        self.settings = settings or CFG
        self.provider = self.settings.llm_provider
        if self.provider not in PROVIDERS:
            raise ValueError(f"Unsupported LLM_PROVIDER '{self.provider}', expected one of {sorted(PROVIDERS)}")
        self.session = session or httpx.Client(timeout=self.settings.request_timeout)
        self._cache = Path(self.settings.cache_dir)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    @property
    def model(self) -> str:
        return self.settings.gemini_model if self.provider == "gemini" else self.settings.openai_model

    # ---------------- cache helpers ----------------
    def _cache_key(self, prompt: str) -> Path:
        h = hashlib.sha256(f"{self.provider}|{self.model}|{prompt}".encode()).hexdigest()
        return self._cache / (h + ".json")

    def _cached(self, prompt: str) -> Optional[str]:
        if not self.settings.cache_enabled:
            return None
        p = self._cache_key(prompt)
        if not p.exists():
            return None
        try:
            return json.loads(p.read_text())["text"]
        except (ValueError, KeyError):
            return None

    def _save_cache(self, prompt: str, content: str):
        if not self.settings.cache_enabled or not content:
            return
        self._cache.mkdir(parents=True, exist_ok=True)
        self._cache_key(prompt).write_text(json.dumps({"text": content}))

    # ---------------- transport ----------------
    def _post(self, url: str, payload: Dict[str, Any], **kwargs) -> Dict[str, Any]:
        retrying = Retrying(
            stop=stop_after_attempt(max(1, self.settings.llm_max_attempts)),
            wait=wait_exponential(multiplier=1, min=1, max=30),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    r = self.session.post(url, json=payload, timeout=self.settings.request_timeout, **kwargs)
            r.raise_for_status()
            return r.json()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            raise UpstreamRequestError(f"{self.provider} API call failed: {code}", status_code=code) from e
        except httpx.TimeoutException as e:
            raise UpstreamRequestError(
                f"{self.provider} API call timed out after {self.settings.request_timeout}s"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamRequestError(f"{self.provider} API call failed: {e}") from e
        except ValueError as e:
            raise UpstreamRequestError(f"{self.provider} API returned a non-JSON body") from e

    # ---------------- remote completions ----------------
    def complete_text(self, prompt: str) -> str:
        cached = self._cached(prompt)
        if cached is not None:
            return cached

        if self.provider == "gemini":
            data = self._post(
                self.settings.gemini_url,
                {"contents": [{"parts": [{"text": prompt}]}]},
                params={"key": self.settings.gemini_api_key or ""},
            )
            content = _gemini_text(data)

        else:
            payload = {
                "model": self.settings.openai_model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": self.settings.temperature,
                "max_tokens": self.settings.max_tokens,
            }
            headers = {"Authorization": f"Bearer {self.settings.openai_api_key}"}
            data = self._post(OPENAI_URL, payload, headers=headers)
            content = _openai_text(data)

        self._save_cache(prompt, content)
        return content

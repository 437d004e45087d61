from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from ..core.constants import DEFAULT_SUMMARY_MODEL, DEFAULT_SUMMARY_TIMEOUT_SECONDS, SUMMARY_TEMPERATURE
from ..core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class Summarizer(Protocol):
    """Text in, text out. Any failure surfaces as UpstreamError."""

    def summarize(self, system_prompt: str, user_text: str) -> str:
        raise NotImplementedError


class OpenAIChatSummarizer(Summarizer):
    """Summarizer backed by an OpenAI-compatible ``/chat/completions`` endpoint.

    Each call is bounded by ``timeout`` seconds. A connection error (request
    never reached the server) is retried once; timeouts and HTTP errors are not.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str = DEFAULT_SUMMARY_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_SUMMARY_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self._api_key = api_key
        self._model = model
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._timeout = float(timeout)
        self._session = session or requests.Session()

    def _post(self, payload: dict) -> requests.Response:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }
        try:
            return self._session.post(self._url, headers=headers, json=payload, timeout=self._timeout)
        except requests.ConnectTimeout:
            # also a ConnectionError, but it already used up the timeout
            raise
        except requests.ConnectionError:
            logger.warning("summarizer connection failed, retrying once")
            return self._session.post(self._url, headers=headers, json=payload, timeout=self._timeout)

    def summarize(self, system_prompt: str, user_text: str) -> str:
        if not self._api_key:
            raise UpstreamError("AI summarizer is not configured")

        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            "temperature": SUMMARY_TEMPERATURE,
        }

        try:
            response = self._post(payload)
        except requests.Timeout:
            raise UpstreamError("AI summarizer timed out")
        except requests.RequestException as e:
            raise UpstreamError(f"AI summarizer unavailable: {e}")

        if response.status_code != 200:
            logger.error("summarizer error %s: %s", response.status_code, response.text[:500])
            raise UpstreamError(f"AI summarizer error: {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            raise UpstreamError("AI summarizer returned an unexpected response")

        if not content or not content.strip():
            raise UpstreamError("AI summarizer returned an empty summary")
        return content.strip()

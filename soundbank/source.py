"""Sound generation via the ElevenLabs sound-generation endpoint, with retry logic."""

import logging
import time

import requests

from soundbank.constants import (
    SOURCE_URL,
    SOURCE_TIMEOUT_SECONDS,
    SOURCE_RETRY_COUNT,
    SOURCE_RETRY_BASE_DELAY,
)
from soundbank.errors import SourceError

logger = logging.getLogger(__name__)


class SoundGenerationClient:
    """Turn a text prompt (and optional target duration) into encoded audio bytes."""

    def __init__(
        self,
        api_key: str,
        url: str = SOURCE_URL,
        timeout: float = SOURCE_TIMEOUT_SECONDS,
        retries: int = SOURCE_RETRY_COUNT,
        base_delay: float = SOURCE_RETRY_BASE_DELAY,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.retries = retries
        self.base_delay = base_delay
        self.session = session or requests.Session()

    def _request(self, prompt: str, duration_seconds: float | None) -> bytes:
        body = {"text": prompt}
        if duration_seconds:
            body["duration_seconds"] = duration_seconds
        try:
            response = self.session.post(
                self.url,
                json=body,
                headers={"xi-api-key": self.api_key, "Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SourceError(f"Request failed: {e}") from e
        if not response.ok:
            raise SourceError(f"HTTP {response.status_code}: {response.text[:200]}")
        if not response.content:
            raise SourceError(f"Empty response for: {prompt[:50]}...")
        return response.content

    def generate(self, prompt: str, duration_seconds: float | None = None) -> bytes:
        """Generate one clip. Retries with exponential backoff, then raises SourceError."""
        last_error = None
        for attempt in range(self.retries):
            try:
                return self._request(prompt, duration_seconds)
            except SourceError as e:
                last_error = e
                logger.debug("generation attempt %d/%d failed: %s", attempt + 1, self.retries, e)

            if attempt < self.retries - 1:
                time.sleep(self.base_delay * (2 ** attempt))

        raise last_error

from __future__ import annotations

import logging
import time
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    ),
}


class JsonHttpClient:
    """GET + JSON decode with linear backoff. Returns ``None`` once retries run out."""

    def __init__(
        self,
        *,
        name: str,
        timeout_s: float = 10.0,
        max_retries: int = 3,
        backoff_base_s: float = 1.0,
        headers: dict[str, str] | None = None,
    ):
        self.name = name
        self.timeout_s = timeout_s
        self.max_retries = max(1, max_retries)
        self.backoff_base_s = backoff_base_s
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}

    def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any | None:
        for attempt in range(1, self.max_retries + 1):
            try:
                r = requests.get(url, params=params, headers=self.headers, timeout=self.timeout_s)
                r.raise_for_status()
                return r.json()
            except requests.RequestException as e:
                logger.warning("%s error (attempt %s/%s): %s", self.name, attempt, self.max_retries, e)
                if attempt == self.max_retries:
                    return None
                time.sleep(self.backoff_base_s * attempt)
        return None

"""
HTTP клиент для домена Ingestion.

Тонкая обёртка над requests.Session: таймаут, User-Agent, ошибки домена.
"""

from typing import Optional

import requests
from loguru import logger

from src.schedule.domain.exceptions import DocumentFetchError


DEFAULT_HEADERS = {
    "User-Agent": "cathedral-music-list/1.0 (+schedule reader)",
}


class HttpFetcher:
    """Загрузка страниц и документов по HTTP."""

    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)

    def _get(self, url: str) -> requests.Response:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            raise DocumentFetchError(
                message=f"Не удалось загрузить: {url}",
                component="HttpFetcher",
                original_error=e,
            )

    def fetch_text(self, url: str) -> str:
        response = self._get(url)
        logger.debug(f"[HttpFetcher] GET {url}: {len(response.text)} символов")
        return response.text

    def fetch_bytes(self, url: str) -> bytes:
        response = self._get(url)
        logger.debug(f"[HttpFetcher] GET {url}: {len(response.content)} байт")
        return response.content

"""HTTP client for the remote automation service."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import requests

from ..errors import ServiceError, ServiceUnavailable

if TYPE_CHECKING:
    from ..config import ServiceConfig

logger = logging.getLogger(__name__)

REPOS_ENDPOINT = "/repos"
PUSH_FILE_ENDPOINT = "/push-file"
COMMIT_COMMENT_ENDPOINT = "/add-commit-comment"
TICKETS_ENDPOINT = "/api/tickets"
GENERATE_CODE_ENDPOINT = "/generate_code"

FileTuple = Tuple[str, bytes, str]


class ServiceClient:
    """Thin wrapper around a `requests.Session` bound to one service base URL.

    Transport failures become `ServiceUnavailable`; non-2xx statuses and
    unreadable bodies become `ServiceError`. Nothing is retried here.
    """

    def __init__(self, config: "ServiceConfig", session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.timeout
        self.session = session or requests.Session()

        proxy = config.proxy or os.environ.get("HTTPS_PROXY") or os.environ.get("HTTP_PROXY")
        if proxy:
            self.session.proxies = {"http": proxy, "https": proxy}
            logger.info("Service client using proxy: %s", proxy)

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def get_json(self, endpoint: str) -> Dict[str, Any]:
        return self._request("GET", endpoint)

    def post_json(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", endpoint, json=payload)

    def post_multipart(
        self,
        endpoint: str,
        data: Dict[str, str],
        files: Dict[str, FileTuple],
    ) -> Dict[str, Any]:
        return self._request("POST", endpoint, data=data, files=files)

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Dict[str, Any]:
        url = self.url_for(endpoint)
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as exc:
            logger.error("Could not reach %s: %s", url, exc)
            raise ServiceUnavailable(endpoint, str(exc)) from exc
        except requests.exceptions.RequestException as exc:
            # Broken transfers, redirect loops and malformed URLs.
            logger.error("Request to %s failed: %s", url, exc)
            raise ServiceUnavailable(endpoint, str(exc)) from exc

        logger.debug("Response status: %s", response.status_code)
        if not response.ok:
            logger.error("Error response from %s: %s", endpoint, response.text[:500])
            raise ServiceError(
                endpoint,
                f"API error: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ServiceError(
                endpoint,
                "The service returned a response that is not valid JSON",
                status_code=response.status_code,
            ) from exc

        if not isinstance(data, dict):
            raise ServiceError(endpoint, "The service returned an unexpected response shape")
        return data


def ensure_success(endpoint: str, data: Dict[str, Any], fallback: str) -> Dict[str, Any]:
    """Raise `ServiceError` unless the envelope reports `success: true`."""
    if not data.get("success"):
        raise ServiceError(endpoint, data.get("error") or fallback)
    return data

"""
api_client.py

Responsibility: Isolate all direct rnplay.org REST API interaction.

This module must be the only place that:
- Constructs rnplay.org API endpoints
- Sends HTTP requests to the service
- Interprets API responses / error payloads

Requests are attempted once; failures surface as RemoteApiError.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from rnplay.config import GlobalConfig
from rnplay.settings import Settings

logger = logging.getLogger(__name__)


class RemoteApiError(RuntimeError):
    pass


class RnplayClient:
    def __init__(self, settings: Settings, *, timeout: float = 30) -> None:
        self._apps_endpoint = settings.apps_endpoint
        self._timeout = timeout

    def _headers(self, credentials: GlobalConfig) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-User-Email": credentials.email,
            "X-User-Token": credentials.token,
        }

    def _request(
        self,
        method: str,
        url: str,
        credentials: GlobalConfig,
        *,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        try:
            r = requests.request(
                method, url, headers=self._headers(credentials), json=json_body, timeout=self._timeout
            )
        except requests.RequestException as e:
            raise RemoteApiError(f"rnplay.org API request failed {method} {url}: {e}") from e
        if r.status_code >= 400:
            try:
                payload = r.json()
            except ValueError:
                payload = {"error": r.text}
            message = payload.get("error", payload) if isinstance(payload, dict) else payload
            raise RemoteApiError(f"rnplay.org API error {r.status_code} {method} {url}: {message}")
        try:
            return r.json()
        except ValueError as e:
            raise RemoteApiError(f"rnplay.org API returned a non-JSON body for {method} {url}") from e

    def create_app(self, name: str, credentials: GlobalConfig) -> str:
        """
        Create a git-backed app named `name` and return its url token.
        """
        logger.info("Setting up new git repo")
        data = self._request(
            "POST",
            self._apps_endpoint,
            credentials,
            json_body={"app": {"name": name, "uses_git": 1}},
        )
        url_token = data.get("url_token") if isinstance(data, dict) else None
        if not isinstance(url_token, str) or not url_token:
            raise RemoteApiError(f"rnplay.org API response is missing `url_token`: {data}")
        logger.debug("Created app %r with url token %s", name, url_token)
        return url_token

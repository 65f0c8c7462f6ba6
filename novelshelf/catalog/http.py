"""Blocking HTTP transport shared by catalog search and content fetch.

Responsibilities:
- Issue single-attempt GET requests through `requests`.
- Map transport and status failures to `NetworkFailure` with concise messages.
- Decode JSON envelopes and UTF-8 text, mapping failures to `DecodeFailure`.
"""

from __future__ import annotations

import json
import socket
from typing import Any, Mapping

import requests

from ..errors import DecodeFailure, NetworkFailure


class HTTPTransport:
    """Minimal requests-based GET client without retries."""

    _MAX_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        timeout_seconds: float | None = None,
        user_agent: str = "novelshelf",
    ) -> None:
        """Initialize request settings."""

        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent

    def get_bytes(self, url: str, *, params: Mapping[str, str] | None = None) -> bytes:
        """GET `url` and return the raw response body.

        Raises:
            NetworkFailure: On transport errors, timeouts, or non-2xx status codes.
        """

        try:
            response = requests.get(
                url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            return bytes(response.content)
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else 0
            raise NetworkFailure(
                f"Request failed (HTTP {status_code}).",
                status_code=status_code,
            ) from exc
        except requests.RequestException as exc:
            if self._classify_transport_failure(exc) == "timeout":
                raise NetworkFailure("Request timed out.") from exc
            raise NetworkFailure(
                f"Request transport error: {self._short_message(str(exc))}"
            ) from exc
        except TimeoutError as exc:
            raise NetworkFailure("Request timed out.") from exc
        except Exception as exc:
            raise NetworkFailure(f"Request failed: {self._short_message(str(exc))}") from exc

    def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        """GET `url` and decode the body as JSON."""

        raw_payload = self.get_bytes(url, params=params)
        try:
            return json.loads(raw_payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeFailure("Response body is not valid JSON.") from exc

    def get_text(self, url: str) -> str:
        """GET `url` and decode the body as strict UTF-8 text."""

        raw_payload = self.get_bytes(url)
        if not raw_payload:
            raise DecodeFailure("Response body is empty.")
        try:
            return raw_payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeFailure("Response body is not valid UTF-8.") from exc

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap diagnostic message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_MESSAGE_CHARS - 1]}..."

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

"""Configuration model and loaders for novelshelf.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `NovelshelfConfig`: normalized runtime settings for catalog and content access.
- `ConfigLoader`: static construction helpers for `NovelshelfConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import os
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlparse

import yaml

from .parsing import (
    normalize_optional_string,
    parse_optional_positive_float,
    parse_permissive_boolean,
)


DEFAULT_CATALOG_URL = "https://gutendex.com/books"
DEFAULT_SOURCE_PREFIX = "gut"
DEFAULT_SOURCE_LABEL = "Gutenberg"
DEFAULT_USER_AGENT = "novelshelf"


@dataclass(slots=True)
class NovelshelfConfig:
    """Runtime configuration for catalog search and chapter reads.

    Attributes:
        catalog_url: Catalog search endpoint; the query is sent as `?search=`.
        source_prefix: Namespace prepended to catalog ids when building work ids.
        source_label: Display label stored on every work.
        request_timeout_seconds: Optional per-request timeout; `None` waits indefinitely.
        cancel_superseded: Whether a new search cancels the one still in flight.
        user_agent: `User-Agent` header sent with every request.
    """

    catalog_url: str = DEFAULT_CATALOG_URL
    source_prefix: str = DEFAULT_SOURCE_PREFIX
    source_label: str = DEFAULT_SOURCE_LABEL
    request_timeout_seconds: float | None = None
    cancel_superseded: bool = True
    user_agent: str = DEFAULT_USER_AGENT

    def validate(self) -> None:
        """Validate configuration values before use."""

        self._require_non_empty(self.catalog_url, "catalog_url")
        self._require_non_empty(self.source_prefix, "source_prefix")
        self._require_non_empty(self.source_label, "source_label")
        self._require_non_empty(self.user_agent, "user_agent")
        parsed = urlparse(self.catalog_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("`catalog_url` must be an absolute http(s) URL.")
        timeout = self.request_timeout_seconds
        if timeout is not None and (not math.isfinite(timeout) or timeout <= 0):
            raise ValueError("`request_timeout_seconds` must be a positive number of seconds.")

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that configuration string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `NovelshelfConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "catalog_url",
            "source_prefix",
            "source_label",
            "request_timeout_seconds",
            "cancel_superseded",
            "user_agent",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> NovelshelfConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> NovelshelfConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        catalog_url = (
            ConfigLoader._optional_env_string(env_map, "NOVELSHELF_CATALOG_URL")
            or DEFAULT_CATALOG_URL
        )
        source_prefix = (
            ConfigLoader._optional_env_string(env_map, "NOVELSHELF_SOURCE_PREFIX")
            or DEFAULT_SOURCE_PREFIX
        )
        source_label = (
            ConfigLoader._optional_env_string(env_map, "NOVELSHELF_SOURCE_LABEL")
            or DEFAULT_SOURCE_LABEL
        )
        user_agent = (
            ConfigLoader._optional_env_string(env_map, "NOVELSHELF_USER_AGENT")
            or DEFAULT_USER_AGENT
        )
        timeout = parse_optional_positive_float(
            env_map.get("NOVELSHELF_REQUEST_TIMEOUT_SECONDS"),
            "NOVELSHELF_REQUEST_TIMEOUT_SECONDS",
        )
        cancel_superseded = ConfigLoader._optional_env_boolean(
            env_map, "NOVELSHELF_CANCEL_SUPERSEDED"
        )

        config = NovelshelfConfig(
            catalog_url=catalog_url,
            source_prefix=source_prefix,
            source_label=source_label,
            request_timeout_seconds=timeout,
            cancel_superseded=True if cancel_superseded is None else cancel_superseded,
            user_agent=user_agent,
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> NovelshelfConfig:
        """Build a validated config from a normalized mapping payload."""

        ConfigLoader._validate_yaml_keys(payload, source_label)

        catalog_url = (
            ConfigLoader._optional_non_empty_string(payload, "catalog_url")
            or DEFAULT_CATALOG_URL
        )
        source_prefix = (
            ConfigLoader._optional_non_empty_string(payload, "source_prefix")
            or DEFAULT_SOURCE_PREFIX
        )
        catalog_label = (
            ConfigLoader._optional_non_empty_string(payload, "source_label")
            or DEFAULT_SOURCE_LABEL
        )
        user_agent = (
            ConfigLoader._optional_non_empty_string(payload, "user_agent")
            or DEFAULT_USER_AGENT
        )
        try:
            timeout = parse_optional_positive_float(
                payload.get("request_timeout_seconds"), "request_timeout_seconds"
            )
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc
        cancel_superseded = ConfigLoader._optional_boolean(
            payload,
            "cancel_superseded",
            source_label,
            default=True,
        )

        config = NovelshelfConfig(
            catalog_url=catalog_url,
            source_prefix=source_prefix,
            source_label=catalog_label,
            request_timeout_seconds=timeout,
            cancel_superseded=cancel_superseded,
            user_agent=user_agent,
        )
        config.validate()
        return config

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Reject keys the loader does not understand."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_env_string(env: Mapping[str, str], key: str) -> str | None:
        """Read and normalize optional string environment variable values."""

        if key not in env:
            return None
        return normalize_optional_string(env.get(key))

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str) -> bool | None:
        """Read an optional boolean from environment mapping."""

        if key not in env:
            return None
        parsed = parse_permissive_boolean(env.get(key))
        if parsed is None:
            raise ValueError(
                f"Environment variable `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

"""Domain exceptions for catalog access and CLI diagnostics.

Catalog and content failures are raised by the HTTP layer and converted into
typed outcomes or fixed display strings at the component boundary. Only
`CommandStageError` ever reaches the user as a failure.
"""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base error for catalog search and content fetch failures."""

    failure_kind = "unknown"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialize error metadata for logged diagnostics."""

        super().__init__(message)
        self.status_code = status_code


class NetworkFailure(CatalogError):
    """Raised on transport, DNS, timeout, or HTTP status failures."""

    failure_kind = "network"


class DecodeFailure(CatalogError):
    """Raised when a payload is not valid JSON, UTF-8, or the expected shape."""

    failure_kind = "decode"


class NotFound(CatalogError):
    """Raised when a work carries no usable text URL."""

    failure_kind = "not_found"


class CommandStageError(RuntimeError):
    """Raised when a specific CLI command stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint

"""Catalog access components for novelshelf.

This package contains the HTTP transport, record normalization, the search
client, and the caller-scoped search session.
"""

from .client import CatalogClient
from .http import HTTPTransport
from .session import SearchSession

__all__ = ["CatalogClient", "HTTPTransport", "SearchSession"]

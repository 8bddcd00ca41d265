"""Exceptions raised by the subgraph query layer."""

from __future__ import annotations

from typing import Optional


class SubgraphQueryError(Exception):
    """Base exception for query layer failures."""


class SubgraphRequestError(SubgraphQueryError):
    """Raised when the indexing service cannot be reached or answers with an error."""


class NormalizationError(SubgraphQueryError):
    """Raised when a response cannot be turned into a complete entity."""

    def __init__(self, message: str, *, kind: Optional[str] = None) -> None:
        super().__init__(f"{kind}: {message}" if kind else message)
        self.kind = kind


class InvalidFilterError(SubgraphQueryError):
    """Raised when a list query carries an unknown filter key or a bad paging window."""


class UnknownChainError(SubgraphQueryError):
    """Raised when no subgraph URL is configured for a chain."""


class UnknownEndpointError(SubgraphQueryError):
    """Raised when an endpoint name is not registered."""

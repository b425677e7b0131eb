"""Upstream I/O: the OFF-X API client."""

from __future__ import annotations

from .client import OffxClient, UpstreamRequest

__all__ = ["OffxClient", "UpstreamRequest"]

"""Exceptions raised by the handler family."""

from __future__ import annotations


class FingersCrossedError(Exception):
    """Base class for all library errors."""


class HandlerConfigError(FingersCrossedError, ValueError):
    """Invalid handler configuration (levels, strategies, sinks, limits)."""


class DeduplicationStoreError(FingersCrossedError, OSError):
    """The deduplication store could not be read or written."""

"""Registries.

Registries replace if/else sprawl: add an implementation, register it, and the
rest of the system stays closed for modification.

Name-based metric lookups live in :mod:`predeval.registries.metrics`; import
them from there (this package is imported by the metric implementations
themselves, so it re-exports only the base class).
"""

from .base import Registry

__all__ = ["Registry"]

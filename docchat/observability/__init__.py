"""Logging, correlation ids and request middleware."""

from docchat.observability.logger import configure_logging

__all__ = ["configure_logging"]

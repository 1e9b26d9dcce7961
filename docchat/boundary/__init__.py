"""Adapters for external systems: database, object storage, search and model providers."""

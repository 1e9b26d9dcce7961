"""Business logic: text processing, ingestion and retrieval."""

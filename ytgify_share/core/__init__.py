"""Shared building blocks: database layer, I/O models, logging, security and storage."""

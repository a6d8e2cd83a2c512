"""Shared utilities: error taxonomy, logging, tracing and serialization."""

"""Integrations with storage and web frameworks (optional dependencies)."""

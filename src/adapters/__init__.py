"""Adapters binding the core ports to httpx, SQLite and notifier endpoints."""

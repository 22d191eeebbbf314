"""Core domain package for release-watch.

Core contains feed parsing, change classification, dedup key derivation and
the check pipeline without any HTTP, SQLite or notifier-specific code, keeping
the business logic portable.
"""

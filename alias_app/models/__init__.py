"""
Database models for the alias shortener.

Canonical URLs are append-only and shared; aliases are mutable (rename,
delete) and reference exactly one canonical URL.
"""

from .alias import Alias, CanonicalURL

__all__ = ["Alias", "CanonicalURL"]

"""
Pure helpers: URL normalization, Base62 codec, namespaced hashing.
"""

from .url_normalizer import normalize, are_equivalent, is_absolute_http_url
from .hashing import namespaced_hash
from . import base62

__all__ = [
    "normalize",
    "are_equivalent",
    "is_absolute_http_url",
    "namespaced_hash",
    "base62",
]

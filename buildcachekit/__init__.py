"""
BuildCacheKit - selective build cache migration.

Copies only the entries of a content-addressed build cache that a known
build plan needed, instead of the whole cache.
"""

__version__ = "0.1.0"

"""Shared pytest fixtures for BuildCacheKit tests."""

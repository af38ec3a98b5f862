"""
Build plan manifests for BuildCacheKit.

Modules:
    reader: Load the JSON manifest listing the cache entries a build needed
"""

from .reader import BuildPlanEntry, filter_plan, load_plan, parse_plan

__all__ = ["BuildPlanEntry", "filter_plan", "load_plan", "parse_plan"]

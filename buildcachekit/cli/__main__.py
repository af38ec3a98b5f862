"""
Entry point for running BuildCacheKit CLI as a module.

Usage: python -m buildcachekit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()

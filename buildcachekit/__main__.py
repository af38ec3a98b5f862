"""
Entry point for running BuildCacheKit CLI as a module.

Usage: python -m buildcachekit [command] [options]
"""

from buildcachekit.cli.parser import main

if __name__ == "__main__":
    main()

"""
Main entry point for running the package as a module.

Usage:
    python -m gallerygen build
    python -m gallerygen report --manifest index.json
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())

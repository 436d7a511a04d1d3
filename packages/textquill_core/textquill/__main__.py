"""
Entry point for running textquill as a module.

Usage:
    python -m textquill notes.txt -o notes.ps
    textquill --format pdf notes.txt -o notes.pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

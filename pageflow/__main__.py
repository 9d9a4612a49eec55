"""
Entry point for running pageflow as a module.

Usage:
    python -m pageflow render input.html --output output.pdf
    python -m pageflow pagesize --css style.css
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

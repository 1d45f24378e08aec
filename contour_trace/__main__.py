"""
Main entry point for the contour_trace package.

Allows running: python -m contour_trace <command>
"""

import sys
from contour_trace.cli import main

if __name__ == "__main__":
    sys.exit(main())

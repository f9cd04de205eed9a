"""Module entry point for skysweep.

Run with: python -m skysweep
"""

import sys

from .app import main

if __name__ == "__main__":
    sys.exit(main())

"""
Entry point for module execution (``python -m unborrow``).

This module delegates execution to the CLI handler in ``unborrow.cli.__main__``.
"""

import sys
from unborrow.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())

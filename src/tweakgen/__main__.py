"""
Entry point for module execution (``python -m tweakgen``).
"""

import sys
from tweakgen.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())

"""
Module execution entry point.

Allows running with: python -m packvault_cli
"""

import sys
from packvault_cli.main import main

if __name__ == "__main__":
    sys.exit(main())

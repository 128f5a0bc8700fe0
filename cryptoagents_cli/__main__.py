"""
Module execution entry point.

Allows running with: python -m cryptoagents_cli
"""

import sys
from cryptoagents_cli.main import main

if __name__ == "__main__":
    sys.exit(main())

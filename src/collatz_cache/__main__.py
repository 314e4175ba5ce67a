"""Allow ``python -m collatz_cache``."""

import sys

from collatz_cache.cli import main

if __name__ == "__main__":
    sys.exit(main())

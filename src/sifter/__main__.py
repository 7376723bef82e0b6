"""CLI entrypoint for sifter."""

from __future__ import annotations

import sys

from sifter.cli import main

if __name__ == "__main__":
    sys.exit(main())

"""Module entry point for ``python -m text2vibe``."""

from __future__ import annotations

import sys

from text2vibe.cli import main

if __name__ == "__main__":  # pragma: no cover - module execution
    sys.exit(main())

"""Entry point for ``python -m tormeta``."""

from __future__ import annotations

from tormeta.cli.main import main

if __name__ == "__main__":
    main()

"""Allow ``python -m capture_enhancer`` to run the command line interface."""

from __future__ import annotations

from .cli import main


if __name__ == "__main__":  # pragma: no cover
    main()

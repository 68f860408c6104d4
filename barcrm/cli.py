"""Command-line entry point."""

from __future__ import annotations

import sys
from typing import Sequence

APP_TITLE = "Bar CRM - Restaurant Member Management System"
APP_VERSION = "1.0.0"


def _banner() -> str:
    """Return the application banner, one line per entry, newline-terminated."""
    lines = (APP_TITLE, f"Version: {APP_VERSION}")
    return "".join(f"{line}\n" for line in lines)


def main(argv: Sequence[str] | None = None) -> int:
    """Write the application banner and version; arguments are ignored."""
    sys.stdout.write(_banner())
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
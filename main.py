"""Main entry point for the hunt session log parser."""
from __future__ import annotations

import sys

from dotenv import load_dotenv

from app.startup import run_application


def main() -> None:
    """Application entry point."""
    # .env may hold HUNTLOG_* overrides; the shell environment still wins
    load_dotenv()
    sys.exit(run_application())


__all__ = ["main"]

if __name__ == "__main__":
    main()

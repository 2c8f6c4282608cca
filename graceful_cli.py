# graceful_cli.py
from graceful.config import load_env

# --- .env loader (project root is where this file lives) ---
load_env()
# -----------------------------------------------------------

from graceful.cli import run  # noqa: E402


def main() -> None:
    run()


if __name__ == "__main__":
    main()

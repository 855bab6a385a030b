"""Runs a socketbolt app with repository-relative imports."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a Socket Mode bot.")
    parser.add_argument(
        "--handlers",
        action="append",
        default=None,
        help="Directory or file with handler classes (repeatable). Defaults to SOCKETBOLT_HANDLER_PATHS.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))

    # Lazy import after adjusting sys.path
    from socketbolt import App, get_settings  # type: ignore

    args = _parse_args(argv)
    settings = get_settings()
    if args.handlers:
        settings = settings.model_copy(update={"handler_paths": [Path(item) for item in args.handlers]})
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    App(settings).run()


if __name__ == "__main__":
    main()

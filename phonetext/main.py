"""Entry point that launches the phonemization web API."""

from __future__ import annotations

import logging
import os
import sys

from phonetext.webui.app import main as _run_web_ui


def _configure_logging() -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    level_name = os.environ.get("PHONETEXT_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))


def main() -> None:
    """Launch the Flask-based API."""

    _configure_logging()
    _run_web_ui()


if __name__ == "__main__":  # pragma: no cover - manual execution hook
    main()

"""Shared logging helpers for nvrsync."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    A batch run logs one line per object decision at INFO, so the format stays
    terse. Pass ``force=True`` to reconfigure during tests or when the CLI
    switches to verbose output.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    # httpx logs every request at INFO, which drowns the per-object lines.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

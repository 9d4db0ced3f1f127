"""Logging configuration for the taskr CLI."""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from taskr.config import log_file

# Handlers added by the last setup_logging() call
_installed = []


def setup_logging(
    verbose: bool = False,
    log_path: Optional[Path] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Configure logging with:
    - Console handler: rich, on stderr, warnings only unless verbose
    - File handler: everything, for debugging

    Call this once, before the first command runs.
    """
    log_path = Path(log_path) if log_path is not None else log_file()

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Drop handlers from an earlier call to avoid duplicates.
    while _installed:
        h = _installed.pop()
        root.removeHandler(h)
        h.close()

    ch = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    ch.setLevel(logging.DEBUG if verbose else logging.WARNING)
    ch.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(ch)
    _installed.append(ch)

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("File logging disabled: %s", e)
        return

    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(fh)
    _installed.append(fh)

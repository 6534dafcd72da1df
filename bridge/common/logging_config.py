# bridge/common/logging_config.py
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_PREFIX = "bridge"


def logs_root(base: Optional[Path] = None) -> Path:
    root = (base or Path.cwd()) / "logs"
    root.mkdir(parents=True, exist_ok=True)
    return root


def make_log_path(*, suffix: str | None = None, directory: Path | None = None) -> Path:
    root = directory if directory else logs_root()
    ts = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    base = f"{LOG_PREFIX}_{ts}"
    if suffix:
        base += f"_{suffix}"
    return root / f"{base}.log"


def configure_console_logging(verbose: int = 0) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # Keep the console at the requested level even if a file handler lowers the root level later
    for h in logging.getLogger().handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setLevel(level)


def configure_file_logging(app_log_path: Path) -> None:
    """
    Add a file handler to the root logger (idempotent).
    """
    root = logging.getLogger()
    app_log_path.parent.mkdir(parents=True, exist_ok=True)
    target = str(app_log_path.resolve())

    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(app_log_path, encoding="utf-8", delay=True)
    fh.setLevel(logging.INFO)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)

    if root.level > logging.INFO:
        root.setLevel(logging.INFO)

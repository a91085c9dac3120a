# rownum/pipeline/logger.py
from __future__ import annotations

import logging
from pathlib import Path
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logger(
    log_dir: str | Path,
    *,
    level: int | str = logging.INFO,
    filename_prefix: str = "rownum",
    console: bool = False,
    force: bool = False,
) -> Path:
    """
    Configure root logging to a timestamped file in ``log_dir``.

    ``log_dir`` is normally the run's log directory; a path with a suffix is
    treated as a file and its parent is used. Returns the log file path.
    Call once at process start; pass ``force=True`` to drop handlers left
    by an earlier call.
    """
    level = _resolve_level(level)
    p = Path(log_dir).expanduser()
    target_dir = p if (p.is_dir() or not p.suffix) else p.parent
    target_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = target_dir / f"{filename_prefix}_{ts}.log"

    root = logging.getLogger()
    if force:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    handlers: list[logging.Handler] = [
        logging.FileHandler(log_path, mode="w", encoding="utf-8")
    ]
    if console:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
        root.addHandler(handler)

    root.info("Logging to: %s", str(log_path))
    return log_path

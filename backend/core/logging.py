from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from core.config import BACKEND_DIR


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_FILE = "timetable.log"

# Logger name -> level floor applied unless LOG_LEVEL is set explicitly.
_QUIET_LOGGERS = {
    "solver.greedy_scheduler": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
}


def _resolve_level(environment: str, level_override: str | None) -> int:
    if level_override:
        return logging.getLevelName(level_override)
    return logging.INFO if environment == "production" else logging.DEBUG


def _rotating_file(level: int, formatter: logging.Formatter) -> logging.Handler:
    logs_dir = Path(BACKEND_DIR) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        logs_dir / LOG_FILE,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(*, environment: str, level_override: str | None = None) -> None:
    """Configure root logging once per process.

    Console output everywhere; production also writes a rotating file under
    `backend/logs/`. An explicit `level_override` wins over the environment default
    and also un-quiets the per-slot scheduler logs.
    """

    root = logging.getLogger()
    if root.handlers:
        return

    env = (environment or "development").strip().lower()
    level = _resolve_level(env, level_override)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]
    if env == "production":
        handlers.append(_rotating_file(level, formatter))

    logging.basicConfig(level=level, handlers=handlers)

    for name, floor in _QUIET_LOGGERS.items():
        if level_override is None or name == "sqlalchemy.engine":
            logging.getLogger(name).setLevel(max(level, floor))
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)

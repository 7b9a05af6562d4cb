import logging
from colorlog import ColoredFormatter
from app.core.settings import settings

LOG_FORMAT = (
    "%(log_color)s%(asctime)s %(levelname)-8s "
    "%(reset)s%(purple)s%(name)s%(reset)s %(message)s"
)

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}


def _build_logger(name: str, level: str) -> logging.Logger:
    log = logging.getLogger(name)
    log.setLevel(level.upper())
    log.propagate = False
    # re-imports (uvicorn reload, test collection) must not stack handlers
    if not any(getattr(h, "_h1b", False) for h in log.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", reset=True, log_colors=LOG_COLORS))
        handler._h1b = True
        log.addHandler(handler)
    return log


logger = _build_logger("h1b", settings.LOG_LEVEL)

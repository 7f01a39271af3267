import logging
import logging.handlers

from rich.console import Console
from rich.logging import RichHandler

from .config import Settings

_FILE_FORMAT = "%(asctime)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"

# Loggers that would drown the per-cycle debug output
_QUIET_LOGGERS = ("uvicorn.access", "asyncio", "aiofiles")


def _console_handler(level: str) -> RichHandler:
    handler = RichHandler(
        console=Console(width=120),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    return handler


def _file_handler(settings: Settings, level: str) -> logging.Handler:
    settings.log_directory.mkdir(parents=True, exist_ok=True)
    # Midnight rotation; one backup per retained day
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=settings.log_file_path,
        when="midnight",
        backupCount=settings.log_retention_days,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def setup_logging(settings: Settings) -> None:
    """Route the root logger to the rich console and the rotating watcher log."""
    level = settings.log_level.upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_console_handler(level))
    root_logger.addHandler(_file_handler(settings, level))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(
        f"[bold green]Watcher logging ready[/] - file [cyan]{settings.log_file_path}[/] "
        f"at [yellow]{level}[/], keeping [blue]{settings.log_retention_days}[/] days"
    )

"""Logging setup with a Rich handler for the paragraph engine packages."""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from engine.config import EngineConfig

ENGINE_LOGGERS = ["engine", "extractors", "models", "processors", "utils"]


def configure_logging(config: Optional[EngineConfig] = None, console: Optional[Console] = None) -> Console:
    """
    Route engine logs through Rich.

    The level comes from the config, or from LOG_LEVEL when no config is
    given; third-party loggers stay at WARNING.
    """
    if config is None:
        config = EngineConfig(log_level=os.getenv("LOG_LEVEL", "INFO").upper())

    console = console or Console(stderr=True)

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=True
    )

    # Silence everything by default
    logging.basicConfig(level=logging.WARNING, format="%(message)s", handlers=[rich_handler], force=True)

    # pdfminer is very chatty at DEBUG
    logging.getLogger("pdfminer").setLevel(logging.WARNING)

    for module_name in ENGINE_LOGGERS:
        logging.getLogger(module_name).setLevel(config.effective_log_level)

    return console

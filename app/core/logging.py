import logging
import sys
from app.core.config import settings

def configure_logging() -> None:
    """
    Configure console logging for the relay.

    Relay modules log at `settings.log_level`; third-party loggers named in
    `settings.quiet_loggers` are held at WARNING.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        fmt=settings.log_format,
        datefmt="%Y-%m-%dT%H:%M:%S%z"
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    for name in settings.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

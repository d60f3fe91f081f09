"""Functions for logging."""

import logging

# HTTP client libraries that log every connection at INFO and DEBUG
NOISY_LOGGERS = ("urllib3", "requests")


def setup_logger(level: str) -> None:
    """Configure the root logger so all modules log to stderr.

    Transfer progress is reported at INFO, so the HTTP client loggers are held
    at WARNING unless DEBUG output was asked for.
    """
    level_value = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    # Remove all handlers associated with the root logger (avoid duplicate logs)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(handler)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level_value if level_value <= logging.DEBUG else logging.WARNING)

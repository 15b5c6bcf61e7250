import logging
import sys

from .constants import HEADER_AUTHORIZATION, LOGGER_NAME

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Attach a stderr handler to the library logger.

    Safe to call repeatedly; only one handler is ever installed.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if not any(getattr(h, "_fluenthttp", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._fluenthttp = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger


def masked_headers(headers: list[str]) -> list[str]:
    """Hide credential values before header lines are logged."""
    masked = []
    for line in headers:
        name, sep, _ = line.partition(":")
        if sep and name.strip().lower() == HEADER_AUTHORIZATION.lower():
            masked.append(f"{name}: ***")
        else:
            masked.append(line)
    return masked

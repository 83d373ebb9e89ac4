"""Helpers that keep secrets out of log output.

Public API:
    suppress_secret_logging: Context manager that quiets Azure SDK HTTP
        loggers while a secret is in flight, then restores their levels
    redact_sas_url: Strip the SAS token from a URL before it is logged
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Sequence
from urllib.parse import urlsplit, urlunsplit

from ..config_manager import HTTP_LOGGERS

REDACTED = "***REDACTED***"


@contextmanager
def suppress_secret_logging(
    logger_names: Sequence[str] = HTTP_LOGGERS,
) -> Iterator[None]:
    """Raise the given loggers to WARNING for the duration of the block.

    Request and response bodies logged by the Azure SDK at DEBUG level would
    include storage account keys. Previous levels are restored on exit,
    including when the block raises.
    """
    previous: Dict[str, int] = {}
    for name in logger_names:
        target = logging.getLogger(name)
        previous[name] = target.level
        if target.getEffectiveLevel() < logging.WARNING:
            target.setLevel(logging.WARNING)
    try:
        yield
    finally:
        for name, level in previous.items():
            logging.getLogger(name).setLevel(level)


def redact_sas_url(url: str) -> str:
    """Return the URL with its query string (the SAS token) redacted."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    return urlunsplit((parts.scheme, parts.netloc, parts.path, REDACTED, ""))

"""Diagnostic output for the command line."""

from __future__ import annotations

import logging

import typer

PACKAGE_LOGGER = "slopscan"
LOG_FORMAT = "%(levelname)s: %(message)s"


class EchoHandler(logging.Handler):
    """Write log records to stderr through ``typer.echo``.

    The stream is looked up on every record so redirected stderr (tests,
    pipes) is honoured.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            typer.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the package logger."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, EchoHandler):
            logger.removeHandler(handler)

    handler = EchoHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger

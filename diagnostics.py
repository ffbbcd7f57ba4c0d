# Positioned parse errors. Reporter.report is the only place a diagnostic
# message is formatted; every other module reports through it.

import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)


def quote_char(ch):
    """Render an offending character so a diagnostic stays on one line."""
    return ch if ch.isprintable() else repr(ch)[1:-1]


class Position(NamedTuple):
    """1-based line and column in the source."""
    line: int = 1
    column: int = 1


class ParseError(Exception):
    """A malformed NL stream. Carries the source name and position."""

    def __init__(self, source_name, position, message):
        self.source_name = source_name
        self.position = position
        self.message = message
        super().__init__(f"{source_name}:{position.line}:{position.column}: {message}")

    @property
    def line(self):
        return self.position.line

    @property
    def column(self):
        return self.position.column


class Reporter:
    def __init__(self, source_name):
        self.source_name = source_name

    def report(self, position, message):
        """Raise ParseError at position. Never returns."""
        err = ParseError(self.source_name, position, message)
        logger.debug("parse failed: %s", err)
        raise err

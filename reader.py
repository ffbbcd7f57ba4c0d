# NL reader - text ("g") format only.
# - Reads the ten header lines into an NLHeader and hands it to the handler once
# - Then reads tagged segments until end of input, see segments.py
# - First malformed token aborts the read with a ParseError
#   "<source>:<line>:<column>: <message>"
# - A reader instance reads one stream; make a new one for the next

import logging
from enum import Enum

from config import ReaderConfig
from diagnostics import Reporter
from handler import NLHandler
from header import read_header
from segments import SegmentDispatcher
from tokenizer import Tokenizer

logger = logging.getLogger(__name__)
if not logger.hasHandlers():
    logger.addHandler(logging.NullHandler())


class ReaderState(Enum):
    START = 'start'
    READING_HEADER = 'reading header'
    READING_OPTIONS = 'reading options'
    READING_HEADER_FIELDS = 'reading header fields'
    AWAITING_SEGMENT = 'awaiting segment'
    DISPATCHING_SEGMENT = 'dispatching segment'
    DONE = 'done'
    FAILED = 'failed'


_HEADER_STATES = {
    'format': ReaderState.READING_HEADER,
    'options': ReaderState.READING_OPTIONS,
    'fields': ReaderState.READING_HEADER_FIELDS,
}


class NLReader:
    def __init__(self, handler=None, config=None):
        self.handler = handler if handler is not None else NLHandler()
        self.config = config or ReaderConfig()
        self.state = ReaderState.START
        self.header = None
        self.num_segments = 0

    def read_string(self, text, name=None):
        """Read an in-memory NL text. Returns the NLHeader."""
        if self.state is not ReaderState.START:
            raise RuntimeError(f"reader already used (state: {self.state.value})")
        name = name or self.config.default_source_name
        tokenizer = Tokenizer(text, Reporter(name), self.config)
        try:
            return self._read(tokenizer)
        except Exception:
            self.state = ReaderState.FAILED
            raise

    def read(self, stream, name=None):
        """Read from a text stream; the name defaults to stream.name."""
        if name is None:
            name = getattr(stream, 'name', None)
        return self.read_string(stream.read(), name)

    def read_file(self, path):
        with open(path, 'r', encoding='latin-1') as f:
            return self.read_string(f.read(), str(path))

    def _enter_header_stage(self, stage):
        self.state = _HEADER_STATES[stage]

    def _read(self, tokenizer):
        header = read_header(tokenizer, self._enter_header_stage)
        logger.info("%s: header read, %d vars, %d constraints, %d objectives",
                    tokenizer.reporter.source_name, header.num_vars,
                    header.num_algebraic_cons, header.num_objs)

        self.header = header
        handle_header = getattr(self.handler, 'handle_header', None)
        if handle_header is not None:
            handle_header(header)

        dispatcher = SegmentDispatcher(tokenizer, header, self.handler)
        while True:
            self.state = ReaderState.AWAITING_SEGMENT
            item = dispatcher.read_segment()
            if item is None:
                break
            self.state = ReaderState.DISPATCHING_SEGMENT
            dispatcher.dispatch(*item)
            self.num_segments += 1

        self.state = ReaderState.DONE
        logger.debug("%s: done after %d segments",
                     tokenizer.reporter.source_name, self.num_segments)
        return header


def read_nl_string(text, handler=None, name=None, config=None):
    return NLReader(handler, config).read_string(text, name)


def read_nl(stream, handler=None, name=None, config=None):
    return NLReader(handler, config).read(stream, name)


def read_nl_file(path, handler=None, config=None):
    return NLReader(handler, config).read_file(path)

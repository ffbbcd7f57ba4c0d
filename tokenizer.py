# Tokenizer for the text NL format.
# - Blanks are space, tab and carriage return; newlines are significant
# - "#" starts a comment that runs through the end of the line
# - Integers are range-checked against the configured integer type
# - Every failure is reported through diagnostics.Reporter at the token start

import re
from enum import Enum
from typing import NamedTuple

import numpy as np

from config import ReaderConfig
from diagnostics import Position

_BLANKS = ' \t\r'
_DIGITS = '0123456789'
_number = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


class TokenKind(Enum):
    INTEGER = 'integer'
    REAL = 'real'
    END_OF_LINE = 'end of line'
    END_OF_INPUT = 'end of input'
    TAG = 'tag'


class Token(NamedTuple):
    kind: TokenKind
    text: str
    position: Position


class Tokenizer:
    """Pull-based scanner over a materialized NL text.

    The tokenizer keeps a single cursor and the (line, column) of the next
    unread character. Reads either return a value or report a ParseError;
    there is no backtracking past a reported error.
    """

    def __init__(self, text, reporter, config=None):
        self.text = text
        self.reporter = reporter
        self.config = config or ReaderConfig()
        self._pos = 0
        self.line = 1
        self.column = 1

    @property
    def position(self):
        return Position(self.line, self.column)

    def at_end(self):
        return self._pos >= len(self.text)

    def _peek(self):
        if self._pos < len(self.text):
            return self.text[self._pos]
        return ''

    def read_char(self):
        """Consume and return one raw character, or "" at end of input."""
        ch = self._peek()
        if ch:
            self._advance()
        return ch

    def _advance(self, count=1):
        for _ in range(count):
            ch = self.text[self._pos]
            self._pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1

    def report(self, position, message):
        self.reporter.report(position, message)

    # --- whitespace, comments, lines ---

    def skip_blanks(self):
        while self._pos < len(self.text) and self.text[self._pos] in _BLANKS:
            self._advance()

    def _skip_comment(self):
        # consumes everything through the terminating newline, if any
        while not self.at_end():
            ch = self.text[self._pos]
            self._advance()
            if ch == '\n':
                break

    def skip_line(self):
        """Discard the rest of the current line, terminator included."""
        while not self.at_end():
            ch = self.text[self._pos]
            self._advance()
            if ch == '\n':
                break

    def read_end_of_line(self):
        self.skip_blanks()
        ch = self._peek()
        if ch == '#':
            self._skip_comment()
        elif ch == '\n':
            self._advance()
        elif ch:
            self.report(self.position, "expected newline")

    def has_field(self):
        """True if another token precedes the end of the current line."""
        return self.peek_token().kind not in (TokenKind.END_OF_LINE, TokenKind.END_OF_INPUT)

    # --- generic lexing ---

    def next_token(self):
        self.skip_blanks()
        start = self.position
        ch = self._peek()
        if not ch:
            return Token(TokenKind.END_OF_INPUT, '', start)
        if ch == '#':
            self._skip_comment()
            return Token(TokenKind.END_OF_LINE, '\n', start)
        if ch == '\n':
            self._advance()
            return Token(TokenKind.END_OF_LINE, '\n', start)
        m = _number.match(self.text, self._pos)
        if m:
            text = m.group()
            self._advance(len(text))
            if any(c in text for c in '.eE'):
                return Token(TokenKind.REAL, text, start)
            return Token(TokenKind.INTEGER, text, start)
        self._advance()
        return Token(TokenKind.TAG, ch, start)

    def peek_token(self):
        saved = (self._pos, self.line, self.column)
        try:
            return self.next_token()
        finally:
            self._pos, self.line, self.column = saved

    def read_tag(self):
        """Return the next TAG token, skipping blank and comment lines."""
        while True:
            self.skip_blanks()
            ch = self._peek()
            if not ch:
                return Token(TokenKind.END_OF_INPUT, '', self.position)
            if ch == '#':
                self._skip_comment()
                continue
            if ch == '\n':
                self._advance()
                continue
            start = self.position
            self._advance()
            return Token(TokenKind.TAG, ch, start)

    # --- typed reads ---

    def _read_digits(self, start, limit):
        # accumulates digit by digit so an oversized literal fails before
        # the whole run is scanned
        value = 0
        i = self._pos
        while i < len(self.text) and self.text[i] in _DIGITS:
            value = value * 10 + (ord(self.text[i]) - ord('0'))
            if value > limit:
                self.report(start, "number is too big")
            i += 1
        if i == self._pos:
            self.report(start, "expected integer")
        self._advance(i - self._pos)
        return value

    def read_uint(self):
        self.skip_blanks()
        start = self.position
        return self._read_digits(start, self.config.int_max)

    def read_int(self):
        self.skip_blanks()
        start = self.position
        if self._peek() == '-':
            self._advance()
            return -self._read_digits(start, -self.config.int_min)
        return self._read_digits(start, self.config.int_max)

    def read_double(self):
        self.skip_blanks()
        start = self.position
        m = _number.match(self.text, self._pos)
        if not m:
            self.report(start, "expected double")
        text = m.group()
        value = float(text)
        if not np.isfinite(value):
            self.report(start, "number is too big")
        self._advance(len(text))
        return value

    def read_name(self):
        self.skip_blanks()
        start = self.position
        i = self._pos
        while i < len(self.text) and self.text[i] not in ' \t\r\n':
            i += 1
        if i == self._pos:
            self.report(start, "expected name")
        name = self.text[self._pos:i]
        self._advance(i - self._pos)
        return name

    def read_string(self, length):
        """Read exactly length raw characters."""
        if self._pos + length > len(self.text):
            self.report(self.position, "unexpected end of input")
        s = self.text[self._pos:self._pos + length]
        self._advance(length)
        return s

    def expect(self, ch):
        if self._peek() != ch:
            self.report(self.position, f"expected '{ch}'")
        self._advance()

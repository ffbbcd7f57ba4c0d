# Segment dispatcher for the part of an NL stream that follows the header.
# - Each segment opens with a one-letter tag and fields on the same line
# - Uppercase tags (and d, x, r, b, k) open segments with line-counted bodies
# - Lowercase expression tags (n, s, l, v, o, f, h) are one line each and
#   carry the expression trees of C, L, O and V segments
# - Vararg operators (sumlist, min/max lists, count, ...) put their argument
#   count on the line after the opcode; that line is the operator's body
# - Bodies belong to the handler; unread body lines are skipped afterwards

import logging
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

from diagnostics import Position, quote_char
from tokenizer import TokenKind

logger = logging.getLogger(__name__)

# min list, max list, sum list, count, numberof, numberof (symbolic),
# and list, or list, alldiff
VARARG_OPCODES = frozenset((11, 12, 54, 59, 60, 61, 70, 71, 74))


def _num_exprs(h):
    # variables, then defined variables (common expressions)
    return (h.num_vars + h.num_common_exprs_in_both + h.num_common_exprs_in_cons
            + h.num_common_exprs_in_objs + h.num_common_exprs_in_single_cons
            + h.num_common_exprs_in_single_objs)


class SegmentKind(NamedTuple):
    name: str
    fields: Tuple[Tuple[str, str], ...] = ()
    # number of body lines, from the tag-line fields and the header
    body: Optional[Callable[[Dict[str, Any], Any], int]] = None
    # (field, limit from the header): the field value must stay below limit
    bounds: Tuple[Tuple[str, Callable[[Any], int]], ...] = ()


SEGMENT_KINDS = {
    'F': SegmentKind('function', (('index', 'uint'), ('type', 'uint'), ('num_args', 'int'), ('name', 'name')),
                     bounds=(('index', lambda h: h.num_funcs),)),
    'S': SegmentKind('suffix', (('kind', 'uint'), ('num_values', 'uint'), ('name', 'name')),
                     body=lambda f, h: f['num_values']),
    'V': SegmentKind('defined_var', (('index', 'uint'), ('num_linear_terms', 'uint'), ('kind', 'uint')),
                     body=lambda f, h: f['num_linear_terms'],
                     bounds=(('index', _num_exprs),)),
    'C': SegmentKind('algebraic_con', (('index', 'uint'),),
                     bounds=(('index', lambda h: h.num_algebraic_cons),)),
    'L': SegmentKind('logical_con', (('index', 'uint'),),
                     bounds=(('index', lambda h: h.num_logical_cons),)),
    'O': SegmentKind('objective', (('index', 'uint'), ('sense', 'uint')),
                     bounds=(('index', lambda h: h.num_objs),)),
    'd': SegmentKind('dual_guesses', (('num_values', 'uint'),), body=lambda f, h: f['num_values'],
                     bounds=(('num_values', lambda h: h.num_algebraic_cons + 1),)),
    'x': SegmentKind('primal_guesses', (('num_values', 'uint'),), body=lambda f, h: f['num_values'],
                     bounds=(('num_values', lambda h: h.num_vars + 1),)),
    'r': SegmentKind('con_bounds', body=lambda f, h: h.num_algebraic_cons),
    'b': SegmentKind('var_bounds', body=lambda f, h: h.num_vars),
    # column sizes are given for all but the last variable
    'k': SegmentKind('column_sizes', (('num_values', 'uint'),), body=lambda f, h: f['num_values'],
                     bounds=(('num_values', lambda h: max(h.num_vars, 1)),)),
    'J': SegmentKind('jacobian', (('index', 'uint'), ('num_terms', 'uint')),
                     body=lambda f, h: f['num_terms'],
                     bounds=(('index', lambda h: h.num_algebraic_cons),)),
    'G': SegmentKind('gradient', (('index', 'uint'), ('num_terms', 'uint')),
                     body=lambda f, h: f['num_terms'],
                     bounds=(('index', lambda h: h.num_objs),)),
    'n': SegmentKind('number', (('value', 'double'),)),
    's': SegmentKind('short_int', (('value', 'int'),)),
    'l': SegmentKind('long_int', (('value', 'double'),)),
    'v': SegmentKind('variable_ref', (('index', 'uint'),),
                     bounds=(('index', _num_exprs),)),
    'o': SegmentKind('operator', (('opcode', 'uint'),),
                     body=lambda f, h: 1 if f['opcode'] in VARARG_OPCODES else 0),
    'f': SegmentKind('call', (('index', 'uint'), ('num_args', 'uint')),
                     bounds=(('index', lambda h: h.num_funcs),)),
    'h': SegmentKind('string', (('value', 'string'),)),
}


class Segment(NamedTuple):
    tag: str
    kind: str
    fields: Dict[str, Any]
    position: Position


class SegmentBody:
    """Handler-side view of a segment body.

    Wraps the shared tokenizer so a handler can read the body lines it
    cares about. Whatever it leaves unread is skipped by finish().
    """

    def __init__(self, tokenizer, num_lines):
        self.tokenizer = tokenizer
        self.num_lines = num_lines
        self.start_line = tokenizer.line

    @property
    def position(self):
        return self.tokenizer.position

    @property
    def lines_left(self):
        return max(0, self.start_line + self.num_lines - self.tokenizer.line)

    def read_int(self):
        return self.tokenizer.read_int()

    def read_uint(self):
        return self.tokenizer.read_uint()

    def read_double(self):
        return self.tokenizer.read_double()

    def read_name(self):
        return self.tokenizer.read_name()

    def end_line(self):
        self.tokenizer.read_end_of_line()

    def report(self, message):
        self.tokenizer.report(self.tokenizer.position, message)

    def finish(self):
        """Position the tokenizer on the first line after the body."""
        tok = self.tokenizer
        remaining = self.lines_left
        if remaining and tok.column > 1:
            # the handler stopped inside a line
            tok.skip_line()
            remaining -= 1
        while remaining:
            if tok.at_end():
                tok.report(tok.position, "unexpected end of input")
            tok.skip_line()
            remaining -= 1


def _read_string(tokenizer):
    length = tokenizer.read_uint()
    tokenizer.expect(':')
    return tokenizer.read_string(length)


_FIELD_READERS = {
    'uint': lambda t: t.read_uint(),
    'int': lambda t: t.read_int(),
    'double': lambda t: t.read_double(),
    'name': lambda t: t.read_name(),
    'string': _read_string,
}


class SegmentDispatcher:
    def __init__(self, tokenizer, header, handler):
        self.tokenizer = tokenizer
        self.header = header
        self.handler = handler

    def read_segment(self):
        """Read the next tag line. Returns (Segment, SegmentBody) or None at end of input."""
        tok = self.tokenizer
        token = tok.read_tag()
        if token.kind is TokenKind.END_OF_INPUT:
            return None
        kind = SEGMENT_KINDS.get(token.text)
        if kind is None:
            tok.report(token.position, f"invalid format '{quote_char(token.text)}'")

        bounds = dict(kind.bounds)
        fields = {}
        for name, ftype in kind.fields:
            tok.skip_blanks()
            where = tok.position
            fields[name] = _FIELD_READERS[ftype](tok)
            if name in bounds and fields[name] >= bounds[name](self.header):
                tok.report(where, f"integer {fields[name]} out of bounds")
        tok.read_end_of_line()

        num_lines = kind.body(fields, self.header) if kind.body else 0
        segment = Segment(token.text, kind.name, fields, token.position)
        logger.debug("segment %s at %d:%d %r, %d body lines",
                     token.text, token.position.line, token.position.column, fields, num_lines)
        return segment, SegmentBody(tok, num_lines)

    def dispatch(self, segment, body):
        callback = getattr(self.handler, 'handle_' + segment.kind, None)
        if callback is None:
            callback = getattr(self.handler, 'handle_segment', None)
        if callback is not None:
            callback(segment, body)
        body.finish()

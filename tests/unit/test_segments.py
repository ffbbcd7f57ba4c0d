"""Tests for the segment dispatcher.

Coverage:
- Tag recognition and tag-line fields
- Body positioning: unread lines skipped, partially read lines finished
- Vararg operators: argument-count line skipped or read by the handler
- Index and count bounds, unknown tags, truncated bodies
"""

import pytest

from diagnostics import ParseError, Reporter
from handler import NLHandler
from header import read_header
from segments import SEGMENT_KINDS, VARARG_OPCODES, SegmentDispatcher
from tokenizer import Tokenizer


def run(text, handler):
    tok = Tokenizer(text, Reporter('(input)'))
    header = read_header(tok)
    handler.handle_header(header)
    dispatcher = SegmentDispatcher(tok, header, handler)
    while True:
        item = dispatcher.read_segment()
        if item is None:
            break
        dispatcher.dispatch(*item)
    return header


def error_of(text, handler):
    with pytest.raises(ParseError) as exc:
        run(text, handler)
    return str(exc.value)


def test_every_kind_has_a_handler_method():
    for kind in SEGMENT_KINDS.values():
        assert callable(getattr(NLHandler, 'handle_' + kind.name))


class TestDispatch:
    def test_sample_tags_in_order(self, sample_nl, recorder):
        run(sample_nl, recorder)
        assert recorder.tags == ['O', 'n', 'b', 'k', 'G']

    def test_tag_line_fields(self, sample_nl, recorder):
        run(sample_nl, recorder)
        obj, num, bounds, cols, grad = recorder.segments
        assert obj.kind == 'objective'
        assert obj.fields == {'index': 0, 'sense': 0}
        assert num.fields == {'value': 0.0}
        assert bounds.fields == {}
        assert cols.fields == {'num_values': 0}
        assert grad.fields == {'index': 0, 'num_terms': 1}
        assert grad.position.line == 16

    def test_handler_reads_body(self, sample_nl):
        class GradientReader(NLHandler):
            def __init__(self):
                self.terms = []

            def handle_gradient(self, segment, body):
                for _ in range(segment.fields['num_terms']):
                    self.terms.append((body.read_uint(), body.read_double()))
                    body.end_line()

        handler = GradientReader()
        run(sample_nl, handler)
        assert handler.terms == [(0, 1.0)]

    def test_partially_read_body_line(self, header_tail):
        class FirstFieldOnly(NLHandler):
            def __init__(self):
                self.tags = []

            def handle_segment(self, segment, body):
                self.tags.append(segment.tag)

            def handle_var_bounds(self, segment, body):
                self.first = body.read_uint()
                self.handle_segment(segment, body)

        handler = FirstFieldOnly()
        run("g0\n" + header_tail + "b\n0 1.5 2\nk0\n", handler)
        assert handler.first == 0
        assert handler.tags == ["b", "k"]

    def test_expression_tags(self, header_tail, recorder):
        text = "g0\n" + header_tail.replace(" 0 0 0 1 ", " 0 1 0 1 ", 1)
        text += "O0 1\no2\nv0\ns-3\nh5:a b c\nf0 2\nl7\n"
        run(text, recorder)
        assert recorder.tags == ['O', 'o', 'v', 's', 'h', 'f', 'l']
        assert recorder.segments[0].fields['sense'] == 1
        assert recorder.segments[3].fields == {'value': -3}
        assert recorder.segments[4].fields == {'value': 'a b c'}
        assert recorder.segments[5].fields == {'index': 0, 'num_args': 2}

    def test_suffix_and_function(self, header_tail, recorder):
        text = "g0\n" + header_tail.replace(" 0 0 0 1 ", " 0 1 0 1 ", 1)
        text += "F0 1 -1 myfunc\nS0 1 sstatus\n0 2\nx1\n0 0.5\n"
        run(text, recorder)
        assert recorder.tags == ['F', 'S', 'x']
        assert recorder.segments[0].fields == {'index': 0, 'type': 1, 'num_args': -1, 'name': 'myfunc'}
        assert recorder.segments[1].fields['name'] == 'sstatus'

    def test_comments_between_segments(self, header_tail, recorder):
        run("g0\n" + header_tail + "# objective follows\n\nO0 0 # min\nn1.5\n", recorder)
        assert recorder.tags == ['O', 'n']

    def test_duck_typed_handler(self, sample_nl):
        class Minimal:
            def handle_header(self, header):
                self.header = header

        handler = Minimal()
        run(sample_nl, handler)
        assert handler.header.num_objs == 1


class TestVarargOperators:
    SUMLIST = "O0 0\no54\n3\nv0\nv1\nv2\n"

    @staticmethod
    def three_vars(header_tail):
        return "g0\n" + header_tail.replace(" 1 0 1 0 0 ", " 3 0 1 0 0 ", 1)

    def test_count_line_skipped_by_default_handler(self, header_tail):
        header = run(self.three_vars(header_tail) + self.SUMLIST, NLHandler())
        assert header.num_vars == 3

    def test_count_line_not_visited_as_tag(self, header_tail, recorder):
        run(self.three_vars(header_tail) + self.SUMLIST, recorder)
        assert recorder.tags == ['O', 'o', 'v', 'v', 'v']
        assert recorder.segments[1].fields == {'opcode': 54}

    def test_handler_reads_count(self, header_tail):
        class ArgCounter(NLHandler):
            def __init__(self):
                self.counts = []

            def handle_operator(self, segment, body):
                if segment.fields['opcode'] in VARARG_OPCODES:
                    self.counts.append(body.read_uint())
                    body.end_line()

        handler = ArgCounter()
        run(self.three_vars(header_tail) + "O0 0\no12\n2\nv0\nv2\n", handler)
        assert handler.counts == [2]

    @pytest.mark.parametrize("opcode", [11, 12, 54, 59, 60, 61, 70, 71, 74])
    def test_vararg_opcodes(self, opcode):
        assert SEGMENT_KINDS['o'].body({'opcode': opcode}, None) == 1

    def test_fixed_arity_operator_has_no_body(self, header_tail, recorder):
        # o0 (plus) is binary, so the next line is already a tag
        run("g0\n" + header_tail + "O0 0\no0\nv0\nn1\n", recorder)
        assert recorder.tags == ['O', 'o', 'v', 'n']

    def test_truncated_count_line(self, header_tail):
        assert error_of("g0\n" + header_tail + "O0 0\no54\n", NLHandler()) == \
            "(input):13:1: unexpected end of input"


class TestErrors:
    def test_unknown_tag(self, header_tail, recorder):
        text = "g0\n" + header_tail + "O0 0\nn0\nZ1\n"
        assert error_of(text, recorder) == "(input):13:1: invalid format 'Z'"
        assert recorder.tags == ['O', 'n']

    def test_objective_index_out_of_bounds(self, header_tail, recorder):
        assert error_of("g0\n" + header_tail + "O1 0\n", recorder) == \
            "(input):11:2: integer 1 out of bounds"

    def test_constraint_index_without_constraints(self, header_tail, recorder):
        assert error_of("g0\n" + header_tail + "C0\n", recorder) == \
            "(input):11:2: integer 0 out of bounds"

    def test_truncated_body(self, header_tail, recorder):
        assert error_of("g0\n" + header_tail + "G0 2\n0 1\n", recorder) == \
            "(input):13:1: unexpected end of input"

    def test_missing_tag_field(self, header_tail, recorder):
        assert error_of("g0\n" + header_tail + "G0\n", recorder) == \
            "(input):11:3: expected integer"

    def test_bad_string_separator(self, header_tail, recorder):
        assert error_of("g0\n" + header_tail + "h3 abc\n", recorder) == \
            "(input):11:3: expected ':'"

    def test_control_character_tag_stays_on_one_line(self, header_tail, recorder):
        message = error_of("g0\n" + header_tail + "\x0c1\n", recorder)
        assert message == "(input):11:1: invalid format '\\x0c'"


class TestBounds:
    @pytest.mark.parametrize("segments,message", [
        # one variable: column sizes for all but the last one
        ("k1\n0\n", "(input):11:2: integer 1 out of bounds"),
        ("x2\n0 1\n1 1\n", "(input):11:2: integer 2 out of bounds"),
        ("d1\n0 1\n", "(input):11:2: integer 1 out of bounds"),
        ("O0 0\nv1\n", "(input):12:2: integer 1 out of bounds"),
        ("O0 0\nf0 1\nv0\n", "(input):12:2: integer 0 out of bounds"),
        ("F0 0 1 g\n", "(input):11:2: integer 0 out of bounds"),
        ("V1 0 0\nn0\n", "(input):11:2: integer 1 out of bounds"),
        ("J0 1\n0 1\n", "(input):11:2: integer 0 out of bounds"),
    ])
    def test_out_of_bounds(self, header_tail, recorder, segments, message):
        assert error_of("g0\n" + header_tail + segments, recorder) == message

    def test_counts_at_limit(self, header_tail, recorder):
        run("g0\n" + header_tail + "k0\nx1\n0 0.5\nd0\n", recorder)
        assert recorder.tags == ['k', 'x', 'd']

    def test_variable_ref_to_defined_var(self, header_tail, recorder):
        # one common expression follows the single variable
        tail = header_tail.replace(" 0 0 0 0 0      # common", " 1 0 0 0 0      # common", 1)
        run("g0\n" + tail + "V1 0 0\nv0\nO0 0\nv1\n", recorder)
        assert recorder.tags == ['V', 'v', 'O', 'v']
        assert recorder.segments[3].fields == {'index': 1}

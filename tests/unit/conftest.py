import pytest

from handler import NLHandler

HEADER_TAIL = (
    " 1 0 1 0 0      # vars, constraints, objectives, ranges, eqns\n"
    " 0 0    # nonlinear constraints, objectives\n"
    " 0 0    # network constraints: nonlinear, linear\n"
    " 0 0 0  # nonlinear vars in constraints, objectives, both\n"
    " 0 0 0 1        # linear network variables; functions; arith, flags\n"
    " 0 0 0 0 0      # discrete variables: binary, integer, nonlinear (b,c,o)\n"
    " 0 1    # nonzeros in Jacobian, gradients\n"
    " 0 0    # max name lengths: constraints, variables\n"
    " 0 0 0 0 0      # common exprs: b,c,o,c1,o1\n"
)

SEGMENTS = (
    "O0 0\n"
    "n0\n"
    "b\n"
    "2 0\n"
    "k0\n"
    "G0 1\n"
    "0 1\n"
)

SAMPLE_NL = "g3 0 1 0 # problem test\n" + HEADER_TAIL + SEGMENTS


class RecordingHandler(NLHandler):
    """Keeps the header and every visited segment."""

    def __init__(self):
        self.headers = []
        self.segments = []

    def handle_header(self, header):
        self.headers.append(header)

    def handle_segment(self, segment, body):
        self.segments.append(segment)

    @property
    def tags(self):
        return [s.tag for s in self.segments]


@pytest.fixture
def sample_nl():
    return SAMPLE_NL


@pytest.fixture
def recorder():
    return RecordingHandler()


@pytest.fixture
def header_tail():
    """Header lines 2..10 of the sample problem."""
    return HEADER_TAIL

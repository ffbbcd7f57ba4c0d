"""
NL header record and the field sequencer that fills it.

The header is ten positional lines. Fields are read by count, not by
content; each line may end in a "# ..." comment. Layout:

  g<nopts> <opt>... [vbtol]      # format, options
  nvars ncons nobjs nranges neqns [nlcons]
  nlc nlo [ncc nlcc ndcc nzlb]
  nlnc lnc
  nlvc nlvo nlvb
  nwv nfunc [arith [flags]]
  nbv niv nlvbi nlvci nlvoi
  nzc nzo
  maxrownamelen maxcolnamelen
  comb comc como comc1 como1

Trailing fields in brackets are optional and default to 0.
"""

from dataclasses import dataclass
from typing import Tuple

from config import LAST_ARITH_KIND, READ_VBTOL, VBTOL_OPTION, NLFormat
from diagnostics import Position, quote_char
from options import read_options


@dataclass(frozen=True)
class NLHeader:
    format: NLFormat
    num_options: int
    options: Tuple[int, ...]
    ampl_vbtol: float

    # line 2
    num_vars: int
    num_algebraic_cons: int
    num_objs: int
    num_ranges: int
    num_eqns: int
    num_logical_cons: int

    # line 3
    num_nl_cons: int
    num_nl_objs: int
    num_compl_conds: int
    num_nl_compl_conds: int
    num_compl_dbl_ineqs: int
    num_compl_vars_with_nz_lb: int

    # line 4
    num_nl_net_cons: int
    num_linear_net_cons: int

    # line 5
    num_nl_vars_in_cons: int
    num_nl_vars_in_objs: int
    num_nl_vars_in_both: int

    # line 6
    num_linear_net_vars: int
    num_funcs: int
    arith_kind: int
    flags: int

    # line 7
    num_linear_binary_vars: int
    num_linear_integer_vars: int
    num_nl_integer_vars_in_both: int
    num_nl_integer_vars_in_cons: int
    num_nl_integer_vars_in_objs: int

    # line 8
    num_con_nonzeros: int
    num_obj_nonzeros: int

    # line 9
    max_con_name_len: int
    max_var_name_len: int

    # line 10
    num_common_exprs_in_both: int
    num_common_exprs_in_cons: int
    num_common_exprs_in_objs: int
    num_common_exprs_in_single_cons: int
    num_common_exprs_in_single_objs: int


# (required fields, optional trailing fields) for header lines 2..10
HEADER_LINES = (
    (('num_vars', 'num_algebraic_cons', 'num_objs', 'num_ranges', 'num_eqns'),
     ('num_logical_cons',)),
    (('num_nl_cons', 'num_nl_objs'),
     ('num_compl_conds', 'num_nl_compl_conds', 'num_compl_dbl_ineqs',
      'num_compl_vars_with_nz_lb')),
    (('num_nl_net_cons', 'num_linear_net_cons'), ()),
    (('num_nl_vars_in_cons', 'num_nl_vars_in_objs', 'num_nl_vars_in_both'), ()),
    (('num_linear_net_vars', 'num_funcs'), ('arith_kind', 'flags')),
    (('num_linear_binary_vars', 'num_linear_integer_vars',
      'num_nl_integer_vars_in_both', 'num_nl_integer_vars_in_cons',
      'num_nl_integer_vars_in_objs'), ()),
    (('num_con_nonzeros', 'num_obj_nonzeros'), ()),
    (('max_con_name_len', 'max_var_name_len'), ()),
    (('num_common_exprs_in_both', 'num_common_exprs_in_cons',
      'num_common_exprs_in_objs', 'num_common_exprs_in_single_cons',
      'num_common_exprs_in_single_objs'), ()),
)

# field may not exceed bound
HEADER_LIMITS = (
    ('num_ranges', 'num_algebraic_cons'),
    ('num_eqns', 'num_algebraic_cons'),
    ('num_nl_cons', 'num_algebraic_cons'),
    ('num_nl_objs', 'num_objs'),
)

# parts of the header, in reading order
HEADER_STAGES = ('format', 'options', 'fields')


def read_format(tokenizer):
    """Read the format letter. Errors are positioned at the stream start."""
    tokenizer.skip_blanks()
    ch = tokenizer.read_char()
    if ch == NLFormat.TEXT.value:
        return NLFormat.TEXT
    start = Position()
    if not ch:
        tokenizer.report(start, "unexpected end of input")
    if ch == NLFormat.BINARY.value:
        tokenizer.report(start, f"unsupported format '{ch}'")
    tokenizer.report(start, f"invalid format '{quote_char(ch)}'")


def read_option_line(tokenizer):
    """Read the rest of line 1 after the format letter."""
    tokenizer.skip_blanks()
    count_pos = tokenizer.position
    count = tokenizer.read_uint()
    options = read_options(tokenizer, count, count_pos)
    vbtol = 0.0
    if count > VBTOL_OPTION and options[VBTOL_OPTION] == READ_VBTOL:
        vbtol = tokenizer.read_double()
    tokenizer.read_end_of_line()
    return {'num_options': count, 'options': options, 'ampl_vbtol': vbtol}


def _read_field(tokenizer, fields, where, name):
    tokenizer.skip_blanks()
    where[name] = tokenizer.position
    fields[name] = tokenizer.read_uint()


def read_header_fields(tokenizer):
    """Read header lines 2..10 into a dict keyed by NLHeader field name."""
    fields = {}
    where = {}
    for required, optional in HEADER_LINES:
        for name in required:
            _read_field(tokenizer, fields, where, name)
        for name in optional:
            if tokenizer.has_field():
                _read_field(tokenizer, fields, where, name)
            else:
                fields[name] = 0
        if fields.get('arith_kind', 0) > LAST_ARITH_KIND:
            tokenizer.report(where['arith_kind'], "unknown floating-point arithmetic kind")
        tokenizer.read_end_of_line()

    for name, bound in HEADER_LIMITS:
        if fields[name] > fields[bound]:
            tokenizer.report(where[name], f"{name} exceeds {bound}")
    return fields


def read_header(tokenizer, on_stage=None):
    """Read a complete header. Nothing is returned unless every field parsed.

    on_stage, if given, is called with each name in HEADER_STAGES just
    before that part of the header is read.
    """
    if on_stage is None:
        on_stage = lambda stage: None
    on_stage('format')
    fmt = read_format(tokenizer)
    on_stage('options')
    fields = read_option_line(tokenizer)
    on_stage('fields')
    fields.update(read_header_fields(tokenizer))
    return NLHeader(format=fmt, **fields)

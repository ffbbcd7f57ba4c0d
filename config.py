# Reader configuration and NL format constants.

from dataclasses import dataclass
from enum import Enum

import numpy as np

# ASL accepts at most 9 header options; a count of 10 is rejected.
MAX_NL_OPTIONS = 9

# Option slot that requests an extra vbtol value on the first header line.
VBTOL_OPTION = 1
READ_VBTOL = 3

DEFAULT_SOURCE_NAME = '(input)'


class NLFormat(str, Enum):
    """Format letter that opens the stream."""
    TEXT = 'g'
    BINARY = 'b'


class ArithKind(int, Enum):
    """Floating-point arithmetic the writer used (header line 6)."""
    UNKNOWN = 0
    IEEE_LITTLE_ENDIAN = 1
    IEEE_BIG_ENDIAN = 2
    IBM = 3
    VAX = 4
    CRAY = 5


LAST_ARITH_KIND = ArithKind.CRAY


@dataclass(frozen=True)
class ReaderConfig:
    max_options: int = MAX_NL_OPTIONS
    default_source_name: str = DEFAULT_SOURCE_NAME
    int_type: type = np.int32

    @property
    def int_max(self) -> int:
        return int(np.iinfo(self.int_type).max)

    @property
    def int_min(self) -> int:
        return int(np.iinfo(self.int_type).min)

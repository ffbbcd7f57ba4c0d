# Option block of the first header line: "g<count> <opt0> <opt1> ...".

import numpy as np

from config import MAX_NL_OPTIONS


class OptionBuffer:
    """Fixed-capacity store for header options.

    Sized once to the format maximum, so the cardinality check is a capacity
    comparison and reading options never grows a container.
    """

    def __init__(self, capacity=MAX_NL_OPTIONS, dtype=np.int32):
        self.values = np.zeros(capacity, dtype=dtype)
        self.size = 0

    @property
    def capacity(self):
        return len(self.values)

    def fits(self, count):
        return count <= self.capacity

    def append(self, value):
        if self.size >= self.capacity:
            raise IndexError("option buffer is full")
        self.values[self.size] = value
        self.size += 1

    def __len__(self):
        return self.size

    def as_tuple(self):
        return tuple(int(v) for v in self.values[:self.size])


def read_options(tokenizer, count, count_pos):
    """Read count integer options in order and return them as a tuple.

    count_pos is where the option count started; a count above the buffer
    capacity is reported there.
    """
    config = tokenizer.config
    buf = OptionBuffer(config.max_options, config.int_type)
    if not buf.fits(count):
        tokenizer.report(count_pos, "too many options")
    for _ in range(count):
        buf.append(tokenizer.read_int())
    return buf.as_tuple()

import re
import sys
import logging
from dataclasses import dataclass

from .errors import StartValueError, StepSizeError, StopValueError

MAX_LAYER = sys.maxsize

RE_UNSIGNED = re.compile(r"^\+?[0-9]+$")


def parse_unsigned(value):
    if not RE_UNSIGNED.match(value):
        raise ValueError(value)
    return int(value)


@dataclass(frozen=True)
class LayerRange:
    start: int = 0
    stop: int = MAX_LAYER
    step: int = 1

    def contains(self, value):
        return self.start <= value <= self.stop and (value - self.start) % self.step == 0

    __contains__ = contains


class LayerFilter:
    """Union of layer ranges selecting which layers feed the object hulls.

    The expression is a comma separated list of terms, each one of ``n``,
    ``*``, ``*/step``, ``a-b``, ``a-``, ``-b`` or ``a-b/step``.
    """

    def __init__(self, ranges=None):
        self.ranges = tuple(ranges) if ranges is not None else (LayerRange(),)

    @classmethod
    def parse(cls, expression):
        ranges = [cls.parse_filter_string(term) for term in expression.split(",")]
        logging.debug("Parsed layer filter %r into %s", expression, ranges)
        return cls(ranges)

    @staticmethod
    def parse_filter_string(term):
        term = term.strip()
        if RE_UNSIGNED.match(term):
            layer = int(term)
            return LayerRange(layer, layer, 1)

        if term == "*":
            return LayerRange()

        start, stop, step = 0, MAX_LAYER, 1

        if "/" in term:
            term, step_text = term.split("/", 1)
            try:
                step = parse_unsigned(step_text)
            except ValueError:
                raise StepSizeError(step_text) from None
            if step == 0:
                raise StepSizeError(step_text)

        if "-" in term:
            left, right = term.split("-", 1)
            try:
                start = parse_unsigned(left) if left else 0
            except ValueError:
                raise StartValueError(left) from None
            try:
                stop = parse_unsigned(right) if right else MAX_LAYER
            except ValueError:
                raise StopValueError(right) from None
        elif term != "*":
            # A single layer with a step, e.g. "5/2".
            try:
                start = stop = parse_unsigned(term)
            except ValueError:
                raise StartValueError(term) from None

        return LayerRange(start, stop, step)

    def contains(self, value):
        return any(layer_range.contains(value) for layer_range in self.ranges)

    __contains__ = contains

    def __repr__(self):
        return f"LayerFilter({list(self.ranges)!r})"

'''
Trace entries and the table of known operators.

Every entry of a trace is one of Operand, Nullary, Unary, Binary or Variable.
Operators are looked up by their display symbol, which is also their token in
the flat program.
'''

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Optional
import math
import sys

from .util import format_exact


# Never parenthesized.
MAX_PRECEDENCE = sys.maxsize

DIVISION_BY_ZERO = 'Division by zero'
SQRT_OF_NEGATIVE = 'Square root of negative number'
VARIABLE_NOT_SET = 'Variable not set'
NOT_ENOUGH_OPERANDS = 'Not enough operands'


@dataclass(frozen=True)
class Operand:
    value: float

    precedence = MAX_PRECEDENCE

    def __str__(self):
        return format_exact(self.value)


@dataclass(frozen=True)
class Nullary:
    symbol: str
    function: Callable[[], float]

    precedence = MAX_PRECEDENCE

    def __str__(self):
        return self.symbol


@dataclass(frozen=True)
class Unary:
    symbol: str
    function: Callable[[float], float]
    check: Optional[Callable[[float], Optional[str]]] = None

    precedence = MAX_PRECEDENCE

    def __str__(self):
        return self.symbol


@dataclass(frozen=True)
class Binary:
    '''
    Binary operator.

    function and check get the most recently entered argument first, so
    "5 3 −" is function(3, 5).
    '''
    symbol: str
    precedence: int
    function: Callable[[float, float], float]
    check: Optional[Callable[[float, float], Optional[str]]] = None
    # a op (b op c) == (a op b) op c, so no parentheses needed on the right
    associative: bool = False

    def __str__(self):
        return self.symbol


@dataclass(frozen=True)
class Variable:
    symbol: str

    precedence = MAX_PRECEDENCE

    def __str__(self):
        return self.symbol


def learn_ops(*ops):
    '''
    Build a read-only symbol to operator mapping.
    '''
    known = dict()
    for op in ops:
        if op.symbol in known:
            raise ValueError('Duplicate operator {}'.format(repr(op.symbol)))
        known[op.symbol] = op
    return MappingProxyType(known)


def _multiply(first, second):
    return second * first


def _divide(first, second):
    return second / first


def _check_divisor(first, second):
    if first == 0:
        return DIVISION_BY_ZERO
    return None


def _add(first, second):
    return second + first


def _subtract(first, second):
    return second - first


def _check_sqrt(only):
    if only < 0:
        return SQRT_OF_NEGATIVE
    return None


def _negate(only):
    return -only


def _pi():
    return math.pi


KNOWN_OPS = learn_ops(
    Binary('×', 2, _multiply, associative=True),
    Binary('÷', 2, _divide, _check_divisor),
    Binary('+', 1, _add, associative=True),
    Binary('−', 1, _subtract),
    Unary('√', math.sqrt, _check_sqrt),
    Unary('sin', math.sin),
    Unary('cos', math.cos),
    Unary('±', _negate),
    Nullary('π', _pi),
)

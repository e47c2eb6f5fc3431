'''
RPN calculator engine.

Everything entered (numbers, operators, variable references) is kept as one
trace, in order. The engine evaluates the trace from its end backwards after
every change, reports why when there is no result, describes the trace in
infix with only the parentheses precedence needs, and saves and loads it as a
flat list of tokens.

Operators: × ÷ + − √ sin cos ± π.
'''

# TODO: Load variable references back from a saved program. Right now they're
#       dropped, so only variable free programs survive save and load.

from .cli import CLI
from .lexer import Lexer
from .brain import Brain


__all__ = 'Brain', 'Lexer', 'CLI'

import logging

from .ops import (KNOWN_OPS, NOT_ENOUGH_OPERANDS, VARIABLE_NOT_SET,
                  Operand, Nullary, Unary, Binary, Variable)
from .lexer import Lexer
from .util import format_general


logger = logging.getLogger(__name__)


class Brain:
    '''
    Calculator engine.

    Keeps the trace of everything entered, in order, and works out its value
    from the end backwards every time it changes. Nothing is ever computed
    ahead of time; undo is just dropping the last entry.

    Recursion is as deep as the trace is long, so absurdly long traces will
    hit Python's recursion limit.
    '''

    def __init__(self, known_ops=KNOWN_OPS):
        '''
        Create engine with an empty trace and no variables set.

        :param known_ops: Symbol to operator mapping. Never modified.
        '''
        self.known_ops = known_ops
        # Set from outside; read when evaluating Variable entries.
        self.variable_values = dict()
        self._ops = []
        self._error = None
        self._lexer = Lexer()

    @property
    def error(self):
        '''
        Why the last evaluation had no result, if it had none.
        '''
        return self._error

    @property
    def trace(self):
        '''
        Entries in the order they were entered.
        '''
        return tuple(self._ops)

    def __len__(self):
        return len(self._ops)

    def __str__(self):
        return self.description

    def _evaluate(self, end):
        '''
        Evaluate the expression that ends just before index end.

        Returns (result, end of the unconsumed prefix, error). result is None
        when there is none: error says why, or is None when there simply
        wasn't enough in the trace.
        '''
        if end == 0:
            return None, end, None
        end -= 1
        op = self._ops[end]
        if isinstance(op, Operand):
            return op.value, end, None
        elif isinstance(op, Nullary):
            return self._apply(op, end)
        elif isinstance(op, Variable):
            if op.symbol not in self.variable_values:
                return None, end, VARIABLE_NOT_SET
            return self.variable_values[op.symbol], end, None
        elif isinstance(op, Unary):
            operand, end, error = self._evaluate(end)
            if operand is None:
                return None, end, error
            return self._apply(op, end, operand)
        elif isinstance(op, Binary):
            operand1, end, error = self._evaluate(end)
            if operand1 is None:
                return None, end, error
            operand2, end, error = self._evaluate(end)
            if operand2 is None:
                return None, end, error
            return self._apply(op, end, operand1, operand2)
        raise TypeError('Not a trace entry: {}'.format(repr(op)))

    def _apply(self, op, end, *operands):
        '''
        Check and apply operator to already evaluated operands.
        '''
        check = getattr(op, 'check', None)
        if check is not None:
            error = check(*operands)
            if error is not None:
                return None, end, error
        try:
            return op.function(*operands), end, None
        except (ArithmeticError, ValueError) as e:
            # e.g. math domain error on sin(inf)
            return None, end, str(e)

    def _describe(self, end):
        '''
        Describe the expression that ends just before index end, infix.

        Returns (text, end of the undescribed prefix, precedence). Missing
        operands show up as ?.
        '''
        if end == 0:
            return '?', end, Operand.precedence
        end -= 1
        op = self._ops[end]
        if isinstance(op, Operand):
            return format_general(op.value), end, op.precedence
        elif isinstance(op, Unary):
            operand, end, precedence = self._describe(end)
            if precedence < op.precedence:
                operand = '(' + operand + ')'
            return op.symbol + operand, end, op.precedence
        elif isinstance(op, Binary):
            operand1, end, precedence1 = self._describe(end)
            # Right hand side: 5 − (3 − 2), but 5 + 3 + 2
            if precedence1 < op.precedence or \
               precedence1 == op.precedence and not op.associative:
                operand1 = '(' + operand1 + ')'
            operand2, end, precedence2 = self._describe(end)
            if precedence2 < op.precedence:
                operand2 = '(' + operand2 + ')'
            return ('{} {} {}'.format(operand2, op.symbol, operand1),
                    end,
                    op.precedence)
        # Nullary and Variable
        return op.symbol, end, op.precedence

    @property
    def description(self):
        '''
        Infix rendering of the whole trace.

        Each complete expression in the trace is one statement. Statements
        are comma separated, oldest first.
        '''
        statements = []
        end = len(self._ops)
        while end > 0:
            statement, end, _ = self._describe(end)
            statements.append(statement)
        return ', '.join(reversed(statements))

    def evaluate(self):
        '''
        Evaluate the most recent expression in the trace.

        Returns the result, or None, in which case error says why. An empty
        trace has neither.
        '''
        result, _, self._error = self._evaluate(len(self._ops))
        if result is None and self._error is None and self._ops:
            self._error = NOT_ENOUGH_OPERANDS
        if self._error is not None:
            logger.debug('%s: %s', self._error, self.render_history())
        return result

    def evaluate_and_report_errors(self):
        '''
        Like evaluate(), but return the error message instead of None.
        '''
        result = self.evaluate()
        if result is None:
            return self._error
        return result

    def push_operand(self, operand):
        '''
        Push number, or a variable reference if given its name, and evaluate.
        '''
        if isinstance(operand, str):
            return self.push_variable(operand)
        self._ops.append(Operand(float(operand)))
        return self.evaluate()

    def push_variable(self, symbol):
        '''
        Push reference to variable symbol and evaluate.

        The variable needn't be set yet.
        '''
        self._ops.append(Variable(symbol))
        return self.evaluate()

    def pop_operand(self):
        '''
        Undo the last entry, if any, and evaluate.
        '''
        if self._ops:
            self._ops.pop()
        return self.evaluate()

    def apply_operator(self, symbol):
        '''
        Push operator by symbol and evaluate.

        Unknown symbols push nothing, but still evaluate.
        '''
        op = self.known_ops.get(symbol)
        if op is None:
            logger.debug('Unknown operator %s', repr(symbol))
        else:
            self._ops.append(op)
        return self.evaluate()

    @property
    def program(self):
        '''
        The trace as a flat list of tokens, for saving.
        '''
        return [str(op) for op in self._ops]

    @program.setter
    def program(self, tokens):
        '''
        Replace the trace with one loaded from a list of tokens.

        Tokens that are neither known operators nor numbers are dropped. That
        includes variable names, so programs using variables don't survive a
        save and load.
        '''
        if isinstance(tokens, str):
            raise TypeError('Expected list of tokens, not a string')
        ops = []
        for token in tokens:
            op = self.known_ops.get(token)
            if op is None:
                value = self._lexer.number(token)
                if value is None:
                    logger.debug('Dropping token %s', repr(token))
                    continue
                op = Operand(value)
            ops.append(op)
        self._ops = ops

    def render_history(self):
        '''
        Flat, space separated history of everything entered.
        '''
        return ' '.join(self.program)

from functools import reduce
import operator

import regex

from .util import RPNError
from .ops import KNOWN_OPS


class Lexer:
    '''
    Lexer for the calculator's *regular* grammar.

    Also owns the numeric text convention: whatever number() accepts is what
    a program may hold as an operand token.
    '''
    # Integral part of a number
    INTEGRAL = r'''
                # DO NOT REPEAT ME! I REPEAT MYSELF INTERNALLY!
                (?:
                    # 1, 12, or the 1 in 1_200.
                    \d{1,3}
                    (?:
                        # The 4, 45, etc. in 1234, 12345, etc.
                        \d
                        |
                        # Thousands separators
                        (?:
                            _\d{3}
                        )
                    )*
                )
                '''
    # Fractional part of a number
    FRACTIONAL = r'''
                  # DO NOT REPEAT ME! I REPEAT MYSELF INTERNALLY!
                  (?:
                      # 2, 25, 200 in 1.2, 1.25, 1.200
                      \d+
                      |
                      # 200_200, 200_2
                      (?:
                          \d{3}
                          (?:
                              _\d{3}
                          )*
                          (?:
                              _\d{1,2}
                          )?
                      )
                  )
                  '''
    # 1e+16, 2.5E-3; what repr() gives for very large and small floats.
    EXPONENT = r'''
                (?:
                    [eE]
                    [-+]?
                    \d+
                )
                '''
    # Number, of any kind supported by grammar.
    # String formatting and regex is a tricky business, because of the braces.
    # It works here. Be careful in general!
    NUMBER = r'''
              (?:
                  [-+]?
                  (?:
                      (?:
                          # 1, 12, 1_200, 1_200. (notice trailing dot), 1.3
                          {INTEGRAL}
                          (?:
                              \.
                              {FRACTIONAL}?
                          )?
                      )|(?:
                          # .2, 0.2, 0.200_200
                          {INTEGRAL}?
                          \.
                          {FRACTIONAL}
                      )
                  )
                  {EXPONENT}?
              )|(?:
                  [-+]?
                  (?:
                      inf
                      |
                      nan
                  )
              )
              '''.format(INTEGRAL=INTEGRAL,
                         FRACTIONAL=FRACTIONAL,
                         EXPONENT=EXPONENT)

    # Things you can actually type for the operators that aren't on your
    # keyboard.
    ALIASES = {
        '*': '×',
        '/': '÷',
        '-': '−',
        # 'v', like in UNIX dc.
        'v': '√',
        '_': '±',
        'pi': 'π',
    }
    assert set(ALIASES.values()) <= set(KNOWN_OPS)

    OPERATOR = r'(?:' + r'|'.join(map(regex.escape,
                                      sorted(set(KNOWN_OPS) | set(ALIASES),
                                             key=len,
                                             reverse=True))) + r')'
    # Single letter names only, like dc registers.
    REGISTER = r'(?<register>[[:alpha:]])'
    # sX stores the current result into X, lX refers to X.
    STORE = r's' + REGISTER
    LOAD = r'l' + REGISTER
    # p: print, d: describe, f: flat history, u: undo, c: clear, h: help
    COMMANDS = 'pdfuch'
    COMMAND = r'[' + COMMANDS + r']'
    SPACE = r'\s+'

    # Immediate, as in immediately complete lexeme
    IMMEDIATE = r'(?<operator>' + OPERATOR + r')|' \
                r'(?<store>' + STORE + r')|' \
                r'(?<load>' + LOAD + r')|' \
                r'(?<command>' + COMMAND + r')|' \
                r'(?<space>' + SPACE + r')'
    # All possible lexemes.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<immediate>' + IMMEDIATE + r')'
    # Default regex flags for matching lexemes. POSIX is leftmost longest, so
    # sin beats s(tore into) i, and pi beats p(rint).
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and return all lexemes.

        Raises on the first bad lexeme, after yielding the good ones before
        it.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise RPNError("Couldn't lex {0}".format(line.strip()))

    def isfeedable(self, match):
        '''
        Return True if lexeme means something to the calculator.
        '''
        return 'space' not in self.matchedgroups(match).keys()

    def matchedgroups(self, match):
        '''
        Return the groups that matched, by name.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value and key != 'immediate'}

    def number(self, text):
        '''
        Return float of a whole numeric token, None if it isn't one.
        '''
        match = regex.fullmatch(type(self).NUMBER, text,
                                flags=type(self).FLAGS)
        if match is None:
            return None
        # Handle the underscores in here.
        return float(text.replace('_', ''))

    def operator(self, text):
        '''
        Return the operator table symbol for typed operator text.
        '''
        return type(self).ALIASES.get(text, text)

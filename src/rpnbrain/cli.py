from os import isatty, path
import sys
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .util import RPNError, wrap_user_errors, format_exact
from .brain import Brain
from .lexer import Lexer


logger = logging.getLogger(__name__)


class InteractiveInput:
    def __init__(self, prompt, history_file):
        self.prompt = prompt
        self.history_file = history_file

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    # Persistent
                                    history=FileHistory(self.history_file),
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Certainly not! But be explicit.
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator engine.
    '''

    DEFAULT_PROMPT = '> '
    HISTORY_FILE = '~/.rpnbrain_history'

    def dumper(self):
        '''
        Dump all lexeme matches and what they mean to the engine.
        '''
        lexer = Lexer()
        print('[groups]\t<repr(lexeme)>\t<meaning>')
        for line in self.args.expressions:
            for match in lexer.lex(line):
                if not lexer.isfeedable(match):
                    continue
                matched = match.group(0)  # the lexeme text itself
                groups = lexer.matchedgroups(match)
                if 'number' in groups:
                    meaning = lexer.number(matched)
                elif 'operator' in groups:
                    meaning = lexer.operator(matched)
                else:
                    meaning = groups.get('register', matched)
                print(*groups.keys(),
                      repr(matched),
                      meaning,
                      sep='\t')

    def feed(self, groups):
        '''
        Run one lexeme's matched groups on the engine.
        '''
        lexer = self.lexer
        if 'number' in groups:
            self.brain.push_operand(lexer.number(groups['number']))
        elif 'operator' in groups:
            self.brain.apply_operator(lexer.operator(groups['operator']))
        elif 'load' in groups:
            self.brain.push_variable(groups['register'])
        elif 'store' in groups:
            self.store(groups['register'])
        elif 'command' in groups:
            type(self).COMMANDS[groups['command']](self)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('%s => %s',
                         self.brain.render_history(),
                         self.brain.evaluate_and_report_errors())

    def store(self, name):
        '''
        Store current result into variable name, then re-evaluate.
        '''
        value = self.brain.evaluate()
        if value is None:
            raise RPNError('Nothing to store into {}'.format(name))
        self.brain.variable_values[name] = value
        self.brain.evaluate()

    def printresult(self):
        '''
        Print current result, or why there is none.
        '''
        result = self.brain.evaluate_and_report_errors()
        if isinstance(result, float):
            print(format_exact(result))
        elif result is not None:
            print(result)

    def printdescription(self):
        '''
        Print infix description of everything entered.
        '''
        description = self.brain.description
        print(description + ' =' if description else '')

    def printhistory(self):
        '''
        Print flat history of everything entered.
        '''
        print(self.brain.render_history())

    def undo(self):
        '''
        Drop the last entry.
        '''
        self.brain.pop_operand()

    def clear(self):
        '''
        Start over: forget the trace and all variables.
        '''
        self.brain = Brain()

    def printhelp(self):
        '''
        Print all possible commands.
        '''
        commands = type(self).COMMANDS
        print('operators:', *self.brain.known_ops, file=sys.stderr)
        print('aliases:', *('{}={}'.format(alias, symbol)
                            for alias, symbol
                            in Lexer.ALIASES.items()),
              file=sys.stderr)
        print('commands:', *('{}: {}'.format(name, command.__doc__.strip())
                             for name, command
                             in commands.items()),
              file=sys.stderr)
        print('registers: sX store, lX load', file=sys.stderr)

    COMMANDS = {
        'p': printresult,
        'd': printdescription,
        'f': printhistory,
        'u': undo,
        'c': clear,
        'h': printhelp,
    }
    assert set(COMMANDS) == set(Lexer.COMMANDS)

    def executor(self):
        '''
        Run engine (RPN calculator).
        '''
        for line in self.args.expressions:
            try:
                for match in self.lexer.lex(line):
                    if self.lexer.isfeedable(match):
                        self.feed(self.lexer.matchedgroups(match))
            # Abort entire rest of line, makes sense anyway
            except RPNError as e:
                print(e.args[0], file=sys.stderr)
        if self.args.save:
            self.save(self.args.save)

    @wrap_user_errors('Cannot load program from {1}')
    def load(self, filename):
        '''
        Replace the trace with a program saved one token per line.
        '''
        with open(filename, encoding='utf-8') as fp:
            self.brain.program = [line.strip() for line in fp if line.strip()]

    @wrap_user_errors('Cannot save program to {1}')
    def save(self, filename):
        '''
        Save the trace, one token per line.
        '''
        with open(filename, 'w', encoding='utf-8') as fp:
            for token in self.brain.program:
                print(token, file=fp)

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        print(self.lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(sys.stdin.fileno()) and isatty(sys.stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    history_file=path.expanduser(
                                        self.HISTORY_FILE))
        else:
            return sys.stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.brain = Brain()
        self.lexer = Lexer()
        self.argument_parser = ArgumentParser(description='RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('-l', '--load',
                                          metavar='FILE',
                                          help='start from saved program')
        self.argument_parser.add_argument('-s', '--save',
                                          metavar='FILE',
                                          help='save program when done')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=sys.stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else logging.WARNING,
                            format='%(name)s: %(message)s')
        if self.args.expressions is sys.stdin:
            self.args.expressions = self._prompting_input()
        try:
            if self.args.load:
                self.load(self.args.load)
            self.args.action()
        except RPNError as e:
            print(e.args[0], file=sys.stderr)
            sys.exit(1)
        except KeyboardInterrupt:
            sys.exit(1)


def main():
    CLI().run()

from pytest import Item, fixture

from rpnbrain.brain import Brain
from rpnbrain.lexer import Lexer


@fixture
def brain():
    return Brain()


@fixture
def lexer():
    return Lexer()


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every passing assertion, to audit what a run actually checked.

    Needs enable_assertion_pass_hook; use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!
    print('actual', item.name + ':' + str(lineno),
          # Drop the full diff lines, -vv if you want them.
          '\n'.join(str(expl).splitlines()[:-2]))

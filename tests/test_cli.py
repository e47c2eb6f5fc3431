'''
Command line interface tests
'''

import math

from rpnbrain.cli import CLI

from pytest import approx, raises


def run(*expressions, options=()):
    CLI().run(args=[*options, '-e', *expressions])


def test_print(capsys):
    run('5 3 + p')
    assert capsys.readouterr().out == '8\n'


def test_aliases(capsys):
    run('5 3 - p', 'c 6 2 / p', 'c 5 3 + 2 * d')
    assert capsys.readouterr().out == '2\n3\n(5 + 3) × 2 =\n'


def test_error_message(capsys):
    run('5 0 / p')
    assert capsys.readouterr().out == 'Division by zero\n'


def test_registers(capsys):
    run('7 sx lx 1 + p')
    assert capsys.readouterr().out == '8\n'


def test_store_nothing(capsys):
    run('+ sx p', '1 p')
    captured = capsys.readouterr()
    assert 'Nothing to store into x' in captured.err
    # Rest of the bad line skipped, next line still runs
    assert captured.out == '1\n'


def test_undo_history(capsys):
    run('5 3 + f u f p')
    assert capsys.readouterr().out == '5 3 +\n5 3\n3\n'


def test_clear(capsys):
    run('5 c p d')
    assert capsys.readouterr().out == '\n'


def test_bad_lexeme(capsys):
    run('5 #', '3 p')
    captured = capsys.readouterr()
    assert "Couldn't lex #" in captured.err
    assert captured.out == '3\n'


def test_help(capsys):
    run('h')
    err = capsys.readouterr().err
    assert 'operators:' in err
    assert 'u: Drop the last entry.' in err


def test_dump(capsys):
    CLI().run(args=['-D', '-e', '2 * lx'])
    out = capsys.readouterr().out.splitlines()
    assert out[1] == "number\t'2'\t2.0"
    assert out[2] == "operator\t'*'\t×"
    assert out[3].endswith("\t'lx'\tx")


def test_save_load(tmp_path, capsys):
    program = tmp_path / 'program'
    run('5 3 + pi *', options=['-s', str(program)])
    assert program.read_text(encoding='utf-8').split() == \
        ['5', '3', '+', 'π', '×']
    run('p', options=['-l', str(program)])
    assert float(capsys.readouterr().out) == approx(8 * math.pi)


def test_load_missing(tmp_path, capsys):
    with raises(SystemExit):
        run('p', options=['-l', str(tmp_path / 'nope')])
    assert 'Cannot load program from' in capsys.readouterr().err

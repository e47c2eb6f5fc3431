'''
Saving and loading programs (flat token lists)
'''

import math

from rpnbrain.brain import Brain
from rpnbrain.ops import KNOWN_OPS, Operand

from pytest import raises


def load(tokens):
    brain = Brain()
    brain.program = tokens
    return brain


def test_export(brain):
    brain.push_operand(5)
    brain.push_operand(3)
    brain.apply_operator('+')
    brain.push_operand(2.5)
    brain.apply_operator('×')
    assert brain.program == ['5', '3', '+', '2.5', '×']
    assert brain.render_history() == '5 3 + 2.5 ×'


def test_export_variables(brain):
    brain.push_variable('x')
    brain.apply_operator('π')
    brain.apply_operator('×')
    assert brain.program == ['x', 'π', '×']


def test_import(brain):
    brain.program = ['6', '2', '÷', '√']
    assert brain.trace == (Operand(6.0), Operand(2.0),
                           KNOWN_OPS['÷'], KNOWN_OPS['√'])
    assert brain.evaluate() == math.sqrt(3)


def test_round_trip():
    original = Brain()
    for number in 0.1, 1e16, -2.5, 1 / 3, -0.0, 123456789.125:
        original.push_operand(number)
    for symbol in '+', '×', '−', '÷', 'sin':
        original.apply_operator(symbol)
    original.apply_operator('π')
    original.apply_operator('±')
    original.apply_operator('cos')
    loaded = load(original.program)
    assert loaded.trace == original.trace
    assert loaded.program == original.program
    assert loaded.evaluate() == original.evaluate()


def test_variables_do_not_round_trip(brain):
    brain.variable_values['x'] = 2
    brain.push_variable('x')
    brain.push_operand(1)
    brain.apply_operator('+')
    assert brain.evaluate() == 3
    loaded = load(brain.program)
    # x is dropped on load
    assert loaded.trace == (Operand(1.0), KNOWN_OPS['+'])
    assert loaded.trace != brain.trace
    assert loaded.evaluate() is None


def test_junk_dropped():
    brain = load(['5', 'bogus', '3', '', '+', '*', '1_000'])
    assert brain.program == ['5', '3', '+', '1000']
    assert brain.evaluate() == 1000


def test_import_replaces(brain):
    brain.push_operand(1)
    brain.program = ['2']
    assert brain.trace == (Operand(2.0),)


def test_string_is_not_a_program(brain):
    with raises(TypeError):
        brain.program = '5 3 +'

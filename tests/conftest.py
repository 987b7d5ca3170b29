import pytest

from clove.interpreter import Interpreter


# Most tests want the core library loaded; the few that exercise the bare
# special forms and builtins ask for `bare` instead.


@pytest.fixture
def itp():
    return Interpreter()


@pytest.fixture
def bare():
    return Interpreter(prelude=None)

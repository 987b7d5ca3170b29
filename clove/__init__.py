# Core type aliases for Clove's data model.
# Code and runtime values share one representation: Symbols, Keywords, Nil,
# booleans, numbers, strings and the persistent List / Vector / Map types in
# clove.types.collections. There is no separate AST type.
#
# Naming guidance:
# - SExpression: Use in reader/expander code to denote syntactic forms (code-as-data).
# - LispValue:  Use in evaluator/runtime code to denote evaluated values.
# Both aliases resolve to `Any` and are interchangeable.

from typing import Any, Callable

__version__ = "0.3.0"

# Runtime value alias
LispValue = Any
# Forms alias (code is data, so this is the same thing)
SExpression = LispValue

# Evaluator function type: Python evaluator used inside special forms/macros
EvaluatorFn = Callable[..., LispValue]

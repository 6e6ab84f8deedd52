"""
This module aims to express an interface agreement
between the evaluator, the renderer, and the built-in functions.
"""

from typing import Callable as NativeCallable, Literal, Union
from ..scope import Scope
from ..syntax import Expression, Callable

NATIVE_DATA = Union[None, bool, int, float, str, list[Expression]]
VALUE = Union[NATIVE_DATA, Callable]
POLICY = Literal['local', 'nonlocal', 'any']
BUILT_IN = NativeCallable[[Scope, Expression], Expression]

"""
Human-readable rendering of values, for `show`, `print`, and the program result.
Sequences may be unbounded or cyclic, so rendering stops descending at a depth bound.
"""

from boozetools.support.foundation import Visitor
from ..scope import Scope
from ..syntax import Expression, FunctionValue, FunctionDeclaration, BuiltInFnExpression
from .evaluator import get_value

DEFAULT_DEPTH = 10

class Render(Visitor):
	def __init__(self, scope:Scope):
		self._scope = scope

	def visit_NoneType(self, value, depth:int): return "nothing"
	def visit_bool(self, value:bool, depth:int): return "true" if value else "false"
	def visit_int(self, value:int, depth:int): return str(value)
	def visit_str(self, value:str, depth:int): return value

	def visit_float(self, value:float, depth:int):
		if value.is_integer(): return str(int(value))
		return repr(value)

	def visit_list(self, value:list, depth:int):
		if depth <= 0: return "..."
		parts = [self.visit(get_value(item, self._scope), depth - 1) for item in value]
		return "[" + ", ".join(parts) + "]"

	def visit_FunctionValue(self, value:FunctionValue, depth:int): return "<function>"
	def visit_FunctionDeclaration(self, value:FunctionDeclaration, depth:int): return "<function>"
	def visit_BuiltInFnExpression(self, value:BuiltInFnExpression, depth:int): return "<built-in %s>" % value.name

def render(expr:Expression, scope:Scope, depth:int=DEFAULT_DEPTH) -> str:
	return Render(scope).visit(get_value(expr, scope), depth)

"""
The laziness protocol, with one resolution-method per kind of node.

`resolve` performs exactly one rewrite. A node is a fixed value iff it resolves to itself.
`force` and `force_deep` rewrite to a fixed point. `get_value` forces and then unwraps.

Whenever a node carries a locked scope, that scope wins over the one the caller supplies.
Each successor in a chain of rewrites continues in the scope its predecessor used,
unless it carries a lock of its own.
"""

from ..scope import Scope, LOCAL
from ..syntax import (
	ABSENT, Expression, ConstantExpression, ArrayValue, LazyExpression, ReferenceExpression,
	Callable, FunctionDeclaration, FunctionValue, BuiltInFnExpression,
	FunctionCall, CodeBlockDeclaration, CodeBlock, BinaryMathExpression,
	AssignmentExpression, ReturnExpression, IfElseExpression,
)
from ..diagnostics import NotCallable, InvalidOperator, InvalidAssignment
from .types import VALUE, POLICY

def resolve(expr:Expression, scope:Scope) -> Expression:
	if expr.locked is not None: scope = expr.locked
	try: fn = RESOLVE[type(expr)]
	except KeyError: raise NotImplementedError(type(expr), expr)
	return fn(expr, scope)

def force(expr:Expression, scope:Scope) -> Expression:
	"""
	Resolve repeatedly until the result no longer changes.
	This runs as a loop rather than a recursion so that long chains of rewrites do not exhaust the stack.
	"""
	while True:
		if expr.locked is not None: scope = expr.locked
		step = RESOLVE[type(expr)](expr, scope)
		if step is expr: return expr
		expr = step

def force_deep(expr:Expression, scope:Scope) -> Expression:
	""" As with force, but every element of a sequence gets the same treatment, recursively. """
	while True:
		if expr.locked is not None: scope = expr.locked
		step = RESOLVE[type(expr)](expr, scope)
		if step is expr: break
		expr = step
	if isinstance(expr, ArrayValue):
		return ArrayValue([force_deep(e, scope) for e in expr.value])
	return expr

def get_value(expr:Expression, scope:Scope) -> VALUE:
	it = force(expr, scope)
	if isinstance(it, Callable): return it
	return it.value

def is_truthy(value:VALUE) -> bool:
	if isinstance(value, (list, Callable)): return True
	return bool(value)

def execute(fn:Callable, scope:Scope, args:Expression) -> Expression:
	if fn.locked is not None: scope = fn.locked
	return EXECUTE[type(fn)](fn, scope, args)

def enter(code:Expression, scope:Scope) -> Expression:
	"""
	Begin an activation of some code in a fresh scope.
	A return-expression's payload gets copied and locked to that scope first,
	so that no memoized state carries over from any other activation.
	"""
	if isinstance(code, ReturnExpression):
		code = code.value.copy_lock(scope)
	return resolve(code, scope)

def assign_to_scope(target:Scope, source:Scope, location:Expression, data:Expression, policy:POLICY):
	"""
	Bind a destructuring pattern to some data. A plain reference takes the data,
	resolved one step in the source scope, which keeps the tails of lazy sequences lazy.
	A list pattern takes a list of exactly the same length, element by element.
	"""
	if isinstance(location, ReferenceExpression):
		target.set(location.name, resolve(data, source), policy)
		return
	pattern = force(location, target)
	if not isinstance(pattern, ArrayValue):
		raise InvalidAssignment("Cannot assign to %r" % (pattern,))
	data = force(data, source)
	if not isinstance(data, ArrayValue):
		raise InvalidAssignment("Cannot destructure %r against a pattern of %d" % (data, pattern.size()))
	if data.size() != pattern.size():
		raise InvalidAssignment("A pattern of %d cannot take a list of %d" % (pattern.size(), data.size()))
	for place, item in zip(pattern.value, data.value):
		assign_to_scope(target, source, place, item, policy)

###############################################################################

def _resolve_constant(expr:ConstantExpression, scope:Scope):
	return expr

def _resolve_array(expr:ArrayValue, scope:Scope):
	return expr

def _resolve_lazy(expr:LazyExpression, scope:Scope):
	if expr.value is ABSENT:
		expr.value = resolve(expr.thunk(), scope)
	return expr.value

def _resolve_reference(expr:ReferenceExpression, scope:Scope):
	return scope.fetch(expr.name)

def _resolve_function_declaration(expr:FunctionDeclaration, scope:Scope):
	return FunctionValue(expr.code, expr.param, expr.lazy, scope)

def _resolve_function_value(expr:FunctionValue, scope:Scope):
	return expr

def _resolve_built_in(expr:BuiltInFnExpression, scope:Scope):
	return expr

def _resolve_call(expr:FunctionCall, scope:Scope):
	callee = get_value(expr.fn, scope)
	if not isinstance(callee, Callable):
		raise NotCallable("Can not call %r" % (callee,))
	return execute(callee, scope, expr.args)

def _resolve_block_declaration(expr:CodeBlockDeclaration, scope:Scope):
	return resolve(CodeBlock(expr.code, expr.lazy), scope)

def _resolve_block(expr:CodeBlock, scope:Scope):
	if expr.outcome is ABSENT:
		def run_block():
			inner = Scope(scope)
			for statement in expr.code:
				if isinstance(statement, ReturnExpression):
					return enter(statement, inner)
				resolve(statement, inner)
			return ConstantExpression(None)
		expr.outcome = LazyExpression(run_block) if expr.lazy else run_block()
	return expr.outcome

def _resolve_binary(expr:BinaryMathExpression, scope:Scope):
	op = get_value(expr.op, scope)
	if not isinstance(op, Callable):
		raise InvalidOperator("Invalid operator %r" % (op,))
	return LazyExpression(lambda: execute(op, scope, ArrayValue([expr.left, expr.right])))

def _resolve_assignment(expr:AssignmentExpression, scope:Scope):
	assign_to_scope(scope, scope, expr.location, expr.data.copy_lock(scope), expr.policy)
	return expr.data

def _resolve_return(expr:ReturnExpression, scope:Scope):
	return enter(expr, scope)

def _resolve_if_else(expr:IfElseExpression, scope:Scope):
	if is_truthy(get_value(expr.condition, scope)):
		return resolve(expr.on_true, scope)
	if expr.on_false is not None:
		return resolve(expr.on_false, scope)
	return ConstantExpression(None)

###############################################################################

def _execute_function_declaration(fn:FunctionDeclaration, scope:Scope, args:Expression):
	return execute(resolve(fn, scope), scope, args)

def _execute_function_value(fn:FunctionValue, scope:Scope, args:Expression):
	def activate():
		inner = Scope(fn.static_link)
		inner.set('recurse', fn, LOCAL)
		assign_to_scope(inner, scope, fn.param, args, LOCAL)
		# Twice: once to get past the return-expression, once more for its payload.
		return resolve(enter(fn.code, inner), inner)
	if fn.lazy: return LazyExpression(activate)
	return activate()

def _execute_built_in(fn:BuiltInFnExpression, scope:Scope, args:Expression):
	if fn.lazy: return LazyExpression(lambda: fn.fn(scope, args))
	return fn.fn(scope, args)

###############################################################################

RESOLVE = {}
EXECUTE = {}

def attach_evaluation_methods(python_scope):
	for _k, _v in list(python_scope.items()):
		if _k.startswith("_resolve_"):
			_t = _v.__annotations__["expr"]
			assert isinstance(_t, type), (_k, _t)
			RESOLVE[_t] = _v
		elif _k.startswith("_execute_"):
			_t = _v.__annotations__["fn"]
			assert isinstance(_t, type), (_k, _t)
			EXECUTE[_t] = _v

attach_evaluation_methods(globals())

"""
Build the primitive namespace.
Also, some bits used for operator syntax.

Every built-in is a callback of (scope, argument-expression) wrapped in a BuiltInFnExpression.
Lazy built-ins are pure computations. Strict ones have effects that must happen in program order.
"""
import math
import operator
from functools import reduce
from .syntax import (
	Expression, ConstantExpression, ArrayValue, ReferenceExpression,
	Callable, FunctionValue, FunctionCall, BuiltInFnExpression,
)
from .diagnostics import InvalidArgument
from .scope import Scope
from .tree_walker.types import BUILT_IN
from .tree_walker.evaluator import resolve, force, force_deep, get_value, execute, is_truthy
from .tree_walker.render import render

BUILT_INS : dict[str, BuiltInFnExpression] = {}

def built_in(name:str, lazy:bool=True):
	def register(fn:BUILT_IN) -> BuiltInFnExpression:
		it = BuiltInFnExpression(fn, lazy, name)
		BUILT_INS[name] = it
		return it
	return register

def built_ins() -> dict[str, BuiltInFnExpression]:
	return dict(BUILT_INS)

###############################################################################

def get_as_is(scope:Scope, expr:Expression):
	return expr

def get_as_value(scope:Scope, expr:Expression):
	return get_value(expr, scope)

def _is_number(value) -> bool:
	return isinstance(value, (int, float)) and not isinstance(value, bool)

def _is_whole(value) -> bool:
	return isinstance(value, int) or value.is_integer()

def get_as_num(scope:Scope, expr:Expression):
	value = get_value(expr, scope)
	if not _is_number(value): raise InvalidArgument("Expected a number; got %r" % (value,))
	return value

def get_as_str(scope:Scope, expr:Expression) -> str:
	value = get_value(expr, scope)
	if not isinstance(value, str): raise InvalidArgument("Expected a string; got %r" % (value,))
	return value

def get_as_fn(scope:Scope, expr:Expression) -> Callable:
	value = get_value(expr, scope)
	if not isinstance(value, Callable): raise InvalidArgument("Expected a function; got %r" % (value,))
	return value

def get_as_arr(scope:Scope, expr:Expression) -> list[Expression]:
	value = get_value(expr, scope)
	if not isinstance(value, list): raise InvalidArgument("Expected a list; got %r" % (value,))
	return value

def get_as_num_arr(scope:Scope, expr:Expression) -> list:
	return [get_as_num(scope, e) for e in get_as_arr(scope, expr)]

def get_as_str_arr(scope:Scope, expr:Expression) -> list[str]:
	return [get_as_str(scope, e) for e in get_as_arr(scope, expr)]

def get_as_fn_arr(scope:Scope, expr:Expression) -> list[Callable]:
	return [get_as_fn(scope, e) for e in get_as_arr(scope, expr)]

def unpack(scope:Scope, args:Expression, *kinds) -> list:
	""" Take apart a positional argument list, converting each element according to its kind. """
	items = get_as_arr(scope, args)
	if len(items) != len(kinds):
		raise InvalidArgument("Expected %d arguments; got %d" % (len(kinds), len(items)))
	return [kind(scope, item) for kind, item in zip(kinds, items)]

def _arithmetic(fn, *operands):
	try: result = fn(*operands)
	except (ArithmeticError, ValueError) as ex:
		raise InvalidArgument("%s%r: %s" % (fn.__name__, operands, ex)) from ex
	if isinstance(result, complex):
		raise InvalidArgument("%s%r has no real answer" % (fn.__name__, operands))
	return ConstantExpression(result)

###############################################################################

@built_in("show")
def show(scope, args):
	return ConstantExpression(render(args, scope))

@built_in("print", lazy=False)
def print_(scope, args):
	text = get_as_str(scope, execute(get_as_fn(scope, scope.fetch('show')), scope, args))
	print(text)
	return ConstantExpression(None)

@built_in("sum")
def sum_(scope, args):
	try: return _arithmetic(sum, get_as_num_arr(scope, args))
	except InvalidArgument: return ConstantExpression(''.join(get_as_str_arr(scope, args)))

@built_in("sub")
def sub(scope, args):
	return _arithmetic(operator.sub, *unpack(scope, args, get_as_num, get_as_num))

@built_in("pow")
def pow_(scope, args):
	return _arithmetic(operator.pow, *unpack(scope, args, get_as_num, get_as_num))

@built_in("product")
def product(scope, args):
	return _arithmetic(math.prod, get_as_num_arr(scope, args))

@built_in("divide")
def divide(scope, args):
	return _arithmetic(operator.truediv, *unpack(scope, args, get_as_num, get_as_num))

def _int_divide(a, b):
	if isinstance(a, int) and isinstance(b, int): return a // b
	return math.floor(a / b)

@built_in("intDivide")
def int_divide(scope, args):
	return _arithmetic(_int_divide, *unpack(scope, args, get_as_num, get_as_num))

def _remainder(a, b):
	# Truncating, so the sign follows the dividend.
	if isinstance(a, int) and isinstance(b, int):
		r = abs(a) % abs(b)
		return -r if a < 0 else r
	return math.fmod(a, b)

def _modulo(a, b):
	r = _remainder(a, b)
	if a < 0: r = _remainder(b + r, b)
	return r

@built_in("modulo")
def modulo(scope, args):
	return _arithmetic(_modulo, *unpack(scope, args, get_as_num, get_as_num))

@built_in("sqrt")
def sqrt(scope, args):
	return _arithmetic(math.sqrt, get_as_num(scope, args))

@built_in("floor")
def floor(scope, args):
	return _arithmetic(math.floor, get_as_num(scope, args))

@built_in("ceil")
def ceil(scope, args):
	return _arithmetic(math.ceil, get_as_num(scope, args))

@built_in("range")
def range_(scope, args):
	start, end = unpack(scope, args, get_as_num, get_as_num)
	count = max(0, _arithmetic(math.floor, end - start).value)
	return ArrayValue([ConstantExpression(start + i) for i in range(count)])

@built_in("map")
def map_(scope, args):
	items, fn = unpack(scope, args, get_as_arr, get_as_fn)
	return ArrayValue([execute(fn, scope, item) for item in items])

@built_in("filter")
def filter_(scope, args):
	items, fn = unpack(scope, args, get_as_arr, get_as_fn)
	return ArrayValue([item for item in items if is_truthy(get_value(execute(fn, scope, item), scope))])

###############################################################################

def _same(a, b) -> bool:
	if isinstance(a, bool) != isinstance(b, bool): return False
	if isinstance(a, (list, Callable)) or isinstance(b, (list, Callable)): return a is b
	return a == b

@built_in("equal")
def equal(scope, args):
	return ConstantExpression(_same(*unpack(scope, args, get_as_value, get_as_value)))

@built_in("notEqual")
def not_equal(scope, args):
	return ConstantExpression(not _same(*unpack(scope, args, get_as_value, get_as_value)))

def _comparison(name:str, relation):
	def compare(scope, args):
		a, b = unpack(scope, args, get_as_value, get_as_value)
		try: return ConstantExpression(relation(a, b))
		except TypeError as ex: raise InvalidArgument("Cannot compare %r with %r" % (a, b)) from ex
	return built_in(name)(compare)

less_than = _comparison("lessThan", operator.lt)
greater_than = _comparison("greaterThan", operator.gt)
less_than_equal = _comparison("lessThanEqual", operator.le)
greater_than_equal = _comparison("greaterThanEqual", operator.ge)

@built_in("any")
def any_(scope, args):
	return ConstantExpression(any(is_truthy(get_value(e, scope)) for e in get_as_arr(scope, args)))

@built_in("every")
def every(scope, args):
	return ConstantExpression(all(is_truthy(get_value(e, scope)) for e in get_as_arr(scope, args)))

###############################################################################

@built_in("arrayAccess")
def array_access(scope, args):
	items, index = unpack(scope, args, get_as_arr, get_as_num)
	if _is_whole(index) and 0 <= index < len(items): return items[int(index)]
	return ConstantExpression(None)

@built_in("arrayAssignment", lazy=False)
def array_assignment(scope, args):
	""" [seq, i, value]: Writes in place. Writing just past the end makes the sequence longer. """
	target, index, value = unpack(scope, args, get_as_is, get_as_num, get_as_is)
	target = force(target, scope)
	if not isinstance(target, ArrayValue):
		raise InvalidArgument("Can only assign into a list; got %r" % (target,))
	if not (_is_whole(index) and 0 <= index <= target.size()):
		raise InvalidArgument("No position %r in a list of %d" % (index, target.size()))
	target.put(int(index), resolve(value, scope))
	return value

@built_in("identity")
def identity(scope, args):
	return resolve(args, scope)

@built_in("compose")
def compose(scope, args):
	""" Left-to-right: compose [f, g] applies f first, then g. """
	arg = ReferenceExpression('arg')
	def chain(prev, cur):
		return FunctionValue(FunctionCall(cur, FunctionCall(prev, arg)), arg, False, scope)
	return reduce(chain, get_as_fn_arr(scope, args), identity)

@built_in("force", lazy=False)
def force_(scope, args):
	return force(args, scope)

@built_in("forceDeep", lazy=False)
def force_deep_(scope, args):
	return force_deep(args, scope)

@built_in("take", lazy=False)
def take(scope, args):
	"""
	[n, cons-list]: the first n heads of a chain of [head, tail] cells.
	Only as many tails get forced as it takes to find those heads.
	"""
	count, cell = unpack(scope, args, get_as_num, get_as_is)
	count = _arithmetic(math.floor, count).value
	heads = []
	while count > 0:
		cell = force(cell, scope)
		if not isinstance(cell, ArrayValue): break
		heads.append(cell.at(0))
		cell = cell.at(1)
		count -= 1
	return ArrayValue(heads)

@built_in("forLoop", lazy=False)
def for_loop(scope, args):
	""" [[init, condition, afterthought], body]: each of the last three is applied to the control value. """
	header, body = unpack(scope, args, get_as_is, get_as_fn)
	control, condition, afterthought = unpack(scope, header, get_as_is, get_as_fn, get_as_fn)
	while is_truthy(get_value(execute(condition, scope, control), scope)):
		force(execute(body, scope, control), scope)
		control = execute(afterthought, scope, control)
	return ConstantExpression(None)

###############################################################################

OPERATOR_TIERS = (
	(('&', every), ('|', any_)),
	(('==', equal), ('!=', not_equal), ('<', less_than), ('>', greater_than), ('<=', less_than_equal), ('>=', greater_than_equal)),
	(('+', sum_), ('-', sub)),
	(('*', product), ('/', divide), ('//', int_divide), ('%', modulo)),
	(('^', pow_),),
	(('@', array_access),),
)

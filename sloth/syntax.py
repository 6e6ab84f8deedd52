"""
The set of node-types, which double as run-time values.
The parser builds these directly; there is no separate intermediate form.

Every node may carry a `locked` scope. When present, it overrides whatever scope
the evaluator would otherwise supply. `copy_lock` makes a structural copy of a node
with every part locked to a given scope, so that re-entered code never shares
memoized state with some unrelated activation.

The evaluation methods proper live in `tree_walker.evaluator`, keyed by node type.
"""
from typing import Optional, Sequence

class Expression:
	locked : Optional["Scope"] = None

	def lock(self, scope:"Scope") -> "Expression":
		self.locked = scope
		return self

	def copy_lock(self, scope:"Scope") -> "Expression":
		raise NotImplementedError(type(self))

class ConstantExpression(Expression):
	""" Plays a fixed value: number, string, flag, the absence-value, or a sequence thereof. """
	def __init__(self, value):
		self.value = value
	def __repr__(self): return "<const:%r>" % (self.value,)
	def copy_lock(self, scope):
		return ConstantExpression(self.value)

class ArrayValue(ConstantExpression):
	"""
	The one composite structure. Elements are expressions, not-necessarily-forced.
	A two-element [head, tail] where the tail evaluates lazily serves as a cons-cell.
	"""
	value : list[Expression]
	def __init__(self, elements:Sequence[Expression]):
		super().__init__(list(elements))
	def __repr__(self): return "<array:%r>" % (self.value,)

	def at(self, index:int) -> Expression:
		if 0 <= index < len(self.value): return self.value[index]
		return ConstantExpression(None)

	def put(self, index:int, item:Expression):
		if index == len(self.value): self.value.append(item)
		else: self.value[index] = item

	def size(self) -> int: return len(self.value)

	def copy_lock(self, scope):
		return ArrayValue([e.copy_lock(scope) for e in self.value]).lock(scope)

ABSENT = object()

class LazyExpression(Expression):
	"""
	A thunk which remembers its answer. The state moves from ABSENT
	to some expression exactly once; the evaluator handles the transition.
	"""
	def __init__(self, thunk:callable):
		self.thunk = thunk
		self.value = ABSENT
	def __repr__(self):
		if self.value is ABSENT: return "<thunk>"
		return "<thunk:%r>" % (self.value,)
	def is_evaluated(self): return self.value is not ABSENT
	def copy_lock(self, scope):
		return LazyExpression(self.thunk).lock(scope)

class ReferenceExpression(Expression):
	def __init__(self, name:str):
		self.name = name
	def __repr__(self): return "<ref:%s>" % self.name
	def copy_lock(self, scope):
		return ReferenceExpression(self.name).lock(scope)

###############################################################################

class Callable(Expression):
	""" Anything that can be applied to an argument-expression. Callables are first-class values. """

class FunctionDeclaration(Callable):
	""" Code with no environment yet. Resolving one in some scope is the act of making a closure. """
	def __init__(self, code:Expression, param:Expression, lazy:bool):
		self.code, self.param, self.lazy = code, param, lazy
	def __repr__(self): return "<fn%s %r: %r>" % ('' if self.lazy else '!', self.param, self.code)
	def copy_lock(self, scope):
		return FunctionDeclaration(self.code.copy_lock(scope), self.param, self.lazy).lock(scope)

class FunctionValue(Callable):
	""" The run-time manifestation of a function literal: a callable value tied to its natal environment. """
	def __init__(self, code:Expression, param:Expression, lazy:bool, static_link:"Scope"):
		self.code, self.param, self.lazy = code, param, lazy
		self.static_link = static_link
	def __repr__(self): return "<closure %r>" % self.param
	def copy_lock(self, scope):
		code, param = self.code.copy_lock(scope), self.param.copy_lock(scope)
		return FunctionValue(code, param, self.lazy, self.static_link).lock(scope)

class BuiltInFnExpression(Callable):
	""" A native callback of (scope, argument-expression) returning an expression. """
	def __init__(self, fn:callable, lazy:bool=True, name:str=None):
		self.fn, self.lazy = fn, lazy
		self.name = name or fn.__name__
	def __repr__(self): return "<built-in %s>" % self.name
	def copy_lock(self, scope):
		return BuiltInFnExpression(self.fn, self.lazy, self.name).lock(scope)

###############################################################################

class FunctionCall(Expression):
	def __init__(self, fn:Expression, args:Expression):
		self.fn, self.args = fn, args
	def __repr__(self): return "<call %r %r>" % (self.fn, self.args)
	def copy_lock(self, scope):
		return FunctionCall(self.fn.copy_lock(scope), self.args.copy_lock(scope)).lock(scope)

class CodeBlockDeclaration(Expression):
	def __init__(self, code:Sequence[Expression], lazy:bool):
		self.code, self.lazy = list(code), lazy
	def __repr__(self): return "<block%s %r>" % ('' if self.lazy else '!', self.code)
	def copy_lock(self, scope):
		return CodeBlockDeclaration([e.copy_lock(scope) for e in self.code], self.lazy).lock(scope)

class CodeBlock(CodeBlockDeclaration):
	""" One entry into a block. It runs at most once, so it keeps what it produced. """
	def __init__(self, code:Sequence[Expression], lazy:bool):
		super().__init__(code, lazy)
		self.outcome = ABSENT
	def copy_lock(self, scope):
		return CodeBlock([e.copy_lock(scope) for e in self.code], self.lazy).lock(scope)

class BinaryMathExpression(Expression):
	def __init__(self, left:Expression, right:Expression, op:Expression):
		self.left, self.right, self.op = left, right, op
	def __repr__(self): return "<binop %r %r %r>" % (self.op, self.left, self.right)
	def copy_lock(self, scope):
		return BinaryMathExpression(self.left.copy_lock(scope), self.right.copy_lock(scope), self.op.copy_lock(scope)).lock(scope)

class AssignmentExpression(Expression):
	def __init__(self, location:Expression, data:Expression, policy:str):
		self.location, self.data, self.policy = location, data, policy
	def __repr__(self): return "<%s %r = %r>" % (self.policy, self.location, self.data)
	def copy_lock(self, scope):
		return AssignmentExpression(self.location.copy_lock(scope), self.data.copy_lock(scope), self.policy).lock(scope)

class ReturnExpression(Expression):
	def __init__(self, value:Expression):
		self.value = value
	def __repr__(self): return "<return %r>" % (self.value,)
	def copy_lock(self, scope):
		return ReturnExpression(self.value.copy_lock(scope)).lock(scope)

class IfElseExpression(Expression):
	def __init__(self, condition:Expression, on_true:Expression, on_false:Optional[Expression]=None):
		self.condition, self.on_true, self.on_false = condition, on_true, on_false
	def __repr__(self): return "<if %r then %r else %r>" % (self.condition, self.on_true, self.on_false)
	def copy_lock(self, scope):
		on_false = None if self.on_false is None else self.on_false.copy_lock(scope)
		return IfElseExpression(self.condition.copy_lock(scope), self.on_true.copy_lock(scope), on_false).lock(scope)

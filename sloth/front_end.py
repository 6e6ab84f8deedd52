"""
Recursive descent by ordered, backtracking alternation.

Each sub-parser takes the remaining text and answers a pair (expression, rest).
Failure answers (None, text) and costs nothing, because strings are never mutated.
The expression trees come out ready to evaluate; there is no intermediate form.

Infix operators get no special machinery. For each precedence tier, loosest first,
every occurrence of each operator in the tier is a candidate split point, earliest first.
A split works if the text before it parses completely and the text after it parses at all.
That rule alone yields conventional precedence, and makes every tier right-associative.
"""
import re
from pathlib import Path
from typing import Optional
from . import syntax
from .scope import LOCAL, NONLOCAL, ANY
from .primitive import OPERATOR_TIERS
from .diagnostics import SlothParseError

RESERVED = frozenset(['if', 'else', 'fn', 'then', 'true', 'false'])

NAME = re.compile(r'[_a-zA-Z]\w*', re.ASCII)
NUMBER = re.compile(r'-?\d+(\.\d+)?', re.ASCII)
BOOLEAN = re.compile(r'(true|false)\b', re.ASCII)
RETURN = re.compile(r'return\s', re.ASCII)
POLICY = re.compile(r'(local|nonlocal)\b', re.ASCII)

def _keyword(word:str):
	return re.compile(re.escape(word)+r'\b', re.ASCII)

IF, THEN, ELSE, FN = map(_keyword, ('if', 'then', 'else', 'fn'))

class SlothParser:
	"""
	Holds the memo for one parse. Trying every split point re-parses the same
	stretches of text many times over, so each answer is kept by the text it started from
	and the place where that text ends. Equal text at different places gets distinct nodes.
	"""
	def __init__(self):
		self._memo = {}
		self._end = 0
		self.alternatives = [
			self.parse_boolean,
			self.parse_if_else,
			self.parse_return,
			self.parse_function,
			self.parse_function_call,
			self.parse_assignment,
			self.parse_infix,
			self.parse_group,
			self.parse_block,
			self.parse_list,
			self.parse_string,
			self.parse_number,
			self.parse_reference,
		]

	def parse(self, code:str):
		"""
		The top level is a strict block without braces. The answer is (block, rest) on success.
		On failure it is (None, rest) with `rest` being where things stalled.
		"""
		statements, rest = self.parse_statements(code)
		if statements is None: return None, rest
		return syntax.CodeBlock(statements, False), rest[1:]

	def parse_statements(self, code:str):
		""" Runs to the end of the text or to a closing brace, whichever comes first. """
		statements = []
		rest = code.lstrip()
		while rest and not rest.startswith('}'):
			expr, after = self.parse_expression(rest)
			if expr is None:
				if not rest.startswith(';'): return None, rest
				rest = rest[1:].lstrip()
				continue
			statements.append(expr)
			rest = after.lstrip()
		return statements, rest

	def parse_expression(self, code:str):
		code = code.lstrip()
		key = code, self._end
		try: return self._memo[key]
		except KeyError: pass
		answer = None, code
		for alternative in self.alternatives:
			expr, rest = alternative(code)
			if expr is not None:
				answer = expr, rest
				break
		self._memo[key] = answer
		return answer

	@staticmethod
	def parse_boolean(code:str):
		match = BOOLEAN.match(code)
		if not match: return None, code
		return syntax.ConstantExpression(match.group() == 'true'), code[match.end():]

	def parse_if_else(self, code:str):
		match = IF.match(code)
		if not match: return None, code
		condition, rest = self.parse_expression(code[match.end():])
		if condition is None: return None, code
		rest = rest.lstrip()
		match = THEN.match(rest)
		if not match: return None, code
		on_true, rest = self.parse_expression(rest[match.end():])
		if on_true is None: return None, code
		rest = rest.lstrip()
		match = ELSE.match(rest)
		if not match: return syntax.IfElseExpression(condition, on_true), rest
		on_false, rest = self.parse_expression(rest[match.end():])
		if on_false is None: return None, code
		return syntax.IfElseExpression(condition, on_true, on_false), rest

	def parse_return(self, code:str):
		match = RETURN.match(code)
		if not match: return None, code
		value, rest = self.parse_expression(code[match.end():])
		if value is None: return None, code
		return syntax.ReturnExpression(value), rest

	def parse_function(self, code:str):
		match = FN.match(code)
		if not match: return None, code
		rest = code[match.end():].lstrip()
		strict = rest.startswith('!')
		if strict: rest = rest[1:].lstrip()
		param, rest = self.parse_pattern(rest)
		if param is None: return None, code
		rest = rest.lstrip()
		if not rest.startswith(':'): return None, code
		body, rest = self.parse_expression(rest[1:])
		if body is None: return None, code
		return syntax.FunctionDeclaration(syntax.ReturnExpression(body), param, not strict), rest.lstrip()

	def parse_function_call(self, code:str):
		callee, rest = self.parse_group(code)
		if callee is None:
			if POLICY.match(code): return None, code
			callee, rest = self.parse_reference(code)
		if callee is None: return None, code
		args, rest = self.parse_expression(rest)
		if args is None: return None, code
		return syntax.FunctionCall(callee, args), rest

	def parse_assignment(self, code:str):
		match = POLICY.match(code)
		if match:
			expr, rest = self._assignment(code[match.end():], match.group())
			if expr is not None: return expr, rest
		return self._assignment(code, ANY)

	def _assignment(self, code:str, policy:str):
		location, rest = self.parse_pattern(code.lstrip())
		if location is None: return None, code
		rest = rest.lstrip()
		if not rest.startswith('='): return None, code
		data, rest = self.parse_expression(rest[1:])
		if data is None: return None, code
		return syntax.AssignmentExpression(location, data, policy), rest

	def parse_pattern(self, code:str):
		""" A destructuring target: a plain name, or a list of targets. """
		location, rest = self.parse_reference(code)
		if location is None: return self.parse_list(code)
		return location, rest

	def parse_infix(self, code:str):
		for tier in OPERATOR_TIERS:
			candidates = sorted(
				((match.start(), symbol, op) for symbol, op in tier for match in re.finditer('(?=%s)' % re.escape(symbol), code)),
				key=lambda c: c[0],
			)
			for position, symbol, op in candidates:
				left, leftover = self._parse_prefix(code, position)
				if left is None or leftover.strip(): continue
				right, rest = self.parse_expression(code[position+len(symbol):])
				if right is None: continue
				return syntax.BinaryMathExpression(left, right, op), rest.lstrip()
		return None, code

	def _parse_prefix(self, code:str, position:int):
		"""
		The left side of a split point ends early, so its text may coincide with
		some stretch that runs to the real end. The memo tells the two apart by where each one ends,
		counted back from the end of the whole input.
		"""
		outer = self._end
		self._end = outer - len(code) + position
		try: return self.parse_expression(code[:position])
		finally: self._end = outer

	def parse_group(self, code:str):
		if not code.startswith('('): return None, code
		inside, rest = self.parse_expression(code[1:])
		if inside is None: return None, code
		rest = rest.lstrip()
		if not rest.startswith(')'): return None, code
		return inside, rest[1:]

	def parse_block(self, code:str):
		if not code.startswith('{'): return None, code
		rest = code[1:].lstrip()
		lazy = not rest.startswith('!')
		if not lazy: rest = rest[1:].lstrip()
		statements = []
		while True:
			expr, after = self.parse_expression(rest)
			if expr is None:
				if not rest.startswith(';'): break
				rest = rest[1:].lstrip()
				continue
			statements.append(expr)
			rest = after.lstrip()
		if not rest.startswith('}'): return None, code
		return syntax.CodeBlockDeclaration(statements, lazy), rest[1:].lstrip()

	def parse_list(self, code:str):
		if not code.startswith('['): return None, code
		rest = code[1:].lstrip()
		elements = []
		while True:
			expr, after = self.parse_expression(rest)
			if expr is None: break
			elements.append(expr)
			rest = after.lstrip()
			if not rest.startswith(','): break
			rest = rest[1:].lstrip()
		if not rest.startswith(']'): return None, code
		return syntax.ArrayValue(elements), rest[1:].lstrip()

	@staticmethod
	def parse_string(code:str):
		""" No escapes: the string runs to the very next double-quote. """
		if not code.startswith('"'): return None, code
		end = code.find('"', 1)
		if end < 0: return None, code
		return syntax.ConstantExpression(code[1:end]), code[end+1:]

	@staticmethod
	def parse_number(code:str):
		match = NUMBER.match(code)
		if not match: return None, code
		value = float(match.group()) if match.group(1) else int(match.group())
		return syntax.ConstantExpression(value), code[match.end():]

	@staticmethod
	def parse_reference(code:str):
		match = NAME.match(code)
		if not match or match.group() in RESERVED: return None, code
		return syntax.ReferenceExpression(match.group()), code[match.end():]

def parse(code:str):
	return SlothParser().parse(code)

def parse_expression(code:str):
	return SlothParser().parse_expression(code)

def parse_text(text:str, path:Optional[Path]=None) -> syntax.CodeBlock:
	""" Parse a whole program, or raise SlothParseError pointing at where the parse stalled. """
	statements, rest = SlothParser().parse_statements(text)
	if statements is None or rest:
		raise SlothParseError(text, len(text) - len(rest), path)
	return syntax.CodeBlock(statements, False)

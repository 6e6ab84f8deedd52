import unittest

from sloth import syntax, primitive
from sloth.diagnostics import Report, SlothParseError
from sloth.front_end import parse, parse_expression, parse_text
from sloth.scope import LOCAL, NONLOCAL, ANY
from sloth.tree_walker import executive

def _run(text):
	report = Report()
	result = executive.run_text(text, report)
	report.assert_no_issues("Ostensibly-good program failed.")
	return result

class ParseTests(unittest.TestCase):

	def test_literals(self):
		for text, expect in [
			("12", 12),
			("-3", -3),
			("2.5", 2.5),
			('"hello"', "hello"),
			('""', ""),
			("true", True),
			("false", False),
		]:
			with self.subTest(text):
				expr, rest = parse_expression(text)
				self.assertIsInstance(expr, syntax.ConstantExpression)
				self.assertEqual(expect, expr.value)
				self.assertIs(type(expect), type(expr.value))
				self.assertEqual("", rest)

	def test_reserved_words_are_not_names(self):
		for word in ["if", "else", "fn", "then"]:
			with self.subTest(word):
				expr, rest = parse_expression(word)
				self.assertIsNone(expr)

	def test_names_may_start_with_keywords(self):
		expr, rest = parse_expression("iffy")
		self.assertIsInstance(expr, syntax.ReferenceExpression)
		self.assertEqual("iffy", expr.name)

	def test_top_level_is_a_strict_block(self):
		tree, rest = parse("x = 1; return x")
		self.assertIsInstance(tree, syntax.CodeBlock)
		assert not tree.lazy
		self.assertEqual(2, len(tree.code))
		self.assertIsInstance(tree.code[0], syntax.AssignmentExpression)
		self.assertIsInstance(tree.code[1], syntax.ReturnExpression)

	def test_failure_is_absent(self):
		tree, rest = parse("x = ;")
		self.assertIsNone(tree)

	def test_assignment_policies(self):
		for text, policy in [
			("x = 1", ANY),
			("local x = 1", LOCAL),
			("nonlocal x = 1", NONLOCAL),
			("localx = 1", ANY),
		]:
			with self.subTest(text):
				expr, rest = parse_expression(text)
				self.assertIsInstance(expr, syntax.AssignmentExpression)
				self.assertEqual(policy, expr.policy)

	def test_destructuring_target(self):
		expr, rest = parse_expression("[a, [b, c]] = x")
		self.assertIsInstance(expr, syntax.AssignmentExpression)
		self.assertIsInstance(expr.location, syntax.ArrayValue)
		self.assertIsInstance(expr.location.value[1], syntax.ArrayValue)

	def test_functions(self):
		lazy, _ = parse_expression("fn x: x")
		strict, _ = parse_expression("fn! [a, b]: a")
		self.assertIsInstance(lazy, syntax.FunctionDeclaration)
		assert lazy.lazy
		assert not strict.lazy
		self.assertIsInstance(lazy.code, syntax.ReturnExpression)
		self.assertIsInstance(strict.param, syntax.ArrayValue)

	def test_blocks(self):
		lazy, _ = parse_expression("{ x = 1; ; return x }")
		strict, _ = parse_expression("{! }")
		self.assertIsInstance(lazy, syntax.CodeBlockDeclaration)
		assert lazy.lazy
		self.assertEqual(2, len(lazy.code))
		assert not strict.lazy
		self.assertEqual(0, len(strict.code))

	def test_application_takes_the_rest(self):
		expr, _ = parse_expression("f x + 1")
		self.assertIsInstance(expr, syntax.FunctionCall)
		self.assertIsInstance(expr.args, syntax.BinaryMathExpression)

	def test_infix_picks_the_operator_function(self):
		expr, _ = parse_expression("a @ 0")
		self.assertIsInstance(expr, syntax.BinaryMathExpression)
		self.assertIs(primitive.array_access, expr.op)

	def test_looser_tier_splits_first(self):
		expr, _ = parse_expression("1 + 2 * 3 == 7")
		self.assertIs(primitive.equal, expr.op)
		self.assertIs(primitive.sum_, expr.left.op)
		self.assertIs(primitive.product, expr.left.right.op)

	def test_two_character_operators(self):
		for text, op in [
			("a <= b", primitive.less_than_equal),
			("a >= b", primitive.greater_than_equal),
			("a != b", primitive.not_equal),
			("a // b", primitive.int_divide),
		]:
			with self.subTest(text):
				expr, rest = parse_expression(text)
				self.assertIs(op, expr.op)
				self.assertEqual("", rest)

	def test_string_may_hold_operator_characters(self):
		self.assertEqual("a+b", _run('return "a" + "+" + "b"'))

	def test_equal_text_makes_distinct_nodes(self):
		for text in ["[0]==[0]", "[0] == [0]", "[[1]]+[[1]]"]:
			with self.subTest(text):
				expr, rest = parse_expression(text)
				self.assertIsInstance(expr, syntax.BinaryMathExpression)
				self.assertIsInstance(expr.left, syntax.ArrayValue)
				self.assertIsNot(expr.left, expr.right)
				self.assertIsNot(expr.left.value[0], expr.right.value[0])
		for text in ["return [0]==[0]", "return [0] == [0]"]:
			with self.subTest(text):
				self.assertEqual("false", _run(text))

	def test_parse_text_points_at_the_trouble(self):
		for text, offset in [
			("x = 1;\nx = ;", 9),
			("return [1, 2", 7),
			("x = 1; }", 7),
		]:
			with self.subTest(text):
				with self.assertRaises(SlothParseError) as cm:
					parse_text(text)
				self.assertEqual(offset, cm.exception.offset)

	def test_parse_error_makes_a_picture(self):
		report = Report()
		try: parse_text("x = 1;\nx = ;")
		except SlothParseError as ex: report.parse_failed(ex)
		assert report.sick()
		picture = report.issues[0].as_text()
		self.assertIn("Sloth got confused here", picture)
		self.assertIn("x = ;", picture)

class PrecedenceTests(unittest.TestCase):

	def test_arithmetic(self):
		for text, expect in [
			("2+3*4", "14"),
			("(2+3)*4", "20"),
			("2 * 3 + 4", "10"),
			("2^3^2", "512"),
			("10 - 4 - 3", "9"),
			("100 / 10 / 5", "50"),
			("2 * 3 ^ 2", "18"),
			("7 // 2 + 7 % 2", "4"),
			("1 + 1 == 2", "true"),
			("1 < 2 & 2 < 3", "true"),
			("1 > 2 | 2 > 3", "false"),
			("[10, 20, 30] @ 1 + 1", "21"),
		]:
			with self.subTest(text):
				self.assertEqual(expect, _run("return " + text))

	def test_negative_literal(self):
		self.assertEqual("-6", _run("return 3 * -2"))

if __name__ == '__main__':
	unittest.main()

from pathlib import Path
import unittest
from unittest import mock

from sloth.diagnostics import Report
from sloth.tree_walker import executive

class Silence(Report):
	""" Notes the kind of each issue, and keeps quiet about it. """
	def __init__(self):
		super().__init__(verbose=False)
		self.complain_to_console = mock.Mock()
		self.kinds = []

	def parse_failed(self, ex):
		self.kinds.append("parse")
		super().parse_failed(ex)

	def no_such_file(self, path):
		self.kinds.append("load")
		super().no_such_file(path)

	def broken_file(self, path):
		self.kinds.append("load")
		super().broken_file(path)

	def evaluation_failed(self, ex):
		self.kinds.append("evaluate")
		super().evaluation_failed(ex)

	def too_deep(self):
		self.kinds.append("too_deep")
		super().too_deep()

base_folder = Path(__file__).parent.parent
zoo_fail = base_folder/"zoo/fail"

def _identify_problem(folder:Path, filename:str):
	specimen_path = folder / filename
	assert specimen_path.exists(), specimen_path
	report = Silence()
	result = executive.run_program(specimen_path, report)
	if report.ok(): return "failed to fail"
	assert result is None
	assert 0 == report.complain_to_console.call_count
	assert len(report.kinds) == 1, report.kinds
	for pic in report.issues: pic.as_text()
	return report.kinds[0]

class ZooOfFail(unittest.TestCase):
	""" Tests that assert about failure modes. """

	def expect(self, folder, cases):
		for basename in cases:
			with self.subTest(basename):
				self.assertEqual(folder, _identify_problem(zoo_fail / folder, basename + ".sl"))

	def test_00_syntax_error(self):
		self.expect("parse", [
			"syntax_error",
			"unclosed_list",
			"stray_brace",
		])

	def test_01_evaluate(self):
		self.expect("evaluate", [
			"not_callable",
			"destructure_mismatch",
			"bad_argument",
			"divide_by_zero",
		])

	def test_02_load(self):
		self.expect("load", [
			"missing_module",
			"binary_module",
		])
		self.assertEqual("load", _identify_problem(zoo_fail / "load/parts", "not_utf8.sl"))
		self.assertEqual("parse", _identify_problem(zoo_fail / "load", "garbled_module.sl"))

	def test_03_too_deep(self):
		self.expect("too_deep", [
			"forever",
		])

	def test_missing_program(self):
		report = Silence()
		self.assertIsNone(executive.run_program(zoo_fail / "no_such_program.sl", report))
		self.assertEqual(["load"], report.kinds)


if __name__ == '__main__':
	unittest.main()

"""
Here find the module system -- such as it is.

A program may `load` another file by a path relative to its own location.
The included tree is parsed once per file, but every inclusion gets a fresh copy
locked to a fresh file-level scope. So nothing memoized in one inclusion
is ever visible through another, and free names in the included code
resolve against that file's own bindings.
"""
from pathlib import Path
from typing import Optional

from .diagnostics import Report, SlothParseError, LoadError, InvalidArgument
from .front_end import parse_text
from .scope import Scope, LOCAL
from .syntax import ConstantExpression, CodeBlock, BuiltInFnExpression
from .tree_walker.evaluator import get_value

LOCATION = 'location'

def file_scope(root:Scope, location:Optional[Path]) -> Scope:
	scope = Scope(root)
	if location is not None:
		scope.set(LOCATION, ConstantExpression(str(location)), LOCAL)
	return scope

class Loader:
	_trees : dict[Path, CodeBlock]

	def __init__(self, report:Report):
		self._report = report
		self._trees = {}

	def read(self, path:Path) -> str:
		self._report.info("Loading", path)
		try:
			with open(path, "r", encoding="utf-8") as fh:
				return fh.read()
		except FileNotFoundError as ex:
			self._report.no_such_file(path)
			raise LoadError("I see no file called %s" % path) from ex
		except OSError as ex:
			self._report.broken_file(path)
			raise LoadError("Could not read %s" % path) from ex
		except UnicodeDecodeError as ex:
			self._report.broken_file(path)
			raise LoadError("%s is not UTF-8 text" % path) from ex

	def parse_text(self, text:str, path:Optional[Path]=None) -> CodeBlock:
		try: return parse_text(text, path)
		except SlothParseError as ex:
			self._report.parse_failed(ex)
			raise LoadError(str(ex)) from ex

	def parse_file(self, path:Path) -> CodeBlock:
		abs_path = path.resolve()
		if abs_path not in self._trees:
			self._trees[abs_path] = self.parse_text(self.read(path), path)
		return self._trees[abs_path]

	def include(self, scope:Scope, relative:str):
		""" The included tree, copied and locked to a new scope just under the root. """
		here = get_value(scope.fetch(LOCATION), scope)
		base = Path(here).parent if isinstance(here, str) else Path.cwd()
		path = base / relative
		tree = self.parse_file(path)
		return tree.copy_lock(file_scope(scope.root, path))

	def as_built_in(self) -> BuiltInFnExpression:
		def load(scope, args):
			relative = get_value(args, scope)
			if not isinstance(relative, str):
				raise InvalidArgument("Expected a relative path; got %r" % (relative,))
			return self.include(scope, relative)
		return BuiltInFnExpression(load, lazy=False, name='load')

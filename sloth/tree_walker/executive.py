"""
This is the overall control for the run-time:
set up the root scope, evaluate the program's top-level block, and render what it returns.
"""
from pathlib import Path
from typing import Optional
from ..diagnostics import Report, EvaluationError, LoadError
from ..modularity import Loader, file_scope
from ..primitive import built_ins
from ..scope import Scope, LOCAL
from ..syntax import CodeBlock
from .render import render, DEFAULT_DEPTH

def root_scope(loader:Loader) -> Scope:
	root = Scope()
	root.update(built_ins())
	root.set('load', loader.as_built_in(), LOCAL)
	return root

def run_tree(tree:CodeBlock, loader:Loader, report:Report, location:Optional[Path]=None, depth:int=DEFAULT_DEPTH) -> str:
	""" May raise EvaluationError or RecursionError. """
	report.info("Running", location or "program text", "with", len(tree.code), "top-level statements")
	scope = file_scope(root_scope(loader), location)
	return render(tree, scope, depth)

def _guarded(report:Report, compute) -> Optional[str]:
	try: return compute()
	except LoadError:
		# The loader has already said why.
		assert report.sick()
	except EvaluationError as ex:
		report.evaluation_failed(ex)
	except RecursionError:
		report.too_deep()

def run_text(text:str, report:Report, *, path:Optional[Path]=None, depth:int=DEFAULT_DEPTH) -> Optional[str]:
	"""
	Answers the rendering of whatever the program returns,
	or None if anything went wrong. In that case, the report says what.
	"""
	loader = Loader(report)
	return _guarded(report, lambda: run_tree(loader.parse_text(text, path), loader, report, path, depth))

def run_program(path:Path, report:Report, depth:int=DEFAULT_DEPTH) -> Optional[str]:
	loader = Loader(report)
	return _guarded(report, lambda: run_tree(loader.parse_file(path), loader, report, path, depth))

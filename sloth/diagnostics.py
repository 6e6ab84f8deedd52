import sys, random
from pathlib import Path
from typing import Optional
from boozetools.support.failureprone import SourceText, illustration

class SlothError(Exception):
	""" Root of everything the interpreter raises on purpose. """

class SlothParseError(SlothError):
	""" No alternative of the grammar matched at some point in the text. """
	def __init__(self, text:str, offset:int, path:Optional[Path]=None):
		super().__init__(text, offset, path)
		self.text, self.offset, self.path = text, offset, path

	def __str__(self):
		return "Failed to parse %s at offset %d" % (self.path or "program text", self.offset)

class EvaluationError(SlothError):
	""" Fatal to the current program run. There is no in-language recovery. """

class InvalidArgument(EvaluationError): pass
class InvalidAssignment(EvaluationError): pass
class NotCallable(EvaluationError): pass
class InvalidOperator(EvaluationError): pass
class LoadError(EvaluationError): pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Hmm. ", "", ""]

	slow_oaths = [
		'Bother', 'Blast', 'Crumbs', 'Drat', 'Fiddlesticks', 'Goodness',
		'Heavens', 'Mercy', 'Nuts', 'Rats', 'Shucks', 'Sugar', 'Yikes',
	]

	resignations = [
		'I shall need a little lie-down.',
		'This branch will not hold me.',
		'I cannot continue.',
		'Something did not evaluate the way it ought.',
		'I need to ask for help.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, slow_oaths, resignations)))

class Report:
	""" Collects issues as the interpreter runs into them; says nothing until asked. """
	issues : list["Pic"]

	def __init__(self, *, verbose:int=0):
		self._verbose = verbose or 0   # Because None is incomparable.
		self.issues = []

	def ok(self): return not self.issues
	def sick(self): return bool(self.issues)

	def issue(self, it:"Pic"):
		self.issues.append(it)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self.issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self.issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Methods the front-end is likely to call:
	def parse_failed(self, ex:SlothParseError):
		source = SourceText(ex.text, filename=None if ex.path is None else str(ex.path))
		stalled = ex.text[ex.offset:]
		intro = "Sloth got confused while reading %s." % (ex.path or "the program")
		problem = [Annotation(source, ex.offset, _token_width(stalled), "Sloth got confused here")]
		self.issue(Pic(intro, problem, [_parse_hint(stalled)]))

	# Methods the loader calls:
	def _file_error(self, path:Path, prefix:str):
		self.issue(Pic(prefix+" "+str(path), []))

	def no_such_file(self, path:Path):
		self._file_error(path, "I see no file called")

	def broken_file(self, path:Path):
		self._file_error(path, "Something went pear-shaped while trying to read")

	# Methods the executive calls:
	def evaluation_failed(self, ex:EvaluationError):
		intro = "The program stopped with %s." % type(ex).__name__
		self.issue(Pic(intro, [], [str(ex)]))

	def too_deep(self):
		intro = "The evaluation went too deep."
		footer = ["Perhaps something forced an unbounded sequence, or a recursion has no base case."]
		self.issue(Pic(intro, [], footer))

class Annotation:
	path: Optional[str]
	def __init__(self, source:SourceText, offset:int, width:int=1, caption:str=""):
		self.source = source
		self.path = source.filename
		self.offset, self.width = offset, width
		self.caption = caption
	def illustrate(self):
		row, col = self.source.find_row_col(self.offset)
		single_line = self.source.line_of_text(row)
		return illustration(single_line, col, self.width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	def as_text(self):
		lines = [self._intro, ""]
		path = None
		for ann in self._anns:
			if ann.path != path:
				path = ann.path
				lines.append(str(path))
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _token_width(stalled:str) -> int:
	first = stalled.split(None, 1)
	return len(first[0]) if first else 1

def _parse_hint(stalled:str) -> str:
	if stalled[:1] in tuple("&|=!<>+-*/%^@"):
		return "This operator has nothing sensible on its left. Perhaps a missing semicolon before it?"
	if stalled[:1] in (')', ']'):
		return "This closes something that never opened, or whatever it encloses did not parse."
	if stalled.startswith('"') and stalled.count('"') % 2:
		return "This string never ends."
	return "Perhaps a missing semicolon between statements?"

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()

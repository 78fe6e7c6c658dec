import sys, random
from pathlib import Path
from typing import Any, Optional
from boozetools.support.failureprone import SourceText, illustration

from .ontology import Phrase, Token

def error_text(line:int, where:str, message:str) -> str:
	return "line %d Error%s: %s" % (line, where, message)

class Gripe:
	"""
	Mixed into every exception that means the program is wrong, as opposed to the interpreter.
	Each one blames a particular token, which supplies the line number.
	"""
	token: Token
	message: str

	def __init__(self, token:Token, message:str):
		super().__init__(token, message)
		self.token, self.message = token, message

	def where(self) -> str: return ""
	def __str__(self): return error_text(self.token.line, self.where(), self.message)

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]

	minced_oaths = [
		'Ack', 'ARGH', 'Blargh', 'Confound it', 'Crud', 'Curses', "Crikey",
		'Drat', 'Fiddlesticks', 'Good Grief', "Great Scott", 'Heavens',
		'Jeepers', "Mercy", 'Nuts', 'Rats', 'Woe is me',
	]

	resignations = [
		'I am undone.',
		'I cannot continue.',
		'The path before me fades into darkness.',
		'I need to ask for help.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	""" Collects whatever went wrong, and eventually tells the console about it. """
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._source = SourceText("")
		self._path = None

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self): return tuple(self._issues)

	def issue(self, it:Any):
		self._issues.append(it)

	def reset(self):
		self._issues.clear()

	def set_source(self, text:str, path:Optional[Path]=None):
		""" Annotations illustrate from whatever source text came along most recently. """
		self._path = path
		self._source = SourceText(text, filename=str(path) if path else None)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	def _gripe(self, ex:Gripe, caption:str, footer=()):
		problem = [Annotation(self._source, ex.token, caption)] if ex.token.line else []
		self.issue(Pic(str(ex), problem, footer))

	# Methods the front-end calls:
	def syntax_error(self, ex:Gripe):
		self._gripe(ex, "Got confused here")

	# Methods the resolver calls:
	def resolution_error(self, ex:Gripe):
		self._gripe(ex, "This one", ["The program did not run."])

	# Methods the run-time calls:
	def runtime_error(self, ex:Gripe):
		self._gripe(ex, "Went wrong here")

class Annotation:
	caption: str
	def __init__(self, source:SourceText, phrase:Phrase, caption:str=""):
		self.source = source
		self.left, self.right = phrase.left(), phrase.right()
		self.caption = caption
	def illustrate(self):
		row, col = self.source.find_row_col(self.left)
		single_line = self.source.line_of_text(row)
		width = self.right - self.left
		return illustration(single_line, col, width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	@property
	def description(self): return self._intro
	def as_text(self):
		lines = [self._intro]
		if self._anns: lines.append("")
		lines.extend(ann.illustrate() for ann in self._anns)
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()

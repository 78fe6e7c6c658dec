"""
These most-fundamental classes sit apart from the syntax classes
to avoid various circular-import scenarios. Tokens are phrases too,
so that anything which complains can point at a bit of source text.
"""

class Phrase:
	def left(self) -> int:
		""" Return the offset of the leftmost character of this phrase """
		raise NotImplementedError(type(self))
	def right(self) -> int:
		""" Return the offset just past the rightmost character of this phrase """
		raise NotImplementedError(type(self))

class Token(Phrase):
	""" Representing the occurrence of a word, symbol, or literal somewhere in the source. """
	kind: str
	text: str
	line: int  # zero-line means pre-defined, as for native functions.

	def __init__(self, kind:str, text:str, literal=None, line:int=0, where:slice=slice(0,0)):
		assert isinstance(text, str)
		self.kind, self.text, self.literal = kind, text, literal
		self.line, self.slice = line, where
	def __repr__(self): return "<%s %r @%d>" % (self.kind, self.text, self.line)
	def left(self): return self.slice.start
	def right(self): return self.slice.stop

EOF = "<END>"

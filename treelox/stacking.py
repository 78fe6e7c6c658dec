"""
Activation records for the tree-walking run-time: the environment chain.

Each frame owns a dictionary of bindings and holds a static link to the frame
that lexically encloses it. Closures hold on to the frame where they were made,
so a frame lives exactly as long as somebody can still reach it.
Python's garbage collector takes care of the rest.
"""
from typing import Any, Optional
from .ontology import Token
from .tree_walker.types import UndefinedVariable

class Frame:
	_bindings : dict[str, Any]
	static_link : Optional["Frame"]

	def define(self, key:str, value):
		""" Overwrites any binding of the same name in this very frame. """
		self._bindings[key] = value

	def holds(self, key:str) -> bool: return key in self._bindings

	def get(self, name:Token):
		frame = self
		while frame is not None:
			try: return frame._bindings[name.text]
			except KeyError: frame = frame.static_link
		raise _undefined(name)

	def assign(self, name:Token, value):
		frame = self
		while frame is not None:
			if name.text in frame._bindings:
				frame._bindings[name.text] = value
				return
			frame = frame.static_link
		raise _undefined(name)

	def ancestor(self, distance:int) -> "Frame":
		frame = self
		for _ in range(distance):
			frame = frame.static_link
		return frame

	def get_at(self, distance:int, name:Token):
		try: return self.ancestor(distance)._bindings[name.text]
		except KeyError: raise _undefined(name)

	def assign_at(self, distance:int, name:Token, value):
		bindings = self.ancestor(distance)._bindings
		if name.text not in bindings: raise _undefined(name)
		bindings[name.text] = value

def _undefined(name:Token):
	return UndefinedVariable(name, "Undefined variable '%s'." % name.text)

class RootFrame(Frame):
	""" Where the globals and native functions live. It lasts as long as the program runs. """
	def __init__(self):
		self._bindings = {}
		self.static_link = None
	def __repr__(self): return "<root frame: %d bindings>" % len(self._bindings)

class Activation(Frame):
	""" One per block entered or function called. """
	def __init__(self, static_link:Frame):
		assert isinstance(static_link, Frame), static_link
		self._bindings = {}
		self.static_link = static_link
	def __repr__(self): return "<frame: %s>" % ", ".join(self._bindings)

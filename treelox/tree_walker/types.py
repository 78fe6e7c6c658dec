"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.

It also defines how a statement finishes: either normally (None) or with one
of the control-flow signals below. Signals are ordinary return values, not
exceptions, so nothing ever mistakes a `break` for an error. Errors, on the
other hand, are exceptions, and they abort the whole run.
"""

from abc import ABC
from typing import Optional, Sequence, Union
from ..diagnostics import Gripe

class LoxValue(ABC):
	""" Root for classes that implement specialized run-time data structures """
	pass

VALUE = Union[None, bool, float, str, LoxValue]
ARGS = Sequence[VALUE]

###############################################################################

class Signal:
	""" Non-local control flow; caught by the nearest enclosing loop or call. """
	pass

class Break(Signal):
	def __repr__(self): return "<break>"

class Continue(Signal):
	def __repr__(self): return "<continue>"

class Return(Signal):
	def __init__(self, value:VALUE):
		self.value = value
	def __repr__(self): return "<return %r>" % (self.value,)

BREAK = Break()
CONTINUE = Continue()

OUTCOME = Optional[Signal]

###############################################################################

class LoxRuntimeError(Gripe, RuntimeError):
	pass

class TypeMismatch(LoxRuntimeError):
	pass

class NotCallable(LoxRuntimeError):
	pass

class ArityMismatch(LoxRuntimeError):
	pass

class UndefinedVariable(LoxRuntimeError):
	pass

class NativeFailure(LoxRuntimeError):
	""" A native function refused its arguments; blamed on the call site. """
	pass

class StackOverflow(LoxRuntimeError):
	""" Calls nested deeper than the host stack allows. """
	pass

class Refusal(Exception):
	""" Native handlers raise this with a message; the evaluator turns it into a NativeFailure. """
	pass

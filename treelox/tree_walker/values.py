"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but callable things need more help.
"""
from abc import abstractmethod
from typing import Callable, Sequence
from .. import syntax
from ..ontology import Token
from ..stacking import Frame, Activation
from .types import LoxValue, VALUE, ARGS, Return

class Function(LoxValue):
	""" A run-time object that can be applied with arguments. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def call(self, interpreter, args: ARGS) -> VALUE:
		"""
		The caller has already checked the arity. Any run-time error
		propagates as an exception straight through this.
		"""
		pass

class Closure(Function):
	""" A callable value tied to its natal environment: the frame current where it was made. """
	_params: Sequence[Token]
	_body: Sequence[syntax.Statement]

	def __init__(self, static_link: Frame):
		self._static_link = static_link

	def arity(self) -> int: return len(self._params)

	def call(self, interpreter, args: ARGS) -> VALUE:
		frame = Activation(self._static_link)
		for param, arg in zip(self._params, args):
			frame.define(param.text, arg)
		outcome = interpreter.execute_body(self._body, frame)
		if isinstance(outcome, Return):
			return outcome.value
		assert outcome is None, outcome
		return None

class UserFunction(Closure):
	def __init__(self, dfn: syntax.FunDecl, static_link: Frame):
		super().__init__(static_link)
		self._dfn = dfn
		self._params, self._body = dfn.params, dfn.body

	def name(self): return self._dfn.name.text
	def __str__(self): return "<fn %s>" % self.name()

class AnonymousFunction(Closure):
	def __init__(self, form: syntax.LambdaForm, static_link: Frame):
		super().__init__(static_link)
		self._params, self._body = form.params, form.body

	def __str__(self): return "<fn>"

HANDLER = Callable[..., VALUE]

class Primitive(Function):
	"""
	A native function: no captured environment, just a fixed arity
	and a host-supplied handler which gets the interpreter and the arguments.
	"""
	def __init__(self, name:str, arity:int, handler:HANDLER):
		self._name, self._arity, self._handler = name, arity, handler

	def name(self): return self._name
	def arity(self) -> int: return self._arity

	def call(self, interpreter, args: ARGS) -> VALUE:
		return self._handler(interpreter, *args)

	def __str__(self): return "<native fn %s>" % self._name

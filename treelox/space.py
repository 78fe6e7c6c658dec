"""
The resolver's notion of nested scopes: a stack of layers, innermost last.
Each name in a layer is either declared (reserved, but not yet usable) or defined.

Global scope is not tracked at all. With the stack empty, declaring and defining
are no-ops, because global bindings get looked up by name at run-time.
"""
from typing import Optional

class AlreadyExists(KeyError): pass

class Layer:
	""" Lightly enhanced dictionary: It does not like duplicate keys. """
	_defined: dict[str, bool]

	def __init__(self):
		self._defined = {}

	def __contains__(self, key: str) -> bool:
		return key in self._defined

	def declare(self, key: str):
		if key in self._defined:
			raise AlreadyExists(key)
		self._defined[key] = False

	def define(self, key: str):
		self._defined[key] = True

	def is_defined(self, key: str) -> bool:
		return self._defined.get(key, False)

	def is_pending(self, key: str) -> bool:
		""" Declared, but not yet defined """
		return self._defined.get(key) is False


class ScopeTracker:
	_layers: list[Layer]

	def __init__(self):
		self._layers = []

	def __len__(self): return len(self._layers)

	def is_global(self) -> bool: return not self._layers

	def push(self): self._layers.append(Layer())

	def pop(self): self._layers.pop()

	def declare(self, key: str):
		if self._layers: self._layers[-1].declare(key)

	def define(self, key: str):
		if self._layers: self._layers[-1].define(key)

	def is_declared_not_defined(self, key: str) -> bool:
		return bool(self._layers) and self._layers[-1].is_pending(key)

	def distance(self, key: str) -> Optional[int]:
		"""
		How many layers out from the innermost is the nearest one where this name is defined?
		None means it's not defined in any tracked layer, so it must be global.
		"""
		for hops, layer in enumerate(reversed(self._layers)):
			if layer.is_defined(key):
				return hops

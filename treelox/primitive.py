"""
The native functions: the only host services a program can see.
Each is a name, a fixed arity, and a handler that gets the interpreter
followed by the (already evaluated) arguments.
"""
import sys, time
from .stacking import Frame
from .tree_walker.evaluator import stringify
from .tree_walker.types import Refusal
from .tree_walker.values import Primitive

def _clock(interpreter):
	""" Milliseconds since the epoch """
	return float(time.time_ns() // 1_000_000)

def _prompt(interpreter, message):
	print(stringify(message))
	sys.stdout.flush()
	line = sys.stdin.readline()
	return line.rstrip("\r\n")

def _number(interpreter, value):
	text = stringify(value)
	if text == text.strip() and "_" not in text:
		try: return float(text)
		except ValueError: pass
	raise Refusal("Could not convert '%s' to a number." % text)

NATIVES = (
	Primitive("clock", 0, _clock),
	Primitive("prompt", 1, _prompt),
	Primitive("number", 1, _number),
)

def install(frame:Frame):
	for native in NATIVES:
		frame.define(native.name(), native)

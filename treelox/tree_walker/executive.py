"""
This is the overall control for the run-time:
prepare the root frame, then resolve and run whatever text comes along.
"""
import sys
from pathlib import Path
from typing import Optional
from .. import syntax, primitive
from ..diagnostics import Report
from ..front_end import parse_text
from ..resolution import HopCountTable, Yuck, resolve, resolve_program
from ..stacking import RootFrame
from .evaluator import Interpreter
from .types import LoxRuntimeError

# Each call in the guest program costs about a dozen host frames.
RECURSION_LIMIT = 10_000

def prepare_root() -> RootFrame:
	if sys.getrecursionlimit() < RECURSION_LIMIT:
		sys.setrecursionlimit(RECURSION_LIMIT)
	root = RootFrame()
	primitive.install(root)
	return root

def run_program(program:syntax.Program, hops:Optional[HopCountTable]=None, root:Optional[RootFrame]=None) -> Interpreter:
	"""
	Run an already-parsed program. If no hop-count table comes along,
	resolve the program here. Errors propagate as exceptions.
	"""
	if hops is None: hops = resolve(program)
	interpreter = Interpreter(root or prepare_root(), hops)
	interpreter.interpret(program)
	return interpreter

def _echo(program:syntax.Program) -> syntax.Program:
	# A lone expression at the prompt means "show me".
	if len(program) == 1 and isinstance(program[0], syntax.ExprStmt):
		return [syntax.PrintStmt(None, program[0].expr)]
	return program

def run_text(text:str, report:Report, interpreter:Optional[Interpreter]=None, *, path:Optional[Path]=None, echo=False) -> Interpreter:
	"""
	Parse, resolve, and run some text, telling the report about any problem.
	On failure, raises Yuck with the name of the phase that failed.
	Pass the same interpreter again to keep the globals from last time.
	"""
	program = parse_text(text, report, path)
	if program is None: raise Yuck("parse")
	if echo: program = _echo(program)
	hops = resolve_program(program, report)
	if interpreter is None: interpreter = Interpreter(prepare_root())
	interpreter.absorb(hops)
	try: interpreter.interpret(program)
	except LoxRuntimeError as ex:
		report.runtime_error(ex)
		raise Yuck("runtime")
	return interpreter

"""
The tree-walking evaluator proper.

Expressions evaluate to values. Statements execute to an outcome: None for
normal completion, or else a control-flow signal that the nearest loop or
call boundary either consumes or passes along. Run-time errors are exceptions.

Variable access leans on the resolver's hop-count table: a node with an entry
goes straight to the frame that many static links out. A node without one is
global, and gets looked up by name in the root frame.
"""
import math
import operator
from typing import Sequence
from boozetools.support.foundation import Visitor
from .. import syntax
from ..ontology import Token
from ..resolution import HopCountTable
from ..stacking import Frame, RootFrame, Activation
from .types import (
	VALUE, OUTCOME, BREAK, CONTINUE, Break, Return,
	TypeMismatch, NotCallable, ArityMismatch, NativeFailure, StackOverflow, Refusal,
)
from .values import Function, UserFunction, AnonymousFunction

###############################################################################

def is_truthy(value:VALUE) -> bool:
	""" Only nil and false are falsy. Zero and the empty string are truthy. """
	if value is None: return False
	if isinstance(value, bool): return value
	return True

def is_equal(a:VALUE, b:VALUE) -> bool:
	""" No coercion: in particular, true is not equal to 1. """
	if a is None or b is None: return a is b
	if type(a) is not type(b): return False
	return a == b

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if isinstance(value, bool): return "true" if value else "false"
	if isinstance(value, float):
		text = repr(value)
		return text[:-2] if text.endswith(".0") else text
	return str(value)

def _divide(a:float, b:float) -> float:
	# IEEE-754 semantics: infinities and NaN, never an exception.
	try: return a / b
	except ZeroDivisionError:
		if a == 0 or math.isnan(a): return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)

NUMERIC_BINARY = {
	"-" : operator.sub,
	"*" : operator.mul,
	"/" : _divide,
	">" : operator.gt,
	">=": operator.ge,
	"<" : operator.lt,
	"<=": operator.le,
}

def _is_number(x:VALUE) -> bool: return isinstance(x, float)

def _add(op:Token, a:VALUE, b:VALUE) -> VALUE:
	if _is_number(a) and _is_number(b): return a + b
	if isinstance(a, str) and (isinstance(b, str) or _is_number(b)): return a + stringify(b)
	if _is_number(a) and isinstance(b, str): return stringify(a) + b
	raise TypeMismatch(op, "Operands must be two numbers or two strings.")

###############################################################################

class Interpreter(Visitor):
	"""
	One of these runs any number of programs against the same root frame,
	which is how the REPL keeps its globals from one line to the next.
	Hop-count tables from each resolution get absorbed before running,
	because closures made by earlier programs still need theirs.
	"""
	root: RootFrame
	hops: HopCountTable

	def __init__(self, root:RootFrame, hops:HopCountTable=None):
		self.root = root
		self.hops = {}
		if hops: self.absorb(hops)

	def absorb(self, hops:HopCountTable):
		self.hops.update(hops)

	def interpret(self, program:syntax.Program):
		""" Execute each top-level statement in order; the first error ends the run. """
		for stmt in program:
			outcome = self.execute(stmt, self.root)
			assert outcome is None, outcome  # The parser rules out stray signals.

	def execute(self, stmt:syntax.Statement, frame:Frame) -> OUTCOME:
		return self.visit(stmt, frame)

	def evaluate(self, expr:syntax.Expression, frame:Frame) -> VALUE:
		return self.visit(expr, frame)

	def execute_body(self, statements:Sequence[syntax.Statement], frame:Frame) -> OUTCOME:
		for stmt in statements:
			outcome = self.visit(stmt, frame)
			if outcome is not None:
				return outcome

	def _number(self, op:Token, value:VALUE) -> float:
		if _is_number(value): return value
		raise TypeMismatch(op, "Operand must be a number.")

	###########################################################################

	def visit_Literal(self, expr:syntax.Literal, frame:Frame):
		return expr.value

	def visit_Grouping(self, expr:syntax.Grouping, frame:Frame):
		return self.evaluate(expr.expr, frame)

	def visit_Lookup(self, expr:syntax.Lookup, frame:Frame):
		try: hops = self.hops[expr]
		except KeyError: return self.root.get(expr.name)
		return frame.get_at(hops, expr.name)

	def visit_Assign(self, expr:syntax.Assign, frame:Frame):
		value = self.evaluate(expr.value, frame)
		try: hops = self.hops[expr]
		except KeyError: self.root.assign(expr.name, value)
		else: frame.assign_at(hops, expr.name, value)
		return value

	def visit_UnaryExp(self, expr:syntax.UnaryExp, frame:Frame):
		arg = self.evaluate(expr.arg, frame)
		if expr.op.text == "-": return -self._number(expr.op, arg)
		assert expr.op.text == "!", expr.op
		return not is_truthy(arg)

	def visit_BinExp(self, expr:syntax.BinExp, frame:Frame):
		a = self.evaluate(expr.lhs, frame)
		b = self.evaluate(expr.rhs, frame)
		glyph = expr.op.text
		if glyph == "+": return _add(expr.op, a, b)
		if glyph == "==": return is_equal(a, b)
		if glyph == "!=": return not is_equal(a, b)
		if not (_is_number(a) and _is_number(b)):
			raise TypeMismatch(expr.op, "Operands must be numbers.")
		return NUMERIC_BINARY[glyph](a, b)

	def visit_ShortCutExp(self, expr:syntax.ShortCutExp, frame:Frame):
		lhs = self.evaluate(expr.lhs, frame)
		if expr.op.kind == "OR":
			if is_truthy(lhs): return lhs
		elif not is_truthy(lhs): return lhs
		return self.evaluate(expr.rhs, frame)

	def visit_Call(self, expr:syntax.Call, frame:Frame):
		callee = self.evaluate(expr.fn_exp, frame)
		if not isinstance(callee, Function):
			raise NotCallable(expr.paren, "Can only call functions.")
		args = [self.evaluate(a, frame) for a in expr.args]
		if len(args) != callee.arity():
			pattern = "Expected %d argument(s) but got %d."
			raise ArityMismatch(expr.paren, pattern % (callee.arity(), len(args)))
		try: return callee.call(self, args)
		except Refusal as ex:
			raise NativeFailure(expr.paren, str(ex)) from None
		except RecursionError:
			raise StackOverflow(expr.paren, "Stack overflow.") from None

	def visit_LambdaForm(self, expr:syntax.LambdaForm, frame:Frame):
		return AnonymousFunction(expr, frame)

	###########################################################################

	def visit_ExprStmt(self, stmt:syntax.ExprStmt, frame:Frame):
		self.evaluate(stmt.expr, frame)

	def visit_PrintStmt(self, stmt:syntax.PrintStmt, frame:Frame):
		print(stringify(self.evaluate(stmt.expr, frame)))

	def visit_VarDecl(self, stmt:syntax.VarDecl, frame:Frame):
		value = None if stmt.initializer is None else self.evaluate(stmt.initializer, frame)
		frame.define(stmt.name.text, value)

	def visit_Block(self, stmt:syntax.Block, frame:Frame):
		return self.execute_body(stmt.statements, Activation(frame))

	def visit_IfStmt(self, stmt:syntax.IfStmt, frame:Frame):
		if is_truthy(self.evaluate(stmt.if_part, frame)):
			return self.execute(stmt.then_part, frame)
		elif stmt.else_part is not None:
			return self.execute(stmt.else_part, frame)

	def visit_WhileStmt(self, stmt:syntax.WhileStmt, frame:Frame):
		while is_truthy(self.evaluate(stmt.condition, frame)):
			outcome = self.execute(stmt.body, frame)
			if isinstance(outcome, Break): break
			if isinstance(outcome, Return): return outcome
			if stmt.increment is not None:
				self.evaluate(stmt.increment, frame)

	def visit_BreakStmt(self, stmt:syntax.BreakStmt, frame:Frame):
		return BREAK

	def visit_ContinueStmt(self, stmt:syntax.ContinueStmt, frame:Frame):
		return CONTINUE

	def visit_ReturnStmt(self, stmt:syntax.ReturnStmt, frame:Frame):
		value = None if stmt.value is None else self.evaluate(stmt.value, frame)
		return Return(value)

	def visit_FunDecl(self, stmt:syntax.FunDecl, frame:Frame):
		frame.define(stmt.name.text, UserFunction(stmt, frame))

"""
All the scope resolution stuff goes here.

One top-down walk over the syntax tree works out, for every local variable reference
and assignment, how many scopes out its binding lives. The answer goes in a side-table
keyed by the identity of the node; the tree itself is not touched. Anything absent
from the table is presumed global, to be looked up by name at run-time.

The first static error ends the walk. A program that fails here never runs.
"""
from typing import Optional, Iterable
from boozetools.parsing.interface import SemanticError
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Gripe, Report
from .ontology import Token
from .space import ScopeTracker, AlreadyExists

HopCountTable = dict[syntax.Expression, int]

class Yuck(Exception):
	"""
	The first argument will be the name of the pass fraught with error.
	The end-user might not care about this, but it's handy for testing.
	"""
	pass

class ResolutionError(Gripe, SemanticError):
	def where(self): return " at '%s'" % self.token.text

class DuplicateDeclaration(ResolutionError):
	pass

class SelfReferencingInitializer(ResolutionError):
	pass

def _bare(expr:Optional[syntax.Expression]) -> Optional[syntax.Expression]:
	while isinstance(expr, syntax.Grouping): expr = expr.expr
	return expr

class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	"""

	def tour(self, items:Iterable):
		for i in items:
			self.visit(i)

	def visit_Literal(self, expr: syntax.Literal): pass
	def visit_Lookup(self, expr: syntax.Lookup): pass
	def visit_Assign(self, expr: syntax.Assign): self.visit(expr.value)
	def visit_UnaryExp(self, expr: syntax.UnaryExp): self.visit(expr.arg)
	def visit_Grouping(self, expr: syntax.Grouping): self.visit(expr.expr)

	def visit_BinExp(self, expr: syntax.BinExp):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_ShortCutExp(self, expr: syntax.ShortCutExp):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_Call(self, expr: syntax.Call):
		self.visit(expr.fn_exp)
		self.tour(expr.args)

	def visit_LambdaForm(self, expr: syntax.LambdaForm): self.tour(expr.body)

	def visit_ExprStmt(self, stmt: syntax.ExprStmt): self.visit(stmt.expr)
	def visit_PrintStmt(self, stmt: syntax.PrintStmt): self.visit(stmt.expr)
	def visit_Block(self, stmt: syntax.Block): self.tour(stmt.statements)
	def visit_BreakStmt(self, stmt: syntax.BreakStmt): pass
	def visit_ContinueStmt(self, stmt: syntax.ContinueStmt): pass
	def visit_FunDecl(self, stmt: syntax.FunDecl): self.tour(stmt.body)

	def visit_VarDecl(self, stmt: syntax.VarDecl):
		if stmt.initializer is not None:
			self.visit(stmt.initializer)

	def visit_IfStmt(self, stmt: syntax.IfStmt):
		self.visit(stmt.if_part)
		self.visit(stmt.then_part)
		if stmt.else_part is not None:
			self.visit(stmt.else_part)

	def visit_WhileStmt(self, stmt: syntax.WhileStmt):
		self.visit(stmt.condition)
		if stmt.increment is not None:
			self.visit(stmt.increment)
		self.visit(stmt.body)

	def visit_ReturnStmt(self, stmt: syntax.ReturnStmt):
		if stmt.value is not None:
			self.visit(stmt.value)

class Resolver(TopDown):
	"""
	Walks the tree once, keeping a ScopeTracker in step with the block structure,
	and fills in the hop-count table for each variable reference and assignment.

	Only the scope-sensitive parts of the walk are here; TopDown does the rest.
	"""
	hops: HopCountTable
	_scopes: ScopeTracker
	_pending: Optional[syntax.Expression]  # The bare initializer of the declaration in progress

	def __init__(self):
		self.hops = {}
		self._scopes = ScopeTracker()
		self._pending = None

	def resolve(self, program:syntax.Program) -> HopCountTable:
		self.tour(program)
		return self.hops

	def _declare(self, name:Token):
		try: self._scopes.declare(name.text)
		except AlreadyExists:
			raise DuplicateDeclaration(name, "Already a variable with this name in this scope.")

	def _define(self, name:Token):
		self._scopes.define(name.text)

	def _resolve_local(self, expr:syntax.Expression, name:Token):
		hops = self._scopes.distance(name.text)
		if hops is not None:
			self.hops[expr] = hops

	def _check_pending(self, expr:syntax.Expression, name:Token):
		if expr is self._pending and self._scopes.is_declared_not_defined(name.text):
			raise SelfReferencingInitializer(name, "Can't read local variable in its own initializer.")

	def _resolve_function(self, params, body):
		self._scopes.push()
		try:
			for p in params:
				self._declare(p)
				self._define(p)
			self.tour(body)
		finally:
			self._scopes.pop()

	def visit_Lookup(self, expr: syntax.Lookup):
		self._check_pending(expr, expr.name)
		self._resolve_local(expr, expr.name)

	def visit_Assign(self, expr: syntax.Assign):
		self.visit(expr.value)
		self._check_pending(expr, expr.name)
		self._resolve_local(expr, expr.name)

	def visit_LambdaForm(self, expr: syntax.LambdaForm):
		self._resolve_function(expr.params, expr.body)

	def visit_Block(self, stmt: syntax.Block):
		self._scopes.push()
		try: self.tour(stmt.statements)
		finally: self._scopes.pop()

	def visit_VarDecl(self, stmt: syntax.VarDecl):
		self._declare(stmt.name)
		if stmt.initializer is not None:
			outer, self._pending = self._pending, _bare(stmt.initializer)
			try: self.visit(stmt.initializer)
			finally: self._pending = outer
		self._define(stmt.name)

	def visit_FunDecl(self, stmt: syntax.FunDecl):
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt.params, stmt.body)

def resolve(program:syntax.Program) -> HopCountTable:
	""" Raises a ResolutionError at the first problem. """
	return Resolver().resolve(program)

def resolve_program(program:syntax.Program, report:Report) -> HopCountTable:
	try: hops = resolve(program)
	except ResolutionError as ex:
		report.resolution_error(ex)
		raise Yuck("resolve")
	report.info("Resolved %d local reference(s)." % len(hops))
	return hops

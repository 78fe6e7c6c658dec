"""
Render syntax trees as parenthesized prefix notation, mostly for debugging the parser.
Desugared `for` loops come out as the `while` they became.
"""
from boozetools.support.foundation import Visitor
from . import syntax
from .tree_walker.evaluator import stringify

class TreePrinter(Visitor):

	def render(self, node) -> str:
		return self.visit(node)

	def _paren(self, name:str, *parts) -> str:
		return "(%s)" % " ".join([name, *(self.visit(p) for p in parts)])

	def _params(self, params) -> str:
		return "(%s)" % " ".join(p.text for p in params)

	def visit_Literal(self, expr:syntax.Literal):
		if isinstance(expr.value, str): return '"%s"' % expr.value
		return stringify(expr.value)

	def visit_Lookup(self, expr:syntax.Lookup): return expr.name.text
	def visit_Assign(self, expr:syntax.Assign): return "(= %s %s)" % (expr.name.text, self.visit(expr.value))
	def visit_UnaryExp(self, expr:syntax.UnaryExp): return self._paren(expr.op.text, expr.arg)
	def visit_BinExp(self, expr:syntax.BinExp): return self._paren(expr.op.text, expr.lhs, expr.rhs)
	def visit_ShortCutExp(self, expr:syntax.ShortCutExp): return self._paren(expr.op.text, expr.lhs, expr.rhs)
	def visit_Grouping(self, expr:syntax.Grouping): return self._paren("group", expr.expr)
	def visit_Call(self, expr:syntax.Call): return self._paren("call", expr.fn_exp, *expr.args)

	def visit_LambdaForm(self, expr:syntax.LambdaForm):
		return " ".join(["(fun", self._params(expr.params), *map(self.visit, expr.body)])+")"

	def visit_ExprStmt(self, stmt:syntax.ExprStmt): return self._paren(";", stmt.expr)
	def visit_PrintStmt(self, stmt:syntax.PrintStmt): return self._paren("print", stmt.expr)
	def visit_Block(self, stmt:syntax.Block): return self._paren("block", *stmt.statements)
	def visit_BreakStmt(self, stmt:syntax.BreakStmt): return "(break)"
	def visit_ContinueStmt(self, stmt:syntax.ContinueStmt): return "(continue)"

	def visit_VarDecl(self, stmt:syntax.VarDecl):
		if stmt.initializer is None: return "(var %s)" % stmt.name.text
		return "(var %s %s)" % (stmt.name.text, self.visit(stmt.initializer))

	def visit_IfStmt(self, stmt:syntax.IfStmt):
		parts = [stmt.if_part, stmt.then_part]
		if stmt.else_part is not None: parts.append(stmt.else_part)
		return self._paren("if", *parts)

	def visit_WhileStmt(self, stmt:syntax.WhileStmt):
		parts = [stmt.condition, stmt.body]
		if stmt.increment is not None: parts.append(stmt.increment)
		return self._paren("while", *parts)

	def visit_ReturnStmt(self, stmt:syntax.ReturnStmt):
		if stmt.value is None: return "(return)"
		return self._paren("return", stmt.value)

	def visit_FunDecl(self, stmt:syntax.FunDecl):
		return " ".join(["(fun", stmt.name.text, self._params(stmt.params), *map(self.visit, stmt.body)])+")"

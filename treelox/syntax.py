"""
The set of parse-nodes in simple form.
The parser calls these constructors with subordinate semantic-values as it goes.

Later passes key their own side-tables off the identity of these nodes,
so nothing here defines __eq__ or __hash__, and nothing after the parser
is supposed to change a node once it's built.
"""
from typing import Optional, Any, Sequence
from .ontology import Token

class Expression:
	pass

class Statement:
	pass

Program = list[Statement]

###############################################################################
#
# Expressions
#

class Literal(Expression):
	value: Any  # None, bool, float, or str
	def __init__(self, value):
		assert value is None or isinstance(value, (bool, float, str)), type(value)
		self.value = value
	def __repr__(self): return "<lit:%r>" % self.value

class Lookup(Expression):
	def __init__(self, name:Token): self.name = name
	def __repr__(self): return "<ref:%s>" % self.name.text

class Assign(Expression):
	def __init__(self, name:Token, value:Expression):
		self.name, self.value = name, value
	def __repr__(self): return "<%s = %r>" % (self.name.text, self.value)

class UnaryExp(Expression):
	def __init__(self, op:Token, arg:Expression):
		self.op, self.arg = op, arg

class BinExp(Expression):
	def __init__(self, lhs:Expression, op:Token, rhs:Expression):
		self.lhs, self.op, self.rhs = lhs, op, rhs

class ShortCutExp(Expression):
	""" The logical connectives: only evaluate the right side if the left doesn't settle it. """
	def __init__(self, lhs:Expression, op:Token, rhs:Expression):
		self.lhs, self.op, self.rhs = lhs, op, rhs

class Grouping(Expression):
	def __init__(self, expr:Expression): self.expr = expr

class Call(Expression):
	def __init__(self, fn_exp:Expression, paren:Token, args:Sequence[Expression]):
		self.fn_exp, self.paren, self.args = fn_exp, paren, tuple(args)

class LambdaForm(Expression):
	""" An anonymous function; otherwise just like a function declaration. """
	def __init__(self, keyword:Token, params:Sequence[Token], body:Sequence[Statement]):
		self.keyword, self.params, self.body = keyword, tuple(params), tuple(body)

###############################################################################
#
# Statements
#

class ExprStmt(Statement):
	def __init__(self, expr:Expression): self.expr = expr

class PrintStmt(Statement):
	def __init__(self, keyword:Token, expr:Expression):
		self.keyword, self.expr = keyword, expr

class VarDecl(Statement):
	def __init__(self, name:Token, initializer:Optional[Expression]):
		self.name, self.initializer = name, initializer
	def __repr__(self): return "{var %s}" % self.name.text

class Block(Statement):
	def __init__(self, statements:Sequence[Statement]): self.statements = tuple(statements)

class IfStmt(Statement):
	def __init__(self, if_part:Expression, then_part:Statement, else_part:Optional[Statement]):
		self.if_part, self.then_part, self.else_part = if_part, then_part, else_part

class WhileStmt(Statement):
	"""
	The parser turns a `for` loop into one of these, perhaps inside a block.
	Only a `for` loop ever has an increment: it runs after each pass
	through the body, whether that pass finished normally or by `continue`.
	"""
	def __init__(self, condition:Expression, body:Statement, increment:Optional[Expression]=None):
		self.condition, self.body, self.increment = condition, body, increment

class BreakStmt(Statement):
	def __init__(self, keyword:Token): self.keyword = keyword

class ContinueStmt(Statement):
	def __init__(self, keyword:Token): self.keyword = keyword

class ReturnStmt(Statement):
	def __init__(self, keyword:Token, value:Optional[Expression]):
		self.keyword, self.value = keyword, value

class FunDecl(Statement):
	def __init__(self, name:Token, params:Sequence[Token], body:Sequence[Statement]):
		self.name, self.params, self.body = name, tuple(params), tuple(body)
	def __repr__(self):
		return "{fun|%s(%s)}" % (self.name.text, ", ".join(p.text for p in self.params))

EXPRESSIONS = (Literal, Lookup, Assign, UnaryExp, BinExp, ShortCutExp, Grouping, Call, LambdaForm)
STATEMENTS = (ExprStmt, PrintStmt, VarDecl, Block, IfStmt, WhileStmt, BreakStmt, ContinueStmt, ReturnStmt, FunDecl)

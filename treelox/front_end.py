"""
Turn text into a list of statements, or else explain why not.

The scanner is a booze-tools miniscan definition: each pattern has a `scan_*` action
that turns a match into a token (or into nothing, for blanks and comments).
The parser is plain recursive descent, one method per level of precedence.
Neither one knows anything about scope; that's for the resolver.
"""
import sys
from pathlib import Path
from typing import Optional
from boozetools.parsing.interface import ParseError
from boozetools.scanning.engine import IterableScanner
from boozetools.scanning.miniscan import Definition

from . import syntax
from .diagnostics import Gripe, Report
from .ontology import Token, EOF

class LoxParseError(Gripe, ParseError):
	def where(self):
		if self.token.kind == EOF: return " at end"
		return " at '%s'" % self.token.text

class LoxScanError(LoxParseError):
	def where(self): return ""

RESERVED = frozenset("""
	and class else false fun for if nil or print return super this true var while break continue
""".split())

MAX_ARGS = 255

LEX = Definition("Lox")
LEX.ignore(r'[\h\r]+')
LEX.ignore(r'\/\/.*')

@LEX.on(r'\n')
def scan_newline(yy:"Scanner"): yy.line += 1

@LEX.on(r'\d+(\.\d+)?')
def scan_number(yy:"Scanner"): yy.emit("number", float(yy.match()))

@LEX.on(r'"[^"]*"')
def scan_string(yy:"Scanner"):
	text = yy.match()
	yy.emit("string", text[1:-1])
	yy.line += text.count("\n")

@LEX.on(r'"[^"]*')
def scan_unterminated(yy:"Scanner"):
	raise LoxScanError(yy.emit("string"), "Unterminated string.")

@LEX.on(r'[\l_]\w*')
def scan_word(yy:"Scanner"):
	word = sys.intern(yy.match())
	if word in RESERVED: yy.emit(word.upper())
	else: yy.emit("name")

@LEX.on(r'[!=<>]=?|[-+(){},.;/*]')
def scan_punctuation(yy:"Scanner"): yy.emit(sys.intern(yy.match()))

@LEX.on(r'{ANY}')
def scan_stray(yy:"Scanner"):
	raise LoxScanError(yy.emit("stray"), "Unexpected character.")

class Scanner(IterableScanner):
	"""
	The `scan_*` actions above find the line count and the Token factory here.
	Tokens carry their line number and the slice of source they came from.
	"""
	def __init__(self, text:str):
		super().__init__(text, LEX.get_dfa(), LEX, start=None)
		self._size = len(text)
		self.line = 1

	def emit(self, kind:str, literal=None) -> Token:
		token = Token(kind, self.match(), literal, self.line, self.slice())
		self.token(kind, token)
		return token

	def tokens(self) -> list[Token]:
		tokens = [token for kind, token in self]
		tokens.append(Token(EOF, "", None, self.line, slice(self._size, self._size)))
		return tokens

class Parser:
	"""
	Recursive descent over the token list. The grammar, from the bottom up:

		program     -> declaration* EOF
		declaration -> funDecl | varDecl | statement
		statement   -> exprStmt | forStmt | ifStmt | printStmt | returnStmt
		             | whileStmt | breakStmt | continueStmt | block
		expression  -> assignment
		assignment  -> IDENTIFIER "=" assignment | logic_or
		logic_or    -> logic_and ( "or" logic_and )*
		logic_and   -> equality ( "and" equality )*
		equality    -> comparison ( ( "!=" | "==" ) comparison )*
		comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
		term        -> factor ( ( "-" | "+" ) factor )*
		factor      -> unary ( ( "/" | "*" ) unary )*
		unary       -> ( "!" | "-" ) unary | call
		call        -> primary ( "(" arguments? ")" )*
		primary     -> NUMBER | STRING | "true" | "false" | "nil"
		             | "(" expression ")" | IDENTIFIER | "fun" "(" parameters? ")" block

	It also keeps track of how deep it is in loops and functions,
	so that stray `break`, `continue`, and `return` never reach the evaluator.
	"""
	def __init__(self, tokens:list[Token]):
		self._tokens = tokens
		self._current = 0
		self._loop_depth = 0
		self._function_depth = 0

	def parse(self) -> syntax.Program:
		program = []
		while not self._at_end():
			program.append(self.declaration())
		return program

	# Token-stream plumbing

	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]
	def _at_end(self) -> bool: return self._peek().kind == EOF
	def _check(self, kind:str) -> bool: return not self._at_end() and self._peek().kind == kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _match(self, *kinds:str) -> bool:
		for kind in kinds:
			if self._check(kind):
				self._advance()
				return True
		return False

	def _expect(self, kind:str, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise LoxParseError(self._peek(), message)

	# Declarations and statements

	def declaration(self) -> syntax.Statement:
		if self._check("FUN") and self._tokens[self._current+1].kind == "name":
			self._advance()
			return self.fun_declaration()
		if self._match("VAR"): return self.var_declaration()
		return self.statement()

	def fun_declaration(self) -> syntax.FunDecl:
		name = self._expect("name", "Expect function name.")
		params, body = self._function_rest("function name")
		return syntax.FunDecl(name, params, body)

	def _function_rest(self, after:str):
		self._expect("(", "Expect '(' after %s." % after)
		params = []
		if not self._check(")"):
			while True:
				if len(params) >= MAX_ARGS:
					raise LoxParseError(self._peek(), "Can't have more than %d parameters." % MAX_ARGS)
				params.append(self._expect("name", "Expect parameter name."))
				if not self._match(","): break
		self._expect(")", "Expect ')' after parameters.")
		self._expect("{", "Expect '{' before function body.")
		outer_loop_depth = self._loop_depth
		self._loop_depth = 0
		self._function_depth += 1
		try: body = self.block_body()
		finally:
			self._function_depth -= 1
			self._loop_depth = outer_loop_depth
		return params, body

	def var_declaration(self) -> syntax.VarDecl:
		name = self._expect("name", "Expect variable name.")
		initializer = self.expression() if self._match("=") else None
		self._expect(";", "Expect ';' after variable declaration.")
		return syntax.VarDecl(name, initializer)

	def statement(self) -> syntax.Statement:
		if self._match("FOR"): return self.for_statement()
		if self._match("IF"): return self.if_statement()
		if self._match("PRINT"): return self.print_statement()
		if self._match("RETURN"): return self.return_statement()
		if self._match("WHILE"): return self.while_statement()
		if self._match("BREAK"): return self.loop_exit(syntax.BreakStmt)
		if self._match("CONTINUE"): return self.loop_exit(syntax.ContinueStmt)
		if self._match("{"): return syntax.Block(self.block_body())
		return self.expression_statement()

	def for_statement(self) -> syntax.Statement:
		self._expect("(", "Expect '(' after 'for'.")
		if self._match(";"): initializer = None
		elif self._match("VAR"): initializer = self.var_declaration()
		else: initializer = self.expression_statement()

		if self._check(";"): condition = syntax.Literal(True)
		else: condition = self.expression()
		self._expect(";", "Expect ';' after loop condition.")

		increment = None if self._check(")") else self.expression()
		self._expect(")", "Expect ')' after for clauses.")

		loop = syntax.WhileStmt(condition, self.loop_body(), increment)
		if initializer is None: return loop
		return syntax.Block([initializer, loop])

	def if_statement(self) -> syntax.IfStmt:
		self._expect("(", "Expect '(' after 'if'.")
		condition = self.expression()
		self._expect(")", "Expect ')' after if condition.")
		then_part = self.statement()
		else_part = self.statement() if self._match("ELSE") else None
		return syntax.IfStmt(condition, then_part, else_part)

	def print_statement(self) -> syntax.PrintStmt:
		keyword = self._previous()
		value = self.expression()
		self._expect(";", "Expect ';' after value.")
		return syntax.PrintStmt(keyword, value)

	def return_statement(self) -> syntax.ReturnStmt:
		keyword = self._previous()
		if not self._function_depth:
			raise LoxParseError(keyword, "Can't return from top-level code.")
		value = None if self._check(";") else self.expression()
		self._expect(";", "Expect ';' after return value.")
		return syntax.ReturnStmt(keyword, value)

	def while_statement(self) -> syntax.WhileStmt:
		self._expect("(", "Expect '(' after 'while'.")
		condition = self.expression()
		self._expect(")", "Expect ')' after condition.")
		return syntax.WhileStmt(condition, self.loop_body())

	def loop_body(self) -> syntax.Statement:
		self._loop_depth += 1
		try: return self.statement()
		finally: self._loop_depth -= 1

	def loop_exit(self, ctor):
		keyword = self._previous()
		if not self._loop_depth:
			raise LoxParseError(keyword, "Can't use '%s' outside of a loop." % keyword.text)
		self._expect(";", "Expect ';' after '%s'." % keyword.text)
		return ctor(keyword)

	def block_body(self) -> list[syntax.Statement]:
		statements = []
		while not self._check("}") and not self._at_end():
			statements.append(self.declaration())
		self._expect("}", "Expect '}' after block.")
		return statements

	def expression_statement(self) -> syntax.ExprStmt:
		expr = self.expression()
		self._expect(";", "Expect ';' after expression.")
		return syntax.ExprStmt(expr)

	# Expressions

	def expression(self) -> syntax.Expression:
		return self.assignment()

	def assignment(self) -> syntax.Expression:
		expr = self.logic_or()
		if self._match("="):
			equals = self._previous()
			value = self.assignment()
			if isinstance(expr, syntax.Lookup):
				return syntax.Assign(expr.name, value)
			raise LoxParseError(equals, "Invalid assignment target.")
		return expr

	def _left_assoc(self, ctor, operand, *kinds):
		expr = operand()
		while self._match(*kinds):
			op = self._previous()
			expr = ctor(expr, op, operand())
		return expr

	def logic_or(self): return self._left_assoc(syntax.ShortCutExp, self.logic_and, "OR")
	def logic_and(self): return self._left_assoc(syntax.ShortCutExp, self.equality, "AND")
	def equality(self): return self._left_assoc(syntax.BinExp, self.comparison, "!=", "==")
	def comparison(self): return self._left_assoc(syntax.BinExp, self.term, ">", ">=", "<", "<=")
	def term(self): return self._left_assoc(syntax.BinExp, self.factor, "-", "+")
	def factor(self): return self._left_assoc(syntax.BinExp, self.unary, "/", "*")

	def unary(self) -> syntax.Expression:
		if self._match("!", "-"):
			op = self._previous()
			return syntax.UnaryExp(op, self.unary())
		return self.call()

	def call(self) -> syntax.Expression:
		expr = self.primary()
		while self._match("("):
			args = []
			if not self._check(")"):
				while True:
					if len(args) >= MAX_ARGS:
						raise LoxParseError(self._peek(), "Can't have more than %d arguments." % MAX_ARGS)
					args.append(self.expression())
					if not self._match(","): break
			paren = self._expect(")", "Expect ')' after arguments.")
			expr = syntax.Call(expr, paren, args)
		return expr

	def primary(self) -> syntax.Expression:
		if self._match("FALSE"): return syntax.Literal(False)
		if self._match("TRUE"): return syntax.Literal(True)
		if self._match("NIL"): return syntax.Literal(None)
		if self._match("number", "string"): return syntax.Literal(self._previous().literal)
		if self._match("name"): return syntax.Lookup(self._previous())
		if self._match("FUN"):
			keyword = self._previous()
			params, body = self._function_rest("'fun'")
			return syntax.LambdaForm(keyword, params, body)
		if self._match("("):
			expr = self.expression()
			self._expect(")", "Expect ')' after expression.")
			return syntax.Grouping(expr)
		raise LoxParseError(self._peek(), "Expect expression.")

def parse(text:str) -> syntax.Program:
	""" Raises LoxParseError at the first sign of trouble. """
	return Parser(Scanner(text).tokens()).parse()

def parse_text(text:str, report:Report, path:Optional[Path]=None) -> Optional[syntax.Program]:
	""" Submit text to the parser; complain to the report if that fails. """
	report.set_source(text, path)
	try: program = parse(text)
	except LoxParseError as ex:
		report.syntax_error(ex)
	else:
		report.info("Parsed %d top-level statement(s)." % len(program))
		return program

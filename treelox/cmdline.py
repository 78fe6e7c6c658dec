"""
This is a tree-walking interpreter for the Lox programming language.

For example:

    treelox program.lox

will run program.lox if possible, or else try to explain why not.

    treelox

with no program starts an interactive prompt.

    treelox -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

# Exit codes after sysexits.h
EX_DATAERR = 65
EX_SOFTWARE = 70
EX_IOERR = 74

parser = argparse.ArgumentParser(
	prog="treelox",
	description="Tree-walking interpreter for the Lox programming language.",
)
parser.add_argument("program", nargs="?", help="try examples/closures.lox for example. Omit for an interactive prompt.")
parser.add_argument('-c', "--check", action="store_true", help="Parse and resolve the program, but do not actually execute it.")
parser.add_argument('-t', "--tree", action="store_true", help="Print the syntax tree of each top-level statement instead of running.")
parser.add_argument('-v', "--verbose", action="count", help="Say more about what's going on (on stderr).")

def run(args) -> int:
	from .diagnostics import Report
	report = Report(verbose=args.verbose)
	if args.program is None:
		return repl(report)
	path = Path(args.program)
	try: text = path.read_text(encoding="utf-8")
	except OSError as ex:
		print("Could not read %s: %s" % (path, ex.strerror or ex), file=sys.stderr)
		return EX_IOERR
	if args.check or args.tree:
		return check(text, path, report, show_tree=args.tree)
	from .resolution import Yuck
	from .tree_walker.executive import run_text
	try: run_text(text, report, path=path)
	except Yuck as ex:
		report.complain_to_console()
		return EX_SOFTWARE if ex.args[0] == "runtime" else EX_DATAERR
	return 0

def check(text:str, path:Path, report, show_tree=False) -> int:
	from .front_end import parse_text
	from .resolution import Yuck, resolve_program
	program = parse_text(text, report, path)
	if program is None:
		report.complain_to_console()
		return EX_DATAERR
	if show_tree:
		from .printer import TreePrinter
		printer = TreePrinter()
		for stmt in program: print(printer.render(stmt))
	try: resolve_program(program, report)
	except Yuck:
		report.complain_to_console()
		return EX_DATAERR
	if not show_tree:
		print("Looks plausible to me.", file=sys.stderr)
	return 0

def repl(report) -> int:
	""" Globals persist from one line to the next. Errors get reported, and then life goes on. """
	from .resolution import Yuck
	from .tree_walker.evaluator import Interpreter
	from .tree_walker.executive import prepare_root, run_text
	interpreter = Interpreter(prepare_root())
	print("Lox REPL. Press Ctrl+D to exit.")
	while True:
		try: line = input("> ")
		except (EOFError, KeyboardInterrupt):
			print()
			return 0
		if not line.strip(): continue
		try: run_text(line, report, interpreter, echo=True)
		except Yuck: report.complain_to_console()
		report.reset()

def main():
	sys.exit(run(parser.parse_args()))

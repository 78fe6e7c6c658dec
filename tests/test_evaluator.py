import contextlib, io, math
import unittest
from unittest.mock import patch

from treelox.front_end import parse
from treelox.primitive import NATIVES
from treelox.resolution import resolve
from treelox.tree_walker import types
from treelox.tree_walker.evaluator import Interpreter, is_truthy, is_equal, stringify
from treelox.tree_walker.executive import run_program, prepare_root
from treelox.tree_walker.values import Primitive

def run(text):
	""" Run a program; return the lines it printed. """
	out = io.StringIO()
	with contextlib.redirect_stdout(out):
		run_program(parse(text))
	return out.getvalue().splitlines()

class ValueTests(unittest.TestCase):

	def test_truthiness(self):
		self.assertFalse(is_truthy(None))
		self.assertFalse(is_truthy(False))
		for value in [True, 0.0, "", "false", 1.0]:
			with self.subTest(value):
				self.assertTrue(is_truthy(value))

	def test_equality_does_not_coerce(self):
		self.assertTrue(is_equal(None, None))
		self.assertFalse(is_equal(None, False))
		self.assertFalse(is_equal(True, 1.0))
		self.assertFalse(is_equal(0.0, False))
		self.assertFalse(is_equal("1", 1.0))
		self.assertTrue(is_equal("a", "a"))
		self.assertTrue(is_equal(2.0, 2.0))

	def test_stringify(self):
		for value, text in [
			(None, "nil"),
			(True, "true"),
			(False, "false"),
			(3.0, "3"),
			(2.5, "2.5"),
			(-0.0, "-0"),
			(1e21, "1e+21"),
			(math.inf, "inf"),
			("plain", "plain"),
		]:
			with self.subTest(text):
				self.assertEqual(text, stringify(value))

class ExpressionTests(unittest.TestCase):

	def test_arithmetic(self):
		self.assertEqual(["7", "-1", "12", "2.5", "true", "false", "true"], run("""
			print 1 + 2 * 3;
			print 2 - 3;
			print (1 + 3) * 3;
			print 5 / 2;
			print 1 < 2;
			print 2 <= 1;
			print 3 >= 3;
		"""))

	def test_division_by_zero_follows_ieee(self):
		self.assertEqual(["inf", "-inf", "true"], run("""
			print 1 / 0;
			print -1 / 0;
			var n = 0 / 0;
			print n != n;
		"""))

	def test_concatenation(self):
		self.assertEqual(["a1", "2b", "ab", "x1.5"], run('print "a" + 1; print 2 + "b"; print "a" + "b"; print "x" + 1.5;'))

	def test_short_circuit_skips_the_right_side(self):
		self.assertEqual(["false", "true", "nil", "ok"], run("""
			fun boom() { print "boom"; return true; }
			print false and boom();
			print true or boom();
			print nil and boom();
			print nil or "ok";
		"""))

	def test_assignment_is_an_expression(self):
		self.assertEqual(["3", "3"], run("var a; var b; a = b = 3; print a; print b;"))

	def test_type_mismatches(self):
		for text, message in [
			("print 1 + true;", "line 1 Error: Operands must be two numbers or two strings."),
			("print nil + nil;", "line 1 Error: Operands must be two numbers or two strings."),
			('print "a" - "b";', "line 1 Error: Operands must be numbers."),
			('print "a" < "b";', "line 1 Error: Operands must be numbers."),
			("print -true;", "line 1 Error: Operand must be a number."),
		]:
			with self.subTest(text):
				with self.assertRaises(types.TypeMismatch) as cm:
					run(text)
				self.assertEqual(message, str(cm.exception))

	def test_undefined_variable(self):
		with self.assertRaises(types.UndefinedVariable) as cm:
			run("print 1;\nprint nope;")
		self.assertEqual("line 2 Error: Undefined variable 'nope'.", str(cm.exception))
		with self.assertRaises(types.UndefinedVariable):
			run("nope = 1;")

class StatementTests(unittest.TestCase):

	def test_shadowing_initializer_reads_outer(self):
		self.assertEqual(["2"], run("var a = 1; { var a = a + 1; print a; }"))

	def test_blocks_restore_the_outer_binding(self):
		self.assertEqual(["inner", "outer"], run('var a = "outer"; { var a = "inner"; print a; } print a;'))

	def test_uninitialized_variable_is_nil(self):
		self.assertEqual(["nil"], run("var a; print a;"))

	def test_if_else(self):
		self.assertEqual(["yes", "no", "zero is true"], run("""
			if (1 < 2) print "yes"; else print "no";
			if (nil) print "yes"; else print "no";
			if (0) print "zero is true";
		"""))

	def test_while_reevaluates_condition(self):
		self.assertEqual(["0", "1", "2"], run("var i = 0; while (i < 3) { print i; i = i + 1; }"))

	def test_for_loop(self):
		self.assertEqual(["0", "1", "2"], run("for (var i = 0; i < 3; i = i + 1) print i;"))

	def test_for_loop_variable_is_scoped_to_the_loop(self):
		with self.assertRaises(types.UndefinedVariable):
			run("for (var i = 0; i < 1; i = i + 1) {} print i;")

	def test_break_leaves_only_the_innermost_loop(self):
		self.assertEqual(["0", "10", "1", "11"], run("""
			for (var i = 0; i < 2; i = i + 1) {
				for (var j = 0; j < 5; j = j + 1) {
					if (j == 2) break;
					print i + 10 * j;
				}
			}
		"""))

	def test_continue_still_runs_the_increment(self):
		self.assertEqual(["0", "1", "3", "4"], run("""
			for (var i = 0; i < 5; i = i + 1) {
				if (i == 2) continue;
				print i;
			}
		"""))

	def test_continue_in_while(self):
		self.assertEqual(["1", "3"], run("""
			var i = 0;
			while (i < 3) {
				i = i + 1;
				if (i == 2) continue;
				print i;
			}
		"""))

	def test_signals_never_escape(self):
		interpreter = Interpreter(prepare_root())
		with contextlib.redirect_stdout(io.StringIO()):
			outcome = interpreter.execute(parse("while (true) { break; }")[0], interpreter.root)
		self.assertIsNone(outcome)

class FunctionTests(unittest.TestCase):

	def test_closure_counter(self):
		self.assertEqual(["1", "2"], run("""
			fun make() { var i = 0; fun inc() { i = i + 1; return i; } return inc; }
			var c = make();
			print c();
			print c();
		"""))

	def test_counters_are_independent(self):
		self.assertEqual(["1", "2", "1"], run("""
			fun make() { var i = 0; return fun () { i = i + 1; return i; }; }
			var a = make();
			var b = make();
			print a();
			print a();
			print b();
		"""))

	def test_closure_outlives_its_block(self):
		self.assertEqual(["kept"], run('var f; { var hidden = "kept"; fun g() { return hidden; } f = g; } print f();'))

	def test_closure_binding_is_static(self):
		self.assertEqual(["global", "global"], run("""
			var a = "global";
			{
				fun show() { print a; }
				show();
				var a = "block";
				show();
			}
		"""))

	def test_recursion(self):
		self.assertEqual(["120"], run("fun fact(n) { if (n <= 1) return 1; return n * fact(n - 1); } print fact(5);"))

	def test_local_recursion(self):
		self.assertEqual(["8"], run("{ fun fib(n) { if (n < 2) return n; return fib(n-1) + fib(n-2); } print fib(6); }"))

	def test_return_values(self):
		self.assertEqual(["nil", "nil", "3"], run("""
			fun nothing() {}
			fun bare() { return; }
			fun loop() { while (true) { for (var i = 0; ; i = i + 1) { if (i == 3) return i; } } }
			print nothing();
			print bare();
			print loop();
		"""))

	def test_return_skips_the_rest(self):
		self.assertEqual(["early"], run('fun f() { return "early"; print "late"; } print f();'))

	def test_arguments_bind_to_parameters(self):
		self.assertEqual(["3"], run("fun sub(a, b) { return a - b; } print sub(5, 2);"))

	def test_lambdas(self):
		self.assertEqual(["9", "<fn>"], run("""
			var square = fun (x) { return x * x; };
			print square(3);
			print square;
		"""))

	def test_function_rendering(self):
		self.assertEqual(["<fn f>", "<native fn clock>"], run("fun f() {} print f; print clock;"))

	def test_functions_compare_by_identity(self):
		self.assertEqual(["true", "false"], run("""
			fun make() { return fun () {}; }
			var f = make();
			var g = f;
			print f == g;
			print f == make();
		"""))

	def test_not_callable_before_evaluating_arguments(self):
		out = io.StringIO()
		with contextlib.redirect_stdout(out):
			with self.assertRaises(types.NotCallable) as cm:
				run_program(parse('fun noisy() { print "arg"; return 1; }\n"str"(noisy());'))
		self.assertEqual("line 2 Error: Can only call functions.", str(cm.exception))
		self.assertEqual("", out.getvalue())

	def test_arity_mismatch_before_the_body_runs(self):
		out = io.StringIO()
		with contextlib.redirect_stdout(out):
			with self.assertRaises(types.ArityMismatch) as cm:
				run_program(parse('fun f(a) { print "called"; } f(1, 2);'))
		self.assertEqual("line 1 Error: Expected 1 argument(s) but got 2.", str(cm.exception))
		self.assertEqual("", out.getvalue())

	def test_errors_propagate_through_calls(self):
		with self.assertRaises(types.TypeMismatch):
			run("fun f() { return -nil; } fun g() { return f(); } g();")

	def test_deep_recursion(self):
		self.assertEqual(["500"], run("fun f(n) { if (n <= 0) return 0; return 1 + f(n - 1); } print f(500);"))

	def test_runaway_recursion_is_a_runtime_error(self):
		with self.assertRaises(types.StackOverflow) as cm:
			run("fun f(n) {\n  return 1 + f(n + 1);\n}\nf(0);")
		self.assertEqual("line 2 Error: Stack overflow.", str(cm.exception))
		self.assertIsInstance(cm.exception, types.LoxRuntimeError)

class NativeTests(unittest.TestCase):

	def test_installed(self):
		root = prepare_root()
		for native in NATIVES:
			with self.subTest(native.name()):
				self.assertTrue(root.holds(native.name()))
		self.assertEqual(["clock", "number", "prompt"], sorted(n.name() for n in NATIVES))

	def test_clock(self):
		with patch("time.time_ns", lambda: 1_234_567_000_000):
			self.assertEqual(["1234567"], run("print clock();"))
		self.assertEqual(["true"], run("var t = clock(); print t <= clock();"))

	def test_number(self):
		self.assertEqual(["4.5", "7"], run('print number("3.5") + 1; print number(7);'))

	def test_number_refusal_is_a_runtime_error(self):
		with self.assertRaises(types.NativeFailure) as cm:
			run('print number("abc");')
		self.assertEqual("line 1 Error: Could not convert 'abc' to a number.", str(cm.exception))

	def test_number_is_strict_about_its_text(self):
		for text in [" 12 ", "12\n", "1_000", ""]:
			with self.subTest(text):
				with self.assertRaises(types.NativeFailure):
					run("print number(\"%s\");" % text)
		self.assertEqual(["-1.5", "1000", "inf"], run('print number("-1.5"); print number("1e3"); print number("inf");'))

	def test_prompt(self):
		with patch("sys.stdin", io.StringIO("42\nextra\n")):
			self.assertEqual(["how many?", "43"], run('print number(prompt("how many?")) + 1;'))

	def test_native_arity(self):
		with self.assertRaises(types.ArityMismatch):
			run("clock(1);")
		with self.assertRaises(types.ArityMismatch):
			run("number();")

	def test_host_supplied_native(self):
		root = prepare_root()
		seen = []
		root.define("shout", Primitive("shout", 1, lambda interpreter, x: seen.append(x)))
		with contextlib.redirect_stdout(io.StringIO()):
			run_program(parse('shout("hey");'), root=root)
		self.assertEqual(["hey"], seen)

class SessionTests(unittest.TestCase):
	""" One interpreter, several programs: the way the interactive prompt works. """

	def test_globals_and_closures_persist(self):
		interpreter = Interpreter(prepare_root())
		out = io.StringIO()
		with contextlib.redirect_stdout(out):
			for text in [
				"fun make() { var n = 0; return fun () { n = n + 1; return n; }; }",
				"var c = make();",
				"c();",
				"print c();",
			]:
				program = parse(text)
				interpreter.absorb(resolve(program))
				interpreter.interpret(program)
		self.assertEqual(["2"], out.getvalue().splitlines())

if __name__ == '__main__':
	unittest.main()

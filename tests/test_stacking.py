import unittest

from treelox.ontology import Token
from treelox.stacking import RootFrame, Activation
from treelox.tree_walker.types import UndefinedVariable

def name(text, line=1):
	return Token("name", text, None, line)

class EnvironmentChainTests(unittest.TestCase):

	def setUp(self):
		self.root = RootFrame()
		self.root.define("g", "global")
		self.middle = Activation(self.root)
		self.middle.define("m", 1.0)
		self.inner = Activation(self.middle)

	def test_lookup_by_name_walks_outward(self):
		self.assertEqual("global", self.inner.get(name("g")))
		self.assertEqual(1.0, self.inner.get(name("m")))

	def test_lookup_at_distance(self):
		self.assertEqual(1.0, self.inner.get_at(1, name("m")))
		self.assertEqual("global", self.inner.get_at(2, name("g")))
		self.assertIs(self.root, self.inner.ancestor(2))

	def test_assign_at_distance_changes_the_right_frame(self):
		self.inner.define("m", "shadow")
		self.inner.assign_at(1, name("m"), 2.0)
		self.assertEqual(2.0, self.middle.get(name("m")))
		self.assertEqual("shadow", self.inner.get(name("m")))

	def test_define_overwrites_in_place(self):
		self.root.define("g", "again")
		self.assertEqual("again", self.root.get(name("g")))

	def test_nil_is_a_value_not_an_absence(self):
		self.inner.define("n", None)
		self.assertTrue(self.inner.holds("n"))
		self.assertIsNone(self.inner.get_at(0, name("n")))

	def test_assign_by_name_needs_an_existing_binding(self):
		self.inner.assign(name("g"), "changed")
		self.assertEqual("changed", self.root.get(name("g")))
		self.assertFalse(self.inner.holds("g"))
		with self.assertRaises(UndefinedVariable):
			self.inner.assign(name("nope"), 1.0)

	def test_undefined(self):
		with self.assertRaises(UndefinedVariable) as cm:
			self.inner.get(name("nope", 7))
		self.assertEqual("line 7 Error: Undefined variable 'nope'.", str(cm.exception))
		with self.assertRaises(UndefinedVariable):
			self.inner.get_at(1, name("g"))
		with self.assertRaises(UndefinedVariable):
			self.inner.assign_at(0, name("m"), 3.0)

if __name__ == '__main__':
	unittest.main()
